from __future__ import annotations

from cinetracks.domain.session import AuthResult, FailureKind, StorageError, TokenGrant, User

TEN_MINUTES = 10 * 60 * 1000
NOW = 1_700_000_000_000


class FakeClock:
    def __init__(self, now: int = NOW) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now


class FakeNavigator:
    def __init__(self) -> None:
        self.history: list[str] = []

    def push(self, path: str) -> None:
        self.history.append(path)


class FakeGateway:
    def __init__(self) -> None:
        self.login_result: AuthResult[TokenGrant] = AuthResult.ok(TokenGrant("tok-1", TEN_MINUTES))
        self.register_result: AuthResult[TokenGrant] = AuthResult.ok(TokenGrant("tok-1", TEN_MINUTES))
        self.profile_result: AuthResult[User] = AuthResult.ok(User(username="alice", role="USER"))
        self.update_result: AuthResult[TokenGrant] = AuthResult.ok(
            TokenGrant("tok-2", TEN_MINUTES, username="alice")
        )
        self.delete_result: AuthResult[None] = AuthResult.ok()
        self.calls: list[tuple] = []

    async def login(self, username: str, password: str) -> AuthResult[TokenGrant]:
        self.calls.append(("login", username, password))
        return self.login_result

    async def register(self, username: str, password: str, role: str) -> AuthResult[TokenGrant]:
        self.calls.append(("register", username, password, role))
        return self.register_result

    async def fetch_user(self, token: str) -> AuthResult[User]:
        self.calls.append(("fetch_user", token))
        return self.profile_result

    async def update_user(
        self,
        token: str,
        *,
        username: str,
        email: str | None = None,
        password: str | None = None,
    ) -> AuthResult[TokenGrant]:
        self.calls.append(("update_user", token, username, email, password))
        return self.update_result

    async def delete_user(self, token: str) -> AuthResult[None]:
        self.calls.append(("delete_user", token))
        return self.delete_result

    def called(self, name: str) -> list[tuple]:
        return [c for c in self.calls if c[0] == name]


def rejected(message: str, status: int = 401) -> AuthResult:
    return AuthResult.fail(message, FailureKind.REJECTED, status)


class BrokenStore:
    """Store whose writes always fail."""

    def get(self, key: str) -> str | None:
        return None

    def set(self, key: str, value: str) -> None:
        raise StorageError("disk full", error_code="write_failed")

    def remove(self, key: str) -> None:
        return None
