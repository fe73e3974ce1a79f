# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Token lifecycle owner for a single CineTracks client.

The manager keeps the auth token, its absolute expiry and the resolved user
in memory, mirrors token and expiry into a persisted key/value store and
arms a one-shot timer that logs the client out shortly before the token
stops being accepted by the auth service.

Every mutating coroutine is serialized through one ``asyncio.Lock``. All
gateway failures are converted into ``AuthResult`` values and written to a
single error slot; nothing raises into callers.
"""

from __future__ import annotations

import asyncio
import time

from cinetracks.application.interfaces import AuthGateway, Navigator
from cinetracks.application.services.expiry_timer import ExpiryTimer
from cinetracks.domain.session import (
    EXPIRY_KEY,
    TOKEN_KEY,
    AuthResult,
    Clock,
    FailureKind,
    InvariantViolation,
    SessionSnapshot,
    SessionState,
    StorageError,
    StoredToken,
    TokenGrant,
    TokenStore,
    User,
)
from cinetracks.shared.logging import logger

DEFAULT_EXPIRY_MARGIN_MS = 5 * 60 * 1000
NOT_AUTHENTICATED = "User not authenticated"
STORAGE_FAILURE = "Unable to persist the session"
WRONG_PASSWORD = "Current password is incorrect"


def _system_clock() -> int:
    return int(time.time() * 1000)


class SessionManager:
    def __init__(
        self,
        gateway: AuthGateway,
        store: TokenStore,
        *,
        navigator: Navigator | None = None,
        clock: Clock | None = None,
        expiry_margin_ms: int = DEFAULT_EXPIRY_MARGIN_MS,
        landing_path: str = "/dashboard",
        login_path: str = "/login",
        name: str = "session",
    ) -> None:
        self._gateway = gateway
        self._store = store
        self._navigator = navigator
        self._clock = clock or _system_clock
        self._margin_ms = expiry_margin_ms
        self._landing_path = landing_path
        self._login_path = login_path
        self._name = name

        self._token: str | None = None
        self._expires_at: int | None = None
        self._user: User | None = None
        self._error: str | None = None
        self._is_loading = True
        # Bumped on every token change; stale awaits compare against it
        self._generation = 0

        self._lock = asyncio.Lock()
        self._timer = ExpiryTimer(self._on_expiry, name=name)

    # ------------------------------------------------------------------ state

    @property
    def state(self) -> SessionState:
        if self._token is None:
            return SessionState.UNAUTHENTICATED
        if self._user is None:
            return SessionState.RESOLVING
        return SessionState.AUTHENTICATED

    @property
    def token(self) -> str | None:
        return self._token

    @property
    def expires_at(self) -> int | None:
        return self._expires_at

    @property
    def user(self) -> User | None:
        return self._user

    @property
    def error(self) -> str | None:
        return self._error

    @property
    def is_loading(self) -> bool:
        return self._is_loading

    @property
    def timer(self) -> ExpiryTimer:
        return self._timer

    @property
    def navigator(self) -> Navigator | None:
        return self._navigator

    @property
    def is_idle(self) -> bool:
        """No token held and no operation in flight."""
        return self._token is None and not self._lock.locked()

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            state=self.state,
            user=self._user,
            is_loading=self._is_loading,
            error=self._error,
            expires_at=self._expires_at,
        )

    # ------------------------------------------------------------- operations

    async def restore(self) -> SessionSnapshot:
        """Rebuild the session from the persisted store.

        A missing, half-present or unparsable pair ends logged out without a
        network call. An expiry at or before now logs out. Otherwise the
        profile is fetched once; any failure clears the session.
        """
        async with self._lock:
            self._is_loading = True
            try:
                await self._restore()
            finally:
                self._is_loading = False
        return self.snapshot()

    async def login(self, username: str, password: str) -> AuthResult[User]:
        async with self._lock:
            self._begin()
            try:
                result = await self._gateway.login(username, password)
                if not result.success or result.value is None:
                    return self._fail(result)
                logger.info(f"SessionManager: login accepted name={self._name}")
                return await self._establish(result.value)
            finally:
                self._is_loading = False

    async def register(self, username: str, password: str, role: str) -> AuthResult[User]:
        async with self._lock:
            self._begin()
            try:
                result = await self._gateway.register(username, password, role)
                if not result.success or result.value is None:
                    return self._fail(result)
                logger.info(f"SessionManager: registration accepted name={self._name}")
                return await self._establish(result.value)
            finally:
                self._is_loading = False

    async def update_user(self, username: str, email: str | None = None) -> AuthResult[User]:
        async with self._lock:
            if self._token is None:
                return self._fail(AuthResult.fail(NOT_AUTHENTICATED, FailureKind.UNAUTHENTICATED))

            self._begin()
            try:
                result = await self._gateway.update_user(self._token, username=username, email=email)
                if not result.success or result.value is None:
                    return self._fail(result)

                grant = result.value
                stored = self._accept_token(grant)
                if not stored.success:
                    return stored

                previous = self._user
                self._user = User(
                    username=grant.username or username,
                    role=previous.role if previous else "",
                    email=grant.email if grant.email is not None else (previous.email if previous else None),
                )
                logger.info(f"SessionManager: profile updated name={self._name}")
                return AuthResult.ok(self._user)
            finally:
                self._is_loading = False

    async def change_password(self, current_password: str, new_password: str) -> AuthResult[User]:
        """Re-check the current password with the auth service, then send the new one."""
        async with self._lock:
            if self._token is None or self._user is None:
                return self._fail(AuthResult.fail(NOT_AUTHENTICATED, FailureKind.UNAUTHENTICATED))

            self._begin()
            try:
                check = await self._gateway.login(self._user.username, current_password)
                if not check.success:
                    if check.kind == FailureKind.REJECTED:
                        check = AuthResult.fail(WRONG_PASSWORD, FailureKind.REJECTED)
                    return self._fail(check)

                result = await self._gateway.update_user(
                    self._token, username=self._user.username, password=new_password
                )
                if not result.success or result.value is None:
                    return self._fail(result)

                stored = self._accept_token(result.value)
                if not stored.success:
                    return stored
                logger.info(f"SessionManager: password changed name={self._name}")
                return AuthResult.ok(self._user)
            finally:
                self._is_loading = False

    async def delete_user(self) -> AuthResult[None]:
        async with self._lock:
            if self._token is None:
                return self._fail(AuthResult.fail(NOT_AUTHENTICATED, FailureKind.UNAUTHENTICATED))

            self._begin()
            try:
                result = await self._gateway.delete_user(self._token)
                if not result.success:
                    return self._fail(result)
                logger.info(f"SessionManager: account deleted name={self._name}")
                self.logout()
                return AuthResult.ok()
            finally:
                self._is_loading = False

    def logout(self) -> None:
        """Drop every trace of the session. Safe to call repeatedly."""
        self._timer.cancel()
        self._clear_store()
        had_session = self._token is not None
        self._reset()
        self._error = None
        if had_session:
            logger.info(f"SessionManager: logged out name={self._name}")
        self._navigate(self._login_path)

    def clear_error(self) -> None:
        self._error = None

    # -------------------------------------------------------------- internals

    def _begin(self) -> None:
        self._is_loading = True
        self._error = None

    def _fail(self, result: AuthResult) -> AuthResult:
        self._error = result.error or "An unexpected error occurred"
        logger.warning(
            f"SessionManager: operation failed name={self._name} kind={result.kind} "
            f"status={result.http_status}"
        )
        return result

    async def _restore(self) -> None:
        try:
            raw_token = self._store.get(TOKEN_KEY)
            raw_expiry = self._store.get(EXPIRY_KEY)
        except StorageError:
            logger.exception(f"SessionManager: store read failed name={self._name}")
            self._reset()
            return

        if raw_token is None and raw_expiry is None:
            logger.debug(f"SessionManager: nothing to restore name={self._name}")
            return

        stored = self._parse_stored(raw_token, raw_expiry)
        if stored is None:
            logger.warning(f"SessionManager: discarding inconsistent stored session name={self._name}")
            self._clear_store()
            self._reset()
            return

        if stored.is_expired(self._clock()):
            logger.info(f"SessionManager: stored token already expired name={self._name}")
            self.logout()
            return

        self._set_token(stored.token, stored.expires_at)
        if not self._schedule_expiry():
            return

        generation = self._generation
        result = await self._gateway.fetch_user(stored.token)
        if generation != self._generation:
            logger.debug(f"SessionManager: dropping stale profile result name={self._name}")
            return
        if not result.success or result.value is None:
            logger.info(
                f"SessionManager: stored token rejected name={self._name} kind={result.kind}"
            )
            self.logout()
            return

        self._user = result.value
        logger.info(f"SessionManager: session restored name={self._name}")

    @staticmethod
    def _parse_stored(raw_token: str | None, raw_expiry: str | None) -> StoredToken | None:
        if not raw_token or not raw_expiry:
            return None
        try:
            expires_at = int(raw_expiry.strip())
        except ValueError:
            return None
        return StoredToken(token=raw_token, expires_at=expires_at)

    async def _establish(self, grant: TokenGrant) -> AuthResult[User]:
        accepted = self._accept_token(grant)
        if not accepted.success:
            return accepted

        generation = self._generation
        token = self._token
        if token is None:
            raise InvariantViolation("token must be set before resolving the profile", field="token")
        profile = await self._gateway.fetch_user(token)
        if generation != self._generation:
            return AuthResult.fail(NOT_AUTHENTICATED, FailureKind.UNAUTHENTICATED)
        if not profile.success or profile.value is None:
            self.logout()
            return self._fail(profile)

        self._user = profile.value
        self._navigate(self._landing_path)
        return AuthResult.ok(self._user)

    def _accept_token(self, grant: TokenGrant) -> AuthResult:
        expires_at = self._clock() + grant.expires_in_ms
        try:
            self._store.set(TOKEN_KEY, grant.token)
            self._store.set(EXPIRY_KEY, str(expires_at))
        except StorageError as e:
            logger.error(f"SessionManager: store write failed name={self._name} code={e.error_code}")
            self._clear_store()
            self._timer.cancel()
            self._reset()
            return self._fail(AuthResult.fail(STORAGE_FAILURE, FailureKind.STORAGE))

        self._set_token(grant.token, expires_at)
        if not self._schedule_expiry():
            return AuthResult.fail("Session expired", FailureKind.EXPIRED)
        return AuthResult.ok()

    def _set_token(self, token: str, expires_at: int) -> None:
        self._token = token
        self._expires_at = expires_at
        self._generation += 1

    def _schedule_expiry(self) -> bool:
        """Arm the auto-logout timer; log out at once when it is already due."""
        if self._expires_at is None:
            raise InvariantViolation("expiry must be set before arming the timer", field="expires_at")
        delay_ms = self._expires_at - self._clock() - self._margin_ms
        if delay_ms <= 0:
            logger.info(
                f"SessionManager: token inside expiry margin name={self._name} delay_ms={delay_ms}"
            )
            self.logout()
            return False
        self._timer.arm(delay_ms / 1000)
        return True

    def _on_expiry(self) -> None:
        logger.info(f"SessionManager: session expired name={self._name}")
        self.logout()

    def _reset(self) -> None:
        self._token = None
        self._expires_at = None
        self._user = None
        self._generation += 1

    def _clear_store(self) -> None:
        for key in (TOKEN_KEY, EXPIRY_KEY):
            try:
                self._store.remove(key)
            except StorageError:
                logger.exception(f"SessionManager: store remove failed name={self._name} key={key}")

    def _navigate(self, path: str) -> None:
        if self._navigator is not None:
            self._navigator.push(path)


__all__ = ["DEFAULT_EXPIRY_MARGIN_MS", "NOT_AUTHENTICATED", "SessionManager", "WRONG_PASSWORD"]
