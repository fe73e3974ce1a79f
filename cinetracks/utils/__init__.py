"""Small filesystem helpers shared by the token stores."""

__all__ = [
    "fs",
]
