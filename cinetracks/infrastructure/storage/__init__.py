# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .factory import TokenStoreFactory, build_token_store_factory
from .file_store import FileTokenStore
from .memory_store import InMemoryTokenStore
from .sqlalchemy_store import SqlAlchemyTokenStore

__all__ = [
    "FileTokenStore",
    "InMemoryTokenStore",
    "SqlAlchemyTokenStore",
    "TokenStoreFactory",
    "build_token_store_factory",
]
