# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import re
from pathlib import Path
from threading import Lock

from cinetracks.domain.session import StorageError
from cinetracks.shared.logging import logger
from cinetracks.utils.fs import read_json, remove_quietly, write_json_atomic

_CLIENT_ID_RE = re.compile(r"^[A-Za-z0-9_-]{1,64}$")


class FileTokenStore:
    """Key/value entries of one client kept in ``<base_dir>/<client_id>.json``.

    The file is rewritten atomically on every change and removed once the
    last entry is gone. An unreadable file is treated as empty.
    """

    def __init__(self, base_dir: str | Path, client_id: str) -> None:
        if not _CLIENT_ID_RE.match(client_id):
            raise StorageError(
                "Invalid client id for file store",
                error_code="invalid_client_id",
            )
        self._base_dir = Path(base_dir)
        self._path = self._base_dir / f"{client_id}.json"
        self._lock = Lock()

        try:
            self._base_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(
                f"Failed to create store directory: {self._base_dir}",
                error_code="directory_creation_failed",
            ) from e

    @property
    def path(self) -> Path:
        return self._path

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            data = self._load()
            data[key] = value
            self._save(data)

    def remove(self, key: str) -> None:
        with self._lock:
            data = self._load()
            if key not in data:
                return
            del data[key]
            self._save(data)

    def _load(self) -> dict[str, str]:
        try:
            loaded = read_json(self._path)
        except ValueError:
            logger.warning(f"FileTokenStore: corrupt file ignored path={self._path}")
            return {}
        except OSError as e:
            raise StorageError(f"Failed to read {self._path}", error_code="read_failed") from e
        if not isinstance(loaded, dict):
            return {}
        return {str(k): str(v) for k, v in loaded.items() if isinstance(v, str)}

    def _save(self, data: dict[str, str]) -> None:
        try:
            if data:
                write_json_atomic(self._path, data)
            else:
                remove_quietly(self._path)
        except OSError as e:
            logger.exception(f"FileTokenStore: write failed path={self._path}")
            raise StorageError(f"Failed to write {self._path}", error_code="write_failed") from e
