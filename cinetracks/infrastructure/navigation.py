# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from threading import Lock


class RecordingNavigator:
    """Keeps the latest navigation request until the web tier collects it."""

    def __init__(self) -> None:
        self._pending: str | None = None
        self._lock = Lock()

    def push(self, path: str) -> None:
        with self._lock:
            self._pending = path

    def take(self) -> str | None:
        with self._lock:
            path, self._pending = self._pending, None
            return path
