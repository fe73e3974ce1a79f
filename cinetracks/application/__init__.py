# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .interfaces import AuthGateway, Navigator
from .services.expiry_timer import ExpiryTimer
from .services.session_manager import SessionManager

__all__ = [
    "AuthGateway",
    "ExpiryTimer",
    "Navigator",
    "SessionManager",
]
