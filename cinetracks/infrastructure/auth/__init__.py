# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .http_auth_gateway import MALFORMED_RESPONSE, TRANSPORT_FAILURE, HttpAuthGateway

__all__ = ["HttpAuthGateway", "MALFORMED_RESPONSE", "TRANSPORT_FAILURE"]
