from __future__ import annotations

import os
import tempfile

# Must be set before any controller module applies the rate_limit decorator
os.environ.setdefault("ENABLE_RATE_LIMIT", "0")
os.environ.setdefault("SESSION_STORE", "memory")
os.environ.setdefault("LOG_FILE", os.path.join(tempfile.gettempdir(), "cinetracks-tests.log"))
