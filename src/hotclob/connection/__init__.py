"""Connection layer module."""

from .auth import l1_headers, l2_headers
from .http import ClobHttp
from .bootstrap import create_api_key, create_or_derive_api_key, derive_api_key
from .client import AuthState, HotPathClient

__all__ = [
    "l1_headers",
    "l2_headers",
    "ClobHttp",
    "create_api_key",
    "create_or_derive_api_key",
    "derive_api_key",
    "AuthState",
    "HotPathClient",
]
