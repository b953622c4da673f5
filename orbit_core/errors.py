"""
orbit_core.errors
-----------------
Error taxonomy shared by the crypto provider, the identity manager and the
store client.
"""

from __future__ import annotations
from typing import Optional


class OrbitError(Exception):
    pass


class NotReady(OrbitError):
    """Crypto provider used before ensure_ready()."""


class NetworkError(OrbitError):
    pass


class HttpError(OrbitError):
    """Non-2xx response. `detail` carries the backend's message or body."""

    def __init__(self, detail: str, status: Optional[int] = None):
        super().__init__(detail)
        self.detail = detail
        self.status = status


class FetchFailed(HttpError):
    pass


class ParseError(OrbitError):
    pass


class ParseFailed(ParseError):
    pass


class Unauthenticated(OrbitError):
    """Operation needs a session token and none is stored."""


class NoActiveSession(OrbitError):
    pass


class IdentityMismatch(OrbitError):
    """Backend-reported public key differs from the locally derived one."""


class CryptoError(OrbitError):
    pass


class InvalidSignature(CryptoError):
    pass


class DecryptionFailed(CryptoError):
    pass
