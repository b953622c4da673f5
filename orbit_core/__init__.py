"""
Orbit Core Package
==================
Client-side identity and storage primitives for an Orbit backend.

Provides:
- Deterministic Ed25519 identities from (alias, password)
- Session lifecycle: create / auth / recall / logout
- Path-addressed store client with content-addressed writes
"""

from orbit_core.constants import PUBLIC_GRANT
from orbit_core.crypto import CryptoProvider
from orbit_core.identity import IdentityManager
from orbit_core.registry import ClientRegistry
from orbit_core.result import Result
from orbit_core.store_client import NO_VALUE, Node, StoreClient, build

__all__ = [
    "PUBLIC_GRANT",
    "CryptoProvider",
    "IdentityManager",
    "ClientRegistry",
    "Result",
    "NO_VALUE",
    "Node",
    "StoreClient",
    "build",
]
