# orbit_core/storage/models.py
from __future__ import annotations
from dataclasses import dataclass, asdict
from typing import Any, Dict

from orbit_core.utils import b64e


@dataclass(frozen=True)
class KeyPair:
    """Raw Ed25519 key material; private_key is seed || public_key."""
    public_key: bytes
    private_key: bytes

    def encoded(self) -> "SessionKeys":
        return SessionKeys(pub=b64e(self.public_key), priv=b64e(self.private_key))


@dataclass(frozen=True)
class SessionKeys:
    pub: str
    priv: str

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


@dataclass(frozen=True)
class Session:
    """
    The one persisted login record.

    Serialized as `{alias, token, keys: {pub, priv}}` so other clients of
    the same backend can read it.
    """
    alias: str
    token: str
    keys: SessionKeys

    @property
    def pub(self) -> str:
        return self.keys.pub

    def to_dict(self) -> Dict[str, Any]:
        return {"alias": self.alias, "token": self.token, "keys": self.keys.to_dict()}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Session":
        keys = data["keys"]
        return cls(
            alias=data["alias"],
            token=data["token"],
            keys=SessionKeys(pub=keys["pub"], priv=keys["priv"]),
        )


@dataclass(frozen=True)
class AuthResult:
    """Success value of create() / auth()."""
    token: str
    keys: SessionKeys
