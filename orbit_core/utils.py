"""
orbit_core.utils
----------------
Helpers for URL-safe base64, canonical JSON, hashing and store path joining.
Key material travels as URL-safe, unpadded base64 (libsodium's
URLSAFE_NO_PADDING variant) so existing accounts keep the same public keys.
"""

from __future__ import annotations
import base64, json, time, hashlib
from typing import Any


def b64e(b: bytes) -> str:
    return base64.urlsafe_b64encode(b).decode("ascii").rstrip("=")


def b64d(s: str) -> bytes:
    padded = s + "=" * (-len(s) % 4)
    return base64.urlsafe_b64decode(padded.encode("ascii"))


def now_ts() -> str:
    # RFC3339 / ISO 8601 in UTC, second precision
    return time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime())


def canonical_json(obj: Any) -> bytes:
    # Deterministic, minimal JSON for content addressing
    return json.dumps(obj, separators=(",", ":"), sort_keys=True, ensure_ascii=False).encode("utf-8")


def sha256(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def content_key(item: Any) -> str:
    """Storage key for `item`: hex sha256 over its canonical JSON."""
    return sha256(canonical_json(item))


def clean_path(path: str) -> str:
    return "/".join(seg for seg in path.split("/") if seg)


def is_under(path: str, prefix: str) -> bool:
    """True when `path` equals `prefix` or lies below it, segment-wise."""
    if not prefix:
        return True
    return path == prefix or path.startswith(prefix + "/")


def join_path(parent: str, child: str) -> str:
    """
    Append `child` below `parent` unless `child` already carries that prefix.

    A child equal to its parent collapses into it:
    join_path("nfts", "nfts") == "nfts", not "nfts/nfts".
    """
    parent, child = clean_path(parent), clean_path(child)
    if not parent:
        return child
    if is_under(child, parent):
        return child
    if not child:
        return parent
    return f"{parent}/{child}"
