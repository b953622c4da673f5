"""
orbit_core.crypto
-----------------
Cryptographic primitives behind Orbit identities:

- BLAKE2b seed derivation from (alias, password)
- Ed25519: deterministic key pairs, combined-mode sign / verify
- AES-GCM (+ HKDF for keys taken from a session's private key)
- Argon2id password hashing for registration

Key layout follows libsodium so accounts created by other Orbit clients
resolve to the same `users/<pub>` namespace: the private key is the 32-byte
seed followed by the 32-byte public key, and signed messages are
`signature || message`.
"""

from __future__ import annotations
from typing import Dict, Union
import os, hashlib

from argon2 import PasswordHasher
from argon2.exceptions import VerificationError, InvalidHashError
from cryptography.exceptions import InvalidSignature as _BadSignature, InvalidTag
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ed25519
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.hkdf import HKDF

from orbit_core.constants import SEED_BYTES, NONCE_BYTES
from orbit_core.errors import NotReady, InvalidSignature, DecryptionFailed
from orbit_core.logger import get_logger
from orbit_core.storage.models import KeyPair, SessionKeys
from orbit_core.utils import b64e, b64d

log = get_logger("Orbit.Crypto")

SIG_BYTES = 64
HKDF_INFO = b"orbit-secretbox-v1"

Data = Union[str, bytes]


def _as_bytes(data: Data) -> bytes:
    return data.encode("utf-8") if isinstance(data, str) else data


def _seed_of(private_key: bytes) -> bytes:
    if len(private_key) not in (SEED_BYTES, 2 * SEED_BYTES):
        raise ValueError(f"private key must be {SEED_BYTES} or {2 * SEED_BYTES} bytes")
    return private_key[:SEED_BYTES]


class CryptoProvider:
    """
    Primitive set consumed by the identity manager.

    Must be readied once per process with ensure_ready(); every primitive
    raises NotReady before that.
    """

    def __init__(self):
        self.ready = False
        self._hasher = PasswordHasher()

    def ensure_ready(self) -> None:
        if self.ready:
            return
        # Self-test the backend before anything depends on it
        seed = hashlib.blake2b(b"orbit-self-test", digest_size=SEED_BYTES).digest()
        sk = ed25519.Ed25519PrivateKey.from_private_bytes(seed)
        sig = sk.sign(b"ready")
        sk.public_key().verify(sig, b"ready")
        self.ready = True
        log.debug("[CRYPTO] provider ready")

    def _require_ready(self) -> None:
        if not self.ready:
            raise NotReady("crypto provider used before ensure_ready()")

    # --------- identity keys ----------
    def derive_seed(self, alias: str, password: str) -> bytes:
        self._require_ready()
        return hashlib.blake2b((alias + password).encode("utf-8"), digest_size=SEED_BYTES).digest()

    def key_pair_from_seed(self, seed: bytes) -> KeyPair:
        self._require_ready()
        sk = ed25519.Ed25519PrivateKey.from_private_bytes(_seed_of(seed))
        pub = sk.public_key().public_bytes_raw()
        return KeyPair(public_key=pub, private_key=sk.private_bytes_raw() + pub)

    def key_pair_from_credentials(self, alias: str, password: str) -> KeyPair:
        return self.key_pair_from_seed(self.derive_seed(alias, password))

    def ephemeral_key_pair(self) -> KeyPair:
        self._require_ready()
        return self.key_pair_from_seed(os.urandom(SEED_BYTES))

    def generate_pair(self) -> SessionKeys:
        return self.ephemeral_key_pair().encoded()

    # --------- Ed25519 (sign/verify) ----------
    def sign(self, message: Data, private_key: bytes) -> bytes:
        self._require_ready()
        msg = _as_bytes(message)
        sk = ed25519.Ed25519PrivateKey.from_private_bytes(_seed_of(private_key))
        return sk.sign(msg) + msg

    def verify(self, signed_message: bytes, public_key: bytes) -> bytes:
        self._require_ready()
        if len(signed_message) < SIG_BYTES:
            raise InvalidSignature("signed message shorter than a signature")
        sig, msg = signed_message[:SIG_BYTES], signed_message[SIG_BYTES:]
        try:
            ed25519.Ed25519PublicKey.from_public_bytes(public_key).verify(sig, msg)
        except (_BadSignature, ValueError) as e:
            raise InvalidSignature("Invalid signature") from e
        return msg

    # --------- AES-GCM (encrypt/decrypt) ----------
    def symmetric_encrypt(self, message: Data, key: bytes) -> Dict[str, str]:
        self._require_ready()
        nonce = os.urandom(NONCE_BYTES)
        ct = AESGCM(key).encrypt(nonce, _as_bytes(message), None)
        return {"cipher": b64e(ct), "nonce": b64e(nonce)}

    def symmetric_decrypt(self, box: Dict[str, str], key: bytes) -> bytes:
        self._require_ready()
        try:
            return AESGCM(key).decrypt(b64d(box["nonce"]), b64d(box["cipher"]), None)
        except (InvalidTag, KeyError, ValueError) as e:
            raise DecryptionFailed("Decryption failed") from e

    def secret_key_for(self, priv_b64: str) -> bytes:
        """32-byte symmetric key bound to an encoded session private key."""
        self._require_ready()
        hkdf = HKDF(algorithm=hashes.SHA256(), length=32, salt=None, info=HKDF_INFO)
        return hkdf.derive(_seed_of(b64d(priv_b64)))

    def encrypt_for_keys(self, message: Data, priv_b64: str) -> Dict[str, str]:
        return self.symmetric_encrypt(message, self.secret_key_for(priv_b64))

    def decrypt_for_keys(self, box: Dict[str, str], priv_b64: str) -> bytes:
        return self.symmetric_decrypt(box, self.secret_key_for(priv_b64))

    # --------- password hashing ----------
    def hash_password(self, password: str) -> str:
        self._require_ready()
        return self._hasher.hash(password)

    def verify_password(self, password: str, hashed: str) -> bool:
        self._require_ready()
        try:
            return self._hasher.verify(hashed, password)
        except (VerificationError, InvalidHashError):
            return False


# Process-wide default
provider = CryptoProvider()
