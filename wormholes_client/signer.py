from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from eth_keys import keys
from eth_keys.exceptions import BadSignature
from eth_keys.exceptions import ValidationError as KeyValidationError

from .errors import EncodingError, PrivateKeyError

SIGNATURE_LENGTH = 65
DIGEST_LENGTH = 32
RECOVERY_ID_OFFSET = 27


def normalize_recovery_id(raw: bytes) -> bytes:
    """Return ``raw`` with its last byte moved from 0/1 to 27/28.

    Verifiers recover the signer's address from ``r || s || v`` alone, so the
    recovery id has to be in the self-describing 27/28 form before the
    signature leaves the signer. Already normalized input is returned as is.
    """
    if len(raw) != SIGNATURE_LENGTH:
        raise EncodingError(f"signature must be {SIGNATURE_LENGTH} bytes, got {len(raw)}")
    v = raw[64]
    if v in (0, 1):
        return raw[:64] + bytes([v + RECOVERY_ID_OFFSET])
    if v in (27, 28):
        return bytes(raw)
    raise EncodingError(f"invalid recovery id: {v}")


@dataclass(frozen=True)
class Signature:
    raw: bytes

    def __post_init__(self) -> None:
        if len(self.raw) != SIGNATURE_LENGTH:
            raise EncodingError(f"signature must be {SIGNATURE_LENGTH} bytes, got {len(self.raw)}")
        if self.raw[64] not in (27, 28):
            raise EncodingError(f"signature recovery id must be 27 or 28, got {self.raw[64]}")

    @property
    def r(self) -> int:
        return int.from_bytes(self.raw[:32], "big")

    @property
    def s(self) -> int:
        return int.from_bytes(self.raw[32:64], "big")

    @property
    def v(self) -> int:
        return self.raw[64]

    def hex(self) -> str:
        return "0x" + self.raw.hex()

    @classmethod
    def from_hex(cls, value: str) -> "Signature":
        if not isinstance(value, str) or not value.startswith("0x"):
            raise EncodingError("signature must be a 0x-prefixed hex string")
        try:
            raw = bytes.fromhex(value[2:])
        except ValueError as exc:
            raise EncodingError("signature is not valid hex") from exc
        return cls(raw)


def _load_private_key(private_key: Union[str, bytes]) -> keys.PrivateKey:
    if isinstance(private_key, str):
        hex_key = private_key[2:] if private_key.startswith(("0x", "0X")) else private_key
        try:
            key_bytes = bytes.fromhex(hex_key)
        except ValueError as exc:
            raise PrivateKeyError("private key must be a hexadecimal string") from exc
    elif isinstance(private_key, (bytes, bytearray)):
        key_bytes = bytes(private_key)
    else:
        raise PrivateKeyError(f"private key must be str or bytes, got {type(private_key).__name__}")
    if len(key_bytes) != 32:
        raise PrivateKeyError(f"private key must be 32 bytes, got {len(key_bytes)}")
    if not any(key_bytes):
        raise PrivateKeyError("private key must not be zero")
    try:
        return keys.PrivateKey(key_bytes)
    except (KeyValidationError, ValueError) as exc:
        raise PrivateKeyError(f"unusable private key: {exc}") from exc


class Signer:
    def __init__(self, private_key: Union[str, bytes]):
        self._key = _load_private_key(private_key)
        self.address = self._key.public_key.to_checksum_address()

    @property
    def key_bytes(self) -> bytes:
        return self._key.to_bytes()

    def sign_digest(self, digest: bytes) -> Signature:
        if len(digest) != DIGEST_LENGTH:
            raise EncodingError(f"digest must be {DIGEST_LENGTH} bytes, got {len(digest)}")
        raw = self._key.sign_msg_hash(digest).to_bytes()
        return Signature(normalize_recovery_id(raw))


def recover_address(digest: bytes, signature: Signature) -> str:
    raw = signature.raw[:64] + bytes([signature.v - RECOVERY_ID_OFFSET])
    try:
        public_key = keys.Signature(signature_bytes=raw).recover_public_key_from_msg_hash(digest)
    except (BadSignature, KeyValidationError) as exc:
        raise EncodingError(f"cannot recover signer: {exc}") from exc
    return public_key.to_checksum_address()
