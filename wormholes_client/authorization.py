from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Union

from .encoding import stable_json
from .errors import EncodingError
from .messages import SignableMessage, role_class
from .signer import Signature, recover_address

DATA_PREFIX = "wormholes:"
SIGNATURE_KEY = "sig"


@dataclass(frozen=True)
class RoleAuthorization:
    message: SignableMessage
    signature: Signature

    @property
    def role(self) -> str:
        return self.message.role

    def to_dict(self) -> Dict[str, str]:
        out = self.message.to_dict()
        out[SIGNATURE_KEY] = self.signature.hex()
        return out

    def to_json(self) -> bytes:
        return stable_json(self.to_dict()).encode("utf-8")

    def signer_address(self) -> str:
        return recover_address(self.message.digest(), self.signature)

    @classmethod
    def from_dict(cls, role: str, data: Mapping[str, Any]) -> "RoleAuthorization":
        if not isinstance(data, Mapping):
            raise EncodingError(f"{role} authorization must be an object, got {type(data).__name__}")
        if SIGNATURE_KEY not in data:
            raise EncodingError(f"{role} authorization is missing {SIGNATURE_KEY}")
        fields = {k: v for k, v in data.items() if k != SIGNATURE_KEY}
        message = role_class(role).from_dict(fields)
        return cls(message=message, signature=Signature.from_hex(data[SIGNATURE_KEY]))

    @classmethod
    def from_json(cls, role: str, raw: Union[bytes, str]) -> "RoleAuthorization":
        return cls.from_dict(role, _load_json(role, raw))


AuthorizationLike = Union[RoleAuthorization, Mapping[str, Any], bytes, str]


def _load_json(role: str, raw: Union[bytes, str]) -> Any:
    try:
        return json.loads(raw)
    except (TypeError, ValueError) as exc:
        raise EncodingError(f"{role} authorization is not valid JSON") from exc


def transported(role: str, auth: AuthorizationLike) -> Dict[str, str]:
    """Return the mapping a counter-party produced for ``role``, unchanged.

    The mapping is validated against the role's schema but its values are
    never re-encoded: the signature only holds for the exact strings the
    signer concatenated.
    """
    if isinstance(auth, RoleAuthorization):
        if auth.role != role:
            raise EncodingError(f"expected a {role} authorization, got {auth.role}")
        return auth.to_dict()
    if isinstance(auth, (bytes, str)):
        data = _load_json(role, auth)
    else:
        data = auth
    RoleAuthorization.from_dict(role, data)
    return dict(data)


def compose_payload(action: int, version: str, roles: Optional[Mapping[str, AuthorizationLike]] = None, **params: Any) -> Dict[str, Any]:
    payload: Dict[str, Any] = {"type": int(action), "version": version}
    for key, value in params.items():
        if value is not None:
            payload[key] = value
    for role, auth in (roles or {}).items():
        payload[role] = transported(role, auth)
    return payload


def encode_tx_data(payload: Mapping[str, Any]) -> bytes:
    return (DATA_PREFIX + stable_json(payload)).encode("utf-8")
