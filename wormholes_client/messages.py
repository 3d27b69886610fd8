"""Signable messages exchanged between the parties of a trade.

Every role declares its fields once, as a frozen dataclass. The declaration
order is the order in which the field strings are concatenated before
hashing; the ``key`` metadata is the name the field travels under once the
authorization is serialized. Changing either breaks signatures already
issued, so new layouts must be added as new roles.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, ClassVar, Dict, Iterable, Mapping, Tuple, Type

from eth_utils import keccak

from .errors import EncodingError

SIGN_HASH_PREFIX = b"\x19Ethereum Signed Message:\n"


def canonical_message(values: Iterable[str]) -> bytes:
    parts = []
    for i, value in enumerate(values):
        if not isinstance(value, str):
            raise EncodingError(f"field {i} must be a string, got {type(value).__name__}")
        parts.append(value)
    return "".join(parts).encode("utf-8")


def sign_hash(data: bytes) -> bytes:
    return keccak(SIGN_HASH_PREFIX + str(len(data)).encode("ascii") + data)


def message_digest(values: Iterable[str]) -> bytes:
    return sign_hash(canonical_message(values))


def _key(name: str) -> Any:
    return field(metadata={"key": name})


@dataclass(frozen=True)
class SignableMessage:
    role: ClassVar[str] = ""

    def __post_init__(self) -> None:
        for f in fields(self):
            value = getattr(self, f.name)
            if not isinstance(value, str):
                raise EncodingError(f"{self.role}.{f.name} must be a string, got {type(value).__name__}")

    @classmethod
    def schema(cls) -> Tuple[Tuple[str, str], ...]:
        return tuple((f.name, f.metadata.get("key", f.name)) for f in fields(cls))

    def values(self) -> Tuple[str, ...]:
        return tuple(getattr(self, name) for name, _ in self.schema())

    def canonical(self) -> bytes:
        return canonical_message(self.values())

    def digest(self) -> bytes:
        return sign_hash(self.canonical())

    def to_dict(self) -> Dict[str, str]:
        return {key: getattr(self, name) for name, key in self.schema()}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SignableMessage":
        if not isinstance(data, Mapping):
            raise EncodingError(f"{cls.role} must be an object, got {type(data).__name__}")
        schema = cls.schema()
        expected = {key for _, key in schema}
        missing = sorted(expected - set(data))
        if missing:
            raise EncodingError(f"{cls.role} is missing {', '.join(missing)}")
        unknown = sorted(set(data) - expected)
        if unknown:
            raise EncodingError(f"{cls.role} has unknown keys {', '.join(unknown)}")
        return cls(**{name: data[key] for name, key in schema})


@dataclass(frozen=True)
class Buyer(SignableMessage):
    """Buyer's offer. ``nft_address`` is empty for a lazy (unminted) trade,
    ``seller`` is empty when any seller may fill it."""

    role: ClassVar[str] = "buyer"

    amount: str = _key("price")
    nft_address: str = _key("nft_address")
    exchanger: str = _key("exchanger")
    block_number: str = _key("block_number")
    seller: str = _key("seller")


@dataclass(frozen=True)
class Seller1(SignableMessage):
    """Seller of an already minted NFT."""

    role: ClassVar[str] = "seller1"

    amount: str = _key("price")
    nft_address: str = _key("nft_address")
    exchanger: str = _key("exchanger")
    block_number: str = _key("block_number")


@dataclass(frozen=True)
class Seller2(SignableMessage):
    """Seller of an NFT that is minted as part of the trade.

    ``exclusive_flag`` is ``"0"`` for inclusive, ``"1"`` for exclusive.
    """

    role: ClassVar[str] = "seller2"

    amount: str = _key("price")
    royalty: str = _key("royalty")
    meta_url: str = _key("meta_url")
    exclusive_flag: str = _key("exclusive_flag")
    exchanger: str = _key("exchanger")
    block_number: str = _key("block_number")


@dataclass(frozen=True)
class ExchangerAuth(SignableMessage):
    """An exchanger owner allowing ``to`` to trade on its behalf."""

    role: ClassVar[str] = "exchanger_auth"

    exchanger_owner: str = _key("exchanger_owner")
    to: str = _key("to")
    block_number: str = _key("block_number")


@dataclass(frozen=True)
class BuyerAuth(SignableMessage):
    role: ClassVar[str] = "buyer_auth"

    exchanger: str = _key("exchanger")
    block_number: str = _key("block_number")


@dataclass(frozen=True)
class SellerAuth(SignableMessage):
    role: ClassVar[str] = "seller_auth"

    exchanger: str = _key("exchanger")
    block_number: str = _key("block_number")


@dataclass(frozen=True)
class Delegate(SignableMessage):
    role: ClassVar[str] = "delegate"

    address: str = _key("address")
    pledge_account: str = _key("pledge_account")


ROLES: Dict[str, Type[SignableMessage]] = {
    cls.role: cls
    for cls in (Buyer, Seller1, Seller2, ExchangerAuth, BuyerAuth, SellerAuth, Delegate)
}


def role_class(role: str) -> Type[SignableMessage]:
    try:
        return ROLES[role]
    except KeyError:
        raise EncodingError(f"unknown role: {role!r}") from None
