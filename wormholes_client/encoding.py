from __future__ import annotations

import json
from typing import Any, Optional, Union

from eth_utils import to_checksum_address

from .errors import EncodingError

BLOCK_TAGS = ("latest", "pending", "earliest")


def stable_json(obj: Any) -> str:
    return json.dumps(obj, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def encode_quantity(value: int) -> str:
    """Encode a non-negative integer the way the node expects quantities:
    ``0x`` prefix, lowercase, no leading zeros (``0`` is ``0x0``)."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise EncodingError(f"quantity must be an int, got {type(value).__name__}")
    if value < 0:
        raise EncodingError(f"quantity must be non-negative, got {value}")
    return hex(value)


def decode_quantity(value: str) -> int:
    if not isinstance(value, str) or not value.startswith(("0x", "0X")) or len(value) < 3:
        raise EncodingError(f"invalid hex quantity: {value!r}")
    try:
        return int(value, 16)
    except ValueError as exc:
        raise EncodingError(f"invalid hex quantity: {value!r}") from exc


def amount_to_wei(amount: str) -> int:
    # lazy trades may carry an empty amount
    if amount == "":
        return 0
    return decode_quantity(amount)


def block_tag(number: Optional[Union[int, str]]) -> str:
    if number is None:
        return "latest"
    if isinstance(number, str):
        if number not in BLOCK_TAGS:
            raise EncodingError(f"unknown block tag: {number!r}")
        return number
    return encode_quantity(number)


def checksum_address(address: str) -> str:
    if not isinstance(address, str):
        raise EncodingError(f"address must be a string, got {type(address).__name__}")
    try:
        return to_checksum_address(address)
    except ValueError as exc:
        raise EncodingError(f"invalid address: {address!r}") from exc
