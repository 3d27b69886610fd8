"""Node-side structures returned by the wormholes ``eth_*`` extensions.

The node serializes these without JSON tags, so keys use the server's field
names (``Nonce``, ``PledgedBalance`` ...). Big integers arrive as JSON
numbers; missing keys decode to zero values.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .errors import RemoteError


def _int(value: Any) -> int:
    if value is None:
        return 0
    try:
        if isinstance(value, str):
            return int(value, 16) if value.startswith(("0x", "0X")) else int(value)
        return int(value)
    except (TypeError, ValueError) as exc:
        raise RemoteError(f"invalid integer in node result: {value!r}") from exc


@dataclass
class StakerExtension:
    addr: str
    balance: int
    block_number: int

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "StakerExtension":
        return cls(addr=d.get("Addr", ""), balance=_int(d.get("Balance")), block_number=_int(d.get("BlockNumber")))


@dataclass
class WormholesExtension:
    pledged_balance: int = 0
    pledged_block_number: int = 0
    exchanger_flag: bool = False
    block_number: int = 0
    exchanger_balance: int = 0
    snft_agent_recipient: str = ""
    vote_block_number: int = 0
    vote_weight: int = 0
    coefficient: int = 0
    fee_rate: int = 0
    exchanger_name: str = ""
    exchanger_url: str = ""
    approve_address_list: List[str] = field(default_factory=list)
    snft_no_merge: bool = False
    lock_snft_flag: bool = False
    nft_balance: int = 0
    stakers: List[StakerExtension] = field(default_factory=list)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "WormholesExtension":
        stakers = (d.get("StakerExtension") or {}).get("StakerExtensions") or []
        return cls(
            pledged_balance=_int(d.get("PledgedBalance")),
            pledged_block_number=_int(d.get("PledgedBlockNumber")),
            exchanger_flag=bool(d.get("ExchangerFlag", False)),
            block_number=_int(d.get("BlockNumber")),
            exchanger_balance=_int(d.get("ExchangerBalance")),
            snft_agent_recipient=d.get("SNFTAgentRecipient", ""),
            vote_block_number=_int(d.get("VoteBlockNumber")),
            vote_weight=_int(d.get("VoteWeight")),
            coefficient=_int(d.get("Coefficient")),
            fee_rate=_int(d.get("FeeRate")),
            exchanger_name=d.get("ExchangerName", ""),
            exchanger_url=d.get("ExchangerURL", ""),
            approve_address_list=list(d.get("ApproveAddressList") or []),
            snft_no_merge=bool(d.get("SNFTNoMerge", False)),
            lock_snft_flag=bool(d.get("LockSNFTFlag", False)),
            nft_balance=_int(d.get("NFTBalance")),
            stakers=[StakerExtension.from_dict(s) for s in stakers],
        )


@dataclass
class AccountNFT:
    name: str = ""
    symbol: str = ""
    price: int = 0
    direction: int = 0  # 0 not traded, 1 buyer, 2 seller
    owner: str = ""
    approve_address: str = ""
    merge_level: int = 0
    creator: str = ""
    royalty: int = 0
    exchanger: str = ""
    meta_url: str = ""

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "AccountNFT":
        return cls(
            name=d.get("Name", ""),
            symbol=d.get("Symbol", ""),
            price=_int(d.get("Price")),
            direction=_int(d.get("Direction")),
            owner=d.get("Owner", ""),
            approve_address=d.get("NFTApproveAddressList", ""),
            merge_level=_int(d.get("MergeLevel")),
            creator=d.get("Creator", ""),
            royalty=_int(d.get("Royalty")),
            exchanger=d.get("Exchanger", ""),
            meta_url=d.get("MetaURL", ""),
        )


@dataclass
class Account:
    nonce: int
    balance: int
    root: str = ""
    code_hash: str = ""
    worm: Optional[WormholesExtension] = None
    nft: AccountNFT = field(default_factory=AccountNFT)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Account":
        worm = d.get("Worm")
        return cls(
            nonce=_int(d.get("Nonce")),
            balance=_int(d.get("Balance")),
            root=d.get("Root") or "",
            code_hash=d.get("CodeHash") or "",
            worm=WormholesExtension.from_dict(worm) if worm else None,
            nft=AccountNFT.from_dict(d.get("Nft") or {}),
        )


@dataclass
class Validator:
    addr: str
    balance: int
    proxy: str
    weight: List[int] = field(default_factory=list)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Validator":
        return cls(
            addr=d.get("Addr", ""),
            balance=_int(d.get("Balance")),
            proxy=d.get("Proxy", ""),
            weight=[_int(w) for w in d.get("Weight") or []],
        )


def validators_from_result(result: Dict[str, Any]) -> List[Validator]:
    return [Validator.from_dict(v) for v in result.get("Validators") or []]


@dataclass
class BeneficiaryAddress:
    address: str
    nft_address: str

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "BeneficiaryAddress":
        return cls(address=d.get("Address", ""), nft_address=d.get("NftAddress", ""))


@dataclass
class ActiveMiner:
    address: str
    balance: int
    height: int

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "ActiveMiner":
        return cls(address=d.get("Address", ""), balance=_int(d.get("Balance")), height=_int(d.get("Height")))


def active_miners_from_result(result: Dict[str, Any]) -> List[ActiveMiner]:
    return [ActiveMiner.from_dict(m) for m in result.get("ActiveMiners") or []]


@dataclass
class MinerProxy:
    address: str
    proxy: str

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "MinerProxy":
        return cls(address=d.get("Address", ""), proxy=d.get("Proxy", ""))
