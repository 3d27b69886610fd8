from __future__ import annotations

import logging
import os
import time
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Dict, List, Mapping, Optional, Union

from eth_account import Account

from .authorization import AuthorizationLike, RoleAuthorization, compose_payload, encode_tx_data, transported
from .encoding import amount_to_wei, block_tag, checksum_address, decode_quantity, encode_quantity
from .errors import EncodingError, NotFoundError, PrivateKeyError, RemoteError, WormholesError
from .messages import Delegate
from .rpc import RPCClient
from .signer import Signature
from .types import (
    Account as NodeAccount,
    ActiveMiner,
    BeneficiaryAddress,
    MinerProxy,
    Validator,
    active_miners_from_result,
    validators_from_result,
)
from .wallet import Wallet

logger = logging.getLogger(__name__)

WormholesVersion = "v0.0.1"

BlockRef = Optional[Union[int, str]]


class ActionKind(IntEnum):
    MINT = 0
    TRANSFER = 1
    AUTHOR = 2
    AUTHOR_REVOKE = 3
    ACCOUNT_AUTHOR = 4
    ACCOUNT_AUTHOR_REVOKE = 5
    SNFT_TO_ERB = 6
    TOKEN_PLEDGE = 9
    TOKEN_REVOKES_PLEDGE = 10
    OPEN = 11
    CLOSE = 12
    INSERT_NFT_BLOCK = 13
    TRANSACTION_NFT = 14
    BUYER_INITIATING_TRANSACTION = 15
    FOUNDRY_TRADE_BUYER = 16
    FOUNDRY_EXCHANGE = 17
    NFT_EXCHANGE_MATCH = 18
    FOUNDRY_EXCHANGE_INITIATED = 19
    NFT_DOES_NOT_AUTHORIZE_EXCHANGES = 20
    ADDITIONAL_PLEDGE_AMOUNT = 21
    REVOKES_PLEDGE_AMOUNT = 22
    VOTE_OFFICIAL_NFT = 23
    VOTE_OFFICIAL_NFT_BY_APPROVED_EXCHANGER = 24
    UNFROZEN_ACCOUNT = 25
    WEIGHT_REDEMPTION = 26
    BATCH_SELL_TRANSFER = 27
    FORCE_BUYING_TRANSFER = 28
    EXTRACT_ERB = 29
    ACCOUNT_DELEGATE = 31


@dataclass
class TxConfig:
    gas_limit: int = 51000
    # blocks added to the current height to build a signature deadline
    deadline_offset: int = 10
    version: str = WormholesVersion


class WormholesClient:
    """Signs and submits wormholes NFT transactions.

    Without an ``endpoint`` the client is a plain wallet: it can produce
    buyer, seller and exchanger authorizations for another party to submit,
    but every call that needs the node raises :class:`WormholesError`.
    """

    def __init__(
        self,
        private_key: Union[str, bytes],
        endpoint: Optional[str] = None,
        timeout_seconds: float = 10.0,
        headers: Optional[Dict[str, str]] = None,
        tx: Optional[TxConfig] = None,
    ):
        self.wallet = Wallet(private_key)
        self.tx = tx or TxConfig()
        self.rpc = RPCClient(endpoint, timeout_seconds=timeout_seconds, headers=headers) if endpoint else None

    @classmethod
    def from_env(cls, **kwargs: Any) -> "WormholesClient":
        private_key = os.getenv("WORMHOLES_PRIVATE_KEY", "")
        if not private_key:
            raise PrivateKeyError("WORMHOLES_PRIVATE_KEY is not set")
        return cls(private_key, os.getenv("WORMHOLES_ENDPOINT") or None, **kwargs)

    @property
    def address(self) -> str:
        return self.wallet.address

    def close(self) -> None:
        if self.rpc is not None:
            self.rpc.close()

    def __enter__(self) -> "WormholesClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # node queries

    def chain_id(self) -> int:
        return self._quantity("eth_chainId", self._call("eth_chainId"))

    def network_id(self) -> int:
        version = self._call("net_version")
        try:
            return int(version, 10)
        except (TypeError, ValueError) as exc:
            raise RemoteError(f"invalid net_version result {version!r}", method="net_version") from exc

    def block_number(self) -> int:
        return self._quantity("eth_blockNumber", self._call("eth_blockNumber"))

    def pending_nonce_at(self, address: Optional[str] = None) -> int:
        account = checksum_address(address or self.address)
        return self._quantity("eth_getTransactionCount", self._call("eth_getTransactionCount", account, "pending"))

    def suggest_gas_price(self) -> int:
        return self._quantity("eth_gasPrice", self._call("eth_gasPrice"))

    def balance(self, address: str) -> int:
        return self.balance_at(address, "pending")

    def balance_at(self, address: str, block: BlockRef = None) -> int:
        return self._quantity("eth_getBalance", self._call("eth_getBalance", checksum_address(address), block_tag(block)))

    def transaction_receipt(self, tx_hash: str) -> Dict[str, Any]:
        return self._call_found("eth_getTransactionReceipt", tx_hash)

    def wait_for_receipt(self, tx_hash: str, timeout_seconds: float = 60.0, poll_interval: float = 1.0) -> Dict[str, Any]:
        deadline = time.monotonic() + timeout_seconds
        while True:
            try:
                return self.transaction_receipt(tx_hash)
            except NotFoundError:
                if time.monotonic() >= deadline:
                    raise
                time.sleep(poll_interval)

    def transaction_in_block(self, block_hash: str, index: int) -> Dict[str, Any]:
        tx = self._call_found("eth_getTransactionByBlockHashAndIndex", block_hash, encode_quantity(index))
        if tx.get("r") is None:
            raise RemoteError("server returned transaction without signature", method="eth_getTransactionByBlockHashAndIndex")
        return tx

    def get_block_by_number(self, number: BlockRef = None, full_transactions: bool = False) -> Dict[str, Any]:
        return self._call_found("eth_getBlockByNumber", block_tag(number), full_transactions)

    def get_validators(self, number: BlockRef = None) -> List[Validator]:
        return validators_from_result(self._call_found("eth_getValidator", block_tag(number)))

    def get_account_info(self, address: str, number: BlockRef = None) -> NodeAccount:
        return NodeAccount.from_dict(self._call_found("eth_getAccountInfo", checksum_address(address), block_tag(number)))

    def get_block_beneficiary_address_by_number(self, number: BlockRef = None) -> List[BeneficiaryAddress]:
        result = self._call_found("eth_getBlockBeneficiaryAddressByNumber", block_tag(number), True)
        return [BeneficiaryAddress.from_dict(b) for b in result]

    def query_miner_proxy(self, number: int, address: str) -> List[MinerProxy]:
        result = self._call("eth_queryMinerProxy", encode_quantity(number), checksum_address(address))
        return [MinerProxy.from_dict(p) for p in result or []]

    def get_active_live_pool(self, number: BlockRef = None) -> List[ActiveMiner]:
        return active_miners_from_result(self._call_found("eth_getActiveLivePool", block_tag(number)))

    def send_raw_transaction(self, raw_tx: str) -> str:
        tx_hash = self._call("eth_sendRawTransaction", raw_tx)
        if not isinstance(tx_hash, str):
            raise RemoteError(f"unexpected eth_sendRawTransaction result {tx_hash!r}", method="eth_sendRawTransaction")
        return tx_hash

    def deadline(self, offset: Optional[int] = None) -> str:
        """Block number (hex) before which a new authorization stays valid."""
        return encode_quantity(self.block_number() + (self.tx.deadline_offset if offset is None else offset))

    # authorizations for split-party trades

    def sign_buyer(self, amount: str, nft_address: str, exchanger: str, block_number: Optional[str] = None, seller: str = "") -> RoleAuthorization:
        return self.wallet.sign_buyer(amount, nft_address, exchanger, block_number if block_number is not None else self.deadline(), seller)

    def sign_seller1(self, amount: str, nft_address: str, exchanger: str, block_number: Optional[str] = None) -> RoleAuthorization:
        return self.wallet.sign_seller1(amount, nft_address, exchanger, block_number if block_number is not None else self.deadline())

    def sign_seller2(
        self,
        amount: str,
        royalty: str,
        meta_url: str,
        exclusive_flag: str,
        exchanger: str,
        block_number: Optional[str] = None,
    ) -> RoleAuthorization:
        return self.wallet.sign_seller2(amount, royalty, meta_url, exclusive_flag, exchanger, block_number if block_number is not None else self.deadline())

    def sign_exchanger(self, exchanger_owner: str, to: str, block_number: Optional[str] = None) -> RoleAuthorization:
        return self.wallet.sign_exchanger(exchanger_owner, to, block_number if block_number is not None else self.deadline())

    def sign_buyer_auth(self, exchanger: str, block_number: Optional[str] = None) -> RoleAuthorization:
        return self.wallet.sign_buyer_auth(exchanger, block_number if block_number is not None else self.deadline())

    def sign_seller_auth(self, exchanger: str, block_number: Optional[str] = None) -> RoleAuthorization:
        return self.wallet.sign_seller_auth(exchanger, block_number if block_number is not None else self.deadline())

    def sign_delegate(self, address: str, pledge_account: str) -> RoleAuthorization:
        return self.wallet.sign_delegate(address, pledge_account)

    # transactions

    def normal_transaction(self, to: str, value: int, data: Union[str, bytes] = b"") -> str:
        raw = data.encode("utf-8") if isinstance(data, str) else bytes(data)
        return self._send(to, value, raw, "normal")

    def mint(self, royalty: int, meta_url: str, exchanger: str = "") -> str:
        return self._submit(ActionKind.MINT, royalty=royalty, meta_url=meta_url, exchanger=exchanger)

    def transfer(self, nft_address: str, to: str) -> str:
        return self._submit(ActionKind.TRANSFER, to=to, nft_address=nft_address)

    def author(self, nft_address: str, to: str) -> str:
        return self._submit(ActionKind.AUTHOR, to=to, nft_address=nft_address)

    def author_revoke(self, nft_address: str, to: str) -> str:
        return self._submit(ActionKind.AUTHOR_REVOKE, to=to, nft_address=nft_address)

    def account_author(self, to: str) -> str:
        return self._submit(ActionKind.ACCOUNT_AUTHOR, to=to)

    def account_author_revoke(self, to: str) -> str:
        return self._submit(ActionKind.ACCOUNT_AUTHOR_REVOKE, to=to)

    def snft_to_erb(self, nft_address: str) -> str:
        return self._submit(ActionKind.SNFT_TO_ERB, nft_address=nft_address)

    def token_pledge(
        self,
        to: str,
        value: int,
        proxy_address: str = "",
        name: str = "",
        url: str = "",
        fee_rate: Optional[int] = None,
        proxy_sign: str = "",
    ) -> str:
        return self._submit(
            ActionKind.TOKEN_PLEDGE,
            to=to,
            value=value,
            proxy_address=proxy_address,
            name=name,
            url=url,
            fee_rate=fee_rate,
            proxy_sign=proxy_sign,
        )

    def token_revokes_pledge(self, to: str, value: int) -> str:
        return self._submit(ActionKind.TOKEN_REVOKES_PLEDGE, to=to, value=value)

    def open(self, fee_rate: int, name: str, url: str) -> str:
        return self._submit(ActionKind.OPEN, fee_rate=fee_rate, name=name, url=url)

    def close_exchanger(self) -> str:
        return self._submit(ActionKind.CLOSE)

    def insert_nft_block(self, directory: str, start_index: str, number: int, royalty: int, creator: str) -> str:
        return self._submit(
            ActionKind.INSERT_NFT_BLOCK,
            dir=directory,
            start_index=start_index,
            number=number,
            royalty=royalty,
            creator=creator,
        )

    def transaction_nft(self, buyer: AuthorizationLike, to: str) -> str:
        return self._submit(ActionKind.TRANSACTION_NFT, to=to, roles={"buyer": buyer})

    def buyer_initiating_transaction(self, seller1: AuthorizationLike) -> str:
        seller = transported("seller1", seller1)
        return self._submit(
            ActionKind.BUYER_INITIATING_TRANSACTION,
            to=seller["exchanger"],
            value=amount_to_wei(seller["price"]),
            roles={"seller1": seller},
        )

    def foundry_trade_buyer(self, seller2: AuthorizationLike) -> str:
        seller = transported("seller2", seller2)
        return self._submit(
            ActionKind.FOUNDRY_TRADE_BUYER,
            to=seller["exchanger"],
            value=amount_to_wei(seller["price"]),
            roles={"seller2": seller},
        )

    def foundry_exchange(self, buyer: AuthorizationLike, seller2: AuthorizationLike, to: str) -> str:
        return self._submit(ActionKind.FOUNDRY_EXCHANGE, to=to, roles={"buyer": buyer, "seller2": seller2})

    def nft_exchange_match(self, buyer: AuthorizationLike, seller1: AuthorizationLike, exchanger_auth: AuthorizationLike, to: str) -> str:
        return self._submit(
            ActionKind.NFT_EXCHANGE_MATCH,
            to=to,
            roles={"buyer": buyer, "seller1": seller1, "exchanger_auth": exchanger_auth},
        )

    def foundry_exchange_initiated(self, buyer: AuthorizationLike, seller2: AuthorizationLike, exchanger_auth: AuthorizationLike, to: str) -> str:
        return self._submit(
            ActionKind.FOUNDRY_EXCHANGE_INITIATED,
            to=to,
            roles={"buyer": buyer, "seller2": seller2, "exchanger_auth": exchanger_auth},
        )

    def nft_does_not_authorize_exchanges(self, buyer: AuthorizationLike, seller1: AuthorizationLike, to: str) -> str:
        return self._submit(ActionKind.NFT_DOES_NOT_AUTHORIZE_EXCHANGES, to=to, roles={"buyer": buyer, "seller1": seller1})

    def additional_pledge_amount(self, value: int) -> str:
        return self._submit(ActionKind.ADDITIONAL_PLEDGE_AMOUNT, value=value)

    def revokes_pledge_amount(self, value: int) -> str:
        return self._submit(ActionKind.REVOKES_PLEDGE_AMOUNT, value=value)

    def vote_official_nft(self, directory: str, start_index: str, number: int, royalty: int, creator: str) -> str:
        return self._submit(
            ActionKind.VOTE_OFFICIAL_NFT,
            dir=directory,
            start_index=start_index,
            number=number,
            royalty=royalty,
            creator=creator,
        )

    def vote_official_nft_by_approved_exchanger(
        self,
        directory: str,
        start_index: str,
        number: int,
        royalty: int,
        creator: str,
        exchanger_auth: AuthorizationLike,
    ) -> str:
        return self._submit(
            ActionKind.VOTE_OFFICIAL_NFT_BY_APPROVED_EXCHANGER,
            roles={"exchanger_auth": exchanger_auth},
            dir=directory,
            start_index=start_index,
            number=number,
            royalty=royalty,
            creator=creator,
        )

    def unfrozen_account(self) -> str:
        return self._submit(ActionKind.UNFROZEN_ACCOUNT)

    def weight_redemption(self) -> str:
        return self._submit(ActionKind.WEIGHT_REDEMPTION)

    def batch_sell_transfer(
        self,
        buyer: AuthorizationLike,
        seller1: AuthorizationLike,
        buyer_auth: AuthorizationLike,
        seller_auth: AuthorizationLike,
        exchanger_auth: AuthorizationLike,
        to: str,
    ) -> str:
        return self._submit(
            ActionKind.BATCH_SELL_TRANSFER,
            to=to,
            roles={
                "buyer": buyer,
                "seller1": seller1,
                "buyer_auth": buyer_auth,
                "seller_auth": seller_auth,
                "exchanger_auth": exchanger_auth,
            },
        )

    def force_buying_transfer(self, buyer: AuthorizationLike, buyer_auth: AuthorizationLike, exchanger_auth: AuthorizationLike, to: str) -> str:
        return self._submit(
            ActionKind.FORCE_BUYING_TRANSFER,
            to=to,
            roles={"buyer": buyer, "buyer_auth": buyer_auth, "exchanger_auth": exchanger_auth},
        )

    def extract_erb(self) -> str:
        return self._submit(ActionKind.EXTRACT_ERB)

    def account_delegate(self, proxy_sign: Union[RoleAuthorization, str], proxy_address: str) -> str:
        if isinstance(proxy_sign, RoleAuthorization):
            if proxy_sign.role != Delegate.role:
                raise EncodingError(f"expected a delegate authorization, got {proxy_sign.role}")
            sig = proxy_sign.signature.hex()
        else:
            sig = Signature.from_hex(proxy_sign).hex()
        return self._submit(ActionKind.ACCOUNT_DELEGATE, proxy_address=proxy_address, proxy_sign=sig)

    # plumbing

    def _call(self, method: str, *params: Any) -> Any:
        if self.rpc is None:
            raise WormholesError(f"{method}: client has no endpoint; it can only sign")
        return self.rpc.call(method, *params)

    def _call_found(self, method: str, *params: Any) -> Any:
        result = self._call(method, *params)
        if result is None:
            raise NotFoundError(method, params)
        return result

    def _quantity(self, method: str, result: Any) -> int:
        try:
            return decode_quantity(result)
        except EncodingError as exc:
            raise RemoteError(f"{method}: invalid quantity {result!r}", method=method) from exc

    def _submit(
        self,
        action: ActionKind,
        to: Optional[str] = None,
        value: int = 0,
        roles: Optional[Mapping[str, AuthorizationLike]] = None,
        **params: Any,
    ) -> str:
        payload = compose_payload(action, self.tx.version, roles, **{k: v for k, v in params.items() if v != ""})
        return self._send(to, value, encode_tx_data(payload), action.name)

    def _send(self, to: Optional[str], value: int, data: bytes, label: str) -> str:
        encode_quantity(value)
        recipient = checksum_address(self.address if to is None else to)
        tx = {
            "nonce": self.pending_nonce_at(),
            "gasPrice": self.suggest_gas_price(),
            "gas": self.tx.gas_limit,
            "to": recipient,
            "value": value,
            "data": data,
            "chainId": self.chain_id(),
        }
        signed = Account.sign_transaction(tx, self.wallet.signer.key_bytes)
        tx_hash = self.send_raw_transaction("0x" + bytes(signed.raw_transaction).hex())
        logger.debug("submitted %s to=%s nonce=%d tx=%s", label, recipient, tx["nonce"], tx_hash)
        return tx_hash
