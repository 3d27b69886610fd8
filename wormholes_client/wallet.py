from __future__ import annotations

from typing import Union

from .authorization import RoleAuthorization
from .messages import (
    Buyer,
    BuyerAuth,
    Delegate,
    ExchangerAuth,
    SellerAuth,
    Seller1,
    Seller2,
    SignableMessage,
    sign_hash,
)
from .signer import Signature, Signer


class Wallet:
    """Signs the roles of a trade offline; needs no node connection.

    Field values are passed through exactly as given. Amounts and block
    numbers are expected as ``0x`` hex strings, addresses as hex strings,
    and anything not known yet (e.g. the NFT address of a lazy trade) as
    ``""``.
    """

    def __init__(self, private_key: Union[str, bytes]):
        self.signer = Signer(private_key)

    @property
    def address(self) -> str:
        return self.signer.address

    def sign(self, data: bytes) -> Signature:
        return self.signer.sign_digest(sign_hash(data))

    def authorize(self, message: SignableMessage) -> RoleAuthorization:
        return RoleAuthorization(message=message, signature=self.signer.sign_digest(message.digest()))

    def sign_buyer(self, amount: str, nft_address: str, exchanger: str, block_number: str, seller: str = "") -> RoleAuthorization:
        return self.authorize(Buyer(amount, nft_address, exchanger, block_number, seller))

    def sign_seller1(self, amount: str, nft_address: str, exchanger: str, block_number: str) -> RoleAuthorization:
        return self.authorize(Seller1(amount, nft_address, exchanger, block_number))

    def sign_seller2(self, amount: str, royalty: str, meta_url: str, exclusive_flag: str, exchanger: str, block_number: str) -> RoleAuthorization:
        return self.authorize(Seller2(amount, royalty, meta_url, exclusive_flag, exchanger, block_number))

    def sign_exchanger(self, exchanger_owner: str, to: str, block_number: str) -> RoleAuthorization:
        return self.authorize(ExchangerAuth(exchanger_owner, to, block_number))

    def sign_buyer_auth(self, exchanger: str, block_number: str) -> RoleAuthorization:
        return self.authorize(BuyerAuth(exchanger, block_number))

    def sign_seller_auth(self, exchanger: str, block_number: str) -> RoleAuthorization:
        return self.authorize(SellerAuth(exchanger, block_number))

    def sign_delegate(self, address: str, pledge_account: str) -> RoleAuthorization:
        return self.authorize(Delegate(address, pledge_account))
