from __future__ import annotations

import os

from wormholes_client import RoleAuthorization, Wallet, WormholesClient


def main() -> None:
    # The exchanger runs the node connection; buyer and seller only sign offline.
    exchanger = WormholesClient(
        os.getenv("WORMHOLES_PRIVATE_KEY", ""),
        os.getenv("WORMHOLES_ENDPOINT", "http://localhost:8545"),
    )
    buyer = Wallet(os.getenv("WORMHOLES_BUYER_KEY", ""))
    seller = Wallet(os.getenv("WORMHOLES_SELLER_KEY", ""))

    nft_address = os.getenv("WORMHOLES_NFT_ADDRESS", "0x0000000000000000000000000000000000000001")
    price = os.getenv("WORMHOLES_PRICE", "0x38D7EA4C68000")

    with exchanger:
        deadline = exchanger.deadline()
        buyer_json = buyer.sign_buyer(price, nft_address, exchanger.address, deadline).to_json()
        seller_json = seller.sign_seller1(price, nft_address, exchanger.address, deadline).to_json()
        exchange_auth = exchanger.sign_exchanger(exchanger.address, exchanger.address, deadline)

        received = RoleAuthorization.from_json("buyer", buyer_json)
        print("buyer:", received.signer_address())

        tx_hash = exchanger.nft_exchange_match(buyer_json, seller_json, exchange_auth, received.signer_address())
        receipt = exchanger.wait_for_receipt(tx_hash)
        print("tx:", tx_hash, "status:", receipt.get("status"))


if __name__ == "__main__":
    main()
