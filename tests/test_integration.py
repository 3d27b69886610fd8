import os

import pytest

from wormholes_client import NotFoundError, RoleAuthorization, Wallet, WormholesClient


WORMHOLES_INTEGRATION = os.getenv("WORMHOLES_INTEGRATION") == "1"
WORMHOLES_ENDPOINT = os.getenv("WORMHOLES_ENDPOINT", "http://localhost:8545")
WORMHOLES_PRIVATE_KEY = os.getenv("WORMHOLES_PRIVATE_KEY", "")
WORMHOLES_BUYER_KEY = os.getenv("WORMHOLES_BUYER_KEY", "")


def _client(key: str = WORMHOLES_PRIVATE_KEY) -> WormholesClient:
    return WormholesClient(key, WORMHOLES_ENDPOINT, timeout_seconds=20)


@pytest.mark.skipif(not WORMHOLES_INTEGRATION, reason="set WORMHOLES_INTEGRATION=1")
def test_integration_node_queries():
    with _client() as client:
        assert client.chain_id() > 0
        assert client.block_number() > 0
        assert client.pending_nonce_at() >= 0
        assert client.balance(client.address) >= 0
        account = client.get_account_info(client.address)
        assert account.nonce >= 0
        with pytest.raises(NotFoundError):
            client.transaction_receipt("0x" + "00" * 32)


@pytest.mark.skipif(not (WORMHOLES_INTEGRATION and WORMHOLES_BUYER_KEY), reason="set WORMHOLES_INTEGRATION=1 and WORMHOLES_BUYER_KEY")
def test_integration_lazy_mint_trade():
    with _client() as exchanger:
        deadline = exchanger.deadline()
        seller = exchanger.sign_seller2("0x38D7EA4C68000", "0xa", "/ipfs/qqqqqqqqqq", "0", exchanger.address, deadline)
        buyer = Wallet(WORMHOLES_BUYER_KEY).sign_buyer("0x38D7EA4C68000", "", exchanger.address, deadline)

        received = RoleAuthorization.from_json("buyer", buyer.to_json())
        assert received.signer_address() == Wallet(WORMHOLES_BUYER_KEY).address

        tx_hash = exchanger.foundry_exchange(received, seller, received.signer_address())
        receipt = exchanger.wait_for_receipt(tx_hash, timeout_seconds=60)
        assert receipt["transactionHash"] == tx_hash
