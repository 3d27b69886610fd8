import json

import pytest

from wormholes_client import EncodingError, RoleAuthorization, Wallet, compose_payload, encode_tx_data
from wormholes_client.authorization import transported

BUYER_KEY = "057b05b9cff85c963c3ab90d26503700646781f938054171461b17ad5f7082db"
SELLER_KEY = "132a8ed2918b923a91c324d0e22a358ea6a82330a1faf956042f64bce8bf8e46"
EXCHANGER_KEY = "0bbbb60fa9ff05081a3b63aa8b043d1281cd860dc06d92800aee5b1fdf5bc8d7"
EXCHANGE_ADDRESS = "0xaECE03150f0A6565e8308E872Bf3Ec143A0b4879"
EXCHANGE_ADDRESS1 = "0xC83279D0fEdd3A814aBe250007c61E324Ba467E6"
NFT = "0x0000000000000000000000000000000000000004"


def test_to_dict_uses_transport_keys():
    auth = Wallet(BUYER_KEY).sign_buyer("0xde0b6b3a7640000", "", EXCHANGE_ADDRESS, "0xa", "")
    d = auth.to_dict()
    assert set(d) == {"price", "nft_address", "exchanger", "block_number", "seller", "sig"}
    assert d["price"] == "0xde0b6b3a7640000"
    assert d["nft_address"] == ""
    assert d["sig"] == auth.signature.hex()
    assert json.loads(auth.to_json()) == d
    assert auth.role == "buyer"


def test_to_json_is_stable():
    auth = Wallet(SELLER_KEY).sign_seller2("0x38D7EA4C68000", "0xa", "/ipfs/qqqqqqqqqq", "0", EXCHANGE_ADDRESS, "0xa")
    raw = auth.to_json()
    assert raw == auth.to_json()
    assert raw.startswith(b'{"block_number":"0xa","exchanger":')


def test_from_json_restores_the_authorization():
    wallet = Wallet(SELLER_KEY)
    auth = wallet.sign_seller1("0xde0b6b3a7640000", NFT, EXCHANGE_ADDRESS, "0xa")
    parsed = RoleAuthorization.from_json("seller1", auth.to_json().decode("utf-8"))
    assert parsed == auth
    assert parsed.signer_address() == wallet.address


def test_from_json_rejects_malformed_input():
    auth = Wallet(SELLER_KEY).sign_seller1("0xde0b6b3a7640000", NFT, EXCHANGE_ADDRESS, "0xa")
    d = auth.to_dict()

    with pytest.raises(EncodingError):
        RoleAuthorization.from_json("seller1", b"{not json")
    with pytest.raises(EncodingError):
        RoleAuthorization.from_json("seller1", b"[]")
    with pytest.raises(EncodingError):
        RoleAuthorization.from_dict("seller1", {k: v for k, v in d.items() if k != "sig"})
    with pytest.raises(EncodingError):
        RoleAuthorization.from_dict("seller1", dict(d, sig="0x1234"))
    with pytest.raises(EncodingError):
        RoleAuthorization.from_dict("seller1", dict(d, price=10))
    with pytest.raises(EncodingError):
        RoleAuthorization.from_dict("buyer", d)


def test_composition_preserves_each_role_unchanged():
    buyer = Wallet(BUYER_KEY).sign_buyer("0xde0b6b3a7640000", NFT, EXCHANGE_ADDRESS, "0xa", "")
    seller = Wallet(SELLER_KEY).sign_seller1("0xde0b6b3a7640000", NFT, EXCHANGE_ADDRESS, "0xa")
    exchange = Wallet(EXCHANGER_KEY).sign_exchanger(EXCHANGE_ADDRESS, EXCHANGE_ADDRESS1, "0xa")

    payload = compose_payload(
        18,
        "v0.0.1",
        roles={"buyer": buyer.to_json(), "seller1": seller.to_json().decode("utf-8"), "exchanger_auth": exchange},
    )
    assert payload["type"] == 18
    assert payload["version"] == "v0.0.1"
    assert payload["buyer"] == buyer.to_dict()
    assert payload["seller1"] == seller.to_dict()
    assert payload["exchanger_auth"] == exchange.to_dict()

    for role, auth in (("buyer", buyer), ("seller1", seller), ("exchanger_auth", exchange)):
        restored = RoleAuthorization.from_dict(role, payload[role])
        assert restored.message.values() == auth.message.values()
        assert restored.signer_address() == auth.signer_address()


def test_transported_keeps_foreign_values_verbatim():
    seller = Wallet(SELLER_KEY).sign_seller1("0x0a", NFT, EXCHANGE_ADDRESS, "0xA")
    d = seller.to_dict()
    assert transported("seller1", d) == d
    assert transported("seller1", d) is not d


def test_transported_rejects_role_mismatch():
    buyer = Wallet(BUYER_KEY).sign_buyer("0x1", NFT, EXCHANGE_ADDRESS, "0xa")
    with pytest.raises(EncodingError):
        transported("seller1", buyer)


def test_encode_tx_data():
    payload = compose_payload(1, "v0.0.1", nft_address=NFT, skipped=None)
    data = encode_tx_data(payload)
    assert data.startswith(b"wormholes:")
    assert json.loads(data[len(b"wormholes:"):]) == {"type": 1, "version": "v0.0.1", "nft_address": NFT}
