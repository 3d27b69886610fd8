import pytest

from wormholes_client import (
    Buyer,
    BuyerAuth,
    Delegate,
    EncodingError,
    ExchangerAuth,
    Seller1,
    Seller2,
    compose_payload,
    message_digest,
)
from wormholes_client.messages import ROLES, canonical_message, role_class, sign_hash

EXCHANGER = "0x8b07aff2327a3B7e2876D899caFac99f7AE16B10"


def _buyer(**overrides) -> Buyer:
    fields = {
        "amount": "0xde0b6b3a7640000",
        "nft_address": "0x0000000000000000000000000000000000000002",
        "exchanger": EXCHANGER,
        "block_number": "0x677",
        "seller": "",
    }
    fields.update(overrides)
    return Buyer(**fields)


def test_canonical_message_concatenates_in_declared_order():
    buyer = _buyer()
    assert buyer.canonical() == (
        b"0xde0b6b3a7640000"
        b"0x0000000000000000000000000000000000000002"
        + EXCHANGER.encode()
        + b"0x677"
    )
    assert buyer.values() == ("0xde0b6b3a7640000", "0x0000000000000000000000000000000000000002", EXCHANGER, "0x677", "")


def test_sign_hash_uses_personal_message_prefix():
    from eth_utils import keccak

    assert sign_hash(b"abc") == keccak(b"\x19Ethereum Signed Message:\n3abc")
    assert len(sign_hash(b"")) == 32


def test_digest_is_deterministic():
    assert _buyer().digest() == _buyer().digest()
    assert _buyer().digest() == message_digest(_buyer().values())


def test_seller_field_changes_digest():
    d1 = _buyer(seller="").digest()
    d2 = _buyer(seller="0x00").digest()
    assert d1 != d2


def test_equivalent_hex_encodings_are_different_messages():
    assert _buyer(block_number="0xa").digest() != _buyer(block_number="0x0a").digest()


def test_every_field_position_is_significant():
    base = _buyer()
    for name, _ in Buyer.schema():
        changed = _buyer(**{name: getattr(base, name) + "1"})
        assert changed.digest() != base.digest(), name


def test_schemas_are_declared_statically():
    assert Buyer.schema() == (
        ("amount", "price"),
        ("nft_address", "nft_address"),
        ("exchanger", "exchanger"),
        ("block_number", "block_number"),
        ("seller", "seller"),
    )
    assert [k for _, k in Seller1.schema()] == ["price", "nft_address", "exchanger", "block_number"]
    assert [k for _, k in Seller2.schema()] == ["price", "royalty", "meta_url", "exclusive_flag", "exchanger", "block_number"]
    assert [k for _, k in ExchangerAuth.schema()] == ["exchanger_owner", "to", "block_number"]
    assert [k for _, k in BuyerAuth.schema()] == ["exchanger", "block_number"]
    assert [k for _, k in Delegate.schema()] == ["address", "pledge_account"]
    assert set(ROLES) == {"buyer", "seller1", "seller2", "exchanger_auth", "buyer_auth", "seller_auth", "delegate"}


def test_messages_are_immutable():
    buyer = _buyer()
    with pytest.raises(AttributeError):
        buyer.seller = "0x00"


def test_all_fields_are_mandatory():
    with pytest.raises(TypeError):
        Buyer("0x1", "", EXCHANGER, "0x677")


def test_non_string_field_is_an_encoding_error():
    with pytest.raises(EncodingError):
        _buyer(amount=1000000000000000000)
    with pytest.raises(EncodingError):
        _buyer(seller=None)
    with pytest.raises(EncodingError):
        canonical_message(["0x1", 2])


def test_empty_field_is_kept_in_transport_form():
    buyer = _buyer(nft_address="", seller="")
    seller = Seller1("0xde0b6b3a7640000", "", EXCHANGER, "0x677")
    assert buyer.to_dict()["seller"] == ""
    assert "seller" not in seller.to_dict()

    with_empty = compose_payload(14, "v0.0.1", roles=None, buyer=buyer.to_dict())
    without = compose_payload(14, "v0.0.1", roles=None, buyer=seller.to_dict())
    assert with_empty != without
    assert with_empty["buyer"]["seller"] == ""


def test_from_dict_requires_exact_keys():
    data = _buyer().to_dict()
    assert Buyer.from_dict(data) == _buyer()

    missing = dict(data)
    del missing["seller"]
    with pytest.raises(EncodingError):
        Buyer.from_dict(missing)

    extra = dict(data, royalty="0xa")
    with pytest.raises(EncodingError):
        Buyer.from_dict(extra)


def test_unknown_role():
    assert role_class("seller2") is Seller2
    with pytest.raises(EncodingError):
        role_class("auctioneer")
