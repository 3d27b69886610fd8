from .authorization import RoleAuthorization, compose_payload, encode_tx_data
from .client import ActionKind, TxConfig, WormholesClient, WormholesVersion
from .errors import EncodingError, NotFoundError, PrivateKeyError, RemoteError, WormholesError
from .messages import Buyer, BuyerAuth, Delegate, ExchangerAuth, SellerAuth, Seller1, Seller2, message_digest
from .rpc import RPCClient
from .signer import Signature, Signer, normalize_recovery_id, recover_address
from .wallet import Wallet

__version__ = "0.1.0"

__all__ = [
    "ActionKind",
    "Buyer",
    "BuyerAuth",
    "Delegate",
    "EncodingError",
    "ExchangerAuth",
    "NotFoundError",
    "PrivateKeyError",
    "RPCClient",
    "RemoteError",
    "RoleAuthorization",
    "SellerAuth",
    "Seller1",
    "Seller2",
    "Signature",
    "Signer",
    "TxConfig",
    "Wallet",
    "WormholesClient",
    "WormholesError",
    "WormholesVersion",
    "compose_payload",
    "encode_tx_data",
    "message_digest",
    "normalize_recovery_id",
    "recover_address",
]
