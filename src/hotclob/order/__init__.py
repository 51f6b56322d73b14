"""Order construction, validation and signing."""

from .types import (
    ApiCredentials,
    LimitOrderOverrides,
    LimitOrderRequest,
    Order,
    OrderType,
    PostOrderResponse,
    Side,
    SignatureType,
    SignedOrder,
    TickSize,
)
from .policy import FixedOrFetch, HotPathPolicies, TimePolicy, resolve_timestamp
from .amounts import to_fixed_point
from .builder import OrderBuilder, generate_salt
from .signing import POLYGON, WalletSigner, contract_config, sign_order

__all__ = [
    "ApiCredentials",
    "LimitOrderOverrides",
    "LimitOrderRequest",
    "Order",
    "OrderType",
    "PostOrderResponse",
    "Side",
    "SignatureType",
    "SignedOrder",
    "TickSize",
    "FixedOrFetch",
    "HotPathPolicies",
    "TimePolicy",
    "resolve_timestamp",
    "to_fixed_point",
    "OrderBuilder",
    "generate_salt",
    "POLYGON",
    "WalletSigner",
    "contract_config",
    "sign_order",
]
