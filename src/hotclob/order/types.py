"""
订单领域类型

- 枚举: Side / OrderType / SignatureType / TickSize
- 调用方输入: LimitOrderRequest / LimitOrderOverrides
- 交易所原生订单: Order / SignedOrder
- 凭证与响应: ApiCredentials / PostOrderResponse
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from decimal import Decimal
from enum import Enum, IntEnum
from typing import Any, Dict, List, Optional

from eth_utils import is_address, to_checksum_address

from hotclob.core.exceptions import ConfigurationError, ValidationError

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


def checksum_address(value: Any, field: str, error=ValidationError) -> str:
    """校验并转为 EIP-55 checksum 地址"""
    if not isinstance(value, str) or not is_address(value):
        raise error(f"invalid {field} address: {value!r}", field=field)
    return to_checksum_address(value)


class Side(Enum):
    BUY = "BUY"
    SELL = "SELL"

    @property
    def code(self) -> int:
        """EIP-712 uint8 值"""
        return 0 if self is Side.BUY else 1


class OrderType(Enum):
    GTC = "GTC"  # Good Till Cancel
    GTD = "GTD"  # Good Till Date
    FOK = "FOK"  # Fill or Kill
    FAK = "FAK"  # Fill and Kill


class SignatureType(IntEnum):
    EOA = 0
    POLY_PROXY = 1
    POLY_GNOSIS_SAFE = 2

    @classmethod
    def parse(cls, value: Any) -> "SignatureType":
        """解析配置中的签名类型 (eoa|proxy|gnosis 或 0|1|2)"""
        if isinstance(value, SignatureType):
            return value
        normalized = str(value).strip().lower()
        if normalized in ("0", "eoa"):
            return cls.EOA
        if normalized in ("1", "proxy"):
            return cls.POLY_PROXY
        if normalized in ("2", "gnosis", "gnosis_safe", "gnosissafe", "safe"):
            return cls.POLY_GNOSIS_SAFE
        raise ConfigurationError(
            f"invalid signature_type `{normalized}`; expected one of: eoa|proxy|gnosis",
            field="signature_type",
        )


class TickSize(Enum):
    TENTH = "0.1"
    HUNDREDTH = "0.01"
    THOUSANDTH = "0.001"
    TEN_THOUSANDTH = "0.0001"

    def as_decimal(self) -> Decimal:
        return Decimal(self.value)

    @classmethod
    def parse(cls, value: Any) -> "TickSize":
        if isinstance(value, TickSize):
            return value
        try:
            normalized = Decimal(str(value).strip()).normalize()
        except ArithmeticError:
            normalized = None
        for tick in cls:
            if normalized is not None and tick.as_decimal() == normalized:
                return tick
        raise ConfigurationError(
            f"invalid tick size `{value}`; expected one of: 0.1|0.01|0.001|0.0001",
            field="tick_size",
        )


@dataclass(frozen=True)
class ApiCredentials:
    """API Key/Secret/Passphrase (L2 认证)"""
    key: str
    secret: str = field(repr=False)
    passphrase: str = field(repr=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ApiCredentials":
        """解析交易所返回的凭证 JSON"""
        try:
            return cls(
                key=str(data["apiKey"]),
                secret=str(data["secret"]),
                passphrase=str(data["passphrase"]),
            )
        except (KeyError, TypeError) as e:
            raise ValidationError(f"malformed credentials payload: missing {e}", field="credentials") from e


@dataclass
class LimitOrderRequest:
    """单个限价单输入"""
    token_id: int
    side: Side
    price: Decimal
    size: Decimal
    nonce: Optional[int] = None
    expiration: Optional[datetime] = None
    taker: Optional[str] = None
    order_type: Optional[OrderType] = None
    post_only: Optional[bool] = None


@dataclass(frozen=True)
class LimitOrderOverrides:
    """
    单笔订单覆盖默认策略

    未设置的字段回退到 HotPathPolicies 的固定值。
    timestamp 直接用于 L2 头部，不经过 TimePolicy 校验。
    """
    tick_size: Optional[TickSize] = None
    neg_risk: Optional[bool] = None
    fee_rate_bps: Optional[int] = None
    timestamp: Optional[int] = None

    def with_tick_size(self, tick_size: TickSize) -> "LimitOrderOverrides":
        return replace(self, tick_size=tick_size)

    def with_neg_risk(self, neg_risk: bool) -> "LimitOrderOverrides":
        return replace(self, neg_risk=neg_risk)

    def with_fee_rate_bps(self, fee_rate_bps: int) -> "LimitOrderOverrides":
        return replace(self, fee_rate_bps=fee_rate_bps)

    def with_timestamp(self, timestamp: int) -> "LimitOrderOverrides":
        return replace(self, timestamp=timestamp)


@dataclass(frozen=True)
class Order:
    """交易所原生订单 (EIP-712 Order 结构)"""
    salt: int
    maker: str
    signer: str
    taker: str
    token_id: int
    maker_amount: int
    taker_amount: int
    expiration: int
    nonce: int
    fee_rate_bps: int
    side: Side
    signature_type: SignatureType

    def to_typed_data(self) -> Dict[str, Any]:
        """EIP-712 message 字段"""
        return {
            "salt": self.salt,
            "maker": self.maker,
            "signer": self.signer,
            "taker": self.taker,
            "tokenId": self.token_id,
            "makerAmount": self.maker_amount,
            "takerAmount": self.taker_amount,
            "expiration": self.expiration,
            "nonce": self.nonce,
            "feeRateBps": self.fee_rate_bps,
            "side": self.side.code,
            "signatureType": int(self.signature_type),
        }

    def to_dict(self) -> Dict[str, Any]:
        """
        POST /order 中的 order 字段

        uint256 字段序列化为十进制字符串; salt 保持数字 (后端按 IEEE 754 解析)。
        """
        return {
            "salt": self.salt,
            "maker": self.maker,
            "signer": self.signer,
            "taker": self.taker,
            "tokenId": str(self.token_id),
            "makerAmount": str(self.maker_amount),
            "takerAmount": str(self.taker_amount),
            "expiration": str(self.expiration),
            "nonce": str(self.nonce),
            "feeRateBps": str(self.fee_rate_bps),
            "side": self.side.value,
            "signatureType": int(self.signature_type),
        }


@dataclass(frozen=True)
class SignedOrder:
    """已签名订单 = POST /order 请求体"""
    order: Order
    signature: str
    order_type: OrderType
    owner: str
    post_only: Optional[bool] = None

    def to_dict(self) -> Dict[str, Any]:
        payload = self.order.to_dict()
        payload["signature"] = self.signature
        return {
            "order": payload,
            "owner": self.owner,
            "orderType": self.order_type.value,
            "postOnly": self.post_only,
        }


@dataclass
class PostOrderResponse:
    """POST /order 响应"""
    success: bool
    error_msg: str = ""
    order_id: str = ""
    status: str = ""
    making_amount: str = ""
    taking_amount: str = ""
    transactions_hashes: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PostOrderResponse":
        return cls(
            success=bool(data.get("success", False)),
            error_msg=data.get("errorMsg") or "",
            order_id=data.get("orderID") or data.get("orderId") or "",
            status=data.get("status") or "",
            making_amount=str(data.get("makingAmount") or ""),
            taking_amount=str(data.get("takingAmount") or ""),
            transactions_hashes=list(data.get("transactionsHashes") or []),
        )
