"""
限价单构建与校验

LimitOrderRequest + 已解析策略 -> Order (待签名)

校验顺序:
1. 未设置 order_type 时默认 GTC
2. 只有 GTD 订单允许非零 expiration
3. postOnly 只支持 GTC / GTD
4. price / size 必须是有限值; price >= 0, size > 0
5. size 最多 2 位小数 (lot size)
6. price 小数位数 <= tick size 小数位数
7. tick <= price <= 1 - tick
8. token_id / nonce / fee_rate_bps 必须落在 uint256 范围内
9. maker/taker 数量由 price * size 推导
10. expiration 转为 unix 秒
11. 随机 salt, 掩码到 53 位
"""

import logging
import random
import time
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Tuple

from hotclob.core.exceptions import ValidationError
from hotclob.core.time import UNIX_EPOCH, as_utc, to_unix_seconds
from hotclob.order.amounts import LOT_SIZE_SCALE, decimal_scale, to_fixed_point, truncate
from hotclob.order.types import (
    ZERO_ADDRESS,
    LimitOrderRequest,
    Order,
    OrderType,
    Side,
    SignatureType,
    TickSize,
    checksum_address,
)

logger = logging.getLogger(__name__)

# 后端以 IEEE 754 double 解析 salt, 只有 53 位整数精度
SALT_MASK = (1 << 53) - 1

MAX_UINT256 = 2**256 - 1


def generate_seed() -> int:
    return round(time.time() * random.random())


def generate_salt() -> int:
    return generate_seed() & SALT_MASK


@dataclass(frozen=True)
class OrderOptions:
    """已解析的订单类型/postOnly"""
    order_type: OrderType
    post_only: bool


class OrderBuilder:
    """
    订单构建器

    maker 为 funder (出资账户), signer 为钱包地址。
    """

    def __init__(self, maker: str, signer: str, signature_type: SignatureType):
        self.maker = maker
        self.signer = signer
        self.signature_type = signature_type

    def resolve_options(self, request: LimitOrderRequest) -> OrderOptions:
        order_type = request.order_type or OrderType.GTC
        post_only = bool(request.post_only)

        if order_type is not OrderType.GTD and as_utc(request.expiration) > UNIX_EPOCH:
            raise ValidationError(
                "Only GTD orders may have a non-zero expiration", field="expiration"
            )
        if post_only and order_type not in (OrderType.GTC, OrderType.GTD):
            raise ValidationError(
                "postOnly is only supported for GTC and GTD orders", field="post_only"
            )
        return OrderOptions(order_type=order_type, post_only=post_only)

    def build(
        self,
        request: LimitOrderRequest,
        tick_size: TickSize,
        fee_rate_bps: int,
        options: Optional[OrderOptions] = None,
    ) -> Order:
        """options 已由调用方解析时不再重复校验"""
        if options is None:
            self.resolve_options(request)

        price = request.price
        size = request.size

        if not price.is_finite():
            raise ValidationError(f"Unable to build Order due to non-finite price {price}", field="price")
        if not size.is_finite():
            raise ValidationError(f"Unable to build Order due to non-finite size {size}", field="size")
        if price.is_signed() and not price.is_zero():
            raise ValidationError(
                f"Unable to build Order due to negative price {price}", field="price"
            )
        if size.is_zero() or size.is_signed():
            raise ValidationError(
                f"Unable to build Order due to negative size {size}", field="size"
            )
        if decimal_scale(size) > LOT_SIZE_SCALE:
            raise ValidationError(
                f"Unable to build Order: Size {size} has {decimal_scale(size)} decimal places. "
                f"Maximum lot size is {LOT_SIZE_SCALE}",
                field="size",
            )

        minimum_tick_size = tick_size.as_decimal()
        decimals = decimal_scale(minimum_tick_size)

        if decimal_scale(price) > decimals:
            raise ValidationError(
                f"Unable to build Order: Price {price} has {decimal_scale(price)} decimal places. "
                f"Minimum tick size {minimum_tick_size} has {decimals} decimal places. "
                "Price decimal places <= minimum tick size decimal places",
                field="price",
            )
        if price < minimum_tick_size or price > Decimal(1) - minimum_tick_size:
            raise ValidationError(
                f"Price {price} is too small or too large for the minimum tick size {minimum_tick_size}",
                field="price",
            )

        token_id = _uint256(request.token_id, "token_id")
        nonce = _uint256(request.nonce or 0, "nonce")
        fee_rate_bps = _uint256(fee_rate_bps, "fee_rate_bps")

        maker_amount, taker_amount = self.amounts(request.side, price, size, decimals)

        expiration = to_unix_seconds(as_utc(request.expiration))
        if expiration is None:
            raise ValidationError(
                f"Unable to represent expiration {request.expiration} as a u64",
                field="expiration",
            )

        order = Order(
            salt=generate_salt(),
            maker=self.maker,
            signer=self.signer,
            taker=checksum_address(request.taker, "taker") if request.taker else ZERO_ADDRESS,
            token_id=token_id,
            maker_amount=to_fixed_point(maker_amount),
            taker_amount=to_fixed_point(taker_amount),
            expiration=expiration,
            nonce=nonce,
            fee_rate_bps=fee_rate_bps,
            side=request.side,
            signature_type=self.signature_type,
        )
        logger.debug(
            f"Built order token={order.token_id} side={order.side.value} "
            f"maker_amount={order.maker_amount} taker_amount={order.taker_amount}"
        )
        return order

    @staticmethod
    def amounts(side: Side, price: Decimal, size: Decimal, tick_decimals: int) -> Tuple[Decimal, Decimal]:
        """
        (maker_amount, taker_amount)

        BUY: 付出 price*size USDC, 得到 size 份额
        SELL: 付出 size 份额, 得到 price*size USDC
        """
        notional = truncate(size * price, tick_decimals + LOT_SIZE_SCALE)
        if side is Side.BUY:
            return notional, size
        if side is Side.SELL:
            return size, notional
        raise ValidationError(f"Invalid side: {side}", field="side")


def _uint256(value: int, field: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{field} must be an integer, got {value!r}", field=field)
    if value < 0 or value > MAX_UINT256:
        raise ValidationError(f"{field} {value} is out of uint256 range", field=field)
    return value
