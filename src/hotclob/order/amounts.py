"""
金额定点编码

交易所以 6 位小数 (USDC 精度) 的整数表示金额。
只截断不四舍五入: 编码结果永远不会超过调用方的意图。
"""

from decimal import ROUND_DOWN, Decimal, InvalidOperation, localcontext

from hotclob.core.exceptions import ValidationError

USDC_DECIMALS = 6
LOT_SIZE_SCALE = 2
MAX_FIXED_POINT = 2**128 - 1

# 足够容纳 u128 + 6 位小数
_PRECISION = 60


def decimal_scale(value: Decimal) -> int:
    """小数位数 (保留书写时的尾随零, "10.00" -> 2)"""
    exponent = value.as_tuple().exponent
    if not isinstance(exponent, int):
        return 0
    return max(0, -exponent)


def truncate(value: Decimal, scale: int) -> Decimal:
    """截断到 `scale` 位小数; 位数不超过 `scale` 时原样返回"""
    if decimal_scale(value) <= scale:
        return value
    with localcontext() as ctx:
        ctx.prec = _PRECISION
        return value.quantize(Decimal(1).scaleb(-scale), rounding=ROUND_DOWN)


def to_fixed_point(value: Decimal) -> int:
    """去掉尾随零, 截断到 6 位小数, 转为定点整数"""
    if not value.is_finite():
        raise ValidationError(f"unable to represent amount as u128: {value}", field="amount")
    if value.is_signed() and not value.is_zero():
        raise ValidationError(f"amount cannot be negative: {value}", field="amount")

    try:
        with localcontext() as ctx:
            ctx.prec = _PRECISION
            truncated = truncate(value.normalize(), USDC_DECIMALS)
            fixed = int(truncated.scaleb(USDC_DECIMALS))
    except InvalidOperation as e:
        raise ValidationError(f"unable to represent amount as u128: {value}", field="amount") from e

    if fixed > MAX_FIXED_POINT:
        raise ValidationError(f"unable to represent amount as u128: {value}", field="amount")
    return fixed
