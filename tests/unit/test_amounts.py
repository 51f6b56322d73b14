"""
测试金额定点编码
"""

from decimal import Decimal

import pytest

from hotclob.core.exceptions import ValidationError
from hotclob.order.amounts import decimal_scale, to_fixed_point, truncate


class TestDecimalScale:
    def test_keeps_trailing_zeros(self):
        assert decimal_scale(Decimal("10.00")) == 2
        assert decimal_scale(Decimal("0.55")) == 2
        assert decimal_scale(Decimal("10")) == 0
        assert decimal_scale(Decimal("1E+2")) == 0


class TestTruncate:
    def test_truncates_toward_zero(self):
        assert truncate(Decimal("5.56789"), 4) == Decimal("5.5678")
        assert truncate(Decimal("0.99999"), 2) == Decimal("0.99")

    def test_short_values_unchanged(self):
        assert truncate(Decimal("5.5"), 4) == Decimal("5.5")


class TestToFixedPoint:
    """测试 6 位定点编码"""

    def test_basic(self):
        assert to_fixed_point(Decimal("5.5")) == 5_500_000
        assert to_fixed_point(Decimal("10.00")) == 10_000_000
        assert to_fixed_point(Decimal("0")) == 0

    def test_positive_exponent(self):
        assert to_fixed_point(Decimal("1E+2")) == 100_000_000

    def test_truncates_not_rounds(self):
        assert to_fixed_point(Decimal("1.1234569")) == 1_123_456
        assert to_fixed_point(Decimal("0.0000009")) == 0

    def test_idempotent_under_truncation(self):
        value = Decimal("3.14159265")
        once = to_fixed_point(value)
        again = to_fixed_point(Decimal(once).scaleb(-6))

        assert once == again == 3_141_592

    def test_negative_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            to_fixed_point(Decimal("-0.01"))

        assert "negative" in str(exc_info.value)
        assert "-0.01" in str(exc_info.value)

    def test_overflow_rejected(self):
        with pytest.raises(ValidationError):
            to_fixed_point(Decimal(2**128))

    def test_nan_rejected(self):
        with pytest.raises(ValidationError):
            to_fixed_point(Decimal("NaN"))
