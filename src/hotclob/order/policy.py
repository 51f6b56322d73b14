"""
热路径默认策略

每个策略槽要么是固定值 (Fixed)，要么是 FetchAndCache。
FetchAndCache 目前只作为占位存在: 解析时总是抛出 UnsupportedPolicyError，
不做网络请求，也不做缓存。
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Generic, Optional, TypeVar

from hotclob.core.exceptions import ConfigurationError, UnsupportedPolicyError
from hotclob.core.time import unix_now
from hotclob.order.types import TickSize

T = TypeVar("T")

FETCH_AND_CACHE = "fetch_and_cache"


class PolicyMode(Enum):
    FIXED = "fixed"
    FETCH_AND_CACHE = FETCH_AND_CACHE


@dataclass(frozen=True)
class FixedOrFetch(Generic[T]):
    """固定值或 FetchAndCache 的标签联合"""
    mode: PolicyMode
    value: Optional[T] = None

    @classmethod
    def fixed(cls, value: T) -> "FixedOrFetch[T]":
        return cls(PolicyMode.FIXED, value)

    @classmethod
    def fetch_and_cache(cls) -> "FixedOrFetch[T]":
        return cls(PolicyMode.FETCH_AND_CACHE)

    def resolve(self, slot: str) -> T:
        if self.mode is PolicyMode.FIXED:
            return self.value
        raise UnsupportedPolicyError(slot)


class TimePolicy(Enum):
    """
    L1/L2 头部时间戳来源

    FIXED: 不请求 /time，直接使用本地 unix 时间。
    """
    FIXED = "fixed"
    FETCH_AND_CACHE = FETCH_AND_CACHE

    def ensure_supported(self) -> None:
        if self is TimePolicy.FETCH_AND_CACHE:
            raise UnsupportedPolicyError("time")


@dataclass(frozen=True)
class HotPathPolicies:
    """热路径默认值"""
    tick_size: FixedOrFetch[TickSize]
    neg_risk: FixedOrFetch[bool]
    fee_rate_bps: FixedOrFetch[int]
    time: TimePolicy = TimePolicy.FIXED

    def default_tick_size(self) -> TickSize:
        return self.tick_size.resolve("tick_size")

    def default_neg_risk(self) -> bool:
        return self.neg_risk.resolve("neg_risk")

    def default_fee_rate_bps(self) -> int:
        return self.fee_rate_bps.resolve("fee_rate_bps")

    def validate(self) -> None:
        """启动时一次性校验全部四个槽位"""
        self.time.ensure_supported()
        self.default_tick_size()
        self.default_neg_risk()
        self.default_fee_rate_bps()

    @classmethod
    def fixed(
        cls,
        tick_size: TickSize = TickSize.HUNDREDTH,
        neg_risk: bool = False,
        fee_rate_bps: int = 0,
    ) -> "HotPathPolicies":
        return cls(
            tick_size=FixedOrFetch.fixed(tick_size),
            neg_risk=FixedOrFetch.fixed(neg_risk),
            fee_rate_bps=FixedOrFetch.fixed(fee_rate_bps),
            time=TimePolicy.FIXED,
        )

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "HotPathPolicies":
        """
        从 YAML 字典解析

        policies:
          tick_size: "0.01"          # 或 fetch_and_cache
          neg_risk: false
          fee_rate_bps: 0
          time: fixed
        """
        data = data or {}

        def _slot(name: str, default: Any, parse) -> FixedOrFetch:
            raw = data.get(name, default)
            if isinstance(raw, str) and raw.strip().lower() == FETCH_AND_CACHE:
                return FixedOrFetch.fetch_and_cache()
            return FixedOrFetch.fixed(parse(raw))

        return cls(
            tick_size=_slot("tick_size", TickSize.HUNDREDTH.value, TickSize.parse),
            neg_risk=_slot("neg_risk", False, _parse_bool),
            fee_rate_bps=_slot("fee_rate_bps", 0, int),
            time=_parse_time_policy(data.get("time", TimePolicy.FIXED.value)),
        )


def _parse_time_policy(value: Any) -> TimePolicy:
    try:
        return TimePolicy(str(value).strip().lower())
    except ValueError as e:
        raise ConfigurationError(
            f"invalid time policy `{value}`; expected one of: fixed|fetch_and_cache",
            field="time",
        ) from e


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("1", "true", "yes", "on")


def resolve_timestamp(policy: TimePolicy, override: Optional[int] = None) -> int:
    """
    解析 L1/L2 头部时间戳

    override 优先，且不经过策略校验 (post_signed_order 依赖这一点传入预先确定的时间戳)。
    """
    if override is not None:
        return override
    policy.ensure_supported()
    return unix_now()
