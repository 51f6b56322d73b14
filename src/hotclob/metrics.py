"""
Prometheus 指标模块

热路径监控:
- 订单提交结果
- 签名耗时
- 凭证获取路径 (create / derive)
"""

import time

from prometheus_client import Counter, Histogram

# ============ 订单指标 ============
ORDERS_SUBMITTED = Counter(
    'hotclob_orders_submitted_total',
    'Total POST /order attempts by outcome',
    ['status']
)

ORDER_SIGN_TIME = Histogram(
    'hotclob_order_sign_seconds',
    'Time spent building and signing a limit order',
    buckets=(0.0005, 0.001, 0.0025, 0.005, 0.01, 0.025, 0.05, 0.1)
)

# ============ 认证指标 ============
CREDENTIAL_BOOTSTRAP = Counter(
    'hotclob_credential_bootstrap_total',
    'API credential acquisitions by path',
    ['path']
)


def record_submission(status: str) -> None:
    """记录订单提交结果"""
    ORDERS_SUBMITTED.labels(status=status).inc()


class SignTimer:
    """签名计时器"""

    def __enter__(self):
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, *args):
        ORDER_SIGN_TIME.observe(time.perf_counter() - self.start_time)
