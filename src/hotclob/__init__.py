"""
hotclob

Polymarket CLOB 限价单热路径客户端: 订单构建、EIP-712 签名、L1/L2 认证与提交。
"""

__version__ = "0.1.0"

# Lazy imports to avoid circular dependencies
def __getattr__(name):
    if name == "HotPathClient":
        from .connection import HotPathClient
        return HotPathClient
    elif name == "HotPathConfig":
        from .core import HotPathConfig
        return HotPathConfig
    elif name == "connection":
        from . import connection
        return connection
    elif name == "order":
        from . import order
        return order
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

__all__ = [
    "__version__",
    "HotPathClient",
    "HotPathConfig",
    "connection",
    "order",
]
