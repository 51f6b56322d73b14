"""Core configuration and exceptions."""

from .exceptions import (
    ErrorKind,
    HotClobError,
    ConfigurationError,
    UnsupportedPolicyError,
    ValidationError,
    MissingContractConfigError,
    StatusError,
    TransportError,
)

_CONFIG_NAMES = ("Config", "HotPathConfig", "RawSigningConfig", "load_config")


# config 依赖 hotclob.order, 延迟导入以免 order.types -> core 形成循环
def __getattr__(name):
    if name in _CONFIG_NAMES:
        from . import config
        return getattr(config, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "ErrorKind",
    "HotClobError",
    "ConfigurationError",
    "UnsupportedPolicyError",
    "ValidationError",
    "MissingContractConfigError",
    "StatusError",
    "TransportError",
    "Config",
    "HotPathConfig",
    "RawSigningConfig",
    "load_config",
]
