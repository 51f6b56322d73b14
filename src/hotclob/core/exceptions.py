"""
hotclob 自定义异常

四类错误 (ErrorKind):
- CONFIGURATION: 配置错误 (不支持的链、EOA 签名模式、未实现的策略)，立即失败，不重试
- VALIDATION: 订单参数错误 (价格/数量/精度/过期时间/方向)，调用方需修正输入
- STATUS: HTTP 非 2xx 响应
- TRANSPORT: 网络或响应解析失败
"""

from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    """错误分类"""
    CONFIGURATION = "configuration"
    VALIDATION = "validation"
    STATUS = "status"
    TRANSPORT = "transport"


class HotClobError(Exception):
    """hotclob 基础异常类"""

    kind: ErrorKind = ErrorKind.VALIDATION

    def __init__(self, message: str, code: Optional[str] = None):
        self.message = message
        self.code = code
        super().__init__(self.message)


class ConfigurationError(HotClobError):
    """配置错误 (链 ID、签名类型、funder、策略)"""

    kind = ErrorKind.CONFIGURATION

    def __init__(self, message: str, field: str = ""):
        super().__init__(message, code="CONFIGURATION_ERROR")
        self.field = field


class UnsupportedPolicyError(ConfigurationError):
    """FetchAndCache 策略尚未实现"""

    def __init__(self, slot: str):
        super().__init__(
            f"{slot} policy FetchAndCache is not implemented yet",
            field=slot,
        )
        self.slot = slot


class ValidationError(HotClobError):
    """参数验证错误"""

    kind = ErrorKind.VALIDATION

    def __init__(self, message: str, field: str = ""):
        super().__init__(message, code="VALIDATION_ERROR")
        self.field = field


class MissingContractConfigError(ValidationError):
    """(chain_id, neg_risk) 没有对应的合约地址"""

    def __init__(self, chain_id: int, neg_risk: bool):
        super().__init__(
            f"missing contract config for chain_id={chain_id}, neg_risk={neg_risk}",
            field="contract",
        )
        self.chain_id = chain_id
        self.neg_risk = neg_risk


class StatusError(HotClobError):
    """HTTP 非 2xx 响应"""

    kind = ErrorKind.STATUS

    def __init__(self, status: int, method: str, path: str, body: str = ""):
        super().__init__(
            f"{method} {path} failed with HTTP {status}: {body}",
            code="STATUS_ERROR",
        )
        self.status = status
        self.method = method
        self.path = path
        self.body = body


class TransportError(HotClobError):
    """网络或解析错误"""

    kind = ErrorKind.TRANSPORT

    def __init__(self, message: str, method: str = "", path: str = ""):
        super().__init__(message, code="TRANSPORT_ERROR")
        self.method = method
        self.path = path
