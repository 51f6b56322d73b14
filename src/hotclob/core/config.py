"""
hotclob 配置管理

支持 YAML 配置文件和环境变量覆盖。
HotPathConfig 在构造时完成全部校验 (链、签名类型、funder、策略),
配置错误在任何网络请求之前暴露。
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from hotclob.core.exceptions import ConfigurationError
from hotclob.order.policy import HotPathPolicies
from hotclob.order.signing import POLYGON
from hotclob.order.types import ZERO_ADDRESS, ApiCredentials, SignatureType, checksum_address

logger = logging.getLogger(__name__)

DEFAULT_HOST = "https://clob.polymarket.com"


@dataclass
class RawSigningConfig:
    """应用层传入的原始签名配置"""
    private_key: str = field(repr=False)
    signature_type: str
    funder: str


@dataclass
class HotPathConfig:
    """热路径启动配置"""
    host: str
    chain_id: int
    private_key: str = field(repr=False)
    signature_type: SignatureType
    funder: str
    nonce: Optional[int] = None
    policies: HotPathPolicies = field(default_factory=HotPathPolicies.fixed)

    def __post_init__(self):
        if self.chain_id != POLYGON:
            raise ConfigurationError(
                f"hotpath currently supports Polygon only, got chain_id={self.chain_id}",
                field="chain_id",
            )

        self.signature_type = SignatureType.parse(self.signature_type)
        if self.signature_type is SignatureType.EOA:
            raise ConfigurationError(
                "hotpath config expects proxy signatures (Proxy/GnosisSafe), got Eoa",
                field="signature_type",
            )

        self.funder = checksum_address(self.funder, "funder", error=ConfigurationError)
        if self.funder == ZERO_ADDRESS:
            raise ConfigurationError(
                "hotpath config requires non-zero funder for proxy signatures",
                field="funder",
            )

        if not self.private_key:
            raise ConfigurationError("private key is required", field="private_key")

        self.policies.validate()

    @classmethod
    def from_raw(
        cls,
        host: str,
        chain_id: int,
        raw: RawSigningConfig,
        policies: Optional[HotPathPolicies] = None,
        nonce: Optional[int] = None,
    ) -> "HotPathConfig":
        return cls(
            host=host,
            chain_id=chain_id,
            private_key=raw.private_key,
            signature_type=raw.signature_type,
            funder=raw.funder,
            nonce=nonce,
            policies=policies or HotPathPolicies.fixed(),
        )


@dataclass
class Config:
    """hotclob 主配置 (未校验的原始值)"""
    host: str = DEFAULT_HOST
    chain_id: int = POLYGON
    nonce: Optional[int] = None

    # 签名配置
    private_key: str = field(default="", repr=False)
    signature_type: str = "proxy"
    funder: str = ""

    # 已有 API 凭证 (可选, 提供时跳过 bootstrap)
    api_key: str = ""
    api_secret: str = field(default="", repr=False)
    api_passphrase: str = field(default="", repr=False)

    # 策略配置 (YAML passthrough)
    policies: Dict[str, Any] = field(default_factory=dict)

    # 日志配置
    log_level: str = "INFO"
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    @classmethod
    def from_yaml(cls, path: str) -> "Config":
        """从 YAML 文件加载配置"""
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)

        return cls._from_dict(data if isinstance(data, dict) else {})

    @classmethod
    def from_env(cls) -> "Config":
        """从环境变量加载配置"""
        config = cls()
        config.apply_env()
        return config

    def apply_env(self) -> None:
        """环境变量覆盖"""
        if host := os.getenv("HOTCLOB_HOST"):
            self.host = host
        if chain_id := os.getenv("HOTCLOB_CHAIN_ID"):
            self.chain_id = _parse_int(chain_id, "chain_id")
        if nonce := os.getenv("HOTCLOB_NONCE"):
            self.nonce = _parse_int(nonce, "nonce")

        if private_key := os.getenv("HOTCLOB_PRIVATE_KEY"):
            self.private_key = private_key
        if signature_type := os.getenv("HOTCLOB_SIGNATURE_TYPE"):
            self.signature_type = signature_type
        if funder := os.getenv("HOTCLOB_FUNDER"):
            self.funder = funder

        if api_key := os.getenv("HOTCLOB_API_KEY"):
            self.api_key = api_key
        if api_secret := os.getenv("HOTCLOB_API_SECRET"):
            self.api_secret = api_secret
        if api_passphrase := os.getenv("HOTCLOB_API_PASSPHRASE"):
            self.api_passphrase = api_passphrase

        if log_level := os.getenv("LOG_LEVEL"):
            self.log_level = log_level

    @classmethod
    def _from_dict(cls, data: Dict) -> "Config":
        """从字典创建配置"""
        config = cls()

        config.host = data.get("host", DEFAULT_HOST)
        config.chain_id = _parse_int(data.get("chain_id", POLYGON), "chain_id")
        if data.get("nonce") is not None:
            config.nonce = _parse_int(data["nonce"], "nonce")

        # 签名配置
        signing = data.get("signing") or {}
        config.private_key = str(signing.get("private_key", ""))
        config.signature_type = str(signing.get("signature_type", "proxy"))
        config.funder = str(signing.get("funder", ""))

        # API 凭证
        credentials = data.get("credentials") or {}
        config.api_key = str(credentials.get("api_key", ""))
        config.api_secret = str(credentials.get("api_secret", ""))
        config.api_passphrase = str(credentials.get("api_passphrase", ""))

        config.policies = data.get("policies") or {}

        # 日志配置
        config.log_level = data.get("log_level", "INFO")

        return config

    @property
    def signing(self) -> RawSigningConfig:
        return RawSigningConfig(
            private_key=self.private_key,
            signature_type=self.signature_type,
            funder=self.funder,
        )

    @property
    def credentials(self) -> Optional[ApiCredentials]:
        """三项都配置时返回凭证"""
        if self.api_key and self.api_secret and self.api_passphrase:
            return ApiCredentials(
                key=self.api_key, secret=self.api_secret, passphrase=self.api_passphrase
            )
        return None

    def to_hotpath_config(self) -> HotPathConfig:
        """校验并生成 HotPathConfig"""
        return HotPathConfig.from_raw(
            self.host,
            self.chain_id,
            self.signing,
            HotPathPolicies.from_dict(self.policies),
            nonce=self.nonce,
        )


def _parse_int(value: Any, name: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"invalid {name}: {value!r}", field=name) from e


def load_config(config_path: Optional[str] = None) -> Config:
    """
    加载配置

    优先级: 环境变量 > 配置文件 > 默认值
    """
    config = Config()
    resolved_path = resolve_config_path(config_path)
    if resolved_path is not None:
        logger.debug(f"Loading config from {resolved_path}")
        config = Config.from_yaml(str(resolved_path))

    config.apply_env()
    return config


def resolve_config_path(config_path: Optional[str] = None) -> Optional[Path]:
    """
    Resolve config file path.

    Priority:
      1) env HOTCLOB_CONFIG
      2) given config_path
      3) cwd config/default.yaml
    """
    candidates: list[Path] = []

    env_path = os.getenv("HOTCLOB_CONFIG")
    if env_path:
        candidates.append(Path(env_path))

    if config_path:
        candidates.append(Path(config_path))

    candidates.append(Path("config/default.yaml"))

    for p in candidates:
        if p.exists():
            return p

    return None
