"""
热路径客户端

只实现下单关键路径:
- L1 认证获取 API 凭证 (create -> derive)
- 构建 + 签名限价单
- 带 L2 头部提交 POST /order

签名与网络请求可以分开调用 (sign_limit_order / post_signed_order),
调用方可以把签名耗时挪出网络关键路径。
"""

import asyncio
import json
import logging
from dataclasses import dataclass, replace
from typing import Optional

import aiohttp

from hotclob.connection.auth import l2_headers
from hotclob.connection.bootstrap import create_or_derive_api_key
from hotclob.connection.http import ClobHttp
from hotclob.core.config import HotPathConfig
from hotclob.core.exceptions import ConfigurationError, HotClobError, TransportError
from hotclob.metrics import SignTimer, record_submission
from hotclob.order.builder import OrderBuilder
from hotclob.order.policy import resolve_timestamp
from hotclob.order.signing import WalletSigner, sign_order
from hotclob.order.types import (
    ZERO_ADDRESS,
    ApiCredentials,
    LimitOrderOverrides,
    LimitOrderRequest,
    PostOrderResponse,
    SignatureType,
    SignedOrder,
)

logger = logging.getLogger(__name__)

ORDER_PATH = "/order"


@dataclass(frozen=True)
class AuthState:
    """L2 认证状态; 刷新时整体替换"""
    address: str
    credentials: ApiCredentials


class HotPathClient:
    """
    限价单热路径客户端

    凭证是唯一的可变共享状态: 保存在不可变的 AuthState 中, 刷新时整体替换,
    并发刷新由 asyncio.Lock 串行化; 每次提交只读取一次 AuthState 快照。
    """

    def __init__(
        self,
        config: HotPathConfig,
        signer: WalletSigner,
        credentials: ApiCredentials,
        http: ClobHttp,
    ):
        validate_funder_signature(config.signature_type, config.funder)

        self.config = config
        self._signer = signer
        self._http = http
        self._builder = OrderBuilder(
            maker=config.funder,
            signer=signer.address,
            signature_type=config.signature_type,
        )
        self._state = AuthState(address=signer.address, credentials=credentials)
        self._refresh_lock = asyncio.Lock()

    @classmethod
    async def bootstrap(
        cls,
        config: HotPathConfig,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> "HotPathClient":
        """创建客户端并通过 L1 认证获取凭证"""
        signer = WalletSigner.from_key(config.private_key)
        http = ClobHttp(config.host, session)
        try:
            credentials = await create_or_derive_api_key(
                http, signer, config.chain_id, config.nonce, config.policies.time
            )
        except Exception:
            await http.close()
            raise
        return cls(config, signer, credentials, http)

    @classmethod
    def with_credentials(
        cls,
        config: HotPathConfig,
        credentials: ApiCredentials,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> "HotPathClient":
        """使用已知凭证创建客户端 (无网络请求)"""
        signer = WalletSigner.from_key(config.private_key)
        return cls(config, signer, credentials, ClobHttp(config.host, session))

    @property
    def address(self) -> str:
        return self._signer.address

    @property
    def credentials(self) -> ApiCredentials:
        return self._state.credentials

    async def refresh_credentials(self) -> ApiCredentials:
        """
        重新创建或派生 API 凭证并替换 L2 认证状态

        用于收到 401/403 后的恢复流程。
        """
        async with self._refresh_lock:
            credentials = await create_or_derive_api_key(
                self._http,
                self._signer,
                self.config.chain_id,
                self.config.nonce,
                self.config.policies.time,
            )
            self._state = AuthState(address=self._signer.address, credentials=credentials)
            logger.info(f"Refreshed api credentials for {self.address}")
            return credentials

    async def post_limit_order(
        self,
        request: LimitOrderRequest,
        overrides: Optional[LimitOrderOverrides] = None,
    ) -> PostOrderResponse:
        """签名并提交限价单; 未覆盖的字段使用固定策略默认值"""
        overrides = overrides or LimitOrderOverrides()
        signed = await self.sign_limit_order(request, overrides)
        return await self.post_signed_order(signed, overrides.timestamp)

    async def sign_limit_order(
        self,
        request: LimitOrderRequest,
        overrides: Optional[LimitOrderOverrides] = None,
    ) -> SignedOrder:
        """构建并签名限价单 (纯本地计算)"""
        overrides = overrides or LimitOrderOverrides()
        policies = self.config.policies

        with SignTimer():
            tick_size = overrides.tick_size if overrides.tick_size is not None else policies.default_tick_size()
            neg_risk = overrides.neg_risk if overrides.neg_risk is not None else policies.default_neg_risk()
            fee_rate_bps = (
                overrides.fee_rate_bps if overrides.fee_rate_bps is not None else policies.default_fee_rate_bps()
            )

            options = self._builder.resolve_options(request)
            order = self._builder.build(request, tick_size, fee_rate_bps, options)
            signature = sign_order(self._signer, order, self.config.chain_id, neg_risk)

        return SignedOrder(
            order=order,
            signature=signature,
            order_type=options.order_type,
            owner=self._state.credentials.key,
            post_only=options.post_only,
        )

    async def post_signed_order(
        self,
        signed_order: SignedOrder,
        timestamp_override: Optional[int] = None,
    ) -> PostOrderResponse:
        """
        提交已签名订单到 POST /order (不重试)

        owner 与 L2 头部取自同一个 AuthState 快照; 签名后凭证被刷新时
        owner 会改写为当前 API Key (订单签名本身与 API Key 无关)。
        """
        state = self._state
        if signed_order.owner != state.credentials.key:
            logger.debug("Credentials refreshed since signing; re-stamping order owner")
            signed_order = replace(signed_order, owner=state.credentials.key)
        body = json.dumps(signed_order.to_dict(), separators=(",", ":"))
        timestamp = resolve_timestamp(self.config.policies.time, timestamp_override)
        headers = l2_headers(state.address, state.credentials, "POST", ORDER_PATH, body, timestamp)

        try:
            data = await self._http.request("POST", ORDER_PATH, headers=headers, body=body)
        except HotClobError as e:
            record_submission(e.kind.value)
            raise

        if not isinstance(data, dict):
            record_submission("transport")
            raise TransportError(
                f"POST {ORDER_PATH} returned unexpected payload", method="POST", path=ORDER_PATH
            )

        response = PostOrderResponse.from_dict(data)
        record_submission("accepted" if response.success else "rejected")
        if not response.success:
            logger.warning(f"Order rejected: {response.error_msg}")
        return response

    async def close(self) -> None:
        await self._http.close()

    async def __aenter__(self) -> "HotPathClient":
        return self

    async def __aexit__(self, *args) -> None:
        await self.close()


def validate_funder_signature(signature_type: SignatureType, funder: str) -> None:
    if signature_type is SignatureType.EOA:
        raise ConfigurationError(
            "Cannot have a funder address with an Eoa signature type", field="signature_type"
        )
    if funder == ZERO_ADDRESS:
        raise ConfigurationError(
            "Cannot have a zero funder address with a proxy signature type", field="funder"
        )
