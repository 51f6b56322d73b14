"""
API 凭证获取 (L1 认证)

1. POST /auth/api-key 创建新 Key
2. 仅当创建失败且为 HTTP 状态错误时 (例如钱包已注册), 回退到
   GET /auth/derive-api-key 派生已有 Key; 网络/解析错误直接抛出
"""

import logging
from typing import Optional

from hotclob.connection.auth import l1_headers
from hotclob.connection.http import ClobHttp
from hotclob.core.exceptions import ErrorKind, HotClobError, TransportError
from hotclob.metrics import CREDENTIAL_BOOTSTRAP
from hotclob.order.policy import TimePolicy, resolve_timestamp
from hotclob.order.signing import WalletSigner
from hotclob.order.types import ApiCredentials

logger = logging.getLogger(__name__)

CREATE_API_KEY_PATH = "/auth/api-key"
DERIVE_API_KEY_PATH = "/auth/derive-api-key"


async def _l1_request(
    http: ClobHttp,
    method: str,
    path: str,
    signer: WalletSigner,
    chain_id: int,
    nonce: Optional[int],
    time_policy: TimePolicy,
) -> ApiCredentials:
    timestamp = resolve_timestamp(time_policy, None)
    headers = l1_headers(signer, chain_id, timestamp, nonce)
    data = await http.request(method, path, headers=headers)
    if not isinstance(data, dict) or not {"apiKey", "secret", "passphrase"} <= data.keys():
        raise TransportError(
            f"{method} {path} returned unexpected credentials payload", method=method, path=path
        )
    return ApiCredentials.from_dict(data)


async def create_api_key(
    http: ClobHttp,
    signer: WalletSigner,
    chain_id: int,
    nonce: Optional[int] = None,
    time_policy: TimePolicy = TimePolicy.FIXED,
) -> ApiCredentials:
    return await _l1_request(http, "POST", CREATE_API_KEY_PATH, signer, chain_id, nonce, time_policy)


async def derive_api_key(
    http: ClobHttp,
    signer: WalletSigner,
    chain_id: int,
    nonce: Optional[int] = None,
    time_policy: TimePolicy = TimePolicy.FIXED,
) -> ApiCredentials:
    return await _l1_request(http, "GET", DERIVE_API_KEY_PATH, signer, chain_id, nonce, time_policy)


async def create_or_derive_api_key(
    http: ClobHttp,
    signer: WalletSigner,
    chain_id: int,
    nonce: Optional[int] = None,
    time_policy: TimePolicy = TimePolicy.FIXED,
) -> ApiCredentials:
    try:
        credentials = await create_api_key(http, signer, chain_id, nonce, time_policy)
    except HotClobError as e:
        if e.kind is not ErrorKind.STATUS:
            raise
        logger.info(
            f"create api key for {signer.address} rejected ({e.message}); deriving existing key"
        )
        credentials = await derive_api_key(http, signer, chain_id, nonce, time_policy)
        CREDENTIAL_BOOTSTRAP.labels(path="derive").inc()
        return credentials

    CREDENTIAL_BOOTSTRAP.labels(path="create").inc()
    logger.info(f"Created api key for {signer.address}")
    return credentials
