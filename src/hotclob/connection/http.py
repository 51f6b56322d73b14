"""
CLOB REST 传输层

单次请求, 不重试:
- 2xx -> 解析 JSON
- 非 2xx -> StatusError (携带状态码与响应体)
- 网络错误 / 超时 / JSON 解析失败 -> TransportError
"""

import asyncio
import json
import logging
from typing import Any, Dict, Optional

import aiohttp

from hotclob.core.exceptions import StatusError, TransportError

logger = logging.getLogger(__name__)


class ClobHttp:
    """aiohttp 会话封装; 只关闭自己创建的会话"""

    def __init__(self, host: str, session: Optional[aiohttp.ClientSession] = None):
        self.host = host.rstrip("/")
        self._session = session
        self._owns_session = session is None

    @property
    def session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
            self._owns_session = True
        return self._session

    def url(self, path: str) -> str:
        return f"{self.host}{path}"

    async def request(
        self,
        method: str,
        path: str,
        headers: Optional[Dict[str, str]] = None,
        body: Optional[str] = None,
    ) -> Any:
        request_headers = dict(headers or {})
        if body is not None:
            request_headers.setdefault("Content-Type", "application/json")

        try:
            async with self.session.request(
                method, self.url(path), data=body, headers=request_headers
            ) as resp:
                text = await resp.text()
                status = resp.status
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise TransportError(f"{method} {path} failed: {e!r}", method=method, path=path) from e

        if not 200 <= status < 300:
            logger.warning(f"{method} {path} -> HTTP {status}")
            raise StatusError(status, method, path, text)

        try:
            return json.loads(text) if text else None
        except ValueError as e:
            raise TransportError(
                f"{method} {path} returned invalid JSON: {text[:200]}", method=method, path=path
            ) from e

    async def close(self) -> None:
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()
