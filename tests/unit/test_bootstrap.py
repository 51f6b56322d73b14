"""
测试 API 凭证获取 (create -> derive 回退)
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from hotclob.connection.bootstrap import (
    CREATE_API_KEY_PATH,
    DERIVE_API_KEY_PATH,
    create_or_derive_api_key,
)
from hotclob.core.exceptions import StatusError, TransportError, UnsupportedPolicyError
from hotclob.order.policy import TimePolicy
from hotclob.order.signing import POLYGON


def _http(*responses):
    http = MagicMock()
    http.request = AsyncMock(side_effect=list(responses))
    return http


class TestCreateOrDerive:
    """测试凭证获取回退逻辑"""

    @pytest.mark.asyncio
    async def test_create_success(self, signer, credentials_payload):
        http = _http(credentials_payload)

        creds = await create_or_derive_api_key(http, signer, POLYGON)

        assert creds.key == "key-2"
        assert http.request.await_count == 1
        method, path = http.request.await_args.args[:2]
        assert (method, path) == ("POST", CREATE_API_KEY_PATH)

    @pytest.mark.asyncio
    async def test_status_error_falls_back_to_derive(self, signer, credentials_payload):
        http = _http(
            StatusError(409, "POST", CREATE_API_KEY_PATH, "already exists"),
            credentials_payload,
        )

        creds = await create_or_derive_api_key(http, signer, POLYGON, nonce=5)

        assert creds.key == "key-2"
        assert creds.passphrase == "pass-2"
        calls = http.request.await_args_list
        assert calls[0].args[:2] == ("POST", CREATE_API_KEY_PATH)
        assert calls[1].args[:2] == ("GET", DERIVE_API_KEY_PATH)
        assert calls[1].kwargs["headers"]["POLY_NONCE"] == "5"

    @pytest.mark.asyncio
    async def test_transport_error_does_not_fall_back(self, signer, credentials_payload):
        http = _http(TransportError("connection reset"), credentials_payload)

        with pytest.raises(TransportError):
            await create_or_derive_api_key(http, signer, POLYGON)

        assert http.request.await_count == 1

    @pytest.mark.asyncio
    async def test_malformed_create_payload_does_not_fall_back(self, signer, credentials_payload):
        http = _http({"unexpected": True}, credentials_payload)

        with pytest.raises(TransportError):
            await create_or_derive_api_key(http, signer, POLYGON)

        assert http.request.await_count == 1

    @pytest.mark.asyncio
    async def test_derive_failure_propagates(self, signer):
        http = _http(
            StatusError(409, "POST", CREATE_API_KEY_PATH),
            StatusError(401, "GET", DERIVE_API_KEY_PATH, "unauthorized"),
        )

        with pytest.raises(StatusError) as exc_info:
            await create_or_derive_api_key(http, signer, POLYGON)

        assert exc_info.value.status == 401
        assert exc_info.value.path == DERIVE_API_KEY_PATH

    @pytest.mark.asyncio
    async def test_l1_headers_attached(self, signer, credentials_payload, monkeypatch):
        monkeypatch.setattr("hotclob.order.policy.unix_now", lambda: 1_700_000_000)
        http = _http(credentials_payload)

        await create_or_derive_api_key(http, signer, POLYGON)

        headers = http.request.await_args.kwargs["headers"]
        assert headers["POLY_ADDRESS"] == signer.address
        assert headers["POLY_TIMESTAMP"] == "1700000000"
        assert headers["POLY_NONCE"] == "0"

    @pytest.mark.asyncio
    async def test_unsupported_time_policy_fails_before_network(self, signer):
        http = _http()

        with pytest.raises(UnsupportedPolicyError):
            await create_or_derive_api_key(http, signer, POLYGON, time_policy=TimePolicy.FETCH_AND_CACHE)

        http.request.assert_not_awaited()
