"""
测试 REST 传输层的错误分类
"""

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from hotclob.connection.http import ClobHttp
from hotclob.core.exceptions import ErrorKind, StatusError, TransportError


def _app() -> web.Application:
    async def create_key(request: web.Request) -> web.Response:
        return web.json_response({"error": "key already exists"}, status=409)

    async def derive_key(request: web.Request) -> web.Response:
        return web.json_response({
            "apiKey": "k",
            "secret": "s",
            "passphrase": request.headers.get("POLY_NONCE", ""),
        })

    async def post_order(request: web.Request) -> web.Response:
        body = await request.json()
        return web.json_response({"success": True, "orderID": body["order"]["salt"]})

    async def broken(request: web.Request) -> web.Response:
        return web.Response(text="<html>oops</html>", content_type="text/html")

    app = web.Application()
    app.router.add_post("/auth/api-key", create_key)
    app.router.add_get("/auth/derive-api-key", derive_key)
    app.router.add_post("/order", post_order)
    app.router.add_get("/broken", broken)
    return app


class TestClobHttp:
    """测试请求结果分类"""

    @pytest.mark.asyncio
    async def test_success_and_status_error(self):
        server = TestServer(_app())
        await server.start_server()
        http = ClobHttp(str(server.make_url("/")))
        try:
            data = await http.request("GET", "/auth/derive-api-key", headers={"POLY_NONCE": "3"})
            assert data == {"apiKey": "k", "secret": "s", "passphrase": "3"}

            with pytest.raises(StatusError) as exc_info:
                await http.request("POST", "/auth/api-key")

            assert exc_info.value.status == 409
            assert exc_info.value.kind is ErrorKind.STATUS
            assert "key already exists" in exc_info.value.body
        finally:
            await http.close()
            await server.close()

    @pytest.mark.asyncio
    async def test_json_body_sent(self):
        server = TestServer(_app())
        await server.start_server()
        http = ClobHttp(str(server.make_url("/")))
        try:
            data = await http.request("POST", "/order", body='{"order":{"salt":42}}')
            assert data == {"success": True, "orderID": 42}
        finally:
            await http.close()
            await server.close()

    @pytest.mark.asyncio
    async def test_invalid_json_is_transport_error(self):
        server = TestServer(_app())
        await server.start_server()
        http = ClobHttp(str(server.make_url("/")))
        try:
            with pytest.raises(TransportError) as exc_info:
                await http.request("GET", "/broken")

            assert exc_info.value.kind is ErrorKind.TRANSPORT
            assert exc_info.value.path == "/broken"
        finally:
            await http.close()
            await server.close()

    @pytest.mark.asyncio
    async def test_connection_refused_is_transport_error(self):
        server = TestServer(_app())
        await server.start_server()
        url = str(server.make_url("/"))
        await server.close()

        http = ClobHttp(url)
        try:
            with pytest.raises(TransportError):
                await http.request("POST", "/order", body="{}")
        finally:
            await http.close()

    @pytest.mark.asyncio
    async def test_external_session_not_closed(self):
        import aiohttp

        session = aiohttp.ClientSession()
        http = ClobHttp("http://localhost", session)
        await http.close()

        assert not session.closed
        await session.close()

    def test_url_join(self):
        assert ClobHttp("https://clob.example.com/").url("/order") == "https://clob.example.com/order"
