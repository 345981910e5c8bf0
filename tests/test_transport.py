"""Tests for the httpx transport and the mock transport."""

import json

import httpx
import pytest

from appnexus.api.core.config import ClientSettings
from appnexus.api.endpoints import AUTHENTICATION_SERVICE, Endpoint
from appnexus.api.exceptions import TransportError
from appnexus.api.transport import HttpxTransport, MockTransport

API_BASE = "https://api.appnexus.com"


@pytest.fixture
def transport():
    return HttpxTransport(API_BASE, client_settings=ClientSettings(_env_file=None, proxy=None))


class TestHttpxTransport:
    """Test HttpxTransport against mocked HTTP responses."""

    def test_endpoint_url(self):
        transport = HttpxTransport("http://sand.api.appnexus.com/")

        assert transport._get_endpoint_url(Endpoint.MEMBER_SERVICE) == "http://sand.api.appnexus.com/member"
        assert transport._get_endpoint_url("member") == "http://sand.api.appnexus.com/member"

    def test_headers(self):
        transport = HttpxTransport(API_BASE)

        assert "Authorization" not in transport._build_headers()
        assert transport._build_headers("authn:abc")["Authorization"] == "authn:abc"

    @pytest.mark.asyncio
    async def test_get_sends_query_and_token(self, transport, respx_mock):
        route = respx_mock.get(f"{API_BASE}/member").mock(
            return_value=httpx.Response(
                200, json={"response": {"status": "OK", "member": {"id": 1}}}
            )
        )

        result = await transport.send("GET", Endpoint.MEMBER_SERVICE, {"id": 1}, "authn:abc")

        assert result == {"status": "OK", "member": {"id": 1}}
        request = route.calls.last.request
        assert request.url.params["id"] == "1"
        assert request.headers["Authorization"] == "authn:abc"
        await transport.aclose()

    @pytest.mark.asyncio
    async def test_post_sends_json_body(self, transport, respx_mock):
        route = respx_mock.post(f"{API_BASE}/auth").mock(
            return_value=httpx.Response(200, json={"response": {"status": "OK", "token": "authn:xyz"}})
        )
        args = {"auth": {"username": "user", "password": "secret"}}

        result = await transport.send("POST", AUTHENTICATION_SERVICE, args)

        assert result["token"] == "authn:xyz"
        request = route.calls.last.request
        assert json.loads(request.content) == args
        assert "Authorization" not in request.headers
        await transport.aclose()

    @pytest.mark.asyncio
    async def test_body_without_envelope(self, transport, respx_mock):
        respx_mock.get(f"{API_BASE}/report-download").mock(
            return_value=httpx.Response(200, json={"rows": []})
        )

        result = await transport.send("GET", Endpoint.REPORT_DOWNLOAD_SERVICE)

        assert result == {"rows": []}
        await transport.aclose()

    @pytest.mark.asyncio
    async def test_error_status(self, transport, respx_mock):
        respx_mock.get(f"{API_BASE}/advertiser").mock(
            return_value=httpx.Response(
                401, json={"response": {"status": "error", "error": "You are not logged in."}}
            )
        )

        with pytest.raises(TransportError, match="not logged in") as exc:
            await transport.send("GET", Endpoint.ADVERTISER_SERVICE)

        assert exc.value.status_code == 401
        assert exc.value.body["status"] == "error"
        await transport.aclose()

    @pytest.mark.asyncio
    async def test_error_status_without_body(self, transport, respx_mock):
        respx_mock.delete(f"{API_BASE}/creative").mock(return_value=httpx.Response(500))

        with pytest.raises(TransportError, match="HTTP 500") as exc:
            await transport.send("DELETE", Endpoint.CREATIVE_SERVICE, {"id": 3})

        assert exc.value.status_code == 500
        await transport.aclose()

    @pytest.mark.asyncio
    async def test_envelope_error_with_ok_status(self, transport, respx_mock):
        """Test that an error reported inside a 200 response still fails."""
        respx_mock.put(f"{API_BASE}/line-item").mock(
            return_value=httpx.Response(
                200, json={"response": {"status": "error", "error_id": "SYNTAX", "error": "bad field"}}
            )
        )

        with pytest.raises(TransportError, match="bad field") as exc:
            await transport.send("PUT", Endpoint.LINE_ITEM_SERVICE, {"line-item": {}})

        assert exc.value.status_code == 200
        await transport.aclose()

    @pytest.mark.asyncio
    async def test_non_json_body(self, transport, respx_mock):
        respx_mock.get(f"{API_BASE}/member").mock(
            return_value=httpx.Response(200, text="<html>maintenance</html>")
        )

        with pytest.raises(TransportError, match="non-JSON"):
            await transport.send("GET", Endpoint.MEMBER_SERVICE)
        await transport.aclose()

    @pytest.mark.asyncio
    async def test_network_error(self, transport, respx_mock):
        respx_mock.get(f"{API_BASE}/member").mock(side_effect=httpx.ConnectError("refused"))

        with pytest.raises(TransportError) as exc:
            await transport.send("GET", Endpoint.MEMBER_SERVICE)

        assert isinstance(exc.value.__cause__, httpx.ConnectError)
        assert exc.value.status_code is None
        await transport.aclose()

    @pytest.mark.asyncio
    async def test_shared_client_left_open(self, respx_mock):
        respx_mock.get(f"{API_BASE}/member").mock(
            return_value=httpx.Response(200, json={"response": {"status": "OK"}})
        )
        async with httpx.AsyncClient() as shared:
            transport = HttpxTransport(API_BASE, http_client=shared)

            await transport.send("GET", Endpoint.MEMBER_SERVICE)
            await transport.aclose()

            assert transport.http_client is shared
            assert shared.is_closed is False

    @pytest.mark.asyncio
    async def test_owned_client_closed(self, transport):
        client = transport._get_client()

        await transport.aclose()

        assert client.is_closed is True
        assert transport.http_client is None


class TestMockTransport:
    """Test MockTransport scripting."""

    @pytest.mark.asyncio
    async def test_default_auth_response(self):
        transport = MockTransport()

        first = await transport.send("POST", AUTHENTICATION_SERVICE, {"auth": {}})
        second = await transport.send("POST", AUTHENTICATION_SERVICE, {"auth": {}})

        assert first["token"] != second["token"]
        assert len(transport.calls_to(AUTHENTICATION_SERVICE)) == 2

    @pytest.mark.asyncio
    async def test_callable_response(self):
        transport = MockTransport()
        transport.respond("get", Endpoint.MEMBER_SERVICE, lambda args: {"id": args["id"]})

        assert await transport.send("GET", Endpoint.MEMBER_SERVICE, {"id": 5}) == {"id": 5}

    @pytest.mark.asyncio
    async def test_scripted_exception(self):
        transport = MockTransport(
            responses={("GET", "/member"): TransportError("down", status_code=503)}
        )

        with pytest.raises(TransportError, match="down"):
            await transport.send("GET", Endpoint.MEMBER_SERVICE)

        assert transport.calls[0].endpoint == "/member"
