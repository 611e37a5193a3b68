"""Tests for the CMS HTTP client and token handling."""

import httpx
import pytest

from xibo_agent.config import Settings
from xibo_agent.core.errors import CMSConfigurationError, CMSRequestError
from xibo_agent.services.auth import XiboAuthService
from xibo_agent.services.cms import XiboCMSClient


class TestXiboCMSClient:
    """Tests for XiboCMSClient.request."""

    async def test_get_sends_bearer_and_filters(self, cms_client, fake_cms):
        """Only provided filters are sent, with a bearer token."""
        fake_cms.json("GET", "/api/command", [])

        result = await cms_client.get("command", params={"code": "reboot", "command": None})

        assert result == []
        request = fake_cms.requests[0]
        assert request.headers["Authorization"] == "Bearer token-1"
        assert dict(request.url.params) == {"code": "reboot"}

    async def test_token_cached_between_calls(self, cms_client, fake_cms):
        fake_cms.json("GET", "/api/command", [])

        await cms_client.get("command")
        await cms_client.get("command")

        assert fake_cms.token_requests == 1

    async def test_form_body(self, cms_client, fake_cms):
        """POST bodies are form encoded."""
        fake_cms.json("POST", "/api/folders", {"id": 3, "text": "New"})

        await cms_client.post("folders", data={"text": "New", "parentId": None})

        request = fake_cms.requests[0]
        assert request.headers["Content-Type"] == "application/x-www-form-urlencoded"
        assert request.content == b"text=New"

    async def test_error_status_raises(self, cms_client, fake_cms):
        """A non-2xx answer carries the status and decoded body."""
        fake_cms.json("GET", "/api/layout", {"message": "Not Found"}, status_code=404)

        with pytest.raises(CMSRequestError) as exc_info:
            await cms_client.get("layout")

        assert exc_info.value.status_code == 404
        assert "404" in exc_info.value.message
        assert exc_info.value.error_data == {"message": "Not Found"}

    async def test_error_message_percent_decoded(self, cms_client, fake_cms):
        fake_cms.json("PUT", "/api/user/1", {"message": "Name%20in%20use"}, status_code=409)

        with pytest.raises(CMSRequestError) as exc_info:
            await cms_client.put("user/1", data={"userName": "x"})

        assert exc_info.value.message == "HTTP error! status: 409, message: Name in use"
        assert exc_info.value.error_data == {"message": "Name in use"}

    async def test_non_json_error_body(self, cms_client, fake_cms):
        fake_cms.add("GET", "/api/display", httpx.Response(502, text="Bad gateway"))

        with pytest.raises(CMSRequestError) as exc_info:
            await cms_client.get("display")

        assert exc_info.value.message == "HTTP error! status: 502"
        assert exc_info.value.error_data == "Bad gateway"

    async def test_no_content(self, cms_client, fake_cms):
        fake_cms.add("DELETE", "/api/command/4", httpx.Response(204))
        assert await cms_client.delete("command/4") is None

    async def test_retry_once_on_unauthorized(self, cms_client, fake_cms):
        """A 401 drops the cached token and the call is retried with a new one."""
        answers = iter([httpx.Response(401, json={"message": "expired"}), httpx.Response(200, json=[])])
        fake_cms.add("GET", "/api/notification", lambda request: next(answers))

        assert await cms_client.get("notification") == []
        assert fake_cms.token_requests == 2
        assert fake_cms.requests[1].headers["Authorization"] == "Bearer token-2"

    async def test_missing_cms_url(self, fake_cms):
        """No request is made without a CMS URL."""
        client = XiboCMSClient(Settings(cms_url=""), transport=fake_cms.transport)

        with pytest.raises(CMSConfigurationError):
            await client.get("command")

        assert fake_cms.requests == []
        assert fake_cms.token_requests == 0


class TestXiboAuthService:
    """Tests for token acquisition."""

    async def test_missing_credentials(self):
        auth = XiboAuthService(Settings(cms_url="http://cms.test", xibo_client_id="", xibo_client_secret=""))
        async with httpx.AsyncClient() as client:
            with pytest.raises(CMSConfigurationError):
                await auth.get_access_token(client)

    async def test_token_refused(self, test_settings):
        transport = httpx.MockTransport(lambda request: httpx.Response(400, text="invalid_client"))
        auth = XiboAuthService(test_settings)

        async with httpx.AsyncClient(transport=transport) as client:
            with pytest.raises(CMSRequestError) as exc_info:
                await auth.get_access_token(client)

        assert exc_info.value.message == "Failed to obtain access token: 400"

    async def test_client_credentials_form(self, test_settings):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={"access_token": "abc", "expires_in": 3600})

        auth = XiboAuthService(test_settings)
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            headers = await auth.get_auth_headers(client)

        assert headers == {"Authorization": "Bearer abc", "Accept": "application/json"}
        assert seen[0].url == "http://cms.test/api/authorize/access_token"
        assert b"grant_type=client_credentials" in seen[0].content
        assert b"client_id=test-client" in seen[0].content

    async def test_short_lived_token_not_reused(self, test_settings):
        """Tokens expiring within the margin are requested again."""
        count = 0

        def handler(request):
            nonlocal count
            count += 1
            return httpx.Response(200, json={"access_token": f"t{count}", "expires_in": 10})

        auth = XiboAuthService(test_settings)
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            assert await auth.get_access_token(client) == "t1"
            assert await auth.get_access_token(client) == "t2"
