"""HTTP client for the Xibo CMS REST API."""

from typing import Any, Dict, Optional

import httpx
import structlog

from xibo_agent.config import Settings, settings as default_settings
from xibo_agent.core.errors import (
    CMSConfigurationError,
    CMSRequestError,
    decode_error_message,
)
from xibo_agent.services.auth import XiboAuthService

logger = structlog.get_logger(__name__)


def _clean(values: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """Drop unset values so only provided filters and fields are sent."""
    if values is None:
        return None
    return {key: value for key, value in values.items() if value is not None}


def _read_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text


class XiboCMSClient:
    """Client for the Xibo CMS API.

    Every call is authenticated with a bearer token from ``XiboAuthService``.
    Non-2xx answers raise ``CMSRequestError`` with the decoded error body;
    2xx answers return the parsed JSON body (``None`` for empty bodies).
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        auth: Optional[XiboAuthService] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings or default_settings
        self.auth = auth or XiboAuthService(self.settings)
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    def api_url(self, path: str) -> str:
        return f"{self.settings.cms_url}/api/{path.lstrip('/')}"

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self.settings.xibo_request_timeout,
                transport=self._transport,
            )
        return self._client

    async def close(self):
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    async def request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        data: Optional[Dict[str, Any]] = None,
        files: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """Send an authenticated request and return the decoded JSON body.

        Raises:
            CMSConfigurationError: If no CMS URL is configured
            CMSRequestError: If the CMS answers with a non-2xx status or a
                body that is not JSON
        """
        if not self.settings.cms_url:
            raise CMSConfigurationError("CMS URL is not configured")

        client = await self._get_client()
        url = self.api_url(path)

        response = await self._send(client, method, url, params, data, files)

        # Cached token rejected: fetch a fresh one and retry once
        if response.status_code == 401:
            self.auth.invalidate()
            response = await self._send(client, method, url, params, data, files)

        if not response.is_success:
            error_data = decode_error_message(_read_body(response))
            detail = error_data.get("message") if isinstance(error_data, dict) else None

            message = f"HTTP error! status: {response.status_code}"
            if detail:
                message += f", message: {detail}"

            logger.error(
                "cms_request_failed",
                method=method,
                url=url,
                status_code=response.status_code,
                response=error_data,
            )
            raise CMSRequestError(
                message,
                status_code=response.status_code,
                error_data=error_data,
            )

        if response.status_code == 204 or not response.content:
            return None

        try:
            return response.json()
        except ValueError:
            logger.error("cms_invalid_json", method=method, url=url)
            raise CMSRequestError(
                "Invalid JSON response from CMS",
                status_code=response.status_code,
                error_data=response.text,
            )

    async def _send(
        self,
        client: httpx.AsyncClient,
        method: str,
        url: str,
        params: Optional[Dict[str, Any]],
        data: Optional[Dict[str, Any]],
        files: Optional[Dict[str, Any]],
    ) -> httpx.Response:
        headers = await self.auth.get_auth_headers(client)
        logger.debug("cms_request", method=method, url=url)
        return await client.request(
            method,
            url,
            params=_clean(params),
            data=_clean(data),
            files=files,
            headers=headers,
        )

    async def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self.request("GET", path, params=params)

    async def post(
        self,
        path: str,
        data: Optional[Dict[str, Any]] = None,
        files: Optional[Dict[str, Any]] = None,
    ) -> Any:
        return await self.request("POST", path, data=data, files=files)

    async def put(self, path: str, data: Optional[Dict[str, Any]] = None) -> Any:
        return await self.request("PUT", path, data=data)

    async def delete(self, path: str) -> Any:
        return await self.request("DELETE", path)
