"""OAuth2 authentication against the Xibo CMS API."""

import time
from typing import Dict, Optional

import httpx
import structlog

from xibo_agent.config import Settings, settings as default_settings
from xibo_agent.core.errors import CMSConfigurationError, CMSRequestError

logger = structlog.get_logger(__name__)


class XiboAuthService:
    """Obtains and caches access tokens using the client credentials grant."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or default_settings
        self._token: Optional[str] = None
        self._expires_at: float = 0.0

    @property
    def token_url(self) -> str:
        return f"{self.settings.cms_url}/api/authorize/access_token"

    def invalidate(self) -> None:
        """Forget the cached token so the next call requests a new one."""
        self._token = None
        self._expires_at = 0.0

    def _token_valid(self) -> bool:
        return self._token is not None and time.monotonic() < self._expires_at

    async def get_access_token(self, client: httpx.AsyncClient) -> str:
        """Return a cached token or request a new one.

        Raises:
            CMSConfigurationError: If the CMS URL or client credentials are missing
            CMSRequestError: If the CMS refuses to issue a token
        """
        if self._token_valid():
            return self._token

        if not self.settings.cms_url:
            raise CMSConfigurationError("CMS URL is not configured")
        if not self.settings.xibo_client_id or not self.settings.xibo_client_secret:
            raise CMSConfigurationError("Xibo client credentials are not configured")

        logger.debug("access_token_requested", url=self.token_url)

        response = await client.post(
            self.token_url,
            data={
                "grant_type": "client_credentials",
                "client_id": self.settings.xibo_client_id,
                "client_secret": self.settings.xibo_client_secret,
            },
        )

        if not response.is_success:
            logger.error(
                "access_token_request_failed",
                url=self.token_url,
                status_code=response.status_code,
                response=response.text,
            )
            raise CMSRequestError(
                f"Failed to obtain access token: {response.status_code}",
                status_code=response.status_code,
                error_data=response.text,
            )

        data = response.json()
        token = data.get("access_token")
        if not token:
            raise CMSRequestError(
                "Token response did not contain an access_token",
                status_code=response.status_code,
                error_data=data,
            )

        expires_in = int(data.get("expires_in") or 0)
        self._token = token
        self._expires_at = time.monotonic() + max(
            0, expires_in - self.settings.token_expiry_margin
        )

        logger.info("access_token_obtained", expires_in=expires_in)
        return token

    async def get_auth_headers(self, client: httpx.AsyncClient) -> Dict[str, str]:
        """Headers carrying the bearer token for CMS API calls."""
        token = await self.get_access_token(client)
        return {
            "Authorization": f"Bearer {token}",
            "Accept": "application/json",
        }
