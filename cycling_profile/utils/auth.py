"""Authentication utilities for Strava OAuth."""

import logging
from typing import Optional
from urllib.parse import urlencode

import httpx
from pydantic import ValidationError

from cycling_profile.config import Settings
from cycling_profile.models.strava import AuthToken
from cycling_profile.services.strava_service import StravaAPIError, UpstreamSchemaError

logger = logging.getLogger(__name__)

OAUTH_SCOPE = "read,activity:read_all"


class ConfigurationError(Exception):
    """Required OAuth settings are missing."""
    pass


class StravaAuthHelper:
    """Helper class for Strava OAuth authentication flow."""

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.client_id = settings.strava_client_id
        self.client_secret = settings.strava_client_secret
        self.redirect_uri = settings.strava_redirect_uri
        self.oauth_base_url = settings.strava_oauth_base_url.rstrip("/")
        self.scope = OAUTH_SCOPE
        self._transport = transport

    def get_authorization_url(self, state: Optional[str] = None) -> str:
        """Generate Strava OAuth authorization URL."""
        if not self.client_id or not self.redirect_uri:
            raise ConfigurationError("STRAVA_CLIENT_ID and STRAVA_REDIRECT_URI must be set")

        params = {
            "client_id": self.client_id,
            "response_type": "code",
            "redirect_uri": self.redirect_uri,
            "approval_prompt": "force",
            "scope": self.scope
        }
        if state:
            params["state"] = state

        return f"{self.oauth_base_url}/authorize?{urlencode(params)}"

    async def exchange_code_for_token(self, code: str) -> AuthToken:
        """Exchange authorization code for access token."""
        if not self.client_id or not self.client_secret:
            raise ConfigurationError("STRAVA_CLIENT_ID and STRAVA_CLIENT_SECRET must be set")

        url = f"{self.oauth_base_url}/token"
        data = {
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "code": code,
            "grant_type": "authorization_code"
        }

        logger.info("Exchanging authorization code for access token")
        async with httpx.AsyncClient(transport=self._transport) as client:
            try:
                response = await client.post(url, data=data)
                response.raise_for_status()
            except httpx.HTTPStatusError as e:
                raise StravaAPIError(
                    f"Token exchange failed: {e.response.status_code} - {e.response.text}",
                    status_code=e.response.status_code
                ) from e
            except httpx.RequestError as e:
                raise StravaAPIError(f"Request error: {str(e)}") from e

        try:
            token = AuthToken.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise UpstreamSchemaError(f"Unexpected token payload: {e}") from e

        logger.info(f"Token exchange successful for athlete: {token.athlete.id}")
        return token
