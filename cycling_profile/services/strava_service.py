"""Strava API service for fetching athlete data on behalf of a bearer token."""

import asyncio
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

import httpx
from pydantic import TypeAdapter, ValidationError

from cycling_profile.config import Settings
from cycling_profile.models.strava import Activity, Athlete

logger = logging.getLogger(__name__)

_activity_list = TypeAdapter(List[Activity])


class StravaAPIError(Exception):
    """Custom exception for Strava API errors."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class UpstreamSchemaError(StravaAPIError):
    """Strava answered 2xx with a body that does not match the expected schema."""
    pass


class StravaService:
    """Service class for interacting with Strava API."""

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.base_url = settings.strava_api_base_url.rstrip("/")
        self.per_page = settings.strava_activities_per_page
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=self._transport)

    async def _get(
        self,
        endpoint: str,
        access_token: str,
        params: Optional[Dict[str, Any]] = None
    ) -> Any:
        """Make an authenticated GET request to Strava API."""
        url = f"{self.base_url}/{endpoint.lstrip('/')}"
        headers = {"Authorization": f"Bearer {access_token}"}

        async with self._client() as client:
            try:
                response = await client.get(url, headers=headers, params=params)
                response.raise_for_status()
            except httpx.HTTPStatusError as e:
                raise StravaAPIError(
                    f"API request failed: {e.response.status_code} - {e.response.text}",
                    status_code=e.response.status_code
                ) from e
            except httpx.RequestError as e:
                raise StravaAPIError(f"Request error: {str(e)}") from e

        try:
            return response.json()
        except ValueError as e:
            raise UpstreamSchemaError(f"Invalid JSON from {endpoint}: {str(e)}") from e

    async def get_athlete(self, access_token: str) -> Athlete:
        """Get the authenticated athlete's profile."""
        logger.info("Fetching athlete profile")
        data = await self._get("/athlete", access_token)
        try:
            athlete = Athlete.model_validate(data)
        except ValidationError as e:
            raise UpstreamSchemaError(f"Unexpected athlete payload: {e}") from e
        logger.info(f"Athlete profile fetched: {athlete.id}")
        return athlete

    async def get_activities(
        self,
        access_token: str,
        after: Optional[datetime] = None,
        before: Optional[datetime] = None,
        per_page: Optional[int] = None
    ) -> List[Activity]:
        """Get a single page of the athlete's most recent activities."""
        params: Dict[str, Any] = {"per_page": per_page or self.per_page}
        if after:
            params["after"] = int(after.timestamp())
        if before:
            params["before"] = int(before.timestamp())

        logger.info(f"Fetching athlete activities with params: {params}")
        data = await self._get("/athlete/activities", access_token, params=params)
        try:
            activities = _activity_list.validate_python(data)
        except ValidationError as e:
            raise UpstreamSchemaError(f"Unexpected activities payload: {e}") from e
        logger.info(f"Fetched {len(activities)} activities")
        return activities

    async def get_profile_data(self, access_token: str) -> Tuple[Athlete, List[Activity]]:
        """Fetch the athlete and the recent activities concurrently.

        Both requests must succeed; the first failure propagates and no
        partial result is returned.
        """
        athlete, activities = await asyncio.gather(
            self.get_athlete(access_token),
            self.get_activities(access_token)
        )
        return athlete, activities
