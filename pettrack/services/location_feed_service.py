"""
Location Feed Service

Polls the tracking device feed for the latest known position of a tracked
entity (a pet's collar device).

Endpoint: GET {LOCATION_FEED_API_URL}/devices/{tracked_entity_id}/latest
"""

import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx

from pettrack.core.config import settings
from pettrack.schemas.geo import Coordinates
from pettrack.schemas.health import ServiceHealth
from pettrack.schemas.tracking import LocationFix

logger = logging.getLogger(__name__)

# Statuses meaning "feed reachable, no current fix for this device"
NOT_AVAILABLE_STATUSES = (204, 404)


class FeedUnavailableError(Exception):
    """Raised when the feed cannot be reached or answers with an error."""


class LocationFeedService:
    """
    Service for interacting with the location feed API.

    `poll_latest` has three outcomes: a `LocationFix`, `None` when the feed
    has no current fix, or `FeedUnavailableError`.
    """

    def __init__(self):
        """
        Initialize the feed service with configuration.
        """
        self._api_url = settings.LOCATION_FEED_API_URL
        self._api_key = settings.LOCATION_FEED_API_KEY
        self._timeout = settings.LOCATION_FEED_TIMEOUT_SECONDS
        self._client: Optional[httpx.AsyncClient] = None

    def _get_client(self) -> httpx.AsyncClient:
        """
        Get or create the HTTP client for the feed API.
        """
        if self._client is None:
            headers = {"Authorization": f"Bearer {self._api_key}"} if self._api_key else {}
            self._client = httpx.AsyncClient(
                base_url=self._api_url, timeout=self._timeout, headers=headers
            )
        return self._client

    async def poll_latest(self, tracked_entity_id: str) -> Optional[LocationFix]:
        """
        Fetch the latest reported position of a tracked entity.

        Args:
            tracked_entity_id: Feed id of the device to poll

        Returns:
            LocationFix with the reported position, or None when the feed
            has no current fix for the device

        Raises:
            FeedUnavailableError: If the request fails or the feed returns an error
        """
        try:
            client = self._get_client()
            response = await client.get(_latest_path(tracked_entity_id))
        except httpx.TimeoutException as e:
            logger.warning("Location feed timed out for device %s", tracked_entity_id)
            raise FeedUnavailableError("Location feed request timed out") from e
        except httpx.HTTPError as e:
            logger.warning(
                "Network error while polling location feed for device %s: %s",
                tracked_entity_id,
                str(e),
            )
            raise FeedUnavailableError(f"Network error: {str(e)}") from e

        if response.status_code in NOT_AVAILABLE_STATUSES:
            logger.debug("No location data available for device %s", tracked_entity_id)
            return None

        if response.status_code != 200:
            logger.warning(
                "Location feed returned status %s for device %s",
                response.status_code,
                tracked_entity_id,
            )
            raise FeedUnavailableError(
                f"Location feed returned status {response.status_code}"
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise FeedUnavailableError("Location feed returned an invalid body") from e

        return self._parse_fix(payload, tracked_entity_id)

    def _parse_fix(self, data: Any, tracked_entity_id: str) -> Optional[LocationFix]:
        """
        Parse a feed document into a LocationFix.

        A document without usable coordinates is a missing fix, not an error.
        """
        if not isinstance(data, dict):
            logger.debug("Unexpected feed document for device %s: %r", tracked_entity_id, data)
            return None

        latitude = data.get("latitude")
        longitude = data.get("longitude")
        if not _is_number(latitude) or not _is_number(longitude):
            logger.debug("No valid location data for device %s", tracked_entity_id)
            return None

        try:
            coordinates = Coordinates(latitude=latitude, longitude=longitude)
        except ValueError:
            logger.warning(
                "Location feed reported out-of-range coordinates for device %s: (%s, %s)",
                tracked_entity_id,
                latitude,
                longitude,
            )
            return None

        return LocationFix(coordinates=coordinates, battery_percent=_battery(data))

    async def health_check(self) -> ServiceHealth:
        """
        Perform a health check of the location feed.

        Returns:
            ServiceHealth indicating the health status of the feed.
        """
        try:
            client = self._get_client()
            response = await client.get("/health")

            if response.status_code == 200:
                return ServiceHealth(healthy=True, message="Location feed is responding")
            return ServiceHealth(
                healthy=False,
                message=f"Location feed returned status code: {response.status_code}",
            )

        except httpx.TimeoutException:
            return ServiceHealth(healthy=False, message="Location feed request timed out")
        except Exception as e:  # pylint: disable=broad-except
            return ServiceHealth(healthy=False, message=f"Location feed check failed: {str(e)}")

    async def close(self):
        """
        Close the HTTP client.
        """
        if self._client is not None:
            await self._client.aclose()
            self._client = None


def _latest_path(tracked_entity_id: str) -> str:
    # Escaped as a single path segment
    return f"/devices/{quote(tracked_entity_id, safe='')}/latest"


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _battery(data: Dict[str, Any]) -> Optional[int]:
    value = data.get("battery_percent")
    if not _is_number(value):
        return None
    return max(0, min(100, int(value)))


# Singleton instance for dependency injection
location_feed_service = LocationFeedService()
