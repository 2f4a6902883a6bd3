"""
AirVisual client for fetching the current US AQI of a city.
"""

from typing import Any

import httpx

from .exceptions import FetchFailed
from .models import LocationQuery

# City endpoint of the AirVisual v2 API
DEFAULT_CITY_URL = "https://api.airvisual.com/v2/city"

STATUS_SUCCESS = "success"


def _validate_query(query: LocationQuery) -> None:
    if not query.city:
        raise FetchFailed("Missing city")
    if not query.state:
        raise FetchFailed("Missing state")
    if not query.country:
        raise FetchFailed("Missing country")


class AirVisualClient:
    """
    Client for the AirVisual city endpoint.

    Args:
        api_key: AirVisual API key.
        city_url: URL of the /v2/city endpoint.
            Default: https://api.airvisual.com/v2/city
        timeout_s: Request timeout in seconds. Default: 5.0

    Example:
        >>> client = AirVisualClient(api_key="...")
        >>> aqi = await client.fetch_reading(NamedCity.SF.query)
    """

    def __init__(
        self,
        api_key: str,
        city_url: str = DEFAULT_CITY_URL,
        timeout_s: float = 5.0,
    ):
        self.api_key = api_key
        self.city_url = city_url
        self.timeout_s = timeout_s

    def _params(self, query: LocationQuery) -> dict[str, str]:
        return {
            "city": query.city,
            "state": query.state,
            "country": query.country,
            "key": self.api_key,
        }

    async def fetch_reading(self, query: LocationQuery) -> int:
        """
        Fetch the current US AQI for a location asynchronously.

        Args:
            query: Location to look up

        Returns:
            The US AQI reading

        Raises:
            FetchFailed: On validation, network or provider errors
        """
        _validate_query(query)
        try:
            async with httpx.AsyncClient(timeout=self.timeout_s) as client:
                response = await client.get(self.city_url, params=self._params(query))
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise FetchFailed(f"AirVisual request failed: {e}") from e

        return self._parse_response(response)

    def fetch_reading_sync(self, query: LocationQuery) -> int:
        """
        Fetch the current US AQI for a location synchronously.

        Args:
            query: Location to look up

        Returns:
            The US AQI reading

        Raises:
            FetchFailed: On validation, network or provider errors
        """
        _validate_query(query)
        try:
            with httpx.Client(timeout=self.timeout_s) as client:
                response = client.get(self.city_url, params=self._params(query))
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise FetchFailed(f"AirVisual request failed: {e}") from e

        return self._parse_response(response)

    def _parse_response(self, response: httpx.Response) -> int:
        """Pull data.current.pollution.aqius out of an AirVisual response."""
        try:
            data: Any = response.json()
        except ValueError as e:
            raise FetchFailed(f"Invalid AirVisual response: {response.status_code}") from e

        if not isinstance(data, dict):
            raise FetchFailed(f"AirVisual response is not an object: {data!r}")

        if data.get("status") != STATUS_SUCCESS:
            raise FetchFailed(f"AirVisual request unsuccessful: {data}")

        try:
            return int(data["data"]["current"]["pollution"]["aqius"])
        except (KeyError, TypeError, ValueError) as e:
            raise FetchFailed(f"AirVisual response missing reading: {data}") from e
