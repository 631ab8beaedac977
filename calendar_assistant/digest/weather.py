"""Current conditions from weatherapi.com."""

import logging
from dataclasses import dataclass
from typing import Optional

import httpx

from ..errors import RemoteServiceError

logger = logging.getLogger(__name__)


@dataclass
class WeatherReport:
    temperature_f: float
    temperature_c: float
    condition: str


class WeatherClient:
    """Async weatherapi.com client."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: str = "https://api.weatherapi.com/v1",
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize the client.

        Args:
            api_key: weatherapi.com key; without it every lookup fails
            base_url: API base URL
            timeout: Request timeout in seconds
            client: Prebuilt httpx client (tests inject one with a mock transport)
        """
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.client = client or httpx.AsyncClient(timeout=timeout)

    async def current(self, location: str) -> WeatherReport:
        """
        Get current conditions for a location.

        Raises:
            RemoteServiceError: If no key is configured or the request fails
        """
        if not self.api_key:
            raise RemoteServiceError("weather api key not configured")

        try:
            response = await self.client.get(
                f"{self.base_url}/current.json",
                params={"key": self.api_key, "q": location},
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            raise RemoteServiceError(
                f"Weather API error: {e.response.status_code}",
                code=str(e.response.status_code),
            ) from e
        except httpx.HTTPError as e:
            raise RemoteServiceError(f"Weather request failed: {e}") from e

        try:
            current = data["current"]
            return WeatherReport(
                temperature_f=current["temp_f"],
                temperature_c=current["temp_c"],
                condition=current["condition"]["text"],
            )
        except (KeyError, TypeError) as e:
            raise RemoteServiceError(f"Unexpected weather response: missing {e}") from e

    async def close(self) -> None:
        await self.client.aclose()
