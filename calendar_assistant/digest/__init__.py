"""Daily summary: day bounds, weather, rendering and scheduling."""

from .day_bounds import local_day_bounds
from .scheduler import DailyDigestScheduler
from .weather import WeatherClient, WeatherReport

__all__ = ["DailyDigestScheduler", "WeatherClient", "WeatherReport", "local_day_bounds"]
