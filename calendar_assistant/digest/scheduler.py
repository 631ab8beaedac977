"""Daily summary job."""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Callable, Dict, Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from ..config.profiles import ProfileDirectory, UserProfile
from ..gcal.client import GoogleCalendarGateway
from ..slack.client import SlackNotifier
from .day_bounds import local_day_bounds
from .formatter import format_digest
from .weather import WeatherClient, WeatherReport

logger = logging.getLogger(__name__)

JOB_ID = "daily_digest"


class DailyDigestScheduler:
    """Posts each configured user's schedule for the day to their digest channel."""

    def __init__(
        self,
        profiles: ProfileDirectory,
        gateway: GoogleCalendarGateway,
        notifier: SlackNotifier,
        weather: Optional[WeatherClient] = None,
        cron: str = "0 7 * * *",
        timezone_name: str = "America/Denver",
        enabled: bool = True,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Initialize the scheduler.

        Args:
            profiles: Source of users with a digest channel
            gateway: Calendar gateway for today's events
            notifier: Slack notifier used to post digests
            weather: Weather client, None to leave the weather line out
            cron: Crontab expression of the job
            timezone_name: Timezone the cron expression is evaluated in
            enabled: Whether start() schedules the job
            clock: Returns the current aware datetime
        """
        self.profiles = profiles
        self.gateway = gateway
        self.notifier = notifier
        self.weather = weather
        self.cron = cron
        self.timezone_name = timezone_name
        self.enabled = enabled
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._scheduler: Optional[AsyncIOScheduler] = None

    def start(self) -> None:
        """Schedule the cron job on the running event loop."""
        if not self.enabled:
            logger.info("Daily digest disabled")
            return

        self._scheduler = AsyncIOScheduler(timezone=self.timezone_name)
        self._scheduler.add_job(
            self.send_all,
            CronTrigger.from_crontab(self.cron, timezone=self.timezone_name),
            id=JOB_ID,
            replace_existing=True,
        )
        self._scheduler.start()
        logger.info(f"Daily digest scheduled: '{self.cron}' ({self.timezone_name})")

    def shutdown(self) -> None:
        if self._scheduler is not None and self._scheduler.running:
            self._scheduler.shutdown(wait=False)
        self._scheduler = None

    async def send_all(self) -> Dict[str, bool]:
        """
        Send the digest to every configured user.

        A failure for one user is logged and does not stop the others.

        Returns:
            user ID -> whether the digest was posted
        """
        results: Dict[str, bool] = {}
        for profile in self.profiles.digest_profiles():
            try:
                await self.send_for(profile)
                results[profile.user_id] = True
            except Exception as e:
                logger.error(f"Error sending daily summary to {profile.user_id}: {e}", exc_info=True)
                results[profile.user_id] = False

        logger.info(f"Daily summary sent to {sum(results.values())}/{len(results)} users")
        return results

    async def send_for(self, profile: UserProfile) -> str:
        """Build and post one user's digest. Returns the posted text."""
        text = await self.build(profile)
        await self.notifier.post(profile.digest_channel, text, format_markdown=False)
        logger.info(f"Daily summary sent to {profile.user_id}")
        return text

    async def build(self, profile: UserProfile) -> str:
        """Fetch today's events and the weather concurrently and render the digest."""
        now = self._clock()
        start, end = local_day_bounds(profile.timezone, now)
        calendars = {
            cid: profile.display_name_for(cid) for cid in profile.all_calendar_ids()
        }
        include_weather = bool(profile.weather_location) and self.weather is not None

        events, report = await asyncio.gather(
            self.gateway.list_events_across(
                calendars, start.isoformat(), end.isoformat(), tz_name=profile.timezone
            ),
            self._fetch_weather(profile) if include_weather else _none(),
        )
        return format_digest(events, profile.timezone, now, report, include_weather)

    async def _fetch_weather(self, profile: UserProfile) -> Optional[WeatherReport]:
        try:
            return await self.weather.current(profile.weather_location)
        except Exception as e:
            logger.warning(f"Weather unavailable for {profile.user_id}: {e}")
            return None


async def _none() -> None:
    return None
