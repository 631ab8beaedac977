"""Resolution of user profiles and calendar routes from configuration."""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from ..errors import ConfigurationError
from .config_schema import AppConfig, UserProfileConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CalendarRoute:
    """Logical calendar label bound to a concrete calendar ID."""

    label: str
    calendar_id: str
    display_name: str
    keywords: tuple = ()


@dataclass(frozen=True)
class UserProfile:
    """Fully resolved profile of a configured user."""

    user_id: str
    display_name: str
    calendar_id: str
    timezone: str
    weather_location: Optional[str] = None
    digest_channel: Optional[str] = None
    routes: List[CalendarRoute] = field(default_factory=list)
    primary_label: Optional[str] = None

    @property
    def is_multi_calendar(self) -> bool:
        return len(self.routes) > 1

    def all_calendar_ids(self) -> List[str]:
        """Every distinct calendar ID this user can read, primary first."""
        ids = [self.primary_route().calendar_id]
        for route in self.routes:
            if route.calendar_id not in ids:
                ids.append(route.calendar_id)
        return ids

    def primary_route(self) -> CalendarRoute:
        for route in self.routes:
            if route.label == self.primary_label:
                return route
        return CalendarRoute(
            label="primary",
            calendar_id=self.calendar_id,
            display_name="Primary",
        )

    def display_name_for(self, calendar_id: str) -> str:
        for route in self.routes:
            if route.calendar_id == calendar_id:
                return route.display_name
        return self.primary_route().display_name


class ProfileDirectory:
    """Looks up user profiles from the loaded configuration."""

    def __init__(self, config: AppConfig):
        self._users = {user.user_id: user for user in config.users}
        self._default_timezone = config.agent.default_timezone

    def resolve(self, user_id: str) -> UserProfile:
        """
        Resolve the profile for a Slack user.

        Raises:
            ConfigurationError: If no profile exists or it lacks a calendar ID
        """
        entry = self._users.get(user_id)
        if entry is None:
            raise ConfigurationError(f"No profile configured for user {user_id}")
        if not entry.calendar_id:
            raise ConfigurationError(f"Profile for user {user_id} has no calendar_id")
        return self._build(entry)

    def digest_profiles(self) -> List[UserProfile]:
        """Profiles that have a digest channel set. Incomplete profiles are skipped."""
        profiles = []
        for entry in self._users.values():
            if not entry.digest_channel:
                continue
            if not entry.calendar_id:
                logger.warning(f"Skipping digest for {entry.user_id}: profile has no calendar_id")
                continue
            profiles.append(self._build(entry))
        return profiles

    def _build(self, entry: UserProfileConfig) -> UserProfile:
        routes = [
            CalendarRoute(
                label=route.label,
                calendar_id=route.calendar_id,
                display_name=route.display_name or route.label.title(),
                keywords=tuple(k.lower() for k in route.keywords),
            )
            for route in entry.calendars
        ]
        return UserProfile(
            user_id=entry.user_id,
            display_name=entry.display_name,
            calendar_id=entry.calendar_id,
            timezone=entry.timezone or self._default_timezone,
            weather_location=entry.weather_location,
            digest_channel=entry.digest_channel,
            routes=routes,
            primary_label=entry.primary_calendar.lower() if entry.primary_calendar else None,
        )
