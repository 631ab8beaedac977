"""Pydantic models for configuration validation."""

from typing import List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, Field, field_validator


def _check_timezone(value: str) -> str:
    try:
        ZoneInfo(value)
    except (ZoneInfoNotFoundError, ValueError):
        raise ValueError(
            f"Invalid timezone: '{value}'. "
            f"Must be a valid IANA timezone (e.g., 'America/Denver', 'UTC', 'Asia/Tokyo')"
        )
    return value


class SlackConfig(BaseModel):
    """Slack app configuration."""

    bot_token: str = Field(..., description="Bot user OAuth token (xoxb-...)")
    signing_secret: str = Field(..., description="Signing secret used to verify event requests")
    allowed_user_ids: List[str] = Field(
        default_factory=list, description="Slack user IDs allowed to talk to the bot"
    )


class AnthropicConfig(BaseModel):
    """Anthropic LLM configuration."""

    api_key: str = Field(..., description="Anthropic API key")
    model: str = Field(default="claude-sonnet-4-20250514", description="Model name")
    temperature: Optional[float] = Field(default=None, ge=0.0, le=1.0, description="Temperature")
    max_tokens: int = Field(default=1024, gt=0, description="Maximum tokens")


class OpenAIConfig(BaseModel):
    """OpenAI LLM configuration."""

    api_key: str = Field(..., description="OpenAI API key")
    model: str = Field(default="gpt-4o", description="Model name")
    temperature: float = Field(default=0.7, ge=0.0, le=2.0, description="Temperature")
    max_tokens: int = Field(default=1024, gt=0, description="Maximum tokens")
    organization_id: Optional[str] = Field(default=None, description="Organization ID")


class OllamaConfig(BaseModel):
    """Ollama LLM configuration."""

    base_url: str = Field(default="http://localhost:11434", description="Ollama base URL")
    model: str = Field(..., description="Model name")
    temperature: float = Field(default=0.7, ge=0.0, le=2.0, description="Temperature")
    max_tokens: int = Field(default=1024, gt=0, description="Maximum tokens")
    context_window: Optional[int] = Field(default=None, description="Context window size")


class LLMConfig(BaseModel):
    """LLM configuration."""

    provider: str = Field(
        default="anthropic", description="Provider: 'anthropic', 'openai', or 'ollama'"
    )
    anthropic: Optional[AnthropicConfig] = Field(default=None, description="Anthropic configuration")
    openai: Optional[OpenAIConfig] = Field(default=None, description="OpenAI configuration")
    ollama: Optional[OllamaConfig] = Field(default=None, description="Ollama configuration")


class GoogleCalendarConfig(BaseModel):
    """Google Calendar credentials."""

    client_id: Optional[str] = Field(default=None, description="OAuth client ID")
    client_secret: Optional[str] = Field(default=None, description="OAuth client secret")
    refresh_token: Optional[str] = Field(default=None, description="OAuth refresh token")
    token_uri: str = Field(
        default="https://oauth2.googleapis.com/token", description="OAuth token endpoint"
    )
    service_account_file: Optional[str] = Field(
        default=None, description="Path to a service account key JSON file"
    )


class CalendarRouteConfig(BaseModel):
    """Logical calendar label mapped to a concrete calendar ID."""

    label: str = Field(..., description="Calendar label, e.g. 'work' or 'personal'")
    calendar_id: str = Field(..., description="Google calendar ID")
    keywords: List[str] = Field(
        default_factory=list, description="Keywords that route free text to this calendar"
    )
    display_name: Optional[str] = Field(default=None, description="Name shown to the user")

    @field_validator("label")
    @classmethod
    def normalize_label(cls, v: str) -> str:
        """Labels are compared case-insensitively."""
        return v.strip().lower()


class UserProfileConfig(BaseModel):
    """Per-user profile."""

    user_id: str = Field(..., description="Slack user ID")
    display_name: str = Field(default="", description="Name used in prompts and digests")
    calendar_id: Optional[str] = Field(default=None, description="Primary Google calendar ID")
    timezone: Optional[str] = Field(default=None, description="IANA timezone of the user")
    weather_location: Optional[str] = Field(default=None, description="Location for the digest weather line")
    digest_channel: Optional[str] = Field(default=None, description="Channel that receives the daily digest")
    calendars: List[CalendarRouteConfig] = Field(
        default_factory=list, description="Additional routed calendars"
    )
    primary_calendar: Optional[str] = Field(
        default=None, description="Label of the route used when no keyword matches"
    )

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: Optional[str]) -> Optional[str]:
        """Validate timezone string using zoneinfo."""
        if v is None:
            return v
        return _check_timezone(v)


class WeatherConfig(BaseModel):
    """Weather lookup configuration."""

    api_key: Optional[str] = Field(default=None, description="weatherapi.com API key")
    base_url: str = Field(default="https://api.weatherapi.com/v1", description="API base URL")
    timeout_seconds: float = Field(default=10.0, gt=0, description="Request timeout")


class DigestConfig(BaseModel):
    """Daily digest schedule."""

    enabled: bool = Field(default=True, description="Whether the cron job is scheduled")
    cron: str = Field(default="0 7 * * *", description="Crontab expression for the digest")
    timezone: str = Field(default="America/Denver", description="Timezone the cron expression runs in")

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        """Validate timezone string using zoneinfo."""
        return _check_timezone(v)

    @field_validator("cron")
    @classmethod
    def validate_cron(cls, v: str) -> str:
        """Crontab expressions have exactly five fields."""
        if len(v.split()) != 5:
            raise ValueError(f"Invalid cron expression: '{v}'. Expected 5 fields")
        return v


class ConversationConfig(BaseModel):
    """Conversation store limits."""

    ttl_minutes: int = Field(default=30, gt=0, description="Session time-to-live after last activity")
    max_turns: int = Field(default=20, ge=2, le=100, description="Turns kept per session")
    sweep_interval_minutes: int = Field(default=10, gt=0, description="Expired-session sweep interval")


class AgentConfig(BaseModel):
    """Agent configuration."""

    assistant_name: str = Field(default="Michelle", description="Name the assistant introduces itself with")
    max_rounds: int = Field(default=10, ge=1, le=50, description="Maximum tool-use rounds per message")
    default_timezone: str = Field(
        default="America/Denver", description="Timezone for users without one"
    )

    @field_validator("default_timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        """Validate timezone string using zoneinfo."""
        return _check_timezone(v)


class ServerConfig(BaseModel):
    """HTTP server configuration."""

    host: str = Field(default="0.0.0.0", description="Bind address")
    port: int = Field(default=3006, gt=0, lt=65536, description="Bind port")


class AppConfig(BaseModel):
    """Main application configuration."""

    slack: SlackConfig = Field(..., description="Slack configuration")
    llm: LLMConfig = Field(..., description="LLM configuration")
    google_calendar: GoogleCalendarConfig = Field(
        default_factory=GoogleCalendarConfig, description="Google Calendar credentials"
    )
    users: List[UserProfileConfig] = Field(default_factory=list, description="User profiles")
    weather: WeatherConfig = Field(default_factory=WeatherConfig, description="Weather configuration")
    digest: DigestConfig = Field(default_factory=DigestConfig, description="Daily digest configuration")
    conversation: ConversationConfig = Field(
        default_factory=ConversationConfig, description="Conversation store configuration"
    )
    agent: AgentConfig = Field(default_factory=AgentConfig, description="Agent configuration")
    server: ServerConfig = Field(default_factory=ServerConfig, description="HTTP server configuration")

    def validate(self) -> None:
        """Validate configuration consistency."""
        provider_configs = {
            "anthropic": self.llm.anthropic,
            "openai": self.llm.openai,
            "ollama": self.llm.ollama,
        }

        if self.llm.provider not in provider_configs:
            raise ValueError(f"Unknown LLM provider: {self.llm.provider}")

        if not provider_configs[self.llm.provider]:
            raise ValueError(
                f"{self.llm.provider} configuration is required when provider is '{self.llm.provider}'"
            )

        seen_users = set()
        for user in self.users:
            if user.user_id in seen_users:
                raise ValueError(f"Duplicate user profile: {user.user_id}")
            seen_users.add(user.user_id)

            labels = [route.label for route in user.calendars]
            if len(labels) != len(set(labels)):
                raise ValueError(f"Duplicate calendar label for user {user.user_id}")
            if user.primary_calendar and user.primary_calendar.lower() not in labels:
                raise ValueError(
                    f"primary_calendar '{user.primary_calendar}' is not a calendar label "
                    f"of user {user.user_id}"
                )
