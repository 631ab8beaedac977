"""Error taxonomy shared by the gateways, the tool dispatcher and the chat handler."""

from typing import Optional


class AssistantError(Exception):
    """Base class for all errors raised by the assistant."""


class ValidationError(AssistantError):
    """Malformed or missing tool arguments."""


class NotFoundError(AssistantError):
    """Referenced event or resource does not exist remotely."""


class RemoteServiceError(AssistantError):
    """Failure of the calendar, messaging or weather provider."""

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.code = code


class ConfigurationError(AssistantError):
    """Missing user profile or missing required profile field."""


class AgentLoopError(AssistantError):
    """The agent kept requesting tools past the round ceiling."""
