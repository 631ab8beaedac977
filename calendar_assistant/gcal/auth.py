"""Google Calendar credential construction."""

import logging

from google.oauth2.credentials import Credentials
from google.oauth2.service_account import Credentials as ServiceAccountCredentials

from ..config.config_schema import GoogleCalendarConfig
from ..errors import ConfigurationError

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/calendar"]


def build_credentials(config: GoogleCalendarConfig):
    """
    Build Google credentials from configuration.

    A service account key file wins over OAuth refresh-token credentials.

    Raises:
        ConfigurationError: If neither credential form is configured
    """
    if config.service_account_file:
        logger.debug(f"Using service account key: {config.service_account_file}")
        return ServiceAccountCredentials.from_service_account_file(
            config.service_account_file, scopes=SCOPES
        )

    if config.refresh_token and config.client_id and config.client_secret:
        logger.debug("Using OAuth refresh token credentials")
        return Credentials(
            token=None,
            refresh_token=config.refresh_token,
            client_id=config.client_id,
            client_secret=config.client_secret,
            token_uri=config.token_uri,
            scopes=SCOPES,
        )

    raise ConfigurationError(
        "Google Calendar credentials are not configured "
        "(set service_account_file, or client_id/client_secret/refresh_token)"
    )
