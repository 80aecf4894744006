"""Google OAuth credential broker backed by a long-lived refresh token."""

import logging

from google.auth.exceptions import RefreshError, TransportError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials

from shortshift.config import Settings, get_settings
from shortshift.exceptions import AuthError

logger = logging.getLogger(__name__)


class CredentialBroker:
    """Exchanges the configured refresh token for short-lived access tokens.

    The client id, client secret and refresh token are read from settings
    once and never modified. Each call performs a fresh OAuth2 refresh, so
    concurrent uploads share no mutable state.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        """Initialize the broker.

        Args:
            settings: Application settings (defaults to cached settings)
        """
        self.settings = settings or get_settings()

    def _build_credentials(self) -> Credentials:
        """Create refreshable credentials from settings."""
        return Credentials(
            token=None,
            refresh_token=self.settings.youtube_refresh_token.get_secret_value(),
            token_uri=self.settings.youtube_token_uri,
            client_id=self.settings.youtube_client_id,
            client_secret=self.settings.youtube_client_secret.get_secret_value(),
            scopes=self.settings.scopes_list,
        )

    def get_access_token(self) -> str:
        """Obtain a short-lived access token.

        Returns:
            OAuth2 access token

        Raises:
            AuthError: If credentials are missing, revoked, or the token
                endpoint cannot be reached
        """
        if not self.settings.has_youtube_credentials:
            raise AuthError(
                "YouTube credentials are not configured. Set YOUTUBE_CLIENT_ID, "
                "YOUTUBE_CLIENT_SECRET and YOUTUBE_REFRESH_TOKEN."
            )

        credentials = self._build_credentials()
        try:
            credentials.refresh(Request())
        except RefreshError as e:
            logger.warning("Failed to refresh YouTube credentials: %s", type(e).__name__)
            raise AuthError(
                "YouTube rejected the refresh token. Re-authorize the channel."
            ) from e
        except TransportError as e:
            logger.warning("Token endpoint unreachable: %s", type(e).__name__)
            raise AuthError("Could not reach the Google token endpoint.") from e

        if not credentials.token:
            raise AuthError("Token refresh did not return an access token.")

        logger.debug("Obtained access token (expires %s)", credentials.expiry)
        return credentials.token


# Singleton instance
_credential_broker: CredentialBroker | None = None


def get_credential_broker() -> CredentialBroker:
    """Get or create the credential broker singleton."""
    global _credential_broker
    if _credential_broker is None:
        _credential_broker = CredentialBroker()
    return _credential_broker
