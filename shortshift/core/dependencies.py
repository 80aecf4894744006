"""Dependency Injection configuration for the application.

Route handlers receive the credential broker and uploader through these
dependencies; tests replace them via ``app.dependency_overrides``.
"""

from fastapi import Depends

from shortshift.auth.oauth import get_credential_broker
from shortshift.config import Settings, get_settings
from shortshift.core.protocols import AccessTokenProvider, UploadSubmitter
from shortshift.youtube.service import YouTubeUploader


def get_settings_dep() -> Settings:
    """Get application settings."""
    return get_settings()


def get_token_provider() -> AccessTokenProvider:
    """Get the OAuth access token provider."""
    return get_credential_broker()


def get_upload_submitter(
    token_provider: AccessTokenProvider = Depends(get_token_provider),
    settings: Settings = Depends(get_settings_dep),
) -> UploadSubmitter:
    """Get the YouTube uploader for one request."""
    return YouTubeUploader(token_provider, settings)
