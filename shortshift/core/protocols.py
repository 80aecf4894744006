"""Protocol definitions for the upload pipeline's external collaborators.

These protocols let routes and tests swap the OAuth token source and the
YouTube uploader for fakes without any network dependency.
"""

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from shortshift.youtube.schemas import UploadRequest, UploadResult


class AccessTokenProvider(Protocol):
    """Source of short-lived OAuth2 access tokens."""

    def get_access_token(self) -> str:
        """Return a valid access token.

        Raises:
            AuthError: If no token can be obtained
        """
        ...


class UploadSubmitter(Protocol):
    """Uploads a validated request to the video provider."""

    async def submit(self, request: "UploadRequest") -> "UploadResult":
        """Upload the media and metadata.

        Raises:
            AuthError: If the access token cannot be obtained
            ProviderError: If the provider rejects or interrupts the upload
        """
        ...
