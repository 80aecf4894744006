"""YouTube service for Short uploads."""

import json
import logging
from typing import Any

from anyio.to_thread import run_sync
from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError
from googleapiclient.http import MediaIoBaseUpload

from shortshift.config import Settings, get_settings
from shortshift.core.protocols import AccessTokenProvider
from shortshift.core.timestamps import to_iso_utc
from shortshift.exceptions import ProviderError
from shortshift.youtube.schemas import UploadRequest, UploadResult, VideoMetadata

logger = logging.getLogger(__name__)

WATCH_URL = "https://www.youtube.com/watch?v={video_id}"
GENERIC_UPLOAD_ERROR = "An unexpected error occurred while uploading the video."


def _describe_http_error(error: HttpError) -> tuple[str, str | None]:
    """Extract the provider message and reason from an HttpError.

    Args:
        error: Error raised by the API client

    Returns:
        Tuple of (message, reason)
    """
    message = ""
    reason = None
    try:
        content = json.loads(error.content.decode("utf-8"))
        details = content.get("error", {})
        message = details.get("message", "")
        reason = details.get("errors", [{}])[0].get("reason")
    except (json.JSONDecodeError, AttributeError, IndexError, UnicodeDecodeError) as e:
        logger.warning("Could not parse HttpError content: %s", e)

    if not message:
        message = getattr(error, "reason", "") or str(error)
    return message, reason


def build_video_body(metadata: VideoMetadata) -> dict[str, Any]:
    """Build the ``videos.insert`` resource body.

    Args:
        metadata: Validated video metadata

    Returns:
        Body with ``snippet`` and ``status`` parts
    """
    snippet: dict[str, Any] = {
        "title": metadata.title,
        "description": metadata.description,
        "tags": metadata.tags,
        "categoryId": metadata.category_id,
    }
    if metadata.default_language:
        snippet["defaultLanguage"] = metadata.default_language

    status: dict[str, Any] = {
        "privacyStatus": metadata.privacy_status.value,
        "madeForKids": metadata.made_for_kids,
        "selfDeclaredMadeForKids": metadata.made_for_kids,
    }
    if metadata.publish_at is not None:
        status["publishAt"] = to_iso_utc(metadata.publish_at)

    return {"snippet": snippet, "status": status}


class YouTubeUploader:
    """Uploads Shorts through the YouTube Data API."""

    YOUTUBE_API_SERVICE_NAME = "youtube"
    YOUTUBE_API_VERSION = "v3"

    def __init__(
        self,
        token_provider: AccessTokenProvider,
        settings: Settings | None = None,
    ) -> None:
        """Initialize the uploader.

        Args:
            token_provider: Source of short-lived access tokens
            settings: Application settings (defaults to cached settings)
        """
        self.token_provider = token_provider
        self.settings = settings or get_settings()

    def _build_service(self, access_token: str) -> Any:
        """Create a YouTube API client authorized with the given token."""
        return build(
            self.YOUTUBE_API_SERVICE_NAME,
            self.YOUTUBE_API_VERSION,
            credentials=Credentials(token=access_token),
            cache_discovery=False,
        )

    async def submit(self, request: UploadRequest) -> UploadResult:
        """Upload a Short using a resumable upload.

        Args:
            request: Validated upload request

        Returns:
            UploadResult with video ID and watch URL

        Raises:
            AuthError: If no access token can be obtained
            ProviderError: If YouTube rejects or interrupts the upload
        """
        access_token = await run_sync(self.token_provider.get_access_token)
        service = self._build_service(access_token)

        metadata = request.metadata
        media = MediaIoBaseUpload(
            request.media,
            mimetype=request.mime_type,
            chunksize=self.settings.upload_chunk_size,
            resumable=True,
        )

        logger.info(
            "Uploading %s (%d bytes) as %s",
            request.file_name,
            request.file_size,
            metadata.privacy_status.value,
        )

        try:
            insert_request = service.videos().insert(
                part="snippet,status",
                body=build_video_body(metadata),
                media_body=media,
                notifySubscribers=metadata.notify_subscribers,
            )

            response = None
            while response is None:
                # Blocking chunk upload runs in a worker thread
                status, response = await run_sync(insert_request.next_chunk)
                if status:
                    logger.info(
                        "Uploading %s: %.1f%%",
                        request.file_name,
                        status.progress() * 100,
                    )
        except HttpError as e:
            message, reason = _describe_http_error(e)
            logger.error(
                "YouTube rejected upload of %s: status=%s, reason=%s",
                request.file_name,
                e.resp.status,
                reason,
            )
            raise ProviderError(
                message, reason=reason, provider_status=e.resp.status
            ) from e
        except Exception as e:
            logger.exception("YouTube upload of %s was interrupted", request.file_name)
            raise ProviderError(str(e) or GENERIC_UPLOAD_ERROR) from e

        video_id = response.get("id") if isinstance(response, dict) else None
        if not video_id:
            raise ProviderError("YouTube did not return a video ID.")

        logger.info("Uploaded %s as video %s", request.file_name, video_id)
        return UploadResult(video_id=video_id, url=WATCH_URL.format(video_id=video_id))
