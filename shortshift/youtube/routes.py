"""Upload routes."""

import logging
from typing import Any

import anyio
from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import JSONResponse
from starlette.datastructures import UploadFile

from shortshift.config import Settings
from shortshift.core.dependencies import get_settings_dep, get_upload_submitter
from shortshift.core.protocols import UploadSubmitter
from shortshift.exceptions import RequestValidationError, ShortShiftError
from shortshift.youtube.schemas import (
    FORM_FIELDS,
    ErrorResponse,
    UploadRequest,
    UploadResult,
    VideoMetadata,
)
from shortshift.youtube.service import GENERIC_UPLOAD_ERROR

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["upload"])


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _file_size(upload: UploadFile) -> int:
    if upload.size is not None:
        return upload.size
    stream = upload.file
    stream.seek(0, 2)
    size = stream.tell()
    stream.seek(0)
    return size


def check_media(video: Any, max_file_size: int) -> tuple[UploadFile, int]:
    """Check the uploaded media before any metadata validation.

    Args:
        video: Value of the ``video`` form field
        max_file_size: Largest accepted file in bytes

    Returns:
        Tuple of (upload file, size in bytes)

    Raises:
        RequestValidationError: If the file is missing or too large
    """
    if not isinstance(video, UploadFile):
        raise RequestValidationError("Video file is required.")
    size = _file_size(video)
    if size > max_file_size:
        raise RequestValidationError("Video file is too large.")
    return video, size


@router.post(
    "/upload",
    status_code=status.HTTP_201_CREATED,
    response_model=UploadResult,
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
    },
)
async def upload_short(
    request: Request,
    submitter: UploadSubmitter = Depends(get_upload_submitter),
    settings: Settings = Depends(get_settings_dep),
) -> Any:
    """Upload a Short to YouTube.

    Accepts a multipart form with a ``video`` file and the metadata fields.
    The upload runs within this request; there is no queue or retry.

    Returns:
        ``201 {videoId, url}`` on success, ``400 {error}`` for invalid input,
        ``500 {error}`` when authorization or the provider fails
    """
    try:
        async with request.form() as form:
            video, file_size = check_media(form.get("video"), settings.max_file_size)
            fields = {
                name: value
                for name in FORM_FIELDS
                if isinstance(value := form.get(name), str)
            }
            metadata = VideoMetadata.from_form(
                fields, default_privacy=settings.youtube_default_privacy
            )
            upload = UploadRequest(
                media=video.file,
                file_name=video.filename or "short.mp4",
                mime_type=video.content_type or "video/mp4",
                file_size=file_size,
                metadata=metadata,
            )

            with anyio.fail_after(settings.max_upload_duration_seconds):
                result = await submitter.submit(upload)
    except RequestValidationError as e:
        logger.warning("Rejected upload request: %s", e.message)
        return _error_response(status.HTTP_400_BAD_REQUEST, e.message)
    except HTTPException as e:
        return _error_response(e.status_code, str(e.detail))
    except TimeoutError:
        logger.error(
            "Upload exceeded %s seconds", settings.max_upload_duration_seconds
        )
        return _error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Upload did not finish in time. Try a smaller file.",
        )
    except ShortShiftError as e:
        logger.error("Upload failed (%s): %s", type(e).__name__, e.message)
        return _error_response(e.status_code, e.message)
    except Exception as e:
        logger.exception("Unexpected upload error")
        return _error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR, str(e) or GENERIC_UPLOAD_ERROR
        )

    logger.info("Short uploaded: %s", result.url)
    return result
