"""Intake form state and the transitions applied by user actions.

``IntakeState`` is an immutable snapshot of the form. Each user action is a
function taking the current state and returning the next one, so the whole
flow can be exercised without a UI.
"""

import logging
from collections.abc import Callable
from enum import Enum
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, ConfigDict

from shortshift.config import Settings, get_settings
from shortshift.exceptions import LocalValidationError
from shortshift.intake.hashtags import suggest_hashtags
from shortshift.intake.schedule import resolve_publish_at
from shortshift.youtube.schemas import PrivacyStatus, UploadResult, VideoCategory

logger = logging.getLogger(__name__)

UNTITLED = "Untitled Short"
DEFAULT_LANGUAGE = "en"

FILE_REQUIRED_MESSAGE = "Attach a Short before uploading."
SCHEDULED_PUBLIC_MESSAGE = (
    "Scheduled Shorts must use private or unlisted privacy until publish time."
)

# Fields the user edits directly; everything else is submission bookkeeping
EDITABLE_FIELDS = frozenset(
    {
        "file",
        "title",
        "description",
        "tags_input",
        "privacy_status",
        "schedule_date",
        "schedule_time",
        "made_for_kids",
        "notify_subscribers",
        "category_id",
        "default_language",
    }
)


class QueueStatus(str, Enum):
    """Launch plan entry status."""

    DRAFT = "draft"
    READY = "ready"
    SCHEDULED = "scheduled"
    UPLOADED = "uploaded"


class QueueItem(BaseModel):
    """A Short staged in the launch plan."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    publish_at: str | None = None
    status: QueueStatus = QueueStatus.DRAFT
    url: str | None = None


class MediaFile(BaseModel):
    """The video attached to the form."""

    model_config = ConfigDict(frozen=True)

    file_name: str
    content: bytes
    mime_type: str = "video/mp4"


class IntakeState(BaseModel):
    """Snapshot of the intake form and its launch plan."""

    model_config = ConfigDict(frozen=True)

    file: MediaFile | None = None
    title: str = ""
    description: str = ""
    tags_input: str = ""
    privacy_status: PrivacyStatus = PrivacyStatus.PRIVATE
    schedule_date: str = ""
    schedule_time: str = ""
    made_for_kids: bool = False
    notify_subscribers: bool = False
    category_id: str = VideoCategory.ENTERTAINMENT.value
    default_language: str = DEFAULT_LANGUAGE

    uploading: bool = False
    error: str | None = None
    result: UploadResult | None = None
    queue: tuple[QueueItem, ...] = ()

    @property
    def publish_at(self) -> str | None:
        """Resolved publish timestamp for the current schedule fields."""
        return resolve_publish_at(self.schedule_date, self.schedule_time)


class SubmissionPayload(BaseModel):
    """Multipart body for ``POST /api/upload``."""

    model_config = ConfigDict(frozen=True)

    title: str
    fields: dict[str, str]
    file: MediaFile

    def files(self) -> dict[str, tuple[str, bytes, str]]:
        """Return the file part in the shape httpx expects."""
        return {
            "video": (self.file.file_name, self.file.content, self.file.mime_type)
        }


def _replace(state: IntakeState, **changes: Any) -> IntakeState:
    return IntakeState(**{**dict(state), **changes})


def _new_queue_id() -> str:
    return str(uuid4())


def new_intake_state(settings: Settings | None = None) -> IntakeState:
    """Create an empty form with the tags field seeded from settings."""
    settings = settings or get_settings()
    return IntakeState(tags_input=settings.next_public_default_hashtags)


def update_fields(state: IntakeState, **changes: Any) -> IntakeState:
    """Apply user edits to form fields.

    Raises:
        ValueError: If a change targets a field the user cannot edit
    """
    unknown = set(changes) - EDITABLE_FIELDS
    if unknown:
        raise ValueError(f"Not editable: {', '.join(sorted(unknown))}")
    return _replace(state, **changes)


def attach_file(
    state: IntakeState, file_name: str, content: bytes, mime_type: str = "video/mp4"
) -> IntakeState:
    """Attach a video to the form."""
    return _replace(
        state,
        file=MediaFile(file_name=file_name, content=content, mime_type=mime_type),
    )


def reset_form(state: IntakeState) -> IntakeState:
    """Clear every form field back to its default; the launch plan is kept."""
    return IntakeState(
        uploading=state.uploading,
        error=state.error,
        result=state.result,
        queue=state.queue,
    )


def suggested_hashtags(state: IntakeState) -> list[str]:
    """Hashtag suggestions for the current title, description and tags."""
    return suggest_hashtags(state.title, state.description, state.tags_input)


def autofill_tags(state: IntakeState) -> IntakeState:
    """Fill an empty tags field with the suggested hashtags."""
    if state.tags_input.strip():
        return state
    return _replace(state, tags_input=", ".join(suggested_hashtags(state)))


def add_to_launch_plan(
    state: IntakeState, id_factory: Callable[[], str] = _new_queue_id
) -> IntakeState:
    """Stage the current Short in the launch plan."""
    publish_at = state.publish_at
    item = QueueItem(
        id=id_factory(),
        title=state.title or UNTITLED,
        publish_at=publish_at,
        status=QueueStatus.SCHEDULED if publish_at else QueueStatus.DRAFT,
    )
    return _replace(state, queue=(*state.queue, item))


def prepare_submission(state: IntakeState) -> SubmissionPayload:
    """Run the local pre-submit checks and build the multipart body.

    Raises:
        LocalValidationError: If no file is attached, or a scheduled Short
            is set to public
    """
    if state.file is None:
        raise LocalValidationError(FILE_REQUIRED_MESSAGE)

    publish_at = state.publish_at
    if publish_at and state.privacy_status == PrivacyStatus.PUBLIC:
        raise LocalValidationError(SCHEDULED_PUBLIC_MESSAGE)

    fields = {
        "title": state.title,
        "description": state.description,
        "tags": state.tags_input,
        "privacyStatus": state.privacy_status.value,
    }
    if publish_at:
        fields["publishAt"] = publish_at
    fields.update(
        {
            "madeForKids": "true" if state.made_for_kids else "false",
            "notifySubscribers": "true" if state.notify_subscribers else "false",
            "categoryId": state.category_id,
            "defaultLanguage": state.default_language,
        }
    )
    return SubmissionPayload(title=state.title, fields=fields, file=state.file)


def start_submission(state: IntakeState) -> IntakeState:
    """Clear the previous outcome before a new attempt."""
    return _replace(state, error=None, result=None)


def submission_sent(state: IntakeState) -> IntakeState:
    """Mark the form as uploading."""
    return _replace(state, uploading=True)


def submission_failed(state: IntakeState, message: str) -> IntakeState:
    """Record a failed attempt; the form keeps its values for correction."""
    return _replace(state, uploading=False, error=message)


def submission_succeeded(
    state: IntakeState, submitted_title: str, result: UploadResult
) -> IntakeState:
    """Record a successful upload.

    Launch plan entries with the submitted title and no URL yet are marked
    uploaded, then the form is reset.
    """
    queue = tuple(
        item.model_copy(update={"status": QueueStatus.UPLOADED, "url": result.url})
        if not item.url and submitted_title and item.title == submitted_title
        else item
        for item in state.queue
    )
    updated = sum(1 for item in queue if item.url == result.url)
    logger.info("Upload %s matched %d launch plan entries", result.video_id, updated)
    return reset_form(_replace(state, uploading=False, result=result, queue=queue))
