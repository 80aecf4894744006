"""Pydantic schemas for YouTube uploads.

``VideoMetadata`` doubles as the wire schema for the multipart upload form:
text fields arrive as strings (booleans as ``"true"``/``"false"``, tags as a
comma-joined list) and are normalized into typed values here.
"""

from collections.abc import Mapping
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)
from pydantic_core import PydanticCustomError

from shortshift.core.timestamps import parse_timestamp
from shortshift.exceptions import RequestValidationError

TITLE_MIN_LENGTH = 5
TITLE_MAX_LENGTH = 100
DESCRIPTION_MIN_LENGTH = 10
DESCRIPTION_MAX_LENGTH = 5000

# Multipart field names accepted by POST /api/upload (besides "video")
FORM_FIELDS = (
    "title",
    "description",
    "tags",
    "privacyStatus",
    "publishAt",
    "madeForKids",
    "notifySubscribers",
    "categoryId",
    "defaultLanguage",
)


class PrivacyStatus(str, Enum):
    """YouTube video privacy status."""

    PUBLIC = "public"
    PRIVATE = "private"
    UNLISTED = "unlisted"


class VideoCategory(str, Enum):
    """YouTube categories offered for Shorts."""

    PEOPLE_BLOGS = "22"
    COMEDY = "23"
    ENTERTAINMENT = "24"
    HOWTO_STYLE = "26"
    EDUCATION = "27"
    SCIENCE_TECH = "28"


def _check_length(field: str, value: Any, min_length: int, max_length: int) -> str:
    text = "" if value is None else str(value)
    if len(text) < min_length:
        raise PydanticCustomError(
            f"{field.lower()}_too_short",
            "{field} must be at least {min_length} characters.",
            {"field": field, "min_length": min_length},
        )
    if len(text) > max_length:
        raise PydanticCustomError(
            f"{field.lower()}_too_long",
            "{field} must be at most {max_length} characters.",
            {"field": field, "max_length": max_length},
        )
    return text


class VideoMetadata(BaseModel):
    """YouTube video metadata for upload."""

    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(..., description="Video title")
    description: str = Field(..., description="Video description")
    tags: list[str] = Field(default_factory=list, description="Video tags")
    privacy_status: PrivacyStatus = Field(
        default=PrivacyStatus.PRIVATE, alias="privacyStatus"
    )
    publish_at: datetime | None = Field(
        default=None, alias="publishAt", description="Scheduled publish time"
    )
    made_for_kids: bool = Field(default=False, alias="madeForKids")
    notify_subscribers: bool = Field(default=False, alias="notifySubscribers")
    category_id: str = Field(
        default=VideoCategory.ENTERTAINMENT.value, alias="categoryId"
    )
    default_language: str | None = Field(default=None, alias="defaultLanguage")

    @field_validator("title", mode="before")
    @classmethod
    def _check_title(cls, value: Any) -> str:
        return _check_length("Title", value, TITLE_MIN_LENGTH, TITLE_MAX_LENGTH)

    @field_validator("description", mode="before")
    @classmethod
    def _check_description(cls, value: Any) -> str:
        return _check_length(
            "Description", value, DESCRIPTION_MIN_LENGTH, DESCRIPTION_MAX_LENGTH
        )

    @field_validator("tags", mode="before")
    @classmethod
    def _split_tags(cls, value: Any) -> list[str]:
        if not value:
            return []
        items = value.split(",") if isinstance(value, str) else value
        tags: list[str] = []
        for item in items:
            tag = str(item).strip()
            if tag and tag not in tags:
                tags.append(tag)
        return tags

    @field_validator("privacy_status", mode="before")
    @classmethod
    def _check_privacy(cls, value: Any) -> PrivacyStatus:
        try:
            return PrivacyStatus(value)
        except ValueError:
            raise PydanticCustomError(
                "invalid_privacy_status",
                "Privacy status must be one of public, private or unlisted.",
            ) from None

    @field_validator("publish_at", mode="before")
    @classmethod
    def _parse_publish_at(cls, value: Any) -> datetime | None:
        if value is None or value == "":
            return None
        if isinstance(value, datetime):
            return value
        try:
            return parse_timestamp(str(value))
        except ValueError:
            raise PydanticCustomError(
                "invalid_publish_at", "Invalid publish date."
            ) from None

    @field_validator("made_for_kids", "notify_subscribers", mode="before")
    @classmethod
    def _parse_flag(cls, value: Any) -> bool:
        return value is True or value == "true"

    @field_validator("category_id", mode="before")
    @classmethod
    def _default_category(cls, value: Any) -> str:
        return str(value) if value else VideoCategory.ENTERTAINMENT.value

    @field_validator("default_language", mode="before")
    @classmethod
    def _blank_language(cls, value: Any) -> str | None:
        return str(value) if value else None

    @model_validator(mode="after")
    def _check_schedule(self) -> "VideoMetadata":
        if self.publish_at is not None and self.privacy_status == PrivacyStatus.PUBLIC:
            raise PydanticCustomError(
                "scheduled_public",
                "Scheduled uploads must be private or unlisted until publish time.",
            )
        return self

    @classmethod
    def from_form(
        cls,
        fields: Mapping[str, Any],
        default_privacy: PrivacyStatus = PrivacyStatus.PRIVATE,
    ) -> "VideoMetadata":
        """Validate raw multipart fields.

        Args:
            fields: Form values keyed by their wire names
            default_privacy: Privacy status used when the field is omitted

        Returns:
            Normalized metadata

        Raises:
            RequestValidationError: With every violated rule
        """
        data = {name: fields.get(name) for name in FORM_FIELDS}
        if not data["privacyStatus"]:
            data["privacyStatus"] = default_privacy
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise RequestValidationError([error["msg"] for error in e.errors()]) from e


class UploadRequest(BaseModel):
    """A validated upload: the media stream plus its metadata."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    media: Any = Field(..., exclude=True, description="Readable binary stream")
    file_name: str
    mime_type: str = "video/mp4"
    file_size: int = Field(default=0, ge=0)
    metadata: VideoMetadata


class UploadResult(BaseModel):
    """Result of a successful YouTube upload."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    video_id: str = Field(..., alias="videoId")
    url: str


class ErrorResponse(BaseModel):
    """Error body returned by the API."""

    error: str
