"""Unit tests for the upload route.

Tests for:
- Media checks (missing, non-file, oversized)
- Metadata validation and error bodies
- Success and provider/auth failure responses
"""

import io

import pytest
from fastapi import status
from fastapi.testclient import TestClient
from starlette.datastructures import UploadFile

from shortshift.exceptions import AuthError, LocalValidationError, RequestValidationError
from shortshift.youtube.routes import check_media
from shortshift.youtube.schemas import PrivacyStatus
from tests.fakes import FakeSubmitter

ONE_GIB = 1024 * 1024 * 1024


@pytest.mark.unit
class TestCheckMedia:
    """Tests for media checks that run before schema validation."""

    def test_missing_file_rejected(self):
        """Test that an absent video field is rejected."""
        with pytest.raises(RequestValidationError, match="Video file is required."):
            check_media(None, ONE_GIB)

    def test_text_value_rejected(self):
        """Test that a plain text video field is rejected."""
        with pytest.raises(RequestValidationError, match="Video file is required."):
            check_media("not-a-file", ONE_GIB)

    def test_file_over_one_gib_rejected(self):
        """Test that a file one byte over 1GiB is rejected."""
        upload = UploadFile(file=io.BytesIO(b""), size=ONE_GIB + 1, filename="big.mp4")
        with pytest.raises(RequestValidationError, match="Video file is too large."):
            check_media(upload, ONE_GIB)

    def test_file_of_exactly_one_gib_accepted(self):
        """Test that the size limit is inclusive."""
        upload = UploadFile(file=io.BytesIO(b""), size=ONE_GIB, filename="ok.mp4")
        video, size = check_media(upload, ONE_GIB)
        assert video is upload
        assert size == ONE_GIB

    def test_size_measured_when_unknown(self):
        """Test that the stream is measured and rewound when size is unset."""
        stream = io.BytesIO(b"\x00" * 42)
        upload = UploadFile(file=stream, filename="clip.mp4")
        _, size = check_media(upload, ONE_GIB)
        assert size == 42
        assert stream.tell() == 0


@pytest.mark.unit
class TestUploadShort:
    """Tests for POST /api/upload."""

    def test_upload_success(self, client, fake_submitter, valid_form, video_file):
        """Test a successful upload returns 201 with the watch URL."""
        response = client.post("/api/upload", data=valid_form, files=video_file)

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["videoId"] == "abc123"
        assert "abc123" in data["url"]

    def test_upload_passes_normalized_request(
        self, client, fake_submitter, valid_form, video_file
    ):
        """Test the submitter receives typed metadata and the file bytes."""
        client.post("/api/upload", data=valid_form, files=video_file)

        assert len(fake_submitter.requests) == 1
        request = fake_submitter.requests[0]
        assert request.file_name == "short.mp4"
        assert request.mime_type == "video/mp4"
        assert request.file_size == 1024
        assert fake_submitter.media == [b"\x00" * 1024]

        metadata = request.metadata
        assert metadata.tags == ["#morning", "productivity", "habits"]
        assert metadata.privacy_status == PrivacyStatus.PRIVATE
        assert metadata.made_for_kids is False
        assert metadata.notify_subscribers is True
        assert metadata.category_id == "26"
        assert metadata.default_language == "en"
        assert metadata.publish_at is None

    def test_missing_file_returns_400(self, client, fake_submitter, valid_form):
        """Test that a request without a video is rejected."""
        response = client.post("/api/upload", data=valid_form)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json() == {"error": "Video file is required."}
        assert fake_submitter.requests == []

    def test_oversized_file_checked_before_schema(
        self, override_app, fake_submitter, test_settings, video_file
    ):
        """Test that the size error wins over invalid metadata."""
        settings = test_settings.model_copy(update={"max_file_size": 1023})
        client = TestClient(override_app(fake_submitter, settings))

        response = client.post(
            "/api/upload", data={"title": "abc"}, files=video_file
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json() == {"error": "Video file is too large."}

    def test_title_length_boundary(self, client, valid_form, video_file):
        """Test that titles need at least five characters."""
        response = client.post(
            "/api/upload", data={**valid_form, "title": "abcd"}, files=video_file
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "Title" in response.json()["error"]

        response = client.post(
            "/api/upload", data={**valid_form, "title": "abcde"}, files=video_file
        )
        assert response.status_code == status.HTTP_201_CREATED

    def test_description_length_boundary(self, client, valid_form, video_file):
        """Test that descriptions need at least ten characters."""
        response = client.post(
            "/api/upload",
            data={**valid_form, "description": "123456789"},
            files=video_file,
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "Description" in response.json()["error"]

        response = client.post(
            "/api/upload",
            data={**valid_form, "description": "1234567890"},
            files=video_file,
        )
        assert response.status_code == status.HTTP_201_CREATED

    def test_invalid_publish_at_returns_400(self, client, valid_form, video_file):
        """Test that a malformed publish date is a request error."""
        response = client.post(
            "/api/upload",
            data={**valid_form, "publishAt": "not-a-date"},
            files=video_file,
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json() == {"error": "Invalid publish date."}

    def test_out_of_range_publish_at_returns_400(
        self, client, valid_form, video_file, local_timezone
    ):
        """Test that a publish date with no UTC equivalent is a request error."""
        local_timezone("America/Los_Angeles")
        response = client.post(
            "/api/upload",
            data={**valid_form, "publishAt": "9999-12-31T23:59:00"},
            files=video_file,
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json() == {"error": "Invalid publish date."}

    def test_all_violations_joined(self, client, video_file):
        """Test that every violated rule is reported in one message."""
        response = client.post(
            "/api/upload",
            data={"title": "abc", "description": "short", "privacyStatus": "secret"},
            files=video_file,
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        error = response.json()["error"]
        assert "Title must be at least 5 characters." in error
        assert "Description must be at least 10 characters." in error
        assert "Privacy status must be one of" in error

    def test_privacy_defaults_from_settings(
        self, override_app, fake_submitter, test_settings, valid_form, video_file
    ):
        """Test that an omitted privacy status uses the configured default."""
        settings = test_settings.model_copy(
            update={"youtube_default_privacy": PrivacyStatus.UNLISTED}
        )
        client = TestClient(override_app(fake_submitter, settings))
        form = {k: v for k, v in valid_form.items() if k != "privacyStatus"}

        response = client.post("/api/upload", data=form, files=video_file)

        assert response.status_code == status.HTTP_201_CREATED
        metadata = fake_submitter.requests[0].metadata
        assert metadata.privacy_status == PrivacyStatus.UNLISTED

    def test_provider_failure_returns_500(
        self, override_app, failing_submitter, test_settings, valid_form, video_file
    ):
        """Test that a provider rejection surfaces its message."""
        client = TestClient(override_app(failing_submitter, test_settings))

        response = client.post("/api/upload", data=valid_form, files=video_file)

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert "exceeded your quota" in response.json()["error"]

    def test_auth_failure_returns_500(
        self, override_app, test_settings, valid_form, video_file
    ):
        """Test that credential failures use the 500 path."""
        submitter = FakeSubmitter(error=AuthError("YouTube rejected the refresh token."))
        client = TestClient(override_app(submitter, test_settings))

        response = client.post("/api/upload", data=valid_form, files=video_file)

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json() == {"error": "YouTube rejected the refresh token."}

    def test_slow_upload_hits_ceiling(
        self, override_app, test_settings, valid_form, video_file
    ):
        """Test that an upload past the duration ceiling returns 500."""
        settings = test_settings.model_copy(update={"max_upload_duration_seconds": 0.05})
        submitter = FakeSubmitter(delay=5)
        client = TestClient(override_app(submitter, settings))

        response = client.post("/api/upload", data=valid_form, files=video_file)

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json() == {
            "error": "Upload did not finish in time. Try a smaller file."
        }
        assert len(submitter.requests) == 1

    def test_error_status_code_used(
        self, override_app, test_settings, valid_form, video_file
    ):
        """Test that an application error is returned with its own status code."""
        submitter = FakeSubmitter(error=LocalValidationError("Attach a Short before uploading."))
        client = TestClient(override_app(submitter, test_settings))

        response = client.post("/api/upload", data=valid_form, files=video_file)

        assert response.status_code == LocalValidationError.status_code
        assert response.json() == {"error": "Attach a Short before uploading."}

    def test_unexpected_error_returns_500(
        self, override_app, test_settings, valid_form, video_file
    ):
        """Test that unexpected exceptions become an error body."""
        submitter = FakeSubmitter(error=RuntimeError("connection reset"))
        client = TestClient(override_app(submitter, test_settings))

        response = client.post("/api/upload", data=valid_form, files=video_file)

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json() == {"error": "connection reset"}
