"""Submits the intake form to the upload API."""

import logging

import httpx
from pydantic import ValidationError

from shortshift.exceptions import LocalValidationError
from shortshift.intake.form import (
    IntakeState,
    prepare_submission,
    start_submission,
    submission_failed,
    submission_sent,
    submission_succeeded,
)
from shortshift.youtube.schemas import UploadResult

logger = logging.getLogger(__name__)

UPLOAD_ENDPOINT = "/api/upload"
UPLOAD_FAILED_MESSAGE = "Upload failed."
UNKNOWN_ERROR_MESSAGE = "Something went wrong."


def _error_message(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return UPLOAD_FAILED_MESSAGE
    if isinstance(data, dict) and data.get("error"):
        return str(data["error"])
    return UPLOAD_FAILED_MESSAGE


class IntakeClient:
    """Sends intake form submissions over HTTP.

    The client imposes no timeout of its own; a stalled upload ends only when
    the transport or the server gives up.
    """

    def __init__(self, http: httpx.AsyncClient, endpoint: str = UPLOAD_ENDPOINT) -> None:
        """Initialize the client.

        Args:
            http: HTTP client pointed at the API
            endpoint: Upload endpoint path
        """
        self.http = http
        self.endpoint = endpoint

    async def submit(self, state: IntakeState) -> IntakeState:
        """Validate and upload the form.

        Args:
            state: Current form state

        Returns:
            The next state: reset with a result on success, or unchanged
            fields with an error message on failure
        """
        state = start_submission(state)
        try:
            payload = prepare_submission(state)
        except LocalValidationError as e:
            return submission_failed(state, e.message)

        state = submission_sent(state)
        try:
            response = await self.http.post(
                self.endpoint,
                data=payload.fields,
                files=payload.files(),
                timeout=None,
            )
        except httpx.HTTPError as e:
            logger.warning("Upload request failed: %s", type(e).__name__)
            return submission_failed(state, str(e) or UNKNOWN_ERROR_MESSAGE)

        if not response.is_success:
            return submission_failed(state, _error_message(response))

        try:
            result = UploadResult.model_validate(response.json())
        except (ValueError, ValidationError):
            logger.warning("Unexpected upload response: %s", response.text[:200])
            return submission_failed(state, UNKNOWN_ERROR_MESSAGE)

        return submission_succeeded(state, payload.title, result)
