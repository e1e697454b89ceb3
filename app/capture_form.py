"""
Capture Form Module
Client-side state machine for the waitlist email form.

The browser page runs the same transitions in templates/capture-form.js; this
module is the Python client used by scripts and tests. Any session object with
a ``post(url, json=..., headers=..., timeout=...)`` method works, so both a
``requests.Session`` and FastAPI's ``TestClient`` can be plugged in.
"""

from __future__ import annotations

import enum
import logging
from typing import Any, Optional

import requests

from app.errors import NetworkFailure
from app.subscribe_handler import is_valid_email

logger = logging.getLogger(__name__)

SUBSCRIBE_PATH = "/api/subscribe"

INVALID_EMAIL_MESSAGE = "Please enter a valid email address."
DEFAULT_SUCCESS_MESSAGE = "You're on the list! We'll be in touch soon."
DEFAULT_ERROR_MESSAGE = "Something went wrong. Please try again."
CONNECTION_ERROR_MESSAGE = "An error occurred. Please check your connection and try again."


class FormStatus(enum.Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


class CaptureForm:
    """Email capture form: holds the input value, status and message."""

    def __init__(self, endpoint: str = SUBSCRIBE_PATH, session: Any = None, timeout: Optional[float] = 10.0):
        self.endpoint = endpoint
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout

        self.email = ""
        self.status = FormStatus.IDLE
        self.message = ""

    @property
    def submitting(self) -> bool:
        return self.status is FormStatus.LOADING

    @property
    def view(self) -> str:
        return "success" if self.status is FormStatus.SUCCESS else "form"

    @property
    def button_label(self) -> str:
        return "Submitting..." if self.submitting else "Get Notified on Launch"

    def _set(self, status: FormStatus, message: str = "") -> None:
        self.status = status
        self.message = message

    def change_email(self, value: str) -> None:
        self.email = value
        if self.status is not FormStatus.IDLE:
            self._set(FormStatus.IDLE)

    def _post(self) -> Any:
        kwargs = {"timeout": self.timeout} if self.timeout is not None else {}
        try:
            return self.session.post(
                self.endpoint,
                json={"email": self.email},
                headers={"Content-Type": "application/json"},
                **kwargs,
            )
        except Exception as e:
            raise NetworkFailure(str(e)) from e

    @staticmethod
    def _message_from(response: Any) -> Optional[str]:
        data = response.json()
        if isinstance(data, dict) and data.get("message"):
            return str(data["message"])
        return None

    def submit(self) -> FormStatus:
        """
        Submit the current email

        Returns:
            The status after the submission settles
        """
        if self.submitting:
            return self.status

        if not is_valid_email(self.email):
            self._set(FormStatus.ERROR, INVALID_EMAIL_MESSAGE)
            return self.status

        self._set(FormStatus.LOADING)

        try:
            response = self._post()
            ok = 200 <= response.status_code < 300
            if ok:
                try:
                    message = self._message_from(response)
                except ValueError:
                    message = None
                self._set(FormStatus.SUCCESS, message or DEFAULT_SUCCESS_MESSAGE)
                self.email = ""
            else:
                message = self._message_from(response)
                self._set(FormStatus.ERROR, message or DEFAULT_ERROR_MESSAGE)
        except (NetworkFailure, ValueError) as e:
            logger.warning("Subscribe request failed: %s", e)
            self._set(FormStatus.ERROR, CONNECTION_ERROR_MESSAGE)

        return self.status
