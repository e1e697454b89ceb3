"""
Subscribe Handler Module
Validates a waitlist signup and records it in the subscriber mapping
"""

from __future__ import annotations

import json
import logging
import re
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Union

from app.errors import (
    MalformedRequest,
    MethodNotAllowed,
    ValidationError,
)
from app.subscriber_store import SubscriberStoreProtocol

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"\S+@\S+\.\S+")

SUBSCRIBERS_KEY = "subscribers"
SUCCESS_MESSAGE = "Success! You are on the list."
EMAIL_REQUIRED_MESSAGE = "Email is required."
GENERIC_ERROR_MESSAGE = "Something went wrong on our end."


def now_ms() -> int:
    return int(time.time() * 1000)


def is_valid_email(email: str) -> bool:
    return bool(email) and EMAIL_PATTERN.search(email) is not None


def _reject_constant(name: str):
    # NaN and Infinity are not JSON
    raise ValueError(f"Invalid JSON constant: {name}")


@dataclass
class SubscribeResult:
    """Outcome of one subscribe request"""

    status_code: int
    payload: Union[Dict[str, Any], str] = field(default_factory=dict)
    media_type: str = "application/json"

    @classmethod
    def message(cls, status_code: int, message: str) -> "SubscribeResult":
        return cls(status_code=status_code, payload={"message": message})


class SubscribeHandler:
    """Run the validate-then-store pipeline for POST /api/subscribe"""

    def __init__(
        self,
        store: SubscriberStoreProtocol,
        collection: str = SUBSCRIBERS_KEY,
        clock: Callable[[], int] = now_ms,
    ):
        """
        Initialize the handler

        Args:
            store: Anything exposing set_field(collection, field, value)
            collection: Name of the subscriber mapping
            clock: Returns the current time in milliseconds since epoch
        """
        self.store = store
        self.collection = collection
        self.clock = clock

    @staticmethod
    def parse_email(body: Union[bytes, str]) -> str:
        """
        Extract the email from a JSON request body

        Raises:
            MalformedRequest: If the body is not valid JSON
            ValidationError: If the email is missing or not well-formed
        """
        try:
            data = json.loads(body, parse_constant=_reject_constant)
        except (ValueError, TypeError) as e:
            raise MalformedRequest() from e

        email = data.get("email") if isinstance(data, dict) else None
        if not email or not isinstance(email, str):
            raise ValidationError(EMAIL_REQUIRED_MESSAGE)

        if not is_valid_email(email):
            raise ValidationError()

        return email

    def subscribe(self, email: str) -> int:
        """Record the email with the current timestamp; returns the timestamp."""
        subscribed_at = self.clock()
        self.store.set_field(self.collection, email, subscribed_at)
        return subscribed_at

    def handle(self, method: str, body: Union[bytes, str]) -> SubscribeResult:
        """
        Handle one request

        Args:
            method: HTTP method of the request
            body: Raw request body

        Returns:
            SubscribeResult with status code and payload; never raises
        """
        try:
            if (method or "").upper() != "POST":
                raise MethodNotAllowed()
            email = self.parse_email(body)
            self.subscribe(email)
        except MethodNotAllowed as e:
            return SubscribeResult(
                status_code=e.status_code,
                payload=e.message,
                media_type="text/plain",
            )
        except (MalformedRequest, ValidationError) as e:
            logger.warning("Rejected subscribe request: %s", e.message)
            return SubscribeResult.message(e.status_code, e.message)
        except Exception:
            logger.exception("Failed to handle subscribe request")
            return SubscribeResult.message(500, GENERIC_ERROR_MESSAGE)

        logger.info("Stored subscriber at domain %s", email.rsplit("@", 1)[-1])
        return SubscribeResult.message(200, SUCCESS_MESSAGE)
