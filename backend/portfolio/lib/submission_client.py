import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

import httpx

from portfolio.lib.submission import Submission, validate_submission

log = logging.getLogger(__name__)

FIELDS = ("name", "email", "subject", "message")


@dataclass
class Notification:
    title: str
    description: str
    variant: str = "default"


SUCCESS_NOTIFICATION = Notification("Success", "Message sent successfully!")
FAILURE_NOTIFICATION = Notification("Error", "Error sending message. Please try again.", "destructive")


def _server_field_errors(response: httpx.Response) -> Dict[str, str]:
    try:
        error = response.json().get("error")
    except (ValueError, AttributeError):
        return {}
    if not isinstance(error, dict) or not isinstance(error.get("fields"), dict):
        return {}
    return {str(k): str(v) for k, v in error["fields"].items()}


class SubmitStatus(str, Enum):
    SENT = "sent"
    FAILED = "failed"
    INVALID = "invalid"
    BUSY = "busy"


class SubmissionClient:
    """Posts validated submissions to the send endpoint. One request per call, no retries."""

    def __init__(self, endpoint: str, http_client: Optional[httpx.Client] = None, timeout: float = 10.0):
        self.endpoint = endpoint
        self._owns_client = http_client is None
        self._http = http_client or httpx.Client(timeout=timeout)

    def post(self, submission: Submission) -> httpx.Response:
        return self._http.post(self.endpoint, json=submission.model_dump(mode="json"))

    def close(self) -> None:
        if self._owns_client:
            self._http.close()


class ContactForm:
    """
    Form state for one contact form:
    - invalid fields block the request and carry a message each
    - a 2xx reply clears the fields, anything else keeps them for a manual retry
    - only one request may be in flight at a time
    """

    def __init__(self, client: SubmissionClient):
        self.client = client
        self.values: Dict[str, str] = {f: "" for f in FIELDS}
        self.errors: Dict[str, str] = {}
        self.notification: Optional[Notification] = None
        self._in_flight = threading.Lock()

    @property
    def submitting(self) -> bool:
        return self._in_flight.locked()

    def fill(self, **values: str) -> "ContactForm":
        for key, value in values.items():
            if key not in self.values:
                raise KeyError(f"unknown field {key!r}")
            self.values[key] = value
        return self

    def validate(self) -> Optional[Submission]:
        submission, self.errors = validate_submission(dict(self.values))
        return submission

    def reset(self) -> None:
        self.values = {f: "" for f in FIELDS}
        self.errors = {}

    def submit(self) -> SubmitStatus:
        submission = self.validate()
        if submission is None:
            return SubmitStatus.INVALID

        if not self._in_flight.acquire(blocking=False):
            return SubmitStatus.BUSY
        try:
            response = self.client.post(submission)
        except httpx.HTTPError as exc:
            log.warning("Error sending message: %s", exc)
            self.notification = FAILURE_NOTIFICATION
            return SubmitStatus.FAILED
        finally:
            self._in_flight.release()

        if response.is_success:
            self.reset()
            self.notification = SUCCESS_NOTIFICATION
            return SubmitStatus.SENT

        log.warning("Error sending message: HTTP %s %s", response.status_code, response.text)
        if response.status_code == 400:
            self.errors = _server_field_errors(response)
        self.notification = FAILURE_NOTIFICATION
        return SubmitStatus.FAILED
