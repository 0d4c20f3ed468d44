"""Mailing-list signup used by the newsletter widget.

One request per submission, no retries. Failures never escape the form:
they become the ``ERROR`` status with a message to show the reader.
"""

from __future__ import annotations

import enum
from typing import Optional

import httpx

from .errors import SubscriptionError

TIMEOUT = 10  # seconds


class SubscriptionStatus(enum.Enum):
    NOT_SUBMITTED = "not-submitted"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


def subscribe(email: str, endpoint: str, client: Optional[httpx.Client] = None) -> str:
    """Send ``email`` to the list at ``endpoint`` and return the provider message.

    The endpoint answers with JSON ``{"result": "success" | "error", "msg": ...}``.

    Raises:
        SubscriptionError: on network errors, non-2xx replies, or a reply
            whose ``result`` is not ``success``.
    """
    owns_client = client is None
    if client is None:
        client = httpx.Client(timeout=TIMEOUT)
    try:
        response = client.post(endpoint, data={"EMAIL": email})
        response.raise_for_status()
        payload = response.json()
    except httpx.HTTPError as exc:
        raise SubscriptionError(f"Subscription request failed: {exc}") from exc
    except ValueError as exc:
        raise SubscriptionError("Subscription service returned an invalid reply") from exc
    finally:
        if owns_client:
            client.close()

    if not isinstance(payload, dict):
        raise SubscriptionError("Subscription service returned an invalid reply")
    message = str(payload.get("msg") or "")
    if payload.get("result") != "success":
        raise SubscriptionError(message or "Subscription was rejected")
    return message


class SubscriptionForm:
    def __init__(self, endpoint: str, client: Optional[httpx.Client] = None):
        self.endpoint = endpoint
        self.client = client
        self.status = SubscriptionStatus.NOT_SUBMITTED
        self.message = ""

    def submit(self, email: str) -> SubscriptionStatus:
        email = email.strip()
        if not email:
            self.status = SubscriptionStatus.ERROR
            self.message = "Please enter an email address."
            return self.status
        self.status = SubscriptionStatus.LOADING
        self.message = ""
        try:
            self.message = subscribe(email, self.endpoint, self.client)
        except SubscriptionError as exc:
            self.status = SubscriptionStatus.ERROR
            self.message = str(exc)
        else:
            self.status = SubscriptionStatus.SUCCESS
        return self.status

    @property
    def is_loading(self) -> bool:
        return self.status is SubscriptionStatus.LOADING

    @property
    def is_success(self) -> bool:
        return self.status is SubscriptionStatus.SUCCESS
