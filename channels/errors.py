"""Error hierarchy for webhook delivery."""
from __future__ import annotations

from typing import Optional


class WebhookError(Exception):
    """Base exception for all webhook operations."""

    def __init__(self, message: str, retryable: bool = False):
        self.retryable = retryable
        super().__init__(message)


class WebhookDeliveryError(WebhookError):
    """
    A single delivery attempt failed.

    `status_code` is None when the request never got a response.
    `body` holds the server's response text, or "" when unreadable.
    """

    def __init__(self, message: str, status_code: Optional[int] = None, body: str = ""):
        self.status_code = status_code
        self.body = body
        retryable = status_code is None or status_code == 429 or status_code >= 500
        super().__init__(message, retryable=retryable)
