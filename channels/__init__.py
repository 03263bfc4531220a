"""Webhook transport: HTTP delivery and its error hierarchy."""
from channels.errors import WebhookError, WebhookDeliveryError
from channels.webhook_client import WebhookClient, DeliveryResult

__all__ = [
    "WebhookError", "WebhookDeliveryError",
    "WebhookClient", "DeliveryResult",
]
