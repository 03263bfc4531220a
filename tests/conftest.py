"""Shared test fixtures for the webhook dispatcher."""
import pytest
from datetime import datetime, timezone
from unittest.mock import AsyncMock

import httpx

from channels.webhook_client import DeliveryResult, WebhookClient
from models.webhook import Embed, EmbedField, Webhook

WEBHOOK_URL = "https://discord.com/api/webhooks/123/abc"


@pytest.fixture
def webhook_url() -> str:
    return WEBHOOK_URL


@pytest.fixture
def sample_embed() -> Embed:
    """The embed used throughout: colour, author, thumbnail, footer and three fields."""
    return (
        Embed()
        .set_colour("#FFFFFF")
        .set_author("Author Name", url="https://example.com/")
        .set_thumbnail("https://example.com/")
        .set_title("Example")
        .set_url("https://example.com/")
        .set_footer("Footer Text")
        .set_description("Description Text")
        .add_field("Example 1", "Value 1", True)
        .add_fields([
            EmbedField(name="Example 2", value="Value 2", inline=False),
            EmbedField(name="Example 3", value="Value 3", inline=False),
        ])
    )


@pytest.fixture
def full_embed() -> Embed:
    """Every optional sub-object populated."""
    return (
        Embed()
        .set_title("Release 1.4.0")
        .set_description("All checks passed")
        .set_url("https://example.com/releases/1.4.0")
        .set_timestamp(datetime(2024, 3, 1, 12, 30, 45, 123456, tzinfo=timezone.utc))
        .set_colour("0x5865F2")
        .set_footer("ci-bot", "https://example.com/icon.png", "https://proxy.example.com/icon.png")
        .set_image("https://example.com/image.png", "https://proxy.example.com/image.png", 400, 600)
        .set_thumbnail("https://example.com/thumb.png", "https://proxy.example.com/thumb.png", 80, 80)
        .set_video("https://example.com/video.mp4", "https://proxy.example.com/video.mp4", 720, 1280)
        .set_provider("Example", "https://example.com/")
        .set_author("Release Bot", "https://example.com/bot", "https://example.com/bot.png",
                    "https://proxy.example.com/bot.png")
        .add_field("Version", "1.4.0", True)
        .add_field("Duration", "3m 12s", True)
    )


@pytest.fixture
def mock_client() -> AsyncMock:
    """A WebhookClient stand-in whose sends always succeed."""
    client = AsyncMock(spec=WebhookClient)
    client.send.return_value = DeliveryResult(status_code=204)
    return client


@pytest.fixture
def http_client_factory():
    """Builds WebhookClients backed by httpx.MockTransport with a fixed response."""
    def make(status_code: int, body: str = "", seen: list = None) -> WebhookClient:
        def handler(request: httpx.Request) -> httpx.Response:
            if seen is not None:
                seen.append(request)
            return httpx.Response(status_code, text=body)

        return WebhookClient(transport=httpx.MockTransport(handler))

    return make


@pytest.fixture
def sample_webhook(webhook_url, sample_embed) -> Webhook:
    return (
        Webhook(webhook_url)
        .set_content("Content Text")
        .set_username("Test Username")
        .add_embed(sample_embed)
    )
