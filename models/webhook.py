"""
Webhook payload model.

A Webhook is the message root: optional text, display overrides and an
ordered list of rich Embeds. Every model is frozen; builder methods return
an updated copy and never touch the receiver, so a value that is already
shared (e.g. sitting in the dispatch queue) can't change underneath anyone.

Wire body (destination URL is never part of it):
  {
      "content":    optional text,
      "username":   optional display name,
      "avatar_url": optional display avatar,
      "embeds":     [ {"type": "rich", "fields": [...], ...} ],
      "components": [],
  }
"""
from __future__ import annotations

import json
import re
from datetime import datetime, timezone
from typing import Any, Iterable, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

FALLBACK_COLOUR = 10066329           # 0x999999
_HEX_DIGITS = re.compile(r"\+?[0-9a-fA-F]+")
_MAX_COLOUR = 2 ** 64


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def parse_colour(colour: Union[str, int]) -> int:
    """
    Normalize a colour to its integer form.

    Integers pass through untouched. Strings are hex with an optional
    leading "#" or "0x" (and an optional "+" sign); anything unparsable
    becomes FALLBACK_COLOUR.
    """
    if isinstance(colour, int):
        return colour

    digits = colour.lstrip("#")
    while digits.startswith("0x"):
        digits = digits[2:]

    if not _HEX_DIGITS.fullmatch(digits):
        return FALLBACK_COLOUR
    value = int(digits, 16)
    return value if value < _MAX_COLOUR else FALLBACK_COLOUR


def format_timestamp(timestamp: datetime) -> str:
    """Render as UTC ISO-8601 with microseconds and an explicit offset."""
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)
    return timestamp.astimezone(timezone.utc).isoformat(timespec="microseconds")


# ──────────────────────────────────────────────────────────────
#  Embed sub-objects
# ──────────────────────────────────────────────────────────────

class _WireModel(BaseModel):
    model_config = ConfigDict(frozen=True)


class Footer(_WireModel):
    text: str
    icon_url: Optional[str] = None
    proxy_icon_url: Optional[str] = None


class Image(_WireModel):
    url: str
    proxy_url: Optional[str] = None
    height: Optional[int] = None
    width: Optional[int] = None


class Thumbnail(Image):
    pass


class Video(Image):
    pass


class Provider(_WireModel):
    name: Optional[str] = None
    url: Optional[str] = None


class Author(_WireModel):
    name: str
    url: Optional[str] = None
    icon_url: Optional[str] = None
    proxy_icon_url: Optional[str] = None


class EmbedField(_WireModel):
    """A name/value pair shown inside an embed."""
    name: str
    value: str
    inline: bool = False


class Component(_WireModel):
    """Reserved for interactive components; webhooks always send none."""


# ──────────────────────────────────────────────────────────────
#  Embed
# ──────────────────────────────────────────────────────────────

class Embed(_WireModel):
    """One rich content block. `type` is fixed to "rich"."""

    title: Optional[str] = None
    type: Literal["rich"] = "rich"
    description: Optional[str] = None
    url: Optional[str] = None
    timestamp: Optional[str] = None
    color: Optional[int] = None
    footer: Optional[Footer] = None
    image: Optional[Image] = None
    thumbnail: Optional[Thumbnail] = None
    video: Optional[Video] = None
    provider: Optional[Provider] = None
    author: Optional[Author] = None
    fields: list[EmbedField] = []

    def _with(self, **update: Any) -> Embed:
        return self.model_copy(update=update)

    def set_title(self, title: str) -> Embed:
        return self._with(title=title)

    def set_description(self, description: str) -> Embed:
        return self._with(description=description)

    def set_url(self, url: str) -> Embed:
        return self._with(url=url)

    def set_timestamp(self, timestamp: Optional[datetime] = None) -> Embed:
        """Stamp the embed with `timestamp`, or with the current UTC time."""
        return self._with(timestamp=format_timestamp(timestamp or utcnow()))

    def set_colour(self, colour: Union[str, int]) -> Embed:
        return self._with(color=parse_colour(colour))

    def set_color(self, color: Union[str, int]) -> Embed:
        return self.set_colour(color)

    def set_footer(
        self,
        text: str,
        icon_url: Optional[str] = None,
        proxy_icon_url: Optional[str] = None,
    ) -> Embed:
        return self._with(footer=Footer(text=text, icon_url=icon_url, proxy_icon_url=proxy_icon_url))

    def set_image(
        self,
        url: str,
        proxy_url: Optional[str] = None,
        height: Optional[int] = None,
        width: Optional[int] = None,
    ) -> Embed:
        return self._with(image=Image(url=url, proxy_url=proxy_url, height=height, width=width))

    def set_thumbnail(
        self,
        url: str,
        proxy_url: Optional[str] = None,
        height: Optional[int] = None,
        width: Optional[int] = None,
    ) -> Embed:
        return self._with(thumbnail=Thumbnail(url=url, proxy_url=proxy_url, height=height, width=width))

    def set_video(
        self,
        url: str,
        proxy_url: Optional[str] = None,
        height: Optional[int] = None,
        width: Optional[int] = None,
    ) -> Embed:
        return self._with(video=Video(url=url, proxy_url=proxy_url, height=height, width=width))

    def set_provider(self, name: Optional[str] = None, url: Optional[str] = None) -> Embed:
        return self._with(provider=Provider(name=name, url=url))

    def set_author(
        self,
        name: str,
        url: Optional[str] = None,
        icon_url: Optional[str] = None,
        proxy_icon_url: Optional[str] = None,
    ) -> Embed:
        author = Author(name=name, url=url, icon_url=icon_url, proxy_icon_url=proxy_icon_url)
        return self._with(author=author)

    def add_field(self, name: str, value: str, inline: bool = False) -> Embed:
        field = EmbedField(name=name, value=value, inline=inline)
        return self._with(fields=[*self.fields, field])

    def add_fields(self, fields: Iterable[EmbedField]) -> Embed:
        return self._with(fields=[*self.fields, *fields])


# ──────────────────────────────────────────────────────────────
#  Webhook
# ──────────────────────────────────────────────────────────────

class Webhook(_WireModel):
    """
    A full message bound to one destination URL.

    The URL is set once at construction and excluded from the wire body.
    """

    webhook_url: str = Field(exclude=True)
    content: Optional[str] = None
    username: Optional[str] = None
    avatar_url: Optional[str] = None
    embeds: list[Embed] = []
    components: list[Component] = []

    def __init__(self, webhook_url: str, **data: Any):
        super().__init__(webhook_url=webhook_url, **data)

    def _with(self, **update: Any) -> Webhook:
        return self.model_copy(update=update)

    def set_content(self, content: str) -> Webhook:
        return self._with(content=content)

    def set_username(self, username: str) -> Webhook:
        return self._with(username=username)

    def set_avatar_url(self, url: str) -> Webhook:
        return self._with(avatar_url=url)

    def add_embed(self, embed: Embed) -> Webhook:
        return self._with(embeds=[*self.embeds, embed])

    def add_embeds(self, embeds: Iterable[Embed]) -> Webhook:
        return self._with(embeds=[*self.embeds, *embeds])

    # ── Wire format ───────────────────────────────────────────

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)

    def to_json(self) -> str:
        return json.dumps(self.to_wire(), separators=(",", ":"))

    @classmethod
    def from_wire(cls, webhook_url: str, data: dict[str, Any]) -> Webhook:
        return cls.model_validate({**data, "webhook_url": webhook_url})

    @property
    def endpoint(self) -> str:
        return f"{self.webhook_url}?wait=true"

    async def send(self, client=None):
        """
        Deliver this payload once, outside any queue.

        Raises WebhookDeliveryError on a non-success status or network error.
        """
        from channels.webhook_client import WebhookClient

        if client is not None:
            return await client.send(self)
        async with WebhookClient() as one_shot:
            return await one_shot.send(self)
