#!/usr/bin/env python3
"""
Send a webhook — build one payload from the command line and deliver it.

Usage:
    # Direct single delivery (exit 1 on failure):
    python scripts/send_webhook.py --content "Deploy finished" --title "CI" --colour "#2ecc71"

    # Queue 5 copies and drain them at two per two seconds:
    python scripts/send_webhook.py --content "hello" --queue 5

    # Embed fields as name=value (repeatable), inline with --inline-fields:
    python scripts/send_webhook.py --title Build --field branch=main --field status=green
"""
import asyncio
import os
import sys
import argparse

# Ensure app root is on path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


def build_webhook(args, settings):
    from models.webhook import Embed, Webhook

    webhook = Webhook(args.url or settings.webhook.url)
    if args.content:
        webhook = webhook.set_content(args.content)
    username = args.username or settings.webhook.username
    if username:
        webhook = webhook.set_username(username)
    avatar_url = args.avatar_url or settings.webhook.avatar_url
    if avatar_url:
        webhook = webhook.set_avatar_url(avatar_url)

    if not (args.title or args.description or args.field):
        return webhook

    embed = Embed()
    if args.title:
        embed = embed.set_title(args.title)
    if args.description:
        embed = embed.set_description(args.description)
    if args.embed_url:
        embed = embed.set_url(args.embed_url)
    if args.colour:
        embed = embed.set_colour(args.colour)
    if args.timestamp:
        embed = embed.set_timestamp()
    for pair in args.field:
        name, _, value = pair.partition("=")
        embed = embed.add_field(name, value, args.inline_fields)
    return webhook.add_embed(embed)


async def run(args) -> int:
    from config.logging_config import configure_logging
    from config.settings import load_settings
    from channels.errors import WebhookDeliveryError
    from channels.webhook_client import WebhookClient
    from job_queue.dispatch_queue import WebhookQueue

    settings = load_settings(args.config)
    configure_logging(settings.log_level, settings.log_json)

    webhook = build_webhook(args, settings)
    if not webhook.webhook_url:
        print("No webhook URL: pass --url, set webhook.url or $WEBHOOK", file=sys.stderr)
        return 2

    async with WebhookClient(timeout=settings.webhook.timeout_seconds) as client:
        if args.queue:
            queue = WebhookQueue(
                client,
                drain_until_empty=True,
                window_seconds=settings.dispatch.window_seconds,
            )
            await queue.enqueue_multi([webhook] * args.queue)
            await queue.start()
            print(f"Delivered {queue.delivered}, failed {queue.failed}")
            return 0 if not queue.failed else 1

        try:
            result = await webhook.send(client)
        except WebhookDeliveryError as e:
            print(str(e), file=sys.stderr)
            return 1
        print(f"Delivered (HTTP {result.status_code})")
        return 0


def main():
    parser = argparse.ArgumentParser(description="Send a webhook payload")
    parser.add_argument("--config", help="Path to settings YAML")
    parser.add_argument("--url", help="Webhook URL (overrides config)")
    parser.add_argument("--content", help="Top-level message text")
    parser.add_argument("--username", help="Display username override")
    parser.add_argument("--avatar-url", help="Display avatar override")
    parser.add_argument("--title", help="Embed title")
    parser.add_argument("--description", help="Embed description")
    parser.add_argument("--embed-url", help="Embed link URL")
    parser.add_argument("--colour", "--color", dest="colour", help="Embed colour as hex, e.g. #FFFFFF")
    parser.add_argument("--timestamp", action="store_true", help="Stamp the embed with the current time")
    parser.add_argument("--field", action="append", default=[], help="Embed field as name=value")
    parser.add_argument("--inline-fields", action="store_true", help="Display fields inline")
    parser.add_argument("--queue", type=int, default=0, help="Enqueue N copies and drain them")
    args = parser.parse_args()

    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()
