"""
Configuration loader for the webhook dispatcher.
Reads settings from YAML file with environment variable substitution.
"""
from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml


@dataclass
class WebhookConfig:
    url: str = ""                       # falls back to $WEBHOOK
    username: str = ""
    avatar_url: str = ""
    timeout_seconds: float = 30.0


@dataclass
class DispatchConfig:
    window_seconds: float = 2.0         # two deliveries per window
    drain_until_empty: bool = False     # stop once the queue is empty


@dataclass
class Settings:
    app_name: str = "WebhookDispatch"
    debug: bool = False
    log_level: str = "INFO"
    log_json: bool = False
    webhook: WebhookConfig = field(default_factory=WebhookConfig)
    dispatch: DispatchConfig = field(default_factory=DispatchConfig)


_settings: Optional[Settings] = None


def _substitute_env_vars(value: str) -> str:
    """Replace ${VAR_NAME} patterns with environment variable values."""
    pattern = re.compile(r'\$\{(\w+)\}')
    def replacer(match):
        var_name = match.group(1)
        return os.environ.get(var_name, match.group(0))
    return pattern.sub(replacer, value)


def _process_values(obj: Any) -> Any:
    """Recursively substitute env vars in all string values."""
    if isinstance(obj, str):
        return _substitute_env_vars(obj)
    elif isinstance(obj, dict):
        return {k: _process_values(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_process_values(v) for v in obj]
    return obj


def load_settings(config_path: str = None) -> Settings:
    """Load settings from YAML file."""
    global _settings

    if config_path is None:
        config_path = os.environ.get(
            "WEBHOOK_DISPATCH_CONFIG",
            str(Path(__file__).parent / "settings.yaml"),
        )

    settings = Settings()

    if Path(config_path).exists():
        with open(config_path) as f:
            raw = yaml.safe_load(f) or {}
        raw = _process_values(raw)

        settings.app_name = raw.get("app_name", settings.app_name)
        settings.debug = raw.get("debug", settings.debug)
        settings.log_level = raw.get("log_level", settings.log_level)
        settings.log_json = raw.get("log_json", settings.log_json)

        if "webhook" in raw:
            wh = raw["webhook"] or {}
            settings.webhook = WebhookConfig(
                url=wh.get("url", ""),
                username=wh.get("username", ""),
                avatar_url=wh.get("avatar_url", ""),
                timeout_seconds=float(wh.get("timeout_seconds", 30.0)),
            )

        if "dispatch" in raw:
            d = raw["dispatch"] or {}
            settings.dispatch = DispatchConfig(
                window_seconds=float(d.get("window_seconds", 2.0)),
                drain_until_empty=bool(d.get("drain_until_empty", False)),
            )

    if not settings.webhook.url:
        settings.webhook.url = os.environ.get("WEBHOOK", "")

    _settings = settings
    return settings


def get_settings() -> Settings:
    """Return cached settings or load from default path."""
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings
