"""
Environment configuration.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from .exceptions import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_SLACK_CHANNEL = "slack-bot-test"


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _parse_optional_int(name: str, value: str | None) -> int | None:
    if value is None or not value.strip():
        return None
    try:
        return int(value)
    except ValueError as e:
        raise ConfigError(f"{name} must be an integer, got {value!r}") from e


def _parse_float(name: str, value: str) -> float:
    try:
        return float(value)
    except ValueError as e:
        raise ConfigError(f"{name} must be a number, got {value!r}") from e


@dataclass(frozen=True)
class Settings:
    signing_secret: str = ""
    airvisual_api_key: str = ""
    slack_webhook: str = ""
    slack_channel: str = DEFAULT_SLACK_CHANNEL
    blocked_users_file: str | None = None
    deferred_responses: bool = False
    signature_max_age_s: int | None = None
    http_timeout_s: float = 5.0
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8080

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        """
        Build settings from environment variables.

        Args:
            environ: Mapping to read instead of os.environ

        Raises:
            ConfigError: If a numeric variable does not parse
        """
        env = os.environ if environ is None else environ
        port = _parse_optional_int("PORT", env.get("PORT"))
        return cls(
            signing_secret=env.get("SLACK_SIGNATURE_SECRET", ""),
            airvisual_api_key=env.get("AIRVISUAL_API_KEY", ""),
            slack_webhook=env.get("SLACK_WEBHOOK", ""),
            slack_channel=env.get("SLACK_CHANNEL") or DEFAULT_SLACK_CHANNEL,
            blocked_users_file=env.get("BLOCKED_USERS_FILE") or None,
            deferred_responses=_parse_bool(env.get("SLACK_DEFERRED_RESPONSES", "false")),
            signature_max_age_s=_parse_optional_int(
                "SLACK_SIGNATURE_MAX_AGE_S", env.get("SLACK_SIGNATURE_MAX_AGE_S")
            ),
            http_timeout_s=_parse_float("HTTP_TIMEOUT_S", env.get("HTTP_TIMEOUT_S", "5.0")),
            log_level=env.get("LOG_LEVEL", "INFO").upper(),
            host=env.get("HOST", "0.0.0.0"),
            port=8080 if port is None else port,
        )

    def validate_server(self) -> None:
        """Check the settings the slash-command server needs."""
        if not self.signing_secret:
            raise ConfigError("Missing SLACK_SIGNATURE_SECRET")
        if not self.airvisual_api_key:
            raise ConfigError("Missing AIRVISUAL_API_KEY")

    def validate_job(self) -> None:
        """Check the settings the channel job needs."""
        if not self.airvisual_api_key:
            raise ConfigError("Missing AIRVISUAL_API_KEY")
        if not self.slack_webhook:
            raise ConfigError("Missing SLACK_WEBHOOK")


def load_blocked_users(path: str | None) -> frozenset[str]:
    """
    Read whitespace-delimited Slack user ids from a file.

    A missing file is not an error: nobody is blocked.

    Raises:
        ConfigError: If the file exists but cannot be read
    """
    if not path:
        return frozenset()
    file = Path(path)
    if not file.exists():
        logger.warning("Blocked users file %s does not exist", path)
        return frozenset()
    try:
        data = file.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read blocked users file {path}: {e}") from e
    return frozenset(data.split())
