# qrscan/config.py

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from qrscan.qr_scanner.classifier import Precedence

DEFAULT_API_URL = "http://localhost:3100"
DEFAULT_HTTP_TIMEOUT = 10.0
MIN_SECRET_LENGTH = 32

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    """Process configuration. Built once at startup and passed down explicitly."""

    api_url: str
    secret_key: str
    precedence: Precedence = Precedence.LEGACY
    unlock_required: bool = True
    http_timeout: float = DEFAULT_HTTP_TIMEOUT
    default_user_id: int = 1
    sentry_dsn: str = ""


def _flag(value: Optional[str], default: bool) -> bool:
    if value is None or value == "":
        return default
    return value.strip().lower() in _TRUTHY


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    env = os.environ if env is None else env

    # Signs unlock tokens, must be provided via env
    secret_key = env.get("QRSCAN_SECRET_KEY", "")
    if len(secret_key) < MIN_SECRET_LENGTH:
        raise RuntimeError(
            f"FATAL: QRSCAN_SECRET_KEY NOT SET or too short ({MIN_SECRET_LENGTH}+ chars required)."
        )

    precedence_raw = (env.get("QRSCAN_PRECEDENCE") or Precedence.LEGACY.value).strip().lower()
    try:
        precedence = Precedence(precedence_raw)
    except ValueError:
        raise RuntimeError(
            f"QRSCAN_PRECEDENCE must be one of: {', '.join(p.value for p in Precedence)}."
        ) from None

    try:
        http_timeout = float(env.get("QRSCAN_HTTP_TIMEOUT") or DEFAULT_HTTP_TIMEOUT)
        default_user_id = int(env.get("QRSCAN_DEFAULT_USER_ID") or 1)
    except ValueError as exc:
        raise RuntimeError(f"Invalid numeric setting: {exc}") from exc

    return Settings(
        api_url=(env.get("QRSCAN_API_URL") or DEFAULT_API_URL).rstrip("/"),
        secret_key=secret_key,
        precedence=precedence,
        unlock_required=_flag(env.get("QRSCAN_UNLOCK_REQUIRED"), True),
        http_timeout=http_timeout,
        default_user_id=default_user_id,
        sentry_dsn=env.get("SENTRY_DSN", ""),
    )
