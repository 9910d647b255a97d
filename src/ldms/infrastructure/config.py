"""Runtime settings, read from ``LDMS_*`` environment variables."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path

from ldms.domain.clock import DEFAULT_DEAL_WINDOW
from ldms.domain.exceptions import ValidationError

# Resolve data directory relative to the project root.
# When installed in editable mode the project root is the repo root.
_DATA_DIR = Path(__file__).resolve().parents[3] / "data"

DEFAULT_DATABASE_URL = f"sqlite:///{_DATA_DIR / 'ldms.db'}"
DEFAULT_STORE_TIMEOUT = 5.0
DEFAULT_LOG_LEVEL = "WARNING"


@dataclass(frozen=True)
class Settings:

    database_url: str = DEFAULT_DATABASE_URL
    deal_window: timedelta = DEFAULT_DEAL_WINDOW
    store_timeout: float = DEFAULT_STORE_TIMEOUT
    log_level: str = DEFAULT_LOG_LEVEL

    @staticmethod
    def from_env(environ: Mapping[str, str] | None = None) -> Settings:
        env = os.environ if environ is None else environ

        window_hours = _positive_float(env, "LDMS_DEAL_WINDOW_HOURS")
        timeout = _positive_float(env, "LDMS_STORE_TIMEOUT_SECONDS")

        log_level = env.get("LDMS_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()
        if not isinstance(logging.getLevelName(log_level), int):
            raise ValidationError(f"LDMS_LOG_LEVEL: unknown level {log_level!r}")

        return Settings(
            database_url=env.get("LDMS_DATABASE_URL") or DEFAULT_DATABASE_URL,
            deal_window=(
                timedelta(hours=window_hours)
                if window_hours is not None
                else DEFAULT_DEAL_WINDOW
            ),
            store_timeout=timeout if timeout is not None else DEFAULT_STORE_TIMEOUT,
            log_level=log_level,
        )


def _positive_float(env: Mapping[str, str], name: str) -> float | None:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return None
    try:
        value = float(raw)
    except ValueError as exc:
        raise ValidationError(f"{name}: expected a number, got {raw!r}") from exc
    if not value > 0:
        raise ValidationError(f"{name}: must be positive, got {raw!r}")
    return value
