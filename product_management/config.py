"""Settings loaded from the environment and the project-root .env file."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

from product_management.errors import ConfigError

BACKENDS = ("dynamodb", "memory")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}

# Project root .env (real environment variables always win)
_ENV_PATH = Path(__file__).resolve().parent.parent / ".env"


@dataclass
class Settings:
    backend: str = "dynamodb"
    region: str = "us-east-1"
    endpoint_url: Optional[str] = None
    table_prefix: str = ""
    log_level: str = "INFO"
    seed_sample_data: bool = False
    scale_offer_cost_by_quantity: bool = False


def _parse_bool(name: str, raw: Optional[str]) -> bool:
    value = (raw or "").strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ConfigError(f"{name} must be a boolean, got {raw!r}")


def settings_from_env(env: Mapping[str, str]) -> Settings:
    backend = env.get("PM_BACKEND", "dynamodb").strip().lower()
    if backend not in BACKENDS:
        raise ConfigError(f"PM_BACKEND must be one of {', '.join(BACKENDS)}, got {backend!r}")

    log_level = env.get("PM_LOG_LEVEL", "INFO").strip().upper()
    if log_level not in LOG_LEVELS:
        raise ConfigError(f"PM_LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got {log_level!r}")

    return Settings(
        backend=backend,
        region=env.get("AWS_DEFAULT_REGION", "us-east-1"),
        endpoint_url=env.get("PM_DYNAMODB_ENDPOINT") or None,
        table_prefix=env.get("PM_TABLE_PREFIX", ""),
        log_level=log_level,
        seed_sample_data=_parse_bool("PM_SEED_SAMPLE_DATA", env.get("PM_SEED_SAMPLE_DATA")),
        scale_offer_cost_by_quantity=_parse_bool(
            "PM_SCALE_OFFER_COST", env.get("PM_SCALE_OFFER_COST")
        ),
    )


def load_settings(env_file: Optional[Path] = None) -> Settings:
    load_dotenv(env_file or _ENV_PATH, override=False)
    return settings_from_env(os.environ)
