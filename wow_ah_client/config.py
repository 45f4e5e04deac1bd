"""
Application configuration management.

Load order (each layer overrides the previous):
  1. ``config/default.toml``      - committed static defaults
  2. ``config/local.toml``        - optional local overrides (gitignored)
  3. ``.env``                     - local secrets and env overrides (gitignored)
  4. Environment variables        - ``WOW_AH_*`` prefix

Entry point: ``load_config(config_path=None) -> AppConfig``

The API key itself is never stored in ``AppConfig``; ``ApiConfig.api_key_env``
names the environment variable to read it from (see ``resolve_api_key``).
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from wow_ah_client.client.errors import MissingCredentialsError
from wow_ah_client.client.retry import RetryPolicy

# ── Sub-config models ─────────────────────────────────────────────────────────

VALID_REGIONS = frozenset({"us", "eu", "kr", "tw"})


class ApiConfig(BaseModel):
    """Battle.net community API endpoint settings.

    ``base_url`` defaults to the regional host for ``region``
    (``https://<region>.api.battle.net``); set it explicitly to override.
    """

    model_config = ConfigDict(frozen=True)

    region:          str   = "us"
    base_url:        str   = ""
    locale:          str   = "en_US"
    timeout_seconds: float = 30.0
    api_key_env:     str   = "BATTLE_NET_API_KEY"

    @model_validator(mode="before")
    @classmethod
    def default_base_url_from_region(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("base_url"):
            region = data.get("region") or "us"
            data = {**data, "base_url": f"https://{region}.api.battle.net"}
        return data

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"base_url must be an http(s) URL, got '{v}'.")
        return v.rstrip("/")

    @field_validator("region")
    @classmethod
    def validate_region(cls, v: str) -> str:
        if v not in VALID_REGIONS:
            raise ValueError(f"Region must be one of {sorted(VALID_REGIONS)}, got '{v}'.")
        return v

    @field_validator("timeout_seconds")
    @classmethod
    def positive_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"timeout_seconds must be > 0, got {v}.")
        return v


class RateLimitConfig(BaseModel):
    """Request ceiling shared by every call made with one API key."""

    model_config = ConfigDict(frozen=True)

    capacity:       int   = 100
    window_seconds: float = 1.0

    @field_validator("capacity")
    @classmethod
    def positive_capacity(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"capacity must be >= 1, got {v}.")
        return v

    @field_validator("window_seconds")
    @classmethod
    def positive_window(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"window_seconds must be > 0, got {v}.")
        return v


class LoggingConfig(BaseModel):
    """Logging output settings."""

    model_config = ConfigDict(frozen=True)

    level: str = "INFO"
    log_file: Optional[str] = None
    json_format: bool = False

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            raise ValueError(f"Log level must be one of {sorted(valid)}, got '{v}'.")
        return v.upper()


class AppConfig(BaseModel):
    """Complete application configuration."""

    model_config = ConfigDict(frozen=True)

    api: ApiConfig = ApiConfig()
    rate_limit: RateLimitConfig = RateLimitConfig()
    retry: RetryPolicy = RetryPolicy()
    logging: LoggingConfig = LoggingConfig()
    debug: bool = False


# ── Loader ────────────────────────────────────────────────────────────────────

_PROJECT_ROOT = Path(__file__).parent.parent


def _find_project_root() -> Path:
    """Walk up from this file to find the project root (contains pyproject.toml)."""
    candidate = Path(__file__).parent
    for _ in range(5):
        if (candidate / "pyproject.toml").exists():
            return candidate
        candidate = candidate.parent
    return _PROJECT_ROOT


def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """Load and merge application configuration.

    Args:
        config_path: Explicit path to a TOML config file. Defaults to
            ``<project_root>/config/default.toml``; if that default is absent
            the built-in defaults are used.

    Returns:
        Fully validated ``AppConfig`` instance.

    Raises:
        FileNotFoundError: If an explicitly given ``config_path`` does not exist.
        pydantic.ValidationError: If merged config values fail validation.
    """
    root = _find_project_root()

    load_dotenv(dotenv_path=root / ".env", override=False)

    raw: dict[str, Any] = {}
    if config_path is None:
        default_path = root / "config" / "default.toml"
        if default_path.exists():
            config_path = default_path
    else:
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

    if config_path is not None:
        with open(config_path, "rb") as f:
            raw = tomllib.load(f)

        local_config_path = config_path.parent / "local.toml"
        if local_config_path.exists():
            with open(local_config_path, "rb") as f:
                local_raw: dict[str, Any] = tomllib.load(f)
            raw = _deep_merge(raw, local_raw)

    raw = _apply_env_overrides(raw)
    return _build_app_config(raw)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge ``override`` into ``base``."""
    result = dict(base)
    for key, val in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(val, dict):
            result[key] = _deep_merge(result[key], val)
        else:
            result[key] = val
    return result


def _apply_env_overrides(raw: dict[str, Any]) -> dict[str, Any]:
    """Apply WOW_AH_* env vars to the raw config dict.

    Supported overrides:
      WOW_AH_REGION       → raw["api"]["region"]
      WOW_AH_BASE_URL     → raw["api"]["base_url"]
      WOW_AH_LOCALE       → raw["api"]["locale"]
      WOW_AH_LOG_LEVEL    → raw["logging"]["level"]
      WOW_AH_MAX_RETRIES  → raw["retry"]["max_retries"]  ("none" = unbounded)
      WOW_AH_DEBUG        → raw["debug"]
    """
    if region := os.environ.get("WOW_AH_REGION"):
        raw.setdefault("api", {})["region"] = region

    if base_url := os.environ.get("WOW_AH_BASE_URL"):
        raw.setdefault("api", {})["base_url"] = base_url

    if locale := os.environ.get("WOW_AH_LOCALE"):
        raw.setdefault("api", {})["locale"] = locale

    if log_level := os.environ.get("WOW_AH_LOG_LEVEL"):
        raw.setdefault("logging", {})["level"] = log_level

    if max_retries := os.environ.get("WOW_AH_MAX_RETRIES"):
        raw.setdefault("retry", {})["max_retries"] = (
            None if max_retries.lower() in ("none", "unbounded", "inf") else int(max_retries)
        )

    if debug := os.environ.get("WOW_AH_DEBUG"):
        raw["debug"] = debug.lower() in ("1", "true", "yes")

    return raw


def _build_app_config(raw: dict[str, Any]) -> AppConfig:
    """Map raw TOML dict to ``AppConfig`` model structure."""
    retry = dict(raw.get("retry", {}))
    # TOML has no null; the string "none" means unbounded.
    if isinstance(retry.get("max_retries"), str) and retry["max_retries"].lower() == "none":
        retry["max_retries"] = None

    return AppConfig(
        api=ApiConfig(**raw.get("api", {})),
        rate_limit=RateLimitConfig(**raw.get("rate_limit", {})),
        retry=RetryPolicy(**retry),
        logging=LoggingConfig(**raw.get("logging", {})),
        debug=raw.get("debug", False),
    )


def resolve_api_key(config: AppConfig) -> str:
    """Read the API key from the environment variable named in ``config.api``.

    Raises:
        MissingCredentialsError: If the variable is unset or empty.
    """
    key = os.environ.get(config.api.api_key_env, "").strip()
    if not key:
        raise MissingCredentialsError(config.api.api_key_env)
    return key
