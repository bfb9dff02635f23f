# src/coverfinder/config/settings.py
"""
Application settings (Pydantic).

Settings are loaded from `src/coverfinder/config/defaults.yaml`, then optionally overridden by:
- environment variables (e.g., `COVERFINDER_LOG_LEVEL`, `COVERFINDER_CATALOG_PATH`)
- an external YAML file via `COVERFINDER_CONFIG_PATH`

Design rule:
- Business policy knobs (sponsors, the "Other" gender price column, API limits) live in YAML.
- The scoring formulas themselves are fixed contracts and live in code.
"""

from __future__ import annotations

import os
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field

from coverfinder.core.env import load_dotenv_if_present


def _read_package_yaml(filename: str) -> dict[str, Any]:
    """Read a YAML file packaged inside `coverfinder.config`."""
    text = resources.files("coverfinder.config").joinpath(filename).read_text(encoding="utf-8")
    data = yaml.safe_load(text) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {filename}; expected a mapping.")
    return data


def _read_yaml_file(path: str | Path) -> dict[str, Any]:
    """Read a YAML file from disk and return its mapping root."""
    data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {path}; expected a mapping.")
    return data


class AppSettings(BaseModel):
    name: str = "CoverFinder"
    log_level: str = "INFO"


class CatalogSettings(BaseModel):
    path: str = "data/insurance-data.csv"
    active_only: bool = True


class PricingSettings(BaseModel):
    # Which price column customers who answer "Other" are quoted from.
    # This is a business rule, not a computed default.
    other_gender_as: Literal["Male", "Female"] = "Female"


class RateLimitSettings(BaseModel):
    enabled: bool = True
    max_requests: int = Field(100, ge=1)
    window_seconds: float = Field(15 * 60, gt=0)


class ApiSettings(BaseModel):
    compare_limit: int = Field(10, ge=1)
    quick_quote_limit: int = Field(5, ge=1)
    alternatives_limit: int = Field(3, ge=0)
    rate_limit: RateLimitSettings = Field(default_factory=RateLimitSettings)


class SponsorshipSettings(BaseModel):
    names: list[str] = Field(default_factory=list)
    provider_urls: dict[str, str] = Field(default_factory=dict)


class Settings(BaseModel):
    app: AppSettings = Field(default_factory=AppSettings)
    catalog: CatalogSettings = Field(default_factory=CatalogSettings)
    pricing: PricingSettings = Field(default_factory=PricingSettings)
    api: ApiSettings = Field(default_factory=ApiSettings)
    sponsorship: SponsorshipSettings = Field(default_factory=SponsorshipSettings)


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Overlay selected environment variables onto raw settings payload.

    Note: We intentionally keep this whitelist small.
    """
    load_dotenv_if_present()
    data = dict(data)

    log_level = os.getenv("COVERFINDER_LOG_LEVEL")
    if log_level:
        data.setdefault("app", {})["log_level"] = log_level

    catalog_path = os.getenv("COVERFINDER_CATALOG_PATH")
    if catalog_path:
        data.setdefault("catalog", {})["path"] = catalog_path

    return data


@lru_cache
def get_settings() -> Settings:
    """Load and validate settings (cached)."""
    load_dotenv_if_present()
    config_path = os.getenv("COVERFINDER_CONFIG_PATH")
    raw = _read_yaml_file(config_path) if config_path else _read_package_yaml("defaults.yaml")
    raw = _apply_env_overrides(raw)
    return Settings.model_validate(raw)


@lru_cache
def get_logging_config() -> dict[str, Any]:
    """Load logging configuration (cached)."""
    return _read_package_yaml("logging.yaml")
