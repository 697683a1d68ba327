# src/pointmap/config/settings.py
"""
Application settings (Pydantic).

Settings are loaded from `src/pointmap/config/defaults.yaml`, then optionally overridden by:
- environment variables (e.g., `POINTMAP_LOG_LEVEL`, `POINTMAP_CATALOG_PATH`)
- an external YAML file via `POINTMAP_CONFIG_PATH`

Design rule:
- Tuning knobs (cell size, thresholds, radius policy) live in YAML and are passed to the
  spatial core as plain arguments. Core functions never read settings themselves.
"""

from __future__ import annotations

import os
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field

from pointmap.core.env import load_dotenv_if_present


def _read_package_yaml(filename: str) -> dict[str, Any]:
    """Read a YAML file packaged inside `pointmap.config`."""
    text = resources.files("pointmap.config").joinpath(filename).read_text(encoding="utf-8")
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
    name: str = "PointMap"
    log_level: str = "INFO"


class CatalogSettings(BaseModel):
    # None means "use the packaged sample point set".
    path: str | None = None


class ClusteringSettings(BaseModel):
    cell_size_deg: float = Field(0.5, gt=0)
    threshold: int = Field(1000, ge=0)
    preview_size: int = Field(5, ge=0)
    bounds_padding: float = Field(0.1, ge=0)


class CenterSettings(BaseModel):
    name: str = ""
    lat: float = Field(..., ge=-90, le=90)
    lon: float = Field(..., ge=-180, le=180)


class NearbySettings(BaseModel):
    base_radius_km: float = Field(1000, ge=0)
    reference_zoom: float = Field(3, ge=0)
    default_radius_km: float = Field(2000, ge=0)
    demo_center: CenterSettings = Field(
        default_factory=lambda: CenterSettings(name="Melbourne", lat=-37.8136, lon=144.9631)
    )
    sample_center: CenterSettings = Field(
        default_factory=lambda: CenterSettings(name="London", lat=51.5074, lon=-0.1278)
    )
    sample_radius_km: float = Field(3000, ge=0)


class SyntheticSettings(BaseModel):
    seed: int | None = None
    kind: Literal["random", "clustered"] = "random"
    spread_deg: float = Field(0.5, ge=0)
    id_offset: int = 1000
    centers: list[CenterSettings] = Field(default_factory=list)


class Settings(BaseModel):
    app: AppSettings = Field(default_factory=AppSettings)
    catalog: CatalogSettings = Field(default_factory=CatalogSettings)
    clustering: ClusteringSettings = Field(default_factory=ClusteringSettings)
    nearby: NearbySettings = Field(default_factory=NearbySettings)
    synthetic: SyntheticSettings = Field(default_factory=SyntheticSettings)


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Overlay selected environment variables onto raw settings payload.

    Note: We intentionally keep this whitelist small.
    """
    load_dotenv_if_present()
    data = dict(data)

    log_level = os.getenv("POINTMAP_LOG_LEVEL")
    if log_level:
        data.setdefault("app", {})["log_level"] = log_level

    catalog_path = os.getenv("POINTMAP_CATALOG_PATH")
    if catalog_path:
        data.setdefault("catalog", {})["path"] = catalog_path

    return data


@lru_cache
def get_settings() -> Settings:
    """Load and validate settings (cached)."""
    load_dotenv_if_present()
    config_path = os.getenv("POINTMAP_CONFIG_PATH")
    raw = _read_yaml_file(config_path) if config_path else _read_package_yaml("defaults.yaml")
    raw = _apply_env_overrides(raw)
    return Settings.model_validate(raw)


@lru_cache
def get_logging_config() -> dict[str, Any]:
    """Load logging configuration (cached)."""
    return _read_package_yaml("logging.yaml")
