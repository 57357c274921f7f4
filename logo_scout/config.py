# === FILE: logo_scout/config.py ===
"""
Loading and validation of the LogoScout run configuration.
Pydantic describes the schema and checks the data.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/121.0.0.0 Safari/537.36"
)


class ScoutConfig(BaseModel):
    """Settings for one logo-grouping run."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    concurrency: int = Field(20, ge=1, description="Max number of sites processed at once.")
    threshold: int = Field(8, ge=0, le=64, description="Max Hamming distance (bits) inside a group.")
    http_timeout: float = Field(10.0, gt=0, description="Timeout for a single HTTP request (seconds).")
    render_timeout: float = Field(15.0, gt=0, description="Timeout for a headless page render (seconds).")
    hash_timeout: float = Field(10.0, gt=0, description="Timeout for decoding and hashing one image (seconds).")
    max_redirects: int = Field(3, ge=0, description="Redirects followed per request.")
    max_image_bytes: int = Field(5 * 1024 * 1024, ge=1000, description="Largest logo download accepted.")
    user_agent: str = Field(DEFAULT_USER_AGENT, min_length=1, description="User-Agent header.")
    verify_ssl: bool = Field(False, description="Validate TLS certificates.")
    dynamic_fallback: bool = Field(True, description="Render pages in a headless browser when static extraction fails.")
    progress_every: int = Field(50, ge=1, description="Log progress every N completed sites.")

    @field_validator("user_agent", mode="before")
    def _strip_user_agent(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip()
        return v


_DEFAULT_CFG = Path("configs/default.yaml")


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Top level of YAML must be a mapping, got {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Top level of JSON must be a mapping, got {type(data).__name__}")
    return data


def load_config(path: Union[str, Path, None]) -> ScoutConfig:
    """
    Read YAML or JSON and return a validated ScoutConfig.

    Without *path* the project default ``configs/default.yaml`` is used when it
    exists, otherwise the built-in defaults. An explicit path that does not
    exist raises FileNotFoundError.
    """
    if path is None:
        if not _DEFAULT_CFG.is_file():
            return ScoutConfig()
        path_obj = _DEFAULT_CFG
    else:
        path_obj = Path(path).expanduser().resolve()
        if not path_obj.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        data = _read_yaml(path_obj)
    elif suffix == ".json":
        data = _read_json(path_obj)
    else:
        raise ValueError(f"Unsupported config format: {suffix}")

    return ScoutConfig(**data)
