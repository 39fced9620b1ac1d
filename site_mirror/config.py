# === FILE: site_mirror/config.py ===
"""
Configuration loading and validation for SiteMirror.
The schema is described with Pydantic; every validation failure surfaces as
:class:`~site_mirror.errors.ConfigError` before the crawl starts.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Union

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    HttpUrl,
    ValidationError,
    field_validator,
)

from site_mirror.errors import ConfigError

__all__ = ("MirrorConfig", "load_config", "read_config_file", "build_config")


class MirrorConfig(BaseModel):
    """Configuration of a single mirroring run."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    seed_url: HttpUrl = Field(..., description="URL the crawl starts from.")
    max_depth: int = Field(1, ge=0, description="Maximum link depth for pages.")
    max_concurrency: int = Field(5, ge=1, description="Maximum number of in-flight fetches.")
    timeout: float = Field(10.0, gt=0, description="Per-request timeout (seconds).")
    output_dir: Path = Field(Path("downloaded_site"), description="Mirror root directory.")
    user_agent: str = Field("SiteMirror/1.0", min_length=1, description="User-Agent header.")

    @field_validator("output_dir", mode="before")
    def _expand_user(cls, v: Any) -> Any:
        if isinstance(v, (str, Path)):
            return Path(v).expanduser()
        return v

    @field_validator("output_dir")
    def _check_output_dir(cls, v: Path) -> Path:
        if not v.is_dir():
            raise ValueError(f"output directory does not exist: {v}")
        return v


def build_config(**options: Any) -> MirrorConfig:
    """Build a config from keyword options, ignoring ``None`` values."""
    data = {k: v for k, v in options.items() if v is not None}
    try:
        return MirrorConfig(**data)
    except ValidationError as exc:
        raise ConfigError(f"invalid configuration: {exc}") from exc


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


def read_config_file(path: Union[str, Path]) -> dict[str, Any]:
    """
    Read a YAML or JSON config file into a plain mapping, without validation.
    Raises FileNotFoundError when the file is missing.
    """
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

    return data


def load_config(path: Union[str, Path]) -> MirrorConfig:
    """Read a YAML or JSON file and return a validated MirrorConfig."""
    return build_config(**read_config_file(path))
