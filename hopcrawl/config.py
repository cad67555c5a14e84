# === FILE: hopcrawl/config.py ===
"""
Crawl configuration: schema, defaults and YAML/JSON loading.
Pydantic describes the schema and validates every value.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Dict, FrozenSet, Tuple, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

__all__ = ("CONFIG_KEYS", "CrawlConfig", "load_config")

DEFAULT_MIME_TYPES: Tuple[str, ...] = (
    "text/html",
    "text/plain",
    "application/xhtml+xml",
    "application/xml",
    "application/rss+xml",
    "application/atom+xml",
)


class CrawlConfig(BaseModel):
    """Options attached to one crawl. Every option has a default."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    max_depth: int = Field(5, ge=0, description="Deepest link level that is still visited.")
    max_content_length: int = Field(
        1_000_000_000, ge=0, description="Largest Content-Length (bytes) accepted by the HEAD probe."
    )
    accepted_schemes: FrozenSet[str] = Field(
        frozenset({"http", "https"}), description="URL schemes the crawl may request."
    )
    accepted_mime_types: Tuple[str, ...] = Field(
        DEFAULT_MIME_TYPES, description="Content types accepted by the HEAD probe."
    )
    crawl_query: bool = Field(True, description="Treat query strings as distinct links.")
    crawl_fragment: bool = Field(False, description="Treat fragments as distinct links.")
    fetch_options: Dict[str, Any] = Field(
        default_factory=lambda: {"timeout": 15.0},
        description="Keyword arguments forwarded verbatim to the HTTP transport.",
    )

    @field_validator("accepted_schemes", "accepted_mime_types", mode="before")
    def _lowercase(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = [v]
        if isinstance(v, (list, tuple, set, frozenset)):
            return [s.strip().lower() if isinstance(s, str) else s for s in v]
        return v


CONFIG_KEYS: FrozenSet[str] = frozenset(CrawlConfig.model_fields)


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


def load_config(path: Union[str, Path, None]) -> CrawlConfig:
    """
    Read a YAML or JSON file and return a validated CrawlConfig.
    ``None`` returns the defaults; a missing file raises FileNotFoundError.
    """
    if path is None:
        return CrawlConfig()

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

    try:
        return CrawlConfig(**data)
    except ValidationError:
        raise
