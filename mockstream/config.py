"""Configuration loader. Reads config.yaml and validates it with Pydantic.

Holds stream pacing/variant settings and the canned-interaction collections
served by the collection lookup. The path comes from ``MOCKSTREAM_CONFIG``
(default ``config.yaml``).
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from mockstream.engine.chunker import DEFAULT_MAX_CHUNK_LENGTH
from mockstream.engine.emitter import NAMESPACED, PLAIN, StreamVariant

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "MOCKSTREAM_CONFIG"
DEFAULT_CONFIG_PATH = "config.yaml"


class StreamConfig(BaseModel):
    """Pacing, chunking and per-endpoint wire variants."""

    chunk_delay_ms: int = Field(default=20, ge=0)
    max_chunk_length: int = Field(default=DEFAULT_MAX_CHUNK_LENGTH, ge=1)
    seed: int | None = None  # default template/lorem seed; None = fresh randomness
    llm: StreamVariant = NAMESPACED
    lorem: StreamVariant = PLAIN
    markdown: StreamVariant = PLAIN

    @property
    def delay_seconds(self) -> float:
        return self.chunk_delay_ms / 1000


class InteractionConfig(BaseModel):
    """One canned prompt/response pair."""

    id: str
    title: str | None = None
    input: str
    output: str

    @field_validator("output")
    @classmethod
    def output_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Interaction output must not be blank")
        return v


class CollectionConfig(BaseModel):
    """A named set of canned interactions."""

    id: str
    name: str | None = None
    description: str | None = None
    interactions: list[InteractionConfig] = []

    @model_validator(mode="after")
    def unique_interaction_ids(self) -> CollectionConfig:
        ids = [i.id for i in self.interactions]
        duplicates = sorted({i for i in ids if ids.count(i) > 1})
        if duplicates:
            raise ValueError(f"Collection '{self.id}' has duplicate interaction ids: {duplicates}")
        return self


class MockConfig(BaseModel):
    """Top-level service configuration."""

    stream: StreamConfig = StreamConfig()
    collections: list[CollectionConfig] = []
    match_threshold: float = Field(default=0.15, ge=0.0, le=1.0)

    # Auth & CORS
    api_key: str | None = None
    allowed_origins: list[str] = ["*"]

    @model_validator(mode="after")
    def unique_collection_ids(self) -> MockConfig:
        ids = [c.id for c in self.collections]
        duplicates = sorted({i for i in ids if ids.count(i) > 1})
        if duplicates:
            raise ValueError(f"Duplicate collection ids: {duplicates}")
        return self


# ---------------------------------------------------------------------------
# Module-level config cache
# ---------------------------------------------------------------------------

_config: MockConfig | None = None
_config_path: str = DEFAULT_CONFIG_PATH


def default_config_path() -> str:
    return os.environ.get(CONFIG_ENV_VAR, DEFAULT_CONFIG_PATH)


def load_config(path: str | None = None) -> MockConfig:
    """Read config.yaml from disk, validate, and cache."""
    global _config, _config_path
    _config_path = path or default_config_path()

    config_file = Path(_config_path)
    if not config_file.exists():
        raise FileNotFoundError(f"Config file not found: {config_file.resolve()}")

    raw = yaml.safe_load(config_file.read_text(encoding="utf-8")) or {}
    _config = MockConfig(**raw)

    logger.info(
        f"Loaded config from {_config_path}: "
        f"collections={len(_config.collections)}, "
        f"chunk_delay_ms={_config.stream.chunk_delay_ms}"
    )
    return _config


def get_config() -> MockConfig:
    """Return cached config. Raises if not yet loaded."""
    if _config is None:
        raise RuntimeError("Config not loaded, call load_config() first")
    return _config


def reload_config() -> MockConfig:
    """Re-read config from disk. Called by /reload endpoint."""
    logger.info(f"Reloading config from {_config_path}")
    return load_config(_config_path)
