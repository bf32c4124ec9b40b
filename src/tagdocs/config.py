"""Run settings, read from TAGDOCS_* environment variables."""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

from .extractors import DEFAULT_RETURN_TYPES

ENV_PREFIX = "TAGDOCS_"

# Fields given as comma separated lists in the environment
_LIST_FIELDS = ("extensions", "return_types")


class Settings(BaseModel):
    extensions: list[str] = Field(default_factory=lambda: [".lua"], min_length=1)
    output_dir: Path = Path("dist")
    docs_json: Path = Path("docs.json")
    template_dir: Path | None = None  # None = bundled default template
    multi_page: bool = False
    scroll_mode: Literal["baseline", "enhanced"] = "baseline"
    workers: int = Field(default=4, ge=1)
    title: str = "Documentation"
    footer: str = ""
    return_types: list[str] = Field(
        default_factory=lambda: sorted(DEFAULT_RETURN_TYPES), min_length=1
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    @field_validator("extensions")
    @classmethod
    def _normalize_extensions(cls, v: list[str]) -> list[str]:
        stripped = (s.strip() for s in v)
        return [e if e.startswith(".") else f".{e}" for e in stripped if e]

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, v: Any) -> Any:
        return v.upper() if isinstance(v, str) else v

    @classmethod
    def from_env(
        cls, environ: Mapping[str, str] | None = None, **overrides: Any
    ) -> Settings:
        """Build settings from the environment; non-None overrides win."""
        environ = os.environ if environ is None else environ
        values: dict[str, Any] = {}
        for name in cls.model_fields:
            raw = environ.get(ENV_PREFIX + name.upper())
            if raw is None:
                continue
            values[name] = raw.split(",") if name in _LIST_FIELDS else raw
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls.model_validate(values)
