"""Parser configuration model and YAML loader."""

from __future__ import annotations

import re
from functools import lru_cache
from pathlib import Path

import yaml  # type: ignore[import-untyped]
from pydantic import BaseModel, ConfigDict, Field, ValidationError


class ParserConfig(BaseModel):
    """Tunables for push-call scanning and payload extraction."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    push_prefix: str = Field(min_length=1)
    min_candidate_length: int = Field(ge=1)
    max_key_depth: int = Field(ge=0)
    internal_key_prefix: str = "_"

    def script_pattern(self) -> re.Pattern[str]:
        """Compile the non-greedy ``PREFIX([ ... ])`` matcher."""

        return re.compile(re.escape(self.push_prefix) + r"\(\[(.*?)\]\)", re.DOTALL)


def load_config(path: Path | None = None) -> ParserConfig:
    """Load and validate parser configuration from YAML."""

    config_path = path or Path(__file__).with_name("parser.yaml")

    try:
        raw = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise ValueError(f"Config file not found: {config_path}") from exc
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in config file: {config_path}") from exc

    if not isinstance(raw, dict):
        raise ValueError(f"Config file must contain a mapping: {config_path}")

    try:
        return ParserConfig.model_validate(raw)
    except ValidationError as exc:
        raise ValueError(f"Invalid config schema: {config_path}") from exc


@lru_cache(maxsize=1)
def default_config() -> ParserConfig:
    """Return the bundled configuration, reading ``parser.yaml`` only once."""

    return load_config()
