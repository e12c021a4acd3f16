from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, List, Mapping, MutableMapping

import yaml

from .dictionaries import DEFAULT_ABBREVIATIONS, DEFAULT_PROPER_NOUNS


@dataclass(slots=True)
class LanguageToolSettings:
    """Configuration block for the LanguageTool grammar checker."""

    enabled: bool = False
    base_url: str = "https://api.languagetool.org"
    fallback_url: str | None = None
    level: str = "default"
    request_timeout: float = 20.0
    max_attempts: int = 3
    username: str | None = None
    api_key: str | None = None
    api_key_env: str = "LANGUAGETOOL_API_KEY"
    disabled_rules: List[str] = field(default_factory=list)


@dataclass(slots=True)
class ScorerConfig:
    """Configuration options for the CBM writing scorer."""

    language: str = "en-US"
    min_minutes: float = 0.5
    keep_end_of_text_insertions: bool = False
    heuristics_enabled: bool = True
    paragraph_fallback_enabled: bool = True
    show_capitalization_overlay: bool = True
    extra_abbreviations: List[str] = field(default_factory=list)
    extra_proper_nouns: List[str] = field(default_factory=list)
    lexicon_path: str | None = None
    languagetool: LanguageToolSettings = field(default_factory=LanguageToolSettings)

    def to_dict(self) -> dict[str, Any]:
        """Return a mutable dictionary representation of the configuration."""
        return dict(asdict(self))

    def abbreviation_set(self) -> frozenset[str]:
        """Built-in abbreviations plus configured extras, lowercased with a trailing dot."""
        extras = {
            item.lower() if item.endswith(".") else f"{item.lower()}."
            for item in self.extra_abbreviations
            if item
        }
        return DEFAULT_ABBREVIATIONS | extras

    def proper_noun_set(self) -> frozenset[str]:
        return DEFAULT_PROPER_NOUNS | {item for item in self.extra_proper_nouns if item}


def _build_kwargs(data: Mapping[str, Any]) -> dict[str, Any]:
    allowed = {field.name for field in fields(ScorerConfig)}
    kwargs = {key: data[key] for key in data if key in allowed}
    if "languagetool" in data:
        lt_value = data["languagetool"]
        if isinstance(lt_value, LanguageToolSettings):
            kwargs["languagetool"] = lt_value
        elif isinstance(lt_value, Mapping):
            kwargs["languagetool"] = _build_languagetool_settings(lt_value)
        else:
            kwargs.pop("languagetool")
    return kwargs


def _build_languagetool_settings(data: Mapping[str, Any]) -> LanguageToolSettings:
    lt_allowed = {field.name for field in fields(LanguageToolSettings)}
    filtered = {key: data[key] for key in data if key in lt_allowed}
    return LanguageToolSettings(**filtered)


def config_from_dict(data: Mapping[str, Any] | None) -> ScorerConfig:
    """Build a ScorerConfig from a dictionary-like input."""
    if data is None:
        return ScorerConfig()
    return ScorerConfig(**_build_kwargs(data))


def config_from_yaml(path: str | Path) -> ScorerConfig:
    """Load configuration from a YAML file."""
    contents = Path(path).read_text(encoding="utf-8")
    parsed = yaml.safe_load(contents) or {}
    if not isinstance(parsed, MutableMapping):
        raise ValueError("Configuration YAML must define a mapping.")
    return config_from_dict(parsed)


def load_config(path: str | Path | None = None) -> ScorerConfig:
    """Load configuration from YAML when provided, otherwise return defaults."""
    if path is None:
        return ScorerConfig()
    return config_from_yaml(path)
