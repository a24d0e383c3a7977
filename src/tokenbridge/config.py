"""
Configuration for matching and transformation.

Matching thresholds were tuned by hand against real components. They live
here as named values so they can be adjusted without touching matching code;
any change to them changes rewrite behavior and needs new test fixtures.

Resolution order for the config file:
    1. explicit path argument
    2. TOKENBRIDGE_CONFIG environment variable
    3. $TOKENBRIDGE_HOME/config.yaml (default ~/.tokenbridge/config.yaml)
    4. built-in defaults
"""

import os
from dataclasses import dataclass, field, fields, asdict
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import yaml


class ConfigError(ValueError):
    """Configuration file is unreadable or invalid."""


def tokenbridge_home() -> Path:
    return Path(os.environ.get("TOKENBRIDGE_HOME") or Path.home() / ".tokenbridge")


@dataclass(frozen=True)
class MatchThresholds:
    # Color: normalized RGB distance must stay below this
    color_max_distance: float = 0.1

    # Border radius: allowance is max(min_allowance_px, ratio * input)
    radius_min_allowance_px: float = 4.0
    radius_allowance_ratio: float = 0.25
    radius_min_confidence: float = 0.7

    # Shadow: per-component tolerances for first-layer similarity
    shadow_offset_tolerance_px: float = 10.0
    shadow_blur_tolerance_px: float = 15.0
    shadow_opacity_tolerance: float = 0.5
    shadow_min_similarity: float = 0.7

    # Typography
    typography_group_min_score: float = 0.5
    typography_size_confidence: float = 0.8
    typography_weight_confidence: float = 0.7
    typography_line_height_confidence: float = 0.7
    typography_single_min_confidence: float = 0.7

    # Fuzzy class-name similarity for unknown utility classes
    class_name_min_similarity: float = 0.7

    alias_confidence: float = 0.95
    rem_base_px: float = 16.0


STYLE_OBJECT_REFERENCES = ("accessor", "css_var")


@dataclass(frozen=True)
class TransformerConfig:
    thresholds: MatchThresholds = field(default_factory=MatchThresholds)
    presentational_extensions: Tuple[str, ...] = (".tsx", ".jsx")
    style_object_reference: str = "accessor"
    resolve_default_scale: bool = True
    max_workers: int = 4
    catalog_path: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["presentational_extensions"] = list(self.presentational_extensions)
        return data


DEFAULT_CONFIG = TransformerConfig().to_dict()


def validate_config(data: Dict[str, Any]) -> List[str]:
    """
    Validate a raw config mapping.

    Returns:
        List of error messages (empty if valid)
    """
    errors = []
    if not isinstance(data, dict):
        return ["Config must be a mapping"]

    known = {f.name for f in fields(TransformerConfig)}
    for key in data:
        if key not in known:
            errors.append(f"Unknown config key: {key}")

    thresholds = data.get("thresholds", {})
    if not isinstance(thresholds, dict):
        errors.append("thresholds must be a mapping")
    else:
        threshold_fields = {f.name for f in fields(MatchThresholds)}
        for key, value in thresholds.items():
            if key not in threshold_fields:
                errors.append(f"Unknown threshold: {key}")
            elif isinstance(value, bool) or not isinstance(value, (int, float)):
                errors.append(f"Threshold {key} must be a number")
            elif value < 0:
                errors.append(f"Threshold {key} must not be negative")

    extensions = data.get("presentational_extensions")
    if extensions is not None:
        if not isinstance(extensions, list) or not extensions:
            errors.append("presentational_extensions must be a non-empty list")
        elif not all(isinstance(e, str) and e.startswith(".") for e in extensions):
            errors.append("presentational_extensions entries must start with '.'")

    reference = data.get("style_object_reference")
    if reference is not None and reference not in STYLE_OBJECT_REFERENCES:
        errors.append(
            f"style_object_reference must be one of {', '.join(STYLE_OBJECT_REFERENCES)}"
        )

    if "resolve_default_scale" in data and not isinstance(data["resolve_default_scale"], bool):
        errors.append("resolve_default_scale must be true or false")

    workers = data.get("max_workers")
    if workers is not None and (isinstance(workers, bool) or not isinstance(workers, int) or workers < 1):
        errors.append("max_workers must be a positive integer")

    return errors


def config_from_dict(data: Optional[Dict[str, Any]]) -> TransformerConfig:
    data = data or {}
    errors = validate_config(data)
    if errors:
        raise ConfigError(f"Invalid config: {'; '.join(errors)}")

    thresholds = MatchThresholds(**{k: float(v) for k, v in data.get("thresholds", {}).items()})
    kwargs: Dict[str, Any] = {k: v for k, v in data.items() if k != "thresholds"}
    if "presentational_extensions" in kwargs:
        kwargs["presentational_extensions"] = tuple(e.lower() for e in kwargs["presentational_extensions"])
    return TransformerConfig(thresholds=thresholds, **kwargs)


def resolve_config_path(path: Optional[Union[str, Path]] = None) -> Optional[Path]:
    if path:
        return Path(path)
    env_path = os.environ.get("TOKENBRIDGE_CONFIG")
    if env_path:
        return Path(env_path)
    default = tokenbridge_home() / "config.yaml"
    if default.exists():
        return default
    return None


def load_config(path: Optional[Union[str, Path]] = None) -> TransformerConfig:
    """Load config from YAML, falling back to defaults when no file is found."""
    config_path = resolve_config_path(path)
    if config_path is None:
        return TransformerConfig()

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except OSError as e:
        raise ConfigError(f"Cannot read config {config_path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

    return config_from_dict(data)
