"""
Validation and merging of matching configuration.

A MatchingConfig must pass validate_matching_config before any run starts.
resolve_config merges partial overrides (snake_case or camelCase, nested)
over a base config and validates the outcome.
"""

import math
from typing import Any, Mapping, Optional, Union

from pydantic import ValidationError

from teamate.data.models import DEFAULT_MATCHING_CONFIG, MatchingConfig
from teamate.utils.constants import STRUCTURED_QUESTIONS, WEIGHT_SUM_TOLERANCE

from .exceptions import InvalidConfigError

ConfigInput = Union[MatchingConfig, Mapping[str, Any], None]


def validate_matching_config(config: MatchingConfig) -> MatchingConfig:
    """
    Check weights, ranges and thresholds of a config.

    Raises:
        InvalidConfigError: on the first violated constraint.
    """
    for label, weight in (("frqWeight", config.frq_weight), ("quantWeight", config.quant_weight)):
        if not math.isfinite(weight) or weight < 0 or weight > 1:
            raise InvalidConfigError(f"Invalid {label}: {weight}. Must be between 0 and 1")

    total_weight = config.total_weight
    if abs(total_weight - 1.0) > WEIGHT_SUM_TOLERANCE:
        raise InvalidConfigError(f"Weights must sum to 1.0. Current sum: {total_weight}")

    for question in STRUCTURED_QUESTIONS:
        score_range = config.score_ranges.for_question(question)
        if not (math.isfinite(score_range.min) and math.isfinite(score_range.max)):
            raise InvalidConfigError(f"Invalid range for {question}: bounds must be finite")
        if score_range.min > score_range.max:
            raise InvalidConfigError(
                f"Invalid range for {question}: min {score_range.min} > max {score_range.max}"
            )

    thresholds = config.confidence_thresholds
    if not (math.isfinite(thresholds.high) and math.isfinite(thresholds.medium)):
        raise InvalidConfigError(
            f"Confidence thresholds must be finite: high={thresholds.high}, medium={thresholds.medium}"
        )
    if thresholds.medium > thresholds.high:
        raise InvalidConfigError(
            f"Medium threshold {thresholds.medium} exceeds high threshold {thresholds.high}"
        )

    return config


def _deep_merge(base: dict[str, Any], overrides: Mapping[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in overrides.items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _normalize_keys(data: Mapping[str, Any]) -> dict[str, Any]:
    """Map camelCase keys onto field names, recursively."""
    normalized: dict[str, Any] = {}
    for key, value in data.items():
        snake = "".join(f"_{c.lower()}" if c.isupper() else c for c in key)
        normalized[snake] = _normalize_keys(value) if isinstance(value, Mapping) else value
    return normalized


def resolve_config(
    config: ConfigInput = None,
    base: Optional[MatchingConfig] = None,
) -> MatchingConfig:
    """
    Produce a validated config from an override.

    Args:
        config: Full config, partial mapping of overrides, or None for `base`.
        base: Config the overrides apply to; defaults to the standard config.

    Returns:
        A validated MatchingConfig.

    Raises:
        InvalidConfigError: If the merged config is malformed or violates a constraint.
    """
    base = base or DEFAULT_MATCHING_CONFIG

    if config is None:
        resolved = base
    elif isinstance(config, MatchingConfig):
        resolved = config
    else:
        merged = _deep_merge(base.model_dump(), _normalize_keys(config))
        try:
            resolved = MatchingConfig.model_validate(merged)
        except ValidationError as e:
            raise InvalidConfigError(f"Malformed matching config: {e}") from e

    return validate_matching_config(resolved)
