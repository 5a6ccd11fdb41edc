"""Calculator configuration for onionforge.

Display width, rounding precision and history size are fixed defaults that can
be overridden from ONIONFORGE_* environment variables. Self-contained, no
external dependencies.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Mapping, Optional

# Env var → config field. Only integer knobs are overridable.
_ENV_OVERRIDES = {
    "ONIONFORGE_MAX_DISPLAY_LENGTH": "max_display_length",
    "ONIONFORGE_DECIMAL_PLACES": "max_decimal_places",
    "ONIONFORGE_HISTORY_LIMIT": "history_limit",
}

# Upper bounds for overrides. A float holds about 15 significant decimal digits.
_ENV_MAXIMUMS = {
    "ONIONFORGE_DECIMAL_PLACES": 15,
}


@dataclass(frozen=True)
class CalculatorConfig:
    """Tunable constants shared by the engine and the state machine."""

    max_display_length: int = 16
    max_decimal_places: int = 10
    history_limit: int = 10
    default_display: str = "0"
    error_display: str = "Error"
    zero_threshold: float = 1e-10


DEFAULT_CONFIG = CalculatorConfig()


def _parse_positive_int(name: str, raw: str, maximum: Optional[int] = None) -> int:
    try:
        value = int(raw.strip())
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")
    if maximum is not None and value > maximum:
        raise ValueError(f"{name} must be at most {maximum}, got {value}")
    return value


def load_config(env: Optional[Mapping[str, str]] = None) -> CalculatorConfig:
    """Build a CalculatorConfig from environment overrides.

    Args:
        env: Mapping to read from. Defaults to os.environ.

    Returns:
        DEFAULT_CONFIG with any ONIONFORGE_* overrides applied.

    Raises:
        ValueError: If an override is not a positive integer or exceeds its
            upper bound.
    """
    env = os.environ if env is None else env
    overrides: dict[str, int] = {}
    for var, field_name in _ENV_OVERRIDES.items():
        raw = env.get(var)
        # Empty string means "unset", same as a missing key
        if raw:
            overrides[field_name] = _parse_positive_int(var, raw, _ENV_MAXIMUMS.get(var))
    return replace(DEFAULT_CONFIG, **overrides)
