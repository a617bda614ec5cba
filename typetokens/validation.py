"""Configuration checks and advisory warnings."""

import math
from typing import List, Sequence

from .config import (
    INCREMENT_METHODS,
    INCREMENT_STEPS,
    RELATIVE_UNITS,
    CompilerConfig,
    LineHeightConfig,
    SpaceConfig,
    TypeConfig,
)
from .errors import ConfigurationError
from .line_height import round_half_up


def validate_labels(
    labels: Sequence[str], positive_steps: int, negative_steps: int, kind: str
) -> None:
    """Labels map positionally onto steps, largest first."""
    steps = {"positive_steps": positive_steps, "negative_steps": negative_steps}
    for name, value in steps.items():
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigurationError(f"{kind} {name} must be an integer, got {value!r}")
    if positive_steps < 0 or negative_steps < 0:
        raise ConfigurationError(
            f"{kind} steps must be non-negative "
            f"(positive={positive_steps}, negative={negative_steps})"
        )
    expected = positive_steps + negative_steps + 1
    if len(labels) != expected:
        raise ConfigurationError(
            f"{kind} scale has {len(labels)} labels but "
            f"{positive_steps} positive + {negative_steps} negative steps "
            f"require {expected}"
        )
    if len(set(labels)) != len(labels):
        raise ConfigurationError(f"{kind} labels must be unique: {list(labels)}")


def _require_number(kind: str, name: str, value) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigurationError(f"{kind} {name} must be a number, got {value!r}")


def _validate_range(min_width: float, max_width: float, relative_to: str, kind: str):
    _require_number(kind, "min_width", min_width)
    _require_number(kind, "max_width", max_width)
    if not min_width < max_width:
        raise ConfigurationError(
            f"{kind} min_width ({min_width}) must be less than max_width ({max_width})"
        )
    if not isinstance(relative_to, str) or relative_to not in RELATIVE_UNITS:
        raise ConfigurationError(
            f"{kind} relative_to must be one of {', '.join(RELATIVE_UNITS)}, "
            f"got '{relative_to}'"
        )


def _validate_positive(kind: str, **values: float) -> None:
    for name, value in values.items():
        _require_number(kind, name, value)
        if not (math.isfinite(value) and value > 0):
            raise ConfigurationError(f"{kind} {name} must be positive, got {value}")


def validate_type_config(config: TypeConfig) -> None:
    validate_labels(
        config.type_labels, config.positive_steps, config.negative_steps, "Type"
    )
    _validate_range(config.min_width, config.max_width, config.relative_to, "Type")
    _validate_positive(
        "Type",
        min_font_size=config.min_font_size,
        max_font_size=config.max_font_size,
        min_type_scale=config.min_type_scale,
        max_type_scale=config.max_type_scale,
    )
    validate_line_height_config(config.line_height_config)


def validate_space_config(config: SpaceConfig) -> None:
    validate_labels(
        config.space_labels, config.positive_steps, config.negative_steps, "Space"
    )
    _validate_range(config.min_width, config.max_width, config.relative_to, "Space")
    _validate_positive(
        "Space",
        min_space_size=config.min_space_size,
        max_space_size=config.max_space_size,
        min_space_scale=config.min_space_scale,
        max_space_scale=config.max_space_scale,
    )


def validate_line_height_config(config: LineHeightConfig) -> None:
    _validate_positive(
        "Line height",
        base_font_size=config.base_font_size,
        base_line_height=config.base_line_height,
    )
    _require_number("Line height", "scaling_factor", config.scaling_factor)
    if round_half_up(config.base_line_height * config.base_font_size) < 1:
        raise ConfigurationError(
            f"Line height base_line_height x base_font_size "
            f"({config.base_line_height} x {config.base_font_size}) rounds to 0px"
        )
    if config.increment_method not in INCREMENT_METHODS:
        raise ConfigurationError(
            f"Line height increment_method must be one of "
            f"{', '.join(INCREMENT_METHODS)}, got '{config.increment_method}'"
        )


def validate_compiler_config(config: CompilerConfig) -> None:
    if not config.scripts:
        raise ConfigurationError("At least one script must be configured")
    names = [s.name for s in config.scripts]
    if len(set(names)) != len(names):
        raise ConfigurationError(f"Script names must be unique: {names}")
    for name in names:
        if not name.strip():
            raise ConfigurationError("Script names must not be blank")
    # Raises for unknown names
    config.script(config.default_script)
    config.script(config.override_script)
    if not config.override_selector.strip():
        raise ConfigurationError("override_selector must not be blank")
    for script in config.scripts:
        validate_type_config(script.type_config)
        validate_space_config(script.space_config)


def advisory_warnings(config: CompilerConfig) -> List[str]:
    """Settings that are legal but probably not what was intended."""
    warnings: List[str] = []
    for script in config.scripts:
        tc = script.type_config
        lh = tc.line_height_config
        if tc.min_type_scale < 1 or tc.max_type_scale < 1:
            warnings.append(
                f"{script.title}: type scale below 1 makes larger labels smaller"
            )
        if lh.increment_step not in INCREMENT_STEPS:
            warnings.append(
                f"{script.title}: increment_step '{lh.increment_step}' unknown, "
                "line heights will snap to half steps"
            )
        if lh.base_line_height < 1 or lh.base_line_height > 3:
            warnings.append(
                f"{script.title}: base_line_height {lh.base_line_height} unusual "
                "(typically 1.2-2.0)"
            )
        if lh.base_font_size != tc.min_font_size:
            warnings.append(
                f"{script.title}: line-height base ({lh.base_font_size}px) differs "
                f"from the type scale base ({tc.min_font_size}px)"
            )
    if config.default_script == config.override_script:
        warnings.append(
            f"default and override script are both '{config.default_script}', "
            "the override block changes nothing"
        )
    return warnings
