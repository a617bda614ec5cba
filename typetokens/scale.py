"""Fluid type and space scales rendered as CSS clamp() expressions."""

import logging
from typing import List

from .config import RELATIVE_UNITS, ROOT_FONT_SIZE, SpaceConfig, TypeConfig
from .line_height import calculate_line_height, round_half_up
from .models import ScaleStep
from .validation import validate_space_config, validate_type_config

logger = logging.getLogger(__name__)


def format_number(value: float, digits: int = 4) -> str:
    """Render a CSS number: rounded, no trailing zeros, no negative zero."""
    rounded = round_half_up(value, digits)
    if rounded == int(rounded):
        return str(int(rounded))
    return repr(rounded)


def calculate_clamp(
    min_size: float,
    max_size: float,
    min_width: float,
    max_width: float,
    relative_to: str = "viewport",
    use_px: bool = False,
) -> str:
    """Interpolate linearly from min_size at min_width to max_size at max_width.

    Example:
        >>> calculate_clamp(18, 20, 320, 1240)
        'clamp(1.125rem, 1.0815rem + 0.2174vi, 1.25rem)'
    """
    divider = 1.0 if use_px else ROOT_FONT_SIZE
    unit = "px" if use_px else "rem"
    relative_unit = RELATIVE_UNITS[relative_to]

    slope = (max_size / divider - min_size / divider) / (
        max_width / divider - min_width / divider
    )
    intercept = -(min_width / divider) * slope + min_size / divider
    lower, upper = sorted((min_size, max_size))

    return (
        f"clamp({format_number(lower / divider)}{unit}, "
        f"{format_number(intercept)}{unit} + {format_number(slope * 100)}{relative_unit}, "
        f"{format_number(upper / divider)}{unit})"
    )


def _ladder(
    labels,
    positive_steps: int,
    min_size: float,
    max_size: float,
    min_scale: float,
    max_scale: float,
    min_width: float,
    max_width: float,
    relative_to: str,
    use_px: bool,
) -> List[ScaleStep]:
    steps: List[ScaleStep] = []
    for index, label in enumerate(labels):
        step = positive_steps - index
        min_value = min_size * min_scale**step
        max_value = max_size * max_scale**step
        clamp = calculate_clamp(
            min_value, max_value, min_width, max_width, relative_to, use_px
        )
        logger.debug(
            "Step %+d (%s): %.4fpx -> %.4fpx = %s",
            step,
            label,
            min_value,
            max_value,
            clamp,
        )
        steps.append(ScaleStep(label, step, min_value, max_value, clamp))
    return steps


def calculate_type_scale(config: TypeConfig, use_px: bool = False) -> List[ScaleStep]:
    """Build the type ladder, largest label first."""
    validate_type_config(config)
    return _ladder(
        config.type_labels,
        config.positive_steps,
        config.min_font_size,
        config.max_font_size,
        config.min_type_scale,
        config.max_type_scale,
        config.min_width,
        config.max_width,
        config.relative_to,
        use_px,
    )


def calculate_space_scale(config: SpaceConfig, use_px: bool = False) -> List[ScaleStep]:
    """Build the space ladder, largest label first."""
    validate_space_config(config)
    return _ladder(
        config.space_labels,
        config.positive_steps,
        config.min_space_size,
        config.max_space_size,
        config.min_space_scale,
        config.max_space_scale,
        config.min_width,
        config.max_width,
        config.relative_to,
        use_px,
    )


def render_type_variables(config: TypeConfig, use_px: bool = False) -> str:
    """Font-size and line-height declarations, not yet namespaced.

    Line heights are aligned at each step's size on the widest viewport.
    """
    lines = []
    for step in calculate_type_scale(config, use_px=use_px):
        line_height = calculate_line_height(config.line_height_config, step.max_value)
        lines.append(f"--fs-{step.label}: {step.clamp};")
        lines.append(f"--lh-{step.label}: {format_number(line_height, 10)};")
    return "\n".join(lines)


def render_space_variables(config: SpaceConfig, use_px: bool = False) -> str:
    return "\n".join(
        f"--space-{step.label}: {step.clamp};"
        for step in calculate_space_scale(config, use_px=use_px)
    )
