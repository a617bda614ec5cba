"""Baseline-grid line-height alignment.

The arithmetic reproduces a JavaScript build pipeline exactly: every rounding
is half-up on the exact binary value of the float (``Math.round`` and
``Number.prototype.toFixed``), never Python's round-half-even.
"""

import logging
from decimal import ROUND_HALF_UP, Decimal, localcontext

from .config import LineHeightConfig

logger = logging.getLogger(__name__)

# Snapping granularity per increment step
INCREMENT_DIVISORS = {
    "whole": 1,
    "half": 2,
    "quarter": 4,
}
DEFAULT_INCREMENT_MULTIPLIER = 2


def round_half_up(value: float, digits: int = 0) -> float:
    """Round ``value`` to ``digits`` decimals, ties away from zero."""
    with localcontext() as ctx:
        ctx.prec = 400
        exponent = Decimal(1).scaleb(-digits)
        return float(Decimal(value).quantize(exponent, rounding=ROUND_HALF_UP))


def calculate_line_height(config: LineHeightConfig, font_size: float) -> float:
    """Calculate a unitless line-height aligned to the baseline grid.

    Args:
        config: Baseline grid settings for the script
        font_size: Font size in px

    Returns:
        Unitless line-height (rounded to 10 decimals)

    Raises:
        ValueError: If font_size is zero or negative
    """
    logger.debug(
        "Calculating line height for %spx (base %spx x %s, scaling %s, step %s)",
        font_size,
        config.base_font_size,
        config.base_line_height,
        config.scaling_factor,
        config.increment_step,
    )
    if font_size <= 0:
        raise ValueError("Font size must be positive.")

    # Step 1: base line height in whole pixels
    base_line_height_raw = config.base_line_height * config.base_font_size
    base_line_height_px = round_half_up(base_line_height_raw)
    logger.debug(
        "Step 1: base line height %s -> %spx", base_line_height_raw, base_line_height_px
    )
    if base_line_height_px < 1:
        raise ValueError(
            f"Base line height {base_line_height_raw}px rounds to 0px (no grid)."
        )

    # Step 2: size of one grid unit
    divisor = INCREMENT_DIVISORS.get(config.increment_step, 1)
    baseline_unit = base_line_height_px / divisor
    logger.debug(
        "Step 2: baseline unit (%s) = %s / %s = %spx",
        config.increment_step,
        base_line_height_px,
        divisor,
        baseline_unit,
    )

    # Step 3: leading the font would get without scaling
    desired_px = round_half_up(font_size * config.base_line_height, 4)
    logger.debug("Step 3: desired line height %spx", desired_px)

    # Step 4: tighten (or loosen) relative to the base size
    if config.scaling_factor:
        difference = font_size - config.base_font_size
        adjustment = abs(
            round_half_up(
                1 - config.scaling_factor * (difference / config.base_font_size), 10
            )
        )
        previous = desired_px
        desired_px = round_half_up(desired_px * adjustment, 4)
        logger.debug(
            "Step 4: scaling adjustment %s, %spx -> %spx",
            adjustment,
            previous,
            desired_px,
        )

    # Step 5
    units_raw = desired_px / baseline_unit
    logger.debug("Step 5: %s / %s = %s units", desired_px, baseline_unit, units_raw)

    # Step 6: snap to the increment
    multiplier = INCREMENT_DIVISORS.get(config.increment_step)
    if multiplier is None:
        logger.warning(
            "Invalid increment_step: %s. Defaulting to 'half'.", config.increment_step
        )
        multiplier = DEFAULT_INCREMENT_MULTIPLIER
    rounded_units = round_half_up(round_half_up(units_raw * multiplier) / multiplier, 4)
    logger.debug("Step 6: rounded units (%s) = %s", config.increment_step, rounded_units)

    # Step 7
    aligned_px = round_half_up(rounded_units * baseline_unit, 4)
    logger.debug("Step 7: aligned line height %spx", aligned_px)

    # Step 8
    line_height = round_half_up(aligned_px / font_size, 10)
    logger.debug("Step 8: %s / %s = %s", aligned_px, font_size, line_height)
    return line_height
