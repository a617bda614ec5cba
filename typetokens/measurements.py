"""@font-face scanning and per-font metric extraction."""

import logging
import math
import os
import re
from pathlib import Path
from typing import Callable, Dict, List, Optional

from . import font_io
from . import metrics_table
from .errors import CSSParsingError, FontExtractionError
from .models import FontMetrics, RawFontMetrics

logger = logging.getLogger(__name__)

FontOpener = Callable[[str], RawFontMetrics]

FONT_FACE_RE = re.compile(r"@font-face\s*\{[^}]*\}")
SRC_RE = re.compile(r"src:\s*((?:url\([^)]*\)|[^;])++);")
URL_RE = re.compile(r"url\(\s*['\"]?([^'\")]+?)['\"]?\s*\)")


def _resolve_font_path(
    font_url: str, css_dir: str, web_root: Optional[str] = None
) -> str:
    # Web-root-relative paths stay as written when no web root is known
    if font_url.startswith("/"):
        if web_root:
            return os.path.abspath(os.path.join(web_root, "." + font_url))
        return font_url
    return os.path.abspath(os.path.join(css_dir, font_url))


def get_font_paths(
    css_text: str, css_dir, web_root: Optional[str] = None
) -> List[str]:
    """Collect the font file behind every url() of every @font-face src.

    Args:
        css_text: Stylesheet containing @font-face rules
        css_dir: Directory that relative urls are resolved against
        web_root: Directory that "/"-prefixed urls are resolved against

    Returns:
        Paths in document order, one per url() occurrence
    """
    css_dir = str(css_dir)
    web_root = str(web_root) if web_root else None
    font_paths: List[str] = []

    blocks = FONT_FACE_RE.findall(css_text)
    logger.info("Found %d @font-face block(s)", len(blocks))

    for index, block in enumerate(blocks, start=1):
        src_match = SRC_RE.search(block)
        if not src_match:
            logger.warning("No src value found in @font-face block %d, skipping", index)
            continue
        for url_match in URL_RE.finditer(src_match.group(1)):
            font_url = url_match.group(1).strip()
            if font_url.startswith("data:"):
                logger.info("Skipping inline data: font in block %d", index)
                continue
            # Drop query strings and fragments such as "font.eot?#iefix"
            font_url = re.split(r"[?#]", font_url, maxsplit=1)[0]
            if not font_url:
                continue
            font_path = _resolve_font_path(font_url, css_dir, web_root)
            logger.debug("Block %d: %s -> %s", index, font_url, font_path)
            font_paths.append(font_path)

    logger.info("Extracted %d font path(s)", len(font_paths))
    return font_paths


def get_font_paths_from_css(css_path, web_root: Optional[str] = None) -> List[str]:
    """Read a stylesheet and return its @font-face font paths.

    Raises:
        CSSParsingError: The stylesheet cannot be read
    """
    css_path = Path(css_path)
    logger.info("Processing CSS file: %s", css_path)
    try:
        css_text = css_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise CSSParsingError(f"Error reading CSS file {css_path}: {e}") from e
    return get_font_paths(css_text, css_path.parent, web_root)


def extract_metrics(
    font_path, opener: FontOpener = font_io.open_font
) -> FontMetrics:
    """Extract vertical metrics normalized to the em square.

    Raises:
        FontCollectionError: The file is a font collection
        FontExtractionError: The font is unreadable or lacks a metric
    """
    fp = str(font_path)
    raw = opener(fp)
    logger.debug("Raw metrics for %s: %s", fp, raw)

    upm = raw.units_per_em
    if (
        not upm
        or raw.cap_height is None
        or raw.ascent is None
        or raw.descent is None
        or raw.x_height is None
    ):
        raise FontExtractionError(f"Invalid font metrics in: {fp}")

    metrics = FontMetrics(
        units_per_em=int(upm),
        cap_height=raw.cap_height / upm,
        ascent=raw.ascent / upm,
        descent=raw.descent / upm,
        x_height=raw.x_height / upm,
    )
    normalized = (metrics.cap_height, metrics.ascent, metrics.descent, metrics.x_height)
    if not all(math.isfinite(value) for value in normalized):
        raise FontExtractionError(f"Invalid normalization for font: {fp}")

    logger.debug("Normalized metrics for %s: %s", fp, metrics)
    return metrics


def font_name(font_path) -> str:
    """File base name without its extension."""
    return Path(font_path).stem


def collect_font_metrics(
    css_path, web_root: Optional[str] = None, opener: FontOpener = font_io.open_font
) -> Dict[str, FontMetrics]:
    """Extract metrics for every font referenced by a stylesheet.

    Fonts are processed one at a time in document order; a font that fails
    is reported and left out, the rest still succeed.
    """
    table: Dict[str, FontMetrics] = {}
    for font_path in get_font_paths_from_css(css_path, web_root):
        try:
            table[font_name(font_path)] = extract_metrics(font_path, opener=opener)
        except FontExtractionError as e:
            logger.warning("Failed to extract metrics for font %s: %s", font_path, e)
    return table


def build_metrics_table(
    css_path,
    output_path,
    web_root: Optional[str] = None,
    opener: FontOpener = font_io.open_font,
) -> Dict[str, FontMetrics]:
    """Extract metrics for a stylesheet's fonts and save them as JSON."""
    table = collect_font_metrics(css_path, web_root, opener=opener)
    metrics_table.save_metrics_table(table, output_path)
    logger.info("Wrote metrics for %d font(s) to %s", len(table), output_path)
    return table
