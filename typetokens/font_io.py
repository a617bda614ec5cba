"""Font file access through fontTools, reduced to the metrics we need."""

from pathlib import Path
from typing import TYPE_CHECKING, Optional

from .errors import FontCollectionError, FontExtractionError
from .models import RawFontMetrics

if TYPE_CHECKING:
    from fontTools.ttLib import TTFont

COLLECTION_TAG = b"ttcf"


def _read_ttfont(path: str):
    from fontTools.ttLib import TTFont

    return TTFont(path, lazy=True)


def _is_collection(path: str) -> bool:
    with open(path, "rb") as f:
        return f.read(4) == COLLECTION_TAG


def _get_upm(font: "TTFont") -> Optional[int]:
    if "head" not in font:
        return None
    return int(font["head"].unitsPerEm)


def _hhea_value(font: "TTFont", attr: str) -> Optional[int]:
    if "hhea" not in font:
        return None
    value = getattr(font["hhea"], attr, None)
    return None if value is None else int(value)


def _os2_value(font: "TTFont", attr: str) -> Optional[int]:
    # sCapHeight and sxHeight only exist from OS/2 version 2 on
    value = getattr(font["OS/2"], attr, None)
    return None if value is None else int(value)


def read_raw_metrics(font: "TTFont") -> RawFontMetrics:
    ascent = _hhea_value(font, "ascent")
    descent = _hhea_value(font, "descent")
    if "OS/2" in font:
        cap_height = _os2_value(font, "sCapHeight")
        x_height = _os2_value(font, "sxHeight")
    else:
        # Without OS/2 the cap height falls back to the ascender
        cap_height = ascent
        x_height = 0
    return RawFontMetrics(
        units_per_em=_get_upm(font),
        cap_height=cap_height,
        ascent=ascent,
        descent=descent,
        x_height=x_height,
    )


def open_font(path) -> RawFontMetrics:
    """Read the raw vertical metrics of a single font file.

    Raises:
        FontCollectionError: The file is a TrueType/OpenType collection
        FontExtractionError: The file is missing or cannot be parsed
    """
    fp = str(Path(path).resolve())
    try:
        if _is_collection(fp):
            raise FontCollectionError(f"Font collections are not supported: {fp}")
        font = _read_ttfont(fp)
    except OSError as e:
        raise FontExtractionError(f"Error opening font file {fp}: {e}") from e
    except FontExtractionError:
        raise
    except Exception as e:
        raise FontExtractionError(f"Error parsing font file {fp}: {e}") from e

    try:
        return read_raw_metrics(font)
    except Exception as e:
        raise FontExtractionError(f"Error reading metrics from {fp}: {e}") from e
    finally:
        font.close()
