"""Shared fixtures: synthesized fonts and @font-face stylesheets."""

import logging
from pathlib import Path

import pytest
from fontTools.fontBuilder import FontBuilder
from fontTools.pens.ttGlyphPen import TTGlyphPen


def _box_glyph(height: int):
    pen = TTGlyphPen(None)
    pen.moveTo((0, 0))
    pen.lineTo((0, height))
    pen.lineTo((400, height))
    pen.lineTo((400, 0))
    pen.closePath()
    return pen.glyph()


def build_font(
    path: Path,
    units_per_em: int = 1000,
    ascent: int = 800,
    descent: int = -200,
    cap_height: int = 700,
    x_height: int = 500,
    flavor: str = None,
) -> Path:
    """Write a minimal TrueType font with the given vertical metrics."""
    fb = FontBuilder(units_per_em, isTTF=True)
    fb.setupGlyphOrder([".notdef", "H"])
    fb.setupCharacterMap({ord("H"): "H"})

    fb.setupGlyf({name: _box_glyph(cap_height) for name in (".notdef", "H")})

    fb.setupHorizontalMetrics({".notdef": (500, 0), "H": (500, 0)})
    fb.setupHorizontalHeader(ascent=ascent, descent=descent)
    fb.setupOS2(
        sTypoAscender=ascent,
        sTypoDescender=descent,
        usWinAscent=ascent,
        usWinDescent=-descent,
        sCapHeight=cap_height,
        sxHeight=x_height,
    )
    fb.setupNameTable({"familyName": "Test", "styleName": "Regular"})
    fb.setupPost()
    if flavor:
        fb.font.flavor = flavor

    path.parent.mkdir(parents=True, exist_ok=True)
    fb.save(str(path))
    return path


@pytest.fixture
def make_font():
    return build_font


@pytest.fixture
def web_root(tmp_path):
    """A static directory holding two fonts under /fonts."""
    root = tmp_path / "static"
    build_font(root / "fonts" / "cheee-small.ttf", units_per_em=1000, ascent=1164, descent=-238, cap_height=640, x_height=600)
    build_font(root / "fonts" / "noto-sans-jp.woff", units_per_em=2048, flavor="woff")
    return root


@pytest.fixture
def fontface_css(tmp_path):
    css_path = tmp_path / "css" / "_fontface.css"
    css_path.parent.mkdir(parents=True, exist_ok=True)
    css_path.write_text(
        """
@font-face {
  font-family: 'Cheee';
  src: url('/fonts/cheee-small.ttf') format('truetype');
}
@font-face {
  font-family: 'Noto Sans JP';
  src: url("/fonts/noto-sans-jp.woff") format("woff");
  font-display: swap;
}
""",
        encoding="utf-8",
    )
    return css_path


@pytest.fixture(autouse=True)
def reset_typetokens_logger():
    """The CLI detaches the package logger from the root; undo that per test."""
    yield
    logger = logging.getLogger("typetokens")
    logger.handlers = []
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
