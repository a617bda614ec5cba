"""Font metric and scale step records."""

from dataclasses import dataclass
from typing import Dict, Optional


@dataclass(frozen=True)
class RawFontMetrics:
    """Vertical metrics as stored in the font, in font units."""

    units_per_em: Optional[int]
    cap_height: Optional[int]
    ascent: Optional[int]
    descent: Optional[int]
    x_height: Optional[int]


@dataclass(frozen=True)
class FontMetrics:
    units_per_em: int
    cap_height: float  # normalized, 0 to 1
    ascent: float  # normalized, 0 to 1
    descent: float  # normalized, -1 to 0
    x_height: float  # normalized, 0 to 1

    def to_dict(self) -> Dict[str, float]:
        return {
            "unitsPerEm": self.units_per_em,
            "capHeight": self.cap_height,
            "ascent": self.ascent,
            "descent": self.descent,
            "xHeight": self.x_height,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, float]) -> "FontMetrics":
        return cls(
            units_per_em=int(data["unitsPerEm"]),
            cap_height=float(data["capHeight"]),
            ascent=float(data["ascent"]),
            descent=float(data["descent"]),
            x_height=float(data["xHeight"]),
        )


@dataclass(frozen=True)
class ScaleStep:
    """One rung of a fluid type or space ladder."""

    label: str
    step: int  # 0 is the base size, positive steps are larger
    min_value: float  # px at the minimum viewport width
    max_value: float  # px at the maximum viewport width
    clamp: str
