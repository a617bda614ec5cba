"""Configuration dataclasses, built-in script presets and TOML loading."""

import tomllib
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from .errors import ConfigurationError

INCREMENT_STEPS: Tuple[str, ...] = ("whole", "half", "quarter")
INCREMENT_METHODS: Tuple[str, ...] = ("latin", "cjk")
RELATIVE_UNITS: Dict[str, str] = {
    "viewport": "vi",
    "viewport-width": "vw",
    "container": "cqi",
}

# Root font size used to convert px to rem
ROOT_FONT_SIZE: float = 16.0

# The vertical rhythm, grid and spacing all derive from this size (px)
BASE_FONT_SIZE: float = 18.0

DEFAULT_TYPE_LABELS: Tuple[str, ...] = (
    "7xl",
    "6xl",
    "5xl",
    "4xl",
    "3xl",
    "2xl",
    "1xl",
    "md",
    "1xs",
    "2xs",
)
DEFAULT_SPACE_LABELS: Tuple[str, ...] = (
    "5xl",
    "4xl",
    "3xl",
    "2xl",
    "1xl",
    "md",
    "1xs",
    "2xs",
    "3xs",
)


@dataclass(frozen=True)
class LineHeightConfig:
    """Baseline grid settings for one writing system."""

    base_font_size: float  # px
    base_line_height: float  # unitless ratio
    scaling_factor: float = 0.0  # how fast leading tightens as text grows
    increment_step: str = "half"  # whole | half | quarter
    increment_method: str = "latin"  # latin | cjk, informational only


@dataclass(frozen=True)
class TypeConfig:
    min_width: float
    max_width: float
    min_font_size: float
    max_font_size: float
    min_type_scale: float
    max_type_scale: float
    positive_steps: int
    negative_steps: int
    line_height_config: LineHeightConfig
    relative_to: str = "viewport"
    type_labels: Tuple[str, ...] = DEFAULT_TYPE_LABELS


@dataclass(frozen=True)
class SpaceConfig:
    min_width: float
    max_width: float
    min_space_size: float
    max_space_size: float
    min_space_scale: float
    max_space_scale: float
    positive_steps: int
    negative_steps: int
    relative_to: str = "viewport"
    space_labels: Tuple[str, ...] = DEFAULT_SPACE_LABELS


@dataclass(frozen=True)
class ScriptConfig:
    """Scales for one writing system; ``name`` doubles as the variable prefix."""

    name: str
    title: str
    type_config: TypeConfig
    space_config: SpaceConfig


LATIN_LINE_HEIGHT = LineHeightConfig(
    base_font_size=BASE_FONT_SIZE,
    base_line_height=1.5555,
    scaling_factor=0.5,
    increment_step="quarter",
    increment_method="latin",
)

CJK_LINE_HEIGHT = LineHeightConfig(
    base_font_size=BASE_FONT_SIZE,
    base_line_height=2,
    scaling_factor=0.1,
    increment_step="whole",
    increment_method="cjk",
)

LATIN_TYPE = TypeConfig(
    min_width=320,
    max_width=1914,
    min_font_size=BASE_FONT_SIZE,
    max_font_size=BASE_FONT_SIZE,  # how large the base size grows
    min_type_scale=1.2,
    max_type_scale=1.414,
    positive_steps=7,
    negative_steps=2,
    line_height_config=LATIN_LINE_HEIGHT,
)

CJK_TYPE = replace(LATIN_TYPE, line_height_config=CJK_LINE_HEIGHT)

LATIN_SPACE = SpaceConfig(
    min_width=320,
    max_width=1440,
    min_space_size=16,
    max_space_size=20,
    min_space_scale=1.5,
    max_space_scale=2,
    positive_steps=5,
    negative_steps=3,
)

CJK_SPACE = replace(LATIN_SPACE)

LATIN = ScriptConfig("latin", "Latin", LATIN_TYPE, LATIN_SPACE)
CJK = ScriptConfig("cjk", "CJK", CJK_TYPE, CJK_SPACE)


@dataclass(frozen=True)
class CompilerConfig:
    """Everything the token compiler needs for one build."""

    output_path: Path = Path("css/_typography.css")
    default_script: str = "latin"
    override_script: str = "cjk"
    override_selector: str = 'html[lang="ja"]'
    scripts: Tuple[ScriptConfig, ...] = (LATIN, CJK)
    fontface_css: Optional[Path] = None
    web_root: Optional[Path] = None
    metrics_path: Optional[Path] = None
    use_px: bool = False

    def script(self, name: str) -> ScriptConfig:
        for script in self.scripts:
            if script.name == name:
                return script
        known = ", ".join(s.name for s in self.scripts)
        raise ConfigurationError(f"Unknown script '{name}' (configured: {known})")


_PATH_FIELDS = ("output_path", "fontface_css", "web_root", "metrics_path")
_LABEL_FIELDS = ("type_labels", "space_labels")
_SCRIPT_KEYS = {"title", "type", "space", "line_height"}


def _check_keys(cls, table: Dict[str, Any], where: str, exclude=()) -> None:
    allowed = {f.name for f in fields(cls)} - set(exclude)
    unknown = sorted(set(table) - allowed)
    if unknown:
        raise ConfigurationError(f"Unknown key(s) in [{where}]: {', '.join(unknown)}")


def _coerce(table: Dict[str, Any]) -> Dict[str, Any]:
    values = dict(table)
    for key in _LABEL_FIELDS:
        if key in values:
            if not isinstance(values[key], (list, tuple)):
                raise ConfigurationError(f"{key} must be a list, got {values[key]!r}")
            values[key] = tuple(str(label) for label in values[key])
    return values


def _build(cls, table: Dict[str, Any], where: str, **extra):
    try:
        return cls(**_coerce(table), **extra)
    except TypeError as e:
        raise ConfigurationError(f"Incomplete [{where}] table: {e}") from e


def _merge_script(
    current: Optional[ScriptConfig], name: str, tables: Dict[str, Any]
) -> ScriptConfig:
    prefix = f"scripts.{name}"
    if not isinstance(tables, dict):
        raise ConfigurationError(f"[{prefix}] must be a table")
    unknown = sorted(set(tables) - _SCRIPT_KEYS)
    if unknown:
        raise ConfigurationError(f"Unknown key(s) in [{prefix}]: {', '.join(unknown)}")
    for key in ("type", "space", "line_height"):
        if not isinstance(tables.get(key, {}), dict):
            raise ConfigurationError(f"[{prefix}.{key}] must be a table")
    type_table = tables.get("type", {})
    space_table = tables.get("space", {})
    lh_table = tables.get("line_height", {})
    _check_keys(TypeConfig, type_table, f"{prefix}.type", exclude=("line_height_config",))
    _check_keys(SpaceConfig, space_table, f"{prefix}.space")
    _check_keys(LineHeightConfig, lh_table, f"{prefix}.line_height")

    if current is None:
        line_height = _build(LineHeightConfig, lh_table, f"{prefix}.line_height")
        type_config = _build(
            TypeConfig, type_table, f"{prefix}.type", line_height_config=line_height
        )
        space_config = _build(SpaceConfig, space_table, f"{prefix}.space")
        return ScriptConfig(
            name, str(tables.get("title", name)), type_config, space_config
        )

    line_height = replace(current.type_config.line_height_config, **lh_table)
    type_config = replace(
        current.type_config, **_coerce(type_table), line_height_config=line_height
    )
    space_config = replace(current.space_config, **_coerce(space_table))
    return ScriptConfig(
        name, str(tables.get("title", current.title)), type_config, space_config
    )


def load_compiler_config(
    path, base: Optional[CompilerConfig] = None
) -> CompilerConfig:
    """Layer a TOML configuration file over ``base`` (the presets by default).

    Relative paths in the ``[compiler]`` table resolve against the TOML
    file's directory. Scripts not yet known must provide complete
    ``type``, ``space`` and ``line_height`` tables.
    """
    path = Path(path)
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigurationError(f"Could not read configuration {path}: {e}") from e

    config = base or CompilerConfig()

    scripts = list(config.scripts)
    for name, tables in data.get("scripts", {}).items():
        index = next((i for i, s in enumerate(scripts) if s.name == name), None)
        current = scripts[index] if index is not None else None
        merged = _merge_script(current, name, tables)
        if index is None:
            scripts.append(merged)
        else:
            scripts[index] = merged

    compiler = dict(data.get("compiler", {}))
    _check_keys(CompilerConfig, compiler, "compiler", exclude=("scripts",))
    for key in _PATH_FIELDS:
        if compiler.get(key) is not None:
            value = Path(compiler[key])
            compiler[key] = value if value.is_absolute() else path.parent / value

    return replace(config, scripts=tuple(scripts), **compiler)
