"""Compile per-script fluid scales and font metrics into one stylesheet.

Layout of the generated file::

    :root {
      /* Latin Typography Variables */   --latin-fs-*, --latin-lh-*
      /* Latin Spacing Variables */      --latin-space-*
      /* CJK Typography Variables */     --cjk-fs-*, --cjk-lh-*
      /* CJK Spacing Variables */        --cjk-space-*
      /* Font Metrics */                 --<font>-cap-height, ...
      /* Semantic Variables (Default to Latin) */
    }
    html[lang="ja"] { semantic variables pointing at CJK }

Downstream tooling scans for the banner comments, so their wording and
order are fixed.
"""

import logging
import re
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from .config import CompilerConfig, ScriptConfig
from .errors import ConfigurationError, OutputWriteError
from .measurements import collect_font_metrics
from .metrics_table import load_metrics_table
from .models import FontMetrics
from .scale import format_number, render_space_variables, render_type_variables
from .validation import validate_compiler_config

logger = logging.getLogger(__name__)

HEADER = "/* Generated by typetokens. Do not edit by hand. */"
INDENT = "  "

# Value namespaces that get a script prefix
NAMESPACED_PREFIXES: Tuple[str, ...] = ("fs", "lh", "space")
_NAMESPACED_RE = re.compile(
    r"(^|[\s{;])--((?:%s)-)(?=[\w-]*\s*:)"
    % "|".join(re.escape(p) for p in NAMESPACED_PREFIXES),
    re.M,
)

FONT_METRIC_FIELDS: Tuple[Tuple[str, str], ...] = (
    ("units-per-em", "units_per_em"),
    ("cap-height", "cap_height"),
    ("ascent", "ascent"),
    ("descent", "descent"),
    ("x-height", "x_height"),
)


def namespace_variables(css_block: str, script_prefix: str) -> str:
    """Prefix --fs-, --lh- and --space- declarations with the script name.

    Other declarations, comments and blank lines are left alone and the
    line count never changes.
    """
    if not css_block or not css_block.strip():
        raise ConfigurationError("CSS variable block must not be empty")
    if not script_prefix or not script_prefix.strip():
        raise ConfigurationError("Script prefix must not be empty")
    prefix = script_prefix.strip()

    return _NAMESPACED_RE.sub(
        lambda m: f"{m.group(1)}--{prefix}-{m.group(2)}", css_block
    )


def semantic_names(config: Optional[CompilerConfig] = None) -> List[str]:
    """Script-agnostic variable names, in output order."""
    config = config or CompilerConfig()
    names: List[str] = []
    for namespace in NAMESPACED_PREFIXES:
        for script in config.scripts:
            if namespace == "space":
                labels = script.space_config.space_labels
            else:
                labels = script.type_config.type_labels
            for label in labels:
                name = f"{namespace}-{label}"
                if name not in names:
                    names.append(name)
    return names


def generate_semantic_variables(
    script: str = "latin", config: Optional[CompilerConfig] = None
) -> str:
    """Alias every semantic name to the given script's raw variable."""
    if not script or not script.strip():
        raise ConfigurationError("Script prefix must not be empty")
    script = script.strip()
    return "\n".join(
        f"--{name}: var(--{script}-{name});" for name in semantic_names(config)
    )


def _css_ident(name: str) -> str:
    # Non-ASCII letters are valid in custom property names
    ident = re.sub(r"[^\w-]+", "-", name).strip("-")
    if not ident:
        raise ConfigurationError(f"Font name '{name}' has no usable characters")
    return ident


def generate_font_metric_variables(metrics: Dict[str, FontMetrics]) -> str:
    lines = []
    seen: Dict[str, str] = {}
    for font, values in metrics.items():
        ident = _css_ident(font)
        if ident in seen:
            raise ConfigurationError(
                f"Font names '{seen[ident]}' and '{font}' both map to '--{ident}-*'"
            )
        seen[ident] = font
        for suffix, attr in FONT_METRIC_FIELDS:
            value = format_number(getattr(values, attr), 10)
            lines.append(f"--{ident}-{suffix}: {value};")
    return "\n".join(lines)


def load_font_metrics(config: CompilerConfig) -> Dict[str, FontMetrics]:
    """Metrics from the saved table if configured, else from the fonts."""
    if config.metrics_path is not None:
        return load_metrics_table(config.metrics_path)
    if config.fontface_css is not None:
        web_root = str(config.web_root) if config.web_root else None
        return collect_font_metrics(config.fontface_css, web_root)
    logger.info("No font metrics source configured, skipping font metrics")
    return {}


def _script_sections(script: ScriptConfig, use_px: bool) -> List[Tuple[str, str]]:
    type_block = render_type_variables(script.type_config, use_px=use_px)
    space_block = render_space_variables(script.space_config, use_px=use_px)
    return [
        (f"{script.title} Typography Variables", namespace_variables(type_block, script.name)),
        (f"{script.title} Spacing Variables", namespace_variables(space_block, script.name)),
    ]


def _block(selector: str, sections: List[Tuple[str, str]]) -> List[str]:
    lines = [f"{selector} {{"]
    for index, (title, body) in enumerate(sections):
        if index:
            lines.append("")
        lines.append(f"{INDENT}/* {title} */")
        lines.extend(f"{INDENT}{line}" if line else "" for line in body.split("\n"))
    lines.append("}")
    return lines


def generate_css(
    config: Optional[CompilerConfig] = None,
    metrics: Optional[Dict[str, FontMetrics]] = None,
) -> str:
    """Build the complete typography stylesheet.

    Args:
        config: Compiler configuration (the built-in presets by default)
        metrics: Font metrics by font name; loaded per ``config`` when omitted
    """
    config = config or CompilerConfig()
    validate_compiler_config(config)
    if metrics is None:
        metrics = load_font_metrics(config)

    sections: List[Tuple[str, str]] = []
    for script in config.scripts:
        sections.extend(_script_sections(script, config.use_px))
    sections.append(("Font Metrics", generate_font_metric_variables(metrics)))

    default = config.script(config.default_script)
    override = config.script(config.override_script)
    sections.append(
        (
            f"Semantic Variables (Default to {default.title})",
            generate_semantic_variables(default.name, config),
        )
    )

    lines = [HEADER, ""]
    lines.extend(_block(":root", sections))
    lines.append("")
    lines.extend(
        _block(
            config.override_selector,
            [
                (
                    f"Semantic Variables ({override.title})",
                    generate_semantic_variables(override.name, config),
                )
            ],
        )
    )
    return "\n".join(lines) + "\n"


def write_css(
    css: str, output_path=None, config: Optional[CompilerConfig] = None
) -> Path:
    """Write the stylesheet, creating missing directories.

    Raises:
        OutputWriteError: The destination cannot be written; the message
            names the destination
    """
    destination = Path(
        output_path if output_path is not None else (config or CompilerConfig()).output_path
    )
    try:
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_text(css, encoding="utf-8")
    except OSError as e:
        raise OutputWriteError(f"Failed to write CSS file to {destination}: {e}") from e
    return destination


def generate_and_write_css(
    config: Optional[CompilerConfig] = None, output_path=None
) -> Path:
    """Generate the stylesheet and write it to ``output_path`` or the configured path."""
    config = config or CompilerConfig()
    try:
        css = generate_css(config)
        destination = write_css(css, output_path, config)
    except Exception as e:
        logger.error("Failed to generate or write CSS: %s", e)
        raise
    logger.info("CSS generation complete.")
    return destination
