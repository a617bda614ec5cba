"""CLI parsing and main orchestration."""

import argparse
import sys
import time
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

from . import compiler
from . import config
from . import console_styles as cs
from . import measurements
from . import validation
from .errors import TypeTokensError

console = cs.get_console()
CompilerConfig = config.CompilerConfig


def _add_verbosity(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity level. Use -v for VERBOSE, -vv for DEBUG level output",
    )


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="typetokens",
        description="Generate fluid, script-aware typography and spacing tokens",
    )
    _add_verbosity(parser)
    commands = parser.add_subparsers(dest="command", required=True)

    metrics = commands.add_parser(
        "metrics",
        help="Extract font metrics from an @font-face stylesheet into JSON",
        epilog="Supported formats: TTF, OTF, WOFF, WOFF2",
    )
    metrics.add_argument("css", help="Stylesheet containing @font-face rules")
    metrics.add_argument("output", help="JSON file to write")
    metrics.add_argument(
        "--web-root",
        metavar="DIR",
        help='Directory that "/"-prefixed font urls are resolved against',
    )

    css = commands.add_parser("css", help="Generate the typography stylesheet")
    css.add_argument(
        "-o", "--output", metavar="PATH", help="Stylesheet to write (default from config)"
    )
    css.add_argument("--config", metavar="TOML", help="Configuration file")
    css.add_argument(
        "--fontface", metavar="CSS", help="@font-face stylesheet to read metrics from"
    )
    css.add_argument(
        "--web-root",
        metavar="DIR",
        help='Directory that "/"-prefixed font urls are resolved against',
    )
    css.add_argument(
        "--metrics",
        metavar="JSON",
        help="Use a saved metrics table instead of reading fonts",
    )
    css.add_argument(
        "--px", action="store_true", help="Render clamp() bounds in px instead of rem"
    )
    css.add_argument(
        "-n", "--dry-run", action="store_true", help="Print the stylesheet without writing"
    )
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> CompilerConfig:
    cfg = config.load_compiler_config(args.config) if args.config else CompilerConfig()
    overrides = {}
    if args.output:
        overrides["output_path"] = Path(args.output)
    if args.fontface:
        overrides["fontface_css"] = Path(args.fontface)
    if args.web_root:
        overrides["web_root"] = Path(args.web_root)
    if args.metrics:
        overrides["metrics_path"] = Path(args.metrics)
    if args.px:
        overrides["use_px"] = True
    return replace(cfg, **overrides) if overrides else cfg


def run_metrics(args: argparse.Namespace) -> int:
    table = measurements.build_metrics_table(args.css, args.output, args.web_root)

    cs.StatusIndicator("success").add_message(
        f"Extracted metrics for {cs.fmt_count(len(table))} font(s) to"
    ).add_file(args.output, filename_only=False).emit(console)
    return 0


def run_css(args: argparse.Namespace) -> int:
    cfg = build_config(args)
    validation.validate_compiler_config(cfg)
    for warning in validation.advisory_warnings(cfg):
        cs.StatusIndicator("warning").add_message(warning).emit(console)

    if args.dry_run:
        console.print(
            compiler.generate_css(cfg), markup=False, highlight=False, soft_wrap=True
        )
        return 0

    destination = compiler.generate_and_write_css(cfg)
    cs.StatusIndicator("success").add_message("Wrote").add_file(
        destination, filename_only=False
    ).emit(console)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    start_time = time.time()
    args = parse_args(argv)

    verbosity = (
        cs.Verbosity.DEBUG
        if args.verbose >= 2
        else (cs.Verbosity.VERBOSE if args.verbose >= 1 else cs.Verbosity.BRIEF)
    )
    cs.configure_logging(verbosity)

    try:
        if args.command == "metrics":
            status = run_metrics(args)
        else:
            status = run_css(args)
    except TypeTokensError as e:
        cs.StatusIndicator("error").add_message(type(e).__name__).with_explanation(
            str(e)
        ).emit(console)
        return 1

    cs.emit(
        f"{cs.INDENT}[darktext.dim]Total time: [bold]{time.time() - start_time:.1f}[/bold]s[/darktext.dim]",
        console=console,
    )
    return status


def entry_point() -> None:
    sys.exit(main())
