#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/marpy/cli.py
"""Command line interface.

Renders a Markdown file into a standalone HTML document::

    marpy slides.md -o slides.html --theme gaia

Exit codes: 0 on success, 1 when rendering fails, 2 on invalid arguments.
"""

from __future__ import annotations

import argparse
import html
import logging
import sys
from pathlib import Path
from typing import Any

from marpy import __version__
from marpy.constants import BUILTIN_THEMES
from marpy.exceptions import MarpyError
from marpy.logging_utils import configure_logging
from marpy.marp import Marp

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_ERROR = 1
EXIT_VALIDATION_ERROR = 2

DOCUMENT_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1">
<title>{title}</title>
<style>{css}</style>
</head>
<body>
{html}
</body>
</html>
"""


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="marpy",
        description="Render Markdown slides into a standalone HTML document.",
    )
    parser.add_argument("input", help="Markdown file to render, or - for stdin")
    parser.add_argument("-o", "--output", help="Output HTML file (default: stdout)")
    parser.add_argument(
        "--theme",
        help=f"Theme used when the document sets none (built-in: {', '.join(BUILTIN_THEMES)})",
    )
    parser.add_argument("--html", action="store_true", help="Allow all raw HTML in the document")
    parser.add_argument("--no-minify-css", action="store_true", help="Keep the stylesheet unminified")
    parser.add_argument("--no-script", action="store_true", help="Do not append the browser runtime script")
    parser.add_argument("--no-inline-svg", action="store_true", help="Do not wrap slides in inline SVG")
    parser.add_argument("--math-lib", choices=["mathml", "mathjax"], default="mathml", help="Math output format")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: WARNING)",
    )
    parser.add_argument("--log-file", help="Also write log messages to this file")
    parser.add_argument("--trace", action="store_true", help="Detailed log format with timestamps and logger names")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def build_options(parsed_args: argparse.Namespace) -> dict[str, Any]:
    """Translate parsed arguments into renderer options."""
    options: dict[str, Any] = {
        "minify_css": not parsed_args.no_minify_css,
        "inline_svg": not parsed_args.no_inline_svg,
        "script": not parsed_args.no_script,
        "math": {"lib": parsed_args.math_lib},
    }
    if parsed_args.html:
        options["html"] = True
    if parsed_args.theme:
        options["theme"] = parsed_args.theme
    return options


def _read_input(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")


def render_document(marp: Marp, markdown: str, title: str) -> str:
    """Render Markdown into a complete HTML document."""
    result = marp.render(markdown)
    return DOCUMENT_TEMPLATE.format(title=html.escape(title), css=result.css, html=result.html)


def main(args: list[str] | None = None) -> int:
    """Run the command line interface."""
    parser = create_parser()
    try:
        parsed_args = parser.parse_args(args)
    except SystemExit as exc:
        return exc.code if isinstance(exc.code, int) else EXIT_VALIDATION_ERROR

    configure_logging(parsed_args.log_level, log_file=parsed_args.log_file, trace_mode=parsed_args.trace)

    try:
        markdown = _read_input(parsed_args.input)
    except OSError as e:
        print(f"Error: cannot read {parsed_args.input}: {e}", file=sys.stderr)
        return EXIT_VALIDATION_ERROR

    try:
        marp = Marp(build_options(parsed_args))
        title = Path(parsed_args.input).stem if parsed_args.input != "-" else "marpy"
        document = render_document(marp, markdown, title)
    except MarpyError as e:
        logger.debug("Rendering failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR

    if parsed_args.output:
        try:
            Path(parsed_args.output).write_text(document, encoding="utf-8")
        except OSError as e:
            print(f"Error: cannot write {parsed_args.output}: {e}", file=sys.stderr)
            return EXIT_ERROR
        logger.info("Wrote %s", parsed_args.output)
    else:
        sys.stdout.write(document)
    return EXIT_SUCCESS


if __name__ == "__main__":
    sys.exit(main())
