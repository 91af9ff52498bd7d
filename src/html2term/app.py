# =============================================================================
# html2term Command-Line Application
# =============================================================================
# Entry point for the `html2term` command.
#
# The application:
#   - Parses command-line arguments
#   - Loads the defaults file and builds the render options
#   - Reads the input, renders it, writes the result
#   - Reports any failure on stderr with a non-zero exit code
# =============================================================================

import argparse
import logging
import sys
from pathlib import Path

from html2term import __app_name__, __version__
from html2term.config import Config, build_render_config, print_paths
from html2term.core import ConversionError
from html2term.rendering import RenderEngine
from html2term.streams import read_input, write_output

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Args:
        argv: Arguments to parse. Defaults to sys.argv[1:].

    Returns:
        Parsed arguments namespace.
    """
    parser = argparse.ArgumentParser(
        prog=__app_name__,
        description="Render HTML as plain or colourful terminal text",
    )

    parser.add_argument(
        "infile",
        nargs="?",
        type=Path,
        help="Input HTML file (default is standard input)",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    # Layout
    parser.add_argument(
        "-w", "--width",
        type=int,
        help="Column width to format to (default is 80)",
    )
    parser.add_argument(
        "-W", "--wrap-width",
        type=int,
        help="Maximum text wrap width (default same as width)",
    )
    parser.add_argument(
        "-o", "--output",
        type=Path,
        help="Output file (default is standard output)",
    )

    # Output modes
    parser.add_argument(
        "-L", "--literal",
        action="store_true",
        help="Output only literal text (no decorations)",
    )
    parser.add_argument(
        "--colour",
        action="store_true",
        help="Use ANSI terminal colours",
    )
    parser.add_argument(
        "--hyperlinks",
        action="store_true",
        help="Show clickable, proper hyperlinks",
    )

    # CSS
    parser.add_argument(
        "--css",
        action="store_true",
        help="Enable CSS",
    )
    parser.add_argument(
        "--ignore-css-colour",
        action="store_true",
        help="With --css, ignore CSS colour information "
             "(still hides elements with e.g. display: none)",
    )
    parser.add_argument(
        "--only-css",
        action="store_true",
        help="Don't use default non-CSS colours",
    )

    # Diagnostics
    parser.add_argument(
        "--show-dom",
        action="store_true",
        help="Show the parsed HTML DOM instead of rendered output",
    )
    parser.add_argument(
        "--show-render",
        action="store_true",
        help="Show the computed render tree instead of the rendered output",
    )
    parser.add_argument(
        "--show-css",
        action="store_true",
        help="Show the parsed CSS instead of rendered output",
    )

    # Configuration
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to config file (default: XDG config location)",
    )
    parser.add_argument(
        "--init-config",
        action="store_true",
        help="Write a config file with the current defaults and exit",
    )
    parser.add_argument(
        "--paths",
        action="store_true",
        help="Print configuration paths and exit",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug mode (verbose logging)",
    )

    return parser.parse_args(argv)


def configure_logging(debug: bool) -> None:
    """Send log records to stderr, verbosely in debug mode."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(name)s: %(levelname)s: %(message)s",
        stream=sys.stderr,
    )


def run(args: argparse.Namespace) -> None:
    """
    Perform one conversion.

    Raises:
        ConversionError: If any stage fails.
    """
    config_file = Config.load(args.config)

    if args.init_config:
        path = config_file.save(args.config)
        print(f"Wrote {path}")
        return

    config = build_render_config(
        args.width,
        args.wrap_width,
        literal=args.literal,
        colour=args.colour,
        css=args.css,
        ignore_css_colour=args.ignore_css_colour,
        only_css=args.only_css,
        show_dom=args.show_dom,
        show_render=args.show_render,
        show_css=args.show_css,
        hyperlinks=args.hyperlinks,
        defaults=config_file.rendering,
    )

    tracer = logging.getLogger(f"{__app_name__}.trace") if args.debug else None
    engine = RenderEngine(config, tracer=tracer)

    data = read_input(args.infile)
    output = engine.translate(data)
    write_output(output, args.output)


def main(argv: list[str] | None = None) -> int:
    """
    Main entry point for html2term.

    Returns:
        Exit code (0 for success, 1 for a conversion failure).
    """
    args = parse_args(argv)
    configure_logging(args.debug)

    # Handle --paths flag
    if args.paths:
        print_paths()
        return 0

    try:
        run(args)
    except ConversionError as e:
        logger.debug(f"{e.kind.name} error", exc_info=True)
        print(f"{__app_name__}: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
