"""Command line interface for rendering the data wrangling lesson.

This module provides a command line interface that runs the
:func:`tidyground.lesson.wrangling_lesson` steps and renders
them through the :mod:`tidyground.lesson.render` renderers.

The rendered document is printed to the console,
or saved to a file when an output path is provided.
"""

import argparse
import logging
import os
import sys
from pathlib import Path

from pydantic import ValidationError

from tidyground.config import load_settings
from tidyground.lesson import LessonStepError, get_renderer, wrangling_lesson
from tidyground.logging_config import setup_logging
from tidyground.themes import THEMES

log = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Describe the accepted command line arguments."""
    parser = argparse.ArgumentParser(
        prog="tidyground-lesson",
        description="Render the data wrangling lesson as a document.",
    )
    parser.add_argument(
        "--data",
        help="CSV file to use instead of the bundled survey dataset.",
    )
    parser.add_argument(
        "-f",
        "--format",
        dest="output_format",
        choices=["markdown", "html"],
        help="Format of the rendered document (default: markdown).",
    )
    parser.add_argument(
        "--theme",
        choices=sorted(THEMES),
        help="Theme of HTML documents (default: default).",
    )
    parser.add_argument(
        "--rows",
        dest="preview_rows",
        type=int,
        help="How many rows to show in each table preview (default: 10).",
    )
    parser.add_argument(
        "--digits",
        dest="float_digits",
        type=int,
        help="Decimal digits of floating point values (default: 2).",
    )
    parser.add_argument(
        "-o", "--output", help="Save the document to a file instead of printing it."
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Report the progress of each step."
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Parse the command line arguments and render the lesson."""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(logging.DEBUG if args.verbose else logging.WARNING)

    if args.data is not None and not os.path.isfile(args.data):
        parser.error(f"dataset not found: {args.data}")

    try:
        settings = load_settings(
            {
                "output_format": args.output_format,
                "theme": args.theme,
                "preview_rows": args.preview_rows,
                "float_digits": args.float_digits,
            }
        )
    except ValidationError as e:
        print(f"Invalid options, {e}", file=sys.stderr)
        return 2

    lesson = wrangling_lesson(args.data)
    try:
        results = lesson.run()
    except LessonStepError as e:
        log.debug("Lesson failed", exc_info=e)
        print(f"Unable to render the lesson, {e}", file=sys.stderr)
        return 1

    document = get_renderer(settings).render(lesson, results)
    if args.output:
        Path(args.output).write_text(document + "\n", encoding="utf-8")
        log.info("Lesson saved to %s", args.output)
    else:
        print(document)
    return 0


if __name__ == "__main__":
    sys.exit(main())
