"""Markdown to sanitized HTML renderer with syntax extensions."""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from safemark.batch import render_files, render_to_stream
from safemark.core import MarkdownEngine, create_engine, render_markdown

__all__ = ["MarkdownEngine", "create_engine", "main", "render_markdown"]

logger = logging.getLogger(__name__)


def main(argv: Optional[list[str]] = None) -> int:
    """
    main entry point for safemark CLI.

    Args:
        argv: command line arguments (defaults to sys.argv[1:])

    Returns:
        exit code (0 success, 1 partial failure, 2 fatal error)
    """
    parser = argparse.ArgumentParser(
        description="Render markdown files to sanitized HTML"
    )
    parser.add_argument(
        "source",
        help="markdown file or directory of markdown files",
    )
    parser.add_argument(
        "output",
        nargs="?",
        default=None,
        help="output file or directory (default: stdout for a file, "
        "next to each source for a directory)",
    )
    parser.add_argument(
        "--base-url",
        default=None,
        help="base URL that relative links are resolved against",
    )
    parser.add_argument(
        "--progress",
        action="store_true",
        help="show progress bar",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="suppress non-error output",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="enable debug logging",
    )

    args = parser.parse_args(argv)

    # configures logging
    level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="[%(levelname)s] %(message)s",
    )

    # validates source path exists
    source_path = Path(args.source)
    if not source_path.exists():
        logger.error("Source not found: %s", args.source)
        return 2

    try:
        engine = create_engine()
        if source_path.is_file() and args.output is None:
            render_to_stream(source_path, sys.stdout, args.base_url, engine)
            return 0
        return render_files(
            source=source_path,
            output=Path(args.output) if args.output else None,
            base_url=args.base_url,
            quiet=args.quiet,
            progress=args.progress,
            engine=engine,
        )
    except Exception as e:
        logger.error("Fatal error: %s", e)
        return 2
