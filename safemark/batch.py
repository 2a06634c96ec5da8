"""batch rendering of markdown files to HTML files."""

import logging
from pathlib import Path
from typing import Optional, TextIO

from safemark.core.engine import MarkdownEngine, create_engine
from safemark.progress import ProgressHandler

logger = logging.getLogger(__name__)

MARKDOWN_SUFFIXES = (".md", ".markdown")


def discover_files(source: Path) -> list[Path]:
    """
    discovers markdown files from source path.

    Args:
        source: path to a markdown file or a directory

    Returns:
        list of paths to markdown files

    Raises:
        FileNotFoundError: if source doesn't exist
    """
    if not source.exists():
        raise FileNotFoundError(f"Source not found: {source}")

    if source.is_file():
        if source.suffix.lower() in MARKDOWN_SUFFIXES:
            return [source]
        return []

    if source.is_dir():
        return sorted(
            p
            for p in source.iterdir()
            if p.is_file() and p.suffix.lower() in MARKDOWN_SUFFIXES
        )

    return []


def output_path(file_path: Path, source: Path, output: Optional[Path]) -> Path:
    """
    returns where the HTML for file_path is written.

    Args:
        file_path: markdown file being rendered
        source: source given by the user (file or directory)
        output: optional output file (single source file) or directory

    Returns:
        target path for the rendered HTML
    """
    if output is None:
        return file_path.with_suffix(".html")
    # a single source file may name its output file directly
    if source.is_file() and output.suffix and not output.is_dir():
        return output
    return output / f"{file_path.stem}.html"


def render_to_stream(
    source: Path,
    stream: TextIO,
    base_url: Optional[str] = None,
    engine: Optional[MarkdownEngine] = None,
) -> None:
    """
    renders a single markdown file and writes the HTML to stream.

    Args:
        source: markdown file
        stream: text stream receiving the HTML
        base_url: base for relative link destinations
        engine: engine to use; a new one is built when omitted
    """
    engine = engine or create_engine()
    stream.write(engine.render(source.read_text(encoding="utf-8"), base_url))


def render_files(
    source: Path,
    output: Optional[Path] = None,
    base_url: Optional[str] = None,
    quiet: bool = False,
    progress: bool = False,
    engine: Optional[MarkdownEngine] = None,
) -> int:
    """
    renders markdown files from source to HTML files.

    Args:
        source: markdown file or directory of markdown files
        output: output file or directory (defaults to next to each source)
        base_url: base for relative link destinations
        quiet: if True, suppress non-error output
        progress: if True, show progress bar
        engine: engine to use; one engine is built and shared when omitted

    Returns:
        exit code (0 success, 1 partial failure)

    Raises:
        FileNotFoundError: if source doesn't exist
    """
    files = discover_files(source)

    with ProgressHandler(quiet=quiet, show_progress=progress) as handler:
        if not files:
            handler.info(f"No markdown files found in {source}")
            return 0

        handler.begin(len(files))
        engine = engine or create_engine()
        for file_path in files:
            target = output_path(file_path, source, output)
            _render_file(engine, file_path, target, base_url, handler)
        return handler.finish()


def _render_file(
    engine: MarkdownEngine,
    file_path: Path,
    target: Path,
    base_url: Optional[str],
    handler: ProgressHandler,
) -> None:
    """renders one file, reporting failures to handler instead of raising."""
    try:
        html = engine.render(file_path.read_text(encoding="utf-8"), base_url)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(html, encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.debug("Failed to render %s: %s", file_path, e)
        handler.file_failed(file_path, str(e))
        return
    logger.debug("Rendered %s -> %s", file_path, target)
    handler.file_rendered(file_path, target)
