"""console reporting for batch rendering."""

from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.progress import BarColumn, MofNCompleteColumn, Progress, TaskID, TextColumn


class ProgressHandler:
    """
    records which files rendered or failed and reports them on the console.

    without a progress bar every written file is listed; with one, the bar
    shows the file being rendered. failures are printed even when quiet.
    """

    def __init__(
        self,
        quiet: bool = False,
        show_progress: bool = False,
        console: Optional[Console] = None,
    ) -> None:
        self.quiet = quiet
        self.show_progress = show_progress and not quiet
        self.console = console or Console(stderr=True)
        self.rendered: list[Path] = []
        self.failed: list[tuple[Path, str]] = []
        self._progress: Optional[Progress] = None
        self._task_id: Optional[TaskID] = None

    def __enter__(self) -> "ProgressHandler":
        return self

    def __exit__(
        self,
        exc_type: Optional[type],
        exc_val: Optional[BaseException],
        exc_tb: Optional[object],
    ) -> None:
        self.close()

    def close(self) -> None:
        """stops the progress bar if one is running."""
        if self._progress is not None:
            self._progress.stop()
            self._progress = None

    def info(self, message: str) -> None:
        """prints a plain message unless quiet or a bar is shown."""
        if not self.quiet and not self.show_progress:
            self.console.print(message, highlight=False)

    def begin(self, total: int) -> None:
        """announces the batch size and starts the bar when enabled."""
        if not self.show_progress:
            self.info(f"Rendering {total} markdown file(s)")
            return

        self._progress = Progress(
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            MofNCompleteColumn(),
            TextColumn("{task.fields[name]}"),
            console=self.console,
            transient=True,
        )
        self._progress.start()
        self._task_id = self._progress.add_task("Rendering", total=total, name="")

    def file_rendered(self, source: Path, target: Path) -> None:
        """records a written file."""
        self.rendered.append(source)
        self.info(f"  {escape(source.name)} -> {escape(str(target))}")
        self._advance(source.name)

    def file_failed(self, source: Path, reason: str) -> None:
        """records a file that could not be rendered."""
        self.failed.append((source, reason))
        self.console.print(
            f"[red]ERROR:[/red] {escape(source.name)}: {escape(reason)}",
            highlight=False,
        )
        self._advance(source.name)

    def _advance(self, name: str) -> None:
        if self._progress is not None and self._task_id is not None:
            self._progress.update(self._task_id, advance=1, name=escape(name))

    def finish(self) -> int:
        """
        stops the bar and prints the summary unless quiet.

        Returns:
            exit code (0 when every file rendered, 1 otherwise)
        """
        self.close()
        if not self.quiet:
            self.console.print(
                f"Rendered {len(self.rendered)} file(s), {len(self.failed)} failed",
                highlight=False,
            )
        return 1 if self.failed else 0
