"""Planning progress bar on stderr.

:class:`PlanningProgress` hands the planner a ``(phase, current, total)``
callback: the bar when stderr is a terminal, a debug log line per finished
phase under ``--verbose``, otherwise None. Stop it before prompting so
the live display does not fight with the prompt.
"""

from __future__ import annotations

from types import TracebackType
from typing import TYPE_CHECKING

from rich.console import Console
from rich.progress import BarColumn, MofNCompleteColumn, Progress, TaskID, TextColumn

from simpledoc.config.logging import log_progress

if TYPE_CHECKING:
    from simpledoc.services.planner import ProgressCallback

_PHASE_LABELS: dict[str, str] = {
    "discover": "Classifying docs",
    "history": "Reading git history",
    "references": "Scanning references",
}


class PlanningProgress:
    """Context manager owning one transient rich progress display."""

    def __init__(self, enabled: bool, *, log_phases: bool = False) -> None:
        self._log_phases = log_phases
        self._progress: Progress | None = None
        if enabled:
            self._progress = Progress(
                TextColumn("{task.description}"),
                BarColumn(),
                MofNCompleteColumn(),
                console=Console(stderr=True),
                transient=True,
            )
        self._tasks: dict[str, TaskID] = {}

    @property
    def callback(self) -> ProgressCallback | None:
        if self._progress is not None:
            return self._update
        return log_progress if self._log_phases else None

    def _update(self, phase: str, current: int, total: int) -> None:
        assert self._progress is not None
        task = self._tasks.get(phase)
        if task is None:
            task = self._progress.add_task(_PHASE_LABELS.get(phase, phase), total=total)
            self._tasks[phase] = task
        self._progress.update(task, completed=current, total=total)

    def stop(self) -> None:
        if self._progress is not None:
            self._progress.stop()

    def __enter__(self) -> PlanningProgress:
        if self._progress is not None:
            self._progress.start()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.stop()
