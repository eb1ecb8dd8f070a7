# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Resolution progress reporting.

Purely observational: reporters see each resolution unit start and finish
and keep an aggregate count. They never influence scheduling or results.
"""

from typing import Dict, List, Optional

from rich.console import Console
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
)


class ProgressReporter:
    """Interface for resolution progress; every hook is a no-op by default"""

    def start(self, total: int) -> None:
        pass

    def item_started(self, name: str) -> None:
        pass

    def item_done(self, name: str) -> None:
        pass

    def finish(self) -> None:
        pass


class NullProgressReporter(ProgressReporter):
    """Reports nothing (tests, --quiet)"""


class CountingProgressReporter(ProgressReporter):
    """Records what it was told, for inspection"""

    def __init__(self):
        self.total: Optional[int] = None
        self.started: List[str] = []
        self.done: List[str] = []
        self.finished = False

    def start(self, total: int) -> None:
        self.total = total

    def item_started(self, name: str) -> None:
        self.started.append(name)

    def item_done(self, name: str) -> None:
        self.done.append(name)

    def finish(self) -> None:
        self.finished = True

    @property
    def completed(self) -> int:
        return len(self.done)


class RichProgressReporter(ProgressReporter):
    """
    Terminal progress: one aggregate bar plus a transient bar per component.

    Per-component bars disappear as soon as their unit is done; the whole
    display is cleared on finish().
    """

    def __init__(self, console: Optional[Console] = None):
        self.progress = Progress(
            TimeElapsedColumn(),
            BarColumn(bar_width=40),
            MofNCompleteColumn(),
            TextColumn("{task.description}"),
            console=console,
            transient=True,
        )
        self._total_task: Optional[TaskID] = None
        self._item_tasks: Dict[str, TaskID] = {}

    def start(self, total: int) -> None:
        self.progress.start()
        self._total_task = self.progress.add_task(
            "Total progress", total=total
        )

    def item_started(self, name: str) -> None:
        self._item_tasks[name] = self.progress.add_task(
            f"Processing {name}", total=1
        )

    def item_done(self, name: str) -> None:
        task_id = self._item_tasks.pop(name, None)
        if task_id is not None:
            self.progress.remove_task(task_id)
        if self._total_task is not None:
            self.progress.advance(self._total_task)

    def finish(self) -> None:
        self.progress.stop()
