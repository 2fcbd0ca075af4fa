"""Review-only survey of large application folders."""

import logging
import os
from concurrent.futures import Future
from pathlib import Path
from typing import Iterable

from maccleaner.models import LargeFolderItem, SurveyRoot
from maccleaner.sizing import get_allocated_size
from maccleaner.targets import LARGE_FOLDER_THRESHOLD, SURVEY_ROOTS
from maccleaner.tasks import BackgroundRunner, TaskGate, get_default_runner

log = logging.getLogger(__name__)


class LargeFolderSurvey:
    """
    Report immediate children of the survey roots that exceed a threshold.

    Only the roots are listed non-recursively; every child is then sized in
    full, so the cost grows with the data under the roots. Results cannot be
    deleted through maccleaner.
    """

    def __init__(
        self,
        roots: Iterable[SurveyRoot] = SURVEY_ROOTS,
        home: Path | None = None,
        threshold: int = LARGE_FOLDER_THRESHOLD,
        runner: BackgroundRunner | None = None,
    ) -> None:
        self.roots = tuple(roots)
        self.home = home if home is not None else Path.home()
        self.threshold = threshold
        self.gate = TaskGate("large folder survey")
        self._runner = runner
        self.items: list[LargeFolderItem] = []

    @property
    def is_scanning(self) -> bool:
        return self.gate.is_busy

    def scan(self) -> list[LargeFolderItem]:
        """Survey all roots and replace the item list."""
        with self.gate.hold():
            return self._scan()

    def start_scan(self) -> "Future[list[LargeFolderItem]]":
        runner = self._runner or get_default_runner()
        return runner.submit(self.gate, self._scan)

    def _scan(self) -> list[LargeFolderItem]:
        items: list[LargeFolderItem] = []

        for root in self.roots:
            root_path = self.home / root.relative_path
            try:
                with os.scandir(root_path) as entries:
                    children = sorted(entries, key=lambda e: e.name)
            except OSError as e:
                log.debug("Skipping survey root %s: %s", root_path, e)
                continue

            for child in children:
                size = self._child_size(child)
                if size > self.threshold:
                    items.append(
                        LargeFolderItem(
                            name=f"{root.category}/{child.name}",
                            path=child.path,
                            size_bytes=size,
                        )
                    )

        items.sort(key=lambda i: i.size_bytes, reverse=True)
        self.items = items
        log.info("Large folder survey found %d items", len(items))
        return items

    @staticmethod
    def _child_size(child: os.DirEntry) -> int:
        try:
            if not child.is_dir(follow_symlinks=False):
                return 0
        except OSError:
            return 0
        size, _, _ = get_allocated_size(child.path)
        return size
