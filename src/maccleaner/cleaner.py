"""Deletion of selected cleanable items for maccleaner."""

import logging
import os
import shutil
from collections import deque
from concurrent.futures import Future
from pathlib import Path
from typing import Iterable

from maccleaner.models import CleanableItem, CleanReport
from maccleaner.sizing import get_entry_size, matches_extension
from maccleaner.tasks import BackgroundRunner, TaskGate, get_default_runner

log = logging.getLogger(__name__)


def list_entries(item: CleanableItem) -> list[tuple[Path, int]]:
    """
    List the immediate children of an item that pass its extension filter.

    Each child's size is observed here and trusted at deletion time.

    Args:
        item: Item whose directory to list

    Returns:
        List of (path, observed_size) tuples

    Raises:
        OSError: If the item's directory cannot be listed
    """
    entries: list[tuple[Path, int]] = []
    with os.scandir(item.path) as children:
        for child in children:
            if not matches_extension(child.name, item.extension):
                continue
            try:
                size = get_entry_size(child.path)
            except OSError:
                size = 0
            entries.append((Path(child.path), size))
    return entries


def remove_entry(path: Path) -> None:
    """Delete a file, symlink or directory tree. Raises OSError on failure."""
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    else:
        path.unlink()


class DeletionEngine:
    """Deletes the contents of selected cleanable items."""

    def __init__(
        self,
        runner: BackgroundRunner | None = None,
        max_recent_errors: int = 10,
    ) -> None:
        self.gate = TaskGate("cleaner")
        self.max_recent_errors = max_recent_errors
        self._runner = runner

    @property
    def is_cleaning(self) -> bool:
        return self.gate.is_busy

    def clean(self, items: Iterable[CleanableItem]) -> CleanReport:
        """Clean the selected items and summarize the result."""
        with self.gate.hold():
            return self._clean(list(items))

    def start_clean(self, items: Iterable[CleanableItem]) -> "Future[CleanReport]":
        """Clean on a background worker."""
        runner = self._runner or get_default_runner()
        return runner.submit(self.gate, self._clean, list(items))

    def _clean(self, items: list[CleanableItem]) -> CleanReport:
        report = CleanReport()
        recent: deque[str] = deque(maxlen=self.max_recent_errors)

        def record_error(message: str) -> None:
            report.error_count += 1
            report.last_error = message
            recent.append(message)

        for item in items:
            if not item.is_selected:
                continue
            report.items_cleaned += 1

            try:
                entries = list_entries(item)
            except OSError as e:
                log.warning("Failed to list %s: %s", item.path, e)
                record_error(f"{item.path}: {e.strerror or e}")
                continue

            for path, size in entries:
                try:
                    remove_entry(path)
                except OSError as e:
                    log.warning("Failed to delete %s: %s", path.name, e)
                    record_error(f"{path.name}: {e.strerror or e}")
                    continue
                report.bytes_freed += size
                report.files_deleted += 1

        report.recent_errors = list(recent)
        log.info(
            "Cleaned %d items: %d bytes freed, %d errors",
            report.items_cleaned,
            report.bytes_freed,
            report.error_count,
        )
        return report
