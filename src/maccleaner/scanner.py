"""Scanning of the fixed cleanable targets for maccleaner."""

import logging
from concurrent.futures import Future
from pathlib import Path
from typing import Iterable

from maccleaner.models import CatalogScan, CleanableItem, ScanTarget
from maccleaner.sizing import get_allocated_size
from maccleaner.targets import SCAN_TARGETS
from maccleaner.tasks import BackgroundRunner, TaskGate, get_default_runner

log = logging.getLogger(__name__)


def resolve_target(target: ScanTarget, home: Path) -> Path:
    """Absolute path of a target under the given home directory."""
    return home / target.relative_path


def scan_target(target: ScanTarget, home: Path) -> CleanableItem | None:
    """
    Size a single target.

    Args:
        target: Target to scan
        home: Home directory the target is relative to

    Returns:
        A selected CleanableItem, or None if the target is missing, not a
        directory, unreadable or empty.
    """
    path = resolve_target(target, home)
    if not path.is_dir():
        log.debug("Skipping %s: %s is not a directory", target.name, path)
        return None

    size, _, error = get_allocated_size(path, target.extension)
    if error:
        log.warning("Could not scan %s (%s): %s", target.name, path, error)
        return None
    if size <= 0:
        return None

    return CleanableItem(
        name=target.name,
        path=str(path),
        size_bytes=size,
        extension=target.extension,
    )


class CleanableCatalog:
    """Builds the list of cleanable items from the configured targets."""

    def __init__(
        self,
        targets: Iterable[ScanTarget] = SCAN_TARGETS,
        home: Path | None = None,
        runner: BackgroundRunner | None = None,
    ) -> None:
        self.targets = tuple(targets)
        self.home = home if home is not None else Path.home()
        self.gate = TaskGate("catalog scan")
        self._runner = runner
        self._last_scan = CatalogScan()

    @property
    def items(self) -> list[CleanableItem]:
        return self._last_scan.items

    @property
    def total_bytes(self) -> int:
        return self._last_scan.total_bytes

    @property
    def is_scanning(self) -> bool:
        return self.gate.is_busy

    @property
    def selected_items(self) -> list[CleanableItem]:
        return [i for i in self.items if i.is_selected]

    def set_selected(self, item_id: str, selected: bool) -> bool:
        """
        Toggle the selection of one item.

        Returns:
            True if an item with that id exists
        """
        for item in self.items:
            if item.id == item_id:
                item.is_selected = selected
                return True
        return False

    def scan(self) -> CatalogScan:
        """Scan every target and replace the item list."""
        with self.gate.hold():
            return self._scan()

    def start_scan(self) -> "Future[CatalogScan]":
        """Scan on a background worker."""
        runner = self._runner or get_default_runner()
        return runner.submit(self.gate, self._scan)

    def _scan(self) -> CatalogScan:
        items: list[CleanableItem] = []
        for target in self.targets:
            item = scan_target(target, self.home)
            if item is not None:
                items.append(item)

        result = CatalogScan(
            items=items,
            total_bytes=sum(i.size_bytes for i in items),
        )
        self._last_scan = result
        log.info("Catalog scan found %d items, %d bytes", len(items), result.total_bytes)
        return result
