"""Tests for data models and static configuration."""

import pydantic
import pytest

from maccleaner.models import (
    CatalogScan,
    CleanableItem,
    CleanReport,
    CleanupLevel,
    ContainerItemType,
    ContainerVolumeItem,
    LargeFolderItem,
    ScanTarget,
    format_size,
)
from maccleaner.targets import (
    DEFAULT_CLEANUP_LEVEL,
    LARGE_FOLDER_THRESHOLD,
    PRUNE_LEVELS,
    SCAN_TARGETS,
    SURVEY_ROOTS,
    get_prune_level,
    get_target,
)


class TestFormatSize:
    def test_bytes(self):
        assert format_size(500) == "500 B"

    def test_binary_units(self):
        assert format_size(1536) == "1.5 KB"
        assert format_size(5 * 1024**2) == "5.0 MB"
        assert format_size(2 * 1024**3) == "2.0 GB"


class TestCleanableItem:
    def test_defaults(self):
        item = CleanableItem(name="Logs", path="/tmp/logs", size_bytes=2048)
        assert item.is_selected
        assert item.extension is None
        assert item.size_human == "2.0 KB"

    def test_ids_are_unique(self):
        a = CleanableItem(name="a", path="/a", size_bytes=1)
        b = CleanableItem(name="a", path="/a", size_bytes=1)
        assert a.id != b.id

    def test_selection_is_mutable(self):
        item = CleanableItem(name="Logs", path="/tmp/logs", size_bytes=1)
        item.is_selected = False
        assert not item.is_selected


class TestCatalogScan:
    def test_selected_bytes(self):
        scan = CatalogScan(
            items=[
                CleanableItem(name="a", path="/a", size_bytes=10),
                CleanableItem(name="b", path="/b", size_bytes=20, is_selected=False),
            ],
            total_bytes=30,
        )
        assert scan.selected_bytes == 10

    def test_empty(self):
        scan = CatalogScan()
        assert scan.items == []
        assert scan.total_bytes == 0


class TestImmutableRecords:
    def test_large_folder_item_is_frozen(self):
        item = LargeFolderItem(name="Containers/x", path="/x", size_bytes=1)
        with pytest.raises(pydantic.ValidationError):
            item.size_bytes = 2

    def test_scan_target_is_frozen(self):
        with pytest.raises(pydantic.ValidationError):
            SCAN_TARGETS[0].relative_path = "elsewhere"


class TestContainerVolumeItem:
    def test_defaults(self):
        item = ContainerVolumeItem(name="vol", size_bytes=1024)
        assert item.item_type == ContainerItemType.VOLUME
        assert item.is_selected


class TestCleanReport:
    def test_success(self):
        assert CleanReport().success
        assert not CleanReport(error_count=1, last_error="denied").success


class TestTargets:
    def test_scan_targets(self):
        names = [t.name for t in SCAN_TARGETS]
        assert names[0] == "User Caches"
        assert "Unused Disk Images" in names
        assert len(set(names)) == len(names)

    def test_only_disk_images_are_filtered(self):
        filtered = [t for t in SCAN_TARGETS if t.extension]
        assert [(t.relative_path, t.extension) for t in filtered] == [("Downloads", "dmg")]

    def test_paths_are_relative(self):
        for target in SCAN_TARGETS:
            assert not target.relative_path.startswith("/")
        for root in SURVEY_ROOTS:
            assert not root.relative_path.startswith("/")

    def test_get_target(self):
        assert get_target("user caches") == SCAN_TARGETS[0]
        assert get_target("nope") is None

    def test_threshold(self):
        assert LARGE_FOLDER_THRESHOLD == 500 * 1024 * 1024

    def test_prune_levels(self):
        assert list(PRUNE_LEVELS) == [CleanupLevel.UNUSED, CleanupLevel.ALL, CleanupLevel.VOLUMES]
        assert get_prune_level(CleanupLevel.ALL).level == CleanupLevel.ALL
        assert len(get_prune_level(CleanupLevel.UNUSED).commands) == 2

    def test_default_level_is_not_dangerous(self):
        assert DEFAULT_CLEANUP_LEVEL == CleanupLevel.UNUSED
        assert not get_prune_level(DEFAULT_CLEANUP_LEVEL).is_dangerous

    def test_scan_target_extension_optional(self):
        target = ScanTarget(name="x", relative_path="y")
        assert target.extension is None
