"""Tests for display module."""

from unittest.mock import patch

from maccleaner.display import (
    confirm_action,
    show_catalog,
    show_clean_report,
    show_command_report,
    show_docker_status,
    show_large_folders,
    show_prune_level,
    show_volumes,
)
from maccleaner.models import (
    CatalogScan,
    CleanableItem,
    CleanReport,
    CleanupLevel,
    CommandReport,
    ContainerVolumeItem,
    DockerStatus,
    LargeFolderItem,
)
from maccleaner.targets import get_prune_level


def _printed(mock_console) -> str:
    return "\n".join(str(c.args[0]) for c in mock_console.print.call_args_list if c.args)


class TestShowCatalog:
    @patch("maccleaner.display.console")
    def test_empty(self, mock_console):
        show_catalog(CatalogScan())
        assert "Nothing to clean" in _printed(mock_console)

    @patch("maccleaner.display.console")
    def test_with_items(self, mock_console):
        scan = CatalogScan(
            items=[CleanableItem(name="User Logs", path="/tmp/logs", size_bytes=2048)],
            total_bytes=2048,
        )
        show_catalog(scan)
        output = _printed(mock_console)
        assert "Safe to Clean" in output
        assert "2.0 KB" in output


class TestShowLargeFolders:
    @patch("maccleaner.display.console")
    def test_empty_prints_nothing(self, mock_console):
        show_large_folders([])
        assert not mock_console.print.called

    @patch("maccleaner.display.console")
    def test_with_items(self, mock_console):
        show_large_folders([LargeFolderItem(name="Containers/x", path="/x", size_bytes=1)])
        assert "Review Only" in _printed(mock_console)


class TestShowCleanReport:
    @patch("maccleaner.display.console")
    def test_success(self, mock_console):
        show_clean_report(CleanReport(bytes_freed=1024))
        assert mock_console.print.called

    @patch("maccleaner.display.console")
    def test_errors(self, mock_console):
        report = CleanReport(error_count=2, last_error="blob: Permission denied")
        show_clean_report(report)
        panel = mock_console.print.call_args.args[0]
        assert "Permission denied" in panel.renderable
        assert "Errors" in panel.renderable


class TestDockerDisplay:
    @patch("maccleaner.display.console")
    def test_unavailable(self, mock_console):
        show_docker_status(DockerStatus())
        assert "not available" in _printed(mock_console)

    @patch("maccleaner.display.console")
    def test_counts(self, mock_console):
        show_docker_status(DockerStatus(available=True, container_count=3, image_count=9))
        output = _printed(mock_console)
        assert "Containers: 3" in output
        assert "Images:     9" in output

    @patch("maccleaner.display.console")
    def test_no_volumes(self, mock_console):
        show_volumes([])
        assert "No unused Docker volumes found" in _printed(mock_console)

    @patch("maccleaner.display.console")
    def test_volume_total_counts_selected_only(self, mock_console):
        show_volumes(
            [
                ContainerVolumeItem(name="a", size_bytes=1024),
                ContainerVolumeItem(name="b", size_bytes=4096, is_selected=False),
            ]
        )
        assert "Total selected: 1.0 KB" in _printed(mock_console)

    @patch("maccleaner.display.console")
    def test_prune_level_shows_commands(self, mock_console):
        show_prune_level(get_prune_level(CleanupLevel.ALL))
        panel = mock_console.print.call_args.args[0]
        assert "$ docker stop $(docker ps -aq)" in panel.renderable

    @patch("maccleaner.display.console")
    def test_command_report_failure(self, mock_console):
        show_command_report(CommandReport(success=False, output=""))
        assert "failure" in _printed(mock_console)


class TestConfirmAction:
    @patch("rich.prompt.Confirm.ask", return_value=True)
    def test_confirm(self, mock_ask):
        assert confirm_action("Proceed?")
        mock_ask.assert_called_once_with("Proceed?")
