"""Docker cleanup through the docker CLI.

Docker's text output is not a stable contract, so every failure here is
soft: a missing binary, a non-zero exit or an unexpected table shape
degrades to "unavailable", zero counts or an empty item list.

Known limitation: bulk operations (volume removal, prune levels) are judged
successful when the command printed anything. A command that succeeds
silently is reported as failed, and an error message counts as success.
No timeout is applied by default, so a hung docker binary blocks its
worker thread until it exits.
"""

import logging
import re
import shlex
import subprocess
from concurrent.futures import Future
from typing import Iterable, Optional

from maccleaner.models import (
    CleanupLevel,
    CommandReport,
    ContainerItemType,
    ContainerVolumeItem,
    DockerStatus,
    PruneLevel,
)
from maccleaner.targets import PRUNE_LEVELS
from maccleaner.tasks import BackgroundRunner, TaskGate, get_default_runner

log = logging.getLogger(__name__)

VOLUME_SECTION_MARKER = "VOLUME NAME"
BUILD_CACHE_SECTION_MARKER = "Build cache usage:"

# Checked longest first so "KB" is not read as "B"
SIZE_UNITS = (
    ("KB", 1024),
    ("MB", 1024**2),
    ("GB", 1024**3),
    ("B", 1),
)

_NUMBER_RE = re.compile(r"^\d+(\.\d+)?$|^\.\d+$")


def _execute(args, shell: bool, timeout: float | None) -> Optional[subprocess.CompletedProcess]:
    try:
        return subprocess.run(
            args,
            shell=shell,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            errors="replace",
            timeout=timeout,
        )
    except subprocess.TimeoutExpired:
        log.warning("Command timed out: %s", args)
        return None
    except OSError as e:
        log.debug("Could not launch %s: %s", args, e)
        return None


def run_command(args: list[str], timeout: float | None = None) -> Optional[str]:
    """
    Run a command (no shell) with stdout and stderr merged.

    Args:
        args: Argument vector
        timeout: Optional timeout in seconds (none by default)

    Returns:
        Combined output, or None if the command could not be launched
    """
    result = _execute(args, shell=False, timeout=timeout)
    return result.stdout if result is not None else None


def run_shell(command: str, timeout: float | None = None) -> Optional[str]:
    """Run a shell command line with stdout and stderr merged."""
    result = _execute(command, shell=True, timeout=timeout)
    return result.stdout if result is not None else None


def produced_output(output: Optional[str]) -> bool:
    """Weak success check used for bulk docker operations."""
    return bool(output and output.strip())


def count_lines(output: str) -> int:
    """Count non-empty lines."""
    return sum(1 for line in output.splitlines() if line.strip())


def parse_size(size_str: str) -> Optional[int]:
    """
    Parse a docker size string (e.g. '1.5KB', '2GB') to bytes.

    Only B, KB, MB and GB are understood (case-insensitive, binary
    multipliers). Anything else returns None.
    """
    text = size_str.strip().upper()
    for suffix, multiplier in SIZE_UNITS:
        if text.endswith(suffix):
            number = text[: -len(suffix)]
            if not _NUMBER_RE.match(number):
                return None
            return int(float(number) * multiplier)
    return None


def parse_volumes(output: str) -> list[ContainerVolumeItem]:
    """
    Extract dangling volumes from `docker system df -v` output.

    Rows between the "VOLUME NAME" header and the build cache section are
    split on whitespace into (name, links, size, ...). Only rows with
    exactly "0" links and a parseable size are kept.
    """
    volumes: list[ContainerVolumeItem] = []
    in_volume_section = False

    for line in output.splitlines():
        if VOLUME_SECTION_MARKER in line:
            in_volume_section = True
            continue
        if BUILD_CACHE_SECTION_MARKER in line:
            in_volume_section = False

        if not in_volume_section or not line.strip():
            continue

        parts = line.split()
        if len(parts) < 3:
            continue

        name, links, size_str = parts[0], parts[1], parts[2]
        if links != "0":
            continue

        size = parse_size(size_str)
        if size is None:
            log.debug("Dropping volume %s with unparseable size %r", name, size_str)
            continue

        volumes.append(
            ContainerVolumeItem(item_type=ContainerItemType.VOLUME, name=name, size_bytes=size)
        )

    return volumes


class DockerAdapter:
    """Docker availability, stats, dangling volumes and prune levels."""

    def __init__(
        self,
        binary: str = "docker",
        levels: dict[CleanupLevel, PruneLevel] | None = None,
        runner: BackgroundRunner | None = None,
        timeout: float | None = None,
    ) -> None:
        self.binary = binary
        self.levels = levels if levels is not None else PRUNE_LEVELS
        self.timeout = timeout
        self.gate = TaskGate("docker")
        self._runner = runner

        self.available = False
        self.container_count = 0
        self.image_count = 0
        self.items: list[ContainerVolumeItem] = []

    @property
    def is_busy(self) -> bool:
        return self.gate.is_busy

    @property
    def status(self) -> DockerStatus:
        return DockerStatus(
            available=self.available,
            container_count=self.container_count,
            image_count=self.image_count,
        )

    # -- synchronous API ---------------------------------------------------

    def check_availability(self) -> bool:
        """Check whether docker responds, refreshing stats if it does."""
        with self.gate.hold():
            return self._check_availability()

    def refresh_stats(self) -> DockerStatus:
        """Refresh container and image counts."""
        with self.gate.hold():
            return self._refresh_stats()

    def scan_volumes(self) -> list[ContainerVolumeItem]:
        """Find dangling volumes and replace the item list."""
        with self.gate.hold():
            return self._scan_volumes()

    def delete_volumes(self, items: Iterable[ContainerVolumeItem]) -> CommandReport:
        """Remove the selected volumes, then rescan."""
        with self.gate.hold():
            return self._delete_volumes(list(items))

    def prune(self, level: CleanupLevel) -> CommandReport:
        """Run every command of a cleanup level, then refresh stats."""
        with self.gate.hold():
            return self._prune(level)

    # -- background API ----------------------------------------------------

    def start_check(self) -> "Future[bool]":
        return self._submit(self._check_availability)

    def start_scan(self) -> "Future[list[ContainerVolumeItem]]":
        return self._submit(self._scan_volumes)

    def start_delete(self, items: Iterable[ContainerVolumeItem]) -> "Future[CommandReport]":
        return self._submit(self._delete_volumes, list(items))

    def start_prune(self, level: CleanupLevel) -> "Future[CommandReport]":
        return self._submit(self._prune, level)

    def _submit(self, fn, *args) -> Future:
        runner = self._runner or get_default_runner()
        return runner.submit(self.gate, fn, *args)

    # -- implementation ----------------------------------------------------

    def _run(self, *args: str) -> Optional[str]:
        return run_command([self.binary, *args], timeout=self.timeout)

    def _check_availability(self) -> bool:
        result = _execute([self.binary, "info"], shell=False, timeout=self.timeout)
        if result is None or result.returncode != 0:
            log.info("Docker is not available")
            self.available = False
            self.container_count = 0
            self.image_count = 0
            return False

        self.available = True
        self._refresh_stats()
        return True

    def _refresh_stats(self) -> DockerStatus:
        containers = self._run("ps", "-aq")
        images = self._run("images", "-q")
        self.container_count = count_lines(containers) if containers is not None else 0
        self.image_count = count_lines(images) if images is not None else 0
        return self.status

    def _scan_volumes(self) -> list[ContainerVolumeItem]:
        output = self._run("system", "df", "-v")
        self.items = parse_volumes(output) if output is not None else []
        log.info("Found %d dangling volumes", len(self.items))
        return self.items

    def _delete_volumes(self, items: list[ContainerVolumeItem]) -> CommandReport:
        selected = [
            i for i in items if i.is_selected and i.item_type == ContainerItemType.VOLUME
        ]
        success = True
        output = ""

        if selected:
            result = self._run("volume", "rm", *(i.name for i in selected))
            if produced_output(result):
                output += f"Removed volumes:\n{result}\n"
            else:
                success = False
                output += "Failed to remove some volumes\n"
                log.warning("docker volume rm produced no output")

        self._scan_volumes()
        return CommandReport(success=success, output=output)

    def _prune(self, level: CleanupLevel) -> CommandReport:
        prune_level = self.levels[level]
        success = True
        output = ""
        docker = shlex.quote(self.binary)

        for template in prune_level.commands:
            command = template.format(docker=docker)
            log.debug("Running %s", command)
            result = run_shell(command, timeout=self.timeout)
            if produced_output(result):
                output += result + "\n"
            else:
                success = False

        self._refresh_stats()
        return CommandReport(success=success, output=output)
