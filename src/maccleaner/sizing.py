"""Allocated disk-usage calculation for maccleaner."""

import logging
import os
from pathlib import Path

log = logging.getLogger(__name__)

# st_blocks is always counted in 512-byte units
BLOCK_SIZE = 512


def allocated_size(stat_result: os.stat_result) -> int:
    """
    Get the bytes a file actually occupies on disk.

    Sparse files (e.g. VM disk images) report far fewer allocated blocks
    than their logical length. Platforms without st_blocks fall back to
    the logical size.
    """
    blocks = getattr(stat_result, "st_blocks", None)
    if blocks is None:
        return stat_result.st_size
    return blocks * BLOCK_SIZE


def normalize_extension(extension: str | None) -> str | None:
    """Lower-case an extension filter and strip any leading dot."""
    if extension is None:
        return None
    return extension.lstrip(".").lower()


def matches_extension(name: str, extension: str | None) -> bool:
    """
    Check whether a file name passes an extension filter.

    Args:
        name: File name (or path)
        extension: Extension without dot, compared case-insensitively.
            None matches everything.

    Returns:
        True if the file should be included
    """
    wanted = normalize_extension(extension)
    if wanted is None:
        return True
    return Path(name).suffix.lstrip(".").lower() == wanted


def get_allocated_size(
    path: Path | str,
    extension: str | None = None,
) -> tuple[int, int, str | None]:
    """
    Calculate the allocated size of every regular file under a directory.

    Walks to any depth with os.scandir, without following symlinks, so link
    loops cannot occur. Entries that fail (permission denied, vanished,
    broken links) are skipped.

    Args:
        path: Directory to walk
        extension: Optional extension filter (case-insensitive)

    Returns:
        Tuple of (total_bytes, file_count, error). If the root itself cannot
        be listed, returns (0, 0, error_message).
    """
    wanted = normalize_extension(extension)
    total_size = 0
    file_count = 0

    try:
        with os.scandir(path) as entries:
            root_entries = list(entries)
    except OSError as e:
        log.debug("Cannot list %s: %s", path, e)
        return 0, 0, str(e)

    pending: list[os.DirEntry] = root_entries
    while pending:
        entry = pending.pop()
        try:
            if entry.is_dir(follow_symlinks=False):
                with os.scandir(entry.path) as children:
                    pending.extend(children)
            elif entry.is_file(follow_symlinks=False):
                if wanted is not None and not matches_extension(entry.name, wanted):
                    continue
                total_size += allocated_size(entry.stat(follow_symlinks=False))
                file_count += 1
        except OSError as e:
            log.debug("Skipping %s: %s", entry.path, e)
            continue

    return total_size, file_count, None


def get_entry_size(path: Path | str) -> int:
    """
    Allocated size of a single directory entry.

    Files and symlinks count their own allocation; directories are walked.
    Raises OSError if the entry cannot be inspected.
    """
    st = os.lstat(path)
    if os.path.isdir(path) and not os.path.islink(path):
        size, _, _ = get_allocated_size(path)
        return size
    return allocated_size(st)
