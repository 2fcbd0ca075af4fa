"""Fixed scan targets, survey roots and docker prune levels for maccleaner."""

from maccleaner.models import CleanupLevel, PruneLevel, ScanTarget, SurveyRoot

# Locations whose contents are safe to delete, in display order
SCAN_TARGETS: tuple[ScanTarget, ...] = (
    ScanTarget(name="User Caches", relative_path="Library/Caches"),
    ScanTarget(name="User Logs", relative_path="Library/Logs"),
    ScanTarget(name="Xcode DerivedData", relative_path="Library/Developer/Xcode/DerivedData"),
    ScanTarget(
        name="iOS Backups",
        relative_path="Library/Application Support/MobileSync/Backups",
    ),
    ScanTarget(name="Message Attachments", relative_path="Library/Messages/Attachments"),
    ScanTarget(
        name="Mail Downloads",
        relative_path="Library/Containers/com.apple.mail/Data/Library/Mail Downloads",
    ),
    ScanTarget(name="Unused Disk Images", relative_path="Downloads", extension="dmg"),
)

# Roots whose immediate children are reported when they grow large
SURVEY_ROOTS: tuple[SurveyRoot, ...] = (
    SurveyRoot(category="Containers", relative_path="Library/Containers"),
    SurveyRoot(category="Application Support", relative_path="Library/Application Support"),
)

# Folders at or below this size are left out of the survey
LARGE_FOLDER_THRESHOLD = 500 * 1024 * 1024  # 500 MiB

_STOP_ALL = "{docker} stop $({docker} ps -aq) 2>/dev/null || true"

PRUNE_LEVELS: dict[CleanupLevel, PruneLevel] = {
    CleanupLevel.UNUSED: PruneLevel(
        level=CleanupLevel.UNUSED,
        title="Remove Unused Images & Build Cache",
        description="Removes unused images and build cache (safe)",
        commands=(
            "{docker} system prune -a -f",
            "{docker} builder prune -a -f",
        ),
    ),
    CleanupLevel.ALL: PruneLevel(
        level=CleanupLevel.ALL,
        title="Stop All Containers & Remove All Images",
        description="Stops all containers and removes all images and build cache",
        commands=(
            _STOP_ALL,
            "{docker} system prune -a -f",
            "{docker} builder prune -a -f",
        ),
    ),
    CleanupLevel.VOLUMES: PruneLevel(
        level=CleanupLevel.VOLUMES,
        title="Remove All Volumes (DANGER)",
        description="Also removes all volumes (DATA LOSS RISK)",
        commands=(
            _STOP_ALL,
            "{docker} system prune -a -f --volumes",
            "{docker} builder prune -a -f",
        ),
        is_dangerous=True,
    ),
}

DEFAULT_CLEANUP_LEVEL = CleanupLevel.UNUSED


def get_prune_level(level: CleanupLevel) -> PruneLevel:
    """Get the command sequence for a cleanup level."""
    return PRUNE_LEVELS[level]


def get_target(name: str) -> ScanTarget | None:
    """Find a scan target by its display name (case-insensitive)."""
    wanted = name.lower()
    for target in SCAN_TARGETS:
        if target.name.lower() == wanted:
            return target
    return None
