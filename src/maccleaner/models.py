"""Data models for maccleaner."""

import uuid
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


def _new_id() -> str:
    return uuid.uuid4().hex


def format_size(size_bytes: int) -> str:
    """Human-readable size string (binary units)."""
    if size_bytes >= 1024**3:
        return f"{size_bytes / (1024**3):.1f} GB"
    elif size_bytes >= 1024**2:
        return f"{size_bytes / (1024**2):.1f} MB"
    elif size_bytes >= 1024:
        return f"{size_bytes / 1024:.1f} KB"
    else:
        return f"{size_bytes} B"


class ScanTarget(BaseModel):
    """A fixed location under the home directory that can be cleaned."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Human-readable name")
    relative_path: str = Field(..., description="Path relative to the home directory")
    extension: Optional[str] = Field(
        None, description="Only count/delete files with this extension (e.g. 'dmg')"
    )


class SurveyRoot(BaseModel):
    """A directory whose immediate children are surveyed for large folders."""

    model_config = ConfigDict(frozen=True)

    category: str = Field(..., description="Category prefix used in item names")
    relative_path: str = Field(..., description="Path relative to the home directory")


class CleanableItem(BaseModel):
    """A sized, selectable directory whose contents can be deleted."""

    id: str = Field(default_factory=_new_id, description="Stable for one scan session")
    name: str = Field(..., description="Human-readable name")
    path: str = Field(..., description="Absolute directory path")
    size_bytes: int = Field(..., description="Allocated bytes at scan time")
    is_selected: bool = Field(True, description="Whether the item will be cleaned")
    extension: Optional[str] = Field(None, description="Extension filter, if any")

    @property
    def size_human(self) -> str:
        return format_size(self.size_bytes)


class CatalogScan(BaseModel):
    """Result of scanning every configured target."""

    timestamp: datetime = Field(default_factory=datetime.now)
    items: list[CleanableItem] = Field(default_factory=list)
    total_bytes: int = Field(0, description="Sum of the items' sizes")

    @property
    def selected_bytes(self) -> int:
        """Bytes held by the currently selected items."""
        return sum(i.size_bytes for i in self.items if i.is_selected)


class LargeFolderItem(BaseModel):
    """A large folder reported for review only."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=_new_id)
    name: str = Field(..., description="Category-qualified name, e.g. 'Containers/foo'")
    path: str = Field(..., description="Absolute path")
    size_bytes: int = Field(..., description="Allocated bytes")

    @property
    def size_human(self) -> str:
        return format_size(self.size_bytes)


class ContainerItemType(str, Enum):
    """Kind of reclaimable container-runtime resource."""

    VOLUME = "volume"
    IMAGE = "image"
    BUILD_CACHE = "build-cache"


class ContainerVolumeItem(BaseModel):
    """A dangling (unattached) container-runtime resource."""

    id: str = Field(default_factory=_new_id)
    item_type: ContainerItemType = Field(ContainerItemType.VOLUME)
    name: str = Field(..., description="Runtime-assigned name")
    size_bytes: int = Field(..., description="Size reported by the runtime")
    is_selected: bool = Field(True)

    @property
    def size_human(self) -> str:
        return format_size(self.size_bytes)


class CleanupLevel(str, Enum):
    """Docker prune levels, ordered by destructiveness."""

    UNUSED = "unused"  # Unreferenced images and build cache
    ALL = "all"  # Stops every container first
    VOLUMES = "volumes"  # Also removes all volumes (data loss)


class PruneLevel(BaseModel):
    """Fixed command sequence for one cleanup level."""

    model_config = ConfigDict(frozen=True)

    level: CleanupLevel
    title: str
    description: str
    commands: tuple[str, ...] = Field(..., description="Shell command lines, run in order")
    is_dangerous: bool = Field(False, description="Whether the level can lose data")


class CleanReport(BaseModel):
    """Summary of a deletion run."""

    bytes_freed: int = Field(0)
    files_deleted: int = Field(0, description="Entries removed")
    error_count: int = Field(0)
    last_error: Optional[str] = Field(None, description="Most recent error message")
    recent_errors: list[str] = Field(
        default_factory=list, description="Bounded list of recent errors, oldest first"
    )
    items_cleaned: int = Field(0, description="Selected items that were processed")

    @property
    def success(self) -> bool:
        return self.error_count == 0


class CommandReport(BaseModel):
    """Outcome of one or more docker commands."""

    success: bool
    output: str = ""


class DockerStatus(BaseModel):
    """Docker availability and resource counts."""

    available: bool = False
    container_count: int = 0
    image_count: int = 0
