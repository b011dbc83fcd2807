"""Models describing visited entries and the outcome of a polling pass."""

import os
import stat
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable

from pydantic import BaseModel, ConfigDict, Field, computed_field

# Extension key that designates the wildcard handler slot
EXT_ALL_FILES = "*"

# Polling period used when a non-positive interval is given
DEFAULT_INTERVAL_MS = 500


class FileInfo(BaseModel):
    """Metadata of a file or directory seen during a walk."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Base name of the entry")
    size: int = Field(default=0, description="Size in bytes")
    mode: int = Field(default=0, description="Raw st_mode bits")
    mtime: float = Field(..., description="Modification time in seconds since the epoch")
    is_dir: bool = Field(default=False, description="Whether the entry is a directory")

    @computed_field
    @property
    def modified_at(self) -> datetime:
        """Modification time as an aware UTC datetime."""
        return datetime.fromtimestamp(self.mtime, tz=timezone.utc)

    @property
    def is_symlink(self) -> bool:
        return stat.S_ISLNK(self.mode)

    @classmethod
    def from_stat(cls, path: str, st: os.stat_result) -> "FileInfo":
        """Build a FileInfo from an ``os.stat_result``.

        Args:
            path: Path the stat result belongs to
            st: Result of ``os.stat`` / ``os.lstat``

        Returns:
            FileInfo for the entry
        """
        return cls(
            name=os.path.basename(path) or path,
            size=st.st_size,
            mode=st.st_mode,
            mtime=st.st_mtime,
            is_dir=stat.S_ISDIR(st.st_mode),
        )


# Handler callback: returning True skips the rest of the containing directory
FsEventHandler = Callable[[str, FileInfo], bool]


@dataclass
class PassResult:
    """Result of a single polling pass."""

    visited: int = 0
    changed: int = 0
    dispatched: int = 0
    pruned: int = 0
    errors: list[str] = field(default_factory=list)
    aborted: bool = False

    @property
    def completed(self) -> bool:
        """Whether the walk ran to the end."""
        return not self.aborted

    def __str__(self) -> str:
        return (
            f"PassResult(visited={self.visited}, changed={self.changed}, "
            f"dispatched={self.dispatched}, pruned={self.pruned}, "
            f"errors={len(self.errors)}, aborted={self.aborted})"
        )
