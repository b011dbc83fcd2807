"""pollwatch: portable directory watching by polling modification times."""

__version__ = "0.1.0"

from .config import Settings, setup_logging
from .errors import ConstructionError, PathError, PollWatchError, WatcherRunningError
from .watcher import (
    DEFAULT_INTERVAL_MS,
    EXT_ALL_FILES,
    FileInfo,
    FsEventHandler,
    FsWatcher,
    PassResult,
    WalkAction,
    walk,
)

__all__ = [
    "__version__",
    # Config
    "Settings",
    "setup_logging",
    # Errors
    "ConstructionError",
    "PathError",
    "PollWatchError",
    "WatcherRunningError",
    # Watcher
    "DEFAULT_INTERVAL_MS",
    "EXT_ALL_FILES",
    "FileInfo",
    "FsEventHandler",
    "FsWatcher",
    "PassResult",
    "WalkAction",
    "walk",
]
