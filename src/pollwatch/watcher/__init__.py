"""Polling file watcher with per-extension handler dispatch."""

from .entities import DEFAULT_INTERVAL_MS, EXT_ALL_FILES, FileInfo, FsEventHandler, PassResult
from .poller import FsWatcher, file_extension
from .walk import WalkAction, walk

__all__ = [
    # Entities
    "DEFAULT_INTERVAL_MS",
    "EXT_ALL_FILES",
    "FileInfo",
    "FsEventHandler",
    "PassResult",
    # Watcher
    "FsWatcher",
    "file_extension",
    # Walk
    "WalkAction",
    "walk",
]
