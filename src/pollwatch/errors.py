"""Exceptions raised by pollwatch."""

from pathlib import Path


class PollWatchError(Exception):
    """Base class for all pollwatch errors."""


class ConstructionError(PollWatchError):
    """A watcher could not be created."""


class PathError(ConstructionError):
    """The watched root does not exist or is not a directory."""

    def __init__(self, path: str | Path, reason: str = "either doesn't exist or leads to a file"):
        self.path = str(path)
        self.reason = reason
        super().__init__(f"The specified path {reason}: {self.path}")


class StopWalk(PollWatchError):
    """Raised inside a walk to abort it when a stop has been requested."""


class WatcherRunningError(PollWatchError):
    """A synchronous pass was requested while the polling thread is running."""
