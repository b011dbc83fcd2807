"""Polling directory watcher dispatching changed files to per-extension handlers."""

import logging
import os
import threading
import time
from typing import TYPE_CHECKING, Callable

from ..errors import PathError, WatcherRunningError
from .entities import (
    DEFAULT_INTERVAL_MS,
    EXT_ALL_FILES,
    FileInfo,
    FsEventHandler,
    PassResult,
)
from .walk import WalkAction, walk

if TYPE_CHECKING:
    from ..config import Settings

logger = logging.getLogger(__name__)


def file_extension(path: str) -> str:
    """Return the extension of the last path element, dot included.

    Unlike ``os.path.splitext`` a leading dot counts, so ``.gitignore``
    has the extension ``.gitignore``. Returns "" when there is no dot.
    """
    name = os.path.basename(path)
    index = name.rfind(".")
    return name[index:] if index >= 0 else ""


class FsWatcher:
    """Watch a directory tree by polling modification times.

    Every pass walks the whole tree and hands each entry modified after the
    baseline timestamp to the handler registered for its extension. The
    baseline moves to the current time after each completed pass, so no
    per-file state is kept.

    Handlers and skipped directories must be registered before ``watch()``
    is called; changes made while a pass is running may or may not be seen
    by that pass.
    """

    def __init__(
        self,
        root: str | os.PathLike[str],
        interval: int = DEFAULT_INTERVAL_MS,
        *,
        wildcard_fallback: bool = False,
    ):
        """Initialize the watcher.

        Args:
            root: Directory to watch
            interval: Polling period in milliseconds (<= 0 means 500)
            wildcard_fallback: Dispatch to the "*" handler when no handler
                               matches the exact extension

        Raises:
            PathError: If root does not exist or is not a directory
        """
        path = os.path.normpath(os.path.abspath(os.path.expanduser(os.fspath(root))))
        if not os.path.isdir(path):
            raise PathError(path)

        self._root = path
        self._interval = interval if interval > 0 else DEFAULT_INTERVAL_MS
        self._wildcard_fallback = wildcard_fallback

        self._handlers: dict[str, FsEventHandler] = {}
        self._ignored: set[str] = set()

        self._lock = threading.Lock()
        self._stop_requested = threading.Event()
        self._started = False
        self._thread: threading.Thread | None = None

        logger.debug(f"FsWatcher created for {self._root} (interval: {self._interval}ms)")

    @classmethod
    def from_settings(cls, settings: "Settings") -> "FsWatcher":
        """Create a watcher from application settings.

        Args:
            settings: Loaded Settings instance

        Returns:
            FsWatcher with the configured skip list applied
        """
        watcher = cls(settings.root, settings.interval_ms)
        for directory in settings.skip_dirs:
            watcher.skip(directory)
        return watcher

    @property
    def root(self) -> str:
        """Absolute path of the watched directory."""
        return self._root

    @property
    def interval(self) -> int:
        """Effective polling period in milliseconds."""
        return self._interval

    @property
    def handlers(self) -> dict[str, FsEventHandler]:
        return dict(self._handlers)

    @property
    def ignored(self) -> frozenset[str]:
        return frozenset(self._ignored)

    def register_extension(self, extension: str, handler: FsEventHandler) -> None:
        """Register the handler for files with the given extension.

        Args:
            extension: Extension including the dot (".py"), "" for entries
                       without one, or EXT_ALL_FILES for the wildcard slot
            handler: Callback receiving the path and FileInfo of a changed
                     entry; returning True skips the rest of its directory
        """
        self._handlers[extension] = handler

    def skip(self, directory: str) -> None:
        """Exclude every directory with this base name from the walk."""
        if directory:
            self._ignored.add(directory)

    def is_started(self) -> bool:
        """Check if the polling thread is running."""
        with self._lock:
            return self._started

    def watch(self) -> None:
        """Start polling in a background thread.

        Does nothing if the watcher is already started.
        """
        with self._lock:
            if self._started:
                logger.warning(f"FsWatcher for {self._root} is already running")
                return

            self._stop_requested.clear()
            self._started = True
            self._thread = threading.Thread(
                target=self._run,
                args=(time.time(),),
                name=f"pollwatch-{os.path.basename(self._root) or self._root}",
                daemon=True,
            )
            self._thread.start()

        logger.info(f"FsWatcher started for {self._root}")

    def stop(self) -> None:
        """Request a graceful stop.

        The polling thread finishes or aborts its current walk and exits
        without starting another pass. Use ``join()`` to wait for it.
        """
        self._stop_requested.set()

    def join(self, timeout: float | None = None) -> bool:
        """Wait for the polling thread to exit.

        Args:
            timeout: Seconds to wait, or None to wait indefinitely

        Returns:
            True if no polling thread is alive anymore
        """
        with self._lock:
            thread = self._thread
        if thread is None:
            return True
        if thread is threading.current_thread():
            # Called from a handler; the thread cannot wait for itself
            return False
        thread.join(timeout)
        return not thread.is_alive()

    def poll_once(
        self,
        since: float,
        should_stop: Callable[[], bool] | None = None,
    ) -> PassResult:
        """Run a single pass over the tree on the calling thread.

        Args:
            since: Baseline timestamp (seconds since the epoch); entries
                   modified strictly after it are reported
            should_stop: Optional predicate aborting the walk early

        Returns:
            PassResult describing the pass

        Raises:
            WatcherRunningError: If the polling thread is running
        """
        if self.is_started():
            raise WatcherRunningError(f"FsWatcher for {self._root} is running; stop it first")
        return self._poll(since, should_stop)

    def _poll(self, since: float, should_stop: Callable[[], bool] | None) -> PassResult:
        result = PassResult()

        def visit(path: str, info: FileInfo) -> WalkAction:
            result.visited += 1

            if info.is_dir and info.name in self._ignored:
                result.pruned += 1
                return WalkAction.SKIP_DIR

            if info.mtime <= since:
                return WalkAction.CONTINUE

            result.changed += 1
            handler = self._lookup(path)
            if handler is None:
                return WalkAction.CONTINUE

            result.dispatched += 1
            if self._dispatch(handler, path, info):
                return WalkAction.SKIP_DIR
            return WalkAction.CONTINUE

        def on_error(path: str, error: OSError) -> None:
            logger.debug(f"Skipping {path}: {error}")
            result.errors.append(f"{path}: {error}")

        result.aborted = not walk(self._root, visit, on_error, should_stop)
        return result

    def _lookup(self, path: str) -> FsEventHandler | None:
        handler = self._handlers.get(file_extension(path))
        if handler is None and self._wildcard_fallback:
            handler = self._handlers.get(EXT_ALL_FILES)
        return handler

    def _dispatch(self, handler: FsEventHandler, path: str, info: FileInfo) -> bool:
        """Invoke a handler; a failing handler counts as "do not skip"."""
        try:
            return bool(handler(path, info))
        except Exception:
            logger.exception(f"Handler failed for {path}")
            return False

    def _run(self, since: float) -> None:
        """Main polling loop, starting from the given baseline."""
        try:
            while True:
                result = self._poll(since, self._stop_requested.is_set)
                logger.debug(f"Pass over {self._root} done: {result}")

                if self._stop_requested.is_set():
                    break

                since = time.time()
                if self._stop_requested.wait(self._interval / 1000.0):
                    break
        except Exception:
            logger.exception(f"Polling loop for {self._root} failed")
        finally:
            logger.info(f"FsWatcher stopped for {self._root}")
            with self._lock:
                self._started = False

    def __enter__(self) -> "FsWatcher":
        """Context manager entry."""
        self.watch()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        self.stop()
        self.join()
