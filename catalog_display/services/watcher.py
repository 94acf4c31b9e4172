"""Image folder watcher.

A watchdog observer reports changes in the public images folder; every change
is handed to the asyncio loop, which calls the broadcast callback. With a
debounce window a burst of events (copying a batch of photos) becomes a single
trailing notification; with debounce_ms=0 each raw event is forwarded.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any, Awaitable, Callable, Optional, Set, Union

from watchdog.events import (
    EVENT_TYPE_CREATED,
    EVENT_TYPE_DELETED,
    EVENT_TYPE_MODIFIED,
    EVENT_TYPE_MOVED,
    FileSystemEvent,
    FileSystemEventHandler,
)
from watchdog.observers import Observer

logger = logging.getLogger(__name__)

ChangeCallback = Callable[[], Awaitable[Any]]

# opened/closed events come from plain reads (StaticFiles serving an image)
CHANGE_EVENT_TYPES = frozenset({EVENT_TYPE_CREATED, EVENT_TYPE_DELETED, EVENT_TYPE_MODIFIED, EVENT_TYPE_MOVED})


class _FolderChangeHandler(FileSystemEventHandler):
    """Runs on the observer thread; only forwards, never touches shared state."""

    def __init__(self, notify: Callable[[], None]) -> None:
        super().__init__()
        self._notify = notify

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.is_directory or event.event_type not in CHANGE_EVENT_TYPES:
            return
        logger.info("[watch] %s: %s", event.event_type, event.src_path)
        self._notify()


class ImageFolderWatcher:
    def __init__(
        self,
        directory: Union[str, Path],
        on_change: ChangeCallback,
        debounce_ms: int = 250,
        observer_factory: Callable[[], Any] = Observer,
    ) -> None:
        self.directory = Path(directory)
        self.on_change = on_change
        self.debounce_ms = debounce_ms
        self._observer_factory = observer_factory
        self._observer = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._pending: Optional[asyncio.TimerHandle] = None
        self._tasks: Set[asyncio.Task] = set()
        self.handler = _FolderChangeHandler(self._notify_threadsafe)

    @property
    def running(self) -> bool:
        return self._observer is not None

    def start(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> bool:
        """Start watching. Must be called from the loop that should run the callback
        unless `loop` is given. Returns False when the folder does not exist."""
        if self._observer is not None:
            return True
        if not self.directory.is_dir():
            logger.warning("WARNING: %s does not exist; image changes will not be pushed", self.directory)
            return False

        self._loop = loop or asyncio.get_running_loop()
        observer = self._observer_factory()
        observer.schedule(self.handler, str(self.directory), recursive=False)
        observer.start()
        self._observer = observer
        logger.info("[watch] watching %s (debounce=%dms)", self.directory, self.debounce_ms)
        return True

    def stop(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None
        observer, self._observer = self._observer, None
        if observer is not None:
            observer.stop()
            observer.join(timeout=5)
            logger.info("[watch] stopped watching %s", self.directory)

    def _notify_threadsafe(self) -> None:
        loop = self._loop
        if loop is None or loop.is_closed():
            return
        try:
            loop.call_soon_threadsafe(self.schedule_change)
        except RuntimeError:
            # loop closed between the check and the call (shutdown)
            logger.debug("[watch] event dropped, loop is closed")

    def schedule_change(self) -> None:
        """Record one raw change. Must run on the event loop thread."""
        loop = self._loop or asyncio.get_running_loop()
        self._loop = loop
        if self.debounce_ms <= 0:
            self._dispatch()
            return
        if self._pending is not None:
            self._pending.cancel()
        self._pending = loop.call_later(self.debounce_ms / 1000.0, self._flush)

    def _flush(self) -> None:
        self._pending = None
        self._dispatch()

    def _dispatch(self) -> None:
        task = self._loop.create_task(self._run_callback())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _run_callback(self) -> None:
        try:
            await self.on_change()
        except Exception as e:
            logger.error("[watch] change callback failed: %s", e, exc_info=True)
