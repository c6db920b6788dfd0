"""
File watcher - watchdog based filesystem monitoring.

watchdog delivers events on its observer thread. The handler translates them
into WatchEvents and hands them to the asyncio loop thread-safely.
"""

import asyncio
import fnmatch
import os
from collections.abc import Callable
from pathlib import Path

from watchdog.events import (
    DirCreatedEvent,
    DirDeletedEvent,
    DirModifiedEvent,
    DirMovedEvent,
    FileSystemEvent,
    FileSystemEventHandler,
)
from watchdog.observers import Observer

from app_compiler.contexts.build_pipeline.domain.watch import WatchEvent, WatchEventKind
from app_compiler.infra.observability import get_logger

logger = get_logger(__name__)


def translate_event(event: FileSystemEvent) -> list[WatchEvent]:
    """
    Map one watchdog event onto watch events.

    Moves become a removal at the source plus an addition at the
    destination. A moved directory also yields an ``add`` for every file now
    under it, since no per-file events are reported for its contents.
    """
    if isinstance(event, DirModifiedEvent):
        return []

    if isinstance(event, DirCreatedEvent):
        return [WatchEvent(WatchEventKind.ADD_DIR, Path(event.src_path))]

    if isinstance(event, DirDeletedEvent):
        return [WatchEvent(WatchEventKind.UNLINK_DIR, Path(event.src_path))]

    if isinstance(event, DirMovedEvent):
        dest = Path(event.dest_path)
        events = [
            WatchEvent(WatchEventKind.UNLINK_DIR, Path(event.src_path)),
            WatchEvent(WatchEventKind.ADD_DIR, dest),
        ]
        for current, dirs, files in os.walk(dest):
            dirs.sort()
            for name in sorted(files):
                events.append(WatchEvent(WatchEventKind.ADD, Path(current) / name))
        return events

    if event.event_type == "created":
        return [WatchEvent(WatchEventKind.ADD, Path(event.src_path))]
    if event.event_type == "modified":
        return [WatchEvent(WatchEventKind.CHANGE, Path(event.src_path))]
    if event.event_type == "deleted":
        return [WatchEvent(WatchEventKind.UNLINK, Path(event.src_path))]
    if event.event_type == "moved":
        return [
            WatchEvent(WatchEventKind.UNLINK, Path(event.src_path)),
            WatchEvent(WatchEventKind.ADD, Path(event.dest_path)),
        ]
    return []


class BuildEventHandler(FileSystemEventHandler):
    """
    Watchdog event handler.

    Filters excluded paths and forwards the remaining events to ``on_event``
    on the asyncio loop.
    """

    def __init__(
        self,
        on_event: Callable[[WatchEvent], object],
        loop: asyncio.AbstractEventLoop,
        exclude_patterns: tuple[str, ...] = (),
    ):
        super().__init__()
        self.on_event = on_event
        self.exclude_patterns = exclude_patterns
        self._loop = loop

    def _should_ignore(self, path: Path) -> bool:
        for pattern in self.exclude_patterns:
            if fnmatch.fnmatch(path.name, pattern):
                return True
            for part in path.parts:
                if fnmatch.fnmatch(part, pattern):
                    return True
        return False

    def _forward(self, event: FileSystemEvent) -> None:
        for watch_event in translate_event(event):
            if self._should_ignore(watch_event.path):
                continue
            # watchdog runs on its own thread
            self._loop.call_soon_threadsafe(self.on_event, watch_event)

    def on_created(self, event: FileSystemEvent):
        self._forward(event)

    def on_modified(self, event: FileSystemEvent):
        self._forward(event)

    def on_deleted(self, event: FileSystemEvent):
        self._forward(event)

    def on_moved(self, event: FileSystemEvent):
        self._forward(event)


class FileWatcher:
    """
    Watchdog based watcher over a set of roots.

    Usage:
        watcher = FileWatcher(roots, on_event=dispatcher.dispatch)
        await watcher.start()
        # ... keep the loop running ...
        await watcher.stop()
    """

    def __init__(
        self,
        roots: list[Path],
        on_event: Callable[[WatchEvent], object],
        exclude_patterns: tuple[str, ...] = (),
    ):
        self.roots = roots
        self.on_event = on_event
        self.exclude_patterns = exclude_patterns
        self._observer: Observer | None = None
        self._is_running = False

    @property
    def is_running(self) -> bool:
        return self._is_running

    async def start(self) -> list[Path]:
        """Start watching every existing root. Returns the roots actually watched."""
        if self._is_running:
            logger.warning("file_watcher_already_running")
            return []

        handler = BuildEventHandler(
            on_event=self.on_event,
            loop=asyncio.get_running_loop(),
            exclude_patterns=self.exclude_patterns,
        )

        observer = Observer()
        watched = []
        for root in self.roots:
            if not root.is_dir():
                logger.warning("watch_root_missing", root=str(root))
                continue
            observer.schedule(handler, str(root), recursive=True)
            watched.append(root)
        observer.start()

        self._observer = observer
        self._is_running = True
        logger.info("file_watcher_started", roots=[str(root) for root in watched])
        return watched

    async def stop(self) -> None:
        if not self._is_running:
            return

        self._is_running = False
        if self._observer:
            self._observer.stop()
            await asyncio.to_thread(self._observer.join, 5.0)
            self._observer = None

        logger.info("file_watcher_stopped")
