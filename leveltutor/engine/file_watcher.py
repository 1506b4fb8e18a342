#!/usr/bin/env python3
"""
File watcher for the edit target.
Delivers change notifications for a single file through one ordered queue.
"""

import os
import queue
from dataclasses import dataclass
from typing import Optional

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from ..errors import WatchError, WatchSetupError


@dataclass
class Notification:
    """One item from the watch queue: a file event or a handler error"""
    event: Optional[FileSystemEvent] = None
    error: Optional[Exception] = None


class TargetFileHandler(FileSystemEventHandler):
    """Forwards events that touch the watched file into a queue"""

    def __init__(self, filepath: str, notifications: queue.Queue):
        super().__init__()
        self.filepath = os.path.abspath(filepath)
        self.notifications = notifications

    def dispatch(self, event):
        # Runs on the observer thread; failures become error notifications
        try:
            super().dispatch(event)
        except Exception as e:
            self.notifications.put(Notification(error=e))

    def on_modified(self, event):
        """Called when a file in the watched directory is modified"""
        if not event.is_directory and self._is_target(event.src_path):
            self.notifications.put(Notification(event=event))

    def on_created(self, event):
        """Editors that save by writing a new file show up as creations"""
        if not event.is_directory and self._is_target(event.src_path):
            self.notifications.put(Notification(event=event))

    def on_moved(self, event):
        """Atomic saves rename a temp file over the target"""
        if not event.is_directory and self._is_target(event.dest_path):
            self.notifications.put(Notification(event=event))

    def _is_target(self, path) -> bool:
        if not path:
            return False
        return os.path.abspath(os.fsdecode(path)) == self.filepath


class WatchSubscription:
    """
    An active watch on one file.

    The observer watches the file's directory (non-recursively) and the
    handler filters down to the file itself. Use as a context manager so
    the observer is stopped however the session ends.
    """

    POLL_SECONDS = 0.5

    def __init__(self, filepath: str, observer_factory=Observer):
        self.filepath = os.path.abspath(filepath)
        self.observer_factory = observer_factory
        self.notifications: queue.Queue = queue.Queue()
        self.handler = TargetFileHandler(self.filepath, self.notifications)
        self.observer = None

    def start(self):
        """Start watching the file"""
        watch_dir = os.path.dirname(self.filepath)
        self.observer = self.observer_factory()
        try:
            self.observer.schedule(self.handler, path=watch_dir, recursive=False)
            self.observer.start()
        except OSError as e:
            raise WatchSetupError(f"Failed to watch {self.filepath}: {e}") from e

    def stop(self):
        """Stop watching"""
        if self.observer and self.observer.is_alive():
            self.observer.stop()
            self.observer.join()

    def receive(self) -> Notification:
        """
        Block until the next notification arrives.

        Raises:
            WatchError: If the observer has stopped, so no more
                notifications can ever arrive
        """
        if self.observer is None:
            raise WatchError("File watcher was never started")

        while True:
            try:
                return self.notifications.get(timeout=self.POLL_SECONDS)
            except queue.Empty:
                if not self.observer.is_alive():
                    raise WatchError(f"File watcher for {self.filepath} stopped unexpectedly")

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.stop()
        return False


def watch_file(filepath: str) -> WatchSubscription:
    """Create a subscription for filepath; enter it to start watching"""
    return WatchSubscription(filepath)
