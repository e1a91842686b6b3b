"""Watch source files and request a rebuild when they change."""

from __future__ import annotations

import argparse
import os
import stat
import threading

from watchdog.events import (
    EVENT_TYPE_CREATED,
    EVENT_TYPE_DELETED,
    EVENT_TYPE_MODIFIED,
    EVENT_TYPE_MOVED,
    FileSystemEvent,
    FileSystemEventHandler,
)
from watchdog.observers import Observer

from devreload.task import Task

WATCHED_EXTENSIONS = frozenset({".go", ".yaml"})


def _extension(name: str) -> str:
    _, dot, ext = os.path.basename(name).rpartition(".")
    return "." + ext if dot else ""


def is_watchable(name: str | os.PathLike) -> bool:
    """Whether a change to ``name`` should trigger a rebuild."""
    return _extension(os.fsdecode(name)) in WATCHED_EXTENSIONS


class _ChangeHandler(FileSystemEventHandler):
    def __init__(self, task, only: str | None = None) -> None:
        super().__init__()
        self._task = task
        self._only = only

    def on_any_event(self, event: FileSystemEvent) -> None:
        path = os.fsdecode(event.src_path)
        if self._only is not None and path != self._only:
            return
        if event.event_type == EVENT_TYPE_CREATED:
            print("created:", path)
        elif event.event_type == EVENT_TYPE_MODIFIED:
            if not event.is_directory:
                print("modified:", path)
                self._request(path)
        elif event.event_type in (EVENT_TYPE_DELETED, EVENT_TYPE_MOVED):
            print("removed or renamed:", path)
            self._request(path)

    def _request(self, path: str) -> None:
        if is_watchable(path):
            print("add task")
            self._task.add_task()


class Watch:
    """Watches a file or a directory tree for changes to source files."""

    def __init__(self) -> None:
        self._observer = Observer()
        self._stopped = threading.Event()
        self.started = threading.Event()

    def watch(self, path: str | os.PathLike, task) -> None:
        """Block, calling ``task.add_task()`` on relevant changes, until closed."""
        path = os.path.abspath(os.fsdecode(path))
        info = os.stat(path)
        if stat.S_ISDIR(info.st_mode):
            self._observer.schedule(_ChangeHandler(task), path, recursive=True)
        else:
            self._observer.schedule(
                _ChangeHandler(task, only=path), os.path.dirname(path), recursive=False
            )
        self._observer.start()
        self.started.set()
        try:
            while not self._stopped.wait(0.2):
                if not self._observer.is_alive():
                    raise RuntimeError("file watcher stopped unexpectedly")
        finally:
            self._observer.stop()
            self._observer.join()

    def close(self) -> None:
        """Make :meth:`watch` return."""
        self._stopped.set()


def main(argv: list[str] | None = None) -> int:
    """Rebuild and restart the server whenever its sources change."""
    parser = argparse.ArgumentParser(
        prog="devreload", description="Rebuild and restart the server on source changes."
    )
    parser.add_argument("path", nargs="?", default=".", help="file or directory to watch")
    args = parser.parse_args(argv)
    if not os.path.exists(args.path):
        parser.error(f"no such file or directory: {args.path}")

    task = Task()
    runner = threading.Thread(target=task.run_task, daemon=True)
    runner.start()
    watcher = Watch()
    try:
        watcher.watch(args.path, task)
    except KeyboardInterrupt:
        pass
    finally:
        watcher.close()
        task.close()
        runner.join(timeout=10)
    return 0