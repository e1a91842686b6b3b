"""Locate, load and hot-reload the server's configuration file."""

from __future__ import annotations

import argparse
import json
import os
import threading
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

import yaml
from watchdog.events import (
    EVENT_TYPE_CREATED,
    EVENT_TYPE_MODIFIED,
    EVENT_TYPE_MOVED,
    FileSystemEvent,
    FileSystemEventHandler,
)
from watchdog.observers import Observer

CONFIG_ENV = "GVA_CONFIG"
CONFIG_FILE = "config.yaml"


class ConfigError(Exception):
    """The configuration file could not be read or parsed."""


def _parse(text: str, suffix: str) -> dict[str, Any]:
    suffix = suffix.lower()
    try:
        if suffix in (".yaml", ".yml"):
            data = yaml.safe_load(text)
        elif suffix == ".json":
            data = json.loads(text)
        else:
            raise ConfigError(f"unsupported config type: {suffix or '(none)'}")
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        raise ConfigError(f"fatal error config file: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError("fatal error config file: top level must be a mapping")
    return data


class _ConfigChangeHandler(FileSystemEventHandler):
    def __init__(self, store: ConfigStore) -> None:
        super().__init__()
        self._store = store

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.event_type not in (EVENT_TYPE_CREATED, EVENT_TYPE_MODIFIED, EVENT_TYPE_MOVED):
            return
        paths = {os.fsdecode(event.src_path), os.fsdecode(getattr(event, "dest_path", "") or "")}
        if self._store.path in paths:
            self._store._on_change()


class ConfigStore:
    """A configuration file's parsed contents, kept current while watched."""

    def __init__(self, path: str | os.PathLike) -> None:
        self.path = os.path.abspath(os.fsdecode(path))
        self.data: dict[str, Any] = {}
        self._lock = threading.Lock()
        self._observer: Observer | None = None

    def reload(self) -> dict[str, Any]:
        """Read and parse the file, replacing :attr:`data`; raise ConfigError on failure."""
        try:
            text = Path(self.path).read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigError(f"fatal error config file: {exc}") from exc
        data = _parse(text, Path(self.path).suffix)
        with self._lock:
            self.data = data
        return data

    def watch(self) -> None:
        """Reload automatically whenever the file changes."""
        if self._observer is not None:
            return
        observer = Observer()
        observer.schedule(_ConfigChangeHandler(self), os.path.dirname(self.path), recursive=False)
        observer.daemon = True
        observer.start()
        self._observer = observer

    def stop(self) -> None:
        """Stop watching the file."""
        observer, self._observer = self._observer, None
        if observer is not None:
            observer.stop()
            observer.join()

    def _on_change(self) -> None:
        print("config file changed:", self.path)
        try:
            self.reload()
        except ConfigError as exc:
            print(exc)

    def __enter__(self) -> ConfigStore:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()


def resolve_config_path(
    path: str | os.PathLike | None = None,
    argv: Sequence[str] | None = None,
    environ: Mapping[str, str] | None = None,
) -> str:
    """Pick the config path: explicit argument, then ``-c``, then environment, then default."""
    if path is not None:
        resolved = os.fsdecode(path)
        print(f"using the config path passed in: {resolved}")
        return resolved

    parser = argparse.ArgumentParser(add_help=False)
    parser.add_argument("-c", dest="config", default="", help="choose config file.")
    args, _ = parser.parse_known_args(argv)
    if args.config:
        print(f"using the config path from the -c flag: {args.config}")
        return args.config

    env = os.environ if environ is None else environ
    from_env = env.get(CONFIG_ENV, "")
    if from_env:
        print(f"using the {CONFIG_ENV} environment variable, config path: {from_env}")
        return from_env
    print(f"using the default config path: {CONFIG_FILE}")
    return CONFIG_FILE


def load_config(
    path: str | os.PathLike | None = None,
    argv: Sequence[str] | None = None,
    environ: Mapping[str, str] | None = None,
) -> ConfigStore:
    """Resolve, read and start watching the configuration file."""
    store = ConfigStore(resolve_config_path(path, argv, environ))
    store.reload()
    store.watch()
    return store