# devreload

devreload is a small development helper. It watches a source tree, and when
a relevant file changes it rebuilds and restarts a server. It also has a few
helpers that such a server tends to need:

- a YAML/JSON configuration loader that rereads the file when it changes,
- a logger factory,
- two number parsers that return a fallback value instead of raising.

## Install

```
pip install devreload
```

## Watching a project

Run the watcher from the directory that holds `main.go`:

```
devreload .
```

The path argument is optional and defaults to `.`. It can name a directory or
a single file.

For a directory, every `.go` and `.yaml` file beneath it is watched. When
such a file is written, removed or renamed, the running server is stopped and
a new run is started. A new run means:

1. `go build -o server main.go` (`server.exe` on Windows), then
2. `./server` (`server.exe` on Windows).

The server's standard output is echoed to the console. If a change arrives
while a restart is already pending, it is folded into that restart rather
than queued. The default start function needs the `go` toolchain on `PATH`.
Press Ctrl+C to stop.

You can do the same from Python:

```python
import threading

from devreload.monitor import Watch
from devreload.task import Task

task = Task()
threading.Thread(target=task.run_task, daemon=True).start()

watch = Watch()
watch.watch(".", task)  # blocks until watch.close() is called or the watcher dies
```

### Task

`Task` accepts its own start function. It is called with a
`threading.Event`, and it must return once that event is set:

```python
def start(stop_event):
    ...  # launch something, wait for stop_event, clean up

task = Task(start)
```

The `Task` methods:

- `run_task()` starts the first run. It then restarts the run on every request until `close()` is called.
- `add_task()` requests a restart. It raises `RuntimeError` once the task is closed.
- `close()` stops the current run and makes `run_task()` return.
- An exception raised by a run is kept in `last_error`, and the loop goes on.

These helpers are also available:

- `build_command(platform)` gives the build command line used by `Task.default_start`. `platform` is a name such as `"win32"` or `"linux"`, and any name starting with `win` counts as Windows. It defaults to the current platform.
- `run_command(platform)` gives the run command line, with the same platform rule.

### Watch

- `Watch.watch(path, task)` calls `task.add_task()` on relevant changes. It raises `RuntimeError` if the underlying observer stops unexpectedly.
- `Watch.started` is an event that is set once watching has begun.
- `Watch.close()` makes `watch()` return.
- `is_watchable(name)` tells whether a file name ends in `.go` or `.yaml`.

## Configuration

```python
from devreload.config import load_config

store = load_config()
print(store.data)
store.stop()
```

`load_config(path, argv, environ)` picks the configuration file in this order:

1. an explicit `path`,
2. a `-c` option in `argv` (by default, the process's command line),
3. the `GVA_CONFIG` environment variable,
4. `config.yaml`.

It then reads the file and starts watching it. `resolve_config_path(path,
argv, environ)` makes the same choice without reading anything.

`ConfigStore` holds the parsed contents of one file in `data`, as a plain
dict:

- `reload()` rereads the file. It accepts `.yaml`, `.yml` and `.json`. On a missing file, an unsupported type, bad syntax or a top level that is not a mapping, it raises `ConfigError`.
- `watch()` reloads automatically whenever the file changes on disk. A failed automatic reload is printed, and the previous `data` is kept.
- `stop()` ends the watching. A `ConfigStore` can also be used as a context manager, which stops watching on exit.

## Logging

```python
from devreload.logger import LogConfig, build_logger

logger = build_logger(LogConfig(level="debug", director="log"))
logger.info("started")
```

`build_logger(config)` creates the `director` directory if needed. It writes
to `director/filename`, which rotates at midnight, and also to standard
output when `log_in_console` is true.

`LogConfig` fields:

- `level`: one of `debug`, `info`, `warn`, `error`, `dpanic`, `panic`, `fatal`. Anything else means `info`.
- `format`: `json`, or anything else for tab-separated console lines.
- `prefix`: a string put before every timestamp.
- `show_line`: add the caller's `path:line`.
- `encode_level`: one of `LowercaseLevelEncoder`, `LowercaseColorLevelEncoder`, `CapitalLevelEncoder`, `CapitalColorLevelEncoder`.
- `stacktrace_key`: the key under which stack traces appear.
- `log_in_console`: also write to standard output.
- `filename`: the log file's name inside `director`.

When the level is `debug` or `error`, records at or above that level carry a
stack trace.

The pieces the logger is built from are public:

- `parse_level(name)` returns a `Level`.
- `level_encoder(name)` returns the function that renders a level.
- `format_time(moment, prefix)` renders `<prefix>YYYY/MM/DD - HH:MM:SS.mmm`.

## Numbers

```python
from devreload.numbers import parse_float_2f, parse_string_to_int64

parse_float_2f(3.14159)          # 3.14
parse_string_to_int64("42")      # 42
parse_string_to_int64("oops")    # 0
```

`parse_string_to_int64` accepts only base-10 integers within the signed
64-bit range. For anything else it returns 0.

## What it does not do

- The configuration loader returns the file's raw contents as a dict. It does not map them onto typed settings.
- The logger is not configured from the configuration file automatically. Build a `LogConfig` yourself.
- The `devreload` command only knows how to build and run a Go project laid out with `main.go` in the working directory. For anything else, pass your own start function to `Task`.