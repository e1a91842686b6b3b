"""Run a start function, restarting it whenever a new task is requested."""

from __future__ import annotations

import shutil
import subprocess
import sys
import threading
from collections.abc import Callable

StartFunction = Callable[[threading.Event], object]


def _is_windows(platform: str | None) -> bool:
    return (platform if platform is not None else sys.platform).startswith("win")


def build_command(platform: str | None = None) -> list[str]:
    """Command that compiles the server binary for ``platform``."""
    output = "server.exe" if _is_windows(platform) else "server"
    return ["go", "build", "-o", output, "main.go"]


def run_command(platform: str | None = None) -> list[str]:
    """Command that starts the compiled server binary for ``platform``."""
    return ["server.exe"] if _is_windows(platform) else ["./server"]


def _echo(process: subprocess.Popen) -> None:
    captured: list[str] = []
    assert process.stdout is not None
    for line in process.stdout:
        sys.stdout.write(line)
        captured.append(line)
    process.wait()
    print("".join(captured))


class Task:
    """Keeps one run of ``start`` alive and restarts it on request.

    ``start`` receives a :class:`threading.Event`; it must return once the
    event is set.  Requests made while one is already pending are dropped.
    """

    def __init__(self, start: StartFunction | None = None) -> None:
        self._start = start if start is not None else self.default_start
        self._cond = threading.Condition()
        self._pending = False
        self._closed = False
        self.last_error: BaseException | None = None

    def add_task(self) -> None:
        """Request a restart; a request already pending absorbs this one."""
        with self._cond:
            if self._closed:
                raise RuntimeError("task is closed")
            self._pending = True
            self._cond.notify_all()

    def close(self) -> None:
        """Make :meth:`run_task` stop the current run and return."""
        with self._cond:
            self._closed = True
            self._cond.notify_all()

    def run_task(self) -> None:
        """Start the first run, then restart on every request until closed."""
        stop, worker = self._launch()
        try:
            while self._next_request():
                stop.set()
                worker.join()
                stop, worker = self._launch()
        finally:
            stop.set()
            worker.join()

    def default_start(self, stop_event: threading.Event) -> None:
        """Build the server with the Go toolchain and run it until stopped."""
        if shutil.which("go") is None:
            raise FileNotFoundError("go toolchain not found in PATH")
        subprocess.run(build_command(), check=True)
        print("build finished")

        process = subprocess.Popen(run_command(), stdout=subprocess.PIPE, text=True)
        print("pid", process.pid)
        echo = threading.Thread(target=_echo, args=(process,), daemon=True)
        echo.start()

        stop_event.wait()
        print("pid:", process.pid, "->Kill")
        process.kill()
        process.wait()
        echo.join()

    def _launch(self) -> tuple[threading.Event, threading.Thread]:
        stop = threading.Event()
        worker = threading.Thread(target=self._execute, args=(stop,), daemon=True)
        worker.start()
        return stop, worker

    def _execute(self, stop: threading.Event) -> None:
        try:
            self._start(stop)
        except Exception as exc:  # a failed run must not end the loop
            self.last_error = exc
            print("task failed:", exc, file=sys.stderr)

    def _next_request(self) -> bool:
        with self._cond:
            self._cond.wait_for(lambda: self._pending or self._closed)
            if self._closed:
                return False
            self._pending = False
            return True