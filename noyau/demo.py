"""Demonstration programs: priority scheduling and mutex contention."""

from __future__ import annotations

import argparse
import io
import sys
from dataclasses import dataclass
from typing import Any, Iterator, Sequence

from .kernel import Kernel, KernelExit
from .mutex import MutexTable
from .serialio import SerialConsole
from .terminal import clear_screen, cursor_position

__all__ = ["build_priority_demo", "build_mutex_demo", "main"]

# (priority, delay between work bursts) of each generator task.
_PRIORITY_TASKS = (
    (0, 100),
    (1, 50),
    (2, 60),
    (2, 40),
    (3, 15),
    (3, 15),
    (4, 10),
    (4, 10),
    (5, 5),
    (6, 2),
    (7, 1),
)
_START_DELAY = 20
_WORK_PER_STEP = 100_000_000


@dataclass(frozen=True)
class _TaskParams:
    start_delay: int
    work_to_do: int

    @property
    def steps(self) -> int:
        return max(1, self.work_to_do // _WORK_PER_STEP)


# (uses the mutex, priority, parameters) of each contention task.
_MUTEX_TASKS = (
    (True, 2, _TaskParams(24, 200_000_000)),
    (False, 4, _TaskParams(28, 400_000_000)),
    (True, 6, _TaskParams(20, 800_000_000)),
)


def _announce(kernel: Kernel) -> None:
    kernel.console.printf("%s", cursor_position(3, 1))
    kernel.console.write_line("------> EXEC tache de fond")


def _wait_for_key(kernel: Kernel) -> Iterator[None]:
    """Poll the console until a non-NUL character arrives."""
    while True:
        try:
            char = kernel.console.read_char()
        except EOFError:
            char = "\0"
        if char != "\0":
            return
        yield


def _generator_task(kernel: Kernel, wait_time: int) -> Iterator[None]:
    # Give the background task time to start every other task.
    kernel.delay(_START_DELAY)
    yield
    while True:
        yield
        kernel.delay(wait_time)
        yield


def build_priority_demo(kernel: Kernel) -> None:
    """Start a background task that spawns tasks at every priority level."""

    def background(k: Kernel, arg: Any) -> Iterator[None]:
        _announce(k)
        for priority, wait_time in _PRIORITY_TASKS:
            k.activate(k.create(_generator_task, priority, wait_time))
        yield from _wait_for_key(k)

    kernel.start(background)


def build_mutex_demo(kernel: Kernel, mutexes: MutexTable) -> int:
    """Start tasks contending for one mutex; return the mutex number."""
    mutex = mutexes.create()

    def mutex_task(k: Kernel, params: _TaskParams) -> Iterator[None]:
        while True:
            k.delay(params.start_delay)
            yield
            mutexes.acquire(mutex)
            yield
            for _ in range(params.steps):
                yield
            mutexes.release(mutex)
            yield

    def other_task(k: Kernel, params: _TaskParams) -> Iterator[None]:
        while True:
            k.delay(params.start_delay)
            yield
            for _ in range(params.steps):
                yield

    def background(k: Kernel, arg: Any) -> Iterator[None]:
        _announce(k)
        for uses_mutex, priority, params in _MUTEX_TASKS:
            task = mutex_task if uses_mutex else other_task
            k.activate(k.create(task, priority, params))
        yield from _wait_for_key(k)
        k.exit()

    kernel.start(background)
    return mutex


def main(argv: Sequence[str] | None = None) -> int:
    """Run one of the demonstrations on the terminal."""
    parser = argparse.ArgumentParser(prog="noyau", description="Run a kernel demonstration.")
    parser.add_argument("demo", nargs="?", choices=("prio", "mutex"), default="prio")
    parser.add_argument("--ticks", type=int, default=1000, help="timer ticks to simulate")
    parser.add_argument("--keys", default="", help="characters typed on the console")
    args = parser.parse_args(argv)

    console = SerialConsole(sys.stdout, io.StringIO(args.keys))
    kernel = Kernel(console)
    console.printf("%s", clear_screen(1))
    console.write_line("Test noyau")
    console.write_line("Noyau preemptif")

    if args.demo == "mutex":
        build_mutex_demo(kernel, MutexTable(kernel))
    else:
        build_priority_demo(kernel)

    try:
        kernel.run(args.ticks)
    except KernelExit:
        pass
    return 0