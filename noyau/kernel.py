"""Preemptive priority kernel, simulated with generator-based tasks.

A task is a callable ``task(kernel, arg)``. It may return an iterable
(typically it is a generator function): each item it yields is one step of
work, and the kernel may switch to another task between two steps. A task
that returns ``None`` runs in a single step. When a task ends it leaves the
ready queue and may be activated again.

Kernel services called by a task (``activate``, ``sleep``, ``delay``,
``wake``...) request a reschedule that takes effect once the task yields.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Iterator

from .chronogram import Chronogram
from .ready_queue import MAX_PRIORITY, MAX_TASKS, TASKS_PER_PRIORITY, ReadyQueue
from .serialio import SerialConsole

__all__ = [
    "TaskState",
    "TaskControlBlock",
    "KernelExit",
    "Kernel",
    "BOOT_TASK",
    "TaskFunction",
]

TaskFunction = Callable[["Kernel", Any], "Iterable[Any] | None"]

# Identity of the first task started at the lowest priority.
BOOT_TASK = (MAX_PRIORITY - 1) << 3


class TaskState(enum.IntEnum):
    """Life-cycle states of a task."""

    NOT_CREATED = 0
    CREATED = 0x8000
    READY = 0x9000
    SUSPENDED = 0xA000
    RUNNING = 0xC000


@dataclass
class TaskControlBlock:
    """Everything the kernel knows about one task."""

    status: TaskState = TaskState.NOT_CREATED
    task: TaskFunction | None = None
    arg: Any = None
    delay: int = 0
    priority: int = 0
    base_priority: int = 0
    runner: Iterator[Any] | None = None


class KernelExit(Exception):
    """Raised when the kernel stops; carries the per-task activation counts."""

    def __init__(self, activations: list[int]) -> None:
        super().__init__("kernel stopped")
        self.activations = activations


class Kernel:
    """Task table, ready queue and scheduler of the kernel."""

    def __init__(self, console: SerialConsole | None = None) -> None:
        self.console = console if console is not None else SerialConsole()
        self.chronogram = Chronogram()
        self.activations = [0] * MAX_TASKS
        self._next_slot = [-1] * MAX_PRIORITY
        self._switch_pending = False
        self._reset()

    def _reset(self) -> None:
        self._tcbs = [TaskControlBlock() for _ in range(MAX_TASKS)]
        self.current = BOOT_TASK
        self.ready = ReadyQueue()

    # -- life cycle ---------------------------------------------------------

    def start(self, task: TaskFunction, arg: Any = None) -> None:
        """Reset the task table and activate ``task`` at the lowest priority."""
        self._reset()
        self.activate(self.create(task, MAX_PRIORITY - 1, arg))

    def exit(self) -> None:
        """Print the activation counts and stop the kernel."""
        self.console.printf("Sortie du noyau\n")
        for task_id, count in enumerate(self.activations):
            self.console.printf("\nActivations tache %d : %d", task_id, count)
        raise KernelExit(list(self.activations))

    def create(self, task: TaskFunction, priority: int, arg: Any = None) -> int:
        """Create a task at ``priority`` and return its identity."""
        if not 0 <= priority < MAX_PRIORITY:
            raise ValueError(f"priority {priority} out of range 0..{MAX_PRIORITY - 1}")
        self._next_slot[priority] += 1
        slot = self._next_slot[priority]
        if slot >= TASKS_PER_PRIORITY:
            self.console.printf("Plus de tâches disponibles pour la priorité %d\n", priority)
            self.exit()
        task_id = slot | priority << 3

        tcb = self._tcbs[task_id]
        if tcb.status is not TaskState.NOT_CREATED:
            self.exit()

        tcb.task = task
        tcb.arg = arg
        tcb.delay = 0
        tcb.runner = None
        tcb.status = TaskState.CREATED
        tcb.base_priority = priority
        tcb.priority = priority
        return task_id

    def activate(self, task_id: int) -> None:
        """Make a created task eligible to run."""
        tcb = self._tcbs[task_id]
        if tcb.status is TaskState.NOT_CREATED:
            self.exit()
        if tcb.status is TaskState.CREATED:
            tcb.runner = None
            tcb.status = TaskState.READY
            self.ready.add(task_id)
            self.schedule()

    def finish_task(self) -> None:
        """End the current task; it goes back to the created state."""
        tcb = self._tcbs[self.current]
        tcb.status = TaskState.CREATED
        tcb.runner = None
        self.ready.remove(self.current)
        self.schedule()

    # -- scheduling ---------------------------------------------------------

    def schedule(self) -> None:
        """Request a task switch."""
        self._switch_pending = True

    def sleep(self) -> None:
        """Suspend the current task."""
        self._tcbs[self.current].status = TaskState.SUSPENDED
        self.ready.remove(self.current)
        self.schedule()

    def wake(self, task_id: int) -> None:
        """Make a suspended task eligible again; wake-ups are not remembered."""
        tcb = self._tcbs[task_id]
        if tcb.status is TaskState.NOT_CREATED:
            self.exit()
        if tcb.status is TaskState.SUSPENDED:
            tcb.status = TaskState.RUNNING
            self.ready.add(task_id)
        self.schedule()

    def delay(self, nticks: int) -> None:
        """Suspend the current task for ``nticks`` timer ticks."""
        if nticks != 0:
            self._tcbs[self.current].delay = nticks
            self.sleep()

    def delay_process(self) -> None:
        """Count down the delays of suspended tasks and wake those that expire."""
        for task_id, tcb in enumerate(self._tcbs):
            if tcb.status is TaskState.SUSPENDED and tcb.delay != 0:
                tcb.delay -= 1
                if tcb.delay == 0:
                    tcb.status = TaskState.RUNNING
                    self.ready.add(task_id)

    def task_switch(self, timer_event: bool) -> int:
        """Elect the next task to run and return its identity.

        On a timer event the pending delays are processed first.
        """
        if timer_event:
            self.delay_process()
            sep = "|"
        else:
            sep = " "

        elected = self.ready.next()
        self.console.printf("%s", self.chronogram.draw_tick(elected, sep))
        if elected is None:
            self.console.printf("Plus rien à ordonnancer.\n")
            self.exit()

        self.current = elected
        self.activations[elected] += 1
        tcb = self._tcbs[elected]
        if tcb.status is TaskState.READY:
            tcb.status = TaskState.RUNNING
            tcb.runner = None
        return elected

    def tcb(self, task_id: int) -> TaskControlBlock:
        """Return the control block of ``task_id``."""
        return self._tcbs[task_id]

    # -- execution ----------------------------------------------------------

    def _step(self) -> None:
        tcb = self._tcbs[self.current]
        if tcb.status is not TaskState.RUNNING or tcb.task is None:
            return
        if tcb.runner is None:
            result = tcb.task(self, tcb.arg)
            if result is None:
                self.finish_task()
                return
            tcb.runner = iter(result)
        try:
            next(tcb.runner)
        except StopIteration:
            self.finish_task()

    def run(self, ticks: int) -> None:
        """Run the system for ``ticks`` timer periods.

        In each period the current task runs one step; voluntary switches it
        requests are served at once (a bounded number of times), then the
        timer preempts it.
        """
        for _ in range(ticks):
            for _ in range(MAX_TASKS):
                if self._switch_pending:
                    self._switch_pending = False
                    self.task_switch(False)
                self._step()
                if not self._switch_pending:
                    break
            self._switch_pending = False
            self.task_switch(True)