"""Ready queue of the kernel: one round-robin ring per priority level."""

from __future__ import annotations

from collections import deque

__all__ = ["ReadyQueue", "TASKS_PER_PRIORITY", "MAX_PRIORITY", "MAX_TASKS"]

TASKS_PER_PRIORITY = 8
MAX_PRIORITY = 8
MAX_TASKS = TASKS_PER_PRIORITY * MAX_PRIORITY


def _split(task_id: int) -> tuple[int, int]:
    if not 0 <= task_id < MAX_TASKS:
        raise ValueError(f"task id {task_id} out of range 0..{MAX_TASKS - 1}")
    return task_id >> 3, task_id & 7


class ReadyQueue:
    """Eligible tasks, grouped by priority; level 0 is the most urgent.

    A task id encodes its priority in bits 3-5 and its slot in bits 0-2.
    Each slot also carries the identity reported for it, which ``swap_ids``
    can exchange between slots.
    """

    def __init__(self) -> None:
        self._rings: list[deque[int]] = [deque() for _ in range(MAX_PRIORITY)]
        self._ids: list[list[int | None]] = [
            [None] * TASKS_PER_PRIORITY for _ in range(MAX_PRIORITY)
        ]

    def add(self, task_id: int) -> None:
        """Insert a task at the end of its priority ring."""
        priority, slot = _split(task_id)
        self._ids[priority][slot] = task_id
        ring = self._rings[priority]
        if slot not in ring:
            ring.append(slot)

    def remove(self, task_id: int) -> None:
        """Take a task's slot out of its priority ring."""
        priority, slot = _split(task_id)
        ring = self._rings[priority]
        if not ring:
            return
        if len(ring) == 1:
            # A single-slot ring is emptied whichever slot was named.
            ring.clear()
        elif slot in ring:
            ring.remove(slot)
        else:
            return
        self._ids[priority][slot] = None

    def next(self) -> int | None:
        """Rotate the most urgent non-empty ring and return its head's identity."""
        for priority, ring in enumerate(self._rings):
            if ring:
                head = ring[0]
                ring.rotate(-1)
                return self._ids[priority][head]
        return None

    def swap_ids(self, id1: int, id2: int) -> None:
        """Exchange the identities held by the slots of two tasks."""
        if id1 == id2:
            return
        p1, n1 = _split(id1)
        p2, n2 = _split(id2)
        self._ids[p1][n1], self._ids[p2][n2] = self._ids[p2][n2], self._ids[p1][n1]

    def dump(self) -> str:
        """Return a table of slots and their successors, one block per priority."""
        header = "Tache   | " + "".join(f"{slot:03d} | " for slot in range(TASKS_PER_PRIORITY))
        blocks = []
        for ring in self._rings:
            successor = {slot: slot for slot in range(TASKS_PER_PRIORITY)}
            order = list(ring)
            successor.update(zip(order, order[1:] + order[:1]))
            row = "Suivant | " + "".join(
                f"{successor[slot]:03d} | " for slot in range(TASKS_PER_PRIORITY)
            )
            blocks.append(f"{header}\n{row}\n")
        return "".join(blocks)