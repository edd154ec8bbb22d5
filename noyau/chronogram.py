"""Text chronogram showing which task runs at each scheduler tick."""

from __future__ import annotations

from .ready_queue import MAX_PRIORITY
from .terminal import background_color, cursor_position, font_color

__all__ = ["Chronogram", "CHRONOGRAM_VERT_POS", "CHRONOGRAM_WIDTH"]

CHRONOGRAM_VERT_POS = 5
CHRONOGRAM_WIDTH = 120


class Chronogram:
    """Draws one column per tick, one line per priority level."""

    def __init__(self) -> None:
        self.column = 1
        self._headers_left = 1

    def draw_tick(self, task_id: int | None, sep: str) -> str:
        """Return the escape sequence drawing the tick for ``task_id``.

        ``sep`` marks the column boundary: '|' for a timer tick, ' ' otherwise.
        A ``task_id`` of None draws an idle column.
        """
        priority = task_id >> 3 if task_id is not None else None

        if self.column > CHRONOGRAM_WIDTH:
            self.column = 1
            self._headers_left = MAX_PRIORITY

        parts = []
        for line in range(1, MAX_PRIORITY + 1):
            parts.append(cursor_position(line + CHRONOGRAM_VERT_POS, self.column))
            parts.append(font_color(15))
            if self._headers_left:
                parts.append(background_color(0) + f"P{line - 1:02d}")
                self._headers_left -= 1

            if priority is not None and line == priority + 1:
                parts.append(background_color(task_id + 16) + f"{sep}{task_id:02d}")
            else:
                parts.append(background_color(0) + f"{sep}  ")

        self.column += 3
        return "".join(parts)