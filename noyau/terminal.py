"""ANSI escape sequences for a 256-colour terminal."""

from __future__ import annotations

__all__ = [
    "font_color",
    "background_color",
    "font_color_rgb",
    "background_color_rgb",
    "cursor_up",
    "cursor_down",
    "cursor_right",
    "cursor_left",
    "cursor_column",
    "cursor_position",
    "clear_screen",
    "clear_line",
    "color_demo",
]

POS_FILE = 40
POS_FIN_FILE = 120

ESCAPE_BASE = "\x1b["
FONT_COLOR = "\x1b[38;5;"
BACKGROUND_COLOR = "\x1b[48;5;"
RESET_COLOR = "\x1b[0m"
BOLD_FONT = "\x1b[1m"
UNDERLINE_FONT = "\x1b[4m"
REVERSED_FONT = "\x1b[7m"
SAVE_CURSOR = "\x1b[s"
RESTORE_CURSOR = "\x1b[u"


def _cube_index(red: int, green: int, blue: int) -> int:
    return 16 + red * 36 + green * 6 + blue


def font_color(color: int) -> str:
    """Select a foreground colour from the 256-colour palette."""
    return f"{FONT_COLOR}{color}m"


def background_color(color: int) -> str:
    """Select a background colour from the 256-colour palette."""
    return f"{BACKGROUND_COLOR}{color}m"


def font_color_rgb(red: int, green: int, blue: int) -> str:
    """Select a foreground colour from the 6x6x6 colour cube."""
    return font_color(_cube_index(red, green, blue))


def background_color_rgb(red: int, green: int, blue: int) -> str:
    """Select a background colour from the 6x6x6 colour cube."""
    return background_color(_cube_index(red, green, blue))


def cursor_up(n: int) -> str:
    return f"{ESCAPE_BASE}{n}A"


def cursor_down(n: int) -> str:
    return f"{ESCAPE_BASE}{n}B"


def cursor_right(n: int) -> str:
    return f"{ESCAPE_BASE}{n}C"


def cursor_left(n: int) -> str:
    return f"{ESCAPE_BASE}{n}D"


def cursor_column(n: int) -> str:
    return f"{ESCAPE_BASE}{n}G"


def cursor_position(row: int, col: int) -> str:
    return f"{ESCAPE_BASE}{row};{col}H"


def clear_screen(n: int) -> str:
    return f"{ESCAPE_BASE}{n}J"


def clear_line(n: int) -> str:
    return f"{ESCAPE_BASE}{n}K"


def color_demo() -> str:
    """Return a palette demonstration: system colours, colour cube, grey ramp."""
    parts = ["System colors:\n"]
    for colors in (range(8), range(8, 16)):
        parts.extend(background_color(color) + " " for color in colors)
        parts.append(RESET_COLOR + "\n")

    parts.append("Color cube, 6x6x6:\n")
    for red in range(6):
        for green in range(6):
            for blue in range(6):
                color = _cube_index(red, green, blue)
                parts.append(background_color(color))
                parts.append(font_color((color + 6) % 256))
                parts.append(f" {color:3d}")
            parts.append(RESET_COLOR + "\n")
        parts.append("Grayscale ramp:\n")
        parts.extend(background_color(color) + " " for color in range(232, 256))
        parts.append(RESET_COLOR + "\n")
    return "".join(parts)