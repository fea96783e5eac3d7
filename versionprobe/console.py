"""
VersionProbe Console — Colored terminal output for the demo drivers.

Plain ANSI escape codes; no terminal detection beyond honoring NO_COLOR and
an explicit `set_color_enabled(False)`.
"""

import os
import sys
from typing import TextIO


# ANSI colors
class C:
    RESET   = "\033[0m"
    BOLD    = "\033[1m"
    DIM     = "\033[2m"
    RED     = "\033[91m"
    GREEN   = "\033[92m"
    YELLOW  = "\033[93m"
    BLUE    = "\033[94m"
    MAGENTA = "\033[95m"
    CYAN    = "\033[96m"
    WHITE   = "\033[97m"


_color_enabled = "NO_COLOR" not in os.environ


def set_color_enabled(enabled: bool):
    global _color_enabled
    _color_enabled = enabled


def colorize(text: str, *codes: str) -> str:
    """Wrap text in the given ANSI codes (unchanged when colors are off)."""
    if not _color_enabled or not codes:
        return text
    return f"{''.join(codes)}{text}{C.RESET}"


def say(text: str, *codes: str, file: TextIO | None = None):
    print(colorize(text, *codes), file=file or sys.stdout)


def blank(file: TextIO | None = None):
    print(file=file or sys.stdout)


def separator(char: str = "═", width: int = 70, file: TextIO | None = None):
    say(char * width, C.CYAN, file=file)


def banner(text: str, char: str = "=", color: str = C.BOLD, file: TextIO | None = None):
    """Print a formatted banner."""
    width = 70
    say(f"\n{char * width}", color, file=file)
    say(f"  {text}", color, file=file)
    say(f"{char * width}", color, file=file)


def multi_color(*parts: tuple[str, str], file: TextIO | None = None):
    """Print (text, color) pairs on a single line.

    Example:
        multi_color(("📦 packaging: ", C.WHITE), ("v24.1", C.GREEN))
    """
    print("".join(colorize(text, color) for text, color in parts), file=file or sys.stdout)
