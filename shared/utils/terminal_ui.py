"""
Terminal UI primitives for the discovery CLI: ANSI colors, panels, wrapping.
"""
from __future__ import annotations

import shutil
import sys
import textwrap
from typing import Any

from shared.utils.env import env_value


# ── ANSI escape codes ────────────────────────────────────────────────

class Ansi:
    RESET  = "\033[0m"
    BOLD   = "\033[1m"
    CYAN   = "\033[36m"
    GREEN  = "\033[32m"
    YELLOW = "\033[33m"
    RED    = "\033[31m"
    BLUE   = "\033[34m"


STATUS_COLORS: dict[str, str] = {
    "active": Ansi.GREEN,
    "provisioning": Ansi.CYAN,
    "stopped": Ansi.YELLOW,
    "error": Ansi.RED,
    "unknown": Ansi.BLUE,
}


# ── Helpers ──────────────────────────────────────────────────────────

def color_enabled() -> bool:
    force = (env_value("INFRAPLANE_FORCE_COLOR", "") or "").lower()
    if force in {"0", "false", "no"}:
        return False
    return sys.stdout.isatty() or force in {"1", "true", "yes"}


def color(text: str, color_code: str) -> str:
    if not color_enabled():
        return text
    return f"{color_code}{text}{Ansi.RESET}"


def terminal_width() -> int:
    width = shutil.get_terminal_size((120, 20)).columns
    return max(72, min(width, 160))


# ── Text wrapping ────────────────────────────────────────────────────

def wrap_text(text: str, width: int) -> list[str]:
    """Wrap multi-line text to fit within *width* columns."""
    result: list[str] = []
    for raw_line in str(text).splitlines() or [""]:
        wrapped = textwrap.wrap(raw_line, width=width) or [""]
        result.extend(wrapped)
    return result


def wrap_row(label: str, value: Any, width: int) -> list[str]:
    """Format ``label: value`` with continuation-indent wrapping."""
    prefix = f"{label}: "
    available = max(12, width - len(prefix))
    chunks = wrap_text(str(value), available)
    lines = [f"{prefix}{chunks[0]}"]
    indent = " " * len(prefix)
    for extra in chunks[1:]:
        lines.append(f"{indent}{extra}")
    return lines


# ── Panel rendering ─────────────────────────────────────────────────

def render_box(title: str, body_lines: list[str], color_code: str, width: int | None = None) -> list[str]:
    """
    Render a Unicode box with *title* and *body_lines*.

    Returns a list of ready-to-print strings (no trailing newline).
    """
    max_w = (width or terminal_width()) - 2
    title_text = f" {title} "

    content_w = max(
        len(title_text),
        max((len(l) for l in body_lines), default=0),
        36,
    )
    content_w = min(content_w, max_w)

    normalized: list[str] = []
    for line in body_lines:
        if len(line) <= content_w:
            normalized.append(line)
        else:
            normalized.extend(textwrap.wrap(line, width=content_w))

    right_fill = content_w - len(title_text)
    top = f"╭─{title_text}{'─' * right_fill}╮"
    bot = f"╰{'─' * (content_w + 1)}╯"

    out = [top]
    for line in normalized:
        out.append(f"│ {line.ljust(content_w)}│")
    out.append(bot)
    return [color(l, color_code) for l in out]


def print_panel(title: str, rows: list[tuple[str, Any]], color_code: str) -> None:
    """Print a key-value panel."""
    w = terminal_width()
    body: list[str] = []
    for label, value in rows:
        body.extend(wrap_row(label, value, w - 6))
    print("")
    print("\n".join(render_box(title, body, color_code, w)))


def print_compact_panel(title: str, body: str, color_code: str) -> None:
    """Print a single-body panel."""
    w = terminal_width()
    lines = render_box(title, wrap_text(body, w - 6), color_code, w)
    print("")
    print("\n".join(lines))
