"""
Statistics and console presentation for treeclip.

Nothing here touches the core pipeline; it only reads the finished output.
Random choices take an explicit ``random.Random`` so callers control them.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from pathlib import Path
from typing import List, Tuple

BOX_WIDTH = 41

_SIZE_UNITS = ("KB", "MB", "GB", "TB")

_GOODBYES: List[str] = [
    "✨ Mission accomplished! ✨",
    "🎯 All done! Time for a cookie break~ 🍪",
    "🌟 Great work! Your code is ready to shine!",
    "💫 TreeClip adventure complete! Until next time~",
]

_KAOMOJIS: List[str] = [
    "ʕ•ᴥ•ʔ",
    "(◕‿◕✿)",
    "(づ｡◕‿‿◕｡)づ",
    "(っ◕‿◕)っ",
    "♡( ◡‿◡ )",
    "ヽ(•‿•)ノ",
    "(๑˃ᴗ˂)ﻭ",
    "(ﾉ>ω<)ﾉ",
]

BANNER = r"""
    ╔══════════════════════════════════════════════╗
    ║   🌳  T R E E C L I P  🌳                    ║
    ║    Traverse & Extract with Cuteness!         ║
    ╚══════════════════════════════════════════════╝
"""


def format_number(n: int) -> str:
    """``1234567`` -> ``'1,234,567'``."""
    return f"{n:,}"


def format_bytes(size: int) -> str:
    if size < 1024:
        return f"{size} B"
    value = float(size)
    for unit in _SIZE_UNITS:
        value /= 1024
        if value < 1024 or unit == _SIZE_UNITS[-1]:
            break
    return f"{value:.2f} {unit}"


@dataclass(frozen=True)
class ContentStats:
    chars: int
    lines: int
    words: int
    bytes: int


def content_stats(text: str) -> ContentStats:
    return ContentStats(
        chars=len(text),
        lines=len(text.split("\n")),
        words=len(text.split()),
        bytes=len(text.encode("utf-8")),
    )


def file_stats(path: Path) -> ContentStats:
    return content_stats(Path(path).read_text(encoding="utf-8"))


def render_stats_box(stats: ContentStats) -> str:
    rows = [
        ("Characters:", format_number(stats.chars)),
        ("Lines:", format_number(stats.lines)),
        ("Words:", format_number(stats.words)),
        ("Size:", format_bytes(stats.bytes)),
    ]
    value_width = BOX_WIDTH - 15
    lines = [
        "┌" + "─" * BOX_WIDTH + "┐",
        "│" + f"{'Content Statistics':^{BOX_WIDTH}}" + "│",
        "├" + "─" * BOX_WIDTH + "┤",
    ]
    for label, value in rows:
        lines.append(f"│  {label:<12}{value:>{value_width}} │")
    lines.append("└" + "─" * BOX_WIDTH + "┘")
    return "\n".join(lines)


def size_remark(size: int) -> Tuple[str, str]:
    """Emoji and a one-liner describing an output of *size* bytes."""
    if size < 1024:
        return "🐣", "Tiny but mighty!"
    if size < 100 * 1024:
        return "🐇", "Perfect size! Easy to handle~"
    if size < 1024 * 1024:
        return "🐘", "That's a big one! Impressive~"
    return "🐋", "Whoa! You've got a whale of content!"


def goodbye_message(rng: random.Random) -> str:
    return f"{rng.choice(_GOODBYES)}\n{rng.choice(_KAOMOJIS)} Have a wonderful day!"
