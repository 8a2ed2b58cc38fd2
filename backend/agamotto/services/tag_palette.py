# agamotto/services/tag_palette.py
from typing import Iterable, List, Optional

# Curated palette of visually distinct colors, in assignment priority order.
# The first three belong to the default tags created on first run.
COLOR_PALETTE: List[str] = [
    "#767676",
    "#023E8A",
    "#276221",  # defaults
    "#DC2626",
    "#EA580C",
    "#D97706",
    "#CA8A04",
    "#65A30D",
    "#16A34A",
    "#059669",
    "#0891B2",
    "#0284C7",
    "#2563EB",
    "#4F46E5",
    "#7C3AED",
    "#9333EA",
    "#C026D3",
    "#DB2777",
    "#E11D48",
    "#475569",
    "#64748B",
    "#78716C",
    "#A8A29E",
    "#EF4444",
]

MAX_TAGS = len(COLOR_PALETTE)

DEFAULT_TAGS = [
    ("routine", "#767676"),
    ("sleep", "#023E8A"),
    ("work", "#276221"),
]

# 2026-01-01T00:00:00Z
DEFAULT_TAG_TIMESTAMP = 1767225600000


def available_colors(used_colors: Iterable[str]) -> List[str]:
    """Palette colors not used by any tag, in palette order"""
    used = set(used_colors)
    return [color for color in COLOR_PALETTE if color not in used]


def next_available_color(used_colors: Iterable[str]) -> Optional[str]:
    """First free palette color, or None when every color is taken"""
    free = available_colors(used_colors)
    return free[0] if free else None
