"""Default values shared across the application."""

from typing import Any, Final

# Seeded into an empty categories table, in display order
DEFAULT_CATEGORIES: Final[list[dict[str, Any]]] = [
    {"name": "건강", "color": "#4CAF50"},
    {"name": "스포츠", "color": "#2196F3"},
    {"name": "정치/시사", "color": "#9C27B0"},
    {"name": "경제", "color": "#FF9800"},
    {"name": "라이프", "color": "#FF5722"},
    {"name": "테크", "color": "#607D8B"},
]

# Feed category values meaning "no filter"
ALL_CATEGORIES: Final[str] = "all"
ALL_CATEGORY_ALIASES: Final[frozenset[str]] = frozenset({ALL_CATEGORIES, "전체"})

UNCATEGORIZED_NAME: Final[str] = "미분류"
UNCATEGORIZED_COLOR: Final[str] = "#cccccc"

PLACEHOLDER_THUMBNAIL: Final[str] = "/placeholder.svg"
