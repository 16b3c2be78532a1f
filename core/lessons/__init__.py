"""Lesson loading, ordering and navigation."""

from .types import (
    LessonMetadata,
    LessonPost,
    LessonNeighbors,
)
from .loader import (
    parse_frontmatter,
    get_lessons,
    load_lesson,
    get_available_lessons,
    LessonNotFoundError,
)
from .ordering import (
    parse_order_index,
    sort_lessons,
    find_lesson,
    get_neighbors,
)

__all__ = [
    "LessonMetadata",
    "LessonPost",
    "LessonNeighbors",
    "parse_frontmatter",
    "get_lessons",
    "load_lesson",
    "get_available_lessons",
    "LessonNotFoundError",
    "parse_order_index",
    "sort_lessons",
    "find_lesson",
    "get_neighbors",
]
