"""Lesson ordering and previous/next navigation."""

import re

from .types import LessonNeighbors, LessonPost

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def parse_order_index(value: str | None) -> int:
    """
    Parse an orderIndex string the way parseInt(value, 10) would.

    Leading whitespace and a sign are allowed and trailing garbage is
    ignored ("12abc" -> 12). Missing or unparsable values sort as 0.
    """
    if value is None:
        return 0
    match = _LEADING_INT.match(value)
    if not match:
        return 0
    return int(match.group(1))


def sort_lessons(lessons: list[LessonPost]) -> list[LessonPost]:
    """Return lessons sorted ascending by numeric orderIndex.

    sorted() is stable, so lessons with equal orderIndex keep their
    enumeration (filename) order.
    """
    return sorted(lessons, key=lambda lesson: parse_order_index(lesson.metadata.order_index))


def find_lesson(lessons: list[LessonPost], slug: str) -> int | None:
    """Index of the lesson with this slug, or None."""
    for i, lesson in enumerate(lessons):
        if lesson.slug == slug:
            return i
    return None


def get_neighbors(lessons: list[LessonPost], slug: str) -> LessonNeighbors | None:
    """
    Locate a lesson and its previous/next lessons by list position.

    Args:
        lessons: Lessons, already sorted
        slug: Slug of the current lesson

    Returns:
        LessonNeighbors, or None if no lesson has this slug. There is no
        wraparound: the first lesson has no previous, the last no next.
    """
    index = find_lesson(lessons, slug)
    if index is None:
        return None

    previous_lesson = lessons[index - 1] if index > 0 else None
    next_lesson = lessons[index + 1] if index < len(lessons) - 1 else None

    return LessonNeighbors(
        index=index,
        current=lessons[index],
        previous=previous_lesson,
        next=next_lesson,
    )
