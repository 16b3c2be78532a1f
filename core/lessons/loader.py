# core/lessons/loader.py
"""Load lessons from markdown files with a leading frontmatter block."""

import logging
import re
from pathlib import Path

from core.config import get_lessons_dir

from .types import LessonMetadata, LessonPost

logger = logging.getLogger(__name__)


class LessonNotFoundError(Exception):
    """Raised when a lesson cannot be found."""

    pass


LESSON_EXTENSIONS = (".mdx", ".md")

# Opening "---" on the first line, closing "---" on a line of its own
_FRONTMATTER_PATTERN = re.compile(
    r"\A---[ \t]*\n(.*?)^---[ \t]*$\n?", re.DOTALL | re.MULTILINE
)
_QUOTED_PATTERN = re.compile(r"""^(['"])(.*)\1$""", re.DOTALL)

# Frontmatter keys with a dedicated LessonMetadata field
_FIELD_MAPPING = {
    "title": "title",
    "description": "description",
    "orderIndex": "order_index",
    "publishedAt": "published_at",
    "summary": "summary",
    "image": "image",
}


def _strip_quotes(value: str) -> str:
    """Remove one layer of matching single or double quotes."""
    match = _QUOTED_PATTERN.match(value)
    if match:
        return match.group(2)
    return value


def _parse_metadata_lines(block: str) -> dict[str, str]:
    """Parse `key: value` lines into a dict.

    Only the first ": " separates key from value. A line without one becomes
    a key with an empty value.
    """
    raw = {}
    for line in block.split("\n"):
        line = line.strip()
        if not line:
            continue
        key, _, value = line.partition(": ")
        raw[key.strip()] = _strip_quotes(value.strip())
    return raw


def parse_frontmatter(text: str) -> tuple[LessonMetadata, str]:
    """
    Split a lesson file into metadata and body.

    Args:
        text: Full file contents, possibly starting with a --- block

    Returns:
        Tuple of (metadata, body). Without a frontmatter block the metadata
        is empty and the whole text is the body.
    """
    text = text.lstrip("\ufeff").replace("\r\n", "\n")
    match = _FRONTMATTER_PATTERN.match(text)

    if not match:
        return LessonMetadata(), text.strip()

    raw = _parse_metadata_lines(match.group(1))
    fields = {}
    extra = {}
    for key, value in raw.items():
        if key in _FIELD_MAPPING:
            fields[_FIELD_MAPPING[key]] = value
        else:
            extra[key] = value

    return LessonMetadata(**fields, extra=extra), text[match.end() :].strip()


def _lesson_files(lessons_dir: Path) -> list[Path]:
    """Lesson files in the directory, sorted by filename.

    Slugs are unique: when both foo.mdx and foo.md exist, foo.mdx wins.
    """
    by_slug: dict[str, Path] = {}
    for path in lessons_dir.iterdir():
        if not path.is_file() or path.suffix not in LESSON_EXTENSIONS:
            continue
        existing = by_slug.get(path.stem)
        if existing is not None:
            if LESSON_EXTENSIONS.index(existing.suffix) <= LESSON_EXTENSIONS.index(
                path.suffix
            ):
                continue
            logger.warning(f"Duplicate lesson slug '{path.stem}', using {path.name}")
        by_slug[path.stem] = path

    return sorted(by_slug.values(), key=lambda path: path.name)


def _is_safe_slug(slug: str) -> bool:
    return bool(slug) and not slug.startswith(".") and "/" not in slug and "\\" not in slug


def read_lesson_file(path: Path) -> LessonPost:
    """Read and parse a single lesson file. I/O errors propagate."""
    metadata, content = parse_frontmatter(path.read_text(encoding="utf-8"))
    return LessonPost(slug=path.stem, metadata=metadata, content=content)


def get_lessons(lessons_dir: Path | None = None) -> list[LessonPost]:
    """
    Load every lesson in the lessons directory.

    Args:
        lessons_dir: Directory to read (defaults to the configured LESSONS_DIR)

    Returns:
        Lessons in filename order (unsorted by orderIndex)
    """
    lessons_dir = lessons_dir or get_lessons_dir()
    if not lessons_dir.is_dir():
        logger.warning(f"Lessons directory not found: {lessons_dir}")
        return []

    return [read_lesson_file(path) for path in _lesson_files(lessons_dir)]


def load_lesson(lesson_slug: str, lessons_dir: Path | None = None) -> LessonPost:
    """
    Load a lesson by slug.

    Args:
        lesson_slug: The lesson slug (filename without extension)
        lessons_dir: Directory to read (defaults to the configured LESSONS_DIR)

    Returns:
        The parsed lesson

    Raises:
        LessonNotFoundError: If no lesson file has this slug
    """
    if not _is_safe_slug(lesson_slug):
        raise LessonNotFoundError(f"Lesson not found: {lesson_slug}")

    lessons_dir = lessons_dir or get_lessons_dir()
    for extension in LESSON_EXTENSIONS:
        path = lessons_dir / f"{lesson_slug}{extension}"
        if path.is_file():
            return read_lesson_file(path)

    raise LessonNotFoundError(f"Lesson not found: {lesson_slug}")


def get_available_lessons(lessons_dir: Path | None = None) -> list[str]:
    """List available lesson slugs in filename order."""
    lessons_dir = lessons_dir or get_lessons_dir()
    if not lessons_dir.is_dir():
        return []

    return [path.stem for path in _lesson_files(lessons_dir)]
