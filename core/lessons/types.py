"""
Type definitions for lessons and lesson navigation.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class LessonMetadata:
    """Metadata parsed from a lesson's frontmatter block.

    Values are kept as strings exactly as written (minus surrounding quotes).
    """

    title: str = ""
    description: str = ""
    order_index: str | None = None  # "orderIndex" in frontmatter
    published_at: str | None = None  # "publishedAt"
    summary: str | None = None
    image: str | None = None
    extra: dict[str, str] = field(default_factory=dict)  # Unknown keys, verbatim

    def to_dict(self) -> dict[str, str]:
        """Frontmatter-keyed mapping (camelCase keys, absent fields omitted)."""
        data = {"title": self.title, "description": self.description}
        if self.order_index is not None:
            data["orderIndex"] = self.order_index
        if self.published_at is not None:
            data["publishedAt"] = self.published_at
        if self.summary is not None:
            data["summary"] = self.summary
        if self.image is not None:
            data["image"] = self.image
        data.update(self.extra)
        return data


@dataclass(frozen=True)
class LessonPost:
    """A single lesson: slug, metadata and raw markdown body."""

    slug: str  # Filename without extension
    metadata: LessonMetadata
    content: str


@dataclass(frozen=True)
class LessonNeighbors:
    """A lesson and its positional neighbors in the sorted lesson list."""

    index: int
    current: LessonPost
    previous: LessonPost | None = None
    next: LessonPost | None = None
