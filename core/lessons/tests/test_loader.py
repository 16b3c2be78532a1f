# core/lessons/tests/test_loader.py
"""Tests for lesson loading and frontmatter parsing."""

import pytest

from core.config import DEFAULT_LESSONS_DIR
from core.lessons.loader import (
    parse_frontmatter,
    get_lessons,
    load_lesson,
    get_available_lessons,
    LessonNotFoundError,
)


class TestParseFrontmatter:
    """Test splitting metadata from body."""

    def test_parses_key_value_lines(self):
        """Should extract metadata fields and the body."""
        text = """---
title: Intro
description: First lesson
orderIndex: 3
---

# Hello
"""
        metadata, body = parse_frontmatter(text)
        assert metadata.title == "Intro"
        assert metadata.description == "First lesson"
        assert metadata.order_index == "3"
        assert body == "# Hello"

    def test_strips_matching_quotes(self):
        """Should remove one layer of surrounding quotes."""
        text = """---
title: "Quoted: with colon"
summary: 'single'
image: "unbalanced'
---
Body"""
        metadata, _ = parse_frontmatter(text)
        assert metadata.title == "Quoted: with colon"
        assert metadata.summary == "single"
        assert metadata.image == "\"unbalanced'"

    def test_value_keeps_later_colons(self):
        """Only the first colon separates key from value."""
        metadata, _ = parse_frontmatter("---\npublishedAt: 2025-01-10T12:00:00\n---\n")
        assert metadata.published_at == "2025-01-10T12:00:00"

    def test_unknown_keys_are_kept(self):
        """Unknown keys go into extra, verbatim."""
        metadata, _ = parse_frontmatter("---\ntitle: T\nauthor: Ada\n---\nx")
        assert metadata.extra == {"author": "Ada"}
        assert metadata.to_dict()["author"] == "Ada"

    def test_no_frontmatter(self):
        """Without a block the metadata is empty and the whole text is the body."""
        metadata, body = parse_frontmatter("  # Just a heading\n\nText\n")
        assert metadata.title == ""
        assert metadata.description == ""
        assert metadata.order_index is None
        assert body == "# Just a heading\n\nText"

    def test_rule_later_in_document_is_not_frontmatter(self):
        """A --- block must start the file."""
        text = "Intro\n\n---\ntitle: nope\n---\n"
        metadata, body = parse_frontmatter(text)
        assert metadata.title == ""
        assert body.startswith("Intro")

    def test_missing_title_is_empty_string(self):
        """Title is not enforced."""
        metadata, _ = parse_frontmatter("---\ndescription: d\n---\nBody")
        assert metadata.title == ""

    def test_windows_line_endings(self):
        """CRLF files keep their metadata and a clean body."""
        text = "---\r\ntitle: Cells\r\norderIndex: 2\r\n---\r\nBody\r\nMore\r\n"
        metadata, body = parse_frontmatter(text)
        assert metadata.title == "Cells"
        assert metadata.order_index == "2"
        assert body == "Body\nMore"

    def test_line_without_separator_is_empty_key(self):
        """A line with no ": " becomes a key with an empty value."""
        metadata, _ = parse_frontmatter("---\ntitle: T\ndraft\nurl:http://x\n---\nBody")
        assert metadata.title == "T"
        assert metadata.extra == {"draft": "", "url:http://x": ""}

    def test_empty_block(self):
        metadata, body = parse_frontmatter("---\n---\nBody")
        assert metadata.to_dict() == {"title": "", "description": ""}
        assert body == "Body"


class TestGetLessons:
    """Test reading the lessons directory."""

    def test_reads_all_lesson_files(self, lessons_dir, write_lesson):
        """Should load .mdx and .md files with slug from the filename."""
        write_lesson("intro", title="Intro")
        write_lesson("second", title="Second", extension=".md")
        (lessons_dir / "notes.txt").write_text("ignored")

        lessons = get_lessons(lessons_dir)

        assert [lesson.slug for lesson in lessons] == ["intro", "second"]
        assert lessons[0].metadata.title == "Intro"
        assert lessons[0].content == "Body text."

    def test_filename_order(self, lessons_dir, write_lesson):
        """Enumeration is by filename, independent of orderIndex."""
        write_lesson("b", orderIndex="1")
        write_lesson("a", orderIndex="2")
        assert [lesson.slug for lesson in get_lessons(lessons_dir)] == ["a", "b"]

    def test_mdx_wins_over_md(self, lessons_dir, write_lesson):
        """Slugs are unique even if both extensions exist."""
        write_lesson("dup", title="MD", extension=".md")
        write_lesson("dup", title="MDX")
        lessons = get_lessons(lessons_dir)
        assert len(lessons) == 1
        assert lessons[0].metadata.title == "MDX"

    def test_missing_directory(self, tmp_path):
        """Missing directory yields no lessons."""
        assert get_lessons(tmp_path / "missing") == []
        assert get_available_lessons(tmp_path / "missing") == []

    def test_uses_configured_directory(self, lessons_dir, write_lesson, monkeypatch):
        """LESSONS_DIR env var picks the directory."""
        write_lesson("configured")
        monkeypatch.setenv("LESSONS_DIR", str(lessons_dir))
        assert get_available_lessons() == ["configured"]


class TestLoadLesson:
    """Test loading a lesson by slug."""

    def test_load_existing_lesson(self, lessons_dir, write_lesson):
        write_lesson("intro", title="Intro", body="# Welcome")
        lesson = load_lesson("intro", lessons_dir)
        assert lesson.slug == "intro"
        assert lesson.metadata.title == "Intro"
        assert lesson.content == "# Welcome"

    def test_load_nonexistent_lesson(self, lessons_dir):
        """Should raise LessonNotFoundError for unknown lesson."""
        with pytest.raises(LessonNotFoundError):
            load_lesson("nonexistent-lesson", lessons_dir)

    @pytest.mark.parametrize("slug", ["../secret", ".hidden", "a/b", ""])
    def test_rejects_path_like_slugs(self, lessons_dir, slug):
        with pytest.raises(LessonNotFoundError):
            load_lesson(slug, lessons_dir)


def test_bundled_lessons_have_titles():
    """Every shipped lesson should declare a title and orderIndex."""
    lessons = get_lessons(DEFAULT_LESSONS_DIR)
    assert lessons
    for lesson in lessons:
        assert lesson.metadata.title, f"{lesson.slug} has no title"
        assert lesson.metadata.order_index is not None, f"{lesson.slug} has no orderIndex"
