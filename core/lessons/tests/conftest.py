"""Pytest fixtures for lesson tests."""

import pytest


@pytest.fixture
def lessons_dir(tmp_path):
    """An empty lessons directory."""
    path = tmp_path / "lessons"
    path.mkdir()
    return path


@pytest.fixture
def write_lesson(lessons_dir):
    """Write a lesson file and return its path.

    Usage: write_lesson("intro", title="Intro", orderIndex="1", body="# Hi")
    """

    def _write(slug, body="Body text.", extension=".mdx", **metadata):
        lines = ["---"]
        lines.extend(f"{key}: {value}" for key, value in metadata.items())
        lines.append("---")
        path = lessons_dir / f"{slug}{extension}"
        path.write_text("\n".join(lines) + "\n\n" + body + "\n", encoding="utf-8")
        return path

    return _write
