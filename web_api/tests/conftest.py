# web_api/tests/conftest.py
"""Pytest fixtures for web API tests.

Writes a small set of lesson files to a temporary directory and points
LESSONS_DIR at it, so page and API tests run against known content rather
than the bundled lessons.
"""

import pytest

SAMPLE_LESSONS = {
    # Filename order differs from orderIndex order on purpose
    "alpha": (
        {"title": "Alpha Lesson", "description": "Second by order", "orderIndex": "2"},
        "# Alpha\n\n> [!TIP] Start a dev chain first.\n\n```py\nprint('alpha')\n```\n",
    ),
    "beta": (
        {"title": "Beta Lesson", "description": "First by order", "orderIndex": "1"},
        "# Beta\n\nSee [the docs](https://docs.nervos.org).\n",
    ),
    "gamma": (
        {"title": "Gamma Lesson", "description": "Last by order", "orderIndex": "10"},
        "# Gamma\n\n```env\nRPC_URL=http://127.0.0.1:8114\n```\n",
    ),
}


def write_lesson_file(directory, slug, metadata, body):
    lines = ["---"]
    lines.extend(f"{key}: {value}" for key, value in metadata.items())
    lines.extend(["---", "", body])
    (directory / f"{slug}.mdx").write_text("\n".join(lines), encoding="utf-8")


@pytest.fixture(autouse=True)
def sample_lessons_dir(tmp_path, monkeypatch):
    """Sample lessons for every test in web_api/tests/.

    Sorted by orderIndex the order is beta, alpha, gamma.
    """
    lessons_dir = tmp_path / "lessons"
    lessons_dir.mkdir()
    for slug, (metadata, body) in SAMPLE_LESSONS.items():
        write_lesson_file(lessons_dir, slug, metadata, body)
    monkeypatch.setenv("LESSONS_DIR", str(lessons_dir))
    return lessons_dir
