"""
Static site export.

Writes every page the server would render into a directory:

    <out>/index.html
    <out>/lesson/<slug>/index.html
    <out>/404.html
    <out>/static/...          (copied from web_api/static)
    <out>/assets/pygments.css
"""

import logging
import shutil
from pathlib import Path

import sentry_sdk

from core.rendering.html import pygments_css

from .pages import (
    STATIC_DIR,
    index_context,
    lesson_context,
    load_sorted_lessons,
    not_found_context,
    render_page,
)

logger = logging.getLogger(__name__)


def _write(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def export_site(out_dir: Path, lessons_dir: Path | None = None) -> list[Path]:
    """
    Render the whole site to static files.

    Args:
        out_dir: Destination directory (created if missing)
        lessons_dir: Lesson source directory (defaults to the configured one)

    Returns:
        Paths of the HTML pages written
    """
    lessons = load_sorted_lessons(lessons_dir)
    written = []

    index_path = out_dir / "index.html"
    _write(index_path, render_page("index.html", index_context(lessons)))
    written.append(index_path)

    for lesson in lessons:
        page_path = out_dir / "lesson" / lesson.slug / "index.html"
        try:
            context = lesson_context(lessons, lesson.slug)
            _write(page_path, render_page("lesson.html", context))
        except Exception as e:
            logger.error(f"Failed to export lesson '{lesson.slug}': {e}")
            sentry_sdk.capture_exception(e)
            raise
        written.append(page_path)

    not_found_path = out_dir / "404.html"
    _write(not_found_path, render_page("not_found.html", not_found_context()))
    written.append(not_found_path)

    shutil.copytree(STATIC_DIR, out_dir / "static", dirs_exist_ok=True)
    _write(out_dir / "assets" / "pygments.css", pygments_css())

    logger.info(f"Exported {len(lessons)} lessons to {out_dir}")
    return written
