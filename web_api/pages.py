"""
Page assembly for the lesson site.

Builds template contexts for the listing and lesson pages and renders them
with Jinja2. Used both by the HTML routes and the static exporter, so
nothing here depends on a request.
"""

from pathlib import Path

from fastapi.templating import Jinja2Templates

from core.config import get_site_description, get_site_title
from core.lessons import LessonPost, get_lessons, get_neighbors, sort_lessons
from core.rendering import render_html

TEMPLATES_DIR = Path(__file__).parent / "templates"
STATIC_DIR = Path(__file__).parent / "static"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def lesson_url(slug: str) -> str:
    return f"/lesson/{slug}"


templates.env.globals["lesson_url"] = lesson_url


def load_sorted_lessons(lessons_dir: Path | None = None) -> list[LessonPost]:
    """Read every lesson fresh from disk, sorted by orderIndex."""
    return sort_lessons(get_lessons(lessons_dir))


def index_context(lessons: list[LessonPost]) -> dict:
    return {
        "site_title": get_site_title(),
        "page_title": get_site_title(),
        "page_description": get_site_description(),
        "lessons": lessons,
    }


def lesson_context(lessons: list[LessonPost], slug: str) -> dict | None:
    """
    Context for a lesson page.

    Returns None when no lesson has this slug (the caller renders a 404).
    """
    neighbors = get_neighbors(lessons, slug)
    if neighbors is None:
        return None

    lesson = neighbors.current
    return {
        "site_title": get_site_title(),
        "page_title": lesson.metadata.title,
        "page_description": lesson.metadata.description,
        "lessons": lessons,
        "lesson": lesson,
        "current_slug": lesson.slug,
        "content_html": render_html(lesson.content),
        "previous_lesson": neighbors.previous,
        "next_lesson": neighbors.next,
    }


def not_found_context() -> dict:
    return {
        "site_title": get_site_title(),
        "page_title": "Lesson not found",
        "page_description": "",
    }


def render_page(template_name: str, context: dict) -> str:
    """Render a page template to a string (no request needed)."""
    return templates.get_template(template_name).render(**context)
