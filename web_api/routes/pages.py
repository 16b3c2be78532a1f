"""
HTML page routes.

Endpoints:
- GET / - Lesson listing
- GET /lesson/{slug} - Lesson page with sidebar and previous/next navigation
- GET /assets/pygments.css - Code highlighting stylesheet
"""

import sys
from pathlib import Path

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse, Response

sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from core.rendering.html import pygments_css
from web_api.pages import (
    index_context,
    lesson_context,
    load_sorted_lessons,
    not_found_context,
    templates,
)

router = APIRouter(tags=["pages"])


@router.get("/", response_class=HTMLResponse)
async def index(request: Request):
    """Listing page with every lesson in order."""
    return templates.TemplateResponse(
        request, "index.html", index_context(load_sorted_lessons())
    )


@router.get("/lesson/{lesson_slug}", response_class=HTMLResponse)
async def lesson_page(request: Request, lesson_slug: str):
    """Render a single lesson."""
    context = lesson_context(load_sorted_lessons(), lesson_slug)
    if context is None:
        return templates.TemplateResponse(
            request, "not_found.html", not_found_context(), status_code=404
        )
    return templates.TemplateResponse(request, "lesson.html", context)


@router.get("/assets/pygments.css")
async def highlight_stylesheet():
    return Response(content=pygments_css(), media_type="text/css")
