"""
Lesson API routes.

Endpoints:
- GET /api/lessons - List lessons in order
- GET /api/lessons/{slug} - Get a lesson with its render tree and HTML
"""

import sys
from pathlib import Path

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from core.lessons import LessonPost, get_neighbors
from core.rendering import render_markdown, render_nodes, serialize_blocks
from web_api.pages import load_sorted_lessons


class LessonSummary(BaseModel):
    slug: str
    title: str
    description: str
    order_index: str | None = Field(None, serialization_alias="orderIndex")


class LessonListResponse(BaseModel):
    lessons: list[LessonSummary]


class LessonDetail(BaseModel):
    slug: str
    metadata: dict[str, str]
    content: str
    previous: str | None = None  # Slug of the previous lesson
    next: str | None = None  # Slug of the next lesson
    blocks: list[dict]
    html: str


def summarize(lesson: LessonPost) -> LessonSummary:
    return LessonSummary(
        slug=lesson.slug,
        title=lesson.metadata.title,
        description=lesson.metadata.description,
        order_index=lesson.metadata.order_index,
    )


router = APIRouter(prefix="/api", tags=["lessons"])


@router.get("/lessons", response_model=LessonListResponse)
async def list_lessons():
    """List lessons sorted by orderIndex."""
    return LessonListResponse(lessons=[summarize(lesson) for lesson in load_sorted_lessons()])


@router.get("/lessons/{lesson_slug}", response_model=LessonDetail)
async def get_lesson(lesson_slug: str):
    """Get a lesson, its neighbors and its rendered body."""
    neighbors = get_neighbors(load_sorted_lessons(), lesson_slug)
    if neighbors is None:
        raise HTTPException(status_code=404, detail="Lesson not found")

    lesson = neighbors.current
    blocks = render_markdown(lesson.content)
    return LessonDetail(
        slug=lesson.slug,
        metadata=lesson.metadata.to_dict(),
        content=lesson.content,
        previous=neighbors.previous.slug if neighbors.previous else None,
        next=neighbors.next.slug if neighbors.next else None,
        blocks=serialize_blocks(blocks),
        html=str(render_nodes(blocks)),
    )
