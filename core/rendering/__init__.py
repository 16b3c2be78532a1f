"""Markdown renderer for lesson bodies."""

from dataclasses import asdict

from markupsafe import Markup

from .blocks import Block, Node
from .builder import render_markdown
from .html import render_nodes
from .transforms import (
    CalloutMatch,
    EnvPair,
    StackFrame,
    StackTrace,
    match_callout,
    normalize_language,
    parse_env_pairs,
    parse_stack_trace,
    slugify,
)


def render_html(text: str) -> Markup:
    """Render a markdown lesson body straight to HTML."""
    return render_nodes(render_markdown(text))


def serialize_blocks(blocks: list[Block]) -> list[dict]:
    """Render tree as plain dicts (for the JSON API)."""
    return [asdict(block) for block in blocks]


__all__ = [
    "Block",
    "Node",
    "render_markdown",
    "render_html",
    "render_nodes",
    "serialize_blocks",
    "CalloutMatch",
    "EnvPair",
    "StackFrame",
    "StackTrace",
    "match_callout",
    "normalize_language",
    "parse_env_pairs",
    "parse_stack_trace",
    "slugify",
]
