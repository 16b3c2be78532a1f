"""
Build the render tree from markdown text.

Markdown is parsed with mistune into its AST, then every AST node type is
mapped to a block or inline node through a dispatch table. The special cases
(callouts, widget and diagram code fences, heading ids, link kinds, URL
filtering, image defaults and <details> sections) are applied here. Task
lists, bare URLs and $-delimited math come from mistune plugins.
"""

import logging
import re

import mistune
from mistune.util import unescape

from .blocks import (
    Block,
    Callout,
    CodeBlock,
    CodeSpan,
    Details,
    Emphasis,
    EnvBlock,
    Heading,
    Image,
    Inline,
    InlineHtml,
    InlineMath,
    LineBreak,
    Link,
    ListBlock,
    ListItem,
    MathBlock,
    Mermaid,
    Paragraph,
    PlainCode,
    Quote,
    RawHtml,
    Rule,
    Snippet,
    SoftBreak,
    StackTraceBlock,
    Strikethrough,
    Strong,
    Table,
    TableBody,
    TableCell,
    TableHead,
    TableRow,
    Terminal,
    Text,
)
from .transforms import (
    clean_code,
    fence_language,
    fence_variant,
    match_callout,
    normalize_language,
    parse_env_pairs,
    parse_stack_trace,
    slugify,
)

logger = logging.getLogger(__name__)

DEFAULT_IMAGE_WIDTH = 800
DEFAULT_IMAGE_HEIGHT = 400

HARMFUL_LINK = "#harmful-link"

# $$E=mc^2$$ on a single line; the math plugin only knows the fenced form
_ONE_LINE_MATH = r"^ {0,3}\$\$(?P<one_line_math>[^\n$]+?)\$\$[ \t]*$"


def _parse_one_line_math(block, m, state):
    state.append_token({"type": "block_math", "raw": m.group("one_line_math").strip()})
    return m.end() + 1


def one_line_math(md):
    """mistune plugin: display math written as $$...$$ on one line."""
    md.block.register("block_math_line", _ONE_LINE_MATH, _parse_one_line_math, before="list")


_parse = mistune.create_markdown(
    renderer="ast",
    plugins=["table", "strikethrough", "task_lists", "url", "math", one_line_math],
)

_DETAILS_OPEN = re.compile(r"^\s*<details\b[^>]*>", re.IGNORECASE)
_DETAILS_TAG = re.compile(r"<(/?)details\b[^>]*>", re.IGNORECASE)
_SUMMARY = re.compile(r"^\s*<summary\b[^>]*>(.*?)</summary\s*>", re.IGNORECASE | re.DOTALL)
_HTML_TAG = re.compile(r"<[^>]+>")


# -----------------------------------------------------------------------------
# Text flattening
# -----------------------------------------------------------------------------


def flatten_text(tokens: list[dict]) -> str:
    """Concatenate the plain text of AST tokens, ignoring markup.

    Block-level siblings are separated by a blank line; soft and hard line
    breaks become newlines.
    """
    parts = []
    for token in tokens:
        token_type = token["type"]
        if token_type == "text":
            parts.append(unescape(token.get("raw", "")))
        elif token_type in ("codespan", "inline_math"):
            parts.append(token.get("raw", ""))
        elif token_type in ("softbreak", "linebreak"):
            parts.append("\n")
        elif token_type in ("block_code", "block_math"):
            parts.append(token.get("raw", ""))
        elif "children" in token:
            parts.append(flatten_text(token["children"]))

    if any(t["type"] in _BLOCK_TYPES for t in tokens):
        return "\n\n".join(p.strip("\n") for p in parts if p.strip())
    return "".join(parts)


_BLOCK_TYPES = {
    "paragraph",
    "heading",
    "block_quote",
    "block_code",
    "list",
    "list_item",
    "task_list_item",
    "block_text",
    "block_math",
    "table",
}


# -----------------------------------------------------------------------------
# Inline nodes
# -----------------------------------------------------------------------------


def _inline_children(token: dict) -> list[Inline]:
    return build_inline(token.get("children", []))


def _text(token: dict) -> Inline:
    # mistune leaves entity references (&amp; &copy;) undecoded in text
    return Text(content=unescape(token.get("raw", "")))


def _emphasis(token: dict) -> Inline:
    return Emphasis(children=_inline_children(token))


def _strong(token: dict) -> Inline:
    return Strong(children=_inline_children(token))


def _strikethrough(token: dict) -> Inline:
    return Strikethrough(children=_inline_children(token))


def _codespan(token: dict) -> Inline:
    return CodeSpan(code=token.get("raw", ""))


def classify_link(href: str | None) -> str:
    """Link kind by destination: none, internal (/), anchor (#) or external."""
    if not href:
        return "none"
    if href.startswith("/"):
        return "internal"
    if href.startswith("#"):
        return "anchor"
    return "external"


def safe_url(url: str | None) -> str | None:
    """
    Neutralise script and data URLs the way mistune's HTML renderer does.

    Harmful destinations become HARMFUL_LINK; data URLs for common image
    types are allowed.
    """
    if not url:
        return url
    scheme = re.sub(r"[\x00-\x20]", "", url).lower()
    if scheme.startswith(mistune.HTMLRenderer.GOOD_DATA_PROTOCOLS):
        return url
    if scheme.startswith(mistune.HTMLRenderer.HARMFUL_PROTOCOLS):
        return HARMFUL_LINK
    return url


def _link(token: dict) -> Inline:
    attrs = token.get("attrs", {})
    href = safe_url(attrs.get("url")) or None
    return Link(
        href=href,
        link_type=classify_link(href),
        title=attrs.get("title"),
        children=_inline_children(token),
    )


def build_image(
    src: str | None,
    alt: str = "",
    title: str | None = None,
    width: int | None = None,
    height: int | None = None,
) -> Image | None:
    """
    Image node with default dimensions.

    Returns None without a source. When neither dimension is given the image
    gets 800x400 and is marked unoptimized (no resizing).
    """
    if not src:
        return None
    return Image(
        src=src,
        alt=alt,
        title=title,
        width=width if width is not None else DEFAULT_IMAGE_WIDTH,
        height=height if height is not None else DEFAULT_IMAGE_HEIGHT,
        unoptimized=width is None and height is None,
    )


def _image(token: dict) -> Inline | None:
    attrs = token.get("attrs", {})
    return build_image(
        safe_url(attrs.get("url")),
        alt=flatten_text(token.get("children", [])),
        title=attrs.get("title"),
    )


def _linebreak(token: dict) -> Inline:
    return LineBreak()


def _softbreak(token: dict) -> Inline:
    return SoftBreak()


def _inline_html(token: dict) -> Inline:
    return InlineHtml(html=token.get("raw", ""))


def _inline_math(token: dict) -> Inline:
    return InlineMath(tex=token.get("raw", ""))


_INLINE_HANDLERS = {
    "text": _text,
    "emphasis": _emphasis,
    "strong": _strong,
    "strikethrough": _strikethrough,
    "codespan": _codespan,
    "link": _link,
    "image": _image,
    "linebreak": _linebreak,
    "softbreak": _softbreak,
    "inline_html": _inline_html,
    "inline_math": _inline_math,
}


def build_inline(tokens: list[dict]) -> list[Inline]:
    """Map inline AST tokens to inline nodes. Unknown tokens degrade to their text."""
    nodes = []
    for token in tokens:
        handler = _INLINE_HANDLERS.get(token["type"])
        if handler is None:
            text = flatten_text([token])
            if text:
                nodes.append(Text(content=text))
            continue
        node = handler(token)
        if node is not None:
            nodes.append(node)
    return nodes


# -----------------------------------------------------------------------------
# Block nodes
# -----------------------------------------------------------------------------


def _paragraph(token: dict) -> Block:
    return Paragraph(children=_inline_children(token))


def _block_text(token: dict) -> Block:
    return Paragraph(children=_inline_children(token), tight=True)


def _heading(token: dict) -> Block:
    children = token.get("children", [])
    return Heading(
        level=token.get("attrs", {}).get("level", 1),
        id=slugify(flatten_text(children)),
        children=build_inline(children),
    )


def _block_quote(token: dict) -> Block:
    children = token.get("children", [])
    callout = match_callout(flatten_text(children))
    if callout is None:
        return Quote(children=build_blocks(children))
    return Callout(
        callout_type=callout.type,
        title=callout.title,
        icon=callout.icon,
        body=callout.body,
    )


def build_code_fence(tag: str | None, raw: str) -> Block:
    """
    Choose the rendering for a fenced code block.

    Reserved tags become widgets; any other tag becomes highlighted code with
    an alias-normalized language. Without a tag the code is passed through.
    """
    code = clean_code(raw)
    if not tag:
        return PlainCode(code=raw.rstrip("\n"))

    variant = fence_variant(tag)
    if variant == "snippet":
        return Snippet(code=code)
    if variant == "terminal":
        return Terminal(output=code)
    if variant == "stack_trace":
        return StackTraceBlock(trace=parse_stack_trace(code))
    if variant == "env":
        return EnvBlock(variables=parse_env_pairs(code))
    if variant == "mermaid":
        return Mermaid(code=code)

    return CodeBlock(
        code=code,
        language=normalize_language(tag),
        filename=tag.lower(),
    )


def _block_code(token: dict) -> Block:
    info = token.get("attrs", {}).get("info")
    return build_code_fence(fence_language(info), token.get("raw", ""))


def _list_item(token: dict) -> ListItem:
    checked = None
    if token["type"] == "task_list_item":
        checked = bool(token.get("attrs", {}).get("checked"))
    return ListItem(children=build_blocks(token.get("children", [])), checked=checked)


def _list(token: dict) -> Block:
    attrs = token.get("attrs", {})
    ordered = attrs.get("ordered", False)
    return ListBlock(
        ordered=ordered,
        start=attrs.get("start") if ordered else None,
        children=[
            _list_item(item)
            for item in token.get("children", [])
            if item["type"] in ("list_item", "task_list_item")
        ],
    )


def _table_cell(token: dict) -> TableCell:
    attrs = token.get("attrs", {})
    return TableCell(
        header=bool(attrs.get("head")),
        align=attrs.get("align"),
        children=_inline_children(token),
    )


def _table(token: dict) -> Block:
    sections = []
    for part in token.get("children", []):
        if part["type"] == "table_head":
            # mistune puts header cells directly under table_head
            row = TableRow(children=[_table_cell(c) for c in part.get("children", [])])
            sections.append(TableHead(children=[row]))
        elif part["type"] == "table_body":
            rows = [
                TableRow(children=[_table_cell(c) for c in r.get("children", [])])
                for r in part.get("children", [])
            ]
            sections.append(TableBody(children=rows))
    return Table(children=sections)


def _thematic_break(token: dict) -> Block:
    return Rule()


def _block_math(token: dict) -> Block:
    return MathBlock(tex=token.get("raw", "").strip())


def _block_html(token: dict) -> Block:
    return RawHtml(html=token.get("raw", ""))


_BLOCK_HANDLERS = {
    "paragraph": _paragraph,
    "block_text": _block_text,
    "heading": _heading,
    "block_quote": _block_quote,
    "block_code": _block_code,
    "list": _list,
    "table": _table,
    "thematic_break": _thematic_break,
    "block_math": _block_math,
    "block_html": _block_html,
}


# -----------------------------------------------------------------------------
# <details> sections
# -----------------------------------------------------------------------------


def _details_depth_change(html: str) -> int:
    """Opening minus closing <details> tags in a chunk of HTML."""
    depth = 0
    for match in _DETAILS_TAG.finditer(html):
        depth += -1 if match.group(1) else 1
    return depth


def _split_summary(html: str) -> tuple[list[Inline] | None, str]:
    """Take a leading <summary> off the details body, if there is one."""
    match = _SUMMARY.match(html)
    if not match:
        return None, html
    inner = match.group(1).strip()
    tokens = _parse(inner)
    if len(tokens) == 1 and tokens[0]["type"] == "paragraph":
        summary = build_inline(tokens[0].get("children", []))
    else:
        summary = [Text(content=_HTML_TAG.sub("", inner).strip())]
    return summary, html[match.end() :]


def _build_details(opening_html: str, inner_tokens: list[dict], closing_html: str) -> Details:
    """
    Assemble a Details node.

    opening_html is everything after the <details> tag in the opening HTML
    block, closing_html everything before </details> in the closing one.
    """
    summary, body_html = _split_summary(opening_html)

    children = []
    if body_html.strip():
        children.extend(render_markdown(body_html))
    children.extend(build_blocks(inner_tokens))
    if closing_html.strip():
        children.extend(render_markdown(closing_html))

    if summary is None:
        return Details(children=children)
    return Details(summary=summary, children=children)


def _matching_close(html: str, depth: int) -> re.Match | None:
    """The </details> tag that brings `depth` open sections down to zero."""
    for match in _DETAILS_TAG.finditer(html):
        depth += -1 if match.group(1) else 1
        if depth <= 0:
            return match
    return None


def _html_tail(html: str) -> list[Block]:
    """HTML after </details> in the same block stays as raw HTML."""
    if not html.strip():
        return []
    return [RawHtml(html=html.strip())]


def _collect_details(tokens: list[dict], start: int) -> tuple[list[Block], int]:
    """
    Group a <details> HTML block and everything up to its </details>.

    Markdown splits raw HTML at blank lines, so a details section with
    markdown inside arrives as an opening HTML block, ordinary blocks, and a
    closing HTML block. Returns the Details node (plus any raw HTML that
    followed the closing tag) and the index after the section.
    """
    raw = tokens[start].get("raw", "")
    opening = _DETAILS_OPEN.match(raw)
    after_open = raw[opening.end() :]

    # Opened and closed within one HTML block
    match = _matching_close(after_open, 1)
    if match is not None:
        details = _build_details(after_open[: match.start()], [], "")
        return [details, *_html_tail(after_open[match.end() :])], start + 1

    depth = _details_depth_change(raw)
    for index in range(start + 1, len(tokens)):
        token = tokens[index]
        if token["type"] != "block_html":
            continue
        closing = token.get("raw", "")
        match = _matching_close(closing, depth)
        if match is None:
            depth += _details_depth_change(closing)
            continue
        details = _build_details(
            after_open, tokens[start + 1 : index], closing[: match.start()]
        )
        return [details, *_html_tail(closing[match.end() :])], index + 1

    logger.debug("Unclosed <details> block, treating rest of document as its body")
    return [_build_details(after_open, tokens[start + 1 :], "")], len(tokens)


# -----------------------------------------------------------------------------
# Entry points
# -----------------------------------------------------------------------------


def build_blocks(tokens: list[dict]) -> list[Block]:
    """Map block-level AST tokens to block nodes."""
    blocks = []
    index = 0
    while index < len(tokens):
        token = tokens[index]
        token_type = token["type"]

        if token_type == "block_html" and _DETAILS_OPEN.match(token.get("raw", "")):
            section, index = _collect_details(tokens, index)
            blocks.extend(section)
            continue

        index += 1
        if token_type == "blank_line":
            continue

        handler = _BLOCK_HANDLERS.get(token_type)
        if handler is None:
            # Unknown block: keep its text rather than dropping it
            text = flatten_text([token])
            if text.strip():
                blocks.append(Paragraph(children=[Text(content=text)]))
            continue
        blocks.append(handler(token))
    return blocks


def render_markdown(text: str) -> list[Block]:
    """
    Convert a lesson body into its render tree.

    Args:
        text: Markdown source

    Returns:
        Block nodes in document order
    """
    return build_blocks(_parse(text))
