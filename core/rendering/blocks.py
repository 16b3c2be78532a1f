"""
Render tree produced by the markdown renderer.

A closed set of node types, each a dataclass tagged by its `type` field.
Inline nodes appear inside paragraphs, headings, links, table cells and
details summaries; block nodes make up the document.
"""

from dataclasses import dataclass, field

from .transforms import EnvPair, StackTrace


# -----------------------------------------------------------------------------
# Inline nodes
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class Text:
    type: str = "text"
    content: str = ""


@dataclass(frozen=True)
class Emphasis:
    type: str = "emphasis"
    children: list["Inline"] = field(default_factory=list)


@dataclass(frozen=True)
class Strong:
    type: str = "strong"
    children: list["Inline"] = field(default_factory=list)


@dataclass(frozen=True)
class Strikethrough:
    type: str = "strikethrough"
    children: list["Inline"] = field(default_factory=list)


@dataclass(frozen=True)
class CodeSpan:
    type: str = "code_span"
    code: str = ""


@dataclass(frozen=True)
class Link:
    """A hyperlink.

    link_type is "none" (no destination), "internal" (starts with /),
    "anchor" (starts with #) or "external" (opened in a new tab, isolated
    from the opener).
    """

    type: str = "link"
    href: str | None = None
    link_type: str = "none"
    title: str | None = None
    children: list["Inline"] = field(default_factory=list)


@dataclass(frozen=True)
class Image:
    type: str = "image"
    src: str = ""
    alt: str = ""
    title: str | None = None
    width: int = 800
    height: int = 400
    unoptimized: bool = True  # Default dimensions: skip resizing


@dataclass(frozen=True)
class LineBreak:
    type: str = "line_break"


@dataclass(frozen=True)
class SoftBreak:
    type: str = "soft_break"


@dataclass(frozen=True)
class InlineHtml:
    type: str = "inline_html"
    html: str = ""


@dataclass(frozen=True)
class InlineMath:
    """TeX between single dollar signs, typeset in the browser."""

    type: str = "inline_math"
    tex: str = ""


Inline = (
    Text
    | Emphasis
    | Strong
    | Strikethrough
    | CodeSpan
    | Link
    | Image
    | LineBreak
    | SoftBreak
    | InlineHtml
    | InlineMath
)


# -----------------------------------------------------------------------------
# Block nodes
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class Paragraph:
    type: str = "paragraph"
    children: list[Inline] = field(default_factory=list)
    tight: bool = False  # Tight list item text, rendered without <p>


@dataclass(frozen=True)
class Heading:
    type: str = "heading"
    level: int = 1
    id: str = ""  # Not deduplicated: identical headings share an id
    children: list[Inline] = field(default_factory=list)


@dataclass(frozen=True)
class Callout:
    """Alert box from a block quote starting with [!NOTE], [!TIP], ..."""

    type: str = "callout"
    callout_type: str = "note"
    title: str = "Note"
    icon: str = "info"
    body: str = ""


@dataclass(frozen=True)
class Quote:
    type: str = "quote"
    children: list["Block"] = field(default_factory=list)


@dataclass(frozen=True)
class Snippet:
    """Single-line copyable command (```snippet / ```command)."""

    type: str = "snippet"
    code: str = ""


@dataclass(frozen=True)
class Terminal:
    """Terminal output viewer (```terminal / ```output)."""

    type: str = "terminal"
    output: str = ""
    title: str = "Output"


@dataclass(frozen=True)
class StackTraceBlock:
    """Collapsible stack trace viewer (```stack-trace / ```error)."""

    type: str = "stack_trace"
    trace: StackTrace = field(default_factory=lambda: StackTrace(raw=""))
    default_open: bool = False


@dataclass(frozen=True)
class EnvBlock:
    """Environment variable list (```env), values hidden until toggled."""

    type: str = "env"
    variables: list[EnvPair] = field(default_factory=list)
    show_values: bool = False
    title: str = "Environment variables"


@dataclass(frozen=True)
class CodeBlock:
    """Syntax-highlighted code with line numbers."""

    type: str = "code_block"
    code: str = ""
    language: str = ""  # Normalized for the highlighter
    filename: str = ""  # The tag as written (lowercased)
    show_line_numbers: bool = True


@dataclass(frozen=True)
class PlainCode:
    """Unstyled passthrough for code without a language tag."""

    type: str = "plain_code"
    code: str = ""


@dataclass(frozen=True)
class Mermaid:
    """Diagram source from a ```mermaid fence, drawn client-side."""

    type: str = "mermaid"
    code: str = ""


@dataclass(frozen=True)
class MathBlock:
    """Display math between $$ delimiters."""

    type: str = "math"
    tex: str = ""


@dataclass(frozen=True)
class ListItem:
    type: str = "list_item"
    children: list["Block"] = field(default_factory=list)
    checked: bool | None = None  # Task list items only


@dataclass(frozen=True)
class ListBlock:
    type: str = "list"
    ordered: bool = False
    start: int | None = None
    children: list[ListItem] = field(default_factory=list)


@dataclass(frozen=True)
class TableCell:
    type: str = "table_cell"
    header: bool = False
    align: str | None = None
    children: list[Inline] = field(default_factory=list)


@dataclass(frozen=True)
class TableRow:
    type: str = "table_row"
    children: list[TableCell] = field(default_factory=list)


@dataclass(frozen=True)
class TableHead:
    type: str = "table_head"
    children: list[TableRow] = field(default_factory=list)


@dataclass(frozen=True)
class TableBody:
    type: str = "table_body"
    children: list[TableRow] = field(default_factory=list)


@dataclass(frozen=True)
class Table:
    type: str = "table"
    children: list[TableHead | TableBody] = field(default_factory=list)


@dataclass(frozen=True)
class Rule:
    type: str = "rule"


@dataclass(frozen=True)
class Details:
    """Collapsible section from <details>; summary defaults to "Details"."""

    type: str = "details"
    summary: list[Inline] = field(default_factory=lambda: [Text(content="Details")])
    children: list["Block"] = field(default_factory=list)
    open: bool = False


@dataclass(frozen=True)
class RawHtml:
    type: str = "html"
    html: str = ""


Block = (
    Paragraph
    | Heading
    | Callout
    | Quote
    | Snippet
    | Terminal
    | StackTraceBlock
    | EnvBlock
    | CodeBlock
    | PlainCode
    | Mermaid
    | MathBlock
    | ListBlock
    | ListItem
    | Table
    | TableHead
    | TableBody
    | TableRow
    | TableCell
    | Rule
    | Details
    | RawHtml
)

Node = Block | Inline
