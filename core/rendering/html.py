"""
Render the block tree to HTML.

One handler per node type, looked up by the node's `type` tag. Output is
markupsafe.Markup so it can be dropped into Jinja2 templates unescaped.
"""

from markupsafe import Markup, escape
from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import TextLexer, get_lexer_by_name
from pygments.util import ClassNotFound

from .blocks import (
    Callout,
    CodeBlock,
    CodeSpan,
    Details,
    Emphasis,
    EnvBlock,
    Heading,
    Image,
    InlineHtml,
    InlineMath,
    Link,
    ListBlock,
    ListItem,
    MathBlock,
    Mermaid,
    Node,
    Paragraph,
    PlainCode,
    Quote,
    RawHtml,
    Snippet,
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
from .transforms import split_ansi

CODE_FORMATTER = HtmlFormatter(linenos="table", cssclass="highlight", wrapcode=True)
PLAIN_FORMATTER = HtmlFormatter(cssclass="highlight", wrapcode=True)

# SVG paths for the callout/chevron icons (24x24 viewbox, stroked)
ICONS = {
    "info": '<circle cx="12" cy="12" r="10"/><path d="M12 16v-4"/><path d="M12 8h.01"/>',
    "lightbulb": (
        '<path d="M15 14c.2-1 .7-1.7 1.5-2.5 1-.9 1.5-2.2 1.5-3.5A6 6 0 0 0 6 8c0 1 .2 2.2 1.5 3.5'
        '.7.7 1.3 1.5 1.5 2.5"/><path d="M9 18h6"/><path d="M10 22h4"/>'
    ),
    "alert-triangle": (
        '<path d="m21.73 18-8-14a2 2 0 0 0-3.48 0l-8 14A2 2 0 0 0 4 21h16a2 2 0 0 0 1.73-3"/>'
        '<path d="M12 9v4"/><path d="M12 17h.01"/>'
    ),
    "alert-circle": (
        '<circle cx="12" cy="12" r="10"/><line x1="12" x2="12" y1="8" y2="12"/>'
        '<line x1="12" x2="12.01" y1="16" y2="16"/>'
    ),
    "chevron-down": '<path d="m6 9 6 6 6-6"/>',
}


def icon(name: str, css_class: str = "icon") -> Markup:
    return Markup(
        '<svg class="{}" xmlns="http://www.w3.org/2000/svg" viewBox="0 0 24 24" fill="none" '
        'stroke="currentColor" stroke-width="2" stroke-linecap="round" '
        'stroke-linejoin="round" aria-hidden="true">{}</svg>'
    ).format(css_class, Markup(ICONS.get(name, "")))


def copy_button(text: str, label: str = "Copy") -> Markup:
    return Markup(
        '<button type="button" class="copy-button" data-copy="{}" aria-label="{}">{}</button>'
    ).format(text, label, label)


def render_nodes(nodes: list[Node]) -> Markup:
    return Markup("").join(render_node(node) for node in nodes)


def render_node(node: Node) -> Markup:
    handler = _HANDLERS.get(node.type)
    if handler is None:
        return Markup("")
    return handler(node)


# -----------------------------------------------------------------------------
# Inline
# -----------------------------------------------------------------------------


def _text(node: Text) -> Markup:
    return escape(node.content)


def _emphasis(node: Emphasis) -> Markup:
    return Markup("<em>{}</em>").format(render_nodes(node.children))


def _strong(node: Strong) -> Markup:
    return Markup("<strong>{}</strong>").format(render_nodes(node.children))


def _strikethrough(node: Strikethrough) -> Markup:
    return Markup("<del>{}</del>").format(render_nodes(node.children))


def _code_span(node: CodeSpan) -> Markup:
    return Markup("<code>{}</code>").format(node.code)


def _link(node: Link) -> Markup:
    children = render_nodes(node.children)
    title = Markup(' title="{}"').format(node.title) if node.title else Markup("")
    if node.link_type == "none":
        return Markup("<a{}>{}</a>").format(title, children)
    if node.link_type == "external":
        return Markup(
            '<a href="{}"{} target="_blank" rel="noopener noreferrer">{}</a>'
        ).format(node.href, title, children)
    return Markup('<a href="{}"{}>{}</a>').format(node.href, title, children)


def _image(node: Image) -> Markup:
    title = Markup(' title="{}"').format(node.title) if node.title else Markup("")
    unoptimized = Markup(" data-unoptimized") if node.unoptimized else Markup("")
    return Markup(
        '<img src="{}" alt="{}" width="{}" height="{}" class="rounded-image" '
        'loading="lazy"{}{}>'
    ).format(node.src, node.alt, node.width, node.height, title, unoptimized)


def _line_break(node) -> Markup:
    return Markup("<br>\n")


def _soft_break(node) -> Markup:
    return Markup("\n")


def _inline_html(node: InlineHtml) -> Markup:
    return Markup(node.html)


def _inline_math(node: InlineMath) -> Markup:
    return Markup('<span class="math" data-display="false">{}</span>').format(node.tex)


# -----------------------------------------------------------------------------
# Blocks
# -----------------------------------------------------------------------------


def _paragraph(node: Paragraph) -> Markup:
    if node.tight:
        return render_nodes(node.children)
    return Markup("<p>{}</p>\n").format(render_nodes(node.children))


def _heading(node: Heading) -> Markup:
    return Markup('<h{level} id="{id}"><a href="#{id}" class="anchor"></a>{children}</h{level}>\n').format(
        level=node.level, id=node.id, children=render_nodes(node.children)
    )


def _callout(node: Callout) -> Markup:
    return Markup(
        '<div class="callout callout-{type}" role="note">'
        "{icon}"
        '<div class="callout-title">{title}</div>'
        '<div class="callout-body">{body}</div>'
        "</div>\n"
    ).format(
        type=node.callout_type,
        icon=icon(node.icon, "callout-icon"),
        title=node.title,
        body=node.body,
    )


def _quote(node: Quote) -> Markup:
    return Markup('<blockquote class="quote">\n{}</blockquote>\n').format(
        render_nodes(node.children)
    )


def _snippet(node: Snippet) -> Markup:
    return Markup(
        '<div class="snippet">'
        '<input class="snippet-input" type="text" readonly value="{code}">'
        "{button}"
        "</div>\n"
    ).format(code=node.code, button=copy_button(node.code))


def _ansi_html(output: str) -> Markup:
    parts = []
    for segment in split_ansi(output):
        if segment.classes:
            parts.append(
                Markup('<span class="{}">{}</span>').format(
                    " ".join(segment.classes), segment.text
                )
            )
        else:
            parts.append(escape(segment.text))
    return Markup("").join(parts)


def _terminal(node: Terminal) -> Markup:
    return Markup(
        '<div class="terminal">'
        '<div class="terminal-header">'
        '<span class="terminal-title">{title}</span>'
        '<span class="terminal-actions">{button}</span>'
        "</div>"
        '<pre class="terminal-content">{output}</pre>'
        "</div>\n"
    ).format(
        title=node.title,
        button=copy_button(node.output),
        output=_ansi_html(node.output),
    )


def _stack_frame(frame) -> Markup:
    css_class = "frame frame-internal" if frame.is_internal else "frame"
    if frame.file:
        location = frame.file
        if frame.line is not None:
            location = f"{location}:{frame.line}"
        if frame.column is not None:
            location = f"{location}:{frame.column}"
        body = Markup(
            '<span class="frame-function">{}</span> <span class="frame-location">{}</span>'
        ).format(frame.function or "<anonymous>", location)
    else:
        body = Markup('<span class="frame-function">{}</span>').format(frame.raw)
    if frame.source:
        body += Markup('<code class="frame-source">{}</code>').format(frame.source)
    return Markup('<li class="{}">{}</li>').format(css_class, body)


def _stack_trace(node: StackTraceBlock) -> Markup:
    trace = node.trace
    error_type = (
        Markup('<span class="stack-trace-type">{}</span>').format(trace.error_type)
        if trace.error_type
        else Markup("")
    )
    frames = Markup("").join(_stack_frame(f) for f in trace.frames)
    return Markup(
        '<div class="stack-trace">'
        '<div class="stack-trace-header">'
        '<div class="stack-trace-error">{error_type}'
        '<span class="stack-trace-message">{message}</span></div>'
        '<span class="stack-trace-actions">{button}</span>'
        "</div>"
        '<details class="stack-trace-content"{open}>'
        '<summary class="stack-trace-expand">{count} frames</summary>'
        '<ol class="stack-trace-frames">{frames}</ol>'
        "</details>"
        "</div>\n"
    ).format(
        error_type=error_type,
        message=trace.message,
        button=copy_button(trace.raw),
        open=Markup(" open") if node.default_open else Markup(""),
        count=len(trace.frames),
        frames=frames,
    )


def _env(node: EnvBlock) -> Markup:
    rows = Markup("").join(
        Markup(
            '<div class="env-var"><dt class="env-name">{name}</dt>'
            '<dd><span class="env-value">{value}</span>'
            '<span class="env-mask" aria-hidden="true">{mask}</span></dd></div>'
        ).format(name=pair.name, value=pair.value, mask="•" * min(len(pair.value), 12) or "•")
        for pair in node.variables
    )
    show = "true" if node.show_values else "false"
    return Markup(
        '<div class="env-vars" data-show-values="{show}">'
        '<div class="env-vars-header">'
        '<span class="env-vars-title">{title}</span>'
        '<button type="button" class="env-toggle" aria-pressed="{show}">Show values</button>'
        "</div>"
        '<dl class="env-vars-content">{rows}</dl>'
        "</div>\n"
    ).format(show=show, title=node.title, rows=rows)


def highlight_code(code: str, language: str, line_numbers: bool = True) -> Markup:
    """Highlight with Pygments; unknown languages fall back to plain text."""
    try:
        lexer = get_lexer_by_name(language)
    except ClassNotFound:
        lexer = TextLexer()
    formatter = CODE_FORMATTER if line_numbers else PLAIN_FORMATTER
    return Markup(highlight(code, lexer, formatter))


def _code_block(node: CodeBlock) -> Markup:
    return Markup(
        '<div class="code-block" data-language="{language}">'
        '<div class="code-block-header">'
        '<span class="code-block-filename">{filename}</span>'
        '<span class="code-block-actions">{button}</span>'
        "</div>"
        "{code}"
        "</div>\n"
    ).format(
        language=node.language,
        filename=node.filename,
        button=copy_button(node.code),
        code=highlight_code(node.code, node.language, node.show_line_numbers),
    )


def _plain_code(node: PlainCode) -> Markup:
    return Markup("<pre><code>{}</code></pre>\n").format(node.code)


def _mermaid(node: Mermaid) -> Markup:
    return Markup('<div class="mermaid">\n{}\n</div>\n').format(node.code)


def _math(node: MathBlock) -> Markup:
    return Markup('<div class="math" data-display="true">{}</div>\n').format(node.tex)


def _list(node: ListBlock) -> Markup:
    items = render_nodes(node.children)
    if not node.ordered:
        return Markup("<ul>\n{}</ul>\n").format(items)
    start = Markup(' start="{}"').format(node.start) if node.start not in (None, 1) else Markup("")
    return Markup("<ol{}>\n{}</ol>\n").format(start, items)


def _list_item(node: ListItem) -> Markup:
    if node.checked is None:
        return Markup("<li>{}</li>\n").format(render_nodes(node.children))
    checked = Markup(" checked") if node.checked else Markup("")
    return Markup(
        '<li class="task-list-item"><input type="checkbox" class="task-list-checkbox" disabled{}> {}</li>\n'
    ).format(checked, render_nodes(node.children))


def _table(node: Table) -> Markup:
    return Markup('<div class="table-wrapper"><table class="table">{}</table></div>\n').format(
        render_nodes(node.children)
    )


def _table_head(node: TableHead) -> Markup:
    return Markup('<thead class="table-header">{}</thead>').format(render_nodes(node.children))


def _table_body(node: TableBody) -> Markup:
    return Markup('<tbody class="table-body">{}</tbody>').format(render_nodes(node.children))


def _table_row(node: TableRow) -> Markup:
    return Markup('<tr class="table-row">{}</tr>').format(render_nodes(node.children))


def _table_cell(node: TableCell) -> Markup:
    tag = "th" if node.header else "td"
    css_class = "table-head" if node.header else "table-cell"
    style = Markup(' style="text-align: {}"').format(node.align) if node.align else Markup("")
    return Markup('<{tag} class="{css_class}"{style}>{children}</{tag}>').format(
        tag=tag, css_class=css_class, style=style, children=render_nodes(node.children)
    )


def _rule(node) -> Markup:
    return Markup('<div class="separator-wrapper"><hr class="separator"></div>\n')


def _details(node: Details) -> Markup:
    return Markup(
        '<details class="collapsible"{open}>'
        '<summary class="collapsible-trigger">{summary}{chevron}</summary>'
        '<div class="collapsible-content">{children}</div>'
        "</details>\n"
    ).format(
        open=Markup(" open") if node.open else Markup(""),
        summary=render_nodes(node.summary),
        chevron=icon("chevron-down", "chevron"),
        children=render_nodes(node.children),
    )


def _raw_html(node: RawHtml) -> Markup:
    return Markup(node.html)


_HANDLERS = {
    "text": _text,
    "emphasis": _emphasis,
    "strong": _strong,
    "strikethrough": _strikethrough,
    "code_span": _code_span,
    "link": _link,
    "image": _image,
    "line_break": _line_break,
    "soft_break": _soft_break,
    "inline_html": _inline_html,
    "inline_math": _inline_math,
    "paragraph": _paragraph,
    "heading": _heading,
    "callout": _callout,
    "quote": _quote,
    "snippet": _snippet,
    "terminal": _terminal,
    "stack_trace": _stack_trace,
    "env": _env,
    "code_block": _code_block,
    "plain_code": _plain_code,
    "mermaid": _mermaid,
    "math": _math,
    "list": _list,
    "list_item": _list_item,
    "table": _table,
    "table_head": _table_head,
    "table_body": _table_body,
    "table_row": _table_row,
    "table_cell": _table_cell,
    "rule": _rule,
    "details": _details,
    "html": _raw_html,
}


def pygments_css(style: str = "monokai") -> str:
    """Stylesheet for highlighted code blocks."""
    return HtmlFormatter(style=style, cssclass="highlight").get_style_defs(".highlight")
