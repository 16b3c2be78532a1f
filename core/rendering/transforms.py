"""
Best-effort text transforms used by the markdown renderer.

Every matcher here returns None (or an empty result) when its input does not
fit, and the renderer picks a simpler rendering instead. Nothing in this
module raises on malformed content.
"""

import re
from dataclasses import dataclass, field


# -----------------------------------------------------------------------------
# Heading identifiers
# -----------------------------------------------------------------------------


def slugify(text: str) -> str:
    """
    Derive a URL-safe heading identifier.

    "Hello, World! & Friends" -> "hello-world-and-friends"
    """
    slug = str(text).lower().strip()
    slug = re.sub(r"\s+", "-", slug)
    slug = slug.replace("&", "-and-")
    slug = re.sub(r"[^\w\-]+", "", slug, flags=re.ASCII)
    return re.sub(r"--+", "-", slug)


# -----------------------------------------------------------------------------
# Callouts
# -----------------------------------------------------------------------------

CALLOUT_PATTERN = re.compile(
    r"^\[!(NOTE|TIP|WARNING|CAUTION|IMPORTANT)\]\s*", re.IGNORECASE
)

# callout type -> (title, icon name)
CALLOUT_CONFIG = {
    "note": ("Note", "info"),
    "tip": ("Tip", "lightbulb"),
    "warning": ("Warning", "alert-triangle"),
    "caution": ("Caution", "alert-circle"),
    "important": ("Important", "alert-circle"),
}


@dataclass(frozen=True)
class CalloutMatch:
    """A block quote recognised as a callout."""

    type: str  # note | tip | warning | caution | important
    title: str
    icon: str
    body: str


def match_callout(text: str) -> CalloutMatch | None:
    """
    Check whether flattened block quote text starts with a callout marker.

    The marker must sit at the very start of the (trimmed) text; a marker
    anywhere else is ordinary quote content.
    """
    full_text = text.strip()
    match = CALLOUT_PATTERN.match(full_text)
    if not match:
        return None

    callout_type = match.group(1).lower()
    title, icon = CALLOUT_CONFIG[callout_type]
    return CalloutMatch(
        type=callout_type,
        title=title,
        icon=icon,
        body=full_text[match.end() :].strip(),
    )


# -----------------------------------------------------------------------------
# Code fences
# -----------------------------------------------------------------------------

# Fence tags rendered as widgets instead of highlighted code. Exact match on the
# lowercased tag only; the language aliases below never apply to these.
FENCE_VARIANTS = {
    "snippet": "snippet",
    "command": "snippet",
    "terminal": "terminal",
    "output": "terminal",
    "stack-trace": "stack_trace",
    "error": "stack_trace",
    "env": "env",
    "mermaid": "mermaid",
}

# Common markdown shorthand -> highlighter language name
LANGUAGE_ALIASES = {
    "js": "javascript",
    "ts": "typescript",
    "py": "python",
    "sh": "shell",
    "bash": "shell",
    "zsh": "shell",
    "yml": "yaml",
    "md": "markdown",
    "rb": "ruby",
    "go": "go",
    "rs": "rust",
    "vue": "vue",
    "svelte": "svelte",
}


def fence_language(info: str | None) -> str | None:
    """Lowercased language tag from a fence info string ("py title=x" -> "py")."""
    if not info:
        return None
    parts = info.split()
    if not parts:
        return None
    return parts[0].lower()


def fence_variant(tag: str) -> str | None:
    """Widget variant for a reserved fence tag, or None for ordinary code."""
    return FENCE_VARIANTS.get(tag.lower())


def normalize_language(tag: str) -> str:
    """Map shorthand language tags to full names; unknown tags pass through lowercased."""
    lower = tag.lower()
    return LANGUAGE_ALIASES.get(lower, lower)


def clean_code(raw: str) -> str:
    """Strip a single trailing newline, then surrounding whitespace."""
    if raw.endswith("\n"):
        raw = raw[:-1]
    return raw.strip()


# -----------------------------------------------------------------------------
# Environment variables
# -----------------------------------------------------------------------------

_QUOTED_VALUE = re.compile(r"""^(['"])(.*)\1$""", re.DOTALL)


@dataclass(frozen=True)
class EnvPair:
    name: str
    value: str


def parse_env_pairs(code: str) -> list[EnvPair]:
    """
    Parse KEY=value lines.

    Blank lines and # comments are skipped. The value is split on the first
    "=", trimmed, and one layer of matching quotes is removed. A line with no
    "=" becomes a variable with an empty value.
    """
    pairs = []
    for line in code.split("\n"):
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            pairs.append(EnvPair(name=line, value=""))
            continue
        name, value = line.split("=", 1)
        value = value.strip()
        quoted = _QUOTED_VALUE.match(value)
        if quoted:
            value = quoted.group(2)
        pairs.append(EnvPair(name=name.strip(), value=value))
    return pairs


# -----------------------------------------------------------------------------
# Stack traces
# -----------------------------------------------------------------------------

# "TypeError: message" on an unindented line
_ERROR_HEADER = re.compile(r"^([A-Za-z_$][\w$.]*)\s*:\s*(.*)$")
# JavaScript: "at fn (file:line:col)" / "at file:line:col"
_JS_FRAME = re.compile(r"^\s*at\s+(?:(?P<function>.+?)\s+\()?(?P<file>.+?):(?P<line>\d+)(?::(?P<column>\d+))?\)?$")
_JS_FRAME_BARE = re.compile(r"^\s*at\s+(?P<function>.+)$")
# Python: 'File "x.py", line 3, in func'
_PY_FRAME = re.compile(r'^\s*File "(?P<file>.+?)", line (?P<line>\d+)(?:, in (?P<function>.+))?$')

_INTERNAL_MARKERS = ("node:", "node_modules", "internal/", "site-packages", "<frozen")


@dataclass(frozen=True)
class StackFrame:
    raw: str
    function: str | None = None
    file: str | None = None
    line: int | None = None
    column: int | None = None
    is_internal: bool = False
    source: str | None = None  # Python tracebacks print the offending line


@dataclass(frozen=True)
class StackTrace:
    raw: str
    error_type: str | None = None
    message: str = ""
    frames: list[StackFrame] = field(default_factory=list)


def _is_internal(file: str | None) -> bool:
    return bool(file) and any(marker in file for marker in _INTERNAL_MARKERS)


def _parse_frame(line: str) -> StackFrame | None:
    stripped = line.strip()
    match = _PY_FRAME.match(line)
    if match:
        file = match.group("file")
        return StackFrame(
            raw=stripped,
            function=match.group("function"),
            file=file,
            line=int(match.group("line")),
            is_internal=_is_internal(file),
        )

    match = _JS_FRAME.match(line)
    if match:
        file = match.group("file")
        column = match.group("column")
        return StackFrame(
            raw=stripped,
            function=match.group("function"),
            file=file,
            line=int(match.group("line")),
            column=int(column) if column else None,
            is_internal=_is_internal(file),
        )

    match = _JS_FRAME_BARE.match(line)
    if match:
        return StackFrame(raw=stripped, function=match.group("function"))

    return None


def parse_stack_trace(trace: str) -> StackTrace:
    """
    Parse a JavaScript or Python stack trace into error + frames.

    The error header is the first unindented "Type: message" line (the first
    line for JavaScript, the last for Python). Lines that are neither the
    header nor a recognisable frame are ignored, except the source line
    Python prints under each frame. Without a header the first non-empty line
    becomes the message.
    """
    frames: list[StackFrame] = []
    error_type = None
    message = None
    first_line = None

    for line in trace.split("\n"):
        if not line.strip():
            continue
        if first_line is None:
            first_line = line.strip()

        frame = _parse_frame(line)
        if frame is not None:
            frames.append(frame)
            continue

        if error_type is None and not line[:1].isspace():
            header = _ERROR_HEADER.match(line)
            if header:
                error_type, message = header.group(1), header.group(2).strip()
                continue

        if frames and line[:1].isspace() and frames[-1].source is None and frames[-1].file:
            previous = frames[-1]
            frames[-1] = StackFrame(
                raw=previous.raw,
                function=previous.function,
                file=previous.file,
                line=previous.line,
                column=previous.column,
                is_internal=previous.is_internal,
                source=line.strip(),
            )

    if message is None:
        message = first_line or ""

    return StackTrace(raw=trace, error_type=error_type, message=message, frames=frames)


# -----------------------------------------------------------------------------
# Terminal output (ANSI SGR colours)
# -----------------------------------------------------------------------------

_ANSI_ESCAPE = re.compile(r"\x1b\[([0-9;]*)([A-Za-z])")

_ANSI_COLORS = {
    30: "black",
    31: "red",
    32: "green",
    33: "yellow",
    34: "blue",
    35: "magenta",
    36: "cyan",
    37: "white",
}


@dataclass(frozen=True)
class AnsiSegment:
    """A run of terminal text with the CSS classes its SGR state maps to."""

    text: str
    classes: tuple[str, ...] = ()


def strip_ansi(text: str) -> str:
    return _ANSI_ESCAPE.sub("", text)


def split_ansi(text: str) -> list[AnsiSegment]:
    """
    Split terminal output into styled segments.

    Supports reset, bold, dim, italic, underline and the 8 standard plus 8
    bright foreground colours. Other escape sequences are dropped.
    """
    segments = []
    bold = dim = italic = underline = False
    color = None
    position = 0

    def emit(chunk: str) -> None:
        if not chunk:
            return
        classes = []
        if bold:
            classes.append("ansi-bold")
        if dim:
            classes.append("ansi-dim")
        if italic:
            classes.append("ansi-italic")
        if underline:
            classes.append("ansi-underline")
        if color:
            classes.append(f"ansi-{color}")
        segments.append(AnsiSegment(text=chunk, classes=tuple(classes)))

    for match in _ANSI_ESCAPE.finditer(text):
        emit(text[position : match.start()])
        position = match.end()
        if match.group(2) != "m":
            continue

        codes = [int(c) for c in match.group(1).split(";") if c.isdigit()] or [0]
        for code in codes:
            if code == 0:
                bold = dim = italic = underline = False
                color = None
            elif code == 1:
                bold = True
            elif code == 2:
                dim = True
            elif code == 3:
                italic = True
            elif code == 4:
                underline = True
            elif code == 22:
                bold = dim = False
            elif code == 23:
                italic = False
            elif code == 24:
                underline = False
            elif code == 39:
                color = None
            elif code in _ANSI_COLORS:
                color = _ANSI_COLORS[code]
            elif code - 60 in _ANSI_COLORS:
                color = f"bright-{_ANSI_COLORS[code - 60]}"

    emit(text[position:])
    return segments
