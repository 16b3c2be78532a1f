"""Tests for the renderer's text transforms."""

import pytest

from core.rendering.transforms import (
    EnvPair,
    clean_code,
    fence_language,
    fence_variant,
    match_callout,
    normalize_language,
    parse_env_pairs,
    parse_stack_trace,
    slugify,
    split_ansi,
    strip_ansi,
)


class TestSlugify:
    @pytest.mark.parametrize(
        "text,expected",
        [
            ("Hello, World! & Friends", "hello-world-and-friends"),
            ("  Cells   and Scripts ", "cells-and-scripts"),
            ("Already-slugged", "already-slugged"),
            ("C++ / Rust", "c-rust"),
            ("Déjà vu", "dj-vu"),
            ("", ""),
        ],
    )
    def test_slugify(self, text, expected):
        assert slugify(text) == expected


class TestMatchCallout:
    def test_tip_marker(self):
        """[!TIP] gives title Tip and the rest as body."""
        match = match_callout("[!TIP]   Use the dev chain.")
        assert match.type == "tip"
        assert match.title == "Tip"
        assert match.body == "Use the dev chain."

    @pytest.mark.parametrize(
        "marker,callout_type,title",
        [
            ("[!NOTE]", "note", "Note"),
            ("[!tip]", "tip", "Tip"),
            ("[!Warning]", "warning", "Warning"),
            ("[!CAUTION]", "caution", "Caution"),
            ("[!IMPORTANT]", "important", "Important"),
        ],
    )
    def test_all_types_case_insensitive(self, marker, callout_type, title):
        match = match_callout(f"{marker}\nBody")
        assert match.type == callout_type
        assert match.title == title
        assert match.body == "Body"

    def test_marker_must_be_at_start(self):
        assert match_callout("Remember [!NOTE] this") is None

    def test_unknown_keyword(self):
        assert match_callout("[!DANGER] careful") is None

    def test_leading_whitespace_is_trimmed_first(self):
        assert match_callout("\n  [!NOTE] x").body == "x"

    def test_marker_only(self):
        assert match_callout("[!NOTE]").body == ""


class TestFenceTags:
    def test_fence_language_takes_first_word(self):
        assert fence_language("Python title=app.py") == "python"
        assert fence_language("") is None
        assert fence_language(None) is None
        assert fence_language("   ") is None

    @pytest.mark.parametrize(
        "tag,variant",
        [
            ("snippet", "snippet"),
            ("command", "snippet"),
            ("terminal", "terminal"),
            ("OUTPUT", "terminal"),
            ("stack-trace", "stack_trace"),
            ("error", "stack_trace"),
            ("Env", "env"),
            ("mermaid", "mermaid"),
            ("bash", None),
            ("stack", None),
        ],
    )
    def test_fence_variant(self, tag, variant):
        assert fence_variant(tag) == variant

    @pytest.mark.parametrize(
        "tag,language",
        [
            ("js", "javascript"),
            ("py", "python"),
            ("sh", "shell"),
            ("bash", "shell"),
            ("ZSH", "shell"),
            ("yml", "yaml"),
            ("md", "markdown"),
            ("rb", "ruby"),
            ("Solidity", "solidity"),
        ],
    )
    def test_normalize_language(self, tag, language):
        assert normalize_language(tag) == language

    def test_clean_code_strips_one_newline_then_trims(self):
        assert clean_code("  x = 1\n\n") == "x = 1"
        assert clean_code("a\n") == "a"


class TestParseEnvPairs:
    def test_example_block(self):
        """Comments and blank lines skipped, quotes stripped."""
        pairs = parse_env_pairs('API_KEY="abc123"\nPORT=8080\n# comment\n\n')
        assert pairs == [EnvPair(name="API_KEY", value="abc123"), EnvPair(name="PORT", value="8080")]

    def test_splits_on_first_equals(self):
        assert parse_env_pairs("URL=postgres://u:p@h/db?a=b") == [
            EnvPair(name="URL", value="postgres://u:p@h/db?a=b")
        ]

    def test_line_without_equals(self):
        assert parse_env_pairs("JUST_A_NAME") == [EnvPair(name="JUST_A_NAME", value="")]

    def test_single_quotes_and_whitespace(self):
        assert parse_env_pairs("  NAME = 'value with spaces'  ") == [
            EnvPair(name="NAME", value="value with spaces")
        ]

    def test_only_matching_quotes_are_stripped(self):
        assert parse_env_pairs("A=\"half'") == [EnvPair(name="A", value="\"half'")]
        assert parse_env_pairs('B=""x""') == [EnvPair(name="B", value='"x"')]


class TestParseStackTrace:
    def test_javascript_trace(self):
        trace = parse_stack_trace(
            "TypeError: Cannot read properties of undefined (reading 'lock')\n"
            "    at buildTransaction (/app/src/tx.js:42:17)\n"
            "    at /app/src/index.js:8:3\n"
            "    at node:internal/main/run_main_module:23:47"
        )
        assert trace.error_type == "TypeError"
        assert trace.message == "Cannot read properties of undefined (reading 'lock')"
        assert len(trace.frames) == 3

        first = trace.frames[0]
        assert first.function == "buildTransaction"
        assert first.file == "/app/src/tx.js"
        assert first.line == 42
        assert first.column == 17
        assert first.is_internal is False

        assert trace.frames[1].function is None
        assert trace.frames[1].file == "/app/src/index.js"
        assert trace.frames[2].is_internal is True

    def test_python_traceback(self):
        trace = parse_stack_trace(
            "Traceback (most recent call last):\n"
            '  File "/app/main.py", line 10, in <module>\n'
            "    run()\n"
            '  File "/app/main.py", line 5, in run\n'
            "    raise ValueError('bad capacity')\n"
            "ValueError: bad capacity"
        )
        assert trace.error_type == "ValueError"
        assert trace.message == "bad capacity"
        assert [f.function for f in trace.frames] == ["<module>", "run"]
        assert trace.frames[0].line == 10
        assert trace.frames[0].source == "run()"
        assert trace.frames[1].source == "raise ValueError('bad capacity')"

    def test_unparsable_trace_keeps_first_line_as_message(self):
        trace = parse_stack_trace("something went wrong\nand more")
        assert trace.error_type is None
        assert trace.message == "something went wrong"
        assert trace.frames == []
        assert trace.raw == "something went wrong\nand more"

    def test_empty_trace(self):
        trace = parse_stack_trace("")
        assert trace.message == ""
        assert trace.frames == []


class TestAnsi:
    def test_strip_ansi(self):
        assert strip_ansi("\x1b[32mok\x1b[0m done") == "ok done"

    def test_split_ansi_colors(self):
        segments = split_ansi("plain \x1b[1;31merror\x1b[0m \x1b[92mbright")
        assert [(s.text, s.classes) for s in segments] == [
            ("plain ", ()),
            ("error", ("ansi-bold", "ansi-red")),
            (" ", ()),
            ("bright", ("ansi-bright-green",)),
        ]

    def test_non_color_sequences_dropped(self):
        assert [s.text for s in split_ansi("a\x1b[2Kb")] == ["a", "b"]
