"""Tests for the template scanner: tag kinds, positions, standalone flags, errors."""
from __future__ import annotations

import pytest

from whisker.core.template.elements import Delimiters
from whisker.core.template.errors import ParseErrorKind, ParseFailure
from whisker.core.template.scanner import Scanner, Tag, TagKind, Text


def _tags(text: str, delimiters: Delimiters = Delimiters()) -> list:
    return [t for t in Scanner(text, delimiters).tokens() if isinstance(t, Tag)]


def _fail(text: str) -> ParseFailure:
    with pytest.raises(ParseFailure) as exc:
        Scanner(text).tokens()
    return exc.value


# ============================================================================
# Tag kinds
# ============================================================================


class TestTagKinds:
    @pytest.mark.parametrize(
        "source,kind,key",
        [
            ("{{name}}", TagKind.ESCAPED, "name"),
            ("{{{name}}}", TagKind.RAW, "name"),
            ("{{&name}}", TagKind.RAW, "name"),
            ("{{#items}}", TagKind.SECTION, "items"),
            ("{{^items}}", TagKind.INVERTED, "items"),
            ("{{/items}}", TagKind.CLOSE, "items"),
            ("{{>user}}", TagKind.PARTIAL, "user"),
            ("{{<layout}}", TagKind.PARENT, "layout"),
            ("{{$title}}", TagKind.BLOCK, "title"),
            ("{{! a comment }}", TagKind.COMMENT, "a comment"),
        ],
    )
    def test_sigil_selects_kind(self, source: str, kind: TagKind, key: str) -> None:
        (tag,) = _tags(source)
        assert tag.kind is kind
        assert tag.key == key

    def test_whitespace_around_key_is_stripped(self) -> None:
        (tag,) = _tags("{{  user.name  }}")
        assert tag.key == "user.name"

    def test_text_runs_cover_static_content(self) -> None:
        text = "Hello, {{name}}!"
        tokens = Scanner(text).tokens()
        assert [type(t) for t in tokens] == [Text, Tag, Text]
        first, _, last = tokens
        assert text[first.start:first.end] == "Hello, "
        assert text[last.start:last.end] == "!"

    def test_text_without_tags_is_single_run(self) -> None:
        tokens = Scanner("just text\n").tokens()
        assert tokens == [Text(0, 10)]


# ============================================================================
# Delimiters
# ============================================================================


class TestDelimiters:
    def test_set_delimiter_tag_switches_pair_for_rest_of_text(self) -> None:
        tags = _tags("{{=<% %>=}}<%name%>{{literal}}")
        assert [t.kind for t in tags] == [TagKind.DELIMITERS, TagKind.ESCAPED]
        assert tags[0].new_delimiters == Delimiters("<%", "%>")
        assert tags[1].key == "name"
        assert tags[1].delimiters == Delimiters("<%", "%>")

    def test_triple_mustache_under_custom_delimiters(self) -> None:
        (_, tag) = _tags("{{=| |=}}|{raw}|")
        assert tag.kind is TagKind.RAW
        assert tag.key == "raw"

    def test_initial_delimiters_are_honoured(self) -> None:
        (tag,) = _tags("[[name]]", Delimiters("[[", "]]"))
        assert tag.key == "name"

    @pytest.mark.parametrize("body", ["{{=<%=}}", "{{=a b c=}}", "{{= =}}", "{{=a= b=}}"])
    def test_malformed_declaration(self, body: str) -> None:
        err = _fail(body).error
        assert err.kind is ParseErrorKind.INVALID_DELIMITER_DECLARATION
        assert (err.row, err.col) == (1, 1)


# ============================================================================
# Standalone detection
# ============================================================================


class TestStandalone:
    def test_section_alone_on_line(self) -> None:
        text = "a\n  {{#x}}  \nb"
        (tag, *_rest) = _tags(text + "{{/x}}")
        assert tag.standalone
        assert tag.line_start == 2
        assert text[tag.line_end:] == "b"

    def test_crlf_line_ending(self) -> None:
        text = "{{! note }}\r\nbody"
        (tag,) = _tags(text)
        assert tag.standalone
        assert text[tag.line_end:] == "body"

    def test_standalone_at_end_of_input(self) -> None:
        text = "x\n  {{/x}}"
        (tag,) = [t for t in _tags("{{#x}}" + text) if t.kind is TagKind.CLOSE]
        assert tag.standalone
        assert tag.line_end == len("{{#x}}" + text)

    def test_text_on_line_prevents_standalone(self) -> None:
        (tag, _) = _tags("a {{#x}}\n{{/x}}")
        assert not tag.standalone

    def test_interpolation_never_standalone(self) -> None:
        (tag,) = _tags("  {{name}}  \n")
        assert not tag.standalone

    def test_two_tags_on_one_line_are_not_standalone(self) -> None:
        tags = _tags("{{#a}}{{/a}}\n")
        assert not any(t.standalone for t in tags)


# ============================================================================
# Errors and positions
# ============================================================================


class TestErrors:
    def test_unterminated_tag_reports_open_delimiter_position(self) -> None:
        err = _fail("line one\n  {{name").error
        assert err.kind is ParseErrorKind.UNTERMINATED_TAG
        assert (err.row, err.col) == (2, 3)

    def test_unterminated_triple_mustache(self) -> None:
        err = _fail("{{{name}}").error
        assert err.kind is ParseErrorKind.UNTERMINATED_TAG

    @pytest.mark.parametrize("source", ["{{}}", "{{   }}", "{{#}}", "{{first last}}"])
    def test_empty_or_invalid_key(self, source: str) -> None:
        err = _fail(source).error
        assert err.kind is ParseErrorKind.EMPTY_OR_INVALID_KEY

    def test_comment_may_be_empty_or_contain_spaces(self) -> None:
        tags = _tags("{{!}}{{! two words }}")
        assert [t.kind for t in tags] == [TagKind.COMMENT, TagKind.COMMENT]

    def test_position_is_one_based(self) -> None:
        scanner = Scanner("ab\ncd\n")
        assert scanner.position(0) == (1, 1)
        assert scanner.position(2) == (1, 3)
        assert scanner.position(3) == (2, 1)
        assert scanner.position(4) == (2, 2)
