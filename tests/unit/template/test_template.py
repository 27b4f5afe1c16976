"""Tests for parse entry points and the Template type."""
from __future__ import annotations

import logging

import pytest

from whisker.core.exceptions import TemplateNotFoundError, TemplateSyntaxError, WhiskerError
from whisker.core.template import (
    Delimiters,
    Interpolation,
    LastError,
    ParseErrorKind,
    ParseResult,
    Section,
    StaticText,
    Template,
    TemplateOptions,
    parse_file,
    parse_text,
)


class TestParseText:
    def test_success_holds_template(self) -> None:
        result = parse_text("Hello, {{name}}!", name="greeting")
        assert result.ok
        assert result.error is None
        assert result.template.name == "greeting"
        assert len(result.template) == 3

    def test_failure_holds_last_error_without_raising(self) -> None:
        result = parse_text("{{#a}}\n{{/b}}")
        assert not result.ok
        assert result.template is None
        assert result.error == LastError(
            kind=ParseErrorKind.MISMATCHED_TAG, row=2, col=1, detail="expected '/a', found '/b'"
        )

    def test_unwrap_raises_syntax_error(self) -> None:
        with pytest.raises(TemplateSyntaxError) as exc:
            parse_text("{{name").unwrap()
        assert exc.value.kind is ParseErrorKind.UNTERMINATED_TAG

    def test_unwrap_empty_result_raises_whisker_error(self) -> None:
        with pytest.raises(WhiskerError, match="neither a template nor an error"):
            ParseResult().unwrap()

    def test_options_delimiters(self) -> None:
        options = TemplateOptions(delimiters=Delimiters("<%", "%>"))
        template = parse_text("<%name%> {{name}}", options).unwrap()
        assert template.elements == (Interpolation("name"), StaticText(" {{name}}"))
        assert template.options is options

    def test_independent_parses_do_not_share_errors(self) -> None:
        bad = parse_text("{{/x}}")
        good = parse_text("fine")
        assert bad.error is not None
        assert good.error is None

    def test_failure_is_logged_at_debug(self, caplog) -> None:
        with caplog.at_level(logging.DEBUG, logger="whisker.core.template.template"):
            parse_text("{{", name="broken")
        assert "broken" in caplog.text
        assert "UnterminatedTag" in caplog.text


class TestTemplate:
    def test_from_text_raises_with_position(self) -> None:
        with pytest.raises(TemplateSyntaxError) as exc:
            Template.from_text("ok\n{{#open}}", name="page")
        err = exc.value
        assert (err.row, err.col) == (2, 1)
        assert err.error.kind is ParseErrorKind.UNCLOSED_TAG
        assert str(err).startswith("UnclosedTag at page:2:1")

    def test_syntax_error_is_value_error_and_whisker_error(self) -> None:
        with pytest.raises(ValueError):
            Template.from_text("{{}}")
        with pytest.raises(WhiskerError):
            Template.from_text("{{}}")

    def test_syntax_error_json_payload(self) -> None:
        with pytest.raises(TemplateSyntaxError) as exc:
            Template.from_text("{{}}")
        payload = exc.value.to_json_error()
        assert payload["code"] == "TemplateSyntaxError"
        assert payload["context"]["kind"] == "EmptyOrInvalidKey"
        assert payload["context"]["row"] == 1

    def test_walk_visits_depth_first(self) -> None:
        template = Template.from_text("a{{#s}}b{{x}}{{/s}}c")
        kinds = [type(e).__name__ for e in template.walk()]
        assert kinds == ["StaticText", "Section", "StaticText", "Interpolation", "StaticText"]

    def test_template_is_immutable(self) -> None:
        template = Template.from_text("x")
        with pytest.raises(AttributeError):
            template.name = "other"  # type: ignore[misc]

    def test_section_values_are_tuples(self) -> None:
        (section,) = Template.from_text("{{#s}}x{{/s}}").elements
        assert isinstance(section, Section)
        assert isinstance(section.children, tuple)


class TestParseFile:
    def test_reads_and_names_from_stem(self, write_file) -> None:
        path = write_file("views/page.mustache", "Hi {{name}}")
        template = parse_file(path)
        assert template.name == "page"
        assert template.elements[1] == Interpolation("name")

    def test_missing_file(self, tmp_path) -> None:
        with pytest.raises(TemplateNotFoundError) as exc:
            parse_file(tmp_path / "nope.mustache")
        assert isinstance(exc.value, FileNotFoundError)
        assert exc.value.context["path"].endswith("nope.mustache")

    def test_syntax_error_names_file(self, write_file) -> None:
        path = write_file("bad.mustache", "{{#a}}")
        with pytest.raises(TemplateSyntaxError) as exc:
            parse_file(path)
        assert exc.value.context["template"] == "bad"
