"""Tests for loglines/renderer.py"""

import json

import pytest

from loglines.renderer import (
    COLORS,
    LEVEL_TAGS,
    RESET,
    RecordRenderer,
    colorize,
    render_line,
)


class TestColorize:
    def test_wraps_text(self):
        assert colorize("red", "boom") == f"{COLORS['red']}boom{RESET}"

    def test_disabled(self):
        assert colorize("red", "boom", enabled=False) == "boom"

    def test_unknown_color_is_plain(self):
        assert colorize("chartreuse", "boom") == "boom"


class TestLevelTags:
    def test_tags_align(self):
        assert {len(text) for text, _ in LEVEL_TAGS.values()} == {8}
        assert [text for text, _ in LEVEL_TAGS.values()] == [
            "TRACE > ",
            "DEBUG > ",
            " INFO > ",
            " WARN > ",
            "ERROR > ",
            "FATAL > ",
        ]


class TestRenderRecord:
    def test_plain_rendering(self, sample_record):
        rendered = render_line(json.dumps(sample_record), color=False)
        assert rendered == 'ERROR > [my-app.db] Could not connect\n{\n  "retries": 3\n}'

    def test_colored_rendering(self, sample_record):
        rendered = render_line(json.dumps(sample_record))
        header, _, body = rendered.partition("\n")
        assert header.startswith(f"{COLORS['red']}ERROR > {RESET}")
        assert f"[{COLORS['cyan']}my-app.db{RESET}]" in header
        assert header.endswith(f"{COLORS['white']}Could not connect{RESET}")
        assert body.startswith(COLORS["gray"])
        assert '"retries": 3' in body

    @pytest.mark.parametrize("level", list(LEVEL_TAGS))
    def test_every_level_tagged(self, sample_record, level):
        line = json.dumps({**sample_record, "level": level})
        assert render_line(line, color=False).startswith(LEVEL_TAGS[level][0])

    def test_unknown_level_has_no_tag(self, sample_record):
        line = json.dumps({**sample_record, "level": "notice"})
        assert render_line(line, color=False).startswith("[my-app.db] Could not connect\n")

    def test_empty_context(self, sample_record):
        line = json.dumps({**sample_record, "context": {}})
        assert render_line(line, color=False).endswith("\n{}")

    def test_nested_context_indented(self, sample_record):
        line = json.dumps({**sample_record, "context": {"db": {"host": "h"}}})
        body = render_line(line, color=False).split("\n", 1)[1]
        assert body == '{\n  "db": {\n    "host": "h"\n  }\n}'

    def test_timestamp_ignored(self, sample_record):
        line = json.dumps({**sample_record, "timestamp": "2025-05-15T14:30:00.123Z"})
        assert render_line(line, color=False).startswith("ERROR > [my-app.db]")


class TestPassThrough:
    def test_non_json_line(self):
        assert render_line("plain text from another tool", color=False) == (
            "plain text from another tool"
        )

    def test_non_json_line_dimmed(self):
        assert render_line("plain", color=True) == f"{COLORS['gray']}plain{RESET}"

    def test_missing_context(self, sample_record):
        del sample_record["context"]
        line = json.dumps(sample_record)
        assert render_line(line, color=False) == line

    @pytest.mark.parametrize("line", ["", "42", "null", "[1, 2]", '"text"', "{"])
    def test_foreign_values(self, line):
        assert render_line(line, color=False) == line

    def test_deeply_nested_input_does_not_crash(self):
        line = "[" * 100000 + "]" * 100000
        assert render_line(line, color=False) == line


class TestRendererStats:
    def test_counts_records_and_foreign_lines(self, sample_record):
        renderer = RecordRenderer(color=False)
        renderer.render(json.dumps(sample_record))
        renderer.render("not json")
        renderer.render('{"level": "info"}')

        stats = renderer.validator.get_stats()
        assert stats["checked"] == 3
        assert stats["records"] == 1
        assert stats["rejected"] == 2
