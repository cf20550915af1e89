"""Tests for model-output parsing and result shaping."""

import pytest

from link_summarizer.schemas import Chapter, ParsedOk, ParseFailed, Reply, SummarizeResult, parse_chapters, parse_reply


class TestParseReply:
    def test_valid_object(self):
        parsed = parse_reply('{"main": "A short synopsis.", "comment": ""}')

        assert isinstance(parsed, ParsedOk)
        assert parsed.value == Reply(main="A short synopsis.", comment="")

    def test_code_fenced_object(self):
        parsed = parse_reply('```json\n{"main": "Synopsis", "comment": "Readers agree"}\n```')

        assert isinstance(parsed, ParsedOk)
        assert parsed.value.comment == "Readers agree"

    @pytest.mark.parametrize("content", ["not json", "", None, "null", '"just a string"', '{"comment": "no main"}', "[]"])
    def test_failures_are_tagged(self, content):
        assert isinstance(parse_reply(content), ParseFailed)


class TestParseChapters:
    def test_valid_array(self):
        parsed = parse_chapters('[{"time": "00:00", "summarize": "intro"}, {"time": "05:00", "summarize": "main topic"}]')

        assert isinstance(parsed, ParsedOk)
        assert parsed.value == [Chapter(time="00:00", summarize="intro"), Chapter(time="05:00", summarize="main topic")]

    def test_empty_array_is_valid(self):
        parsed = parse_chapters("[]")
        assert isinstance(parsed, ParsedOk)
        assert parsed.value == []

    def test_numeric_time_is_read_as_text(self):
        parsed = parse_chapters('[{"time": 0, "summarize": "intro"}, {"time": 90.5, "summarize": "demo"}]')

        assert isinstance(parsed, ParsedOk)
        assert [chapter.to_line() for chapter in parsed.value] == ["0 - intro", "90.5 - demo"]

    @pytest.mark.parametrize("content", ["not json", "null", '{"time": "00:00", "summarize": "x"}', '[{"time": "00:00"}]'])
    def test_failures_are_tagged(self, content):
        assert isinstance(parse_chapters(content), ParseFailed)


class TestSummarizeResult:
    def test_failure_exposes_only_ok(self):
        assert SummarizeResult.failure().to_response() == {"ok": False}

    def test_success_keeps_null_comment(self):
        result = SummarizeResult.success("https://youtu.be/abc", Reply(main="00:00 - intro", comment=None))

        assert result.to_response() == {
            "ok": True,
            "url": "https://youtu.be/abc",
            "reply": {"main": "00:00 - intro", "comment": None},
        }

    def test_chapter_line(self):
        assert Chapter(time="00:00", summarize="intro").to_line() == "00:00 - intro"
