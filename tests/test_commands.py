"""Tests for project command parsing and matching."""

from pathlib import Path

from projfacts.commands import (
    COMMAND_SCORE,
    command_matches,
    command_result,
    match_commands,
    parse_commands,
)
from projfacts.types import COMMAND_CATEGORY, Command


COMMANDS_MD = """---
# project rules
---

# Project Commands

## Package Manager

**Description**: must use tool X
**Related Docs**: docs/x.md, docs/ci.md
**Last Updated**: 2026-01-01

Details about tool X.

## 代码风格

**描述**: 提交前必须通过 lint 检查
**相关文档**:
**更新时间**: 2026-01-02

## Testing

Every feature needs unit tests.

## Empty Section

**Related Docs**: docs/nothing.md
"""


class TestParseCommands:

    def test_parses_sections_in_order(self):
        commands = parse_commands(COMMANDS_MD)
        assert [c.name for c in commands] == ["Package Manager", "代码风格", "Testing"]

    def test_english_labels(self):
        cmd = parse_commands(COMMANDS_MD)[0]
        assert cmd.description == "must use tool X"
        assert cmd.related_docs == ["docs/x.md", "docs/ci.md"]
        assert cmd.last_updated == "2026-01-01"

    def test_chinese_labels(self):
        cmd = parse_commands(COMMANDS_MD)[1]
        assert cmd.description == "提交前必须通过 lint 检查"
        assert cmd.related_docs == []
        assert cmd.last_updated == "2026-01-02"

    def test_first_plain_line_becomes_description(self):
        cmd = parse_commands(COMMANDS_MD)[2]
        assert cmd.description == "Every feature needs unit tests."
        assert cmd.last_updated == ""

    def test_section_without_description_dropped(self):
        names = [c.name for c in parse_commands(COMMANDS_MD)]
        assert "Empty Section" not in names

    def test_preamble_ignored(self):
        assert parse_commands("# Title\n\nSome intro text that is long.\n") == []

    def test_explicit_description_wins_over_plain_line(self):
        text = "## Rule\n\nplain first line\n**Description**: the real one\n"
        assert parse_commands(text)[0].description == "the real one"

    def test_plain_label_and_fullwidth_colon(self):
        text = "## Rule\nDescription：use the fullwidth colon\n"
        assert parse_commands(text)[0].description == "use the fullwidth colon"

    def test_level_three_headings_stay_in_section(self):
        text = "## Rule\n**Description**: outer\n### Detail\nmore\n"
        commands = parse_commands(text)
        assert len(commands) == 1
        assert commands[0].name == "Rule"

    def test_empty_text(self):
        assert parse_commands("") == []


class TestMatching:

    def _cmd(self, name="Package Manager", description="must use tool X") -> Command:
        return Command(name=name, description=description)

    def test_token_in_name(self):
        assert command_matches(self._cmd(), "which package manager")

    def test_token_in_description(self):
        assert command_matches(self._cmd(), "what TOOL to use")

    def test_no_match(self):
        assert not command_matches(self._cmd(), "deploy kubernetes")

    def test_short_tokens_over_match(self):
        # "a" is a substring of "package"
        assert command_matches(self._cmd(), "a")

    def test_match_commands_filters(self):
        commands = [self._cmd(), self._cmd(name="Code Style", description="lint first")]
        assert [c.name for c in match_commands(commands, "lint")] == ["Code Style"]


class TestCommandResult:

    def test_fields(self):
        cmd = Command(name="Package Manager", description="must use tool X",
                      last_updated="2026-01-01", related_docs=["docs/x.md"])
        result = command_result(cmd, Path("/p/USER_COMMAND.md"))
        assert result.title == "Project command: Package Manager"
        assert result.category == COMMAND_CATEGORY
        assert result.relevance_score == COMMAND_SCORE == 1.0
        assert result.summary == "must use tool X"
        assert result.last_updated == "2026-01-01"
        assert result.related_docs == ["docs/x.md"]
        assert result.path == "/p/USER_COMMAND.md"
