from io import StringIO
from unittest.mock import MagicMock

import pytest
from prompt_toolkit.document import Document

from rye.io import AutoCompleter, InputOutput, ensure_hash_prefix


def test_ensure_hash_prefix():
    assert ensure_hash_prefix("00cc00") == "#00cc00"
    assert ensure_hash_prefix("fff") == "#fff"
    assert ensure_hash_prefix("#00cc00") == "#00cc00"
    assert ensure_hash_prefix("red") == "red"
    assert ensure_hash_prefix("zzzzzz") == "zzzzzz"
    assert ensure_hash_prefix(None) is None


def test_colors_are_dropped_without_pretty():
    io = InputOutput(pretty=False, tool_error_color="red", output=StringIO())

    assert io.tool_error_color is None
    assert io.user_input_color is None


def test_no_color_disables_pretty(monkeypatch):
    monkeypatch.setenv("NO_COLOR", "1")

    io = InputOutput(output=StringIO())

    assert io.pretty is False


def test_dumb_terminal_disables_fancy_input(monkeypatch):
    monkeypatch.delenv("NO_COLOR", raising=False)
    monkeypatch.setenv("TERM", "dumb")

    io = InputOutput(output=StringIO())

    assert io.pretty is False
    assert io.fancy_input is False
    assert io._get_prompt_session() is None


def test_hex_colors_get_a_hash(monkeypatch):
    monkeypatch.delenv("NO_COLOR", raising=False)
    monkeypatch.setenv("TERM", "xterm")

    io = InputOutput(user_input_color="00cc00", output=StringIO())

    assert io.user_input_color == "#00cc00"


def test_tool_messages_are_written(plain_io):
    plain_io.tool_output("one", "two")
    plain_io.tool_warning("careful")
    plain_io.tool_error("broken [not markup]")

    assert plain_io.console.file.getvalue() == "one two\ncareful\nbroken [not markup]\n"


def test_rule(plain_io):
    plain_io.rule("═")
    assert plain_io.console.file.getvalue() == "═" * 60 + "\n"


async def test_get_input_strips(plain_io, mocker):
    mocker.patch("builtins.input", return_value="  hello  ")

    assert await plain_io.get_input() == "hello"


@pytest.mark.parametrize("error", [EOFError, KeyboardInterrupt])
async def test_get_input_end_of_input(plain_io, mocker, error):
    mocker.patch("builtins.input", side_effect=error)

    assert await plain_io.get_input() is None


def test_markdown_sink_follows_pretty(plain_io):
    sink = plain_io.markdown_sink()

    assert sink.console is plain_io.console
    assert sink.pretty is False


class TestAutoCompleter:
    def completions(self, commands, text):
        completer = AutoCompleter(commands)
        return [c.text for c in completer.get_completions(Document(text), MagicMock())]

    def test_command_names(self):
        commands = MagicMock()
        commands.get_commands.return_value = ["/exit", "/help", "/list", "/load"]

        assert self.completions(commands, "/l") == ["/list", "/load"]

    def test_command_arguments(self):
        commands = MagicMock()
        commands.get_completions.return_value = ["rust-notes", "python-notes"]

        assert self.completions(commands, "/load ru") == ["rust-notes"]
        commands.get_completions.assert_called_with("/load")

    def test_plain_text_is_not_completed(self):
        commands = MagicMock()

        assert self.completions(commands, "hello") == []
