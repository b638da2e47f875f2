import os
from pathlib import Path

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.history import FileHistory, InMemoryHistory
from prompt_toolkit.styles import Style
from rich.console import Console
from rich.text import Text

from rye.render import MARKDOWN_THEME, MarkdownSink

PROMPT = "➤ "
RULE_WIDTH = 60


def ensure_hash_prefix(color):
    """Add a # to bare hex colors like ``00cc00``."""
    if not color:
        return color
    if isinstance(color, str) and len(color) in (3, 6) and not color.startswith("#"):
        try:
            int(color, 16)
        except ValueError:
            return color
        return f"#{color}"
    return color


class AutoCompleter(Completer):
    """Complete /command names, then the arguments of the command being typed."""

    def __init__(self, commands):
        self.commands = commands

    def get_completions(self, document, complete_event):
        text = document.text_before_cursor
        if not text.startswith("/"):
            return

        words = text.split()
        if len(words) <= 1 and not text.endswith(" "):
            for cmd in self.commands.get_commands():
                if cmd.startswith(text):
                    yield Completion(cmd, start_position=-len(text))
            return

        partial = "" if text.endswith(" ") else words[-1]
        candidates = self.commands.get_completions(words[0]) or []
        for candidate in candidates:
            if candidate.startswith(partial):
                yield Completion(candidate, start_position=-len(partial))


class InputOutput:
    def __init__(
        self,
        pretty=True,
        input_history_file=None,
        output=None,
        user_input_color="blue",
        tool_output_color=None,
        tool_warning_color="#FFA500",
        tool_error_color="red",
        assistant_output_color="blue",
        code_theme="default",
        encoding="utf-8",
        fancy_input=True,
    ):
        no_color = os.environ.get("NO_COLOR")
        if no_color is not None and no_color != "":
            pretty = False

        self.is_dumb_terminal = os.environ.get("TERM", "") == "dumb"
        if self.is_dumb_terminal:
            pretty = False
            fancy_input = False

        self.pretty = pretty
        if pretty:
            self.user_input_color = ensure_hash_prefix(user_input_color)
            self.tool_output_color = ensure_hash_prefix(tool_output_color)
            self.tool_warning_color = ensure_hash_prefix(tool_warning_color)
            self.tool_error_color = ensure_hash_prefix(tool_error_color)
            self.assistant_output_color = ensure_hash_prefix(assistant_output_color)
        else:
            self.user_input_color = None
            self.tool_output_color = None
            self.tool_warning_color = None
            self.tool_error_color = None
            self.assistant_output_color = None

        self.code_theme = code_theme
        self.encoding = encoding
        self.input_history_file = input_history_file
        self.fancy_input = fancy_input

        self.console = Console(
            file=output,
            theme=MARKDOWN_THEME,
            no_color=not pretty,
            highlight=False,
        )

        self.prompt_session = None
        self.commands = None

    def markdown_sink(self):
        return MarkdownSink(self.console, pretty=self.pretty, code_theme=self.code_theme)

    def attach_commands(self, commands):
        """Enable /command completion at the prompt."""
        self.commands = commands
        self.prompt_session = None

    def _get_prompt_session(self):
        if not self.fancy_input:
            return None
        if self.prompt_session is None:
            if self.input_history_file:
                history_path = Path(self.input_history_file).expanduser()
                history_path.parent.mkdir(parents=True, exist_ok=True)
                history = FileHistory(str(history_path))
            else:
                history = InMemoryHistory()

            completer = AutoCompleter(self.commands) if self.commands else None
            style = None
            if self.user_input_color:
                style = Style.from_dict({"": self.user_input_color})
            self.prompt_session = PromptSession(
                history=history,
                completer=completer,
                complete_while_typing=False,
                style=style,
            )
        return self.prompt_session

    async def get_input(self, prompt=PROMPT):
        """
        Read one line from the user.

        Returns:
            The stripped line, or None on end of input or Ctrl-C
        """
        session = self._get_prompt_session()
        try:
            if session:
                line = await session.prompt_async(prompt)
            else:
                line = input(prompt)
        except (EOFError, KeyboardInterrupt):
            return None
        return line.strip()

    def _print(self, color, messages, bold=False):
        text = " ".join(str(message) for message in messages)
        style = color or ""
        if bold and style:
            style = f"bold {style}"
        self.console.print(Text(text, style=style), soft_wrap=True)

    def tool_output(self, *messages, bold=False):
        self._print(self.tool_output_color, messages, bold=bold)

    def tool_warning(self, message=""):
        self._print(self.tool_warning_color, [message])

    def tool_error(self, message=""):
        self._print(self.tool_error_color, [message])

    def assistant_heading(self, message):
        self._print(self.assistant_output_color, [message], bold=True)

    def rule(self, char="─"):
        self.console.print(char * RULE_WIDTH, style=self.user_input_color or None, soft_wrap=True)
