"""Display sink that paints Markdown blocks to the terminal with rich."""

from rich.markdown import Markdown
from rich.padding import Padding
from rich.theme import Theme

from rye.exceptions import RenderError
from rye.streaming import FENCE_MARKER

MARKDOWN_THEME = Theme(
    {
        "markdown.h1": "bold cyan",
        "markdown.h2": "bold cyan",
        "markdown.h3": "bold cyan",
        "markdown.h4": "cyan",
        "markdown.h5": "cyan",
        "markdown.h6": "cyan",
        "markdown.strong": "bold yellow",
        "markdown.em": "italic green",
        "markdown.emph": "italic green",
        "markdown.code": "bold magenta",
        "markdown.code_block": "blue",
    }
)

PARAGRAPH_MARGIN = 2
CODE_BLOCK_MARGIN = 4


class MarkdownSink:
    """
    Render finished blocks from ``rye.streaming.BlockRenderer``.

    With ``pretty`` off blocks are written exactly as received.
    """

    def __init__(self, console, pretty=True, code_theme="default"):
        self.console = console
        self.pretty = pretty
        self.code_theme = code_theme

    def render_block(self, text):
        if not self.pretty:
            self.console.out(text, end="", highlight=False)
            return

        margin = PARAGRAPH_MARGIN
        if text.lstrip().startswith(FENCE_MARKER):
            margin = CODE_BLOCK_MARGIN

        try:
            markdown = Markdown(text, code_theme=self.code_theme)
            self.console.print(Padding(markdown, (0, 0, 0, margin)))
        except Exception as err:
            raise RenderError(f"Unable to render block: {err}") from err

    def render_separator(self, text):
        if not self.pretty:
            self.console.out(text, end="", highlight=False)
            return
        self.console.print()
