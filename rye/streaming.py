"""
Block-at-a-time rendering of a streamed Markdown response.

The provider hands out text fragments of arbitrary size. Rendering each
fragment as it arrives would paint half-finished Markdown, so fragments are
gathered into lines and lines into blocks: a paragraph or list runs until a
blank line, a heading is a block on its own, and a fenced code block runs
until its closing fence. Each finished block goes to the display sink once.

A display sink is any object with two methods:

    render_block(text)       draw one finished block
    render_separator(text)   draw the blank line between blocks
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

from rye.exceptions import StreamError

logger = logging.getLogger(__name__)

FENCE_MARKER = "```"
HEADING_MARKER = "#"


@dataclass
class StreamResult:
    """
    Outcome of one streamed response.

    Attributes:
        text: Everything the provider sent, unblocked and unformatted
        error: The error that cut the stream short, if any
        render_failures: Number of blocks the display sink rejected
    """

    text: str
    error: Optional[BaseException] = None
    render_failures: int = 0

    @property
    def complete(self) -> bool:
        return self.error is None


class BlockRenderer:
    """
    Single-pass accumulator that flushes complete Markdown blocks.

    State is per response: create a new renderer for every stream.
    """

    def __init__(self, sink, on_render_error: Optional[Callable[[Exception], None]] = None):
        self.sink = sink
        self.on_render_error = on_render_error
        self.current_line = ""
        self.pending: List[str] = []
        self.in_fence = False
        self.render_failures = 0
        self._parts: List[str] = []

    @property
    def text(self) -> str:
        """The full response received so far."""
        return "".join(self._parts)

    def feed(self, fragment: str):
        if not fragment:
            return
        self._parts.append(fragment)

        start = 0
        while True:
            newline = fragment.find("\n", start)
            if newline < 0:
                self.current_line += fragment[start:]
                return
            line = self.current_line + fragment[start : newline + 1]
            self.current_line = ""
            self._complete_line(line)
            start = newline + 1

    def finish(self) -> str:
        """Flush whatever is buffered and return the full response."""
        if self.current_line:
            self.pending.append(self.current_line)
            self.current_line = ""
        self._flush()
        return self.text

    def _complete_line(self, line: str):
        trimmed = line.strip()

        if trimmed.startswith(FENCE_MARKER):
            if self.in_fence:
                self.pending.append(line)
                self.in_fence = False
                self._flush()
            else:
                self._flush()
                self.pending.append(line)
                self.in_fence = True
        elif self.in_fence:
            self.pending.append(line)
        elif not trimmed:
            self._flush()
            self._emit(self.sink.render_separator, line)
        elif trimmed.startswith(HEADING_MARKER):
            self._flush()
            self._emit(self.sink.render_block, line)
        else:
            # Prose and list items accumulate alike
            self.pending.append(line)

    def _flush(self):
        if not self.pending:
            return
        block = "".join(self.pending)
        self.pending = []
        self._emit(self.sink.render_block, block)

    def _emit(self, render, text: str):
        try:
            render(text)
        except Exception as err:
            self.render_failures += 1
            logger.debug("Display sink rejected a block: %s", err, exc_info=True)
            if self.render_failures == 1 and self.on_render_error:
                self.on_render_error(err)

    async def consume(self, fragments) -> StreamResult:
        """
        Render an async iterable of fragments until it ends or fails.

        A failing stream still yields a result holding the partial text.
        Cancellation flushes the buffer and propagates; ``self.text`` keeps
        the partial response for the caller.
        """
        error = None
        try:
            async for fragment in fragments:
                if isinstance(fragment, BaseException):
                    error = fragment
                    await _aclose(fragments)
                    break
                self.feed(fragment)
        except (asyncio.CancelledError, KeyboardInterrupt):
            self.finish()
            raise
        except StreamError as err:
            error = err
        except Exception as err:
            error = StreamError(str(err) or type(err).__name__)
            error.__cause__ = err

        if error is not None:
            logger.debug("Stream ended early: %s", error)

        self.finish()
        return StreamResult(self.text, error, self.render_failures)


async def _aclose(fragments):
    aclose = getattr(fragments, "aclose", None)
    if aclose is not None:
        await aclose()


async def stream_and_render(fragments, sink, on_render_error=None) -> StreamResult:
    """Render ``fragments`` block by block into ``sink``."""
    renderer = BlockRenderer(sink, on_render_error=on_render_error)
    return await renderer.consume(fragments)
