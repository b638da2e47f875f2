from abc import ABC, abstractmethod
from typing import AsyncIterator, Sequence

from rye.conversation import Turn


class Provider(ABC):
    """
    A remote text generation service.

    The chat loop depends only on this interface; concrete clients live in
    sibling modules and are looked up by name with ``get_provider``.
    """

    NAME = None

    @abstractmethod
    def stream_response(self, turns: Sequence[Turn]) -> AsyncIterator[str]:
        """
        Answer the conversation so far, one text fragment at a time.

        Failures while opening or reading the stream raise ``StreamError``.
        """

    @abstractmethod
    async def summarize_title(self, text: str) -> str:
        """
        Return a short title for a conversation that starts with ``text``.

        Raises:
            ProviderError: no title could be produced
        """

    def check_environment(self):
        """Return a list of problems with the local setup, empty if none."""
        return []
