import io as stdio
from unittest.mock import MagicMock

import pytest

from rye.conversation import ConversationStore
from rye.exceptions import RenderError
from rye.io import InputOutput
from rye.providers.base import Provider


# Store Fixtures
@pytest.fixture
def conversations_dir(tmp_path):
    """Directory for conversation documents; not created until first use."""
    return tmp_path / "conversations"


@pytest.fixture
def store(conversations_dir):
    return ConversationStore(conversations_dir)


# Terminal Fixtures
@pytest.fixture
def plain_io():
    """InputOutput without colors or prompt_toolkit, writing into a StringIO."""
    return InputOutput(pretty=False, fancy_input=False, output=stdio.StringIO())


# Display Sink Fixtures
class RecordingSink:
    """Display sink that records every call, optionally failing on some blocks."""

    def __init__(self, fail_when=None):
        self.events = []
        self.fail_when = fail_when

    def render_block(self, text):
        if self.fail_when and self.fail_when(text):
            raise RenderError(f"cannot render {text!r}")
        self.events.append(("block", text))

    def render_separator(self, text):
        self.events.append(("separator", text))

    @property
    def blocks(self):
        return [text for kind, text in self.events if kind == "block"]

    @property
    def rendered_text(self):
        return "".join(text for _kind, text in self.events)


@pytest.fixture
def recording_sink():
    return RecordingSink()


@pytest.fixture
def recording_sink_class():
    """
    Factory fixture for RecordingSink.

    Example:
        def test_something(recording_sink_class):
            sink = recording_sink_class(fail_when=lambda text: "boom" in text)
    """
    return RecordingSink


# Provider Fixtures
class FakeProvider(Provider):
    NAME = "fake"

    def __init__(self, fragments=(), error=None, title="Test Title", title_error=None):
        self.fragments = list(fragments)
        self.error = error
        self.title = title
        self.title_error = title_error
        self.requests = []
        self.title_requests = []

    async def stream_response(self, turns):
        self.requests.append(list(turns))
        for fragment in self.fragments:
            yield fragment
        if self.error:
            raise self.error

    async def summarize_title(self, text):
        self.title_requests.append(text)
        if self.title_error:
            raise self.title_error
        return self.title


@pytest.fixture
def fake_provider_class():
    """Factory fixture for a scripted Provider."""
    return FakeProvider


# Mock Streaming Fixtures
@pytest.fixture
def mock_delta_class():
    """
    Factory fixture for MockDelta class.

    Returns a class that can be instantiated to create mock delta objects
    for streaming responses.
    """

    class MockDelta:
        def __init__(self, content=None):
            self.content = content

    return MockDelta


@pytest.fixture
def mock_streaming_chunk_class(mock_delta_class):
    """
    Factory fixture for MockStreamingChunk class.

    Example:
        def test_something(mock_streaming_chunk_class):
            MockStreamingChunk = mock_streaming_chunk_class
            chunk = MockStreamingChunk(content="test", finish_reason="stop")
    """

    class MockStreamingChunk:
        def __init__(self, content=None, finish_reason=None):
            self.choices = [MagicMock()]
            self.choices[0].delta = mock_delta_class(content)
            self.choices[0].finish_reason = finish_reason

    return MockStreamingChunk
