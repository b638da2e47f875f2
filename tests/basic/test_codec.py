import textwrap

import pytest

from rye.conversation import codec
from rye.conversation.codec import Role, Turn

IDENT = "0b6f5c1e-8a9d-4f3b-9c2e-1d7a6b5c4e3f"


class TestParse:
    def test_parse_titled_document(self):
        text = textwrap.dedent("""\
            # My Title

            ## You

            Hello

            ## Assistant

            Hi there
            """)

        turns, title = codec.parse(text)

        assert title == "My Title"
        assert turns == [Turn(Role.USER, "Hello"), Turn(Role.ASSISTANT, "Hi there")]

    def test_placeholder_heading_is_not_a_title(self):
        text = f"# Conversation {IDENT}\n\n\n## You\n\nHello\n\n"

        turns, title = codec.parse(text)

        assert title is None
        assert turns == [Turn(Role.USER, "Hello")]

    def test_title_starting_with_conversation_is_kept(self):
        turns, title = codec.parse("# Conversation about cats\n\n")
        assert title == "Conversation about cats"
        assert turns == []

    def test_document_without_heading(self):
        turns, title = codec.parse("## You\n\nHi\n")
        assert title is None
        assert turns == [Turn(Role.USER, "Hi")]

    def test_role_heading_matches_by_prefix(self):
        text = "# T\n\n## You (edited)\n\nHello\n\n## Assistant - claude\n\nHi\n"

        turns, _title = codec.parse(text)

        assert turns == [Turn(Role.USER, "Hello"), Turn(Role.ASSISTANT, "Hi")]

    def test_text_before_first_role_heading_is_ignored(self):
        text = "# T\n\nsome notes\nmore notes\n\n## You\n\nHello\n"

        turns, _title = codec.parse(text)

        assert turns == [Turn(Role.USER, "Hello")]

    def test_blank_turns_are_dropped(self):
        text = "# T\n\n## You\n\n   \n\n## Assistant\n\nHi\n"

        turns, _title = codec.parse(text)

        assert turns == [Turn(Role.ASSISTANT, "Hi")]

    def test_content_keeps_markdown_and_inner_blank_lines(self):
        content = "## Overview\n\nFirst paragraph.\n\n```python\nprint('x')\n```\n\n- item"
        text = codec.serialize(IDENT, None, [Turn(Role.ASSISTANT, content)])

        turns, _title = codec.parse(text)

        assert turns == [Turn(Role.ASSISTANT, content)]

    def test_crlf_line_endings(self):
        text = "# My Title\r\n\r\n## You\r\n\r\nline one\r\nline two\r\n"

        turns, title = codec.parse(text)

        assert title == "My Title"
        assert turns == [Turn(Role.USER, "line one\nline two")]

    def test_empty_document(self):
        assert codec.parse("") == ([], None)


class TestSerialize:
    def test_header(self):
        assert codec.serialize_header(IDENT) == f"# Conversation {IDENT}\n\n"
        assert codec.serialize_header(IDENT, "My Title") == "# My Title\n\n"

    def test_header_collapses_multiline_titles(self):
        assert codec.serialize_header(IDENT, "My\nTitle ") == "# My Title\n\n"

    def test_turn(self):
        turn = Turn(Role.USER, "Hello")
        assert codec.serialize_turn(turn) == "\n## You\n\nHello\n\n"

    def test_serialize_is_header_plus_turns(self):
        turns = [Turn(Role.USER, "Hello"), Turn(Role.ASSISTANT, "Hi there")]

        expected = codec.serialize_header(IDENT) + "".join(codec.serialize_turn(t) for t in turns)

        assert codec.serialize(IDENT, None, turns) == expected

    @pytest.mark.parametrize("title", [None, "Rust lifetimes"])
    def test_parse_reverses_serialize(self, title):
        turns = [
            Turn(Role.USER, "What is a lifetime?"),
            Turn(Role.ASSISTANT, "# Lifetimes\n\nA lifetime is a region.\n\n1. one\n2. two"),
            Turn(Role.USER, "Thanks"),
        ]

        assert codec.parse(codec.serialize(IDENT, title, turns)) == (turns, title)


class TestSanitizeTitle:
    @pytest.mark.parametrize(
        "title,expected",
        [
            ("My Title", "My Title"),
            ("a/b\\c:d*e?f", "a_b_c_d_e_f"),
            ('"quoted" <tag> |pipe|', "_quoted_ _tag_ _pipe_"),
            ("  padded  ", "padded"),
            ("tab\there", "tab_here"),
            ("bell\x07", "bell_"),
            ("naïve café", "naïve café"),
        ],
    )
    def test_sanitize(self, title, expected):
        assert codec.sanitize_title(title) == expected

    @pytest.mark.parametrize(
        "title",
        ["My Title", " a/b ", "\x01start", "end\n", "???", "  ", "x\x7fy", "Ünïcode: yes"],
    )
    def test_sanitize_is_idempotent(self, title):
        once = codec.sanitize_title(title)
        assert codec.sanitize_title(once) == once


class TestHelpers:
    def test_normalize_content_strips_blank_edges(self):
        assert codec.normalize_content("\n\n  \nHello\n\nWorld\n\n \n") == "Hello\n\nWorld"

    def test_normalize_content_crlf(self):
        assert codec.normalize_content("a\r\nb\r\n") == "a\nb"

    def test_is_placeholder_title(self):
        assert codec.is_placeholder_title(f"Conversation {IDENT}")
        assert codec.is_placeholder_title(f"Conversation {IDENT.upper()}")
        assert not codec.is_placeholder_title("Conversation about cats")
        assert not codec.is_placeholder_title(IDENT)

    def test_role_from_heading(self):
        assert Role.from_heading("## You") is Role.USER
        assert Role.from_heading("## Assistant") is Role.ASSISTANT
        assert Role.from_heading("## Notes") is None
        assert Role.from_heading("# You") is None

    def test_turn_to_dict(self):
        assert Turn(Role.ASSISTANT, "Hi").to_dict() == {"role": "assistant", "content": "Hi"}


def test_heading_starting_with_a_role_heading_opens_a_turn():
    text = "# T\n\n## Assistant\n\nIntro\n\n## Your options\n\n- a\n"

    turns, _title = codec.parse(text)

    assert turns == [Turn(Role.ASSISTANT, "Intro"), Turn(Role.USER, "- a")]
