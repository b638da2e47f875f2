"""
Markdown codec for stored conversations.

A conversation document looks like this::

    # <title or "Conversation <identifier>">

    ## You

    <content>

    ## Assistant

    <content>

The codec is pure text in, text out. Filesystem placement lives in
``rye.conversation.store``.
"""

import re
import unicodedata
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

TITLE_PREFIX = "# "
PLACEHOLDER_PREFIX = "Conversation "

PLACEHOLDER_RE = re.compile(
    r"^Conversation [0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$",
    re.IGNORECASE,
)

# Characters that are not allowed (or awkward) in filenames on common platforms
RESERVED_FILENAME_CHARS = set('/\\:*?"<>|')
SANITIZE_REPLACEMENT = "_"


class Role(Enum):
    USER = "user"
    ASSISTANT = "assistant"

    @property
    def heading(self) -> str:
        return ROLE_HEADINGS[self]

    @classmethod
    def from_heading(cls, line: str) -> Optional["Role"]:
        """Return the role whose heading starts ``line``, or None."""
        for role, heading in ROLE_HEADINGS.items():
            if line.startswith(heading):
                return role
        return None


ROLE_HEADINGS = {
    Role.USER: "## You",
    Role.ASSISTANT: "## Assistant",
}


@dataclass(frozen=True)
class Turn:
    role: Role
    content: str

    def to_dict(self):
        """Message dict in the shape chat completion APIs expect."""
        return {"role": self.role.value, "content": self.content}


def split_lines(text: str) -> List[str]:
    """Split on ``\\n`` and drop a trailing ``\\r`` from each line."""
    if not text:
        return []
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def _strip_blank_lines(lines: List[str]) -> List[str]:
    start = 0
    end = len(lines)
    while start < end and not lines[start].strip():
        start += 1
    while end > start and not lines[end - 1].strip():
        end -= 1
    return lines[start:end]


def normalize_content(content: str) -> str:
    """
    Return turn content the way it reads back after a save and reload.

    Leading and trailing blank lines are removed, line endings become ``\\n``.
    """
    return "\n".join(_strip_blank_lines(split_lines(content)))


def is_placeholder_title(text: str) -> bool:
    return bool(PLACEHOLDER_RE.match(text.strip()))


def placeholder_title(identifier: str) -> str:
    return f"{PLACEHOLDER_PREFIX}{identifier}"


def header_title(title: str) -> str:
    """Collapse a title onto one line so it fits in the heading."""
    return " ".join(title.split())


def sanitize_title(title: str) -> str:
    """
    Make a title safe to use as a filename stem.

    Reserved filename characters and control characters become ``_``,
    then surrounding whitespace is trimmed. Sanitizing twice is a no-op.
    """
    chars = []
    for ch in title:
        if ch in RESERVED_FILENAME_CHARS or unicodedata.category(ch) == "Cc":
            chars.append(SANITIZE_REPLACEMENT)
        else:
            chars.append(ch)
    return "".join(chars).strip()


def serialize_header(identifier: str, title: Optional[str] = None) -> str:
    if title:
        heading = header_title(title)
    else:
        heading = placeholder_title(identifier)
    return f"{TITLE_PREFIX}{heading}\n\n"


def serialize_turn(turn: Turn) -> str:
    return f"\n{turn.role.heading}\n\n{turn.content}\n\n"


def serialize(identifier: str, title: Optional[str], turns) -> str:
    """Whole document; equal to the header plus one ``serialize_turn`` per turn."""
    parts = [serialize_header(identifier, title)]
    parts.extend(serialize_turn(turn) for turn in turns)
    return "".join(parts)


def parse(text: str) -> Tuple[List[Turn], Optional[str]]:
    """
    Parse a conversation document into its turns and title.

    Role headings are matched by prefix, so ``## You (edited)`` still opens a
    user turn; the rest of that line is dropped. Lines before the first role
    heading are ignored. Turns that are blank once surrounding blank lines are
    stripped are dropped.
    """
    lines = split_lines(text)
    title = None
    i = 0

    if lines and lines[0].startswith(TITLE_PREFIX):
        candidate = lines[0][len(TITLE_PREFIX) :].strip()
        if candidate and not is_placeholder_title(candidate):
            title = candidate
        i = 1

    turns = []
    role = None
    block = []

    def close_block():
        if role is None:
            return
        content = _strip_blank_lines(block)
        if content:
            turns.append(Turn(role, "\n".join(content)))

    for line in lines[i:]:
        heading_role = Role.from_heading(line)
        if heading_role is not None:
            close_block()
            role = heading_role
            block = []
        elif role is not None:
            block.append(line)

    close_block()
    return turns, title
