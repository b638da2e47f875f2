"""
Conversation persistence for rye.

Conversations are stored as Markdown documents, one file per conversation.
"""

from .codec import Role, Turn, parse, sanitize_title, serialize
from .paths import CONVERSATIONS_ENV, resolve_conversations_dir
from .store import Conversation, ConversationStore, ConversationSummary

__all__ = [
    "Conversation",
    "ConversationStore",
    "ConversationSummary",
    "CONVERSATIONS_ENV",
    "Role",
    "Turn",
    "parse",
    "resolve_conversations_dir",
    "sanitize_title",
    "serialize",
]
