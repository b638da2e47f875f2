import contextlib
import logging
import os
import tempfile
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

from rye.exceptions import ConversationNotFound, StorageError

from . import codec
from .codec import Role, Turn

logger = logging.getLogger(__name__)

DOCUMENT_SUFFIX = ".md"


@dataclass
class Conversation:
    """
    An open conversation and the document that backs it.

    Attributes:
        identifier: Filename stem of the backing document. Changes when a
            title is assigned, so treat it as the current name only.
        path: Location of the backing document
        title: Assigned title, or None while the placeholder heading is used
        turns: Ordered turns; only ever appended to
    """

    identifier: str
    path: Path
    title: Optional[str] = None
    turns: List[Turn] = field(default_factory=list)

    @property
    def messages(self):
        return [turn.to_dict() for turn in self.turns]

    @property
    def display_name(self) -> str:
        return self.title or self.identifier


@dataclass(frozen=True)
class ConversationSummary:
    identifier: str
    title: Optional[str]
    path: Path
    last_modified: float
    turn_count: int = 0

    @property
    def display_name(self) -> str:
        return self.title or self.identifier


class ConversationStore:
    """Reads and writes conversation documents in a single directory."""

    def __init__(self, directory: Union[str, Path], encoding: str = "utf-8"):
        self.directory = Path(directory)
        self.encoding = encoding

    def path_for(self, identifier: str) -> Path:
        return self.directory / f"{identifier}{DOCUMENT_SUFFIX}"

    def _write(self, path: Path, text: str, mode: str = "w"):
        # newline="" keeps the bytes on disk identical on every platform
        with open(path, mode, encoding=self.encoding, newline="") as f:
            f.write(text)

    def create(self) -> Conversation:
        identifier = str(uuid.uuid4())
        path = self.path_for(identifier)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            self._write(path, codec.serialize_header(identifier))
        except OSError as err:
            raise StorageError(f"Unable to create conversation {path}: {err}") from err

        logger.debug("Created conversation %s", path)
        return Conversation(identifier=identifier, path=path)

    def find(self, fragment: str) -> List[Path]:
        """
        Return documents whose filename contains ``fragment``.

        Newest first, then by name, so the order does not depend on the
        filesystem.
        """
        if not fragment:
            return []

        try:
            entries = list(self.directory.iterdir())
        except OSError as err:
            raise ConversationNotFound(fragment, reason=str(err)) from err

        matches = []
        for path in entries:
            if path.suffix != DOCUMENT_SUFFIX or fragment not in path.name:
                continue
            try:
                if not path.is_file():
                    continue
                mtime = path.stat().st_mtime
            except OSError:
                continue
            matches.append((mtime, path))

        matches.sort(key=lambda item: item[1].name)
        matches.sort(key=lambda item: item[0], reverse=True)
        return [path for _mtime, path in matches]

    def load(self, ident: str) -> Conversation:
        """
        Load a conversation by exact identifier, or by a fragment of its filename.

        Raises:
            ConversationNotFound: nothing matches, or the directory is unreadable
            StorageError: the matching document could not be read
        """
        path = None
        if ident and Path(ident).name == ident:
            exact = self.path_for(ident)
            if exact.is_file():
                path = exact

        if path is None:
            matches = self.find(ident)
            if not matches:
                raise ConversationNotFound(ident)
            if len(matches) > 1:
                logger.debug(
                    "%d conversations match %r, using %s", len(matches), ident, matches[0].name
                )
            path = matches[0]

        try:
            text = path.read_text(encoding=self.encoding)
        except (OSError, UnicodeDecodeError) as err:
            raise StorageError(f"Unable to read conversation {path}: {err}") from err

        turns, title = codec.parse(text)
        return Conversation(identifier=path.stem, path=path, title=title, turns=turns)

    def append_turn(self, conversation: Conversation, role, content: str) -> Turn:
        """
        Append a turn in memory and on disk.

        Only the bytes of the new turn are written; earlier content is never
        rewritten.

        Raises:
            ValueError: the content is blank (it would not survive a reload)
            StorageError: the append failed; the turn stays in memory
        """
        content = codec.normalize_content(content)
        if not content.strip():
            raise ValueError("Turn content must not be blank")

        turn = Turn(Role(role), content)
        conversation.turns.append(turn)

        try:
            self._write(conversation.path, codec.serialize_turn(turn), mode="a")
        except OSError as err:
            raise StorageError(f"Unable to save to {conversation.path}: {err}") from err
        return turn

    def assign_title(self, conversation: Conversation, title: str):
        """
        Title a conversation and move its document to ``<sanitized-title>.md``.

        The new document is written completely to a temporary file and moved
        into place before the old document is removed. If anything fails the
        conversation keeps its previous title and location.

        Raises:
            StorageError: empty title, name collision, or a failed write
        """
        heading = codec.header_title(title)
        stem = codec.sanitize_title(heading)
        if not stem:
            raise StorageError(f"Cannot use {title!r} as a conversation title")

        old_path = conversation.path
        new_path = self.path_for(stem)

        same_file = new_path == old_path
        if not same_file and new_path.exists():
            try:
                same_file = os.path.samefile(new_path, old_path)
            except OSError:
                same_file = False
            if not same_file:
                raise StorageError(f"A conversation named {new_path.name} already exists")

        text = codec.serialize(stem, heading, conversation.turns)
        tmp_name = None
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=".rye-", suffix=".tmp", dir=self.directory)
            with os.fdopen(fd, "w", encoding=self.encoding, newline="") as f:
                f.write(text)
            os.replace(tmp_name, new_path)
        except OSError as err:
            if tmp_name:
                with contextlib.suppress(OSError):
                    os.unlink(tmp_name)
            raise StorageError(f"Unable to rename conversation to {new_path}: {err}") from err

        if not same_file:
            try:
                old_path.unlink()
            except FileNotFoundError:
                pass
            except OSError as err:
                logger.warning("Unable to remove old conversation file %s: %s", old_path, err)

        conversation.title = heading
        conversation.identifier = stem
        conversation.path = new_path
        logger.debug("Renamed conversation %s -> %s", old_path, new_path)

    def list_summaries(self) -> List[ConversationSummary]:
        """All stored conversations, most recently modified first."""
        if not self.directory.exists():
            return []

        try:
            entries = list(self.directory.iterdir())
        except OSError as err:
            raise StorageError(f"Unable to list {self.directory}: {err}") from err

        summaries = []
        for path in entries:
            if path.suffix != DOCUMENT_SUFFIX or not path.is_file():
                continue
            try:
                text = path.read_text(encoding=self.encoding)
                mtime = path.stat().st_mtime
            except UnicodeDecodeError as err:
                logger.warning("Skipping %s, not readable as %s: %s", path.name, self.encoding, err)
                continue
            except OSError as err:
                raise StorageError(f"Unable to read conversation {path}: {err}") from err

            turns, title = codec.parse(text)
            summaries.append(
                ConversationSummary(
                    identifier=path.stem,
                    title=title,
                    path=path,
                    last_modified=mtime,
                    turn_count=len(turns),
                )
            )

        # sort() is stable, so equal mtimes keep directory order
        summaries.sort(key=lambda summary: summary.last_modified, reverse=True)
        return summaries

    def discard_if_empty(self, conversation: Conversation) -> bool:
        """Delete the document of a conversation that never got a turn."""
        if conversation.turns:
            return False
        try:
            conversation.path.unlink()
        except FileNotFoundError:
            return False
        except OSError as err:
            raise StorageError(f"Unable to remove {conversation.path}: {err}") from err
        logger.debug("Removed empty conversation %s", conversation.path)
        return True
