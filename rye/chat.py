import asyncio
import logging

from rye.commands import Commands
from rye.conversation import Role
from rye.exceptions import ConversationNotFound, ProviderError, StorageError
from rye.streaming import BlockRenderer

logger = logging.getLogger(__name__)

EXIT_WORD = "exit"
HELP_WORD = "help"


def open_conversation(store, io, ident=None):
    """
    Continue the conversation matching ``ident``, or start a new one.

    A missing conversation is not an error: a new one is created instead.
    """
    if ident:
        try:
            conversation = store.load(ident)
        except ConversationNotFound:
            io.tool_warning(f"Could not find conversation {ident}. Starting new conversation.")
        else:
            if conversation.identifier != ident:
                matches = store.find(ident)
                if len(matches) > 1:
                    io.tool_warning(
                        f"{len(matches)} conversations match '{ident}', continuing the newest."
                    )
            io.tool_output(f"Continuing conversation: {conversation.display_name}")
            return conversation

    conversation = store.create()
    io.tool_output(f"Started new conversation: {conversation.identifier}")
    return conversation


class ChatSession:
    """
    The interactive loop: read a message, stream the reply, save both.

    Attributes:
        io: InputOutput used for prompts and status messages
        store: ConversationStore holding the conversation documents
        provider: Provider answering the conversation
        conversation: The conversation currently open
        sink: Display sink the streamed reply is rendered into
    """

    def __init__(self, io, store, provider, conversation, sink=None, auto_title=True):
        self.io = io
        self.store = store
        self.provider = provider
        self.conversation = conversation
        self.sink = sink or io.markdown_sink()
        self.auto_title = auto_title
        self.exit_requested = False

        self.commands = Commands(io, self)
        io.attach_commands(self.commands)

    def request_exit(self):
        self.exit_requested = True

    def switch_to(self, conversation):
        if conversation.path != self.conversation.path:
            self.discard_empty()
        self.conversation = conversation

    def discard_empty(self):
        try:
            self.store.discard_if_empty(self.conversation)
        except StorageError as err:
            self.io.tool_warning(f"Warning: {err}")

    def show_banner(self):
        self.io.tool_output("🥃 Welcome to Rye - Your LLM conversation tool", bold=True)
        self.io.tool_output("Conversations are stored in markdown files for easy searching")
        self.io.tool_output("Type 'exit' to quit, 'help' for commands\n")

    async def run(self):
        try:
            while not self.exit_requested:
                self.io.tool_output()
                self.io.rule()
                self.io.tool_output("💬 Your Message:", bold=True)
                self.io.rule()

                inp = await self.io.get_input()
                if inp is None:
                    break
                if not inp:
                    continue
                await self.handle_input(inp)
        finally:
            self.close()

    async def handle_input(self, inp):
        word = inp.lower()
        if word == EXIT_WORD:
            self.request_exit()
            return
        if word == HELP_WORD:
            await self.commands.execute("help", "")
            return
        if self.commands.is_command(inp):
            await self.commands.run(inp)
            return
        await self.send(inp)

    async def send(self, message):
        """
        Send one user message and render the streamed reply.

        Whatever part of the reply arrived is saved, even if the stream
        failed or was interrupted.
        """
        try:
            self.store.append_turn(self.conversation, Role.USER, message)
        except StorageError as err:
            self.io.tool_error(f"Unable to save your message: {err}")

        self.io.tool_output()
        self.io.rule("═")
        self.io.assistant_heading("🤖 Assistant Response:")
        self.io.rule("═")
        self.io.tool_output()

        renderer = BlockRenderer(self.sink, on_render_error=self._report_render_error)
        fragments = self.provider.stream_response(list(self.conversation.turns))
        try:
            result = await renderer.consume(fragments)
        except (asyncio.CancelledError, KeyboardInterrupt):
            self.io.tool_warning("\nInterrupted, saving the partial response.")
            self._save_response(renderer.text)
            raise

        self.io.tool_output()
        if result.error is not None:
            self.io.tool_error(f"Stream error: {result.error}")

        self._save_response(result.text)
        await self.maybe_assign_title()
        return result

    def _report_render_error(self, err):
        self.io.tool_warning(f"Unable to render part of the response: {err}")

    def _save_response(self, text):
        if not text.strip():
            return
        try:
            self.store.append_turn(self.conversation, Role.ASSISTANT, text)
        except StorageError as err:
            self.io.tool_error(f"Unable to save the response: {err}")

    async def maybe_assign_title(self):
        """Title an untitled conversation after its first exchange."""
        if not self.auto_title or self.conversation.title:
            return
        turns = self.conversation.turns
        if len(turns) != 2 or turns[0].role is not Role.USER:
            return

        try:
            title = await self.provider.summarize_title(turns[0].content)
        except ProviderError as err:
            self.io.tool_warning(f"Warning: Could not generate title: {err}")
            return

        try:
            self.store.assign_title(self.conversation, title)
        except StorageError as err:
            self.io.tool_warning(f"Warning: Could not set conversation title: {err}")
            return
        logger.debug("Conversation titled %r", self.conversation.title)

    def close(self):
        if self.conversation.turns:
            self.io.tool_output(f"Conversation saved to: {self.conversation.path}")
        else:
            self.discard_empty()
