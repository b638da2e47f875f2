from typing import List

from rye.commands.utils.base_command import BaseCommand
from rye.commands.utils.registry import CommandRegistry


class HelpCommand(BaseCommand):
    NORM_NAME = "help"
    DESCRIPTION = "Show commands and the current conversation"
    USAGE = "/help [command]"

    @classmethod
    async def execute(cls, io, chat, args, **kwargs):
        """Execute the help command with given parameters."""
        name = args.strip().lstrip("/")
        if name:
            io.tool_output(CommandRegistry.get_command_help(name))
            return

        io.tool_output(CommandRegistry.get_command_help())
        io.tool_output("Type 'exit' to quit, 'help' for this message.")
        if chat and chat.conversation:
            io.tool_output(f"Conversation ID: {chat.conversation.identifier}")
            io.tool_output(f"File: {chat.conversation.path}")

    @classmethod
    def get_completions(cls, io, chat, args) -> List[str]:
        return sorted(CommandRegistry.list_commands())
