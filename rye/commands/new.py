from rye.commands.utils.base_command import BaseCommand
from rye.commands.utils.helpers import format_command_result


class NewCommand(BaseCommand):
    NORM_NAME = "new"
    DESCRIPTION = "Start a new conversation"

    @classmethod
    async def execute(cls, io, chat, args, **kwargs):
        """Execute the new command with given parameters."""
        conversation = chat.store.create()
        chat.switch_to(conversation)
        return format_command_result(
            io, "new", f"Started new conversation: {conversation.identifier}"
        )
