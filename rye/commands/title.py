from rye.commands.utils.base_command import BaseCommand
from rye.commands.utils.helpers import CommandError, format_command_result


class TitleCommand(BaseCommand):
    NORM_NAME = "title"
    DESCRIPTION = "Set the conversation title and rename its file"
    USAGE = "/title <text>"

    @classmethod
    async def execute(cls, io, chat, args, **kwargs):
        """Execute the title command with given parameters."""
        title = args.strip()
        if not title:
            if chat.conversation.title:
                io.tool_output(f"Title: {chat.conversation.title}")
                return
            raise CommandError(f"Usage: {cls.USAGE}")

        chat.store.assign_title(chat.conversation, title)
        return format_command_result(io, "title", f"Saved as {chat.conversation.path.name}")
