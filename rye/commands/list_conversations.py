from rye.commands.utils.base_command import BaseCommand
from rye.commands.utils.helpers import format_command_result, format_summary


class ListCommand(BaseCommand):
    NORM_NAME = "list"
    DESCRIPTION = "List stored conversations, newest first"

    @classmethod
    async def execute(cls, io, chat, args, **kwargs):
        """Execute the list command with given parameters."""
        summaries = chat.store.list_summaries()

        if not summaries:
            io.tool_output("No saved conversations found.")
            return format_command_result(io, "list", "No saved conversations found")

        io.tool_output(f"Conversations in {chat.store.directory}:")
        current = chat.conversation.path if chat.conversation else None
        for summary in summaries:
            marker = "*" if summary.path == current else " "
            io.tool_output(f" {marker} {format_summary(summary)}")

        return format_command_result(io, "list", f"Listed {len(summaries)} conversations")
