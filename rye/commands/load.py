from typing import List

from rye.commands.utils.base_command import BaseCommand
from rye.commands.utils.helpers import CommandError, format_command_result


class LoadCommand(BaseCommand):
    NORM_NAME = "load"
    DESCRIPTION = "Switch to a stored conversation by ID or part of its filename"
    USAGE = "/load <id-or-fragment>"

    @classmethod
    async def execute(cls, io, chat, args, **kwargs):
        """Execute the load command with given parameters."""
        ident = args.strip()
        if not ident:
            raise CommandError(f"Usage: {cls.USAGE}")

        conversation = chat.store.load(ident)
        others = [path for path in chat.store.find(ident) if path != conversation.path]
        if others and conversation.identifier != ident:
            io.tool_warning(f"{len(others) + 1} conversations match '{ident}', loaded the newest.")
            for path in others:
                io.tool_warning(f"  also matches: {path.stem}")

        chat.switch_to(conversation)
        return format_command_result(
            io, "load", f"Loaded {conversation.display_name} ({len(conversation.turns)} turns)"
        )

    @classmethod
    def get_completions(cls, io, chat, args) -> List[str]:
        return [summary.identifier for summary in chat.store.list_summaries()]
