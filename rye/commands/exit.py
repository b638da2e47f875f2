from rye.commands.utils.base_command import BaseCommand


class ExitCommand(BaseCommand):
    NORM_NAME = "exit"
    DESCRIPTION = "Exit the application"

    @classmethod
    async def execute(cls, io, chat, args, **kwargs):
        """Execute the exit command with given parameters."""
        chat.request_exit()

    @classmethod
    def get_help(cls) -> str:
        help_text = super().get_help()
        help_text += "\nUsage:\n"
        help_text += "  /exit  # Leave rye\n"
        help_text += "  /quit  # Alias for /exit\n"
        help_text += "\nThe conversation is already saved; empty conversations are removed.\n"
        return help_text


class QuitCommand(ExitCommand):
    NORM_NAME = "quit"
    DESCRIPTION = "Exit the application"

    @classmethod
    async def execute(cls, io, chat, args, **kwargs):
        return await super().execute(io, chat, args, **kwargs)
