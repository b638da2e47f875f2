"""
Slash commands for the rye chat loop.

Each command is a ``BaseCommand`` subclass registered with
``CommandRegistry``; ``Commands`` parses input lines and dispatches them.
"""

from .core import Commands
from .exit import ExitCommand, QuitCommand
from .help import HelpCommand
from .list_conversations import ListCommand
from .load import LoadCommand
from .new import NewCommand
from .title import TitleCommand
from .utils.base_command import BaseCommand
from .utils.helpers import CommandError, format_command_result
from .utils.registry import CommandRegistry

# Register commands
CommandRegistry.register(HelpCommand)
CommandRegistry.register(ExitCommand)
CommandRegistry.register(QuitCommand)
CommandRegistry.register(ListCommand)
CommandRegistry.register(LoadCommand)
CommandRegistry.register(NewCommand)
CommandRegistry.register(TitleCommand)


__all__ = [
    "BaseCommand",
    "CommandRegistry",
    "CommandError",
    "format_command_result",
    "Commands",
    "ExitCommand",
    "HelpCommand",
    "ListCommand",
    "LoadCommand",
    "NewCommand",
    "QuitCommand",
    "TitleCommand",
]
