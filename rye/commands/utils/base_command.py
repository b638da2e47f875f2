from abc import ABC, ABCMeta, abstractmethod
from typing import List

from rye.exceptions import RyeError

from .helpers import CommandError


class CommandMeta(ABCMeta):
    """Metaclass for validating command classes at definition time."""

    def __new__(mcs, name, bases, namespace):
        cls = super().__new__(mcs, name, bases, namespace)

        if name == "BaseCommand":
            return cls

        if not name.endswith("Command"):
            raise TypeError(f"Command class must end with 'Command', got '{name}'")

        if getattr(cls, "NORM_NAME", None) is None:
            raise TypeError("Command class must define NORM_NAME")

        if getattr(cls, "DESCRIPTION", None) is None:
            raise TypeError("Command class must define DESCRIPTION")

        if "execute" not in namespace:
            raise TypeError("Command class must implement execute method")

        return cls


class BaseCommand(ABC, metaclass=CommandMeta):
    """Abstract base class for all commands."""

    NORM_NAME = None  # Command name as typed after the slash (e.g., "load")
    DESCRIPTION = None  # One line for /help
    USAGE = None  # Optional usage line, e.g. "/load <fragment>"

    @classmethod
    @abstractmethod
    async def execute(cls, io, chat, args, **kwargs):
        """
        Execute the command with given parameters.

        Args:
            io: InputOutput instance
            chat: ChatSession the command acts on
            args: Command arguments as string
            **kwargs: Additional context

        Returns:
            Optional result (most commands return None)
        """
        pass

    @classmethod
    def get_completions(cls, io, chat, args) -> List[str]:
        """Completion options for the command's arguments."""
        return []

    @classmethod
    async def process_command(cls, io, chat, args, **kwargs):
        """Run the command, reporting expected failures instead of raising."""
        try:
            return await cls.execute(io, chat, args, **kwargs)
        except (CommandError, RyeError) as e:
            return cls.handle_error(io, e)

    @classmethod
    def handle_error(cls, io, error):
        """Centralized error handling for commands."""
        io.tool_error(f"Error in command {cls.NORM_NAME}: {str(error)}")
        return None

    @classmethod
    def get_help(cls) -> str:
        """Help text for this command."""
        help_text = f"Command: /{cls.NORM_NAME}\n"
        help_text += f"Description: {cls.DESCRIPTION}\n"
        if cls.USAGE:
            help_text += f"\nUsage:\n  {cls.USAGE}\n"
        return help_text
