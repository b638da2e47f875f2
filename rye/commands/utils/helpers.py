import time


class CommandError(Exception):
    """Custom exception for command-specific errors."""

    pass


def format_command_result(io, command_name: str, success_message: str, error=None):
    """
    Format command execution result consistently.

    Args:
        io: InputOutput instance
        command_name: Name of the command
        success_message: Message for successful execution
        error: Exception if command failed

    Returns:
        Formatted result string
    """
    if error:
        io.tool_error(f"\nError in {command_name}: {str(error)}")
        return f"Error: {str(error)}"
    else:
        io.tool_output(f"\n✅ {success_message}")
        return f"Successfully executed {command_name}."


def format_age(timestamp, now=None):
    """Short human description of how long ago ``timestamp`` was."""
    if now is None:
        now = time.time()
    seconds = max(0, int(now - timestamp))
    if seconds < 60:
        return "just now"
    minutes = seconds // 60
    if minutes < 60:
        return f"{minutes}m ago"
    hours = minutes // 60
    if hours < 24:
        return f"{hours}h ago"
    return f"{hours // 24}d ago"


def format_summary(summary, now=None):
    turns = "turn" if summary.turn_count == 1 else "turns"
    return (
        f"{summary.display_name} ({summary.turn_count} {turns},"
        f" {format_age(summary.last_modified, now)})"
    )
