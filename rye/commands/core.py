from rye.commands.utils.registry import CommandRegistry


class Commands:
    """Parses /command lines and dispatches them through the registry."""

    def __init__(self, io, chat):
        self.io = io
        self.chat = chat

    def is_command(self, inp):
        return bool(inp) and inp[0] == "/"

    def get_commands(self):
        registry_commands = CommandRegistry.list_commands()
        commands = [f"/{cmd}" for cmd in registry_commands]
        return sorted(commands)

    def get_completions(self, cmd):
        assert cmd.startswith("/")
        cmd = cmd[1:]
        command_class = CommandRegistry.get_command(cmd)
        if command_class:
            return command_class.get_completions(self.io, self.chat, "")
        return []

    def matching_commands(self, inp):
        words = inp.strip().split()
        if not words:
            return [], "", ""

        first_word = words[0]
        rest_inp = inp.strip()[len(first_word) :].strip()

        all_commands = self.get_commands()
        matching = [cmd for cmd in all_commands if cmd.startswith(first_word)]
        return matching, first_word, rest_inp

    async def run(self, inp):
        matching, first_word, rest_inp = self.matching_commands(inp)

        if first_word in matching:
            return await self.execute(first_word[1:], rest_inp)
        if len(matching) == 1:
            return await self.execute(matching[0][1:], rest_inp)
        if len(matching) > 1:
            self.io.tool_error(f"Ambiguous command: {', '.join(matching)}")
            return
        self.io.tool_error(f"Invalid command: {first_word}")

    async def execute(self, cmd_name, args, **kwargs):
        command_class = CommandRegistry.get_command(cmd_name)
        if not command_class:
            self.io.tool_output(f"Error: Command {cmd_name} not found.")
            return
        return await CommandRegistry.execute(cmd_name, self.io, self.chat, args, **kwargs)
