import argparse

import configargparse
import shtab

from rye import __version__
from rye.conversation import CONVERSATIONS_ENV
from rye.providers import PROVIDERS


def get_parser(default_config_files):
    parser = configargparse.ArgumentParser(
        description="rye is a CLI tool to chat with LLMs and store conversations in markdown",
        add_config_file_help=True,
        default_config_files=default_config_files,
        config_file_parser_class=configargparse.YAMLConfigFileParser,
        auto_env_var_prefix="RYE_",
    )

    ##########
    group = parser.add_argument_group("Main")
    group.add_argument(
        "-c",
        "--continue",
        dest="continue_conversation",
        metavar="ID",
        default=None,
        help="Continue a conversation by ID or part of its filename",
    )
    group.add_argument(
        "-p",
        "--provider",
        default="anthropic",
        help=(
            "LLM provider to use (default: anthropic, available:"
            f" {', '.join(sorted(PROVIDERS))})"
        ),
    )
    group.add_argument(
        "--model",
        metavar="MODEL",
        default=None,
        help="Model to use (default: $ANTHROPIC_MODEL or the provider's default)",
    )
    group.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Timeout in seconds for API calls (default: 600)",
    )
    group.add_argument(
        "--list",
        action="store_true",
        default=False,
        help="List stored conversations and exit",
    )

    ##########
    group = parser.add_argument_group("Storage")
    group.add_argument(
        "--conversations-dir",
        metavar="DIR",
        env_var=CONVERSATIONS_ENV,
        default=None,
        help=(
            "Directory for conversation files, used if it or its parent exists"
            f" (default: ~/.rye) [env var: {CONVERSATIONS_ENV}]"
        ),
    )
    group.add_argument(
        "--input-history-file",
        metavar="INPUT_HISTORY_FILE",
        default="~/.rye.input.history",
        help="Specify the chat input history file (default: ~/.rye.input.history)",
    )
    group.add_argument(
        "--encoding",
        default="utf-8",
        help="Specify the encoding for conversation files (default: utf-8)",
    )

    ##########
    group = parser.add_argument_group("Output settings")
    group.add_argument(
        "--pretty",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Enable/disable pretty, colorized output (default: True)",
    )
    group.add_argument(
        "--fancy-input",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Enable/disable fancy input with history and completion (default: True)",
    )
    group.add_argument(
        "--user-input-color",
        default="#00cc00",
        help="Set the color for user input (default: #00cc00)",
    )
    group.add_argument(
        "--tool-output-color",
        default=None,
        help="Set the color for tool output (default: None)",
    )
    group.add_argument(
        "--tool-error-color",
        default="#FF2222",
        help="Set the color for tool error messages (default: #FF2222)",
    )
    group.add_argument(
        "--tool-warning-color",
        default="#FFA500",
        help="Set the color for tool warning messages (default: #FFA500)",
    )
    group.add_argument(
        "--assistant-output-color",
        default="#0088ff",
        help="Set the color for assistant output (default: #0088ff)",
    )
    group.add_argument(
        "--code-theme",
        default="default",
        help=(
            "Set the markdown code theme (default: default, other options include monokai,"
            " solarized-dark, solarized-light, or a Pygments builtin style,"
            " see https://pygments.org/styles for available themes)"
        ),
    )
    group.add_argument(
        "--auto-title",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Enable/disable asking the model for a title after the first exchange",
    )

    ##########
    group = parser.add_argument_group("Other settings")
    group.add_argument(
        "--config",
        is_config_file=True,
        metavar="CONFIG_FILE",
        help="Specify the config file (default: search for .rye.conf.yml in home and cwd)",
    ).complete = shtab.FILE
    group.add_argument(
        "--env-file",
        metavar="ENV_FILE",
        default=".env",
        help="Specify the .env file to load (default: .env in current directory)",
    ).complete = shtab.FILE
    group.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Enable verbose output",
    )
    group.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
        help="Show the version number and exit",
    )
    group.add_argument(
        "--shell-completions",
        metavar="SHELL",
        choices=shtab.SUPPORTED_SHELLS,
        default=None,
        help="Print shell completion script for the specified SHELL and exit",
    )

    return parser
