import asyncio
import logging
import sys
from pathlib import Path

import shtab
from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler

from rye import __version__
from rye.args import get_parser
from rye.chat import ChatSession, open_conversation
from rye.commands.utils.helpers import format_summary
from rye.conversation import ConversationStore, resolve_conversations_dir
from rye.exceptions import ProviderError, RyeError, StorageError
from rye.io import InputOutput
from rye.providers import get_provider

CONFIG_FNAME = ".rye.conf.yml"

logger = logging.getLogger("rye")


def generate_search_path_list(default_file, command_line_file=None):
    """
    Files to search for ``default_file``, lowest priority first.

    The order is the home directory, the current directory, then the file
    named on the command line.
    """
    files = [Path.home() / default_file, Path(default_file)]
    if command_line_file:
        files.append(Path(command_line_file))

    resolved_files = []
    for fn in files:
        try:
            resolved = str(Path(fn).expanduser().resolve())
        except OSError:
            continue
        if resolved not in resolved_files:
            resolved_files.append(resolved)
    return resolved_files


def load_dotenv_files(dotenv_fname, encoding="utf-8"):
    dotenv_files = generate_search_path_list(".env", dotenv_fname)
    loaded = []
    for fname in dotenv_files:
        try:
            if Path(fname).exists():
                load_dotenv(fname, override=True, encoding=encoding)
                loaded.append(fname)
        except OSError as e:
            print(f"OSError loading {fname}: {e}")
        except Exception as e:
            print(f"Error loading {fname}: {e}")
    return loaded


def setup_logging(verbose=False):
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )
    if not verbose:
        for name in ("LiteLLM", "httpx", "httpcore"):
            logging.getLogger(name).setLevel(logging.WARNING)


def list_conversations(io, store):
    summaries = store.list_summaries()
    if not summaries:
        io.tool_output(f"No saved conversations found in {store.directory}")
        return
    for summary in summaries:
        io.tool_output(f"{summary.identifier}", bold=True)
        io.tool_output(f"  {format_summary(summary)}")


def main(argv=None, output=None):
    try:
        return asyncio.run(main_async(argv, output=output))
    except (KeyboardInterrupt, asyncio.CancelledError):
        return 130


async def main_async(argv=None, output=None):
    if argv is None:
        argv = sys.argv[1:]

    default_config_files = generate_search_path_list(CONFIG_FNAME)
    parser = get_parser(default_config_files)
    args, unknown = parser.parse_known_args(argv)

    loaded_dotenvs = load_dotenv_files(args.env_file, args.encoding)
    # Parse again so values from .env files are picked up
    args, unknown = parser.parse_known_args(argv)

    setup_logging(args.verbose)
    if unknown:
        logger.warning("Unknown Args: %s", " ".join(unknown))
    for fname in loaded_dotenvs:
        logger.debug("Loaded %s", fname)

    if args.shell_completions:
        parser.prog = "rye"
        print(shtab.complete(parser, shell=args.shell_completions))
        return 0

    io = InputOutput(
        pretty=args.pretty,
        input_history_file=args.input_history_file,
        output=output,
        user_input_color=args.user_input_color,
        tool_output_color=args.tool_output_color,
        tool_warning_color=args.tool_warning_color,
        tool_error_color=args.tool_error_color,
        assistant_output_color=args.assistant_output_color,
        code_theme=args.code_theme,
        encoding=args.encoding,
        fancy_input=args.fancy_input,
    )

    try:
        conversations_dir = resolve_conversations_dir(args.conversations_dir)
    except StorageError as err:
        io.tool_error(str(err))
        return 1
    logger.debug("rye %s, conversations in %s", __version__, conversations_dir)

    store = ConversationStore(conversations_dir, encoding=args.encoding)

    if args.list:
        try:
            list_conversations(io, store)
        except StorageError as err:
            io.tool_error(str(err))
            return 1
        return 0

    try:
        provider = get_provider(args.provider, model=args.model, timeout=args.timeout)
    except ProviderError as err:
        io.tool_error(f"Error: {err}")
        return 1

    for problem in provider.check_environment():
        io.tool_warning(problem)

    try:
        conversation = open_conversation(store, io, args.continue_conversation)
    except RyeError as err:
        io.tool_error(str(err))
        return 1

    chat = ChatSession(io, store, provider, conversation, auto_title=args.auto_title)
    chat.show_banner()
    await chat.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
