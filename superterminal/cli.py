import argparse
import logging
import sys
from typing import Callable, List, Optional

from . import __version__
from . import ui
from .api import CommandTranslator, CompletionBackend
from .config import Config
from .logger import setup_logging
from .platform_utils import (
    Clipboard,
    ClipboardError,
    ShellDetector,
    get_clipboard,
    get_shell_detector,
)

logger = logging.getLogger(__name__)

PROG = "superterminal"
CONFIG_COMMAND = "config"
GLOBAL_FLAGS = ("-y", "--yes", "-v", "--verbose")
SHORT_GLOBAL_FLAGS = "yv"

BackendFactory = Callable[[Config], CompletionBackend]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=PROG,
        description="AI-powered CLI that converts natural language to shell commands.",
        epilog=(
            "Describe what you want to do and SuperTerminal will turn it into a shell command. "
            "The command is displayed for your review and can be copied to the clipboard; "
            "it is never executed.\n\n"
            f"commands:\n  {CONFIG_COMMAND}    Configure SuperTerminal settings "
            f"(see '{PROG} {CONFIG_COMMAND} --help')"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "query", metavar="QUERY", nargs="?",
        help="Natural language description of the command you want to run",
    )
    parser.add_argument("-y", "--yes", action="store_true", help="Skip confirmation and automatically copy command")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose output")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def build_config_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=f"{PROG} {CONFIG_COMMAND}",
        description="Configure SuperTerminal settings.",
    )
    parser.add_argument("--model", type=str, help="Set the OpenAI model to use")
    parser.add_argument("--max-tokens", type=int, help="Set the maximum tokens for responses")
    parser.add_argument("--temperature", type=float, help="Set the temperature (0.0 to 2.0)")
    parser.add_argument("--show", action="store_true", help="Show current configuration")
    return parser


def _is_global_flag(token: str) -> bool:
    """True for -y, --verbose and bundled short forms such as -vy."""
    if token in GLOBAL_FLAGS:
        return True
    return (
        len(token) > 1 and token[0] == "-" and token[1] != "-"
        and all(c in SHORT_GLOBAL_FLAGS for c in token[1:])
    )


def parse_args(argv: List[str]) -> argparse.Namespace:
    """
    Parses the command line, dispatching to the config parser when the first
    positional token is `config`.

    Global flags may precede the subcommand, as in `superterminal -v config --show`.
    """
    for index, token in enumerate(argv):
        if _is_global_flag(token):
            continue
        if token == CONFIG_COMMAND:
            global_args = build_parser().parse_args(argv[:index])
            args = build_config_parser().parse_args(argv[index + 1:])
            args.yes = global_args.yes
            args.verbose = global_args.verbose
            args.command = CONFIG_COMMAND
            return args
        break

    args = build_parser().parse_args(argv)
    args.command = None
    return args


def handle_config(
    model: Optional[str] = None,
    max_tokens: Optional[int] = None,
    temperature: Optional[float] = None,
    show: bool = False,
) -> None:
    """Handler for the 'config' command."""
    config = Config.load_or_default()

    if show:
        ui.display_config(config)
        return

    if config.update(model=model, max_tokens=max_tokens, temperature=temperature):
        config.save()
        ui.display_config_updated()
    else:
        ui.display_no_config_changes()


def handle_query(
    query: str,
    auto_yes: bool = False,
    verbose: bool = False,
    backend_factory: Optional[BackendFactory] = None,
    clipboard: Optional[Clipboard] = None,
    shell_detector: Optional[ShellDetector] = None,
) -> None:
    """Translates the query, shows the command and offers to copy it."""
    shell = (shell_detector or get_shell_detector()).detect()
    if verbose:
        ui.display_verbose_context(shell, query)

    config = Config.load_or_default()
    logger.info(f"Loaded configuration: {config}")
    backend = backend_factory(config) if backend_factory else None
    translator = CommandTranslator(config, backend=backend)

    ui.display_status("Translating to shell command...")
    command = translator.translate(query, shell=shell)
    ui.display_command(command)

    if not (auto_yes or ui.confirm_copy()):
        ui.display_not_copied()
        return

    try:
        (clipboard or get_clipboard()).copy(command)
    except ClipboardError as e:
        ui.display_clipboard_fallback(command, e)
    else:
        ui.display_copied(command)


def run_cli(
    argv: Optional[List[str]] = None,
    backend_factory: Optional[BackendFactory] = None,
    clipboard: Optional[Clipboard] = None,
    shell_detector: Optional[ShellDetector] = None,
) -> int:
    """
    Runs one invocation of the tool.

    Returns:
        The process exit code. Errors propagate to the caller.
    """
    argv = sys.argv[1:] if argv is None else argv
    args = parse_args(argv)
    setup_logging(args.verbose)

    if args.command == CONFIG_COMMAND:
        handle_config(
            model=args.model,
            max_tokens=args.max_tokens,
            temperature=args.temperature,
            show=args.show,
        )
        return 0

    if args.query is not None:
        handle_query(
            args.query,
            auto_yes=args.yes,
            verbose=args.verbose,
            backend_factory=backend_factory,
            clipboard=clipboard,
            shell_detector=shell_detector,
        )
        return 0

    # If no query or command is given, show the help.
    build_parser().print_help()
    return 0
