import logging

from rich.console import Console
from rich.logging import RichHandler


def setup_logging(verbose: bool = False):
    """Set up logging for the application."""
    level = logging.INFO if verbose else logging.WARNING

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Console handler (with Rich), kept off stdout so command output stays clean
    console = Console(stderr=True)
    rich_handler = RichHandler(
        console=console,
        show_time=verbose,
        show_path=False,
        rich_tracebacks=True
    )
    rich_handler.setLevel(level)

    for handler in list(root_logger.handlers):
        if isinstance(handler, RichHandler):
            root_logger.removeHandler(handler)
    root_logger.addHandler(rich_handler)

    # Configure specific loggers to be less verbose
    for name in ("httpx", "httpcore", "openai"):
        logging.getLogger(name).setLevel(logging.WARNING)

    logger = logging.getLogger(__name__)
    logger.info("Verbose logging enabled" if verbose else "Logging initialized")
