import logging
import sys

from dotenv import load_dotenv

from .cli import run_cli
from .errors import SuperTerminalError
from .ui import display_error

# Configure logging
logger = logging.getLogger(__name__)


def main():
    """Main entry point for the application."""
    # A missing .env is fine; it only matters during development
    load_dotenv()
    try:
        exit_code = run_cli()
        sys.exit(exit_code)
    except SuperTerminalError as e:
        logger.debug(f"Command failed: {e!r}")
        display_error(e)
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("Operation cancelled by user")
        print("\nOperation cancelled by user")
        sys.exit(130)  # 128 + SIGINT
    except Exception as e:
        logger.exception(f"Unhandled exception: {str(e)}")
        display_error(e)
        sys.exit(1)


if __name__ == "__main__":
    main()
