# main.py
import locale
import sys

import structlog

from logging_config import setup_logging
from settings import DATABASE_FILE
from storage import JsonStorage
from task_manager import TodoManager
from terminal import Terminal
from ui import App

logger = structlog.get_logger(__name__)


def setup_collation():
    """Sorts titles by the user's locale, or by the default "C" collation if it isn't installed."""
    try:
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error as e:
        logger.warning("locale_unavailable", error=str(e))


def main():
    """Wires the backend to the terminal and runs the session until quit."""
    setup_logging()
    setup_collation()

    terminal = Terminal()
    try:
        # Initialize backend components
        storage = JsonStorage(DATABASE_FILE)
        task_manager = TodoManager(storage)

        app = App(task_manager, terminal)
        logger.info("session_started", path=DATABASE_FILE)
        app.run()
    except (KeyboardInterrupt, EOFError):
        logger.info("session_interrupted")
        terminal.break_line()
    except Exception as e:
        # Storage errors end the session; print a clean message
        logger.exception("session_failed")
        terminal.say(f"An error occurred: {e}", "red")
        sys.exit(1)
    logger.info("session_ended")
    sys.exit(0)


if __name__ == "__main__":
    main()
