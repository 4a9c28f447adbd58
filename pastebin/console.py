"""
Operator console: reads commands from a stream while the server runs.
"""
import logging
import sys
from typing import Callable, TextIO

logger = logging.getLogger(__name__)

HELP = "Available commands: stop, count"


def run_console(
    count: Callable[[], int],
    stop: Callable[[], None],
    stdin: TextIO = sys.stdin,
    stdout: TextIO = sys.stdout,
):
    """
    Serve console commands until "stop" or end of input.

    Args:
        count: Returns the current number of pastes
        stop: Asks the server to shut down
    """
    stdout.write("> ")
    stdout.flush()
    for line in stdin:
        command = line.strip()
        if command == "stop":
            stdout.write("Shutting down server...\n")
            stdout.flush()
            stop()
            return
        elif command == "count":
            try:
                stdout.write(f"Total pastes: {count()}\n")
            except Exception as e:
                logger.error(f"Could not count pastes: {e}")
                stdout.write(f"Error: {e}\n")
        elif command:
            stdout.write(HELP + "\n")
        stdout.write("> ")
        stdout.flush()
