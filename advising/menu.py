"""Interactive text menu over an `AdvisingSession`.

Input and output are injected (`read_line`, `write`) so the loop can be driven
from tests the same way it is driven from a terminal.
"""

from __future__ import annotations

import logging
from typing import Callable

from .errors import AdvisingError
from .session import AdvisingSession
from .sources import source_for_path

LOGGER = logging.getLogger(__name__)

MENU_TEXT = "\n".join(
    [
        "=============================",
        "ABCU Advising Assistant",
        "1. Load Data Structure",
        "2. Print Course List",
        "3. Print Course Details",
        "4. Load Data from Custom File",
        "9. Exit",
        "=============================",
    ]
)

LOAD, LIST, SHOW, LOAD_CUSTOM, EXIT = "1", "2", "3", "4", "9"


def run_menu(
    session: AdvisingSession,
    read_line: Callable[[str], str] = input,
    write: Callable[[str], None] = print,
) -> None:
    """Prompt for selections until the user exits or input runs out."""
    while True:
        write(MENU_TEXT)
        try:
            choice = read_line("Selection: ").strip()
        except EOFError:
            break

        if choice == EXIT:
            break

        try:
            handle_choice(session, choice, read_line, write)
        except EOFError:
            break
        except AdvisingError as exc:
            LOGGER.debug("Menu choice %s failed", choice, exc_info=True)
            write(f"SYSTEM ERROR: {exc}")
        write("")

    write("Goodbye.")


def handle_choice(
    session: AdvisingSession,
    choice: str,
    read_line: Callable[[str], str],
    write: Callable[[str], None],
) -> None:
    if choice == LOAD:
        count = session.load()
        write(f"SUCCESS: Loaded {count} course(s) from {session.source}")
    elif choice == LIST:
        for line in session.course_lines():
            write(line)
    elif choice == SHOW:
        code = read_line("What course code? ").strip()
        write("")
        for line in session.describe(code):
            write(line)
    elif choice == LOAD_CUSTOM:
        path = read_line("Enter filename: ").strip()
        count = session.load(source_for_path(path))
        write(f"SUCCESS: Loaded {count} course(s) from {session.source}")
    else:
        write("Invalid selection.")
