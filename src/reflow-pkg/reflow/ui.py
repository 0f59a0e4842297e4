"""ANSI terminal output utilities for the reflow command."""

import sys

ANSI_RESET  = "\033[0m"
ANSI_BOLD   = "\033[1m"
ANSI_DIM    = "\033[2m"
ANSI_RED    = "\033[31m"


def ansi(text: str, *codes: str) -> str:
    """Wrap text in ANSI escape codes when stderr is a TTY (no-op otherwise)."""
    if not sys.stderr.isatty():
        return text
    return "".join(codes) + text + ANSI_RESET


def log(msg: str) -> None:
    """Print a progress line to stderr, keeping stdout for wrapped text."""
    print(msg, file=sys.stderr)


def log_error(msg: str) -> None:
    print(ansi("error: ", ANSI_BOLD, ANSI_RED) + msg, file=sys.stderr)
