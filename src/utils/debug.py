from __future__ import annotations

import sys

_verbose = False
# Severities printed to stderr whether or not verbose logging is on.
_ALWAYS_SHOWN = ("warning", "error")


def set_verbose(enabled: bool) -> None:
    global _verbose
    _verbose = enabled


def is_verbose() -> bool:
    return _verbose


def log(message: str, severity: str | None = None) -> None:
    """
    Verbose-only output on stdout. A severity tags the line with it, and
    warnings and errors go to stderr even when verbose logging is off.
    """
    line = message if severity is None else f"{severity.upper()}: {message}"
    if severity in _ALWAYS_SHOWN:
        print(line, file=sys.stderr)
    elif _verbose:
        print(line)
