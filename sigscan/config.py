"""Shared constants and information about the running process."""

from __future__ import annotations

import os
import sys
from pathlib import Path

from .errors import ERROR_INVALID_PARAMETER, ArgumentError

CPU_MULTIPLIER = 2
PIPE_GUID = "{40BABB7D-7842-44AE-AF0E-8ED740AA881F}"
DEFAULT_ADDRESS = ("127.0.0.1", 40881)
PIPE_BUFFER_SIZE = 65535
VIRUS = "Virus"
NORMAL = "Normal"


def worker_count() -> int:
    """Number of workers to run: processor count times the multiplier."""
    return (os.cpu_count() or 1) * CPU_MULTIPLIER


def program_dir() -> Path:
    """Directory that holds the running program."""
    program = sys.argv[0] if sys.argv and sys.argv[0] else ""
    if not program:
        raise ArgumentError("program_dir", ERROR_INVALID_PARAMETER)
    return Path(program).resolve().parent


def command_line(argv: list[str] | None = None) -> list[str]:
    """Arguments given to the program, without the program name."""
    args = list(sys.argv[1:] if argv is None else argv)
    for arg in args:
        if not isinstance(arg, str):
            raise ArgumentError("Invalid command line argument", ERROR_INVALID_PARAMETER)
    return args