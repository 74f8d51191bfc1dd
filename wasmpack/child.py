"""Running child processes with their command lines logged."""

from __future__ import annotations

import logging
import subprocess
import sys
from collections.abc import Sequence
from os import PathLike
from typing import Union

from wasmpack.options import WasmPackError

log = logging.getLogger(__name__)

Arg = Union[str, "PathLike[str]"]


def new_command(program: str) -> list[str]:
    """Start a command line for ``program``; on Windows it goes through ``cmd /c``."""
    if sys.platform.startswith("win"):
        return ["cmd", "/c", program]
    return [program]


def _describe(command: Sequence[Arg]) -> str:
    return " ".join(f'"{arg}"' for arg in map(str, command))


def _exit_status(returncode: int) -> str:
    if returncode < 0:
        return f"signal: {-returncode}"
    return f"exit code: {returncode}"


def _failure(name: object, returncode: int, command: Sequence[Arg]) -> WasmPackError:
    return WasmPackError(
        f"failed to execute `{name}`: exited with {_exit_status(returncode)}\n"
        f"  full command: {_describe(command)}"
    )


def run(command: Sequence[Arg], command_name: str) -> None:
    """Run ``command`` and raise if it does not exit successfully."""
    log.info("Running %s", _describe(command))
    result = subprocess.run([str(arg) for arg in command])
    if result.returncode != 0:
        raise _failure(command_name, result.returncode, command)


def run_capture_stdout(command: Sequence[Arg], tool: object) -> str:
    """Run ``command`` and return what it wrote to standard output."""
    log.info("Running %s", _describe(command))
    result = subprocess.run([str(arg) for arg in command], stdout=subprocess.PIPE)
    if result.returncode != 0:
        raise _failure(tool, result.returncode, command)
    return result.stdout.decode("utf-8", errors="replace")