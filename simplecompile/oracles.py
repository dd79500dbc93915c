"""
Interpreters turn a finished tool invocation into an outcome code.

Each one is a plain callable ``(returncode, output) -> int`` so a step's
success oracle can be swapped without touching the runner.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

Interpreter = Callable[[int, str], int]


def exit_status(returncode: int, output: str) -> int:
    return returncode


def informational(returncode: int, output: str) -> int:
    return 0


@dataclass(frozen=True)
class MarkerAbsent:
    """Fail with `sentinel` when `marker` does not occur in the output."""

    marker: str
    sentinel: int = 111

    def __call__(self, returncode: int, output: str) -> int:
        return 0 if self.marker in output else self.sentinel


@dataclass(frozen=True)
class MarkerPresent:
    """Fail with `code` when `marker` occurs in the output."""

    marker: str = "warning"
    code: int = 1

    def __call__(self, returncode: int, output: str) -> int:
        return self.code if self.marker in output else 0
