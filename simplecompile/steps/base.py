from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Protocol

from ..context import CompileContext
from ..oracles import Interpreter
from ..proc import CommandResult


class Availability(enum.Enum):
    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"  # a required tool is missing
    NOT_APPLICABLE = "not applicable"  # a prerequisite artifact is missing


@dataclass(frozen=True)
class Probe:
    availability: Availability
    reason: str = ""

    @property
    def ok(self) -> bool:
        return self.availability is Availability.AVAILABLE


AVAILABLE = Probe(Availability.AVAILABLE)


def unavailable(reason: str) -> Probe:
    return Probe(Availability.UNAVAILABLE, reason)


def not_applicable(reason: str) -> Probe:
    return Probe(Availability.NOT_APPLICABLE, reason)


@dataclass
class StepResult:
    name: str
    status: str  # "PASS" | "FAIL" | "SKIP" | "INFO"
    outcome: int
    seconds: float
    note: str = ""


class Step(Protocol):
    name: str
    # whether a nonzero outcome overwrites the run's exit code
    folds: bool

    def probe(self, ctx: CompileContext) -> Probe: ...

    def action(self, ctx: CompileContext) -> CommandResult: ...

    def interpreter(self, ctx: CompileContext) -> Interpreter: ...
