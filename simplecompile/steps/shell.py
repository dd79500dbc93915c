from __future__ import annotations

from dataclasses import dataclass

from .base import AVAILABLE, Probe, unavailable
from ..context import CompileContext
from ..oracles import Interpreter, exit_status
from ..proc import CommandResult


@dataclass(frozen=True)
class ShellStep:
    name: str
    cmd: list[str]
    require_cmd: str | None = None
    folds: bool = False
    oracle: Interpreter = exit_status

    def probe(self, ctx: CompileContext) -> Probe:
        if self.require_cmd and not ctx.have(self.require_cmd):
            return unavailable(f"{self.require_cmd} is not available on this system")
        return AVAILABLE

    def action(self, ctx: CompileContext) -> CommandResult:
        r = ctx.run(self.cmd)
        ctx.echo(r.output)
        return r

    def interpreter(self, ctx: CompileContext) -> Interpreter:
        return self.oracle
