from __future__ import annotations

from dataclasses import dataclass, field

from .base import AVAILABLE, Probe, not_applicable
from ..context import CompileContext
from ..oracles import Interpreter, exit_status
from ..proc import CommandResult


@dataclass(frozen=True)
class RunProgramStep:
    name: str = "run program"
    env: dict[str, str] = field(default_factory=dict)
    folds: bool = True

    def probe(self, ctx: CompileContext) -> Probe:
        if not ctx.program_path.is_file():
            return not_applicable(f"could not find {ctx.options.program}")
        return AVAILABLE

    def action(self, ctx: CompileContext) -> CommandResult:
        if self.env:
            ctx.emit(f"*** running {ctx.options.program} with memory checking")
        else:
            ctx.emit(f"*** running {ctx.options.program}")
        r = ctx.run([f"./{ctx.options.program}"], env=self.env or None)
        ctx.echo(r.output)
        return r

    def interpreter(self, ctx: CompileContext) -> Interpreter:
        return exit_status


def sanitizer_run_step() -> RunProgramStep:
    return RunProgramStep(name="sanitizer run", env={"ASAN_OPTIONS": "detect_leaks=1"})
