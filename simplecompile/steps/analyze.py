from __future__ import annotations

from dataclasses import dataclass

from .base import AVAILABLE, Probe, unavailable
from ..context import CompileContext
from ..oracles import Interpreter, MarkerPresent
from ..proc import CommandResult

OUTPUT_SUFFIX = "-clangstatic-output.txt"


@dataclass(frozen=True)
class StaticAnalysisStep:
    name: str = "clang --analyze"
    folds: bool = True
    oracle: Interpreter | None = None

    def probe(self, ctx: CompileContext) -> Probe:
        cc = ctx.expected_compiler()
        if cc is None or not cc.supports_analyze:
            return unavailable("compiler does not support --analyze")
        if not ctx.sources():
            return unavailable("no source files to analyze")
        return AVAILABLE

    def action(self, ctx: CompileContext) -> CommandResult:
        cc = ctx.expected_compiler()
        if cc is None:
            return CommandResult([], 127, "no compiler found\n")
        ctx.emit(f"*** using --analyze option for {cc.name} to detect issues")
        r = ctx.run([cc.path, "--analyze", f"-std={ctx.options.std}", *ctx.sources()])
        ctx.artifact(OUTPUT_SUFFIX).write_text(r.output, encoding="utf-8")
        ctx.echo(r.output)
        return r

    def interpreter(self, ctx: CompileContext) -> Interpreter:
        if self.oracle is not None:
            return self.oracle
        return MarkerPresent(ctx.options.analysis_marker, 1)
