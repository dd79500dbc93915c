from __future__ import annotations

from dataclasses import dataclass

from .base import AVAILABLE, Probe, unavailable
from ..context import CompileContext
from ..oracles import Interpreter, exit_status
from ..proc import CommandResult


@dataclass(frozen=True)
class ClangTidyStep:
    name: str = "clang-tidy"
    folds: bool = True

    def probe(self, ctx: CompileContext) -> Probe:
        if not ctx.have("clang-tidy"):
            return unavailable("clang-tidy is not available on this system")
        if not ctx.sources():
            return unavailable("no source files to lint")
        return AVAILABLE

    def action(self, ctx: CompileContext) -> CommandResult:
        tidy = ctx.tools.clang_tidy
        ctx.emit("*** running clang-tidy using options from .clang-tidy")
        ctx.echo(ctx.run([tidy, "--version"]).output)

        r = ctx.run([tidy, *ctx.sources(), "--", f"-std={ctx.options.std}"])
        ctx.echo(r.output)
        return r

    def interpreter(self, ctx: CompileContext) -> Interpreter:
        return exit_status
