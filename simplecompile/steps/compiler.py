from __future__ import annotations

import logging
from dataclasses import dataclass

from .base import AVAILABLE, Probe, unavailable
from ..context import Compiler, CompileContext
from ..oracles import Interpreter, exit_status, informational
from ..proc import CommandResult

logger = logging.getLogger(__name__)

SANITIZE_FLAGS = ["-fsanitize=address", "-fno-omit-frame-pointer"]


@dataclass(frozen=True)
class DiscoverCompilerStep:
    """Pick the first available compiler in preference order."""

    name: str = "choose compiler"
    folds: bool = False

    def probe(self, ctx: CompileContext) -> Probe:
        return AVAILABLE

    def action(self, ctx: CompileContext) -> CommandResult:
        found = ctx.tools.first_compiler()
        if found is None:
            wanted = " OR ".join(ctx.options.compilers)
            ctx.emit(f"*** ERROR could not find a compiler: No {wanted} ***")
            ctx.compiler = None
            return CommandResult([], 0, "")

        ctx.compiler = Compiler(*found)
        logger.debug("using compiler %s at %s", ctx.compiler.name, ctx.compiler.path)
        ctx.emit(
            f"*** compiling with {ctx.compiler.name} to create an executable "
            f"called {ctx.options.program}"
        )
        ctx.banner()
        r = ctx.run([ctx.compiler.path, "--version"])
        ctx.echo(r.output)
        return r

    def interpreter(self, ctx: CompileContext) -> Interpreter:
        return informational


@dataclass(frozen=True)
class BuildStep:
    """
    Compile every source into one executable.

    Any previous executable is removed first, so a failed compile leaves
    nothing behind for the run steps to pick up.

    With sanitize=True this is the AddressSanitizer rebuild. Its status is
    reported but does not decide the run's exit code.
    """

    name: str = "build"
    sanitize: bool = False
    folds: bool = True

    def probe(self, ctx: CompileContext) -> Probe:
        if ctx.expected_compiler() is None:
            return unavailable("no compiler found, cannot build")
        if not ctx.sources():
            pats = " ".join(ctx.options.sources)
            return unavailable(f"no source files matching {pats} in {ctx.root}")
        return AVAILABLE

    def command(self, ctx: CompileContext, cc: Compiler) -> list[str]:
        o = ctx.options
        if self.sanitize:
            return [cc.path, f"-std={o.std}", *SANITIZE_FLAGS, "-g", *ctx.sources(), "-o", o.program]
        return [cc.path, f"-std={o.std}", *o.warning_flags, *ctx.sources(), "-g", "-o", o.program]

    def action(self, ctx: CompileContext) -> CommandResult:
        cc = ctx.expected_compiler()
        if cc is None:
            return CommandResult([], 127, "no compiler found\n")
        if self.sanitize:
            ctx.emit(f"*** compiling with {cc.name} to checking for memory leaks")

        prog = ctx.program_path
        if prog.is_file():
            prog.unlink()
        r = ctx.run(self.command(ctx, cc))
        ctx.echo(r.output)
        return r

    def interpreter(self, ctx: CompileContext) -> Interpreter:
        return exit_status


def sanitizer_build_step() -> BuildStep:
    return BuildStep(name="sanitizer build", sanitize=True, folds=False)
