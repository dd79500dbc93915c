from __future__ import annotations

import logging
from dataclasses import dataclass

from .base import AVAILABLE, Probe, not_applicable, unavailable
from ..context import CompileContext
from ..oracles import Interpreter, MarkerAbsent
from ..proc import CommandResult

logger = logging.getLogger(__name__)

OUTPUT_SUFFIX = "-valgrind-output.txt"


def leak_marker(ctx: CompileContext) -> str:
    """Pick the "no leak" line this valgrind build prints, by its version."""
    o = ctx.options
    r = ctx.run([ctx.tools.valgrind, "--version"])
    version = r.output.strip()
    marker = o.leak_markers.get(version, o.default_leak_marker)
    logger.debug("valgrind version %r -> leak marker %r", version, marker)
    return marker


@dataclass(frozen=True)
class LeakCheckStep:
    name: str = "valgrind"
    folds: bool = True
    oracle: Interpreter | None = None

    def probe(self, ctx: CompileContext) -> Probe:
        if not ctx.have("valgrind"):
            return unavailable("valgrind is not available on this system")
        if not ctx.program_path.is_file():
            return not_applicable("could not find executable to test with valgrind")
        return AVAILABLE

    def action(self, ctx: CompileContext) -> CommandResult:
        ctx.emit("*** running valgrind to detect memory leaks")
        r = ctx.run(
            [ctx.tools.valgrind, "--leak-check=full", f"./{ctx.options.program}"]
        )
        ctx.artifact(OUTPUT_SUFFIX).write_text(r.output, encoding="utf-8")
        ctx.echo(r.output)
        return r

    def interpreter(self, ctx: CompileContext) -> Interpreter:
        if self.oracle is not None:
            return self.oracle
        return MarkerAbsent(leak_marker(ctx), ctx.options.leak_sentinel)
