from __future__ import annotations

import difflib
import logging
from dataclasses import dataclass

from .base import AVAILABLE, Probe, unavailable
from ..context import CompileContext
from ..oracles import Interpreter, exit_status
from ..proc import CommandResult

logger = logging.getLogger(__name__)

CONFIG_HEADER = (
    "# generated by simplecompile with: \n"
    "# clang-format -style=llvm -dump-config > .clang-format\n"
)


@dataclass(frozen=True)
class FormatCheckStep:
    """Print formatting suggestions as a diff per source; never fails the run."""

    name: str = "clang-format"
    style: str = "llvm"
    folds: bool = False

    def probe(self, ctx: CompileContext) -> Probe:
        if not ctx.have("clang-format"):
            return unavailable("clang-format is not available on this system")
        return AVAILABLE

    def _ensure_config(self, ctx: CompileContext) -> None:
        cfg = ctx.root / ".clang-format"
        if cfg.exists():
            ctx.emit("*** using existing .clang-format")
            return

        ctx.emit(f"*** generating new .clang-format based on {self.style.upper()} style")
        r = ctx.run([ctx.tools.clang_format, f"-style={self.style}", "-dump-config"])
        if r.returncode != 0:
            logger.warning("clang-format -dump-config failed (exit=%s)", r.returncode)
            ctx.echo(r.output)
            return
        cfg.write_text(CONFIG_HEADER + r.output, encoding="utf-8")
        ctx.generated.append(cfg)

    def action(self, ctx: CompileContext) -> CommandResult:
        ctx.emit("*** running clang-format format formatting suggestions")
        self._ensure_config(ctx)

        worst = 0
        chunks: list[str] = []
        for src in ctx.sources():
            ctx.emit(f"*** formatting suggestions for {src}")
            # stdout is the formatted file; keep diagnostics out of the diff
            r = ctx.run([ctx.tools.clang_format, src], merge_stderr=False)
            ctx.echo(r.errors)
            if r.returncode != 0:
                worst = r.returncode
                ctx.echo(r.output)
                continue

            original = (ctx.root / src).read_text(encoding="utf-8", errors="replace")
            diff = "".join(
                difflib.unified_diff(
                    original.splitlines(keepends=True),
                    r.output.splitlines(keepends=True),
                    fromfile=src,
                    tofile=f"{src} (formatted)",
                )
            )
            ctx.echo(diff)
            chunks.append(diff)

        return CommandResult([ctx.tools.clang_format], worst, "".join(chunks))

    def interpreter(self, ctx: CompileContext) -> Interpreter:
        return exit_status
