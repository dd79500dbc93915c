from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path

from .base import AVAILABLE, Probe
from ..context import CompileContext
from ..oracles import Interpreter, informational
from ..proc import CommandResult
from .analyze import OUTPUT_SUFFIX as ANALYZE_SUFFIX
from .valgrind import OUTPUT_SUFFIX as VALGRIND_SUFFIX

logger = logging.getLogger(__name__)


def artifact_paths(ctx: CompileContext) -> list[Path]:
    paths = [
        ctx.program_path,
        ctx.artifact(".dSYM"),
        ctx.root / "core",
        ctx.artifact(VALGRIND_SUFFIX),
        ctx.artifact(ANALYZE_SUFFIX),
    ]
    paths += sorted(ctx.root.glob("*.plist"))
    # only configs we wrote ourselves
    paths += ctx.generated
    return paths


def remove_path(p: Path) -> bool:
    """Best-effort rm -rf. Returns True when something was removed."""
    try:
        if p.is_dir() and not p.is_symlink():
            shutil.rmtree(p)
        else:
            p.unlink()
        return True
    except FileNotFoundError:
        return False
    except OSError as e:
        logger.debug("cleanup: could not remove %s: %s", p, e)
        return False


@dataclass(frozen=True)
class CleanupStep:
    name: str = "cleanup"
    folds: bool = False

    def probe(self, ctx: CompileContext) -> Probe:
        return AVAILABLE

    def action(self, ctx: CompileContext) -> CommandResult:
        ctx.emit(f"*** cleaning up, deleting {ctx.options.program}")
        removed = [ctx.rel(p) for p in artifact_paths(ctx) if remove_path(p)]
        ctx.generated.clear()
        logger.debug("cleanup removed: %s", removed)
        return CommandResult([], 0, "\n".join(removed))

    def interpreter(self, ctx: CompileContext) -> Interpreter:
        return informational
