from __future__ import annotations

import logging
import time
from functools import reduce
from typing import Iterable

from .context import CompileContext
from .proc import CommandResult
from .steps.base import Step, StepResult

logger = logging.getLogger(__name__)


def run_step(ctx: CompileContext, step: Step) -> StepResult:
    """Probe, act and interpret one step. Never raises for a tool failure."""
    ctx.banner()
    probe = step.probe(ctx)
    if not probe.ok:
        ctx.emit(f"*** ERROR {probe.reason}")
        return StepResult(step.name, "SKIP", 0, 0.0, probe.reason)

    start = time.time()
    try:
        r = step.action(ctx)
    except OSError as e:
        # e.g. an unreadable source or an unwritable capture file
        logger.warning("%s: %s", step.name, e)
        r = CommandResult([], 1, str(e))
    outcome = step.interpreter(ctx)(r.returncode, r.output)
    dur = round(time.time() - start, 3)

    if outcome == 0:
        return StepResult(step.name, "PASS", 0, dur)
    if not step.folds:
        return StepResult(step.name, "INFO", outcome, dur, f"exit={outcome} (not counted)")
    return StepResult(step.name, "FAIL", outcome, dur, f"exit={outcome}")


def _fold(ctx: CompileContext):
    def apply(acc: int, step: Step) -> int:
        logger.debug("-- START: %s", step.name)
        r = run_step(ctx, step)
        ctx.results.append(r)
        logger.debug("-- DONE:  %s [%s] (%ss) %s", step.name, r.status, r.seconds, r.note)
        if r.status != "FAIL":
            return acc
        ctx.emit(f"---> {step.name} failed, setting exitcode to {r.outcome}")
        # last failure wins, even over a larger earlier code
        return r.outcome

    return apply


def run_steps(ctx: CompileContext, steps: Iterable[Step]) -> int:
    """Run every step in order and return the last nonzero folded outcome."""
    ctx.results.clear()
    return reduce(_fold(ctx), steps, 0)


def run_profile(ctx: CompileContext, profile) -> int:
    ctx.banner("Recommended Usage: simplecompile > output.txt 2>&1")
    ctx.banner()
    ctx.emit(ctx.now())

    rc = run_steps(ctx, profile.steps)

    ctx.banner()
    ctx.emit(ctx.now())
    ctx.banner()
    ctx.emit(f"Exiting with {rc}")
    return rc
