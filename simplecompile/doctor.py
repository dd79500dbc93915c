from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .context import CompileContext


@dataclass(frozen=True)
class PlanItem:
    name: str
    status: str  # "RUN" | "SKIP"
    reason: str


def plan_for_profile(ctx: CompileContext, profile: Any) -> list[PlanItem]:
    """What a run would do right now, judged by each step's own probe."""
    items: list[PlanItem] = []
    for step in profile.steps:
        p = step.probe(ctx)
        if p.ok:
            items.append(PlanItem(step.name, "RUN", ""))
        else:
            items.append(PlanItem(step.name, "SKIP", f"{p.availability.value}: {p.reason}"))
    return items


def doctor_report(ctx: CompileContext, profile: Any) -> dict[str, Any]:
    return {
        "root": str(ctx.root),
        "profile": profile.name,
        "tools": ctx.tools.as_dict(),
        "sources": ctx.sources(),
        "plan": [
            {"name": i.name, "status": i.status, "reason": i.reason}
            for i in plan_for_profile(ctx, profile)
        ],
    }
