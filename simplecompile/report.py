from __future__ import annotations

import json
from dataclasses import asdict
from pathlib import Path
from typing import Any

from .context import CompileContext


def run_summary(ctx: CompileContext, outcome: int) -> dict[str, Any]:
    return {
        "schema_version": 1,
        "tool": {"name": "simplecompile"},
        "profile": ctx.profile_name,
        "root": str(ctx.root),
        "compiler": ctx.compiler.name if ctx.compiler else None,
        "outcome": outcome,
        "options": asdict(ctx.options),
        "tools": ctx.tools.as_dict(),
        "results": [asdict(r) for r in ctx.results],
    }


def write_summary(path: Path, summary: dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(summary, indent=2, sort_keys=True), encoding="utf-8")
