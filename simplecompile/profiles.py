from __future__ import annotations

from dataclasses import dataclass

from .steps.analyze import StaticAnalysisStep
from .steps.clang_format import FormatCheckStep
from .steps.cleanup import CleanupStep
from .steps.compiler import BuildStep, DiscoverCompilerStep, sanitizer_build_step
from .steps.program import RunProgramStep, sanitizer_run_step
from .steps.shell import ShellStep
from .steps.tidy import ClangTidyStep
from .steps.valgrind import LeakCheckStep

PROFILES = {
    "full": "compile, run, lint, format, leak-check, sanitize, analyze (default)",
    "quick": "compile and run only",
}


@dataclass(frozen=True)
class Profile:
    name: str
    steps: list


def _preamble() -> list:
    return [
        ShellStep("uname -a", ["uname", "-a"], require_cmd="uname"),
        ShellStep("id", ["id"], require_cmd="id"),
    ]


def _full_steps() -> list:
    return [
        *_preamble(),
        DiscoverCompilerStep(),
        BuildStep(),
        RunProgramStep(),
        ClangTidyStep(),
        FormatCheckStep(),
        LeakCheckStep(),
        sanitizer_build_step(),
        sanitizer_run_step(),
        StaticAnalysisStep(),
        CleanupStep(),
    ]


def get_profile(name: str) -> Profile:
    if name == "full":
        return Profile(name="full", steps=_full_steps())

    if name == "quick":
        return Profile(
            name="quick",
            steps=[DiscoverCompilerStep(), BuildStep(), RunProgramStep(), CleanupStep()],
        )

    raise ValueError(f"unknown profile: {name}")
