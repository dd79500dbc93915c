from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Callable, TYPE_CHECKING

from .proc import CommandResult, Executor, run_command
from .tools import Tooling, fmt_tool

if TYPE_CHECKING:
    from .steps.base import StepResult

BANNER = "=" * 67


@dataclass(frozen=True)
class RunOptions:
    std: str = "c++14"
    program: str = "myprogram"
    sources: tuple[str, ...] = ("*.cpp",)
    compilers: tuple[str, ...] = ("clang++", "g++")
    warning_flags: tuple[str, ...] = ("-Wall", "-Wextra", "-Wno-sign-compare")

    leak_sentinel: int = 111
    default_leak_marker: str = "in use at exit: 0 bytes in 0 blocks"
    # `valgrind --version` output -> marker printed by that build
    leak_markers: dict[str, str] = field(
        default_factory=lambda: {
            "valgrind-3.15.0.GIT": "definitely lost: 0 bytes in 0 blocks",
        }
    )
    analysis_marker: str = "warning"


@dataclass(frozen=True)
class Compiler:
    name: str
    path: str

    @property
    def supports_analyze(self) -> bool:
        # --analyze is a clang driver option
        return Path(self.name).name.startswith("clang")


@dataclass
class CompileContext:
    root: Path
    options: RunOptions
    tools: Tooling
    profile_name: str = "full"
    execute: Executor = run_command
    emit: Callable[[str], None] = print
    compiler: Compiler | None = None
    generated: list[Path] = field(default_factory=list)
    results: list["StepResult"] = field(default_factory=list)

    @classmethod
    def create(
        cls,
        *,
        root: Path,
        options: RunOptions | None = None,
        profile_name: str = "full",
        tools: Tooling | None = None,
    ) -> "CompileContext":
        options = options or RunOptions()
        return cls(
            root=root,
            options=options,
            tools=tools or Tooling.detect(options.compilers),
            profile_name=profile_name,
        )

    @staticmethod
    def now() -> str:
        return datetime.now().astimezone().strftime("%a %b %d %H:%M:%S %Z %Y")

    @property
    def program_path(self) -> Path:
        return self.root / self.options.program

    def artifact(self, suffix: str) -> Path:
        return self.root / f"{self.options.program}{suffix}"

    def rel(self, p: Path) -> str:
        try:
            return str(p.relative_to(self.root))
        except ValueError:
            return str(p)

    def have(self, cmd: str) -> bool:
        return self.tools.have(cmd)

    def expected_compiler(self) -> Compiler | None:
        """The compiler discovery would pick (or has picked)."""
        if self.compiler is not None:
            return self.compiler
        found = self.tools.first_compiler()
        if found is None:
            return None
        return Compiler(*found)

    def sources(self) -> list[str]:
        seen: set[str] = set()
        for pat in self.options.sources:
            for p in self.root.glob(pat):
                if p.is_file():
                    seen.add(f"./{p.relative_to(self.root).as_posix()}")
        return sorted(seen)

    def run(
        self,
        cmd: list[str],
        env: dict[str, str] | None = None,
        *,
        merge_stderr: bool = True,
    ) -> CommandResult:
        if merge_stderr:
            return self.execute(cmd, self.root, env)
        return self.execute(cmd, self.root, env, merge_stderr=False)

    def echo(self, text: str) -> None:
        if text:
            self.emit(text.rstrip("\n"))

    def banner(self, line: str | None = None) -> None:
        self.emit(BANNER)
        if line:
            self.emit(line)

    def print_doctor(self, profile) -> None:
        print(f"Root: {self.root}\n")

        print("Tools:")
        for k, v in self.tools.as_dict().items():
            print(f"{k:>12}: {fmt_tool(v)}")
        print()

        print("Options:")
        for k, v in asdict(self.options).items():
            if isinstance(v, (list, tuple)):
                v = " ".join(v)
            print(f"  {k + ':':<20} {v}")
        print(f"  {'sources found:':<20} {' '.join(self.sources()) or '<none>'}")
        print()

        from .doctor import plan_for_profile  # local import avoids circulars

        print(f"Plan ({profile.name}):")
        for item in plan_for_profile(self, profile):
            if item.status == "RUN":
                print(f"  RUN  {item.name}")
            else:
                why = f" ({item.reason})" if item.reason else ""
                print(f"  SKIP {item.name:<28}{why}")
