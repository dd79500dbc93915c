from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

from simplecompile.context import CompileContext, RunOptions
from simplecompile.proc import CommandResult
from simplecompile.tools import Tooling



class FakeExecutor:
    """
    Stands in for run_command. Responses are keyed by a command prefix whose
    first element is the program's basename, e.g. ("clang++", "--analyze").
    The longest matching prefix wins; unmatched commands succeed silently.
    A response may be (rc, stdout, stderr); stderr is merged into the output
    unless the caller asked for it separately.
    """

    def __init__(self, responses: dict | None = None):
        self.responses: dict[tuple[str, ...], object] = dict(responses or {})
        self.calls: list[tuple[list[str], dict | None]] = []
        self.split_stderr: list[list[str]] = []

    def __call__(self, cmd, cwd, env=None, *, merge_stderr=True) -> CommandResult:
        cmd = list(cmd)
        self.calls.append((cmd, dict(env) if env else None))
        if not merge_stderr:
            self.split_stderr.append(cmd)
        norm = [Path(cmd[0]).name, *cmd[1:]] if cmd else []

        best = None
        for key, value in self.responses.items():
            if tuple(norm[: len(key)]) == key and (best is None or len(key) > len(best[0])):
                best = (key, value)

        if best is None:
            return CommandResult(cmd, 0, "")
        value = best[1]
        if callable(value):
            return value(cmd, Path(cwd))
        rc, out, *rest = value
        err = rest[0] if rest else ""
        if merge_stderr:
            return CommandResult(cmd, rc, out + err)
        return CommandResult(cmd, rc, out, err)

    def names(self) -> list[str]:
        return [Path(c[0]).name for c, _ in self.calls if c]

    def ran(self, *prefix: str) -> bool:
        for c, _ in self.calls:
            norm = [Path(c[0]).name, *c[1:]]
            if tuple(norm[: len(prefix)]) == prefix:
                return True
        return False


def make_tools(
    *,
    compilers: dict[str, str | None] | None = None,
    tidy: bool = False,
    fmt: bool = False,
    valgrind: bool = False,
    sysinfo: bool = False,
) -> Tooling:
    if compilers is None:
        compilers = {"clang++": None, "g++": None}
    return Tooling(
        uname="/usr/bin/uname" if sysinfo else None,
        id="/usr/bin/id" if sysinfo else None,
        clang_tidy="/usr/bin/clang-tidy" if tidy else None,
        clang_format="/usr/bin/clang-format" if fmt else None,
        valgrind="/usr/bin/valgrind" if valgrind else None,
        compilers=compilers,
    )


def builds_ok(cmd: list[str], cwd: Path) -> CommandResult:
    out = cmd[cmd.index("-o") + 1]
    (cwd / out).write_text("binary", encoding="utf-8")
    return CommandResult(cmd, 0, "")


def build_fails(code: int) -> Callable[[list[str], Path], CommandResult]:
    def _fail(cmd: list[str], cwd: Path) -> CommandResult:
        return CommandResult(cmd, code, "main.cpp:1:1: error: expected unqualified-id\n")

    return _fail


@pytest.fixture
def project(tmp_path: Path) -> Path:
    (tmp_path / "main.cpp").write_text("int main() { return 0; }\n", encoding="utf-8")
    return tmp_path


@pytest.fixture
def make_ctx(project: Path):
    def _make(tools: Tooling, executor: FakeExecutor | None = None, **opts) -> CompileContext:
        lines: list[str] = []
        ctx = CompileContext(
            root=project,
            options=RunOptions(**opts),
            tools=tools,
            execute=executor or FakeExecutor(),
            emit=lines.append,
        )
        ctx.lines = lines  # type: ignore[attr-defined]
        return ctx

    return _make
