from __future__ import annotations

from pathlib import Path

import pytest

from simplecompile.profiles import PROFILES, get_profile
from simplecompile.runner import run_profile

from conftest import FakeExecutor, build_fails, builds_ok, make_tools

CLANG = {"clang++": "/usr/bin/clang++", "g++": "/usr/bin/g++"}
GCC_ONLY = {"clang++": None, "g++": "/usr/bin/g++"}
CLEAN_VALGRIND = "==1==     in use at exit: 0 bytes in 0 blocks\n"


def _full_executor(overrides: dict | None = None) -> FakeExecutor:
    responses = {
        ("clang++", "-std=c++14"): builds_ok,
        ("g++", "-std=c++14"): builds_ok,
        ("valgrind", "--version"): (0, "valgrind-3.18.1\n"),
        ("valgrind", "--leak-check=full"): (0, CLEAN_VALGRIND),
    }
    responses.update(overrides or {})
    return FakeExecutor(responses)


def _names(ctx) -> list[str]:
    return [r.name for r in ctx.results]


def test_full_profile_order() -> None:
    names = [s.name for s in get_profile("full").steps]
    assert names == [
        "uname -a",
        "id",
        "choose compiler",
        "build",
        "run program",
        "clang-tidy",
        "clang-format",
        "valgrind",
        "sanitizer build",
        "sanitizer run",
        "clang --analyze",
        "cleanup",
    ]


def test_unknown_profile() -> None:
    with pytest.raises(ValueError):
        get_profile("nope")
    assert set(PROFILES) == {"full", "quick"}


def test_no_tools_at_all_exits_zero(make_ctx) -> None:
    ex = FakeExecutor()
    ctx = make_ctx(make_tools(), ex)

    assert run_profile(ctx, get_profile("full")) == 0
    assert ex.calls == []
    assert _names(ctx) == [s.name for s in get_profile("full").steps]


def test_compiler_only_builds_and_runs(make_ctx, project: Path) -> None:
    ex = _full_executor()
    ctx = make_ctx(make_tools(compilers=GCC_ONLY), ex)

    assert run_profile(ctx, get_profile("full")) == 0

    status = {r.name: r.status for r in ctx.results}
    assert status["build"] == "PASS"
    assert status["run program"] == "PASS"
    for name in ("clang-tidy", "clang-format", "valgrind", "clang --analyze"):
        assert status[name] == "SKIP"
    assert not (project / "myprogram").exists()


def test_compile_error_propagates_status(make_ctx) -> None:
    ex = _full_executor({("g++", "-std=c++14"): build_fails(2)})
    ctx = make_ctx(make_tools(compilers=GCC_ONLY, valgrind=True), ex)

    assert run_profile(ctx, get_profile("full")) == 2

    status = {r.name: r.status for r in ctx.results}
    assert status["run program"] == "SKIP"
    assert status["valgrind"] == "SKIP"
    assert status["sanitizer build"] == "INFO"
    assert status["sanitizer run"] == "SKIP"
    assert not ex.ran("myprogram")


def test_leak_sentinel_with_everything_else_green(make_ctx) -> None:
    ex = _full_executor(
        {("valgrind", "--leak-check=full"): (0, "==1== in use at exit: 8 bytes in 1 blocks\n")}
    )
    ctx = make_ctx(make_tools(compilers=CLANG, tidy=True, fmt=True, valgrind=True), ex)

    assert run_profile(ctx, get_profile("full")) == 111


def test_analysis_warning_overrides_earlier_codes(make_ctx) -> None:
    ex = _full_executor(
        {
            ("myprogram",): (3, ""),
            ("clang++", "--analyze"): (0, "a.cpp:1:1: warning: dead store\n"),
        }
    )
    ctx = make_ctx(make_tools(compilers=CLANG), ex)

    assert run_profile(ctx, get_profile("full")) == 1


def test_program_failure_kept_when_later_steps_pass(make_ctx) -> None:
    ex = _full_executor({("myprogram",): (5, "")})
    ctx = make_ctx(make_tools(compilers=GCC_ONLY), ex)
    # the sanitizer run also exits 5
    assert run_profile(ctx, get_profile("full")) == 5


def test_full_run_leaves_no_artifacts(make_ctx, project: Path) -> None:
    ex = _full_executor(
        {
            ("clang-format", "-style=llvm", "-dump-config"): (0, "BasedOnStyle: LLVM\n"),
            ("clang-format", "./main.cpp"): (0, "int main() { return 0; }\n"),
        }
    )
    ctx = make_ctx(make_tools(compilers=CLANG, tidy=True, fmt=True, valgrind=True), ex)

    assert run_profile(ctx, get_profile("full")) == 0
    assert sorted(p.name for p in project.iterdir()) == ["main.cpp"]


def test_quick_profile(make_ctx) -> None:
    ex = _full_executor()
    ctx = make_ctx(make_tools(compilers=CLANG, tidy=True, valgrind=True), ex)

    assert run_profile(ctx, get_profile("quick")) == 0
    assert _names(ctx) == ["choose compiler", "build", "run program", "cleanup"]
    assert not ex.ran("clang-tidy")


def test_stale_program_never_runs_after_failed_compile(make_ctx, project: Path) -> None:
    (project / "myprogram").write_text("left over from an earlier build", encoding="utf-8")
    ex = _full_executor(
        {
            ("g++", "-std=c++14"): build_fails(2),
            ("myprogram",): (3, ""),
        }
    )
    ctx = make_ctx(make_tools(compilers=GCC_ONLY, valgrind=True), ex)

    assert run_profile(ctx, get_profile("full")) == 2

    status = {r.name: r.status for r in ctx.results}
    assert status["build"] == "FAIL"
    assert status["run program"] == "SKIP"
    assert status["valgrind"] == "SKIP"
    assert not ex.ran("myprogram")
    assert not ex.ran("valgrind", "--leak-check=full")
