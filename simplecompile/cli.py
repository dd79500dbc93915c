from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from importlib.metadata import PackageNotFoundError, version as pkg_version
from pathlib import Path

from .config import ConfigError, load_options
from .context import CompileContext
from .doctor import doctor_report
from .profiles import PROFILES, get_profile
from .report import run_summary, write_summary
from .runner import run_profile

logger = logging.getLogger(__name__)


def get_version() -> str:
    # 1) Canonical for installed distributions (including editable)
    try:
        return pkg_version("simplecompile")
    except PackageNotFoundError:
        pass

    # 2) Dev fallback: locate pyproject.toml by walking up from this file
    import tomllib

    here = Path(__file__).resolve()
    for parent in here.parents:
        pp = parent / "pyproject.toml"
        if pp.is_file():
            try:
                data = tomllib.loads(pp.read_text(encoding="utf-8"))
            except (OSError, tomllib.TOMLDecodeError):
                return "unknown"
            return data.get("project", {}).get("version", "unknown")

    return "unknown"


def add_common_args(sp: argparse.ArgumentParser) -> None:
    sp.add_argument(
        "profile",
        choices=sorted(PROFILES),
        nargs="?",
        default="full",
    )
    sp.add_argument(
        "--project-root",
        type=Path,
        default=None,
        help="Directory holding the sources (default: current directory)",
    )
    sp.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Config file (default: .simplecompile.toml or [tool.simplecompile] in pyproject.toml)",
    )
    sp.add_argument("--std", default=None, help="C++ standard, e.g. c++17")
    sp.add_argument("--program", default=None, help="Name of the executable to build")
    sp.add_argument(
        "--json",
        action="store_true",
        help="Emit machine-readable JSON to stdout (progress goes to stderr).",
    )
    sp.add_argument("-v", "--verbose", action="store_true", help="Debug logging")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="simplecompile",
        description="Compile, run, lint, format-check and leak-check the C++ sources "
        "in a directory, reporting one exit code.",
    )
    sub = p.add_subparsers(dest="cmd")
    sub.add_parser("version", help="Show version")
    sub.add_parser("list-profiles", help="List available profiles")

    runp = sub.add_parser("run", help="Run every check (the default command)")
    add_common_args(runp)
    runp.add_argument(
        "--summary",
        type=Path,
        default=None,
        help="Write a JSON summary of the run to this file",
    )

    docp = sub.add_parser("doctor", help="Show tool availability and what would run")
    add_common_args(docp)

    return p


def _setup_logging(verbose: bool) -> None:
    debug = verbose or bool(os.environ.get("SIMPLECOMPILE_DEBUG"))
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    cmd = args.cmd or "run"

    if cmd == "version":
        print(f"simplecompile {get_version()}")
        return 0

    if cmd == "list-profiles":
        for name, desc in sorted(PROFILES.items()):
            print(f"{name:<8}- {desc}")
        return 0

    _setup_logging(getattr(args, "verbose", False))

    root = (getattr(args, "project_root", None) or Path.cwd()).resolve()
    if not root.is_dir():
        print(f"❌ Not a directory: {root}")
        return 20

    try:
        options = load_options(
            root,
            getattr(args, "config", None),
            {"std": getattr(args, "std", None), "program": getattr(args, "program", None)},
        )
    except ConfigError as e:
        print(f"❌ Bad configuration: {e}")
        return 20

    json_mode = getattr(args, "json", False)
    profile = get_profile(getattr(args, "profile", "full"))
    ctx = CompileContext.create(root=root, options=options, profile_name=profile.name)

    if cmd == "doctor":
        if json_mode:
            print(json.dumps(doctor_report(ctx, profile), indent=2))
        else:
            ctx.print_doctor(profile)
        return 0

    # cmd == run
    if json_mode:
        ctx.emit = lambda line: print(line, file=sys.stderr)

    try:
        rc = run_profile(ctx, profile)
    except KeyboardInterrupt:
        logger.info("interrupted")
        return 130

    summary = run_summary(ctx, rc)
    summary_path = getattr(args, "summary", None)
    if summary_path is not None:
        write_summary(summary_path, summary)
    if json_mode:
        print(json.dumps(summary, indent=2, sort_keys=True))

    return rc


if __name__ == "__main__":
    raise SystemExit(main())
