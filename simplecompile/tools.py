from __future__ import annotations

import shutil
from dataclasses import dataclass, field


def which(cmd: str) -> str | None:
    return shutil.which(cmd)


def fmt_tool(path: str | None) -> str:
    if path:
        return path
    return "\x1b[31m<missing>\x1b[0m"


@dataclass(frozen=True)
class Tooling:
    # system info
    uname: str | None
    id: str | None

    # checkers
    clang_tidy: str | None
    clang_format: str | None
    valgrind: str | None

    # compiler candidate name -> resolved path (None when missing)
    compilers: dict[str, str | None] = field(default_factory=dict)

    @staticmethod
    def detect(compilers: list[str] | tuple[str, ...] = ("clang++", "g++")) -> "Tooling":
        return Tooling(
            uname=which("uname"),
            id=which("id"),
            clang_tidy=which("clang-tidy"),
            clang_format=which("clang-format"),
            valgrind=which("valgrind"),
            compilers={c: which(c) for c in compilers},
        )

    def have(self, cmd: str) -> bool:
        """Look up a tool by attribute name or by its command name."""
        attr = cmd.replace("-", "_")
        if attr in ("uname", "id", "clang_tidy", "clang_format", "valgrind"):
            return getattr(self, attr) is not None
        return self.compilers.get(cmd) is not None

    def first_compiler(self) -> tuple[str, str] | None:
        # dict order is the preference order
        for name, path in self.compilers.items():
            if path:
                return name, path
        return None

    def as_dict(self) -> dict[str, str | None]:
        out: dict[str, str | None] = {
            "uname": self.uname,
            "id": self.id,
            "clang-tidy": self.clang_tidy,
            "clang-format": self.clang_format,
            "valgrind": self.valgrind,
        }
        out.update(self.compilers)
        return out
