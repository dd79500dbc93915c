from __future__ import annotations

import logging
import tomllib
from dataclasses import fields, replace
from pathlib import Path
from typing import Any

from .context import RunOptions

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".simplecompile.toml"

_STR_KEYS = {"std", "program", "default_leak_marker", "analysis_marker"}
_LIST_KEYS = {"sources", "compilers", "warning_flags"}
_INT_KEYS = {"leak_sentinel"}
_TABLE_KEYS = {"leak_markers"}


class ConfigError(ValueError):
    pass


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigError(f"{path}: {e}") from e


def find_config(root: Path) -> tuple[Path, dict[str, Any]] | None:
    """Return (path, table) for the first config source found under root."""
    own = root / CONFIG_FILENAME
    if own.is_file():
        return own, _read_toml(own)

    pp = root / "pyproject.toml"
    if pp.is_file():
        table = _read_toml(pp).get("tool", {}).get("simplecompile")
        if table is not None:
            return pp, table
    return None


def options_from_table(table: dict[str, Any], base: RunOptions | None = None) -> RunOptions:
    base = base or RunOptions()
    known = {f.name for f in fields(RunOptions)}
    changes: dict[str, Any] = {}

    for key, value in table.items():
        key = key.replace("-", "_")
        if key not in known:
            raise ConfigError(f"unknown option: {key}")

        if key in _STR_KEYS:
            if not isinstance(value, str) or not value:
                raise ConfigError(f"{key} must be a non-empty string")
            changes[key] = value
        elif key in _LIST_KEYS:
            if isinstance(value, str):
                value = [value]
            if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
                raise ConfigError(f"{key} must be a list of strings")
            changes[key] = tuple(value)
        elif key in _INT_KEYS:
            if isinstance(value, bool) or not isinstance(value, int) or not 0 < value < 256:
                raise ConfigError(f"{key} must be an integer in 1..255")
            changes[key] = value
        elif key in _TABLE_KEYS:
            if not isinstance(value, dict) or not all(
                isinstance(k, str) and isinstance(v, str) for k, v in value.items()
            ):
                raise ConfigError(f"{key} must be a table of strings")
            changes[key] = dict(value)

    if "compilers" in changes and not changes["compilers"]:
        raise ConfigError("compilers must name at least one compiler")
    if "sources" in changes and not changes["sources"]:
        raise ConfigError("sources must list at least one pattern")

    return replace(base, **changes)


def load_options(
    root: Path,
    config_path: Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> RunOptions:
    """Defaults < config file < CLI overrides (None values are ignored)."""
    options = RunOptions()

    if config_path is not None:
        data = _read_toml(config_path)
        if config_path.name == "pyproject.toml":
            data = data.get("tool", {}).get("simplecompile", {})
        options = options_from_table(data, options)
        logger.debug("loaded config from %s", config_path)
    else:
        found = find_config(root)
        if found is not None:
            path, table = found
            options = options_from_table(table, options)
            logger.debug("loaded config from %s", path)

    if overrides:
        options = options_from_table(
            {k: v for k, v in overrides.items() if v is not None}, options
        )
    return options
