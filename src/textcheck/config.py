"""Load textcheck settings from a project configuration file."""
from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any

from textcheck.errors import ConfigError
from textcheck.models import CheckConfiguration, Kind, Severity

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".textcheck.toml"
PYPROJECT_FILENAME = "pyproject.toml"


def find_config(directory: Path) -> Path | None:
    """Return the first configuration file found in ``directory``.

    ``.textcheck.toml`` wins over ``pyproject.toml``; a pyproject without a
    ``[tool.textcheck]`` table is ignored.
    """

    candidate = directory / CONFIG_FILENAME
    if candidate.is_file():
        return candidate

    pyproject = directory / PYPROJECT_FILENAME
    if pyproject.is_file() and _read_table(pyproject):
        return pyproject

    return None


def _read_table(path: Path) -> dict[str, Any]:
    try:
        with open(path, "rb") as handle:
            data = tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"{path}: invalid TOML: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"{path}: {exc}") from exc

    if path.name == PYPROJECT_FILENAME:
        tool = data.get("tool", {})
        if not isinstance(tool, dict):
            raise ConfigError(f"{path}: tool must be a table")
        table = tool.get("textcheck", {})
    else:
        table = data.get("textcheck", data)

    if not isinstance(table, dict):
        raise ConfigError(f"{path}: textcheck settings must be a table")
    return table


def _max_line_length(value: Any, path: Path) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"{path}: maxlinelength must be an integer")
    # Zero or negative means "use the default".
    return value if value > 0 else None


def _disabled(value: Any, path: Path) -> frozenset[Kind]:
    if not isinstance(value, list):
        raise ConfigError(f"{path}: disabled must be a list of issue kinds")
    try:
        return frozenset(Kind.parse(str(item)) for item in value)
    except ValueError as exc:
        raise ConfigError(f"{path}: {exc}") from exc


def _severity_overrides(value: Any, path: Path) -> dict[Kind, Severity]:
    if not isinstance(value, dict):
        raise ConfigError(f"{path}: severity must be a table of kind = severity")

    overrides: dict[Kind, Severity] = {}
    for key, level in value.items():
        try:
            overrides[Kind.parse(key)] = Severity(str(level).lower())
        except ValueError as exc:
            raise ConfigError(f"{path}: invalid severity override {key} = {level!r}") from exc
    return overrides


def load_config(
    path: Path | None = None,
    *,
    max_line_length: int | None = None,
    commit_hook_mode: bool = False,
) -> CheckConfiguration:
    """Build a ``CheckConfiguration`` from ``path`` plus explicit overrides.

    Keyword arguments take precedence over file values; with no file the
    defaults apply.
    """

    table: dict[str, Any] = {}
    if path is not None:
        table = _read_table(path)
        logger.info("Loaded configuration from %s", path)

    length = _max_line_length(table.get("maxlinelength"), path)
    if max_line_length is not None and max_line_length > 0:
        length = max_line_length

    settings: dict[str, Any] = {"commit_hook_mode": commit_hook_mode}
    if length is not None:
        settings["max_line_length"] = length
    if "disabled" in table:
        settings["disabled"] = _disabled(table["disabled"], path)
    if "severity" in table:
        settings["severity_overrides"] = _severity_overrides(table["severity"], path)

    return CheckConfiguration(**settings)
