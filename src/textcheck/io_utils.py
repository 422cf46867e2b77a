"""Shared utilities for handling CLI input and output streams."""
from __future__ import annotations

import glob
import io
import os
import sys
from dataclasses import dataclass
from typing import IO, List, Optional, Sequence, Tuple, Union

import click


@dataclass
class InputSource:
    """One file (or stdin) whose contents have been read into memory."""

    path: str
    data: bytes
    is_stdin: bool = False

    @property
    def display_name(self) -> str:
        return "stdin" if self.is_stdin else self.path


InputList = List[InputSource]


def _read_path(path: str) -> bytes:
    try:
        with open(path, "rb") as handle:
            return handle.read()
    except OSError as exc:  # pragma: no cover - thin wrapper
        raise click.ClickException(str(exc)) from exc


def resolve_inputs(paths: Sequence[str]) -> InputList:
    """Resolve CLI input arguments into in-memory sources.

    Expands glob patterns, skips directories, de-duplicates resolved paths,
    and reads stdin once for any number of ``-`` markers.
    """

    resolved: InputList = []
    seen: set[str] = set()

    for raw_path in paths:
        if raw_path == "-":
            if any(source.is_stdin for source in resolved):
                continue
            resolved.append(InputSource(path="-", data=sys.stdin.buffer.read(), is_stdin=True))
            continue

        matches = glob.glob(raw_path, recursive=True)
        if not matches:
            raise click.ClickException(f"No files matched pattern: {raw_path}")

        for match in matches:
            absolute = os.path.abspath(match)
            if absolute in seen or os.path.isdir(absolute):
                continue
            seen.add(absolute)
            resolved.append(InputSource(path=absolute, data=_read_path(absolute)))

    if not resolved:
        raise click.ClickException("No input files provided")

    resolved.sort(key=lambda source: source.path)

    return resolved


def write_source(source: InputSource, data: bytes) -> None:
    """Write ``data`` back to the file behind ``source``."""

    try:
        with open(source.path, "wb") as handle:
            handle.write(data)
    except OSError as exc:  # pragma: no cover - thin wrapper
        raise click.ClickException(str(exc)) from exc


def resolve_output_handle(
    output: Optional[Union[str, IO]], mode: str = "w"
) -> Tuple[IO, bool]:
    """Return an output handle and whether it should be closed by the caller."""

    if output is None:
        return click.get_text_stream("stdout"), False

    if isinstance(output, io.IOBase):
        return output, False

    if isinstance(output, str):
        if output == "-":
            return click.get_text_stream("stdout"), False
        try:
            return open(output, mode), True
        except OSError as exc:  # pragma: no cover - thin wrapper
            raise click.ClickException(str(exc)) from exc

    raise click.ClickException("Invalid output destination")
