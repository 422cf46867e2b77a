"""Detect line-oriented formatting problems in raw file contents."""
from __future__ import annotations

import logging
import re
from typing import Callable, Iterable

from textcheck.locations import LineIndex
from textcheck.models import (
    DISPLAY_NAMES,
    CheckConfiguration,
    CheckOutcome,
    Finding,
    Kind,
    Severity,
)

logger = logging.getLogger(__name__)

NO_COMMIT_MARKER = b"@no" + b"commit"

TAB_WIDTH = 4

# Matches begin only at the first space of a run.
TRAILING_SPACES = re.compile(rb"(?<! ) +$", re.MULTILINE)


class _Reporter:
    """Collects findings for one buffer, resolving both location forms."""

    def __init__(self, data: bytes, config: CheckConfiguration) -> None:
        self.index = LineIndex(data)
        self.config = config
        self.findings: list[Finding] = []

    def at_offset(
        self,
        offset: int,
        kind: Kind,
        message: str,
        original: bytes = b"",
        replacement: bytes | None = None,
    ) -> None:
        line, column = self.index.position(offset)
        self._add(kind, message, offset, line, column, original, replacement)

    def at_line(
        self,
        line: int,
        column: int,
        kind: Kind,
        message: str,
        original: bytes = b"",
        replacement: bytes | None = None,
    ) -> None:
        offset = self.index.offset(line, column)
        self._add(kind, message, offset, line, column, original, replacement)

    def _add(self, kind, message, offset, line, column, original, replacement) -> None:
        if not self.config.is_enabled(kind):
            return
        self.findings.append(
            Finding(
                kind=kind,
                severity=self.config.severity_of(kind),
                message=message,
                offset=offset,
                line=line,
                column=column,
                original_text=original,
                replacement_text=replacement,
            )
        )


def lint_dos_newline(data: bytes, reporter: _Reporter) -> bool:
    """Report the first carriage return; return True when a stop should follow."""

    position = data.find(b"\r")
    if position == -1:
        return False
    reporter.at_offset(
        position,
        Kind.DOS_NEWLINE,
        'You must use ONLY Unix linebreaks ("\\n") in source code.',
        b"\r",
    )
    return reporter.config.is_enabled(Kind.DOS_NEWLINE)


def expand_tabs(line: bytes) -> bytes:
    """Expand every tab to spaces, then drop the trailing space run this may create."""

    return line.replace(b"\t", b" " * TAB_WIDTH).rstrip(b" ")


def lint_tab(data: bytes, reporter: _Reporter) -> None:
    for index, line in enumerate(data.split(b"\n")):
        if b"\t" not in line:
            continue
        reporter.at_line(
            index + 1,
            1,
            Kind.TAB_LITERAL,
            "This line contains tab literal. Consider setting up your "
            "editor to use spaces for indentation",
            line,
            expand_tabs(line),
        )


def lint_line_wrap(data: bytes, reporter: _Reporter) -> None:
    width = reporter.config.max_line_length
    for index, line in enumerate(data.split(b"\n")):
        if len(line) > width:
            reporter.at_line(
                index + 1,
                1,
                Kind.LINE_TOO_LONG,
                f"This line is {len(line):,} characters long, "
                f"but the convention is {width} characters.",
                line,
            )


def lint_eof_newline(data: bytes, reporter: _Reporter) -> None:
    if not data.endswith(b"\n"):
        reporter.at_offset(
            len(data),
            Kind.MISSING_EOF_NEWLINE,
            "Files must end in a newline.",
            b"",
            b"\n",
        )


def lint_trailing_whitespace(data: bytes, reporter: _Reporter) -> None:
    for match in TRAILING_SPACES.finditer(data):
        reporter.at_offset(
            match.start(),
            Kind.TRAILING_WHITESPACE,
            "This line contains trailing whitespace. Consider setting up "
            "your editor to automatically remove trailing whitespace, you "
            "will save time.",
            match.group(0),
            b"",
        )


def lint_no_commit(data: bytes, reporter: _Reporter) -> None:
    position = data.find(NO_COMMIT_MARKER)
    if position != -1:
        marker = NO_COMMIT_MARKER.decode("ascii")
        reporter.at_offset(
            position,
            Kind.NO_COMMIT_MARKER,
            f'This file is explicitly marked as "{marker}", which blocks commits.',
            NO_COMMIT_MARKER,
        )


class TextChecker:
    """Run the fixed battery of text checks against one buffer at a time.

    The checker keeps no per-run state, so a single instance may be shared
    by concurrent callers.
    """

    def __init__(self, config: CheckConfiguration | None = None) -> None:
        self._config = config or CheckConfiguration()

    @property
    def config(self) -> CheckConfiguration:
        return self._config

    def supported_kinds(self) -> list[Kind]:
        return list(Kind)

    def severity_of(self, kind: Kind) -> Severity:
        return self._config.severity_of(kind)

    def display_name_of(self, kind: Kind) -> str:
        return DISPLAY_NAMES[kind]

    def run(
        self,
        path: str,
        contents: bytes,
        config: CheckConfiguration | None = None,
        *,
        should_stop: Callable[[], bool] | None = None,
    ) -> CheckOutcome:
        """Check ``contents`` and report whether later checks were cut short.

        ``should_stop`` lets the caller end the run after the newline and
        tab checks for reasons of its own.
        """

        config = config or self._config
        if not contents:
            # An empty file does not need a trailing newline either.
            return CheckOutcome()

        reporter = _Reporter(contents, config)
        stop = lint_dos_newline(contents, reporter)
        lint_tab(contents, reporter)

        if stop or (should_stop is not None and should_stop()):
            logger.debug("%s: skipping line checks after newline check", path)
            return CheckOutcome(findings=reporter.findings, stop_requested=stop)

        lint_line_wrap(contents, reporter)
        lint_eof_newline(contents, reporter)
        lint_trailing_whitespace(contents, reporter)

        if config.commit_hook_mode:
            lint_no_commit(contents, reporter)

        logger.debug("%s: %d finding(s)", path, len(reporter.findings))
        return CheckOutcome(findings=reporter.findings)

    def check(
        self,
        path: str,
        contents: bytes,
        config: CheckConfiguration | None = None,
    ) -> list[Finding]:
        return self.run(path, contents, config).findings


def kinds_table(checker: TextChecker) -> Iterable[tuple[str, str, str]]:
    """Yield ``(id, display name, severity)`` rows for every supported kind."""

    for kind in checker.supported_kinds():
        yield kind.value, checker.display_name_of(kind), checker.severity_of(kind).value
