"""Shared data models used across textcheck modules."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping


class Kind(str, Enum):
    """Stable identifiers for every issue the checker can report."""

    DOS_NEWLINE = "TXT1"
    TAB_LITERAL = "TXT2"
    LINE_TOO_LONG = "TXT3"
    MISSING_EOF_NEWLINE = "TXT4"
    TRAILING_WHITESPACE = "TXT5"
    NO_COMMIT_MARKER = "TXT6"

    @classmethod
    def parse(cls, value: str) -> "Kind":
        """Accept either the stable id (``TXT3``) or the member name (``line_too_long``)."""

        text = value.strip()
        try:
            return cls(text.upper())
        except ValueError:
            pass
        try:
            return cls[text.upper().replace("-", "_")]
        except KeyError:
            raise ValueError(f"Unknown issue kind: {value}") from None


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    AUTOFIX = "autofix"


SEVERITY_ORDER = {Severity.AUTOFIX: 0, Severity.WARNING: 1, Severity.ERROR: 2}

DISPLAY_NAMES = {
    Kind.DOS_NEWLINE: "DOS Newlines",
    Kind.TAB_LITERAL: "Tab Literal",
    Kind.LINE_TOO_LONG: "Line Too Long",
    Kind.MISSING_EOF_NEWLINE: "File Does Not End in Newline",
    Kind.TRAILING_WHITESPACE: "Trailing Whitespace",
    Kind.NO_COMMIT_MARKER: "Explicit @no" + "commit",
}

# Anything not listed here is an error.
DEFAULT_SEVERITIES = {
    Kind.LINE_TOO_LONG: Severity.WARNING,
    Kind.TRAILING_WHITESPACE: Severity.AUTOFIX,
}

DEFAULT_MAX_LINE_LENGTH = 80


@dataclass
class Finding:
    """One reported style violation.

    ``offset`` is a byte offset into the checked buffer; ``line`` and
    ``column`` are the 1-based coordinates of the same position.
    """

    kind: Kind
    severity: Severity
    message: str
    offset: int
    line: int
    column: int
    original_text: bytes = b""
    replacement_text: bytes | None = None

    @property
    def name(self) -> str:
        return DISPLAY_NAMES[self.kind]

    @property
    def fixable(self) -> bool:
        return self.replacement_text is not None

    def as_dict(self) -> dict:
        return {
            "id": self.kind.value,
            "name": self.name,
            "severity": self.severity.value,
            "location": {
                "offset": self.offset,
                "line": self.line,
                "column": self.column,
            },
            "message": self.message,
            "original": _as_text(self.original_text),
            "replacement": (
                None if self.replacement_text is None else _as_text(self.replacement_text)
            ),
        }


def _as_text(data: bytes) -> str:
    return data.decode("utf-8", errors="replace")


@dataclass(frozen=True)
class CheckConfiguration:
    """Per-run settings; immutable so one instance can be shared across threads."""

    max_line_length: int = DEFAULT_MAX_LINE_LENGTH
    commit_hook_mode: bool = False
    disabled: frozenset[Kind] = frozenset()
    severity_overrides: Mapping[Kind, Severity] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        if isinstance(self.max_line_length, bool) or not isinstance(self.max_line_length, int):
            raise TypeError("max_line_length must be an integer")
        if self.max_line_length <= 0:
            object.__setattr__(self, "max_line_length", DEFAULT_MAX_LINE_LENGTH)
        object.__setattr__(self, "disabled", frozenset(self.disabled))
        object.__setattr__(self, "severity_overrides", dict(self.severity_overrides))

    def is_enabled(self, kind: Kind) -> bool:
        return kind not in self.disabled

    def severity_of(self, kind: Kind) -> Severity:
        return self.severity_overrides.get(kind, DEFAULT_SEVERITIES.get(kind, Severity.ERROR))


@dataclass
class CheckOutcome:
    """Findings for one file plus the stop signal raised toward the host."""

    findings: list[Finding] = field(default_factory=list)
    stop_requested: bool = False
