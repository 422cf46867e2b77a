"""Apply autofix findings back onto a buffer."""
from __future__ import annotations

import logging
from typing import Iterable

from textcheck.errors import FixConflictError
from textcheck.models import Finding

logger = logging.getLogger(__name__)


def fixable(findings: Iterable[Finding]) -> list[Finding]:
    """Return the findings that carry a replacement."""

    return [finding for finding in findings if finding.fixable]


def splice_fixes(contents: bytes, findings: Iterable[Finding]) -> tuple[bytes, int]:
    """Splice every fix into ``contents`` in a single pass.

    Returns the new buffer and the number of fixes actually applied.

    Fixes are applied in buffer order. A fix starting inside a span that was
    already replaced is skipped; re-running the checker picks up anything
    left behind.
    """

    ordered = sorted(fixable(findings), key=lambda f: (f.offset, len(f.original_text)))
    parts: list[bytes] = []
    last_end = 0
    applied = 0

    for finding in ordered:
        end = finding.offset + len(finding.original_text)
        if contents[finding.offset : end] != finding.original_text:
            raise FixConflictError(
                f"{finding.kind.value} at line {finding.line}: buffer no longer "
                "matches the reported text"
            )
        if finding.offset < last_end:
            logger.debug(
                "Skipping overlapping %s fix at offset %d", finding.kind.value, finding.offset
            )
            continue
        parts.append(contents[last_end : finding.offset])
        parts.append(finding.replacement_text)
        last_end = end
        applied += 1

    parts.append(contents[last_end:])
    return b"".join(parts), applied


def apply_fixes(contents: bytes, findings: Iterable[Finding]) -> bytes:
    return splice_fixes(contents, findings)[0]
