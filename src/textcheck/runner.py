"""Run the text checker over CLI inputs and wrap the results in an envelope."""
from __future__ import annotations

import logging
from typing import Iterable, List

from textcheck.checker import TextChecker
from textcheck.fixes import splice_fixes
from textcheck.io_utils import InputSource, write_source
from textcheck.utils import build_envelope, hash_bytes, utc_timestamp

logger = logging.getLogger(__name__)

TOOL_NAME = "textcheck-check"


def run_checks(
    inputs: Iterable[InputSource],
    checker: TextChecker,
    *,
    fix: bool = False,
) -> dict:
    """Check every input and return the JSON envelope.

    With ``fix`` set, autofixes are written back to on-disk inputs; the
    reported items are the findings seen before fixing.
    """

    generated_at = utc_timestamp()
    merged_files: List[dict] = []

    for source in inputs:
        outcome = checker.run(source.display_name, source.data)

        file_entry = {
            "path": source.display_name,
            "sha256": hash_bytes(source.data),
            "stopped": outcome.stop_requested,
            "items": [f.as_dict() for f in outcome.findings],
        }

        if fix and not source.is_stdin:
            fixed, applied = splice_fixes(source.data, outcome.findings)
            if applied:
                write_source(source, fixed)
                logger.info("%s: applied %d fix(es)", source.display_name, applied)
            file_entry["fixed"] = applied

        merged_files.append(file_entry)

    return build_envelope(tool=TOOL_NAME, files=merged_files, generated_at=generated_at)
