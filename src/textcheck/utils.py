"""Shared utilities for hashing, timestamps, and JSON envelope creation."""
from __future__ import annotations

import hashlib
import json
from datetime import datetime, timezone
from typing import IO, Iterable

from textcheck import __version__
from textcheck.models import SEVERITY_ORDER, Severity


def utc_timestamp() -> str:
    """Return an ISO 8601 UTC timestamp suitable for envelopes and logs."""

    return datetime.now(timezone.utc).isoformat()


def hash_bytes(data: bytes) -> str:
    """Return the SHA-256 hex digest for a bytes payload."""

    return hashlib.sha256(data).hexdigest()


def build_envelope(*, tool: str, files: Iterable[dict], generated_at: str | None = None) -> dict:
    """Construct a standard textcheck JSON envelope for tool outputs."""

    return {
        "textcheck_version": __version__,
        "tool": tool,
        "generated_at": generated_at or utc_timestamp(),
        "files": list(files),
    }


def dump_json_line(data: dict, output_handle: IO) -> None:
    """Serialize a dictionary as JSON followed by a newline to support streaming outputs."""

    json.dump(data, output_handle)
    output_handle.write("\n")


def _rank(severity: str) -> int:
    return SEVERITY_ORDER.get(Severity(severity), 0)


def filter_files_by_severity(files: Iterable[dict], minimum: str) -> list[dict]:
    """Return file entries containing only findings at or above ``minimum`` severity."""

    threshold = _rank(minimum)
    filtered: list[dict] = []

    for entry in files:
        items = [
            item
            for item in entry.get("items", [])
            if _rank(item.get("severity", Severity.ERROR.value)) >= threshold
        ]
        filtered.append({**entry, "items": items})

    return filtered


def summarize_severities(files: Iterable[dict]) -> dict[str, int]:
    """Count findings by severity across file entries."""

    totals = {severity.value: 0 for severity in Severity}

    for entry in files:
        for item in entry.get("items", []):
            severity = item.get("severity", Severity.ERROR.value)
            if severity in totals:
                totals[severity] += 1

    return totals


def format_text_line(path: str, item: dict) -> str:
    """Render one finding dictionary as a compiler-style diagnostic line."""

    location = item["location"]
    return (
        f"{path}:{location['line']}:{location['column']}: {item['severity']} "
        f"[{item['id']}] {item['name']}: {item['message']}"
    )
