"""Map byte offsets in a buffer to 1-based (line, column) coordinates and back."""
from __future__ import annotations

import bisect


class LineIndex:
    """Line start table for a ``\\n``-delimited byte buffer.

    Columns count bytes, so multi-byte characters advance the column by
    their encoded length.
    """

    def __init__(self, data: bytes) -> None:
        starts = [0]
        position = data.find(b"\n")
        while position != -1:
            starts.append(position + 1)
            position = data.find(b"\n", position + 1)
        self._starts = starts
        self._size = len(data)

    def position(self, offset: int) -> tuple[int, int]:
        """Return ``(line, column)`` for ``offset``; ``len(data)`` is a valid offset."""

        if offset < 0 or offset > self._size:
            raise ValueError(f"Offset {offset} outside buffer of {self._size} bytes")
        index = bisect.bisect_right(self._starts, offset) - 1
        return index + 1, offset - self._starts[index] + 1

    def offset(self, line: int, column: int = 1) -> int:
        """Return the byte offset of ``(line, column)``."""

        if line < 1 or line > len(self._starts):
            raise ValueError(f"Line {line} outside buffer of {len(self._starts)} lines")
        return self._starts[line - 1] + column - 1
