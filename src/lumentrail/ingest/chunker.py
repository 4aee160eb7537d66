"""Boundary-aware overlapping text chunker.

Windows are at most ``max_length`` characters. A window that stops short of
the end of the text is pulled back to its last line break when that break
lies more than ``_MIN_BREAK_OFFSET`` characters into the window, so chunks
end on paragraph or line boundaries when one is available.
"""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_MAX_LENGTH = 1200
DEFAULT_OVERLAP = 150

_MIN_STEP = 200
_MIN_BREAK_OFFSET = 200


@dataclass(frozen=True)
class TextSpan:
    """A trimmed slice of the source text and its ``[start, end)`` offsets."""

    text: str
    start: int
    end: int


def chunk_text(
    text: str,
    max_length: int = DEFAULT_MAX_LENGTH,
    overlap: int = DEFAULT_OVERLAP,
) -> list[TextSpan]:
    """Split *text* into ordered, overlapping spans.

    Args:
        text: Full decoded text of the document.
        max_length: Maximum window size in characters.
        overlap: Characters shared between consecutive windows.

    Returns:
        Spans in ascending ``start`` order. Empty for blank input.

    Raises:
        ValueError: If ``max_length < 1`` or ``overlap < 0``.
    """
    if max_length < 1:
        raise ValueError("max_length must be >= 1")
    if overlap < 0:
        raise ValueError("overlap must be >= 0")
    if not text.strip():
        return []

    spans: list[TextSpan] = []
    step = max(_MIN_STEP, max_length - overlap)
    length = len(text)
    start = 0

    while start < length:
        end = min(start + max_length, length)
        if end < length:
            window = text[start:end]
            last_break = max(window.rfind("\n\n"), window.rfind("\n"))
            if last_break > _MIN_BREAK_OFFSET:
                end = start + last_break

        piece = text[start:end].strip()
        if piece:
            spans.append(TextSpan(text=piece, start=start, end=end))

        if end >= length:
            break
        start = max(end - overlap, start + step)

    return spans
