"""Tests for the boundary-aware text chunker."""

from __future__ import annotations

import pytest

from lumentrail.ingest.chunker import TextSpan, chunk_text


def test_empty_and_blank_input():
    assert chunk_text("") == []
    assert chunk_text("  \n\t  \n") == []


def test_short_text_single_trimmed_chunk():
    text = "Alpha line.\n\nBeta line about alpha and Alpha again.\n"
    spans = chunk_text(text, max_length=1200)
    assert spans == [
        TextSpan(text="Alpha line.\n\nBeta line about alpha and Alpha again.", start=0, end=len(text))
    ]


def test_single_paragraph_3000_chars():
    text = "x" * 3000
    spans = chunk_text(text, max_length=1200, overlap=150)
    assert [(s.start, s.end) for s in spans] == [(0, 1200), (1050, 2250), (2100, 3000)]
    for prev, nxt in zip(spans, spans[1:]):
        assert 0 < prev.end - nxt.start <= 150
    assert spans[-1].end == len(text)


def test_window_shrinks_to_line_break():
    text = "a" * 300 + "\n" + "b" * 1500
    spans = chunk_text(text, max_length=1200, overlap=150)
    assert spans[0] == TextSpan(text="a" * 300, start=0, end=300)
    assert spans[1].start == 1050
    assert spans[-1].end == len(text)


def test_paragraph_break_preferred_position_is_last_newline():
    text = "a" * 400 + "\n\n" + "b" * 1500
    spans = chunk_text(text, max_length=1200, overlap=150)
    # The second "\n" of the pair is the last line break in the window.
    assert spans[0].end == 401
    assert spans[0].text == "a" * 400


def test_break_within_first_200_chars_is_ignored():
    text = "a" * 150 + "\n" + "b" * 1500
    spans = chunk_text(text, max_length=1200, overlap=150)
    assert spans[0].end == 1200


def test_final_window_is_not_shrunk():
    text = "a" * 500 + "\n" + "b" * 300
    spans = chunk_text(text, max_length=1200)
    assert len(spans) == 1
    assert spans[0].end == len(text)


def test_deterministic():
    text = ("Paragraph one.\n\n" + "word " * 400 + "\n") * 5
    assert chunk_text(text, 500, 80) == chunk_text(text, 500, 80)


def test_starts_non_decreasing_and_spans_cover_text():
    text = "".join(chr(ord("a") + i % 26) for i in range(5000))
    spans = chunk_text(text)
    assert spans[0].start == 0
    assert spans[-1].end == len(text)
    for prev, nxt in zip(spans, spans[1:]):
        assert nxt.start > prev.start
        assert nxt.start <= prev.end
    rebuilt = spans[0].text + "".join(s.text[prev.end - s.start:] for prev, s in zip(spans, spans[1:]))
    assert rebuilt == text


def test_progress_when_overlap_close_to_max_length():
    text = "x" * 2000
    spans = chunk_text(text, max_length=300, overlap=299)
    starts = [s.start for s in spans]
    assert starts == sorted(set(starts))
    assert all(b - a >= 200 for a, b in zip(starts, starts[1:]))
    assert spans[-1].end == len(text)


def test_progress_when_overlap_exceeds_max_length():
    spans = chunk_text("y" * 1500, max_length=300, overlap=1000)
    starts = [s.start for s in spans]
    assert starts == sorted(set(starts))
    assert spans[-1].end == 1500


def test_blank_windows_dropped_but_offsets_advance():
    text = "a" * 10 + " " * 3000 + "b" * 10
    spans = chunk_text(text, max_length=1200, overlap=150)
    assert all(s.text for s in spans)
    assert spans[0].text == "a" * 10
    assert spans[-1].text == "b" * 10
    assert spans[-1].end == len(text)


def test_chunk_text_is_stripped():
    spans = chunk_text("   padded text   ")
    assert spans[0].text == "padded text"
    assert (spans[0].start, spans[0].end) == (0, 17)


def test_invalid_arguments():
    with pytest.raises(ValueError):
        chunk_text("abc", max_length=0)
    with pytest.raises(ValueError):
        chunk_text("abc", overlap=-1)
