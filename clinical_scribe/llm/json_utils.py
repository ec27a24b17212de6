"""Shared JSON cleanup helpers for model responses and pasted transcripts."""

import json
from typing import Iterator


def clean_json_response(text: str) -> str:
    """Strip markdown code fences and surrounding whitespace from JSON-like text."""
    cleaned = text.strip()
    if cleaned.startswith("```"):
        first_newline = cleaned.find("\n")
        if first_newline != -1:
            cleaned = cleaned[first_newline + 1 :]
    if cleaned.endswith("```"):
        cleaned = cleaned[:-3]
    return cleaned.strip()


DECODE_BUDGET_FACTOR = 4


def _bracket_pairs(text: str) -> list[tuple[int, int]]:
    """Match every closed ``[...]`` span in a single string-aware pass."""
    pairs: list[tuple[int, int]] = []
    open_positions: list[int] = []
    in_string = False
    escaped = False
    for index, char in enumerate(text):
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"' or char == "\n":
                # JSON strings never span lines; a stray prose quote ends here.
                in_string = False
            continue
        if char == '"':
            in_string = True
        elif char == "[":
            open_positions.append(index)
        elif char == "]" and open_positions:
            pairs.append((open_positions.pop(), index))
    pairs.sort()
    return pairs


def iter_json_arrays(text: str) -> Iterator[list]:
    """Yield every parseable JSON array embedded in free text, left to right.

    Candidates are closed bracket spans, so prose around the array (or
    bracketed timestamps before it) is tolerated. Decoding stops once the
    characters handed to the decoder exceed a fixed multiple of the input
    length, which keeps the whole search linear.
    """
    budget = DECODE_BUDGET_FACTOR * len(text)
    for start, end in _bracket_pairs(text):
        size = end + 1 - start
        if size > budget:
            return
        budget -= size
        try:
            parsed = json.loads(text[start : end + 1])
        except (json.JSONDecodeError, RecursionError):
            continue
        if isinstance(parsed, list):
            yield parsed


def find_json_array(text: str) -> list | None:
    """Return the first JSON array embedded in ``text``, or None."""
    return next(iter_json_arrays(text), None)
