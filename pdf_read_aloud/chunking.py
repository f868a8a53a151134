"""Sentence-boundary text chunking for the speech queue."""

from __future__ import annotations

import re

# Speech engines reject very long utterances; stay a little under ~4000 chars.
MAX_CHUNK_SIZE = 3900

_SENTENCE_END = re.compile(r"(?<=\.)")


def split_text_into_chunks(text: str, max_chars: int = MAX_CHUNK_SIZE) -> list[str]:
    """Split *text* into chunks of roughly at most *max_chars* characters.

    The text is cut immediately after every period, so the period stays with
    the sentence it ends.  Sentences are stripped and packed greedily into a
    buffer, each followed by a single space.  When the next sentence would
    push the buffer past *max_chars* the buffer is emitted as a chunk.

    A sentence that is longer than *max_chars* on its own is emitted as-is
    rather than being cut mid-sentence.

    >>> split_text_into_chunks("Hello. World.", 100)
    ['Hello. World. ']
    >>> split_text_into_chunks("A. B. C.", 4)
    ['A. ', 'B. ', 'C. ']
    """
    if max_chars < 1:
        raise ValueError(f"max_chars must be positive, got {max_chars}")

    chunks: list[str] = []
    current: list[str] = []
    current_len = 0

    for sentence in _SENTENCE_END.split(text):
        sentence = sentence.strip()
        if not sentence:
            continue
        if current and current_len + len(sentence) > max_chars:
            chunks.append("".join(current))
            current = []
            current_len = 0
        current.append(sentence + " ")
        current_len += len(sentence) + 1

    if current:
        chunks.append("".join(current))
    return chunks
