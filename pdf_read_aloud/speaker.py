"""Chunked speech dispatch: long text in, bounded utterances out."""

from __future__ import annotations

import logging
from typing import Callable

from .chunking import MAX_CHUNK_SIZE, split_text_into_chunks
from .engine import SpeechEngine

logger = logging.getLogger(__name__)

MIN_SPEECH_RATE = 0.5
MAX_SPEECH_RATE = 4.0
SPEECH_RATE_STEP = 0.5


class ChunkedSpeaker:
    """Feed arbitrarily long text to a :class:`SpeechEngine` in chunks.

    Every chunk is appended to the engine's queue, so chunks play
    back-to-back in document order and never interrupt what is already
    queued.  All operations are silent no-ops while the engine is not ready.
    """

    def __init__(self, engine: SpeechEngine, max_chunk_size: int = MAX_CHUNK_SIZE):
        if max_chunk_size < 1:
            raise ValueError(f"max_chunk_size must be positive, got {max_chunk_size}")
        self.engine = engine
        self.max_chunk_size = max_chunk_size

    def is_ready(self) -> bool:
        return self.engine.is_ready()

    def split(self, text: str) -> list[str]:
        return split_text_into_chunks(text, self.max_chunk_size)

    def speak(self, text: str, on_complete: Callable[[], None] | None = None) -> int:
        """Queue *text* for playback and return the number of chunks queued.

        *on_complete* fires on the engine's playback thread after the last
        chunk has played.  It does not fire if :meth:`stop_speaking` cuts
        playback short, and it fires immediately if *text* has nothing to
        say.  Nothing is queued (and ``0`` returned) if the engine is not
        ready.
        """
        if not self.engine.is_ready():
            logger.debug("Speech engine not ready; dropping speak request")
            return 0

        chunks = self.split(text)
        if not chunks:
            if on_complete is not None:
                on_complete()
            return 0

        logger.debug("Queuing %d chunks (%d chars)", len(chunks), len(text))
        queued = 0
        last = len(chunks) - 1
        for idx, chunk in enumerate(chunks):
            if not self.engine.enqueue(chunk, on_complete if idx == last else None):
                break
            queued += 1
        return queued

    def stop_speaking(self) -> None:
        self.engine.stop()

    def set_speech_rate(self, rate: float) -> None:
        if not MIN_SPEECH_RATE <= rate <= MAX_SPEECH_RATE:
            raise ValueError(
                f"Speech rate must be between {MIN_SPEECH_RATE} and "
                f"{MAX_SPEECH_RATE}, got {rate}"
            )
        self.engine.set_speech_rate(rate)
