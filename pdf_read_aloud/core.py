"""Reader session: document text, speaking flag and rate, independent of any UI."""

from __future__ import annotations

import logging
import os
from typing import Callable

from .extract import ExtractionResult, read_pdf
from .speaker import ChunkedSpeaker

logger = logging.getLogger(__name__)

INITIAL_SPEECH_RATE = 0.7
ENGINE_NOT_READY = "Speech engine is not ready"


class ReaderSession:
    """State behind the reader screen.

    The session owns the extracted document text and the speaking flag and
    drives a :class:`~pdf_read_aloud.speaker.ChunkedSpeaker`.  A screen reads
    :attr:`can_play` / :attr:`can_stop` to enable its buttons and registers
    *on_change* to be told when they may have changed.  *on_change* can be
    called from the engine's playback thread.
    """

    def __init__(
        self,
        speaker: ChunkedSpeaker,
        *,
        speech_rate: float = INITIAL_SPEECH_RATE,
        on_change: Callable[[], None] | None = None,
    ) -> None:
        self.speaker = speaker
        self.text = ""
        self.status = ""
        self.speech_rate = speech_rate
        self.is_speaking = False
        self.on_change = on_change
        # Identifies the current play request so a late completion from a
        # stopped run cannot clear the flag of a newer one.
        self._play_id = 0

    # ------------------------------------------------------------------
    # Derived state
    # ------------------------------------------------------------------

    @property
    def can_play(self) -> bool:
        return bool(self.text) and not self.is_speaking

    @property
    def can_stop(self) -> bool:
        return self.is_speaking

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def load(self, pdf_path: str | os.PathLike) -> ExtractionResult:
        """Extract *pdf_path* and make it the current document.

        On failure the previous text is discarded and the reason is shown in
        :attr:`status`; it is never read aloud.
        """
        result = read_pdf(pdf_path)
        if result.ok:
            self.text = result.text
            self.status = f"Loaded {os.path.basename(os.fspath(pdf_path))}"
        else:
            self.text = ""
            self.status = result.display_text
        self._changed()
        return result

    def play(self) -> bool:
        """Start reading the document aloud; return whether playback was requested."""
        if not self.can_play:
            return False
        if not self.speaker.is_ready():
            self.status = ENGINE_NOT_READY
            self._changed()
            return False

        # Rate changes made while the engine was loading never reached it.
        self.speaker.set_speech_rate(self.speech_rate)

        self._play_id += 1
        play_id = self._play_id
        self.is_speaking = True
        self._changed()
        queued = self.speaker.speak(
            self.text, on_complete=lambda: self._on_complete(play_id)
        )
        if not queued and play_id == self._play_id:
            # The engine went away between the readiness check and queuing.
            self._play_id += 1
            self.is_speaking = False
            self.status = ENGINE_NOT_READY
            self._changed()
            return False
        return True

    def stop(self) -> None:
        self.speaker.stop_speaking()
        self._play_id += 1
        self.is_speaking = False
        self._changed()

    def set_speech_rate(self, rate: float) -> None:
        self.speaker.set_speech_rate(rate)
        self.speech_rate = rate
        self._changed()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _on_complete(self, play_id: int) -> None:
        if play_id != self._play_id:
            return
        logger.debug("Finished reading document")
        self.is_speaking = False
        self._changed()

    def _changed(self) -> None:
        if self.on_change is not None:
            self.on_change()
