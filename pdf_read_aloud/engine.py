"""Queued speech output: Kokoro synthesis feeding an audio output device.

:class:`SpeechEngine` plays text utterances strictly in the order they are
enqueued.  Initialisation (loading the Kokoro model) happens on a background
thread; until it has finished every operation is a silent no-op.  Once ready,
two worker threads run the queue: one synthesises the next utterance while
the other plays the current one, so consecutive chunks follow each other
without waiting for synthesis.
"""

from __future__ import annotations

import enum
import logging
import queue
import threading
from concurrent.futures import Future
from concurrent.futures import TimeoutError as FutureTimeoutError
from dataclasses import dataclass
from typing import Any, Callable

import numpy as np

logger = logging.getLogger(__name__)

SAMPLE_RATE = 24_000
DEFAULT_SPEECH_RATE = 1.0

# Kokoro language codes: "a" American English, "b" British English, "e" Spanish,
# "f" French, "h" Hindi, "i" Italian, "j" Japanese, "p" Portuguese, "z" Mandarin.
DEFAULT_LANG = "b"
DEFAULT_VOICE = "bf_emma"

_SHUTDOWN = object()


class EngineState(enum.Enum):
    UNINITIALIZED = "uninitialized"
    READY = "ready"
    FAILED = "failed"


class SoundDevicePlayer:
    """Audio output on the default device via :mod:`sounddevice`.

    ``play`` returns immediately, ``wait`` blocks until playback has finished
    or :meth:`stop` was called.
    """

    def play(self, audio: np.ndarray, sample_rate: int) -> None:
        import sounddevice as sd

        sd.play(audio, sample_rate)

    def wait(self) -> None:
        import sounddevice as sd

        sd.wait()

    def stop(self) -> None:
        import sounddevice as sd

        sd.stop()


@dataclass
class _Utterance:
    text: str
    generation: int
    on_done: Callable[[], None] | None = None


def load_kokoro(lang_code: str) -> Any:
    """Build the Kokoro pipeline for *lang_code*; fetches weights on first use."""
    from kokoro import KPipeline

    return KPipeline(lang_code=lang_code)


def render_chunk(text: str, pipeline: Any, *, voice: str, speed: float) -> np.ndarray:
    """Render one queued chunk to mono float32 samples at :data:`SAMPLE_RATE`.

    Kokoro yields the chunk in segments; segments without audio are skipped.
    Raises :class:`RuntimeError` if no segment carried audio.
    """
    segments = [
        np.asarray(result.audio if hasattr(result, "audio") else result[2])
        for result in pipeline(text, voice=voice, speed=speed)
    ]
    segments = [s for s in segments if s.ndim and s.size]
    if not segments:
        raise RuntimeError(f"Kokoro produced no audio for a {len(text)}-char chunk")
    return np.concatenate(segments).astype(np.float32)


class SpeechEngine:
    """FIFO text-to-speech queue with asynchronous initialisation.

    Parameters
    ----------
    lang_code, voice:
        Kokoro language code and voice identifier.
    pipeline_loader:
        Called with *lang_code* on the init thread; returns the pipeline.
    synthesiser:
        ``synthesiser(text, pipeline, voice=..., speed=...)`` returning a
        float32 array at :data:`SAMPLE_RATE`.
    player:
        Object with ``play(audio, sample_rate)``, ``wait()`` and ``stop()``.
        Defaults to :class:`SoundDevicePlayer`.
    on_init:
        Optional ``on_init(success)`` listener fired once initialisation has
        finished, on the init thread.
    """

    def __init__(
        self,
        *,
        lang_code: str = DEFAULT_LANG,
        voice: str = DEFAULT_VOICE,
        pipeline_loader: Callable[[str], Any] = load_kokoro,
        synthesiser: Callable[..., np.ndarray] = render_chunk,
        player: Any = None,
        on_init: Callable[[bool], None] | None = None,
    ) -> None:
        self.lang_code = lang_code
        self.voice = voice
        self._pipeline_loader = pipeline_loader
        self._synthesiser = synthesiser
        self._player = player if player is not None else SoundDevicePlayer()
        self._on_init = on_init

        self._lock = threading.Lock()
        self._state = EngineState.UNINITIALIZED
        self._closed = False
        self._pipeline: Any = None
        self._rate = DEFAULT_SPEECH_RATE
        # Bumped by stop(); queued work from an older generation is dropped.
        self._generation = 0
        self._pending = 0
        self._text_queue: queue.Queue = queue.Queue()
        self._audio_queue: queue.Queue = queue.Queue(maxsize=1)

        self.ready: Future[bool] = Future()
        threading.Thread(
            target=self._initialise, name="speech-init", daemon=True
        ).start()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def state(self) -> EngineState:
        with self._lock:
            return self._state

    def is_ready(self) -> bool:
        return self.state is EngineState.READY

    def wait_ready(self, timeout: float | None = None) -> bool:
        """Block until initialisation finished; return whether it succeeded."""
        try:
            return self.ready.result(timeout)
        except FutureTimeoutError:
            return False

    def _initialise(self) -> None:
        try:
            pipeline = self._pipeline_loader(self.lang_code)
        except Exception:
            logger.exception("Speech engine failed to initialise")
            with self._lock:
                self._state = EngineState.FAILED
            self._finish_init(False)
            return

        with self._lock:
            if self._closed:
                started = False
            else:
                self._pipeline = pipeline
                self._rate = DEFAULT_SPEECH_RATE
                for target, name in (
                    (self._synthesis_loop, "speech-synth"),
                    (self._playback_loop, "speech-playback"),
                ):
                    threading.Thread(target=target, name=name, daemon=True).start()
                self._state = EngineState.READY
                started = True

        if started:
            logger.info(
                "Speech engine ready (lang=%s, voice=%s)", self.lang_code, self.voice
            )
        self._finish_init(started)

    def _finish_init(self, success: bool) -> None:
        self.ready.set_result(success)
        if self._on_init is not None:
            self._on_init(success)

    def shutdown(self) -> None:
        """Stop playback and end the worker threads.  Further calls no-op."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._generation += 1
            self._pending = 0
            running = self._state is EngineState.READY
            if running:
                self._player.stop()
        if running:
            self._text_queue.put(_SHUTDOWN)

    # ------------------------------------------------------------------
    # Queue operations
    # ------------------------------------------------------------------

    def enqueue(self, text: str, on_done: Callable[[], None] | None = None) -> bool:
        """Append *text* to the speech queue.

        *on_done* is called on the playback thread once the utterance has
        been played, or once its synthesis failed.  It is not called for
        utterances discarded by :meth:`stop`.

        Returns ``False`` without queuing anything if the engine is not ready.
        """
        with self._lock:
            if self._state is not EngineState.READY or self._closed:
                return False
            self._pending += 1
            self._text_queue.put(_Utterance(text, self._generation, on_done))
        return True

    def stop(self) -> None:
        """Halt current playback and discard everything queued."""
        with self._lock:
            if self._state is not EngineState.READY or self._closed:
                return
            self._generation += 1
            self._pending = 0
            self._player.stop()

    def set_speech_rate(self, rate: float) -> None:
        """Set the speed multiplier used for utterances synthesised from now on."""
        with self._lock:
            if self._state is not EngineState.READY:
                return
            self._rate = rate

    @property
    def speech_rate(self) -> float:
        with self._lock:
            return self._rate

    def is_speaking(self) -> bool:
        with self._lock:
            return self._pending > 0

    # ------------------------------------------------------------------
    # Workers
    # ------------------------------------------------------------------

    def _synthesis_loop(self) -> None:
        while True:
            item = self._text_queue.get()
            if item is _SHUTDOWN:
                self._audio_queue.put(_SHUTDOWN)
                return

            with self._lock:
                stale = item.generation != self._generation
                speed = self._rate
            if stale:
                continue

            try:
                audio = self._synthesiser(
                    item.text, self._pipeline, voice=self.voice, speed=speed
                )
            except Exception:
                logger.exception("Failed to synthesise chunk of %d chars", len(item.text))
                audio = None
            self._audio_queue.put((item, audio))

    def _playback_loop(self) -> None:
        while True:
            entry = self._audio_queue.get()
            if entry is _SHUTDOWN:
                return

            item, audio = entry
            if audio is not None:
                # Start under the lock so stop() cannot slip in between the
                # generation check and the device starting.
                with self._lock:
                    current = item.generation == self._generation
                    if current:
                        self._player.play(audio, SAMPLE_RATE)
                if current:
                    self._player.wait()
            self._finish(item)

    def _finish(self, item: _Utterance) -> None:
        with self._lock:
            if item.generation != self._generation:
                return
            self._pending -= 1
        if item.on_done is not None:
            try:
                item.on_done()
            except Exception:
                logger.exception("Utterance completion callback failed")
