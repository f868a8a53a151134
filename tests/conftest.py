"""Shared fixtures for the test suite."""

import threading

import fitz
import numpy as np
import pytest

from pdf_read_aloud.engine import SpeechEngine


# ── PDFs ───────────────────────────────────────────────────────────────


@pytest.fixture
def make_pdf(tmp_path):
    """Factory writing a PDF with one page per entry of *pages*.

    Empty strings give blank pages.
    """

    def _make(pages, name="doc.pdf"):
        doc = fitz.open()
        for text in pages:
            page = doc.new_page()
            if text:
                page.insert_text((72, 72), text)
        path = tmp_path / name
        doc.save(str(path))
        doc.close()
        return path

    return _make


# ── Speech fakes ───────────────────────────────────────────────────────


class FakePlayer:
    """Audio device stand-in; ``hold=True`` keeps playback going until released."""

    def __init__(self, hold=False):
        self.played = []
        self.started = threading.Event()
        self.release = threading.Event()
        if not hold:
            self.release.set()
        self.stop_calls = 0
        self._interrupt = threading.Event()

    def play(self, audio, sample_rate):
        self._interrupt.clear()
        self.played.append(audio)
        self.started.set()

    def wait(self):
        while not (self.release.is_set() or self._interrupt.is_set()):
            self._interrupt.wait(0.01)

    def stop(self):
        self.stop_calls += 1
        self._interrupt.set()


class FakeSynthesiser:
    """Records ``(text, speed)`` per call; raises for texts in *fail_on*."""

    def __init__(self, fail_on=()):
        self.calls = []
        self.fail_on = set(fail_on)

    def __call__(self, text, pipeline, *, voice, speed):
        self.calls.append((text, speed))
        if text in self.fail_on:
            raise RuntimeError("synthesis failed")
        return np.zeros(4, dtype=np.float32)

    @property
    def texts(self):
        return [text for text, _ in self.calls]


class FakeEngine:
    """Synchronous engine stand-in that only records what it is asked."""

    def __init__(self, ready=True):
        self.ready = ready
        # False mimics an engine shut down after answering is_ready().
        self.accepting = True
        self.queued = []
        self.stop_calls = 0
        self.rates = []

    def is_ready(self):
        return self.ready

    def enqueue(self, text, on_done=None):
        if not (self.ready and self.accepting):
            return False
        self.queued.append((text, on_done))
        return True

    def stop(self):
        self.stop_calls += 1
        self.queued.clear()

    def set_speech_rate(self, rate):
        if self.ready:
            self.rates.append(rate)

    def finish_all(self):
        """Pretend every queued utterance has been played."""
        queued, self.queued = self.queued, []
        for _text, on_done in queued:
            if on_done is not None:
                on_done()


@pytest.fixture
def fake_engine():
    return FakeEngine()


@pytest.fixture
def player():
    return FakePlayer()


@pytest.fixture
def synthesiser():
    return FakeSynthesiser()


@pytest.fixture
def make_engine():
    """Factory for a real :class:`SpeechEngine` wired to fakes; shut down afterwards."""
    engines = []

    def _make(player=None, synthesiser=None, loader=None, on_init=None):
        engine = SpeechEngine(
            pipeline_loader=loader or (lambda lang_code: object()),
            synthesiser=synthesiser or FakeSynthesiser(),
            player=player or FakePlayer(),
            on_init=on_init,
        )
        engines.append(engine)
        return engine

    yield _make
    for engine in engines:
        engine.shutdown()


@pytest.fixture
def held_player():
    """Player whose playback lasts until ``release`` is set or it is stopped."""
    return FakePlayer(hold=True)


@pytest.fixture
def failing_synthesiser():
    """Synthesiser that fails for the text ``"bad."``."""
    return FakeSynthesiser(fail_on={"bad."})


@pytest.fixture
def unready_engine():
    return FakeEngine(ready=False)
