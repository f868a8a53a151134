"""Quick launcher for the PDF reader screen."""

import logging

from pdf_read_aloud.app import ReaderApp
from pdf_read_aloud.core import ReaderSession
from pdf_read_aloud.engine import SpeechEngine
from pdf_read_aloud.speaker import ChunkedSpeaker

logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

engine = SpeechEngine(on_init=lambda ok: print("TTS ready" if ok else "TTS failed"))
app = ReaderApp(ReaderSession(ChunkedSpeaker(engine)))
app.mainloop()
