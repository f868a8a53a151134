"""pdf_read_aloud: read PDF documents aloud using Kokoro TTS."""

from .chunking import MAX_CHUNK_SIZE, split_text_into_chunks
from .core import ReaderSession
from .engine import EngineState, SpeechEngine
from .extract import ExtractionResult, extract_text, read_pdf
from .speaker import ChunkedSpeaker

__all__ = [
    "MAX_CHUNK_SIZE",
    "split_text_into_chunks",
    "ReaderSession",
    "EngineState",
    "SpeechEngine",
    "ExtractionResult",
    "extract_text",
    "read_pdf",
    "ChunkedSpeaker",
]
