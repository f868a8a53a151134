"""Command-line entry point: ``python -m pdf_read_aloud [PDF]``."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from .chunking import MAX_CHUNK_SIZE
from .core import ReaderSession
from .engine import DEFAULT_LANG, DEFAULT_VOICE, SpeechEngine
from .speaker import ChunkedSpeaker


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="pdf-read-aloud",
        description="Pick a PDF and have it read aloud with Kokoro TTS",
    )
    parser.add_argument(
        "pdf", type=Path, nargs="?", default=None,
        help="PDF to load on start (optional; use the Select PDF button otherwise)",
    )
    parser.add_argument(
        "--voice", default=DEFAULT_VOICE,
        help=f"Kokoro voice identifier (default: {DEFAULT_VOICE})",
    )
    parser.add_argument(
        "--lang", default=DEFAULT_LANG, dest="lang_code",
        help=f"Kokoro language code (default: {DEFAULT_LANG})",
    )
    parser.add_argument(
        "--max-chunk-size", type=int, default=MAX_CHUNK_SIZE, metavar="N",
        help=f"Maximum characters per queued utterance (default: {MAX_CHUNK_SIZE})",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Log debug messages",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )

    from .app import ReaderApp

    engine = SpeechEngine(lang_code=args.lang_code, voice=args.voice)
    session = ReaderSession(ChunkedSpeaker(engine, max_chunk_size=args.max_chunk_size))
    app = ReaderApp(session)
    if args.pdf is not None:
        session.load(args.pdf)
    app.mainloop()


if __name__ == "__main__":
    main()
