"""PDF text extraction using PyMuPDF."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

import fitz  # PyMuPDF

logger = logging.getLogger(__name__)

EXTRACTION_FAILED = "Failed to extract text"
NO_TEXT_FOUND = "No text found in the PDF"


# ---------------------------------------------------------------------------
# Result type
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ExtractionResult:
    """Outcome of reading a PDF: either document text or a failure reason.

    Use :meth:`success` / :meth:`failure` rather than the constructor.  Only
    ``text`` of a successful result is meant to be read aloud; ``reason`` is a
    human-readable message for the screen.
    """

    ok: bool
    text: str = ""
    reason: str | None = None

    @classmethod
    def success(cls, text: str) -> "ExtractionResult":
        return cls(ok=True, text=text)

    @classmethod
    def failure(cls, reason: str) -> "ExtractionResult":
        return cls(ok=False, reason=reason)

    @property
    def display_text(self) -> str:
        return self.text if self.ok else (self.reason or "")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _page_range(
    pages: range | tuple[int, int] | None, page_count: int
) -> range:
    if pages is None:
        return range(page_count)
    if isinstance(pages, tuple):
        start, stop = pages
        return range(start, stop)
    return pages


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def extract_text(
    pdf_path: str | os.PathLike,
    pages: range | tuple[int, int] | None = None,
) -> str:
    """Extract the plain text of a PDF file.

    Parameters
    ----------
    pdf_path:
        Path to the PDF file.
    pages:
        Optional page selection.  Can be a ``range``, a ``(start, stop)``
        tuple (0-indexed, stop exclusive), or *None* for all pages.

    Returns
    -------
    str
        The text of the selected pages, each page followed by a blank line,
        with leading and trailing whitespace stripped.  May be empty.

    Raises
    ------
    FileNotFoundError
        If *pdf_path* does not exist.
    IndexError
        If a selected page is outside the document.
    """
    pdf_path = Path(pdf_path)
    if not pdf_path.exists():
        raise FileNotFoundError(f"PDF not found: {pdf_path}")

    with fitz.open(pdf_path) as doc:
        parts: list[str] = []
        for page_num in _page_range(pages, len(doc)):
            if page_num < 0 or page_num >= len(doc):
                raise IndexError(
                    f"Page {page_num} out of range (document has {len(doc)} pages)"
                )
            parts.append(doc[page_num].get_text("text"))
            parts.append("\n\n")

    return "".join(parts).strip()


def read_pdf(
    pdf_path: str | os.PathLike,
    pages: range | tuple[int, int] | None = None,
) -> ExtractionResult:
    """Extract text from *pdf_path* without raising.

    Any error while opening or parsing the document yields a failure with
    :data:`EXTRACTION_FAILED`; a readable document without text yields a
    failure with :data:`NO_TEXT_FOUND`.
    """
    try:
        text = extract_text(pdf_path, pages=pages)
    except Exception as exc:
        logger.error("Error extracting text from %s: %s", pdf_path, exc)
        return ExtractionResult.failure(EXTRACTION_FAILED)

    if not text:
        return ExtractionResult.failure(NO_TEXT_FOUND)

    logger.info("Extracted %d characters from %s", len(text), pdf_path)
    return ExtractionResult.success(text)
