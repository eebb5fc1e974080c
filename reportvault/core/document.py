"""Split decrypted report bytes into displayable page text."""

from __future__ import annotations

import io

import PyPDF2

from .errors import DocumentError

PDF_MAGIC = b"%PDF"
PAGE_BREAK = "\f"


def is_pdf(payload: bytes | memoryview) -> bool:
    return bytes(payload[: len(PDF_MAGIC)]) == PDF_MAGIC


def extract_pages(payload: bytes | memoryview) -> list[str]:
    """
    Return one text block per page.

    PDF payloads are read with PyPDF2; anything else is treated as UTF-8
    text with form feeds separating pages.
    """
    if not payload:
        raise DocumentError("Report is empty")

    if not is_pdf(payload):
        text = bytes(payload).decode("utf-8", errors="replace")
        return text.split(PAGE_BREAK)

    try:
        reader = PyPDF2.PdfReader(io.BytesIO(bytes(payload)))
        return [page.extract_text() or "" for page in reader.pages]
    except Exception as exc:
        # PyPDF2 surfaces damaged objects as arbitrary built-in errors
        raise DocumentError(f"Unreadable PDF: {type(exc).__name__}: {exc}") from exc
