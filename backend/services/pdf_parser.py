import io
from typing import BinaryIO

import pdfplumber


def extract_text(pdf_bytes: bytes) -> str:
    """Extract all text from a PDF file."""
    return extract_text_from_stream(io.BytesIO(pdf_bytes))


def extract_text_from_stream(stream: BinaryIO) -> str:
    """Extract all text from a seekable PDF byte stream.

    Pages without a text layer contribute nothing. Raises ValueError when
    the stream cannot seek; pdfplumber raises on unreadable documents.
    """
    if not stream.seekable():
        raise ValueError("PDF stream must support seek for text extraction")
    stream.seek(0)
    with pdfplumber.open(stream) as pdf:
        pages = [page.extract_text() or "" for page in pdf.pages]
    return "\n".join(page for page in pages if page.strip()).strip()
