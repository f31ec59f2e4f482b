from __future__ import annotations

import hashlib
import logging
from io import BytesIO
from pathlib import PurePath

from docx import Document
from pypdf import PdfReader

from .models import ParsedDoc

logger = logging.getLogger(__name__)


class UnsupportedDocumentError(ValueError):
    pass


def _compute_doc_id(content: bytes) -> str:
    return hashlib.sha256(content).hexdigest()[:16]


def _parse_txt(content: bytes) -> tuple[str, int | None, list[str]]:
    return content.decode("utf-8", errors="replace"), None, []


def _parse_pdf(content: bytes) -> tuple[str, int | None, list[str]]:
    warnings: list[str] = []
    try:
        reader = PdfReader(BytesIO(content))
        text_parts: list[str] = []
        for page in reader.pages:
            page_text = (page.extract_text() or "").strip()
            if page_text:
                text_parts.append(page_text)
        if not text_parts:
            warnings.append("No extractable text found in PDF.")
        return "\n".join(text_parts), len(reader.pages), warnings
    except Exception as exc:  # noqa: BLE001 - pypdf raises assorted errors on malformed files
        logger.info("pdf_parse_failed kind=%s", type(exc).__name__)
        warnings.append("PDF parsing failed; the file may be scanned or corrupted.")
        return "", None, warnings


def _parse_docx(content: bytes) -> tuple[str, int | None, list[str]]:
    warnings: list[str] = []
    try:
        document = Document(BytesIO(content))
    except Exception as exc:  # noqa: BLE001 - python-docx surfaces zip and xml errors alike
        logger.info("docx_parse_failed kind=%s", type(exc).__name__)
        warnings.append("DOCX parsing failed; the file may be corrupted.")
        return "", None, warnings

    paragraphs = [p.text.strip() for p in document.paragraphs if p.text and p.text.strip()]
    if not paragraphs:
        warnings.append("No extractable text found in DOCX.")
    return "\n".join(paragraphs), None, warnings


_PARSERS = {
    ".txt": ("txt", _parse_txt),
    ".md": ("txt", _parse_txt),
    ".pdf": ("pdf", _parse_pdf),
    ".docx": ("docx", _parse_docx),
}


def supported_extensions() -> list[str]:
    return sorted(_PARSERS)


def parse_document(content: bytes, filename: str) -> ParsedDoc:
    """Extract plain text from an uploaded resume (.txt, .md, .pdf, .docx)."""
    extension = PurePath(filename or "").suffix.lower()
    if extension not in _PARSERS:
        raise UnsupportedDocumentError(
            f"Unsupported file type '{extension or filename}'. Supported types: {', '.join(supported_extensions())}"
        )

    source_type, parser = _PARSERS[extension]
    text, pages, warnings = parser(content)
    return ParsedDoc(
        doc_id=_compute_doc_id(content),
        filename=PurePath(filename).name,
        source_type=source_type,
        text=text.strip(),
        pages=pages,
        parsing_warnings=warnings,
    )
