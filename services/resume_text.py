"""Plain-text extraction from uploaded PDF and DOCX resumes."""
from __future__ import annotations

import io
import logging
from typing import List, Optional

import docx2txt
import pdfplumber

logger = logging.getLogger(__name__)

PDF_TYPES = {"application/pdf"}
DOCX_TYPES = {"application/vnd.openxmlformats-officedocument.wordprocessingml.document"}


class UnsupportedResumeType(ValueError):
    pass


def kind_of(filename: Optional[str], content_type: Optional[str]) -> str:
    """Return ``"pdf"`` or ``"docx"`` from the MIME type, falling back to the extension."""

    name = (filename or "").lower()
    if content_type in PDF_TYPES or name.endswith(".pdf"):
        return "pdf"
    if content_type in DOCX_TYPES or name.endswith(".docx"):
        return "docx"
    raise UnsupportedResumeType("Please upload a PDF or DOCX file")


def pdf_text(data: bytes) -> str:
    parts: List[str] = []
    with pdfplumber.open(io.BytesIO(data)) as pdf:
        for page in pdf.pages:
            text = page.extract_text() or ""
            if text:
                parts.append(text)
    return "\n".join(parts)


def docx_text(data: bytes) -> str:
    return docx2txt.process(io.BytesIO(data)) or ""


def extract_text(data: bytes, filename: Optional[str] = None, content_type: Optional[str] = None) -> str:
    """Extract resume text; unreadable documents yield an empty string."""

    kind = kind_of(filename, content_type)
    try:
        text = pdf_text(data) if kind == "pdf" else docx_text(data)
    except Exception as exc:  # noqa: BLE001
        logger.warning("Could not read %s resume %s: %s", kind, filename or "-", exc)
        return ""
    return text.strip()


__all__ = ["UnsupportedResumeType", "docx_text", "extract_text", "kind_of", "pdf_text"]
