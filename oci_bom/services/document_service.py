"""
Document Text Service — turns an uploaded requirements document into
plain text for the pipeline.

Supported: .txt, .pdf (PyMuPDF), .docx (python-docx), .xlsx (openpyxl).
Other accepted upload types are rejected with UnsupportedDocumentError.
"""

from __future__ import annotations

import io
import logging
from pathlib import Path

from oci_bom.config import get_settings
from oci_bom.errors import UnsupportedDocumentError, ValidationError
from oci_bom.models.schemas import DocumentText

logger = logging.getLogger(__name__)

ACCEPTED_EXTENSIONS = {
    ".pdf", ".xlsx", ".xls", ".docx", ".doc", ".jpg", ".jpeg", ".png", ".bmp", ".tiff", ".txt",
}


class DocumentTextService:

    def __init__(self, max_bytes: int | None = None):
        self.max_bytes = max_bytes if max_bytes is not None else get_settings().max_upload_bytes

    def extract_text(self, filename: str, data: bytes) -> DocumentText:
        ext = Path(filename or "").suffix.lower()
        if ext not in ACCEPTED_EXTENSIONS:
            raise ValidationError(f"File type '{ext or 'unknown'}' is not allowed", field="document")
        if not data:
            raise ValidationError("Uploaded document is empty", field="document")
        if len(data) > self.max_bytes:
            raise ValidationError(
                f"Document is {len(data)} bytes; the limit is {self.max_bytes}", field="document"
            )

        if ext == ".txt":
            content = data.decode("utf-8", errors="replace")
        elif ext == ".pdf":
            content = self._pdf_text(data)
        elif ext == ".docx":
            content = self._docx_text(data)
        elif ext == ".xlsx":
            content = self._xlsx_text(data)
        else:
            raise UnsupportedDocumentError(
                f"Text extraction for '{ext}' documents is not supported; "
                f"upload a PDF, DOCX, XLSX or TXT file",
                field="document",
            )

        content = content.strip()
        if not content:
            raise ValidationError("No text could be extracted from the document", field="document")

        logger.info(f"[DOCUMENT] {filename}: {ext} → {len(content)} chars")
        return DocumentText(filename=filename, document_type=ext.lstrip("."), content=content)

    # ── Format readers ───────────────────────────────────

    @staticmethod
    def _pdf_text(data: bytes) -> str:
        import fitz  # PyMuPDF

        try:
            doc = fitz.open(stream=data, filetype="pdf")
        except Exception as exc:
            raise ValidationError(f"Could not open PDF: {exc}", field="document") from exc
        try:
            return "\n".join(page.get_text("text") for page in doc)
        finally:
            doc.close()

    @staticmethod
    def _docx_text(data: bytes) -> str:
        from docx import Document

        try:
            doc = Document(io.BytesIO(data))
        except Exception as exc:
            raise ValidationError(f"Could not open DOCX: {exc}", field="document") from exc
        lines = [p.text for p in doc.paragraphs if p.text.strip()]
        for table in doc.tables:
            for row in table.rows:
                cells = [c.text.strip() for c in row.cells if c.text.strip()]
                if cells:
                    lines.append(" | ".join(cells))
        return "\n".join(lines)

    @staticmethod
    def _xlsx_text(data: bytes) -> str:
        from openpyxl import load_workbook

        try:
            wb = load_workbook(io.BytesIO(data), read_only=True, data_only=True)
        except Exception as exc:
            raise ValidationError(f"Could not open XLSX: {exc}", field="document") from exc
        lines: list[str] = []
        for ws in wb.worksheets:
            lines.append(f"## {ws.title}")
            for row in ws.iter_rows(values_only=True):
                cells = [str(v) for v in row if v is not None and str(v).strip()]
                if cells:
                    lines.append(" | ".join(cells))
        wb.close()
        return "\n".join(lines)
