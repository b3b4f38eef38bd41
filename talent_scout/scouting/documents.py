"""
Resume documents accepted for scouting.

PDFs go to the model as an inline file. DOCX files must arrive with their text
already extracted by the client; plain text is sent as-is.
"""
from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass
from enum import Enum


class FileType(str, Enum):
    PDF = "application/pdf"
    DOCX = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
    TEXT = "text/plain"
    UNKNOWN = "unknown"


class UnsupportedDocumentError(ValueError):
    """Upload cannot be scouted (unknown type, missing content, bad base64)."""


_EXTENSIONS = {
    ".pdf": FileType.PDF,
    ".docx": FileType.DOCX,
    ".txt": FileType.TEXT,
}


def detect_file_type(mime_type: str | None, filename: str | None = None) -> FileType:
    """MIME type wins; fall back to the filename extension."""
    if mime_type:
        mime = mime_type.split(";", 1)[0].strip().lower()
        for ft in FileType:
            if ft.value == mime:
                return ft
    if filename:
        lower = filename.lower()
        for ext, ft in _EXTENSIONS.items():
            if lower.endswith(ext):
                return ft
    return FileType.UNKNOWN


def strip_data_url(data: str) -> str:
    """Drop a "data:<mime>;base64," prefix if the browser sent a data URL."""
    if data.startswith("data:") and "," in data:
        return data.split(",", 1)[1]
    return data


@dataclass(frozen=True)
class ResumeDocument:
    file_type: FileType
    filename: str
    base64_data: str | None = None  # PDF only
    text: str | None = None  # DOCX (pre-extracted) and plain text

    @property
    def data_url(self) -> str:
        return f"data:{self.file_type.value};base64,{self.base64_data}"


def build_document(
    mime_type: str | None,
    filename: str | None = None,
    data: str | None = None,
    text: str | None = None,
) -> ResumeDocument:
    """
    Validate an upload and normalize it into a ResumeDocument.
    Raises UnsupportedDocumentError for anything the scouting model cannot read.
    """
    file_type = detect_file_type(mime_type, filename)
    name = filename or "resume"
    if file_type == FileType.PDF:
        if not data:
            raise UnsupportedDocumentError("PDF upload requires base64 data")
        payload = strip_data_url(data.strip())
        try:
            base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError) as e:
            raise UnsupportedDocumentError(f"PDF data is not valid base64: {e!s}") from e
        return ResumeDocument(file_type=file_type, filename=name, base64_data=payload)
    if file_type in (FileType.DOCX, FileType.TEXT):
        if not text or not text.strip():
            raise UnsupportedDocumentError(
                "DOCX and text uploads require the extracted resume text"
            )
        return ResumeDocument(file_type=file_type, filename=name, text=text.strip())
    raise UnsupportedDocumentError("Unsupported file type. Please use PDF or DOCX.")
