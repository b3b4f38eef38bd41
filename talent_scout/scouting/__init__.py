"""
External scouting model: score resumes into cards, evaluate squad synergy,
propose arrangements. Returns results only; never mutates roster or lineup.
"""
from __future__ import annotations

from talent_scout.scouting.documents import (
    FileType,
    ResumeDocument,
    UnsupportedDocumentError,
    build_document,
)
from talent_scout.scouting.errors import (
    EmptyLineupError,
    ScoutingError,
    ScoutingRequestError,
    ScoutingResponseError,
    ScoutingUnavailableError,
)
from talent_scout.scouting.llm import ScoutClient

__all__ = [
    "FileType",
    "ResumeDocument",
    "UnsupportedDocumentError",
    "build_document",
    "EmptyLineupError",
    "ScoutingError",
    "ScoutingRequestError",
    "ScoutingResponseError",
    "ScoutingUnavailableError",
    "ScoutClient",
]
