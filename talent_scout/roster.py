"""
Roster store: every scouted candidate in the session, keyed by id.
Insert and in-place update only; candidates are never removed.
"""
from __future__ import annotations

import uuid
from typing import Iterator

from talent_scout.models import Candidate, CandidateDraft


class UnknownCandidateError(LookupError):
    """Candidate id is not in the roster."""


def new_candidate_id() -> str:
    return str(uuid.uuid4())


class RosterStore:
    """Insertion-ordered candidate store. The order is the roster panel order."""

    def __init__(self) -> None:
        self._candidates: dict[str, Candidate] = {}

    def __len__(self) -> int:
        return len(self._candidates)

    def __iter__(self) -> Iterator[Candidate]:
        return iter(list(self._candidates.values()))

    def __contains__(self, candidate_id: object) -> bool:
        return candidate_id in self._candidates

    def add(self, draft: CandidateDraft) -> Candidate:
        """Assign a fresh id to a scoring result and add it."""
        candidate = Candidate.from_draft(draft, new_candidate_id())
        self._candidates[candidate.id] = candidate
        return candidate

    def insert(self, candidate: Candidate) -> Candidate:
        """Add a candidate that already carries its id. Re-inserting an id replaces it in place."""
        self._candidates[candidate.id] = candidate
        return candidate

    def get(self, candidate_id: str) -> Candidate | None:
        return self._candidates.get(candidate_id)

    def require(self, candidate_id: str) -> Candidate:
        candidate = self._candidates.get(candidate_id)
        if candidate is None:
            raise UnknownCandidateError(f"Candidate not found: {candidate_id}")
        return candidate

    def refresh(self, candidate_id: str, draft: CandidateDraft) -> Candidate:
        """Overwrite a candidate with a new scoring result. id and image are preserved."""
        current = self.require(candidate_id)
        candidate = Candidate.from_draft(draft, current.id, image_url=current.image_url)
        self._candidates[candidate.id] = candidate
        return candidate

    def set_image(self, candidate_id: str, image_url: str | None) -> Candidate:
        candidate = self.require(candidate_id).with_image(image_url)
        self._candidates[candidate.id] = candidate
        return candidate

    def candidates(self) -> list[Candidate]:
        return list(self._candidates.values())
