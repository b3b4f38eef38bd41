"""
Data models for the squad builder.
Domain objects only — no HTTP or LLM logic.

A Candidate is a scouted resume rendered as a player card: six attribute
scores, an overall rating, a short summary and optional tech-skill ratings.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any

from talent_scout.roles import Role

SCORE_MIN = 0
SCORE_MAX = 99
ATTRIBUTE_COUNT = 6

# Labels the scoring prompt asks for. The model may return others; aggregates go by label.
ATTRIBUTE_LABELS = ("CODE", "ARCH", "LEAD", "COMM", "PROB", "EXP")


class InvalidCandidateError(ValueError):
    """Candidate data breaks the card shape (e.g. not exactly six attributes)."""


def clamp_score(value: float) -> int:
    """Round and clamp a score into [0, 99]."""
    return max(SCORE_MIN, min(SCORE_MAX, int(round(value))))


@dataclass(frozen=True)
class Attribute:
    label: str
    value: int  # 0-99
    full_label: str | None = None

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"label": self.label, "value": self.value}
        if self.full_label is not None:
            d["full_label"] = self.full_label
        return d


@dataclass(frozen=True)
class TechSkill:
    name: str
    rating: int  # 0-99

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "rating": self.rating}


# ---------- Candidate ----------


@dataclass(frozen=True)
class CandidateDraft:
    """
    Scoring result before it joins the roster. Has no id: the roster
    assigns one on receipt.
    """
    name: str
    position: str
    nationality: str
    overall: int
    attributes: tuple[Attribute, ...]
    summary: str
    tech_skills: tuple[TechSkill, ...] = ()
    foot: str | None = None
    work_rate: str | None = None

    def __post_init__(self) -> None:
        if len(self.attributes) != ATTRIBUTE_COUNT:
            raise InvalidCandidateError(
                f"Expected exactly {ATTRIBUTE_COUNT} attributes, got {len(self.attributes)}"
            )
        if not SCORE_MIN <= self.overall <= SCORE_MAX:
            raise InvalidCandidateError(f"Overall rating out of range: {self.overall}")
        for a in self.attributes:
            if not SCORE_MIN <= a.value <= SCORE_MAX:
                raise InvalidCandidateError(f"Attribute {a.label} out of range: {a.value}")
        for s in self.tech_skills:
            if not SCORE_MIN <= s.rating <= SCORE_MAX:
                raise InvalidCandidateError(f"Tech skill {s.name} rating out of range: {s.rating}")


@dataclass(frozen=True)
class Candidate(CandidateDraft):
    """
    A scouted candidate. id is stable for the session; image_url is the only
    field edited in place, everything else changes only through a wholesale refresh.
    """
    id: str = ""
    image_url: str | None = None

    def __post_init__(self) -> None:
        super().__post_init__()
        if not self.id:
            raise InvalidCandidateError("Candidate id must be non-empty")

    @classmethod
    def from_draft(cls, draft: CandidateDraft, candidate_id: str, image_url: str | None = None) -> Candidate:
        return cls(
            id=candidate_id,
            image_url=image_url,
            name=draft.name,
            position=draft.position,
            nationality=draft.nationality,
            overall=draft.overall,
            attributes=draft.attributes,
            summary=draft.summary,
            tech_skills=draft.tech_skills,
            foot=draft.foot,
            work_rate=draft.work_rate,
        )

    def with_image(self, image_url: str | None) -> Candidate:
        return replace(self, image_url=image_url)

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "position": self.position,
            "nationality": self.nationality,
            "overall": self.overall,
            "attributes": [a.to_dict() for a in self.attributes],
            "summary": self.summary,
            "tech_skills": [s.to_dict() for s in self.tech_skills],
        }
        if self.foot is not None:
            d["foot"] = self.foot
        if self.work_rate is not None:
            d["work_rate"] = self.work_rate
        if self.image_url is not None:
            d["image_url"] = self.image_url
        return d


# ---------- Synergy evaluation (cached, external origin) ----------


@dataclass(frozen=True)
class SlotFitness:
    """How well the occupant fits one role, with the model's reasoning."""
    role: Role
    score: int
    rationale: str

    def to_dict(self) -> dict[str, Any]:
        return {"role": self.role.value, "score": self.score, "rationale": self.rationale}


@dataclass(frozen=True)
class SynergyEvaluation:
    """
    Team-level evaluation of one lineup. Derived data: the squad service drops it
    whenever occupancy or formation changes.
    """
    overall_score: int
    slots: dict[Role, SlotFitness] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "overall_score": self.overall_score,
            "slots": {r.value: f.to_dict() for r, f in self.slots.items()},
        }
