"""
Response schemas for the scouting model and parsers into domain objects.

The JSON schemas are sent with strict structured output; the parsers still
validate shape because the contract is external. Scores are clamped to [0, 99].
"""
from __future__ import annotations

from typing import Any, Iterable

from talent_scout.models import (
    ATTRIBUTE_COUNT,
    Attribute,
    CandidateDraft,
    InvalidCandidateError,
    SlotFitness,
    SynergyEvaluation,
    TechSkill,
    clamp_score,
)
from talent_scout.roles import Role, try_parse_role
from talent_scout.scouting.errors import ScoutingResponseError

_NULLABLE_STRING = {"type": ["string", "null"]}

CARD_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "name": {"type": "string", "description": "Candidate's full name"},
        "position": {"type": "string", "description": "Primary job title, max 3 words"},
        "nationality": {"type": "string", "description": "Inferred nationality or 'World'"},
        "overall": {"type": "integer", "description": "Overall rating 1-99"},
        "summary": {"type": "string", "description": "Short, punchy 2-sentence bio"},
        "attributes": {
            "type": "array",
            "description": "Exactly 6 skill categories: CODE, ARCH, LEAD, COMM, PROB, EXP",
            "items": {
                "type": "object",
                "properties": {
                    "label": {"type": "string"},
                    "value": {"type": "integer"},
                    "full_label": {"type": "string"},
                },
                "required": ["label", "value", "full_label"],
                "additionalProperties": False,
            },
        },
        "tech_skills": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "name": {"type": "string"},
                    "rating": {"type": "integer"},
                },
                "required": ["name", "rating"],
                "additionalProperties": False,
            },
        },
        "foot": {"type": ["string", "null"], "enum": ["Left", "Right", "Both", None]},
        "work_rate": _NULLABLE_STRING,
    },
    "required": [
        "name", "position", "nationality", "overall", "summary",
        "attributes", "tech_skills", "foot", "work_rate",
    ],
    "additionalProperties": False,
}

SYNERGY_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "overall_score": {"type": "integer"},
        "slots": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "slot_id": {"type": "string"},
                    "score": {"type": "integer"},
                    "rationale": {"type": "string"},
                },
                "required": ["slot_id", "score", "rationale"],
                "additionalProperties": False,
            },
        },
    },
    "required": ["overall_score", "slots"],
    "additionalProperties": False,
}

ARRANGEMENT_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "assignments": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "slot_id": {"type": "string"},
                    "candidate_id": {"type": "string"},
                },
                "required": ["slot_id", "candidate_id"],
                "additionalProperties": False,
            },
        },
    },
    "required": ["assignments"],
    "additionalProperties": False,
}


def _score(value: Any, what: str) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ScoutingResponseError(f"{what} is not a number: {value!r}")
    return clamp_score(value)


def _text(value: Any, what: str, default: str | None = None) -> str:
    if value is None or (isinstance(value, str) and not value.strip()):
        if default is not None:
            return default
        raise ScoutingResponseError(f"{what} is missing")
    return str(value).strip()


def _items(value: Any, what: str) -> list[dict[str, Any]]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ScoutingResponseError(f"{what} is not a list")
    return [v for v in value if isinstance(v, dict)]


def parse_candidate_draft(data: Any) -> CandidateDraft:
    """Card JSON -> CandidateDraft. Raises ScoutingResponseError on a malformed card."""
    if not isinstance(data, dict):
        raise ScoutingResponseError("Card response is not an object")
    attributes = tuple(
        Attribute(
            label=_text(a.get("label"), "attribute label").upper(),
            value=_score(a.get("value"), "attribute value"),
            full_label=(str(a["full_label"]).strip() or None) if a.get("full_label") else None,
        )
        for a in _items(data.get("attributes"), "attributes")
    )
    if len(attributes) != ATTRIBUTE_COUNT:
        raise ScoutingResponseError(
            f"Card must have exactly {ATTRIBUTE_COUNT} attributes, got {len(attributes)}"
        )
    tech_skills = tuple(
        TechSkill(name=_text(s.get("name"), "tech skill name"), rating=_score(s.get("rating"), "tech skill rating"))
        for s in _items(data.get("tech_skills"), "tech_skills")
    )
    foot = data.get("foot")
    try:
        return CandidateDraft(
            name=_text(data.get("name"), "name"),
            position=_text(data.get("position"), "position", default="Engineer"),
            nationality=_text(data.get("nationality"), "nationality", default="World"),
            overall=_score(data.get("overall"), "overall"),
            attributes=attributes,
            summary=_text(data.get("summary"), "summary", default=""),
            tech_skills=tech_skills,
            foot=foot if foot in ("Left", "Right", "Both") else None,
            work_rate=_text(data.get("work_rate"), "work_rate", default="") or None,
        )
    except InvalidCandidateError as e:
        raise ScoutingResponseError(str(e)) from e


def parse_synergy(data: Any, occupied: Iterable[Role]) -> SynergyEvaluation:
    """
    Synergy JSON -> SynergyEvaluation. Entries for slots that are not occupied
    (or not roles at all) are ignored; the first entry per slot wins.
    """
    if not isinstance(data, dict):
        raise ScoutingResponseError("Synergy response is not an object")
    occupied_set = set(occupied)
    slots: dict[Role, SlotFitness] = {}
    for entry in _items(data.get("slots"), "slots"):
        role = try_parse_role(entry.get("slot_id"))
        if role is None or role not in occupied_set or role in slots:
            continue
        slots[role] = SlotFitness(
            role=role,
            score=_score(entry.get("score"), "slot score"),
            rationale=_text(entry.get("rationale"), "rationale", default=""),
        )
    return SynergyEvaluation(
        overall_score=_score(data.get("overall_score"), "overall_score"),
        slots=slots,
    )


def parse_arrangement(data: Any) -> dict[str, str]:
    """
    Arrangement JSON -> {slot_id: candidate_id}. Only shape is checked here; ids are
    resolved (and stale ones dropped) by reconciliation. First entry per slot wins.
    """
    if not isinstance(data, dict):
        raise ScoutingResponseError("Arrangement response is not an object")
    proposal: dict[str, str] = {}
    for entry in _items(data.get("assignments"), "assignments"):
        slot_id = entry.get("slot_id")
        candidate_id = entry.get("candidate_id")
        if not slot_id or not candidate_id:
            continue
        proposal.setdefault(str(slot_id), str(candidate_id))
    return proposal
