"""
Prompts for the three scouting calls: score a resume, evaluate squad synergy,
propose an arrangement. Context is passed as JSON so the model sees exact ids.
"""
from __future__ import annotations

import json
from typing import Any, Iterable, Mapping

from talent_scout.formations import Formation
from talent_scout.models import Candidate
from talent_scout.roles import Role
from talent_scout.scouting.documents import FileType, ResumeDocument

SCORING_SYSTEM_INSTRUCTION = """You are an elite Technical Recruiter and Talent Scout. Analyze the resume to generate a 'FIFA Ultimate Team' style player card.

STRICT SCORING RUBRIC (0-99):

1. CODE (Coding & Implementation):
   - <60: Scripting only, HTML/CSS.
   - 60-75: Solid proficiency in one major language (JS, Python, Java).
   - 76-85: Polyglot, advanced patterns, optimization.
   - 86-99: Core contributor to major OS/Frameworks, kernel hacking, or extreme algorithmic depth.

2. ARCH (Architecture & System Design):
   - <60: Basic MVC, monolithic features.
   - 60-75: Microservices basics, API design, database schema design.
   - 76-85: Distributed systems, high availability, cloud-native architecture.
   - 86-99: Principal/Staff level design, massive scale, global distribution.

3. LEAD (Leadership & Management):
   - <50: Individual Contributor only.
   - 50-70: Mentoring juniors, code review ownership.
   - 71-85: Tech Lead, Team Lead, Engineering Manager.
   - 86-99: CTO, VP of Engineering, Head of Department.

4. COMM (Communication & Soft Skills):
   - Base on documentation, presentations, cross-functional collaboration, public speaking.
   - 80+ requires evidence of blogs, conference talks, or leading large cross-team initiatives.

5. PROB (Problem Solving):
   - Base on achievements in performance work, critical incidents, complex debugging, or a mathematical background.

6. EXP (Experience & Tenure):
   - < 2 years: 50-69
   - 2-5 years: 70-79
   - 5-8 years: 80-88
   - 8+ years: 89-99

Return exactly these six attributes, in this order, with labels CODE, ARCH, LEAD, COMM, PROB, EXP.

TECH SKILLS: extract the top 6-8 specific technologies (languages, frameworks, platforms) and rate them by how central they are to recent experience.

OVERALL RATING: weighted average of the attributes, weighted towards the primary role (CODE/ARCH for developers, LEAD for managers).

position: primary job title, at most 3 words. nationality: inferred nationality or 'World' if unknown. summary: a short, punchy 2-sentence bio.
Use null for foot and work_rate unless the resume clearly implies them."""

SYNERGY_SYSTEM_INSTRUCTION = """You are an engineering director reviewing a squad lineup. Each slot is a role in the chosen formation, filled by one candidate card.

Rules:
- Score how well each placed candidate fits their slot's role (0-99) and give a one or two sentence rationale citing their attributes or tech skills.
- Score the squad as a whole (0-99): coverage of the formation's needs, complementary skills, leadership.
- Only score the slots listed as occupied. Use the exact slot_id values given.
- Base everything on the provided cards. Do not invent experience."""

ARRANGEMENT_SYSTEM_INSTRUCTION = """You are an engineering director building the best squad for a formation from a pool of scouted candidates.

Rules:
- Assign candidates to the formation's slots to maximize overall fit. Each candidate may fill at most one slot.
- Use the exact slot_id and candidate_id values given. Never invent ids.
- Leave a slot out if no remaining candidate is a reasonable fit. You do not have to use every candidate."""


def _card_context(candidate: Candidate) -> dict[str, Any]:
    return {
        "candidate_id": candidate.id,
        "name": candidate.name,
        "position": candidate.position,
        "overall": candidate.overall,
        "attributes": {a.label: a.value for a in candidate.attributes},
        "tech_skills": {s.name: s.rating for s in candidate.tech_skills},
        "summary": candidate.summary,
    }


def _formation_context(formation: Formation) -> dict[str, Any]:
    return {
        "formation": formation.name,
        "description": formation.description,
        "slots": [{"slot_id": s.role.value, "role": s.display_label} for s in formation.slots],
    }


def build_scoring_messages(document: ResumeDocument) -> list[dict[str, Any]]:
    """System + user message for scoring one resume. PDFs are attached as an inline file part."""
    if document.file_type == FileType.PDF:
        user_content: Any = [
            {
                "type": "file",
                "file": {"filename": document.filename, "file_data": document.data_url},
            },
            {"type": "text", "text": "Analyze this resume PDF. Create a 'FUT Player Card' profile for this candidate."},
        ]
    else:
        user_content = (
            "Analyze the following resume text. Create a 'FUT Player Card' profile for this candidate."
            f"\n\nRESUME TEXT:\n{document.text}"
        )
    return [
        {"role": "system", "content": SCORING_SYSTEM_INSTRUCTION},
        {"role": "user", "content": user_content},
    ]


def build_synergy_messages(
    occupancy: Mapping[Role, Candidate],
    formation: Formation,
) -> list[dict[str, str]]:
    lineup_block = json.dumps(
        [
            {"slot_id": role.value, **_card_context(candidate)}
            for role, candidate in occupancy.items()
        ],
        indent=2,
    )
    user_content = f"""Use only the following data.

## Formation
{json.dumps(_formation_context(formation), indent=2)}

## Occupied slots
{lineup_block}

Respond with overall_score and one entry in slots per occupied slot_id."""
    return [
        {"role": "system", "content": SYNERGY_SYSTEM_INSTRUCTION},
        {"role": "user", "content": user_content},
    ]


def build_arrangement_messages(
    candidates: Iterable[Candidate],
    formation: Formation,
) -> list[dict[str, str]]:
    pool_block = json.dumps([_card_context(c) for c in candidates], indent=2)
    user_content = f"""Use only the following data.

## Formation
{json.dumps(_formation_context(formation), indent=2)}

## Candidate pool
{pool_block}

Respond with assignments: a list of {{ "slot_id", "candidate_id" }}."""
    return [
        {"role": "system", "content": ARRANGEMENT_SYSTEM_INSTRUCTION},
        {"role": "user", "content": user_content},
    ]
