"""
Deterministic squad projections.
Read-only: derived from the lineup and roster on every call, never cached.
Used by GET /squad and GET /roster. No mutation, no LLM.
"""
from __future__ import annotations

import math
from typing import Any

from talent_scout.lineup import Lineup
from talent_scout.models import Candidate
from talent_scout.roster import RosterStore


def _round_half_up(value: float) -> int:
    # Display rounding: 72.5 -> 73 (Python's round() would give 72).
    return int(math.floor(value + 0.5))


def occupied_candidates(lineup: Lineup) -> list[Candidate]:
    """Candidates holding a slot, in formation order."""
    return list(lineup.occupancy().values())


def average_attributes(lineup: Lineup) -> dict[str, float]:
    """
    Mean of each attribute label across occupied slots, in first-seen label order.
    Empty lineup -> {}.
    """
    totals: dict[str, float] = {}
    counts: dict[str, int] = {}
    for candidate in occupied_candidates(lineup):
        for attr in candidate.attributes:
            totals[attr.label] = totals.get(attr.label, 0.0) + attr.value
            counts[attr.label] = counts.get(attr.label, 0) + 1
    return {label: totals[label] / counts[label] for label in totals}


def squad_overall(lineup: Lineup) -> float:
    """Mean overall rating of occupied candidates. Empty lineup -> 0."""
    players = occupied_candidates(lineup)
    if not players:
        return 0.0
    return sum(p.overall for p in players) / len(players)


def squad_stats(lineup: Lineup) -> dict[str, Any]:
    """Stats panel payload: rounded averages and squad overall."""
    averages = average_attributes(lineup)
    return {
        "player_count": len(lineup),
        "overall": _round_half_up(squad_overall(lineup)),
        "attributes": [
            {"label": label, "value": _round_half_up(value)}
            for label, value in averages.items()
        ],
    }


def roster_panel(roster: RosterStore, lineup: Lineup) -> list[dict[str, Any]]:
    """Every roster candidate with the role they currently hold (None if unplaced)."""
    rows: list[dict[str, Any]] = []
    for candidate in roster:
        role = lineup.role_of(candidate.id)
        rows.append({
            "candidate": candidate.to_dict(),
            "role": role.value if role is not None else None,
            "role_label": lineup.role_label_of(candidate.id),
            "is_lead": lineup.lead_id == candidate.id,
        })
    return rows
