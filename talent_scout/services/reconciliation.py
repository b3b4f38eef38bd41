"""
Reconciliation of an externally proposed arrangement into the lineup.

The proposal is a {slot_id: candidate_id} mapping from the arrangement model.
It is untrusted: ids may be stale, slots may not exist, a candidate may be
proposed twice. Bad entries are dropped; the rest replace occupancy wholesale.
Never raises on a garbled proposal.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping

from talent_scout.lineup import Lineup
from talent_scout.models import Candidate
from talent_scout.roles import Role, try_parse_role
from talent_scout.roster import RosterStore

logger = logging.getLogger(__name__)


@dataclass
class DroppedEntry:
    slot_id: str
    candidate_id: str
    reason: str

    def to_dict(self) -> dict[str, Any]:
        return {"slot_id": self.slot_id, "candidate_id": self.candidate_id, "reason": self.reason}


@dataclass
class ReconciliationReport:
    applied: dict[Role, str] = field(default_factory=dict)
    dropped: list[DroppedEntry] = field(default_factory=list)
    lead_kept: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "applied": {r.value: cid for r, cid in self.applied.items()},
            "dropped": [d.to_dict() for d in self.dropped],
            "lead_kept": self.lead_kept,
        }


def stage_proposal(
    proposal: Mapping[Any, Any],
    roster: RosterStore,
    lineup: Lineup,
) -> tuple[dict[Role, Candidate], list[DroppedEntry]]:
    """Resolve proposal entries against the roster and active formation. No mutation."""
    staged: dict[Role, Candidate] = {}
    placed: set[str] = set()
    dropped: list[DroppedEntry] = []
    for raw_slot, raw_candidate in proposal.items():
        slot_id = str(raw_slot)
        candidate_id = "" if raw_candidate is None else str(raw_candidate)
        role = try_parse_role(slot_id)
        if role is None:
            dropped.append(DroppedEntry(slot_id, candidate_id, "unknown role"))
            continue
        if not lineup.formation.has_role(role):
            dropped.append(DroppedEntry(slot_id, candidate_id, "role not in formation"))
            continue
        candidate = roster.get(candidate_id)
        if candidate is None:
            dropped.append(DroppedEntry(slot_id, candidate_id, "unknown candidate"))
            continue
        if candidate.id in placed:
            dropped.append(DroppedEntry(slot_id, candidate_id, "candidate already placed"))
            continue
        if role in staged:
            # "be1" and "BE1" both parse to the same role; first entry wins.
            dropped.append(DroppedEntry(slot_id, candidate_id, "slot already filled"))
            continue
        staged[role] = candidate
        placed.add(candidate.id)
    return staged, dropped


def reconcile(
    proposal: Mapping[Any, Any],
    roster: RosterStore,
    lineup: Lineup,
) -> ReconciliationReport:
    """
    Apply a proposal atomically: slots missing from the proposal become empty,
    the previous lead is kept only if still placed, synergy is always dropped.
    """
    previous_lead = lineup.lead_id
    staged, dropped = stage_proposal(proposal, roster, lineup)
    lineup.replace_occupancy(staged)
    for entry in dropped:
        logger.info(
            "Dropped proposed assignment %s -> %s (%s)", entry.slot_id, entry.candidate_id, entry.reason
        )
    return ReconciliationReport(
        applied={role: c.id for role, c in staged.items()},
        dropped=dropped,
        lead_kept=previous_lead is not None and lineup.lead_id == previous_lead,
    )
