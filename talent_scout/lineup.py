"""
Lineup assignment engine.

The Lineup is the single mutable aggregate for the squad board: which candidate
holds which role slot of the active formation, who the lead is, and the cached
synergy evaluation for the current occupancy.

Invariants, re-validated after every mutating call:
  I1  a candidate id occupies at most one slot.
  I2  the lead, if set, occupies a slot.
Any change to occupancy or formation drops the cached synergy evaluation.
"""
from __future__ import annotations

from typing import Any, Mapping

from talent_scout.formations import DEFAULT_FORMATION, Formation
from talent_scout.models import Candidate, SynergyEvaluation
from talent_scout.roles import Role, parse_role, role_label
from talent_scout.roster import RosterStore, UnknownCandidateError

# ---------- Exceptions ----------


class LineupError(ValueError):
    """Operation called with a reference that is not valid for the current formation/roster."""


class RoleNotInFormationError(LineupError):
    """Role exists in the vocabulary but has no slot in the active formation."""


class LeadNotPlacedError(LineupError):
    """Lead designation requested for a candidate who holds no slot."""


class LineupInvariantError(RuntimeError):
    """I1 was broken. Indicates a bug in the engine, never a caller error."""


# ---------- Lineup ----------


class Lineup:
    """
    Role slot -> candidate mapping for the active formation, plus lead and synergy cache.
    Sparse: a role with no entry is empty. All mutation goes through the methods below.
    """

    def __init__(self, roster: RosterStore, formation: Formation = DEFAULT_FORMATION) -> None:
        self._roster = roster
        self._formation = formation
        self._slots: dict[Role, Candidate] = {}
        self._lead_id: str | None = None
        self._synergy: SynergyEvaluation | None = None
        # Bumped on every occupancy/formation change; lets async results detect staleness.
        self._revision = 0

    # ---------- Read side ----------

    @property
    def formation(self) -> Formation:
        return self._formation

    @property
    def lead_id(self) -> str | None:
        return self._lead_id

    @property
    def synergy(self) -> SynergyEvaluation | None:
        return self._synergy

    @property
    def revision(self) -> int:
        return self._revision

    def __len__(self) -> int:
        return len(self._slots)

    def is_empty(self) -> bool:
        return not self._slots

    def occupant(self, role: Role | str) -> Candidate | None:
        return self._slots.get(parse_role(role))

    def occupancy(self) -> dict[Role, Candidate]:
        """Occupied slots in formation order."""
        return {r: self._slots[r] for r in self._formation.roles if r in self._slots}

    def role_of(self, candidate_id: str) -> Role | None:
        """Role the candidate currently holds, or None. Read-only scan over the slots."""
        for role, candidate in self._slots.items():
            if candidate.id == candidate_id:
                return role
        return None

    def role_label_of(self, candidate_id: str) -> str | None:
        role = self.role_of(candidate_id)
        return role_label(role) if role is not None else None

    # ---------- Mutations ----------

    def assign(self, role: Role | str, candidate: Candidate) -> None:
        """
        Place candidate at role. Clears every slot already holding the same id and
        displaces whoever held role. Moving a candidate is just assigning them elsewhere.
        """
        role = self._require_slot(role)
        if candidate.id not in self._roster:
            raise UnknownCandidateError(f"Candidate not in roster: {candidate.id}")
        current = self._roster.require(candidate.id)
        for held_role in [r for r, c in self._slots.items() if c.id == current.id]:
            del self._slots[held_role]
        self._slots.pop(role, None)
        self._slots[role] = current
        self._occupancy_changed()

    def remove(self, role: Role | str) -> Candidate | None:
        """Clear the slot. Returns the removed candidate; empty slot is a no-op."""
        role = parse_role(role)
        removed = self._slots.pop(role, None)
        if removed is not None:
            self._occupancy_changed()
        return removed

    def toggle_lead(self, candidate_id: str) -> str | None:
        """
        Toggle the lead designation. Designating someone new requires them to hold a slot;
        toggling off the current lead always succeeds. Returns the new lead id.
        """
        if self._lead_id == candidate_id:
            self._lead_id = None
        else:
            if self.role_of(candidate_id) is None:
                raise LeadNotPlacedError(f"Candidate {candidate_id} holds no slot and cannot be lead")
            self._lead_id = candidate_id
        self._revalidate()
        return self._lead_id

    def change_formation(self, formation: Formation) -> list[Candidate]:
        """
        Switch formation. Entries whose role has no slot in the new formation are dropped.
        Returns the dropped candidates.
        """
        self._formation = formation
        dropped = [c for r, c in self._slots.items() if not formation.has_role(r)]
        self._slots = {r: c for r, c in self._slots.items() if formation.has_role(r)}
        self._occupancy_changed()
        return dropped

    def replace_occupancy(self, staged: Mapping[Role, Candidate]) -> None:
        """
        Wholesale replacement of occupancy (reconciliation). Every role must be in the
        formation and every candidate in the roster; the lead survives only if still placed.
        """
        slots: dict[Role, Candidate] = {}
        for role, candidate in staged.items():
            role = self._require_slot(role)
            if candidate.id not in self._roster:
                raise UnknownCandidateError(f"Candidate not in roster: {candidate.id}")
            slots[role] = candidate
        self._slots = slots
        self._occupancy_changed()

    def replace_candidate(self, candidate: Candidate, scores_changed: bool = False) -> bool:
        """
        Swap a refreshed candidate object into whatever slot holds its id.
        Occupancy is unchanged. New scores count as a lineup change: the cached synergy
        is dropped and any evaluation still in flight will be discarded.
        """
        role = self.role_of(candidate.id)
        if role is None:
            return False
        self._slots[role] = candidate
        if scores_changed:
            self._revision += 1
            self._synergy = None
        return True

    def store_synergy(self, evaluation: SynergyEvaluation, revision: int) -> bool:
        """
        Cache an evaluation requested at `revision`. Discarded if the lineup changed
        since (the evaluation would describe a lineup that no longer exists).
        """
        if revision != self._revision or self.is_empty():
            return False
        self._synergy = evaluation
        return True

    def invalidate_synergy(self) -> None:
        self._synergy = None

    # ---------- Invariants ----------

    def check_invariants(self) -> None:
        seen: set[str] = set()
        for role, candidate in self._slots.items():
            if candidate.id in seen:
                raise LineupInvariantError(f"Candidate {candidate.id} holds more than one slot")
            if not self._formation.has_role(role):
                raise LineupInvariantError(f"Role {role.value} is not in formation {self._formation.id}")
            seen.add(candidate.id)
        if self._lead_id is not None and self._lead_id not in seen:
            raise LineupInvariantError(f"Lead {self._lead_id} holds no slot")

    def _require_slot(self, role: Role | str) -> Role:
        role = parse_role(role)
        if not self._formation.has_role(role):
            raise RoleNotInFormationError(
                f"Role {role.value} has no slot in formation {self._formation.id}"
            )
        return role

    def _occupancy_changed(self) -> None:
        self._revision += 1
        self._synergy = None
        self._revalidate()

    def _revalidate(self) -> None:
        if self._lead_id is not None and self.role_of(self._lead_id) is None:
            self._lead_id = None
        self.check_invariants()

    # ---------- Serialization ----------

    def to_dict(self) -> dict[str, Any]:
        return {
            "formation_id": self._formation.id,
            "slots": {
                slot.role.value: (
                    self._slots[slot.role].to_dict() if slot.role in self._slots else None
                )
                for slot in self._formation.slots
            },
            "lead_id": self._lead_id,
            "revision": self._revision,
        }
