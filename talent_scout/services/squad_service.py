"""
Squad controller: the single owner of the session's roster, lineup and pending flags.

All state changes go through this class. Synchronous operations are board edits;
the three async operations wrap a blocking scouting call, run it off the event
loop, and apply the result in one synchronous step when it returns.

Pending flags: one outstanding request per action class. A second request of the
same class while one is in flight raises ActionPendingError. A failed call clears
its flag and leaves roster and lineup untouched.
"""
from __future__ import annotations

import asyncio
import logging
from contextlib import contextmanager
from enum import Enum
from typing import Any, Callable, Generator, TypeVar

from talent_scout.analytics import roster_panel, squad_stats
from talent_scout.formations import DEFAULT_FORMATION, Formation, get_formation
from talent_scout.lineup import Lineup
from talent_scout.models import Candidate, SynergyEvaluation
from talent_scout.roles import Role
from talent_scout.roster import RosterStore
from talent_scout.scouting import EmptyLineupError, ResumeDocument, ScoutClient
from talent_scout.services.reconciliation import ReconciliationReport, reconcile

logger = logging.getLogger(__name__)

T = TypeVar("T")


# ---------- Exceptions ----------


class ActionPendingError(RuntimeError):
    """Another request of the same action class is still in flight."""


# ---------- Pending action classes ----------


class PendingAction(str, Enum):
    SCOUTING = "scouting"
    ANALYZING = "analyzing"
    ARRANGING = "arranging"


# ---------- SquadService ----------


class SquadService:
    """
    Session state: roster, lineup (with lead and synergy cache), pending flags.
    Not thread-safe by design of use: every method runs on the event loop.
    """

    def __init__(self, scout: ScoutClient | None = None, formation: Formation = DEFAULT_FORMATION) -> None:
        self._scout = scout if scout is not None else ScoutClient()
        self.roster = RosterStore()
        self.lineup = Lineup(self.roster, formation)
        self._pending: set[PendingAction] = set()

    # ---------- Pending flags ----------

    def is_pending(self, action: PendingAction) -> bool:
        return action in self._pending

    @contextmanager
    def _pending_action(self, action: PendingAction) -> Generator[None, None, None]:
        if action in self._pending:
            raise ActionPendingError(f"A {action.value} request is already in progress")
        self._pending.add(action)
        try:
            yield
        finally:
            self._pending.discard(action)

    async def _run_blocking(self, fn: Callable[..., T], *args: Any) -> T:
        return await asyncio.to_thread(fn, *args)

    # ---------- Board edits ----------

    def assign(self, role: Role | str, candidate_id: str) -> None:
        candidate = self.roster.require(candidate_id)
        self.lineup.assign(role, candidate)

    def remove(self, role: Role | str) -> Candidate | None:
        return self.lineup.remove(role)

    def toggle_lead(self, candidate_id: str) -> str | None:
        self.roster.require(candidate_id)
        return self.lineup.toggle_lead(candidate_id)

    def change_formation(self, formation_id: str) -> list[Candidate]:
        formation = get_formation(formation_id)
        dropped = self.lineup.change_formation(formation)
        if dropped:
            logger.info(
                "Formation %s dropped %d placed candidate(s): %s",
                formation.id, len(dropped), ", ".join(c.id for c in dropped),
            )
        return dropped

    def role_of(self, candidate_id: str) -> Role | None:
        return self.lineup.role_of(candidate_id)

    def set_image(self, candidate_id: str, image_url: str | None) -> Candidate:
        candidate = self.roster.set_image(candidate_id, image_url)
        self.lineup.replace_candidate(candidate)
        return candidate

    # ---------- External calls ----------

    async def scout(self, document: ResumeDocument) -> Candidate:
        """Score a resume and add the result to the roster with a fresh id."""
        with self._pending_action(PendingAction.SCOUTING):
            draft = await self._run_blocking(self._scout.score_resume, document)
            candidate = self.roster.add(draft)
        logger.info("Scouted %s (%s, overall %d) as %s", candidate.name, candidate.position, candidate.overall, candidate.id)
        return candidate

    async def rescout(self, candidate_id: str, document: ResumeDocument) -> Candidate:
        """Re-score a resume and overwrite an existing candidate, keeping id and image."""
        self.roster.require(candidate_id)
        with self._pending_action(PendingAction.SCOUTING):
            draft = await self._run_blocking(self._scout.score_resume, document)
            candidate = self.roster.refresh(candidate_id, draft)
            self.lineup.replace_candidate(candidate, scores_changed=True)
        logger.info("Re-scouted %s (overall %d)", candidate.id, candidate.overall)
        return candidate

    async def analyze(self) -> tuple[SynergyEvaluation, bool]:
        """
        Evaluate synergy of the current lineup. Returns (evaluation, cached); cached is
        False when the lineup changed while the request was in flight.
        """
        if self.lineup.is_empty():
            raise EmptyLineupError("Place at least one candidate before analyzing the squad")
        with self._pending_action(PendingAction.ANALYZING):
            revision = self.lineup.revision
            occupancy = self.lineup.occupancy()
            formation = self.lineup.formation
            evaluation = await self._run_blocking(self._scout.evaluate_synergy, occupancy, formation)
            cached = self.lineup.store_synergy(evaluation, revision)
        if not cached:
            logger.info("Discarded synergy evaluation for lineup revision %d (now %d)", revision, self.lineup.revision)
        return evaluation, cached

    async def auto_arrange(self) -> ReconciliationReport | None:
        """
        Ask the model for a full arrangement and apply it wholesale.
        Empty roster: nothing to arrange, returns None without calling out.
        """
        if len(self.roster) == 0:
            return None
        with self._pending_action(PendingAction.ARRANGING):
            self.lineup.invalidate_synergy()
            proposal = await self._run_blocking(
                self._scout.propose_arrangement, self.roster.candidates(), self.lineup.formation
            )
            report = reconcile(proposal, self.roster, self.lineup)
        logger.info(
            "Auto-arrange applied %d assignment(s), dropped %d", len(report.applied), len(report.dropped)
        )
        return report

    # ---------- Snapshot ----------

    def snapshot(self) -> dict[str, Any]:
        synergy = self.lineup.synergy
        return {
            "formation": self.lineup.formation.to_dict(),
            "lineup": self.lineup.to_dict(),
            "synergy": synergy.to_dict() if synergy is not None else None,
            "stats": squad_stats(self.lineup),
            "pending": {a.value: self.is_pending(a) for a in PendingAction},
            "scouting_enabled": self._scout.enabled,
        }

    def roster_view(self) -> list[dict[str, Any]]:
        return roster_panel(self.roster, self.lineup)
