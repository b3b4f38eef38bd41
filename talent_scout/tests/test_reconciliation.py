"""
Reconciliation tests: stale ids dropped silently, wholesale replacement,
lead kept only if still placed, synergy always dropped.
"""
from __future__ import annotations

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent.parent))

from talent_scout.formations import get_formation
from talent_scout.lineup import Lineup
from talent_scout.models import Attribute, Candidate, SynergyEvaluation
from talent_scout.roles import Role
from talent_scout.roster import RosterStore
from talent_scout.services.reconciliation import reconcile, stage_proposal


def _card(candidate_id: str) -> Candidate:
    return Candidate(
        id=candidate_id,
        name=candidate_id.upper(),
        position="Engineer",
        nationality="World",
        overall=75,
        attributes=tuple(Attribute(label=l, value=70) for l in ("CODE", "ARCH", "LEAD", "COMM", "PROB", "EXP")),
        summary="",
    )


@pytest.fixture
def roster() -> RosterStore:
    store = RosterStore()
    for cid in ("real-id", "p2", "p3"):
        store.insert(_card(cid))
    return store


@pytest.fixture
def lineup(roster) -> Lineup:
    return Lineup(roster, get_formation("cross-functional"))


def test_partial_garbage_proposal(lineup, roster):
    report = reconcile({"fe1": "real-id", "fe2": "unknown-id"}, roster, lineup)
    assert lineup.occupant("fe1").id == "real-id"
    assert lineup.occupant("fe2") is None
    assert report.applied == {Role.FE1: "real-id"}
    assert [d.reason for d in report.dropped] == ["unknown candidate"]


def test_replaces_occupancy_wholesale(lineup, roster):
    lineup.assign("manager", roster.require("p2"))
    lineup.assign("po", roster.require("p3"))
    reconcile({"be1": "p3"}, roster, lineup)
    assert lineup.occupant("manager") is None
    assert lineup.occupant("po") is None
    assert lineup.role_of("p3") == Role.BE1
    assert len(lineup) == 1


def test_empty_proposal_clears_lineup(lineup, roster):
    lineup.assign("manager", roster.require("p2"))
    reconcile({}, roster, lineup)
    assert lineup.is_empty()


def test_lead_kept_when_still_placed(lineup, roster):
    lineup.assign("manager", roster.require("p2"))
    lineup.toggle_lead("p2")
    report = reconcile({"po": "p2", "fe1": "p3"}, roster, lineup)
    assert lineup.lead_id == "p2"
    assert report.lead_kept


def test_lead_cleared_when_no_longer_placed(lineup, roster):
    lineup.assign("manager", roster.require("p2"))
    lineup.toggle_lead("p2")
    report = reconcile({"manager": "p3"}, roster, lineup)
    assert lineup.lead_id is None
    assert not report.lead_kept


def test_drops_roles_outside_formation_and_vocabulary(lineup, roster):
    report = reconcile({"be3": "p2", "goalkeeper": "p3", "fe2": "real-id"}, roster, lineup)
    assert lineup.occupancy() == {Role.FE2: roster.require("real-id")}
    reasons = sorted(d.reason for d in report.dropped)
    assert reasons == ["role not in formation", "unknown role"]


def test_duplicate_candidate_keeps_first_slot(lineup, roster):
    report = reconcile({"fe1": "p2", "fe2": "p2"}, roster, lineup)
    assert lineup.role_of("p2") == Role.FE1
    assert lineup.occupant("fe2") is None
    assert report.dropped[0].reason == "candidate already placed"
    lineup.check_invariants()


def test_none_and_non_string_values_are_dropped(lineup, roster):
    reconcile({"fe1": None, "fe2": 42, "po": "p3"}, roster, lineup)
    assert lineup.occupancy() == {Role.PO: roster.require("p3")}


def test_reconcile_drops_synergy(lineup, roster):
    lineup.assign("fe1", roster.require("p2"))
    lineup.store_synergy(SynergyEvaluation(overall_score=60), lineup.revision)
    assert lineup.synergy is not None
    reconcile({"fe1": "p2"}, roster, lineup)
    assert lineup.synergy is None


def test_stage_proposal_does_not_mutate(lineup, roster):
    lineup.assign("fe1", roster.require("p2"))
    revision = lineup.revision
    staged, dropped = stage_proposal({"po": "p3", "qa": "p2"}, roster, lineup)
    assert staged == {Role.PO: roster.require("p3")}
    assert len(dropped) == 1
    assert lineup.revision == revision
    assert lineup.role_of("p2") == Role.FE1
