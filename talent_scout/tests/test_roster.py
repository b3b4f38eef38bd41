"""
Roster, card model, role vocabulary and formation catalog tests.
"""
from __future__ import annotations

import sys
from dataclasses import replace
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent.parent))

from talent_scout.formations import FORMATIONS, UnknownFormationError, get_formation
from talent_scout.models import Attribute, Candidate, CandidateDraft, InvalidCandidateError, TechSkill, clamp_score
from talent_scout.roles import ROLE_DEFINITIONS, Role, UnknownRoleError, parse_role, try_parse_role
from talent_scout.roster import RosterStore, UnknownCandidateError


def _draft(name: str = "Ada", overall: int = 85, n_attributes: int = 6) -> CandidateDraft:
    labels = ("CODE", "ARCH", "LEAD", "COMM", "PROB", "EXP", "XTRA")
    return CandidateDraft(
        name=name,
        position="Engineer",
        nationality="GB",
        overall=overall,
        attributes=tuple(Attribute(label=l, value=80) for l in labels[:n_attributes]),
        summary="",
    )


class TestCandidateModel:
    def test_exactly_six_attributes(self):
        with pytest.raises(InvalidCandidateError):
            _draft(n_attributes=5)
        with pytest.raises(InvalidCandidateError):
            _draft(n_attributes=7)

    def test_overall_range(self):
        with pytest.raises(InvalidCandidateError):
            _draft(overall=100)

    def test_attribute_and_tech_skill_range(self):
        base = _draft()
        with pytest.raises(InvalidCandidateError):
            replace(base, attributes=(Attribute(label="CODE", value=150),) + base.attributes[1:])
        with pytest.raises(InvalidCandidateError):
            replace(base, attributes=base.attributes[:5] + (Attribute(label="EXP", value=-1),))
        with pytest.raises(InvalidCandidateError):
            replace(base, tech_skills=(TechSkill(name="Go", rating=100),))
        assert replace(base, tech_skills=(TechSkill(name="Go", rating=99),)).tech_skills[0].rating == 99

    def test_candidate_needs_id(self):
        with pytest.raises(InvalidCandidateError):
            Candidate.from_draft(_draft(), "")

    def test_clamp_score(self):
        assert clamp_score(-3) == 0
        assert clamp_score(150) == 99
        assert clamp_score(71.6) == 72


class TestRosterStore:
    def test_add_assigns_unique_ids(self):
        roster = RosterStore()
        a = roster.add(_draft("Ada"))
        b = roster.add(_draft("Ada"))
        assert a.id and b.id and a.id != b.id
        assert len(roster) == 2
        assert a.id in roster

    def test_refresh_preserves_id_and_image(self):
        roster = RosterStore()
        a = roster.add(_draft("Ada", overall=70))
        roster.set_image(a.id, "img://ada")
        refreshed = roster.refresh(a.id, _draft("Ada Lovelace", overall=95))
        assert refreshed.id == a.id
        assert refreshed.image_url == "img://ada"
        assert refreshed.overall == 95
        assert roster.require(a.id) is refreshed
        assert len(roster) == 1

    def test_order_is_insertion_order(self):
        roster = RosterStore()
        ids = [roster.add(_draft(n)).id for n in ("a", "b", "c")]
        roster.set_image(ids[0], "img")
        assert [c.id for c in roster.candidates()] == ids

    def test_unknown_candidate(self):
        roster = RosterStore()
        assert roster.get("x") is None
        with pytest.raises(UnknownCandidateError):
            roster.require("x")
        with pytest.raises(UnknownCandidateError):
            roster.set_image("x", "img")


class TestRoles:
    def test_every_role_has_a_label(self):
        assert set(ROLE_DEFINITIONS) == set(Role)

    def test_parse_role(self):
        assert parse_role(" FE1 ") == Role.FE1
        assert parse_role(Role.QA) is Role.QA
        with pytest.raises(UnknownRoleError):
            parse_role("goalkeeper")
        assert try_parse_role("goalkeeper") is None
        assert try_parse_role(None) is None


class TestFormations:
    def test_catalog(self):
        assert len(FORMATIONS) == 5
        for f in FORMATIONS:
            assert len(f.roles) == len(set(f.roles)) == 7
            assert f.has_role(Role.MANAGER)

    def test_be3_only_in_some_formations(self):
        assert get_formation("microservices").has_role(Role.BE3)
        assert get_formation("integration").has_role(Role.BE3)
        assert not get_formation("cross-functional").has_role(Role.BE3)

    def test_unknown_formation(self):
        with pytest.raises(UnknownFormationError):
            get_formation("4-4-2")
