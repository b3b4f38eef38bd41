"""
Scouting client tests: document validation, response parsing, and the
OpenAI call path with a mocked client. No network.
"""
from __future__ import annotations

import base64
import json
import sys
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent.parent))

from openai import OpenAIError

from talent_scout.config import Settings
from talent_scout.formations import get_formation
from talent_scout.models import Attribute, Candidate
from talent_scout.roles import Role
from talent_scout.scouting import (
    EmptyLineupError,
    FileType,
    ScoutClient,
    ScoutingRequestError,
    ScoutingResponseError,
    ScoutingUnavailableError,
    UnsupportedDocumentError,
    build_document,
)
from talent_scout.scouting.documents import detect_file_type
from talent_scout.scouting.prompt import build_scoring_messages
from talent_scout.scouting.schemas import parse_arrangement, parse_candidate_draft, parse_synergy

PDF_B64 = base64.b64encode(b"%PDF-1.4 fake resume").decode("ascii")


def _card_json(**overrides) -> dict:
    data = {
        "name": "Ada Lovelace",
        "position": "Staff Engineer",
        "nationality": "GB",
        "overall": 91,
        "summary": "Writes the first program. Ships it.",
        "attributes": [
            {"label": l, "value": v, "full_label": l.title()}
            for l, v in (("CODE", 95), ("ARCH", 90), ("LEAD", 70), ("COMM", 85), ("PROB", 99), ("EXP", 88))
        ],
        "tech_skills": [{"name": "Python", "rating": 92}],
        "foot": None,
        "work_rate": None,
    }
    data.update(overrides)
    return data


def _response(payload) -> SimpleNamespace:
    content = payload if isinstance(payload, str) or payload is None else json.dumps(payload)
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


def _client_returning(payload) -> MagicMock:
    client = MagicMock()
    client.chat.completions.create.return_value = _response(payload)
    return client


def _candidate(candidate_id: str) -> Candidate:
    return Candidate(
        id=candidate_id,
        name=candidate_id,
        position="Dev",
        nationality="World",
        overall=70,
        attributes=tuple(Attribute(label=l, value=70) for l in ("CODE", "ARCH", "LEAD", "COMM", "PROB", "EXP")),
        summary="",
    )


# ---------- Documents ----------


class TestDocuments:
    def test_detect_by_mime_then_extension(self):
        assert detect_file_type("application/pdf") == FileType.PDF
        assert detect_file_type(None, "cv.DOCX") == FileType.DOCX
        assert detect_file_type("application/octet-stream", "cv.pdf") == FileType.PDF
        assert detect_file_type("image/png", "cv.png") == FileType.UNKNOWN

    def test_pdf_accepts_data_url(self):
        doc = build_document("application/pdf", "cv.pdf", data=f"data:application/pdf;base64,{PDF_B64}")
        assert doc.base64_data == PDF_B64
        assert doc.data_url.startswith("data:application/pdf;base64,")

    def test_pdf_rejects_bad_base64(self):
        with pytest.raises(UnsupportedDocumentError):
            build_document("application/pdf", "cv.pdf", data="not base64!!")

    def test_docx_requires_text(self):
        with pytest.raises(UnsupportedDocumentError):
            build_document(FileType.DOCX.value, "cv.docx", data=PDF_B64)
        doc = build_document(FileType.DOCX.value, "cv.docx", text="  Senior dev  ")
        assert doc.text == "Senior dev"

    def test_unknown_type_rejected(self):
        with pytest.raises(UnsupportedDocumentError):
            build_document("image/png", "photo.png", data=PDF_B64)

    def test_pdf_is_sent_as_file_part(self):
        doc = build_document("application/pdf", "cv.pdf", data=PDF_B64)
        messages = build_scoring_messages(doc)
        parts = messages[1]["content"]
        assert parts[0]["type"] == "file"
        assert parts[0]["file"]["filename"] == "cv.pdf"

    def test_text_is_inlined(self):
        doc = build_document("text/plain", text="Ten years of Go.")
        messages = build_scoring_messages(doc)
        assert "Ten years of Go." in messages[1]["content"]


# ---------- Parsers ----------


class TestParsers:
    def test_card_parses_and_clamps(self):
        draft = parse_candidate_draft(_card_json(overall=140, tech_skills=[{"name": "Go", "rating": -4}]))
        assert draft.overall == 99
        assert draft.tech_skills[0].rating == 0
        assert [a.label for a in draft.attributes] == ["CODE", "ARCH", "LEAD", "COMM", "PROB", "EXP"]

    def test_card_requires_six_attributes(self):
        data = _card_json()
        data["attributes"] = data["attributes"][:5]
        with pytest.raises(ScoutingResponseError):
            parse_candidate_draft(data)

    def test_card_requires_name(self):
        with pytest.raises(ScoutingResponseError):
            parse_candidate_draft(_card_json(name=""))

    def test_card_rejects_non_numeric_score(self):
        with pytest.raises(ScoutingResponseError):
            parse_candidate_draft(_card_json(overall="high"))

    def test_card_defaults_missing_nationality(self):
        assert parse_candidate_draft(_card_json(nationality=None)).nationality == "World"

    def test_synergy_keeps_only_occupied_slots(self):
        evaluation = parse_synergy(
            {
                "overall_score": 81,
                "slots": [
                    {"slot_id": "fe1", "score": 77, "rationale": "Strong React."},
                    {"slot_id": "qa", "score": 50, "rationale": "Not placed."},
                    {"slot_id": "nonsense", "score": 1, "rationale": ""},
                    {"slot_id": "fe1", "score": 10, "rationale": "Duplicate."},
                ],
            },
            [Role.FE1, Role.BE1],
        )
        assert evaluation.overall_score == 81
        assert set(evaluation.slots) == {Role.FE1}
        assert evaluation.slots[Role.FE1].rationale == "Strong React."

    def test_arrangement_first_entry_per_slot_wins(self):
        proposal = parse_arrangement(
            {
                "assignments": [
                    {"slot_id": "fe1", "candidate_id": "a"},
                    {"slot_id": "fe1", "candidate_id": "b"},
                    {"slot_id": "be1", "candidate_id": ""},
                    "garbage",
                ]
            }
        )
        assert proposal == {"fe1": "a"}

    def test_arrangement_rejects_non_object(self):
        with pytest.raises(ScoutingResponseError):
            parse_arrangement(["fe1", "a"])


# ---------- ScoutClient ----------


class TestScoutClient:
    def test_no_api_key_is_unavailable(self):
        client = ScoutClient(Settings(openai_api_key=""))
        assert not client.enabled
        doc = build_document("text/plain", text="resume")
        with pytest.raises(ScoutingUnavailableError):
            client.score_resume(doc)

    def test_score_resume_uses_strict_schema(self):
        fake = _client_returning(_card_json())
        client = ScoutClient(Settings(openai_api_key="k", model="test-model", max_tokens=512), client=fake)
        draft = client.score_resume(build_document("text/plain", text="resume"))
        assert draft.name == "Ada Lovelace"
        kwargs = fake.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "test-model"
        assert kwargs["temperature"] == 0
        assert kwargs["max_tokens"] == 512
        assert kwargs["response_format"]["json_schema"]["strict"] is True

    def test_empty_content_is_response_error(self):
        client = ScoutClient(Settings(openai_api_key="k"), client=_client_returning(None))
        with pytest.raises(ScoutingResponseError):
            client.score_resume(build_document("text/plain", text="resume"))

    def test_invalid_json_is_response_error(self):
        client = ScoutClient(Settings(openai_api_key="k"), client=_client_returning("{not json"))
        with pytest.raises(ScoutingResponseError):
            client.score_resume(build_document("text/plain", text="resume"))

    def test_openai_error_is_wrapped(self):
        fake = MagicMock()
        fake.chat.completions.create.side_effect = OpenAIError("rate limited")
        client = ScoutClient(Settings(openai_api_key="k"), client=fake)
        with pytest.raises(ScoutingRequestError, match="rate limited"):
            client.propose_arrangement([_candidate("a")], get_formation("integration"))

    def test_evaluate_synergy_refuses_empty_lineup(self):
        fake = _client_returning({"overall_score": 50, "slots": []})
        client = ScoutClient(Settings(openai_api_key="k"), client=fake)
        with pytest.raises(EmptyLineupError):
            client.evaluate_synergy({}, get_formation("integration"))
        fake.chat.completions.create.assert_not_called()

    def test_evaluate_synergy_prompt_lists_occupied_slots(self):
        fake = _client_returning({"overall_score": 64, "slots": [{"slot_id": "qa", "score": 70, "rationale": "ok"}]})
        client = ScoutClient(Settings(openai_api_key="k"), client=fake)
        evaluation = client.evaluate_synergy({Role.QA: _candidate("q1")}, get_formation("integration"))
        assert evaluation.slots[Role.QA].score == 70
        user_prompt = fake.chat.completions.create.call_args.kwargs["messages"][1]["content"]
        assert '"slot_id": "qa"' in user_prompt
        assert '"candidate_id": "q1"' in user_prompt
