"""
LLM invocation for the scouting calls.

This module is the only place that talks to the external model. It never
touches the roster or lineup: it returns drafts, evaluations and proposals,
and the squad service decides what to apply. Deterministic temperature,
strict JSON-schema responses.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Iterable, Mapping

from openai import OpenAI, OpenAIError

from talent_scout.config import Settings, get_settings
from talent_scout.formations import Formation
from talent_scout.models import Candidate, CandidateDraft, SynergyEvaluation
from talent_scout.roles import Role
from talent_scout.scouting.documents import ResumeDocument
from talent_scout.scouting.errors import (
    EmptyLineupError,
    ScoutingRequestError,
    ScoutingResponseError,
    ScoutingUnavailableError,
)
from talent_scout.scouting.prompt import (
    build_arrangement_messages,
    build_scoring_messages,
    build_synergy_messages,
)
from talent_scout.scouting.schemas import (
    ARRANGEMENT_SCHEMA,
    CARD_SCHEMA,
    SYNERGY_SCHEMA,
    parse_arrangement,
    parse_candidate_draft,
    parse_synergy,
)

logger = logging.getLogger(__name__)


class ScoutClient:
    """
    Thin wrapper over the OpenAI chat completions API for the three scouting calls.
    Blocking; the squad service runs it off the event loop.
    """

    def __init__(self, settings: Settings | None = None, client: Any | None = None) -> None:
        self._settings = settings or get_settings()
        self._client = client

    @property
    def enabled(self) -> bool:
        return self._client is not None or self._settings.scouting_enabled

    def _get_client(self) -> Any:
        if self._client is not None:
            return self._client
        if not self._settings.scouting_enabled:
            raise ScoutingUnavailableError(
                "Scouting is disabled. Set OPENAI_API_KEY in the environment where the API server runs."
            )
        self._client = OpenAI(
            api_key=self._settings.openai_api_key,
            timeout=self._settings.timeout_seconds,
        )
        return self._client

    def _complete_json(self, messages: list[dict[str, Any]], name: str, schema: dict[str, Any]) -> Any:
        """Run one structured-output completion and return the decoded JSON payload."""
        client = self._get_client()
        try:
            response = client.chat.completions.create(
                model=self._settings.model,
                messages=messages,
                temperature=0,
                response_format={
                    "type": "json_schema",
                    "json_schema": {"name": name, "strict": True, "schema": schema},
                },
                max_tokens=self._settings.max_tokens,
            )
        except OpenAIError as e:
            raise ScoutingRequestError(f"{name} request failed: {e!s}") from e

        if not response.choices:
            raise ScoutingResponseError(f"{name}: no choices returned")
        content = response.choices[0].message.content
        if not content:
            raise ScoutingResponseError(f"{name}: empty response")
        try:
            return json.loads(content)
        except json.JSONDecodeError as e:
            raise ScoutingResponseError(f"{name}: response is not valid JSON ({e.msg})") from e

    def score_resume(self, document: ResumeDocument) -> CandidateDraft:
        """Score one resume into a card. The caller assigns the id."""
        data = self._complete_json(build_scoring_messages(document), "player_card", CARD_SCHEMA)
        draft = parse_candidate_draft(data)
        logger.debug("Scored %s as %s (%d)", document.filename, draft.name, draft.overall)
        return draft

    def evaluate_synergy(
        self,
        occupancy: Mapping[Role, Candidate],
        formation: Formation,
    ) -> SynergyEvaluation:
        """Evaluate an occupied lineup. Must not be called with zero occupied slots."""
        if not occupancy:
            raise EmptyLineupError("Cannot evaluate synergy of an empty lineup")
        data = self._complete_json(
            build_synergy_messages(occupancy, formation), "team_synergy", SYNERGY_SCHEMA
        )
        return parse_synergy(data, occupancy.keys())

    def propose_arrangement(
        self,
        candidates: Iterable[Candidate],
        formation: Formation,
    ) -> dict[str, str]:
        """Ask for a slot_id -> candidate_id arrangement. Ids are not validated here."""
        data = self._complete_json(
            build_arrangement_messages(candidates, formation), "auto_arrange", ARRANGEMENT_SCHEMA
        )
        return parse_arrangement(data)
