"""
REST API for the squad builder.
Thin wrappers around the squad service. One in-memory session per process;
nothing is persisted.
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager, contextmanager
from typing import Any, AsyncGenerator, Generator

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from talent_scout.config import get_settings
from talent_scout.formations import UnknownFormationError, list_formations
from talent_scout.lineup import LineupError
from talent_scout.roles import UnknownRoleError, list_all_roles
from talent_scout.roster import UnknownCandidateError
from talent_scout.scouting import (
    EmptyLineupError,
    ScoutClient,
    ScoutingError,
    ScoutingUnavailableError,
    UnsupportedDocumentError,
    build_document,
)
from talent_scout.services.squad_service import ActionPendingError, SquadService

logger = logging.getLogger(__name__)


# ---------- Session ----------
_squad_service: SquadService | None = None


def get_squad_service() -> SquadService:
    """The process-wide session. Created lazily so settings are read at first use."""
    global _squad_service
    if _squad_service is None:
        _squad_service = SquadService(ScoutClient(get_settings()))
    return _squad_service


def reset_squad_service(service: SquadService | None = None) -> None:
    """Replace (or drop) the session. Used by tests."""
    global _squad_service
    _squad_service = service


@contextmanager
def translate_errors() -> Generator[None, None, None]:
    """Map domain errors to HTTP errors. Scouting failures are logged; state is untouched."""
    try:
        yield
    except (UnknownCandidateError, UnknownFormationError) as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except (UnknownRoleError, LineupError, EmptyLineupError, UnsupportedDocumentError) as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except ActionPendingError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    except ScoutingUnavailableError as e:
        raise HTTPException(status_code=503, detail=str(e)) from e
    except ScoutingError as e:
        logger.exception("Scouting call failed")
        raise HTTPException(status_code=502, detail=f"Scouting failed: {e!s}") from e


def _configure_logging() -> None:
    settings = get_settings()
    package_logger = logging.getLogger("talent_scout")
    package_logger.setLevel(settings.log_level)
    if not logging.getLogger().handlers and not package_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
        package_logger.addHandler(handler)


# ---------- Lifespan ----------
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    _configure_logging()
    yield


# ---------- FastAPI app ----------
app = FastAPI(
    title="Talent Scout API",
    description="Scout resumes into player cards and arrange them into a squad formation",
    version="0.1.0",
    lifespan=lifespan,
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=list(get_settings().cors_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------- Request models ----------


class ScoutRequest(BaseModel):
    filename: str | None = Field(None, max_length=255)
    mime_type: str | None = Field(None, description="application/pdf, DOCX or text/plain")
    data: str | None = Field(None, description="Base64 file content (PDF); data URLs accepted")
    text: str | None = Field(None, description="Extracted resume text (DOCX or plain text)")


class AssignRequest(BaseModel):
    candidate_id: str = Field(..., min_length=1)


class FormationRequest(BaseModel):
    formation_id: str = Field(..., min_length=1)


class ImageRequest(BaseModel):
    image_url: str | None = Field(None, description="Image reference; null clears it")


# ---------- Catalog ----------


@app.get("/formations")
async def get_formations() -> dict[str, Any]:
    return {"formations": [f.to_dict() for f in list_formations()]}


@app.get("/roles")
async def get_roles() -> dict[str, Any]:
    """List all roles with labels (slot ids shared by every formation)."""
    return {
        "roles": [
            {"id": r.value, "label": d.label, "description": d.description}
            for r, d in list_all_roles()
        ]
    }


# ---------- Squad ----------


@app.get("/squad")
async def get_squad(service: SquadService = Depends(get_squad_service)) -> dict[str, Any]:
    return service.snapshot()


@app.post("/squad/formation")
async def change_formation(
    req: FormationRequest,
    service: SquadService = Depends(get_squad_service),
) -> dict[str, Any]:
    """Switch formation. Placements in roles the new formation lacks are dropped."""
    with translate_errors():
        dropped = service.change_formation(req.formation_id)
    return {**service.snapshot(), "dropped": [c.id for c in dropped]}


@app.put("/lineup/{role}")
async def assign_role(
    role: str,
    req: AssignRequest,
    service: SquadService = Depends(get_squad_service),
) -> dict[str, Any]:
    """Place a candidate in a slot. Moves them if already placed elsewhere."""
    with translate_errors():
        service.assign(role, req.candidate_id)
    return service.snapshot()


@app.delete("/lineup/{role}")
async def remove_role(role: str, service: SquadService = Depends(get_squad_service)) -> dict[str, Any]:
    with translate_errors():
        service.remove(role)
    return service.snapshot()


@app.post("/lineup/lead/{candidate_id}")
async def toggle_lead(candidate_id: str, service: SquadService = Depends(get_squad_service)) -> dict[str, Any]:
    """Toggle the lead designation. Only placed candidates can become lead."""
    with translate_errors():
        service.toggle_lead(candidate_id)
    return service.snapshot()


@app.post("/squad/analyze")
async def analyze_squad(service: SquadService = Depends(get_squad_service)) -> dict[str, Any]:
    """Evaluate synergy of the current lineup. Requires at least one placed candidate."""
    with translate_errors():
        evaluation, cached = await service.analyze()
    return {**service.snapshot(), "evaluation": evaluation.to_dict(), "stale": not cached}


@app.post("/squad/auto-arrange")
async def auto_arrange(service: SquadService = Depends(get_squad_service)) -> dict[str, Any]:
    """Let the model arrange the whole roster into the formation. Replaces the lineup."""
    with translate_errors():
        report = await service.auto_arrange()
    return {**service.snapshot(), "report": report.to_dict() if report is not None else None}


# ---------- Roster ----------


@app.get("/roster")
async def get_roster(service: SquadService = Depends(get_squad_service)) -> dict[str, Any]:
    return {"roster": service.roster_view()}


@app.get("/roster/{candidate_id}")
async def get_candidate(candidate_id: str, service: SquadService = Depends(get_squad_service)) -> dict[str, Any]:
    with translate_errors():
        candidate = service.roster.require(candidate_id)
    role = service.role_of(candidate_id)
    return {"candidate": candidate.to_dict(), "role": role.value if role is not None else None}


@app.post("/roster/scout")
async def scout_resume(req: ScoutRequest, service: SquadService = Depends(get_squad_service)) -> dict[str, Any]:
    """Score a resume into a card and add it to the roster."""
    with translate_errors():
        document = build_document(req.mime_type, req.filename, data=req.data, text=req.text)
        candidate = await service.scout(document)
    return {"candidate": candidate.to_dict()}


@app.post("/roster/{candidate_id}/rescout")
async def rescout_candidate(
    candidate_id: str,
    req: ScoutRequest,
    service: SquadService = Depends(get_squad_service),
) -> dict[str, Any]:
    """Re-score a resume over an existing candidate. id, image and placement are kept."""
    with translate_errors():
        document = build_document(req.mime_type, req.filename, data=req.data, text=req.text)
        candidate = await service.rescout(candidate_id, document)
    return {"candidate": candidate.to_dict()}


@app.put("/roster/{candidate_id}/image")
async def set_candidate_image(
    candidate_id: str,
    req: ImageRequest,
    service: SquadService = Depends(get_squad_service),
) -> dict[str, Any]:
    with translate_errors():
        candidate = service.set_image(candidate_id, req.image_url)
    return {"candidate": candidate.to_dict()}


# ---------- Run with: uvicorn talent_scout.api:app --reload ----------
if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=get_settings().log_level)
    uvicorn.run(app, host="127.0.0.1", port=8000)
