"""
Static formation catalog.
Each formation is a fixed, ordered set of role slots with a board position.
Pure data: nothing here mutates, and lineups only ever read from it.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from talent_scout.roles import Role, role_label


class UnknownFormationError(ValueError):
    """Formation id is not in the catalog."""


@dataclass(frozen=True)
class PitchPosition:
    top: str
    left: str


@dataclass(frozen=True)
class FormationSlot:
    role: Role
    position: PitchPosition
    label: str | None = None  # optional override of the role label

    @property
    def display_label(self) -> str:
        return self.label or role_label(self.role)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.role.value,
            "label": self.display_label,
            "position": {"top": self.position.top, "left": self.position.left},
        }


@dataclass(frozen=True)
class Formation:
    id: str
    name: str
    description: str
    slots: tuple[FormationSlot, ...]

    @property
    def roles(self) -> tuple[Role, ...]:
        return tuple(s.role for s in self.slots)

    def has_role(self, role: Role) -> bool:
        return any(s.role == role for s in self.slots)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "slots": [s.to_dict() for s in self.slots],
        }


def _slot(role: Role, top: str, left: str) -> FormationSlot:
    return FormationSlot(role=role, position=PitchPosition(top=top, left=left))


# ---------- Catalog ----------

FORMATIONS: tuple[Formation, ...] = (
    Formation(
        id="cross-functional",
        name="Classic Agile (Cross-Functional)",
        description="Balanced team for end-to-end delivery.",
        slots=(
            _slot(Role.MANAGER, "12%", "50%"),
            _slot(Role.PO, "35%", "50%"),
            _slot(Role.FE1, "55%", "20%"),
            _slot(Role.FE2, "55%", "80%"),
            _slot(Role.DEVOPS, "55%", "50%"),
            _slot(Role.BE1, "80%", "35%"),
            _slot(Role.BE2, "80%", "65%"),
        ),
    ),
    Formation(
        id="microservices",
        name="Microservices Squad",
        description="Backend heavy team optimized for API and service scale.",
        slots=(
            _slot(Role.MANAGER, "12%", "50%"),
            _slot(Role.PO, "30%", "30%"),
            _slot(Role.DEVOPS, "30%", "70%"),
            _slot(Role.BE1, "55%", "35%"),
            _slot(Role.BE2, "55%", "65%"),
            _slot(Role.BE3, "80%", "20%"),
            _slot(Role.BE4, "80%", "80%"),
        ),
    ),
    Formation(
        id="frontend-exp",
        name="Frontend Experience",
        description="UX and Frontend focus for UI/UX intensive products.",
        slots=(
            _slot(Role.MANAGER, "12%", "50%"),
            _slot(Role.UX, "35%", "50%"),
            _slot(Role.FE1, "55%", "20%"),
            _slot(Role.FE2, "55%", "80%"),
            _slot(Role.FE3, "75%", "30%"),
            _slot(Role.FE4, "75%", "70%"),
            _slot(Role.BE1, "88%", "50%"),
        ),
    ),
    Formation(
        id="data-analytics",
        name="Data & Analytics",
        description="Specialized team for data pipelines and AI models.",
        slots=(
            _slot(Role.MANAGER, "12%", "50%"),
            _slot(Role.PO, "35%", "30%"),
            _slot(Role.DS, "35%", "70%"),
            _slot(Role.DATA1, "60%", "40%"),
            _slot(Role.DATA2, "60%", "60%"),
            _slot(Role.BE1, "80%", "20%"),
            _slot(Role.DEVOPS, "80%", "80%"),
        ),
    ),
    Formation(
        id="integration",
        name="Integration & Platform",
        description="Robust engineering with QA and Architecture.",
        slots=(
            _slot(Role.MANAGER, "12%", "50%"),
            _slot(Role.ARCH, "30%", "50%"),
            _slot(Role.BE1, "50%", "30%"),
            _slot(Role.BE2, "50%", "70%"),
            _slot(Role.QA, "70%", "50%"),
            _slot(Role.BE3, "85%", "30%"),
            _slot(Role.DEVOPS, "85%", "70%"),
        ),
    ),
)

_BY_ID: dict[str, Formation] = {f.id: f for f in FORMATIONS}

DEFAULT_FORMATION = FORMATIONS[0]


def get_formation(formation_id: str) -> Formation:
    try:
        return _BY_ID[formation_id]
    except KeyError:
        raise UnknownFormationError(f"Unknown formation: {formation_id!r}") from None


def list_formations() -> list[Formation]:
    return list(FORMATIONS)
