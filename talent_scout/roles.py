"""
Role vocabulary for the formation board.
Every slot on every formation is one of these roles; the set is closed so an
unknown role id fails at parse time instead of silently creating a new slot.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

# ---------- Role enum ----------


class Role(str, Enum):
    MANAGER = "manager"
    PO = "po"
    DEVOPS = "devops"
    FE1 = "fe1"
    FE2 = "fe2"
    FE3 = "fe3"
    FE4 = "fe4"
    BE1 = "be1"
    BE2 = "be2"
    BE3 = "be3"
    BE4 = "be4"
    UX = "ux"
    QA = "qa"
    ARCH = "arch"
    DATA1 = "data1"
    DATA2 = "data2"
    DS = "ds"


class UnknownRoleError(ValueError):
    """Role id is not part of the role vocabulary."""


# ---------- Role definitions (shown to users) ----------


@dataclass(frozen=True)
class RoleDefinition:
    label: str
    description: str


_FRONTEND = RoleDefinition(label="Frontend Dev", description="Builds and ships the user-facing client.")
_BACKEND = RoleDefinition(label="Backend Dev", description="Owns services, APIs and data access.")
_DATA_ENGINEER = RoleDefinition(label="Data Engineer", description="Builds pipelines and keeps data flowing.")

ROLE_DEFINITIONS: dict[Role, RoleDefinition] = {
    Role.MANAGER: RoleDefinition(label="Eng Manager", description="Runs the squad; people and delivery."),
    Role.PO: RoleDefinition(label="Product Owner", description="Owns the backlog and product direction."),
    Role.DEVOPS: RoleDefinition(label="DevOps / SRE", description="Infrastructure, deployment and reliability."),
    Role.FE1: _FRONTEND,
    Role.FE2: _FRONTEND,
    Role.FE3: _FRONTEND,
    Role.FE4: _FRONTEND,
    Role.BE1: _BACKEND,
    Role.BE2: _BACKEND,
    Role.BE3: _BACKEND,
    Role.BE4: _BACKEND,
    Role.UX: RoleDefinition(label="UX Designer", description="Research, interaction and visual design."),
    Role.QA: RoleDefinition(label="QA Engineer", description="Test strategy and release quality."),
    Role.ARCH: RoleDefinition(label="Solutions Arch", description="System design across services."),
    Role.DATA1: _DATA_ENGINEER,
    Role.DATA2: _DATA_ENGINEER,
    Role.DS: RoleDefinition(label="Data Scientist", description="Models, experiments and analysis."),
}


def role_label(role: Role) -> str:
    return ROLE_DEFINITIONS[role].label


def list_all_roles() -> list[tuple[Role, RoleDefinition]]:
    """For API/frontend: list all roles with definitions."""
    return [(r, ROLE_DEFINITIONS[r]) for r in Role]


def parse_role(value: str | Role) -> Role:
    """Parse a role id to the enum. Raises UnknownRoleError for anything outside the vocabulary."""
    if isinstance(value, Role):
        return value
    try:
        return Role(str(value).strip().lower())
    except ValueError:
        raise UnknownRoleError(f"Unknown role: {value!r}") from None


def try_parse_role(value: str | None) -> Role | None:
    """Parse role string to enum; None if invalid or empty."""
    if not value:
        return None
    try:
        return parse_role(value)
    except UnknownRoleError:
        return None
