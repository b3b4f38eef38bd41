"""
Service layer: the squad controller and the reconciliation adapter.
squad_service owns session state; reconciliation applies external proposals to it.
"""
from .reconciliation import ReconciliationReport, reconcile
from .squad_service import (
    ActionPendingError,
    PendingAction,
    SquadService,
)

__all__ = [
    "ReconciliationReport",
    "reconcile",
    "ActionPendingError",
    "PendingAction",
    "SquadService",
]
