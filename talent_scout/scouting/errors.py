"""
Failures of the external scouting model. Raised only from talent_scout.scouting;
callers catch ScoutingError at the service/API boundary and leave state untouched.
"""
from __future__ import annotations


class ScoutingError(Exception):
    """Base class: the scouting call did not produce a usable result."""


class ScoutingUnavailableError(ScoutingError):
    """No API key configured."""


class ScoutingRequestError(ScoutingError):
    """The model API call itself failed (network, auth, rate limit, timeout)."""


class ScoutingResponseError(ScoutingError):
    """The model answered, but the answer was empty, not JSON, or the wrong shape."""


class EmptyLineupError(ValueError):
    """Synergy evaluation requested for a lineup with no occupied slots."""
