"""
Exceptions raised by the ranking engine.

Only ``InvalidInput`` and ``InvalidJobSpec`` reach callers of
:func:`gigrank.rank.orchestrator.rank` under normal operation.
``CollaboratorUnavailable`` is raised by text providers and is always
caught inside the engine, where it degrades the affected candidate to the
heuristic/template path.  ``RankingCancelled`` is raised when the caller
sets the cancellation signal.
"""

from __future__ import annotations


class RankingError(Exception):
    """Base class for ranking errors."""


class InvalidInput(RankingError, ValueError):
    """The candidate set is empty or malformed (e.g. duplicate ids)."""


class InvalidJobSpec(RankingError, ValueError):
    """The job specification is impossible to rank against."""


class RankingCancelled(RankingError):
    """The run was cancelled; no partial result is produced."""


class CollaboratorUnavailable(RankingError):
    """An external text collaborator failed, timed out or is not configured."""
