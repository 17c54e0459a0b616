"""
Bounded, fail-safe access to the text collaborator.

Collaborator calls are synchronous (they wrap blocking HTTP clients), so
they run in a thread pool owned by the run, sized to ``max_concurrency``,
behind an ``asyncio.Semaphore`` of the same size.  Every call has a
timeout.  A call that times out keeps its worker thread until the
upstream request returns, so the pool size is what bounds the number of
requests actually in flight.  The pool is shut down without waiting when
the run ends.  Failures and timeouts are logged and replaced by the local
placeholder result for that candidate; they never abort the run.
"""

from __future__ import annotations

import asyncio
import logging
from asyncio import Semaphore
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Optional, Protocol

from ..errors import CollaboratorUnavailable, RankingCancelled
from ..normalize.fields import ExperienceEvidence
from ..normalize.schema import JobSpec
from .heuristics import render_insights
from .llm_providers import PlaceholderProvider, TextCollaborator
from .llm_schema import MAX_INSIGHTS, ExperienceAssessment, Explanation, ExplanationRequest

logger = logging.getLogger(__name__)


class CancelSignal(Protocol):
    def is_set(self) -> bool: ...


def check_cancelled(cancel_event: Optional[CancelSignal]) -> None:
    """Raise ``RankingCancelled`` if the caller has set the cancellation signal."""
    if cancel_event is not None and cancel_event.is_set():
        raise RankingCancelled("ranking run was cancelled")


class AsyncCollaborator:
    """Async wrapper for a TextCollaborator with rate limiting and fallback."""

    def __init__(
        self,
        provider: TextCollaborator,
        max_concurrency: int,
        timeout: float,
        cancel_event: Optional[CancelSignal] = None,
    ) -> None:
        self.provider = provider
        self.fallback = PlaceholderProvider()
        self.timeout = timeout
        self.cancel_event = cancel_event
        self.failures = 0
        self._semaphore = Semaphore(max_concurrency)
        self._executor = ThreadPoolExecutor(
            max_workers=max_concurrency, thread_name_prefix="gigrank-collaborator"
        )

    @property
    def is_local(self) -> bool:
        return isinstance(self.provider, PlaceholderProvider)

    async def _run(self, func: Callable[..., Any], *args: Any) -> Any:
        async with self._semaphore:
            check_cancelled(self.cancel_event)
            # Run the sync call in the run's own pool to avoid blocking the loop
            loop = asyncio.get_running_loop()
            return await asyncio.wait_for(
                loop.run_in_executor(self._executor, func, *args),
                timeout=self.timeout,
            )

    def close(self) -> None:
        """Release the worker pool without waiting for abandoned calls."""
        self._executor.shutdown(wait=False, cancel_futures=True)

    def _record_failure(self, what: str, candidate_id: str, exc: BaseException) -> None:
        self.failures += 1
        if isinstance(exc, asyncio.TimeoutError):
            logger.warning(
                "%s for candidate %s timed out after %.1fs; using heuristic fallback",
                what,
                candidate_id,
                self.timeout,
            )
        elif isinstance(exc, CollaboratorUnavailable):
            logger.warning("%s for candidate %s unavailable: %s", what, candidate_id, exc)
        else:
            logger.error(
                "%s for candidate %s failed: %s", what, candidate_id, exc, exc_info=exc
            )

    async def evaluate_experience(
        self, evidence: ExperienceEvidence, job: JobSpec, candidate_id: str
    ) -> ExperienceAssessment:
        if self.is_local or not evidence.has_text:
            return self.fallback.evaluate_experience(evidence, job)
        try:
            return await self._run(self.provider.evaluate_experience, evidence, job)
        except RankingCancelled:
            raise
        except Exception as exc:  # noqa: BLE001
            self._record_failure("Experience evaluation", candidate_id, exc)
        return self.fallback.evaluate_experience(evidence, job)

    async def explain(self, request: ExplanationRequest) -> Explanation:
        if self.is_local:
            return self.fallback.explain(request)
        try:
            explanation = await self._run(self.provider.explain, request)
        except RankingCancelled:
            raise
        except Exception as exc:  # noqa: BLE001
            self._record_failure("Explanation", request.candidate_id, exc)
            return self.fallback.explain(request)
        if not explanation.actionable_insights:
            explanation.actionable_insights = render_insights(
                request.weaknesses, request.recommendation, MAX_INSIGHTS
            )
        return explanation
