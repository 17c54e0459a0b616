"""
Ranking orchestrator.

The public entry point of the engine.  :func:`rank` validates its
inputs, normalises and scores every candidate concurrently, waits for
all scores, sorts the cohort, classifies and compares the candidates and
finally asks the text collaborator for explanations.  The function is
stateless: configuration and collaborator are passed per call.

Ranking is all-or-nothing.  If the cancellation signal is set, or the
surrounding task is cancelled, in-flight work is discarded and no
partial :class:`RankingResult` is returned.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Awaitable, Dict, List, Optional, Sequence, Tuple, TypeVar

from ..config import RankingConfig
from ..errors import InvalidInput, InvalidJobSpec
from ..normalize.fields import (
    NormalizedCandidate,
    coerce_number,
    normalize_candidate,
    normalize_skill_set,
)
from ..normalize.schema import (
    CandidateInput,
    DimensionScore,
    JobSpec,
    RankedCandidate,
    RankingResult,
)
from .aggregate import aggregate_scores
from .classify import classify
from .compare import category_leaders, compare_cohort
from .concurrent import AsyncCollaborator, CancelSignal, check_cancelled
from .llm_providers import PlaceholderProvider, TextCollaborator
from .llm_schema import ExplanationRequest
from .scorers import score_dimensions

logger = logging.getLogger(__name__)

REJECTED_STATUS = "REJECTED"

T = TypeVar("T")


def _validate_job_spec(job_spec: JobSpec) -> None:
    if not isinstance(job_spec, JobSpec):
        raise InvalidJobSpec("job_spec must be a JobSpec")
    budget = job_spec.budget
    low = coerce_number(budget.min)
    high = coerce_number(budget.max)
    if budget.min is not None and low is None:
        logger.warning("Ignoring malformed budget minimum %r", budget.min)
    if budget.max is not None and high is None:
        logger.warning("Ignoring malformed budget maximum %r", budget.max)
    if low is not None and high is not None and low > high:
        raise InvalidJobSpec(f"budget.min ({low:g}) is greater than budget.max ({high:g})")


def _validate_candidates(candidates: Sequence[CandidateInput]) -> None:
    if not candidates:
        raise InvalidInput("candidates must be a non-empty sequence")
    seen: set = set()
    duplicates: List[str] = []
    for candidate in candidates:
        candidate_id = getattr(candidate, "id", None)
        if not isinstance(candidate_id, str) or not candidate_id.strip():
            raise InvalidInput(f"candidate has a missing or invalid id: {candidate_id!r}")
        if not isinstance(getattr(candidate, "submitted_at", None), datetime):
            raise InvalidInput(f"candidate {candidate_id} has no valid submitted_at timestamp")
        if candidate_id in seen:
            duplicates.append(candidate_id)
        seen.add(candidate_id)
    if duplicates:
        raise InvalidInput(f"duplicate candidate ids: {', '.join(sorted(set(duplicates)))}")


async def _gather_all(coros: Sequence[Awaitable[T]]) -> List[T]:
    """Gather coroutines; on the first failure cancel the rest and re-raise."""
    tasks = [asyncio.ensure_future(c) for c in coros]
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


async def _score_candidate(
    norm: NormalizedCandidate,
    job_spec: JobSpec,
    config: RankingConfig,
    collaborator: AsyncCollaborator,
) -> Tuple[CandidateInput, Dict[str, DimensionScore]]:
    check_cancelled(collaborator.cancel_event)
    assessment = await collaborator.evaluate_experience(norm.experience, job_spec, norm.candidate.id)
    return norm.candidate, score_dimensions(norm, assessment, config)


async def rank_async(
    job_spec: JobSpec,
    candidates: Sequence[CandidateInput],
    config: Optional[RankingConfig] = None,
    collaborator: Optional[TextCollaborator] = None,
    cancel_event: Optional[CancelSignal] = None,
) -> RankingResult:
    """Rank ``candidates`` against ``job_spec``.

    Args:
        job_spec: Requirements and budget of the job.
        candidates: Non-empty sequence of candidate responses with unique ids.
        config: Weights, thresholds and limits; defaults to ``RankingConfig()``.
        collaborator: Optional external text collaborator.  ``None`` uses
            the local heuristics and templates.
        cancel_event: Any object with ``is_set()`` (``threading.Event``,
            ``asyncio.Event``).  Checked between stages and before each
            collaborator call.

    Returns:
        A complete :class:`RankingResult`.

    Raises:
        InvalidInput: Empty candidate set, duplicate or missing ids.
        InvalidJobSpec: ``budget.min > budget.max``.
        RankingCancelled: The cancellation signal was set.
    """
    config = config or RankingConfig()
    candidates = list(candidates) if candidates is not None else []
    _validate_job_spec(job_spec)
    _validate_candidates(candidates)
    check_cancelled(cancel_event)

    active = [
        c for c in candidates
        if str(c.hr_selection_status or "").upper() != REJECTED_STATUS
    ]
    if len(active) < len(candidates):
        logger.info("Excluded %d rejected candidates", len(candidates) - len(active))
    if not active:
        return RankingResult(
            candidates=[],
            ranked_at=datetime.now(timezone.utc),
            job_id=job_spec.job_id,
            total_count=0,
        )

    async_collab = AsyncCollaborator(
        collaborator or PlaceholderProvider(),
        max_concurrency=config.max_concurrency,
        timeout=config.collaborator_timeout,
        cancel_event=cancel_event,
    )
    logger.info(
        "Ranking %d candidates for '%s' using %s",
        len(active),
        job_spec.title,
        async_collab.provider.__class__.__name__,
    )

    try:
        normalized = [
            normalize_candidate(c, job_spec, config.reference_delivery_days) for c in active
        ]
        scored = await _gather_all(
            [_score_candidate(n, job_spec, config, async_collab) for n in normalized]
        )
        # All dimension scores are known; ordering needs the whole cohort.
        check_cancelled(cancel_event)
        ordered = aggregate_scores(scored, config.weights_for(job_spec))

        job_has_skills = bool(
            normalize_skill_set(job_spec.required_skills) or normalize_skill_set(job_spec.nice_to_have_skills)
        )
        cohort_facts = compare_cohort(ordered, config, job_has_skills)
        leaders = category_leaders(ordered)
        composites = [entry.composite for entry in ordered]
        average = sum(composites) / len(composites)
        top = max(composites)

        recommendations = {
            entry.candidate.id: classify(entry.composite_rounded, entry.dimension_scores, config)
            for entry in ordered
        }
        requests = [
            ExplanationRequest(
                candidate_id=entry.candidate.id,
                job=job_spec,
                strengths=cohort_facts[entry.candidate.id].strengths,
                weaknesses=cohort_facts[entry.candidate.id].weaknesses,
                composite_score=entry.composite_rounded,
                ranking_position=entry.ranking_position,
                total_candidates=len(ordered),
                recommendation=recommendations[entry.candidate.id].value,
                average_composite=average,
                top_composite=top,
                candidate_name=entry.candidate.candidate_name,
            )
            for entry in ordered
        ]
        explanations = await _gather_all([async_collab.explain(r) for r in requests])
        check_cancelled(cancel_event)

        ranked: List[RankedCandidate] = []
        for entry, explanation in zip(ordered, explanations):
            cid = entry.candidate.id
            ranked.append(
                RankedCandidate(
                    candidate_id=cid,
                    dimension_scores=entry.dimension_scores,
                    composite_score=entry.composite_rounded,
                    ranking_position=entry.ranking_position,
                    recommendation=recommendations[cid],
                    strengths=explanation.strengths,
                    weaknesses=explanation.weaknesses,
                    actionable_insights=explanation.actionable_insights,
                    facts=cohort_facts[cid].facts,
                    analysis=explanation.analysis,
                    explanation_source=explanation.source,
                    raw_composite=entry.composite,
                    candidate_name=entry.candidate.candidate_name,
                )
            )
        if async_collab.failures:
            logger.warning("%d collaborator calls fell back to local heuristics", async_collab.failures)
        logger.info("Ranked %d candidates; top candidate %s", len(ranked), ranked[0].candidate_id)
        return RankingResult(
            candidates=ranked,
            ranked_at=datetime.now(timezone.utc),
            job_id=job_spec.job_id,
            total_count=len(ranked),
            category_leaders=leaders,
        )
    finally:
        async_collab.close()


def rank(
    job_spec: JobSpec,
    candidates: Sequence[CandidateInput],
    config: Optional[RankingConfig] = None,
    collaborator: Optional[TextCollaborator] = None,
    cancel_event: Optional[CancelSignal] = None,
) -> RankingResult:
    """Synchronous wrapper around :func:`rank_async`.

    Must not be called from inside a running event loop; async callers
    should await :func:`rank_async` directly.
    """
    return asyncio.run(
        rank_async(
            job_spec,
            candidates,
            config=config,
            collaborator=collaborator,
            cancel_event=cancel_event,
        )
    )
