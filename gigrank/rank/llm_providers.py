"""
Text collaborator abstractions.

This module defines a common interface for the optional external text
capability used by GigRank: judging the quality of a candidate's
experience text and turning structured comparison facts into short
prose.  Concrete implementations are provided for OpenAI and Gemini
(Google Generative AI) APIs.  A placeholder implementation backed by the
deterministic heuristics is used when no API keys are configured or the
optional dependencies are not installed.

Remote providers raise :class:`~gigrank.errors.CollaboratorUnavailable`
on any failure (network, quota, unparseable reply).  The engine catches
it and falls back to the placeholder for that candidate only.
"""

from __future__ import annotations

import json
import logging
import os
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from ..errors import CollaboratorUnavailable
from ..normalize.fields import ExperienceEvidence
from ..normalize.schema import JobSpec
from .heuristics import experience_heuristic, render_analysis, render_facts, render_insights
from .llm_schema import (
    MAX_EXPLANATION_ITEMS,
    MAX_INSIGHTS,
    SOURCE_EXTERNAL,
    SOURCE_HEURISTIC,
    ExperienceAssessment,
    Explanation,
    ExplanationRequest,
)

logger = logging.getLogger(__name__)

EXTERNAL_CONFIDENCE = 0.8
_MAX_TEXT_CHARS = 4000


class TextCollaborator(ABC):
    """Abstract base class for text collaborators."""

    @abstractmethod
    def evaluate_experience(self, evidence: ExperienceEvidence, job: JobSpec) -> ExperienceAssessment:
        """Score the candidate's experience text against the job (0..100)."""
        raise NotImplementedError

    @abstractmethod
    def explain(self, request: ExplanationRequest) -> Explanation:
        """Turn comparison facts into strengths, weaknesses and a short analysis."""
        raise NotImplementedError


class PlaceholderProvider(TextCollaborator):
    """Local provider that never calls an external API."""

    def evaluate_experience(self, evidence: ExperienceEvidence, job: JobSpec) -> ExperienceAssessment:
        score, confidence = experience_heuristic(evidence, job)
        return ExperienceAssessment(score=score, confidence=confidence, source=SOURCE_HEURISTIC)

    def explain(self, request: ExplanationRequest) -> Explanation:
        return Explanation(
            strengths=render_facts(request.strengths)[:MAX_EXPLANATION_ITEMS],
            weaknesses=render_facts(request.weaknesses)[:MAX_EXPLANATION_ITEMS],
            analysis=render_analysis(
                request.ranking_position,
                request.total_candidates,
                request.composite_score,
                request.average_composite,
                request.top_composite,
            ),
            actionable_insights=render_insights(request.weaknesses, request.recommendation, MAX_INSIGHTS),
            source=SOURCE_HEURISTIC,
        )


def _experience_prompt(evidence: ExperienceEvidence, job: JobSpec) -> str:
    level = job.experience_level.value if job.experience_level else "not specified"
    return (
        "You are a recruiting assistant. Rate how well the candidate's experience "
        "fits the job on a scale from 0 to 100. Return a JSON object with a single "
        "key 'score'.\n"
        f"Job Title: {job.title}\n"
        f"Job Summary: {job.summary}\n"
        f"Required Skills: {', '.join(sorted(job.required_skills))}\n"
        f"Required Level: {level}\n"
        f"Candidate Experience: {evidence.combined_text[:_MAX_TEXT_CHARS]}"
    )


def _explanation_prompt(request: ExplanationRequest) -> str:
    facts = "\n".join(
        [f"- strength: {f.dimension} {f.relation} ({f.magnitude})" for f in request.strengths]
        + [f"- weakness: {f.dimension} {f.relation} ({f.magnitude})" for f in request.weaknesses]
    ) or "- no notable differences"
    return (
        "You are a recruiting assistant. Using only the facts below, describe the "
        "candidate's strengths and weaknesses relative to the other applicants. "
        "Return a JSON object with keys 'strengths' (list of at most 3 short strings), "
        "'weaknesses' (list of at most 3 short strings), 'analysis' (2-3 sentences) "
        "and 'actionable_insights' (1-2 short next steps for the recruiter).\n"
        f"Job Title: {request.job.title}\n"
        f"Position: {request.ranking_position} of {request.total_candidates}\n"
        f"Composite Score: {request.composite_score}/100 "
        f"(cohort average {request.average_composite:.0f}, top {request.top_composite:.0f})\n"
        f"Recommendation: {request.recommendation}\n"
        f"Facts:\n{facts}"
    )


def _parse_json(content: str) -> Dict[str, object]:
    text = content.strip()
    if text.startswith("```"):
        text = text.strip("`")
        if text.lower().startswith("json"):
            text = text[4:]
    try:
        data = json.loads(text)
    except ValueError as exc:
        raise CollaboratorUnavailable(f"unparseable collaborator reply: {exc}") from exc
    if not isinstance(data, dict):
        raise CollaboratorUnavailable("collaborator reply is not a JSON object")
    return data


def _string_list(value: object, limit: int = MAX_EXPLANATION_ITEMS) -> List[str]:
    if not isinstance(value, list):
        return []
    return [str(v) for v in value if str(v).strip()][:limit]


class _ChatProvider(TextCollaborator):
    """Shared prompt/response handling for chat-style providers."""

    @abstractmethod
    def _complete(self, prompt: str) -> str:
        raise NotImplementedError

    def _call(self, prompt: str) -> Dict[str, object]:
        logger.debug("Sending prompt to %s: %s", self.__class__.__name__, prompt[:200])
        try:
            content = self._complete(prompt)
        except CollaboratorUnavailable:
            raise
        except Exception as exc:  # noqa: BLE001
            raise CollaboratorUnavailable(f"{self.__class__.__name__} call failed: {exc}") from exc
        return _parse_json(content)

    def evaluate_experience(self, evidence: ExperienceEvidence, job: JobSpec) -> ExperienceAssessment:
        if not evidence.has_text:
            return ExperienceAssessment(score=50.0, confidence=0.0, source=SOURCE_HEURISTIC)
        data = self._call(_experience_prompt(evidence, job))
        try:
            score = float(data.get("score"))  # type: ignore[arg-type]
        except (TypeError, ValueError) as exc:
            raise CollaboratorUnavailable("collaborator reply has no numeric 'score'") from exc
        return ExperienceAssessment(
            score=max(0.0, min(100.0, score)),
            confidence=EXTERNAL_CONFIDENCE,
            source=SOURCE_EXTERNAL,
        )

    def explain(self, request: ExplanationRequest) -> Explanation:
        data = self._call(_explanation_prompt(request))
        return Explanation(
            strengths=_string_list(data.get("strengths")),
            weaknesses=_string_list(data.get("weaknesses")),
            analysis=str(data.get("analysis") or ""),
            actionable_insights=(
                _string_list(data.get("actionable_insights"), MAX_INSIGHTS)
                or render_insights(request.weaknesses, request.recommendation, MAX_INSIGHTS)
            ),
            source=SOURCE_EXTERNAL,
        )


class OpenAIProvider(_ChatProvider):
    """Provider that uses the OpenAI chat completions API."""

    def __init__(self, api_key: str | None = None, model: str | None = None) -> None:
        try:
            import openai  # type: ignore
        except ImportError as exc:
            raise RuntimeError(
                "openai package is required for OpenAIProvider. Install it via pip."
            ) from exc
        self.api_key = api_key or os.getenv("OPENAI_API_KEY")
        self.model = model or os.getenv("OPENAI_MODEL") or "gpt-4o-mini"
        if not self.api_key:
            raise ValueError("OPENAI_API_KEY not provided")
        self.client = openai.OpenAI(api_key=self.api_key)

    def _complete(self, prompt: str) -> str:
        response = self.client.chat.completions.create(
            model=self.model,
            messages=[{"role": "user", "content": prompt}],
            temperature=0.0,
            response_format={"type": "json_object"},
        )
        return response.choices[0].message.content or ""


class GeminiProvider(_ChatProvider):
    """Provider that uses Google Generative AI (Gemini) via google-generativeai."""

    def __init__(self, api_key: str | None = None, model: str = "gemini-1.5-pro") -> None:
        try:
            import google.generativeai as genai  # type: ignore
        except ImportError as exc:
            raise RuntimeError(
                "google-generativeai package is required for GeminiProvider. Install it via pip."
            ) from exc
        self.genai = genai
        # API key resolution: explicit argument > env variables
        self.api_key = api_key or os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY")
        env_model = os.getenv("GEMINI_MODEL") or os.getenv("GOOGLE_MODEL")
        self.model_name = env_model or model
        if not self.api_key:
            raise ValueError("GEMINI_API_KEY/GOOGLE_API_KEY not provided")
        self.genai.configure(api_key=self.api_key)
        try:
            self.model = self.genai.GenerativeModel(self.model_name)
        except Exception as exc:
            raise RuntimeError(f"Failed to load Gemini model {self.model_name}: {exc}") from exc

    def _complete(self, prompt: str) -> str:
        response = self.model.generate_content(
            prompt,
            generation_config={"temperature": 0.0, "response_mime_type": "application/json"},
        )
        return response.text


_PROVIDER_KEYS = {
    "openai": ("OPENAI_API_KEY",),
    "gemini": ("GEMINI_API_KEY", "GOOGLE_API_KEY"),
}


def _api_key(name: str) -> Optional[str]:
    for var in _PROVIDER_KEYS[name]:
        value = os.getenv(var)
        if value:
            return value
    return None


def _build_provider(name: str) -> TextCollaborator:
    if name == "openai":
        return OpenAIProvider(_api_key("openai"))
    return GeminiProvider(_api_key("gemini"))


def get_default_provider() -> TextCollaborator:
    """Pick the text collaborator used for experience scoring and explanations.

    ``LLM_PROVIDER`` forces a choice (``openai``, ``gemini`` or
    ``placeholder``).  Otherwise the first provider with an API key in
    the environment is used, OpenAI before Gemini.  Ranking never depends
    on a remote model being present: when no provider can be built the
    local heuristics and templates are returned, and every remote call
    still falls back to them per candidate.
    """
    preferred = (os.getenv("LLM_PROVIDER") or "").strip().lower()
    if preferred == "placeholder":
        logger.info("Candidate explanations will use local templates (LLM_PROVIDER=placeholder)")
        return PlaceholderProvider()
    if preferred and preferred not in _PROVIDER_KEYS:
        logger.warning("Unknown LLM_PROVIDER '%s'; choosing a provider from the API keys", preferred)
        preferred = ""
    candidates = [preferred] if preferred else []
    candidates += [name for name in _PROVIDER_KEYS if name != preferred and _api_key(name)]
    for name in candidates:
        try:
            provider = _build_provider(name)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Cannot use %s for candidate scoring: %s", name, exc)
            continue
        logger.info("Scoring candidate experience with %s", provider.__class__.__name__)
        return provider
    logger.info("No usable language model configured; ranking with local heuristics")
    return PlaceholderProvider()
