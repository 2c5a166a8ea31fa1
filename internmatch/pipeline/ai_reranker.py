"""Best-effort AI re-ranking of the rule-based slate.

One provider call per request, bounded by a timeout. The response must
contain a JSON array of per-item enhancements; anything unusable (timeout,
provider error, no array, schema mismatch, unknown ids) discards the whole
AI pass and the rule-based slate is returned unchanged.
"""

import asyncio
import functools
import json
import logging
from concurrent.futures import ThreadPoolExecutor

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from internmatch.core.config import AIConfig, RankingConfig
from internmatch.core.schemas import RankedRecommendation, RecommendationResult
from internmatch.llm.base import LLMProvider
from internmatch.pipeline.scorer import round_half_up
from internmatch.profile.schema import CandidateProfile

logger = logging.getLogger(__name__)

UNAVAILABLE_INSIGHT = "AI analysis unavailable for this recommendation."

_DESCRIPTION_PREVIEW_CHARS = 200

_SYSTEM_PROMPT = (
    "You are an AI career advisor analyzing internship recommendations for an "
    "Indian student.\n\n"
    "Your task:\n"
    "  1. Re-rank the internships based on deeper analysis of user fit\n"
    "  2. Provide personalized insights for each recommendation\n"
    "  3. Consider career growth potential, skill development and culture fit\n"
    "  4. Adjust match scores if needed (40-99 range)\n"
    "  5. Give specific, actionable reasons why each internship is recommended\n\n"
    "Be honest about both strengths and potential challenges of each opportunity.\n\n"
    "Return ONLY a JSON array, one object per internship, with this structure:\n"
    '[{"id": <internship id>, "adjustedMatchScore": <integer 40-99>, '
    '"aiInsight": "<1-2 sentences>", '
    '"personalizedReasons": ["<reason>", "..."], '
    '"careerGrowthPotential": "<short assessment>", '
    '"skillDevelopmentOpportunities": ["<skill>", "..."]}]'
)


class AIEnhancement(BaseModel):
    """One item of the collaborator's response, keyed by slate index."""

    model_config = ConfigDict(populate_by_name=True)

    id: int = Field(ge=0)
    adjusted_match_score: float = Field(alias="adjustedMatchScore", allow_inf_nan=False)
    ai_insight: str = Field(alias="aiInsight", min_length=1)
    personalized_reasons: list[str] = Field(default_factory=list, alias="personalizedReasons")
    career_growth_potential: str | None = Field(default=None, alias="careerGrowthPotential")
    skill_development_opportunities: list[str] = Field(
        default_factory=list, alias="skillDevelopmentOpportunities"
    )


_ENHANCEMENTS = TypeAdapter(list[AIEnhancement])


def _build_user_prompt(profile: CandidateProfile, slate: list[RankedRecommendation]) -> str:
    """Assemble the prompt from the profile summary and the slate."""
    user_context = {
        "skills": profile.skills,
        "education": {
            "level": profile.education_level or "Not specified",
            "field": profile.education_field or "Not specified",
            "institution": profile.institution or "Not specified",
        },
        "interestedSectors": profile.interested_sectors,
        "location": {
            "state": profile.state or "Not specified",
            "city": profile.city or "Not specified",
        },
        "skillTestScore": profile.skill_test_score or 0,
        "experience": profile.experience or "Fresher",
        "careerGoals": profile.career_goals or "Not specified",
    }

    summaries = []
    for index, rec in enumerate(slate):
        posting = rec.posting
        description = posting.description
        if len(description) > _DESCRIPTION_PREVIEW_CHARS:
            description = description[:_DESCRIPTION_PREVIEW_CHARS] + "..."
        summaries.append({
            "id": index,
            "title": posting.title,
            "company": posting.company,
            "location": posting.location.model_dump(),
            "duration": posting.duration,
            "stipend": posting.stipend,
            "requirements": posting.requirements.model_dump(),
            "description": description,
            "ruleBasedScore": rec.match_score,
            "ruleBasedReasons": rec.reasons,
        })

    return (
        "User Profile:\n"
        f"{json.dumps(user_context, indent=2, default=str)}\n\n"
        "Rule-based Recommendations (with scores):\n"
        f"{json.dumps(summaries, indent=2, default=str)}\n"
    )


def _extract_json_array(raw_text: str) -> list[object]:
    """Return the first well-formed JSON array embedded in the text.

    Raises ValueError if no array decodes.
    """
    decoder = json.JSONDecoder()
    start = raw_text.find("[")
    while start != -1:
        try:
            value, _ = decoder.raw_decode(raw_text, start)
        except json.JSONDecodeError:
            pass
        else:
            if isinstance(value, list):
                return value
        start = raw_text.find("[", start + 1)
    msg = "No valid JSON array found in AI response"
    raise ValueError(msg)


def _parse_enhancements(raw_text: str, slate_size: int) -> dict[int, AIEnhancement]:
    """Parse and validate the response into enhancements keyed by slate index.

    Raises ValueError on any schema problem so the caller discards the pass.
    """
    data = _extract_json_array(raw_text)
    try:
        items = _ENHANCEMENTS.validate_python(data)
    except ValidationError as e:
        msg = f"AI response failed validation: {e.error_count()} error(s)"
        raise ValueError(msg) from e

    if not items:
        msg = "AI response contains no items"
        raise ValueError(msg)

    by_id: dict[int, AIEnhancement] = {}
    for item in items:
        if item.id >= slate_size:
            msg = f"AI response references unknown item id {item.id}"
            raise ValueError(msg)
        if item.id in by_id:
            msg = f"AI response repeats item id {item.id}"
            raise ValueError(msg)
        by_id[item.id] = item
    return by_id


def _merge(
    slate: list[RankedRecommendation],
    enhancements: dict[int, AIEnhancement],
    ranking: RankingConfig,
    ai: AIConfig,
) -> list[RankedRecommendation]:
    """Apply enhancements and re-sort by the (possibly adjusted) match score."""
    merged: list[RankedRecommendation] = []
    for index, rec in enumerate(slate):
        enhancement = enhancements.get(index)
        if enhancement is None:
            merged.append(rec.model_copy(update={"ai_insight": UNAVAILABLE_INSIGHT}))
            continue

        score = round_half_up(enhancement.adjusted_match_score)
        score = max(ranking.min_match_score, min(ranking.max_match_score, score))
        reasons = enhancement.personalized_reasons[: ai.max_ai_reasons] or rec.reasons
        merged.append(rec.model_copy(update={
            "match_score": score,
            "ai_insight": enhancement.ai_insight,
            "reasons": reasons,
            "career_growth_potential": enhancement.career_growth_potential,
            "skill_development_opportunities": enhancement.skill_development_opportunities,
        }))

    return sorted(merged, key=lambda r: r.match_score, reverse=True)


async def _complete_with_timeout(provider: LLMProvider, prompt: str, ai: AIConfig) -> str:
    """Run the blocking provider call on its own worker thread, bounded by the timeout.

    The SDK client gets the same timeout. The executor is never joined, so a
    call that outlives the timeout does not block the event loop shutdown.
    """
    executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="ai-rerank")
    call = functools.partial(
        provider.complete,
        prompt,
        ai.model,
        system=_SYSTEM_PROMPT,
        timeout=ai.timeout_seconds,
    )
    try:
        loop = asyncio.get_running_loop()
        return await asyncio.wait_for(
            loop.run_in_executor(executor, call),
            timeout=ai.timeout_seconds,
        )
    finally:
        executor.shutdown(wait=False, cancel_futures=True)


async def rerank_slate(
    profile: CandidateProfile,
    slate: list[RankedRecommendation],
    ranking: RankingConfig,
    ai: AIConfig,
    provider: LLMProvider,
) -> RecommendationResult:
    """Try one AI re-rank of the slate; fall back to the slate on any failure.

    Never raises. ``source`` is "ai-enhanced" only when the AI output was merged.
    """
    fallback = RecommendationResult(recommendations=list(slate), source="rule-based")
    if not slate:
        return fallback

    logger.debug(
        "Attempting AI re-rank of %d items for %s via %s",
        len(slate),
        profile.candidate_id,
        provider.provider_id,
    )
    try:
        prompt = _build_user_prompt(profile, slate)
        raw = await _complete_with_timeout(provider, prompt, ai)
        enhancements = _parse_enhancements(raw, len(slate))
        merged = _merge(slate, enhancements, ranking, ai)
    except asyncio.TimeoutError:
        logger.warning(
            "AI re-rank timed out after %.1fs for %s, using rule-based slate",
            ai.timeout_seconds,
            profile.candidate_id,
        )
        return fallback
    except Exception:
        logger.warning(
            "AI re-rank failed for %s, using rule-based slate",
            profile.candidate_id,
            exc_info=True,
        )
        return fallback

    logger.info(
        "AI re-rank merged for %s (%d of %d items addressed)",
        profile.candidate_id,
        len(enhancements),
        len(slate),
    )
    return RecommendationResult(recommendations=merged, source="ai-enhanced")
