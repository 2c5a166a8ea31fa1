"""Orchestrator: wires profile store, catalog, ranker and AI re-rank.

Data flow for one recommendation request:
  1. Profile read (NotFound propagates, other failures → DependencyError)
  2. Prerequisite gate (profile + skill test completed)
  3. Catalog read (failures → DependencyError)
  4. Rule-based slate
  5. Optional AI re-rank (best effort, never raises)
"""

import json
import logging
from datetime import datetime

from internmatch.core.config import Settings
from internmatch.core.errors import (
    DependencyError,
    InternshipNotFoundError,
    RecommendationError,
)
from internmatch.core.schemas import InternshipDetail, InternshipPosting, RecommendationResult
from internmatch.llm.base import LLMProvider
from internmatch.pipeline.ai_reranker import rerank_slate
from internmatch.pipeline.ranker import build_slate, check_prerequisites, describe_posting
from internmatch.profile.schema import CandidateProfile
from internmatch.sources.base import CatalogSource, ProfileStore

logger = logging.getLogger(__name__)


async def get_recommendations(
    candidate_id: str,
    profiles: ProfileStore,
    catalog: CatalogSource,
    settings: Settings,
    provider: LLMProvider | None = None,
    now: datetime | None = None,
) -> RecommendationResult:
    """Produce the final recommendation slate for one candidate.

    The AI pass runs only when enabled in settings and the provider has a
    usable credential.

    Raises:
        ProfileNotFoundError: Unknown candidate.
        ProfileIncompleteError: Profile or skill test not completed.
        DependencyError: Profile store or catalog read failed.
    """
    profile = _load_profile(candidate_id, profiles)
    check_prerequisites(profile)
    postings = _load_catalog(catalog)

    slate = build_slate(profile, postings, settings.ranking, now)
    logger.info("Rule-based slate for %s: %d items", candidate_id, len(slate))

    if not settings.ai.enabled or provider is None:
        return RecommendationResult(recommendations=slate, source="rule-based")
    if not provider.is_configured():
        logger.debug("AI provider '%s' not configured, skipping re-rank", provider.provider_id)
        return RecommendationResult(recommendations=slate, source="rule-based")

    return await rerank_slate(profile, slate, settings.ranking, settings.ai, provider)


def get_internship_detail(
    candidate_id: str,
    internship_id: str,
    profiles: ProfileStore,
    catalog: CatalogSource,
    settings: Settings,
    now: datetime | None = None,
) -> InternshipDetail:
    """Explain how one posting scores for the candidate.

    Raises:
        InternshipNotFoundError: No posting with that id.
        ProfileNotFoundError: Unknown candidate.
        DependencyError: Profile store or catalog read failed.
    """
    postings = _load_catalog(catalog)
    posting = next((p for p in postings if p.id == internship_id), None)
    if posting is None:
        msg = f"Internship not found: {internship_id}"
        raise InternshipNotFoundError(msg)

    profile = _load_profile(candidate_id, profiles)
    return describe_posting(profile, posting, settings.ranking, now)


def export_results_json(result: RecommendationResult) -> str:
    """Export a recommendation result as a JSON string."""
    data = {
        "source": result.source,
        "recommendations": [
            {
                **rec.posting.model_dump(mode="json"),
                "matchScore": rec.match_score,
                "matchReasons": rec.reasons,
                "aiInsight": rec.ai_insight,
                "careerGrowthPotential": rec.career_growth_potential,
                "skillDevelopmentOpportunities": rec.skill_development_opportunities,
            }
            for rec in result.recommendations
        ],
    }
    return json.dumps(data, indent=2)


def _load_profile(candidate_id: str, profiles: ProfileStore) -> CandidateProfile:
    try:
        return profiles.get_profile(candidate_id)
    except RecommendationError:
        raise
    except Exception as e:
        msg = f"Profile store read failed for {candidate_id}: {e}"
        raise DependencyError(msg) from e


def _load_catalog(catalog: CatalogSource) -> list[InternshipPosting]:
    try:
        return catalog.list_postings()
    except RecommendationError:
        raise
    except Exception as e:
        msg = f"Catalog read failed: {e}"
        raise DependencyError(msg) from e
