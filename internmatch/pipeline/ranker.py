"""Ranking pipeline: score the catalog, pick the slate, decorate for display.

Selection:
  1. Score every posting and sort by total (stable on ties)
  2. Take the top N (default 5)
  3. Keep those at or above the relevance floor (default 30)
  4. If none survive, fall back to the unfiltered top N
"""

import logging
from datetime import datetime

from internmatch.core.config import RankingConfig
from internmatch.core.errors import ProfileIncompleteError
from internmatch.core.schemas import (
    InternshipDetail,
    InternshipPosting,
    RankedRecommendation,
    ScoreBreakdown,
)
from internmatch.pipeline.scorer import score_catalog, score_posting
from internmatch.profile.schema import CandidateProfile

logger = logging.getLogger(__name__)

RULE_BASED_INSIGHT = (
    "Rule-based match using your skills, sectors, education, location, "
    "test score, and recency."
)


def check_prerequisites(profile: CandidateProfile) -> None:
    """Raise ProfileIncompleteError unless profile and skill test are both done."""
    if not profile.profile_completed or not profile.skill_test_completed:
        msg = "Please complete your profile and skill test first"
        raise ProfileIncompleteError(msg)


def clamp_match_score(total: float, config: RankingConfig) -> int:
    """Clamp a raw total into the presentation range (lossy at both ends)."""
    return int(max(config.min_match_score, min(config.max_match_score, total)))


def build_slate(
    profile: CandidateProfile,
    postings: list[InternshipPosting],
    config: RankingConfig,
    now: datetime | None = None,
) -> list[RankedRecommendation]:
    """Build the rule-based slate for one candidate.

    Returns at most ``config.top_n`` recommendations; empty only when the
    catalog is empty.
    """
    scored = score_catalog(profile, postings, now)
    top = scored[: config.top_n]
    relevant = [pair for pair in top if pair[1].total >= config.relevance_floor]
    if not relevant and top:
        logger.info(
            "No posting reached the relevance floor (%d) for %s, using unfiltered top %d",
            config.relevance_floor,
            profile.candidate_id,
            len(top),
        )
        relevant = top

    return [
        RankedRecommendation(
            posting=posting,
            match_score=clamp_match_score(breakdown.total, config),
            reasons=breakdown.reasons[: config.max_reasons],
            ai_insight=RULE_BASED_INSIGHT,
        )
        for posting, breakdown in relevant
    ]


def describe_posting(
    profile: CandidateProfile,
    posting: InternshipPosting,
    config: RankingConfig,
    now: datetime | None = None,
) -> InternshipDetail:
    """Detail view for one posting, scored with the same engine as the slate."""
    breakdown = score_posting(profile, posting, now)
    match_score = clamp_match_score(breakdown.total, config)
    return InternshipDetail(
        posting=posting,
        match_score=match_score,
        reasons=breakdown.reasons[: config.detail_max_reasons],
        ai_insight=_detail_insight(posting, breakdown, match_score),
        score_breakdown=breakdown,
    )


def _growth_label(match_score: int) -> str:
    if match_score >= 80:
        return "excellent"
    if match_score >= 60:
        return "good"
    return "moderate"


def _detail_insight(
    posting: InternshipPosting,
    breakdown: ScoreBreakdown,
    match_score: int,
) -> str:
    kind = " ".join(p for p in (posting.duration, posting.type.lower(), "internship") if p)
    company = posting.company or "this company"
    return (
        f"Based on your profile analysis (Skills: {breakdown.skills}/50, "
        f"Sectors: {breakdown.sectors}/15, Education: {breakdown.education}/15, "
        f"Location: {breakdown.location}/10, Test: {breakdown.test}/10), "
        f"this {kind} at {company} offers "
        f"{_growth_label(match_score)} growth opportunities for your career development."
    )
