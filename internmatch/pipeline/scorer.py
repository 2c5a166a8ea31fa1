"""Rule-based match scoring of one internship posting against one candidate.

Six additive sub-scores (max 105 in total):
  skills 0-50, sectors 0-15, education 0/15, location 0/10,
  test 0-10, recency 1-5 (0 when the posted date is unusable).

Pure and deterministic for a fixed ``now``. Sparse or malformed postings
score low instead of raising.
"""

import logging
import math
from datetime import datetime, timezone
from typing import Any

from internmatch.core.schemas import InternshipPosting, ScoreBreakdown
from internmatch.profile.schema import CandidateProfile, normalize

logger = logging.getLogger(__name__)

SKILLS_MAX = 50
SECTORS_MAX = 15
EDUCATION_POINTS = 15
LOCATION_POINTS = 10
TEST_MAX = 10

MAX_SKILLS_IN_REASON = 4
GOOD_TEST_THRESHOLD = 6
UNMATCHED_TEST_MULTIPLIER = 0.4

_BACHELORS_SPELLINGS = frozenset({"bachelors", "bachelor's", "bachelor's degree"})

# (max days since posting, points), checked in order.
_RECENCY_BANDS: list[tuple[float, int]] = [
    (7.0, 5),
    (14.0, 4),
    (30.0, 3),
    (60.0, 2),
]
_STALE_RECENCY = 1


def score_posting(
    profile: CandidateProfile,
    posting: InternshipPosting,
    now: datetime | None = None,
) -> ScoreBreakdown:
    """Compute the score breakdown for a single posting.

    Args:
        profile: The candidate being matched.
        posting: The internship posting to score.
        now: Reference time for recency. Defaults to the current UTC time.

    Returns:
        ScoreBreakdown with sub-scores, total and reasons in emission order
        (skills, sectors, education, location, test).
    """
    reasons: list[str] = []
    requirements = posting.requirements

    matched_skills = _matched_skills(profile.skills, requirements.skills)
    skills = _ratio_points(len(matched_skills), len(requirements.skills), SKILLS_MAX)
    if matched_skills:
        reasons.append(
            "Skills match: " + ", ".join(matched_skills[:MAX_SKILLS_IN_REASON])
        )

    matched_sectors = _matched_sectors(profile.interested_sectors, requirements.sectors)
    sectors = _ratio_points(len(matched_sectors), len(requirements.sectors), SECTORS_MAX)
    if matched_sectors:
        reasons.append("Sector fit: " + ", ".join(matched_sectors))

    education = 0
    if education_satisfies(requirements.education, profile.education_level):
        education = EDUCATION_POINTS
        reasons.append("Education requirement met")

    location = 0
    candidate_state = normalize(profile.state)
    if candidate_state and candidate_state == normalize(posting.location.state):
        location = LOCATION_POINTS
        reasons.append("Preferred state")

    test = _test_points(profile.skill_test_score, bool(matched_skills))
    if test >= GOOD_TEST_THRESHOLD:
        reasons.append(f"Good test score ({profile.skill_test_score}%)")

    recency = recency_points(posting.posted, now)

    total = skills + sectors + education + location + test + recency
    return ScoreBreakdown(
        skills=skills,
        sectors=sectors,
        education=education,
        location=location,
        test=test,
        recency=recency,
        total=total,
        reasons=reasons,
    )


def score_catalog(
    profile: CandidateProfile,
    postings: list[InternshipPosting],
    now: datetime | None = None,
) -> list[tuple[InternshipPosting, ScoreBreakdown]]:
    """Score every posting and sort by total descending.

    The sort is stable, so equal totals keep catalog order.
    """
    now = now or datetime.now(timezone.utc)
    scored = [(p, score_posting(profile, p, now)) for p in postings]
    scored.sort(key=lambda pair: pair[1].total, reverse=True)
    logger.debug("Scored %d postings for candidate %s", len(scored), profile.candidate_id)
    return scored


def education_satisfies(required: list[str], level: str) -> bool:
    """True if the candidate's level is listed, or is pursuing-bachelors vs bachelors."""
    req = {normalize(r) for r in required}
    candidate_level = normalize(level)
    if not candidate_level:
        return False
    if candidate_level in req:
        return True
    return candidate_level == "pursuing-bachelors" and bool(req & _BACHELORS_SPELLINGS)


def recency_points(posted: Any, now: datetime | None = None) -> int:
    """Freshness bonus from the posting date; 0 if missing or unparsable."""
    days = _days_since(posted, now or datetime.now(timezone.utc))
    if days is None:
        return 0
    for max_days, points in _RECENCY_BANDS:
        if days <= max_days:
            return points
    return _STALE_RECENCY


def round_half_up(value: float) -> int:
    """Round .5 away from zero for non-negative values (2.5 -> 3)."""
    return math.floor(value + 0.5)


def _matched_skills(candidate_skills: list[str], required: list[str]) -> list[str]:
    # A candidate skill counts when it is contained in some required skill,
    # e.g. "javascript" satisfies "javascript development".
    req = [r for r in (normalize(x) for x in required) if r]
    matched: list[str] = []
    for skill in (normalize(c) for c in candidate_skills):
        if skill and any(skill in r for r in req):
            matched.append(skill)
    return matched


def _matched_sectors(candidate_sectors: list[str], required: list[str]) -> list[str]:
    req = {normalize(r) for r in required}
    return [s for s in (normalize(c) for c in candidate_sectors) if s and s in req]


def _ratio_points(matched: int, required: int, max_points: int) -> int:
    if required <= 0:
        return 0
    return min(max_points, round_half_up(max_points * matched / required))


def _test_points(score: int | None, any_skill_matched: bool) -> int:
    if score is None:
        return 0
    factor = max(0, min(100, score)) / 100
    multiplier = 1.0 if any_skill_matched else UNMATCHED_TEST_MULTIPLIER
    return round_half_up(TEST_MAX * factor * multiplier)


def _days_since(posted: Any, now: datetime) -> float | None:
    """Parse the posted value into days elapsed. Naive times are read as UTC."""
    if isinstance(posted, datetime):
        posted_at = posted
    elif isinstance(posted, str) and posted.strip():
        try:
            posted_at = datetime.fromisoformat(posted.strip())
        except ValueError:
            logger.debug("Unparsable posted date %r, recency is 0", posted)
            return None
    else:
        return None

    if posted_at.tzinfo is None:
        posted_at = posted_at.replace(tzinfo=timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return (now - posted_at).total_seconds() / 86400
