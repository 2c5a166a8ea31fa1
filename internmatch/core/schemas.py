"""Core data models for the internship recommendation engine."""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class PostingLocation(BaseModel):
    """Where an internship is based."""

    model_config = ConfigDict(frozen=True, extra="allow")

    state: str = ""
    city: str = ""


class PostingRequirements(BaseModel):
    """Eligibility requirements listed on a posting, in catalog order."""

    model_config = ConfigDict(frozen=True)

    skills: list[str] = Field(default_factory=list)
    education: list[str] = Field(default_factory=list)
    sectors: list[str] = Field(default_factory=list)


class InternshipPosting(BaseModel):
    """One internship from the read-only catalog.

    Frozen. Unknown catalog fields are kept as passthrough data and never
    read by the scorer.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    id: str
    title: str = ""
    company: str = ""
    description: str = ""
    type: str = ""
    duration: str = ""
    stipend: Any = None
    benefits: list[str] = Field(default_factory=list)
    location: PostingLocation = Field(default_factory=PostingLocation)
    requirements: PostingRequirements = Field(default_factory=PostingRequirements)
    posted: Any = None


class ScoreBreakdown(BaseModel):
    """Per-factor scores for one (profile, posting) pair.

    Recomputed per request, never persisted.
    """

    model_config = ConfigDict(frozen=True)

    skills: int = Field(default=0, ge=0, le=50)
    sectors: int = Field(default=0, ge=0, le=15)
    education: int = Field(default=0, ge=0, le=15)
    location: int = Field(default=0, ge=0, le=10)
    test: int = Field(default=0, ge=0, le=10)
    recency: int = Field(default=0, ge=0, le=5)
    total: int = Field(default=0, ge=0)
    reasons: list[str] = Field(default_factory=list)


class RankedRecommendation(BaseModel):
    """A posting decorated with a presentation score, reasons and an insight."""

    model_config = ConfigDict(frozen=True)

    posting: InternshipPosting
    match_score: int = Field(ge=0, le=100)
    reasons: list[str] = Field(default_factory=list)
    ai_insight: str = ""
    career_growth_potential: str | None = None
    skill_development_opportunities: list[str] = Field(default_factory=list)


class RecommendationResult(BaseModel):
    """Final ordered slate plus whether the AI pass was merged."""

    recommendations: list[RankedRecommendation] = Field(default_factory=list)
    source: Literal["rule-based", "ai-enhanced"] = "rule-based"


class InternshipDetail(BaseModel):
    """Single-posting view with the full breakdown behind its match score."""

    posting: InternshipPosting
    match_score: int
    reasons: list[str] = Field(default_factory=list)
    ai_insight: str = ""
    score_breakdown: ScoreBreakdown
