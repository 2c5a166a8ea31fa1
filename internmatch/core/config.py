"""Configuration models and YAML loader for the recommendation engine."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator


class DatabaseConfig(BaseModel):
    """Profile store configuration."""

    path: str = "data/profiles.db"


class CatalogConfig(BaseModel):
    """Location of the read-only internship catalog."""

    path: str = "data/internships.json"


class RankingConfig(BaseModel):
    """Slate selection and presentation limits."""

    top_n: int = Field(default=5, ge=1)
    relevance_floor: int = Field(default=30, ge=0)
    min_match_score: int = Field(default=40, ge=0, le=100)
    max_match_score: int = Field(default=99, ge=0, le=100)
    max_reasons: int = Field(default=3, ge=0)
    detail_max_reasons: int = Field(default=5, ge=0)

    @model_validator(mode="after")
    def match_score_bounds_ordered(self) -> "RankingConfig":
        if self.min_match_score > self.max_match_score:
            msg = "min_match_score must not exceed max_match_score"
            raise ValueError(msg)
        return self


class AIConfig(BaseModel):
    """Settings for the optional AI re-ranking pass."""

    enabled: bool = True
    provider: str = "gemini"
    model: str | None = None
    timeout_seconds: float = Field(default=20.0, gt=0.0)
    max_ai_reasons: int = Field(default=5, ge=1)

    @field_validator("provider")
    @classmethod
    def provider_normalized(cls, v: str) -> str:
        v = v.lower().strip()
        if not v:
            msg = "provider must not be empty"
            raise ValueError(msg)
        return v


class Settings(BaseModel):
    """Top-level settings loaded from YAML."""

    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    catalog: CatalogConfig = Field(default_factory=CatalogConfig)
    ranking: RankingConfig = Field(default_factory=RankingConfig)
    ai: AIConfig = Field(default_factory=AIConfig)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "Settings":
        """Load settings from a YAML file."""
        path = Path(path)
        if not path.exists():
            msg = f"Config file not found: {path}"
            raise FileNotFoundError(msg)
        raw: dict[str, Any] = yaml.safe_load(path.read_text()) or {}
        return cls.model_validate(raw)
