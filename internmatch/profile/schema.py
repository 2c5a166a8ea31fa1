"""CandidateProfile model for stored and YAML-supplied candidate data."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator


def normalize(value: str | None) -> str:
    """Lowercase and trim; None becomes the empty string."""
    return (value or "").lower().strip()


def normalize_unique(values: list[str] | None) -> list[str]:
    """Normalize each entry, dropping blanks and repeats (first one wins)."""
    seen: set[str] = set()
    result: list[str] = []
    for v in values or []:
        n = normalize(v)
        if n and n not in seen:
            seen.add(n)
            result.append(n)
    return result


class CandidateProfile(BaseModel):
    """A candidate's self-reported profile and latest quiz score."""

    candidate_id: str
    name: str = ""
    skills: list[str] = Field(default_factory=list)
    interested_sectors: list[str] = Field(default_factory=list)
    education_level: str = ""
    education_field: str = ""
    institution: str = ""
    state: str = ""
    city: str = ""
    experience: str = ""
    career_goals: str = ""
    skill_test_score: int | None = None
    profile_completed: bool = False
    skill_test_completed: bool = False

    @field_validator("candidate_id")
    @classmethod
    def candidate_id_not_empty(cls, v: str) -> str:
        if not v.strip():
            msg = "candidate_id must not be empty"
            raise ValueError(msg)
        return v.strip()

    @field_validator("skills", "interested_sectors", mode="before")
    @classmethod
    def normalize_lists(cls, v: Any) -> list[str]:
        if v is None:
            return []
        return normalize_unique(list(v))

    @field_validator("education_level", "state", mode="before")
    @classmethod
    def normalize_text(cls, v: Any) -> str:
        return normalize(v)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "CandidateProfile":
        """Load a profile from a YAML file."""
        path = Path(path)
        if not path.exists():
            msg = f"Profile file not found: {path}"
            raise FileNotFoundError(msg)
        raw: dict[str, Any] = yaml.safe_load(path.read_text()) or {}
        return cls.model_validate(raw)

    def to_yaml(self, path: str | Path) -> None:
        """Write the profile to a YAML file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        data = self.model_dump()
        path.write_text(yaml.dump(data, default_flow_style=False, sort_keys=False))
