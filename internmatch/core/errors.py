"""Typed errors surfaced to callers of the recommendation service."""


class RecommendationError(Exception):
    """Base class for errors reported to the presentation layer."""


class ProfileNotFoundError(RecommendationError):
    """No profile exists for the requested candidate."""


class InternshipNotFoundError(RecommendationError):
    """No posting with the requested id exists in the catalog."""


class ProfileIncompleteError(RecommendationError):
    """Candidate has not completed the profile and the skill test."""


class DependencyError(RecommendationError):
    """A profile store or catalog read failed. Not retried internally."""


class CatalogError(DependencyError):
    """The internship catalog could not be read or validated."""
