"""Abstract base classes for the profile store and internship catalog."""

from abc import ABC, abstractmethod

from internmatch.core.schemas import InternshipPosting
from internmatch.profile.schema import CandidateProfile


class ProfileStore(ABC):
    """Read access to candidate profiles."""

    @abstractmethod
    def get_profile(self, candidate_id: str) -> CandidateProfile:
        """Return the candidate's profile.

        Raises:
            ProfileNotFoundError: If no profile exists for the candidate.
        """


class CatalogSource(ABC):
    """Read-only access to the internship catalog."""

    @abstractmethod
    def list_postings(self) -> list[InternshipPosting]:
        """Return every posting, in stable catalog order."""
