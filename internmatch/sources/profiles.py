"""Profile store backed by the SQLite database."""

import sqlite3

from internmatch.core.db import fetch_profile
from internmatch.core.errors import ProfileNotFoundError
from internmatch.profile.schema import CandidateProfile
from internmatch.sources.base import ProfileStore


class SQLiteProfileStore(ProfileStore):
    """Reads profiles written by ``upsert_profile``."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    def get_profile(self, candidate_id: str) -> CandidateProfile:
        profile = fetch_profile(self._conn, candidate_id)
        if profile is None:
            msg = f"Profile not found: {candidate_id}"
            raise ProfileNotFoundError(msg)
        return profile
