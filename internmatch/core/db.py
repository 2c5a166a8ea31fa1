"""SQLite storage for candidate profiles and skill quiz history."""

import json
import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Any

from internmatch.profile.quiz import QuizResult
from internmatch.profile.schema import CandidateProfile

_PROFILES_TABLE = """
CREATE TABLE IF NOT EXISTS profiles (
    candidate_id         TEXT    PRIMARY KEY,
    name                 TEXT    NOT NULL DEFAULT '',
    skills_json          TEXT    NOT NULL DEFAULT '[]',
    sectors_json         TEXT    NOT NULL DEFAULT '[]',
    education_level      TEXT    NOT NULL DEFAULT '',
    education_field      TEXT    NOT NULL DEFAULT '',
    institution          TEXT    NOT NULL DEFAULT '',
    state                TEXT    NOT NULL DEFAULT '',
    city                 TEXT    NOT NULL DEFAULT '',
    experience           TEXT    NOT NULL DEFAULT '',
    career_goals         TEXT    NOT NULL DEFAULT '',
    skill_test_score     INTEGER,
    profile_completed    INTEGER NOT NULL DEFAULT 0,
    skill_test_completed INTEGER NOT NULL DEFAULT 0,
    updated_at           TEXT    NOT NULL
);
"""

_TEST_HISTORY_TABLE = """
CREATE TABLE IF NOT EXISTS test_history (
    id              INTEGER PRIMARY KEY AUTOINCREMENT,
    candidate_id    TEXT    NOT NULL,
    taken_at        TEXT    NOT NULL,
    score           INTEGER NOT NULL,
    auto_submitted  INTEGER NOT NULL DEFAULT 0,
    reason          TEXT    NOT NULL DEFAULT '',
    questions_count INTEGER NOT NULL,
    correct_answers INTEGER NOT NULL
);
"""


def init_db(path: str | Path) -> sqlite3.Connection:
    """Create the database and tables, returning a connection."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(path))
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    conn.execute(_PROFILES_TABLE)
    conn.execute(_TEST_HISTORY_TABLE)
    conn.commit()
    return conn


def upsert_profile(conn: sqlite3.Connection, profile: CandidateProfile) -> None:
    """Insert or replace a candidate profile."""
    conn.execute(
        """
        INSERT INTO profiles
            (candidate_id, name, skills_json, sectors_json, education_level,
             education_field, institution, state, city, experience, career_goals,
             skill_test_score, profile_completed, skill_test_completed, updated_at)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        ON CONFLICT(candidate_id) DO UPDATE SET
            name = excluded.name,
            skills_json = excluded.skills_json,
            sectors_json = excluded.sectors_json,
            education_level = excluded.education_level,
            education_field = excluded.education_field,
            institution = excluded.institution,
            state = excluded.state,
            city = excluded.city,
            experience = excluded.experience,
            career_goals = excluded.career_goals,
            skill_test_score = excluded.skill_test_score,
            profile_completed = excluded.profile_completed,
            skill_test_completed = excluded.skill_test_completed,
            updated_at = excluded.updated_at
        """,
        (
            profile.candidate_id,
            profile.name,
            json.dumps(profile.skills),
            json.dumps(profile.interested_sectors),
            profile.education_level,
            profile.education_field,
            profile.institution,
            profile.state,
            profile.city,
            profile.experience,
            profile.career_goals,
            profile.skill_test_score,
            int(profile.profile_completed),
            int(profile.skill_test_completed),
            datetime.now().isoformat(),
        ),
    )
    conn.commit()


def fetch_profile(conn: sqlite3.Connection, candidate_id: str) -> CandidateProfile | None:
    """Load a profile, or None if the candidate is unknown."""
    row = conn.execute(
        "SELECT * FROM profiles WHERE candidate_id = ?",
        (candidate_id,),
    ).fetchone()
    if row is None:
        return None
    return CandidateProfile(
        candidate_id=row["candidate_id"],
        name=row["name"],
        skills=json.loads(row["skills_json"]),
        interested_sectors=json.loads(row["sectors_json"]),
        education_level=row["education_level"],
        education_field=row["education_field"],
        institution=row["institution"],
        state=row["state"],
        city=row["city"],
        experience=row["experience"],
        career_goals=row["career_goals"],
        skill_test_score=row["skill_test_score"],
        profile_completed=bool(row["profile_completed"]),
        skill_test_completed=bool(row["skill_test_completed"]),
    )


def record_test_result(
    conn: sqlite3.Connection,
    candidate_id: str,
    result: QuizResult,
    auto_submitted: bool = False,
    reason: str = "",
    taken_at: datetime | None = None,
) -> bool:
    """Store the latest quiz score on the profile and append a history row.

    Returns False (and writes nothing) if the candidate has no profile.
    """
    cursor = conn.execute(
        """
        UPDATE profiles
        SET skill_test_score = ?, skill_test_completed = 1, updated_at = ?
        WHERE candidate_id = ?
        """,
        (result.score, datetime.now().isoformat(), candidate_id),
    )
    if cursor.rowcount == 0:
        conn.rollback()
        return False

    conn.execute(
        """
        INSERT INTO test_history
            (candidate_id, taken_at, score, auto_submitted, reason,
             questions_count, correct_answers)
        VALUES (?, ?, ?, ?, ?, ?, ?)
        """,
        (
            candidate_id,
            (taken_at or datetime.now()).isoformat(),
            result.score,
            int(auto_submitted),
            reason,
            result.questions_count,
            result.correct_answers,
        ),
    )
    conn.commit()
    return True


def get_test_history(conn: sqlite3.Connection, candidate_id: str) -> list[dict[str, Any]]:
    """Return the candidate's quiz attempts, oldest first."""
    rows = conn.execute(
        """
        SELECT taken_at, score, auto_submitted, reason, questions_count, correct_answers
        FROM test_history
        WHERE candidate_id = ?
        ORDER BY id
        """,
        (candidate_id,),
    ).fetchall()
    return [
        {
            "taken_at": row["taken_at"],
            "score": row["score"],
            "auto_submitted": bool(row["auto_submitted"]),
            "reason": row["reason"],
            "questions_count": row["questions_count"],
            "correct_answers": row["correct_answers"],
        }
        for row in rows
    ]
