"""Tests for the JSON internship catalog and the SQLite profile store."""

import json
from pathlib import Path

import pytest

from internmatch.core.db import init_db, upsert_profile
from internmatch.core.errors import CatalogError, DependencyError, ProfileNotFoundError
from internmatch.profile.schema import CandidateProfile
from internmatch.sources.catalog import JsonCatalog
from internmatch.sources.profiles import SQLiteProfileStore

SAMPLE_CATALOG = Path(__file__).parent.parent.parent / "data" / "internships.json"


def _write(tmp_path: Path, data: object) -> Path:
    path = tmp_path / "internships.json"
    path.write_text(json.dumps(data))
    return path


class TestJsonCatalog:
    def test_loads_in_file_order(self, tmp_path: Path) -> None:
        path = _write(tmp_path, [{"id": "b"}, {"id": "a"}, {"id": "c"}])
        postings = JsonCatalog(path).list_postings()
        assert [p.id for p in postings] == ["b", "a", "c"]

    def test_nested_fields_parsed(self, tmp_path: Path) -> None:
        path = _write(tmp_path, [{
            "id": "x",
            "location": {"state": "Goa", "city": "Panaji"},
            "requirements": {"skills": ["Python"], "education": ["bachelors"]},
        }])
        posting = JsonCatalog(path).list_postings()[0]
        assert posting.location.state == "Goa"
        assert posting.requirements.skills == ["Python"]
        assert posting.requirements.sectors == []

    def test_unknown_fields_kept(self, tmp_path: Path) -> None:
        path = _write(tmp_path, [{"id": "x", "applicants": 42}])
        posting = JsonCatalog(path).list_postings()[0]
        assert posting.model_dump()["applicants"] == 42

    def test_empty_catalog(self, tmp_path: Path) -> None:
        assert JsonCatalog(_write(tmp_path, [])).list_postings() == []

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(CatalogError, match="Failed to read internship catalog"):
            JsonCatalog(tmp_path / "missing.json").list_postings()

    def test_malformed_json(self, tmp_path: Path) -> None:
        path = tmp_path / "internships.json"
        path.write_text("[{not json")
        with pytest.raises(CatalogError, match="Failed to read"):
            JsonCatalog(path).list_postings()

    def test_invalid_schema(self, tmp_path: Path) -> None:
        path = _write(tmp_path, [{"title": "no id"}])
        with pytest.raises(CatalogError, match="Invalid internship catalog"):
            JsonCatalog(path).list_postings()

    def test_catalog_error_is_dependency_error(self, tmp_path: Path) -> None:
        with pytest.raises(DependencyError):
            JsonCatalog(tmp_path / "missing.json").list_postings()

    def test_reread_on_every_call(self, tmp_path: Path) -> None:
        path = _write(tmp_path, [{"id": "a"}])
        catalog = JsonCatalog(path)
        assert len(catalog.list_postings()) == 1
        _write(tmp_path, [{"id": "a"}, {"id": "b"}])
        assert len(catalog.list_postings()) == 2

    def test_shipped_sample_catalog(self) -> None:
        postings = JsonCatalog(SAMPLE_CATALOG).list_postings()
        assert [p.id for p in postings] == ["int-001", "int-002", "int-003", "int-004"]


class TestSQLiteProfileStore:
    def test_get_profile(self, tmp_path: Path) -> None:
        conn = init_db(tmp_path / "p.db")
        upsert_profile(conn, CandidateProfile(candidate_id="c-1", skills=["Python"]))
        store = SQLiteProfileStore(conn)
        assert store.get_profile("c-1").skills == ["python"]

    def test_unknown_raises(self, tmp_path: Path) -> None:
        store = SQLiteProfileStore(init_db(tmp_path / "p.db"))
        with pytest.raises(ProfileNotFoundError, match="Profile not found: ghost"):
            store.get_profile("ghost")
