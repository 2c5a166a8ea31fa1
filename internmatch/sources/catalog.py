"""Internship catalog loaded from a JSON file."""

import json
import logging
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from internmatch.core.errors import CatalogError
from internmatch.core.schemas import InternshipPosting
from internmatch.sources.base import CatalogSource

logger = logging.getLogger(__name__)

_POSTINGS = TypeAdapter(list[InternshipPosting])


class JsonCatalog(CatalogSource):
    """A JSON array of postings, re-read on every call (no caching)."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    def list_postings(self) -> list[InternshipPosting]:
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            msg = f"Failed to read internship catalog {self._path}: {e}"
            raise CatalogError(msg) from e

        try:
            postings = _POSTINGS.validate_python(raw)
        except ValidationError as e:
            msg = f"Invalid internship catalog {self._path}: {e.error_count()} error(s)"
            raise CatalogError(msg) from e

        logger.debug("Loaded %d postings from %s", len(postings), self._path)
        return postings
