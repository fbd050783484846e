"""
Persistent storage for scheduled movies.

Two stores share one contract:

    list_movies() -> list[Movie]
    create(data) -> Movie          (assigns id)
    update(movie_id, partial) -> Movie
    delete(movie_id) -> None

- LocalEventStore keeps everything in a JSON file:

      data/movies.json

- RemoteEventStore talks to a REST document store over HTTP.

Every failure to read or write surfaces as StoreError. Callers keep their
in-memory list untouched until a call returns successfully.
"""

from __future__ import annotations

import json
import logging
import uuid
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

import requests

from cineplanner.errors import StoreError, ValidationError
from cineplanner.model import Movie, movie_from_dict

logger = logging.getLogger(__name__)


def _default_movies_path() -> Path:
    """
    Return the default path of movies.json inside the package.

    Using a function instead of a constant makes testing easier,
    because tests can override the path.
    """
    base_dir = Path(__file__).resolve().parent
    return base_dir / "data" / "movies.json"


def _now_iso() -> str:
    return datetime.now().isoformat(timespec="seconds")


def _records_to_movies(records: list[Any], source: str) -> list[Movie]:
    """
    Convert raw records to movies, skipping (and logging) the invalid ones.
    """
    movies: list[Movie] = []
    for rec in records:
        if not isinstance(rec, dict):
            logger.warning("Skipping non-object record in %s: %r", source, rec)
            continue
        try:
            movie = movie_from_dict(rec)
        except ValidationError as e:
            logger.warning("Skipping invalid record %r in %s: %s", rec.get("id"), source, e)
            continue
        if movie.id is None:
            logger.warning("Skipping record without id in %s: %r", source, rec)
            continue
        movies.append(movie)
    return movies


class LocalEventStore:
    """
    JSON flat-file store. The file holds {"movies": [ ... ]}.
    """

    def __init__(self, path: str | Path | None = None) -> None:
        self.path = Path(path) if path is not None else _default_movies_path()

    def _read_records(self, strict: bool) -> list[dict[str, Any]]:
        # First run: file does not exist yet -> no movies
        if not self.path.exists():
            return []
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            records = data.get("movies", [])
            if not isinstance(records, list):
                raise ValueError("'movies' is not a list")
            return records
        except (OSError, ValueError, UnicodeDecodeError, AttributeError) as e:
            # json.JSONDecodeError is a ValueError
            if strict:
                raise StoreError(f"Cannot read {self.path}: {e}") from e
            logger.warning("Cannot read %s, treating as empty: %s", self.path, e)
            return []

    def _write_records(self, records: list[dict[str, Any]]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            payload = {"movies": records}
            self.path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
        except OSError as e:
            raise StoreError(f"Cannot write {self.path}: {e}") from e

    def list_movies(self) -> list[Movie]:
        return _records_to_movies(self._read_records(strict=False), str(self.path))

    def create(self, data: dict[str, Any]) -> Movie:
        records = self._read_records(strict=True)
        fields = dict(data)
        fields["id"] = uuid.uuid4().hex
        fields["created_at"] = _now_iso()
        movie = movie_from_dict(fields)

        records.append(movie.to_dict())
        self._write_records(records)
        return movie

    def update(self, movie_id: str, partial: dict[str, Any]) -> Movie:
        records = self._read_records(strict=True)
        for i, rec in enumerate(records):
            if isinstance(rec, dict) and rec.get("id") == movie_id:
                merged = {**rec, **partial, "id": movie_id}
                movie = movie_from_dict(merged)
                records[i] = movie.to_dict()
                self._write_records(records)
                return movie
        raise StoreError(f"Movie {movie_id!r} not found")

    def delete(self, movie_id: str) -> None:
        records = self._read_records(strict=True)
        kept = [r for r in records if not (isinstance(r, dict) and r.get("id") == movie_id)]
        if len(kept) == len(records):
            raise StoreError(f"Movie {movie_id!r} not found")
        self._write_records(kept)


class RemoteEventStore:
    """
    REST document store client.

        GET    {base_url}/{collection}          -> [ {id, ...}, ... ]
        POST   {base_url}/{collection}          -> {id, ...}
        PATCH  {base_url}/{collection}/{id}     -> {id, ...}
        DELETE {base_url}/{collection}/{id}
    """

    def __init__(
        self,
        base_url: str,
        collection: str = "movies",
        session: Optional[requests.Session] = None,
        timeout: float = 10,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.collection = collection.strip("/")
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout

    def _url(self, movie_id: Optional[str] = None) -> str:
        url = f"{self.base_url}/{self.collection}"
        return f"{url}/{movie_id}" if movie_id else url

    def _request(self, method: str, url: str, **kwargs: Any) -> Any:
        try:
            resp = self.session.request(method, url, timeout=self.timeout, **kwargs)
            resp.raise_for_status()
            if not resp.content:
                return None
            return resp.json()
        except requests.RequestException as e:
            raise StoreError(f"{method} {url} failed: {e}") from e
        except ValueError as e:
            raise StoreError(f"{method} {url} returned invalid JSON: {e}") from e

    def _to_movie(self, doc: Any, fallback: dict[str, Any]) -> Movie:
        if not isinstance(doc, dict):
            raise StoreError(f"Unexpected response from {self._url()}: {doc!r}")
        try:
            return movie_from_dict({**fallback, **doc})
        except ValidationError as e:
            raise StoreError(f"Store returned an invalid movie: {e}") from e

    def list_movies(self) -> list[Movie]:
        docs = self._request("GET", self._url())
        if not isinstance(docs, list):
            raise StoreError(f"Expected a list from {self._url()}, got {type(docs).__name__}")
        return _records_to_movies(docs, self._url())

    def create(self, data: dict[str, Any]) -> Movie:
        payload = {k: v for k, v in data.items() if k != "id"}
        payload["created_at"] = _now_iso()
        doc = self._request("POST", self._url(), json=payload)
        movie = self._to_movie(doc, payload)
        if movie.id is None:
            raise StoreError("Store did not assign an id")
        return movie

    def update(self, movie_id: str, partial: dict[str, Any]) -> Movie:
        payload = {k: v for k, v in partial.items() if k != "id"}
        doc = self._request("PATCH", self._url(movie_id), json=payload)
        return self._to_movie(doc, {**payload, "id": movie_id})

    def delete(self, movie_id: str) -> None:
        self._request("DELETE", self._url(movie_id))


def open_store(remote_url: Optional[str] = None, path: str | Path | None = None):
    """
    Remote store when a URL is configured, otherwise the local JSON file.
    """
    if remote_url:
        return RemoteEventStore(remote_url)
    return LocalEventStore(path)
