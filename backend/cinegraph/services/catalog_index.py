"""
In-memory search index over film titles and director names.

One CatalogIndex is built by the application lifespan, kept on app.state
and handed to routes through cinegraph.deps.catalog.get_catalog. Sync
routes run in a threadpool, so every read and write goes through the lock.
"""
import logging
import threading
from collections.abc import Iterable
from dataclasses import dataclass, field

from sqlalchemy.orm import Session

from cinegraph.core.errors import IncorrectParameterError
from cinegraph.db.models import Director, Film, film_directors

logger = logging.getLogger(__name__)

SEARCH_BY_TITLE = "title"
SEARCH_BY_DIRECTOR = "director"
SEARCH_FIELDS = frozenset({SEARCH_BY_TITLE, SEARCH_BY_DIRECTOR})


@dataclass
class CataloguedFilm:
    """Lowercased search projection of a film."""

    title: str
    directors: set[str] = field(default_factory=set)

    @classmethod
    def from_film(cls, film: Film) -> "CataloguedFilm":
        return cls(
            title=film.name.lower(),
            directors={director.name.lower() for director in film.directors},
        )

    def matches(self, query: str, by: frozenset[str]) -> bool:
        if SEARCH_BY_TITLE in by and query in self.title:
            return True
        if SEARCH_BY_DIRECTOR in by and any(query in name for name in self.directors):
            return True
        return False


def normalize_search_fields(by: Iterable[str] | None) -> frozenset[str]:
    """
    Parse the ``by`` parameter. Absent or empty means both fields.

    Accepts repeated values (["title", "director"]) as well as a single
    comma-separated value ("title,director").
    """
    tokens: set[str] = set()
    for raw in by or ():
        for token in raw.split(","):
            token = token.strip().lower()
            if token:
                tokens.add(token)

    if not tokens:
        return SEARCH_FIELDS

    unknown = tokens - SEARCH_FIELDS
    if unknown:
        raise IncorrectParameterError(
            "by",
            f"Unsupported search field(s): {', '.join(sorted(unknown))}. "
            f"Use {SEARCH_BY_TITLE!r} and/or {SEARCH_BY_DIRECTOR!r}",
        )
    return frozenset(tokens)


class CatalogIndex:
    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._entries: dict[int, CataloguedFilm] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, film_id: object) -> bool:
        with self._lock:
            return film_id in self._entries

    def get(self, film_id: int) -> CataloguedFilm | None:
        with self._lock:
            return self._entries.get(film_id)

    def rebuild(self, db: Session) -> None:
        """Reload every entry from storage, replacing the current contents."""
        rows = (
            db.query(Film.id, Film.name, Director.name)
            .outerjoin(film_directors, film_directors.c.film_id == Film.id)
            .outerjoin(Director, Director.id == film_directors.c.director_id)
            .all()
        )

        entries: dict[int, CataloguedFilm] = {}
        for film_id, film_name, director_name in rows:
            entry = entries.get(film_id)
            if entry is None:
                entry = entries[film_id] = CataloguedFilm(title=film_name.lower())
            if director_name is not None:
                entry.directors.add(director_name.lower())

        with self._lock:
            self._entries = entries
        logger.info("catalog_rebuilt", extra={"films": len(entries)})

    def upsert(self, film: Film) -> None:
        """Replace the entry for a created or fully updated film."""
        entry = CataloguedFilm.from_film(film)
        with self._lock:
            self._entries[film.id] = entry

    def remove(self, film_id: int) -> None:
        with self._lock:
            self._entries.pop(film_id, None)

    def search(self, query: str, by: Iterable[str] | None = None) -> list[int]:
        """Ids of films whose title and/or a director name contain *query*."""
        fields = normalize_search_fields(by)
        needle = query.lower()
        with self._lock:
            return [
                film_id
                for film_id, entry in self._entries.items()
                if entry.matches(needle, fields)
            ]
