"""
Shared fixtures for service tests: a fresh in-memory SQLite database per
test with the full schema, seeded genres and MPA ratings, and an empty
catalog index.
"""
import unittest
from datetime import date

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from cinegraph.db.models import Base
from cinegraph.db.session import enable_sqlite_foreign_keys
from cinegraph.schemas.films import FilmCreateRequest, ReferenceId
from cinegraph.schemas.reference import DirectorCreateRequest
from cinegraph.schemas.users import UserCreateRequest
from cinegraph.services import film_service, reference_service, user_service
from cinegraph.services.catalog_index import CatalogIndex

COMEDY = 1
DRAMA = 2
PG_13 = 3


class DatabaseTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.engine = create_engine(
            "sqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        enable_sqlite_foreign_keys(self.engine)
        Base.metadata.create_all(self.engine)

        self.db = sessionmaker(bind=self.engine, autoflush=False, expire_on_commit=False)()
        reference_service.seed_reference_data(self.db)
        self.catalog = CatalogIndex()

    def tearDown(self) -> None:
        self.db.close()
        Base.metadata.drop_all(self.engine)
        self.engine.dispose()

    # ── Factories ─────────────────────────────────────────────────────────────

    def make_user(self, login: str = "moviegoer", **overrides) -> int:
        fields = {
            "email": f"{login}@example.com",
            "login": login,
            "name": login.title(),
            "birthday": date(1990, 5, 17),
        }
        fields.update(overrides)
        return user_service.create_user(self.db, UserCreateRequest(**fields))["id"]

    def make_director(self, name: str) -> int:
        return reference_service.create_director(self.db, DirectorCreateRequest(name=name))["id"]

    def film_payload(
        self,
        name: str = "Heat",
        *,
        release_date: date = date(1995, 12, 15),
        genres: tuple[int, ...] = (),
        directors: tuple[int, ...] = (),
        mpa: int | None = None,
        **overrides,
    ) -> FilmCreateRequest:
        fields = {
            "name": name,
            "description": f"{name} description",
            "release_date": release_date,
            "duration": 120,
            "mpa": ReferenceId(id=mpa) if mpa is not None else None,
            "genres": [ReferenceId(id=genre_id) for genre_id in genres],
            "directors": [ReferenceId(id=director_id) for director_id in directors],
        }
        fields.update(overrides)
        return FilmCreateRequest(**fields)

    def make_film(self, name: str = "Heat", **kwargs) -> int:
        payload = self.film_payload(name, **kwargs)
        return film_service.create_film(self.db, self.catalog, payload)["id"]

    def like(self, film_id: int, *user_ids: int) -> None:
        for user_id in user_ids:
            film_service.add_like(self.db, film_id, user_id)
