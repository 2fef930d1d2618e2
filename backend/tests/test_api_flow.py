"""
End-to-end route tests against a real in-memory SQLite database.
"""
import unittest

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from cinegraph.db.models import Base
from cinegraph.db.session import enable_sqlite_foreign_keys, get_db
from cinegraph.deps.catalog import get_catalog
from cinegraph.main import app
from cinegraph.services.catalog_index import CatalogIndex
from cinegraph.services.reference_service import seed_reference_data


class ApiFlowTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.engine = create_engine(
            "sqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        enable_sqlite_foreign_keys(self.engine)
        Base.metadata.create_all(self.engine)
        session_factory = sessionmaker(bind=self.engine, autoflush=False, expire_on_commit=False)

        seed_db = session_factory()
        seed_reference_data(seed_db)
        seed_db.close()

        def override_get_db():
            db = session_factory()
            try:
                yield db
            finally:
                db.close()

        self.catalog = CatalogIndex()
        app.dependency_overrides[get_db] = override_get_db
        app.dependency_overrides[get_catalog] = lambda: self.catalog
        self.client = TestClient(app)

    def tearDown(self) -> None:
        app.dependency_overrides.clear()
        Base.metadata.drop_all(self.engine)
        self.engine.dispose()

    def create_user(self, login: str) -> int:
        response = self.client.post(
            "/users",
            json={"email": f"{login}@example.com", "login": login, "birthday": "1990-01-01"},
        )
        self.assertEqual(response.status_code, 201, response.text)
        return response.json()["id"]

    def create_film(self, name: str, **extra) -> int:
        body = {"name": name, "release_date": "2000-01-01", "duration": 100}
        body.update(extra)
        response = self.client.post("/films", json=body)
        self.assertEqual(response.status_code, 201, response.text)
        return response.json()["id"]


class TestApiFlow(ApiFlowTestCase):
    def test_health(self) -> None:
        response = self.client.get("/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], "ok")

    def test_reference_lookups(self) -> None:
        self.assertEqual(len(self.client.get("/genres").json()), 6)
        self.assertEqual(self.client.get("/mpa/3").json(), {"id": 3, "name": "PG-13"})
        self.assertEqual(self.client.get("/genres/42").status_code, 404)

    def test_user_name_defaults_to_login(self) -> None:
        user_id = self.create_user("neo")
        self.assertEqual(self.client.get(f"/users/{user_id}").json()["name"], "neo")

    def test_invalid_user_is_400(self) -> None:
        response = self.client.post(
            "/users",
            json={"email": "nope", "login": "neo", "birthday": "1990-01-01"},
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["detail"]["error"]["code"], "INVALID_FIELDS")

    def test_likes_drive_popularity_and_recommendations(self) -> None:
        alice = self.create_user("alice")
        bob = self.create_user("bob")
        heat = self.create_film("Heat")
        ronin = self.create_film("Ronin")

        for film_id, user_id in ((heat, alice), (heat, bob), (ronin, bob)):
            self.assertEqual(self.client.put(f"/films/{film_id}/like/{user_id}").status_code, 204)

        popular = self.client.get("/films/popular?count=1").json()
        self.assertEqual([f["id"] for f in popular], [heat])
        self.assertEqual(popular[0]["likes"], 2)

        recommended = self.client.get(f"/users/{alice}/recommendations").json()
        self.assertEqual([f["id"] for f in recommended], [ronin])

        common = self.client.get(f"/films/common?user_id={alice}&friend_id={bob}").json()
        self.assertEqual([f["id"] for f in common], [heat])

    def test_friendship_and_feed(self) -> None:
        alice = self.create_user("alice")
        bob = self.create_user("bob")

        self.assertEqual(self.client.put(f"/users/{alice}/friends/{bob}").status_code, 204)
        self.assertEqual([u["id"] for u in self.client.get(f"/users/{alice}/friends").json()], [bob])
        self.assertEqual(self.client.get(f"/users/{bob}/friends").json(), [])

        # bob's edge is still PENDING: silent no-op, still 204
        self.assertEqual(self.client.delete(f"/users/{bob}/friends/{alice}").status_code, 204)
        self.assertEqual(len(self.client.get(f"/users/{alice}/friends").json()), 1)

        feed = self.client.get(f"/users/{alice}/feed").json()
        self.assertEqual([(e["event_type"], e["operation"]) for e in feed], [("FRIEND", "ADD")])
        self.assertEqual(self.client.get(f"/users/{bob}/feed").json(), [])

    def test_unknown_user_feed_is_404(self) -> None:
        response = self.client.get("/users/77/feed")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["detail"]["error"]["code"], "USER_NOT_FOUND")

    def test_out_of_range_ids_are_404(self) -> None:
        response = self.client.get("/users/99999999999999999999")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["detail"]["error"]["code"], "USER_NOT_FOUND")

        film_id = self.create_film("Heat")
        like = self.client.put(f"/films/{film_id}/like/{2**31}")
        self.assertEqual(like.status_code, 404)

    def test_reviews_usefulness(self) -> None:
        author = self.create_user("author")
        reader = self.create_user("reader")
        film_id = self.create_film("Heat")

        created = self.client.post(
            "/reviews",
            json={"content": "Tense.", "is_positive": True, "user_id": author, "film_id": film_id},
        )
        self.assertEqual(created.status_code, 201)
        review_id = created.json()["review_id"]

        self.assertEqual(self.client.put(f"/reviews/{review_id}/dislike/{reader}").status_code, 204)
        self.assertEqual(self.client.get(f"/reviews/{review_id}").json()["useful"], -1)

        missing = self.client.delete(f"/reviews/{review_id}/like/{reader}")
        self.assertEqual(missing.status_code, 404)
        self.assertEqual(missing.json()["detail"]["error"]["code"], "LIKE_NOT_FOUND")

        listed = self.client.get(f"/reviews?film_id={film_id}&count=5").json()
        self.assertEqual([r["review_id"] for r in listed], [review_id])

    def test_search_and_director_listing(self) -> None:
        director = self.client.post("/directors", json={"name": "Michael Mann"})
        self.assertEqual(director.status_code, 201)
        director_id = director.json()["id"]
        heat = self.create_film("Heat", directors=[{"id": director_id}], release_date="1995-12-15")
        thief = self.create_film("Thief", directors=[{"id": director_id}], release_date="1981-03-27")

        found = self.client.get("/films/search?query=MANN&by=director").json()
        self.assertEqual({f["id"] for f in found}, {heat, thief})

        by_year = self.client.get(f"/films/director/{director_id}?sort_by=year").json()
        self.assertEqual([f["id"] for f in by_year], [thief, heat])

        bad_sort = self.client.get(f"/films/director/{director_id}?sort_by=rating")
        self.assertEqual(bad_sort.status_code, 400)

        bad_field = self.client.get("/films/search?query=heat&by=genre")
        self.assertEqual(bad_field.json()["detail"]["error"]["code"], "INCORRECT_PARAMETER")

    def test_delete_film_removes_it_from_search(self) -> None:
        film_id = self.create_film("Heat")
        self.assertEqual(self.client.delete(f"/films/{film_id}").status_code, 204)

        self.assertEqual(self.client.get("/films/search?query=heat").json(), [])
        self.assertEqual(self.client.get(f"/films/{film_id}").status_code, 404)


if __name__ == "__main__":
    unittest.main()
