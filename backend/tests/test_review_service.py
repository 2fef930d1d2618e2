from support import DatabaseTestCase

from cinegraph.core.errors import IncorrectParameterError, InvalidFieldError, NotFoundError
from cinegraph.db.models import EventType, OperationType
from cinegraph.schemas.reviews import ReviewCreateRequest, ReviewUpdateRequest
from cinegraph.services import feed_service, review_service


class ReviewTestCase(DatabaseTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.author = self.make_user("author")
        self.reader = self.make_user("reader")
        self.critic = self.make_user("critic")
        self.film = self.make_film("Heat")

    def make_review(self, film_id: int | None = None, user_id: int | None = None, content: str = "Great") -> int:
        payload = ReviewCreateRequest(
            content=content,
            is_positive=True,
            user_id=user_id or self.author,
            film_id=film_id or self.film,
        )
        return review_service.create_review(self.db, payload)["review_id"]


class TestReviewCrud(ReviewTestCase):
    def test_create_returns_zero_usefulness(self) -> None:
        review_id = self.make_review()

        review = review_service.get_review(self.db, review_id)
        self.assertEqual(review["content"], "Great")
        self.assertEqual(review["useful"], 0)
        self.assertEqual(review["film_id"], self.film)

    def test_create_rejects_blank_content(self) -> None:
        with self.assertRaises(InvalidFieldError):
            self.make_review(content="   ")

    def test_create_rejects_overlong_content(self) -> None:
        with self.assertRaises(InvalidFieldError):
            self.make_review(content="x" * 5001)

    def test_create_requires_existing_film(self) -> None:
        with self.assertRaises(NotFoundError) as ctx:
            self.make_review(film_id=999)
        self.assertEqual(ctx.exception.code, "FILM_NOT_FOUND")

    def test_update_keeps_author_and_film(self) -> None:
        review_id = self.make_review()

        updated = review_service.update_review(
            self.db,
            ReviewUpdateRequest(review_id=review_id, content="Overrated", is_positive=False),
        )

        self.assertEqual(updated["content"], "Overrated")
        self.assertFalse(updated["is_positive"])
        self.assertEqual(updated["user_id"], self.author)
        self.assertEqual(updated["film_id"], self.film)

    def test_lifecycle_emits_review_events_for_author(self) -> None:
        review_id = self.make_review()
        review_service.update_review(
            self.db,
            ReviewUpdateRequest(review_id=review_id, content="Still great", is_positive=True),
        )
        review_service.delete_review(self.db, review_id)

        feed = feed_service.get_user_feed(self.db, self.author)
        self.assertEqual([e["event_type"] for e in feed], [EventType.REVIEW.value] * 3)
        self.assertEqual(
            [e["operation"] for e in feed],
            [OperationType.ADD.value, OperationType.UPDATE.value, OperationType.REMOVE.value],
        )
        self.assertTrue(all(e["entity_id"] == review_id for e in feed))

    def test_deleted_review_is_gone(self) -> None:
        review_id = self.make_review()
        review_service.delete_review(self.db, review_id)

        with self.assertRaises(NotFoundError) as ctx:
            review_service.get_review(self.db, review_id)
        self.assertEqual(ctx.exception.code, "REVIEW_NOT_FOUND")


class TestUsefulness(ReviewTestCase):
    def test_useful_is_likes_minus_dislikes(self) -> None:
        review_id = self.make_review()
        review_service.add_like(self.db, review_id, self.reader)
        review_service.add_like(self.db, review_id, self.critic)
        review_service.add_dislike(self.db, review_id, self.author)

        self.assertEqual(review_service.get_review(self.db, review_id)["useful"], 1)

    def test_votes_are_idempotent(self) -> None:
        review_id = self.make_review()
        review_service.add_like(self.db, review_id, self.reader)
        review_service.add_like(self.db, review_id, self.reader)

        self.assertEqual(review_service.get_review(self.db, review_id)["useful"], 1)

    def test_like_and_dislike_by_same_user_cancel_out(self) -> None:
        review_id = self.make_review()
        review_service.add_like(self.db, review_id, self.reader)
        review_service.add_dislike(self.db, review_id, self.reader)

        self.assertEqual(review_service.get_review(self.db, review_id)["useful"], 0)

    def test_removing_absent_like_raises_and_changes_nothing(self) -> None:
        review_id = self.make_review()
        review_service.add_dislike(self.db, review_id, self.critic)

        with self.assertRaises(NotFoundError):
            review_service.remove_like(self.db, review_id, self.reader)
        self.assertEqual(review_service.get_review(self.db, review_id)["useful"], -1)

    def test_removing_absent_dislike_raises(self) -> None:
        review_id = self.make_review()
        with self.assertRaises(NotFoundError):
            review_service.remove_dislike(self.db, review_id, self.reader)

    def test_remove_like_restores_score(self) -> None:
        review_id = self.make_review()
        review_service.add_like(self.db, review_id, self.reader)
        review_service.remove_like(self.db, review_id, self.reader)

        self.assertEqual(review_service.get_review(self.db, review_id)["useful"], 0)

    def test_vote_on_unknown_review_raises(self) -> None:
        with self.assertRaises(NotFoundError):
            review_service.add_like(self.db, 321, self.reader)


class TestReviewListing(ReviewTestCase):
    def test_orders_by_useful_then_id(self) -> None:
        first = self.make_review(content="first")
        second = self.make_review(user_id=self.reader, content="second")
        third = self.make_review(user_id=self.critic, content="third")
        review_service.add_like(self.db, third, self.reader)
        review_service.add_dislike(self.db, first, self.reader)

        reviews = review_service.get_reviews(self.db, film_id=self.film)
        self.assertEqual([r["review_id"] for r in reviews], [third, second, first])
        self.assertEqual([r["useful"] for r in reviews], [1, 0, -1])

    def test_count_truncates(self) -> None:
        for _ in range(3):
            self.make_review()
        self.assertEqual(len(review_service.get_reviews(self.db, count=2)), 2)

    def test_without_film_lists_across_films(self) -> None:
        other_film = self.make_film("Ronin")
        self.make_review()
        self.make_review(film_id=other_film)

        self.assertEqual(len(review_service.get_reviews(self.db)), 2)
        self.assertEqual(len(review_service.get_reviews(self.db, film_id=other_film)), 1)

    def test_count_below_one_rejected(self) -> None:
        with self.assertRaises(IncorrectParameterError):
            review_service.get_reviews(self.db, count=0)

    def test_unknown_film_raises(self) -> None:
        with self.assertRaises(NotFoundError):
            review_service.get_reviews(self.db, film_id=555)
