from unittest.mock import patch

from support import DatabaseTestCase

from cinegraph.core.errors import NotFoundError
from cinegraph.db.models import EventType, OperationType
from cinegraph.services import feed_service, friendship_service


class TestFeedService(DatabaseTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.alice = self.make_user("alice")
        self.bob = self.make_user("bob")
        self.film = self.make_film("Heat")

    def test_events_in_insertion_order(self) -> None:
        self.like(self.film, self.alice)
        friendship_service.add_friend(self.db, self.alice, self.bob)

        feed = feed_service.get_user_feed(self.db, self.alice)
        self.assertEqual(
            [(e["event_type"], e["entity_id"]) for e in feed],
            [(EventType.LIKE.value, self.film), (EventType.FRIEND.value, self.bob)],
        )
        self.assertLess(feed[0]["event_id"], feed[1]["event_id"])

    def test_feed_only_holds_own_actions(self) -> None:
        friendship_service.add_friend(self.db, self.alice, self.bob)
        self.assertEqual(feed_service.get_user_feed(self.db, self.bob), [])

    def test_timestamp_is_epoch_millis(self) -> None:
        with patch("cinegraph.services.feed_service.time.time", return_value=1_700_000_000.5):
            feed_service.add_event(self.db, self.alice, self.film, EventType.LIKE, OperationType.ADD)
        self.db.commit()

        feed = feed_service.get_user_feed(self.db, self.alice)
        self.assertEqual(feed[0]["timestamp"], 1_700_000_000_500)

    def test_uncommitted_event_is_discarded_with_transaction(self) -> None:
        feed_service.add_event(self.db, self.alice, self.film, EventType.LIKE, OperationType.ADD)
        self.db.rollback()

        self.assertEqual(feed_service.get_user_feed(self.db, self.alice), [])

    def test_unknown_user_raises(self) -> None:
        with self.assertRaises(NotFoundError):
            feed_service.get_user_feed(self.db, 4040)
