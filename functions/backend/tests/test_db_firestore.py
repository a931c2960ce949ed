import unittest
from datetime import datetime, timezone
from unittest.mock import MagicMock

from google.cloud.firestore_v1 import SERVER_TIMESTAMP

from backend.db import FirestoreDbClient, InMemoryDbClient


def _snapshot(doc_id, data, exists=True):
    snapshot = MagicMock()
    snapshot.id = doc_id
    snapshot.exists = exists
    snapshot.to_dict.return_value = data
    return snapshot


class FirestoreDbClientTests(unittest.TestCase):
    """
    Exercises key conversion and query shapes against a mocked Firestore client.
    """

    def setUp(self):
        self.firestore_client = MagicMock()
        self.users = MagicMock()
        self.firestore_client.collection.return_value = self.users
        self.db = FirestoreDbClient(self.firestore_client)

    def test_get_user_converts_keys(self):
        self.users.document.return_value.get.return_value = _snapshot(
            "u1",
            {
                "email": "a@example.com",
                "displayName": "A",
                "photoURL": "https://example.com/a.png",
                "subscription": {"plan": "monthly", "endDate": "2030-01-01T00:00:00Z"},
            },
        )

        user = self.db.get_user("u1")

        self.firestore_client.collection.assert_called_with("users")
        self.users.document.assert_called_with("u1")
        self.assertEqual(user["display_name"], "A")
        self.assertEqual(user["photo_url"], "https://example.com/a.png")
        self.assertEqual(user["subscription"]["end_date"], "2030-01-01T00:00:00Z")

    def test_get_missing_user(self):
        self.users.document.return_value.get.return_value = _snapshot(
            "u1", None, exists=False
        )
        self.assertIsNone(self.db.get_user("u1"))

    def test_create_user_writes_camel_case(self):
        self.db.create_user("u1", {"display_name": "A", "photo_url": "p", "is_admin": False})

        self.users.document.return_value.set.assert_called_once_with(
            {
                "displayName": "A",
                "photoURL": "p",
                "isAdmin": False,
                "createdAt": SERVER_TIMESTAMP,
            }
        )

    def test_update_user_merges(self):
        self.db.update_user("u1", {"is_admin": True})

        self.users.document.return_value.set.assert_called_once_with(
            {"isAdmin": True, "updatedAt": SERVER_TIMESTAMP}, merge=True
        )

    def test_find_user_by_email(self):
        query = self.users.where.return_value.limit.return_value
        query.stream.return_value = [_snapshot("u2", {"email": "b@example.com"})]

        found = self.db.find_user_by_email("b@example.com")

        self.assertEqual(found, ("u2", {"email": "b@example.com"}))
        self.users.where.return_value.limit.assert_called_once_with(1)

    def test_find_user_by_email_not_found(self):
        self.users.where.return_value.limit.return_value.stream.return_value = []
        self.assertIsNone(self.db.find_user_by_email("nobody@example.com"))

    def test_add_tracker_log(self):
        logs = self.users.document.return_value.collection.return_value
        doc_ref = MagicMock()
        doc_ref.id = "log1"
        logs.add.return_value = (None, doc_ref)

        record = self.db.add_tracker_log("u1", "journal", {"entry": "Good day"})

        self.users.document.return_value.collection.assert_called_with("tracker-logs")
        logs.add.assert_called_once_with(
            {
                "entry": "Good day",
                "type": "journal",
                "uid": "u1",
                "createdAt": SERVER_TIMESTAMP,
            }
        )
        self.assertEqual(record.id, "log1")
        self.assertEqual(record.type, "journal")

    def test_list_tracker_logs(self):
        created = datetime(2026, 1, 1, tzinfo=timezone.utc)
        logs = self.users.document.return_value.collection.return_value
        logs.order_by.return_value.stream.return_value = [
            _snapshot(
                "log1",
                {"type": "measurements", "uid": "u1", "part": "Waist", "measurement": 80, "unit": "cm", "createdAt": created},
            )
        ]

        records = self.db.list_tracker_logs("u1")

        self.assertEqual(len(records), 1)
        self.assertEqual(records[0].type, "measurements")
        self.assertEqual(records[0].data, {"part": "Waist", "measurement": 80, "unit": "cm"})
        self.assertEqual(records[0].created_at, created)

    def test_delete_missing_tracker_log(self):
        doc_ref = self.users.document.return_value.collection.return_value.document.return_value
        doc_ref.get.return_value = _snapshot("log1", None, exists=False)

        self.assertFalse(self.db.delete_tracker_log("u1", "log1"))
        doc_ref.delete.assert_not_called()

    def test_list_community_messages_returns_oldest_first(self):
        query = self.users.order_by.return_value.limit.return_value
        query.stream.return_value = [
            _snapshot("m2", {"text": "second", "uid": "u1", "displayName": "A"}),
            _snapshot("m1", {"text": "first", "uid": "u2", "displayName": None}),
        ]

        messages = self.db.list_community_messages(limit=2)

        self.firestore_client.collection.assert_called_with("community-chat")
        self.users.order_by.return_value.limit.assert_called_once_with(2)
        self.assertEqual([m.text for m in messages], ["first", "second"])
        self.assertEqual(messages[0].display_name, "Anonymous")


class InMemoryDbClientTests(unittest.TestCase):
    def setUp(self):
        self.db = InMemoryDbClient()

    def test_update_user_merges(self):
        self.db.create_user("u1", {"email": "a@example.com", "is_admin": False})
        self.db.update_user("u1", {"is_admin": True})

        user = self.db.get_user("u1")
        self.assertEqual(user["email"], "a@example.com")
        self.assertTrue(user["is_admin"])
        self.assertIn("updated_at", user)

    def test_list_users_newest_first(self):
        self.db.create_user("old", {"created_at": datetime(2025, 1, 1, tzinfo=timezone.utc)})
        self.db.create_user("new", {"created_at": datetime(2026, 1, 1, tzinfo=timezone.utc)})

        self.assertEqual([uid for uid, _ in self.db.list_users()], ["new", "old"])

    def test_tracker_logs_are_per_user(self):
        self.db.add_tracker_log("u1", "journal", {"entry": "a"})
        log = self.db.add_tracker_log("u2", "journal", {"entry": "b"})

        self.assertFalse(self.db.delete_tracker_log("u1", log.id))
        self.assertTrue(self.db.delete_tracker_log("u2", log.id))


if __name__ == "__main__":
    unittest.main()
