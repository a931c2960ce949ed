import unittest
from unittest.mock import MagicMock, patch

from fastapi.testclient import TestClient
from firebase_admin import auth

from backend.app import create_app
from backend.db import InMemoryDbClient
from backend.dependencies import get_db_client
from scripts import grant_admin
from scripts.grant_admin import set_admin


@patch("backend.auth.ensure_firebase_app")
class IdTokenTests(unittest.TestCase):
    def setUp(self):
        self.client = TestClient(create_app())
        self.db = get_db_client()
        if isinstance(self.db, InMemoryDbClient):
            self.db.reset()

    @patch("backend.auth.auth.verify_id_token")
    def test_valid_token(self, mock_verify, _ensure_app):
        mock_verify.return_value = {
            "uid": "user-9",
            "email": "pat@example.com",
            "name": "Pat",
            "picture": "https://example.com/pat.png",
        }

        response = self.client.get(
            "/api/account/profile", headers={"Authorization": "Bearer good-token"}
        )

        self.assertEqual(response.status_code, 200, response.text)
        mock_verify.assert_called_once_with("good-token")
        self.assertEqual(response.json()["display_name"], "Pat")
        self.assertEqual(response.json()["photo_url"], "https://example.com/pat.png")

    @patch("backend.auth.auth.verify_id_token")
    def test_invalid_token(self, mock_verify, _ensure_app):
        mock_verify.side_effect = auth.InvalidIdTokenError("bad token")

        response = self.client.get(
            "/api/account/profile", headers={"Authorization": "Bearer bad-token"}
        )

        self.assertEqual(response.status_code, 401)

    def test_missing_token(self, _ensure_app):
        response = self.client.get("/api/account/profile")
        self.assertEqual(response.status_code, 401)


class GrantAdminTests(unittest.TestCase):
    def setUp(self):
        self.db = InMemoryDbClient()
        self.db.create_user("u1", {"email": "ops@example.com", "is_admin": False})

    def test_grant_and_revoke(self):
        self.assertTrue(set_admin(self.db, "ops@example.com"))
        self.assertTrue(self.db.get_user("u1")["is_admin"])

        self.assertTrue(set_admin(self.db, "ops@example.com", is_admin=False))
        self.assertFalse(self.db.get_user("u1")["is_admin"])

    def test_dry_run_does_not_write(self):
        set_admin(self.db, "ops@example.com", dry_run=True)
        self.assertFalse(self.db.get_user("u1")["is_admin"])

    def test_unknown_email(self):
        self.assertFalse(set_admin(self.db, "nobody@example.com"))

    def test_cli_refuses_in_memory_backend(self):
        with patch.object(grant_admin, "get_db_client", return_value=self.db), patch(
            "sys.argv", ["grant_admin.py", "ops@example.com"]
        ):
            self.assertEqual(grant_admin.main(), 2)
        self.assertFalse(self.db.get_user("u1")["is_admin"])

    def test_cli_updates_configured_backend(self):
        db = MagicMock()
        db.find_user_by_email.return_value = ("u1", {"is_admin": False})
        with patch.object(grant_admin, "get_db_client", return_value=db), patch(
            "sys.argv", ["grant_admin.py", "ops@example.com"]
        ):
            self.assertEqual(grant_admin.main(), 0)
        db.update_user.assert_called_once_with("u1", {"is_admin": True})


if __name__ == "__main__":
    unittest.main()
