# -*- coding: utf-8 -*-

from __future__ import annotations

import importlib
import shutil
import unittest
from datetime import datetime, timedelta, timezone

from fastapi.testclient import TestClient

from support import load_app, unique_name


class TestCredentialStore(unittest.TestCase):
    @classmethod
    def setUpClass(cls) -> None:
        cls._tmp = load_app()
        cls.storage = importlib.import_module("healthtrack.auth.storage")
        cls.errors = importlib.import_module("healthtrack.errors")
        cls.app_db = importlib.import_module("healthtrack.app_db")
        cls.settings = importlib.import_module("healthtrack.config").settings

    @classmethod
    def tearDownClass(cls) -> None:
        shutil.rmtree(cls._tmp, ignore_errors=True)

    def test_register_then_verify_returns_same_id(self) -> None:
        username = unique_name()
        user_id = self.storage.register(username, "secret1", "a@example.com", 41, "female")
        self.assertEqual(self.storage.verify(username, "secret1"), user_id)
        self.assertEqual(self.storage.verify(username, "secret1"), user_id)

    def test_password_is_never_stored_in_plaintext(self) -> None:
        username = unique_name()
        self.storage.register(username, "plaintext-pw", "b@example.com")
        with self.app_db.db_conn(self.settings.app_db_path) as conn:
            row = conn.execute("SELECT password_hash FROM users WHERE username = ?", (username,)).fetchone()
        self.assertNotIn("plaintext-pw", row["password_hash"])
        self.assertTrue(row["password_hash"].startswith("pbkdf2_sha256$"))

    def test_wrong_password_and_unknown_user_look_the_same(self) -> None:
        username = unique_name()
        self.storage.register(username, "right-password", "c@example.com")
        self.assertIsNone(self.storage.verify(username, "wrong-password"))
        self.assertIsNone(self.storage.verify(unique_name("ghost"), "right-password"))

    def test_register_requires_fields(self) -> None:
        with self.assertRaises(self.errors.ValidationError) as ctx:
            self.storage.register(unique_name(), "", "d@example.com")
        self.assertIn("password", ctx.exception.fields)
        with self.assertRaises(self.errors.ValidationError):
            self.storage.register("  ", "secret1", "d@example.com")
        with self.assertRaises(self.errors.ValidationError):
            self.storage.register(unique_name(), "secret1", None)

    def test_register_rejects_short_password(self) -> None:
        with self.assertRaises(self.errors.ValidationError) as ctx:
            self.storage.register(unique_name(), "12345", "e@example.com")
        self.assertIn("at least 6", ctx.exception.message)

    def test_register_duplicate_username_conflicts(self) -> None:
        username = unique_name()
        self.storage.register(username, "secret1", "f@example.com")
        with self.assertRaises(self.errors.ConflictError):
            self.storage.register(username, "another1", "g@example.com")

    def test_profile_excludes_password_hash(self) -> None:
        username = unique_name()
        user_id = self.storage.register(username, "secret1", "h@example.com", 25, "male")
        profile = self.storage.get_profile(user_id)
        self.assertEqual(profile, {"username": username, "email": "h@example.com", "age": 25, "gender": "male"})

    def test_demo_user_is_seeded_once(self) -> None:
        first = self.storage.ensure_demo_user()
        second = self.storage.ensure_demo_user()
        self.assertEqual(first, second)
        self.assertEqual(self.storage.verify("testuser", "password123"), first)


class TestSessions(unittest.TestCase):
    @classmethod
    def setUpClass(cls) -> None:
        cls._tmp = load_app()
        cls.storage = importlib.import_module("healthtrack.auth.storage")
        cls.sessions = importlib.import_module("healthtrack.auth.sessions")
        cls.errors = importlib.import_module("healthtrack.errors")

    @classmethod
    def tearDownClass(cls) -> None:
        shutil.rmtree(cls._tmp, ignore_errors=True)

    def _user(self) -> tuple:
        username = unique_name()
        password = "password123"
        user_id = self.storage.register(username, password, "s@example.com")
        return user_id, username, password

    def test_login_returns_token_bound_to_user(self) -> None:
        user_id, username, password = self._user()
        token = self.sessions.login(username, password)
        session = self.sessions.require_session(token)
        self.assertEqual(session.user_id, user_id)
        self.assertEqual(session.username, username)

    def test_login_failure_does_not_say_which_part_was_wrong(self) -> None:
        _, username, _ = self._user()
        with self.assertRaises(self.errors.AuthenticationError) as bad_password:
            self.sessions.login(username, "not-it")
        with self.assertRaises(self.errors.AuthenticationError) as bad_user:
            self.sessions.login(unique_name("ghost"), "not-it")
        self.assertEqual(bad_password.exception.message, bad_user.exception.message)

    def test_session_expires_after_absolute_lifetime(self) -> None:
        user_id, username, _ = self._user()
        t0 = datetime(2024, 1, 1, 8, 0, tzinfo=timezone.utc)
        token = self.sessions.create_session(user_id, username, now=t0)

        self.assertEqual(self.sessions.require_session(token, now=t0 + timedelta(hours=23)).user_id, user_id)
        with self.assertRaises(self.errors.AuthenticationError):
            self.sessions.require_session(token, now=t0 + timedelta(hours=25))

    def test_require_session_does_not_extend_expiry(self) -> None:
        user_id, username, _ = self._user()
        t0 = datetime(2024, 1, 1, 8, 0, tzinfo=timezone.utc)
        token = self.sessions.create_session(user_id, username, now=t0)
        before = self.sessions.get_session(token).expires_at
        self.sessions.require_session(token, now=t0 + timedelta(hours=12))
        self.assertEqual(self.sessions.get_session(token).expires_at, before)

    def test_unknown_or_missing_token_is_rejected(self) -> None:
        for token in (None, "", "no-such-token"):
            with self.assertRaises(self.errors.UnauthenticatedError):
                self.sessions.require_session(token)

    def test_logout_is_idempotent(self) -> None:
        _, username, password = self._user()
        token = self.sessions.login(username, password)
        self.sessions.logout(token)
        self.sessions.logout(token)
        self.sessions.logout(None)
        with self.assertRaises(self.errors.UnauthenticatedError):
            self.sessions.require_session(token)

    def test_concurrent_sessions_are_independent(self) -> None:
        _, username, password = self._user()
        phone = self.sessions.login(username, password)
        laptop = self.sessions.login(username, password)
        self.assertNotEqual(phone, laptop)
        self.sessions.logout(phone)
        self.assertEqual(self.sessions.require_session(laptop).username, username)

    def test_status_probe_never_raises(self) -> None:
        _, username, password = self._user()
        token = self.sessions.login(username, password)
        self.assertEqual(self.sessions.status("bogus"), {"authenticated": False})
        status = self.sessions.status(token)
        self.assertTrue(status["authenticated"])
        self.assertEqual(status["user"]["username"], username)

    def test_purge_removes_only_expired_sessions(self) -> None:
        user_id, username, _ = self._user()
        t0 = datetime(2024, 1, 1, tzinfo=timezone.utc)
        stale = self.sessions.create_session(user_id, username, now=t0)
        fresh = self.sessions.create_session(user_id, username, now=t0 + timedelta(hours=20))
        self.sessions.purge_expired_sessions(now=t0 + timedelta(hours=30))
        self.assertIsNone(self.sessions.get_session(stale))
        self.assertIsNotNone(self.sessions.get_session(fresh))


class TestAuthApi(unittest.TestCase):
    @classmethod
    def setUpClass(cls) -> None:
        cls._tmp = load_app()
        from healthtrack.api import app  # noqa: WPS433 (import inside test for env control)

        cls.app = app
        cls.settings = importlib.import_module("healthtrack.config").settings
        cls.sessions = importlib.import_module("healthtrack.auth.sessions")

    @classmethod
    def tearDownClass(cls) -> None:
        shutil.rmtree(cls._tmp, ignore_errors=True)

    def setUp(self) -> None:
        self.client = TestClient(self.app)

    def tearDown(self) -> None:
        self.client.close()

    def test_register_logs_in_and_sets_cookie(self) -> None:
        username = unique_name()
        resp = self.client.post(
            "/api/auth/register",
            json={"username": username, "password": "secret1", "email": "r@example.com", "age": "", "gender": ""},
        )
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body["message"], "Account created successfully!")
        self.assertEqual(body["user"]["username"], username)
        self.assertIn(self.settings.session_cookie_name, resp.cookies)

        resp = self.client.get("/api/user/profile")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"username": username, "email": "r@example.com", "age": None, "gender": None})

    def test_register_errors_are_400_with_error_body(self) -> None:
        resp = self.client.post("/api/auth/register", json={"username": unique_name(), "password": "secret1"})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {"error": "Username, password, and email are required"})

        username = unique_name()
        self.client.post("/api/auth/register", json={"username": username, "password": "secret1", "email": "x@y.z"})
        resp = TestClient(self.app).post(
            "/api/auth/register", json={"username": username, "password": "secret1", "email": "x@y.z"}
        )
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {"error": "Username already exists"})

    def test_login_seeded_user(self) -> None:
        resp = self.client.post("/api/auth/login", json={"username": "testuser", "password": "password123"})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["message"], "Login successful!")
        self.assertEqual(resp.json()["user"]["username"], "testuser")

        resp = self.client.get("/api/auth/status")
        self.assertEqual(resp.json()["authenticated"], True)

    def test_bad_login_same_response_for_unknown_user(self) -> None:
        wrong_pw = self.client.post("/api/auth/login", json={"username": "testuser", "password": "nope-nope"})
        unknown = self.client.post("/api/auth/login", json={"username": unique_name(), "password": "nope-nope"})
        self.assertEqual(wrong_pw.status_code, 400)
        self.assertEqual(wrong_pw.status_code, unknown.status_code)
        self.assertEqual(wrong_pw.json(), unknown.json())
        self.assertEqual(wrong_pw.json(), {"error": "Invalid username or password"})

    def test_protected_routes_require_session(self) -> None:
        for path in ("/api/user/profile", "/api/health/summary", "/api/health/workouts"):
            resp = self.client.get(path)
            self.assertEqual(resp.status_code, 401, path)
            self.assertEqual(resp.json(), {"error": "Authentication required"})

    def test_status_when_anonymous(self) -> None:
        resp = self.client.get("/api/auth/status")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"authenticated": False})

    def test_logout_twice_is_fine(self) -> None:
        self.client.post("/api/auth/login", json={"username": "testuser", "password": "password123"})
        first = self.client.post("/api/auth/logout")
        second = self.client.post("/api/auth/logout")
        self.assertEqual(first.status_code, 200)
        self.assertEqual(second.status_code, 200)
        self.assertEqual(second.json(), {"message": "Logout successful"})
        self.assertEqual(self.client.get("/api/user/profile").status_code, 401)

    def test_expired_session_is_rejected(self) -> None:
        storage = importlib.import_module("healthtrack.auth.storage")
        username = unique_name()
        user_id = storage.register(username, "secret1", "old@example.com")
        issued = datetime.now(timezone.utc) - timedelta(hours=25)
        token = self.sessions.create_session(user_id, username, now=issued)

        resp = self.client.get("/api/user/profile", headers={"Authorization": f"Bearer {token}"})
        self.assertEqual(resp.status_code, 401)

        fresh = self.sessions.create_session(user_id, username)
        resp = self.client.get("/api/user/profile", headers={"Authorization": f"Bearer {fresh}"})
        self.assertEqual(resp.status_code, 200)

    def test_unknown_api_route_is_404_json(self) -> None:
        resp = self.client.get("/api/does/not/exist")
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json(), {"error": "API endpoint not found"})

    def test_liveness_probe_is_public(self) -> None:
        resp = self.client.get("/api/health")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"ok": True})


if __name__ == "__main__":
    unittest.main()
