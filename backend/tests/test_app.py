import unittest
from datetime import datetime, timedelta, timezone

from dialectbase.auth.service import AuthService
from dialectbase.config import get_settings
from dialectbase.dependencies import get_lookup_chain
from dialectbase.users.models import Subscription, UserRow
from helpers import make_client, make_store, recording_transport

NEW_USER = {"name": "Kavya", "age": 24, "email": "kavya@example.com", "password": "s3cret-pass"}


class AuthApiTests(unittest.TestCase):
    def setUp(self):
        self.store = make_store()
        self.client = make_client(self.store)

    def test_register_returns_token_and_public_user(self):
        response = self.client.post("/api/auth/register", json=NEW_USER)
        self.assertEqual(response.status_code, 201)
        payload = response.json()
        self.assertEqual(payload["status"], "success")
        self.assertTrue(payload["token"])
        user = payload["data"]["user"]
        self.assertEqual(user["email"], "kavya@example.com")
        self.assertEqual(user["subscription"], "free")
        self.assertNotIn("password", user)

    def test_register_duplicate_email(self):
        self.client.post("/api/auth/register", json=NEW_USER)
        response = self.client.post("/api/auth/register", json=NEW_USER)
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"status": "error", "message": "Email already exists"})

    def test_register_missing_fields(self):
        response = self.client.post("/api/auth/register", json={"email": "a@b.com"})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["status"], "error")

    def test_register_rejects_malformed_age(self):
        response = self.client.post("/api/auth/register", json={**NEW_USER, "age": "old"})
        self.assertEqual(response.status_code, 400)

    def test_login_includes_search_count(self):
        self.client.post("/api/auth/register", json=NEW_USER)
        response = self.client.post(
            "/api/auth/login", json={"email": NEW_USER["email"], "password": NEW_USER["password"]}
        )
        self.assertEqual(response.status_code, 200)
        user = response.json()["data"]["user"]
        self.assertEqual(user["searchesThisWeek"], 0)
        self.assertNotIn("password", user)

    def test_login_errors_are_byte_identical(self):
        self.client.post("/api/auth/register", json=NEW_USER)
        wrong_password = self.client.post(
            "/api/auth/login", json={"email": NEW_USER["email"], "password": "wrong"}
        )
        unknown_email = self.client.post(
            "/api/auth/login", json={"email": "nobody@example.com", "password": "wrong"}
        )
        self.assertEqual(wrong_password.status_code, 401)
        self.assertEqual(unknown_email.status_code, 401)
        self.assertEqual(wrong_password.content, unknown_email.content)

    def test_login_missing_fields(self):
        response = self.client.post("/api/auth/login", json={"email": NEW_USER["email"]})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], "Please provide email and password")

    def test_me_requires_token(self):
        self.assertEqual(self.client.get("/api/auth/me").status_code, 401)

        token = self.client.post("/api/auth/register", json=NEW_USER).json()["token"]
        response = self.client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["data"]["user"]["email"], NEW_USER["email"])


class SearchApiTests(unittest.TestCase):
    def setUp(self):
        self.store = make_store()
        self.client = make_client(self.store)
        self.token = self.client.post("/api/auth/register", json=NEW_USER).json()["token"]
        self.user_id = self.store.find_by_email(NEW_USER["email"]).id

    def _search(self, **extra):
        body = {"word": "vanakkam", "language": "tamil", **extra}
        return self.client.post("/api/search", json=body)

    def test_anonymous_search_is_unmetered(self):
        for _ in range(12):
            response = self._search()
            self.assertEqual(response.status_code, 200)
        data = response.json()["data"]
        self.assertEqual(data["source"], "local-fallback")
        self.assertEqual(data["meaning"], "Hello/Welcome")
        self.assertIsNone(data["searchesLeft"])
        self.assertEqual(self.store.find_by_id(self.user_id).searches_this_week, 0)

    def test_free_user_quota(self):
        for n in range(1, 11):
            response = self._search(token=self.token)
            self.assertEqual(response.status_code, 200)
            self.assertEqual(response.json()["data"]["searchesLeft"], 10 - n)

        denied = self._search(token=self.token)
        self.assertEqual(denied.status_code, 403)
        self.assertEqual(
            denied.json(),
            {"status": "error", "message": "Free search limit reached. Upgrade to premium."},
        )
        self.assertEqual(self.store.find_by_id(self.user_id).searches_this_week, 10)

    def test_bearer_header_is_accepted(self):
        response = self.client.post(
            "/api/search",
            json={"word": "nandri", "language": "tamil"},
            headers={"Authorization": f"Bearer {self.token}"},
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["data"]["searchesLeft"], 9)

    def test_exhausted_user_regains_access_after_a_week(self):
        self.store.update_search_count(self.user_id, 10)
        stale = datetime.now(timezone.utc) - timedelta(days=8)
        with self.store.Session() as session:
            row = session.get(UserRow, self.user_id)
            row.last_search_reset = stale.replace(tzinfo=None)
            session.commit()

        response = self._search(token=self.token)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["data"]["searchesLeft"], 9)

    def test_premium_user_is_unlimited(self):
        self.store.set_subscription(self.user_id, Subscription.PREMIUM)
        self.store.update_search_count(self.user_id, 10)
        response = self._search(token=self.token)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["data"]["searchesLeft"], "unlimited")

    def test_invalid_token(self):
        response = self._search(token="garbage")
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["message"], "Invalid token")

    def test_missing_word_or_language(self):
        response = self.client.post("/api/search", json={"word": "vanakkam"})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], "Word and language are required")

    def test_unsupported_language_skips_network(self):
        calls = []
        client = make_client(self.store, recording_transport({}, calls))
        response = client.post("/api/search", json={"word": "bonjour", "language": "french"})
        self.assertEqual(response.status_code, 404)
        self.assertIn("Supported languages", response.json()["message"])
        self.assertEqual(calls, [])

    def test_word_not_found(self):
        response = self.client.post("/api/search", json={"word": "zzzz", "language": "bengali"})
        self.assertEqual(response.status_code, 404)
        self.assertIn("zzzz", response.json()["message"])

    def test_word_not_found_does_not_use_quota(self):
        response = self._search(word="zzzz", language="bengali", token=self.token)
        self.assertEqual(response.status_code, 404)
        self.assertEqual(self.store.find_by_id(self.user_id).searches_this_week, 0)

    def test_token_for_deleted_user(self):
        with self.store.Session() as session:
            session.delete(session.get(UserRow, self.user_id))
            session.commit()

        response = self._search(token=self.token)
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json(), {"status": "error", "message": "User not found"})

    def test_expired_token(self):
        auth = AuthService(self.store, secret=get_settings().signing_secret, bcrypt_rounds=4)
        expired = auth.issue_token(self.user_id, now=datetime.now(timezone.utc) - timedelta(days=91))

        response = self._search(token=expired)
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["message"], "Token has expired")
        self.assertEqual(self.store.find_by_id(self.user_id).searches_this_week, 0)

    def test_primary_api_result(self):
        calls = []
        transport = recording_transport(
            {"wiktionary.test": (200, {"te": [{"definitions": [{"definition": "water"}]}]})}, calls
        )
        client = make_client(self.store, transport)
        response = client.post("/api/search", json={"word": "neeru", "language": "telugu"})
        data = response.json()["data"]
        self.assertEqual(data["source"], "primary-api")
        self.assertEqual(data["meaning"], "water")
        self.assertEqual(data["note"], "")

    def test_unexpected_error_is_generic_500(self):
        class BrokenChain:
            async def search(self, word, language):
                raise RuntimeError("db password is hunter2")

        self.client.app.dependency_overrides[get_lookup_chain] = lambda: BrokenChain()
        response = self._search()
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"status": "error", "message": "Internal server error"})


class MiscApiTests(unittest.TestCase):
    def setUp(self):
        self.client = make_client(make_store())

    def test_languages(self):
        response = self.client.get("/api/languages")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            response.json()["data"],
            ["tamil", "telugu", "hindi", "tulu", "kannada", "malayalam", "bengali"],
        )

    def test_self_test_uses_local_table_when_offline(self):
        response = self.client.get("/api/test")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["knowledgeBaseTest"]["source"], "local-fallback")

    def test_health(self):
        self.assertEqual(self.client.get("/health").json()["status"], "healthy")

    def test_allowed_hosts_rejects_other_hosts(self):
        settings = get_settings()
        settings.allowed_hosts = "api.example.com, localhost"
        try:
            client = make_client(make_store())
        finally:
            settings.allowed_hosts = ""

        self.assertEqual(client.get("/health").status_code, 400)
        ok = client.get("/health", headers={"host": "api.example.com"})
        self.assertEqual(ok.status_code, 200)


if __name__ == "__main__":
    unittest.main()
