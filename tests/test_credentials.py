"""Tests for app.services.credentials.CredentialStore against an in-memory SQLite database."""

import unittest
from unittest.mock import patch

from app.core.errors import DuplicateEmail, InvalidCredentials
from app.core.security import verify_password
from app.services.credentials import TIMING_HASH, CredentialStore

from helpers import DatabaseTestCase


class TestCreate(DatabaseTestCase):
    """create hashes the password, assigns an id and applies server defaults."""

    def test_create_persists_user_with_hashed_password(self) -> None:
        user = self.create_user("Ana", "a@x.com", "pw1")
        self.assertIsNotNone(user.id)
        self.assertEqual(user.name, "Ana")
        self.assertEqual(user.email, "a@x.com")
        self.assertNotEqual(user.password_hash, "pw1")
        self.assertTrue(verify_password("pw1", user.password_hash))
        self.assertFalse(user.is_admin)
        self.assertFalse(user.is_locked)
        self.assertEqual(self.count_users(), 1)

    def test_email_is_normalized(self) -> None:
        user = self.create_user("Ana", "  A@X.Com ", "pw1")
        self.assertEqual(user.email, "a@x.com")

    def test_name_is_trimmed(self) -> None:
        user = self.create_user("  Ana  ", "a@x.com", "pw1")
        self.assertEqual(user.name, "Ana")

    def test_ids_are_distinct(self) -> None:
        first = self.create_user("Ana", "a@x.com", "pw1")
        second = self.create_user("Bo", "b@x.com", "pw2")
        self.assertNotEqual(first.id, second.id)

    def test_is_admin_only_when_requested(self) -> None:
        admin = self.create_user("Root", "root@x.com", "pw", is_admin=True)
        self.assertTrue(admin.is_admin)


class TestDuplicateEmail(DatabaseTestCase):
    """Duplicate emails are refused, case-insensitively, without touching the table."""

    def test_duplicate_email_raises_and_leaves_store_unchanged(self) -> None:
        self.create_user("Ana", "a@x.com", "pw1")
        with self.assertRaises(DuplicateEmail):
            self.create_user("Other", "a@x.com", "pw2")
        self.assertEqual(self.count_users(), 1)

    def test_duplicate_is_case_insensitive(self) -> None:
        self.create_user("Ana", "a@x.com", "pw1")
        with self.assertRaises(DuplicateEmail):
            self.create_user("Other", "A@X.COM", "pw2")
        self.assertEqual(self.count_users(), 1)

    def test_unique_index_catches_race_past_lookup(self) -> None:
        """A concurrent signup that passed the lookup still fails at commit."""
        self.create_user("Ana", "a@x.com", "pw1")
        db = self.open_session()
        store = CredentialStore(db)
        with patch.object(store, "find_by_email", return_value=None):
            with self.assertRaises(DuplicateEmail):
                store.create("Racer", "a@x.com", "pw2")
        self.assertEqual(self.count_users(), 1)
        # Session is still usable after the rollback.
        self.assertEqual(len(store.list_users()), 1)


class TestLookup(DatabaseTestCase):
    def test_find_by_email_is_case_insensitive(self) -> None:
        created = self.create_user("Ana", "a@x.com", "pw1")
        store = CredentialStore(self.open_session())
        found = store.find_by_email("A@x.COM ")
        self.assertIsNotNone(found)
        self.assertEqual(found.id, created.id)

    def test_find_by_email_missing(self) -> None:
        store = CredentialStore(self.open_session())
        self.assertIsNone(store.find_by_email("nobody@x.com"))
        self.assertIsNone(store.find_by_email(""))

    def test_get_by_id(self) -> None:
        created = self.create_user("Ana", "a@x.com", "pw1")
        store = CredentialStore(self.open_session())
        self.assertEqual(store.get(created.id).email, "a@x.com")
        self.assertIsNone(store.get(created.id + 100))


class TestAuthenticate(DatabaseTestCase):
    """authenticate: same error for unknown email and wrong password; lock state not checked."""

    def setUp(self) -> None:
        super().setUp()
        self.user = self.create_user("Ana", "a@x.com", "pw1")
        self.store = CredentialStore(self.open_session())

    def test_valid_credentials(self) -> None:
        user = self.store.authenticate("A@X.com", "pw1")
        self.assertEqual(user.id, self.user.id)

    def test_wrong_password_and_unknown_email_raise_same_error(self) -> None:
        with self.assertRaises(InvalidCredentials) as wrong_pw:
            self.store.authenticate("a@x.com", "nope")
        with self.assertRaises(InvalidCredentials) as unknown:
            self.store.authenticate("ghost@x.com", "pw1")
        self.assertEqual(wrong_pw.exception.message, unknown.exception.message)
        self.assertEqual(wrong_pw.exception.message, "Invalid email or password")

    def test_unknown_email_still_runs_a_password_check(self) -> None:
        with patch("app.services.credentials.verify_password", return_value=False) as verify:
            with self.assertRaises(InvalidCredentials):
                self.store.authenticate("ghost@x.com", "pw1")
        verify.assert_called_once_with("pw1", TIMING_HASH)

    def test_unknown_email_does_not_hash_on_first_failure(self) -> None:
        with patch("app.services.credentials.hash_password") as hash_pw:
            with self.assertRaises(InvalidCredentials):
                self.store.authenticate("ghost@x.com", "pw1")
        hash_pw.assert_not_called()

    def test_locked_user_still_authenticates(self) -> None:
        self.store.set_locked(self.store.get(self.user.id), True)
        user = self.store.authenticate("a@x.com", "pw1")
        self.assertTrue(user.is_locked)


class TestAccountFlags(DatabaseTestCase):
    def test_set_locked_and_admin_persist(self) -> None:
        created = self.create_user("Ana", "a@x.com", "pw1")
        store = CredentialStore(self.open_session())
        store.set_locked(store.get(created.id), True)
        store.set_admin(store.get(created.id), True)

        fresh = CredentialStore(self.open_session()).get(created.id)
        self.assertTrue(fresh.is_locked)
        self.assertTrue(fresh.is_admin)

    def test_list_users_ordered_by_id(self) -> None:
        self.create_user("Bo", "b@x.com", "pw")
        self.create_user("Ana", "a@x.com", "pw")
        emails = [u.email for u in CredentialStore(self.open_session()).list_users()]
        self.assertEqual(emails, ["b@x.com", "a@x.com"])


if __name__ == "__main__":
    unittest.main()
