"""Tests for the credential store and token service."""

from datetime import UTC, datetime, timedelta
from unittest.mock import MagicMock, patch

import pytest
from jose import jwt
from sqlalchemy.exc import IntegrityError, OperationalError

from src.errors import (
    ConflictError,
    InvalidTokenError,
    StoreError,
    UnauthenticatedError,
    ValidationError,
)
from src.models.dashboard import Dashboard
from src.models.user import User
from src.services.auth import CredentialStore, TokenService


@pytest.fixture
def store(db, pwd_context):
    return CredentialStore(db, pwd_context=pwd_context)


class TestRegister:
    """Tests for CredentialStore.register."""

    def test_creates_user_and_empty_dashboard(self, store, db):
        user = store.register("bob@example.com", "hunter22")

        assert user.id is not None
        assert user.email == "bob@example.com"
        assert user.created_at is not None
        dashboard = db.query(Dashboard).filter(Dashboard.user_id == user.id).one()
        assert dashboard.widgets == []

    def test_stores_hash_not_plaintext(self, store):
        user = store.register("carol@example.com", "hunter22")

        assert user.password_hash != "hunter22"
        assert user.password_hash.startswith("$2")
        assert store.verify_password("hunter22", user.password_hash)

    def test_duplicate_email(self, store, db):
        store.register("dup@example.com", "password1")

        with pytest.raises(ConflictError):
            store.register("dup@example.com", "different-password")

        assert db.query(User).filter(User.email == "dup@example.com").count() == 1

    def test_email_is_case_sensitive_as_stored(self, store):
        store.register("Case@example.com", "password1")
        user = store.register("case@example.com", "password1")

        assert user.email == "case@example.com"

    @pytest.mark.parametrize(
        ("email", "password"),
        [(None, "password1"), ("x@example.com", None), ("", "password1"), ("x@example.com", "")],
    )
    def test_missing_fields(self, store, email, password):
        with pytest.raises(ValidationError, match="required"):
            store.register(email, password)

    def test_short_password_never_reaches_store(self):
        db = MagicMock()
        store = CredentialStore(db)

        with pytest.raises(ValidationError, match="at least 6"):
            store.register("short@example.com", "12345")

        db.query.assert_not_called()
        db.add.assert_not_called()
        db.commit.assert_not_called()

    def test_six_character_password_accepted(self, store):
        user = store.register("six@example.com", "123456")
        assert user.id is not None


class TestRegisterStoreFailures:
    """Tests for CredentialStore.register when the insert itself fails."""

    @pytest.fixture
    def mock_db(self):
        mock_db = MagicMock()
        # No existing user, so the insert is attempted
        mock_db.query.return_value.filter.return_value.first.return_value = None
        return mock_db

    def test_concurrent_duplicate_email(self, mock_db, pwd_context):
        mock_db.flush.side_effect = IntegrityError(
            "INSERT", {}, Exception("UNIQUE constraint failed: users.email")
        )

        store = CredentialStore(mock_db, pwd_context=pwd_context)

        with pytest.raises(ConflictError, match="already exists"):
            store.register("race@example.com", "password1")

        mock_db.rollback.assert_called_once()
        mock_db.commit.assert_not_called()

    def test_other_constraint_violation(self, mock_db, pwd_context):
        mock_db.flush.side_effect = IntegrityError(
            "INSERT", {}, Exception("NOT NULL constraint failed: users.password_hash")
        )

        store = CredentialStore(mock_db, pwd_context=pwd_context)

        with pytest.raises(StoreError):
            store.register("race@example.com", "password1")

        mock_db.rollback.assert_called_once()

    def test_connection_failure(self, mock_db, pwd_context):
        mock_db.commit.side_effect = OperationalError("COMMIT", {}, Exception("server closed"))

        store = CredentialStore(mock_db, pwd_context=pwd_context)

        with pytest.raises(StoreError, match="Error registering user"):
            store.register("race@example.com", "password1")

        mock_db.rollback.assert_called_once()


class TestAuthenticate:
    """Tests for CredentialStore.authenticate and lookups."""

    def test_valid_credentials(self, store):
        created = store.register("dave@example.com", "password1")

        user = store.authenticate("dave@example.com", "password1")

        assert user.id == created.id

    def test_wrong_password(self, store):
        store.register("erin@example.com", "password1")

        with pytest.raises(UnauthenticatedError, match="Invalid email or password"):
            store.authenticate("erin@example.com", "password2")

    def test_unknown_email(self, store):
        with pytest.raises(UnauthenticatedError, match="Invalid email or password"):
            store.authenticate("nobody@example.com", "password1")

    def test_unknown_email_still_spends_hash_time(self, store, pwd_context):
        with patch.object(pwd_context, "dummy_verify") as dummy_verify:
            with pytest.raises(UnauthenticatedError):
                store.authenticate("nobody@example.com", "password1")

        dummy_verify.assert_called_once()

    def test_known_email_skips_dummy_hash(self, store, pwd_context):
        store.register("hank@example.com", "password1")

        with patch.object(pwd_context, "dummy_verify") as dummy_verify:
            with pytest.raises(UnauthenticatedError):
                store.authenticate("hank@example.com", "password2")

        dummy_verify.assert_not_called()

    def test_find_by_email(self, store):
        store.register("frank@example.com", "password1")

        assert store.find_by_email("frank@example.com") is not None
        assert store.find_by_email("missing@example.com") is None

    def test_verify_password_with_garbage_hash(self, store):
        assert store.verify_password("password1", "not-a-hash") is False


class TestTokenService:
    """Tests for TokenService."""

    start = datetime(2026, 1, 1, 12, 0, tzinfo=UTC)

    def test_issue_then_validate(self):
        service = TokenService("secret")
        token = service.issue(42, "grace@example.com")

        claims = service.validate(token)

        assert claims.user_id == 42
        assert claims.email == "grace@example.com"
        assert claims.expires_at - claims.issued_at == timedelta(days=7)

    def test_valid_inside_window(self):
        service = TokenService("secret")
        token = service.issue(1, "a@example.com", now=self.start)

        claims = service.validate(token, now=self.start + timedelta(days=6, hours=23))

        assert claims.user_id == 1

    def test_expired_after_seven_days(self):
        service = TokenService("secret")
        token = service.issue(1, "a@example.com", now=self.start)

        with pytest.raises(InvalidTokenError, match="expired"):
            service.validate(token, now=self.start + timedelta(days=7, seconds=1))

    def test_expired_against_wall_clock(self):
        service = TokenService("secret")
        token = service.issue(1, "a@example.com", now=datetime.now(UTC) - timedelta(days=8))

        with pytest.raises(InvalidTokenError):
            service.validate(token)

    def test_wrong_secret(self):
        token = TokenService("other-secret").issue(1, "a@example.com")

        with pytest.raises(InvalidTokenError):
            TokenService("secret").validate(token)

    def test_malformed_token(self):
        with pytest.raises(InvalidTokenError):
            TokenService("secret").validate("not.a.token")

    def test_missing_claims(self):
        token = jwt.encode({"sub": "1"}, "secret", algorithm="HS256")

        with pytest.raises(InvalidTokenError, match="claims"):
            TokenService("secret").validate(token)
