"""Authentication services: credential storage and JWT session tokens."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from src.errors import (
    ConflictError,
    InvalidTokenError,
    StoreError,
    UnauthenticatedError,
    ValidationError,
    violates,
)
from src.models.dashboard import Dashboard
from src.models.user import User

logger = logging.getLogger(__name__)

DEFAULT_TOKEN_LIFETIME = timedelta(days=7)


def build_password_context(rounds: int = 10) -> CryptContext:
    """Create the bcrypt hashing context with the given work factor."""
    return CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)


class CredentialStore:
    """Durable user identities and password hashes."""

    def __init__(
        self,
        db: Session,
        pwd_context: CryptContext | None = None,
        password_min_length: int = 6,
    ):
        self.db = db
        self.pwd_context = pwd_context or build_password_context()
        self.password_min_length = password_min_length

    def hash_password(self, password: str) -> str:
        """Hash a password."""
        return self.pwd_context.hash(password)

    def verify_password(self, plain_password: str, hashed_password: str) -> bool:
        """Verify a password against its hash."""
        try:
            return self.pwd_context.verify(plain_password, hashed_password)
        except (ValueError, TypeError):
            # Unrecognized or corrupted hash
            return False

    def find_by_email(self, email: str) -> User | None:
        """Get a user by email."""
        return self.db.query(User).filter(User.email == email).first()

    def register(self, email: str | None, password: str | None) -> User:
        """Create a new user together with an empty dashboard.

        Raises:
            ValidationError: email or password missing, or password too short.
            ConflictError: the email is already registered.
        """
        if not email or not password:
            raise ValidationError("Email and password are required")
        if len(password) < self.password_min_length:
            raise ValidationError(
                f"Password must be at least {self.password_min_length} characters long"
            )

        if self.find_by_email(email):
            raise ConflictError("User with this email already exists")

        user = User(email=email, password_hash=self.hash_password(password))
        try:
            self.db.add(user)
            self.db.flush()
            self.db.add(Dashboard(user_id=user.id, widgets=[]))
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            # Lost a race with a concurrent registration for the same email
            if violates(e, "email"):
                raise ConflictError("User with this email already exists") from e
            logger.error(f"Registration failed for {email}: {e}")
            raise StoreError("Error registering user") from e
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Registration failed for {email}: {e}")
            raise StoreError("Error registering user") from e

        self.db.refresh(user)
        logger.info(f"Registered user {user.id}")
        return user

    def authenticate(self, email: str | None, password: str | None) -> User:
        """Authenticate a user by email and password."""
        if not email or not password:
            raise ValidationError("Email and password are required")

        user = self.find_by_email(email)
        if user is None:
            # Burn the same bcrypt time as a real check
            self.pwd_context.dummy_verify()
        if user is None or not self.verify_password(password, user.password_hash):
            logger.info("Failed login attempt")
            raise UnauthenticatedError("Invalid email or password")
        return user


@dataclass(frozen=True)
class TokenClaims:
    """Identity and validity window carried by a session token."""

    user_id: int
    email: str
    issued_at: datetime
    expires_at: datetime


class TokenService:
    """Issues and validates stateless signed session tokens."""

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        lifetime: timedelta = DEFAULT_TOKEN_LIFETIME,
    ):
        self.secret = secret
        self.algorithm = algorithm
        self.lifetime = lifetime

    def issue(self, user_id: int, email: str, now: datetime | None = None) -> str:
        """Create a JWT access token."""
        issued_at = now or datetime.now(UTC)
        to_encode = {
            "sub": str(user_id),
            "email": email,
            "iat": int(issued_at.timestamp()),
            "exp": int((issued_at + self.lifetime).timestamp()),
        }
        return jwt.encode(to_encode, self.secret, algorithm=self.algorithm)

    def validate(self, token: str, now: datetime | None = None) -> TokenClaims:
        """Decode a token and check its signature, claims and expiry.

        Expiry is checked against ``now`` (defaults to the current time) so
        the validity window can be evaluated at any instant.
        """
        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"verify_exp": False},
            )
        except JWTError as e:
            raise InvalidTokenError("Invalid token") from e

        try:
            claims = TokenClaims(
                user_id=int(payload["sub"]),
                email=str(payload["email"]),
                issued_at=datetime.fromtimestamp(int(payload["iat"]), UTC),
                expires_at=datetime.fromtimestamp(int(payload["exp"]), UTC),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise InvalidTokenError("Malformed token claims") from e

        current = now or datetime.now(UTC)
        if current > claims.expires_at:
            raise InvalidTokenError("Token has expired")
        return claims
