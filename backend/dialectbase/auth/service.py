import logging
from datetime import datetime, timedelta, timezone

import bcrypt
from jose import ExpiredSignatureError, JWTError, jwt

from dialectbase.errors import (
    DuplicateEmail,
    ExpiredToken,
    InvalidCredentials,
    InvalidToken,
    ValidationError,
)
from dialectbase.users.models import User
from dialectbase.users.store import UserStore

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
BCRYPT_MAX_BYTES = 72

# Per cost factor; checked against when the email is unknown
_dummy_hashes: dict[int, str] = {}


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


class AuthService:
    """Password hashing, token issuance and verification on top of the user store."""

    def __init__(
        self,
        store: UserStore,
        secret: str,
        expires_days: int = 90,
        bcrypt_rounds: int = 12,
    ):
        self.store = store
        self.secret = secret
        self.expires = timedelta(days=expires_days)
        self.bcrypt_rounds = bcrypt_rounds

    # ═══════════════════════════════════════
    # Passwords
    # ═══════════════════════════════════════

    def hash_password(self, password: str) -> str:
        salt = bcrypt.gensalt(rounds=self.bcrypt_rounds)
        return bcrypt.hashpw(_password_bytes(password), salt).decode("utf-8")

    def verify_password(self, password: str, hashed: str) -> bool:
        try:
            return bcrypt.checkpw(_password_bytes(password), hashed.encode("utf-8"))
        except ValueError:
            logger.warning("Stored password hash is malformed")
            return False

    def _dummy_hash(self) -> str:
        if self.bcrypt_rounds not in _dummy_hashes:
            _dummy_hashes[self.bcrypt_rounds] = self.hash_password("not-a-real-password")
        return _dummy_hashes[self.bcrypt_rounds]

    # ═══════════════════════════════════════
    # Tokens
    # ═══════════════════════════════════════

    def issue_token(self, user_id: int, now: datetime | None = None) -> str:
        now = now or datetime.now(timezone.utc)
        claims = {
            "id": user_id,
            "iat": int(now.timestamp()),
            "exp": int((now + self.expires).timestamp()),
        }
        return jwt.encode(claims, self.secret, algorithm=ALGORITHM)

    def verify_token(self, token: str) -> int:
        """Return the user id encoded in ``token``."""
        try:
            claims = jwt.decode(token, self.secret, algorithms=[ALGORITHM])
        except ExpiredSignatureError:
            raise ExpiredToken()
        except JWTError:
            raise InvalidToken()
        user_id = claims.get("id")
        if not isinstance(user_id, int):
            raise InvalidToken()
        return user_id

    # ═══════════════════════════════════════
    # Flows
    # ═══════════════════════════════════════

    def register(self, name: str, age: int, email: str, password: str) -> tuple[str, User]:
        name = (name or "").strip()
        email = (email or "").strip().lower()
        if not name or not email or not password or age is None:
            raise ValidationError("Please provide name, age, email and password")
        if age < 0:
            raise ValidationError("Age must be a non-negative number")
        if "@" not in email:
            raise ValidationError("Please provide a valid email")

        if self.store.find_by_email(email):
            raise DuplicateEmail()
        user = self.store.create_user(name, age, email, self.hash_password(password))
        return self.issue_token(user.id), user

    def login(self, email: str, password: str) -> tuple[str, User]:
        email = (email or "").strip().lower()
        user = self.store.find_by_email(email)
        # Unknown email and wrong password must be indistinguishable, in timing too
        if user is None:
            self.verify_password(password, self._dummy_hash())
            raise InvalidCredentials()
        if not self.verify_password(password, user.password):
            raise InvalidCredentials()
        return self.issue_token(user.id), user
