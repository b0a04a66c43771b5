from fastapi import Depends, Header
from typing import Optional
import logging

from dialectbase.auth.service import AuthService
from dialectbase.dependencies import get_auth_service, get_user_store
from dialectbase.errors import InvalidToken, UserNotFound
from dialectbase.users.models import User
from dialectbase.users.store import UserStore

logger = logging.getLogger(__name__)


def bearer_token(authorization: Optional[str] = Header(None)) -> Optional[str]:
    """Extract the token from an ``Authorization: Bearer`` header, if any."""
    if not authorization or not authorization.startswith("Bearer "):
        return None
    token = authorization.split(" ", 1)[1].strip()
    return token or None


def load_user(token: str, auth: AuthService, store: UserStore) -> User:
    """Verify ``token`` and fetch its user. Raises on a bad token or a missing user."""
    user_id = auth.verify_token(token)
    user = store.find_by_id(user_id)
    if user is None:
        logger.warning(f"Token for unknown user {user_id}")
        raise UserNotFound()
    return user


def require_user(
    token: Optional[str] = Depends(bearer_token),
    auth: AuthService = Depends(get_auth_service),
    store: UserStore = Depends(get_user_store),
) -> User:
    """Require an authenticated user; raises 401 if not logged in."""
    if token is None:
        raise InvalidToken("Authentication required")
    return load_user(token, auth, store)
