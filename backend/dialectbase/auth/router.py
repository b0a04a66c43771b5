import logging

from fastapi import APIRouter, Depends, Request

from dialectbase.auth.dependencies import require_user
from dialectbase.auth.schemas import LoginRequest, RegisterRequest
from dialectbase.auth.service import AuthService
from dialectbase.dependencies import get_auth_service
from dialectbase.errors import DialectBaseError, InternalError, ValidationError
from dialectbase.middleware import auth_limit, limiter
from dialectbase.users.models import User

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/register", status_code=201)
@limiter.limit(auth_limit)
def register(
    request: Request,
    req: RegisterRequest,
    auth: AuthService = Depends(get_auth_service),
):
    if not req.name or req.age is None or not req.email or not req.password:
        raise ValidationError("Please provide name, age, email and password")

    try:
        token, user = auth.register(req.name, req.age, req.email, req.password)
    except DialectBaseError:
        raise
    except Exception:
        logger.exception("Registration failed")
        raise InternalError()

    return {"status": "success", "token": token, "data": {"user": user.public()}}


@router.post("/login")
@limiter.limit(auth_limit)
def login(
    request: Request,
    req: LoginRequest,
    auth: AuthService = Depends(get_auth_service),
):
    if not req.email or not req.password:
        raise ValidationError("Please provide email and password")

    try:
        token, user = auth.login(req.email, req.password)
    except DialectBaseError:
        raise
    except Exception:
        logger.exception("Login failed")
        raise InternalError()

    return {
        "status": "success",
        "token": token,
        "data": {"user": user.public(include_searches=True)},
    }


@router.get("/me")
def get_me(user: User = Depends(require_user)):
    """Current user profile, including this week's search count."""
    return {"status": "success", "data": {"user": user.public(include_searches=True)}}
