"""
Keep API — Admin Registration & Login
=======================================

    POST /register   create an admin user (201)
    POST /login      exchange username/password for a bearer token

Login failures never say whether the username or the password was wrong.
"""

import logging

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from keep_api.database import get_db_session
from keep_api.schemas.auth import Credentials, RegisterResponse, TokenResponse
from keep_api.schemas.common import ErrorResponse
from keep_api.security.tokens import TokenService
from keep_api.services.credential_store import CredentialStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Auth"])


def get_token_service(request: Request) -> TokenService:
    """The TokenService built once by the app factory."""
    return request.app.state.token_service


def get_credential_store(request: Request) -> CredentialStore:
    """The CredentialStore built by the app factory (work factor from its settings)."""
    return request.app.state.credential_store


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"description": "Username already exists", "model": ErrorResponse}},
    summary="Register an admin user",
)
async def register(
    payload: Credentials,
    db: AsyncSession = Depends(get_db_session),
    store: CredentialStore = Depends(get_credential_store),
) -> RegisterResponse:
    user = await store.register(db, payload.username, payload.password)
    return RegisterResponse(id=user.id, username=user.username)


@router.post(
    "/login",
    response_model=TokenResponse,
    responses={401: {"description": "Invalid credentials", "model": ErrorResponse}},
    summary="Log in and receive a bearer token",
)
async def login(
    payload: Credentials,
    db: AsyncSession = Depends(get_db_session),
    token_service: TokenService = Depends(get_token_service),
    store: CredentialStore = Depends(get_credential_store),
) -> TokenResponse:
    user = await store.authenticate(db, payload.username, payload.password)
    token = token_service.issue(user.id, user.username)
    logger.info("Token issued for user %s (ttl=%ds)", user.id, token_service.ttl_seconds)
    return TokenResponse(token=token)
