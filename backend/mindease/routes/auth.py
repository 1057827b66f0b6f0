"""
MindEase Backend — Auth Route Handlers
========================================

What:  POST /auth/register and POST /auth/login.
How:   Parse the JSON body, delegate to AccountService, return its model.
       Errors are raised as application exceptions and formatted by the
       global handlers in main.py.
"""

import logging

from fastapi import APIRouter, Depends

from mindease.database import get_store
from mindease.schemas.account import LoginRequest, LoginResponse, RegisterRequest
from mindease.schemas.common import ErrorResponse, MessageResponse
from mindease.services.account_service import account_service
from mindease.storage.base import DataStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post(
    "/register",
    status_code=201,
    response_model=MessageResponse,
    responses={
        400: {"description": "Missing field or email already registered", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Register a new account",
)
async def register(
    payload: RegisterRequest,
    store: DataStore = Depends(get_store),
) -> MessageResponse:
    """
    Create an account from name, email, password, department, and batch.

    All five fields are required. The password is stored as a bcrypt hash.
    """
    return await account_service.register(store, payload)


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={
        400: {"description": "Missing credentials or login failed", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Log in with email and password",
)
async def login(
    payload: LoginRequest,
    store: DataStore = Depends(get_store),
) -> LoginResponse:
    """Check credentials and return the user's public fields (no token is issued)."""
    return await account_service.login(store, payload)
