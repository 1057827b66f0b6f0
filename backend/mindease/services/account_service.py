"""
MindEase Backend — Account Service
====================================

What:  Registration and login.
How:   Presence checks, email uniqueness (checked up front and enforced by the
       users.email constraint), passlib bcrypt hashing run off the event loop.
Who:   Called by the /auth routes.

Login failures:
    Unknown email and wrong password both raise AuthError with the same
    message, so the response does not say which check failed.
"""

import logging

from starlette.concurrency import run_in_threadpool

from mindease.exceptions import AuthError, ConflictError, ConstraintViolationError, ValidationError
from mindease.schemas.account import (
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    UserSummary,
)
from mindease.schemas.common import MessageResponse
from mindease.security import hash_password, verify_password
from mindease.storage.base import DataStore, Entity

logger = logging.getLogger(__name__)

REGISTER_FIELDS = ("name", "email", "password", "department", "batch")


def _present(value) -> bool:
    return value is not None and str(value).strip() != ""


class AccountService:
    """Stateless; receives the DataStore on every call."""

    async def register(self, store: DataStore, payload: RegisterRequest) -> MessageResponse:
        """
        Create a user account.

        Raises:
            ValidationError: any of the five fields is missing or blank (→ 400)
            ConflictError: the email is already registered (→ 400)
            DataAccessError: storage failure (→ 500)
        """
        missing = [name for name in REGISTER_FIELDS if not _present(getattr(payload, name))]
        if missing:
            raise ValidationError(
                message="All fields are required",
                field=missing[0],
                context={"missing": missing},
            )

        email = payload.email.strip()
        if await store.find_one(Entity.USER, {"email": email}) is not None:
            raise ConflictError(message="Email already exists", context={"email": email})

        password_hash = await run_in_threadpool(hash_password, payload.password)
        try:
            user_id = await store.insert(
                Entity.USER,
                {
                    "name": payload.name.strip(),
                    "email": email,
                    "password": password_hash,
                    "department": payload.department.strip(),
                    "batch": payload.batch.strip(),
                },
            )
        except ConstraintViolationError:
            # A concurrent registration won the race on users.email
            raise ConflictError(message="Email already exists", context={"email": email})

        logger.info("Registered user %s", user_id)
        return MessageResponse(message="Registered successfully")

    async def login(self, store: DataStore, payload: LoginRequest) -> LoginResponse:
        """
        Verify credentials and return the non-secret user fields.

        No session or token is issued.

        Raises:
            ValidationError: email or password missing (→ 400)
            AuthError: unknown email or password mismatch (→ 400)
        """
        if not _present(payload.email) or not _present(payload.password):
            raise ValidationError(message="Email and password required", field="email")

        user = await store.find_one(Entity.USER, {"email": payload.email.strip()})
        if user is None:
            logger.info("Login failed: unknown email")
            raise AuthError()

        matches = await run_in_threadpool(verify_password, payload.password, user["password"])
        if not matches:
            logger.info("Login failed for user %s: password mismatch", user["id"])
            raise AuthError()

        return LoginResponse(
            message="Login successful",
            user=UserSummary(
                id=user["id"],
                name=user["name"],
                email=user["email"],
                batch=user["batch"],
                department=user["department"],
            ),
        )


# ── Singleton Instance ────────────────────────────────────────────────────
account_service = AccountService()
