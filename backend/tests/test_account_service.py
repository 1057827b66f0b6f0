"""
MindEase Backend — Account Service Unit Tests
===============================================

What:  Registration and login rules against a mocked DataStore.

What we test:
    ✅ Missing fields rejected before any storage call
    ✅ Existing email → ConflictError, whatever the other fields are
    ✅ Unique-constraint race also reported as ConflictError
    ✅ Stored password is a bcrypt hash
    ✅ Unknown email and wrong password share one AuthError message
"""

import pytest

from mindease.exceptions import AuthError, ConflictError, ConstraintViolationError, ValidationError
from mindease.schemas.account import LoginRequest, RegisterRequest
from mindease.security import hash_password
from mindease.services.account_service import AccountService
from mindease.storage.base import Entity


def _register_payload(**overrides) -> RegisterRequest:
    fields = {
        "name": "Asha",
        "email": "asha@campus.test",
        "password": "p1",
        "department": "CS",
        "batch": "2025",
    }
    fields.update(overrides)
    return RegisterRequest(**fields)


class TestRegister:

    def setup_method(self):
        self.service = AccountService()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("field", ["name", "email", "password", "department", "batch"])
    async def test_missing_field_rejected(self, mock_store, field):
        with pytest.raises(ValidationError, match="All fields are required"):
            await self.service.register(mock_store, _register_payload(**{field: None}))

        mock_store.insert.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_blank_field_rejected(self, mock_store):
        with pytest.raises(ValidationError):
            await self.service.register(mock_store, _register_payload(batch="   "))

    @pytest.mark.asyncio
    async def test_existing_email_conflicts(self, mock_store):
        mock_store.find_one.return_value = {"id": 1, "email": "asha@campus.test"}

        with pytest.raises(ConflictError, match="Email already exists"):
            await self.service.register(mock_store, _register_payload(name="Someone Else"))

        mock_store.insert.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_constraint_race_reported_as_conflict(self, mock_store):
        mock_store.find_one.return_value = None
        mock_store.insert.side_effect = ConstraintViolationError()

        with pytest.raises(ConflictError, match="Email already exists"):
            await self.service.register(mock_store, _register_payload())

    @pytest.mark.asyncio
    async def test_password_stored_as_hash(self, mock_store):
        mock_store.find_one.return_value = None
        mock_store.insert.return_value = 7

        result = await self.service.register(mock_store, _register_payload())

        assert result.message == "Registered successfully"
        entity, fields = mock_store.insert.await_args.args
        assert entity == Entity.USER
        assert fields["password"] != "p1"
        assert fields["password"].startswith("$2")


class TestLogin:

    def setup_method(self):
        self.service = AccountService()

    @pytest.mark.asyncio
    async def test_missing_credentials_rejected(self, mock_store):
        with pytest.raises(ValidationError, match="Email and password required"):
            await self.service.login(mock_store, LoginRequest(email="asha@campus.test"))

    @pytest.mark.asyncio
    async def test_success_returns_user_fields(self, mock_store):
        mock_store.find_one.return_value = {
            "id": 3,
            "name": "Asha",
            "email": "asha@campus.test",
            "password": hash_password("p1"),
            "batch": "2025",
            "department": "CS",
        }

        result = await self.service.login(
            mock_store, LoginRequest(email="asha@campus.test", password="p1")
        )

        assert result.message == "Login successful"
        assert result.user.model_dump() == {
            "id": 3,
            "name": "Asha",
            "email": "asha@campus.test",
            "batch": "2025",
            "department": "CS",
        }

    @pytest.mark.asyncio
    async def test_wrong_password_and_unknown_email_look_the_same(self, mock_store):
        mock_store.find_one.return_value = {
            "id": 3,
            "name": "Asha",
            "email": "asha@campus.test",
            "password": hash_password("p1"),
            "batch": "2025",
            "department": "CS",
        }
        with pytest.raises(AuthError) as wrong_password:
            await self.service.login(
                mock_store, LoginRequest(email="asha@campus.test", password="nope")
            )

        mock_store.find_one.return_value = None
        with pytest.raises(AuthError) as unknown_email:
            await self.service.login(
                mock_store, LoginRequest(email="ghost@campus.test", password="nope")
            )

        assert wrong_password.value.message == unknown_email.value.message

    @pytest.mark.asyncio
    async def test_malformed_stored_hash_never_matches(self, mock_store):
        mock_store.find_one.return_value = {
            "id": 3,
            "name": "Asha",
            "email": "asha@campus.test",
            "password": "plain-text-from-an-old-import",
            "batch": "2025",
            "department": "CS",
        }

        with pytest.raises(AuthError):
            await self.service.login(
                mock_store, LoginRequest(email="asha@campus.test", password="plain-text-from-an-old-import")
            )
