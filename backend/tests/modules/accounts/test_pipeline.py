"""Tests for the pre-write pipeline."""

import pytest
from unittest.mock import AsyncMock, MagicMock

from modules.accounts.exceptions import PasswordHashingError, PasswordTooLongError
from modules.accounts.pipeline import (
    WriteContext,
    WritePipeline,
    default_pipeline,
    hash_password,
)


def make_hasher(digest: str = "$2b$04$digest") -> MagicMock:
    hasher = MagicMock()
    hasher.generate_salt = AsyncMock(return_value=b"$2b$04$salt")
    hasher.hash = AsyncMock(return_value=digest)
    return hasher


class TestWriteContext:
    def test_new_when_no_previous(self):
        """A context without previous state is a creation."""
        context = WriteContext(document={"password": "secret1"})
        assert context.is_new is True
        assert context.is_modified("password") is True
        assert context.is_modified("first_name") is True

    def test_modified_compares_by_value(self):
        """Fields are modified only when their value differs."""
        previous = {"password": "$2b$04$digest", "first_name": "Ada"}
        context = WriteContext(
            document={"password": "$2b$04$digest", "first_name": "Grace"},
            previous=previous,
        )
        assert context.is_new is False
        assert context.is_modified("password") is False
        assert context.is_modified("first_name") is True

    def test_added_and_removed_fields_are_modified(self):
        """A field present on only one side counts as modified."""
        context = WriteContext(document={"city": "Lisbon"}, previous={"state": "X"})
        assert context.is_modified("city") is True
        assert context.is_modified("state") is True
        assert context.is_modified("country") is False


class TestHashPassword:
    @pytest.mark.asyncio
    async def test_hashes_on_creation(self):
        """A new password should be salted and hashed."""
        hasher = make_hasher()
        context = WriteContext(document={"email": "u1@x.com", "password": "secret1"})

        await hash_password(context, hasher)

        hasher.generate_salt.assert_awaited_once()
        hasher.hash.assert_awaited_once_with("secret1", b"$2b$04$salt")
        assert context.document["password"] == "$2b$04$digest"

    @pytest.mark.asyncio
    async def test_skips_unchanged_password(self):
        """An unchanged password should be left alone."""
        hasher = make_hasher()
        previous = {"password": "$2b$04$stored"}
        context = WriteContext(document={"password": "$2b$04$stored"}, previous=previous)

        await hash_password(context, hasher)

        hasher.generate_salt.assert_not_awaited()
        hasher.hash.assert_not_awaited()
        assert context.document["password"] == "$2b$04$stored"

    @pytest.mark.asyncio
    async def test_hashes_changed_password(self):
        """A changed password should be re-hashed."""
        hasher = make_hasher("$2b$04$new")
        context = WriteContext(document={"password": "secret2"}, previous={"password": "$2b$04$old"})

        await hash_password(context, hasher)

        assert context.document["password"] == "$2b$04$new"

    @pytest.mark.asyncio
    async def test_salt_failure_aborts(self):
        """A salt failure should raise PasswordHashingError with the cause chained."""
        hasher = make_hasher()
        cause = OSError("no entropy")
        hasher.generate_salt.side_effect = cause
        context = WriteContext(document={"password": "secret1"})

        with pytest.raises(PasswordHashingError) as exc_info:
            await hash_password(context, hasher)

        assert exc_info.value.__cause__ is cause
        assert "no entropy" in exc_info.value.details["cause"]
        assert context.document["password"] == "secret1"

    @pytest.mark.asyncio
    async def test_hash_failure_aborts(self):
        """A hashing failure should raise PasswordHashingError."""
        hasher = make_hasher()
        hasher.hash.side_effect = MemoryError()
        context = WriteContext(document={"password": "secret1"})

        with pytest.raises(PasswordHashingError):
            await hash_password(context, hasher)

    @pytest.mark.asyncio
    async def test_domain_errors_propagate_unchanged(self):
        """Domain errors raised by the hasher should not be wrapped."""
        hasher = make_hasher()
        hasher.hash.side_effect = PasswordTooLongError(72, 80)
        context = WriteContext(document={"password": "a" * 80})

        with pytest.raises(PasswordTooLongError):
            await hash_password(context, hasher)


class TestWritePipeline:
    @pytest.mark.asyncio
    async def test_runs_steps_in_order(self):
        """Steps should run in order against the same context."""
        calls = []

        async def first(context):
            calls.append("first")
            context.document["seen"] = ["first"]

        async def second(context):
            calls.append("second")
            context.document["seen"].append("second")

        pipeline = WritePipeline(steps=[first, second])
        document = await pipeline.run(WriteContext(document={}))

        assert calls == ["first", "second"]
        assert document == {"seen": ["first", "second"]}

    @pytest.mark.asyncio
    async def test_failing_step_stops_pipeline(self):
        """A raising step should stop the remaining steps."""
        later = AsyncMock()

        async def failing(context):
            raise PasswordHashingError(RuntimeError("boom"))

        pipeline = WritePipeline(steps=[failing, later])

        with pytest.raises(PasswordHashingError):
            await pipeline.run(WriteContext(document={}))
        later.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_default_pipeline_hashes(self, hasher):
        """The default pipeline should hash with the given hasher."""
        pipeline = default_pipeline(hasher)
        document = await pipeline.run(WriteContext(document={"password": "secret1"}))

        assert document["password"] != "secret1"
        assert await hasher.verify("secret1", document["password"]) is True
