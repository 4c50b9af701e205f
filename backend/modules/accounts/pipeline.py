"""
Pre-write pipeline for account documents.

Every write goes through a WritePipeline before it reaches the repository.
A step receives a WriteContext holding the candidate document and the
last-persisted document, and may rewrite fields of the candidate. A step that
raises aborts the write.

The only step today is ``hash_password``, which replaces a new or changed
plaintext password with its digest.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Optional, Sequence

from shared.exceptions import AccountStoreError

from .exceptions import PasswordHashingError
from .interfaces import IPasswordHasher

logger = logging.getLogger(__name__)

_MISSING = object()


@dataclass
class WriteContext:
    """
    A document about to be written, with the state it replaces.

    Attributes:
        document: Candidate storage document. Steps mutate it in place.
        previous: Last-persisted document, or None when creating.
    """

    document: dict[str, Any]
    previous: Optional[dict[str, Any]] = None

    @property
    def is_new(self) -> bool:
        return self.previous is None

    def is_modified(self, name: str) -> bool:
        """True on creation, else True iff the value differs from the persisted one."""
        if self.previous is None:
            return True
        return self.document.get(name, _MISSING) != self.previous.get(name, _MISSING)


WriteStep = Callable[[WriteContext], Awaitable[None]]


async def hash_password(context: WriteContext, hasher: IPasswordHasher) -> None:
    """
    Hash the password if it is new or changed.

    Raises:
        PasswordHashingError: If salt generation or hashing fails
    """
    if "password" not in context.document or not context.is_modified("password"):
        logger.debug("Password unchanged, keeping stored digest")
        return

    try:
        salt = await hasher.generate_salt()
        digest = await hasher.hash(context.document["password"], salt)
    except AccountStoreError:
        raise
    except Exception as e:
        raise PasswordHashingError(e) from e

    context.document["password"] = digest


@dataclass
class WritePipeline:
    """Ordered pre-write steps applied to every account write."""

    steps: Sequence[WriteStep] = field(default_factory=list)

    async def run(self, context: WriteContext) -> dict[str, Any]:
        """Run all steps against the context and return the final document."""
        for step in self.steps:
            await step(context)
        return context.document


def default_pipeline(hasher: IPasswordHasher) -> WritePipeline:
    """Build the pipeline used by AccountService."""

    async def _hash_password(context: WriteContext) -> None:
        await hash_password(context, hasher)

    return WritePipeline(steps=[_hash_password])
