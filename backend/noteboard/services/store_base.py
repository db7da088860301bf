"""
NoteBoard — Abstract Store Interfaces
======================================

What:  Contracts for the two external collaborators (Record Store, Blob Store)
       and the explicit result type every store call returns.
How:   Concrete stores inherit from RecordStore / BlobStore. Instead of raising,
       each call returns `Ok(value)` or `Failure(kind, message)`; the NoteBoard
       matches on the result at the call site and decides what to do.
Who:   Implemented by GraphQLRecordStore, SQLRecordStore, LocalBlobStore and
       HTTPBlobStore; called by NoteBoard.

Failure kinds and the exception each becomes (see exceptions.py):
    VALIDATION          → ValidationError
    NOT_FOUND           → NotFoundError
    STORAGE             → StorageError
    TRANSIENT_NETWORK   → TransientNetworkError
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Generic, List, TypeVar, Union

from noteboard.exceptions import (
    NoteBoardError,
    NotFoundError,
    StorageError,
    TransientNetworkError,
    ValidationError,
)
from noteboard.schemas.note import NoteInput, NoteRecord

T = TypeVar("T")


class FailureKind(str, Enum):
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    STORAGE = "storage"
    TRANSIENT_NETWORK = "transient_network"


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Failure:
    kind: FailureKind
    message: str
    context: Dict[str, Any] = field(default_factory=dict)


Result = Union[Ok[T], Failure]


def error_for_failure(failure: Failure) -> NoteBoardError:
    """Translate a store Failure into the application exception of the same kind."""
    ctx = dict(failure.context)
    if failure.kind is FailureKind.VALIDATION:
        err: NoteBoardError = ValidationError(message=failure.message, context=ctx)
    elif failure.kind is FailureKind.NOT_FOUND:
        err = NotFoundError(
            resource=ctx.pop("resource", "resource"),
            resource_id=ctx.pop("resource_id", None),
            context=ctx,
        )
    elif failure.kind is FailureKind.STORAGE:
        err = StorageError(message=failure.message, context=ctx)
    else:
        err = TransientNetworkError(message=failure.message, context=ctx)
    return err


class RecordStore(ABC):
    """
    Remote list/create/delete over the single `Note` entity.

    Contract:
        - list() returns every note; no ordering guarantee beyond what the
          implementation documents
        - create() assigns the id; rejects missing name/description with a
          VALIDATION failure even though the board pre-checks them
        - delete() returns the deleted record; NOT_FOUND if the id is unknown
        - No transactional guarantee across calls
    """

    @abstractmethod
    async def list(self) -> "Result[List[NoteRecord]]":
        ...

    @abstractmethod
    async def create(self, note: NoteInput) -> "Result[NoteRecord]":
        ...

    @abstractmethod
    async def delete(self, note_id: str) -> "Result[NoteRecord]":
        ...

    @abstractmethod
    async def health_check(self) -> bool:
        """Lightweight reachability probe used by GET /health."""
        ...

    async def close(self) -> None:
        """Release connections; called once on application shutdown."""


class BlobStore(ABC):
    """
    Remote key/value object store keyed by filename.

    Contract:
        - put() overwrites by key (idempotent); STORAGE failure on transport error
        - get() returns a directly fetchable URL; NOT_FOUND if the key is absent
    """

    @abstractmethod
    async def put(self, key: str, content: bytes) -> "Result[None]":
        ...

    @abstractmethod
    async def get(self, key: str) -> "Result[str]":
        ...

    @abstractmethod
    async def health_check(self) -> bool:
        ...

    async def close(self) -> None:
        """Release connections; called once on application shutdown."""
