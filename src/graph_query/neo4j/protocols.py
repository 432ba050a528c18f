"""Structural types for the driver capabilities this package consumes.

`neo4j.AsyncDriver` and friends satisfy these protocols, and so does any
test double that implements the same handful of methods.
"""

from __future__ import annotations

from typing import (
    Any,
    AsyncIterator,
    Awaitable,
    Callable,
    Dict,
    Mapping,
    Optional,
    Protocol,
    TypeVar,
)

T = TypeVar("T")


class RecordLike(Protocol):
    """One result row."""

    def data(self) -> Dict[str, Any]:
        ...


class ResultLike(Protocol):
    """Ordered, async-iterable stream of records from a single query."""

    def __aiter__(self) -> AsyncIterator[RecordLike]:
        ...


class TransactionLike(Protocol):
    async def run(
        self, query: str, parameters: Optional[Mapping[str, Any]] = None
    ) -> ResultLike:
        ...


TransactionWork = Callable[[TransactionLike], Awaitable[T]]


class SessionLike(Protocol):
    """A scoped unit of interaction with the graph engine."""

    async def execute_read(self, transaction_function: TransactionWork, *args: Any) -> Any:
        ...

    async def execute_write(self, transaction_function: TransactionWork, *args: Any) -> Any:
        ...

    async def close(self) -> None:
        ...


class DriverLike(Protocol):
    """Stateless, reusable factory for sessions."""

    def session(self, **config: Any) -> SessionLike:
        ...
