"""Query execution in read or write mode, one session per call."""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Mapping, Optional, Type

from .batch import (
    READ,
    WRITE,
    OperationInput,
    resolve_access_mode,
    run_operations,
    to_operations,
)
from .client import Neo4jClient
from .projection import M, project_result
from .protocols import TransactionLike

logger = logging.getLogger(__name__)


class QueryExecutor:
    """Run Cypher queries through a ``Neo4jClient``.

    Every public method opens exactly one session, runs its work inside a
    managed transaction of the right access mode and returns projected rows
    in the order the engine produced them.
    """

    def __init__(self, client: Neo4jClient) -> None:
        self.client = client

    async def _execute(
        self,
        mode: str,
        query: str,
        params: Optional[Mapping[str, Any]],
        model: Optional[Type[M]],
    ) -> List[Any]:
        parameters = dict(params or {})

        async def work(tx: TransactionLike) -> List[Any]:
            result = await tx.run(query, parameters)
            return await project_result(result, model)

        logger.debug("Executing %s query: %s", mode, query[:100])
        async with self.client.session() as session:
            if mode == WRITE:
                rows = await session.execute_write(work)
            else:
                rows = await session.execute_read(work)

        logger.debug("Query returned %d records", len(rows))
        return rows

    async def read(
        self,
        query: str,
        params: Optional[Mapping[str, Any]] = None,
        *,
        model: Optional[Type[M]] = None,
    ) -> List[Any]:
        """Execute a read query.

        Args:
            query: Cypher query to execute.
            params: Query parameters, passed to the driver as-is.
            model: Optional pydantic model each row is validated into.

        Returns:
            List of rows (dicts, or ``model`` instances); empty if no matches.
        """
        return await self._execute(READ, query, params, model)

    async def write(
        self,
        query: str,
        params: Optional[Mapping[str, Any]] = None,
        *,
        model: Optional[Type[M]] = None,
    ) -> List[Any]:
        """Execute a write query. Same contract as ``read``."""
        return await self._execute(WRITE, query, params, model)

    async def read_single(
        self,
        query: str,
        params: Optional[Mapping[str, Any]] = None,
        *,
        model: Optional[Type[M]] = None,
    ) -> Optional[Any]:
        """Execute a read query and return the first row, or None."""
        results = await self.read(query, params, model=model)
        return results[0] if results else None

    async def write_single(
        self,
        query: str,
        params: Optional[Mapping[str, Any]] = None,
        *,
        model: Optional[Type[M]] = None,
    ) -> Optional[Any]:
        """Execute a write query and return the first row, or None."""
        results = await self.write(query, params, model=model)
        return results[0] if results else None

    async def batch(
        self,
        operations: Iterable[OperationInput],
        *,
        model: Optional[Type[M]] = None,
    ) -> List[List[Any]]:
        """Execute several queries in a single session and transaction.

        Args:
            operations: ``Operation`` models or mappings with ``query``,
                optional ``params`` and optional ``is_write``.
            model: Optional pydantic model applied to every row.

        Returns:
            One list of rows per operation, in input order.
        """
        ops = to_operations(operations)
        mode = resolve_access_mode(ops)
        logger.debug("Executing batch of %d operations in %s mode", len(ops), mode)

        async def work(tx: TransactionLike) -> List[List[Any]]:
            return await run_operations(tx, ops, model)

        async with self.client.session() as session:
            if mode == WRITE:
                return await session.execute_write(work)
            return await session.execute_read(work)
