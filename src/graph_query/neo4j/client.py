"""Neo4j connection and session management."""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Optional

from neo4j import AsyncGraphDatabase

from ..config import Config
from .protocols import DriverLike, SessionLike

logger = logging.getLogger(__name__)


class Neo4jClient:
    """Neo4j database client that hands out one scoped session per operation.

    The client either builds its own async driver from ``Config`` or wraps a
    driver-like object supplied by the caller. An injected driver belongs to
    the caller and is never closed here.
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        driver: Optional[DriverLike] = None,
    ) -> None:
        """Initialize the client with configuration and/or an existing driver."""
        self._config = config
        self._driver: Optional[DriverLike] = driver
        self._owns_driver = driver is None
        self._connect_lock = asyncio.Lock()

    @property
    def config(self) -> Config:
        if self._config is None:
            self._config = Config()
        return self._config

    async def connect(self) -> None:
        """Create the driver and verify the database is reachable."""
        if self._driver is not None:
            return
        async with self._connect_lock:
            # Another caller may have connected while this one waited.
            if self._driver is None:
                await self._create_driver()

    async def _create_driver(self) -> None:
        if not self.config.neo4j_password:
            logger.error("NEO4J_PASSWORD not set in environment variables or .env file")
            raise ValueError(
                "NEO4J_PASSWORD must be set in environment variables or .env file"
            )

        driver = AsyncGraphDatabase.driver(
            str(self.config.neo4j_uri),
            auth=(self.config.neo4j_username, self.config.neo4j_password),
            max_connection_lifetime=self.config.neo4j_max_connection_lifetime,
            max_connection_pool_size=self.config.neo4j_max_connection_pool_size,
        )

        # Driver creation is lazy and doesn't actually connect.
        try:
            await driver.verify_connectivity()
        except Exception as e:
            logger.error("Failed to connect to Neo4j: %s", e)
            await driver.close()
            raise ConnectionError(
                f"Cannot connect to Neo4j database at {self.config.neo4j_uri}. "
                "Please ensure Neo4j is running and accessible."
            ) from e

        self._driver = driver
        self._owns_driver = True

    async def close(self) -> None:
        """Close the driver if this client created it."""
        if self._driver is not None and self._owns_driver:
            await self._driver.close()
            self._driver = None

    @asynccontextmanager
    async def session(self, **kwargs: Any) -> AsyncIterator[SessionLike]:
        """Acquire one session and close it on every exit path.

        A failure from ``close()`` propagates; if the body already raised,
        that error is kept as the close error's ``__context__``.
        """
        if self._driver is None:
            await self.connect()

        assert self._driver is not None  # for type checkers
        if self._config is not None:
            kwargs.setdefault("database", self._config.neo4j_database)

        session = self._driver.session(**kwargs)
        try:
            yield session
        finally:
            await session.close()

    async def verify_connectivity(self) -> bool:
        """Verify connection to the Neo4j database."""
        try:
            if self._driver is None:
                await self.connect()
            assert self._driver is not None
            await self._driver.verify_connectivity()
            return True
        except Exception as e:
            logger.error("Neo4j connectivity check failed: %s", e, exc_info=True)
            return False

    async def __aenter__(self) -> "Neo4jClient":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
