"""Pytest fixtures: in-memory stand-ins for the Neo4j async driver."""

from typing import Any, Dict, List, Optional

import pytest

from graph_query.neo4j import GraphDB, Neo4jClient, QueryExecutor


class FakeRecord:
    def __init__(self, row: Dict[str, Any]) -> None:
        self._row = row

    def data(self) -> Dict[str, Any]:
        return dict(self._row)


class FakeResult:
    """Async-iterable result, like ``neo4j.AsyncResult``."""

    def __init__(self, rows: List[Dict[str, Any]]) -> None:
        self._records = [FakeRecord(row) for row in rows]

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        for record in self._records:
            yield record


class FakeTransaction:
    """Records every ``run`` call and replies with queued rows.

    ``responses`` maps a query substring to the rows it returns; anything
    else gets ``default_rows``. ``fail_on`` makes matching queries raise.
    """

    def __init__(self, driver: "FakeDriver") -> None:
        self.driver = driver

    async def run(self, query: str, parameters: Optional[Dict[str, Any]] = None):
        self.driver.calls.append((query, parameters))
        for needle, error in self.driver.fail_on.items():
            if needle in query:
                raise error
        for needle, rows in self.driver.responses.items():
            if needle in query:
                return FakeResult(rows)
        return FakeResult(self.driver.default_rows)


class FakeSession:
    def __init__(self, driver: "FakeDriver", config: Dict[str, Any]) -> None:
        self.driver = driver
        self.config = config
        self.modes: List[str] = []
        self.close_count = 0

    async def execute_read(self, transaction_function, *args):
        self.modes.append("read")
        return await transaction_function(FakeTransaction(self.driver), *args)

    async def execute_write(self, transaction_function, *args):
        self.modes.append("write")
        return await transaction_function(FakeTransaction(self.driver), *args)

    async def close(self) -> None:
        self.close_count += 1
        if self.driver.close_error is not None:
            raise self.driver.close_error


class FakeDriver:
    def __init__(self) -> None:
        self.sessions: List[FakeSession] = []
        self.calls: List[tuple] = []
        self.responses: Dict[str, List[Dict[str, Any]]] = {}
        self.default_rows: List[Dict[str, Any]] = []
        self.fail_on: Dict[str, Exception] = {}
        self.close_error: Optional[Exception] = None
        self.session_error: Optional[Exception] = None

    def session(self, **config: Any) -> FakeSession:
        if self.session_error is not None:
            raise self.session_error
        session = FakeSession(self, config)
        self.sessions.append(session)
        return session

    @property
    def modes(self) -> List[str]:
        return [mode for session in self.sessions for mode in session.modes]


@pytest.fixture
def driver():
    return FakeDriver()


@pytest.fixture
def client(driver):
    return Neo4jClient(driver=driver)


@pytest.fixture
def executor(client):
    return QueryExecutor(client)


@pytest.fixture
def graphdb(executor):
    return GraphDB(executor)
