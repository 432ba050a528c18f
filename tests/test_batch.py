"""Tests for batch execution and access-mode resolution."""

import pytest
from pydantic import ValidationError

from graph_query.neo4j import Operation, resolve_access_mode
from graph_query.neo4j.batch import to_operations


class TestOperationWrites:
    """Tests for per-operation write intent."""

    @pytest.mark.parametrize(
        "query",
        [
            "CREATE (n:Person $props)",
            "MERGE (n:Person {id: $id})",
            "MATCH (n) SET n.seen = true",
            "MATCH (n) DETACH DELETE n",
            "MATCH (n) REMOVE n.flag",
            "match (n) delete n",
        ],
    )
    def test_updating_clauses_infer_write(self, query):
        assert Operation(query=query).writes is True

    @pytest.mark.parametrize(
        "query",
        [
            "MATCH (n:Label1) RETURN n",
            "MATCH (n) RETURN n.created_at AS created",
            "MATCH (n:Dataset) RETURN n.offset",
        ],
    )
    def test_read_queries_infer_read(self, query):
        """Keywords must match as whole words."""
        assert Operation(query=query).writes is False

    def test_explicit_flag_overrides_inference(self):
        assert Operation(query="CALL custom.mutate()", is_write=True).writes is True
        assert Operation(query="CREATE (n)", is_write=False).writes is False


class TestResolveAccessMode:
    def test_read_when_nothing_writes(self):
        ops = [Operation(query="MATCH (n) RETURN n"), Operation(query="RETURN 1")]
        assert resolve_access_mode(ops) == "read"

    def test_write_when_any_operation_writes(self):
        ops = [
            Operation(query="MATCH (n) RETURN n"),
            Operation(query="CREATE (m:Node)"),
        ]
        assert resolve_access_mode(ops) == "write"

    def test_write_flag_alone_selects_write(self):
        ops = [
            Operation(query="MATCH (n) RETURN n"),
            Operation(query="CALL apoc.create.node(['X'], {})", is_write=True),
        ]
        assert resolve_access_mode(ops) == "write"

    def test_empty_batch_is_read(self):
        assert resolve_access_mode([]) == "read"


class TestToOperations:
    def test_accepts_mappings_and_models(self):
        ops = to_operations(
            [
                {"query": "MATCH (n) RETURN n"},
                Operation(query="RETURN 1", params={"x": 1}),
            ]
        )

        assert [op.query for op in ops] == ["MATCH (n) RETURN n", "RETURN 1"]
        assert ops[0].params == {}
        assert ops[1].params == {"x": 1}

    def test_null_params_become_empty(self):
        ops = to_operations([{"query": "MATCH (n) RETURN n", "params": None}])

        assert ops[0].params == {}
        assert ops[0].writes is False

    def test_rejects_missing_query(self):
        with pytest.raises(ValidationError):
            to_operations([{"params": {}}])


class TestBatch:
    """Tests for QueryExecutor.batch."""

    async def test_runs_operations_in_order_in_one_read_transaction(self, executor, driver):
        """Neither query writes, so the whole batch is read-only."""
        driver.responses = {
            "Label1": [{"n": {"id": 1}}],
            "Label2": [{"n": {"id": 2}}, {"n": {"id": 3}}],
        }

        results = await executor.batch(
            [
                {"query": "MATCH (n:Label1) RETURN n"},
                {"query": "MATCH (n:Label2) RETURN n", "params": {"param": "value"}},
            ]
        )

        assert driver.calls == [
            ("MATCH (n:Label1) RETURN n", {}),
            ("MATCH (n:Label2) RETURN n", {"param": "value"}),
        ]
        assert results == [
            [{"n": {"id": 1}}],
            [{"n": {"id": 2}}, {"n": {"id": 3}}],
        ]
        assert driver.modes == ["read"]
        assert len(driver.sessions) == 1
        assert driver.sessions[0].close_count == 1

    async def test_mixed_batch_runs_in_write_mode(self, executor, driver):
        await executor.batch(
            [
                Operation(query="MATCH (n) RETURN n"),
                Operation(query="CREATE (m:Node) RETURN m"),
            ]
        )

        assert driver.modes == ["write"]

    async def test_failure_stops_batch_and_closes_session(self, executor, driver):
        error = RuntimeError("constraint violation")
        driver.fail_on["Second"] = error

        with pytest.raises(RuntimeError) as exc_info:
            await executor.batch(
                [
                    {"query": "CREATE (n:First)"},
                    {"query": "CREATE (n:Second)"},
                    {"query": "CREATE (n:Third)"},
                ]
            )

        assert exc_info.value is error
        assert [query for query, _ in driver.calls] == [
            "CREATE (n:First)",
            "CREATE (n:Second)",
        ]
        assert driver.sessions[0].close_count == 1

    async def test_retried_transaction_does_not_duplicate_results(self, executor, driver):
        """A driver retry re-runs the work function from scratch."""
        session = driver.session()
        first_attempt = session.execute_read

        async def execute_read(transaction_function, *args):
            await first_attempt(transaction_function, *args)
            return await first_attempt(transaction_function, *args)

        session.execute_read = execute_read
        driver.session = lambda **config: session
        driver.default_rows = [{"x": 1}]

        results = await executor.batch([{"query": "RETURN 1 AS x"}])

        assert results == [[{"x": 1}]]

    async def test_empty_batch(self, executor, driver):
        assert await executor.batch([]) == []
        assert driver.sessions[0].close_count == 1
