"""
Neo4j client, session management and query execution.

This package should contain ONLY Neo4j-specific logic:
- Connection/client setup and scoped sessions
- Read/write/batch execution of Cypher queries
- Templated node and relationship queries
"""

from .batch import Operation, resolve_access_mode
from .client import Neo4jClient
from .executor import QueryExecutor
from .graph import GraphDB, NodeMatch
from .projection import project_record
from .protocols import DriverLike


def create_neo4j_client(driver: DriverLike) -> tuple[QueryExecutor, GraphDB]:
    """Wire an executor and graph helpers around an existing driver."""
    executor = QueryExecutor(Neo4jClient(driver=driver))
    return executor, GraphDB(executor)


__all__ = [
    "GraphDB",
    "Neo4jClient",
    "NodeMatch",
    "Operation",
    "QueryExecutor",
    "create_neo4j_client",
    "project_record",
    "resolve_access_mode",
]
