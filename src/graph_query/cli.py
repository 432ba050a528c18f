"""Simple CLI for running Cypher through the query executor.

Usage examples (from project root):

    graph-query read "MATCH (n:Person) RETURN n LIMIT 5"

    graph-query create-node Person --properties '{"name": "John", "age": 30}'

    graph-query find-nodes Person --properties '{"name": "John"}'

    graph-query create-relationship \
        --start-label Person --start-properties '{"name": "John"}' \
        --end-label Person --end-properties '{"name": "Jane"}' \
        KNOWS --properties '{"since": 2020}'

    graph-query batch operations.json

The CLI uses:
- .env configuration (NEO4J_URI, NEO4J_USERNAME, NEO4J_PASSWORD, ...)
- Neo4jClient for connection
- QueryExecutor / GraphDB for execution
"""

import argparse
import asyncio
import json
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional

from .config import Config
from .neo4j import GraphDB, Neo4jClient, NodeMatch, QueryExecutor


def _json_object(value: str) -> Dict[str, Any]:
    """Parse a JSON object argument."""
    try:
        parsed = json.loads(value)
    except json.JSONDecodeError as e:
        raise argparse.ArgumentTypeError(f"invalid JSON: {e}") from e
    if not isinstance(parsed, dict):
        raise argparse.ArgumentTypeError("expected a JSON object")
    return parsed


def _print_results(records: List[Any]) -> None:
    serializable: Dict[str, Any] = {
        "count": len(records),
        "results": records,
    }
    print(json.dumps(serializable, indent=2, sort_keys=True, default=str))


def _as_list(record: Optional[Any]) -> List[Any]:
    return [] if record is None else [record]


async def _with_executor(
    config: Config, func: Callable[[QueryExecutor], Awaitable[Any]]
) -> Any:
    async with Neo4jClient(config=config) as client:
        return await func(QueryExecutor(client))


def _cmd_read(args: argparse.Namespace, config: Config) -> None:
    """Run a read query and print the rows."""
    records = asyncio.run(
        _with_executor(config, lambda ex: ex.read(args.query, args.params))
    )
    _print_results(records)


def _cmd_write(args: argparse.Namespace, config: Config) -> None:
    """Run a write query and print the rows."""
    records = asyncio.run(
        _with_executor(config, lambda ex: ex.write(args.query, args.params))
    )
    _print_results(records)


def _cmd_create_node(args: argparse.Namespace, config: Config) -> None:
    record = asyncio.run(
        _with_executor(
            config,
            lambda ex: GraphDB(ex).create_node(
                args.label, args.properties, return_alias=args.alias
            ),
        )
    )
    _print_results(_as_list(record))


def _cmd_find_nodes(args: argparse.Namespace, config: Config) -> None:
    records = asyncio.run(
        _with_executor(
            config,
            lambda ex: GraphDB(ex).find_nodes(
                args.label, args.properties, return_alias=args.alias
            ),
        )
    )
    _print_results(records)


def _cmd_create_relationship(args: argparse.Namespace, config: Config) -> None:
    start = NodeMatch(args.start_label, args.start_properties)
    end = NodeMatch(args.end_label, args.end_properties)
    record = asyncio.run(
        _with_executor(
            config,
            lambda ex: GraphDB(ex).create_relationship(
                start, end, args.type, args.properties
            ),
        )
    )
    _print_results(_as_list(record))


def _cmd_batch(args: argparse.Namespace, config: Config) -> None:
    """Run a JSON list of operations in one transaction."""
    with open(args.file, "r", encoding="utf-8") as f:
        operations = json.load(f)

    results = asyncio.run(_with_executor(config, lambda ex: ex.batch(operations)))
    _print_results(results)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Run Cypher queries against Neo4j with managed sessions",
    )
    subparsers = parser.add_subparsers(dest="command")

    for name, func, help_text in (
        ("read", _cmd_read, "Run a query in a read transaction"),
        ("write", _cmd_write, "Run a query in a write transaction"),
    ):
        p = subparsers.add_parser(name, help=help_text)
        p.add_argument("query", type=str, help="Cypher query text")
        p.add_argument(
            "--params",
            type=_json_object,
            default={},
            help="Query parameters as a JSON object",
        )
        p.set_defaults(func=func)

    # create-node command
    p_create_node = subparsers.add_parser("create-node", help="Create a labeled node")
    p_create_node.add_argument("label", type=str, help="Node label")
    p_create_node.add_argument(
        "--properties",
        type=_json_object,
        default={},
        help="Node properties as a JSON object",
    )
    p_create_node.add_argument(
        "--alias", type=str, default="n", help="Alias used in the RETURN clause"
    )
    p_create_node.set_defaults(func=_cmd_create_node)

    # find-nodes command
    p_find_nodes = subparsers.add_parser(
        "find-nodes", help="Find nodes by label and exact property values"
    )
    p_find_nodes.add_argument("label", type=str, help="Node label")
    p_find_nodes.add_argument(
        "--properties",
        type=_json_object,
        default=None,
        help="Property filters as a JSON object",
    )
    p_find_nodes.add_argument(
        "--alias", type=str, default="n", help="Alias used in the RETURN clause"
    )
    p_find_nodes.set_defaults(func=_cmd_find_nodes)

    # create-relationship command
    p_create_rel = subparsers.add_parser(
        "create-relationship",
        help="Create a relationship between two existing nodes",
    )
    p_create_rel.add_argument("type", type=str, help="Relationship type")
    p_create_rel.add_argument(
        "--start-label", type=str, required=True, help="Label of the start node"
    )
    p_create_rel.add_argument(
        "--start-properties",
        type=_json_object,
        default={},
        help="Properties identifying the start node",
    )
    p_create_rel.add_argument(
        "--end-label", type=str, required=True, help="Label of the end node"
    )
    p_create_rel.add_argument(
        "--end-properties",
        type=_json_object,
        default={},
        help="Properties identifying the end node",
    )
    p_create_rel.add_argument(
        "--properties",
        type=_json_object,
        default={},
        help="Relationship properties as a JSON object",
    )
    p_create_rel.set_defaults(func=_cmd_create_relationship)

    # batch command
    p_batch = subparsers.add_parser(
        "batch",
        help=(
            "Run a JSON file of operations "
            '([{"query": ..., "params": {...}, "is_write": ...}]) '
            "in one transaction"
        ),
    )
    p_batch.add_argument("file", type=str, help="Path to the operations JSON file")
    p_batch.set_defaults(func=_cmd_batch)

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return

    config = Config()
    logging.basicConfig(level=config.log_level.upper())
    args.func(args, config)


if __name__ == "__main__":
    main()
