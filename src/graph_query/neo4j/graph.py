"""Templated node and relationship queries.

Labels, aliases and relationship types are interpolated into the query
text; property values always travel as query parameters.

The ``build_*`` helpers are pure and return ``(cypher, params)`` so the
same statements can be fed to ``QueryExecutor.batch``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from .executor import QueryExecutor

# Identifiers the relationship CREATE clause refers to.
START_ALIAS = "a"
END_ALIAS = "b"


@dataclass(frozen=True)
class NodeMatch:
    """Structured match for one end of a relationship.

    Rendered with the alias the builder needs, so callers never have to
    know it. Property values become parameters.
    """

    label: str
    properties: Mapping[str, Any] = field(default_factory=dict)

    def render(self, alias: str, prefix: str) -> Tuple[str, Dict[str, Any]]:
        params = {f"{prefix}_{key}": value for key, value in self.properties.items()}
        if not self.properties:
            return f"({alias}:{self.label})", params
        pattern = ", ".join(f"{key}: ${prefix}_{key}" for key in self.properties)
        return f"({alias}:{self.label} {{{pattern}}})", params


MatchClause = Union[str, NodeMatch]


class GraphDB:
    """Node and relationship helpers backed by a ``QueryExecutor``."""

    def __init__(self, executor: QueryExecutor) -> None:
        self.executor = executor

    @staticmethod
    def build_create_node(
        label: str, properties: Mapping[str, Any], return_alias: str = "n"
    ) -> Tuple[str, Dict[str, Any]]:
        cypher = f"""
        CREATE ({return_alias}:{label} $properties)
        RETURN {return_alias}
        """
        return cypher, {"properties": dict(properties)}

    @staticmethod
    def build_find_nodes(
        label: str,
        properties: Optional[Mapping[str, Any]] = None,
        return_alias: str = "n",
    ) -> Tuple[str, Dict[str, Any]]:
        """Build a label match, with one equality condition per property.

        Property keys double as parameter names, so the filter map is passed
        through unwrapped.
        """
        if not properties:
            return f"MATCH ({return_alias}:{label}) RETURN {return_alias}", {}

        where_conditions = " AND ".join(
            f"{return_alias}.{key} = ${key}" for key in properties
        )
        cypher = f"""
        MATCH ({return_alias}:{label})
        WHERE {where_conditions}
        RETURN {return_alias}
        """
        return cypher, dict(properties)

    @staticmethod
    def build_create_relationship(
        start_node_match: MatchClause,
        end_node_match: MatchClause,
        relationship_type: str,
        properties: Optional[Mapping[str, Any]] = None,
    ) -> Tuple[str, Dict[str, Any]]:
        """Build a MATCH/MATCH/CREATE statement linking two nodes.

        Raw string matches are inserted verbatim and must bind ``a`` and
        ``b``; ``NodeMatch`` values are rendered with those aliases.
        """
        params: Dict[str, Any] = {"properties": dict(properties or {})}

        clauses: List[str] = []
        for match, alias, prefix in (
            (start_node_match, START_ALIAS, "start"),
            (end_node_match, END_ALIAS, "end"),
        ):
            if isinstance(match, NodeMatch):
                pattern, match_params = match.render(alias, prefix)
                params.update(match_params)
                clauses.append(pattern)
            else:
                clauses.append(match)

        cypher = f"""
        MATCH {clauses[0]}
        MATCH {clauses[1]}
        CREATE ({START_ALIAS})-[r:{relationship_type} $properties]->({END_ALIAS})
        RETURN {START_ALIAS}, r, {END_ALIAS}
        """
        return cypher, params

    async def create_node(
        self,
        label: str,
        properties: Mapping[str, Any],
        return_alias: str = "n",
    ) -> Optional[Dict[str, Any]]:
        """Create a node.

        Args:
            label: Label for the node.
            properties: Properties for the node.
            return_alias: Alias used in the RETURN clause.

        Returns:
            ``{return_alias: <node properties>}`` for the created node, or
            None if the engine returned nothing.
        """
        cypher, params = self.build_create_node(label, properties, return_alias)
        return await self.executor.write_single(cypher, params)

    async def find_nodes(
        self,
        label: str,
        properties: Optional[Mapping[str, Any]] = None,
        return_alias: str = "n",
    ) -> List[Dict[str, Any]]:
        """Find nodes by label and, optionally, exact property values.

        Returns:
            List of ``{return_alias: <node properties>}`` rows, possibly empty.
        """
        cypher, params = self.build_find_nodes(label, properties, return_alias)
        return await self.executor.read(cypher, params)

    async def create_relationship(
        self,
        start_node_match: MatchClause,
        end_node_match: MatchClause,
        relationship_type: str,
        properties: Optional[Mapping[str, Any]] = None,
    ) -> Optional[Dict[str, Any]]:
        """Create a relationship between two existing nodes.

        Args:
            start_node_match: ``NodeMatch`` for the start node, or a Cypher
                pattern such as ``"(a:Person {name: 'John'})"``.
            end_node_match: Same for the end node, bound to ``b``.
            relationship_type: Type of the relationship to create.
            properties: Properties for the relationship.

        Returns:
            The ``{"a": ..., "r": ..., "b": ...}`` row, or None if either
            node did not match.
        """
        cypher, params = self.build_create_relationship(
            start_node_match, end_node_match, relationship_type, properties
        )
        return await self.executor.write_single(cypher, params)
