"""Batch operations: several queries inside one session and one transaction.

The access mode is chosen once for the whole batch. Each operation's write
intent is its explicit ``is_write`` flag when set; otherwise it is inferred
from the query text by looking for a Cypher updating clause keyword. The
batch runs in write mode if any single operation writes.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Dict, Iterable, List, Mapping, Optional, Type, Union

from pydantic import BaseModel, Field, field_validator

from .projection import M, project_result
from .protocols import TransactionLike

logger = logging.getLogger(__name__)

READ = "read"
WRITE = "write"

# Cypher updating clauses; DETACH DELETE and ON CREATE SET match too.
_WRITE_CLAUSE = re.compile(r"\b(CREATE|MERGE|SET|DELETE|REMOVE)\b", re.IGNORECASE)


class Operation(BaseModel):
    """One query in a batch."""

    query: str
    params: Dict[str, Any] = Field(default_factory=dict)
    is_write: Optional[bool] = None

    @field_validator("params", mode="before")
    @classmethod
    def _null_params_as_empty(cls, value: Any) -> Any:
        return {} if value is None else value

    @property
    def writes(self) -> bool:
        if self.is_write is not None:
            return self.is_write
        return _WRITE_CLAUSE.search(self.query) is not None


OperationInput = Union[Operation, Mapping[str, Any]]


def to_operations(operations: Iterable[OperationInput]) -> List[Operation]:
    """Validate plain mappings into ``Operation`` models, preserving order."""
    return [
        op if isinstance(op, Operation) else Operation.model_validate(op)
        for op in operations
    ]


def resolve_access_mode(operations: Iterable[Operation]) -> str:
    """Return ``"write"`` if any operation writes, else ``"read"``."""
    return WRITE if any(op.writes for op in operations) else READ


async def run_operations(
    tx: TransactionLike,
    operations: List[Operation],
    model: Optional[Type[M]] = None,
) -> List[List[Any]]:
    """Run operations strictly in order inside ``tx``.

    ``results[i]`` holds the projected rows of ``operations[i]``. The first
    failure propagates and the remaining operations are not run.
    """
    results: List[List[Any]] = []
    for index, op in enumerate(operations):
        logger.debug("Batch operation %d: %s", index, op.query[:100])
        result = await tx.run(op.query, op.params)
        results.append(await project_result(result, model))
    return results
