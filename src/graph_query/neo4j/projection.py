"""Record projection: turn driver rows into plain or typed values."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Type, TypeVar, Union

from pydantic import BaseModel

from .protocols import RecordLike, ResultLike

M = TypeVar("M", bound=BaseModel)

Row = Dict[str, Any]


def project_record(
    record: RecordLike, model: Optional[Type[M]] = None
) -> Union[Row, M]:
    """Convert one record to a dict, or validate it into ``model`` if given."""
    row = record.data()
    if model is None:
        return row
    return model.model_validate(row)


async def project_result(
    result: ResultLike, model: Optional[Type[M]] = None
) -> List[Any]:
    """Drain a result in engine order.

    Must be awaited inside the transaction function; the driver discards
    unconsumed records once the transaction ends.
    """
    return [project_record(record, model) async for record in result]
