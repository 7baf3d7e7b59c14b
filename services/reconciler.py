"""
services/reconciler.py
----------------------
Filters and defaults a client payload against a table's columns before
it is turned into an INSERT or UPDATE.

The contract is deliberately permissive: unknown keys are dropped, not
reported, and the function never fails.
"""

from enum import Enum
from typing import Any, Mapping, Sequence

from models.column import ColumnMeta, ColumnType
from utils.logger import get_logger

logger = get_logger(__name__)

# Zero values injected for required columns the client left out.
ZERO_VALUES: dict[ColumnType, Any] = {
    ColumnType.INTEGER: 0,
    ColumnType.TEXT: "",
}


class ReconcileMode(Enum):
    CREATE = "create"
    UPDATE = "update"


def reconcile(
    payload: Mapping[str, Any],
    columns: Sequence[ColumnMeta],
    mode: ReconcileMode,
) -> dict[str, Any]:
    """
    Reconcile a decoded JSON object with a table's columns.

    Steps:
        1. Drop keys that are not columns of the table.
        2. Drop the primary-key column; keys are never client-settable.
        3. For each column still missing that is NOT NULL, has no default
           and is not the key, inject 0 (integer) or "" (text). Columns of
           other types stay absent and the store decides.

    Both modes apply the same steps.

    Returns:
        A new dict; `payload` is not modified.
    """
    by_name = {c.name: c for c in columns}

    unknown = [k for k in payload if k not in by_name]
    if unknown:
        logger.debug(f"[{mode.value}] dropping unknown fields: {unknown}")

    result = {
        key: value
        for key, value in payload.items()
        if key in by_name and not by_name[key].is_primary_key
    }

    for column in columns:
        if column.name in result or not column.is_required:
            continue
        if column.declared_type in ZERO_VALUES:
            result[column.name] = ZERO_VALUES[column.declared_type]
            logger.debug(f"[{mode.value}] defaulted required column '{column.name}'")

    return result
