"""
models/column.py
----------------
Column metadata and the normalized type classification that drives
value decoding and default-value injection.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

PRIMARY_KEY_ROLE = "PRI"


class ColumnType(Enum):
    """Normalized column type tag derived from the raw schema type string."""
    INTEGER = "integer"
    TEXT = "text"
    OTHER = "other"


def classify_type(raw_type: str) -> ColumnType:
    """
    Map a raw schema type string onto a ColumnType.

    Array types ('_int4', '_varchar' as udt names, or 'text[]') are always
    OTHER; their values arrive as lists. Otherwise substring rules, checked
    in order:
        - contains "int"                    -> INTEGER
        - equals "text" or contains "varchar" -> TEXT
        - anything else                     -> OTHER
    """
    normalized = (raw_type or "").strip().lower()
    if normalized.startswith("_") or normalized.endswith("[]"):
        return ColumnType.OTHER
    if "int" in normalized:
        return ColumnType.INTEGER
    if normalized == "text" or "varchar" in normalized:
        return ColumnType.TEXT
    return ColumnType.OTHER


@dataclass(frozen=True)
class ColumnMeta:
    """
    Describes one column of a discovered table.

    Attributes:
        name: Column name, unique within its table.
        declared_type: Normalized type tag.
        raw_type: The type string reported by the schema (e.g. 'int4', 'varchar').
        nullable: True if the column accepts NULL.
        key: Key role; 'PRI' marks the primary key, '' otherwise.
        has_default: True if the schema declares a default value.
        collation: Optional collation name.
        extra: Optional extra flags (identity / generated markers).
        comment: Optional column comment.
    """
    name: str
    declared_type: ColumnType
    raw_type: str
    nullable: bool
    key: str = ""
    has_default: bool = False
    collation: Optional[str] = None
    extra: str = ""
    comment: str = ""

    @property
    def is_primary_key(self) -> bool:
        return self.key == PRIMARY_KEY_ROLE

    @property
    def is_required(self) -> bool:
        """True if an insert must supply this column: NOT NULL, no default, not the key."""
        return not self.nullable and not self.has_default and not self.is_primary_key

    def __str__(self) -> str:
        flags = "NULL" if self.nullable else "NOT NULL"
        if self.has_default:
            flags += " DEFAULT"
        if self.is_primary_key:
            flags += " PK"
        return f"{self.name} {self.raw_type} ({self.declared_type.value}) {flags}"
