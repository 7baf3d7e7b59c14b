"""
models/catalog.py
-----------------
Table descriptors and the read-only schema catalog built at startup.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterator, Optional

from models.column import ColumnMeta
from utils.errors import TableNotFoundError


@dataclass(frozen=True)
class TableDescriptor:
    """
    One discovered table.

    Attributes:
        name: Table name, unique across the catalog.
        columns: Columns in schema declaration order.
    """
    name: str
    columns: tuple[ColumnMeta, ...]

    @property
    def primary_key(self) -> Optional[ColumnMeta]:
        """The first column flagged 'PRI', or None for key-less tables."""
        for column in self.columns:
            if column.is_primary_key:
                return column
        return None

    @property
    def column_names(self) -> list[str]:
        return [c.name for c in self.columns]

    def column(self, name: str) -> Optional[ColumnMeta]:
        for column in self.columns:
            if column.name == name:
                return column
        return None


class SchemaCatalog(Mapping):
    """
    Immutable mapping of table name -> TableDescriptor.

    Built once before the server accepts requests and shared by all of
    them. Nothing mutates it afterwards, so concurrent reads need no lock.
    """

    def __init__(self, tables: list[TableDescriptor]):
        self._tables = MappingProxyType({t.name: t for t in tables})

    def __getitem__(self, name: str) -> TableDescriptor:
        return self._tables[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._tables)

    def __len__(self) -> int:
        return len(self._tables)

    def table_names(self) -> list[str]:
        return sorted(self._tables)

    def require(self, name: str) -> TableDescriptor:
        """
        Look up a table, raising if it was not discovered.

        Raises:
            TableNotFoundError: If `name` is not in the catalog.
        """
        table = self._tables.get(name)
        if table is None:
            raise TableNotFoundError(name)
        return table

    def __repr__(self) -> str:
        return f"SchemaCatalog({self.table_names()})"
