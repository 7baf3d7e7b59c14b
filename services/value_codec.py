"""
services/value_codec.py
-----------------------
Translates between driver values and JSON-compatible values.

Each column gets a decode strategy chosen from its metadata:
    - text + nullable      -> NullableText (null-aware string)
    - text + NOT NULL      -> plain string
    - integer / other      -> opaque, forwarded to JSON marshaling unchanged
Every strategy yields a DecodedValue, so rows are uniform regardless of
column type.
"""

import base64
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Sequence

from fastapi.encoders import jsonable_encoder

from models.catalog import TableDescriptor
from models.column import ColumnMeta, ColumnType
from utils.errors import ValueDecodeError


def _encode_bytes(value: bytes | memoryview) -> str:
    return base64.b64encode(bytes(value)).decode("ascii")


# Byte payloads have no JSON form of their own; base64 text is the usual one.
_JSON_ENCODERS = {bytes: _encode_bytes, memoryview: _encode_bytes}


class DecodeStrategy(Enum):
    NULLABLE_TEXT = "nullable_text"
    TEXT = "text"
    OPAQUE = "opaque"


@dataclass(frozen=True)
class DecodedValue:
    """
    A decoded result-set value tagged with the strategy that produced it.

    For NULLABLE_TEXT, `valid` distinguishes SQL NULL from a present
    string (including the empty string).
    """
    strategy: DecodeStrategy
    value: Any = None
    valid: bool = True

    @classmethod
    def null_text(cls) -> "DecodedValue":
        return cls(DecodeStrategy.NULLABLE_TEXT, None, valid=False)

    def to_json(self) -> Any:
        if self.strategy is DecodeStrategy.NULLABLE_TEXT:
            return self.value if self.valid else None
        if self.strategy is DecodeStrategy.TEXT:
            return self.value
        return jsonable_encoder(self.value, custom_encoder=_JSON_ENCODERS)


def strategy_for(column: Optional[ColumnMeta]) -> DecodeStrategy:
    """Pick the decode strategy for a column; unknown columns are opaque."""
    if column is None or column.declared_type is not ColumnType.TEXT:
        return DecodeStrategy.OPAQUE
    return DecodeStrategy.NULLABLE_TEXT if column.nullable else DecodeStrategy.TEXT


class ValueCodec:
    """Stateless codec shared by all requests."""

    def decode(self, raw: Any, column: Optional[ColumnMeta]) -> DecodedValue:
        """
        Decode one result-set value using its column's strategy.

        Raises:
            ValueDecodeError: A NULL arrived for a NOT NULL text column.
        """
        strategy = strategy_for(column)

        if strategy is DecodeStrategy.NULLABLE_TEXT:
            if raw is None:
                return DecodedValue.null_text()
            return DecodedValue(strategy, str(raw))

        if strategy is DecodeStrategy.TEXT:
            if raw is None:
                raise ValueDecodeError(f"NULL value in NOT NULL text column '{column.name}'")
            return DecodedValue(strategy, str(raw))

        return DecodedValue(strategy, raw)

    def encode(self, value: Any) -> Any:
        """Identity: the driver coerces bound parameters itself."""
        return value

    def encode_many(self, values: Sequence[Any]) -> list:
        return [self.encode(v) for v in values]

    def decode_row(
        self, names: Sequence[str], raw_row: Sequence[Any], table: TableDescriptor
    ) -> dict:
        """
        Decode a positional result-set row into a generic JSON row.

        Args:
            names: Result-set column names, in position order.
            raw_row: Driver values, in the same order.
            table: Descriptor used to look up each column's metadata.

        Returns:
            Dict of column name -> JSON-compatible value.
        """
        return {
            name: self.decode(raw, table.column(name)).to_json()
            for name, raw in zip(names, raw_row)
        }
