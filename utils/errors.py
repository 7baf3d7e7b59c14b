"""
utils/errors.py
---------------
Error taxonomy shared by every layer.
Each error carries the HTTP status code it maps to, so handlers never
need to know which layer raised it.
"""


class ExplorerError(Exception):
    """Base class for all service errors. Defaults to a server error."""

    status_code: int = 500

    def __init__(self, message: str = "internal server error"):
        super().__init__(message)
        self.message = message


# ── 404 ───────────────────────────────────────────────────

class NotFoundError(ExplorerError):
    status_code = 404


class TableNotFoundError(NotFoundError):
    """Raised when a request names a table that is not in the catalog."""

    def __init__(self, table: str):
        super().__init__(f"unknown table: {table}")
        self.table = table


# ── 400 ───────────────────────────────────────────────────

class BadRequestError(ExplorerError):
    status_code = 400


class MissingPrimaryKeyError(BadRequestError):
    """Raised when a row-scoped operation targets a table without a primary key."""

    def __init__(self, table: str):
        super().__init__(f"table {table} has no primary key column")
        self.table = table


# ── 500 ───────────────────────────────────────────────────

class InternalError(ExplorerError):
    status_code = 500


class IntrospectionError(InternalError):
    """Schema discovery failed. Fatal at startup."""


class PayloadDecodeError(InternalError):
    """The request body is not a JSON object."""


class ValueDecodeError(InternalError):
    """A result-set value does not fit its column's decode strategy."""


class StatementExecutionError(InternalError):
    """The database rejected a synthesized statement."""
