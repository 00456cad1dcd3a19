from __future__ import annotations

from typing import Sequence


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class MissingColumnsError(ValidationError):
    """Raised when a CSV header lacks one of the required column roles."""

    def __init__(self, missing: Sequence[str], headers: Sequence[str]):
        self.missing = list(missing)
        self.headers = list(headers)
        super().__init__(
            f"CSV must have 'name', 'course', and 'batch' columns "
            f"(missing: {', '.join(self.missing)}; found: {', '.join(self.headers) or '-'})"
        )


class CsvParseError(DomainError):
    """Raised when delimited text is structurally broken."""

    def __init__(self, message: str, *, line: int | None = None):
        self.line = line
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message)


class StoreError(DomainError):
    """Raised when the attendee store fails to apply a query or mutation."""


class BulkOperationError(StoreError):
    """A bulk operation stopped part way; `affected` records were applied."""

    def __init__(self, operation: str, *, affected: int, total: int):
        self.operation = operation
        self.affected = affected
        self.total = total
        super().__init__(f"{operation} failed after {affected} of {total} records")
