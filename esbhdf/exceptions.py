from __future__ import annotations
from typing import Optional


class HDFError(Exception): ...


class CanonError(HDFError): ...


class FormatError(HDFError):
    """Malformed export: bad header, field, read type or identifier."""

    def __init__(
        self, message: str, *, row: Optional[int] = None, field: Optional[str] = None
    ):
        super().__init__(message)
        self.row = row
        self.field = field


class AlignmentError(HDFError): ...


class OrderingError(HDFError): ...


class AggregationError(HDFError): ...


class InsufficientContextWarning(UserWarning): ...

