"""
Core exception types raised by the summary table builder.

Provides typed exceptions for summarization failures:
- InvalidFieldError when a requested column is absent or has the wrong dtype.
- EmptyDatasetError when there are no rows to summarize.
- NullGroupError when the grouping column carries nulls.
- InsufficientDataError when a group is too small for a defined statistic
  (only under the "raise" standard-deviation policy).
- JoinKeyMismatchError when mean/sd tables disagree on their key sets
  (only under the "strict" join policy).

Notes:
    - This module uses only the Python standard library and has no side effects.
    - All errors derive from SummaryError (a ValueError), so callers may catch
      either the specific type or the family.

Examples:
    Catch a missing column.

    >>> from gramviz.core.errors import InvalidFieldError, SummaryError
    >>> try:
    ...     raise InvalidFieldError("unknown column 'petal'")
    ... except SummaryError as e:
    ...     msg = str(e)
    >>> "petal" in msg
    True
"""

from __future__ import annotations

__all__ = [
    "SummaryError",
    "InvalidFieldError",
    "EmptyDatasetError",
    "NullGroupError",
    "InsufficientDataError",
    "JoinKeyMismatchError",
]


class SummaryError(ValueError):
    """Base class for summary table failures."""


class InvalidFieldError(SummaryError):
    """Requested column is absent from the schema or is not numeric where required."""


class EmptyDatasetError(SummaryError):
    """Dataset has no rows."""


class NullGroupError(SummaryError):
    """Grouping column contains null labels."""


class InsufficientDataError(SummaryError):
    """A group has too few observations for the requested statistic."""


class JoinKeyMismatchError(SummaryError):
    """
    Two summary tables cannot be merged one-to-one on their group key.

    Attributes:
        left_only (list): Keys present only in the left (mean) table.
        right_only (list): Keys present only in the right (sd) table.
    """

    def __init__(
        self, message: str, *, left_only: list | None = None, right_only: list | None = None
    ):
        super().__init__(message)
        self.left_only = list(left_only or [])
        self.right_only = list(right_only or [])
