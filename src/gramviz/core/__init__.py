"""
Core package aggregator for gramviz contracts (summary builder, row model, errors, constants).

## Contracts
- Summary — per-group mean/sd aggregation and the mean/sd merge step.
- Schema — typed GroupSummary row model.
- Errors — SummaryError family.
- Constants — dataset column names, policies and chart defaults.

## Notes
- Zero-IO policy: stdlib + polars + pydantic only; no file/network IO.
- Column names are lower_snake.

## Examples
```python
import polars as pl
from gramviz.core import summarize

df = pl.DataFrame({"species": ["a", "a", "a"], "sepal_length": [1.0, 2.0, 3.0]})
summarize(df, "species", "sepal_length")  # one row: mean 2.0, sd 1.0
```
"""

from __future__ import annotations

from .errors import (
    EmptyDatasetError,
    InsufficientDataError,
    InvalidFieldError,
    JoinKeyMismatchError,
    NullGroupError,
    SummaryError,
)
from .schema import GroupSummary
from .summary import aggregate, join_summaries, summarize, summary_records, with_error_bounds

__all__ = [
    "GroupSummary",
    "aggregate",
    "join_summaries",
    "summarize",
    "summary_records",
    "with_error_bounds",
    "SummaryError",
    "InvalidFieldError",
    "EmptyDatasetError",
    "NullGroupError",
    "InsufficientDataError",
    "JoinKeyMismatchError",
]
