"""
Dataset loading for gramviz.

Purpose
- Load the bundled iris measurements with a pinned schema.
- Read user-supplied CSV/TSV/Parquet tables into Polars.
- Validate that requested columns exist (and are numeric where required) before
  any summarization or charting touches them.

Notes
- Polars-first: every loader returns a pl.DataFrame.
- Column checks raise gramviz.core.errors.InvalidFieldError so callers handle a
  single error type for "bad field name" regardless of layer.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from importlib import resources
from pathlib import Path

import polars as pl

from gramviz.core.constants import IRIS_GROUP_COLUMN, IRIS_NUMERIC_COLUMNS
from gramviz.core.errors import InvalidFieldError

from .errors import DatasetNotFoundError, UnsupportedFormatError

__all__ = [
    "IRIS_SCHEMA",
    "load_iris",
    "read_table",
    "require_columns",
    "require_numeric",
]

logger = logging.getLogger(__name__)

IRIS_SCHEMA: dict[str, pl.DataType] = {
    **{c: pl.Float64() for c in IRIS_NUMERIC_COLUMNS},
    IRIS_GROUP_COLUMN: pl.String(),
}


def load_iris() -> pl.DataFrame:
    """Return the 150-row iris dataset bundled with the package.

    Examples:
        >>> df = load_iris()
        >>> df.shape
        (150, 5)
    """
    src = resources.files("gramviz.data").joinpath("iris.csv")
    with src.open("rb") as fh:
        df = pl.read_csv(fh, schema=IRIS_SCHEMA)
    logger.debug("loaded iris: %d rows", df.height)
    return df


def read_table(path: str | os.PathLike[str]) -> pl.DataFrame:
    """
    Read a tabular file into a DataFrame based on its suffix.

    Args:
        path: .csv, .tsv/.txt (tab-separated) or .parquet file.

    Returns:
        pl.DataFrame

    Raises:
        DatasetNotFoundError: The file does not exist.
        UnsupportedFormatError: The suffix is not one of the supported formats.
    """
    p = Path(path)
    if not p.exists():
        raise DatasetNotFoundError(f"dataset not found: {p}")
    suffix = p.suffix.lower()
    if suffix == ".csv":
        df = pl.read_csv(p)
    elif suffix in (".tsv", ".txt"):
        df = pl.read_csv(p, separator="\t")
    elif suffix in (".parquet", ".pq"):
        df = pl.read_parquet(p)
    else:
        raise UnsupportedFormatError(f"unsupported table format {suffix!r} for {p}")
    logger.debug("read %s: %d rows x %d cols", p, df.height, df.width)
    return df


def require_columns(df: pl.DataFrame, columns: Iterable[str]) -> None:
    """Raise InvalidFieldError listing every requested column missing from df."""
    missing = [c for c in columns if c not in df.columns]
    if missing:
        raise InvalidFieldError(f"missing columns: {missing!r} (available={df.columns!r})")


def require_numeric(df: pl.DataFrame, columns: Iterable[str]) -> None:
    """Raise InvalidFieldError if any column is missing or not numeric."""
    cols = list(columns)
    require_columns(df, cols)
    bad = {c: str(df.schema[c]) for c in cols if not df.schema[c].is_numeric()}
    if bad:
        raise InvalidFieldError(f"non-numeric columns: {bad!r}")
