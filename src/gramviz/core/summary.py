"""
Summary table builder: per-group mean and sample standard deviation.

The builder mirrors the two-step recipe used in the walkthrough: aggregate the
mean per category, aggregate the standard deviation per category, then merge
both tables on the category key.

Output contract
- Columns: ``{group_field, "mean", "sd"}`` (plus ``"n"`` when requested).
- One row per distinct value of ``group_field``.
- Rows ordered lexicographically by the group label (categoricals are ordered
  by their string label, not their physical encoding).
- Null measurements are ignored; the count ``n`` is the non-null count.
- ``sd`` uses the n-1 denominator.

Small groups
- sd_policy="nan" (default): a group with fewer than two observations gets
  ``sd = NaN`` (and ``mean = NaN`` when it has none).
- sd_policy="raise": such groups raise InsufficientDataError.

Join policy
- policy="strict" (default): key sets must match; otherwise JoinKeyMismatchError.
- policy="inner": unmatched keys are dropped and logged at WARNING.

Examples:
    >>> import polars as pl
    >>> df = pl.DataFrame({"g": ["a", "a", "a", "b", "b"], "v": [1.0, 2.0, 3.0, 4.0, 6.0]})
    >>> summarize(df, "g", "v").rows()
    [('a', 2.0, 1.0), ('b', 5.0, 1.4142135623730951)]
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

import polars as pl

from .constants import DEFAULT_JOIN_POLICY, DEFAULT_SD_POLICY, JOIN_POLICIES, SD_POLICIES
from .errors import (
    EmptyDatasetError,
    InsufficientDataError,
    InvalidFieldError,
    JoinKeyMismatchError,
    NullGroupError,
)
from .schema import GroupSummary

__all__ = [
    "aggregate",
    "summarize",
    "join_summaries",
    "with_error_bounds",
    "summary_records",
]

logger = logging.getLogger(__name__)

# Minimum non-null observations for each statistic to be defined.
_MIN_COUNT: dict[str, int] = {"mean": 1, "sd": 2, "count": 0}


def _check_policy(value: str | None, allowed: tuple[str, ...], default: str, what: str) -> str:
    if value is None:
        return default
    lo = value.strip().lower()
    if lo not in allowed:
        raise ValueError(f"unknown {what} {value!r} (allowed={list(allowed)!r})")
    return lo


def _check_fields(dataset: pl.DataFrame, group_field: str, value_field: str) -> None:
    if dataset.height == 0:
        raise EmptyDatasetError("cannot summarize an empty dataset")
    missing = [c for c in (group_field, value_field) if c not in dataset.columns]
    if missing:
        raise InvalidFieldError(f"unknown columns: {missing!r} (available={dataset.columns!r})")
    if group_field == value_field:
        raise InvalidFieldError(f"group and value field must differ (both {group_field!r})")
    dtype = dataset.schema[value_field]
    if not dtype.is_numeric():
        raise InvalidFieldError(f"value field {value_field!r} must be numeric, got {dtype}")
    nulls = dataset[group_field].null_count()
    if nulls:
        raise NullGroupError(f"group field {group_field!r} has {nulls} null label(s)")


def _is_categorical(dtype: pl.DataType) -> bool:
    return dtype == pl.Categorical or isinstance(dtype, pl.Enum)


def _sort_groups(df: pl.DataFrame, group_field: str) -> pl.DataFrame:
    if _is_categorical(df.schema[group_field]):
        return df.sort(pl.col(group_field).cast(pl.String))
    return df.sort(group_field)


def aggregate(
    dataset: pl.DataFrame,
    group_field: str,
    value_field: str,
    stat: str,
    *,
    name: str | None = None,
    sd_policy: str | None = None,
) -> pl.DataFrame:
    """
    Compute one statistic of ``value_field`` per ``group_field`` value.

    Args:
        dataset (pl.DataFrame): Source rows.
        group_field (str): Categorical column to partition by.
        value_field (str): Numeric column to summarize.
        stat (str): One of "mean", "sd", "count".
        name (str | None): Output column name (defaults to ``stat``).
        sd_policy (str | None): "nan" or "raise" for groups below the minimum size.

    Returns:
        pl.DataFrame: Columns ``{group_field, name}``, one row per group, sorted by label.

    Raises:
        InvalidFieldError: Missing or non-numeric fields, or an unknown stat.
        EmptyDatasetError: No rows.
        NullGroupError: Null group labels.
        InsufficientDataError: Under sd_policy="raise", a group below the minimum size.
    """
    if stat not in _MIN_COUNT:
        raise InvalidFieldError(f"unknown stat {stat!r} (allowed={sorted(_MIN_COUNT)!r})")
    policy = _check_policy(sd_policy, SD_POLICIES, DEFAULT_SD_POLICY, "sd policy")
    _check_fields(dataset, group_field, value_field)
    out_name = name or stat

    col = pl.col(value_field).cast(pl.Float64)
    exprs = {
        "mean": col.mean(),
        "sd": col.std(ddof=1),
        "count": col.count(),
    }
    grouped = dataset.group_by(group_field).agg(
        exprs[stat].alias("_stat"),
        col.count().alias("_n"),
    )
    grouped = _sort_groups(grouped, group_field)

    min_n = _MIN_COUNT[stat]
    if min_n:
        short = grouped.filter(pl.col("_n") < min_n)
        if short.height:
            labels = short[group_field].to_list()
            if policy == "raise":
                raise InsufficientDataError(
                    f"{stat} of {value_field!r} needs >= {min_n} observations; "
                    f"groups below that: {labels!r}"
                )
            logger.debug("%s undefined for groups %r; emitting NaN", stat, labels)
        grouped = grouped.with_columns(
            pl.when(pl.col("_n") < min_n)
            .then(pl.lit(float("nan")))
            .otherwise(pl.col("_stat"))
            .alias("_stat")
        )

    return grouped.select(pl.col(group_field), pl.col("_stat").alias(out_name))


def join_summaries(
    mean_table: pl.DataFrame,
    sd_table: pl.DataFrame,
    on: str,
    *,
    policy: str | None = None,
) -> pl.DataFrame:
    """
    Merge two per-group tables on their shared group key.

    Args:
        mean_table (pl.DataFrame): Left table (typically ``{on, "mean"}``).
        sd_table (pl.DataFrame): Right table (typically ``{on, "sd"}``).
        on (str): Group key column present in both.
        policy (str | None): "strict" (default) or "inner".

    Returns:
        pl.DataFrame: Left columns followed by the right table's non-key columns,
        one row per matched key, sorted by label.

    Raises:
        InvalidFieldError: Key column missing from either table.
        NullGroupError: Null keys in either table.
        JoinKeyMismatchError: Duplicate keys on either side, or (strict) differing key sets.
    """
    how = _check_policy(policy, JOIN_POLICIES, DEFAULT_JOIN_POLICY, "join policy")
    for label, table in (("left", mean_table), ("right", sd_table)):
        if on not in table.columns:
            raise InvalidFieldError(f"join key {on!r} missing from {label} table")
        nulls = table[on].null_count()
        if nulls:
            raise NullGroupError(f"join key {on!r} has {nulls} null label(s) in {label} table")
        if table[on].is_duplicated().any():
            dups = table.filter(table[on].is_duplicated())[on].unique().to_list()
            raise JoinKeyMismatchError(f"duplicate keys in {label} table: {dups!r}")

    left, right = mean_table, sd_table
    if _is_categorical(left.schema[on]) or _is_categorical(right.schema[on]):
        left = left.with_columns(pl.col(on).cast(pl.String))
        right = right.with_columns(pl.col(on).cast(pl.String))
    elif left.schema[on] != right.schema[on]:
        right = right.with_columns(pl.col(on).cast(left.schema[on]))

    left_keys = set(left[on].to_list())
    right_keys = set(right[on].to_list())
    left_only = sorted(left_keys - right_keys, key=str)
    right_only = sorted(right_keys - left_keys, key=str)
    if left_only or right_only:
        if how == "strict":
            raise JoinKeyMismatchError(
                f"group keys differ on {on!r}: left only {left_only!r}, right only {right_only!r}",
                left_only=left_only,
                right_only=right_only,
            )
        logger.warning(
            "inner join on %r dropped keys: left only %r, right only %r", on, left_only, right_only
        )

    return _sort_groups(left.join(right, on=on, how="inner"), on)


def summarize(
    dataset: pl.DataFrame,
    group_field: str,
    value_field: str,
    *,
    sd_policy: str | None = None,
    join_policy: str | None = None,
    include_count: bool = False,
) -> pl.DataFrame:
    """
    Per-group mean and sample standard deviation of ``value_field``.

    Args:
        dataset (pl.DataFrame): Source rows.
        group_field (str): Categorical column to partition by.
        value_field (str): Numeric column to summarize.
        sd_policy (str | None): "nan" (default) or "raise" for groups with fewer than two values.
        join_policy (str | None): "strict" (default) or "inner" for the mean/sd merge.
        include_count (bool): Append the non-null observation count as ``"n"``.

    Returns:
        pl.DataFrame: ``{group_field, "mean", "sd"}`` (+ ``"n"``), sorted by group label.

    Raises:
        InvalidFieldError, EmptyDatasetError, NullGroupError, InsufficientDataError.
    """
    means = aggregate(dataset, group_field, value_field, "mean", sd_policy=sd_policy)
    sds = aggregate(dataset, group_field, value_field, "sd", sd_policy=sd_policy)
    out = join_summaries(means, sds, on=group_field, policy=join_policy)
    if include_count:
        counts = aggregate(dataset, group_field, value_field, "count", name="n")
        out = join_summaries(out, counts, on=group_field, policy=join_policy)
    logger.debug(
        "summarized %r by %r: %d rows -> %d groups",
        value_field,
        group_field,
        dataset.height,
        out.height,
    )
    return out


def with_error_bounds(
    summary: pl.DataFrame, *, mean: str = "mean", sd: str = "sd"
) -> pl.DataFrame:
    """Add ``lower = mean - sd`` and ``upper = mean + sd`` columns for error-bar layers."""
    missing = [c for c in (mean, sd) if c not in summary.columns]
    if missing:
        raise InvalidFieldError(f"summary missing columns: {missing!r}")
    return summary.with_columns(
        (pl.col(mean) - pl.col(sd)).alias("lower"),
        (pl.col(mean) + pl.col(sd)).alias("upper"),
    )


def summary_records(summary: pl.DataFrame, group_field: str) -> list[GroupSummary]:
    """Convert a summary frame into typed GroupSummary rows (order preserved)."""
    need: Iterable[str] = (group_field, "mean", "sd")
    missing = [c for c in need if c not in summary.columns]
    if missing:
        raise InvalidFieldError(f"summary missing columns: {missing!r}")
    has_n = "n" in summary.columns
    return [
        GroupSummary(
            group=row[group_field],
            mean=row["mean"],
            sd=row["sd"],
            n=row["n"] if has_n else None,
        )
        for row in summary.iter_rows(named=True)
    ]
