"""
Shared chart plumbing: data embedding, field typing, per-chart styling.

Notes
- Data is embedded inline (``alt.Data(values=...)``) so charts are self-contained
  and independent of altair's DataFrame adapters.
- Styling is applied per chart via ``configure_*``; no global theme is enabled.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from typing import Any

import altair as alt
import polars as pl

from gramviz.core.constants import FIELD_LABELS
from gramviz.io.config import VizSettings
from gramviz.io.datasets import require_columns

__all__ = [
    "apply_chart_defaults",
    "field_label",
    "field_type",
    "to_values",
    "inline_data",
    "validate_schema",
]


def apply_chart_defaults(
    ch: alt.TopLevelMixin, settings: VizSettings | None = None
) -> alt.TopLevelMixin:
    """Uniform look for a top-level chart, sized and styled from settings."""
    s = settings or VizSettings()
    return (
        ch.properties(width=s.width, height=s.height)
        .configure_axis(labelFontSize=s.font_size, titleFontSize=s.font_size, grid=True)
        .configure_legend(labelFontSize=s.font_size, titleFontSize=s.font_size)
        .configure_title(fontSize=s.font_size + 2)
        .configure_view(strokeOpacity=0)
    )


def field_label(col: str) -> str:
    return FIELD_LABELS.get(col, col)


def field_type(df: pl.DataFrame, col: str) -> str:
    """Vega-Lite shorthand type for a column: "Q" for numeric, "N" otherwise."""
    return "Q" if df.schema[col].is_numeric() else "N"


def to_values(df: pl.DataFrame) -> list[dict[str, Any]]:
    """Rows as dicts, with NaN replaced by None (NaN is not valid JSON)."""
    return [
        {k: (None if isinstance(v, float) and math.isnan(v) else v) for k, v in row.items()}
        for row in df.iter_rows(named=True)
    ]


def inline_data(df: pl.DataFrame) -> alt.Data:
    return alt.Data(values=to_values(df))


def validate_schema(df: pl.DataFrame, columns: Iterable[str]) -> None:
    """Raise InvalidFieldError if any encoded column is absent."""
    require_columns(df, [c for c in columns if c])
