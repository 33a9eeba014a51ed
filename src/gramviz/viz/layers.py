"""
Layer primitives in grammar-of-graphics style.

A chart is built the same way the grammar describes it: start from data
(``data_chart``), map columns to channels (``aes``), pick a geometry (``point``,
``boxplot``, ``bar`` ...), and stack layers with ``compose``. Layers are drawn in
the order given, so ``compose(box, pts)`` puts points on top of boxes.

Statistical work (binning, counting overlaps, box statistics) is delegated to
Vega-Lite transforms; only the mean/sd summary used by error bars is computed
in Polars (see gramviz.core.summary).
"""

from __future__ import annotations

import math

import altair as alt
import polars as pl

from .base import field_label, field_type, inline_data, validate_schema

__all__ = [
    "data_chart",
    "aes",
    "point",
    "boxplot",
    "stat_sum",
    "histogram",
    "tick_values",
    "vline",
    "bar",
    "errorbar",
    "compose",
]

_CHANNELS = {
    "x": alt.X,
    "y": alt.Y,
    "color": alt.Color,
    "fill": alt.Fill,
    "size": alt.Size,
}

# Vega-Lite dash pattern closest to ggplot's "dotdash".
DOTDASH: list[int] = [1, 3, 6, 3]


def data_chart(df: pl.DataFrame) -> alt.Chart:
    """An empty plotting space bound to df (no channels, no mark yet)."""
    return alt.Chart(inline_data(df))


def aes(chart: alt.Chart, df: pl.DataFrame, **channels: str | None) -> alt.Chart:
    """
    Map columns of df to encoding channels on chart.

    Args:
        chart: Chart bound to df (see data_chart).
        df: Frame whose schema decides each field's type.
        **channels: Channel name (x, y, color, fill, size) -> column name. None entries are skipped.

    Returns:
        alt.Chart: Chart with the encodings added.

    Raises:
        InvalidFieldError: A mapped column is absent from df.
        ValueError: Unknown channel name.
    """
    used = {ch: col for ch, col in channels.items() if col}
    unknown = [ch for ch in used if ch not in _CHANNELS]
    if unknown:
        raise ValueError(f"unknown channels: {unknown!r} (allowed={sorted(_CHANNELS)!r})")
    validate_schema(df, used.values())
    enc = {
        ch: _CHANNELS[ch](f"{col}:{field_type(df, col)}", title=field_label(col))
        for ch, col in used.items()
    }
    return chart.encode(**enc)


def point(chart: alt.Chart, **mark_kw) -> alt.Chart:
    return chart.mark_point(filled=True, **mark_kw)


def boxplot(chart: alt.Chart, **mark_kw) -> alt.Chart:
    return chart.mark_boxplot(**mark_kw)


def stat_sum(df: pl.DataFrame, *, x: str, y: str, color: str | None = None) -> alt.Chart:
    """Points sized by how many rows share the same (x, y[, color]) position."""
    ch = aes(data_chart(df), df, x=x, y=y, color=color)
    return ch.mark_point(filled=True, opacity=0.6).encode(
        size=alt.Size("count():Q", title="n")
    )


def tick_values(start: float, stop: float, step: float) -> list[float]:
    """Evenly spaced tick positions from start up to stop (inclusive when stop is on the grid)."""
    if step <= 0:
        raise ValueError("step must be > 0")
    n = math.floor((stop - start) / step + 1e-9)
    return [round(start + i * step, 10) for i in range(n + 1)]


def histogram(
    df: pl.DataFrame,
    *,
    x: str,
    fill: str | None = None,
    bin_width: float = 0.2,
    boundary: float | None = None,
    ticks: list[float] | None = None,
    stroke: str = "gray",
) -> alt.Chart:
    """
    Stacked histogram of x.

    Args:
        df: Source rows.
        x: Numeric column to bin.
        fill: Optional categorical column for stacked fill.
        bin_width: Bin width.
        boundary: Bin edge anchor. None centers bins on multiples of bin_width
            (edges at half-width offsets); 0 makes bins start on multiples.
        ticks: Explicit axis tick positions.
        stroke: Bar outline color.
    """
    validate_schema(df, [x, fill])
    anchor = bin_width / 2 if boundary is None else boundary
    axis = alt.Axis(values=ticks) if ticks else alt.Axis()
    enc: dict = {
        "x": alt.X(
            f"{x}:Q",
            bin=alt.Bin(step=bin_width, anchor=anchor),
            title=field_label(x),
            axis=axis,
        ),
        "y": alt.Y("count():Q", title="Frequency", stack=True),
    }
    if fill:
        enc["color"] = alt.Color(f"{fill}:N", title=field_label(fill))
    return data_chart(df).mark_bar(stroke=stroke).encode(**enc)


def vline(
    xintercept: float, *, color: str = "red", dash: list[int] | None = None
) -> alt.Chart:
    """A vertical rule at xintercept, dot-dash by default."""
    return (
        alt.Chart(alt.Data(values=[{"x": float(xintercept)}]))
        .mark_rule(color=color, strokeDash=dash or DOTDASH, size=2)
        .encode(x="x:Q")
    )


def bar(df: pl.DataFrame, *, x: str, y: str, **mark_kw) -> alt.Chart:
    """Bars whose height is the y value itself (no aggregation, no stacking)."""
    ch = aes(data_chart(df), df, x=x, y=y).mark_bar(**mark_kw)
    return ch.encode(y=alt.Y(f"{y}:Q", title=field_label(y), stack=None))


def errorbar(
    df: pl.DataFrame,
    *,
    x: str,
    lower: str = "lower",
    upper: str = "upper",
    tick_size: int = 20,
) -> alt.Chart:
    """
    Error bars spanning [lower, upper] at each x.

    Args:
        df: Frame with x, lower and upper columns (see gramviz.core.summary.with_error_bounds).
        tick_size: End-tick length in pixels.
    """
    validate_schema(df, [x, lower, upper])
    return (
        data_chart(df)
        .mark_errorbar(ticks=True, size=tick_size, thickness=1.5)
        .encode(
            x=alt.X(f"{x}:{field_type(df, x)}", title=field_label(x)),
            y=alt.Y(f"{lower}:Q", title=None),
            y2=alt.Y2(f"{upper}:Q"),
        )
    )


def compose(*layers: alt.Chart) -> alt.LayerChart:
    """Stack layers; later layers are drawn on top."""
    if not layers:
        raise ValueError("compose needs at least one layer")
    return alt.layer(*layers)
