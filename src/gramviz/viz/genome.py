"""
Circular genome chart built from concentric arc layers.

Chromosomes are laid end to end around the circle (in input order, clockwise
from 12 o'clock) with a small gap between them. Each layer maps a range table
(seqname, start, end) onto that layout and draws it as arcs between two radii,
so rings can be stacked from the inside out like the layers of any other chart.

Layout math
- scale = (2*pi * (1 - gap_fraction)) / total_length radians per base.
- chromosome i starts at sum_{j<i} (length_j * scale + gap), gap = 2*pi * gap_fraction / n.
- a feature [start, end] on chromosome c spans
  [offset_c + (start - 1) * scale, offset_c + end * scale].
"""

from __future__ import annotations

import logging
import math

import altair as alt
import polars as pl

from gramviz.io.config import VizSettings

from .base import apply_chart_defaults, inline_data, validate_schema

__all__ = [
    "circular_layout",
    "to_angles",
    "circle_rect",
    "circle_ideogram",
    "circle_text",
    "circular_genome_chart",
]

logger = logging.getLogger(__name__)

# ggplot's "gray70"
GRAY70 = "#B3B3B3"


def circular_layout(chroms: pl.DataFrame, *, gap_fraction: float = 0.02) -> pl.DataFrame:
    """
    Angular placement of each chromosome.

    Args:
        chroms: Columns seqname, end (length); see gramviz.io.genome.chromosome_ranges.
        gap_fraction: Share of the full circle left blank, split evenly between chromosomes.

    Returns:
        pl.DataFrame: seqname, length, offset (radians), scale (radians per base),
        theta (start angle), theta2 (end angle).
    """
    validate_schema(chroms, ["seqname", "end"])
    if chroms.height == 0:
        raise ValueError("no chromosomes to lay out")
    if not 0 <= gap_fraction < 1:
        raise ValueError("gap_fraction must be in [0, 1)")
    lengths = chroms["end"].cast(pl.Float64).to_list()
    total = sum(lengths)
    if total <= 0:
        raise ValueError("total chromosome length must be > 0")
    scale = 2 * math.pi * (1 - gap_fraction) / total
    gap = 2 * math.pi * gap_fraction / chroms.height

    offsets: list[float] = []
    pos = 0.0
    for length in lengths:
        offsets.append(pos)
        pos += length * scale + gap

    return pl.DataFrame(
        {
            "seqname": chroms["seqname"].to_list(),
            "length": chroms["end"].cast(pl.Int64).to_list(),
            "offset": offsets,
            "scale": [scale] * chroms.height,
        }
    ).with_columns(
        pl.col("offset").alias("theta"),
        (pl.col("offset") + pl.col("length") * pl.col("scale")).alias("theta2"),
    )


def to_angles(ranges: pl.DataFrame, layout: pl.DataFrame) -> pl.DataFrame:
    """Attach theta/theta2 to each range; rows on sequences missing from layout are dropped."""
    validate_schema(ranges, ["seqname", "start", "end"])
    placed = ranges.join(layout.select("seqname", "offset", "scale"), on="seqname", how="inner")
    dropped = ranges.height - placed.height
    if dropped:
        logger.debug("dropped %d ranges on sequences outside the layout", dropped)
    return placed.with_columns(
        (pl.col("offset") + (pl.col("start") - 1) * pl.col("scale")).alias("theta"),
        (pl.col("offset") + pl.col("end") * pl.col("scale")).alias("theta2"),
    ).drop("offset", "scale")


def _arcs(df: pl.DataFrame, *, inner: float, outer: float, **mark_kw) -> alt.Chart:
    return (
        alt.Chart(inline_data(df))
        .mark_arc(radius=outer, radius2=inner, **mark_kw)
        .encode(
            theta=alt.Theta("theta:Q", scale=None),
            theta2=alt.Theta2("theta2:Q"),
        )
    )


def circle_rect(
    ranges: pl.DataFrame,
    layout: pl.DataFrame,
    *,
    inner: float,
    outer: float,
    color: str = "steelblue",
) -> alt.Chart:
    """One ring of rectangles (arcs), one per range."""
    return _arcs(to_angles(ranges, layout), inner=inner, outer=outer, color=color, stroke=color)


def circle_ideogram(
    layout: pl.DataFrame, *, inner: float, outer: float, fill: str = GRAY70
) -> alt.Chart:
    """Whole-chromosome ring."""
    return _arcs(
        layout.select("seqname", "theta", "theta2"),
        inner=inner,
        outer=outer,
        fill=fill,
        stroke="white",
    ).encode(tooltip=["seqname:N"])


def circle_text(layout: pl.DataFrame, *, radius: float, size: int = 9) -> alt.Chart:
    """Chromosome labels at each chromosome's mid angle."""
    mid = layout.select(
        "seqname", ((pl.col("theta") + pl.col("theta2")) / 2).alias("theta_mid")
    )
    return (
        alt.Chart(inline_data(mid))
        .mark_text(radius=radius, fontSize=size, baseline="bottom")
        .encode(theta=alt.Theta("theta_mid:Q", scale=None), text="seqname:N")
    )


def circular_genome_chart(
    chroms: pl.DataFrame,
    genes_plus: pl.DataFrame,
    genes_minus: pl.DataFrame,
    *,
    settings: VizSettings | None = None,
    title: str | None = None,
) -> alt.TopLevelMixin:
    """
    Circular genome plot, layers from inside out: minus-strand genes, plus-strand
    genes, chromosome ideogram, chromosome labels.
    """
    s = settings or VizSettings()
    layout = circular_layout(chroms)
    r = min(s.width, s.height) / 2
    layers = [
        circle_rect(genes_minus, layout, inner=0.50 * r, outer=0.62 * r, color="steelblue"),
        circle_rect(genes_plus, layout, inner=0.64 * r, outer=0.76 * r, color="red"),
        circle_ideogram(layout, inner=0.78 * r, outer=0.84 * r),
        circle_text(layout, radius=0.88 * r),
    ]
    ch = alt.layer(*layers)
    if title:
        ch = ch.properties(title=title)
    side = min(s.width, s.height)
    return apply_chart_defaults(ch, s).properties(width=side, height=side)
