"""
Ordered walkthrough of the plotting grammar on the iris data (and optionally a genome).

Each section is a named chart builder. Sections run in the order listed in
SECTIONS so that a rendered output directory reads like the walkthrough:

1. Quick charts: a plain scatter and a plain boxplot.
2. Grammar step by step: data, then aesthetics, then geometry, then layering.
3. Statistical transform: overlapping points sized by count.
4. Layer order: boxes over points versus points over boxes.
5. Histogram tuning: centered bins, explicit ticks, boundary-anchored bins, a
   threshold line.
6. Bars: raw values, then per-species mean with +/- one sd error bars.
7. Genome: circular plot of genes by strand (only with an annotation file).

Every builder receives a TourContext and returns a fully configured top-level
chart; nothing is shared between sections.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from pathlib import Path

import altair as alt
import polars as pl

from gramviz.core.constants import (
    HIST_TICK_START,
    HIST_TICK_STOP,
    IRIS_GROUP_COLUMN,
    SEPAL_WIDTH_THRESHOLD,
)
from gramviz.core.summary import summarize, with_error_bounds
from gramviz.io.config import VizSettings
from gramviz.io.genome import (
    chromosome_ranges,
    read_gff_genes,
    read_sequence_regions,
    split_by_strand,
)
from gramviz.viz import layers as _layers
from gramviz.viz.base import apply_chart_defaults, field_label
from gramviz.viz.genome import circular_genome_chart
from gramviz.viz.save import save_chart

__all__ = [
    "TourContext",
    "Section",
    "SECTIONS",
    "section_names",
    "build_sections",
    "render_sections",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TourContext:
    """
    Inputs shared by all sections.

    Attributes:
        iris (pl.DataFrame): Iris-shaped measurements (numeric columns + species).
        settings (VizSettings): Chart and summary settings.
        chroms (pl.DataFrame | None): Chromosome ranges for the genome section.
        genes (pl.DataFrame | None): Gene table for the genome section.
        group (str): Categorical column used for color/fill and summaries.
        value (str): Measurement summarized in the bar/error-bar section.
    """

    iris: pl.DataFrame
    settings: VizSettings = field(default_factory=VizSettings)
    chroms: pl.DataFrame | None = None
    genes: pl.DataFrame | None = None
    group: str = IRIS_GROUP_COLUMN
    value: str = "sepal_length"

    @property
    def has_genome(self) -> bool:
        return self.chroms is not None and self.genes is not None

    def with_genome(self, gff: str | os.PathLike[str]) -> TourContext:
        """Return a copy carrying chromosome ranges and genes read from a GFF3 file."""
        chroms = chromosome_ranges(read_sequence_regions(gff))
        genes = read_gff_genes(gff)
        return TourContext(
            iris=self.iris,
            settings=self.settings,
            chroms=chroms,
            genes=genes,
            group=self.group,
            value=self.value,
        )


@dataclass(frozen=True)
class Section:
    name: str
    title: str
    build: Callable[[TourContext], alt.TopLevelMixin]
    needs_genome: bool = False


def _finish(ch: alt.TopLevelMixin, ctx: TourContext, title: str) -> alt.TopLevelMixin:
    return apply_chart_defaults(ch.properties(title=title), ctx.settings)


def _species_base(ctx: TourContext, **channels: str | None) -> alt.Chart:
    df = ctx.iris
    return _layers.aes(_layers.data_chart(df), df, x=ctx.group, y=ctx.value, **channels)


def _sepal_base(ctx: TourContext) -> alt.Chart:
    df = ctx.iris
    return _layers.aes(
        _layers.data_chart(df), df, x="sepal_length", y="sepal_width", color=ctx.group
    )


# 1. Quick charts


def quick_scatter(ctx: TourContext) -> alt.TopLevelMixin:
    df = ctx.iris
    base = _layers.aes(_layers.data_chart(df), df, x="sepal_length", y="sepal_width")
    ch = _layers.point(base, color="black")
    return _finish(ch, ctx, "Sepal Length-Width")


def quick_boxplot(ctx: TourContext) -> alt.TopLevelMixin:
    title = f"{field_label(ctx.value)} by {field_label(ctx.group)}"
    return _finish(_layers.boxplot(_species_base(ctx)), ctx, title)


# 2. Grammar step by step


def grammar_points(ctx: TourContext) -> alt.TopLevelMixin:
    ch = _layers.point(_species_base(ctx, color=ctx.group))
    return _finish(ch, ctx, "Points colored by group")


def grammar_boxplot(ctx: TourContext) -> alt.TopLevelMixin:
    ch = _layers.boxplot(_species_base(ctx, color=ctx.group))
    return _finish(ch, ctx, "Boxes filled by group")


def grammar_box_and_points(ctx: TourContext) -> alt.TopLevelMixin:
    base = _species_base(ctx, color=ctx.group)
    ch = _layers.compose(_layers.boxplot(base), _layers.point(base))
    return _finish(ch, ctx, "Boxes and points")


# 3. Statistical transform


def scatter_overlap(ctx: TourContext) -> alt.TopLevelMixin:
    return _finish(_layers.point(_sepal_base(ctx)), ctx, "Sepal width vs length")


def stat_sum_points(ctx: TourContext) -> alt.TopLevelMixin:
    pts = _layers.point(_sepal_base(ctx))
    counts = _layers.stat_sum(ctx.iris, x="sepal_length", y="sepal_width", color=ctx.group)
    return _finish(_layers.compose(pts, counts), ctx, "Overlapping points sized by count")


def stat_sum_swapped(ctx: TourContext) -> alt.TopLevelMixin:
    pts = _layers.point(_sepal_base(ctx))
    counts = _layers.stat_sum(ctx.iris, x="sepal_length", y="sepal_width", color=ctx.group)
    return _finish(_layers.compose(counts, pts), ctx, "Count layer drawn first")


# 4. Layer order


def layers_box_then_points(ctx: TourContext) -> alt.TopLevelMixin:
    base = _species_base(ctx, color=ctx.group)
    ch = _layers.compose(_layers.boxplot(base), _layers.point(base))
    return _finish(ch, ctx, "Boxes, then points")


def layers_points_then_box(ctx: TourContext) -> alt.TopLevelMixin:
    base = _species_base(ctx, color=ctx.group)
    ch = _layers.compose(_layers.point(base), _layers.boxplot(base))
    return _finish(ch, ctx, "Points, then boxes")


# 5. Histogram tuning


def _hist(ctx: TourContext, *, boundary: float | None, ticks: bool) -> alt.Chart:
    s = ctx.settings
    return _layers.histogram(
        ctx.iris,
        x="sepal_width",
        fill=ctx.group,
        bin_width=s.bin_width,
        boundary=boundary,
        ticks=_layers.tick_values(HIST_TICK_START, HIST_TICK_STOP, s.bin_width) if ticks else None,
    )


def histogram_centered(ctx: TourContext) -> alt.TopLevelMixin:
    return _finish(_hist(ctx, boundary=None, ticks=False), ctx, "Histogram of Sepal Width")


def histogram_ticks(ctx: TourContext) -> alt.TopLevelMixin:
    ch = _hist(ctx, boundary=None, ticks=True)
    return _finish(ch, ctx, "Histogram of Sepal Width (centered bins)")


def histogram_boundary(ctx: TourContext) -> alt.TopLevelMixin:
    ch = _hist(ctx, boundary=ctx.settings.bin_boundary, ticks=True)
    return _finish(ch, ctx, "Histogram of Sepal Width")


def histogram_threshold(ctx: TourContext) -> alt.TopLevelMixin:
    hist = _hist(ctx, boundary=ctx.settings.bin_boundary, ticks=True)
    return _finish(
        _layers.compose(hist, _layers.vline(SEPAL_WIDTH_THRESHOLD)),
        ctx,
        f"Sepal Width above {SEPAL_WIDTH_THRESHOLD:g}",
    )


# 6. Bars


def bar_raw(ctx: TourContext) -> alt.TopLevelMixin:
    ch = _layers.bar(ctx.iris, x=ctx.group, y=ctx.value)
    return _finish(ch, ctx, f"{field_label(ctx.value)} (raw values)")


def bar_errorbar(ctx: TourContext) -> alt.TopLevelMixin:
    s = ctx.settings
    summary = summarize(
        ctx.iris, ctx.group, ctx.value, sd_policy=s.sd_policy, join_policy=s.join_policy
    )
    summary = with_error_bounds(summary)
    bars = _layers.bar(summary, x=ctx.group, y="mean")
    bars = bars.encode(y=alt.Y("mean:Q", title=field_label(ctx.value), stack=None))
    return _finish(
        _layers.compose(bars, _layers.errorbar(summary, x=ctx.group)),
        ctx,
        f"Mean {field_label(ctx.value)} ± sd",
    )


# 7. Genome


def genome_circle(ctx: TourContext) -> alt.TopLevelMixin:
    if not ctx.has_genome:
        raise ValueError("genome section needs chromosome ranges and genes")
    plus, minus = split_by_strand(ctx.genes)
    logger.debug(
        "genome: %d chromosomes, %d(+) %d(-) genes", ctx.chroms.height, plus.height, minus.height
    )
    return circular_genome_chart(
        ctx.chroms, plus, minus, settings=ctx.settings, title="Genes by strand"
    )


SECTIONS: tuple[Section, ...] = (
    Section("quick_scatter", "Quick scatter", quick_scatter),
    Section("quick_boxplot", "Quick boxplot", quick_boxplot),
    Section("grammar_points", "Aesthetics + point geometry", grammar_points),
    Section("grammar_boxplot", "Aesthetics + boxplot geometry", grammar_boxplot),
    Section("grammar_box_and_points", "Two geometries layered", grammar_box_and_points),
    Section("scatter_overlap", "Overlapping scatter", scatter_overlap),
    Section("stat_sum", "Count overlapping points", stat_sum_points),
    Section("stat_sum_swapped", "Count layer first", stat_sum_swapped),
    Section("layers_box_then_points", "Boxes then points", layers_box_then_points),
    Section("layers_points_then_box", "Points then boxes", layers_points_then_box),
    Section("histogram_centered", "Histogram", histogram_centered),
    Section("histogram_ticks", "Histogram with ticks", histogram_ticks),
    Section("histogram_boundary", "Histogram with bin boundary", histogram_boundary),
    Section("histogram_threshold", "Histogram with threshold", histogram_threshold),
    Section("bar_raw", "Bar of raw values", bar_raw),
    Section("bar_errorbar", "Bar of means with sd", bar_errorbar),
    Section("genome_circle", "Circular genome", genome_circle, needs_genome=True),
)


def section_names(*, include_genome: bool = True) -> list[str]:
    return [s.name for s in SECTIONS if include_genome or not s.needs_genome]


def _select(ctx: TourContext, only: Iterable[str] | None) -> list[Section]:
    known = {s.name for s in SECTIONS}
    wanted = list(only) if only else None
    if wanted:
        unknown = [n for n in wanted if n not in known]
        if unknown:
            raise KeyError(f"unknown sections: {unknown!r}")
    out: list[Section] = []
    for s in SECTIONS:
        if wanted is not None and s.name not in wanted:
            continue
        if s.needs_genome and not ctx.has_genome:
            if wanted is not None:
                raise ValueError(f"section {s.name!r} needs a genome annotation file")
            logger.debug("skipping %s: no genome annotation", s.name)
            continue
        out.append(s)
    return out


def build_sections(
    ctx: TourContext, only: Iterable[str] | None = None
) -> dict[str, alt.TopLevelMixin]:
    """Build the selected sections (all applicable ones by default), in walkthrough order."""
    return {s.name: s.build(ctx) for s in _select(ctx, only)}


def render_sections(
    ctx: TourContext,
    *,
    out_dir: str | os.PathLike[str] | None = None,
    only: Iterable[str] | None = None,
) -> dict[str, Path]:
    """
    Build and save sections as ``NN_<name>.<format>`` under out_dir.

    Returns:
        dict[str, Path]: Section name -> written file, in walkthrough order.
    """
    target = Path(out_dir or ctx.settings.out_dir)
    order = {s.name: i for i, s in enumerate(SECTIONS, start=1)}
    written: dict[str, Path] = {}
    for name, ch in build_sections(ctx, only).items():
        path = target / f"{order[name]:02d}_{name}"
        written[name] = save_chart(ch, path, format=ctx.settings.format)
    logger.info("rendered %d sections to %s", len(written), target)
    return written
