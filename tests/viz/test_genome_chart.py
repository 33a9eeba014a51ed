from __future__ import annotations

import math

import polars as pl
import pytest

from gramviz.io.config import VizSettings
from gramviz.viz.genome import (
    circular_genome_chart,
    circular_layout,
    to_angles,
)


def _chroms() -> pl.DataFrame:
    return pl.DataFrame(
        {"seqname": ["chrA", "chrB"], "start": [1, 1], "end": [100, 300], "strand": ["*", "*"]}
    )


def _genes() -> pl.DataFrame:
    return pl.DataFrame(
        {
            "seqname": ["chrA", "chrB", "chrB", "chrZ"],
            "start": [1, 1, 101, 1],
            "end": [50, 300, 200, 10],
            "strand": ["+", "-", "+", "+"],
            "gene_id": ["g1", "g2", "g3", "g4"],
        }
    )


def test_layout_without_gap_covers_full_circle() -> None:
    layout = circular_layout(_chroms(), gap_fraction=0.0)

    assert layout["seqname"].to_list() == ["chrA", "chrB"]
    assert layout["theta"].to_list() == pytest.approx([0.0, math.pi / 2])
    assert layout["theta2"].to_list() == pytest.approx([math.pi / 2, 2 * math.pi])


def test_layout_with_gap_leaves_blank_between_chromosomes() -> None:
    layout = circular_layout(_chroms(), gap_fraction=0.1)

    end_a = layout["theta2"][0]
    start_b = layout["theta"][1]
    assert start_b - end_a == pytest.approx(2 * math.pi * 0.1 / 2)
    assert layout["theta2"][1] + (start_b - end_a) == pytest.approx(2 * math.pi)


def test_layout_rejects_bad_input() -> None:
    with pytest.raises(ValueError):
        circular_layout(_chroms(), gap_fraction=1.0)
    with pytest.raises(ValueError):
        circular_layout(_chroms().clear())


def test_to_angles_maps_ranges_and_drops_unknown_sequences() -> None:
    layout = circular_layout(_chroms(), gap_fraction=0.0)

    placed = to_angles(_genes(), layout)

    assert sorted(placed["gene_id"].to_list()) == ["g1", "g2", "g3"]
    g2 = placed.filter(pl.col("gene_id") == "g2").row(0, named=True)
    assert g2["theta"] == pytest.approx(math.pi / 2)
    assert g2["theta2"] == pytest.approx(2 * math.pi)


def test_circular_genome_chart_has_four_rings_inside_out() -> None:
    genes = _genes()
    plus = genes.filter(pl.col("strand") == "+")
    minus = genes.filter(pl.col("strand") == "-")
    settings = VizSettings(width=400, height=400)

    spec = circular_genome_chart(_chroms(), plus, minus, settings=settings, title="t").to_dict()

    marks = [lyr["mark"] for lyr in spec["layer"]]
    assert [m["type"] for m in marks] == ["arc", "arc", "arc", "text"]
    radii = [m["radius"] for m in marks]
    assert radii == sorted(radii)
    assert marks[0]["color"] == "steelblue"
    assert marks[1]["color"] == "red"
    assert spec["width"] == spec["height"] == 400
    assert spec["layer"][0]["encoding"]["theta"]["scale"] is None
