from __future__ import annotations

import json
from pathlib import Path

import pytest

from gramviz.io.config import VizSettings
from gramviz.io.datasets import load_iris
from gramviz.tour import SECTIONS, TourContext, build_sections, render_sections, section_names


def _row(*cols: object) -> str:
    return "\t".join(str(c) for c in cols)


@pytest.fixture
def ctx() -> TourContext:
    return TourContext(iris=load_iris(), settings=VizSettings(format="json"))


@pytest.fixture
def gff(tmp_path: Path) -> Path:
    p = tmp_path / "tiny.gff3"
    p.write_text(
        "\n".join(
            [
                "##gff-version 3",
                "##sequence-region I 1 5000",
                "##sequence-region II 1 8000",
                _row("I", "src", "gene", 100, 900, ".", "+", ".", "ID=gene:A1"),
                _row("I", "src", "gene", 1200, 2000, ".", "-", ".", "ID=gene:A2"),
                _row("II", "src", "gene", 10, 4000, ".", "+", ".", "ID=gene:B1"),
            ]
        )
        + "\n",
        encoding="utf-8",
    )
    return p


def test_sections_follow_walkthrough_order() -> None:
    names = section_names()

    assert names[:2] == ["quick_scatter", "quick_boxplot"]
    assert names.index("layers_box_then_points") < names.index("layers_points_then_box")
    assert names.index("histogram_centered") < names.index("histogram_threshold")
    assert names[-1] == "genome_circle"
    assert "genome_circle" not in section_names(include_genome=False)
    assert len({s.name for s in SECTIONS}) == len(SECTIONS)


def test_build_all_without_genome_skips_genome(ctx: TourContext) -> None:
    charts = build_sections(ctx)

    assert list(charts) == section_names(include_genome=False)
    spec = charts["quick_scatter"].to_dict()
    assert spec["title"] == "Sepal Length-Width"
    assert spec["width"] == ctx.settings.width


def test_bar_errorbar_section_layers_bar_and_errorbar(ctx: TourContext) -> None:
    spec = build_sections(ctx, only=["bar_errorbar"])["bar_errorbar"].to_dict()

    marks = [
        lyr["mark"]["type"] if isinstance(lyr["mark"], dict) else lyr["mark"]
        for lyr in spec["layer"]
    ]
    assert marks == ["bar", "errorbar"]


def test_histogram_threshold_has_rule_at_three(ctx: TourContext) -> None:
    spec = build_sections(ctx, only=["histogram_threshold"])["histogram_threshold"].to_dict()

    hist, rule = spec["layer"]
    assert hist["encoding"]["x"]["bin"]["anchor"] == 0.0
    assert rule["mark"]["type"] == "rule"


def test_unknown_section_raises_key_error(ctx: TourContext) -> None:
    with pytest.raises(KeyError):
        build_sections(ctx, only=["nope"])


def test_genome_section_requires_annotation(ctx: TourContext) -> None:
    with pytest.raises(ValueError):
        build_sections(ctx, only=["genome_circle"])


def test_genome_section_with_annotation(ctx: TourContext, gff: Path) -> None:
    full = ctx.with_genome(gff)

    assert full.has_genome
    charts = build_sections(full, only=["genome_circle"])
    spec = charts["genome_circle"].to_dict()
    assert len(spec["layer"]) == 4


def test_render_sections_writes_numbered_files(ctx: TourContext, tmp_path: Path) -> None:
    written = render_sections(ctx, out_dir=tmp_path, only=["quick_boxplot", "bar_raw"])

    assert list(written) == ["quick_boxplot", "bar_raw"]
    assert written["quick_boxplot"].name == "02_quick_boxplot.json"
    assert written["bar_raw"].name == "15_bar_raw.json"
    for path in written.values():
        assert "$schema" in json.loads(path.read_text(encoding="utf-8"))
