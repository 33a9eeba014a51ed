from __future__ import annotations

from pathlib import Path

import polars as pl
import pytest

from gramviz.io.errors import AnnotationError, DatasetNotFoundError
from gramviz.io.genome import (
    GENE_COLUMNS,
    chromosome_ranges,
    read_gff_features,
    read_gff_genes,
    read_sequence_regions,
    split_by_strand,
)


def _row(*cols: object) -> str:
    return "\t".join(str(c) for c in cols)


def _write_gff(tmp: Path, *, regions: bool = True) -> Path:
    lines = ["##gff-version 3"]
    if regions:
        lines += ["##sequence-region I 1 1000", "##sequence-region II 1 3000"]
    lines += [
        _row("I", "SGD", "gene", 10, 200, ".", "+", ".", "ID=gene:YAL001C;Name=TFC3"),
        _row("I", "SGD", "mRNA", 10, 200, ".", "+", ".", "ID=transcript:YAL001C_mRNA"),
        _row("II", "SGD", "gene", 500, 900, ".", "-", ".", "Name=ABC1"),
        "",
        "# free comment",
        _row("II", "SGD", "gene", 1200, 2500, ".", "+", ".", "Note=unnamed"),
        "##FASTA",
        ">I",
        "ACGT",
    ]
    p = tmp / "mini.gff3"
    p.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return p


def test_read_gff_features_skips_comments_and_fasta(tmp_path: Path) -> None:
    feats = read_gff_features(_write_gff(tmp_path))

    assert feats.height == 4
    assert feats.schema["start"] == pl.Int64
    assert feats["feature"].to_list() == ["gene", "mRNA", "gene", "gene"]


def test_read_gff_genes_ids_and_columns(tmp_path: Path) -> None:
    genes = read_gff_genes(_write_gff(tmp_path))

    assert tuple(genes.columns) == GENE_COLUMNS
    # "gene:" prefix stripped, Name fallback, coordinate fallback
    assert genes["gene_id"].to_list() == ["YAL001C", "ABC1", "II:1200-2500"]
    assert genes["strand"].to_list() == ["+", "-", "+"]


def test_sequence_regions_from_directives(tmp_path: Path) -> None:
    regions = read_sequence_regions(_write_gff(tmp_path))

    assert regions.to_dicts() == [
        {"seqname": "I", "length": 1000},
        {"seqname": "II", "length": 3000},
    ]


def test_sequence_regions_fall_back_to_feature_extent(tmp_path: Path) -> None:
    regions = read_sequence_regions(_write_gff(tmp_path, regions=False))

    assert regions.to_dicts() == [
        {"seqname": "I", "length": 200},
        {"seqname": "II", "length": 2500},
    ]


def test_chromosome_ranges_and_strand_split(tmp_path: Path) -> None:
    gff = _write_gff(tmp_path)

    chroms = chromosome_ranges(read_sequence_regions(gff))
    plus, minus = split_by_strand(read_gff_genes(gff))

    assert chroms.columns == ["seqname", "start", "end", "strand"]
    assert chroms.row(1) == ("II", 1, 3000, "*")
    assert plus.height == 2 and minus.height == 1
    assert minus["gene_id"].item() == "ABC1"


def test_malformed_rows_raise(tmp_path: Path) -> None:
    short = tmp_path / "short.gff3"
    short.write_text(_row("I", "SGD", "gene", 1, 5) + "\n")
    backwards = tmp_path / "backwards.gff3"
    backwards.write_text(_row("I", "SGD", "gene", 50, 5, ".", "+", ".", "ID=x") + "\n")

    with pytest.raises(AnnotationError, match="9 tab-separated"):
        read_gff_features(short)
    with pytest.raises(AnnotationError, match="before start"):
        read_gff_features(backwards)
    with pytest.raises(DatasetNotFoundError):
        read_gff_features(tmp_path / "nope.gff3")


def test_no_matching_feature_type_raises(tmp_path: Path) -> None:
    with pytest.raises(AnnotationError):
        read_gff_genes(_write_gff(tmp_path), feature="exon")
