"""
Genome annotation loading from local GFF3 files.

Purpose
- Extract gene features (seqname, start, end, strand, gene_id) into Polars.
- Derive chromosome extents from ``##sequence-region`` directives, falling back
  to the furthest feature end per sequence when the directives are absent.
- Shape the tables consumed by the circular genome chart: a chromosome-level
  range table and the gene table split by strand.

Notes
- Coordinates are 1-based inclusive, as written in GFF3.
- Parsing stops at a ``##FASTA`` directive; embedded sequence is ignored.
- Fetching annotation from remote services is out of scope; download a GFF3
  (e.g. from Ensembl) and pass its path.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import polars as pl

from .errors import AnnotationError, DatasetNotFoundError

__all__ = [
    "GENE_COLUMNS",
    "read_gff_features",
    "read_gff_genes",
    "read_sequence_regions",
    "chromosome_ranges",
    "split_by_strand",
]

logger = logging.getLogger(__name__)

GENE_COLUMNS: tuple[str, ...] = ("seqname", "start", "end", "strand", "gene_id")

_GFF_FIELDS = (
    "seqname",
    "source",
    "feature",
    "start",
    "end",
    "score",
    "strand",
    "phase",
    "attributes",
)


def _lines(path: str | os.PathLike[str]) -> list[str]:
    p = Path(path)
    if not p.exists():
        raise DatasetNotFoundError(f"annotation not found: {p}")
    return p.read_text(encoding="utf-8").splitlines()


def _parse_attributes(text: str) -> dict[str, str]:
    out: dict[str, str] = {}
    for part in text.strip().split(";"):
        if "=" in part:
            k, v = part.split("=", 1)
            out[k.strip()] = v.strip()
    return out


def _gene_id(attrs: dict[str, str], fallback: str) -> str:
    raw = attrs.get("ID") or attrs.get("gene_id") or attrs.get("Name")
    if not raw:
        return fallback
    # Ensembl writes IDs as "gene:YAL069W"
    return raw.split(":", 1)[1] if raw.startswith("gene:") else raw


def read_gff_features(path: str | os.PathLike[str]) -> pl.DataFrame:
    """
    Parse every feature row of a GFF3 file.

    Returns:
        pl.DataFrame: Columns seqname, source, feature, start, end, score, strand,
        phase, attributes (start/end as Int64, the rest as strings).

    Raises:
        DatasetNotFoundError: Path does not exist.
        AnnotationError: A row has fewer than nine columns or non-integer coordinates.
    """
    rows: list[tuple] = []
    for lineno, line in enumerate(_lines(path), start=1):
        if line.startswith("##FASTA"):
            break
        if not line.strip() or line.startswith("#"):
            continue
        cols = line.split("\t")
        if len(cols) < 9:
            raise AnnotationError(
                f"{path}:{lineno}: expected 9 tab-separated columns, got {len(cols)}"
            )
        try:
            start, end = int(cols[3]), int(cols[4])
        except ValueError as exc:
            raise AnnotationError(f"{path}:{lineno}: non-integer coordinates") from exc
        if end < start:
            raise AnnotationError(f"{path}:{lineno}: end {end} before start {start}")
        rows.append((cols[0], cols[1], cols[2], start, end, cols[5], cols[6], cols[7], cols[8]))

    schema = {f: (pl.Int64 if f in ("start", "end") else pl.String) for f in _GFF_FIELDS}
    return pl.DataFrame(rows, schema=schema, orient="row")


def read_gff_genes(path: str | os.PathLike[str], *, feature: str = "gene") -> pl.DataFrame:
    """
    Gene features of a GFF3 file.

    Args:
        path: GFF3 file.
        feature: Feature type to keep (column 3), "gene" by default.

    Returns:
        pl.DataFrame: Columns ``GENE_COLUMNS`` in file order.

    Raises:
        AnnotationError: No features of the requested type.
    """
    feats = read_gff_features(path).filter(pl.col("feature") == feature)
    if feats.height == 0:
        raise AnnotationError(f"no {feature!r} features in {path}")
    ids = [
        _gene_id(_parse_attributes(a), f"{s}:{b}-{e}")
        for s, b, e, a in feats.select("seqname", "start", "end", "attributes").iter_rows()
    ]
    genes = feats.select("seqname", "start", "end", "strand").with_columns(
        pl.Series("gene_id", ids, dtype=pl.String)
    )
    logger.debug("read %d %s features from %s", genes.height, feature, path)
    return genes


def read_sequence_regions(path: str | os.PathLike[str]) -> pl.DataFrame:
    """
    Chromosome lengths declared by ``##sequence-region`` directives.

    Falls back to the maximum feature end per sequence when the file declares no
    regions. Order follows the file.

    Returns:
        pl.DataFrame: Columns seqname (str), length (Int64).
    """
    regions: dict[str, int] = {}
    for line in _lines(path):
        if line.startswith("##FASTA"):
            break
        if line.startswith("##sequence-region"):
            parts = line.split()
            if len(parts) != 4:
                raise AnnotationError(f"malformed directive: {line!r}")
            try:
                regions[parts[1]] = int(parts[3])
            except ValueError as exc:
                raise AnnotationError(f"malformed directive: {line!r}") from exc
    if regions:
        return pl.DataFrame(
            {"seqname": list(regions), "length": list(regions.values())},
            schema={"seqname": pl.String, "length": pl.Int64},
        )

    logger.debug("no ##sequence-region directives in %s; using feature extents", path)
    feats = read_gff_features(path)
    if feats.height == 0:
        raise AnnotationError(f"no sequence regions or features in {path}")
    return feats.group_by("seqname", maintain_order=True).agg(pl.col("end").max().alias("length"))


def chromosome_ranges(lengths: pl.DataFrame) -> pl.DataFrame:
    """
    One whole-chromosome range per sequence: start 1, end = length, strand "*".

    Args:
        lengths: Columns seqname, length (see read_sequence_regions).

    Returns:
        pl.DataFrame: Columns seqname, start, end, strand in input order.
    """
    missing = [c for c in ("seqname", "length") if c not in lengths.columns]
    if missing:
        raise AnnotationError(f"lengths table missing columns: {missing!r}")
    return lengths.select(
        pl.col("seqname"),
        pl.lit(1, dtype=pl.Int64).alias("start"),
        pl.col("length").cast(pl.Int64).alias("end"),
        pl.lit("*").alias("strand"),
    )


def split_by_strand(genes: pl.DataFrame) -> tuple[pl.DataFrame, pl.DataFrame]:
    """Return (plus-strand genes, minus-strand genes); unstranded rows are in neither."""
    if "strand" not in genes.columns:
        raise AnnotationError("genes table has no 'strand' column")
    return (
        genes.filter(pl.col("strand") == "+"),
        genes.filter(pl.col("strand") == "-"),
    )
