"""
gramviz.io — Settings, dataset loading and genome annotation parsing.

## Responsibilities
- Provide VizSettings with env > TOML > defaults precedence.
- Load the bundled iris dataset and user tables as Polars DataFrames.
- Parse local GFF3 annotation into gene and chromosome range tables.

## Public API
- VizSettings — Configuration for summaries and chart rendering.
- load_iris, read_table — Dataset loaders.
- read_gff_genes, read_sequence_regions, chromosome_ranges, split_by_strand — Annotation helpers.

## Import DAG discipline
- Depends only on stdlib, polars, and gramviz.core.*.
- MUST NOT import gramviz.viz, gramviz.tour or gramviz.cli.

## Examples
```python
from gramviz.io import VizSettings, load_iris

settings = VizSettings.load()
iris = load_iris()
```
"""

from __future__ import annotations

from .config import VizSettings
from .datasets import load_iris, read_table, require_columns, require_numeric
from .genome import chromosome_ranges, read_gff_genes, read_sequence_regions, split_by_strand

__all__ = [
    "VizSettings",
    "load_iris",
    "read_table",
    "require_columns",
    "require_numeric",
    "read_gff_genes",
    "read_sequence_regions",
    "chromosome_ranges",
    "split_by_strand",
]
