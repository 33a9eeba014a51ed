"""
gramviz.viz — Layer primitives and charts over Polars frames.

## Responsibilities
- Provide grammar-style layer primitives (data, aesthetics, geometries, layering).
- Build the circular genome chart from range tables.
- Save charts as HTML or Vega-Lite JSON.
- Never mutate input frames or altair global state.

## Public API
- base — Inline data, field typing, per-chart styling.
- layers — data_chart, aes, point, boxplot, stat_sum, histogram, vline, bar, errorbar, compose.
- genome — circular_layout, circle_rect, circle_ideogram, circle_text, circular_genome_chart.
- save — save_chart.

## Import DAG discipline
- Depends on: gramviz.core, gramviz.io (settings, column checks), polars, altair (and stdlib).
- Must not import gramviz.tour or gramviz.cli.

## Examples
```python
from gramviz.io import load_iris
from gramviz.viz import layers

iris = load_iris()
base = layers.aes(layers.data_chart(iris), iris, x="species", y="sepal_length", color="species")
chart = layers.compose(layers.boxplot(base), layers.point(base))
```
"""

from __future__ import annotations

from . import base, genome, layers, save

__all__ = ["base", "genome", "layers", "save"]
