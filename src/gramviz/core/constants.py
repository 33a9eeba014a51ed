"""
gramviz core defaults.

Defines dataset column names and chart defaults consumed by the io and viz
layers. This module is zero-IO and uses only the Python standard library.

Notes:
    - Column names are lower_snake; the bundled iris CSV uses them verbatim.
    - Changing a default here changes the fallback used by gramviz.io.config.VizSettings.
"""

from __future__ import annotations

__all__ = [
    "IRIS_NUMERIC_COLUMNS",
    "IRIS_GROUP_COLUMN",
    "IRIS_SPECIES",
    "FIELD_LABELS",
    "SD_POLICIES",
    "JOIN_POLICIES",
    "DEFAULT_SD_POLICY",
    "DEFAULT_JOIN_POLICY",
    "DEFAULT_BIN_WIDTH",
    "DEFAULT_BIN_BOUNDARY",
    "HIST_TICK_START",
    "HIST_TICK_STOP",
    "SEPAL_WIDTH_THRESHOLD",
]

IRIS_NUMERIC_COLUMNS: tuple[str, ...] = (
    "sepal_length",
    "sepal_width",
    "petal_length",
    "petal_width",
)

IRIS_GROUP_COLUMN: str = "species"

IRIS_SPECIES: tuple[str, ...] = ("setosa", "versicolor", "virginica")

# Axis titles for known columns; unknown columns fall back to the raw name.
FIELD_LABELS: dict[str, str] = {
    "sepal_length": "Sepal Length",
    "sepal_width": "Sepal Width",
    "petal_length": "Petal Length",
    "petal_width": "Petal Width",
    "species": "Species",
}

# "nan": single-observation groups get sd = NaN. "raise": InsufficientDataError.
SD_POLICIES: tuple[str, ...] = ("nan", "raise")
DEFAULT_SD_POLICY: str = "nan"

# "strict": mismatched key sets raise JoinKeyMismatchError. "inner": unmatched keys are dropped.
JOIN_POLICIES: tuple[str, ...] = ("strict", "inner")
DEFAULT_JOIN_POLICY: str = "strict"

DEFAULT_BIN_WIDTH: float = 0.2

# Bin edges are anchored here so that bins start (not center) on tick values.
DEFAULT_BIN_BOUNDARY: float = 0.0

HIST_TICK_START: float = 2.0
HIST_TICK_STOP: float = 5.0

SEPAL_WIDTH_THRESHOLD: float = 3.0
