from __future__ import annotations

from pathlib import Path

import polars as pl
import pytest

from gramviz.core.constants import IRIS_NUMERIC_COLUMNS, IRIS_SPECIES
from gramviz.core.errors import InvalidFieldError
from gramviz.io.datasets import load_iris, read_table, require_columns, require_numeric
from gramviz.io.errors import DatasetNotFoundError, UnsupportedFormatError


def test_load_iris_shape_and_schema() -> None:
    df = load_iris()

    assert df.shape == (150, 5)
    assert df.columns == [*IRIS_NUMERIC_COLUMNS, "species"]
    assert all(df.schema[c] == pl.Float64 for c in IRIS_NUMERIC_COLUMNS)
    assert sorted(df["species"].unique().to_list()) == list(IRIS_SPECIES)
    assert df.group_by("species").len()["len"].to_list() == [50, 50, 50]
    assert df.null_count().sum_horizontal().item() == 0


def test_read_table_csv_and_tsv(tmp_path: Path) -> None:
    frame = pl.DataFrame({"g": ["a", "b"], "v": [1.5, 2.5]})
    csv = tmp_path / "t.csv"
    tsv = tmp_path / "t.tsv"
    frame.write_csv(csv)
    frame.write_csv(tsv, separator="\t")

    assert read_table(csv).equals(frame)
    assert read_table(tsv).equals(frame)


def test_read_table_errors(tmp_path: Path) -> None:
    with pytest.raises(DatasetNotFoundError):
        read_table(tmp_path / "missing.csv")

    odd = tmp_path / "data.xlsx"
    odd.write_bytes(b"")
    with pytest.raises(UnsupportedFormatError):
        read_table(odd)


def test_require_columns_and_numeric() -> None:
    df = pl.DataFrame({"g": ["a"], "v": [1.0]})

    require_columns(df, ["g", "v"])
    require_numeric(df, ["v"])

    with pytest.raises(InvalidFieldError, match="petal"):
        require_columns(df, ["petal"])
    with pytest.raises(InvalidFieldError, match="non-numeric"):
        require_numeric(df, ["g"])
