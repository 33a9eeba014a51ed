from __future__ import annotations

from pathlib import Path

import polars as pl
import pytest

from gramviz import cli


def _run(argv: list[str]) -> int:
    with pytest.raises(SystemExit) as ei:
        cli.main(argv)
    return ei.value.code


def test_sections_lists_walkthrough(capsys) -> None:
    code = _run(["sections"])

    out = capsys.readouterr().out
    assert code == 0
    assert out.splitlines()[0].startswith("01 quick_scatter")
    assert "(needs --gff)" in out


def test_summarize_prints_and_writes_csv(capsys, tmp_path: Path) -> None:
    target = tmp_path / "summary" / "sepal.csv"

    code = _run(["summarize", "--count", "--out", str(target)])

    assert code == 0
    assert "setosa" in capsys.readouterr().out
    written = pl.read_csv(target)
    assert written.columns == ["species", "mean", "sd", "n"]
    assert written["n"].to_list() == [50, 50, 50]


def test_summarize_on_user_table(tmp_path: Path) -> None:
    data = tmp_path / "obs.csv"
    pl.DataFrame({"site": ["x", "x", "y"], "depth": [1.0, 3.0, 2.0]}).write_csv(data)

    assert _run(["summarize", "--data", str(data), "--group", "site", "--value", "depth"]) == 0
    # Single-observation group under the raise policy
    assert (
        _run(
            [
                "summarize",
                "--data",
                str(data),
                "--group",
                "site",
                "--value",
                "depth",
                "--sd-policy",
                "raise",
            ]
        )
        == 2
    )


def test_bad_field_exits_with_code_2(caplog) -> None:
    code = _run(["summarize", "--value", "petal"])

    assert code == 2
    assert "petal" in caplog.text


def test_render_json_only_one_section(capsys, tmp_path: Path) -> None:
    code = _run(
        ["render", "--format", "json", "--out-dir", str(tmp_path), "--only", "quick_scatter"]
    )

    assert code == 0
    assert (tmp_path / "01_quick_scatter.json").exists()
    assert "quick_scatter\t" in capsys.readouterr().out


def test_unknown_command_exits_2() -> None:
    assert _run(["plot"]) == 2


def test_no_args_prints_help(capsys) -> None:
    cli.main([])

    assert "gramviz" in capsys.readouterr().out


def test_log_level_accepts_equals_form(capsys) -> None:
    assert _run(["--log-level=debug", "sections"]) == 0
    assert "quick_scatter" in capsys.readouterr().out


def test_unknown_log_level_exits_2() -> None:
    assert _run(["--log-level", "LOUD", "sections"]) == 2
