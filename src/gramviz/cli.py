from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path

import polars as pl

from gramviz.core.errors import SummaryError
from gramviz.core.summary import summarize
from gramviz.io.config import VizSettings
from gramviz.io.datasets import load_iris, read_table
from gramviz.io.errors import DataError

from .tour import SECTIONS, TourContext, render_sections

logger = logging.getLogger(__name__)

_LOG_FORMAT = "[%(levelname)s] %(message)s"
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _load_data(path: str) -> pl.DataFrame:
    """Bundled iris when path is empty, otherwise the table at path."""
    if not path:
        return load_iris()
    return read_table(Path(path))


def _add_common(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "--data", type=str, default="", help="CSV/TSV/Parquet table (default: bundled iris)."
    )
    p.add_argument("--config", type=str, default=None, help="Explicit TOML settings file.")
    p.add_argument("--group", type=str, default="species", help="Categorical column.")
    p.add_argument("--value", type=str, default="sepal_length", help="Numeric column.")


def _cmd_summarize(argv: list[str]) -> int:
    p = argparse.ArgumentParser(
        prog="gramviz summarize",
        description="Print per-group mean and sample standard deviation of a column.",
    )
    _add_common(p)
    p.add_argument(
        "--sd-policy", choices=["nan", "raise"], default=None, help="Groups with < 2 values."
    )
    p.add_argument(
        "--join-policy", choices=["strict", "inner"], default=None, help="Mean/sd key mismatch."
    )
    p.add_argument("--count", action="store_true", help="Include the observation count column.")
    p.add_argument("--out", type=str, default="", help="Also write the summary as CSV here.")
    args = p.parse_args(argv)

    settings = VizSettings.load(args.config)
    df = _load_data(args.data)
    summary = summarize(
        df,
        args.group,
        args.value,
        sd_policy=args.sd_policy or settings.sd_policy,
        join_policy=args.join_policy or settings.join_policy,
        include_count=args.count,
    )
    print(summary)
    if args.out:
        out = Path(args.out)
        out.parent.mkdir(parents=True, exist_ok=True)
        summary.write_csv(out)
        logger.info("wrote summary to %s", out)
    return 0


def _cmd_render(argv: list[str]) -> int:
    p = argparse.ArgumentParser(
        prog="gramviz render",
        description="Render the walkthrough charts (HTML or Vega-Lite JSON).",
    )
    _add_common(p)
    p.add_argument("--gff", type=str, default="", help="GFF3 annotation for the genome section.")
    p.add_argument(
        "--out-dir", type=str, default=None, help="Output directory (default from settings)."
    )
    p.add_argument("--format", choices=["html", "json"], default=None, help="Output format.")
    p.add_argument(
        "--only", nargs="+", default=None, metavar="SECTION", help="Render only these sections."
    )
    args = p.parse_args(argv)

    settings = VizSettings.load(args.config)
    if args.out_dir:
        settings = replace(settings, out_dir=args.out_dir)
    if args.format:
        settings = replace(settings, format=args.format)

    ctx = TourContext(
        iris=_load_data(args.data), settings=settings, group=args.group, value=args.value
    )
    if args.gff:
        ctx = ctx.with_genome(args.gff)

    written = render_sections(ctx, only=args.only)
    for name, path in written.items():
        print(f"{name}\t{path}")
    return 0


def _cmd_sections(argv: list[str]) -> int:
    p = argparse.ArgumentParser(prog="gramviz sections", description="List walkthrough sections.")
    p.parse_args(argv)
    for i, s in enumerate(SECTIONS, start=1):
        note = " (needs --gff)" if s.needs_genome else ""
        print(f"{i:02d} {s.name}\t{s.title}{note}")
    return 0


_COMMANDS = {
    "summarize": _cmd_summarize,
    "render": _cmd_render,
    "sections": _cmd_sections,
}


def build_argparser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="gramviz", description="Grammar-of-graphics walkthrough CLI.")
    p.add_argument(
        "--log-level",
        type=str.upper,
        default="INFO",
        choices=_LOG_LEVELS,
        help="Logging level (default: INFO).",
    )
    p.add_argument("cmd", choices=list(_COMMANDS), help="Subcommand.")
    p.add_argument("args", nargs=argparse.REMAINDER, help="Subcommand options.")
    return p


def main(argv: list[str] | None = None) -> None:
    argv = list(sys.argv[1:] if argv is None else argv)
    parser = build_argparser()
    if not argv:
        parser.print_help()
        return
    # argparse exits with code 2 on an unknown command or level
    ns = parser.parse_args(argv)
    logging.basicConfig(level=ns.log_level, format=_LOG_FORMAT)

    try:
        code = _COMMANDS[ns.cmd](ns.args)
    except (SummaryError, DataError, KeyError, ValueError) as exc:
        logger.error("%s failed: %s", ns.cmd, exc)
        code = 2
    raise SystemExit(code)


if __name__ == "__main__":
    main()
