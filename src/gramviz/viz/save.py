"""Write charts to disk as standalone HTML or Vega-Lite JSON."""

from __future__ import annotations

import logging
import os
from pathlib import Path

import altair as alt

__all__ = ["save_chart"]

logger = logging.getLogger(__name__)

_SUFFIXES = {"html": ".html", "json": ".json"}


def save_chart(
    ch: alt.TopLevelMixin, path: str | os.PathLike[str], *, format: str | None = None
) -> Path:
    """
    Save a chart, creating parent directories as needed.

    Args:
        ch: Top-level chart.
        path: Target file. When format is given, the suffix is replaced to match it.
        format: "html" or "json"; inferred from the suffix when None.

    Returns:
        Path: The file written.

    Raises:
        ValueError: Unsupported format/suffix.
    """
    p = Path(path)
    fmt = format or p.suffix.lstrip(".").lower()
    if fmt not in _SUFFIXES:
        raise ValueError(f"unsupported chart format {fmt!r} (allowed={sorted(_SUFFIXES)!r})")
    p = p.with_suffix(_SUFFIXES[fmt])
    p.parent.mkdir(parents=True, exist_ok=True)
    if fmt == "json":
        p.write_text(ch.to_json(indent=2), encoding="utf-8")
    else:
        ch.save(str(p), format="html")
    logger.info("wrote %s", p)
    return p
