"""
Configuration for gramviz.

Defines VizSettings, a frozen dataclass carrying runtime configuration for
summarization policies and chart rendering. Defaults are sourced from
gramviz.core.constants (the single source of truth).

Precedence
- environment (GRAMVIZ_*) > TOML (./gramviz.toml or [tool.gramviz] in ./pyproject.toml) > defaults.

Import DAG discipline
- Depends only on stdlib and gramviz.core.constants.
- Does not import higher layers (viz, tour, cli).

Notes
- Invalid values in env/TOML are ignored and the base value is kept.
- Settings are passed explicitly to every chart builder; nothing here mutates
  altair's global theme registry.
"""

from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Literal

from gramviz.core.constants import (
    DEFAULT_BIN_BOUNDARY,
    DEFAULT_BIN_WIDTH,
    DEFAULT_JOIN_POLICY,
    DEFAULT_SD_POLICY,
    JOIN_POLICIES,
    SD_POLICIES,
)

from .errors import ConfigError

logger = logging.getLogger(__name__)

OutputFormat = Literal["html", "json"]
_FORMATS = ("html", "json")


@dataclass(frozen=True)
class VizSettings:
    """
    Runtime settings for summaries and charts.

    Attributes:
        out_dir (str): Directory where rendered charts are written.
        format (Literal["html","json"]): Output format for saved charts.
        width (int): Default chart width in pixels.
        height (int): Default chart height in pixels.
        font_size (int): Axis/legend label and title font size.
        bin_width (float): Histogram bin width.
        bin_boundary (float): Histogram bin anchor; bins start on multiples of
            bin_width offset by this value.
        sd_policy (str): "nan" or "raise" for groups with fewer than two values.
        join_policy (str): "strict" or "inner" for mismatched summary keys.

    Examples:
        >>> from gramviz.io import VizSettings
        >>> VizSettings(out_dir="figures", format="json")  # doctest: +ELLIPSIS
        VizSettings(...)
    """

    out_dir: str = "out"
    format: OutputFormat = "html"
    width: int = 400
    height: int = 300
    font_size: int = 12
    bin_width: float = DEFAULT_BIN_WIDTH
    bin_boundary: float = DEFAULT_BIN_BOUNDARY
    sd_policy: str = DEFAULT_SD_POLICY
    join_policy: str = DEFAULT_JOIN_POLICY

    @classmethod
    def _apply_mapping(cls, base: VizSettings, cfg: dict[str, Any] | None) -> VizSettings:
        """Apply a loose config mapping onto VizSettings, returning a new instance."""
        if not isinstance(cfg, dict):
            return base

        s = base

        def _choice(key: str, allowed: tuple[str, ...]) -> None:
            nonlocal s
            val = cfg.get(key)
            if isinstance(val, str) and val.strip().lower() in allowed:
                s = replace(s, **{key: val.strip().lower()})
            elif val is not None:
                logger.debug("ignoring %s=%r (allowed=%r)", key, val, allowed)

        def _number(key: str, conv: type) -> None:
            nonlocal s
            if key not in cfg:
                return
            try:
                val = conv(cfg[key])
            except (TypeError, ValueError):
                logger.debug("ignoring non-numeric %s=%r", key, cfg[key])
                return
            if val <= 0 and key != "bin_boundary":
                logger.debug("ignoring non-positive %s=%r", key, val)
                return
            s = replace(s, **{key: val})

        if "out_dir" in cfg and isinstance(cfg["out_dir"], str) and cfg["out_dir"]:
            s = replace(s, out_dir=cfg["out_dir"])

        _choice("format", _FORMATS)
        _choice("sd_policy", SD_POLICIES)
        _choice("join_policy", JOIN_POLICIES)

        for key in ("width", "height", "font_size"):
            _number(key, int)
        for key in ("bin_width", "bin_boundary"):
            _number(key, float)

        return s

    @classmethod
    def from_env(cls, base: VizSettings | None = None, prefix: str = "GRAMVIZ_") -> VizSettings:
        """
        Build VizSettings from environment variables. Precedence is env > base (if provided) > defaults.

        Recognized variables:
            - GRAMVIZ_OUT_DIR
            - GRAMVIZ_FORMAT ("html" | "json")
            - GRAMVIZ_WIDTH, GRAMVIZ_HEIGHT, GRAMVIZ_FONT_SIZE
            - GRAMVIZ_BIN_WIDTH, GRAMVIZ_BIN_BOUNDARY
            - GRAMVIZ_SD_POLICY ("nan" | "raise")
            - GRAMVIZ_JOIN_POLICY ("strict" | "inner")
        """
        s = base or cls()
        mapping: dict[str, Any] = {}
        for key in (
            "out_dir",
            "format",
            "width",
            "height",
            "font_size",
            "bin_width",
            "bin_boundary",
            "sd_policy",
            "join_policy",
        ):
            v = os.getenv(prefix + key.upper())
            if v:
                mapping[key] = v
        return cls._apply_mapping(s, mapping)

    @classmethod
    def from_toml(cls, path: str | os.PathLike[str] | None = None) -> VizSettings:
        """
        Build VizSettings from a TOML file.

        Search order when `path` is None:
            1) ./gramviz.toml (with either a top-level [viz] table or direct keys)
            2) ./pyproject.toml under [tool.gramviz]

        Returns defaults if no file is present.

        Raises:
            ConfigError: An explicitly given file exists but is not valid TOML.
        """
        s = cls()

        cand: list[Path] = []
        if path is not None:
            cand.append(Path(path))
        else:
            cand.append(Path.cwd() / "gramviz.toml")
            cand.append(Path.cwd() / "pyproject.toml")

        cfg: dict[str, Any] | None = None
        for p in cand:
            if not p.exists():
                continue
            try:
                with p.open("rb") as fh:
                    data = tomllib.load(fh)
            except tomllib.TOMLDecodeError as exc:
                if path is not None:
                    raise ConfigError(f"invalid TOML in {p}: {exc}") from exc
                logger.warning("skipping unreadable config %s: %s", p, exc)
                continue
            if p.name == "pyproject.toml":
                tool = data.get("tool", {})
                cfg = tool.get("gramviz") if isinstance(tool, dict) else None
            elif isinstance(data.get("viz"), dict):
                cfg = data["viz"]
            else:
                cfg = data
            if cfg:
                logger.debug("loaded settings from %s", p)
                break

        return cls._apply_mapping(s, cfg)

    @classmethod
    def load(cls, path: str | os.PathLike[str] | None = None) -> VizSettings:
        """
        Load VizSettings applying precedence: environment > TOML > defaults.

        Args:
            path: Optional explicit TOML path. If None, search defaults (gramviz.toml, pyproject.toml).

        Returns:
            VizSettings
        """
        s = cls.from_toml(path)
        s = cls.from_env(base=s)
        return s
