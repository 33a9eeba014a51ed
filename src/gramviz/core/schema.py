"""
Pydantic v2 row model for per-group summary records.

Responsibilities
- Give each summary row a typed shape (label, mean, sd, optional count) so
  downstream consumers do not rely on dynamic column lookups.
- Allow NaN for mean/sd: NaN is the documented result for groups too small for
  a defined statistic under the "nan" policy.

Style
- Zero-IO (stdlib + pydantic only).
"""

from __future__ import annotations

import datetime as dt
import math

from pydantic import BaseModel, ConfigDict, Field, field_validator

__all__ = ["GroupSummary"]


class GroupSummary(BaseModel):
    """
    One summary record per distinct category.

    Attributes:
        group: Category label (any scalar type a group column can hold).
        mean (float): Arithmetic mean of the measurement (NaN when the group has no values).
        sd (float): Sample standard deviation, n-1 denominator (NaN when n < 2).
        n (int | None): Non-null observation count, when the summary carried one.

    Examples:
        >>> GroupSummary(group="setosa", mean=5.006, sd=0.352, n=50).n
        50
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    group: str | int | float | bool | dt.datetime | dt.date
    mean: float
    sd: float
    n: int | None = Field(default=None, ge=0)

    @field_validator("sd")
    @classmethod
    def _sd_non_negative(cls, v: float) -> float:
        if not math.isnan(v) and v < 0:
            raise ValueError("sd must be >= 0 or NaN")
        return v

    @property
    def has_spread(self) -> bool:
        """True when sd is a defined number."""
        return not math.isnan(self.sd)
