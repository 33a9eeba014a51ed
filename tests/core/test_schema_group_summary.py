from __future__ import annotations

import math

import pytest
from pydantic import ValidationError

from gramviz.core.schema import GroupSummary


def test_group_summary_accepts_nan_sd() -> None:
    rec = GroupSummary(group="solo", mean=9.0, sd=float("nan"), n=1)
    assert math.isnan(rec.sd)
    assert rec.has_spread is False


def test_group_summary_rejects_negative_sd() -> None:
    with pytest.raises(ValidationError):
        GroupSummary(group="a", mean=1.0, sd=-0.5)


def test_group_summary_forbids_extra_fields_and_is_frozen() -> None:
    with pytest.raises(ValidationError):
        GroupSummary(group="a", mean=1.0, sd=0.1, median=1.0)  # type: ignore[call-arg]
    rec = GroupSummary(group="a", mean=1.0, sd=0.1)
    with pytest.raises(ValidationError):
        rec.mean = 2.0  # type: ignore[misc]
    assert rec.n is None
