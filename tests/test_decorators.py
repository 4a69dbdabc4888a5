from __future__ import annotations

import pytest

from sms_dispatch.decorators import clamp_sms, identity


def test_identity() -> None:
    assert identity(" as is ") == " as is "


def test_clamp_leaves_short_text_alone() -> None:
    assert clamp_sms(10)("short") == "short"
    assert clamp_sms(5)("exact") == "exact"


def test_clamp_truncates_with_marker() -> None:
    out = clamp_sms(12)("Hello wonderful world")
    assert out == "Hello won..."
    assert len(out) <= 12


def test_clamp_hard_cuts_when_marker_does_not_fit() -> None:
    assert clamp_sms(2)("Hello") == "He"


def test_clamp_rejects_non_positive_limit() -> None:
    with pytest.raises(ValueError):
        clamp_sms(0)

