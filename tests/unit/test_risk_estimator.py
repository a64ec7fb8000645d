"""Tests for the DPDPA fine estimate."""

from __future__ import annotations

import pytest

from app.core.exceptions import ValidationError
from app.services.risk_estimator import estimate_dpdpa_fine


@pytest.mark.parametrize(
    ("users", "fine", "level"),
    [
        (100, 5.0, "LOW"),
        (10_000, 6.0, "LOW"),
        (10_001, 6.0, "MEDIUM"),
        (50_000, 10.0, "MEDIUM"),
        (100_001, 15.0, "HIGH"),
        (1_000_000, 105.0, "HIGH"),
    ],
)
def test_estimate_scales_with_user_count(users: int, fine: float, level: str) -> None:
    estimate = estimate_dpdpa_fine(users)

    assert estimate.user_count == users
    assert estimate.fine_crore == fine
    assert estimate.risk_level == level


@pytest.mark.parametrize("users", [0, 99, 1_000_001])
def test_estimate_rejects_out_of_range_counts(users: int) -> None:
    with pytest.raises(ValidationError):
        estimate_dpdpa_fine(users)
