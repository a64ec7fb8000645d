"""DPDPA penalty exposure estimate shown on the public site."""

from dataclasses import dataclass
from typing import Literal

from app.core.exceptions import ValidationError

MIN_USERS = 100
MAX_USERS = 1_000_000

BASE_FINE_CRORE = 5.0
FINE_PER_USER_CRORE = 0.0001
MAX_FINE_CRORE = 250.0

HIGH_RISK_USERS = 100_000
MEDIUM_RISK_USERS = 10_000

RiskLevel = Literal["LOW", "MEDIUM", "HIGH"]


@dataclass(frozen=True, slots=True)
class RiskEstimate:
    user_count: int
    fine_crore: float
    risk_level: RiskLevel


def estimate_dpdpa_fine(user_count: int) -> RiskEstimate:
    """Estimate the potential fine in INR crore for a breach affecting `user_count` users.

    The estimate grows linearly from a base of 5 crore and is capped at the
    250 crore statutory maximum.
    """
    if user_count < MIN_USERS or user_count > MAX_USERS:
        raise ValidationError(
            f"User count must be between {MIN_USERS} and {MAX_USERS}",
            {"user_count": user_count},
        )

    fine = min(BASE_FINE_CRORE + user_count * FINE_PER_USER_CRORE, MAX_FINE_CRORE)
    if user_count > HIGH_RISK_USERS:
        level: RiskLevel = "HIGH"
    elif user_count > MEDIUM_RISK_USERS:
        level = "MEDIUM"
    else:
        level = "LOW"
    return RiskEstimate(user_count=user_count, fine_crore=round(fine, 1), risk_level=level)
