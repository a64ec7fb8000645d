"""Public tool schemas."""

from typing import Literal

from pydantic import BaseModel


class RiskEstimateResponse(BaseModel):
    """DPDPA exposure estimate for a given user base."""

    user_count: int
    fine_crore: float
    risk_level: Literal["LOW", "MEDIUM", "HIGH"]
