"""Public calculators."""

from fastapi import APIRouter, Query

from app.schemas.tools import RiskEstimateResponse
from app.services.risk_estimator import MAX_USERS, MIN_USERS, estimate_dpdpa_fine

router = APIRouter()


@router.get("/dpdpa-risk", response_model=RiskEstimateResponse)
async def dpdpa_risk(users: int = Query(ge=MIN_USERS, le=MAX_USERS)) -> RiskEstimateResponse:
    """Estimate DPDPA fine exposure for a user base of `users`."""
    estimate = estimate_dpdpa_fine(users)
    return RiskEstimateResponse(
        user_count=estimate.user_count,
        fine_crore=estimate.fine_crore,
        risk_level=estimate.risk_level,
    )
