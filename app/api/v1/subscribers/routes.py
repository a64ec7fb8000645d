"""Newsletter signup endpoint."""

import logging

from fastapi import APIRouter, Response, status

from app.dependencies import DbSession
from app.schemas.subscriber import SubscribeRequest, SubscribeResponse
from app.services.subscriptions import SubscriptionService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "",
    response_model=SubscribeResponse,
    status_code=status.HTTP_201_CREATED,
    responses={200: {"model": SubscribeResponse, "description": "Already subscribed"}},
)
async def subscribe(payload: SubscribeRequest, session: DbSession, response: Response) -> SubscribeResponse:
    """Subscribe an email; repeating the call is not an error."""
    result = await SubscriptionService(session).subscribe(payload.email, consent=payload.consent)
    if not result.created:
        response.status_code = status.HTTP_200_OK
    return SubscribeResponse(status=result.status, message=result.message)
