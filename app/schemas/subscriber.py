"""Subscriber schemas."""

from typing import Literal

from pydantic import BaseModel, Field


class SubscribeRequest(BaseModel):
    """Newsletter signup form."""

    email: str = Field(max_length=320)
    consent: bool = False


class SubscribeResponse(BaseModel):
    status: Literal["subscribed", "already_subscribed"]
    message: str
