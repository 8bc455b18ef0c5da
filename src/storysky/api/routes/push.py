"""Web push subscription endpoints."""

from typing import Any

from fastapi import APIRouter, BackgroundTasks, Body, status

from storysky.api.dependencies import NotifierDep
from storysky.api.schemas import BAD_REQUEST, PublicKeyResponse

router = APIRouter(tags=["push"])


@router.post("/subscribe", status_code=status.HTTP_201_CREATED, responses=BAD_REQUEST)
async def subscribe(
    notifier: NotifierDep,
    background_tasks: BackgroundTasks,
    subscription: dict[str, Any] | None = Body(None),
) -> dict:
    """Register a push subscription and send it a test notification."""
    registered = notifier.subscribe(subscription)
    background_tasks.add_task(notifier.send_test, registered)
    return {}


@router.get("/vapidPublicKey", response_model=PublicKeyResponse)
async def vapid_public_key(notifier: NotifierDep) -> PublicKeyResponse:
    """Public VAPID key a browser needs to create a subscription."""
    return PublicKeyResponse(public_key=notifier.public_key)
