"""FastAPI dependency injection providers."""

from typing import Annotated

from fastapi import Depends, Request

from storysky.infrastructure.activity_log import ActivityLog
from storysky.infrastructure.push_client import PushNotifier
from storysky.repositories.entity_store import EntityStore
from storysky.services.recommender import Recommender


def get_entity_store(request: Request) -> EntityStore:
    """Provide the application's EntityStore."""
    return request.app.state.store


def get_activity_log(request: Request) -> ActivityLog:
    """Provide the application's ActivityLog."""
    return request.app.state.activity_log


def get_recommender(request: Request) -> Recommender:
    """Provide the application's Recommender."""
    return request.app.state.recommender


def get_push_notifier(request: Request) -> PushNotifier:
    """Provide the application's PushNotifier."""
    return request.app.state.notifier


# Type aliases for commonly used dependencies
StoreDep = Annotated[EntityStore, Depends(get_entity_store)]
ActivityLogDep = Annotated[ActivityLog, Depends(get_activity_log)]
RecommenderDep = Annotated[Recommender, Depends(get_recommender)]
NotifierDep = Annotated[PushNotifier, Depends(get_push_notifier)]
