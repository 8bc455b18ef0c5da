"""Activity tracking and recommendation endpoints."""

from fastapi import APIRouter

from storysky.api.dependencies import ActivityLogDep, RecommenderDep
from storysky.api.schemas import BAD_REQUEST, ActivityRequest, MessageResponse, StoryResponse

router = APIRouter(tags=["activity"])


@router.post("/userActivity", response_model=MessageResponse, responses=BAD_REQUEST)
async def record_activity(
    activity_log: ActivityLogDep,
    payload: ActivityRequest | None = None,
) -> MessageResponse:
    """Append a story view to the activity log."""
    payload = payload or ActivityRequest()
    activity_log.record_activity(payload.user_id, payload.viewed_story_id)
    return MessageResponse(message="User activity recorded")


@router.get("/recommend/{user_id}", response_model=list[StoryResponse])
async def recommend(user_id: str, recommender: RecommenderDep) -> list[StoryResponse]:
    """Up to three stories in the genre of the user's last viewed story."""
    return [StoryResponse.from_view(v) for v in recommender.recommend(user_id)]
