"""User API endpoints."""

from fastapi import APIRouter, status

from storysky.api.dependencies import StoreDep
from storysky.api.schemas import BAD_REQUEST, NOT_FOUND, UserCreateRequest, UserResponse

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/{user_id}", response_model=UserResponse, responses=NOT_FOUND)
async def get_user(user_id: str, store: StoreDep) -> UserResponse:
    return UserResponse.from_user(store.get_user(user_id))


@router.post(
    "",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    responses=BAD_REQUEST,
)
async def create_user(store: StoreDep, payload: UserCreateRequest | None = None) -> UserResponse:
    """Register a user. Only the name is required."""
    payload = payload or UserCreateRequest()
    return UserResponse.from_user(store.create_user(name=payload.name, email=payload.email))
