"""Story API endpoints."""

from fastapi import APIRouter, BackgroundTasks, Query, Response, status

from storysky.api.dependencies import NotifierDep, StoreDep
from storysky.api.schemas import (
    BAD_REQUEST,
    NOT_FOUND,
    CommentCreateRequest,
    CommentResponse,
    ListMeta,
    StoryCreateRequest,
    StoryDetailResponse,
    StoryListResponse,
    StoryResponse,
    StoryUpdateRequest,
)

router = APIRouter(prefix="/stories", tags=["stories"])


@router.get("", response_model=StoryListResponse)
async def list_stories(
    store: StoreDep,
    q: str | None = Query(None, description="Case-insensitive title/body search"),
) -> StoryListResponse:
    """List stories, newest first."""
    views = store.list_stories(filter_text=q)
    return StoryListResponse(
        data=[StoryResponse.from_view(v) for v in views],
        meta=ListMeta(total=len(views)),
    )


@router.get("/{story_id}", response_model=StoryDetailResponse, responses=NOT_FOUND)
async def get_story(story_id: str, store: StoreDep) -> StoryDetailResponse:
    """Get a single story with its comments."""
    return StoryDetailResponse.from_view(store.get_story(story_id))


@router.post(
    "",
    response_model=StoryResponse,
    status_code=status.HTTP_201_CREATED,
    responses=BAD_REQUEST,
)
async def create_story(
    store: StoreDep,
    notifier: NotifierDep,
    background_tasks: BackgroundTasks,
    payload: StoryCreateRequest | None = None,
) -> StoryResponse:
    """Create a story and notify push subscribers in the background."""
    payload = payload or StoryCreateRequest()
    view = store.create_story(
        title=payload.title,
        body=payload.body,
        author_id=payload.author_id,
        genre=payload.genre,
    )
    background_tasks.add_task(notifier.notify_new_story, view.story.title)
    return StoryResponse.from_view(view)


@router.put("/{story_id}", response_model=StoryResponse, responses={**NOT_FOUND, **BAD_REQUEST})
async def update_story(
    story_id: str,
    store: StoreDep,
    payload: StoryUpdateRequest | None = None,
) -> StoryResponse:
    """Partially update a story; a missing body changes nothing."""
    patch = (payload or StoryUpdateRequest()).to_patch()
    return StoryResponse.from_view(store.update_story(story_id, patch))


@router.delete("/{story_id}", status_code=status.HTTP_204_NO_CONTENT, responses=NOT_FOUND)
async def delete_story(story_id: str, store: StoreDep) -> Response:
    """Delete a story together with its comments."""
    store.delete_story(story_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{story_id}/like", response_model=StoryResponse, responses=NOT_FOUND)
async def like_story(story_id: str, store: StoreDep) -> StoryResponse:
    return StoryResponse.from_view(store.like_story(story_id))


@router.get(
    "/{story_id}/comments",
    response_model=list[CommentResponse],
    responses=NOT_FOUND,
)
async def list_comments(story_id: str, store: StoreDep) -> list[CommentResponse]:
    return [CommentResponse.from_view(c) for c in store.list_comments(story_id)]


@router.post(
    "/{story_id}/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
    responses={**NOT_FOUND, **BAD_REQUEST},
)
async def create_comment(
    story_id: str,
    store: StoreDep,
    payload: CommentCreateRequest | None = None,
) -> CommentResponse:
    payload = payload or CommentCreateRequest()
    view = store.create_comment(story_id, author_id=payload.author_id, text=payload.text)
    return CommentResponse.from_view(view)
