"""Comment API endpoints not nested under a story."""

from fastapi import APIRouter, Response, status

from storysky.api.dependencies import StoreDep
from storysky.api.schemas import NOT_FOUND

router = APIRouter(prefix="/comments", tags=["comments"])


@router.delete("/{comment_id}", status_code=status.HTTP_204_NO_CONTENT, responses=NOT_FOUND)
async def delete_comment(comment_id: str, store: StoreDep) -> Response:
    store.delete_comment(comment_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
