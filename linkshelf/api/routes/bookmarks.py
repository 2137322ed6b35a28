from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response, status

from linkshelf.api.deps import get_bookmark_service
from linkshelf.core.auth import verify_api_key
from linkshelf.schemas.bookmark import BookmarkResponse, CreateBookmarkRequest
from linkshelf.services.bookmark_service import BookmarkService

router = APIRouter(tags=["Bookmarks"], dependencies=[Depends(verify_api_key)])

BookmarkServiceDep = Annotated[BookmarkService, Depends(get_bookmark_service)]


@router.post(
    "/bookmarks",
    response_model=BookmarkResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        429: {"description": "Summarizer rate limit reached; see Retry-After."},
        502: {"description": "The page or the summarizer could not be reached."},
    },
)
async def create_bookmark(
    payload: CreateBookmarkRequest,
    service: BookmarkServiceDep,
) -> BookmarkResponse:
    """Scrape, summarize and store a bookmark for the submitted URL.

    Errors are rendered by the global handlers: 400 for an invalid URL,
    429 with ``Retry-After`` when the summarizer budget is exhausted, 502
    when the page or the summarizer fails.
    """
    record, cached = await service.create_bookmark(
        payload.url,
        user_id=payload.user_id,
        user_display_name=payload.user_display_name,
    )
    response = BookmarkResponse.model_validate(record)
    response.summary_cached = cached
    return response


@router.get("/users/{user_id}/bookmarks", response_model=list[BookmarkResponse])
async def list_bookmarks(user_id: str, service: BookmarkServiceDep) -> list[BookmarkResponse]:
    """List a user's bookmarks, newest first."""
    return [BookmarkResponse.model_validate(r) for r in service.list_bookmarks(user_id)]


@router.delete("/users/{user_id}/bookmarks", status_code=status.HTTP_204_NO_CONTENT)
async def delete_bookmark(
    user_id: str,
    service: BookmarkServiceDep,
    url: str = Query(..., min_length=1, description="URL of the bookmark to delete."),
) -> Response:
    service.delete_bookmark(user_id, url)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
