from typing import Annotated

from fastapi import APIRouter, Depends, Response, status

from linkshelf.api.deps import get_profile_service
from linkshelf.core.auth import verify_api_key
from linkshelf.schemas.bookmark import BookmarkResponse
from linkshelf.schemas.profile import ProfileResponse, PublicProfileResponse, UpdateProfileRequest
from linkshelf.services.profile_service import ProfileService

router = APIRouter(tags=["Profiles"], dependencies=[Depends(verify_api_key)])

ProfileServiceDep = Annotated[ProfileService, Depends(get_profile_service)]


@router.put(
    "/users/{user_id}/profile",
    response_model=ProfileResponse,
    responses={
        201: {"description": "Profile created."},
        400: {"description": "Invalid or already taken display name."},
    },
)
async def save_profile(
    user_id: str,
    payload: UpdateProfileRequest,
    service: ProfileServiceDep,
    response: Response,
) -> ProfileResponse:
    """Create or update the user's display name and bio."""
    profile, created = service.save_profile(user_id, display_name=payload.display_name, bio=payload.bio)
    if created:
        response.status_code = status.HTTP_201_CREATED
    _, count = service.get_profile(user_id)
    return ProfileResponse(**_profile_fields(profile), bookmark_count=count)


@router.get("/users/{user_id}/profile", response_model=ProfileResponse)
async def get_profile(user_id: str, service: ProfileServiceDep) -> ProfileResponse:
    profile, count = service.get_profile(user_id)
    return ProfileResponse(**_profile_fields(profile), bookmark_count=count)


@router.get("/profiles/{display_name}/bookmarks", response_model=PublicProfileResponse)
async def public_profile(display_name: str, service: ProfileServiceDep) -> PublicProfileResponse:
    """Public page for ``display_name``: profile details and bookmarks, newest first."""
    page = service.public_profile(display_name)
    return PublicProfileResponse(
        user_id=page.user_id,
        display_name=page.display_name,
        bio=page.bio,
        joined_at=page.joined_at,
        bookmarks=[BookmarkResponse.model_validate(r) for r in page.bookmarks],
    )


def _profile_fields(profile) -> dict:
    return {
        "user_id": profile.user_id,
        "display_name": profile.display_name,
        "bio": profile.bio,
        "created_at": profile.created_at,
    }
