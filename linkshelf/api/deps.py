"""FastAPI dependencies resolving services built by the app factory."""

from __future__ import annotations

from fastapi import Request

from linkshelf.services.activity_service import ActivityService
from linkshelf.services.bookmark_service import BookmarkService
from linkshelf.services.profile_service import ProfileService


def get_bookmark_service(request: Request) -> BookmarkService:
    return request.app.state.bookmark_service


def get_activity_service(request: Request) -> ActivityService:
    return request.app.state.activity_service


def get_profile_service(request: Request) -> ProfileService:
    return request.app.state.profile_service
