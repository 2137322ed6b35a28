from __future__ import annotations

from linkshelf.api.routes.activity import router as activity_router
from linkshelf.api.routes.bookmarks import router as bookmarks_router
from linkshelf.api.routes.health import router as health_router
from linkshelf.api.routes.profiles import router as profiles_router

__all__ = ["activity_router", "bookmarks_router", "health_router", "profiles_router"]
