"""API routers for Bookmark AI endpoints.

Routers are imported within the app factory (api.main.create_app) rather
than here, so importing one router does not pull in the others.

Individual routers can be imported directly from their modules:
    from api.routers.health import router as health_router
"""

__all__ = [
    "auth",
    "bookmarks",
    "categories",
    "health",
    "users",
]
