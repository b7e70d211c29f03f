"""
Route Registration

Centralizes all route registration for the FastAPI application.

Route Hierarchy:
================
    /health, /ready, /live   → Health check endpoints
    /discover, /feed,
    /saved, /search          → Project listings
    /projects                → Publish, detail, likes, saves, comments
    /comments                → Comment writes and likes
    /follows                 → Follow / unfollow
    /notifications           → Notification inbox
    /collections             → Collections and their projects
    /users                   → Profiles
    /mentions                → Mention autocomplete

Usage:
======
    from src.api.routes import register_routes

    app = FastAPI()
    register_routes(app)
"""

from fastapi import FastAPI

from src.api.handlers import (
    collection_handler,
    comment_handler,
    feed_handler,
    follow_handler,
    health_handler,
    notification_handler,
    project_handler,
    user_handler,
)


def register_routes(app: FastAPI) -> None:
    """
    Register all API routes.

    Args:
        app: FastAPI application instance
    """
    # Health check endpoints (no prefix, root level)
    app.include_router(
        health_handler.router,
        tags=["Health"],
    )

    # Listings (root level: /discover, /feed, /saved, /search)
    app.include_router(
        feed_handler.router,
        tags=["Feeds"],
    )

    app.include_router(
        project_handler.router,
        prefix="/projects",
        tags=["Projects"],
    )

    app.include_router(
        comment_handler.router,
        prefix="/comments",
        tags=["Comments"],
    )

    app.include_router(
        follow_handler.router,
        prefix="/follows",
        tags=["Follows"],
    )

    app.include_router(
        notification_handler.router,
        prefix="/notifications",
        tags=["Notifications"],
    )

    app.include_router(
        collection_handler.router,
        prefix="/collections",
        tags=["Collections"],
    )

    app.include_router(
        user_handler.router,
        prefix="/users",
        tags=["Users"],
    )

    app.include_router(
        user_handler.mentions_router,
        prefix="/mentions",
        tags=["Users"],
    )
