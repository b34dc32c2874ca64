from typing import Annotated, Any

from fastapi import FastAPI, Header, Query
from fastapi.middleware.cors import CORSMiddleware

from flourish_cache.api.dependencies import HandlerDep, build_lifespan
from flourish_cache.config import settings
from flourish_cache.dto import (
    CacheStatsResponse,
    ChangeAckResponse,
    ChangeWebhookRequest,
    HealthCheckResponse,
    InteractionResponse,
    InteractionStateResponse,
    MediaPageResponse,
)
from flourish_cache.protocols import ContentStore, InteractionStore
from flourish_cache.query_cache import QueryCache

UserIdHeader = Annotated[str | None, Header(alias="X-User-Id")]


def create_app(
    content_store: ContentStore | None = None,
    interaction_store: InteractionStore | None = None,
    cache: QueryCache | None = None,
) -> FastAPI:
    """Create the FastAPI application.

    Args:
        content_store: Content store override (defaults to Supabase).
        interaction_store: Interaction store override (defaults to Supabase).
        cache: Query cache override (defaults to the process-wide cache).
    """
    app = FastAPI(
        title="FlourishTalents Feed API",
        description="Cached, paginated media listings with per-user likes and follows",
        version="0.1.0",
        lifespan=build_lifespan(content_store, interaction_store, cache),
    )

    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/")
    async def root() -> dict[str, Any]:
        """Root endpoint with API information."""
        return {
            "name": "FlourishTalents Feed API",
            "version": "0.1.0",
            "endpoints": {
                "media": "/media/{media_type}",
                "interactions": "/users/{user_id}/interactions",
                "realtime": "/realtime/changes",
                "stats": "/cache/stats",
                "health": "/health",
                "docs": "/docs",
            },
        }

    @app.get("/health", response_model=HealthCheckResponse)
    async def health(handler: HandlerDep) -> HealthCheckResponse:
        """Health check endpoint."""
        return await handler.health_check()

    @app.get("/media/{media_type}", response_model=MediaPageResponse)
    async def get_media_page(
        handler: HandlerDep,
        media_type: str,
        user_id: UserIdHeader = None,
        page: int = Query(1, description="1-based page number"),
        category: str | None = Query(None, description="Category filter ('all' for none)"),
        premium: bool | None = Query(None, description="Premium filter"),
    ) -> MediaPageResponse:
        """Get one page of media, merged with the viewer's likes and follows."""
        return await handler.get_page(
            media_type,
            page,
            user_id=user_id,
            category=category,
            premium=premium,
        )

    @app.post("/media/{media_id}/like", response_model=InteractionResponse)
    async def like_media(handler: HandlerDep, media_id: str, user_id: UserIdHeader = None) -> InteractionResponse:
        return await handler.set_like(user_id, media_id, liked=True)

    @app.delete("/media/{media_id}/like", response_model=InteractionResponse)
    async def unlike_media(handler: HandlerDep, media_id: str, user_id: UserIdHeader = None) -> InteractionResponse:
        return await handler.set_like(user_id, media_id, liked=False)

    @app.post("/creators/{creator_name}/follow", response_model=InteractionResponse)
    async def follow_creator(
        handler: HandlerDep, creator_name: str, user_id: UserIdHeader = None
    ) -> InteractionResponse:
        return await handler.set_follow(user_id, creator_name, followed=True)

    @app.delete("/creators/{creator_name}/follow", response_model=InteractionResponse)
    async def unfollow_creator(
        handler: HandlerDep, creator_name: str, user_id: UserIdHeader = None
    ) -> InteractionResponse:
        return await handler.set_follow(user_id, creator_name, followed=False)

    @app.get("/users/{user_id}/interactions", response_model=InteractionStateResponse)
    async def get_interactions(handler: HandlerDep, user_id: str) -> InteractionStateResponse:
        """Get a user's liked media and followed creators."""
        return await handler.get_interactions(user_id)

    @app.post("/realtime/changes", response_model=ChangeAckResponse)
    async def receive_change(
        handler: HandlerDep,
        request: ChangeWebhookRequest,
        secret: Annotated[str | None, Header(alias="X-Webhook-Secret")] = None,
    ) -> ChangeAckResponse:
        """Receive a database-webhook change notification."""
        return await handler.receive_change(request, secret=secret)

    @app.get("/cache/stats", response_model=CacheStatsResponse)
    async def get_stats(handler: HandlerDep) -> CacheStatsResponse:
        """Get cache statistics."""
        return await handler.get_stats()

    @app.delete("/cache", response_model=dict[str, Any])
    async def clear_cache(handler: HandlerDep) -> dict[str, Any]:
        """Clear all entries from the cache."""
        return await handler.clear_cache()

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "flourish_cache.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
    )
