"""HTTP handlers for feed operations.

Handlers convert between DTOs (API contracts) and service calls.
They handle HTTP concerns like status codes, validation, and error handling.
"""

import hmac

from fastapi import HTTPException, status

from flourish_cache.dto import (
    CacheStatsResponse,
    ChangeAckResponse,
    ChangeWebhookRequest,
    HealthCheckResponse,
    InteractionResponse,
    InteractionStateResponse,
    MediaItemResponse,
    MediaPageResponse,
)
from flourish_cache.entities import MediaCard, MediaPage
from flourish_cache.errors import FetchError, InteractionWriteError
from flourish_cache.realtime import ChangeEvent, ChangeFeed
from flourish_cache.services import FeedService
from flourish_cache.utils.images import image_srcset
from flourish_cache.utils.log import get_logger

logger = get_logger(__name__)


def _to_item_response(card: MediaCard) -> MediaItemResponse:
    item = card.item
    return MediaItemResponse(
        id=item.id,
        title=item.title,
        creator_name=item.creator_name,
        description=item.description,
        thumbnail_url=item.thumbnail_url,
        thumbnail_srcset=image_srcset(item.thumbnail_url),
        duration=item.duration,
        read_time=item.read_time,
        type=item.type,
        category=item.category,
        content_type=item.content_type,
        price=item.price,
        rating=item.rating,
        is_premium=item.is_premium,
        views_count=item.views_count,
        plays_count=item.plays_count,
        sales_count=item.sales_count,
        likes_count=item.likes_count,
        is_liked=card.is_liked,
        is_followed=card.is_followed,
    )


def _to_page_response(page: MediaPage) -> MediaPageResponse:
    return MediaPageResponse(
        media_type=page.media_type,
        category=page.category,
        page=page.page,
        page_size=page.page_size,
        total_count=page.total_count,
        total_pages=page.total_pages,
        has_next=page.has_next,
        from_cache=page.from_cache,
        items=[_to_item_response(card) for card in page.items],
    )


class FeedHandler:
    """HTTP handlers for feed operations.

    This handler delegates business logic to FeedService and handles
    HTTP-specific concerns like:
    - Converting entities to DTOs
    - Setting appropriate status codes
    - Error handling and responses
    """

    def __init__(
        self,
        feed_service: FeedService,
        change_feed: ChangeFeed,
        webhook_secret: str | None = None,
    ) -> None:
        """Initialize the feed handler.

        Args:
            feed_service: The feed service for business logic (required).
            change_feed: Feed that webhook events are published to (required).
            webhook_secret: Shared secret expected in X-Webhook-Secret, if any.
        """
        self._feed = feed_service
        self._changes = change_feed
        self._webhook_secret = webhook_secret

    async def get_page(
        self,
        media_type: str,
        page: int,
        user_id: str | None = None,
        category: str | None = None,
        premium: bool | None = None,
    ) -> MediaPageResponse:
        """Handle GET /media/{media_type} requests.

        Raises:
            HTTPException: 400 on bad input, 502 when the remote store fails
        """
        try:
            result = await self._feed.load_page(
                media_type,
                page,
                user_id=user_id,
                category=category,
                premium=premium,
            )
        except ValueError as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
        except FetchError as e:
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail=f"Failed to load page: {e}",
            ) from e
        except Exception as e:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Failed to load page: {e}",
            ) from e

        return _to_page_response(result)

    async def get_interactions(self, user_id: str) -> InteractionStateResponse:
        """Handle GET /users/{user_id}/interactions requests."""
        try:
            state = await self._feed.get_interaction_state(user_id)
        except FetchError as e:
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail=f"Failed to load interactions: {e}",
            ) from e
        except Exception as e:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Failed to load interactions: {e}",
            ) from e

        return InteractionStateResponse(
            user_id=state.user_id,
            liked_media_ids=sorted(state.liked_media_ids),
            followed_creators=sorted(state.followed_creators),
        )

    async def set_like(self, user_id: str | None, media_id: str, liked: bool) -> InteractionResponse:
        """Handle POST/DELETE /media/{media_id}/like requests."""
        user_id = self._require_user(user_id)
        try:
            if liked:
                await self._feed.like(user_id, media_id)
            else:
                await self._feed.unlike(user_id, media_id)
        except InteractionWriteError as e:
            raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e)) from e

        return InteractionResponse(
            success=True,
            active=liked,
            message="Media liked" if liked else "Media unliked",
        )

    async def set_follow(self, user_id: str | None, creator_name: str, followed: bool) -> InteractionResponse:
        """Handle POST/DELETE /creators/{creator_name}/follow requests."""
        user_id = self._require_user(user_id)
        try:
            if followed:
                await self._feed.follow(user_id, creator_name)
            else:
                await self._feed.unfollow(user_id, creator_name)
        except InteractionWriteError as e:
            raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e)) from e

        return InteractionResponse(
            success=True,
            active=followed,
            message="Creator followed" if followed else "Creator unfollowed",
        )

    async def receive_change(
        self,
        request: ChangeWebhookRequest,
        secret: str | None = None,
    ) -> ChangeAckResponse:
        """Handle POST /realtime/changes webhook deliveries.

        Raises:
            HTTPException: 401 if a webhook secret is configured and does not match
        """
        if self._webhook_secret and not hmac.compare_digest(secret or "", self._webhook_secret):
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid webhook secret")

        event = ChangeEvent.from_webhook(request.model_dump(by_alias=True))
        before = self._feed.get_stats()["known_users"]
        self._changes.publish(event)
        after = self._feed.get_stats()["known_users"]

        return ChangeAckResponse(accepted=True, invalidated_users=before - after)

    async def get_stats(self) -> CacheStatsResponse:
        """Handle GET /cache/stats requests."""
        stats = self._feed.get_stats()
        return CacheStatsResponse(
            total_entries=stats["total_entries"],
            ttl_seconds=stats["ttl_seconds"],
            page_size=stats["page_size"],
            known_users=stats["known_users"],
        )

    async def clear_cache(self) -> dict:
        """Handle DELETE /cache requests."""
        self._feed.clear()
        logger.info("cache.cleared")
        return {
            "success": True,
            "message": "Cache cleared successfully",
        }

    async def health_check(self) -> HealthCheckResponse:
        """Handle GET /health requests."""
        return HealthCheckResponse(
            status="healthy",
            cache_entries=self._feed.get_stats()["total_entries"],
        )

    @staticmethod
    def _require_user(user_id: str | None) -> str:
        if not user_id:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="X-User-Id header is required",
            )
        return user_id
