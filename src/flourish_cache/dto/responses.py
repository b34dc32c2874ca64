"""Response DTOs for API endpoints."""

from pydantic import BaseModel, Field


class MediaItemResponse(BaseModel):
    """Single media card in a page listing."""

    id: str = Field(..., description="Media ID")
    title: str
    creator_name: str
    description: str | None = None
    thumbnail_url: str
    thumbnail_srcset: str = Field("", description="Responsive srcset for the thumbnail")
    duration: str | None = None
    read_time: str | None = None
    type: str = Field(..., description="stream, listen, blog, gallery or resources")
    category: str
    content_type: str
    price: float | None = None
    rating: float = Field(0.0, ge=0.0)
    is_premium: bool = False
    views_count: int = Field(0, ge=0)
    plays_count: int = Field(0, ge=0)
    sales_count: int = Field(0, ge=0)
    likes_count: int = Field(0, ge=0)
    is_liked: bool = Field(False, description="Whether the viewer liked this item")
    is_followed: bool = Field(False, description="Whether the viewer follows the creator")


class MediaPageResponse(BaseModel):
    """Response DTO for a page of media."""

    media_type: str
    category: str | None = None
    page: int = Field(..., ge=1)
    page_size: int = Field(..., ge=1)
    total_count: int = Field(..., ge=0)
    total_pages: int = Field(..., ge=0)
    has_next: bool
    from_cache: bool = Field(..., description="Whether the content came from the page cache")
    items: list[MediaItemResponse] = Field(default_factory=list)


class InteractionStateResponse(BaseModel):
    """Response DTO for a user's likes and follows."""

    user_id: str
    liked_media_ids: list[str] = Field(default_factory=list)
    followed_creators: list[str] = Field(default_factory=list)


class InteractionResponse(BaseModel):
    """Response DTO for like/follow writes."""

    success: bool
    active: bool = Field(..., description="Whether the like/follow exists afterwards")
    message: str


class ChangeAckResponse(BaseModel):
    """Response DTO for the realtime webhook."""

    accepted: bool
    invalidated_users: int = Field(..., ge=0)


class CacheStatsResponse(BaseModel):
    """Response DTO for cache statistics."""

    total_entries: int = Field(..., ge=0)
    ttl_seconds: float = Field(..., gt=0)
    page_size: int = Field(..., ge=1)
    known_users: int = Field(..., ge=0)


class HealthCheckResponse(BaseModel):
    """Response DTO for health check."""

    status: str = Field(..., description="Health status: 'healthy' or 'unhealthy'")
    cache_entries: int = Field(..., ge=0)
