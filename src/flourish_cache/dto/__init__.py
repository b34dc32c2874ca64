"""Data Transfer Objects for API contracts.

These Pydantic models define the external API contract.
Internal domain logic should use entities from the entities package.
"""

from .requests import ChangeWebhookRequest
from .responses import (
    CacheStatsResponse,
    ChangeAckResponse,
    HealthCheckResponse,
    InteractionResponse,
    InteractionStateResponse,
    MediaItemResponse,
    MediaPageResponse,
)

__all__ = [
    "ChangeWebhookRequest",
    "CacheStatsResponse",
    "ChangeAckResponse",
    "HealthCheckResponse",
    "InteractionResponse",
    "InteractionStateResponse",
    "MediaItemResponse",
    "MediaPageResponse",
]
