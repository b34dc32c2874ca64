"""Request DTOs for API endpoints."""

from typing import Any

from pydantic import BaseModel, Field


class ChangeWebhookRequest(BaseModel):
    """Supabase database-webhook payload.

    Only ``table`` is relied upon; the row images are informational.
    """

    type: str = Field("UPDATE", description="INSERT, UPDATE or DELETE")
    table: str = Field(..., description="Table the change happened on", min_length=1)
    schema_name: str = Field("public", alias="schema", description="Database schema")
    record: dict[str, Any] | None = Field(None, description="New row image")
    old_record: dict[str, Any] | None = Field(None, description="Previous row image")

    model_config = {"populate_by_name": True}
