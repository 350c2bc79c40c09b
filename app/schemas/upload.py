"""Pydantic schemas for image upload responses."""

from pydantic import BaseModel, Field


class UploadResponse(BaseModel):
    """Response body for POST /upload."""

    url: str = Field(description="Durable HTTPS URL of the stored image")
