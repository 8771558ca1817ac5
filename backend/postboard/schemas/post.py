"""
Postboard Backend: Post Request/Response Schemas
==================================================

What:  Pydantic models defining the posts API contract.
Why:   Request bodies are validated against an explicit structure; anything
       that does not conform is rejected instead of being coerced.
How:   The posts routes validate decoded POST/PUT bodies against
       PostCreate/PostUpdate; PostService builds PostResponse from ORM rows.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class PostCreate(BaseModel):
    """Body of POST /api/posts. Empty strings are accepted."""

    title: str = Field(description="Post title")
    content: str = Field(description="Post body text")


class PostUpdate(BaseModel):
    """
    Body of PUT /api/posts/{id}.

    Only fields that are present and non-empty are applied. A body where
    neither is set is rejected by PostService with "No fields to update".
    """

    title: Optional[str] = Field(default=None, description="Replacement title")
    content: Optional[str] = Field(default=None, description="Replacement body text")

    def changes(self) -> dict:
        """Fields to write, skipping absent and empty values."""
        return {
            name: value
            for name, value in (("title", self.title), ("content", self.content))
            if value
        }


class PostResponse(BaseModel):
    """Full representation of a stored post."""

    id: int = Field(description="System-assigned identifier")
    title: str
    content: str
    created_at: datetime = Field(description="Assigned by storage at insert")
    updated_at: datetime = Field(description="Reassigned by storage on every update")

    model_config = {"from_attributes": True}


class DeletedPost(BaseModel):
    """Data returned by DELETE /api/posts/{id}."""

    id: int
