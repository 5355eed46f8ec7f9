# =============================================================================
# core/models/review.py - Review Schemas
# =============================================================================

from datetime import datetime

from pydantic import BaseModel, Field


class ReviewInput(BaseModel):
    """
    Schema for posting a review on a campground.

    Rating bounds are inclusive: 1 and 5 are both valid.
    """

    text: str = Field(
        ...,
        min_length=1,
        description="Review body"
    )

    rating: int = Field(
        ...,
        ge=1,
        le=5,
        description="Star rating from 1 to 5"
    )


class ReviewRecord(ReviewInput):
    """A review as stored, attached to exactly one campground."""

    id: str
    campground_id: str
    author_id: str | None = None
    created_at: datetime | None = None
