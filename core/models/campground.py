# =============================================================================
# core/models/campground.py - Campground Schemas
# =============================================================================
# These models define the contract for campground (listing) submissions:
# - CampgroundInput: Validated form body for create and update
# - CampgroundRecord: A stored campground as returned by the store
#
# Updates resubmit the full object, so one input schema serves both.
# =============================================================================

from datetime import datetime

from pydantic import BaseModel, Field


class CampgroundInput(BaseModel):
    """
    Schema for creating or updating a campground.

    Every field is required. Extra submitted keys are ignored.

    Example:
        {
            "title": "Riverside",
            "location": "Yosemite, CA",
            "price": 25,
            "description": "Shaded sites next to the river",
            "image": "https://images.unsplash.com/photo-123"
        }
    """

    title: str = Field(
        ...,
        min_length=1,
        description="Campground name"
    )

    location: str = Field(
        ...,
        min_length=1,
        description="Human-readable location"
    )

    # Nightly price, zero allowed for free sites
    price: float = Field(
        ...,
        ge=0,
        allow_inf_nan=False,
        description="Price per night"
    )

    description: str = Field(
        ...,
        min_length=1,
        description="Free-text description"
    )

    image: str = Field(
        ...,
        min_length=1,
        description="Image URL or staged upload path"
    )


class CampgroundRecord(CampgroundInput):
    """A campground as stored, with identity and ownership."""

    id: str
    author_id: str | None = None
    created_at: datetime | None = None
