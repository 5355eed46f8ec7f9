# =============================================================================
# core/services/review_service.py - Review Business Logic
# =============================================================================
# Reviews are children of exactly one campground. Creation checks the
# parent exists; deletion checks the review belongs to the parent in the URL.
# =============================================================================

import logging
from uuid import UUID

from lib.supabase_client import SupabaseClient
from core.models.review import ReviewInput, ReviewRecord
from core.services.campground_service import CampgroundService, REVIEWS_TABLE
from app.exceptions import ReviewNotFoundError

logger = logging.getLogger(__name__)


class ReviewService:
    """Service for review operations."""

    @staticmethod
    def list_reviews(campground_id: str | UUID) -> list[ReviewRecord]:
        """Return a campground's reviews, newest first."""
        rows = SupabaseClient.fetch_many(
            REVIEWS_TABLE,
            filters={"campground_id": str(campground_id)},
            desc=True,
        )
        return [ReviewRecord.model_validate(row) for row in rows]

    @staticmethod
    def create_review(
        campground_id: str | UUID,
        data: ReviewInput,
        author_id: str | UUID | None = None,
    ) -> ReviewRecord:
        """
        Attach a validated review to a campground.

        Raises:
            CampgroundNotFoundError: If the parent campground doesn't exist
        """
        CampgroundService.get_campground(campground_id)

        payload = data.model_dump()
        payload["campground_id"] = str(campground_id)
        if author_id:
            payload["author_id"] = str(author_id)

        row = SupabaseClient.insert(REVIEWS_TABLE, payload)
        logger.info(f"Created review: {row['id']} on campground: {campground_id}")
        return ReviewRecord.model_validate(row)

    @staticmethod
    def delete_review(campground_id: str | UUID, review_id: str | UUID) -> None:
        """
        Delete one review by its own id.

        Raises:
            ReviewNotFoundError: If the review doesn't exist or belongs to
                a different campground
        """
        row = SupabaseClient.fetch_by_id(REVIEWS_TABLE, review_id)
        if not row or str(row.get("campground_id")) != str(campground_id):
            raise ReviewNotFoundError(str(review_id))

        SupabaseClient.delete_by_id(REVIEWS_TABLE, review_id)
        logger.info(f"Deleted review: {review_id} from campground: {campground_id}")
