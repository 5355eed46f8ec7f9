# =============================================================================
# core/services/campground_service.py - Campground Business Logic
# =============================================================================
# Handles campground CRUD operations.
# Separates HTTP concerns from database/business logic.
# =============================================================================

import logging
from uuid import UUID

from lib.supabase_client import SupabaseClient
from core.models.campground import CampgroundInput, CampgroundRecord
from app.exceptions import CampgroundNotFoundError

logger = logging.getLogger(__name__)

CAMPGROUNDS_TABLE = "campgrounds"
REVIEWS_TABLE = "reviews"


class CampgroundService:
    """
    Service for campground operations.

    Every input reaching this class has already passed CampgroundInput
    validation, so nothing here re-checks field contents.
    """

    @staticmethod
    def list_campgrounds() -> list[CampgroundRecord]:
        """Return every campground, oldest first."""
        rows = SupabaseClient.fetch_many(CAMPGROUNDS_TABLE)
        return [CampgroundRecord.model_validate(row) for row in rows]

    @staticmethod
    def get_campground(campground_id: str | UUID) -> CampgroundRecord:
        """
        Get a campground by ID.

        Raises:
            CampgroundNotFoundError: If the campground doesn't exist
        """
        row = SupabaseClient.fetch_by_id(CAMPGROUNDS_TABLE, campground_id)
        if not row:
            raise CampgroundNotFoundError(str(campground_id))
        return CampgroundRecord.model_validate(row)

    @staticmethod
    def create_campground(
        data: CampgroundInput,
        author_id: str | UUID | None = None,
    ) -> CampgroundRecord:
        """
        Persist a validated campground.

        Args:
            data: Validated campground fields
            author_id: The user creating the campground

        Returns:
            The stored campground with generated id
        """
        payload = data.model_dump()
        if author_id:
            payload["author_id"] = str(author_id)

        row = SupabaseClient.insert(CAMPGROUNDS_TABLE, payload)
        logger.info(f"Created campground: {row['id']} by user: {author_id}")
        return CampgroundRecord.model_validate(row)

    @staticmethod
    def update_campground(
        campground_id: str | UUID,
        data: CampgroundInput,
    ) -> CampgroundRecord:
        """
        Replace a campground's fields with a full, validated resubmission.

        Raises:
            CampgroundNotFoundError: If the campground doesn't exist
        """
        row = SupabaseClient.update_by_id(CAMPGROUNDS_TABLE, campground_id, data.model_dump())
        if not row:
            raise CampgroundNotFoundError(str(campground_id))

        logger.info(f"Updated campground: {campground_id}")
        return CampgroundRecord.model_validate(row)

    @staticmethod
    def delete_campground(campground_id: str | UUID) -> int:
        """
        Delete a campground and then its reviews.

        The two deletes are separate store calls with no transaction; a
        failure between them leaves orphaned reviews behind.

        Returns:
            Number of reviews removed with the campground

        Raises:
            CampgroundNotFoundError: If the campground doesn't exist
        """
        deleted = SupabaseClient.delete_by_id(CAMPGROUNDS_TABLE, campground_id)
        if not deleted:
            raise CampgroundNotFoundError(str(campground_id))

        removed_reviews = SupabaseClient.delete_where(REVIEWS_TABLE, "campground_id", campground_id)
        logger.info(f"Deleted campground: {campground_id} and {removed_reviews} reviews")
        return removed_reviews
