# =============================================================================
# app/routers/reviews.py - Review Endpoints
# =============================================================================
# Nested under /campground/{campground_id}/review. Both routes need a
# signed-in user.
# =============================================================================

import logging
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Path, Request
from fastapi.responses import RedirectResponse

from app.auth import AuthenticatedContextDep
from core.models.review import ReviewInput
from core.services.review_service import ReviewService
from core.validation import validate_input
from lib.utils import extract_form_group, sanitize_form_keys

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("")
async def create_review(
    campground_id: Annotated[UUID, Path(description="Campground ID")],
    request: Request,
    ctx: AuthenticatedContextDep,
):
    """Validate and attach a review, then return to the campground page."""
    form = await request.form()
    data = extract_form_group(sanitize_form_keys(form.multi_items()), "review")
    review = validate_input(ReviewInput, data)

    ReviewService.create_review(campground_id, review, author_id=ctx.current_user.id)

    ctx.session.flash("success", "Created new review!")
    return RedirectResponse(f"/campground/{campground_id}", status_code=303)


@router.delete("/{review_id}")
async def delete_review(
    campground_id: Annotated[UUID, Path(description="Campground ID")],
    review_id: Annotated[UUID, Path(description="Review ID")],
    ctx: AuthenticatedContextDep,
):
    """Delete one review by its own id."""
    ReviewService.delete_review(campground_id, review_id)

    ctx.session.flash("success", "Successfully deleted review")
    return RedirectResponse(f"/campground/{campground_id}", status_code=303)
