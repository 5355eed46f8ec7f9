# =============================================================================
# app/routers/campgrounds.py - Campground Endpoints
# =============================================================================
# Server-rendered CRUD for campgrounds. Mutating routes require a signed-in
# user; PUT/PATCH/DELETE arrive as POST + _method from HTML forms.
# =============================================================================

import logging
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Path, Request
from fastapi.responses import RedirectResponse
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile

from app.auth import AuthenticatedContextDep
from app.dependencies import RequestContextDep
from app.rendering import render
from core.models.campground import CampgroundInput
from core.services.campground_service import CampgroundService
from core.services.review_service import ReviewService
from core.services.storage_service import StorageService
from core.validation import validate_input
from lib.utils import extract_form_group, sanitize_form_keys

logger = logging.getLogger(__name__)

router = APIRouter()

# Multipart field for an uploaded image file
IMAGE_FILE_FIELD = "image_file"
# Stands in for the image while the rest of the form is validated
PENDING_UPLOAD_IMAGE = "pending-upload"

CampgroundId = Annotated[UUID, Path(description="Campground ID")]


# =============================================================================
# Helper Functions
# =============================================================================

async def _read_campground_form(request: Request) -> CampgroundInput:
    """
    Parse, sanitize and validate a campground form.

    An uploaded image file is used as the image reference when no image URL
    was typed in. It is written to the staging directory only after the
    rest of the form has passed validation.
    """
    form = await request.form()
    items = sanitize_form_keys(form.multi_items())
    data = extract_form_group(items, "campground")

    upload = form.get(IMAGE_FILE_FIELD)
    data.pop(IMAGE_FILE_FIELD, None)
    use_upload = isinstance(upload, UploadFile) and bool(upload.filename) and not data.get("image")
    if use_upload:
        data["image"] = PENDING_UPLOAD_IMAGE

    campground = validate_input(CampgroundInput, data)

    if use_upload:
        content = await upload.read()
        image = await run_in_threadpool(StorageService.stage_image, content, upload.filename)
        campground = campground.model_copy(update={"image": image})

    return campground


# =============================================================================
# Endpoints
# =============================================================================

@router.get("")
async def list_campgrounds(request: Request, ctx: RequestContextDep):
    """List every campground."""
    campgrounds = CampgroundService.list_campgrounds()
    return render(request, "campgrounds/index.html", {"campgrounds": campgrounds})


@router.get("/new")
async def new_campground_form(request: Request, ctx: AuthenticatedContextDep):
    """Blank create form."""
    return render(request, "campgrounds/new.html")


@router.post("")
async def create_campground(request: Request, ctx: AuthenticatedContextDep):
    """
    Create a campground.

    The form is validated before anything is written; a rejected form
    never reaches the store.
    """
    data = await _read_campground_form(request)
    campground = CampgroundService.create_campground(data, author_id=ctx.current_user.id)

    ctx.session.flash("success", "Successfully made a new campground!")
    return RedirectResponse(f"/campground/{campground.id}", status_code=303)


@router.get("/{campground_id}")
async def show_campground(campground_id: CampgroundId, request: Request, ctx: RequestContextDep):
    """Show one campground with its reviews."""
    campground = CampgroundService.get_campground(campground_id)
    reviews = ReviewService.list_reviews(campground_id)
    return render(request, "campgrounds/show.html", {
        "campground": campground,
        "reviews": reviews,
    })


@router.get("/{campground_id}/edit")
async def edit_campground_form(
    campground_id: CampgroundId,
    request: Request,
    ctx: AuthenticatedContextDep,
):
    """Edit form pre-filled with the stored values."""
    campground = CampgroundService.get_campground(campground_id)
    return render(request, "campgrounds/edit.html", {"campground": campground})


@router.api_route("/{campground_id}", methods=["PUT", "PATCH"])
async def update_campground(
    campground_id: CampgroundId,
    request: Request,
    ctx: AuthenticatedContextDep,
):
    """Replace a campground's fields. The full object must be resubmitted."""
    # Checked first so an upload for a missing campground is never staged
    CampgroundService.get_campground(campground_id)
    data = await _read_campground_form(request)
    campground = CampgroundService.update_campground(campground_id, data)

    ctx.session.flash("success", "Successfully updated campground!")
    return RedirectResponse(f"/campground/{campground.id}", status_code=303)


@router.delete("/{campground_id}")
async def delete_campground(
    campground_id: CampgroundId,
    ctx: AuthenticatedContextDep,
):
    """Delete a campground together with its reviews."""
    CampgroundService.delete_campground(campground_id)

    ctx.session.flash("success", "Successfully deleted campground")
    return RedirectResponse("/campground", status_code=303)
