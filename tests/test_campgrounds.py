# =============================================================================
# tests/test_campgrounds.py - Campground Service and Route Tests
# =============================================================================
# This module contains tests for:
# - CampgroundService CRUD and cascade deletion of reviews
# - The campground pages, including _method driven update/delete
# - Validation happening before any store write
# - Image file uploads staged under /uploads
# =============================================================================

from pathlib import Path
from uuid import uuid4

import pytest

from app.config import settings
from app.exceptions import CampgroundNotFoundError
from core.models.campground import CampgroundInput
from core.models.review import ReviewInput
from core.services.campground_service import (
    CAMPGROUNDS_TABLE,
    REVIEWS_TABLE,
    CampgroundService,
)
from core.services.review_service import ReviewService


# =============================================================================
# Service Tests
# =============================================================================

class TestCampgroundService:
    """Tests for CampgroundService against the in-memory store."""

    def test_create_then_fetch_round_trip(self, store):
        """A stored campground reads back with the submitted values."""
        data = CampgroundInput(
            title="Riverside",
            location="Yosemite, CA",
            price=5,
            description="Shaded sites",
            image="https://images.unsplash.com/photo-123",
        )

        created = CampgroundService.create_campground(data, author_id="user-1")
        fetched = CampgroundService.get_campground(created.id)

        assert fetched.model_dump(include=set(CampgroundInput.model_fields)) == data.model_dump()
        assert fetched.author_id == "user-1"

    def test_get_missing(self, store):
        with pytest.raises(CampgroundNotFoundError):
            CampgroundService.get_campground("missing")

    def test_list_oldest_first(self, store, make_campground):
        first = make_campground(title="First")
        second = make_campground(title="Second")

        assert [c.id for c in CampgroundService.list_campgrounds()] == [first.id, second.id]

    def test_update_replaces_fields(self, store, make_campground):
        campground = make_campground()
        data = CampgroundInput(**{**campground.model_dump(include=set(CampgroundInput.model_fields)), "price": 99})

        updated = CampgroundService.update_campground(campground.id, data)

        assert updated.price == 99
        assert updated.title == campground.title

    def test_update_missing(self, store, make_campground):
        data = CampgroundInput(**make_campground().model_dump(include=set(CampgroundInput.model_fields)))

        with pytest.raises(CampgroundNotFoundError):
            CampgroundService.update_campground("missing", data)

    def test_delete_cascades_to_reviews(self, store, make_campground):
        """Deleting a campground removes its reviews and nobody else's."""
        doomed = make_campground(title="Doomed")
        kept = make_campground(title="Kept")
        ReviewService.create_review(doomed.id, ReviewInput(text="Bad", rating=1))
        ReviewService.create_review(doomed.id, ReviewInput(text="Worse", rating=1))
        ReviewService.create_review(kept.id, ReviewInput(text="Fine", rating=4))

        removed = CampgroundService.delete_campground(doomed.id)

        assert removed == 2
        assert [c["id"] for c in store.rows(CAMPGROUNDS_TABLE)] == [kept.id]
        assert [r["campground_id"] for r in store.rows(REVIEWS_TABLE)] == [kept.id]

    def test_delete_missing(self, store):
        with pytest.raises(CampgroundNotFoundError):
            CampgroundService.delete_campground("missing")


# =============================================================================
# Route Tests
# =============================================================================

class TestCampgroundPages:
    """Read-only pages."""

    def test_index_lists_campgrounds(self, client, make_campground):
        make_campground(title="Lakeside")
        make_campground(title="Hilltop")

        response = client.get("/campground")

        assert response.status_code == 200
        assert "Lakeside" in response.text
        assert "Hilltop" in response.text

    def test_show_with_reviews(self, client, make_campground):
        campground = make_campground(title="Lakeside")
        ReviewService.create_review(campground.id, ReviewInput(text="Loved the lake", rating=5))

        response = client.get(f"/campground/{campground.id}")

        assert response.status_code == 200
        assert "Lakeside" in response.text
        assert "Loved the lake" in response.text

    def test_show_missing(self, client, store):
        response = client.get(f"/campground/{uuid4()}")

        assert response.status_code == 404
        assert "Cannot find that campground!" in response.text

    def test_malformed_id_is_not_found(self, client, store):
        """An id that is not a UUID never reaches the store."""
        response = client.get("/campground/not-a-uuid")

        assert response.status_code == 404
        assert "Page Not Found" in response.text

    def test_malformed_id_edit_form(self, auth_client, store):
        assert auth_client.get("/campground/not-a-uuid/edit").status_code == 404

    def test_new_form_requires_login(self, client, store):
        response = client.get("/campground/new", follow_redirects=False)

        assert response.status_code == 303
        assert response.headers["location"] == "/login"

    def test_new_form(self, auth_client):
        response = auth_client.get("/campground/new")

        assert response.status_code == 200
        assert 'name="campground[title]"' in response.text

    def test_edit_form_prefilled(self, auth_client, make_campground):
        campground = make_campground(title="Lakeside")

        response = auth_client.get(f"/campground/{campground.id}/edit")

        assert response.status_code == 200
        assert 'value="Lakeside"' in response.text
        assert "_method=PUT" in response.text


class TestCreateCampground:
    """POST /campground."""

    def test_create(self, auth_client, store, user, campground_form):
        response = auth_client.post("/campground", data=campground_form, follow_redirects=False)

        rows = store.rows(CAMPGROUNDS_TABLE)
        assert len(rows) == 1
        assert response.status_code == 303
        assert response.headers["location"] == f"/campground/{rows[0]['id']}"
        assert rows[0]["title"] == "Riverside"
        assert rows[0]["price"] == 5
        assert rows[0]["author_id"] == user.id

        page = auth_client.get(response.headers["location"])
        assert "Successfully made a new campground!" in page.text

    def test_plain_field_names_accepted(self, auth_client, store, campground_form):
        plain = {key[len("campground["):-1]: value for key, value in campground_form.items()}

        response = auth_client.post("/campground", data=plain, follow_redirects=False)

        assert response.status_code == 303
        assert len(store.rows(CAMPGROUNDS_TABLE)) == 1

    def test_empty_title_rejected_before_write(self, auth_client, store, campground_form):
        """Scenario: an empty title fails citing title and stores nothing."""
        campground_form["campground[title]"] = ""

        response = auth_client.post("/campground", data=campground_form)

        assert response.status_code == 400
        assert "title" in response.text
        assert store.rows(CAMPGROUNDS_TABLE) == []

    def test_negative_price_rejected(self, auth_client, store, campground_form):
        campground_form["campground[price]"] = "-3"

        response = auth_client.post("/campground", data=campground_form)

        assert response.status_code == 400
        assert store.rows(CAMPGROUNDS_TABLE) == []

    def test_operator_keys_stripped(self, auth_client, store, campground_form):
        campground_form["campground[$where]"] = "1"

        auth_client.post("/campground", data=campground_form, follow_redirects=False)

        assert "$where" not in store.rows(CAMPGROUNDS_TABLE)[0]

    def test_anonymous_create_redirects(self, client, store, campground_form):
        response = client.post("/campground", data=campground_form, follow_redirects=False)

        assert response.status_code == 303
        assert response.headers["location"] == "/login"
        assert store.rows(CAMPGROUNDS_TABLE) == []


class TestImageUpload:
    """Multipart image_file uploads."""

    def test_upload_becomes_image(self, auth_client, store, campground_form):
        del campground_form["campground[image]"]

        response = auth_client.post(
            "/campground",
            data=campground_form,
            files={"image_file": ("tent.JPG", b"\xff\xd8\xff fake jpeg", "image/jpeg")},
            follow_redirects=False,
        )

        assert response.status_code == 303
        image = store.rows(CAMPGROUNDS_TABLE)[0]["image"]
        assert image.startswith("/uploads/")
        assert image.endswith(".jpg")
        assert (Path(settings.UPLOAD_DIR) / Path(image).name).read_bytes() == b"\xff\xd8\xff fake jpeg"

        served = auth_client.get(image)
        assert served.status_code == 200
        assert served.content == b"\xff\xd8\xff fake jpeg"

    def test_typed_url_wins_over_upload(self, auth_client, store, campground_form):
        auth_client.post(
            "/campground",
            data=campground_form,
            files={"image_file": ("tent.jpg", b"data", "image/jpeg")},
            follow_redirects=False,
        )

        assert store.rows(CAMPGROUNDS_TABLE)[0]["image"] == campground_form["campground[image]"]

    def test_bad_extension_rejected(self, auth_client, store, campground_form):
        del campground_form["campground[image]"]

        response = auth_client.post(
            "/campground",
            data=campground_form,
            files={"image_file": ("tent.exe", b"MZ", "application/octet-stream")},
        )

        assert response.status_code == 400
        assert "Invalid file type" in response.text
        assert store.rows(CAMPGROUNDS_TABLE) == []

    def test_rejected_form_stages_nothing(self, auth_client, store, campground_form):
        """An upload riding on an invalid form never reaches the staging dir."""
        del campground_form["campground[image]"]
        campground_form["campground[title]"] = ""
        before = set(Path(settings.UPLOAD_DIR).iterdir())

        response = auth_client.post(
            "/campground",
            data=campground_form,
            files={"image_file": ("pic.jpg", b"\xff\xd8\xff fake jpeg", "image/jpeg")},
        )

        assert response.status_code == 400
        assert "title" in response.text
        assert store.rows(CAMPGROUNDS_TABLE) == []
        assert set(Path(settings.UPLOAD_DIR).iterdir()) == before

    def test_update_of_missing_campground_stages_nothing(self, auth_client, store, campground_form):
        del campground_form["campground[image]"]
        before = set(Path(settings.UPLOAD_DIR).iterdir())

        response = auth_client.post(
            f"/campground/{uuid4()}?_method=PUT",
            data=campground_form,
            files={"image_file": ("pic.jpg", b"\xff\xd8\xff fake jpeg", "image/jpeg")},
        )

        assert response.status_code == 404
        assert set(Path(settings.UPLOAD_DIR).iterdir()) == before


class TestUpdateAndDelete:
    """PUT/DELETE through the _method override."""

    def test_update_via_method_override(self, auth_client, store, make_campground, campground_form):
        campground = make_campground(title="Lakeside")
        campground_form["campground[price]"] = "42"

        response = auth_client.post(
            f"/campground/{campground.id}?_method=PUT",
            data=campground_form,
            follow_redirects=False,
        )

        assert response.status_code == 303
        assert response.headers["location"] == f"/campground/{campground.id}"
        row = store.fetch_by_id(CAMPGROUNDS_TABLE, campground.id)
        assert row["title"] == "Riverside"
        assert row["price"] == 42

    def test_update_with_body_override(self, auth_client, store, make_campground, campground_form):
        campground = make_campground()

        response = auth_client.post(
            f"/campground/{campground.id}",
            data={**campground_form, "_method": "PATCH"},
            follow_redirects=False,
        )

        assert response.status_code == 303
        assert store.fetch_by_id(CAMPGROUNDS_TABLE, campground.id)["title"] == "Riverside"

    def test_update_invalid_leaves_record(self, auth_client, store, make_campground, campground_form):
        campground = make_campground(title="Lakeside")
        campground_form["campground[description]"] = ""

        response = auth_client.post(f"/campground/{campground.id}?_method=PUT", data=campground_form)

        assert response.status_code == 400
        assert store.fetch_by_id(CAMPGROUNDS_TABLE, campground.id)["title"] == "Lakeside"

    def test_update_missing(self, auth_client, store, campground_form):
        response = auth_client.post(f"/campground/{uuid4()}?_method=PUT", data=campground_form)

        assert response.status_code == 404

    def test_delete_cascades(self, auth_client, store, make_campground):
        campground = make_campground()
        ReviewService.create_review(campground.id, ReviewInput(text="Nice", rating=4))

        response = auth_client.post(f"/campground/{campground.id}?_method=DELETE", follow_redirects=False)

        assert response.status_code == 303
        assert response.headers["location"] == "/campground"
        assert store.rows(CAMPGROUNDS_TABLE) == []
        assert store.rows(REVIEWS_TABLE) == []
        assert "Successfully deleted campground" in auth_client.get("/campground").text

    def test_anonymous_delete_redirects(self, client, store, make_campground):
        campground = make_campground()

        response = client.post(f"/campground/{campground.id}?_method=DELETE", follow_redirects=False)

        assert response.headers["location"] == "/login"
        assert len(store.rows(CAMPGROUNDS_TABLE)) == 1
