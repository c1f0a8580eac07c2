"""Tests for listing models."""

import pytest
from pydantic import ValidationError
from src.models.listing import (
    Listing,
    ListingCreate,
    ListingQuery,
    ListingStatus,
    ListingUpdate,
    PROTECTED_FIELDS,
)


@pytest.mark.unit
def test_listing_defaults():
    listing = Listing(id="1", name="Crumbs", city="Lyon")

    assert listing.status == "open"
    assert listing.rating is None
    assert listing.created_by is None


@pytest.mark.unit
def test_listing_stringifies_ids():
    listing = Listing(id=42, name="Crumbs", city="Lyon", created_by=7)

    assert listing.id == "42"
    assert listing.created_by == "7"


@pytest.mark.unit
def test_listing_keeps_extra_columns():
    listing = Listing(id="1", name="Crumbs", city="Lyon", is_owner=True)

    assert listing.model_dump()["is_owner"] is True


@pytest.mark.unit
def test_listing_create_missing_required():
    assert ListingCreate(name="Crumbs").missing_required() == ["city"]
    assert ListingCreate(name="  ", city="Lyon").missing_required() == ["name"]
    assert ListingCreate(name="Crumbs", city="Lyon").missing_required() == []


@pytest.mark.unit
def test_listing_create_row_sets_creator_and_default_status():
    row = ListingCreate(name="Crumbs", city="Lyon", average_price="").to_row("user-1")

    assert row == {"name": "Crumbs", "city": "Lyon", "status": "open", "created_by": "user-1"}


@pytest.mark.unit
def test_listing_create_ignores_client_creator():
    payload = ListingCreate.model_validate({"name": "Crumbs", "city": "Lyon", "created_by": "intruder"})

    assert payload.to_row("user-1")["created_by"] == "user-1"


@pytest.mark.unit
def test_listing_create_rejects_unknown_status():
    with pytest.raises(ValidationError):
        ListingCreate(name="Crumbs", city="Lyon", status="sold-out")


@pytest.mark.unit
def test_listing_create_keeps_explicit_status():
    row = ListingCreate(name="Crumbs", city="Lyon", status=ListingStatus.CLOSED).to_row("u")

    assert row["status"] == "closed"


@pytest.mark.unit
def test_listing_update_only_set_fields():
    patch = ListingUpdate.model_validate({"city": "Paris"})

    assert patch.changes() == {"city": "Paris"}


@pytest.mark.unit
def test_listing_update_strips_protected_fields():
    patch = ListingUpdate.model_validate({
        "name": "New",
        "created_by": "someone-else",
        "id": "99",
        "rating": 5,
        "created_at": "2020-01-01",
    })

    assert patch.changes() == {"name": "New"}
    assert not PROTECTED_FIELDS & set(patch.changes())


@pytest.mark.unit
def test_listing_update_rejects_blank_name():
    with pytest.raises(ValidationError):
        ListingUpdate.model_validate({"name": "   "})


@pytest.mark.unit
def test_listing_update_can_clear_optional_fields():
    patch = ListingUpdate.model_validate({"specialties": None, "average_price": ""})

    assert patch.changes() == {"specialties": None, "average_price": None}


@pytest.mark.unit
def test_listing_query_window():
    query = ListingQuery(page=3, limit=6)

    assert query.offset == 12
    assert query.window() == (12, 17)


@pytest.mark.unit
def test_listing_query_first_page():
    assert ListingQuery().window() == (0, 5)


@pytest.mark.unit
@pytest.mark.parametrize("field", ["page", "limit"])
def test_listing_query_rejects_non_positive(field):
    with pytest.raises(ValidationError):
        ListingQuery(**{field: 0})
