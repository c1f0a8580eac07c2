"""Tests for the listing query service."""

import pytest
from src.models.listing import ListingCreate, ListingQuery
from src.models.user import Identity
from src.services.listing_service import (
    escape_like,
    create_listing,
    get_listing,
    list_listings,
    list_listings_for_viewer,
)
from src.utils.errors import InvalidRequestError, NotFoundError, SupabaseError
from tests.utils.assertions import assert_newest_first
from tests.utils.factories import create_listing_data, seed_listings
from tests.utils.fake_supabase import FakePostgrestError


@pytest.mark.unit
@pytest.mark.parametrize("raw,escaped", [
    ("Crumbs", "Crumbs"),
    ("50%", "50\\%"),
    ("a_b", "a\\_b"),
    ("back\\slash", "back\\\\slash"),
])
def test_escape_like(raw, escaped):
    assert escape_like(raw) == escaped


@pytest.mark.unit
@pytest.mark.asyncio
async def test_list_listings_paginates_newest_first(fake_supabase):
    seed_listings(fake_supabase, 10)

    first = await list_listings(ListingQuery(page=1, limit=6))
    second = await list_listings(ListingQuery(page=2, limit=6))

    assert len(first.items) == 6
    assert len(second.items) == 4
    assert first.total == second.total == 10
    assert first.pagination.total_pages == 2
    assert_newest_first([i.model_dump() for i in first.items + second.items])
    assert not {i.id for i in first.items} & {i.id for i in second.items}


@pytest.mark.unit
@pytest.mark.asyncio
async def test_list_listings_page_past_end_is_empty(fake_supabase):
    seed_listings(fake_supabase, 3)

    page = await list_listings(ListingQuery(page=5, limit=6))

    assert page.items == []
    assert page.total == 3
    assert page.pagination.total_pages == 1


@pytest.mark.unit
@pytest.mark.asyncio
async def test_list_listings_empty_table(fake_supabase):
    page = await list_listings(ListingQuery())

    assert page.items == []
    assert page.total == 0
    assert page.pagination.total_pages == 0


@pytest.mark.unit
@pytest.mark.asyncio
async def test_search_is_case_insensitive_name_prefix(fake_supabase):
    fake_supabase.seed("bakeries", create_listing_data(name="Golden Crust", city="Paris"))
    fake_supabase.seed("bakeries", create_listing_data(name="The Golden Loaf", city="Golden"))
    fake_supabase.seed("bakeries", create_listing_data(name="Crumbs", city="Lyon", specialties="golden buns"))

    page = await list_listings(ListingQuery(search="gOLd"))

    assert [item.name for item in page.items] == ["Golden Crust"]
    assert page.total == 1


@pytest.mark.unit
@pytest.mark.asyncio
async def test_search_treats_wildcards_literally(fake_supabase):
    fake_supabase.seed("bakeries", create_listing_data(name="100% Rye"))
    fake_supabase.seed("bakeries", create_listing_data(name="1000 Breads"))

    page = await list_listings(ListingQuery(search="100%"))

    assert [item.name for item in page.items] == ["100% Rye"]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_search_rejects_postgrest_wildcard(fake_supabase):
    fake_supabase.seed("bakeries", create_listing_data(name="a*b Bakery"))
    fake_supabase.seed("bakeries", create_listing_data(name="abc Bakery"))

    with pytest.raises(InvalidRequestError) as exc_info:
        await list_listings(ListingQuery(search="a*"))

    assert exc_info.value.status_code == 400
    assert fake_supabase.calls == []


@pytest.mark.unit
@pytest.mark.asyncio
async def test_status_filter_is_exact(fake_supabase):
    seed_listings(fake_supabase, 2, status="open")
    seed_listings(fake_supabase, 3, status="closed")
    seed_listings(fake_supabase, 1, status="temporarily_closed")

    page = await list_listings(ListingQuery(status="closed"))

    assert page.total == 3
    assert {item.status for item in page.items} == {"closed"}


@pytest.mark.unit
@pytest.mark.asyncio
async def test_viewer_path_adds_ownership_without_changing_results(fake_supabase):
    viewer = Identity(id="11111111-1111-1111-1111-111111111111")
    seed_listings(fake_supabase, 2, created_by=viewer.id)
    seed_listings(fake_supabase, 3)

    anonymous = await list_listings(ListingQuery(limit=4))
    personal = await list_listings_for_viewer(ListingQuery(limit=4), viewer)

    assert [i.id for i in anonymous.items] == [i.id for i in personal.items]
    assert anonymous.total == personal.total
    owned = [i.model_dump()["is_owner"] for i in personal.items]
    assert owned == [i.created_by == viewer.id for i in personal.items]
    assert "is_owner" not in anonymous.items[0].model_dump()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_backend_failure_is_server_error(fake_supabase):
    fake_supabase.fail_with = FakePostgrestError("57014", "canceling statement due to statement timeout")

    with pytest.raises(SupabaseError):
        await list_listings(ListingQuery())


@pytest.mark.unit
@pytest.mark.asyncio
async def test_get_listing(fake_supabase):
    row = fake_supabase.seed("bakeries", create_listing_data(name="Crumbs"))

    listing = await get_listing(row["id"])

    assert listing.name == "Crumbs"


@pytest.mark.unit
@pytest.mark.asyncio
@pytest.mark.parametrize("listing_id", ["2b1f8c6e-0000-4000-8000-000000000000", "not-a-uuid"])
async def test_get_listing_not_found(fake_supabase, listing_id):
    with pytest.raises(NotFoundError) as exc_info:
        await get_listing(listing_id)

    assert exc_info.value.message == "Bakery not found"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_create_listing_sets_creator(fake_supabase):
    actor = Identity(id="11111111-1111-1111-1111-111111111111")
    payload = ListingCreate.model_validate({"name": "Crumbs", "city": "Lyon", "created_by": "spoofed"})

    listing = await create_listing(payload, actor)

    assert listing.created_by == actor.id
    assert listing.status == "open"
    assert fake_supabase.rows("bakeries")[0]["created_by"] == actor.id


@pytest.mark.unit
@pytest.mark.asyncio
async def test_create_listing_requires_name_and_city(fake_supabase):
    actor = Identity(id="11111111-1111-1111-1111-111111111111")

    with pytest.raises(InvalidRequestError) as exc_info:
        await create_listing(ListingCreate(name="Crumbs"), actor)

    assert exc_info.value.status_code == 400
    assert fake_supabase.rows("bakeries") == []
    assert fake_supabase.calls == []


@pytest.mark.unit
@pytest.mark.asyncio
async def test_search_excludes_mid_name_matches(fake_supabase):
    for name in ("Le Fournil", "leaven & co", "Pain Le Chic", "Boulangerie"):
        fake_supabase.seed("bakeries", create_listing_data(name=name))

    page = await list_listings(ListingQuery(search="Le"))

    assert sorted(item.name for item in page.items) == ["Le Fournil", "leaven & co"]


@pytest.mark.unit
@pytest.mark.asyncio
@pytest.mark.parametrize("page_number,limit", [(1, 1), (1, 6), (2, 6), (3, 4), (4, 3), (1, 50), (7, 2)])
async def test_page_size_and_total_pages(fake_supabase, page_number, limit):
    seed_listings(fake_supabase, 13)

    page = await list_listings(ListingQuery(page=page_number, limit=limit))

    assert len(page.items) <= limit
    assert page.pagination.total_pages == -(-13 // limit)
    assert len(page.items) == max(0, min(limit, 13 - (page_number - 1) * limit))
