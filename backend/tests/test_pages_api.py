"""
Keep API — Page Endpoint Tests
================================

Public reads, admin CRUD and the reorder transaction, end-to-end.
"""

import pytest
import pytest_asyncio
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.dml import Update

from keep_api.database import async_session_factory
from keep_api.exceptions import DatabaseError
from keep_api.services.page_service import page_service


@pytest_asyncio.fixture
async def three_pages(test_client, admin_headers):
    """Creates pages 'one', 'two', 'three' (positions 0, 1, 2); returns their ids."""
    ids = []
    for slug in ("one", "two", "three"):
        response = await test_client.post(
            "/admin/page",
            json={"title": slug.title(), "content": f"{slug} body", "slug": slug},
            headers=admin_headers,
        )
        assert response.status_code == 201
        ids.append(response.json()["page"]["id"])
    return ids


async def _positions(test_client, admin_headers):
    pages = (await test_client.get("/admin/pages", headers=admin_headers)).json()
    return {page["id"]: page["position"] for page in pages}


@pytest.mark.asyncio
async def test_create_appends_position(test_client, admin_headers, three_pages):
    assert await _positions(test_client, admin_headers) == {
        three_pages[0]: 0,
        three_pages[1]: 1,
        three_pages[2]: 2,
    }


@pytest.mark.asyncio
async def test_reorder(test_client, admin_headers, three_pages):
    first, second, third = three_pages

    response = await test_client.post(
        "/admin/pages/reorder",
        json={"order": [third, first, second]},
        headers=admin_headers,
    )

    assert response.status_code == 200
    assert response.json()["order"] == [third, first, second]
    assert await _positions(test_client, admin_headers) == {third: 0, first: 1, second: 2}


@pytest.mark.asyncio
async def test_reorder_listing_follows_new_order(test_client, admin_headers, three_pages):
    first, second, third = three_pages
    await test_client.post(
        "/admin/pages/reorder", json={"order": [third, first, second]}, headers=admin_headers
    )

    titles = [page["title"] for page in (await test_client.get("/pages")).json()]

    assert titles == ["Three", "One", "Two"]


@pytest.mark.asyncio
async def test_reorder_empty_is_a_no_op(test_client, admin_headers, three_pages):
    before = await _positions(test_client, admin_headers)

    response = await test_client.post(
        "/admin/pages/reorder", json={"order": []}, headers=admin_headers
    )

    assert response.status_code == 200
    assert await _positions(test_client, admin_headers) == before


@pytest.mark.asyncio
async def test_reorder_partial_and_unknown_ids(test_client, admin_headers, three_pages):
    first, second, third = three_pages

    response = await test_client.post(
        "/admin/pages/reorder", json={"order": [9999, third]}, headers=admin_headers
    )

    assert response.status_code == 200
    # third moves to index 1; unnamed pages keep their positions
    assert await _positions(test_client, admin_headers) == {first: 0, second: 1, third: 1}


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [{"order": "1,2,3"}, {"order": {"a": 1}}, {"order": None}, {}])
async def test_reorder_rejects_non_list(test_client, admin_headers, three_pages, body):
    before = await _positions(test_client, admin_headers)

    response = await test_client.post("/admin/pages/reorder", json=body, headers=admin_headers)

    assert response.status_code == 400
    assert await _positions(test_client, admin_headers) == before


@pytest.mark.asyncio
async def test_patch_title_only(test_client, admin_headers, three_pages):
    page_id = three_pages[1]

    response = await test_client.patch(
        f"/admin/page/{page_id}", json={"title": "X"}, headers=admin_headers
    )

    assert response.status_code == 200
    page = response.json()["page"]
    assert page["title"] == "X"
    assert page["content"] == "two body"
    assert page["slug"] == "two"
    assert page["position"] == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [{"position": 0}, {"id": 5}, {"title = 'x' --": "y"}, {}])
async def test_patch_rejects_fields_outside_allow_list(test_client, admin_headers, three_pages, body):
    response = await test_client.patch(
        f"/admin/page/{three_pages[0]}", json=body, headers=admin_headers
    )

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_put_replaces_page(test_client, admin_headers, three_pages):
    page_id = three_pages[0]

    response = await test_client.put(
        f"/admin/page/{page_id}",
        json={"title": "New", "content": "new body", "slug": "new", "homepage": True},
        headers=admin_headers,
    )

    assert response.status_code == 200
    page = response.json()["page"]
    assert (page["title"], page["content"], page["slug"], page["homepage"]) == (
        "New",
        "new body",
        "new",
        True,
    )
    assert page["position"] == 0


@pytest.mark.asyncio
async def test_delete_page(test_client, admin_headers, three_pages):
    response = await test_client.delete(f"/admin/page/{three_pages[2]}", headers=admin_headers)

    assert response.status_code == 200
    assert (await test_client.get(f"/page/{three_pages[2]}")).status_code == 404


@pytest.mark.asyncio
async def test_admin_missing_page(test_client, admin_headers):
    assert (await test_client.get("/admin/page/77", headers=admin_headers)).status_code == 404
    assert (await test_client.delete("/admin/page/77", headers=admin_headers)).status_code == 404


@pytest.mark.asyncio
async def test_public_views_expose_title_and_content_only(test_client, three_pages):
    listing = (await test_client.get("/pages")).json()
    single = (await test_client.get(f"/page/{three_pages[0]}")).json()

    assert all(set(page) == {"title", "content"} for page in listing)
    assert single == {"title": "One", "content": "one body"}


@pytest.mark.asyncio
async def test_admin_view_exposes_all_fields(test_client, admin_headers, three_pages):
    page = (await test_client.get(f"/admin/page/{three_pages[0]}", headers=admin_headers)).json()

    assert set(page) == {"id", "title", "content", "slug", "homepage", "position"}


@pytest.mark.asyncio
async def test_homepage(test_client, admin_headers, three_pages):
    assert (await test_client.get("/homepage")).status_code == 404

    await test_client.patch(
        f"/admin/page/{three_pages[2]}", json={"homepage": True}, headers=admin_headers
    )
    await test_client.patch(
        f"/admin/page/{three_pages[1]}", json={"homepage": True}, headers=admin_headers
    )

    response = await test_client.get("/homepage")

    assert response.status_code == 200
    # Two flagged pages: the lowest id wins
    assert response.json() == {"title": "Two", "content": "two body"}


@pytest.mark.asyncio
@pytest.mark.parametrize("page_id", [2**31, 99999999999999999999])
async def test_page_id_beyond_integer_column_is_not_found(test_client, admin_headers, page_id):
    assert (await test_client.get(f"/page/{page_id}")).status_code == 404
    assert (
        await test_client.get(f"/admin/page/{page_id}", headers=admin_headers)
    ).status_code == 404
    assert (
        await test_client.delete(f"/admin/page/{page_id}", headers=admin_headers)
    ).status_code == 404


@pytest.mark.asyncio
async def test_reorder_skips_ids_beyond_integer_column(test_client, admin_headers, three_pages):
    first, second, third = three_pages

    response = await test_client.post(
        "/admin/pages/reorder",
        json={"order": [third, 99999999999999999999, first, 2**31, second]},
        headers=admin_headers,
    )

    assert response.status_code == 200
    assert await _positions(test_client, admin_headers) == {third: 0, first: 2, second: 4}


@pytest.mark.asyncio
async def test_failed_reorder_commits_nothing(test_client, admin_headers, three_pages, monkeypatch):
    first, second, third = three_pages
    before = await _positions(test_client, admin_headers)

    original_execute = AsyncSession.execute
    updates = []

    async def execute_failing_on_second_update(self, statement, *args, **kwargs):
        if isinstance(statement, Update):
            updates.append(statement)
            if len(updates) == 2:
                raise OperationalError("UPDATE pages", {}, Exception("database is locked"))
        return await original_execute(self, statement, *args, **kwargs)

    monkeypatch.setattr(AsyncSession, "execute", execute_failing_on_second_update)

    async with async_session_factory() as session:
        with pytest.raises(DatabaseError, match="Error updating page order"):
            await page_service.reorder(session, [third, first, second])
        # Whatever the caller does next, the first UPDATE must already be gone
        await session.commit()

    updates.clear()
    response = await test_client.post(
        "/admin/pages/reorder",
        json={"order": [third, first, second]},
        headers=admin_headers,
    )
    assert response.status_code == 500
    assert response.json()["message"] == "Error updating page order"

    monkeypatch.undo()
    assert await _positions(test_client, admin_headers) == before
