"""API tests for the CMS, CRM and careers record routes."""

from httpx import AsyncClient


async def test_page_crud(client: AsyncClient, register_and_login) -> None:
    user = await register_and_login(client, "editor@example.com")
    headers = user["headers"]

    created = await client.post(
        "/api/v1/pages", json={"title": "Home", "slug": "home"}, headers=headers
    )
    assert created.status_code == 201
    page = created.json()
    assert page["published"] is False
    assert page["created_at"]

    patched = await client.patch(
        f"/api/v1/pages/{page['id']}", json={"published": True}, headers=headers
    )
    assert patched.status_code == 200
    assert patched.json()["published"] is True
    assert patched.json()["title"] == "Home"

    duplicate = await client.post(
        "/api/v1/pages", json={"title": "Other", "slug": "home"}, headers=headers
    )
    assert duplicate.status_code == 409
    assert duplicate.json()["error"] == "DUPLICATE_RESOURCE"

    deleted = await client.delete(f"/api/v1/pages/{page['id']}", headers=headers)
    assert deleted.status_code == 204
    missing = await client.get(f"/api/v1/pages/{page['id']}", headers=headers)
    assert missing.status_code == 404


async def test_invalid_slug_is_422(client: AsyncClient) -> None:
    response = await client.post("/api/v1/pages", json={"title": "x", "slug": "Not A Slug"})
    assert response.status_code == 422


async def test_content_block_round_trips_typed_data(
    client: AsyncClient, register_and_login
) -> None:
    headers = (await register_and_login(client, "editor@example.com"))["headers"]
    page = (
        await client.post("/api/v1/pages", json={"title": "Home", "slug": "home"}, headers=headers)
    ).json()

    response = await client.post(
        "/api/v1/content-blocks",
        json={
            "page_id": page["id"],
            "type": "hero",
            "order": 1,
            "data": {"heading": "Welcome", "cta_label": "Join", "cta_url": "/jobs"},
        },
        headers=headers,
    )
    assert response.status_code == 201
    block = response.json()
    assert block["type"] == "hero"
    assert block["data"]["heading"] == "Welcome"

    listed = await client.get("/api/v1/content-blocks", headers=headers)
    assert [b["id"] for b in listed.json()] == [block["id"]]


async def test_content_block_unknown_type_is_422(client: AsyncClient) -> None:
    response = await client.post(
        "/api/v1/content-blocks",
        json={"page_id": "p1", "type": "carousel", "data": {}},
    )
    assert response.status_code == 422


async def test_careers_flow(client: AsyncClient, register_and_login) -> None:
    headers = (await register_and_login(client, "hr@example.com"))["headers"]

    company = (
        await client.post("/api/v1/companies", json={"name": "Acme"}, headers=headers)
    ).json()
    job = await client.post(
        "/api/v1/jobs",
        json={"title": "Engineer", "company_id": company["id"], "type": "contract"},
        headers=headers,
    )
    assert job.status_code == 201
    assert job.json()["posted_date"]
    assert job.json()["type"] == "contract"

    contact = (
        await client.post(
            "/api/v1/contacts",
            json={"first_name": "A", "last_name": "B", "email": "a@example.com"},
            headers=headers,
        )
    ).json()
    application = await client.post(
        "/api/v1/applications",
        json={"job_id": job.json()["id"], "contact_id": contact["id"]},
        headers=headers,
    )
    assert application.status_code == 201
    assert application.json()["status"] == "applied"
    assert application.json()["submitted_date"]

    bad = await client.post(
        "/api/v1/jobs",
        json={"title": "Ghost", "company_id": "no-such-company"},
        headers=headers,
    )
    assert bad.status_code == 400
    assert bad.json()["details"] == {"field": "company_id"}


async def test_interaction_defaults_date(client: AsyncClient, register_and_login) -> None:
    headers = (await register_and_login(client, "sales@example.com"))["headers"]
    contact = (
        await client.post(
            "/api/v1/contacts",
            json={"first_name": "A", "last_name": "B", "email": "a@example.com"},
            headers=headers,
        )
    ).json()
    response = await client.post(
        "/api/v1/interactions",
        json={"contact_id": contact["id"], "type": "meeting", "notes": "Kickoff"},
        headers=headers,
    )
    assert response.status_code == 201
    assert response.json()["date"]


async def test_list_pagination(client: AsyncClient) -> None:
    for i in range(3):
        await client.post("/api/v1/companies", json={"name": f"Co {i}"})
    response = await client.get("/api/v1/companies", params={"skip": 1, "limit": 1})
    assert response.status_code == 200
    assert len(response.json()) == 1
    assert (await client.get("/api/v1/companies", params={"limit": 0})).status_code == 422


async def test_patch_null_on_required_field_is_rejected(
    client: AsyncClient, register_and_login
) -> None:
    user = await register_and_login(client, "nulls@example.com")
    headers = user["headers"]
    page = (
        await client.post(
            "/api/v1/pages", json={"title": "About", "slug": "about"}, headers=headers
        )
    ).json()

    rejected = await client.patch(
        f"/api/v1/pages/{page['id']}", json={"title": None}, headers=headers
    )
    assert rejected.status_code == 422
    assert rejected.json()["error"] == "VALIDATION_ERROR"

    stored = await client.get(f"/api/v1/pages/{page['id']}", headers=headers)
    assert stored.status_code == 200
    assert stored.json()["title"] == "About"
    listed = await client.get("/api/v1/pages", headers=headers)
    assert listed.status_code == 200


async def test_patch_null_clears_optional_field(client: AsyncClient, register_and_login) -> None:
    user = await register_and_login(client, "clear@example.com")
    headers = user["headers"]
    company = (
        await client.post(
            "/api/v1/companies",
            json={"name": "Acme", "industry": "Rockets"},
            headers=headers,
        )
    ).json()

    cleared = await client.patch(
        f"/api/v1/companies/{company['id']}", json={"industry": None}, headers=headers
    )
    assert cleared.status_code == 200
    assert cleared.json()["industry"] is None
    assert cleared.json()["name"] == "Acme"
