"""Records written by one tenant are invisible to every other caller."""

from httpx import AsyncClient

_CONTACT = {"first_name": "Linus", "last_name": "T", "email": "linus@example.com"}


async def test_contact_is_visible_only_to_its_tenant(
    client: AsyncClient, db_manager, register_and_login
) -> None:
    alice = await register_and_login(client, "alice@example.com")
    bob = await register_and_login(client, "bob@example.com")

    created = await client.post("/api/v1/contacts", json=_CONTACT, headers=alice["headers"])
    assert created.status_code == 201
    contact_id = created.json()["id"]

    alice_list = await client.get("/api/v1/contacts", headers=alice["headers"])
    assert [c["id"] for c in alice_list.json()] == [contact_id]

    assert (await client.get("/api/v1/contacts", headers=bob["headers"])).json() == []
    assert (await client.get("/api/v1/contacts")).json() == []
    response = await client.get(f"/api/v1/contacts/{contact_id}", headers=bob["headers"])
    assert response.status_code == 404

    stored = db_manager.database(alice["db_name"]).collections["contacts"]
    assert contact_id in stored
    assert "contacts" not in db_manager.database(bob["db_name"]).collections or not (
        db_manager.database(bob["db_name"]).collections["contacts"]
    )


async def test_same_unique_value_allowed_in_two_tenants(
    client: AsyncClient, register_and_login
) -> None:
    alice = await register_and_login(client, "alice@example.com")
    bob = await register_and_login(client, "bob@example.com")
    for user in (alice, bob):
        response = await client.post("/api/v1/contacts", json=_CONTACT, headers=user["headers"])
        assert response.status_code == 201


async def test_cross_tenant_reference_rejected(
    client: AsyncClient, register_and_login
) -> None:
    alice = await register_and_login(client, "alice@example.com")
    bob = await register_and_login(client, "bob@example.com")
    page = await client.post(
        "/api/v1/pages", json={"title": "Home", "slug": "home"}, headers=alice["headers"]
    )
    response = await client.post(
        "/api/v1/content-blocks",
        json={"page_id": page.json()["id"], "type": "text", "data": {"text": "hi"}},
        headers=bob["headers"],
    )
    assert response.status_code == 400
    assert response.json()["details"] == {"field": "page_id"}


async def test_anonymous_requests_use_admin_database(client: AsyncClient, db_manager) -> None:
    response = await client.post(
        "/api/v1/companies", json={"name": "Acme"}
    )
    assert response.status_code == 201
    assert response.json()["id"] in db_manager.admin.collections["companies"]
