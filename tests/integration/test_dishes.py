import pytest


@pytest.mark.asyncio
async def test_dish_crud(client, host_headers):
    resp = await client.post(
        "/dishes",
        json={"name": "Tiramisu", "category": "dessert", "description": "  coffee & mascarpone "},
        headers=host_headers,
    )
    assert resp.status_code == 201, resp.text
    dish = resp.json()
    assert dish["category"] == "dessert"
    assert dish["description"] == "coffee & mascarpone"

    resp = await client.get(f"/dishes/{dish['id']}", headers=host_headers)
    assert resp.json() == dish

    resp = await client.put(
        f"/dishes/{dish['id']}",
        json={"name": "Panna cotta", "category": "dessert"},
        headers=host_headers,
    )
    assert resp.status_code == 200
    assert resp.json()["name"] == "Panna cotta"
    assert resp.json()["description"] is None

    resp = await client.get("/dishes", headers=host_headers)
    assert [d["name"] for d in resp.json()] == ["Panna cotta"]

    assert (await client.delete(f"/dishes/{dish['id']}", headers=host_headers)).status_code == 204
    assert (await client.get(f"/dishes/{dish['id']}", headers=host_headers)).status_code == 404


@pytest.mark.asyncio
async def test_dish_validation(client, host_headers):
    resp = await client.post("/dishes", json={"name": "Soup", "category": "starter"}, headers=host_headers)
    assert resp.status_code == 400
    assert resp.json() == {"message": "Invalid category: starter"}

    resp = await client.post("/dishes", json={"category": "main"}, headers=host_headers)
    assert resp.status_code == 400
    assert resp.json() == {"message": "Missing dish information."}


@pytest.mark.asyncio
async def test_dishes_are_private_to_their_host(client, host_headers, other_headers):
    resp = await client.post("/dishes", json={"name": "Soup", "category": "main"}, headers=host_headers)
    dish_id = resp.json()["id"]

    assert (await client.get("/dishes", headers=other_headers)).json() == []
    resp = await client.get(f"/dishes/{dish_id}", headers=other_headers)
    assert resp.status_code == 403
    assert resp.json() == {"message": "Forbidden"}

    resp = await client.get("/dishes/missing", headers=host_headers)
    assert resp.status_code == 404
    assert resp.json() == {"message": "Dish not found."}
