from tests.helpers import auth_headers, error_of

IMAGE = {"image": ("racket.png", b"png-bytes", "image/png")}


def create_item(client, admin, name="Tennis Racket", price="50"):
    response = client.post(
        "/equipment",
        data={"equipmentName": name, "sportName": "Tennis", "rentPrice": price},
        files=IMAGE,
        headers=auth_headers(admin),
    )
    assert response.status_code == 201, response.text
    return response.json()


def test_create_and_get(client, admin, user):
    item = create_item(client, admin)

    assert item["image"].startswith("https://cdn.test/equipment_images/")
    response = client.get(f"/equipment/{item['id']}", headers=auth_headers(user))
    assert response.json()["equipmentName"] == "Tennis Racket"


def test_available_lists_active_only(client, admin, user):
    racket = create_item(client, admin)
    balls = create_item(client, admin, "Tennis Balls", "10")
    client.put(
        f"/equipment/toggle/{balls['id']}", json={"deactivationReason": "Out of stock"}, headers=auth_headers(admin)
    )

    available = client.get("/equipment/available", headers=auth_headers(user)).json()
    everything = client.get("/equipment", headers=auth_headers(admin)).json()

    assert [e["id"] for e in available] == [racket["id"]]
    assert len(everything) == 2
    assert {e["deactivationReason"] for e in everything} == {None, "Out of stock"}


def test_update_rejects_bad_price(client, admin):
    item = create_item(client, admin)
    response = client.put(f"/equipment/{item['id']}", data={"rentPrice": "-5"}, headers=auth_headers(admin))
    assert response.status_code == 400
    assert error_of(response)["code"] == "InvalidPrice"


def test_unknown_equipment(client, user):
    response = client.get("/equipment/999", headers=auth_headers(user))
    assert response.status_code == 404
    assert error_of(response)["code"] == "EquipmentNotFound"


def test_only_admin_lists_all(client, user):
    assert client.get("/equipment", headers=auth_headers(user)).status_code == 403
