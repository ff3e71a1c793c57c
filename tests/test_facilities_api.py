import json

import pytest

from tests.helpers import auth_headers, days_from_today, error_of, receipt_file

IMAGE = {"image": ("court.jpg", b"jpeg-bytes", "image/jpeg")}


def create_court(client, admin, court="C1", sport="Tennis", price="1000"):
    response = client.post(
        "/facilities",
        data={"courtNumber": court, "sportName": sport, "sportCategory": "Outdoor", "courtPrice": price},
        files=IMAGE,
        headers=auth_headers(admin),
    )
    assert response.status_code == 201, response.text
    return response.json()


def test_admin_creates_court_with_image(client, admin, fakes):
    court = create_court(client, admin)

    assert court["courtNumber"] == "C1"
    assert court["isActive"] is True
    assert court["image"].startswith("https://cdn.test/facility_images/")
    assert len(fakes.s3.keys("facility_images/")) == 1


def test_users_cannot_create_courts(client, user):
    response = client.post(
        "/facilities",
        data={"courtNumber": "C1", "sportName": "Tennis", "sportCategory": "Outdoor", "courtPrice": "1000"},
        files=IMAGE,
        headers=auth_headers(user),
    )
    assert response.status_code == 403


def test_image_is_required(client, admin):
    response = client.post(
        "/facilities",
        data={"courtNumber": "C1", "sportName": "Tennis", "sportCategory": "Outdoor", "courtPrice": "1000"},
        headers=auth_headers(admin),
    )
    assert response.status_code == 400
    assert error_of(response)["code"] == "InvalidFile"


def test_price_must_be_positive(client, admin):
    response = client.post(
        "/facilities",
        data={"courtNumber": "C1", "sportName": "Tennis", "sportCategory": "Outdoor", "courtPrice": "0"},
        files=IMAGE,
        headers=auth_headers(admin),
    )
    assert response.status_code == 400
    assert error_of(response)["code"] == "InvalidPrice"


def test_update_without_new_image_keeps_image(client, admin):
    court = create_court(client, admin)

    response = client.put(f"/facilities/{court['id']}", data={"courtPrice": "1500"}, headers=auth_headers(admin))

    assert response.status_code == 200
    assert response.json()["courtPrice"] == 1500.0
    assert response.json()["image"] == court["image"]


def test_toggle_sets_and_clears_reason(client, admin):
    court = create_court(client, admin)
    url = f"/facilities/toggle/{court['id']}"

    off = client.put(url, json={"deactivationReason": "Resurfacing"}, headers=auth_headers(admin)).json()
    assert off["isActive"] is False
    assert off["deactivationReason"] == "Resurfacing"

    on = client.put(url, headers=auth_headers(admin)).json()
    assert on["isActive"] is True
    assert on["deactivationReason"] is None


def test_available_courts_for_slot(client, admin, user):
    c1 = create_court(client, admin, "C1")
    c2 = create_court(client, admin, "C2")
    c3 = create_court(client, admin, "C3")
    create_court(client, admin, "B1", sport="Badminton")
    client.put(f"/facilities/toggle/{c3['id']}", headers=auth_headers(admin))

    day = days_from_today(1)
    client.post(
        "/facility-bookings",
        data={
            "sportName": "Tennis",
            "courtNumber": "C1",
            "courtPrice": "1000",
            "date": day.isoformat(),
            "timeSlots": json.dumps(["08:00 - 09:00"]),
            "userPhoneNumber": "0771234567",
        },
        files=receipt_file(),
        headers=auth_headers(user),
    )

    response = client.get(
        "/facilities/available",
        params={"sportName": "Tennis", "date": day.isoformat(), "timeSlot": "08:00 - 09:00"},
        headers=auth_headers(user),
    )

    assert response.status_code == 200
    assert [f["id"] for f in response.json()["availableFacilities"]] == [c2["id"]]
    assert c1["id"] != c2["id"]


def test_available_courts_rejects_unknown_slot(client, user):
    response = client.get(
        "/facilities/available",
        params={"sportName": "Tennis", "date": days_from_today(1).isoformat(), "timeSlot": "7-8"},
        headers=auth_headers(user),
    )
    assert response.status_code == 400
    assert error_of(response)["code"] == "InvalidSlots"


@pytest.mark.parametrize("method", ["get", "delete"])
def test_unknown_facility(client, admin, method):
    response = getattr(client, method)("/facilities/404", headers=auth_headers(admin))
    assert response.status_code == 404
    assert error_of(response)["code"] == "FacilityNotFound"


def test_delete_facility(client, admin):
    court = create_court(client, admin)
    assert client.delete(f"/facilities/{court['id']}", headers=auth_headers(admin)).status_code == 200
    assert client.get("/facilities", headers=auth_headers(admin)).json() == []
