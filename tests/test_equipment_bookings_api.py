from datetime import datetime, timedelta

import pytest

from tests.helpers import auth_headers, error_of, receipt_file


def booking_form(when=None, **overrides) -> dict:
    when = when or (datetime.now() + timedelta(days=1)).replace(hour=10, minute=0, second=0, microsecond=0)
    form = {
        "equipmentName": "Tennis Racket",
        "sportName": "Tennis",
        "equipmentPrice": "50",
        "quantity": "3",
        "dateTime": when.isoformat(),
        "userPhoneNumber": "0771234567",
    }
    form.update(overrides)
    return form


def book(client, user, **kwargs):
    return client.post(
        "/equipment-bookings", data=booking_form(**kwargs), files=receipt_file(), headers=auth_headers(user)
    )


def test_create_booking(client, user, fakes):
    response = book(client, user)

    assert response.status_code == 201, response.text
    body = response.json()
    assert body["quantity"] == 3
    assert body["totalPrice"] == 150.0
    assert body["qrCode"].startswith("https://cdn.test/equipment_qrcodes/")
    assert body["qrGenerated"] and body["emailSent"] and body["messageSent"]
    assert fakes.messenger.sent[0]["type"] == "equipment"
    assert "Tennis Racket" in fakes.messenger.sent[0]["body"]


@pytest.mark.parametrize("quantity", ["0", "-2", "abc", "1.5"])
def test_invalid_quantity(client, user, quantity):
    response = book(client, user, quantity=quantity)

    assert response.status_code == 400
    assert error_of(response)["code"] == "InvalidQuantity"


def test_past_date(client, user):
    response = book(client, user, when=datetime.now() - timedelta(days=1))

    assert response.status_code == 400
    assert error_of(response)["code"] == "PastDate"


def test_earlier_today_is_allowed(client, user):
    start_of_today = datetime.now().replace(hour=0, minute=0, second=0, microsecond=0)
    assert book(client, user, when=start_of_today).status_code == 201


def test_missing_receipt(client, user):
    response = client.post("/equipment-bookings", data=booking_form(), headers=auth_headers(user))
    assert response.status_code == 400
    assert error_of(response)["code"] == "MissingReceipt"


def test_storage_failure_writes_nothing(client, user, admin, fakes):
    fakes.s3.fail_puts = True

    response = book(client, user)

    assert response.status_code == 502
    assert error_of(response)["code"] == "StorageFailed"
    assert client.get("/equipment-bookings", headers=auth_headers(admin)).json() == []


def test_whatsapp_failure_then_retry(client, user, admin, fakes):
    fakes.messenger.fail = True
    response = book(client, user)

    assert response.status_code == 502
    assert error_of(response)["details"]["step"] == "whatsapp"
    booking_id = error_of(response)["details"]["bookingId"]

    fakes.messenger.fail = False
    retry = client.post(f"/equipment-bookings/{booking_id}/confirmations/retry", headers=auth_headers(admin))

    assert retry.status_code == 200
    assert retry.json()["messageSent"] is True
    # Email was not sent twice
    assert fakes.mailer.sent == [("equipment", booking_id)]


def test_future_and_delete_future(client, user):
    book(client, user, when=datetime.now().replace(hour=0, minute=0, second=0, microsecond=0))
    future = book(client, user, when=datetime.now() + timedelta(days=2)).json()

    listed = client.get(f"/equipment-bookings/user/{user.id}/future", headers=auth_headers(user)).json()
    assert [b["bookingId"] for b in listed] == [future["bookingId"]]

    deleted = client.delete(f"/equipment-bookings/user/{user.id}/future", headers=auth_headers(user))
    assert deleted.json()["deletedCount"] == 1


def test_other_users_bookings_are_forbidden(client, user, other_user):
    response = client.get(f"/equipment-bookings/user/{user.id}", headers=auth_headers(other_user))
    assert response.status_code == 403


def test_qr_redirect(client, user):
    booking = book(client, user).json()
    response = client.get(
        f"/equipment-bookings/{booking['bookingId']}/qr", headers=auth_headers(user), follow_redirects=False
    )
    assert response.status_code == 307
    assert response.headers["location"] == booking["qrCode"]
