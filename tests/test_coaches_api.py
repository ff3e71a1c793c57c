from courtside.models import ROLE_COACH, Review
from tests.helpers import auth_headers, days_from_today, error_of

PRICE = {"individualSessionPrice": 3000, "groupSessionPrice": 1500}
IMAGE = {"image": ("me.png", b"png-bytes", "image/png")}


def profile_payload(slots=None, **overrides) -> dict:
    payload = {
        "coachName": "Ruwan Fernando",
        "coachLevel": "Level 2",
        "coachingSport": "Tennis",
        "coachPrice": PRICE,
        "availableTimeSlots": slots
        if slots is not None
        else [
            {"date": days_from_today(2).isoformat(), "timeSlot": "10:00 - 11:00"},
            {"date": days_from_today(1).isoformat(), "timeSlot": "09:00 - 10:00"},
        ],
        "offerSessions": ["Individual Session"],
    }
    payload.update(overrides)
    return payload


def test_coach_creates_profile(client, coach_user):
    response = client.post("/coach-profiles", json=profile_payload(), headers=auth_headers(coach_user))

    assert response.status_code == 201, response.text
    body = response.json()
    assert body["userId"] == coach_user.id
    assert body["avgRating"] is None
    # Stored sorted by date then slot
    assert body["availableTimeSlots"][0] == {"date": days_from_today(1).isoformat(), "timeSlot": "09:00 - 10:00"}


def test_one_profile_per_coach(client, coach_user):
    client.post("/coach-profiles", json=profile_payload(), headers=auth_headers(coach_user))
    response = client.post("/coach-profiles", json=profile_payload(), headers=auth_headers(coach_user))

    assert response.status_code == 409
    assert error_of(response)["code"] == "CoachProfileExists"


def test_only_coaches_create_profiles(client, user):
    assert client.post("/coach-profiles", json=profile_payload(), headers=auth_headers(user)).status_code == 403


def test_availability_window(client, coach_user):
    too_far = [{"date": days_from_today(8).isoformat(), "timeSlot": "09:00 - 10:00"}]
    yesterday = [{"date": days_from_today(-1).isoformat(), "timeSlot": "09:00 - 10:00"}]
    last_day = [{"date": days_from_today(7).isoformat(), "timeSlot": "09:00 - 10:00"}]

    for slots in (too_far, yesterday):
        response = client.post("/coach-profiles", json=profile_payload(slots), headers=auth_headers(coach_user))
        assert response.status_code == 400
        assert error_of(response)["code"] == "InvalidAvailability"

    ok = client.post("/coach-profiles", json=profile_payload(last_day), headers=auth_headers(coach_user))
    assert ok.status_code == 201


def test_availability_labels_and_duplicates(client, coach_user):
    day = days_from_today(1).isoformat()
    bad_label = [{"date": day, "timeSlot": "9-10"}]
    duplicate = [{"date": day, "timeSlot": "09:00 - 10:00"}, {"date": day, "timeSlot": "09:00 - 10:00"}]

    for slots in (bad_label, duplicate):
        response = client.post("/coach-profiles", json=profile_payload(slots), headers=auth_headers(coach_user))
        assert response.status_code == 400
        assert error_of(response)["code"] == "InvalidSlots"


def test_update_checks_owner_and_availability(client, coach_user, make_user):
    profile = client.post("/coach-profiles", json=profile_payload(), headers=auth_headers(coach_user)).json()
    url = f"/coach-profiles/{profile['coachProfileId']}"

    other_coach = make_user(ROLE_COACH)
    assert client.put(url, json={"coachLevel": "Level 3"}, headers=auth_headers(other_coach)).status_code == 403

    too_far = [{"date": days_from_today(30).isoformat(), "timeSlot": "09:00 - 10:00"}]
    rejected = client.put(url, json={"availableTimeSlots": too_far}, headers=auth_headers(coach_user))
    assert error_of(rejected)["code"] == "InvalidAvailability"

    updated = client.put(url, json={"coachLevel": "Level 3"}, headers=auth_headers(coach_user)).json()
    assert updated["coachLevel"] == "Level 3"
    assert updated["availableTimeSlots"] == profile["availableTimeSlots"]


def test_replace_image_deletes_old_object(client, coach_user, fakes):
    profile = client.post("/coach-profiles", json=profile_payload(), headers=auth_headers(coach_user)).json()
    first = client.post("/coach-profiles/image", files=IMAGE, headers=auth_headers(coach_user)).json()
    old_key = first["image"].removeprefix("https://cdn.test/")

    second = client.put(
        f"/coach-profiles/{profile['coachProfileId']}/image", files=IMAGE, headers=auth_headers(coach_user)
    ).json()

    assert second["image"] != first["image"]
    assert fakes.s3.deleted == [old_key]


def test_replace_image_survives_delete_failure(client, coach_user, fakes):
    profile = client.post("/coach-profiles", json=profile_payload(), headers=auth_headers(coach_user)).json()
    client.post("/coach-profiles/image", files=IMAGE, headers=auth_headers(coach_user))
    fakes.s3.fail_deletes = True

    response = client.put(
        f"/coach-profiles/{profile['coachProfileId']}/image", files=IMAGE, headers=auth_headers(coach_user)
    )

    assert response.status_code == 200
    assert len(fakes.s3.keys("coach_profiles/")) == 2


def test_admin_toggles_by_user_id(client, coach_user, admin):
    client.post("/coach-profiles", json=profile_payload(), headers=auth_headers(coach_user))

    response = client.put(f"/coach-profiles/toggle/{coach_user.id}", headers=auth_headers(admin))

    assert response.status_code == 200
    assert response.json()["isActive"] is False


def test_list_includes_average_rating(client, coach_profile, user, db):
    db.add_all(
        [
            Review(user_id=user.id, user_name=user.name, coach_profile_id=coach_profile.id, rating=4, comment="Good"),
            Review(user_id=user.id, user_name=user.name, coach_profile_id=coach_profile.id, rating=5, comment="Great"),
            Review(user_id=user.id, user_name=user.name, coach_profile_id=coach_profile.id, rating=4, comment="Fine"),
        ]
    )
    db.commit()

    [listed] = client.get("/coach-profiles", headers=auth_headers(user)).json()

    assert listed["avgRating"] == 4.33


def test_profile_by_user_not_found(client, user):
    response = client.get(f"/coach-profiles/user/{user.id}", headers=auth_headers(user))
    assert response.status_code == 404
    assert error_of(response)["code"] == "CoachProfileNotFound"
