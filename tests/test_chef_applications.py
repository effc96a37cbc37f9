import pytest

import controllers.chef_application_controller as chef_application_controller
from models.chef import Chef
from models.chef_application import ChefApplication


@pytest.fixture
def submit(client, auth_headers):
    def _submit(user_id, data, headers=None):
        if headers is None:
            headers = auth_headers(user_id)
        return client.post(f"/api/chefapplications?userId={user_id}", json=data, headers=headers)
    return _submit


@pytest.fixture
def withdraw(client, auth_headers):
    def _withdraw(application_id, user_id, headers=None):
        if headers is None:
            headers = auth_headers(user_id)
        return client.delete(f"/api/chefapplications/{application_id}?userId={user_id}", headers=headers)
    return _withdraw


def test_submit_creates_pending_application(make_user, payload, submit):
    user_id = make_user("mario")

    resp = submit(user_id, payload())

    assert resp.status_code == 201
    body = resp.get_json()
    assert body["status"] == "Pending"
    assert body["userId"] == user_id
    assert body["username"] == "mario"
    assert body["email"] == "mario@example.com"
    assert body["specialtyCuisine"] == "Italian"
    assert body["yearsOfExperience"] == 5
    assert body["adminRemarks"] == ""
    assert body["dateApplied"] is not None
    assert body["dateReviewed"] is None


def test_submit_defaults_optional_links_to_empty(make_user, payload, submit):
    user_id = make_user("mario")
    data = payload()
    del data["portfolioLink"]
    data["certificationImageUrl"] = None

    body = submit(user_id, data).get_json()

    assert body["portfolioLink"] == ""
    assert body["certificationImageUrl"] == ""


def test_submit_unknown_user_is_404(payload, submit, admin_headers):
    resp = submit(999, payload(), headers=admin_headers)

    assert resp.status_code == 404
    assert resp.get_json()["detail"] == "User not found."


def test_submit_requires_user_id(client, payload):
    resp = client.post("/api/chefapplications", json=payload())
    assert resp.status_code == 400


def test_submit_requires_token(client, make_user, payload, db_count):
    user_id = make_user("mario")

    resp = client.post(f"/api/chefapplications?userId={user_id}", json=payload())

    assert resp.status_code == 401
    assert db_count(ChefApplication, user_id=user_id) == 0


def test_submit_on_behalf_of_another_user_is_forbidden(make_user, payload, submit, auth_headers, db_count):
    mario = make_user("mario")
    luigi = make_user("luigi")

    resp = submit(mario, payload(), headers=auth_headers(luigi))

    assert resp.status_code == 403
    assert db_count(ChefApplication) == 0


def test_admin_may_submit_for_a_user(make_user, payload, submit, admin_headers):
    user_id = make_user("mario")

    resp = submit(user_id, payload(), headers=admin_headers)

    assert resp.status_code == 201
    assert resp.get_json()["userId"] == user_id


def test_submit_rejects_second_pending_application(make_user, payload, submit, db_count):
    user_id = make_user("mario")
    submit(user_id, payload())

    resp = submit(user_id, payload(specialtyCuisine="French"))

    assert resp.status_code == 400
    assert resp.get_json()["detail"] == "You already have a pending application."
    assert db_count(ChefApplication, user_id=user_id) == 1


def test_concurrent_submission_hits_pending_index(make_user, payload, submit, db_count, monkeypatch):
    user_id = make_user("mario")
    submit(user_id, payload())

    # the lookup misses the first row, as if both requests checked before either inserted
    monkeypatch.setattr(chef_application_controller, "find_active_application", lambda session, uid: None)

    resp = submit(user_id, payload(specialtyCuisine="French"))

    assert resp.status_code == 400
    assert resp.get_json()["detail"] == "You already have a pending application."
    assert db_count(ChefApplication, user_id=user_id, status="Pending") == 1
    assert db_count(ChefApplication, user_id=user_id, specialty_cuisine="French") == 0


def test_submit_rejected_when_user_is_already_a_chef(client, make_user, payload, submit, admin_headers):
    user_id = make_user("mario")
    client.post(f"/api/ManageUser/create-chef/{user_id}", json=payload(), headers=admin_headers)

    resp = submit(user_id, payload())

    assert resp.status_code == 400
    assert resp.get_json()["detail"] == "You are already a chef."


def test_submit_rejected_after_approved_application(client, make_user, payload, submit, admin_headers):
    user_id = make_user("mario")
    app_id = submit(user_id, payload()).get_json()["id"]
    client.put(f"/api/chefapplications/{app_id}/review", json={"status": "Approved"}, headers=admin_headers)

    resp = submit(user_id, payload())

    assert resp.status_code == 400
    assert resp.get_json()["detail"] == "You are already a chef."


def test_submit_allowed_again_after_rejection(client, make_user, payload, submit, admin_headers):
    user_id = make_user("mario")
    app_id = submit(user_id, payload()).get_json()["id"]
    client.put(f"/api/chefapplications/{app_id}/review", json={"status": "Rejected"}, headers=admin_headers)

    resp = submit(user_id, payload(yearsOfExperience=6))

    assert resp.status_code == 201


def test_submit_validates_payload(make_user, payload, submit):
    user_id = make_user("mario")

    resp = submit(user_id, payload(biography="   ", yearsOfExperience=-1))

    assert resp.status_code == 422
    fields = {tuple(err["loc"]) for err in resp.get_json()["detail"]}
    assert ("biography",) in fields
    assert ("yearsOfExperience",) in fields


def test_submit_missing_required_field(make_user, payload, submit):
    user_id = make_user("mario")
    data = payload()
    del data["certificationName"]

    resp = submit(user_id, data)

    assert resp.status_code == 422


def test_submit_malformed_json(client, make_user, auth_headers):
    user_id = make_user("mario")

    resp = client.post(
        f"/api/chefapplications?userId={user_id}",
        data="{not json",
        content_type="application/json",
        headers=auth_headers(user_id),
    )

    assert resp.status_code == 400
    assert resp.get_json()["detail"] == "Invalid JSON"


def test_submit_notifies_admin_when_configured(app, make_user, payload, submit, monkeypatch):
    sent = []
    monkeypatch.setattr(
        "controllers.chef_application_controller.send_email_async",
        lambda flask_app, subject, recipients, html_body, text_body=None: sent.append((subject, recipients)),
    )
    app.config["ADMIN_EMAIL"] = "admin@example.com"
    user_id = make_user("mario")

    submit(user_id, payload())

    assert sent == [("New chef application awaiting review", ["admin@example.com"])]


def test_get_application_by_id(client, make_user, payload, submit):
    user_id = make_user("mario")
    app_id = submit(user_id, payload()).get_json()["id"]

    resp = client.get(f"/api/chefapplications/{app_id}")

    assert resp.status_code == 200
    assert resp.get_json()["id"] == app_id
    assert resp.get_json()["username"] == "mario"


def test_get_application_missing_is_404(client):
    resp = client.get("/api/chefapplications/12345")
    assert resp.status_code == 404
    assert resp.get_json()["detail"] == "Application not found."


def test_legacy_route_prefix_is_served(client, make_user, payload, auth_headers):
    user_id = make_user("mario")
    resp = client.post(f"/api/ChefApplication?userId={user_id}", json=payload(), headers=auth_headers(user_id))
    assert resp.status_code == 201
    assert client.get(f"/api/ChefApplication/{resp.get_json()['id']}").status_code == 200


def test_list_user_applications_newest_first(client, make_user, payload, submit, admin_headers):
    user_id = make_user("mario")
    first = submit(user_id, payload()).get_json()["id"]
    client.put(f"/api/chefapplications/{first}/review", json={"status": "Rejected"}, headers=admin_headers)
    second = submit(user_id, payload()).get_json()["id"]

    resp = client.get(f"/api/chefapplications/user/{user_id}")

    assert resp.status_code == 200
    assert [a["id"] for a in resp.get_json()] == [second, first]


def test_list_user_applications_empty(client, make_user):
    user_id = make_user("mario")
    assert client.get(f"/api/chefapplications/user/{user_id}").get_json() == []


def test_list_all_applications_filters_by_status(client, make_user, payload, submit, admin_headers):
    mario = make_user("mario")
    luigi = make_user("luigi")
    mario_app = submit(mario, payload()).get_json()["id"]
    luigi_app = submit(luigi, payload()).get_json()["id"]
    client.put(f"/api/chefapplications/{luigi_app}/review", json={"status": "Rejected"}, headers=admin_headers)

    everything = client.get("/api/chefapplications", headers=admin_headers).get_json()
    pending = client.get("/api/chefapplications?status=Pending", headers=admin_headers).get_json()
    rejected = client.get("/api/chefapplications?status=Rejected", headers=admin_headers).get_json()
    lowercase = client.get("/api/chefapplications?status=pending", headers=admin_headers).get_json()

    assert {a["id"] for a in everything} == {mario_app, luigi_app}
    assert [a["id"] for a in pending] == [mario_app]
    assert [a["id"] for a in rejected] == [luigi_app]
    assert lowercase == []


def test_list_all_applications_requires_admin(client, make_user, auth_headers):
    user_id = make_user("mario")

    assert client.get("/api/chefapplications").status_code == 401
    assert client.get("/api/chefapplications", headers=auth_headers(user_id)).status_code == 403


def test_owner_can_delete_pending_application(client, make_user, payload, submit, withdraw):
    user_id = make_user("mario")
    app_id = submit(user_id, payload()).get_json()["id"]

    resp = withdraw(app_id, user_id)

    assert resp.status_code == 204
    assert client.get(f"/api/chefapplications/{app_id}").status_code == 404


def test_delete_by_other_user_is_forbidden(client, make_user, payload, submit, withdraw):
    owner = make_user("mario")
    other = make_user("luigi")
    app_id = submit(owner, payload()).get_json()["id"]

    resp = withdraw(app_id, other)

    assert resp.status_code == 403
    assert client.get(f"/api/chefapplications/{app_id}").status_code == 200


def test_delete_with_borrowed_user_id_is_forbidden(client, make_user, payload, submit, withdraw, auth_headers):
    owner = make_user("mario")
    other = make_user("luigi")
    app_id = submit(owner, payload()).get_json()["id"]

    resp = withdraw(app_id, owner, headers=auth_headers(other))

    assert resp.status_code == 403
    assert client.get(f"/api/chefapplications/{app_id}").status_code == 200


def test_delete_requires_token(client, make_user, payload, submit):
    user_id = make_user("mario")
    app_id = submit(user_id, payload()).get_json()["id"]

    resp = client.delete(f"/api/chefapplications/{app_id}?userId={user_id}")

    assert resp.status_code == 401
    assert client.get(f"/api/chefapplications/{app_id}").status_code == 200


def test_delete_reviewed_application_is_refused(client, make_user, payload, submit, withdraw, admin_headers):
    user_id = make_user("mario")
    app_id = submit(user_id, payload()).get_json()["id"]
    client.put(f"/api/chefapplications/{app_id}/review", json={"status": "Rejected"}, headers=admin_headers)

    resp = withdraw(app_id, user_id)

    assert resp.status_code == 400
    assert resp.get_json()["detail"] == "Cannot delete a reviewed application."


def test_delete_missing_application_is_404(make_user, withdraw):
    user_id = make_user("mario")
    assert withdraw(99, user_id).status_code == 404


def test_full_application_lifecycle(client, make_user, payload, submit, withdraw, admin_headers, db_count):
    user_id = make_user("giulia", user_id=7)

    created = submit(7, payload(specialtyCuisine="Italian", yearsOfExperience=5))
    assert created.status_code == 201
    assert created.get_json()["status"] == "Pending"
    app_id = created.get_json()["id"]

    again = submit(7, payload())
    assert again.status_code == 400
    assert again.get_json()["detail"] == "You already have a pending application."

    reviewed = client.put(
        f"/api/chefapplications/{app_id}/review",
        json={"status": "Approved", "adminRemarks": "Welcome aboard"},
        headers=admin_headers,
    )
    assert reviewed.status_code == 200
    assert reviewed.get_json()["status"] == "Approved"
    assert db_count(Chef, user_id=user_id) == 1

    deleted = withdraw(app_id, 7)
    assert deleted.status_code == 400
    assert deleted.get_json()["detail"] == "Cannot delete a reviewed application."
