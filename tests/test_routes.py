"""
Builder API tests: editor sessions over HTTP for the three builders.
Run with: pytest tests/test_routes.py -v
"""

from unittest.mock import patch, MagicMock

import pytest

from mailforge.core.database import PersistenceError


def _open(client, prefix, **body):
    response = client.post(f"/api/{prefix}/sessions", json=body)
    assert response.status_code == 201, response.get_json()
    return response.get_json()


# ---------------------------------------------------------------------------
# Auth guard
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("prefix", ["campaigns", "automations", "landing-pages", "templates"])
def test_routes_require_login(client, prefix):
    response = client.get(f"/api/{prefix}/")
    assert response.status_code == 401


def test_block_types_catalogue(auth_client):
    response = auth_client.get("/api/campaigns/block-types")
    assert response.status_code == 200
    types = {t["type"]: t for t in response.get_json()["block_types"]}
    assert set(types) == {"text", "image", "button", "divider", "spacer"}
    assert types["button"]["content"] == {"text": "Click Here", "url": "#"}


# ---------------------------------------------------------------------------
# Campaign editing
# ---------------------------------------------------------------------------

def test_campaign_session_editing_flow(auth_client):
    session = _open(auth_client, "campaigns")
    sid = session["session_id"]
    assert [b["type"] for b in session["document"]["blocks"]] == ["text"]

    added = auth_client.post(f"/api/campaigns/sessions/{sid}/blocks", json={"type": "button"})
    assert added.status_code == 201
    button_id = added.get_json()["id"]
    assert added.get_json()["selected_id"] is None

    patched = auth_client.patch(
        f"/api/campaigns/sessions/{sid}/blocks/{button_id}",
        json={"content": {"text": "Buy Now", "url": "https://shop.test"}},
    )
    assert patched.status_code == 200
    block = patched.get_json()["block"]
    assert block["content"] == {"text": "Buy Now", "url": "https://shop.test"}
    assert block["style"]["background_color"] == "#dc2626"

    selected = auth_client.put(f"/api/campaigns/sessions/{sid}/selection", json={"block_id": button_id})
    assert selected.get_json()["selected_id"] == button_id

    deleted = auth_client.delete(f"/api/campaigns/sessions/{sid}/blocks/{button_id}")
    assert deleted.status_code == 200
    assert deleted.get_json()["selected_id"] is None


def test_unknown_block_type_is_400(auth_client):
    sid = _open(auth_client, "campaigns")["session_id"]
    response = auth_client.post(f"/api/campaigns/sessions/{sid}/blocks", json={"type": "video"})
    assert response.status_code == 400


def test_update_missing_block_is_404_and_document_unchanged(auth_client):
    session = _open(auth_client, "campaigns")
    sid = session["session_id"]

    response = auth_client.patch(f"/api/campaigns/sessions/{sid}/blocks/ghost", json={"content": {"text": "x"}})
    assert response.status_code == 404

    after = auth_client.get(f"/api/campaigns/sessions/{sid}").get_json()
    assert after["document"] == session["document"]


@pytest.mark.parametrize("field", ["block_id", "self", "id", "colour"])
def test_update_with_unknown_field_is_400(auth_client, field):
    session = _open(auth_client, "campaigns")
    sid = session["session_id"]
    block_id = session["document"]["blocks"][0]["id"]

    response = auth_client.patch(f"/api/campaigns/sessions/{sid}/blocks/{block_id}", json={field: "z"})

    assert response.status_code == 400
    after = auth_client.get(f"/api/campaigns/sessions/{sid}").get_json()
    assert after["document"] == session["document"]


def test_inline_edit_and_move(auth_client):
    session = _open(auth_client, "campaigns")
    sid = session["session_id"]
    text_id = session["document"]["blocks"][0]["id"]
    spacer_id = auth_client.post(f"/api/campaigns/sessions/{sid}/blocks", json={"type": "spacer"}).get_json()["id"]

    inline = auth_client.post(f"/api/campaigns/sessions/{sid}/blocks/{text_id}/inline", json={"value": "Hi there"})
    assert inline.get_json()["block"]["content"]["text"] == "Hi there"

    moved = auth_client.post(f"/api/campaigns/sessions/{sid}/blocks/{spacer_id}/move", json={"index": 0})
    assert moved.get_json()["order"] == [spacer_id, text_id]


def test_render_modes_and_viewports(auth_client):
    sid = _open(auth_client, "campaigns")["session_id"]

    edit = auth_client.get(f"/api/campaigns/sessions/{sid}/render?viewport=mobile&mode=edit")
    assert edit.status_code == 200
    assert "mf-block__delete" in edit.get_json()["html"]
    assert "max-width:320px" in edit.get_json()["html"]

    preview = auth_client.get(f"/api/campaigns/sessions/{sid}/render?mode=preview")
    assert "mf-block__delete" not in preview.get_json()["html"]

    assert auth_client.get(f"/api/campaigns/sessions/{sid}/render?viewport=tablet").status_code == 400
    assert auth_client.get(f"/api/campaigns/sessions/{sid}/render?mode=print").status_code == 400


def test_preview_without_session(auth_client):
    body = {"blocks": [{"id": "b1", "type": "text", "content": {"text": "Stateless"}}], "settings": {}}
    response = auth_client.post("/api/campaigns/preview", json={"document": body, "viewport": "mobile"})
    assert response.status_code == 200
    assert "Stateless" in response.get_json()["html"]


def test_metadata_and_status(auth_client):
    sid = _open(auth_client, "campaigns")["session_id"]

    meta = auth_client.patch(f"/api/campaigns/sessions/{sid}/metadata", json={"subject": "Hello"})
    assert meta.get_json()["metadata"]["subject"] == "Hello"

    assert auth_client.put(f"/api/campaigns/sessions/{sid}/status", json={"status": "scheduled"}).status_code == 200
    assert auth_client.put(f"/api/campaigns/sessions/{sid}/status", json={"status": "archived"}).status_code == 400


# ---------------------------------------------------------------------------
# Sessions
# ---------------------------------------------------------------------------

def test_other_users_session_is_not_found(app, auth_client, sign_in):
    sid = _open(auth_client, "campaigns")["session_id"]

    other = sign_in(app.test_client(), user_id="user-2")
    assert other.get(f"/api/campaigns/sessions/{sid}").status_code == 404


def test_session_is_scoped_to_builder(auth_client):
    sid = _open(auth_client, "campaigns")["session_id"]
    assert auth_client.get(f"/api/automations/sessions/{sid}").status_code == 404


def test_discard_session(auth_client):
    sid = _open(auth_client, "campaigns")["session_id"]
    assert auth_client.delete(f"/api/campaigns/sessions/{sid}").status_code == 200
    assert auth_client.get(f"/api/campaigns/sessions/{sid}").status_code == 404


# ---------------------------------------------------------------------------
# Saving
# ---------------------------------------------------------------------------

def test_save_then_reopen_by_record_id(auth_client):
    sid = _open(auth_client, "campaigns")["session_id"]
    auth_client.patch(f"/api/campaigns/sessions/{sid}/metadata", json={"name": "Launch"})

    saved = auth_client.post(f"/api/campaigns/sessions/{sid}/save")
    assert saved.status_code == 200
    record_id = saved.get_json()["id"]
    assert record_id.startswith("campaign_")

    again = auth_client.post(f"/api/campaigns/sessions/{sid}/save")
    assert again.get_json()["id"] == record_id

    listing = auth_client.get("/api/campaigns/").get_json()["campaigns"]
    assert [r["id"] for r in listing] == [record_id]
    assert listing[0]["name"] == "Launch"

    reopened = _open(auth_client, "campaigns", record_id=record_id)
    assert reopened["record_id"] == record_id
    assert reopened["document"]["settings"]["name"] == "Launch"


def test_reopen_other_users_record_is_404(app, auth_client, sign_in):
    sid = _open(auth_client, "campaigns")["session_id"]
    record_id = auth_client.post(f"/api/campaigns/sessions/{sid}/save").get_json()["id"]

    other = sign_in(app.test_client(), user_id="user-2")
    response = other.post("/api/campaigns/sessions", json={"record_id": record_id})
    assert response.status_code == 404


def test_second_save_while_pending_is_409(app, auth_client):
    sid = _open(auth_client, "campaigns")["session_id"]
    sessions = app.extensions["mailforge"].sessions
    sessions.begin_save(sid)

    response = auth_client.post(f"/api/campaigns/sessions/{sid}/save")
    assert response.status_code == 409

    # Editing stays possible while the save is in flight
    added = auth_client.post(f"/api/campaigns/sessions/{sid}/blocks", json={"type": "divider"})
    assert added.status_code == 201

    sessions.finish_save(sid, record_id="campaign_x")
    assert auth_client.get(f"/api/campaigns/sessions/{sid}").get_json()["saving"] is False


def test_persistence_failure_keeps_document(auth_client):
    session = _open(auth_client, "campaigns")
    sid = session["session_id"]
    failing = MagicMock()
    failing.create_record.side_effect = PersistenceError("backend down")

    with patch("mailforge.editor.views.get_record_store", return_value=failing):
        response = auth_client.post(f"/api/campaigns/sessions/{sid}/save")

    assert response.status_code == 500
    assert "backend down" in response.get_json()["error"]

    after = auth_client.get(f"/api/campaigns/sessions/{sid}").get_json()
    assert after["document"] == session["document"]
    assert after["saving"] is False
    assert after["record_id"] is None
    assert "backend down" in after["last_error"]

    retry = auth_client.post(f"/api/campaigns/sessions/{sid}/save")
    assert retry.status_code == 200


def test_unexpected_save_error_does_not_block_retry(auth_client):
    session = _open(auth_client, "campaigns")
    sid = session["session_id"]
    broken = MagicMock()
    broken.create_record.side_effect = KeyError("id")

    with patch("mailforge.editor.views.get_record_store", return_value=broken):
        response = auth_client.post(f"/api/campaigns/sessions/{sid}/save")

    assert response.status_code == 500
    after = auth_client.get(f"/api/campaigns/sessions/{sid}").get_json()
    assert after["saving"] is False
    assert after["last_error"]
    assert after["document"] == session["document"]

    retry = auth_client.post(f"/api/campaigns/sessions/{sid}/save")
    assert retry.status_code == 200


# ---------------------------------------------------------------------------
# Automations
# ---------------------------------------------------------------------------

def test_automation_connections_and_activate(auth_client):
    session = _open(auth_client, "automations")
    sid = session["session_id"]
    trigger_id = session["document"]["nodes"][0]["id"]

    added = auth_client.post(
        f"/api/automations/sessions/{sid}/blocks",
        json={"type": "action", "position": {"x": 100, "y": 250}},
    )
    action_id = added.get_json()["id"]
    assert added.get_json()["block"]["position"] == {"x": 100.0, "y": 250.0}

    url = f"/api/automations/sessions/{sid}/connections"
    created = auth_client.post(url, json={"from": trigger_id, "to": action_id})
    assert created.status_code == 201
    assert created.get_json()["edges"] == [{"from": trigger_id, "to": action_id}]
    assert auth_client.post(url, json={"from": trigger_id, "to": action_id}).status_code == 200
    assert auth_client.post(url, json={"from": trigger_id, "to": trigger_id}).status_code == 400
    assert auth_client.post(url, json={"from": trigger_id, "to": "ghost"}).status_code == 404

    deleted = auth_client.delete(f"/api/automations/sessions/{sid}/blocks/{action_id}")
    assert deleted.status_code == 200
    after = auth_client.get(f"/api/automations/sessions/{sid}").get_json()
    assert after["document"]["nodes"][0]["connections"] == []

    activated = auth_client.post(f"/api/automations/sessions/{sid}/activate")
    assert activated.get_json()["status"] == "active"


def test_activate_without_trigger_is_400(auth_client):
    session = _open(auth_client, "automations")
    sid = session["session_id"]
    trigger_id = session["document"]["nodes"][0]["id"]
    auth_client.delete(f"/api/automations/sessions/{sid}/blocks/{trigger_id}")

    response = auth_client.post(f"/api/automations/sessions/{sid}/activate")
    assert response.status_code == 400


def test_automation_save_surfaces_trigger(auth_client):
    sid = _open(auth_client, "automations")["session_id"]
    record_id = auth_client.post(f"/api/automations/sessions/{sid}/save").get_json()["id"]

    records = auth_client.get("/api/automations/").get_json()["automations"]
    assert records[0]["id"] == record_id
    assert records[0]["trigger_type"] == "subscribe"


def test_trigger_events(auth_client):
    events = auth_client.get("/api/automations/trigger-events").get_json()["events"]
    assert {"value": "subscribe", "label": "Subscriber joins list"} in events


# ---------------------------------------------------------------------------
# Landing pages
# ---------------------------------------------------------------------------

def test_landing_page_auto_selects_new_section(auth_client):
    session = _open(auth_client, "landing-pages")
    sid = session["session_id"]
    assert session["selected_id"] == session["document"]["blocks"][0]["id"]

    added = auth_client.post(f"/api/landing-pages/sessions/{sid}/blocks", json={"type": "testimonial"})
    assert added.get_json()["selected_id"] == added.get_json()["id"]


def test_landing_page_publish(auth_client):
    sid = _open(auth_client, "landing-pages")["session_id"]
    auth_client.patch(f"/api/landing-pages/sessions/{sid}/metadata", json={"slug": "Spring Sale"})

    response = auth_client.post(f"/api/landing-pages/sessions/{sid}/publish")
    assert response.status_code == 200
    assert response.get_json() == {"status": "published", "slug": "spring-sale"}


def test_publish_empty_page_is_400(auth_client):
    session = _open(auth_client, "landing-pages")
    sid = session["session_id"]
    hero_id = session["document"]["blocks"][0]["id"]
    auth_client.delete(f"/api/landing-pages/sessions/{sid}/blocks/{hero_id}")

    assert auth_client.post(f"/api/landing-pages/sessions/{sid}/publish").status_code == 400
