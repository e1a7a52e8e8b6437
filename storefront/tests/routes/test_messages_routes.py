import csv
import io

import pytest

from storefront.core.config import settings
from storefront.db.models import MessageOrm, SiteSettingOrm

VALID_MESSAGE = {
    "name": "Ana",
    "email": "ana@example.com",
    "subject": "Order question",
    "message": "Where is my order?",
    "country": "PT",
    "orderNo": "112-334",
}


@pytest.fixture
def forwarding_enabled(db_session, mocker):
    db_session.add_all([
        SiteSettingOrm(key="messageForwardEnabled", value="true"),
        SiteSettingOrm(key="messageForwardEmail", value="inbox@shop.example"),
    ])
    db_session.commit()
    mocker.patch.object(settings, "RESEND_API_KEY", "re_test_key")


def test_create_message(client, db_session):
    r = client.post("/api/messages", json=VALID_MESSAGE)
    assert r.status_code == 201
    assert r.json()["message"] == "Message sent successfully"

    stored = db_session.query(MessageOrm).filter_by(id=r.json()["id"]).one()
    assert stored.order_no == "112-334"
    assert stored.read is False


@pytest.mark.parametrize("missing", ["name", "email", "message"])
def test_create_message_requires_fields(client, missing):
    payload = {**VALID_MESSAGE, missing: "  "}
    r = client.post("/api/messages", json=payload)
    assert r.status_code == 400
    assert r.json() == {"error": "Name, email, and message are required"}


def test_create_message_rejects_bad_email(client):
    r = client.post("/api/messages", json={**VALID_MESSAGE, "email": "not-an-email"})
    assert r.status_code == 400


def test_message_is_forwarded_when_enabled(client, forwarding_enabled, mocker):
    mock_post = mocker.patch("storefront.services.mailer.httpx.post")
    r = client.post("/api/messages", json={**VALID_MESSAGE, "message": "<b>hi</b>"})
    assert r.status_code == 201

    mock_post.assert_called_once()
    sent = mock_post.call_args.kwargs["json"]
    assert sent["to"] == ["inbox@shop.example"]
    assert sent["subject"] == "New message: Ana - Order question"
    assert "&lt;b&gt;hi&lt;/b&gt;" in sent["html"]
    assert mock_post.call_args.kwargs["headers"]["Authorization"] == "Bearer re_test_key"


def test_message_not_forwarded_without_api_key(client, forwarding_enabled, mocker):
    mocker.patch.object(settings, "RESEND_API_KEY", None)
    mock_forward = mocker.patch("storefront.routes.messages.forward_message")
    assert client.post("/api/messages", json=VALID_MESSAGE).status_code == 201
    mock_forward.assert_not_called()


def test_message_not_forwarded_when_disabled(client, mocker):
    mocker.patch.object(settings, "RESEND_API_KEY", "re_test_key")
    mock_forward = mocker.patch("storefront.routes.messages.forward_message")
    assert client.post("/api/messages", json=VALID_MESSAGE).status_code == 201
    mock_forward.assert_not_called()


def test_admin_message_management(admin_client, db_session):
    message_id = admin_client.post("/api/messages", json=VALID_MESSAGE).json()["id"]

    listed = admin_client.get("/api/messages").json()
    assert [m["id"] for m in listed] == [message_id]
    assert listed[0]["orderNo"] == "112-334"

    r = admin_client.put(f"/api/messages/{message_id}", json={"read": True})
    assert r.json()["read"] is True
    assert admin_client.get(f"/api/messages/{message_id}").json()["read"] is True

    assert admin_client.delete(f"/api/messages/{message_id}").json() == {"success": True}
    assert admin_client.get(f"/api/messages/{message_id}").status_code == 404


def test_messages_csv_export(admin_client):
    admin_client.post("/api/messages", json={**VALID_MESSAGE, "message": 'Line one, "quoted"\nline two'})
    r = admin_client.get("/api/messages", params={"format": "csv"})

    assert r.status_code == 200
    assert r.headers["content-type"].startswith("text/csv")
    assert "attachment" in r.headers["content-disposition"]
    rows = list(csv.reader(io.StringIO(r.text)))
    assert rows[0] == ["name", "email", "message", "createdAt", "country", "orderNo"]
    assert rows[1][2] == 'Line one, "quoted"\nline two'
    assert rows[1][5] == "112-334"


def test_listing_messages_requires_admin(client):
    assert client.get("/api/messages").status_code == 401
