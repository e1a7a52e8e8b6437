from datetime import datetime

import httpx

from storefront.core.config import settings
from storefront.services.mailer import build_forward_html, forward_message, send_email


def test_build_forward_html_escapes_user_fields():
    html = build_forward_html(
        name="<Eve>", email="eve@example.com", message="a & b", subject=None,
        country="PT", order_no=None, created_at=datetime(2024, 1, 2, 3, 4, 5),
    )
    assert "&lt;Eve&gt;" in html
    assert "a &amp; b" in html
    assert "<p><strong>Order No:</strong> -</p>" in html
    assert "2024-01-02 03:04:05 UTC" in html


def test_send_email_without_api_key(mocker):
    mocker.patch.object(settings, "RESEND_API_KEY", "")
    mock_post = mocker.patch("storefront.services.mailer.httpx.post")
    assert send_email("to@example.com", "Hi", "<p>x</p>") is False
    mock_post.assert_not_called()


def test_send_email_posts_to_resend(mocker):
    mock_post = mocker.patch("storefront.services.mailer.httpx.post")
    assert send_email("to@example.com", "Hi", "<p>x</p>", api_key="re_key") is True
    args, kwargs = mock_post.call_args
    assert args[0] == settings.RESEND_API_URL
    assert kwargs["json"]["from"] == settings.MAIL_FROM
    assert kwargs["json"]["to"] == ["to@example.com"]


def test_send_email_http_failure_returns_false(mocker):
    mock_post = mocker.patch("storefront.services.mailer.httpx.post")
    mock_post.return_value.raise_for_status.side_effect = httpx.HTTPStatusError(
        "422", request=mocker.MagicMock(), response=mocker.MagicMock()
    )
    assert send_email("to@example.com", "Hi", "<p>x</p>", api_key="re_key") is False


def test_send_email_network_error_returns_false(mocker):
    mocker.patch("storefront.services.mailer.httpx.post", side_effect=httpx.ConnectError("down"))
    assert send_email("to@example.com", "Hi", "<p>x</p>", api_key="re_key") is False


def test_forward_message_subject(mocker):
    mock_send = mocker.patch("storefront.services.mailer.send_email", return_value=True)
    assert forward_message("inbox@shop.example", "Ana", "ana@example.com", "Hello") is True
    assert mock_send.call_args.args[1] == "New message: Ana"
