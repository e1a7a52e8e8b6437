from storefront.core.config import settings

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


def test_upload_and_serve_image(admin_client):
    r = admin_client.post("/api/upload", files={"file": ("logo.png", PNG_BYTES, "image/png")})
    assert r.status_code == 200
    body = r.json()
    assert body["url"] == f"/api/images/{body['id']}"

    served = admin_client.get(body["url"])
    assert served.status_code == 200
    assert served.content == PNG_BYTES
    assert served.headers["content-type"] == "image/png"
    assert "max-age" in served.headers["cache-control"]


def test_upload_rejects_non_images(admin_client):
    r = admin_client.post("/api/upload", files={"file": ("notes.txt", b"hello", "text/plain")})
    assert r.status_code == 400
    assert r.json() == {"error": "Only image uploads are supported"}


def test_upload_rejects_oversized_files(admin_client, mocker):
    mocker.patch.object(settings, "MAX_UPLOAD_BYTES", 16)
    r = admin_client.post("/api/upload", files={"file": ("big.png", PNG_BYTES, "image/png")})
    assert r.status_code == 413


def test_upload_without_file(admin_client):
    r = admin_client.post("/api/upload", data={"other": "x"})
    assert r.status_code == 400
    assert r.json() == {"error": "Missing form field: file"}


def test_upload_requires_admin(client):
    r = client.post("/api/upload", files={"file": ("logo.png", PNG_BYTES, "image/png")})
    assert r.status_code == 401


def test_missing_image_is_404(client):
    assert client.get("/api/images/unknown").status_code == 404
