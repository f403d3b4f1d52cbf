"""
Task Manager API - Avatar Tests
"""

import io

import pytest
from PIL import Image

from task_manager.config import settings
from task_manager.errors import ValidationError
from task_manager.users.avatar import normalize_avatar, validate_avatar_upload


def _image_bytes(fmt="JPEG", size=(400, 300), mode="RGB"):
    buffer = io.BytesIO()
    Image.new(mode, size, "red" if mode != "P" else 1).save(buffer, format=fmt)
    return buffer.getvalue()


def _upload(client, headers, filename="profile-pic.jpg", data=None, content_type="image/jpeg"):
    data = _image_bytes() if data is None else data
    return client.post(
        "/users/me/avatar",
        files={"avatar": (filename, data, content_type)},
        headers=headers,
    )


class TestUploadAvatar:
    """Tests for POST /users/me/avatar."""

    def test_upload_avatar(self, client, auth_headers):
        response = _upload(client, auth_headers)
        assert response.status_code == 200

        me = client.get("/users/me", headers=auth_headers).json()
        assert me["has_avatar"] is True

        image = client.get(f"/users/{me['id']}/avatar")
        assert image.status_code == 200
        assert image.headers["content-type"] == "image/png"
        with Image.open(io.BytesIO(image.content)) as stored:
            assert stored.format == "PNG"
            assert stored.size == (settings.AVATAR_SIZE, settings.AVATAR_SIZE)

    def test_upload_png(self, client, auth_headers):
        response = _upload(client, auth_headers, "face.PNG", _image_bytes("PNG"), "image/png")
        assert response.status_code == 200

    def test_wrong_extension_rejected(self, client, auth_headers):
        response = _upload(client, auth_headers, "notes.pdf", b"%PDF-1.4", "application/pdf")
        assert response.status_code == 400

    def test_not_an_image_rejected(self, client, auth_headers):
        response = _upload(client, auth_headers, "fake.png", b"definitely not a png", "image/png")
        assert response.status_code == 400

    def test_too_large_rejected(self, client, auth_headers, monkeypatch):
        monkeypatch.setattr(settings, "AVATAR_MAX_BYTES", 100)
        response = _upload(client, auth_headers)
        assert response.status_code == 400
        assert "too large" in response.json()["detail"]

    def test_missing_file_rejected(self, client, auth_headers):
        response = client.post("/users/me/avatar", headers=auth_headers)
        assert response.status_code == 400

    def test_upload_requires_auth(self, client):
        assert _upload(client, {}).status_code == 401


class TestAvatarLifecycle:
    """Tests for DELETE /users/me/avatar and GET /users/{id}/avatar."""

    def test_delete_avatar(self, client, auth_headers):
        _upload(client, auth_headers)
        user_id = client.get("/users/me", headers=auth_headers).json()["id"]

        response = client.delete("/users/me/avatar", headers=auth_headers)
        assert response.status_code == 200
        assert client.get(f"/users/{user_id}/avatar").status_code == 404

    def test_user_without_avatar(self, client, auth_headers):
        user_id = client.get("/users/me", headers=auth_headers).json()["id"]
        assert client.get(f"/users/{user_id}/avatar").status_code == 404

    def test_unknown_user(self, client):
        assert client.get("/users/no-such-user/avatar").status_code == 404

    def test_delete_avatar_requires_auth(self, client):
        assert client.delete("/users/me/avatar").status_code == 401


class TestNormalizeAvatar:
    """Tests for the image helpers."""

    @pytest.mark.parametrize("mode", ["RGB", "RGBA", "L", "P"])
    def test_modes_become_square_png(self, mode):
        data = _image_bytes("PNG", size=(120, 480), mode=mode)
        with Image.open(io.BytesIO(normalize_avatar(data, 64))) as image:
            assert image.format == "PNG"
            assert image.size == (64, 64)

    def test_garbage_raises_validation_error(self):
        with pytest.raises(ValidationError):
            normalize_avatar(b"\x00\x01\x02", 64)

    def test_validate_upload(self):
        validate_avatar_upload("me.jpeg", b"x", 10)
        with pytest.raises(ValidationError):
            validate_avatar_upload(None, b"x", 10)
        with pytest.raises(ValidationError):
            validate_avatar_upload("me.gif", b"x", 10)
        with pytest.raises(ValidationError):
            validate_avatar_upload("me.png", b"", 10)
        with pytest.raises(ValidationError):
            validate_avatar_upload("me.png", b"x" * 11, 10)
