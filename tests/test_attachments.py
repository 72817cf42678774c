from unittest.mock import patch

import pytest

from notiq.core.config import settings
from notiq.core.exceptions import ValidationFailed
from notiq.services.attachment_service import classify

UPLOAD = "notiq.infrastructure.storage.object_store.upload_fileobj"


def _fake_upload(fileobj, *, key, content_type):
    assert fileobj.read()  # the stream is rewound before upload
    return f"https://cdn.example.com/{key}"


def test_classify_media_types():
    assert classify("application/pdf") == "pdf"
    assert classify("image/png") == "image"
    assert classify("image/jpeg; charset=binary") == "image"
    with pytest.raises(ValidationFailed):
        classify("text/plain")
    with pytest.raises(ValidationFailed):
        classify(None)


def test_upload_pdf_appends_attachment(client, register, make_note):
    headers = register()
    note = make_note(headers)
    with patch(UPLOAD, side_effect=_fake_upload) as up:
        r = client.post(
            f"/api/notes/{note['id']}/upload",
            files={"file": ("Lecture 1.pdf", b"%PDF-1.4 fake", "application/pdf")},
            headers=headers,
        )
    assert r.status_code == 200, r.text
    attachments = r.json()["attachments"]
    assert len(attachments) == 1
    att = attachments[0]
    assert att["type"] == "pdf"
    assert att["storage_id"].startswith(settings.storage_prefix)
    assert att["storage_id"].endswith(".pdf")
    assert att["url"] == f"https://cdn.example.com/{att['storage_id']}"
    assert att["filename"] == "Lecture 1.pdf"
    assert att["size"] == len(b"%PDF-1.4 fake")
    assert up.call_args.kwargs["content_type"] == "application/pdf"


def test_upload_image_keeps_order(client, register, make_note):
    headers = register()
    note = make_note(headers)
    with patch(UPLOAD, side_effect=_fake_upload):
        client.post(f"/api/notes/{note['id']}/upload",
                    files={"file": ("a.png", b"png-bytes", "image/png")}, headers=headers)
        r = client.post(f"/api/notes/{note['id']}/upload",
                        files={"file": ("b.pdf", b"pdf-bytes", "application/pdf")}, headers=headers)
    assert [a["type"] for a in r.json()["attachments"]] == ["image", "pdf"]
    listed = client.get("/api/notes", headers=headers).json()[0]
    assert [a["filename"] for a in listed["attachments"]] == ["a.png", "b.pdf"]


def test_upload_rejects_other_types_and_missing_file(client, register, make_note):
    headers = register()
    note = make_note(headers)
    with patch(UPLOAD) as up:
        r = client.post(f"/api/notes/{note['id']}/upload",
                        files={"file": ("notes.txt", b"hello", "text/plain")}, headers=headers)
        assert r.status_code == 400
        assert r.json()["message"] == "Only images and PDF files are allowed"

        r = client.post(f"/api/notes/{note['id']}/upload", headers=headers)
        assert r.status_code == 400
        assert r.json()["message"] == "No file uploaded"
    up.assert_not_called()


def test_upload_too_large(client, register, make_note, monkeypatch):
    headers = register()
    note = make_note(headers)
    monkeypatch.setattr(settings, "max_upload_mb", 0)
    with patch(UPLOAD) as up:
        r = client.post(f"/api/notes/{note['id']}/upload",
                        files={"file": ("big.png", b"0123456789", "image/png")}, headers=headers)
    assert r.status_code == 400
    up.assert_not_called()


def test_upload_checks_ownership(client, register, make_note):
    ana = register("ana@example.com")
    bob = register("bob@example.com")
    note = make_note(ana)
    with patch(UPLOAD) as up:
        r = client.post(f"/api/notes/{note['id']}/upload",
                        files={"file": ("a.png", b"png", "image/png")}, headers=bob)
    assert r.status_code == 403
    up.assert_not_called()
