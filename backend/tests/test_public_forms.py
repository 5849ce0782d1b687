"""Tests for the public form API: visibility, payload and embed script."""

import json
from datetime import datetime, timedelta, timezone

from app.models.form_block import FormBlock
from app.models.form_block_interaction import FormBlockInteraction
from app.services.forms import create_form, publish_form, soft_delete_form

PUBLIC_URL = "/api/v1/public/forms"


def _published_form(db, user, **config):
    form = create_form(db, user, "Customer Survey", **config)
    group = FormBlock(form_id=form.id, uuid="g", type="group", sequence=0)
    child = FormBlock(form_id=form.id, uuid="q", type="radio", parent_block="g", sequence=1, is_required=True)
    child.interactions = [
        FormBlockInteraction(uuid="yes", type="radio", label="Yes", sequence=0),
        FormBlockInteraction(uuid="hidden", type="radio", label="Maybe", sequence=1, is_disabled=True),
    ]
    hidden = FormBlock(form_id=form.id, uuid="off", type="chat", sequence=2, is_disabled=True)
    db.add_all([group, child, hidden])
    db.commit()
    return publish_form(db, form)


class TestVisibility:
    def test_published_form(self, client, db, user):
        form = _published_form(db, user)
        resp = client.get(f"{PUBLIC_URL}/{form.uuid}")
        assert resp.status_code == 200

    def test_draft_is_hidden(self, client, db, user):
        form = create_form(db, user, "Draft")
        assert client.get(f"{PUBLIC_URL}/{form.uuid}").status_code == 404

    def test_scheduled_is_hidden(self, client, db, user):
        form = publish_form(
            db, create_form(db, user, "Soon"), at=datetime.now(timezone.utc) + timedelta(days=1)
        )
        assert client.get(f"{PUBLIC_URL}/{form.uuid}").status_code == 404

    def test_trashed_is_hidden(self, client, db, user):
        form = soft_delete_form(db, _published_form(db, user))
        assert client.get(f"{PUBLIC_URL}/{form.uuid}").status_code == 404

    def test_unknown_form(self, client):
        assert client.get(f"{PUBLIC_URL}/missing").status_code == 404

    def test_no_auth_required(self, client, db, user):
        form = _published_form(db, user)
        resp = client.get(f"{PUBLIC_URL}/{form.uuid}", headers={})
        assert resp.status_code == 200


class TestPayload:
    def test_storyboard_is_resolved(self, client, db, user):
        form = _published_form(db, user)
        storyboard = client.get(f"{PUBLIC_URL}/{form.uuid}").json()["storyboard"]
        assert storyboard["count"] == 2
        assert [b["uuid"] for b in storyboard["blocks"]] == ["g", "q"]

    def test_disabled_interactions_are_hidden(self, client, db, user):
        form = _published_form(db, user)
        blocks = client.get(f"{PUBLIC_URL}/{form.uuid}").json()["storyboard"]["blocks"]
        assert [i["label"] for i in blocks[1]["interactions"]] == ["Yes"]

    def test_owner_details_and_links(self, client, db, user):
        form = _published_form(db, user)
        data = client.get(f"{PUBLIC_URL}/{form.uuid}").json()
        assert data["company_name"] == "Acme GmbH"
        assert data["privacy_link"] == "https://acme.example/privacy"
        assert data["legal_notice_link"] == "https://acme.example/imprint"
        assert data["initials"] == "Cu Su"

    def test_form_links_override_owner_links(self, client, db, user):
        form = _published_form(db, user, privacy_link="https://form.example/privacy")
        data = client.get(f"{PUBLIC_URL}/{form.uuid}").json()
        assert data["privacy_link"] == "https://form.example/privacy"
        assert data["legal_notice_link"] == "https://acme.example/imprint"

    def test_default_brand_color(self, client, db, user):
        form = _published_form(db, user)
        data = client.get(f"{PUBLIC_URL}/{form.uuid}").json()
        assert data["brand_color"] == "#000000"
        assert data["contrast_color"] == "white"

    def test_assets(self, client, db, user, assets):
        (assets.root / "avatars").mkdir()
        (assets.root / "avatars" / "logo.png").write_bytes(b"\x89PNG")
        form = _published_form(db, user, avatar_path="avatars/logo.png", background_path="missing.jpg")
        data = client.get(f"{PUBLIC_URL}/{form.uuid}").json()
        assert data["avatar"] == "https://cdn.example.com/images/avatars/logo.png"
        assert data["background"] is False

    def test_assets_outside_upload_root_are_missing(self, client, db, user, assets):
        outside = assets.root.parent / "outside.png"
        outside.write_bytes(b"\x89PNG")
        form = _published_form(db, user, avatar_path=str(outside), background_path="../outside.png")
        data = client.get(f"{PUBLIC_URL}/{form.uuid}").json()
        assert data["avatar"] is False
        assert data["background"] is False

    def test_internal_fields_not_exposed(self, client, db, user):
        form = _published_form(db, user, data_retention_days=30)
        data = client.get(f"{PUBLIC_URL}/{form.uuid}").json()
        for field in ("id", "user_id", "data_retention_days", "is_notification_via_mail", "deleted_at"):
            assert field not in data


class TestEmbedScript:
    def test_embed_script(self, client, db, user):
        form = _published_form(db, user)
        resp = client.get(f"{PUBLIC_URL}/{form.uuid}/embed.js")
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("application/javascript")

        prefix = "window.iptSettings = window.iptSettings || [];window.iptSettings = "
        assert resp.text.startswith(prefix)
        settings_obj = json.loads(resp.text[len(prefix):])
        assert settings_obj["uuid"] == form.uuid
        assert settings_obj["storyboard"]["count"] == 2

    def test_embed_script_unpublished(self, client, db, user):
        form = create_form(db, user, "Draft")
        assert client.get(f"{PUBLIC_URL}/{form.uuid}/embed.js").status_code == 404
