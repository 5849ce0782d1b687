"""Tests for session aggregation and the public session recording endpoints."""

from datetime import datetime, timezone

import pytest

from app.models.form_block import FormBlock
from app.models.form_block_interaction import FormBlockInteraction
from app.models.form_session import FormSession
from app.models.form_session_response import FormSessionResponse
from app.services.forms import (
    SessionAlreadyCompleted,
    complete_session,
    completion_rate,
    count_completed_sessions,
    count_distinct_sessions,
    count_sessions_in_month,
    create_form,
    get_form_metrics,
    publish_form,
    record_response,
    start_session,
)

PUBLIC_URL = "/api/v1/public/forms"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _form_with_blocks(db, user, count=2, name="Feedback"):
    form = create_form(db, user, name)
    for i in range(count):
        db.add(FormBlock(form_id=form.id, uuid=f"{name}-block-{i}", type="input", sequence=i))
    db.commit()
    db.refresh(form)
    return form


def _session(db, form, completed=False):
    session = FormSession(form_id=form.id, is_completed=completed)
    db.add(session)
    db.commit()
    db.refresh(session)
    return session


def _respond(db, session, block, created_at=None, value="ok"):
    response = FormSessionResponse(form_session_id=session.id, form_block_id=block.id, value=value)
    if created_at is not None:
        response.created_at = created_at
    db.add(response)
    db.commit()
    return response


# ---------------------------------------------------------------------------
# completion_rate
# ---------------------------------------------------------------------------


class TestCompletionRate:
    @pytest.mark.parametrize(
        "total, completed, expected",
        [
            (0, 0, 0),
            (10, 0, 0),
            (10, 5, 50.0),
            (3, 1, 33.33),
            (3, 2, 66.67),
            (8, 1, 12.5),
            (4, 4, 100.0),
        ],
    )
    def test_values(self, total, completed, expected):
        assert completion_rate(total, completed) == expected

    def test_zero_total_is_not_an_error(self):
        assert completion_rate(0, 3) == 0

    def test_unusable_input_yields_zero(self):
        assert completion_rate("n/a", 1) == 0
        assert completion_rate(None, None) == 0

    @pytest.mark.parametrize("total, completed", [("NaN", 1), (1, "NaN"), ("Infinity", 1), (1, "Infinity")])
    def test_non_finite_input_yields_zero(self, total, completed):
        assert completion_rate(total, completed) == 0

    def test_rounds_half_up(self):
        # 1/8000 * 100 = 0.0125 -> 0.01, 1/800 * 100 = 0.125 -> 0.13
        assert completion_rate(8000, 1) == 0.01
        assert completion_rate(800, 1) == 0.13


# ---------------------------------------------------------------------------
# Counting
# ---------------------------------------------------------------------------


class TestCounts:
    def test_distinct_sessions(self, db, user):
        form = _form_with_blocks(db, user)
        b1, b2 = form.blocks
        session_a = _session(db, form)
        session_b = _session(db, form)
        _respond(db, session_a, b1)
        _respond(db, session_a, b2)
        _respond(db, session_b, b1)

        assert count_distinct_sessions(db, [b1.id, b2.id]) == 2

    def test_distinct_sessions_restricted_to_block_ids(self, db, user):
        form = _form_with_blocks(db, user)
        other = _form_with_blocks(db, user, name="Other")
        _respond(db, _session(db, form), form.blocks[0])
        _respond(db, _session(db, other), other.blocks[0])

        assert count_distinct_sessions(db, [b.id for b in form.blocks]) == 1

    def test_no_blocks_counts_nothing(self, db):
        assert count_distinct_sessions(db, []) == 0
        assert count_completed_sessions(db, []) == 0
        assert count_sessions_in_month(db, [], datetime.now(timezone.utc)) == 0

    def test_completed_sessions(self, db, user):
        form = _form_with_blocks(db, user)
        b1, b2 = form.blocks
        done = _session(db, form, completed=True)
        _respond(db, done, b1)
        _respond(db, done, b2)
        _respond(db, _session(db, form), b1)
        # Completed but never answered anything: not counted
        _session(db, form, completed=True)

        assert count_completed_sessions(db, [b1.id, b2.id]) == 1

    def test_sessions_in_month(self, db, user):
        form = _form_with_blocks(db, user)
        block = form.blocks[0]
        _respond(db, _session(db, form), block, created_at=datetime(2026, 3, 1, 0, 0, 0))
        _respond(db, _session(db, form), block, created_at=datetime(2026, 3, 31, 23, 59, 59))
        _respond(db, _session(db, form), block, created_at=datetime(2026, 2, 28, 23, 59, 59))
        _respond(db, _session(db, form), block, created_at=datetime(2025, 3, 15, 12, 0, 0))
        _respond(db, _session(db, form), block, created_at=datetime(2026, 4, 1, 0, 0, 0))

        now = datetime(2026, 3, 15, 10, 0, tzinfo=timezone.utc)
        assert count_sessions_in_month(db, [block.id], now) == 2

    def test_sessions_in_december(self, db, user):
        form = _form_with_blocks(db, user)
        block = form.blocks[0]
        _respond(db, _session(db, form), block, created_at=datetime(2025, 12, 31, 8, 0, 0))
        _respond(db, _session(db, form), block, created_at=datetime(2026, 1, 1, 0, 0, 0))

        now = datetime(2025, 12, 2, tzinfo=timezone.utc)
        assert count_sessions_in_month(db, [block.id], now) == 1


class TestFormMetrics:
    def test_metrics(self, db, user):
        form = _form_with_blocks(db, user)
        b1, b2 = form.blocks
        now = datetime(2026, 5, 20, tzinfo=timezone.utc)
        for completed in (True, False, False):
            session = _session(db, form, completed=completed)
            _respond(db, session, b1, created_at=datetime(2026, 5, 3))
            _respond(db, session, b2, created_at=datetime(2026, 5, 3))

        metrics = get_form_metrics(db, form, now=now)
        assert metrics.total_sessions == 3
        assert metrics.completed_sessions == 1
        assert metrics.completion_rate == 33.33
        assert metrics.sessions_current_month == 3

    def test_metrics_for_form_without_blocks(self, db, user):
        form = create_form(db, user, "Empty")
        metrics = get_form_metrics(db, form)
        assert metrics.total_sessions == 0
        assert metrics.completion_rate == 0


# ---------------------------------------------------------------------------
# Recording
# ---------------------------------------------------------------------------


class TestRecording:
    def test_record_and_complete(self, db, user):
        form = _form_with_blocks(db, user)
        session = start_session(db, form, {"utm_source": "mail"})
        assert session.token
        assert session.params == {"utm_source": "mail"}

        response = record_response(db, session, form.blocks[0].uuid, ["A", "B"])
        assert response.value == ["A", "B"]

        complete_session(db, session)
        assert session.is_completed is True
        with pytest.raises(SessionAlreadyCompleted):
            record_response(db, session, form.blocks[1].uuid, "late")

    def test_record_with_interaction(self, db, user):
        form = _form_with_blocks(db, user, count=1)
        block = form.blocks[0]
        interaction = FormBlockInteraction(form_block_id=block.id, type="input", uuid="ia-1")
        db.add(interaction)
        db.commit()

        session = start_session(db, form)
        response = record_response(db, session, block.uuid, "hi", interaction_uuid="ia-1")
        assert response.form_block_interaction_id == interaction.id


class TestSessionEndpoints:
    def _published(self, db, user):
        form = _form_with_blocks(db, user)
        return publish_form(db, form)

    def test_full_visit(self, client, db, user):
        form = self._published(db, user)

        resp = client.post(f"{PUBLIC_URL}/{form.uuid}/sessions", json={"params": {"ref": "x"}})
        assert resp.status_code == 201
        token = resp.json()["token"]
        assert resp.json()["is_completed"] is False

        resp = client.post(
            f"{PUBLIC_URL}/{form.uuid}/sessions/{token}/responses",
            json={"block": form.blocks[0].uuid, "value": 4},
        )
        assert resp.status_code == 201
        assert resp.json()["value"] == 4

        resp = client.post(f"{PUBLIC_URL}/{form.uuid}/sessions/{token}/complete")
        assert resp.status_code == 200
        assert resp.json()["is_completed"] is True

        metrics = get_form_metrics(db, form)
        assert metrics.total_sessions == 1
        assert metrics.completion_rate == 100.0

    def test_start_session_without_body(self, client, db, user):
        form = self._published(db, user)
        resp = client.post(f"{PUBLIC_URL}/{form.uuid}/sessions")
        assert resp.status_code == 201

    def test_unknown_block(self, client, db, user):
        form = self._published(db, user)
        token = client.post(f"{PUBLIC_URL}/{form.uuid}/sessions").json()["token"]
        resp = client.post(
            f"{PUBLIC_URL}/{form.uuid}/sessions/{token}/responses",
            json={"block": "nope", "value": 1},
        )
        assert resp.status_code == 404

    def test_unknown_session(self, client, db, user):
        form = self._published(db, user)
        resp = client.post(f"{PUBLIC_URL}/{form.uuid}/sessions/missing/complete")
        assert resp.status_code == 404

    def test_response_after_completion(self, client, db, user):
        form = self._published(db, user)
        token = client.post(f"{PUBLIC_URL}/{form.uuid}/sessions").json()["token"]
        client.post(f"{PUBLIC_URL}/{form.uuid}/sessions/{token}/complete")
        resp = client.post(
            f"{PUBLIC_URL}/{form.uuid}/sessions/{token}/responses",
            json={"block": form.blocks[0].uuid, "value": 1},
        )
        assert resp.status_code == 409

    def test_unpublished_form_rejects_sessions(self, client, db, user):
        form = _form_with_blocks(db, user)
        resp = client.post(f"{PUBLIC_URL}/{form.uuid}/sessions")
        assert resp.status_code == 404
