import uuid

from ubrary import notify
from .conftest import actor_headers, drive_to, make_document


def _submit(client, cast, title="Thesis"):
    resp = client.post(
        "/api/documents",
        json={"title": title, "adviser_id": str(cast["adviser"].id)},
        headers=actor_headers(cast["owner"]),
    )
    assert resp.status_code == 201, resp.text
    return resp.json()


def _move(client, document_id, actor, target, expected, **extra):
    body = {"target_status": target, "expected_status": expected, **extra}
    return client.post(
        f"/api/documents/{document_id}/transitions",
        json=body,
        headers=actor_headers(actor),
    )


def test_requests_without_identity_are_rejected(client):
    resp = client.get("/api/documents")
    assert resp.status_code == 401
    resp = client.get(
        "/api/documents",
        headers={"X-Actor-Id": "not-a-uuid", "X-Actor-Role": "student"},
    )
    assert resp.status_code == 401
    resp = client.get(
        "/api/documents",
        headers={"X-Actor-Id": str(uuid.uuid4()), "X-Actor-Role": "janitor"},
    )
    assert resp.status_code == 401


def test_submission_starts_pending_with_empty_history(client, cast):
    doc = _submit(client, cast)
    assert doc["status"] == "pending"
    assert doc["owner_id"] == str(cast["owner"].id)

    resp = client.get(f"/api/documents/{doc['id']}/history", headers=actor_headers(cast["owner"]))
    assert resp.status_code == 200
    assert resp.json() == []


def test_faculty_cannot_submit_documents(client, cast):
    resp = client.post(
        "/api/documents",
        json={"title": "Not mine"},
        headers=actor_headers(cast["adviser"]),
    )
    assert resp.status_code == 403
    assert resp.json()["error"] == "unauthorized"


def test_review_then_owner_denied(client, cast):
    doc = _submit(client, cast)

    resp = _move(client, doc["id"], cast["adviser"], "under_review", "pending")
    assert resp.status_code == 201, resp.text
    payload = resp.json()
    assert payload["document"]["status"] == "under_review"
    assert payload["record"]["sequence"] == 1
    assert payload["record"]["from_status"] == "pending"
    assert len(notify.TRANSITION_OUTBOX) == 1

    resp = _move(client, doc["id"], cast["owner"], "approved", "under_review")
    assert resp.status_code == 403
    body = resp.json()
    assert body["error"] == "unauthorized"
    assert body["retryable"] is False

    resp = client.get(f"/api/documents/{doc['id']}/history", headers=actor_headers(cast["owner"]))
    assert len(resp.json()) == 1


def test_revision_request_travels_with_transition(client, cast):
    doc = _submit(client, cast)
    _move(client, doc["id"], cast["adviser"], "under_review", "pending")

    resp = _move(client, doc["id"], cast["adviser"], "needs_revision", "under_review", reason="")
    assert resp.status_code == 400
    assert resp.json()["error"] == "validation_error"

    resp = _move(
        client,
        doc["id"],
        cast["adviser"],
        "needs_revision",
        "under_review",
        reason="missing citations",
        revision_request={"reason": "missing citations", "specific_requirements": "Cite the 2019 survey"},
    )
    assert resp.status_code == 201, resp.text
    payload = resp.json()
    assert payload["document"]["status"] == "needs_revision"
    assert payload["revision_request"]["requested_from"] == str(cast["owner"].id)
    assert payload["revision_request"]["status"] == "pending"
    assert payload["revision_request"]["transition_id"] == payload["record"]["id"]


def test_revision_request_only_with_needs_revision(client, cast):
    doc = _submit(client, cast)
    resp = _move(
        client,
        doc["id"],
        cast["adviser"],
        "under_review",
        "pending",
        revision_request={"reason": "too early"},
    )
    assert resp.status_code == 400
    resp = client.get(f"/api/documents/{doc['id']}", headers=actor_headers(cast["owner"]))
    assert resp.json()["status"] == "pending"


def test_curation_gate_over_http(client, db, cast):
    document = drive_to(db, make_document(db, cast), "curation", cast)
    librarian = actor_headers(cast["librarian"])

    resp = client.post(
        f"/api/documents/{document.id}/curation-notes",
        json={"note_type": "metadata", "text": "Subject headings missing"},
        headers=librarian,
    )
    assert resp.status_code == 201
    note = resp.json()
    assert note["resolved"] is False

    resp = _move(client, document.id, cast["librarian"], "ready_for_publication", "curation")
    assert resp.status_code == 400
    assert "unresolved curation notes (1)" in resp.json()["detail"]

    resp = client.post(f"/api/curation-notes/{note['id']}/resolve", headers=librarian)
    assert resp.status_code == 200
    assert resp.json()["resolved"] is True

    resp = _move(client, document.id, cast["librarian"], "ready_for_publication", "curation")
    assert resp.status_code == 201


def test_error_bodies_carry_kind_and_retry_hint(client, db, cast):
    document = drive_to(db, make_document(db, cast), "under_review", cast)

    resp = _move(client, document.id, cast["adviser"], "approved", "pending")
    assert resp.status_code == 409
    assert resp.json() == {
        "detail": "this document was just updated, please refresh",
        "error": "conflict",
        "retryable": False,
    }

    resp = _move(client, document.id, cast["admin"], "pending", "under_review")
    assert resp.status_code == 422
    assert resp.json()["error"] == "invalid_transition"

    resp = _move(client, uuid.uuid4(), cast["admin"], "under_review", "pending")
    assert resp.status_code == 404
    assert resp.json()["error"] == "not_found"


def test_unknown_status_values_fail_validation(client, cast):
    doc = _submit(client, cast)
    resp = _move(client, doc["id"], cast["adviser"], "archived", "pending")
    assert resp.status_code == 422


def test_listing_is_scoped_and_ordered(client, db, cast):
    published = drive_to(db, make_document(db, cast, title="Published"), "published", cast)
    pending = make_document(db, cast, title="Pending")
    reviewing = drive_to(db, make_document(db, cast, title="Reviewing"), "under_review", cast)

    resp = client.get("/api/documents", headers=actor_headers(cast["owner"]))
    assert resp.status_code == 200
    ids = [item["id"] for item in resp.json()]
    assert ids == [str(pending.id), str(reviewing.id), str(published.id)]

    resp = client.get("/api/documents", headers=actor_headers(cast["other_student"]))
    assert resp.json() == []

    resp = client.get(
        "/api/documents",
        params={"status": "under_review"},
        headers=actor_headers(cast["adviser"]),
    )
    assert [item["id"] for item in resp.json()] == [str(reviewing.id)]

    resp = client.get(
        "/api/documents",
        params={"limit": 1, "offset": 1},
        headers=actor_headers(cast["owner"]),
    )
    assert [item["id"] for item in resp.json()] == [str(reviewing.id)]


def test_document_visibility(client, db, cast):
    document = make_document(db, cast)
    for member in ("owner", "adviser", "librarian", "admin"):
        resp = client.get(f"/api/documents/{document.id}", headers=actor_headers(cast[member]))
        assert resp.status_code == 200
    for member in ("other_student", "other_faculty"):
        resp = client.get(f"/api/documents/{document.id}", headers=actor_headers(cast[member]))
        assert resp.status_code == 403


def test_workflow_summary(client, db, cast):
    document = drive_to(db, make_document(db, cast), "under_review", cast)
    adviser = actor_headers(cast["adviser"])
    client.post(
        f"/api/documents/{document.id}/reviews",
        json={"review_type": "initial"},
        headers=adviser,
    )
    _move(
        client,
        document.id,
        cast["adviser"],
        "needs_revision",
        "under_review",
        reason="tables unreadable",
        revision_request={"reason": "tables unreadable"},
    )

    resp = client.get(f"/api/documents/{document.id}/workflow", headers=actor_headers(cast["owner"]))
    assert resp.status_code == 200
    summary = resp.json()
    assert summary["current_status"] == "needs_revision"
    assert [entry["sequence"] for entry in summary["history"]] == [2, 1]
    assert len(summary["open_reviews"]) == 1
    assert len(summary["pending_revisions"]) == 1


def test_assign_adviser(client, db, cast):
    document = make_document(db, cast, with_adviser=False)
    body = {"adviser_id": str(cast["other_faculty"].id)}

    resp = client.patch(f"/api/documents/{document.id}/adviser", json=body, headers=actor_headers(cast["owner"]))
    assert resp.status_code == 403

    resp = client.patch(f"/api/documents/{document.id}/adviser", json=body, headers=actor_headers(cast["librarian"]))
    assert resp.status_code == 200
    assert resp.json()["adviser_id"] == str(cast["other_faculty"].id)

    resp = _move(client, document.id, cast["other_faculty"], "under_review", "pending")
    assert resp.status_code == 201


def test_metrics_endpoint(client):
    resp = client.get("/metrics")
    assert resp.status_code == 200
    assert b"request_count" in resp.content


def test_rejected_revision_request_rolls_back_transition(client, db, cast):
    document = drive_to(db, make_document(db, cast), "under_review", cast)

    resp = _move(
        client,
        document.id,
        cast["adviser"],
        "needs_revision",
        "under_review",
        reason="missing citations",
        revision_request={"reason": "   "},
    )
    assert resp.status_code == 400
    assert resp.json()["error"] == "validation_error"

    owner = actor_headers(cast["owner"])
    assert client.get(f"/api/documents/{document.id}", headers=owner).json()["status"] == "under_review"
    assert len(client.get(f"/api/documents/{document.id}/history", headers=owner).json()) == 1
    assert client.get(f"/api/documents/{document.id}/revision-requests", headers=owner).json() == []
    assert notify.TRANSITION_OUTBOX == []
