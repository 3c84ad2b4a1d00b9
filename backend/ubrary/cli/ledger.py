"""CLI utilities for auditing the document workflow ledger."""

# purpose: let administrators replay document histories and spot status drift
# status: active
# depends_on: ubrary.database, ubrary.models, ubrary.states

from __future__ import annotations

import json
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Optional
from uuid import UUID

import typer
from sqlalchemy.orm import Session

from .. import models, states
from ..database import SessionLocal
from ..errors import InvalidTransition

app = typer.Typer(help="Document workflow ledger maintenance commands")

_LOG_PATH = Path(
    os.getenv(
        "LEDGER_VERIFY_LOG",
        str(Path(__file__).resolve().parents[2] / "problems" / "ledger_verification.log"),
    )
)


def _append_log(record: dict[str, object]) -> None:
    """Append a structured anomaly entry to the verification log."""

    _LOG_PATH.parent.mkdir(parents=True, exist_ok=True)
    record.setdefault("timestamp", datetime.now(timezone.utc).isoformat())
    with _LOG_PATH.open("a", encoding="utf-8") as handle:
        handle.write(json.dumps(record) + "\n")


def _iter_documents(session: Session, document_id: UUID | None) -> Iterable[models.Document]:
    query = session.query(models.Document)
    if document_id is not None:
        query = query.filter(models.Document.id == document_id)
    return query.order_by(models.Document.created_at.asc()).all()


def _history(session: Session, document_id: UUID) -> list[models.TransitionRecord]:
    return (
        session.query(models.TransitionRecord)
        .filter(models.TransitionRecord.document_id == document_id)
        .order_by(models.TransitionRecord.sequence.asc())
        .all()
    )


def verify_ledger(
    document_id: UUID | str | None = None,
    *,
    session: Session | None = None,
) -> dict[str, object]:
    """Replay each document's history from the initial status and compare."""

    target = UUID(str(document_id)) if document_id else None
    owns_session = session is None
    session = session or SessionLocal()
    checked = 0
    anomalies: list[dict[str, object]] = []
    try:
        for document in _iter_documents(session, target):
            checked += 1
            history = _history(session, document.id)
            try:
                replayed = states.replay((row.from_status, row.to_status) for row in history)
            except InvalidTransition as exc:
                anomalies.append(
                    {
                        "kind": "invalid_edge",
                        "document_id": str(document.id),
                        "detail": str(exc),
                    }
                )
                continue
            if replayed != document.status:
                anomalies.append(
                    {
                        "kind": "status_drift",
                        "document_id": str(document.id),
                        "cached_status": document.status,
                        "replayed_status": replayed,
                    }
                )
        for anomaly in anomalies:
            _append_log(dict(anomaly))
        return {"checked": checked, "anomalies": anomalies}
    finally:
        if owns_session:
            session.close()


def export_history(document_id: UUID | str, *, session: Session | None = None) -> list[dict[str, object]]:
    owns_session = session is None
    session = session or SessionLocal()
    try:
        return [
            {
                "sequence": row.sequence,
                "from_status": row.from_status,
                "to_status": row.to_status,
                "actor_id": str(row.actor_id),
                "reason": row.reason,
                "comments": row.comments,
                "created_at": row.created_at.isoformat(),
            }
            for row in _history(session, UUID(str(document_id)))
        ]
    finally:
        if owns_session:
            session.close()


@app.command("verify-ledger")
def verify_ledger_command(
    document_id: Optional[str] = typer.Option(None, help="Restrict verification to one document"),
) -> None:
    """CLI wrapper for :func:`verify_ledger`."""

    try:
        summary = verify_ledger(document_id)
    except ValueError as exc:
        raise typer.BadParameter(str(exc))
    typer.echo(json.dumps(summary))
    if summary["anomalies"]:
        raise typer.Exit(code=1)


@app.command("history")
def history_command(document_id: str) -> None:
    """Print a document's transition ledger as JSON."""

    try:
        rows = export_history(document_id)
    except ValueError as exc:
        raise typer.BadParameter(str(exc))
    typer.echo(json.dumps(rows, indent=2))


if __name__ == "__main__":
    app()
