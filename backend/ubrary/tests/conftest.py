import os
os.environ["TESTING"] = "1"

import sys
import tempfile
import uuid
from pathlib import Path

_TEST_DB = Path(tempfile.gettempdir()) / f"ubrary-test-{uuid.uuid4().hex}.db"
os.environ["DATABASE_URL"] = f"sqlite:///{_TEST_DB}"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

sys.path.append(str(Path(__file__).resolve().parents[2]))

from ubrary.main import app
from ubrary.database import Base, get_db
from ubrary import notify, schemas, states
from ubrary.auth import Actor
from ubrary.services import documents, ledger

SQLALCHEMY_DATABASE_URL = os.environ["DATABASE_URL"]
engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False, "timeout": 30},
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base.metadata.drop_all(bind=engine)
Base.metadata.create_all(bind=engine)

def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()

app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def clear_outbox():
    notify.TRANSITION_OUTBOX.clear()
    yield
    notify.TRANSITION_OUTBOX.clear()


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def db():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


def make_actor(role: str) -> Actor:
    return Actor(id=uuid.uuid4(), role=role)


def actor_headers(actor: Actor) -> dict[str, str]:
    return {"X-Actor-Id": str(actor.id), "X-Actor-Role": actor.role}


@pytest.fixture
def cast():
    """Fresh actors for one document's story."""

    return {
        "owner": make_actor("student"),
        "adviser": make_actor("faculty"),
        "librarian": make_actor("librarian"),
        "admin": make_actor("admin"),
        "other_faculty": make_actor("faculty"),
        "other_student": make_actor("student"),
    }


# shortest path from pending to each status, as (target, acting cast member)
PATHS: dict[str, list[tuple[str, str]]] = {
    states.PENDING: [],
    states.UNDER_REVIEW: [(states.UNDER_REVIEW, "adviser")],
    states.NEEDS_REVISION: [(states.UNDER_REVIEW, "adviser"), (states.NEEDS_REVISION, "adviser")],
    states.APPROVED: [(states.UNDER_REVIEW, "adviser"), (states.APPROVED, "adviser")],
    states.CURATION: [
        (states.UNDER_REVIEW, "adviser"),
        (states.APPROVED, "adviser"),
        (states.CURATION, "librarian"),
    ],
    states.READY_FOR_PUBLICATION: [
        (states.UNDER_REVIEW, "adviser"),
        (states.APPROVED, "adviser"),
        (states.CURATION, "librarian"),
        (states.READY_FOR_PUBLICATION, "librarian"),
    ],
    states.PUBLISHED: [
        (states.UNDER_REVIEW, "adviser"),
        (states.APPROVED, "adviser"),
        (states.CURATION, "librarian"),
        (states.READY_FOR_PUBLICATION, "librarian"),
        (states.PUBLISHED, "librarian"),
    ],
    states.REJECTED: [(states.UNDER_REVIEW, "adviser"), (states.REJECTED, "adviser")],
}


def make_document(session, cast, *, title: str = "Thesis", with_adviser: bool = True):
    payload = schemas.DocumentCreate(
        title=title,
        adviser_id=cast["adviser"].id if with_adviser else None,
    )
    return documents.register_document(session, payload, actor=cast["owner"])


def drive_to(session, document, target_status: str, cast):
    """Walk a document along the shortest path to ``target_status``."""

    for status, member in PATHS[target_status]:
        ledger.request_transition(
            session,
            document_id=document.id,
            target_status=status,
            actor=cast[member],
            expected_status=document.status,
            reason="seeded",
            notifier=None,
        )
        session.refresh(document)
    return document
