import logging
import os

from . import models, states

# purpose: fire-and-forget notification sink informed of committed transitions
# status: active

TRANSITION_OUTBOX: list[dict] = []

logger = logging.getLogger(__name__)


def describe_transition(document: models.Document, record: models.TransitionRecord) -> str:
    label = states.STATUS_LABELS.get(record.to_status, record.to_status)
    return f'Document "{document.title}" {label}'


def notify_transition(document: models.Document, record: models.TransitionRecord) -> dict:
    message = {
        "document_id": str(document.id),
        "owner_id": str(document.owner_id),
        "adviser_id": str(document.adviser_id) if document.adviser_id else None,
        "from_status": record.from_status,
        "to_status": record.to_status,
        "actor_id": str(record.actor_id),
        "message": describe_transition(document, record),
    }
    if os.getenv("TESTING") == "1":
        TRANSITION_OUTBOX.append(message)
        return message
    logger.info("workflow notification: %s", message["message"])
    return message
