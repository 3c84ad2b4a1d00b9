from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from .. import schemas
from ..auth import Actor, get_current_actor
from ..database import get_db
from ..errors import Unauthorized
from ..services import statistics

router = APIRouter(prefix="/api/statistics", tags=["statistics"])


@router.get("/status-counts", response_model=schemas.StatusCountsOut)
def status_counts(
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    return statistics.status_summary(db, actor.id, actor.role)


@router.get("/workload", response_model=schemas.WorkloadOut)
def workload(
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    if actor.role not in {"faculty", "admin"}:
        raise Unauthorized("Workload is tracked for faculty")
    return statistics.reviewer_workload(db, actor.id)
