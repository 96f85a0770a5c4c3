from typing import Any, List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from app import crud, schemas
from app.api import deps
from app.db.database import get_db
import logging

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/", response_model=List[schemas.Alert])
def list_alerts(
    db: Session = Depends(get_db),
    ctx: deps.SessionContext = Depends(deps.get_session_context),
) -> Any:
    return crud.alert.get_all(db)


@router.post("/{alert_id}/resolve", response_model=schemas.Alert)
def resolve_alert(
    alert_id: str,
    db: Session = Depends(get_db),
    ctx: deps.SessionContext = Depends(deps.require_admin),
) -> Any:
    alert = crud.alert.get(db, alert_id)
    if not alert:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Alert not found")
    if alert.is_resolved:
        return alert

    alert = crud.alert.resolve(db, db_obj=alert, resolved_by=ctx.user_id)
    logger.info(f"Alert {alert_id} resolved by {ctx.email}")
    return alert
