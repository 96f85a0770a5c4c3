import math
from typing import Any, List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from app import crud, schemas
from app.api import deps
from app.core.config import settings
from app.db.database import get_db
from app.models.department import Department
from app.services.inventory_aggregation import count_low_stock, department_totals, total_quantity

router = APIRouter()

RECENT_ALERTS_LIMIT = 5
RECENT_ACTIVITY_LIMIT = 10


@router.get("/stats", response_model=schemas.DashboardStats)
def dashboard_stats(
    db: Session = Depends(get_db),
    ctx: deps.SessionContext = Depends(deps.get_session_context),
) -> Any:
    items = crud.inventory_item.get_filtered(db)
    return {
        "total_items": total_quantity(items),
        "low_stock_items": count_low_stock(items),
        "departments": len(Department),
        "active_alerts": crud.alert.count_unresolved(db),
    }


@router.get("/chart", response_model=List[schemas.DepartmentTotal])
def department_chart(
    db: Session = Depends(get_db),
    ctx: deps.SessionContext = Depends(deps.get_session_context),
) -> Any:
    totals = department_totals(crud.inventory_item.get_filtered(db))
    return [
        {"department": department.value, "quantity": totals.get(department.value, 0)}
        for department in Department
    ]


@router.get("/recent-alerts", response_model=List[schemas.Alert])
def recent_alerts(
    db: Session = Depends(get_db),
    ctx: deps.SessionContext = Depends(deps.get_session_context),
) -> Any:
    return crud.alert.get_recent(db, limit=RECENT_ALERTS_LIMIT, unresolved_only=True)


@router.get("/admin", response_model=schemas.AdminDashboard)
def admin_dashboard(
    db: Session = Depends(get_db),
    ctx: deps.SessionContext = Depends(deps.require_admin),
    page: int = Query(1, ge=1),
    search: Optional[str] = None,
    department: Optional[Department] = None,
) -> Any:
    per_page = settings.ADMIN_ITEMS_PER_PAGE
    all_items = crud.inventory_item.get_filtered(db)
    items, total = crud.inventory_item.get_page(
        db, page=page, per_page=per_page, department=department, search=search
    )

    return {
        "stats": {
            "total_users": crud.profile.count(db),
            "pending_requests": crud.registration_request.count_pending(db),
            "total_items": len(all_items),
            "active_alerts": crud.alert.count_unresolved(db),
            "low_stock_items": count_low_stock(all_items),
        },
        "department_item_counts": crud.inventory_item.count_by_department(db),
        "recent_activity": crud.alert.get_recent(db, limit=RECENT_ACTIVITY_LIMIT),
        "items": items,
        "page": page,
        "per_page": per_page,
        "total": total,
        "total_pages": max(1, math.ceil(total / per_page)),
    }
