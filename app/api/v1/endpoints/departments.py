from typing import Any, List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from app import crud, schemas
from app.api import deps
from app.db.database import get_db
from app.models.department import CABIN_DEPARTMENTS, Department
from app.services.inventory_aggregation import (
    StockStatus, department_totals, filter_summaries, low_stock_counts_by_department, summaries_by_name,
)

router = APIRouter()

STATUS_FILTERS = {"all"} | {s.value for s in StockStatus}


@router.get("/", response_model=List[schemas.DepartmentOverview])
def department_overview(
    db: Session = Depends(get_db),
    ctx: deps.SessionContext = Depends(deps.get_session_context),
) -> Any:
    """Every department with its stock held and number of low-stock catalog entries."""
    items = crud.inventory_item.get_filtered(db)
    totals = department_totals(items)
    low_stock = low_stock_counts_by_department(items)
    return [
        {
            "department": department.value,
            "total_quantity": totals.get(department.value, 0),
            "low_stock_count": low_stock.get(department.value, 0),
            "cabin_tracked": department in CABIN_DEPARTMENTS,
        }
        for department in Department
    ]


@router.get("/{department}/summaries", response_model=List[schemas.ItemSummaryOut])
def department_summaries(
    department: Department,
    db: Session = Depends(get_db),
    ctx: deps.SessionContext = Depends(deps.get_session_context),
    search: Optional[str] = None,
    stock_status: Optional[str] = Query(None, alias="status"),
) -> Any:
    if stock_status is not None and stock_status not in STATUS_FILTERS:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"status must be one of: {', '.join(sorted(STATUS_FILTERS))}"
        )

    items = crud.inventory_item.get_filtered(db, department=department)
    summaries = filter_summaries(summaries_by_name(items, department, search=search).values(), stock_status)
    return [
        {
            "department": summary.department,
            "name": summary.name,
            "total_quantity": summary.total_quantity,
            "low_stock_threshold": summary.low_stock_threshold,
            "status": summary.status.value,
            "item_count": len(summary.items),
            "items": summary.items,
        }
        for summary in summaries
    ]
