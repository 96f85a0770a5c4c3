from typing import Any, List, Optional
from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from sqlalchemy.orm import Session
from app import crud, schemas
from app.api import deps
from app.db.database import get_db
from app.models.department import Department
from app.models.inventory import InventoryItem
from app.services import alert_service
from app.services.bulk_import import BulkImportError, parse_upload
import logging

logger = logging.getLogger(__name__)
router = APIRouter()


def _get_item_or_404(db: Session, item_id: str) -> InventoryItem:
    item = crud.inventory_item.get(db, item_id)
    if not item:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Inventory item not found")
    return item


@router.get("/", response_model=List[schemas.InventoryItem])
def list_inventory_items(
    *,
    db: Session = Depends(get_db),
    ctx: deps.SessionContext = Depends(deps.get_session_context),
    department: Optional[Department] = None,
    search: Optional[str] = None,
) -> Any:
    return crud.inventory_item.get_filtered(db, department=department, search=search)


@router.post("/bulk-import", response_model=schemas.BulkImportResult, status_code=status.HTTP_201_CREATED)
def bulk_import_items(
    *,
    db: Session = Depends(get_db),
    ctx: deps.SessionContext = Depends(deps.require_item_manager),
    file: UploadFile = File(...),
) -> Any:
    """Create many items from a CSV or XLSX sheet. Either every row is stored or none."""
    content = file.file.read()
    try:
        parsed = parse_upload(file.filename or "", content)
    except BulkImportError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))

    for row in parsed.rows:
        deps.ensure_can_manage(ctx, row["department"])

    items = crud.inventory_item.create_many(db, rows=parsed.rows, user_id=ctx.user_id)
    alert_service.sync_groups(db, ((item.department, item.name) for item in items))
    logger.info(f"{ctx.email} imported {len(items)} items from {file.filename}")
    return {"imported": len(items), "skipped": parsed.skipped, "items": items}


@router.get("/{item_id}", response_model=schemas.InventoryItem)
def read_inventory_item(
    item_id: str,
    db: Session = Depends(get_db),
    ctx: deps.SessionContext = Depends(deps.get_session_context),
) -> Any:
    return _get_item_or_404(db, item_id)


@router.post("/", response_model=schemas.InventoryItem, status_code=status.HTTP_201_CREATED)
def create_inventory_item(
    *,
    db: Session = Depends(get_db),
    ctx: deps.SessionContext = Depends(deps.require_item_manager),
    item_in: schemas.InventoryItemCreate,
) -> Any:
    deps.ensure_can_manage(ctx, item_in.department)

    item = crud.inventory_item.create_item(db, obj_in=item_in.dict(), user_id=ctx.user_id)
    alert_service.sync_stock_alerts(db, item.department, item.name)
    logger.info(f"{ctx.email} added {item.quantity} x {item.name} to {item.department.value}")
    return item


@router.put("/{item_id}", response_model=schemas.InventoryItem)
def update_inventory_item(
    *,
    item_id: str,
    db: Session = Depends(get_db),
    ctx: deps.SessionContext = Depends(deps.get_session_context),
    item_in: schemas.InventoryItemUpdate,
) -> Any:
    item = _get_item_or_404(db, item_id)
    deps.ensure_can_manage(ctx, item.department)

    update_data = item_in.dict(exclude_unset=True)
    if update_data.get("department") is not None:
        # Moving an item needs rights over the destination too
        deps.ensure_can_manage(ctx, update_data["department"])
    for field in ("name", "department", "quantity"):
        if field in update_data and update_data[field] is None:
            raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=f"{field} cannot be empty")

    old_group = (item.department, item.name)
    item = crud.inventory_item.update_item(db, db_obj=item, obj_in=update_data, user_id=ctx.user_id)
    alert_service.sync_groups(db, [old_group, (item.department, item.name)])
    return item


@router.patch("/{item_id}/cabin", response_model=schemas.InventoryItem)
def update_cabin_number(
    *,
    item_id: str,
    db: Session = Depends(get_db),
    ctx: deps.SessionContext = Depends(deps.get_session_context),
    cabin_in: schemas.CabinUpdate,
) -> Any:
    item = _get_item_or_404(db, item_id)
    deps.ensure_can_manage(ctx, item.department)
    return crud.inventory_item.update_item(
        db, db_obj=item, obj_in={"cabin_number": cabin_in.cabin_number}, user_id=ctx.user_id
    )


@router.delete("/{item_id}", response_model=schemas.Message)
def delete_inventory_item(
    item_id: str,
    db: Session = Depends(get_db),
    ctx: deps.SessionContext = Depends(deps.get_session_context),
) -> Any:
    item = _get_item_or_404(db, item_id)
    deps.ensure_can_manage(ctx, item.department)

    department, name = item.department, item.name
    alert_service.release_item_alerts(db, item)
    crud.inventory_item.remove_item(db, db_obj=item, user_id=ctx.user_id)
    alert_service.sync_stock_alerts(db, department, name)
    logger.info(f"{ctx.email} deleted item {item_id} ({name}, {department.value})")
    return {"message": "Item deleted successfully"}
