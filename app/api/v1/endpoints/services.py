from typing import Any, Dict, List, Optional
from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile, status
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from sqlalchemy.orm import Session
from app import crud, schemas
from app.api import deps
from app.db.database import get_db
from app.models.department import Department
from app.models.service import Service, ServiceStatus, ServiceType
from app.services import storage_service
import logging

logger = logging.getLogger(__name__)
router = APIRouter()


def _get_service_or_404(db: Session, service_id: str) -> Service:
    service = crud.service.get(db, service_id)
    if not service:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Service record not found")
    return service


def _submitted(**fields: Optional[str]) -> Dict[str, str]:
    # Multipart forms send blank inputs as empty strings
    return {key: value for key, value in fields.items() if value is not None and value != ""}


def _check_equipment(db: Session, equipment_id: Optional[str], department: Department) -> None:
    if not equipment_id:
        return
    equipment = crud.inventory_item.get(db, equipment_id)
    if equipment is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Equipment not found")
    if equipment.department != department:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Equipment belongs to another department"
        )


def _store_bill_photo(ctx: deps.SessionContext, bill_photo: Optional[UploadFile]) -> Optional[str]:
    if bill_photo is None or not bill_photo.filename:
        return None
    content = bill_photo.file.read()
    try:
        return storage_service.upload_bill_photo(ctx.user_id, bill_photo.filename, content)
    except storage_service.FileTooLargeError as e:
        raise HTTPException(status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, detail=str(e))
    except storage_service.StorageError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.get("/", response_model=List[schemas.Service])
def list_services(
    *,
    db: Session = Depends(get_db),
    ctx: deps.SessionContext = Depends(deps.get_session_context),
    service_type: Optional[ServiceType] = Query(None, alias="type"),
    service_status: Optional[ServiceStatus] = Query(None, alias="status"),
    department: Optional[Department] = None,
) -> Any:
    return crud.service.get_filtered(db, service_type=service_type, status=service_status, department=department)


@router.get("/{service_id}", response_model=schemas.Service)
def read_service(
    service_id: str,
    db: Session = Depends(get_db),
    ctx: deps.SessionContext = Depends(deps.get_session_context),
) -> Any:
    return _get_service_or_404(db, service_id)


@router.post("/", response_model=schemas.Service, status_code=status.HTTP_201_CREATED)
def create_service(
    *,
    db: Session = Depends(get_db),
    ctx: deps.SessionContext = Depends(deps.get_session_context),
    department: str = Form(...),
    service_type: str = Form(...),
    nature_of_service: str = Form(...),
    service_date: str = Form(...),
    technician_vendor_name: str = Form(...),
    equipment_id: Optional[str] = Form(None),
    service_status: Optional[str] = Form(None, alias="status"),
    cost: Optional[str] = Form(None),
    remarks: Optional[str] = Form(None),
    bill_photo: Optional[UploadFile] = File(None),
) -> Any:
    """Log a service event. Fields arrive as multipart form data next to the optional bill photo."""
    try:
        service_in = schemas.ServiceCreate(**_submitted(
            department=department,
            service_type=service_type,
            nature_of_service=nature_of_service,
            service_date=service_date,
            technician_vendor_name=technician_vendor_name,
            equipment_id=equipment_id,
            status=service_status,
            cost=cost,
            remarks=remarks,
        ))
    except ValidationError as e:
        raise RequestValidationError(e.errors())

    deps.ensure_can_manage(ctx, service_in.department)
    _check_equipment(db, service_in.equipment_id, service_in.department)

    data = service_in.dict()
    data["created_by"] = ctx.user_id

    service = crud.service.save_with_photo(
        db, obj_in=data, store_photo=lambda: _store_bill_photo(ctx, bill_photo)
    )
    logger.info(f"{ctx.email} logged {service.nature_of_service.value} service {service.id} ({service.department.value})")
    return service


@router.put("/{service_id}", response_model=schemas.Service)
def update_service(
    *,
    service_id: str,
    db: Session = Depends(get_db),
    ctx: deps.SessionContext = Depends(deps.get_session_context),
    department: Optional[str] = Form(None),
    service_type: Optional[str] = Form(None),
    nature_of_service: Optional[str] = Form(None),
    service_date: Optional[str] = Form(None),
    technician_vendor_name: Optional[str] = Form(None),
    equipment_id: Optional[str] = Form(None),
    service_status: Optional[str] = Form(None, alias="status"),
    cost: Optional[str] = Form(None),
    remarks: Optional[str] = Form(None),
    bill_photo: Optional[UploadFile] = File(None),
) -> Any:
    service = _get_service_or_404(db, service_id)
    deps.ensure_can_manage(ctx, service.department)

    try:
        service_in = schemas.ServiceUpdate(**_submitted(
            department=department,
            service_type=service_type,
            nature_of_service=nature_of_service,
            service_date=service_date,
            technician_vendor_name=technician_vendor_name,
            equipment_id=equipment_id,
            status=service_status,
            cost=cost,
            remarks=remarks,
        ))
    except ValidationError as e:
        raise RequestValidationError(e.errors())

    update_data = service_in.dict(exclude_unset=True)
    target_department = update_data.get("department") or service.department
    if target_department != service.department:
        deps.ensure_can_manage(ctx, target_department)
    _check_equipment(db, update_data.get("equipment_id", service.equipment_id), target_department)

    return crud.service.save_with_photo(
        db, obj_in=update_data, db_obj=service, store_photo=lambda: _store_bill_photo(ctx, bill_photo)
    )


@router.delete("/{service_id}", response_model=schemas.Message)
def delete_service(
    service_id: str,
    db: Session = Depends(get_db),
    ctx: deps.SessionContext = Depends(deps.get_session_context),
) -> Any:
    service = _get_service_or_404(db, service_id)
    deps.ensure_can_manage(ctx, service.department)
    crud.service.remove(db, id=service.id)
    logger.info(f"{ctx.email} deleted service record {service_id}")
    return {"message": "Service record deleted successfully"}
