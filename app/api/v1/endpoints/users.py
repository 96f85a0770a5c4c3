from dataclasses import asdict
from typing import Any, List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from app import crud, schemas
from app.api import deps
from app.db.database import get_db
from app.models.profile import Profile
from app.models.registration_request import RequestStatus
from app.models.user_roles import AppRole
from app.services import approval_service
import logging

logger = logging.getLogger(__name__)
router = APIRouter()


def _with_role(db: Session, profile: Profile) -> schemas.UserWithRole:
    user_role = crud.user_role.get_by_user(db, user_id=profile.id)
    return schemas.UserWithRole(
        id=profile.id,
        email=profile.email,
        full_name=profile.full_name,
        department=profile.department,
        approved=profile.approved,
        role=user_role.role if user_role else AppRole.STAFF,
        role_department=(user_role.department if user_role and user_role.department else profile.department),
        created_at=profile.created_at,
    )


def _get_profile_or_404(db: Session, user_id: str) -> Profile:
    profile = crud.profile.get(db, user_id)
    if not profile:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return profile


def _approval_error_to_http(e: approval_service.ApprovalError) -> HTTPException:
    if isinstance(e, approval_service.RequestNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.get("/requests", response_model=List[schemas.RegistrationRequestOut])
def list_registration_requests(
    db: Session = Depends(get_db),
    ctx: deps.SessionContext = Depends(deps.require_admin),
    request_status: Optional[RequestStatus] = Query(None, alias="status"),
) -> Any:
    return crud.registration_request.get_all(db, status=request_status.value if request_status else None)


@router.post("/requests/{request_id}/approve", response_model=schemas.ApprovalResult)
def approve_registration_request(
    request_id: str,
    db: Session = Depends(get_db),
    ctx: deps.SessionContext = Depends(deps.require_admin),
) -> Any:
    try:
        outcome = approval_service.approve_request(db, request_id, reviewer_id=ctx.user_id)
    except approval_service.ApprovalError as e:
        raise _approval_error_to_http(e)
    return schemas.ApprovalResult(**asdict(outcome))


@router.post("/requests/{request_id}/reject", response_model=schemas.RegistrationRequestOut)
def reject_registration_request(
    request_id: str,
    db: Session = Depends(get_db),
    ctx: deps.SessionContext = Depends(deps.require_admin),
) -> Any:
    try:
        return approval_service.reject_request(db, request_id, reviewer_id=ctx.user_id)
    except approval_service.ApprovalError as e:
        raise _approval_error_to_http(e)


@router.delete("/requests/{request_id}", response_model=schemas.Message)
def delete_registration_request(
    request_id: str,
    db: Session = Depends(get_db),
    ctx: deps.SessionContext = Depends(deps.require_admin),
) -> Any:
    try:
        approval_service.delete_request(db, request_id)
    except approval_service.ApprovalError as e:
        raise _approval_error_to_http(e)
    return {"message": "Request deleted"}


@router.get("/active", response_model=List[schemas.UserWithRole])
def list_active_users(
    db: Session = Depends(get_db),
    ctx: deps.SessionContext = Depends(deps.require_admin),
) -> Any:
    return [_with_role(db, profile) for profile in crud.profile.get_approved(db)]


@router.get("/deactivated", response_model=List[schemas.UserWithRole])
def list_deactivated_users(
    db: Session = Depends(get_db),
    ctx: deps.SessionContext = Depends(deps.require_admin),
) -> Any:
    return [_with_role(db, profile) for profile in crud.profile.get_deactivated(db)]


@router.put("/{user_id}/role", response_model=schemas.UserWithRole)
def update_user_role(
    *,
    user_id: str,
    db: Session = Depends(get_db),
    ctx: deps.SessionContext = Depends(deps.require_admin),
    role_in: schemas.RoleUpdate,
) -> Any:
    profile = _get_profile_or_404(db, user_id)
    department = role_in.department or profile.department
    if role_in.role == AppRole.HOD and department is None:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="A head of department needs a department"
        )

    crud.user_role.upsert(db, user_id=user_id, role=role_in.role, department=department)
    profile = crud.profile.update(db, db_obj=profile, obj_in={"department": department})
    logger.info(f"{ctx.email} set role of {profile.email} to {role_in.role.value}")
    return _with_role(db, profile)


def _set_approved(db: Session, ctx: deps.SessionContext, user_id: str, approved: bool) -> schemas.UserWithRole:
    if user_id == ctx.user_id and not approved:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="You cannot deactivate your own account")
    profile = _get_profile_or_404(db, user_id)
    profile = crud.profile.set_approved(db, profile=profile, approved=approved)
    logger.info(f"{ctx.email} {'reactivated' if approved else 'deactivated'} {profile.email}")
    return _with_role(db, profile)


@router.post("/{user_id}/deactivate", response_model=schemas.UserWithRole)
def deactivate_user(
    user_id: str,
    db: Session = Depends(get_db),
    ctx: deps.SessionContext = Depends(deps.require_admin),
) -> Any:
    return _set_approved(db, ctx, user_id, approved=False)


@router.post("/{user_id}/reactivate", response_model=schemas.UserWithRole)
def reactivate_user(
    user_id: str,
    db: Session = Depends(get_db),
    ctx: deps.SessionContext = Depends(deps.require_admin),
) -> Any:
    return _set_approved(db, ctx, user_id, approved=True)
