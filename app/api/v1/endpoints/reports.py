from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import Response
from sqlalchemy.orm import Session
from app.api import deps
from app.db.database import get_db
from app.models.department import Department
from app.services import report_definitions
from app.services.report_definitions import InventoryReportType
from app.services.report_export import NoReportDataError, RenderedReport, ReportFormat
import logging

logger = logging.getLogger(__name__)
router = APIRouter()


def _download(report: RenderedReport) -> Response:
    return Response(
        content=report.content,
        media_type=report.media_type,
        headers={"Content-Disposition": f'attachment; filename="{report.filename}"'},
    )


def _no_data(e: NoReportDataError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.get("/inventory")
def inventory_report(
    db: Session = Depends(get_db),
    ctx: deps.SessionContext = Depends(deps.get_session_context),
    department: Optional[Department] = None,
    report_type: InventoryReportType = InventoryReportType.INVENTORY,
    fmt: ReportFormat = Query(ReportFormat.CSV, alias="format"),
) -> Response:
    try:
        report = report_definitions.inventory_report(db, fmt, department=department, report_type=report_type)
    except NoReportDataError as e:
        raise _no_data(e)
    logger.info(f"{ctx.email} exported {report.filename}")
    return _download(report)


@router.get("/services")
def services_report(
    db: Session = Depends(get_db),
    ctx: deps.SessionContext = Depends(deps.get_session_context),
    department: Optional[Department] = None,
    fmt: ReportFormat = Query(ReportFormat.CSV, alias="format"),
) -> Response:
    try:
        report = report_definitions.services_report(db, fmt, department=department)
    except NoReportDataError as e:
        raise _no_data(e)
    logger.info(f"{ctx.email} exported {report.filename}")
    return _download(report)


@router.get("/alerts")
def alerts_report(
    db: Session = Depends(get_db),
    ctx: deps.SessionContext = Depends(deps.get_session_context),
    fmt: ReportFormat = Query(ReportFormat.CSV, alias="format"),
) -> Response:
    try:
        report = report_definitions.alerts_report(db, fmt)
    except NoReportDataError as e:
        raise _no_data(e)
    logger.info(f"{ctx.email} exported {report.filename}")
    return _download(report)
