"""
Sales report API endpoints (manage:reports)
"""
from typing import List

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from storefront.api.dependencies import get_settings
from storefront.core.auth import TokenUser, require_permission
from storefront.core.config import Settings
from storefront.core.database import get_db
from storefront.domain.report import GeneratedReport, GenerateReportRequest, Report
from storefront.services.report_service import ReportService

router = APIRouter()

manage_reports = require_permission("manage:reports")


def get_report_service(
    request: Request,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> ReportService:
    return ReportService(db, settings, request.app.state.storage_service)


@router.post("", response_model=GeneratedReport, status_code=status.HTTP_201_CREATED)
def generate_report(
    data: GenerateReportRequest,
    user: TokenUser = Depends(manage_reports),
    service: ReportService = Depends(get_report_service),
):
    """
    Aggregate sales for a date range and export them as CSV

    The end date is inclusive. Cancelled orders are excluded.
    """
    return service.generate_report(data, user.id)


@router.get("", response_model=List[Report])
def list_reports(
    _: TokenUser = Depends(manage_reports),
    service: ReportService = Depends(get_report_service),
):
    return [Report.model_validate(r) for r in service.list_reports()]


@router.get("/{report_id}", response_model=Report)
def get_report(
    report_id: int,
    _: TokenUser = Depends(manage_reports),
    service: ReportService = Depends(get_report_service),
):
    return Report.model_validate(service.get_report(report_id))
