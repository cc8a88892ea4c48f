"""
Sales Report Service
Aggregates historical orders into per-product sales reports

Purpose:
- Aggregate non-cancelled orders over a date range (end date inclusive)
- Write the rows to CSV with pandas
- Upload the file to blob storage when configured
- Keep a Report record pointing at the file
"""
import logging
import time
import uuid
from datetime import date, datetime, time as dt_time, timedelta, timezone
from pathlib import Path
from typing import List, Optional

import pandas as pd
from sqlalchemy.orm import Session

from storefront.core.config import Settings
from storefront.core.database import atomic
from storefront.core.errors import BadRequestError, NotFoundError, StorageError
from storefront.domain.common import quantize_money
from storefront.domain.report import GenerateReportRequest, GeneratedReport, ReportSummary, SalesRow
from storefront.domain.report import Report as ReportSchema
from storefront.models.report import Report
from storefront.repositories.report_repository import ReportRepository
from storefront.services.storage_service import StorageService

logger = logging.getLogger(__name__)

# Column order and headers of the exported CSV
CSV_COLUMNS = {
    "product_id": "Product ID",
    "product_name": "Product Name",
    "total_orders": "Total Orders",
    "total_quantity": "Total Quantity",
    "total_revenue": "Total Revenue",
    "average_price": "Average Price",
}


def day_bounds(start_date: date, end_date: date):
    """Half-open UTC datetime range covering start_date through end_date"""
    start = datetime.combine(start_date, dt_time.min, tzinfo=timezone.utc)
    end = datetime.combine(end_date + timedelta(days=1), dt_time.min, tzinfo=timezone.utc)
    return start, end


class ReportService:
    def __init__(self, db: Session, settings: Settings, storage: Optional[StorageService] = None):
        self.db = db
        self.settings = settings
        self.storage = storage or StorageService(settings)
        self.reports = ReportRepository(db)

    def generate_report(self, data: GenerateReportRequest, user_id: Optional[int] = None) -> GeneratedReport:
        """
        Build, export and record a sales report

        Args:
            data: Date range and optional product name / client type filters
            user_id: User requesting the report

        Returns:
            GeneratedReport with the stored report, summary and rows

        Raises:
            BadRequestError: end_date before start_date
            StorageError: upload to blob storage failed
        """
        if data.end_date < data.start_date:
            raise BadRequestError("end_date must be on or after start_date")

        start, end = day_bounds(data.start_date, data.end_date)

        rows = self.reports.sales_by_product(start, end, data.product_name, data.client_type)
        total_orders, total_revenue = self.reports.sales_totals(start, end, data.product_name, data.client_type)
        total_revenue = quantize_money(total_revenue)

        for row in rows:
            row["total_revenue"] = quantize_money(row["total_revenue"])
            row["average_price"] = quantize_money(row["average_price"])

        file_name = f"sales_report_{int(time.time() * 1000)}_{uuid.uuid4().hex}.csv"
        key = f"reports/{file_name}"
        file_path = self._write_csv(rows, file_name)
        file_url = None

        try:
            file_url = self.storage.upload(key, file_path.read_bytes(), "text/csv")
            report_id = self._save_report(data, user_id, file_name, file_path, file_url, total_revenue, total_orders)
        except Exception:
            self._discard_files(file_path, key if file_url else None)
            raise

        logger.info(
            f"Report {report_id} generated: {len(rows)} products, "
            f"{total_orders} orders, revenue {total_revenue}"
        )

        return GeneratedReport(
            report=ReportSchema.model_validate(self.get_report(report_id)),
            summary=ReportSummary(
                total_orders=total_orders,
                total_revenue=total_revenue,
                product_count=len(rows),
            ),
            rows=[SalesRow(**row) for row in rows],
        )

    def _save_report(self, data, user_id, file_name, file_path, file_url, total_revenue, total_orders) -> int:
        with atomic(self.db):
            report = self.reports.add(
                Report(
                    user_id=user_id,
                    start_date=data.start_date,
                    end_date=data.end_date,
                    file_name=file_name,
                    file_path=str(file_path),
                    file_url=file_url,
                    total_sales=total_revenue,
                    total_orders=total_orders,
                    filters=data.model_dump(mode="json"),
                )
            )
            report_id = report.id
        return report_id

    def _discard_files(self, file_path: Path, key: Optional[str]):
        """Remove the local CSV and, if it was uploaded, the blob"""
        file_path.unlink(missing_ok=True)
        if key is None:
            return
        try:
            self.storage.delete(key)
        except StorageError as e:
            logger.warning(f"Could not remove orphaned blob {key}: {e.detail}")

    def _write_csv(self, rows: List[dict], file_name: str) -> Path:
        reports_dir = Path(self.settings.REPORTS_DIR)
        reports_dir.mkdir(parents=True, exist_ok=True)
        file_path = reports_dir / file_name

        df = pd.DataFrame(rows, columns=list(CSV_COLUMNS))
        df = df.rename(columns=CSV_COLUMNS)
        df.to_csv(file_path, index=False)

        return file_path

    def get_report(self, report_id: int) -> Report:
        report = self.reports.find_by_id(report_id)
        if report is None:
            raise NotFoundError(f"Report with ID {report_id} not found")
        return report

    def list_reports(self) -> List[Report]:
        return self.reports.find_all()
