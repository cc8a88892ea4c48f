"""
Sales report schemas
"""
from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from storefront.domain.common import Money
from storefront.models.user import UserType


class GenerateReportRequest(BaseModel):
    start_date: date = Field(..., description="First day included (YYYY-MM-DD)")
    end_date: date = Field(..., description="Last day included (YYYY-MM-DD)")
    product_name: Optional[str] = Field(None, description="Case-insensitive product name filter")
    client_type: Optional[UserType] = Field(None, description="Only orders placed by users of this type")


class SalesRow(BaseModel):
    """One product line of a sales report"""
    product_id: int
    product_name: str
    total_orders: int
    total_quantity: int
    total_revenue: Money
    average_price: Money


class Report(BaseModel):
    id: int
    user_id: Optional[int] = None
    start_date: date
    end_date: date
    file_name: str
    file_path: str
    file_url: Optional[str] = None
    total_sales: Money
    total_orders: int
    filters: Optional[dict] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ReportSummary(BaseModel):
    total_orders: int
    total_revenue: Money
    product_count: int


class GeneratedReport(BaseModel):
    report: Report
    summary: ReportSummary
    rows: List[SalesRow] = []
