"""
Generated sales reports
"""
from sqlalchemy import JSON, Column, Date, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from storefront.core.database import Base


class Report(Base):
    __tablename__ = "reports"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), index=True)

    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)

    file_name = Column(String(255), nullable=False)
    file_path = Column(Text, nullable=False)
    file_url = Column(Text)  # Signed blob storage URL, when uploaded

    total_sales = Column(Numeric(14, 2), nullable=False, default=0)
    total_orders = Column(Integer, nullable=False, default=0)
    filters = Column(JSON)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)

    user = relationship("User", back_populates="reports")
