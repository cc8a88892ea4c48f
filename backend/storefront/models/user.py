"""
Users and client profiles
"""
import enum

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from storefront.core.database import Base


class UserType(str, enum.Enum):
    ADMIN = "ADMIN"
    CLIENT = "CLIENT"


class User(Base):
    """
    Login account. CLIENT users own a Client profile.
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    name = Column(String(255), nullable=False)
    type = Column(String(20), nullable=False, default=UserType.CLIENT.value, index=True)

    # Email verification
    email_verified = Column(Boolean, nullable=False, default=False)
    email_verify_token = Column(String(255), index=True)
    email_verify_token_expires = Column(DateTime(timezone=True))

    # SHA-256 of the current refresh token, cleared on logout
    refresh_token_hash = Column(String(64))

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    client = relationship("Client", back_populates="user", uselist=False, cascade="all, delete-orphan")
    reports = relationship("Report", back_populates="user")


class Client(Base):
    """
    Customer-facing profile attached to a CLIENT user
    """
    __tablename__ = "clients"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True, index=True)

    full_name = Column(String(255), nullable=False)
    contact = Column(String(100))
    address = Column(Text)
    status = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="client")
    cart_items = relationship("CartItem", back_populates="client", cascade="all, delete-orphan")
    orders = relationship("Order", back_populates="client")
