"""
User and client profile schemas
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from storefront.models.user import UserType


class User(BaseModel):
    id: int
    email: str
    name: str
    type: UserType
    email_verified: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class UserCreate(BaseModel):
    """Admin-side account creation; CLIENT accounts may carry profile fields"""
    email: EmailStr
    password: str = Field(..., min_length=6)
    name: str = Field(..., min_length=1)
    type: UserType
    contact: Optional[str] = None
    address: Optional[str] = None


class UserUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    email: Optional[EmailStr] = None
    type: Optional[UserType] = None


class ProfileUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    contact: Optional[str] = Field(None, min_length=1)
    address: Optional[str] = Field(None, min_length=1)


class ClientUser(BaseModel):
    id: int
    name: str
    email: str
    type: UserType

    model_config = ConfigDict(from_attributes=True)


class ClientCreate(BaseModel):
    full_name: str = Field(..., min_length=1)
    contact: str = Field(..., min_length=1)
    address: str = Field(..., min_length=1)
    user_id: int


class ClientUpdate(BaseModel):
    full_name: Optional[str] = Field(None, min_length=1)
    contact: Optional[str] = Field(None, min_length=1)
    address: Optional[str] = Field(None, min_length=1)
    status: Optional[bool] = None


class Client(BaseModel):
    id: int
    user_id: int
    full_name: str
    contact: Optional[str] = None
    address: Optional[str] = None
    status: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    user: Optional[ClientUser] = None

    model_config = ConfigDict(from_attributes=True)


class Profile(BaseModel):
    """Current user with their client profile, if any"""
    user: User
    client: Optional[Client] = None
