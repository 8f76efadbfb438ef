"""
User data models
"""

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, EmailStr
from datetime import datetime
from enum import Enum


class UserRole(str, Enum):
    """User role"""
    ADMIN = "admin"
    AUTHOR = "author"
    VIEWER = "viewer"


class UserCreate(BaseModel):
    """Registration request"""
    username: str = Field(..., min_length=3, max_length=64, description="Username")
    email: EmailStr = Field(..., description="Email")
    password: str = Field(..., min_length=6, description="Password")
    role: UserRole = Field(UserRole.VIEWER, description="Requested role")


class UserLogin(BaseModel):
    """Login request"""
    email: EmailStr
    password: str


class RoleUpdate(BaseModel):
    """Role change request"""
    role: UserRole


class UserModel(BaseModel):
    """Public user profile"""
    id: str
    username: str
    email: str
    phone: Optional[str] = None
    role: UserRole
    avatar_url: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class Principal(BaseModel):
    """Authenticated identity taken from the bearer token"""
    id: str
    username: str = ""
    role: UserRole = UserRole.VIEWER

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
