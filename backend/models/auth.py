"""
OGCS CRM - Auth & user models
"""

from pydantic import BaseModel
from typing import Optional


VALID_ROLES = ["admin", "sales"]


class UserLogin(BaseModel):
    email: str
    password: str


class UserResponse(BaseModel):
    id: str
    email: str
    name: str
    phone: Optional[str] = None
    role: str = "sales"
    is_active: bool = True
