"""Esquemas de perfil (campos sueltos) e insights de usuarios."""
from typing import List, Optional

from pydantic import BaseModel, Field


# POST y PUT exigen el campo; para vaciarlo se usa DELETE
class NameIn(BaseModel):
    name: str = Field(max_length=120)


class MobileIn(BaseModel):
    mobile: str = Field(max_length=32)


class AddressIn(BaseModel):
    address: str = Field(max_length=300)


class UserSummary(BaseModel):
    id: str
    email: str
    name: Optional[str] = None
    mobile: Optional[str] = None
    address: Optional[str] = None
    created_at: Optional[str] = None


class UsersCountOut(BaseModel):
    count: int


class UsersPageOut(BaseModel):
    items: List[UserSummary]
    page: int
    page_size: int
