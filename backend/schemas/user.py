from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from models.users import Role
from schemas.common import ORMBase


# Schema for user registration requests
class UserRegister(BaseModel):
    username: str = Field(min_length=3, max_length=50, pattern=r"^[A-Za-z0-9]+$")
    email: Optional[EmailStr] = None
    password: str = Field(min_length=6)
    first_name: Optional[str] = Field(default=None, min_length=1, max_length=50)
    last_name: Optional[str] = Field(default=None, min_length=1, max_length=50)
    role: Optional[Role] = None


# Schema for user authentication credentials
class UserLogin(BaseModel):
    username: str
    password: str


# Output schema for user profile details; the password hash is never exposed
class UserOut(ORMBase):
    id: int
    username: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role: str
    is_active: bool
    last_login: Optional[datetime] = None


class UserData(BaseModel):
    user: UserOut


# Schema for JWT authentication token response
class TokenData(BaseModel):
    token: str
    token_type: str = "bearer"
    user: UserOut
