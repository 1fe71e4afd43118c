# utils/tokenJWT.py
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, ExpiredSignatureError, jwt
from sqlalchemy.orm import Session

from config import Settings
from database import get_db
from models.users import Role, User
from utils.errors import ForbiddenError, UnauthorizedError

# Authorization scheme; auto_error disabled so missing tokens go through our own 401 envelope
bearer_scheme = HTTPBearer(auto_error=False)


# Generate a new JWT access token
def create_access_token(settings: Settings, data: dict, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


# Retrieve the currently authenticated user based on the JWT token
def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    if credentials is None:
        raise UnauthorizedError("Access token required")

    settings: Settings = request.app.state.settings
    try:
        payload = jwt.decode(credentials.credentials, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except ExpiredSignatureError:
        raise UnauthorizedError("Token expired")
    except JWTError:
        raise UnauthorizedError("Invalid token")

    username = payload.get("sub")
    # Ensure username is present in the token payload
    if username is None:
        raise UnauthorizedError("Invalid token")

    user = db.query(User).filter(User.username == username).first()
    if user is None or not user.is_active:
        raise UnauthorizedError("User not found or inactive")
    return user


# Dependency factory for Role-Based Access Control
def role_required(*allowed_roles):
    def _checker(current_user: User = Depends(get_current_user)) -> User:
        if allowed_roles and current_user.role not in allowed_roles:
            raise ForbiddenError("Insufficient permissions")
        return current_user
    return _checker


# Create/update access for customer-facing staff, delete access for team leads and admins
require_staff = role_required(Role.CSR.value, Role.TL.value, Role.ADMIN.value)
require_manager = role_required(Role.TL.value, Role.ADMIN.value)
