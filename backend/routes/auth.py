# backend/routes/auth.py
import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from database import get_db
from models.users import Role, User
from schemas.common import ApiResponse
from schemas.user import TokenData, UserData, UserLogin, UserOut, UserRegister
from utils.errors import ConflictError, UnauthorizedError
from utils.hashing import get_password_hash, verify_password
from utils.tokenJWT import create_access_token, get_current_user

router = APIRouter(prefix="/auth", tags=["Auth"])
logger = logging.getLogger(__name__)


# Register a new user
@router.post("/register", response_model=ApiResponse[UserData], status_code=status.HTTP_201_CREATED)
def register(payload: UserRegister, db: Session = Depends(get_db)):
    username = payload.username.strip()
    email = payload.email.strip().lower() if payload.email else None

    # Check for existing username or email
    clauses = [func.lower(User.username) == username.lower()]
    if email:
        clauses.append(func.lower(User.email) == email)
    if db.query(User).filter(or_(*clauses)).first():
        raise ConflictError("User with this username or email already exists")

    new_user = User(
        username=username,
        email=email,
        password_hash=get_password_hash(payload.password),
        first_name=payload.first_name,
        last_name=payload.last_name,
        role=(payload.role or Role.CSR).value,
    )
    db.add(new_user)
    db.commit()
    db.refresh(new_user)

    logger.info("User %s registered with role %s", new_user.username, new_user.role)
    return {"message": "User registered successfully", "data": {"user": new_user}}


# Authenticate user and issue JWT token
@router.post("/login", response_model=ApiResponse[TokenData])
def login(payload: UserLogin, request: Request, db: Session = Depends(get_db)):
    db_user = db.query(User).filter(User.username == payload.username).first()

    # Validate credentials
    if not db_user or not verify_password(payload.password, db_user.password_hash):
        logger.info("Failed login for %s", payload.username)
        raise UnauthorizedError("Invalid credentials")
    if not db_user.is_active:
        raise UnauthorizedError("Account is deactivated")

    db_user.last_login = datetime.now(timezone.utc)
    db.commit()
    db.refresh(db_user)

    token = create_access_token(request.app.state.settings, data={"sub": db_user.username, "role": db_user.role})
    return {
        "message": "Login successful",
        "data": {"token": token, "token_type": "bearer", "user": UserOut.model_validate(db_user)},
    }


# Retrieve current authenticated user details
@router.get("/me", response_model=ApiResponse[UserData])
def me(current_user: User = Depends(get_current_user)):
    return {"data": {"user": current_user}}
