"""
Authentication API router
"""
import logging
from datetime import datetime
from typing import Any, Optional
from fastapi import APIRouter, Depends, Response
from fastapi.security import APIKeyHeader
from sqlalchemy.orm import Session
from werkzeug.security import check_password_hash, generate_password_hash
from foodorder.core.config import settings
from foodorder.core.database import commit, get_db
from foodorder.core.errors import Conflict, Forbidden, Unauthorized
from foodorder.core.sessions import SessionStore, get_session_store
from foodorder.models.user import (
    AuthResponse, User, UserCreate, UserLogin, UserPublic, UserUpdate
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["authentication"])

session_header = APIKeyHeader(name=settings.SESSION_HEADER, auto_error=False)

def _start_session(user: User, response: Response, sessions: SessionStore) -> AuthResponse:
    snapshot = UserPublic.model_validate(user)
    token = sessions.create(snapshot)
    response.headers[settings.SESSION_HEADER] = token
    return AuthResponse(session_id=token, user=snapshot)

@router.post("/register", response_model=AuthResponse)
async def register_user(
    user_data: UserCreate,
    response: Response,
    db: Session = Depends(get_db),
    sessions: SessionStore = Depends(get_session_store)
) -> Any:
    """Register a new customer and log them in"""
    email = user_data.email.strip().lower()
    existing = db.query(User).filter(User.email == email).first()
    if existing:
        if existing.is_deleted:
            raise Forbidden("This email is associated with a deactivated account. Please contact support.")
        raise Conflict("User already exists with this email")

    user = User(
        email=email,
        first_name=user_data.first_name,
        last_name=user_data.last_name,
        phone=user_data.phone,
        hashed_password=generate_password_hash(user_data.password),
        role="customer",
    )
    db.add(user)
    commit(db, "register")
    db.refresh(user)

    logger.info(f"Registered user {user.id}")
    return _start_session(user, response, sessions)

@router.post("/login", response_model=AuthResponse)
async def login(
    credentials: UserLogin,
    response: Response,
    db: Session = Depends(get_db),
    sessions: SessionStore = Depends(get_session_store)
) -> Any:
    """Check credentials and open a session"""
    user = db.query(User).filter(User.email == credentials.email.strip().lower()).first()
    if not user:
        raise Unauthorized("Invalid email or password")

    if user.is_deleted:
        raise Forbidden("Your account has been deactivated. Please contact support.")

    if not check_password_hash(user.hashed_password, credentials.password):
        raise Unauthorized("Invalid email or password")

    logger.info(f"User {user.id} logged in")
    return _start_session(user, response, sessions)

@router.post("/logout")
async def logout(
    token: Optional[str] = Depends(session_header),
    sessions: SessionStore = Depends(get_session_store)
) -> Any:
    """Drop the caller's session"""
    if token:
        sessions.invalidate(token)
    return {"message": "Successfully logged out"}

async def get_current_user(
    token: Optional[str] = Depends(session_header),
    sessions: SessionStore = Depends(get_session_store)
) -> UserPublic:
    """Resolve the session header to a user snapshot"""
    user = sessions.get(token) if token else None
    if user is None:
        raise Unauthorized()
    return user

async def get_current_admin(
    current_user: UserPublic = Depends(get_current_user)
) -> UserPublic:
    """Same as get_current_user but only for admins"""
    if not current_user.is_admin:
        raise Forbidden("Admin access required")
    return current_user

@router.get("/user", response_model=Optional[UserPublic])
async def read_current_user(
    token: Optional[str] = Depends(session_header),
    db: Session = Depends(get_db),
    sessions: SessionStore = Depends(get_session_store)
) -> Any:
    """Current user, or null when not logged in"""
    user = sessions.get(token) if token else None
    if user is None:
        return None

    # Drop sessions whose account was deleted since login
    record = db.query(User).filter(User.id == user.id).first()
    if record is None or record.is_deleted:
        sessions.invalidate(token)
        return None

    return user

@router.patch("/profile", response_model=UserPublic)
async def update_profile(
    user_update: UserUpdate,
    token: Optional[str] = Depends(session_header),
    current_user: UserPublic = Depends(get_current_user),
    db: Session = Depends(get_db),
    sessions: SessionStore = Depends(get_session_store)
) -> Any:
    """Update the caller's profile and the snapshot held by their session"""
    user = db.query(User).filter(User.id == current_user.id).first()
    if user is None or user.is_deleted:
        sessions.invalidate(token)
        raise Unauthorized()

    for field, value in user_update.model_dump(exclude_unset=True).items():
        setattr(user, field, value)
    user.updated_at = datetime.now()

    commit(db, "update_profile")
    db.refresh(user)

    snapshot = UserPublic.model_validate(user)
    sessions.refresh(token, snapshot)
    return snapshot
