from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from typing import Optional
import logging

from utils.database import get_db
from utils.auth import (
    bearer_scheme,
    create_user,
    issue_token,
    revoke_token,
    verify_password,
)
from models.user import User
from schemas.user import UserCreate, LoginRequest, AuthResponse, MessageResponse

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("", response_model=AuthResponse)
async def register(user: UserCreate, db: Session = Depends(get_db)):
    logger.info(f"Attempting to register user with email: {user.email}")

    existing_user = db.query(User).filter(User.email == user.email).first()
    if existing_user:
        logger.warning(f"Registration failed: Email already registered: {user.email}")
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="email already registered"
        )

    try:
        db_user = create_user(db, user.name, user.email, user.password)
        token = issue_token(db, db_user)
        db.commit()
        db.refresh(db_user)
    except IntegrityError:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="email already registered"
        )
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Unexpected error registering user {user.email}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="failed to register user"
        )

    logger.info(f"User registered successfully: {db_user.email} (ID: {db_user.id})")
    return {"user": db_user, "token": token}


@router.put("", response_model=AuthResponse)
async def login(login_data: LoginRequest, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.email == login_data.email).first()
    if not user or not verify_password(login_data.password, user.hashed_password):
        logger.warning(f"Failed login attempt for {login_data.email}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="invalid credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    token = issue_token(db, user)
    db.commit()
    return {"user": user, "token": token}


@router.delete("", response_model=MessageResponse)
async def logout(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db)
):
    """Revoke the presented token. Unknown or missing tokens are ignored."""
    if credentials is not None and revoke_token(db, credentials.credentials):
        db.commit()
        logger.info("Token revoked")
    return {"message": "logout successful"}
