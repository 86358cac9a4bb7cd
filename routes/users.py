from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
import logging

from utils.database import get_db
from utils.auth import get_current_user, get_password_hash, issue_token
from utils.permissions import is_admin, can_update_user
from models.user import User
from models.auth_token import AuthToken
from schemas.user import UserUpdate, UserResponse, AuthResponse, MessageResponse

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/user", tags=["users"])


@router.get("/me", response_model=UserResponse)
async def read_users_me(current_user: User = Depends(get_current_user)):
    return current_user


@router.get("", response_model=None)
async def list_users(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    page: int = Query(0, ge=0),
    limit: int = Query(10, ge=1, le=100),
    name: str = Query("*"),
):
    """
    List users for admins. Any other caller gets an empty object.
    """
    if not is_admin(current_user):
        return {}

    query = db.query(User)
    if name and name != "*":
        query = query.filter(User.name.ilike(name.replace("*", "%")))

    users = query.order_by(User.id).offset(page * limit).limit(limit).all()
    return [UserResponse.model_validate(u).model_dump(mode="json", by_alias=True) for u in users]


@router.put("/{user_id}", response_model=AuthResponse)
async def update_user(
    user_id: int,
    user_update: UserUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    if not can_update_user(current_user, user_id):
        logger.warning(f"User {current_user.id} attempted to update user {user_id}")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="unauthorized"
        )

    update_data = user_update.model_dump(exclude_unset=True, exclude_none=True)

    if 'email' in update_data and update_data['email'] != current_user.email:
        taken = db.query(User).filter(User.email == update_data['email']).first()
        if taken:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="email already registered"
            )

    # Special handling for password update: older tokens stop working
    if 'password' in update_data:
        current_user.hashed_password = get_password_hash(update_data.pop('password'))
        db.query(AuthToken).filter(AuthToken.user_id == current_user.id).delete()

    for field, value in update_data.items():
        setattr(current_user, field, value)

    try:
        db.flush()
        token = issue_token(db, current_user)
        db.commit()
        db.refresh(current_user)
    except IntegrityError:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="email already registered"
        )

    logger.info(f"User {current_user.id} updated their account")
    return {"user": current_user, "token": token}


@router.delete("/{user_id}", response_model=MessageResponse)
async def delete_user(user_id: int, current_user: User = Depends(get_current_user)):
    # Account deletion is not offered; the call succeeds without touching anything
    return {"message": "not implemented"}
