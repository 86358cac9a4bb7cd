from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from typing import List, Optional
import logging

from utils.database import get_db
from utils.auth import get_current_user, get_optional_user, require_admin
from utils.permissions import is_admin, can_manage_franchise, can_view_user_franchises
from models.user import User, UserRole, Role
from models.franchise import Franchise, Store
from schemas.franchise import (
    FranchiseCreate,
    FranchiseResponse,
    FranchiseListResponse,
    StoreCreate,
    StoreResponse,
)
from schemas.user import MessageResponse

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/franchise", tags=["franchises"])


@router.get("", response_model=FranchiseListResponse)
async def list_franchises(
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_optional_user),
    page: int = Query(0, ge=0),
    limit: int = Query(10, ge=1, le=100),
    name: str = Query("*"),
):
    """
    List franchises with their stores. Admin names are only shown to admins.
    """
    query = db.query(Franchise)
    if name and name != "*":
        query = query.filter(Franchise.name.ilike(name.replace("*", "%")))

    # Fetch one extra row to tell whether another page exists
    rows = query.order_by(Franchise.id).offset(page * limit).limit(limit + 1).all()
    more = len(rows) > limit

    franchises = [FranchiseResponse.model_validate(f) for f in rows[:limit]]
    if not is_admin(current_user):
        franchises = [f.model_copy(update={"admins": []}) for f in franchises]
    return {"franchises": franchises, "more": more}


@router.get("/{user_id}", response_model=List[FranchiseResponse])
async def list_user_franchises(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Franchises the given user administers.

    Callers that are neither an admin nor that user get an empty list rather
    than an error.
    """
    franchises = (
        db.query(Franchise)
        .join(UserRole, UserRole.object_id == Franchise.id)
        .filter(UserRole.user_id == user_id, UserRole.role == Role.FRANCHISEE)
        .order_by(Franchise.id)
        .all()
    )
    if not can_view_user_franchises(current_user, user_id):
        return []
    return franchises


@router.post("", response_model=FranchiseResponse)
async def create_franchise(
    franchise: FranchiseCreate,
    db: Session = Depends(get_db),
    current_user: User = require_admin("unable to create a franchise")
):
    # Resolve every admin before writing anything
    admins = []
    for ref in franchise.admins:
        admin = db.query(User).filter(User.email == ref.email).first()
        if not admin:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"unknown user for franchise admin {ref.email} provided"
            )
        if admin not in admins:
            admins.append(admin)

    try:
        db_franchise = Franchise(name=franchise.name)
        db.add(db_franchise)
        for admin in admins:
            admin.roles.append(UserRole(role=Role.FRANCHISEE, franchise=db_franchise))
        db.commit()
        db.refresh(db_franchise)
    except IntegrityError:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="a franchise with this name already exists"
        )
    except SQLAlchemyError as e:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Database error: {str(e)}"
        )

    logger.info(f"Franchise created: {db_franchise.name} (ID: {db_franchise.id}, admins: {[a.email for a in admins]})")
    return db_franchise


@router.delete("/{franchise_id}", response_model=MessageResponse)
async def delete_franchise(franchise_id: int, db: Session = Depends(get_db)):
    """
    Delete a franchise together with its stores and franchisee roles.
    """
    franchise = db.query(Franchise).filter(Franchise.id == franchise_id).first()
    if franchise:
        try:
            db.delete(franchise)
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Database error: {str(e)}"
            )
        logger.info(f"Franchise {franchise_id} deleted")
    return {"message": "franchise deleted"}


@router.post("/{franchise_id}/store", response_model=StoreResponse)
async def create_store(
    franchise_id: int,
    store: StoreCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    if not can_manage_franchise(current_user, franchise_id):
        logger.warning(f"User {current_user.id} attempted to create a store in franchise {franchise_id}")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="unable to create a store"
        )

    franchise = db.query(Franchise).filter(Franchise.id == franchise_id).first()
    if not franchise:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="franchise not found"
        )

    try:
        db_store = Store(franchise_id=franchise.id, name=store.name)
        db.add(db_store)
        db.commit()
        db.refresh(db_store)
    except SQLAlchemyError as e:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Database error: {str(e)}"
        )

    logger.info(f"Store created: {db_store.name} (ID: {db_store.id}, franchise: {franchise_id})")
    return db_store


def get_franchise_store(db: Session, franchise_id: int, store_id: int) -> Store:
    store = db.query(Store).filter(
        Store.id == store_id,
        Store.franchise_id == franchise_id
    ).first()
    if not store:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="store not found"
        )
    return store


@router.get("/{franchise_id}/store/{store_id}", response_model=StoreResponse)
async def get_store(franchise_id: int, store_id: int, db: Session = Depends(get_db)):
    return get_franchise_store(db, franchise_id, store_id)


@router.delete("/{franchise_id}/store/{store_id}", response_model=MessageResponse)
async def delete_store(
    franchise_id: int,
    store_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    if not can_manage_franchise(current_user, franchise_id):
        logger.warning(f"User {current_user.id} attempted to delete store {store_id} in franchise {franchise_id}")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="unable to delete a store"
        )

    store = get_franchise_store(db, franchise_id, store_id)
    db.delete(store)
    db.commit()
    logger.info(f"Store {store_id} deleted from franchise {franchise_id}")
    return {"message": "store deleted"}
