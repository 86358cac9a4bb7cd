from datetime import datetime, timedelta, timezone
from typing import List, Optional
import logging
import uuid

from jose import JWTError, jwt
from passlib.context import CryptContext
from fastapi import Depends, HTTPException, status, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from utils import config
from utils.database import get_db
from utils.permissions import is_admin
from models.user import User, UserRole, Role
from models.auth_token import AuthToken

logger = logging.getLogger(__name__)

# Password hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=config.BCRYPT_ROUNDS)

# Missing credentials are reported as 401 by get_current_user, not by the scheme
bearer_scheme = HTTPBearer(auto_error=False)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)

def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)

def token_signature(token: str) -> str:
    """Return the signature segment of a JWT, which is what gets persisted."""
    parts = token.split(".")
    return parts[2] if len(parts) == 3 else ""


def create_access_token(data: dict) -> str:
    to_encode = data.copy()
    now = datetime.now(timezone.utc)
    expire = now + timedelta(minutes=config.ACCESS_TOKEN_EXPIRE_MINUTES)
    # jti keeps two tokens issued in the same second distinct
    to_encode.update({"iat": now, "exp": expire, "jti": uuid.uuid4().hex})
    return jwt.encode(to_encode, config.SECRET_KEY, algorithm=config.ALGORITHM)


def issue_token(db: Session, user: User) -> str:
    """Sign a token for ``user`` and record it as live."""
    token = create_access_token({
        "sub": str(user.id),
        "name": user.name,
        "email": user.email,
        "roles": [
            {"role": r.role.value, "objectId": r.object_id} if r.object_id else {"role": r.role.value}
            for r in user.roles
        ],
    })
    db.add(AuthToken(token=token_signature(token), user_id=user.id))
    return token


def revoke_token(db: Session, token: str) -> bool:
    deleted = db.query(AuthToken).filter(AuthToken.token == token_signature(token)).delete()
    return deleted > 0


def create_user(db: Session, name: str, email: str, password: str, roles: Optional[List[UserRole]] = None) -> User:
    """Insert a user with a hashed password. Defaults to the diner role."""
    db_user = User(
        name=name,
        email=email,
        hashed_password=get_password_hash(password),
        roles=roles if roles else [UserRole(role=Role.DINER)],
    )
    db.add(db_user)
    db.flush()
    return db_user


def ensure_default_admin(db: Session) -> Optional[User]:
    """Create the bootstrap admin account if it does not exist yet."""
    if not config.DEFAULT_ADMIN_EMAIL:
        return None
    admin = db.query(User).filter(User.email == config.DEFAULT_ADMIN_EMAIL).first()
    if admin:
        return admin
    admin = create_user(
        db,
        config.DEFAULT_ADMIN_NAME,
        config.DEFAULT_ADMIN_EMAIL,
        config.DEFAULT_ADMIN_PASSWORD,
        roles=[UserRole(role=Role.ADMIN)],
    )
    db.commit()
    logger.info(f"Created default admin account {admin.email} (ID: {admin.id})")
    return admin


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="unauthorized",
        headers={"WWW-Authenticate": "Bearer"},
    )
    if credentials is None:
        raise credentials_exception

    token = credentials.credentials
    try:
        payload = jwt.decode(token, config.SECRET_KEY, algorithms=[config.ALGORITHM])
        user_id = int(payload.get("sub"))
    except (JWTError, TypeError, ValueError) as e:
        logger.debug(f"Rejected bearer token: {e}")
        raise credentials_exception

    live = db.query(AuthToken).filter(
        AuthToken.token == token_signature(token),
        AuthToken.user_id == user_id
    ).first()
    if live is None:
        raise credentials_exception

    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise credentials_exception

    request.state.user = user
    return user


def require_admin(detail: str):
    """Dependency admitting only admins. Resolved before the request body is validated."""
    async def admin_dependency(current_user: User = Depends(get_current_user)) -> User:
        if not is_admin(current_user):
            logger.warning(f"User {current_user.id} denied: {detail}")
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=detail,
            )
        return current_user
    return Depends(admin_dependency)


async def get_optional_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> Optional[User]:
    """Resolve the caller when a valid token is presented, otherwise None."""
    if credentials is None:
        return None
    try:
        return await get_current_user(request, credentials, db)
    except HTTPException:
        return None
