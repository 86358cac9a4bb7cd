from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Enum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from utils.database import Base
import enum

class Role(str, enum.Enum):
    DINER = "diner"             # Default role: can order pizza
    FRANCHISEE = "franchisee"   # Admin of one franchise (scoped by object_id)
    ADMIN = "admin"             # Global administrator

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    roles = relationship(
        "UserRole",
        back_populates="user",
        cascade="all, delete-orphan",
        order_by="UserRole.id",
        lazy="selectin",
    )
    tokens = relationship("AuthToken", back_populates="user", cascade="all, delete-orphan")
    orders = relationship("Order", back_populates="user", cascade="all, delete-orphan")

class UserRole(Base):
    __tablename__ = "user_roles"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    role = Column(Enum(Role, name="role"), nullable=False)
    # Franchise the role is scoped to; only set for franchisee roles
    object_id = Column(Integer, ForeignKey("franchises.id", ondelete="CASCADE"), nullable=True, index=True)

    user = relationship("User", back_populates="roles")
    franchise = relationship("Franchise", back_populates="admin_roles")
