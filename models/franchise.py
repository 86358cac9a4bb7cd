from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from utils.database import Base

class Franchise(Base):
    __tablename__ = "franchises"
    # Ids of deleted franchises are never handed out again
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, index=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    stores = relationship("Store", back_populates="franchise", cascade="all, delete-orphan", order_by="Store.id")
    # Franchisee roles scoped to this franchise; removed along with it
    admin_roles = relationship("UserRole", back_populates="franchise", cascade="all", order_by="UserRole.id")

    @property
    def admins(self):
        """Franchise admins in the order they were assigned."""
        return [role.user for role in self.admin_roles]

class Store(Base):
    __tablename__ = "stores"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True)
    franchise_id = Column(Integer, ForeignKey("franchises.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    franchise = relationship("Franchise", back_populates="stores")
