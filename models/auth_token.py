from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from utils.database import Base

class AuthToken(Base):
    """A bearer token that is still live. Logging out deletes the row."""
    __tablename__ = "auth_tokens"

    id = Column(Integer, primary_key=True, index=True)
    # Signature segment of the JWT
    token = Column(String, unique=True, index=True, nullable=False)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    user = relationship("User", back_populates="tokens")
