from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, JSON
from sqlalchemy.orm import relationship
from app.core.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    login = Column(String, nullable=False, unique=True, index=True)
    email = Column(String, nullable=True)
    capabilities = Column(JSON, default=list)  # e.g. ["manage_woocommerce"]
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    orders = relationship("Order", back_populates="customer")

    def has_capability(self, capability: str) -> bool:
        return capability in (self.capabilities or [])
