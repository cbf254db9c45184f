from datetime import datetime
from sqlalchemy import Column, String, DateTime, JSON
from sqlalchemy.ext.mutable import MutableDict
from sqlalchemy.orm import relationship

from rolemanager.db.base import Base


class Role(Base):
    __tablename__ = "roles"

    slug = Column(String(100), primary_key=True)
    name = Column(String(255), nullable=False)
    # capability name -> granted
    capabilities = Column(MutableDict.as_mutable(JSON), nullable=False, default=dict)
    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    users = relationship("User", back_populates="role")

    def __repr__(self) -> str:
        return f"<Role {self.slug}>"
