from sqlalchemy import Column, Integer, DateTime
from datetime import datetime, timezone

from app.core.database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BaseModel(Base):
    __abstract__ = True

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
