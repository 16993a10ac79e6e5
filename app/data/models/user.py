from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime

from app.data.database import Base


class UserModel(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    # zawsze lowercase, unikalność bez rozróżniania wielkości liter
    email = Column(String(255), nullable=False, unique=True)
    name = Column(String(100), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
