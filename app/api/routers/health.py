# app/api/routers/health.py
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.data.database import get_db
from app.domain.schemas import HealthOut
from app.services.user_service import UserService

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthOut)
def health(db: Session = Depends(get_db)):
    connected = UserService(db).database_connected()
    return HealthOut(
        success=True,
        message="Server is healthy",
        timestamp=datetime.now(timezone.utc),
        database="Connected" if connected else "Disconnected",
    )
