# app/main.py
import uvicorn

from app.api import create_app
from app.data.database import Base, engine
from app.data import models  # noqa: F401  rejestracja modeli w Base.metadata
from app.utils.logging import get_logger

logger = get_logger(__name__)


def init_db():
    logger.info(f"Models registered in Base.metadata: {list(Base.metadata.tables.keys())}")
    try:
        Base.metadata.create_all(bind=engine)
    except Exception:
        logger.exception("Failed to create tables")
        raise
    logger.info("Database tables ready")


init_db()
app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
