# app/repos/base.py
from functools import wraps

from sqlalchemy.exc import SQLAlchemyError

from app.domain.errors import StorageError
from app.utils.logging import get_logger

logger = get_logger(__name__)


def storage_errors(method):
    """Rollback sesji i zamiana błędu SQLAlchemy na StorageError, bez ponawiania."""

    @wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except SQLAlchemyError as e:
            logger.exception(f"Storage failure in {type(self).__name__}.{method.__name__}")
            self.db.rollback()
            raise StorageError(str(e)) from e

    return wrapper
