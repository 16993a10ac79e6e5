import re
from datetime import datetime, timezone

from sqlalchemy.orm import Session

from app.data.models.cart import CartModel
from app.data.models.user import UserModel
from app.domain.errors import AuthError, StorageError, ValidationError
from app.domain.schemas import UserCreate, UserRead
from app.repos.cart_repo import CartRepo
from app.repos.user_repo import UserRepo
from app.utils.logging import get_logger

logger = get_logger(__name__)

_EMAIL_RE = re.compile(r"^\S+@\S+\.\S+$")


class UserService:
    """Minimalny dostawca tożsamości: rejestracja i rozpoznanie użytkownika po id."""

    def __init__(self, db: Session):
        self.repo = UserRepo(db)
        self.cart_repo = CartRepo(db)

    def create_user(self, payload: UserCreate) -> UserRead:
        email = payload.email.strip().lower()
        name = payload.name.strip()

        if not _EMAIL_RE.match(email):
            raise ValidationError("Invalid email format")

        if len(name) < 2:
            raise ValidationError("Name must be at least 2 characters")

        if self.repo.get_user_by_email(email):
            raise ValidationError("Email already registered")

        user = self.repo.create_user(
            UserModel(email=email, name=name, created_at=datetime.now(timezone.utc))
        )
        # pusty koszyk od razu przy rejestracji, w tej samej transakcji
        self.cart_repo.add_cart(CartModel(user_id=user.id, version=1))
        self.repo.commit()

        logger.info(f"Registered user {user.id} ({email})")
        return UserRead.model_validate(user)

    def get_user(self, user_id: int) -> UserRead:
        user = self.repo.get_user(user_id)
        if not user:
            raise AuthError("User not found")
        return UserRead.model_validate(user)

    def authenticate(self, raw_user_id: str | None) -> int:
        if not raw_user_id:
            raise AuthError("No user id provided")
        try:
            user_id = int(raw_user_id)
        except ValueError:
            raise AuthError("Invalid user id")
        return self.get_user(user_id).id

    def database_connected(self) -> bool:
        try:
            return self.repo.ping()
        except StorageError:
            return False
