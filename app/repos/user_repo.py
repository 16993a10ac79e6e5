from sqlalchemy import select
from sqlalchemy.orm import Session

from app.data.models.user import UserModel
from app.repos.base import storage_errors


class UserRepo:
    def __init__(self, db: Session):
        self.db = db

    @storage_errors
    def get_user(self, user_id: int) -> UserModel | None:
        return self.db.get(UserModel, user_id)

    @storage_errors
    def get_user_by_email(self, email: str) -> UserModel | None:
        return self.db.execute(
            select(UserModel).where(UserModel.email == email.lower())
        ).scalar_one_or_none()

    @storage_errors
    def create_user(self, user: UserModel) -> UserModel:
        self.db.add(user)
        self.db.flush()
        return user

    @storage_errors
    def commit(self):
        self.db.commit()

    @storage_errors
    def ping(self) -> bool:
        self.db.execute(select(1))
        return True
