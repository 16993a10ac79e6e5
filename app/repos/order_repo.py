# app/repos/order_repo.py
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.data.models.order import OrderModel
from app.repos.base import storage_errors


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    @storage_errors
    def create_order(self, order: OrderModel) -> OrderModel:
        self.db.add(order)
        self.db.commit()
        self.db.refresh(order)
        return order

    @storage_errors
    def get_user_order(self, user_id: int, order_number: str) -> OrderModel | None:
        return self.db.execute(
            select(OrderModel).where(
                OrderModel.order_number == order_number,
                OrderModel.user_id == user_id,
            )
        ).scalar_one_or_none()

    @storage_errors
    def list_user_orders(self, user_id: int) -> list[OrderModel]:
        # najnowsze pierwsze, remis po kolejności wstawienia
        return list(
            self.db.execute(
                select(OrderModel)
                .where(OrderModel.user_id == user_id)
                .order_by(OrderModel.order_date.desc(), OrderModel.id.asc())
            ).scalars()
        )

    @storage_errors
    def save(self, order: OrderModel) -> OrderModel:
        self.db.commit()
        self.db.refresh(order)
        return order
