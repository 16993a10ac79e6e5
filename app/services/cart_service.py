# app/services/cart_service.py
from datetime import datetime, timezone
from decimal import Decimal
from typing import Dict, Any

from sqlalchemy.orm import Session

from app.data.models.cart import CartModel
from app.data.models.cart_item import CartItemModel
from app.domain.errors import ConcurrencyError, NotFoundError, ValidationError
from app.domain.money import parse_price
from app.repos.cart_repo import CartRepo
from app.services.lock_service import LockService
from app.utils.logging import get_logger

logger = get_logger(__name__)


def cart_totals(items) -> Dict[str, Any]:
    # zawsze liczone od nowa z aktualnych pozycji
    return {
        "total_items": sum(i.quantity for i in items),
        "total_price": sum((i.price * i.quantity for i in items), Decimal("0.00")),
    }


class CartService:
    """
    Use case'y dla koszyka, jeden koszyk na użytkownika.
    query (get) tylko odczyt, commands (add, update, remove, clear) pod lockiem użytkownika
    + optimistic locking na kolumnie version
    """

    def __init__(self, db: Session, lock_service: LockService):
        self.repo = CartRepo(db)
        self.lock_service = lock_service

    #query - odczyt
    def get_cart(self, user_id: int) -> Dict[str, Any]:
        cart = self.repo.get_cart_by_user(user_id)

        if not cart:
            #get-or-create, brak koszyka to nie błąd
            with self.lock_service.user_lock(user_id):
                cart = self._get_or_create(user_id)

        return self._view(cart)

    #commands
    def create_cart(self, user_id: int) -> CartModel:
        with self.lock_service.user_lock(user_id):
            return self._get_or_create(user_id)

    def add_item(
        self,
        user_id: int,
        product_id: str | None,
        name: str | None,
        price,
        image: str | None = None,
        quantity: int = 1,
    ) -> Dict[str, Any]:
        if not product_id or not name or price is None:
            raise ValidationError("Product ID, name, and price are required")

        if quantity is None or quantity < 1:
            raise ValidationError("Quantity must be at least 1")

        unit_price = parse_price(price)
        product_id = str(product_id)

        with self.lock_service.user_lock(user_id):
            cart = self._get_or_create(user_id)
            now = datetime.now(timezone.utc)

            existing_item = self.repo.get_cart_item(cart.id, product_id)

            if existing_item:
                # bez nadpisywania ceny i nazwy, tylko ilość
                logger.info(
                    f"Produkt {product_id} już jest w koszyku {cart.id}, zwiększam ilość "
                    f"z {existing_item.quantity} do {existing_item.quantity + quantity}"
                )
                existing_item.quantity += quantity
                existing_item.updated_at = now
            else:
                logger.info(f"Dodaję nowy produkt {product_id} do koszyka {cart.id}")
                self.repo.add_cart_item(
                    CartItemModel(
                        cart_id=cart.id,
                        product_id=product_id,
                        name=name,
                        price=unit_price,
                        image=image,
                        quantity=quantity,
                        added_at=now,
                        updated_at=now,
                    )
                )

            self._bump_version(cart, {})

        return self.get_cart(user_id)

    def update_item_quantity(self, user_id: int, product_id: str, quantity: int | None) -> Dict[str, Any]:
        if quantity is None or quantity < 0:
            raise ValidationError("Valid quantity is required")

        with self.lock_service.user_lock(user_id):
            cart, item = self._require_item(user_id, product_id)

            if quantity == 0:
                logger.info(f"Ilość 0, usuwam produkt {product_id} z koszyka {cart.id}")
                self.repo.delete_cart_item(item)
            else:
                item.quantity = quantity
                item.updated_at = datetime.now(timezone.utc)

            self._bump_version(cart, {})

        return self.get_cart(user_id)

    def remove_item(self, user_id: int, product_id: str) -> Dict[str, Any]:
        with self.lock_service.user_lock(user_id):
            cart, item = self._require_item(user_id, product_id)

            logger.info(f"Usuwanie produktu {product_id} z koszyka {cart.id}")
            self.repo.delete_cart_item(item)
            self._bump_version(cart, {})

        return self.get_cart(user_id)

    def clear_cart(self, user_id: int) -> Dict[str, Any]:
        with self.lock_service.user_lock(user_id):
            cart = self.repo.get_cart_by_user(user_id)

            if not cart:
                raise NotFoundError("Cart not found")

            # pusty koszyk też można wyczyścić, tylko nowy cleared_at
            removed = self.repo.delete_cart_items(cart.id)
            self._bump_version(cart, {"cleared_at": datetime.now(timezone.utc)})

            logger.info(f"Koszyk {cart.id} wyczyszczony, usunięto {removed} pozycji")

        return self.get_cart(user_id)

    def _get_or_create(self, user_id: int) -> CartModel:
        # wołać tylko pod lockiem użytkownika
        cart = self.repo.get_cart_by_user(user_id)
        if cart:
            return cart

        created = self.repo.create_cart(CartModel(user_id=user_id, version=1))
        logger.info(f"Utworzono nowy koszyk {created.id} dla użytkownika {user_id}")
        return created

    def _require_item(self, user_id: int, product_id: str):
        cart = self.repo.get_cart_by_user(user_id)

        if not cart:
            raise NotFoundError("Cart not found")

        item = self.repo.get_cart_item(cart.id, str(product_id))

        if not item:
            raise NotFoundError("Item not found in cart")

        return cart, item

    def _bump_version(self, cart: CartModel, new_data: dict):
        # Optimistic locking, np. update set version 2 where id 1 and version 1
        old_version = cart.version
        rowcount = self.repo.update_cart_version(
            cart_id=cart.id,
            old_version=old_version,
            new_data={**new_data, "version": old_version + 1},
        )

        if rowcount == 0:
            self.repo.rollback()
            raise ConcurrencyError("Cart was modified by another request, try again")

        self.repo.commit()
        logger.info(f"Koszyk {cart.id} zapisany, nowa wersja: {old_version + 1}")

    def _view(self, cart: CartModel) -> Dict[str, Any]:
        items = self.repo.get_cart_items(cart.id)

        #dict przekształcany w jsona
        return {
            "items": [
                {
                    "product_id": i.product_id,
                    "name": i.name,
                    "price": i.price,
                    "image": i.image,
                    "quantity": i.quantity,
                    "added_at": i.added_at,
                    "updated_at": i.updated_at,
                }
                for i in items
            ],
            **cart_totals(items),
        }
