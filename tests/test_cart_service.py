import threading
from decimal import Decimal

import pytest
from sqlalchemy.exc import OperationalError

from app.data.models.cart import CartModel
from app.domain.errors import NotFoundError, StorageError, ValidationError
from app.repos.cart_repo import CartRepo
from app.services.cart_service import CartService


def test_get_cart_creates_missing_cart(cart_service, user_without_cart, db):
    cart = cart_service.get_cart(user_without_cart.id)

    assert cart == {"items": [], "total_items": 0, "total_price": Decimal("0.00")}
    assert db.query(CartModel).filter_by(user_id=user_without_cart.id).count() == 1


def test_add_same_product_accumulates_quantity(cart_service, user):
    cart_service.add_item(user.id, "apple", "Apple", Decimal("2.50"), quantity=2)
    cart = cart_service.add_item(user.id, "apple", "Apple", Decimal("2.50"), quantity=3)

    assert len(cart["items"]) == 1
    assert cart["items"][0]["quantity"] == 5
    assert cart["total_items"] == 5


def test_add_existing_product_keeps_original_name_and_price(cart_service, user):
    cart_service.add_item(user.id, "milk", "Milk 1L", Decimal("1.20"))
    cart = cart_service.add_item(user.id, "milk", "Milk 2L", Decimal("9.99"))

    item = cart["items"][0]
    assert item["name"] == "Milk 1L"
    assert item["price"] == Decimal("1.20")
    assert item["quantity"] == 2


def test_add_item_defaults_quantity_to_one(cart_service, user):
    cart = cart_service.add_item(user.id, "bread", "Bread", "3.10", image="bread.png")

    assert cart["items"][0]["quantity"] == 1
    assert cart["items"][0]["image"] == "bread.png"


def test_add_item_creates_cart_when_missing(cart_service, user_without_cart):
    cart = cart_service.add_item(user_without_cart.id, "egg", "Eggs", Decimal("0.30"), quantity=12)

    assert cart["total_items"] == 12
    assert cart["total_price"] == Decimal("3.60")


@pytest.mark.parametrize(
    "kwargs",
    [
        {"product_id": None, "name": "Apple", "price": Decimal("1")},
        {"product_id": "apple", "name": "", "price": Decimal("1")},
        {"product_id": "apple", "name": "Apple", "price": None},
        {"product_id": "apple", "name": "Apple", "price": Decimal("1"), "quantity": 0},
        {"product_id": "apple", "name": "Apple", "price": Decimal("-1")},
        {"product_id": "apple", "name": "Apple", "price": "abc"},
        {"product_id": "apple", "name": "Apple", "price": "0.1234567"},
        {"product_id": "apple", "name": "Apple", "price": "1000000000000"},
    ],
)
def test_add_item_rejects_invalid_input(cart_service, user, kwargs):
    with pytest.raises(ValidationError):
        cart_service.add_item(user.id, **kwargs)


def test_totals_match_items_on_repeated_reads(cart_service, user):
    cart_service.add_item(user.id, "a", "A", Decimal("2.50"), quantity=2)
    cart_service.add_item(user.id, "b", "B", Decimal("1.00"), quantity=3)

    first = cart_service.get_cart(user.id)
    second = cart_service.get_cart(user.id)

    expected = sum(i["price"] * i["quantity"] for i in first["items"])
    assert first["total_price"] == expected == Decimal("8.00")
    assert second == first


def test_update_quantity_sets_value(cart_service, user):
    cart_service.add_item(user.id, "a", "A", Decimal("2.00"), quantity=2)
    cart = cart_service.update_item_quantity(user.id, "a", 7)

    assert cart["items"][0]["quantity"] == 7
    assert cart["total_price"] == Decimal("14.00")


def test_update_quantity_zero_removes_item(cart_service, user):
    cart_service.add_item(user.id, "a", "A", Decimal("2.00"))
    cart_service.add_item(user.id, "b", "B", Decimal("1.00"))

    cart_service.update_item_quantity(user.id, "a", 0)

    cart = cart_service.get_cart(user.id)
    assert [i["product_id"] for i in cart["items"]] == ["b"]


@pytest.mark.parametrize("quantity", [None, -1])
def test_update_quantity_rejects_invalid_quantity(cart_service, user, quantity):
    with pytest.raises(ValidationError):
        cart_service.update_item_quantity(user.id, "a", quantity)


def test_update_quantity_missing_item(cart_service, user):
    with pytest.raises(NotFoundError, match="Item not found"):
        cart_service.update_item_quantity(user.id, "ghost", 1)


def test_update_quantity_missing_cart(cart_service, user_without_cart):
    with pytest.raises(NotFoundError, match="Cart not found"):
        cart_service.update_item_quantity(user_without_cart.id, "a", 1)


def test_remove_item(cart_service, user):
    cart_service.add_item(user.id, "a", "A", Decimal("2.00"))
    cart = cart_service.remove_item(user.id, "a")

    assert cart["items"] == []


def test_remove_item_not_in_cart(cart_service, user):
    with pytest.raises(NotFoundError):
        cart_service.remove_item(user.id, "a")


def test_remove_item_without_cart(cart_service, user_without_cart):
    with pytest.raises(NotFoundError):
        cart_service.remove_item(user_without_cart.id, "a")


def test_clear_cart_empties_and_stamps_cleared_at(cart_service, user, db):
    cart_service.add_item(user.id, "a", "A", Decimal("2.00"))
    cart = cart_service.clear_cart(user.id)

    assert cart["items"] == []
    assert cart["total_price"] == Decimal("0.00")
    assert CartRepo(db).get_cart_by_user(user.id).cleared_at is not None


def test_clear_cart_is_idempotent(cart_service, user):
    cart_service.clear_cart(user.id)
    cart = cart_service.clear_cart(user.id)

    assert cart["total_items"] == 0


def test_clear_cart_without_cart(cart_service, user_without_cart):
    with pytest.raises(NotFoundError):
        cart_service.clear_cart(user_without_cart.id)


def test_carts_are_isolated_per_user(cart_service, user, user_without_cart):
    cart_service.add_item(user.id, "a", "A", Decimal("2.00"))

    assert cart_service.get_cart(user_without_cart.id)["items"] == []


def test_each_write_bumps_cart_version(cart_service, user, db):
    cart_service.add_item(user.id, "a", "A", Decimal("2.00"))
    cart_service.update_item_quantity(user.id, "a", 3)

    assert CartRepo(db).get_cart_by_user(user.id).version == 3


def test_stale_version_update_is_rejected(session_factory, user):
    first, second = session_factory(), session_factory()
    try:
        stale = CartRepo(first).get_cart_by_user(user.id)
        old_version = stale.version

        repo = CartRepo(second)
        fresh = repo.get_cart_by_user(user.id)
        assert repo.update_cart_version(fresh.id, fresh.version, {"version": fresh.version + 1}) == 1
        repo.commit()

        rows = CartRepo(first).update_cart_version(stale.id, old_version, {"version": old_version + 1})
        assert rows == 0
    finally:
        first.close()
        second.close()


def test_concurrent_adds_for_same_user_both_survive(session_factory, lock_service, user):
    barrier = threading.Barrier(2)
    errors = []

    def add(product_id):
        session = session_factory()
        try:
            svc = CartService(db=session, lock_service=lock_service)
            barrier.wait()
            svc.add_item(user.id, product_id, product_id.title(), Decimal("1.00"))
        except Exception as e:
            errors.append(e)
        finally:
            session.close()

    threads = [threading.Thread(target=add, args=(p,)) for p in ("apple", "pear")]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []

    session = session_factory()
    try:
        cart = CartService(db=session, lock_service=lock_service).get_cart(user.id)
    finally:
        session.close()

    assert sorted(i["product_id"] for i in cart["items"]) == ["apple", "pear"]


def test_sub_cent_price_is_kept_as_sent(cart_service, user):
    cart = cart_service.add_item(user.id, "salt", "Salt", "0.125", quantity=2)

    assert cart["items"][0]["price"] == Decimal("0.125")
    assert cart["total_price"] == Decimal("0.25")


def test_database_failure_becomes_storage_error(cart_service, user, db, monkeypatch):
    rollbacks = []

    def broken_execute(*args, **kwargs):
        raise OperationalError("SELECT carts", {}, Exception("disk I/O error"))

    monkeypatch.setattr(db, "execute", broken_execute)
    monkeypatch.setattr(db, "rollback", lambda: rollbacks.append(True))

    with pytest.raises(StorageError):
        cart_service.get_cart(user.id)

    assert rollbacks == [True]
