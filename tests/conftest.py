import os

# przed importem app: sqlite i lokalny lock zamiast postgresa/redisa
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOCK_BACKEND", "local")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from app.api import create_app
from app.api.deps import get_lock_service
from app.data import models  # noqa: F401
from app.data.database import Base, get_db, make_engine
from app.data.models.user import UserModel
from app.domain.schemas import UserCreate
from app.services.cart_service import CartService
from app.services.checkout_service import CheckoutService
from app.services.lock_service import LocalLockService
from app.services.order_service import OrderService
from app.services.user_service import UserService


@pytest.fixture
def engine(tmp_path):
    eng = make_engine(f"sqlite:///{tmp_path / 'freshmart.db'}")
    Base.metadata.create_all(bind=eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def lock_service():
    return LocalLockService(wait_seconds=2)


@pytest.fixture
def user(db):
    """Zarejestrowany użytkownik, z pustym koszykiem."""
    return UserService(db).create_user(UserCreate(email="Jan@Example.com", name="Jan"))


@pytest.fixture
def user_without_cart(db):
    u = UserModel(email="ola@example.com", name="Ola")
    db.add(u)
    db.commit()
    return u


@pytest.fixture
def cart_service(db, lock_service):
    return CartService(db=db, lock_service=lock_service)


@pytest.fixture
def order_service(db, lock_service):
    return OrderService(db=db, lock_service=lock_service)


@pytest.fixture
def checkout_service(order_service, cart_service):
    return CheckoutService(order_service=order_service, cart_service=cart_service)


@pytest.fixture
def client(session_factory, lock_service):
    app = create_app()

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_lock_service] = lambda: lock_service
    return TestClient(app)


@pytest.fixture
def auth(client):
    resp = client.post("/users", json={"email": "anna@example.com", "name": "Anna"})
    assert resp.status_code == 201
    return {"X-User-Id": str(resp.json()["user"]["id"])}
