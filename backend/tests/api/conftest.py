"""
Pytest fixtures for API integration tests.

Provides FastAPI test client, database session and seeded shop fixtures.
"""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from app.core.database import Base, get_db
from app.core.security import create_access_token
from app.adapters.tokens_jwt import JWTTokenService


# Test database setup (in-memory SQLite for fast tests)
TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db_session():
    """
    Create a fresh database session for each test.

    Creates all tables, yields session, then drops all tables.
    """
    Base.metadata.create_all(bind=engine)

    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session):
    """
    FastAPI test client with database dependency override.

    Uses in-memory database for isolated tests.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def shop(db_session):
    """
    Seed users, products and orders.

    Returns: dict of model instances keyed by role in the tests
    """
    from app.models import User, Order, OrderItem, Product, ProductMeta

    customer = User(id=7, login="u7")
    other_customer = User(id=9, login="u9")
    manager = User(id=1, login="manager", capabilities=["manage_woocommerce"])
    db_session.add_all([customer, other_customer, manager])

    widget = Product(id=1, sku="ABC-1", name="Widget", regular_price="19.99")
    gadget = Product(id=2, sku="GAD-2", name='Gadget, "Deluxe"', regular_price="5.00")
    db_session.add_all([widget, gadget])
    db_session.flush()

    db_session.add_all([
        ProductMeta(product_id=1, meta_key="wcwp_wholesale", meta_value="9.99"),
        ProductMeta(product_id=1, meta_key="_global_unique_id", meta_value="0123456789"),
    ])

    completed = Order(id=1042, customer_id=7, status="completed", order_number="1042")
    processing = Order(id=1043, customer_id=7, status="processing", order_number="1043")
    db_session.add_all([completed, processing])
    db_session.flush()

    db_session.add_all([
        OrderItem(order_id=1042, product_id=1, quantity=3, position=0),
        OrderItem(order_id=1043, product_id=2, quantity=1, position=0),
        OrderItem(order_id=1043, product_id=1, quantity=2, position=1),
    ])
    db_session.commit()

    return {
        "customer": customer,
        "other_customer": other_customer,
        "manager": manager,
        "completed": completed,
        "processing": processing,
    }


@pytest.fixture
def tokens():
    return JWTTokenService()


@pytest.fixture
def auth_headers():
    """Build a bearer header for a user id."""
    def _headers(user_id: int) -> dict:
        return {"Authorization": f"Bearer {create_access_token(user_id)}"}

    return _headers
