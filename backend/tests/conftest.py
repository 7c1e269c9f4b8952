"""
Pytest fixtures for storefront backend tests.

Provides the application on an in-memory database, a per-test wipe of all
rows, and factories for users, categories and products.

Fixtures hand back ids and plain values rather than ORM objects: every
request and every `with app.app_context()` block gets its own session.
"""

from decimal import Decimal

import pytest
from storefront import create_app
from storefront.extensions import db
from storefront.models import Category, Product, Profile
from storefront.models.auth import ROLE_ADMIN, ROLE_USER
from storefront.services import cart_service
from storefront.services.auth_service import register_user

DEFAULT_PASSWORD = "Pa$$w0rd"


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
        'SQLALCHEMY_TRACK_MODIFICATIONS': False,
    })

    with app.app_context():
        db.create_all()

    yield app

    with app.app_context():
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function', autouse=True)
def clean_db(app):
    """Clear all data but keep schema."""
    with app.app_context():
        for table in reversed(db.metadata.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()
    yield


@pytest.fixture
def make_user(app):
    """Register a user (with profile) and return its id."""
    def _make(username: str, password: str = DEFAULT_PASSWORD, role: str = ROLE_USER) -> int:
        with app.app_context():
            return register_user(username, password, role=role).user_id
    return _make


def _login(client, username: str, password: str = DEFAULT_PASSWORD) -> dict:
    res = client.post("/login", json={"username": username, "password": password})
    assert res.status_code == 200, res.get_json()
    return {"Authorization": f"Bearer {res.get_json()['token']}"}


@pytest.fixture
def login(client):
    """Log in through the API and return ready-to-use Authorization headers."""
    def _do(username: str, password: str = DEFAULT_PASSWORD) -> dict:
        return _login(client, username, password)
    return _do


@pytest.fixture
def alice(client, make_user):
    user_id = make_user("alice")
    return {"id": user_id, "username": "alice", "headers": _login(client, "alice")}


@pytest.fixture
def bob(client, make_user):
    user_id = make_user("bob")
    return {"id": user_id, "username": "bob", "headers": _login(client, "bob")}


@pytest.fixture
def admin(client, make_user):
    user_id = make_user("admin", "Password123!", role=ROLE_ADMIN)
    return {"id": user_id, "username": "admin", "headers": _login(client, "admin", "Password123!")}


@pytest.fixture
def make_category(app):
    def _make(name: str = "Shoes", description: str | None = None) -> int:
        with app.app_context():
            category = Category(name=name, description=description)
            db.session.add(category)
            db.session.commit()
            return category.category_id
    return _make


@pytest.fixture
def category_id(make_category):
    return make_category()


@pytest.fixture
def make_product(app, category_id):
    """Create a product (default: 10.00, stock 5) and return its id."""
    def _make(name: str = "Widget", price: str = "10.00", stock: int = 5,
              color: str | None = "blue", category: int | None = None, **extra) -> int:
        with app.app_context():
            product = Product(
                name=name,
                price=Decimal(price),
                stock=stock,
                color=color,
                category_id=category if category is not None else category_id,
                featured=False,
                **extra,
            )
            db.session.add(product)
            db.session.commit()
            return product.product_id
    return _make


@pytest.fixture
def product_id(make_product):
    return make_product()


@pytest.fixture
def ship_to(app):
    """Fill in a complete shipping address directly in the database."""
    def _set(user_id: int, **fields) -> None:
        values = {"address": "1 Main St", "city": "Springfield", "state": "IL", "zip": "62701"}
        values.update(fields)
        with app.app_context():
            profile = db.session.query(Profile).filter_by(user_id=user_id).one()
            for key, value in values.items():
                setattr(profile, key, value)
            db.session.commit()
    return _set


@pytest.fixture
def stock_of(app):
    def _get(product_id: int) -> int | None:
        with app.app_context():
            product = db.session.get(Product, product_id)
            return None if product is None else product.stock
    return _get


@pytest.fixture
def cart_of(app):
    """Persisted (product_id, quantity) rows of a user's cart."""
    def _get(user_id: int) -> list[tuple[int, int]]:
        with app.app_context():
            return cart_service.get_rows(user_id)
    return _get
