"""Pytest fixtures for testing

Fixtures open short-lived app contexts instead of holding one for the whole
test: Flask-Login caches the current user on ``g``, which would otherwise
leak between requests made by different clients.
"""

import pytest
from datetime import date
from decimal import Decimal
from stashbook import create_app, db
from stashbook.models import Borrower, Owner, Stash, User

PASSWORD = "secret123"


@pytest.fixture
def app():
    """Application bound to an in-memory database"""
    app = create_app("testing")
    with app.app_context():
        db.create_all()

    yield app

    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    """Anonymous test client"""
    return app.test_client()


@pytest.fixture
def make_user(app):
    """Factory creating a user and returning its id"""

    def _make_user(email, role="USER", status="ACTIVE", password=PASSWORD, **kwargs):
        with app.app_context():
            user = User(email=email, role=role, status=status, **kwargs)
            user.set_password(password)
            db.session.add(user)
            db.session.commit()
            return user.id

    return _make_user


def login(client, email, password=PASSWORD):
    return client.post("/auth/login", json={"email": email, "password": password})


def _logged_in_client(app, make_user, email, role):
    make_user(email, role=role, first_name=role.title(), last_name="Tester")
    client = app.test_client()
    response = login(client, email)
    assert response.status_code == 200, response.get_json()
    return client


@pytest.fixture
def user_client(app, make_user):
    return _logged_in_client(app, make_user, "user@example.com", "USER")


@pytest.fixture
def admin_client(app, make_user):
    return _logged_in_client(app, make_user, "admin@example.com", "ADMIN")


@pytest.fixture
def superadmin_client(app, make_user):
    return _logged_in_client(app, make_user, "superadmin@example.com", "SUPERADMIN")


@pytest.fixture
def borrower(app):
    """Borrower with contact details, returned as an id"""
    with app.app_context():
        borrower = Borrower(name="Juan Dela Cruz", contact_info="+63 917 000 0000")
        db.session.add(borrower)
        db.session.commit()
        return borrower.id


@pytest.fixture
def pool(app):
    """Two owners contributing 150,000 in total"""
    with app.app_context():
        alice = Owner(name="Alice")
        bob = Owner(name="Bob")
        db.session.add_all([alice, bob])
        db.session.add_all([
            Stash(owner=alice, month=date(2025, 1, 1), amount=Decimal("60000.00")),
            Stash(owner=bob, month=date(2025, 1, 1), amount=Decimal("40000.00")),
            Stash(owner=alice, month=date(2025, 2, 1), amount=Decimal("50000.00")),
        ])
        db.session.commit()
        return {"alice": alice.id, "bob": bob.id}
