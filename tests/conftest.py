"""Shared pytest fixtures: a test app on in-memory SQLite with the sql backend."""

from types import SimpleNamespace

import pytest

from app import create_app
from catalog import seed_products
from config import TestConfig
from services import get_backend


ADMIN_EMAIL = "admin@todobaby.co"
ADMIN_PASSWORD = "secret123"


class FakeModels:
    """Stands in for ``genai.Client().models``; records every call."""

    def __init__(self):
        self.calls = []
        self.text = "Respuesta de prueba"
        self.audio = None
        self.error = None

    def generate_content(self, model, contents, config=None):
        self.calls.append({"model": model, "contents": contents, "config": config})
        if self.error:
            raise self.error
        if self.audio is not None:
            part = SimpleNamespace(inline_data=SimpleNamespace(data=self.audio))
            candidate = SimpleNamespace(content=SimpleNamespace(parts=[part]))
            return SimpleNamespace(text=None, candidates=[candidate])
        return SimpleNamespace(text=self.text)


class FakeGenAI:
    def __init__(self):
        self.models = FakeModels()


@pytest.fixture
def app():
    return create_app(TestConfig)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def products(app):
    """The demo catalogue loaded into the local products table."""
    with app.app_context():
        backend = get_backend()
        return [backend.add_product(p) for p in seed_products()]


@pytest.fixture
def admin_client(app, client):
    """A test client signed in as a local admin."""
    with app.app_context():
        get_backend().create_admin(ADMIN_EMAIL, ADMIN_PASSWORD)
    client.post("/admin/login", data={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    return client


@pytest.fixture
def genai(app):
    fake = FakeGenAI()
    app.extensions["genai_client"] = fake
    return fake
