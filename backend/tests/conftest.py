# 공용 픽스처 — 실제 Mongo 대신 mongomock-motor, 앱은 startup 없이 TestClient로
import pytest
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from app.db.init import get_db
from app.db.recipe_store import COLLECTION, RecipeStore
from app.main import app


def recipe_payload(**overrides):
    body = {
        "title": "Kimchi Fried Rice",
        "description": "Leftover rice, kimchi, egg on top.",
        "cookingTime": 15,
        "difficulty": "Easy",
        "category": "Korean",
        "author": "jiyong",
        "authorEmail": "jiyong@example.com",
    }
    body.update(overrides)
    return body


@pytest.fixture
def mock_db():
    return AsyncMongoMockClient()["recipes_test"]


@pytest.fixture
def store(mock_db):
    return RecipeStore(mock_db[COLLECTION])


@pytest.fixture
def client(mock_db):
    app.dependency_overrides[get_db] = lambda: mock_db
    yield TestClient(app)
    app.dependency_overrides.clear()
