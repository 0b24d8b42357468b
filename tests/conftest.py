import os

# configure before the application modules read the environment
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret-not-for-production"
os.environ["ADMIN_EMAILS"] = "admin@x.com"
os.environ.pop("CLOUDINARY_CLOUD_NAME", None)

import pytest
from fastapi.testclient import TestClient

from main import app
from memories.db.base import Base
from memories.db.session import engine

PASSWORD = "secret123"


@pytest.fixture
def client():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    with TestClient(app) as test_client:
        yield test_client
    Base.metadata.drop_all(bind=engine)


def auth_header(token):
    return {"Authorization": f"Bearer {token}"}


def register(client, name, email, password=PASSWORD):
    response = client.post("/auth/register", json={"name": name, "email": email, "password": password})
    assert response.status_code == 201, response.text
    body = response.json()
    return body["token"], body["user"]


def create_post(client, token, title="Trip", message="A day at the lake", tags=None, **extra):
    payload = {"title": title, "message": message, "tags": tags or [], **extra}
    response = client.post("/posts", json=payload, headers=auth_header(token))
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
def alice(client):
    return register(client, "Alice", "a@x.com")


@pytest.fixture
def bob(client):
    return register(client, "Bob", "b@x.com")


@pytest.fixture
def admin(client):
    return register(client, "Admin", "admin@x.com")
