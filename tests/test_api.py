"""Bout en bout via TestClient : routes, codes HTTP et rendu des erreurs."""
from __future__ import annotations

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.api.v2.dependencies import get_db
from app.db.base import Base
from app.main import app
from tests.utils import create_user, create_vocabulary


@pytest.fixture()
def api_session():
    # StaticPool : une seule connexion partagée avec le threadpool de TestClient.
    engine = create_engine(
        "sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool, future=True
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(bind=engine, autoflush=False, future=True)

    def _override_get_db():
        db = TestingSession()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = _override_get_db
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        app.dependency_overrides.pop(get_db, None)
        engine.dispose()


@pytest.fixture()
def client(api_session):
    return TestClient(app)


def _signup(client, email="flow@example.com", password="secret123"):
    response = client.post("/api/v2/auth/signup", json={"email": email, "name": "Flow", "password": password})
    assert response.status_code == 201
    return response.json()


def test_signup_login_and_progress_flow(client, api_session):
    vocab = create_vocabulary(api_session)
    body = _signup(client)
    assert body["user"]["isAdmin"] is False

    login = client.post("/api/v2/auth/login", json={"email": "flow@example.com", "password": "secret123"})
    assert login.status_code == 200
    headers = {"Authorization": f"Bearer {login.json()['token']}"}

    me = client.get("/api/v2/auth/user", headers=headers)
    assert me.json()["email"] == "flow@example.com"

    review = client.post("/api/v2/flashcards/progress", json={"vocabularyId": vocab.id, "status": "known"}, headers=headers)
    assert review.status_code == 200
    assert review.json()["success"] is True

    progress = client.get("/api/v2/progress", headers=headers).json()
    assert progress["progress"]["words_learned"] == 1
    assert progress["progress"]["total_xp"] == 10

    cards = client.get("/api/v2/flashcards", headers=headers).json()
    assert cards[0]["userStatus"] == "known"
    assert cards[0]["timesReviewed"] == 1


def test_missing_credential_is_401(client):
    response = client.get("/api/v2/progress")
    assert response.status_code == 401
    assert response.json()["code"] == "unauthorized"


def test_non_admin_cannot_create_vocabulary(client):
    token = _signup(client)["token"]
    response = client.post(
        "/api/v2/vocabulary",
        json={"word": "Hund", "meaning": "Dog", "category": "Animals"},
        headers={"Authorization": f"Bearer {token}"},
    )
    assert response.status_code == 403
    assert response.json()["detail"] == "Unauthorized - Admin only"


def test_admin_creates_vocabulary_and_bad_category_is_400(client, api_session):
    create_user(api_session, email="admin@example.com", password="adminpass", is_admin=True)
    login = client.post("/api/v2/auth/login", json={"email": "admin@example.com", "password": "adminpass"})
    headers = {"Authorization": f"Bearer {login.json()['token']}"}

    created = client.post(
        "/api/v2/vocabulary", json={"word": "Hund", "meaning": "Dog", "category": "Animals"}, headers=headers
    )
    assert created.status_code == 201

    invalid = client.post(
        "/api/v2/vocabulary", json={"word": "X", "meaning": "Y", "category": "NotACategory"}, headers=headers
    )
    assert invalid.status_code == 400
    assert invalid.json()["code"] == "validation_error"

    listed = client.get("/api/v2/vocabulary").json()
    assert [item["word"] for item in listed] == ["Hund"]


def test_signup_missing_fields_is_400_and_duplicate_is_409(client):
    missing = client.post("/api/v2/auth/signup", json={"email": "x@example.com"})
    assert missing.status_code == 400

    _signup(client, email="twice@example.com")
    duplicate = client.post(
        "/api/v2/auth/signup", json={"email": "twice@example.com", "name": "Twice", "password": "secret123"}
    )
    assert duplicate.status_code == 409
    assert duplicate.json()["detail"] == "User already exists"


def test_login_failure_is_generic(client):
    _signup(client, email="generic@example.com")
    wrong = client.post("/api/v2/auth/login", json={"email": "generic@example.com", "password": "bad"})
    ghost = client.post("/api/v2/auth/login", json={"email": "ghost@example.com", "password": "bad"})
    assert wrong.status_code == ghost.status_code == 401
    assert wrong.json() == ghost.json() == {"detail": "Invalid credentials", "code": "invalid_credentials"}
