import os

# Point the app at a throwaway in-memory database before anything imports config
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["RUN_RETENTION_ON_STARTUP"] = "false"

import pytest
from fastapi.testclient import TestClient

import models  # noqa: F401
from database import Base, SessionLocal, engine


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    from main import app
    return TestClient(app)
