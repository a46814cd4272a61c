import pytest
from fastapi.testclient import TestClient
from data.database import Base, SessionLocal, engine
from data.store import ExperimentStore, get_experiment_store
from main import app

AUTH_HEADERS = {"Authorization": "Bearer fake-client-token"}


@pytest.fixture(autouse=True, scope="session")
def setup_database():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)

@pytest.fixture
def db_session():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

@pytest.fixture
def store():
    return ExperimentStore()

@pytest.fixture
def client(store):
    # Every test gets an isolated in-memory store
    app.dependency_overrides[get_experiment_store] = lambda: store
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()

@pytest.fixture
def headers():
    return dict(AUTH_HEADERS)
