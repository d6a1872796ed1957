import os

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault('DATABASE_URL', 'sqlite://')

from portal_backend.auth.passwords import hash_password  # noqa: E402
from portal_backend.auth.sessions import SessionManager  # noqa: E402
from portal_backend.database import Base, get_db  # noqa: E402
from portal_backend.main import create_app  # noqa: E402
from portal_backend.models import carousel, competition, user  # noqa: E402,F401
from portal_backend.repositories.users import UserStore  # noqa: E402


@pytest.fixture
def engine():
    engine = create_engine(
        'sqlite://',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def sessions() -> SessionManager:
    return SessionManager(idle_timeout_seconds=3600)


@pytest.fixture
def create_user(db):
    def _create(name='Admin', email='admin@example.com', password='secret123', role='user'):
        return UserStore(db).create(name=name, email=email, password_hash=hash_password(password), role=role)

    return _create


@pytest.fixture
def app(session_factory):
    app = create_app()

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    return app


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


@pytest.fixture
def admin_client(app, create_user) -> TestClient:
    create_user(name='Admin', email='admin@example.com', password='admin-pass', role='admin')
    admin = TestClient(app)
    response = admin.post('/api/login', json={'email': 'admin@example.com', 'password': 'admin-pass'})
    assert response.status_code == 200
    return admin


@pytest.fixture
def user_client(app, create_user) -> TestClient:
    create_user(name='Regular', email='user@example.com', password='user-pass', role='user')
    regular = TestClient(app)
    response = regular.post('/api/login', json={'email': 'user@example.com', 'password': 'user-pass'})
    assert response.status_code == 200
    return regular
