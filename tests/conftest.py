import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.common.deps import get_current_user
from app.db.base_class import Base
from app.db.session import get_db
from app.main import app
from app.models.user import User
from app.services.friendship_service import FriendshipService


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def users(db):
    """Five accounts: alice, bob, carol, dave and johnny."""
    people = [
        ("Alice Smith", "alice@example.com"),
        ("Bob Jones", "bob@example.com"),
        ("Carol White", "carol@example.com"),
        ("Dave Brown", "dave@johnson.org"),
        ("Johnny Rivers", "rivers@example.com"),
    ]
    created = {}
    for full_name, email in people:
        user = User(full_name=full_name, email=email, avatar="", hashed_password="not-a-hash")
        db.add(user)
        created[full_name.split()[0].lower()] = user
    db.commit()
    for user in created.values():
        db.refresh(user)
    return created


@pytest.fixture
def service(db):
    return FriendshipService(db)


@pytest.fixture
def acting():
    """Holds the id the overridden auth dependency reports as logged in."""
    return {"id": None}


@pytest.fixture
def client(db, acting):
    def _get_db():
        yield db

    def _current_user():
        return db.query(User).filter(User.id == acting["id"]).first()

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_current_user] = _current_user
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_client(db):
    def _get_db():
        yield db

    app.dependency_overrides[get_db] = _get_db
    yield TestClient(app)
    app.dependency_overrides.clear()
