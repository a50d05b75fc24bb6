import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, create_engine

from barberbook.db import create_db_and_tables, get_session
from barberbook.main import create_app
from barberbook.models import Barber, User
from barberbook.repository import MemoryRepository, SqlRepository

SERVICES = [
    {"id": "haircut", "name": "Haircut", "price": 50000, "duration": 30},
    {"id": "beard_trim", "name": "Beard trim", "price": 30000, "duration": 15},
    {"id": "fade", "name": "Fade", "price": 60000, "duration": 45},
]

CUSTOMER = {"id": 100, "email": "ali@example.com", "name": "Ali", "phone": "", "role": "user"}
OTHER_CUSTOMER = {"id": 101, "email": "vali@example.com", "name": "Vali", "phone": "", "role": "user"}
ADMIN = {"id": 1, "email": "admin@example.com", "name": "Admin", "phone": "", "role": "admin"}


def barber_actor(barber):
    return {"id": barber.user_id, "email": "barber@example.com", "name": barber.name,
            "phone": "", "role": "barber"}


@pytest.fixture
def repo():
    return MemoryRepository()


@pytest.fixture
def barber(repo):
    return repo.save_barber(
        Barber(user_id=50, name="Jasur", location="Tashkent", services=[dict(s) for s in SERVICES])
    )


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_db_and_tables(engine)
    return engine


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def sql_repo(session):
    return SqlRepository(session)


@pytest.fixture
def client(engine):
    app = create_app(init_db=False)

    def override_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = override_session
    with TestClient(app) as test_client:
        yield test_client


def register(client, email, role="user", name="Test User", password="secret123"):
    resp = client.post(
        "/users",
        json={"name": name, "email": email, "password": password, "role": role},
    )
    assert resp.status_code == 201, resp.text
    token = client.post(
        "/auth/login", data={"username": email, "password": password}
    ).json()["access_token"]
    return resp.json(), {"Authorization": f"Bearer {token}"}


def seed_admin(engine, email="admin@example.com", password="secret123"):
    from barberbook.auth import hash_password

    with Session(engine) as session:
        session.add(User(name="Admin", email=email, password_hash=hash_password(password), role="admin"))
        session.commit()
