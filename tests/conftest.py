# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Generator, Iterator
from itertools import count

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("SECRET_KEY", "test-secret-key-for-blogshive")

from blogshive.core.security import create_access_token  # noqa: E402
from blogshive.db.session import Base  # noqa: E402
from blogshive.db.session import get_db as app_get_session  # noqa: E402
from blogshive.db.time import utcnow  # noqa: E402
from blogshive.main import app as fastapi_app  # noqa: E402
from blogshive.models import Post, PostVisibility, User  # noqa: E402
from blogshive.services import ConnectionManager, NotificationService  # noqa: E402

TEST_DB_URL = "sqlite://"

_SLUG_COUNTER = count(1)


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # pysqlite needs explicit BEGIN for SAVEPOINT to nest inside the outer transaction.
    @event.listens_for(engine, "connect")
    def _disable_pysqlite_begin(dbapi_connection, connection_record):  # type: ignore[no-untyped-def]
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _emit_begin(conn):  # type: ignore[no-untyped-def]
        conn.exec_driver_sql("BEGIN")

    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    connection = engine.connect()
    transaction = connection.begin()
    SessionLocal = sessionmaker(
        bind=connection,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
        join_transaction_mode="create_savepoint",
    )
    session = SessionLocal()

    try:
        yield session
    finally:
        session.close()

        if transaction.is_active:
            transaction.rollback()
        connection.close()

        # Ensure each test sees a clean database even if commits occurred.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_session_dependency(app: FastAPI, db_session: Session) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)


@pytest.fixture(autouse=True)
def connections(app: FastAPI) -> Iterator[ConnectionManager]:
    """Give every test its own socket registry and notification service."""
    manager = ConnectionManager()
    app.state.connections = manager
    app.state.notification_service = NotificationService(manager)
    yield manager


@pytest.fixture()
def notification_service(app: FastAPI, connections: ConnectionManager) -> NotificationService:
    """Return the notification service wired into the app for this test."""
    service: NotificationService = app.state.notification_service
    return service


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


def make_user(db: Session, username: str, name: str | None = None, **fields: object) -> User:
    """Persist and return a user."""
    user = User(username=username, name=name, email=f"{username}@example.com", **fields)
    db.add(user)
    db.flush()
    db.refresh(user)
    return user


def make_post(
    db: Session,
    author: User,
    title: str = "A Story",
    *,
    is_published: bool = True,
    visibility: PostVisibility = PostVisibility.PUBLIC,
    **fields: object,
) -> Post:
    """Persist and return a post with a unique slug."""
    post = Post(
        author_id=author.id,
        title=title,
        slug=f"{fields.pop('slug', 'story')}-{next(_SLUG_COUNTER)}",
        is_published=is_published,
        visibility=visibility.value,
        published_at=fields.pop("published_at", utcnow() if is_published else None),
        **fields,
    )
    db.add(post)
    db.flush()
    db.refresh(post)
    return post


def bearer(user: User) -> dict[str, str]:
    """Return authorization headers for ``user``."""
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture()
def test_user(db_session: Session) -> User:
    """Create and return a persisted test user."""
    return make_user(db_session, "alice", "Alice Writer", topics=["python"])


@pytest.fixture()
def other_user(db_session: Session) -> User:
    """Create and return a second persisted user."""
    return make_user(db_session, "bob", "Bob Reader")


@pytest.fixture()
def third_user(db_session: Session) -> User:
    """Create and return a third persisted user without a display name."""
    return make_user(db_session, "carol")


@pytest.fixture()
def auth_token(test_user: User) -> dict[str, str]:
    """Return authorization headers for the primary test user."""
    return bearer(test_user)


@pytest.fixture()
def other_auth_token(other_user: User) -> dict[str, str]:
    """Return authorization headers for the secondary test user."""
    return bearer(other_user)


@pytest.fixture()
def third_auth_token(third_user: User) -> dict[str, str]:
    """Return authorization headers for the third test user."""
    return bearer(third_user)


@pytest.fixture()
def test_post(db_session: Session, test_user: User) -> Post:
    """Create a published public post by the primary test user."""
    return make_post(db_session, test_user, "Hello World", slug="hello-world", tags=["python"])
