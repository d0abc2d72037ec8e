"""
Test configuration and fixtures.
"""
import json
import os
import re
import tempfile
from contextlib import contextmanager
from typing import Any, Generator, List, Tuple

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

# Configure settings before importing app
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET_KEY"] = "test-signing-key-0123456789abcdefghijklmnop"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="menuboard-uploads-")

from menuboard.main import app, asgi_app, socket_handlers
from menuboard.db.base import Base
from menuboard.db.session import get_db, get_session_factory
from menuboard.models.user import User
from menuboard.models.restaurant import Restaurant
from menuboard.core.security import hash_password


# Single shared in-memory database; worker threads reuse the same connection
engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)


@event.listens_for(engine, "connect")
def _enable_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

OWNER_EMAIL = "restaurant_owner@example.com"
OTHER_EMAIL = "other_owner@example.com"
PASSWORD = "testpassword123"

SOCKET_URL = "/socket.io/?EIO=4&transport=websocket"
_ACK = re.compile(r"^43(\d+)(.*)$", re.DOTALL)


class PublishLog:
    """Every (room, message) the app's broadcaster was asked to publish, in order."""

    def __init__(self):
        self.records: List[Tuple[str, dict]] = []

    def wrap(self, publish):
        def recording_publish(room: str, event: str, payload: Any):
            self.records.append((room, {"event": event, "data": payload}))
            return publish(room, event, payload)
        return recording_publish


class RoomLog:
    """Messages published to one room after ``listen`` was called."""

    def __init__(self, log: PublishLog, room: str):
        self.log = log
        self.room = room
        self.start = len(log.records)

    @property
    def messages(self) -> List[dict]:
        return [message for room, message in self.log.records[self.start:] if room == self.room]

    def events(self) -> List[str]:
        return [message["event"] for message in self.messages]

    def last(self) -> dict:
        return self.messages[-1]


class SocketSession:
    """
    Socket.IO client speaking the Engine.IO v4 websocket framing over a
    TestClient websocket.

    Engine.IO packets are prefixed with a type digit (0 open, 2 ping,
    3 pong, 4 message); Socket.IO packets inside a message add their own
    type digit (0 connect, 2 event, 3 ack) and an optional ack id.
    """

    def __init__(self, ws):
        self.ws = ws
        self.sid = None
        self.pending: List[Tuple[str, Any]] = []
        self._next_ack = 0

    def _packet(self) -> str:
        while True:
            text = self.ws.receive_text()
            if text == "2":
                self.ws.send_text("3")
                continue
            return text

    def connect(self, auth: dict | None = None) -> None:
        opened = self.ws.receive_text()
        assert opened.startswith("0"), opened
        self.ws.send_text("40" + (json.dumps(auth) if auth else ""))
        reply = self._packet()
        assert reply.startswith("40"), reply
        self.sid = json.loads(reply[2:])["sid"]

    def emit(self, event: str, data: Any = None) -> None:
        args = [event] if data is None else [event, data]
        self.ws.send_text("42" + json.dumps(args))

    def call(self, event: str, data: Any = None) -> Any:
        """Emit with an acknowledgement and return the server's ack value."""
        self._next_ack += 1
        ack_id = str(self._next_ack)
        args = [event] if data is None else [event, data]
        self.ws.send_text("42" + ack_id + json.dumps(args))
        while True:
            packet = self._packet()
            match = _ACK.match(packet)
            if match and match.group(1) == ack_id:
                values = json.loads(match.group(2))
                return values[0] if values else None
            self.pending.append(self._event(packet))

    @staticmethod
    def _event(packet: str) -> Tuple[str, Any]:
        assert packet.startswith("42"), packet
        name, *args = json.loads(packet[2:])
        return name, (args[0] if args else None)

    def receive(self) -> Tuple[str, Any]:
        """Next server event as ``(name, data)``."""
        if self.pending:
            return self.pending.pop(0)
        return self._event(self._packet())

    def disconnect(self) -> None:
        self.ws.send_text("41")


@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """Create a fresh schema and a session for the test."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db: Session) -> Generator[TestClient, None, None]:
    """Create test client with database session override."""
    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_factory] = lambda: TestingSessionLocal
    original_factory = socket_handlers.session_factory
    socket_handlers.session_factory = TestingSessionLocal

    with TestClient(asgi_app) as c:
        yield c

    socket_handlers.session_factory = original_factory
    app.dependency_overrides.clear()


@pytest.fixture
def broadcaster(client: TestClient):
    return app.state.broadcaster


@pytest.fixture
def published(broadcaster, monkeypatch) -> PublishLog:
    log = PublishLog()
    monkeypatch.setattr(broadcaster, "publish", log.wrap(broadcaster.publish))
    return log


@pytest.fixture
def listen(published):
    """Record what gets published to a room from now on: ``listen("restaurant-<id>")``."""
    def _listen(room: str) -> RoomLog:
        return RoomLog(published, room)
    return _listen


@pytest.fixture
def connect_socket(client: TestClient):
    """Open a connected Socket.IO session: ``with connect_socket() as screen``."""
    @contextmanager
    def _connect(auth: dict | None = None):
        with client.websocket_connect(SOCKET_URL, headers={"upgrade": "websocket"}) as ws:
            session = SocketSession(ws)
            session.connect(auth)
            yield session
    return _connect


def _create_owner(db: Session, email: str, restaurant_name: str) -> tuple[User, Restaurant]:
    user = User(email=email, hashed_password=hash_password(PASSWORD))
    user.restaurant = Restaurant(name=restaurant_name)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user, user.restaurant


@pytest.fixture
def test_user_with_restaurant(db: Session) -> tuple[User, Restaurant]:
    """Create a test owner with a restaurant."""
    return _create_owner(db, OWNER_EMAIL, "Test Restaurant")


@pytest.fixture
def restaurant(test_user_with_restaurant) -> Restaurant:
    return test_user_with_restaurant[1]


@pytest.fixture
def other_restaurant(db: Session) -> Restaurant:
    """A restaurant belonging to someone else."""
    return _create_owner(db, OTHER_EMAIL, "Other Restaurant")[1]


def login(client: TestClient, email: str) -> str:
    response = client.post("/auth/login", json={"email": email, "password": PASSWORD})
    assert response.status_code == 200, response.text
    return response.json()["token"]


@pytest.fixture
def auth_token(client: TestClient, test_user_with_restaurant) -> str:
    return login(client, OWNER_EMAIL)


@pytest.fixture
def auth_headers(auth_token: str) -> dict:
    """Get auth headers for the owner."""
    return {"Authorization": f"Bearer {auth_token}"}


@pytest.fixture
def other_headers(client: TestClient, other_restaurant) -> dict:
    """Auth headers for the owner of ``other_restaurant``."""
    return {"Authorization": f"Bearer {login(client, OTHER_EMAIL)}"}


@pytest.fixture
def make_item(client: TestClient, auth_headers: dict, restaurant: Restaurant):
    def _make_item(name: str = "Burger", price: float = 12.99, category: str = "Main Course", **extra) -> dict:
        response = client.post(
            f"/items/restaurants/{restaurant.id}",
            headers=auth_headers,
            json={"name": name, "price": price, "category": category, **extra},
        )
        assert response.status_code == 201, response.text
        return response.json()
    return _make_item


@pytest.fixture
def make_menu(client: TestClient, auth_headers: dict, restaurant: Restaurant):
    def _make_menu(name: str = "Lunch", items: list | None = None, **extra) -> dict:
        response = client.post(
            f"/menus/restaurants/{restaurant.id}",
            headers=auth_headers,
            json={"name": name, "items": items or [], **extra},
        )
        assert response.status_code == 201, response.text
        return response.json()
    return _make_menu


@pytest.fixture
def make_display(client: TestClient, auth_headers: dict, restaurant: Restaurant):
    def _make_display(name: str = "Front Counter", **extra) -> dict:
        response = client.post(
            f"/displays/restaurants/{restaurant.id}",
            headers=auth_headers,
            json={"name": name, **extra},
        )
        assert response.status_code == 201, response.text
        return response.json()
    return _make_display
