import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from splitledger.api import deps
from splitledger.core.auth import create_access_token
from splitledger.main import app
from splitledger.models.user import User
from tests.fakes import build_stores


@pytest.fixture
def alice() -> User:
    return User(username="alice", email="alice@example.com", full_name="Alice A")


@pytest.fixture
def bob() -> User:
    return User(username="bob", email="bob@example.com", full_name="Bob B")


@pytest.fixture
def carol() -> User:
    return User(username="carol", email="carol@example.com")


@pytest.fixture
def stores(alice, bob, carol) -> deps.Stores:
    return build_stores([alice, bob, carol])


@pytest.fixture
def expense_service(stores):
    return deps.get_expense_service(stores)


@pytest.fixture
def settlement_service(stores):
    return deps.get_settlement_service(stores)


@pytest.fixture
def group_service(stores):
    return deps.get_group_service(stores)


@pytest.fixture
def ledger_service(stores):
    return deps.get_ledger_service(stores)


@pytest.fixture
def analytics_service(stores):
    return deps.get_analytics_service(stores)


@pytest.fixture
def friend_service(stores):
    return deps.get_friend_service(stores)


@pytest.fixture
def user_service(stores):
    return deps.get_user_service(stores)


@pytest_asyncio.fixture
async def trip(group_service, alice, bob, carol):
    """Group "Trip" created by alice with bob and carol."""
    return await group_service.create_group(alice.id, "Trip", "Weekend away", [bob.id, carol.id])


@pytest.fixture
def test_client(stores):
    """FastAPI test client wired to the in-memory stores (no lifespan, no MongoDB)."""
    app.dependency_overrides[deps.get_stores] = lambda: stores
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    def _headers(user: User) -> dict:
        return {"Authorization": f"Bearer {create_access_token(user.id)}"}
    return _headers
