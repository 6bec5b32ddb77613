import pytest

from splitledger.api import deps
from splitledger.core.errors import AlreadyExists, Unauthorized


@pytest.fixture
def auth_service(stores):
    return deps.get_auth_service(stores)


@pytest.mark.asyncio
async def test_signup_stores_hashed_password(auth_service, stores):
    user, token = await auth_service.signup("dave", "dave@example.com", "s3cret-pass", "Dave D")

    stored = await stores.accounts.get_user(user.id)
    assert stored.username == "dave"
    assert stored.password_hash and stored.password_hash != "s3cret-pass"
    assert token
    assert stores.uow.commits == 1


@pytest.mark.asyncio
async def test_signup_duplicate_username(auth_service, alice):
    with pytest.raises(AlreadyExists) as exc_info:
        await auth_service.signup("alice", "other@example.com", "s3cret-pass")

    assert "Username" in exc_info.value.message


@pytest.mark.asyncio
async def test_signup_duplicate_email(auth_service, alice):
    with pytest.raises(AlreadyExists) as exc_info:
        await auth_service.signup("alice2", alice.email, "s3cret-pass")

    assert "Email" in exc_info.value.message


@pytest.mark.asyncio
async def test_login_by_username_or_email(auth_service):
    user, _ = await auth_service.signup("dave", "dave@example.com", "s3cret-pass")

    by_name, _ = await auth_service.login("dave", "s3cret-pass")
    by_email, _ = await auth_service.login("dave@example.com", "s3cret-pass")

    assert by_name.id == user.id
    assert by_email.id == user.id


@pytest.mark.asyncio
async def test_login_wrong_password(auth_service):
    await auth_service.signup("dave", "dave@example.com", "s3cret-pass")

    with pytest.raises(Unauthorized):
        await auth_service.login("dave", "wrong-pass")


@pytest.mark.asyncio
async def test_login_user_without_password(auth_service, alice):
    with pytest.raises(Unauthorized):
        await auth_service.login("alice", "anything")
