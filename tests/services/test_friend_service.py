import pytest

from splitledger.core.errors import DuplicateRelationship, NotFound, SelfReference


@pytest.mark.asyncio
async def test_friendship_is_symmetric(friend_service, alice, bob):
    await friend_service.add_friend(alice.id, bob.id)

    assert [u.id for u in await friend_service.get_friends(alice.id)] == [bob.id]
    assert [u.id for u in await friend_service.get_friends(bob.id)] == [alice.id]

    with pytest.raises(DuplicateRelationship):
        await friend_service.add_friend(bob.id, alice.id)


@pytest.mark.asyncio
async def test_cannot_befriend_self(friend_service, alice):
    with pytest.raises(SelfReference):
        await friend_service.add_friend(alice.id, alice.id)


@pytest.mark.asyncio
async def test_unknown_friend(friend_service, alice):
    with pytest.raises(NotFound):
        await friend_service.add_friend(alice.id, "ghost")


@pytest.mark.asyncio
async def test_remove_friend(friend_service, alice, bob):
    await friend_service.add_friend(alice.id, bob.id)

    await friend_service.remove_friend(bob.id, alice.id)

    assert await friend_service.get_friends(alice.id) == []
    with pytest.raises(NotFound):
        await friend_service.remove_friend(alice.id, bob.id)
