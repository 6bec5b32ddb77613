from decimal import Decimal

import pytest

from splitledger.core.errors import DuplicateRelationship, NotFound
from splitledger.models.expense import SplitPolicy


@pytest.mark.asyncio
async def test_create_group_creator_is_first_member(trip, alice, bob, carol):
    assert trip.name == "Trip"
    assert trip.created_by_username == "alice"
    assert [m.id for m in trip.members] == [alice.id, bob.id, carol.id]


@pytest.mark.asyncio
async def test_create_group_unknown_member(group_service, alice):
    with pytest.raises(NotFound) as exc_info:
        await group_service.create_group(alice.id, "Nope", member_ids=["ghost"])

    assert exc_info.value.details["resource_type"] == "Member"


@pytest.mark.asyncio
async def test_add_member(group_service, stores, alice, bob):
    group = await group_service.create_group(alice.id, "Pair")

    await group_service.add_member(group.id, bob.id)

    assert await stores.groups.member_ids(group.id) == [alice.id, bob.id]
    with pytest.raises(DuplicateRelationship):
        await group_service.add_member(group.id, bob.id)


@pytest.mark.asyncio
async def test_user_groups(group_service, trip, bob):
    groups = await group_service.get_user_groups(bob.id)

    assert [g.id for g in groups] == [trip.id]
    with pytest.raises(NotFound):
        await group_service.get_group("missing")


@pytest.mark.asyncio
async def test_group_balances_sum_to_zero_and_are_repeatable(
    group_service, expense_service, settlement_service, trip, alice, bob, carol,
):
    await expense_service.create_expense(
        alice.id, "Groceries", Decimal("90.00"), trip.id, SplitPolicy.EQUAL,
        [alice.id, bob.id, carol.id],
    )
    await expense_service.create_expense(
        bob.id, "Snacks", Decimal("10.00"), trip.id, SplitPolicy.EQUAL, [alice.id, bob.id, carol.id],
    )
    await settlement_service.settle_up(carol.id, alice.id, trip.id, Decimal("30.00"))

    first = await group_service.get_group_balances(trip.id)
    second = await group_service.get_group_balances(trip.id)

    assert first == second
    assert {b.username: b.balance for b in first} == {
        "alice": Decimal("26.67"),
        "bob": Decimal("-23.34"),
        "carol": Decimal("-3.33"),
    }
    assert sum(b.balance for b in first) == Decimal("0.00")
