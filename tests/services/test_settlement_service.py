from decimal import Decimal

import pytest

from splitledger.core.errors import InvalidSplit, NotFound, SelfSettlement
from splitledger.models.expense import SplitPolicy
from splitledger.models.ledger import EntryDirection


@pytest.mark.asyncio
async def test_settle_up_moves_both_balances_toward_zero(
    expense_service, settlement_service, ledger_service, stores, trip, alice, bob, carol,
):
    await expense_service.create_expense(
        alice.id, "Groceries", Decimal("90.00"), trip.id, SplitPolicy.EQUAL,
        [alice.id, bob.id, carol.id],
    )

    result = await settlement_service.settle_up(bob.id, alice.id, trip.id, Decimal("30.00"), "cash")

    pair = [e for e in stores.ledger.entries if e.reference_id == result.reference_id]
    debit = next(e for e in pair if e.direction is EntryDirection.DEBIT)
    credit = next(e for e in pair if e.direction is EntryDirection.CREDIT)
    assert (debit.user_id, credit.user_id) == (alice.id, bob.id)
    assert debit.description == "Settlement: cash"
    assert (await ledger_service.get_user_balance(bob.id)).balance == Decimal("0.00")
    assert (await ledger_service.get_user_balance(alice.id)).balance == Decimal("30.00")
    assert result.settlement.status.value == "COMPLETED"


@pytest.mark.asyncio
async def test_default_settlement_description(settlement_service, stores, trip, alice, bob):
    await settlement_service.settle_up(bob.id, alice.id, trip.id, Decimal("5.00"))

    assert {e.description for e in stores.ledger.entries} == {"Settlement: Payment received"}


@pytest.mark.asyncio
async def test_settle_with_self_writes_nothing(settlement_service, stores, trip, alice):
    with pytest.raises(SelfSettlement):
        await settlement_service.settle_up(alice.id, alice.id, trip.id, Decimal("10.00"))

    assert stores.ledger.entries == []
    assert await stores.settlements.find_by_user(alice.id) == []


@pytest.mark.asyncio
async def test_settle_with_self_checked_before_lookups(settlement_service):
    with pytest.raises(SelfSettlement):
        await settlement_service.settle_up("nobody", "nobody", "missing", Decimal("10.00"))


@pytest.mark.asyncio
async def test_non_positive_amount_rejected(settlement_service, trip, alice, bob):
    with pytest.raises(InvalidSplit):
        await settlement_service.settle_up(bob.id, alice.id, trip.id, Decimal("0"))


@pytest.mark.asyncio
async def test_unknown_parties(settlement_service, trip, alice, bob):
    with pytest.raises(NotFound) as exc_info:
        await settlement_service.settle_up("ghost", alice.id, trip.id, Decimal("1.00"))
    assert exc_info.value.details["resource_type"] == "Debtor"

    with pytest.raises(NotFound) as exc_info:
        await settlement_service.settle_up(bob.id, "ghost", trip.id, Decimal("1.00"))
    assert exc_info.value.details["resource_type"] == "Creditor"

    with pytest.raises(NotFound):
        await settlement_service.settle_up(bob.id, alice.id, "missing", Decimal("1.00"))


@pytest.mark.asyncio
async def test_settlement_history_queries(settlement_service, trip, alice, bob, carol):
    await settlement_service.settle_up(bob.id, alice.id, trip.id, Decimal("10.00"))
    await settlement_service.settle_up(carol.id, alice.id, trip.id, Decimal("20.00"))

    mine = await settlement_service.get_user_settlements(alice.id)
    between = await settlement_service.get_settlements_between(alice.id, carol.id)
    group = await settlement_service.get_group_settlements(trip.id)

    assert [s.amount for s in mine] == [Decimal("20.00"), Decimal("10.00")]
    assert [(s.debtor_username, s.creditor_username) for s in between] == [("carol", "alice")]
    assert len(group) == 2
    with pytest.raises(NotFound):
        await settlement_service.get_group_settlements("missing")


@pytest.mark.asyncio
async def test_sub_cent_settlement_rejected(settlement_service, stores, trip, alice, bob):
    with pytest.raises(InvalidSplit):
        await settlement_service.settle_up(bob.id, alice.id, trip.id, Decimal("10.001"))

    assert stores.ledger.entries == []
