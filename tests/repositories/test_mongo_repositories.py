"""
Tests for the MongoDB repositories against mocked motor collections.

Covers:
- Document shape (``_id`` key, enums as strings)
- Session pass-through on every write
- Driver error translation
"""

from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest
from bson.decimal128 import Decimal128
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError, ServerSelectionTimeoutError

from splitledger.core.errors import AlreadyExists, DuplicateRelationship, StorageFailure
from splitledger.db.mongo import DecimalCodec
from splitledger.models.expense import Expense, SplitPolicy
from splitledger.models.ledger import EntryDirection, LedgerEntry
from splitledger.models.settlement import Settlement
from splitledger.models.user import Friendship, Group, User
from splitledger.repositories.expense_repo import ExpenseRepository
from splitledger.repositories.friendship_repo import FriendshipRepository
from splitledger.repositories.group_repo import GroupRepository
from splitledger.repositories.ledger_repo import LedgerRepository
from splitledger.repositories.settlement_repo import SettlementRepository
from splitledger.repositories.user_repo import UserRepository


def cursor(docs):
    mock_cursor = MagicMock()
    mock_cursor.sort.return_value = mock_cursor
    mock_cursor.to_list = AsyncMock(return_value=docs)
    return mock_cursor


def collection():
    mock_collection = MagicMock()
    mock_collection.insert_one = AsyncMock()
    mock_collection.insert_many = AsyncMock()
    mock_collection.find_one = AsyncMock(return_value=None)
    mock_collection.delete_one = AsyncMock()
    mock_collection.find_one_and_update = AsyncMock(return_value=None)
    mock_collection.count_documents = AsyncMock(return_value=0)
    mock_collection.find.return_value = cursor([])
    mock_collection.aggregate.return_value = cursor([])
    return mock_collection


@pytest.fixture
def mock_db():
    collections = {}
    db = MagicMock()
    db.__getitem__.side_effect = lambda name: collections.setdefault(name, collection())
    return db


def pair(amount="10.00"):
    debit = LedgerEntry(
        user_id="x", direction=EntryDirection.DEBIT, amount=Decimal(amount),
        counterparty_id="p", reference_id="ref-1",
    )
    credit = LedgerEntry(
        user_id="p", direction=EntryDirection.CREDIT, amount=Decimal(amount),
        counterparty_id="x", reference_id="ref-1", created_at=debit.created_at,
    )
    return debit, credit


@pytest.mark.asyncio
async def test_save_entry_pair_single_insert_with_session(mock_db):
    repo = LedgerRepository(mock_db)
    debit, credit = pair()
    session = object()

    await repo.save_entry_pair(debit, credit, session=session)

    repo.collection.insert_many.assert_awaited_once()
    docs = repo.collection.insert_many.call_args[0][0]
    assert [d["direction"] for d in docs] == ["DEBIT", "CREDIT"]
    assert docs[0]["_id"] == debit.id
    assert repo.collection.insert_many.call_args.kwargs["session"] is session


@pytest.mark.asyncio
async def test_save_entry_pair_rejects_unbalanced_pair(mock_db):
    repo = LedgerRepository(mock_db)
    debit, _ = pair("10.00")
    _, credit = pair("9.99")

    with pytest.raises(ValueError):
        await repo.save_entry_pair(debit, credit)
    repo.collection.insert_many.assert_not_awaited()


@pytest.mark.asyncio
async def test_save_entry_pair_driver_error_becomes_storage_failure(mock_db):
    repo = LedgerRepository(mock_db)
    repo.collection.insert_many.side_effect = ServerSelectionTimeoutError("no primary")

    with pytest.raises(StorageFailure) as exc_info:
        await repo.save_entry_pair(*pair())
    assert exc_info.value.http_status == 503


@pytest.mark.asyncio
async def test_sum_balance_reads_decimal128(mock_db):
    repo = LedgerRepository(mock_db)
    repo.collection.aggregate.return_value = cursor([{"_id": None, "total": Decimal128("-42.50")}])

    assert await repo.sum_balance("x") == Decimal("-42.50")
    pipeline = repo.collection.aggregate.call_args[0][0]
    assert pipeline[0] == {"$match": {"user_id": "x"}}


@pytest.mark.asyncio
async def test_sum_balance_without_entries_is_zero(mock_db):
    repo = LedgerRepository(mock_db)

    assert await repo.sum_balance("x") == Decimal("0.00")


@pytest.mark.asyncio
async def test_find_by_user_and_range_builds_half_open_query(mock_db):
    repo = LedgerRepository(mock_db)
    start, end = object(), object()

    await repo.find_by_user_and_range("x", start, end)
    await repo.find_by_user_and_range("x", None, None)

    first, second = repo.collection.find.call_args_list
    assert first[0][0] == {"user_id": "x", "created_at": {"$gte": start, "$lt": end}}
    assert second[0][0] == {"user_id": "x"}


@pytest.mark.asyncio
async def test_create_user_duplicate_becomes_already_exists(mock_db):
    repo = UserRepository(mock_db)
    repo.collection.insert_one.side_effect = DuplicateKeyError("dup")

    with pytest.raises(AlreadyExists):
        await repo.create_user(User(username="alice", email="alice@example.com"))


@pytest.mark.asyncio
async def test_find_users_by_ids_keeps_requested_order(mock_db):
    repo = UserRepository(mock_db)
    docs = [
        {"_id": "b", "username": "bob", "email": "bob@example.com"},
        {"_id": "a", "username": "alice", "email": "alice@example.com"},
    ]
    repo.collection.find.return_value = cursor(docs)

    users = await repo.find_users_by_ids(["a", "ghost", "b"])

    assert [u.username for u in users] == ["alice", "bob"]
    assert await repo.find_users_by_ids([]) == []


@pytest.mark.asyncio
async def test_get_user_only_active(mock_db):
    repo = UserRepository(mock_db)

    assert await repo.get_user("a") is None
    repo.collection.find_one.assert_awaited_once_with({"_id": "a", "is_active": True})


@pytest.mark.asyncio
async def test_create_group_writes_memberships_in_session(mock_db):
    repo = GroupRepository(mock_db)
    group = Group(name="Trip", created_by="a")
    session = object()

    await repo.create_group(group, ["a", "b"], session=session)

    assert repo.collection.insert_one.call_args.kwargs["session"] is session
    memberships = repo.members.insert_many.call_args[0][0]
    assert [(m["group_id"], m["user_id"]) for m in memberships] == [(group.id, "a"), (group.id, "b")]


@pytest.mark.asyncio
async def test_add_member_duplicate(mock_db):
    repo = GroupRepository(mock_db)
    repo.members.insert_one.side_effect = DuplicateKeyError("dup")

    with pytest.raises(DuplicateRelationship):
        await repo.add_member("g", "a")


@pytest.mark.asyncio
async def test_friendship_stored_as_canonical_pair(mock_db):
    repo = FriendshipRepository(mock_db)
    repo.collection.delete_one.return_value = MagicMock(deleted_count=0)

    await repo.add(Friendship.between("z", "a"))
    removed = await repo.remove("z", "a")

    doc = repo.collection.insert_one.call_args[0][0]
    assert (doc["user_id"], doc["friend_id"]) == ("a", "z")
    assert repo.collection.delete_one.call_args[0][0] == {"user_id": "a", "friend_id": "z"}
    assert removed is False


@pytest.mark.asyncio
async def test_friend_ids_returns_other_side(mock_db):
    repo = FriendshipRepository(mock_db)
    repo.collection.find.return_value = cursor([
        {"user_id": "a", "friend_id": "m"},
        {"user_id": "m", "friend_id": "z"},
    ])

    assert await repo.friend_ids("m") == ["a", "z"]


@pytest.mark.asyncio
async def test_expense_document_keeps_split_policy_as_string(mock_db):
    repo = ExpenseRepository(mock_db)
    expense = Expense(
        description="Dinner", amount=Decimal("30.00"), paid_by="a", group_id="g",
        split_policy=SplitPolicy.EQUAL, participant_ids=["a", "b"],
    )

    await repo.save(expense)

    doc = repo.collection.insert_one.call_args[0][0]
    assert doc["split_policy"] == "EQUAL"
    assert doc["amount"] == Decimal("30.00")


@pytest.mark.asyncio
async def test_settlements_between_matches_both_directions(mock_db):
    repo = SettlementRepository(mock_db)
    settlement = Settlement(debtor_id="a", creditor_id="b", group_id="g", amount=Decimal("5.00"))
    repo.collection.find.return_value = cursor([{**settlement.model_dump(by_alias=True)}])

    found = await repo.find_between("b", "a")

    assert found == [settlement]
    query = repo.collection.find.call_args[0][0]
    assert {"debtor_id": "a", "creditor_id": "b"} in query["$or"]
    assert {"debtor_id": "b", "creditor_id": "a"} in query["$or"]


def test_decimal_codec_round_trip():
    codec = DecimalCodec()

    stored = codec.transform_python(Decimal("12.34"))

    assert isinstance(stored, Decimal128)
    assert codec.transform_bson(stored) == Decimal("12.34")


@pytest.mark.asyncio
async def test_member_ids_sort_has_stable_tiebreak(mock_db):
    repo = GroupRepository(mock_db)
    repo.members.find.return_value = cursor([{"user_id": "a"}, {"user_id": "b"}])

    assert await repo.member_ids("g") == ["a", "b"]
    repo.members.find.return_value.sort.assert_called_once_with([("joined_at", 1), ("_id", 1)])


@pytest.mark.asyncio
async def test_create_user_passes_session(mock_db):
    repo = UserRepository(mock_db)
    session = object()

    await repo.create_user(User(username="alice", email="alice@example.com"), session=session)

    doc = repo.collection.insert_one.call_args[0][0]
    assert doc["username"] == "alice"
    assert "_id" in doc
    assert repo.collection.insert_one.call_args.kwargs["session"] is session


@pytest.mark.asyncio
async def test_find_by_login_matches_username_or_email(mock_db):
    repo = UserRepository(mock_db)
    repo.collection.find_one.return_value = {"_id": "a", "username": "alice", "email": "alice@example.com"}

    user = await repo.find_by_login("alice@example.com")

    assert user.id == "a"
    query = repo.collection.find_one.call_args[0][0]
    assert query["$or"] == [{"username": "alice@example.com"}, {"email": "alice@example.com"}]
    assert query["is_active"] is True


@pytest.mark.asyncio
async def test_username_exists_counts_at_most_one(mock_db):
    repo = UserRepository(mock_db)
    repo.collection.count_documents.return_value = 1

    assert await repo.username_exists("alice") is True
    repo.collection.count_documents.assert_awaited_once_with({"username": "alice"}, limit=1)


@pytest.mark.asyncio
async def test_search_users_escapes_query(mock_db):
    repo = UserRepository(mock_db)
    repo.collection.find.return_value = cursor([{"_id": "a", "username": "a.b", "email": "ab@example.com"}])

    users = await repo.search_users("a.b", limit=5)

    assert [u.username for u in users] == ["a.b"]
    query = repo.collection.find.call_args[0][0]
    assert {"username": {"$regex": r"a\.b", "$options": "i"}} in query["$or"]
    repo.collection.find.return_value.to_list.assert_awaited_once_with(5)


@pytest.mark.asyncio
async def test_update_profile_returns_updated_document(mock_db):
    repo = UserRepository(mock_db)
    repo.collection.find_one_and_update.return_value = {
        "_id": "a", "username": "alice", "email": "alice@example.com", "full_name": "Alice Z",
    }

    user = await repo.update_profile("a", {"full_name": "Alice Z"})

    assert user.full_name == "Alice Z"
    args = repo.collection.find_one_and_update.call_args
    assert args[0] == ({"_id": "a", "is_active": True}, {"$set": {"full_name": "Alice Z"}})
    assert args.kwargs["return_document"] == ReturnDocument.AFTER


@pytest.mark.asyncio
async def test_update_profile_unknown_user(mock_db):
    repo = UserRepository(mock_db)

    assert await repo.update_profile("ghost", {"full_name": "X"}) is None
