"""Tests for the ownership-scoped expense ledger."""

from decimal import Decimal

import pytest

from expense_tracker.exceptions import Forbidden, NotFound, Unauthorized, ValidationError
from expense_tracker.models import ExpenseCategory, ExpenseUpdate
from expense_tracker.services.storage import StorageError


ALICE = 1
BOB = 2


async def create_shop(ledger, caller_id=ALICE, **overrides):
    fields = dict(
        title="Weekly shop",
        description="Vegetables",
        amount="42.50",
        date="01/06/2024",
        category="Groceries",
    )
    fields.update(overrides)
    return await ledger.create(caller_id, **fields)


class TestCreate:
    """Tests for LedgerService.create."""

    async def test_create_and_get(self, ledger):
        """Test that a created expense reads back unchanged."""
        created = await create_shop(ledger)
        fetched = await ledger.get(ALICE, created.id)
        assert fetched.title == "Weekly shop"
        assert fetched.amount == Decimal("42.50")
        assert fetched.date == "01/06/2024"
        assert fetched.category == ExpenseCategory.GROCERIES
        assert fetched.user_id == ALICE

    async def test_owner_is_the_caller(self, ledger):
        """Test that the owner comes from the caller, not the payload."""
        created = await create_shop(ledger, caller_id=BOB)
        assert created.user_id == BOB

    async def test_strips_whitespace(self, ledger):
        """Test that text fields and the category are trimmed."""
        created = await create_shop(ledger, title="  Rent ", category=" Utilities ")
        assert created.title == "Rent"
        assert created.category == ExpenseCategory.UTILITIES

    @pytest.mark.parametrize("overrides", [
        {"title": ""},
        {"amount": None},
        {"amount": 0},
        {"amount": "abc"},
        {"date": "2024-06-01"},
        {"category": "Food"},
        {"category": "groceries"},
    ])
    async def test_invalid_payload(self, ledger, expense_storage, overrides):
        """Test that a bad payload is rejected and nothing is stored."""
        with pytest.raises(ValidationError):
            await create_shop(ledger, **overrides)
        assert await expense_storage.find_all() == []

    @pytest.mark.parametrize("caller_id", [0, -1, None, "1", True])
    async def test_requires_resolved_caller(self, ledger, caller_id):
        """Test that a call without a real caller id is refused."""
        with pytest.raises(Unauthorized):
            await create_shop(ledger, caller_id=caller_id)


class TestOwnership:
    """Tests for the owner-only gate on get/update/delete."""

    async def test_other_user_cannot_get(self, ledger):
        """Test that reading someone else's expense is Forbidden."""
        created = await create_shop(ledger, caller_id=ALICE)
        with pytest.raises(Forbidden):
            await ledger.get(BOB, created.id)

    async def test_other_user_cannot_update(self, ledger):
        """Test that updating someone else's expense is Forbidden and changes nothing."""
        created = await create_shop(ledger, caller_id=ALICE)
        with pytest.raises(Forbidden):
            await ledger.update(BOB, created.id, {"title": "Mine now"})
        assert (await ledger.get(ALICE, created.id)).title == "Weekly shop"

    async def test_other_user_cannot_delete(self, ledger):
        """Test that deleting someone else's expense is Forbidden and keeps it."""
        created = await create_shop(ledger, caller_id=ALICE)
        with pytest.raises(Forbidden):
            await ledger.delete(BOB, created.id)
        assert (await ledger.get(ALICE, created.id)).id == created.id

    async def test_missing_is_not_found_not_forbidden(self, ledger):
        """Test that a non-existent id is NotFound for any caller."""
        with pytest.raises(NotFound):
            await ledger.get(BOB, 999)

    async def test_ownership_checked_before_payload(self, ledger):
        """Test that a bad update from a non-owner is Forbidden, not a validation error."""
        created = await create_shop(ledger, caller_id=ALICE)
        with pytest.raises(Forbidden):
            await ledger.update(BOB, created.id, {"category": "Nope"})

    async def test_list_mine_only_returns_own(self, ledger):
        """Test that listing never includes another user's expenses."""
        await create_shop(ledger, caller_id=ALICE)
        await create_shop(ledger, caller_id=BOB, title="Bob's")
        mine = await ledger.list_mine(BOB)
        assert [expense.title for expense in mine] == ["Bob's"]

    async def test_list_mine_empty_is_not_found(self, ledger):
        """Test that an empty listing is NotFound."""
        await create_shop(ledger, caller_id=ALICE)
        with pytest.raises(NotFound):
            await ledger.list_mine(BOB)

    async def test_list_owned_may_be_empty(self, ledger):
        """Test that the underlying read returns an empty list."""
        assert await ledger.list_owned(BOB) == []


class TestUpdate:
    """Tests for partial updates."""

    async def test_update_title(self, ledger):
        """Test that a supplied field replaces the stored value."""
        created = await create_shop(ledger)
        updated = await ledger.update(ALICE, created.id, {"title": "Big shop"})
        assert updated.title == "Big shop"
        assert updated.description == "Vegetables"

    async def test_zero_amount_leaves_amount(self, ledger):
        """Test that an amount of 0 means 'unchanged'."""
        created = await create_shop(ledger)
        updated = await ledger.update(ALICE, created.id, {"amount": 0, "title": ""})
        assert updated.amount == Decimal("42.50")
        assert updated.title == "Weekly shop"

    async def test_owner_in_payload_is_ignored(self, ledger):
        """Test that an update cannot move an expense to another owner."""
        created = await create_shop(ledger)
        await ledger.update(ALICE, created.id, {"userId": BOB, "user_id": BOB})
        assert (await ledger.get(ALICE, created.id)).user_id == ALICE
        with pytest.raises(Forbidden):
            await ledger.get(BOB, created.id)

    async def test_category_and_date(self, ledger):
        """Test that category and date can be changed."""
        created = await create_shop(ledger)
        updated = await ledger.update(
            ALICE, created.id, ExpenseUpdate(category="Health", date="02/06/2024")
        )
        assert updated.category == ExpenseCategory.HEALTH
        assert updated.date == "02/06/2024"

    @pytest.mark.parametrize("changes", [
        {"category": "Food"},
        {"date": "June 2nd"},
        {"amount": -5},
        {"amount": "abc"},
        ["title", "x"],
        None,
    ])
    async def test_invalid_update(self, ledger, changes):
        """Test that malformed updates are rejected."""
        created = await create_shop(ledger)
        with pytest.raises(ValidationError):
            await ledger.update(ALICE, created.id, changes)

    async def test_update_touches_updated_at(self, ledger):
        """Test that a save moves updated_at but not created_at."""
        created = await create_shop(ledger)
        updated = await ledger.update(ALICE, created.id, {"title": "Later"})
        assert updated.meta.created_at == created.meta.created_at
        assert updated.meta.updated_at >= created.meta.updated_at

    @pytest.mark.parametrize("changes", [
        {"title": "x" * 201},
        {"description": "x" * 1001},
    ])
    async def test_overlong_update_keeps_stored_record(self, ledger, changes):
        """Test that an update past the field limits is refused and nothing changes."""
        created = await create_shop(ledger)
        with pytest.raises(ValidationError):
            await ledger.update(ALICE, created.id, changes)
        stored = await ledger.get(ALICE, created.id)
        assert stored.title == "Weekly shop"
        assert stored.description == "Vegetables"


class TestDelete:
    """Tests for LedgerService.delete."""

    async def test_delete_then_get(self, ledger):
        """Test that a deleted expense is gone."""
        created = await create_shop(ledger)
        await ledger.delete(ALICE, created.id)
        with pytest.raises(NotFound):
            await ledger.get(ALICE, created.id)

    async def test_second_delete_is_not_found(self, ledger):
        """Test that deleting twice is NotFound the second time."""
        created = await create_shop(ledger)
        await ledger.delete(ALICE, created.id)
        with pytest.raises(NotFound):
            await ledger.delete(ALICE, created.id)

    async def test_delete_that_does_not_take_effect(self, ledger, expense_storage, monkeypatch):
        """Test that a store reporting nothing removed is a storage error."""
        created = await create_shop(ledger)

        async def no_op_delete(expense_id):
            return None

        monkeypatch.setattr(expense_storage, "delete", no_op_delete)
        with pytest.raises(StorageError):
            await ledger.delete(ALICE, created.id)

    async def test_deleted_id_is_not_reassigned(self, ledger):
        """Test that a later expense of another user never reuses a deleted id."""
        created = await create_shop(ledger)
        await ledger.delete(ALICE, created.id)
        other = await create_shop(ledger, caller_id=BOB)
        assert other.id != created.id
        with pytest.raises(NotFound):
            await ledger.delete(ALICE, created.id)
