"""
Unit tests for the linked-record synchronizer.

Tests the pure field mappings and the create/update/delete decisions,
including recovery when the budget side fails.
"""

import pytest
from datetime import datetime
from decimal import Decimal
from unittest.mock import patch

from backend.src.models import BudgetItem, Sponsor, StaffAssignment
from backend.src.services.budget_service import BudgetService
from backend.src.services.budget_sync_service import (
    STAFF_ITEM_NOTES,
    BudgetSyncService,
    sponsor_actual_cost,
    sponsor_budget_fields,
    staff_budget_fields,
)
from backend.src.services.exceptions import ValidationError


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def sync_service(test_db_session):
    return BudgetSyncService(test_db_session)


@pytest.fixture
def event(sample_event):
    return sample_event()


@pytest.fixture
def staff(sample_staff):
    return sample_staff(first_name='Anna', last_name='Rossi')


@pytest.fixture
def category(sample_category, event):
    return sample_category(event, name='Staff')


@pytest.fixture
def make_assignment(test_db_session, event, staff):
    def _create(payment_amount=Decimal('500.00'), payment_status='pending'):
        assignment = StaffAssignment(
            event_id=event.id,
            staff_id=staff.id,
            start_time=datetime(2026, 5, 12, 8),
            end_time=datetime(2026, 5, 12, 18),
            payment_amount=payment_amount,
            payment_status=payment_status,
        )
        test_db_session.add(assignment)
        return assignment
    return _create


# ============================================================================
# Field Mapping Tests
# ============================================================================


class TestFieldMapping:
    """Tests for the pure owner -> item mappings."""

    def test_staff_fields(self):
        fields = staff_budget_fields('Anna', 'Rossi', Decimal('500'), 'pending')

        assert fields == {
            'description': 'Staff payment: Rossi Anna',
            'estimated_cost': Decimal('500.00'),
            'actual_cost': Decimal('500.00'),
            'status': 'approved',
            'vendor': 'Anna Rossi',
            'notes': STAFF_ITEM_NOTES,
        }

    def test_staff_fields_paid(self):
        assert staff_budget_fields('Anna', 'Rossi', Decimal('500'), 'paid')['status'] == 'paid'

    def test_staff_fields_missing_amount_is_zero(self):
        fields = staff_budget_fields('Anna', 'Rossi', None, 'not_due')
        assert fields['estimated_cost'] == Decimal('0.00')
        assert fields['actual_cost'] == Decimal('0.00')

    @pytest.mark.parametrize('status,expected', [
        ('paid', Decimal('1000.00')),
        ('partial', Decimal('500.00')),
        ('pending', Decimal('0.00')),
    ])
    def test_sponsor_actual_cost(self, status, expected):
        assert sponsor_actual_cost(Decimal('1000'), status) == expected

    def test_sponsor_partial_rounds_to_cents(self):
        assert sponsor_actual_cost(Decimal('0.05'), 'partial') == Decimal('0.02')

    def test_sponsor_fields(self):
        paid_on = datetime(2026, 4, 1)
        fields = sponsor_budget_fields('Acme Corp', Decimal('1000'), 'paid', paid_on)

        assert fields['description'] == 'Sponsor: Acme Corp'
        assert fields['status'] == 'paid'
        assert fields['vendor'] == 'Acme Corp'
        assert fields['payment_date'] == paid_on

    def test_sponsor_fields_unpaid_is_planned(self):
        assert sponsor_budget_fields('Acme Corp', Decimal('1000'), 'partial')['status'] == 'planned'


# ============================================================================
# Sync Decision Tests
# ============================================================================


class TestSyncStaffAssignment:
    """Tests for create/update/no-op decisions on assignments."""

    def test_creates_item_for_positive_amount(
        self, sync_service, make_assignment, staff, category, test_db_session
    ):
        assignment = make_assignment()

        item = sync_service.sync_staff_assignment(assignment, staff, category)
        test_db_session.commit()

        assert item is not None
        assert assignment.budget_item_id == item.id
        assert item.category_id == category.id
        assert item.event_id == assignment.event_id
        test_db_session.refresh(category)
        assert category.spent_amount == Decimal('500.00')

    def test_no_item_without_category(self, sync_service, make_assignment, staff, test_db_session):
        assignment = make_assignment()

        assert sync_service.sync_staff_assignment(assignment, staff, None) is None
        assert assignment.budget_item_id is None
        assert test_db_session.query(BudgetItem).count() == 0

    def test_no_item_for_zero_amount(self, sync_service, make_assignment, staff, category, test_db_session):
        assignment = make_assignment(payment_amount=Decimal('0'))

        assert sync_service.sync_staff_assignment(assignment, staff, category) is None
        assert test_db_session.query(BudgetItem).count() == 0

    def test_resync_updates_same_item(self, sync_service, make_assignment, staff, category, test_db_session):
        """Repeated syncs keep exactly one item and converge on the owner state."""
        assignment = make_assignment()
        first = sync_service.sync_staff_assignment(assignment, staff, category)
        test_db_session.commit()

        assignment.payment_amount = Decimal('650.00')
        second = sync_service.sync_staff_assignment(assignment, staff, None)
        test_db_session.commit()

        assert second.id == first.id
        assert test_db_session.query(BudgetItem).count() == 1
        test_db_session.refresh(category)
        assert category.spent_amount == Decimal('650.00')

    def test_zero_amount_keeps_existing_item_at_zero(
        self, sync_service, make_assignment, staff, category, test_db_session
    ):
        assignment = make_assignment()
        item = sync_service.sync_staff_assignment(assignment, staff, category)
        test_db_session.commit()

        assignment.payment_amount = None
        sync_service.sync_staff_assignment(assignment, staff, None)
        test_db_session.commit()

        test_db_session.refresh(item)
        test_db_session.refresh(category)
        assert item.estimated_cost == Decimal('0.00')
        assert item.actual_cost == Decimal('0.00')
        assert category.spent_amount == Decimal('0.00')
        assert assignment.budget_item_id == item.id

    def test_category_change_moves_item(
        self, sync_service, make_assignment, staff, category, sample_category, event, test_db_session
    ):
        other = sample_category(event, name='Security')
        assignment = make_assignment()
        item = sync_service.sync_staff_assignment(assignment, staff, category)
        test_db_session.commit()

        sync_service.sync_staff_assignment(assignment, staff, other)
        test_db_session.commit()

        test_db_session.refresh(category)
        test_db_session.refresh(other)
        test_db_session.refresh(item)
        assert item.category_id == other.id
        assert category.spent_amount == Decimal('0.00')
        assert other.spent_amount == Decimal('500.00')

    def test_stale_pointer_treated_as_unlinked(
        self, sync_service, make_assignment, staff, category, test_db_session
    ):
        assignment = make_assignment()
        assignment.budget_item_id = 4242
        test_db_session.flush()

        item = sync_service.sync_staff_assignment(assignment, staff, category)
        test_db_session.commit()

        assert item is not None
        assert assignment.budget_item_id == item.id

    def test_create_failure_keeps_owner_unlinked(
        self, sync_service, make_assignment, staff, category, test_db_session
    ):
        assignment = make_assignment()

        with patch.object(BudgetService, 'create_item', side_effect=RuntimeError('db down')):
            item = sync_service.sync_staff_assignment(assignment, staff, category)
        test_db_session.commit()

        assert item is None
        assert assignment.id is not None
        assert assignment.budget_item_id is None
        assert test_db_session.query(BudgetItem).count() == 0

    def test_update_failure_leaves_item_stale(
        self, sync_service, make_assignment, staff, category, test_db_session
    ):
        assignment = make_assignment()
        item = sync_service.sync_staff_assignment(assignment, staff, category)
        test_db_session.commit()

        assignment.payment_amount = Decimal('900.00')
        with patch.object(BudgetService, 'update_item', side_effect=RuntimeError('db down')):
            assert sync_service.sync_staff_assignment(assignment, staff, None) is None
        test_db_session.commit()

        test_db_session.refresh(item)
        test_db_session.refresh(assignment)
        assert assignment.payment_amount == Decimal('900.00')
        assert assignment.budget_item_id == item.id
        assert item.estimated_cost == Decimal('500.00')

    def test_resolve_category_from_other_event(
        self, sync_service, sample_category, sample_event, event
    ):
        foreign = sample_category(sample_event(title='Other event'), name='Staff')

        with pytest.raises(ValidationError) as exc_info:
            sync_service.resolve_category(foreign.guid, event.id)
        assert exc_info.value.field == 'budget_category_guid'


class TestSyncSponsor:
    """Tests for sponsor syncing into the income category."""

    def test_defaults_to_income_category(self, sync_service, event, test_db_session):
        sponsor = Sponsor(
            event_id=event.id,
            company_name='Acme Corp',
            sponsorship_amount=Decimal('1000.00'),
            payment_status='partial',
        )
        test_db_session.add(sponsor)

        item = sync_service.sync_sponsor(sponsor)
        test_db_session.commit()

        assert item.category.name == 'Income'
        assert item.actual_cost == Decimal('500.00')
        assert item.category.spent_amount == Decimal('500.00')


class TestUnlink:
    """Tests for deleting the linked item before the owner."""

    def test_unlink_deletes_item(self, sync_service, make_assignment, staff, category, test_db_session):
        assignment = make_assignment()
        sync_service.sync_staff_assignment(assignment, staff, category)
        test_db_session.commit()

        assert sync_service.unlink(assignment) is True
        test_db_session.commit()

        assert test_db_session.query(BudgetItem).count() == 0
        test_db_session.refresh(category)
        assert category.spent_amount == Decimal('0.00')

    def test_unlink_without_item(self, sync_service, make_assignment, test_db_session):
        assignment = make_assignment()
        test_db_session.flush()
        assert sync_service.unlink(assignment) is True

    def test_unlink_failure_reports_false(
        self, sync_service, make_assignment, staff, category, test_db_session
    ):
        assignment = make_assignment()
        sync_service.sync_staff_assignment(assignment, staff, category)
        test_db_session.commit()

        with patch.object(BudgetService, 'delete_item', side_effect=RuntimeError('locked')):
            assert sync_service.unlink(assignment) is False
        test_db_session.commit()

        assert test_db_session.query(BudgetItem).count() == 1
