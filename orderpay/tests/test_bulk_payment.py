"""Tests for bulk payment allocation across orders."""

from datetime import datetime

import pytest

from ..domain import PaymentEntry
from ..exceptions import PaymentValidationError
from ..processors.bulk_payment import (
    BulkPaymentAllocator,
    allocate_bulk_payment,
    created_timestamp,
    outstanding_total,
    select_bulk_candidates,
    split_proportionally
)
from ..processors.ledger import ledger_total, parse_ledger
from ..processors.pricing import price_order
from .conftest import RecordingUpdater
from .factories import D, make_order

def cash(amount):
    return [PaymentEntry('cash', D(amount))]

def test_oldest_order_paid_first(updater):
    older = make_order('a', total='30', created_at='2024-05-01T10:00:00Z')
    newer = make_order('b', total='20', created_at='2024-05-01T12:00:00Z')

    result = allocate_bulk_payment([newer, older], cash('40'), updater)

    assert [r.order_id for r in result.per_order_results] == ['a', 'b']
    assert updater.stored['a'].payment_type == 'cash:30'
    assert updater.stored['a'].is_paid is True
    assert updater.stored['b'].payment_type == 'cash:10'
    assert updater.stored['b'].is_paid is False
    assert result.applied_count == 2
    assert result.attempted_count == 2
    assert result.full_success
    assert result.remaining_bulk == D('0')

def test_newer_order_untouched_until_older_is_covered(updater):
    older = make_order('a', total='30', created_at=datetime(2024, 5, 1, 10))
    newer = make_order('b', total='20', created_at=datetime(2024, 5, 1, 12))

    result = allocate_bulk_payment([newer, older], cash('25'), updater)

    assert list(updater.stored) == ['a']
    assert updater.stored['a'].payment_type == 'cash:25'
    assert result.applied_count == 1
    assert result.attempted_count == 2
    assert not result.full_success

def test_methods_split_by_share():
    updater = RecordingUpdater()
    orders = [
        make_order('a', total='25', created_at='2024-05-01T10:00:00'),
        make_order('b', total='25', created_at='2024-05-01T11:00:00')
    ]

    result = allocate_bulk_payment(orders, [PaymentEntry('cash', D('30')), PaymentEntry('card', D('10'))], updater)

    assert updater.stored['a'].payment_type == 'cash:18.75, card:6.25'
    assert updater.stored['b'].payment_type == 'cash:11.25, card:3.75'
    assert result.allocated == D('40')

def test_allocation_merges_existing_ledger(updater):
    order = make_order('a', total='30', payment_type='card:10')

    result = allocate_bulk_payment([order], cash('50'), updater)

    assert result.per_order_results[0].applied == D('20')
    assert updater.stored['a'].payment_type == 'card:10, cash:20'
    assert updater.stored['a'].is_paid is True
    assert result.remaining_bulk == D('30')

def test_money_is_conserved(updater):
    orders = [
        make_order('a', total='12.40', payment_type='cash:2'),
        make_order('b', total='7.15'),
        make_order('c', total='30')
    ]
    methods = [PaymentEntry('cash', D('20')), PaymentEntry('card', D('5'))]

    result = allocate_bulk_payment(orders, methods, updater)

    allocated = sum((r.applied for r in result.per_order_results if r.success), D('0'))
    assert allocated + result.remaining_bulk == D('25')
    for order in orders:
        before = ledger_total(parse_ledger(order.payment_type))
        after = ledger_total(parse_ledger(updater.stored[order.id].payment_type))
        assert before <= after <= price_order(order.items).order_total

def test_failed_update_does_not_spend_money():
    updater = RecordingUpdater(fail_for={'a'})
    orders = [
        make_order('a', total='30', created_at='2024-05-01T10:00:00'),
        make_order('b', total='20', created_at='2024-05-01T11:00:00')
    ]
    allocator = BulkPaymentAllocator(updater)

    result = allocator.allocate(orders, cash('40'))

    assert result.applied_count == 1
    assert result.attempted_count == 2
    assert not result.full_success
    assert [f.order_id for f in result.failures] == ['a']
    assert updater.stored['b'].payment_type == 'cash:20'
    assert result.remaining_bulk == D('20')
    assert allocator.error_tracker.get_summary()['counts'] == {'ORDER_UPDATE_FAILED': 1}
    assert allocator.error_tracker.failed_orders == ['a']

def test_raising_collaborator_counts_as_failure():
    updater = RecordingUpdater(raise_for={'a'})
    result = allocate_bulk_payment([make_order('a', total='10')], cash('10'), updater)
    assert result.applied_count == 0
    assert result.attempted_count == 1
    assert 'backend unreachable' in result.per_order_results[0].error

def test_orders_without_dates_go_first(updater):
    dated = make_order('dated', total='10', created_at='2024-05-01T10:00:00')
    undated = make_order('undated', total='10')
    garbled = make_order('garbled', total='10', created_at='yesterday')

    result = allocate_bulk_payment([dated, undated, garbled], cash('30'), updater)

    assert [r.order_id for r in result.per_order_results] == ['undated', 'garbled', 'dated']
    assert created_timestamp(garbled) == 0.0

def test_epoch_millisecond_dates_sort_with_iso_dates(updater):
    newest = make_order('new', total='10', created_at=2000000000000)
    oldest = make_order('old', total='10', created_at='2020-01-01T00:00:00')
    middle = make_order('mid', total='10', created_at=1600000000000.0)

    result = allocate_bulk_payment([newest, oldest, middle], cash('30'), updater)

    assert [r.order_id for r in result.per_order_results] == ['old', 'mid', 'new']
    assert created_timestamp(newest) == 2000000000.0

def test_oldest_by_epoch_is_paid_alone(updater):
    newest = make_order('new', total='10', created_at=2000000000000)
    oldest = make_order('old', total='10', created_at='2020-01-01T00:00:00')

    allocate_bulk_payment([newest, oldest], cash('10'), updater)

    assert list(updater.stored) == ['old']

def test_non_finite_and_boolean_dates_count_as_zero():
    assert created_timestamp(make_order('nan', created_at=float('nan'))) == 0.0
    assert created_timestamp(make_order('flag', created_at=True)) == 0.0

def test_paid_candidate_is_skipped(updater):
    paid = make_order('paid', total='10', payment_type='cash:10')
    due = make_order('due', total='10')

    result = allocate_bulk_payment([paid, due], cash('10'), updater)

    assert list(updater.stored) == ['due']
    assert [r.order_id for r in result.per_order_results] == ['due']

def test_nothing_to_allocate(updater):
    order = make_order('a', total='10')

    no_money = allocate_bulk_payment([order], cash('0'), updater)
    no_orders = allocate_bulk_payment([], cash('10'), updater)

    for result in (no_money, no_orders):
        assert result.applied_count == 0
        assert result.attempted_count == 0
        assert result.full_success
        assert result.per_order_results == []
    assert updater.calls == []

def test_negative_method_rejected(updater):
    with pytest.raises(PaymentValidationError):
        allocate_bulk_payment([make_order('a', total='10')], [PaymentEntry('cash', D('-1'))], updater)

def test_rounded_shares_can_leave_order_short(updater):
    """Shares are rounded per method, so a three-way split of 10 records 9.99."""
    methods = [PaymentEntry('cash', D('10')), PaymentEntry('card', D('10')), PaymentEntry('bank', D('10'))]

    result = allocate_bulk_payment([make_order('a', total='10')], methods, updater)

    assert updater.stored['a'].payment_type == 'cash:3.33, card:3.33, bank:3.33'
    assert updater.stored['a'].is_paid is False
    assert result.per_order_results[0].applied == D('10')
    assert result.remaining_bulk == D('20')

def test_split_drops_zero_shares():
    methods = [PaymentEntry('cash', D('99.999')), PaymentEntry('card', D('0.001'))]
    shares = split_proportionally(methods, D('100'), D('1'))
    assert shares == [PaymentEntry('cash', D('1.00'))]

def test_select_bulk_candidates():
    orders = [
        make_order('a', total='10', status='delivered', delivery_person_id='dp1'),
        make_order('b', total='10', status='delivered', delivery_person_id='dp1', payment_type='cash:4'),
        make_order('c', total='10', status='delivered', delivery_person_id='dp1', payment_type='cash:10'),
        make_order('d', total='10', status='pending', delivery_person_id='dp1'),
        make_order('e', total='10', status='delivered', delivery_person_id='dp2')
    ]

    candidates = select_bulk_candidates(orders, 'dp1')

    assert [o.id for o in candidates] == ['a', 'b']
    assert outstanding_total(candidates) == D('16')

def test_candidates_become_paid(updater):
    orders = [
        make_order('a', total='10', status='delivered', delivery_person_id='dp1'),
        make_order('b', total='5', status='delivered', delivery_person_id='dp1', payment_type='card:1')
    ]
    candidates = select_bulk_candidates(orders, 'dp1')

    allocate_bulk_payment(candidates, cash(outstanding_total(candidates)), updater)

    for order in orders:
        order.payment_type = updater.stored[order.id].payment_type
    assert select_bulk_candidates(orders, 'dp1') == []
    assert all(updater.stored[o.id].is_paid for o in orders)
