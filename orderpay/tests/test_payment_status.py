"""Tests for payment status evaluation."""

from ..domain import PaymentEntry, PaymentStatus
from ..processors.payment_status import evaluate, evaluate_order
from ..utils.money import EPSILON
from .factories import D, make_order

def test_unpaid_partial_paid():
    total = D('20')
    assert evaluate([], total).status == PaymentStatus.UNPAID
    assert evaluate([PaymentEntry('cash', D('5'))], total).status == PaymentStatus.PARTIAL
    assert evaluate([PaymentEntry('cash', D('20'))], total).status == PaymentStatus.PAID

def test_zero_amount_entries_are_unpaid():
    state = evaluate([PaymentEntry('cash', D('0'))], D('10'))
    assert state.status == PaymentStatus.UNPAID
    assert state.remaining_amount == D('10')

def test_remaining_never_negative():
    state = evaluate([PaymentEntry('cash', D('25'))], D('20'))
    assert state.status == PaymentStatus.PAID
    assert state.total_paid == D('25')
    assert state.remaining_amount == D('0')

def test_paid_within_tolerance():
    total = D('20.60')
    assert evaluate([PaymentEntry('card', total - EPSILON)], total).status == PaymentStatus.PAID
    assert evaluate([PaymentEntry('card', total - EPSILON * 2)], total).status == PaymentStatus.PARTIAL

def test_status_only_moves_forward_as_payments_add_up():
    rank = {PaymentStatus.UNPAID: 0, PaymentStatus.PARTIAL: 1, PaymentStatus.PAID: 2}
    ledger = []
    previous = rank[evaluate(ledger, D('10')).status]
    for amount in ['0', '2.5', '2.5', '5', '1']:
        ledger.append(PaymentEntry('cash', D(amount)))
        current = rank[evaluate(ledger, D('10')).status]
        assert current >= previous
        previous = current
    assert previous == rank[PaymentStatus.PAID]

def test_breakdown_keeps_ledger_entries():
    ledger = [PaymentEntry('cash', D('3')), PaymentEntry('card', D('2'))]
    assert evaluate(ledger, D('10')).breakdown == ledger

def test_evaluate_order_prices_current_items():
    order = make_order('o1', total='30', payment_type='cash:10, card:5.50')

    state = evaluate_order(order)

    assert state.status == PaymentStatus.PARTIAL
    assert state.total_paid == D('15.50')
    assert state.remaining_amount == D('14.50')
