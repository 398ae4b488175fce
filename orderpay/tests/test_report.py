"""Tests for the payment report frames."""

from ..processors.report import SUMMARY_COLUMNS, payment_summary, totals_by_method
from .factories import make_order

def sample_orders():
    return [
        make_order('o1', total='20', payment_type='cash:10, card:5', status='delivered', delivery_person_id='dp1'),
        make_order('o2', total='8'),
        make_order('o3', total='6', payment_type='cash:6')
    ]

def test_payment_summary():
    df = payment_summary(sample_orders())

    assert list(df.columns) == SUMMARY_COLUMNS + ['cash', 'card']
    assert df['id'].tolist() == ['o1', 'o2', 'o3']
    assert df['payment_status'].tolist() == ['PARTIAL', 'UNPAID', 'PAID']
    assert df['remaining'].tolist() == [5.0, 8.0, 0.0]
    assert df['cash'].tolist() == [10.0, 0.0, 6.0]
    assert df['card'].tolist() == [5.0, 0.0, 0.0]

def test_totals_by_method():
    totals = totals_by_method(sample_orders())
    assert totals.to_dict() == {'cash': 16.0, 'card': 5.0}
    assert totals.name == 'amount'

def test_empty_report():
    df = payment_summary([])
    assert df.empty
    assert list(df.columns) == SUMMARY_COLUMNS
    assert totals_by_method([]).empty
