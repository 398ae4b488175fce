"""Tests for the SQLAlchemy order store."""

from datetime import datetime

import pytest

from ..db.models import Order as OrderRow
from ..domain import MenuItem, NonMenuItem, Order, PaymentEntry, Tender, UpdateCommand
from ..processors.bulk_payment import allocate_bulk_payment, select_bulk_candidates
from ..processors.payment import PaymentApplicator
from ..processors.pricing import price_order
from .factories import D, make_item, make_menu_item, make_order

def test_order_round_trip(store):
    order = Order(
        id='o1',
        order_id=42,
        items=[
            make_item(name='Coffee', price='8.00', tax='0.80', variant='1.00', complements=['0.50'],
                      quantity=2, printers=['p1|Bar|true']),
            make_menu_item(name='Burger', supplement='0.50')
        ],
        status='delivered',
        delivery_person_id='dp1',
        created_at='2024-05-01T10:00:00Z'
    )

    store.save_order(order)
    loaded = store.get_order('o1')

    assert loaded.order_id == 42
    assert loaded.payment_type == 'pending'
    assert loaded.created_at == datetime(2024, 5, 1, 10, 0)
    coffee, burger = loaded.items
    assert isinstance(coffee, NonMenuItem)
    assert isinstance(burger, MenuItem)
    assert coffee.printers == ['p1|Bar|true']
    assert coffee.complements[0].price == D('0.50')
    assert burger.group_key == 'm1-1'
    assert price_order(loaded.items).order_total == D('32.10')

def test_missing_order(store):
    assert store.get_order('nope') is None
    result = store.submit_order_update('nope', UpdateCommand('nope', 'cash:1', False))
    assert result.success is False
    assert 'not found' in result.error

def test_submit_order_update(store):
    store.save_order(make_order('o1', total='10'))

    result = store.submit_order_update('o1', UpdateCommand('o1', 'cash:10', True))

    assert result.success is True
    loaded = store.get_order('o1')
    assert loaded.payment_type == 'cash:10'
    assert loaded.is_paid is True

def test_list_orders_filters_and_sorts(store):
    store.save_order(make_order('late', total='5', status='delivered', delivery_person_id='dp1',
                                created_at='2024-05-02T09:00:00'))
    store.save_order(make_order('early', total='5', status='delivered', delivery_person_id='dp1',
                                created_at='2024-05-01T09:00:00'))
    store.save_order(make_order('other', total='5', status='delivered', delivery_person_id='dp2'))
    store.save_order(make_order('open', total='5', status='pending', delivery_person_id='dp1'))

    assert [o.id for o in store.list_orders(status='delivered', delivery_person_id='dp1')] == ['early', 'late']
    assert len(store.list_orders()) == 4

def test_payment_through_store(store):
    store.save_order(make_order('o1', total='20.60'))

    result = PaymentApplicator(store).process(store.get_order('o1'), [Tender('cash', D('25'))])

    assert result.success
    assert result.change_due == D('4.40')
    loaded = store.get_order('o1')
    assert loaded.payment_type == 'cash:20.6'
    assert loaded.is_paid is True

def test_bulk_payment_through_store(store):
    store.save_order(make_order('a', total='30', status='delivered', delivery_person_id='dp1',
                                created_at='2024-05-01T10:00:00'))
    store.save_order(make_order('b', total='20', status='delivered', delivery_person_id='dp1',
                                created_at='2024-05-01T12:00:00'))

    candidates = select_bulk_candidates(store.list_orders(delivery_person_id='dp1'), 'dp1')
    result = allocate_bulk_payment(candidates, [PaymentEntry('cash', D('40'))], store)

    assert result.full_success
    assert store.get_order('a').payment_type == 'cash:30'
    assert store.get_order('b').payment_type == 'cash:10'
    assert store.get_order('b').is_paid is False

def test_epoch_millisecond_created_at(store):
    store.save_order(make_order('o1', total='5', created_at=1714557600000))
    assert store.get_order('o1').created_at == datetime(2024, 5, 1, 10, 0)

def test_failed_session_rolls_back(store, session_manager, caplog):
    store.save_order(make_order('o1', total='5'))

    with pytest.raises(RuntimeError):
        with session_manager as session:
            session.get(OrderRow, 'o1').paymentType = 'cash:5'
            raise RuntimeError('printer offline')

    assert store.get_order('o1').payment_type == 'pending'
    assert 'Rolling back order changes after RuntimeError' in caplog.text
