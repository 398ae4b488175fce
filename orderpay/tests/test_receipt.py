"""Tests for printer fan-out and tax breakdown."""

from ..processors.receipt import (
    bucket_tax_by_rate,
    group_by_printer,
    parse_printer_tag,
    prepare_print_jobs
)
from .factories import D, make_item, make_menu_item

BAR = 'p1|Bar|true'
KITCHEN = 'p2|Kitchen|false'

def sample_items():
    coffee = make_item(name='Coffee', price='2', tax='0.20', printers=[BAR, KITCHEN], product_priority=2)
    toast = make_item(name='Toast', price='5', tax='1.05', quantity=2, printers=[KITCHEN, BAR], product_priority=1)
    burger = make_menu_item(name='Burger', menu_price='10', menu_tax='1', printers=[KITCHEN])
    return coffee, toast, burger

def test_parse_printer_tag():
    route = parse_printer_tag(BAR)
    assert (route.printer_id, route.printer_name, route.is_main) == ('p1', 'Bar', True)
    assert parse_printer_tag(KITCHEN).is_main is False

def test_items_fan_out_to_every_printer():
    coffee, toast, burger = sample_items()

    groups = group_by_printer([coffee, toast, burger])

    assert list(groups) == [('Bar', True), ('Kitchen', False)]
    assert groups[('Bar', True)] == [coffee, toast]
    assert groups[('Kitchen', False)] == [coffee, toast, burger]

def test_repeated_tag_lists_item_once():
    item = make_item(name='Water', price='1', printers=[BAR, BAR])
    assert group_by_printer([item]) == {('Bar', True): [item]}

def test_malformed_tags_are_ignored(caplog):
    item = make_item(name='Water', price='1', printers=['broken', 'p3|Terrace'])
    assert group_by_printer([item]) == {}
    assert 'malformed printer tag' in caplog.text

def test_tax_buckets_by_rate():
    buckets = bucket_tax_by_rate(sample_items())

    assert sorted(buckets) == [10, 21]
    assert (buckets[10].base, buckets[10].tax) == (D('12'), D('1.20'))
    assert (buckets[21].base, buckets[21].tax) == (D('10'), D('2.10'))

def test_zero_base_item_lands_in_zero_bucket():
    buckets = bucket_tax_by_rate([make_item(name='Gift', price='0', tax='0')])
    assert list(buckets) == [0]

def test_empty_order_gets_default_bucket():
    buckets = bucket_tax_by_rate([], D('11'))
    assert (buckets[10].base, buckets[10].tax) == (D('10'), D('1'))

    buckets = bucket_tax_by_rate([], D('12.1'), default_rate=21)
    assert (buckets[21].base, buckets[21].tax) == (D('10'), D('2.1'))

def test_print_jobs():
    coffee, toast, burger = sample_items()

    main, kitchen = prepare_print_jobs([coffee, toast, burger])

    assert main.printer_name == 'Bar'
    assert main.is_main
    assert main.items == [toast, coffee]
    assert main.order_total == D('14.30')
    assert sorted(main.tax_buckets) == [10, 21]

    assert kitchen.printer_name == 'Kitchen'
    assert kitchen.items == [burger, toast, coffee]
    assert kitchen.tax_buckets is None
    assert kitchen.order_total is None
    assert [g.key for g in kitchen.menu_groups] == ['m1-1']
    assert kitchen.non_menu_items == [toast, coffee]
