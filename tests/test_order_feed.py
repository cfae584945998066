import random
import re
from datetime import datetime

from cloud_kitchen.crud.order import generate_order_number
from cloud_kitchen.services.order_feed import OrderWatcher


def test_first_diff_only_primes():
    watcher = OrderWatcher()
    assert watcher.primed is False
    assert watcher.diff([3, 2, 1]) == []
    assert watcher.primed is True


def test_diff_reports_each_new_order_once():
    watcher = OrderWatcher()
    watcher.diff([2, 1])

    assert watcher.diff([4, 3, 2, 1]) == [4, 3]
    assert watcher.diff([4, 3, 2, 1]) == []
    assert watcher.diff([5, 4, 3]) == [5]


def test_known_ids_skip_priming():
    watcher = OrderWatcher(known_ids=[1])
    assert watcher.primed is True
    assert watcher.diff([2, 1]) == [2]


def test_order_number_format():
    number = generate_order_number(datetime(2026, 1, 15, 9, 5, 7), random.Random(1))
    assert re.fullmatch(r"ORD-20260115-090507-\d{3}", number)
    assert re.fullmatch(r"ORD-\d{8}-\d{6}-\d{3}", generate_order_number())
