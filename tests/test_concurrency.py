"""Concurrent transitions on the same order must not interleave."""

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from errors import ConflictError, NotFoundError
from schemas import OrderItemRequest, OrderStatus
from services.locks import KeyedLock

WORKERS = 16


def _new_order(engine):
    order, _ = engine.create_order("S1", [OrderItemRequest(product_id="P1", quantity=1)])
    return order


def test_only_one_claim_wins(engine, repository):
    order = _new_order(engine)

    def claim(i):
        try:
            engine.claim_payment(order.order_id, f"{i:04d}", 105)
            return i
        except ConflictError:
            return None

    with ThreadPoolExecutor(max_workers=WORKERS) as pool:
        results = list(pool.map(claim, range(WORKERS)))

    winners = [r for r in results if r is not None]
    assert len(winners) == 1
    stored = repository.find_by_id(order.order_id)
    assert stored.status == OrderStatus.PAYMENT_CLAIMED
    assert stored.utr_last4 == f"{winners[0]:04d}"


def test_only_one_exit_allowed(engine):
    order = _new_order(engine)
    engine.verify_order(order.order_id, "c1", True)

    with ThreadPoolExecutor(max_workers=WORKERS) as pool:
        decisions = list(pool.map(lambda _: engine.scan_exit(order.order_id), range(WORKERS)))

    assert sum(d.allow_exit for d in decisions) == 1


def test_every_verification_is_logged(engine, repository):
    order = _new_order(engine)
    flags = [i % 2 == 0 for i in range(WORKERS * 2)]

    with ThreadPoolExecutor(max_workers=WORKERS) as pool:
        list(pool.map(lambda f: engine.verify_order(order.order_id, "c1", f), flags))

    assert len(repository.list_verifications(order.order_id)) == len(flags)
    assert repository.find_by_id(order.order_id).status in {
        OrderStatus.VERIFIED,
        OrderStatus.REJECTED,
    }


class TestKeyedLock:
    def test_entry_released_after_hold(self):
        locks = KeyedLock()
        with locks.hold("a"):
            with locks.hold("b"):
                assert len(locks) == 2
            assert len(locks) == 1
        assert len(locks) == 0

    def test_entry_released_when_body_raises(self):
        locks = KeyedLock()
        with pytest.raises(ValueError):
            with locks.hold("a"):
                raise ValueError("boom")
        assert len(locks) == 0

    def test_waiter_shares_the_holders_lock(self):
        locks = KeyedLock()
        entered = threading.Event()
        order = []

        def waiter():
            entered.set()
            with locks.hold("a"):
                order.append("waiter")

        with locks.hold("a"):
            thread = threading.Thread(target=waiter)
            thread.start()
            entered.wait(timeout=5)
            thread.join(timeout=0.1)
            order.append("holder")
        thread.join(timeout=5)

        assert order == ["holder", "waiter"]
        assert len(locks) == 0

    def test_unknown_orders_leave_no_locks(self, engine):
        for i in range(1000):
            with pytest.raises(NotFoundError):
                engine.scan_exit(f"BOGUS{i}")
        assert len(engine._locks) == 0

    def test_transitions_leave_no_locks(self, engine):
        order = _new_order(engine)
        engine.claim_payment(order.order_id, "4321", 105)
        engine.verify_order(order.order_id, "c1", True)
        engine.scan_exit(order.order_id)
        assert len(engine._locks) == 0
