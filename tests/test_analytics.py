"""Tests for dashboard analytics."""

from datetime import timedelta

from conftest import START
from schemas import OrderItemRequest
from services.analytics_service import compute_dashboard


def place(engine, product_id, qty=1, store_id="S1"):
    order, _ = engine.create_order(
        store_id, [OrderItemRequest(product_id=product_id, quantity=qty)]
    )
    return order


def complete(engine, order):
    engine.claim_payment(order.order_id, "0000", order.total)
    engine.verify_order(order.order_id, "c1", True)
    engine.scan_exit(order.order_id)


def test_empty_repository(repository):
    analytics = compute_dashboard(repository, now=START)
    assert analytics.total_orders == 0
    assert analytics.completed_orders == 0
    assert analytics.total_revenue == 0
    assert analytics.average_order_value == 0


def test_no_completed_orders_average_is_zero(engine, repository):
    place(engine, "P1")
    order = place(engine, "P2")
    engine.claim_payment(order.order_id, "1234", order.total)
    analytics = compute_dashboard(repository, now=START)
    assert analytics.total_orders == 2
    assert analytics.pending_orders == 2
    assert analytics.completed_orders == 0
    assert analytics.average_order_value == 0


def test_mixed_statuses(engine, repository, clock):
    clock.current = START - timedelta(days=1)
    yesterday = place(engine, "P1", 2)  # 210
    complete(engine, yesterday)

    clock.current = START
    today_done = place(engine, "P3")  # 155 + 8 = 163
    complete(engine, today_done)
    rejected = place(engine, "P2")
    engine.claim_payment(rejected.order_id, "1111", 32)
    engine.verify_order(rejected.order_id, "c1", False)
    place(engine, "P2")  # pending_payment
    verified = place(engine, "P2")
    engine.verify_order(verified.order_id, "c1", True)

    analytics = compute_dashboard(repository, now=START + timedelta(hours=2))
    assert analytics.total_orders == 5
    assert analytics.today_orders == 4
    assert analytics.completed_orders == 2
    assert analytics.pending_orders == 1
    assert analytics.total_revenue == 373
    assert analytics.today_revenue == 163
    assert analytics.average_order_value == 187  # 186.5 rounds half up


def test_store_filter(engine, repository):
    complete(engine, place(engine, "P1", 1, store_id="S1"))
    complete(engine, place(engine, "P1", 3, store_id="S2"))
    s2 = compute_dashboard(repository, store_id="S2", now=START)
    assert s2.total_orders == 1
    assert s2.total_revenue == 315
    assert s2.average_order_value == 315
    everything = compute_dashboard(repository, now=START)
    assert everything.total_revenue == 420
    assert everything.average_order_value == 210
