"""Pytest fixtures for the scan-and-go backend tests."""

import json
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from config import Settings
from dependencies import build_container
from main import create_app
from repositories.catalog_repository import CatalogStore
from repositories.order_repository import InMemoryOrderRepository
from services.order_lifecycle_service import OrderLifecycleEngine

STORES = [
    {
        "storeId": "S1",
        "name": "Test Store",
        "upiId": "teststore@upi",
        "upiQrCode": "upi://pay?pa=teststore@upi&pn=Test%20Store&cu=INR",
    },
    {
        "storeId": "S2",
        "name": "Second Store",
        "upiId": "second@upi",
        "upiQrCode": "upi://pay?pa=second@upi&pn=Second&cu=INR",
    },
]

PRODUCTS = [
    {"productId": "P1", "barcode": "1000", "name": "Whole Milk", "brand": "Amul", "category": "Dairy", "price": 100},
    {"productId": "P2", "barcode": "2000", "name": "Digestive Biscuits", "brand": "Britannia", "category": "Snacks", "price": 30},
    {"productId": "P3", "barcode": "3000", "name": "Basmati Rice", "brand": "India Gate", "category": "Staples", "price": 155},
    {"productId": "P4", "barcode": "4000", "name": "Peanut Butter", "brand": "Pintola", "category": "Spreads", "price": 0},
]

START = datetime(2026, 3, 14, 9, 30, tzinfo=timezone.utc)


class FakeClock:
    """Deterministic clock; every call advances one second."""

    def __init__(self, start: datetime = START) -> None:
        self.current = start

    def __call__(self) -> datetime:
        value = self.current
        self.current += timedelta(seconds=1)
        return value

    def advance(self, **kwargs) -> None:
        self.current += timedelta(**kwargs)


def write_catalog(directory, stores=STORES, products=PRODUCTS):
    (directory / "stores.json").write_text(json.dumps(stores), encoding="utf-8")
    (directory / "products.json").write_text(json.dumps(products), encoding="utf-8")
    return directory


@pytest.fixture
def data_dir(tmp_path):
    return write_catalog(tmp_path)


@pytest.fixture
def settings(data_dir):
    return Settings(
        data_dir=data_dir,
        order_repository="memory",
        cashfree_base_url="https://cashfree.test",
        cashfree_client_id="cf-client",
        cashfree_client_secret="cf-secret",
        allowed_origins=["http://localhost:5173"],
    )


@pytest.fixture
def catalog(data_dir):
    return CatalogStore.load(data_dir)


@pytest.fixture
def repository():
    return InMemoryOrderRepository()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def engine(catalog, repository, clock):
    return OrderLifecycleEngine(catalog, repository, clock=clock)


@pytest.fixture
def client(settings, catalog, repository):
    container = build_container(settings, catalog=catalog, repository=repository)
    return TestClient(create_app(settings, container))
