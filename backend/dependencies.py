import logging
from dataclasses import dataclass

from fastapi import Request

from config import Settings
from repositories.catalog_repository import CatalogStore
from repositories.order_repository import InMemoryOrderRepository, OrderRepository
from repositories.supabase_order_repository import SupabaseOrderRepository
from services.order_lifecycle_service import OrderLifecycleEngine
from services.payment_gateway_service import CashfreeGateway
from supabase_client import get_supabase

logger = logging.getLogger("scan-and-go")

REPOSITORY_BACKENDS = ("memory", "supabase")


@dataclass
class ServiceContainer:
    settings: Settings
    catalog: CatalogStore
    repository: OrderRepository
    engine: OrderLifecycleEngine
    gateway: CashfreeGateway


def build_repository(settings: Settings) -> OrderRepository:
    backend = settings.order_repository
    if backend not in REPOSITORY_BACKENDS:
        raise RuntimeError(f"Unsupported ORDER_REPOSITORY backend: {backend}")
    if backend == "supabase":
        client = get_supabase(settings.supabase_url, settings.supabase_service_role_key)
        return SupabaseOrderRepository(client)
    logger.warning(
        "Orders are kept in process memory and are lost on restart; set ORDER_REPOSITORY=supabase for durable storage."
    )
    return InMemoryOrderRepository()


def build_container(
    settings: Settings,
    *,
    catalog: CatalogStore | None = None,
    repository: OrderRepository | None = None,
    gateway: CashfreeGateway | None = None,
) -> ServiceContainer:
    catalog = catalog or CatalogStore.load(settings.data_dir)
    repository = repository or build_repository(settings)
    return ServiceContainer(
        settings=settings,
        catalog=catalog,
        repository=repository,
        engine=OrderLifecycleEngine(catalog, repository),
        gateway=gateway or CashfreeGateway(settings),
    )


def get_container(request: Request) -> ServiceContainer:
    return request.app.state.container


def get_catalog(request: Request) -> CatalogStore:
    return get_container(request).catalog


def get_engine(request: Request) -> OrderLifecycleEngine:
    return get_container(request).engine


def get_repository(request: Request) -> OrderRepository:
    return get_container(request).repository


def get_gateway(request: Request) -> CashfreeGateway:
    return get_container(request).gateway
