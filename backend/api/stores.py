from fastapi import APIRouter, Depends

from dependencies import get_catalog
from repositories.catalog_repository import CatalogStore
from schemas import StoreListResponse, StoreResponse

router = APIRouter(prefix="/api/stores", tags=["stores"])


@router.get("", response_model=StoreListResponse)
async def list_stores(catalog: CatalogStore = Depends(get_catalog)) -> StoreListResponse:
    return StoreListResponse(stores=catalog.list_stores())


@router.get("/{store_id}", response_model=StoreResponse)
async def read_store(
    store_id: str,
    catalog: CatalogStore = Depends(get_catalog),
) -> StoreResponse:
    return StoreResponse(store=catalog.get_store(store_id))
