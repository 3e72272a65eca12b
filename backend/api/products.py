from typing import Optional

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from dependencies import get_catalog
from errors import NotFoundError, ValidationError
from repositories.catalog_repository import CatalogStore
from schemas import ProductListResponse, ProductResponse

router = APIRouter(prefix="/api/products", tags=["products"])


@router.get("", response_model=ProductListResponse)
async def list_products(
    category: Optional[str] = None,
    catalog: CatalogStore = Depends(get_catalog),
) -> ProductListResponse:
    products = catalog.list_products(category)
    return ProductListResponse(products=products, count=len(products))


@router.get("/search", response_model=ProductListResponse)
async def search_products(
    q: Optional[str] = None,
    catalog: CatalogStore = Depends(get_catalog),
) -> ProductListResponse:
    if not q:
        raise ValidationError("Search query required")
    products = catalog.search_products(q)
    return ProductListResponse(products=products, count=len(products))


@router.get("/barcode/{barcode}", response_model=ProductResponse)
async def read_product_by_barcode(
    barcode: str,
    catalog: CatalogStore = Depends(get_catalog),
):
    try:
        product = catalog.get_product_by_barcode(barcode)
    except NotFoundError as exc:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"success": False, "message": exc.message, "barcode": barcode},
        )
    return ProductResponse(product=product)
