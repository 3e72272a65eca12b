import json
import logging
from pathlib import Path
from typing import Dict, List, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError as PydanticValidationError

from errors import CatalogLoadError, NotFoundError
from schemas import Product, Store

logger = logging.getLogger("scan-and-go")

STORES_FILE = "stores.json"
PRODUCTS_FILE = "products.json"

ModelT = TypeVar("ModelT", bound=BaseModel)


def _load_records(path: Path, model: Type[ModelT]) -> List[ModelT]:
    try:
        with path.open("r", encoding="utf-8") as fh:
            data = json.load(fh)
    except FileNotFoundError as exc:
        raise CatalogLoadError(str(path), "file does not exist") from exc
    except json.JSONDecodeError as exc:
        raise CatalogLoadError(str(path), f"invalid JSON ({exc.msg})") from exc
    if not isinstance(data, list):
        raise CatalogLoadError(str(path), "expected a JSON array")
    try:
        return [model.model_validate(item) for item in data]
    except PydanticValidationError as exc:
        raise CatalogLoadError(str(path), str(exc)) from exc


class CatalogStore:
    """Read-only store and product reference data."""

    def __init__(self, stores: List[Store], products: List[Product]) -> None:
        self._stores: Dict[str, Store] = {store.store_id: store for store in stores}
        self._products: Dict[str, Product] = {}
        self._by_barcode: Dict[str, Product] = {}
        for product in products:
            if product.barcode in self._by_barcode:
                raise CatalogLoadError(
                    PRODUCTS_FILE, f"duplicate barcode {product.barcode}"
                )
            self._products[product.product_id] = product
            self._by_barcode[product.barcode] = product

    @classmethod
    def load(cls, data_dir: Path) -> "CatalogStore":
        stores = _load_records(Path(data_dir) / STORES_FILE, Store)
        products = _load_records(Path(data_dir) / PRODUCTS_FILE, Product)
        catalog = cls(stores, products)
        logger.info(
            "Loaded %d stores and %d products from %s",
            len(stores),
            len(products),
            data_dir,
        )
        return catalog

    @property
    def store_count(self) -> int:
        return len(self._stores)

    @property
    def product_count(self) -> int:
        return len(self._products)

    def list_stores(self) -> List[Store]:
        return list(self._stores.values())

    def find_store(self, store_id: str) -> Optional[Store]:
        return self._stores.get(store_id)

    def get_store(self, store_id: str) -> Store:
        store = self.find_store(store_id)
        if store is None:
            raise NotFoundError("Store", store_id)
        return store

    def list_products(self, category: Optional[str] = None) -> List[Product]:
        products = list(self._products.values())
        if category:
            products = [p for p in products if p.category == category]
        return products

    def find_product(self, product_id: str) -> Optional[Product]:
        return self._products.get(product_id)

    def get_product_by_barcode(self, barcode: str) -> Product:
        product = self._by_barcode.get(barcode)
        if product is None:
            raise NotFoundError("Product", barcode)
        return product

    def search_products(self, query: str) -> List[Product]:
        needle = query.lower()
        return [
            product
            for product in self._products.values()
            if needle in product.name.lower()
            or needle in product.brand.lower()
            or needle in product.category.lower()
        ]
