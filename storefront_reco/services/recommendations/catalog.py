"""
Product catalog provider
Loads the product list the recommendation algorithms score against
"""
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional

import pandas as pd
from pydantic import ValidationError

from storefront_reco.models.product import Product
from storefront_reco.services.utils.parsers import parse_bool, split_list

logger = logging.getLogger(__name__)

DEFAULT_CATALOG_PATH = Path(__file__).resolve().parents[2] / "static" / "products.csv"

LIST_COLUMNS = ("images", "features", "tags")
REQUIRED_COLUMNS = ("id", "name", "price", "rating", "reviews")


class CatalogLoadError(Exception):
    """Catalog could not be loaded or has not been loaded yet"""


class ProductCatalog:
    """
    In-memory product catalog

    The snapshot is replaced wholesale on load, so a request always
    scores against one consistent list.
    """

    def __init__(self, products: Optional[List[Product]] = None):
        self._products: Optional[List[Product]] = None
        self._by_id: Dict[str, Product] = {}
        self._source: Optional[str] = None
        self._last_load_time: Optional[datetime] = None
        if products is not None:
            self.set_products(products, source="memory")

    @property
    def is_loaded(self) -> bool:
        return self._products is not None

    def set_products(self, products: List[Product], source: str = "memory") -> None:
        """
        Replace the catalog snapshot

        Raises:
            CatalogLoadError: on duplicate product ids
        """
        by_id: Dict[str, Product] = {}
        for product in products:
            if product.id in by_id:
                raise CatalogLoadError(f"Duplicate product id '{product.id}' in {source}")
            by_id[product.id] = product

        self._products = list(products)
        self._by_id = by_id
        self._source = source
        self._last_load_time = datetime.now(timezone.utc)
        logger.info("Catalog loaded: %d products from %s", len(self._products), source)

    def load_from_csv(self, csv_path: str | Path) -> List[Product]:
        """
        Load products from a semicolon-separated CSV file

        List columns (images, features, tags) are '|'-separated.

        Args:
            csv_path: Path to CSV file

        Returns:
            Loaded products

        Raises:
            CatalogLoadError: if the file is missing or a row is invalid
        """
        logger.info("Loading catalog from CSV: %s", csv_path)
        try:
            df = pd.read_csv(csv_path, sep=";", dtype=str, keep_default_na=False)
        except (OSError, pd.errors.ParserError) as e:
            raise CatalogLoadError(f"Cannot read catalog {csv_path}: {e}") from e

        missing = [col for col in REQUIRED_COLUMNS if col not in df.columns]
        if missing:
            raise CatalogLoadError(f"Catalog {csv_path} is missing columns: {missing}")

        products = []
        for row_number, row in enumerate(df.to_dict(orient="records"), start=2):
            try:
                products.append(self._row_to_product(row))
            except (ValidationError, ValueError) as e:
                raise CatalogLoadError(f"Invalid product on line {row_number} of {csv_path}: {e}") from e

        self.set_products(products, source=str(csv_path))
        return products

    def load_default(self) -> List[Product]:
        """Load the bundled storefront catalog"""
        return self.load_from_csv(DEFAULT_CATALOG_PATH)

    @staticmethod
    def _row_to_product(row: Dict[str, str]) -> Product:
        data = {
            "id": row["id"].strip(),
            "name": row["name"],
            "slug": row.get("slug", ""),
            "price": float(row["price"]),
            "rating": float(row["rating"]),
            "reviews": int(row["reviews"]),
            "description": row.get("description", ""),
            "in_stock": parse_bool(row.get("inStock", "true") or "true"),
        }
        for column in LIST_COLUMNS:
            data[column] = split_list(row.get(column))
        return Product.model_validate(data)

    async def get_all_products(self) -> List[Product]:
        """
        Full catalog snapshot

        Raises:
            CatalogLoadError: if no catalog has been loaded
        """
        if self._products is None:
            raise CatalogLoadError("Catalog not loaded. Call load_default() or load_from_csv() first")
        return list(self._products)

    def get_product(self, product_id: str) -> Optional[Product]:
        return self._by_id.get(product_id)

    def reload(self) -> List[Product]:
        """Re-read the catalog from the file it was loaded from"""
        if self._source is None or self._source == "memory":
            return list(self._products or [])
        return self.load_from_csv(self._source)

    def clear(self):
        """Drop the loaded catalog"""
        self._products = None
        self._by_id = {}
        self._source = None
        self._last_load_time = None
        logger.info("Catalog cleared")

    def get_stats(self) -> Dict:
        """Get statistics about the loaded catalog"""
        products = self._products or []
        return {
            "is_loaded": self.is_loaded,
            "source": self._source,
            "last_load_time": self._last_load_time.isoformat() if self._last_load_time else None,
            "total_products": len(products),
            "in_stock_products": sum(1 for p in products if p.in_stock),
        }
