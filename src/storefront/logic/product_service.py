"""
Business logic for the product catalog.
"""

from typing import List

from aws_lambda_powertools.metrics import MetricUnit

from storefront.dal import EntityStore
from storefront.dal.dynamodb_handler import ItemNotFoundError
from storefront.handlers.utils.errors import ResourceNotFoundError
from storefront.handlers.utils.observability import logger, metrics, tracer
from storefront.models.input import CreateProductRequest, UpdateProductRequest
from storefront.models.product import PRODUCT_TYPE, Product


class ProductNotFoundError(ResourceNotFoundError):
    """Raised when a product is not found."""

    def __init__(self, product_id: str):
        super().__init__(resource_type="Product", resource_id=product_id)


class ProductService:
    """CRUD over catalog products."""

    def __init__(self, entity_store: EntityStore) -> None:
        self.entity_store = entity_store

    @tracer.capture_method
    def create_product(self, request: CreateProductRequest) -> Product:
        product = Product.create(request)
        self.entity_store.put(product.to_dict())

        metrics.add_metric(name="ProductCreated", unit=MetricUnit.Count, value=1)
        logger.info("Product created", extra={"product_id": product.id, "category": product.category})
        return product

    @tracer.capture_method
    def list_products(self) -> List[Product]:
        return [Product.model_validate(item) for item in self.entity_store.scan(PRODUCT_TYPE)]

    @tracer.capture_method
    def get_product(self, product_id: str) -> Product:
        """
        Raises:
            ProductNotFoundError: If no product has this id
        """
        item = self.entity_store.get(product_id, PRODUCT_TYPE)
        if item is None:
            raise ProductNotFoundError(product_id)
        return Product.model_validate(item)

    @tracer.capture_method
    def update_product(self, product_id: str, request: UpdateProductRequest) -> Product:
        """
        Apply a partial update and refresh ``updatedAt``.

        Raises:
            ProductNotFoundError: If no product has this id
        """
        try:
            item = self.entity_store.update(product_id, PRODUCT_TYPE, request.changed_fields())
        except ItemNotFoundError:
            raise ProductNotFoundError(product_id) from None

        metrics.add_metric(name="ProductUpdated", unit=MetricUnit.Count, value=1)
        logger.info("Product updated", extra={
            "product_id": product_id,
            "updated_fields": sorted(request.changed_fields()),
        })
        return Product.model_validate(item)

    @tracer.capture_method
    def delete_product(self, product_id: str) -> None:
        """
        Delete a product.

        Raises:
            ProductNotFoundError: If the product does not exist, so callers can
                tell "deleted" apart from "nothing to delete"
        """
        if self.entity_store.get(product_id, PRODUCT_TYPE) is None:
            raise ProductNotFoundError(product_id)

        self.entity_store.remove(product_id, PRODUCT_TYPE)

        metrics.add_metric(name="ProductDeleted", unit=MetricUnit.Count, value=1)
        logger.info("Product deleted", extra={"product_id": product_id})
