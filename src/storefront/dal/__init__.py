"""
Data Access Layer (DAL) for the storefront service.

This module provides the entity store interface and factory functions for
database operations. All entity kinds share one table keyed by ``id`` and
``type``.
"""

from typing import Any, Dict, List, Mapping, Optional, Protocol, runtime_checkable


@runtime_checkable
class EntityStore(Protocol):
    """Protocol defining the single-table entity store interface."""

    def put(self, entity: Dict[str, Any], only_if_absent: bool = False) -> Dict[str, Any]:
        """Upsert a whole record keyed by (id, type)."""
        ...

    def get(self, entity_id: str, entity_type: str) -> Optional[Dict[str, Any]]:
        """Return the record or None when absent."""
        ...

    def update(self, entity_id: str, entity_type: str, fields: Mapping[str, Any]) -> Dict[str, Any]:
        """Merge attributes into an existing record and return the result."""
        ...

    def remove(self, entity_id: str, entity_type: str) -> bool:
        """Delete by key; report whether a record existed."""
        ...

    def scan(self, entity_type: str, **attribute_filters: Any) -> List[Dict[str, Any]]:
        """Return all records of a type matching attribute equality filters."""
        ...


def get_entity_store(
    table_name: str,
    region_name: Optional[str] = None,
    endpoint_url: Optional[str] = None,
) -> EntityStore:
    """
    Factory function to get the entity store implementation.

    Args:
        table_name: Name of the database table
        region_name: AWS region name
        endpoint_url: Endpoint override for local DynamoDB

    Returns:
        Entity store instance
    """
    # Import here to avoid circular imports
    from storefront.dal.dynamodb_handler import DynamoDBHandler

    return DynamoDBHandler(table_name, region_name=region_name, endpoint_url=endpoint_url)


__all__ = [
    'EntityStore',
    'get_entity_store',
]
