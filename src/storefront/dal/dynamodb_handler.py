"""
Data Access Layer (DAL) for DynamoDB operations.

Single-table entity store: every entity kind lives in one table keyed by the
partition key ``id`` and the sort key ``type``. This module provides the
generic get/put/update/remove/scan operations with consistent error handling
and observability.
"""

import functools
import json
import time
from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional, Tuple

import boto3
from aws_lambda_powertools.metrics import MetricUnit
from boto3.dynamodb.conditions import Attr
from botocore.exceptions import BotoCoreError, ClientError

from storefront.handlers.utils.errors import (
    BaseServiceError,
    ErrorCategory,
    ErrorSeverity,
    ResourceNotFoundError,
)
from storefront.handlers.utils.observability import logger, metrics, tracer
from storefront.models.base import utc_now

PARTITION_KEY = 'id'
SORT_KEY = 'type'
KEY_FIELDS = frozenset({PARTITION_KEY, SORT_KEY})
UPDATED_AT_FIELD = 'updatedAt'


class DALError(BaseServiceError):
    """Base exception for Data Access Layer errors."""

    def __init__(
        self,
        message: str,
        operation: str,
        table_name: str,
        error_code: str = "DAL_ERROR",
        severity: ErrorSeverity = ErrorSeverity.HIGH,
        retry_after: Optional[int] = None,
    ):
        super().__init__(
            message=message,
            error_code=error_code,
            severity=severity,
            category=ErrorCategory.INFRASTRUCTURE,
            retry_after=retry_after,
        )
        self.operation = operation
        self.table_name = table_name


class ItemNotFoundError(ResourceNotFoundError):
    """Raised when an update targets a key that does not exist."""

    def __init__(self, table_name: str, key: Dict[str, Any]):
        self.table_name = table_name
        self.key = key
        super().__init__(resource_type="Item", resource_id=f"{key[PARTITION_KEY]}/{key[SORT_KEY]}")


class ConditionalCheckFailedError(DALError):
    """Raised when a conditional check fails in DynamoDB."""

    def __init__(self, table_name: str, operation: str, condition: str):
        super().__init__(
            message=f"Conditional check failed: {condition}",
            operation=operation,
            table_name=table_name,
            error_code="CONDITIONAL_CHECK_FAILED",
            severity=ErrorSeverity.MEDIUM,
        )
        self.condition = condition


def build_key(entity_id: str, entity_type: str) -> Dict[str, str]:
    """Composite primary key for an entity."""
    return {PARTITION_KEY: entity_id, SORT_KEY: entity_type}


def build_update_expression(
    fields: Mapping[str, Any],
    updated_at: str,
) -> Tuple[str, Dict[str, str], Dict[str, Any]]:
    """
    Turn a partial field set into a ``SET`` update expression.

    Every attribute name is mapped to a positional placeholder (``#attr0``,
    ``:val0``, ...) in the iteration order of ``fields`` so reserved words
    such as ``name`` or ``status`` never clash with DynamoDB syntax. The
    key attributes are never written and ``updatedAt`` is always assigned
    last from ``updated_at``, overriding any caller-supplied value.

    Args:
        fields: Attribute names and their new values
        updated_at: Timestamp to stamp on the record

    Returns:
        Tuple of update expression, attribute names and attribute values
    """
    assignments: List[str] = []
    names: Dict[str, str] = {}
    values: Dict[str, Any] = {}

    index = 0
    for field_name, value in fields.items():
        if field_name in KEY_FIELDS or field_name == UPDATED_AT_FIELD:
            continue
        name_token = f'#attr{index}'
        value_token = f':val{index}'
        assignments.append(f'{name_token} = {value_token}')
        names[name_token] = field_name
        values[value_token] = value
        index += 1

    assignments.append('#updatedAt = :updatedAt')
    names['#updatedAt'] = UPDATED_AT_FIELD
    values[':updatedAt'] = updated_at

    return f"SET {', '.join(assignments)}", names, values


def to_dynamodb(value: Any) -> Any:
    """Convert floats to Decimal as required by the DynamoDB resource API."""
    return json.loads(json.dumps(value), parse_float=Decimal)


def from_dynamodb(value: Any) -> Any:
    """Convert Decimal values read from DynamoDB back to int or float."""
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    if isinstance(value, dict):
        return {key: from_dynamodb(item) for key, item in value.items()}
    if isinstance(value, list):
        return [from_dynamodb(item) for item in value]
    return value


def _handle_dynamodb_errors(operation: str):
    """Decorator to translate boto errors into DAL errors consistently."""

    def decorator(func):
        @functools.wraps(func)
        def wrapper(self, *args, **kwargs):
            operation_start = time.time()
            metrics.add_metric(name=f"DynamoDB{operation}Count", unit=MetricUnit.Count, value=1)

            try:
                result = func(self, *args, **kwargs)
            except ClientError as e:
                error_code = e.response['Error']['Code']
                error_message = e.response['Error']['Message']

                metrics.add_metric(name=f"DynamoDB{operation}Error", unit=MetricUnit.Count, value=1)

                if error_code == 'ConditionalCheckFailedException':
                    logger.info(f"DynamoDB {operation} condition not met", extra={
                        "table_name": self.table_name,
                    })
                    raise ConditionalCheckFailedError(
                        table_name=self.table_name,
                        operation=operation,
                        condition=error_message,
                    ) from e

                logger.error(f"DynamoDB {operation} error", extra={
                    "error_code": error_code,
                    "error_message": error_message,
                    "table_name": self.table_name,
                })

                if error_code == 'ResourceNotFoundException':
                    raise DALError(
                        message=f"Table {self.table_name} not found",
                        operation=operation,
                        table_name=self.table_name,
                        error_code="TABLE_NOT_FOUND",
                    ) from e
                if error_code in ('ProvisionedThroughputExceededException', 'ThrottlingException'):
                    raise DALError(
                        message="DynamoDB throttling detected",
                        operation=operation,
                        table_name=self.table_name,
                        error_code="THROTTLING_ERROR",
                        retry_after=30,
                    ) from e
                raise DALError(
                    message=f"DynamoDB error: {error_message}",
                    operation=operation,
                    table_name=self.table_name,
                    error_code=f"DYNAMODB_{error_code}",
                ) from e

            except BotoCoreError as e:
                metrics.add_metric(name=f"DynamoDB{operation}Error", unit=MetricUnit.Count, value=1)
                logger.error(f"DynamoDB connection error during {operation}", extra={
                    "error": str(e),
                    "table_name": self.table_name,
                })
                raise DALError(
                    message=f"Database connection error: {e}",
                    operation=operation,
                    table_name=self.table_name,
                    error_code="DATABASE_CONNECTION_ERROR",
                ) from e

            duration_ms = (time.time() - operation_start) * 1000
            metrics.add_metric(name=f"DynamoDB{operation}Duration", unit=MetricUnit.Milliseconds, value=duration_ms)
            tracer.put_annotation("dynamodb_operation", operation)
            return result

        return wrapper
    return decorator


class DynamoDBHandler:
    """DynamoDB entity store with error handling and observability."""

    def __init__(
        self,
        table_name: str,
        region_name: Optional[str] = None,
        endpoint_url: Optional[str] = None,
    ):
        """
        Initialize DynamoDB handler.

        Args:
            table_name: Name of the DynamoDB table
            region_name: AWS region name
            endpoint_url: DynamoDB endpoint URL (for local testing)
        """
        self.table_name = table_name

        resource_config = {}
        if region_name:
            resource_config['region_name'] = region_name
        if endpoint_url:
            resource_config['endpoint_url'] = endpoint_url

        self.dynamodb = boto3.resource('dynamodb', **resource_config)
        self.table = self.dynamodb.Table(table_name)

        logger.info("DynamoDB handler initialized", extra={
            "table_name": table_name,
            "region_name": region_name,
            "endpoint_url": endpoint_url,
        })

    @tracer.capture_method
    @_handle_dynamodb_errors("PutItem")
    def put(self, entity: Dict[str, Any], only_if_absent: bool = False) -> Dict[str, Any]:
        """
        Write a whole record, replacing any existing record with the same key.

        Args:
            entity: Record including the ``id`` and ``type`` key attributes
            only_if_absent: Fail with ConditionalCheckFailedError instead of
                overwriting an existing record

        Returns:
            The stored record
        """
        put_kwargs: Dict[str, Any] = {'Item': to_dynamodb(entity)}
        if only_if_absent:
            put_kwargs['ConditionExpression'] = 'attribute_not_exists(#pk)'
            put_kwargs['ExpressionAttributeNames'] = {'#pk': PARTITION_KEY}

        self.table.put_item(**put_kwargs)

        logger.info("Item stored successfully", extra={
            "table_name": self.table_name,
            "entity_type": entity.get(SORT_KEY),
        })
        return entity

    @tracer.capture_method
    @_handle_dynamodb_errors("GetItem")
    def get(self, entity_id: str, entity_type: str) -> Optional[Dict[str, Any]]:
        """
        Get a single record by key.

        Returns:
            The record, or None when no record exists for the key
        """
        response = self.table.get_item(Key=build_key(entity_id, entity_type))
        item = response.get('Item')
        if item is None:
            logger.debug("Item not found", extra={"table_name": self.table_name, "entity_type": entity_type})
            return None
        return from_dynamodb(item)

    @tracer.capture_method
    def update(self, entity_id: str, entity_type: str, fields: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Merge ``fields`` into an existing record and stamp ``updatedAt``.

        Args:
            entity_id: Partition key value
            entity_type: Sort key value
            fields: Attributes to set; ``id``, ``type`` and ``updatedAt`` are ignored

        Returns:
            The full record after the update

        Raises:
            ItemNotFoundError: If no record exists for the key
        """
        key = build_key(entity_id, entity_type)
        try:
            return self._update_item(key, fields)
        except ConditionalCheckFailedError:
            raise ItemNotFoundError(table_name=self.table_name, key=key) from None

    @_handle_dynamodb_errors("UpdateItem")
    def _update_item(self, key: Dict[str, str], fields: Mapping[str, Any]) -> Dict[str, Any]:
        update_expression, names, values = build_update_expression(fields, updated_at=utc_now())
        names['#pk'] = PARTITION_KEY

        response = self.table.update_item(
            Key=key,
            UpdateExpression=update_expression,
            ConditionExpression='attribute_exists(#pk)',
            ExpressionAttributeNames=names,
            ExpressionAttributeValues=to_dynamodb(values),
            ReturnValues='ALL_NEW',
        )

        logger.info("Item updated successfully", extra={
            "table_name": self.table_name,
            "entity_type": key[SORT_KEY],
            "updated_fields": [name for token, name in names.items() if token != '#pk'],
        })
        return from_dynamodb(response['Attributes'])

    @tracer.capture_method
    @_handle_dynamodb_errors("DeleteItem")
    def remove(self, entity_id: str, entity_type: str) -> bool:
        """
        Delete a record by key. Deleting a missing key is not an error.

        Returns:
            True if a record was deleted, False if none existed
        """
        response = self.table.delete_item(Key=build_key(entity_id, entity_type), ReturnValues='ALL_OLD')
        existed = 'Attributes' in response

        logger.info("Item delete completed", extra={
            "table_name": self.table_name,
            "entity_type": entity_type,
            "existed": existed,
        })
        return existed

    @tracer.capture_method
    @_handle_dynamodb_errors("Scan")
    def scan(self, entity_type: str, **attribute_filters: Any) -> List[Dict[str, Any]]:
        """
        Return every record of ``entity_type`` whose attributes equal the filters.

        Follows ``LastEvaluatedKey`` until the table is exhausted. This is a
        full table scan and its cost grows with the table, not the result.

        Example:
            store.scan('order', userId='u-123')
        """
        filter_expression = Attr(SORT_KEY).eq(entity_type)
        for attribute_name, expected in attribute_filters.items():
            filter_expression = filter_expression & Attr(attribute_name).eq(to_dynamodb(expected))

        scan_kwargs: Dict[str, Any] = {'FilterExpression': filter_expression}
        items: List[Dict[str, Any]] = []
        pages = 0
        while True:
            response = self.table.scan(**scan_kwargs)
            items.extend(response.get('Items', []))
            pages += 1
            if 'LastEvaluatedKey' not in response:
                break
            scan_kwargs['ExclusiveStartKey'] = response['LastEvaluatedKey']

        logger.info("Scan completed successfully", extra={
            "table_name": self.table_name,
            "entity_type": entity_type,
            "items_count": len(items),
            "pages": pages,
        })
        return from_dynamodb(items)
