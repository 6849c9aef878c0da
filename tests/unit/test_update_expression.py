"""
Unit tests for the DynamoDB update-expression builder and value conversion.
"""

from decimal import Decimal

from storefront.dal.dynamodb_handler import build_update_expression, from_dynamodb, to_dynamodb

STAMP = "2024-01-15T10:30:00.000Z"


class TestBuildUpdateExpression:
    """Test cases for build_update_expression."""

    def test_placeholders_follow_field_order(self):
        expression, names, values = build_update_expression({"name": "Pen", "stock": 5}, updated_at=STAMP)

        assert expression == "SET #attr0 = :val0, #attr1 = :val1, #updatedAt = :updatedAt"
        assert names == {"#attr0": "name", "#attr1": "stock", "#updatedAt": "updatedAt"}
        assert values == {":val0": "Pen", ":val1": 5, ":updatedAt": STAMP}

    def test_key_fields_never_written(self):
        """Test that id and type are dropped even when present in the payload."""
        expression, names, values = build_update_expression(
            {"id": "hijack", "type": "user", "stock": 1},
            updated_at=STAMP,
        )

        assert "id" not in names.values()
        assert "type" not in names.values()
        assert "hijack" not in values.values()
        assert expression == "SET #attr0 = :val0, #updatedAt = :updatedAt"

    def test_updated_at_always_last_and_not_overridable(self):
        expression, names, values = build_update_expression(
            {"updatedAt": "1999-01-01T00:00:00.000Z", "price": 2.5},
            updated_at=STAMP,
        )

        assert expression.endswith("#updatedAt = :updatedAt")
        assert list(names.values()).count("updatedAt") == 1
        assert values[":updatedAt"] == STAMP

    def test_empty_update_only_stamps(self):
        expression, names, values = build_update_expression({}, updated_at=STAMP)

        assert expression == "SET #updatedAt = :updatedAt"
        assert names == {"#updatedAt": "updatedAt"}
        assert values == {":updatedAt": STAMP}

    def test_reserved_words_are_placeholders(self):
        expression, _, _ = build_update_expression({"name": "x", "status": "y"}, updated_at=STAMP)

        assert "name" not in expression
        assert "status" not in expression


class TestValueConversion:
    """Test cases for Decimal conversion to and from DynamoDB."""

    def test_floats_become_decimals(self):
        converted = to_dynamodb({"price": 1.5, "items": [{"price": 0.1, "quantity": 2}]})

        assert converted["price"] == Decimal("1.5")
        assert converted["items"][0]["price"] == Decimal("0.1")
        assert converted["items"][0]["quantity"] == 2

    def test_decimals_become_numbers(self):
        restored = from_dynamodb({"price": Decimal("1.5"), "stock": Decimal("10"), "tags": [Decimal("2")]})

        assert restored == {"price": 1.5, "stock": 10, "tags": [2]}
        assert isinstance(restored["stock"], int)
        assert isinstance(restored["price"], float)
