"""
Integration tests for the business logic layer.

Services run against the moto-mocked table through the real DynamoDB entity
store.
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest

from storefront.handlers.utils.errors import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    ValidationError,
)
from storefront.logic.order_service import OrderNotFoundError, OrderService
from storefront.logic.product_service import ProductNotFoundError
from storefront.models.input import (
    CreateOrderRequest,
    CreateProductRequest,
    LoginRequest,
    RegisterRequest,
    UpdateProductRequest,
)

PASSWORD = "Abc12345!"


def _register(auth_service, email="a@x.com", password=PASSWORD, name="Ann"):
    return auth_service.register(RegisterRequest(email=email, password=password, name=name))


@pytest.mark.integration
class TestAuthService:
    """Integration tests for registration, login and authorization."""

    def test_register_returns_token_and_public_view(self, auth_service, entity_store):
        output = _register(auth_service)

        assert output.token
        assert output.user.email == "a@x.com"
        assert output.user.name == "Ann"
        assert "password" not in output.to_dict()["user"]

        stored = entity_store.get("a@x.com", "user")
        assert stored["password"] != PASSWORD
        assert stored["userId"] == output.user.user_id

    def test_register_duplicate_email(self, auth_service):
        _register(auth_service)

        with pytest.raises(ConflictError) as exc_info:
            _register(auth_service, name="Other")

        assert exc_info.value.user_message == "User already exists"

    def test_register_normalizes_email(self, auth_service):
        _register(auth_service, email="Ann@X.com")

        with pytest.raises(ConflictError):
            _register(auth_service, email="ann@x.com")

    def test_login_with_registered_pair(self, auth_service):
        registered = _register(auth_service)

        output = auth_service.login(LoginRequest(email="a@x.com", password=PASSWORD))

        assert output.user == registered.user
        assert auth_service.verify(output.token).user_id == registered.user.user_id

    @pytest.mark.parametrize("email,password", [
        ("a@x.com", "wrong"),
        ("nobody@x.com", PASSWORD),
    ])
    def test_login_failures_are_indistinguishable(self, auth_service, email, password):
        """Test that wrong password and unknown email fail with the same error."""
        _register(auth_service)

        with pytest.raises(AuthenticationError) as exc_info:
            auth_service.login(LoginRequest(email=email, password=password))

        assert exc_info.value.user_message == "Invalid credentials"

    def test_unknown_email_still_pays_for_hash_check(self, auth_service):
        """Test that login spends one bcrypt verification whether or not the user exists."""
        _register(auth_service)
        hasher = auth_service.password_hasher

        with patch.object(hasher, "dummy_verify", wraps=hasher.dummy_verify) as dummy, \
                patch.object(hasher, "verify", wraps=hasher.verify) as real:
            with pytest.raises(AuthenticationError):
                auth_service.login(LoginRequest(email="nobody@x.com", password=PASSWORD))
            assert dummy.call_count == 1
            assert real.call_count == 0

            with pytest.raises(AuthenticationError):
                auth_service.login(LoginRequest(email="a@x.com", password="wrong"))
            assert dummy.call_count == 1
            assert real.call_count == 1

    def test_authorize_valid_token(self, auth_service):
        registered = _register(auth_service)

        claims = auth_service.authorize({"authorization": f"Bearer {registered.token}"})

        assert claims.user_id == registered.user.user_id
        assert claims.email == "a@x.com"

    @pytest.mark.parametrize("headers,message", [
        (None, "Authorization header required"),
        ({}, "Authorization header required"),
        ({"Authorization": "Token abc"}, "Invalid authorization format. Use: Bearer <token>"),
        ({"Authorization": "Bearer not.a.jwt"}, "Invalid or expired token"),
    ])
    def test_authorize_rejections(self, auth_service, headers, message):
        with pytest.raises(AuthenticationError) as exc_info:
            auth_service.authorize(headers)

        assert exc_info.value.user_message == message

    def test_expired_token_fails_with_authentication_error(self, auth_service):
        issued = datetime.now(timezone.utc) - timedelta(days=2)
        token = auth_service.authenticator.issue(user_id="user-1", email="a@x.com", now=issued)

        assert auth_service.verify(token) is None
        with pytest.raises(AuthenticationError) as exc_info:
            auth_service.authorize({"Authorization": f"Bearer {token}"})

        assert exc_info.value.user_message == "Invalid or expired token"


@pytest.mark.integration
class TestProductService:
    """Integration tests for product CRUD."""

    def test_create_then_get(self, product_service, sample_product_data):
        request = CreateProductRequest.model_validate(sample_product_data)

        created = product_service.create_product(request)
        fetched = product_service.get_product(created.id)

        assert fetched == created
        assert fetched.created_at == fetched.updated_at
        for field, value in sample_product_data.items():
            assert fetched.to_dict()[field] == value

    def test_list_products(self, product_service, sample_product_data):
        first = product_service.create_product(CreateProductRequest.model_validate(sample_product_data))
        second = product_service.create_product(CreateProductRequest(name="Ink", price=3, category="office", stock=1))

        listed = product_service.list_products()

        assert sorted(product.id for product in listed) == sorted([first.id, second.id])

    def test_get_missing_product(self, product_service):
        with pytest.raises(ProductNotFoundError) as exc_info:
            product_service.get_product("missing")

        assert exc_info.value.user_message == "Product not found"

    def test_partial_update(self, product_service, sample_product_data):
        created = product_service.create_product(CreateProductRequest.model_validate(sample_product_data))

        with patch("storefront.dal.dynamodb_handler.utc_now", return_value="2999-01-01T00:00:00.000Z"):
            updated = product_service.update_product(created.id, UpdateProductRequest(stock=5))

        assert updated.stock == 5
        assert updated.price == created.price
        assert updated.name == created.name
        assert updated.created_at == created.created_at
        assert updated.updated_at > created.updated_at

    def test_update_missing_product(self, product_service):
        with pytest.raises(ProductNotFoundError):
            product_service.update_product("missing", UpdateProductRequest(stock=5))

    def test_delete_twice(self, product_service, sample_product_data):
        """Test that the first delete succeeds and the second reports not found."""
        created = product_service.create_product(CreateProductRequest.model_validate(sample_product_data))

        product_service.delete_product(created.id)

        with pytest.raises(ProductNotFoundError):
            product_service.delete_product(created.id)


@pytest.mark.integration
class TestOrderService:
    """Integration tests for order placement and ownership."""

    def test_create_order_computes_total(self, order_service, alice, sample_order_data):
        order = order_service.create_order(CreateOrderRequest.model_validate(sample_order_data), alice)

        assert order.user_id == alice.user_id
        assert order.user_email == alice.email
        assert order.total_amount == pytest.approx(1.5 * 2 + 10.25)
        assert order.status.value == "pending"

    def test_owner_can_read_order(self, order_service, alice, sample_order_data):
        order = order_service.create_order(CreateOrderRequest.model_validate(sample_order_data), alice)

        assert order_service.get_order(order.id, alice) == order

    def test_other_user_is_denied(self, order_service, alice, bob, sample_order_data):
        order = order_service.create_order(CreateOrderRequest.model_validate(sample_order_data), alice)

        with pytest.raises(AuthorizationError) as exc_info:
            order_service.get_order(order.id, bob)

        assert exc_info.value.user_message == "Access denied"

    def test_missing_order(self, order_service, alice):
        with pytest.raises(OrderNotFoundError) as exc_info:
            order_service.get_order("missing", alice)

        assert exc_info.value.user_message == "Order not found"

    def test_listing_is_scoped_to_caller(self, order_service, alice, bob, sample_order_data):
        request = CreateOrderRequest.model_validate(sample_order_data)
        alice_orders = {order_service.create_order(request, alice).id for _ in range(2)}
        bob_order = order_service.create_order(request, bob)

        assert {order.id for order in order_service.list_orders(alice)} == alice_orders
        assert [order.id for order in order_service.list_orders(bob)] == [bob_order.id]

    def test_catalog_prices_trusted_by_default(self, order_service, alice, sample_order_data):
        """Test that products are not looked up unless price enforcement is on."""
        order = order_service.create_order(CreateOrderRequest.model_validate(sample_order_data), alice)

        assert order.items[0].product_id == "prod-1"


@pytest.mark.integration
class TestCatalogPriceEnforcement:
    """Integration tests for the optional catalog price check."""

    @pytest.fixture
    def strict_order_service(self, entity_store):
        return OrderService(entity_store=entity_store, enforce_catalog_prices=True)

    @pytest.fixture
    def pen(self, product_service, sample_product_data):
        return product_service.create_product(CreateProductRequest.model_validate(sample_product_data))

    def _order(self, product_id, price, sample_order_data):
        sample_order_data["items"] = [{"productId": product_id, "quantity": 2, "price": price}]
        return CreateOrderRequest.model_validate(sample_order_data)

    def test_matching_price_accepted(self, strict_order_service, pen, alice, sample_order_data):
        order = strict_order_service.create_order(self._order(pen.id, 1.5, sample_order_data), alice)

        assert order.total_amount == pytest.approx(3.0)

    def test_mismatched_price_rejected(self, strict_order_service, pen, alice, sample_order_data):
        with pytest.raises(ValidationError):
            strict_order_service.create_order(self._order(pen.id, 0.01, sample_order_data), alice)

    def test_unknown_product_rejected(self, strict_order_service, alice, sample_order_data):
        with pytest.raises(ValidationError):
            strict_order_service.create_order(self._order("missing", 1.5, sample_order_data), alice)
