import pytest
from unittest.mock import MagicMock

from storefront.errors import AuthorizationError, NotFoundError, ValidationError
from storefront.orders import service as orders_service
from storefront.orders.models import OrderStatus, can_transition


@pytest.fixture
def repo(monkeypatch):
    fake = MagicMock()
    monkeypatch.setattr("storefront.orders.service.repository", fake)
    return fake


def test_owner_reads_own_order(repo, customer):
    repo.get_order.return_value = {"id": "o1", "user_id": customer["id"]}
    assert orders_service.get_order_for(customer, "o1")["id"] == "o1"


def test_other_user_order_is_forbidden(repo, customer):
    repo.get_order.return_value = {"id": "o1", "user_id": "someone-else"}
    with pytest.raises(AuthorizationError):
        orders_service.get_order_for(customer, "o1")


def test_admin_reads_any_order(repo, admin):
    repo.get_order.return_value = {"id": "o1", "user_id": "someone-else"}
    assert orders_service.get_order_for(admin, "o1")["id"] == "o1"


def test_missing_order_is_404(repo, customer):
    repo.get_order.return_value = None
    with pytest.raises(NotFoundError):
        orders_service.get_order_for(customer, "nope")


def test_customer_lists_only_own_orders(repo, customer):
    repo.list_orders_by_user.return_value = [{"id": "o1"}]
    assert orders_service.list_orders_for(customer) == [{"id": "o1"}]
    repo.list_orders_by_user.assert_called_once_with(customer["id"])
    repo.list_orders.assert_not_called()


def test_admin_listing_filters(repo, admin):
    orders_service.list_all_orders(admin, status=OrderStatus.SHIPPED, email="ada@", limit=10)
    repo.list_orders.assert_called_once_with(status="SHIPPED", user_id=None, email="ada@", limit=10)


def test_customer_cannot_list_all(repo, customer):
    with pytest.raises(AuthorizationError):
        orders_service.list_all_orders(customer)


@pytest.mark.parametrize("current, target, allowed", [
    (OrderStatus.PENDING, OrderStatus.PROCESSING, True),
    (OrderStatus.PROCESSING, OrderStatus.SHIPPED, True),
    (OrderStatus.SHIPPED, OrderStatus.DELIVERED, True),
    (OrderStatus.PENDING, OrderStatus.CANCELLED, True),
    (OrderStatus.PENDING, OrderStatus.DELIVERED, False),
    (OrderStatus.DELIVERED, OrderStatus.CANCELLED, False),
    (OrderStatus.CANCELLED, OrderStatus.PENDING, False),
])
def test_transitions(current, target, allowed):
    assert can_transition(current, target) is allowed


def test_update_status_by_admin(repo, admin):
    repo.get_order.return_value = {"id": "o1", "status": "PENDING"}
    repo.update_status.return_value = {"id": "o1", "status": "PROCESSING"}
    assert orders_service.update_status(admin, "o1", OrderStatus.PROCESSING)["status"] == "PROCESSING"
    repo.update_status.assert_called_once_with("o1", "PROCESSING")


def test_update_status_same_value_is_noop(repo, admin):
    repo.get_order.return_value = {"id": "o1", "status": "SHIPPED"}
    assert orders_service.update_status(admin, "o1", OrderStatus.SHIPPED)["status"] == "SHIPPED"
    repo.update_status.assert_not_called()


def test_update_status_invalid_transition(repo, admin):
    repo.get_order.return_value = {"id": "o1", "status": "DELIVERED"}
    with pytest.raises(ValidationError):
        orders_service.update_status(admin, "o1", OrderStatus.PENDING)


def test_update_status_requires_admin(repo, customer):
    with pytest.raises(AuthorizationError):
        orders_service.update_status(customer, "o1", OrderStatus.SHIPPED)
    repo.get_order.assert_not_called()
