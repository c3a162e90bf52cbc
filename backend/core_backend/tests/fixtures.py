"""
Shared test fixtures for all backend tests.

This module provides reusable pytest fixtures for tenants, operators,
tables and orders in the states the settlement tests start from.
"""
import pytest
from decimal import Decimal

from tenant.models import Tenant
from users.models import User
from orders.models import DiningTable, OrderItem
from orders.services import OrderService


# ============================================================================
# TENANT FIXTURES
# ============================================================================

@pytest.fixture
def tenant_a(db):
    """Create test tenant A (Pizza Place, USD, no tax)"""
    return Tenant.objects.create(
        name='Pizza Place',
        slug='pizza-place',
        currency='USD',
        tax_rate=Decimal('0'),
        is_active=True
    )


@pytest.fixture
def tenant_b(db):
    """Create test tenant B (Burger Joint, EUR, 10% tax)"""
    return Tenant.objects.create(
        name='Burger Joint',
        slug='burger-joint',
        currency='EUR',
        tax_rate=Decimal('0.10'),
        is_active=True
    )


@pytest.fixture
def inactive_tenant(db):
    """Create inactive test tenant"""
    return Tenant.objects.create(
        name='Closed Restaurant',
        slug='closed-restaurant',
        is_active=False
    )


# ============================================================================
# USER FIXTURES
# ============================================================================

@pytest.fixture
def manager_user_tenant_a(tenant_a):
    """Create manager user for tenant A"""
    return User.objects.create_user(
        email='manager@pizza.com',
        password='password123',
        first_name='Mia',
        last_name='Manager',
        tenant=tenant_a,
        role=User.Role.MANAGER,
    )


@pytest.fixture
def cashier_user_tenant_a(tenant_a):
    """Create cashier user for tenant A"""
    return User.objects.create_user(
        email='cashier@pizza.com',
        password='password123',
        first_name='Cal',
        last_name='Cashier',
        tenant=tenant_a,
        role=User.Role.CASHIER,
    )


@pytest.fixture
def cashier_user_tenant_b(tenant_b):
    """Create cashier user for tenant B"""
    return User.objects.create_user(
        email='cashier@burger.com',
        password='password123',
        tenant=tenant_b,
        role=User.Role.CASHIER,
    )


# ============================================================================
# TABLE AND ORDER FIXTURES
# ============================================================================

@pytest.fixture
def table_tenant_a(tenant_a):
    """Create dining table T1 for tenant A"""
    return DiningTable.all_objects.create(tenant=tenant_a, name='T1', seats=4)


@pytest.fixture
def order_factory(tenant_a, cashier_user_tenant_a):
    """
    Build an order with items already in the given item statuses.

    Usage:
        order = order_factory([("Pizza", 1000, 1)], item_status=OrderItem.ItemStatus.SERVED)

    Totals are recomputed through the calculator and the order status is
    derived from the items, exactly as the services would leave it.
    """
    from orders.calculators import OrderCalculator

    def _create(lines=(), item_status=OrderItem.ItemStatus.NEW, tenant=None, cashier=None, **order_fields):
        tenant = tenant or tenant_a
        order = OrderService.create_order(tenant, cashier=cashier or cashier_user_tenant_a)
        for line in lines:
            name, unit_price_cents, quantity = line[:3]
            discount_percent = line[3] if len(line) > 3 else Decimal('0')
            OrderItem.all_objects.create(
                tenant=tenant,
                order=order,
                product_name=name,
                unit_price_cents=unit_price_cents,
                quantity=quantity,
                discount_percent=discount_percent,
                status=item_status,
            )
        for field, value in order_fields.items():
            setattr(order, field, value)
        OrderCalculator(order).update_totals(save=False)
        order.save()
        if lines:
            OrderService.sync_status_with_items(order)
        order.refresh_from_db()
        return order

    return _create


@pytest.fixture
def open_order(order_factory):
    """OPEN order with two NEW items: 2 x 500 + 1 x 1000 = 2000"""
    return order_factory([("Margherita", 500, 2), ("Lasagna", 1000, 1)])


@pytest.fixture
def served_order(order_factory):
    """
    Order whose items are all SERVED: total 1000, status FOR_PAYMENT.
    """
    return order_factory([("Pizza", 1000, 1)], item_status=OrderItem.ItemStatus.SERVED)


@pytest.fixture
def ready_order(order_factory):
    """Order whose items are all READY: total 1000, status READY."""
    return order_factory([("Pizza", 600, 1), ("Salad", 400, 1)], item_status=OrderItem.ItemStatus.READY)


@pytest.fixture
def order_tenant_b(tenant_b, cashier_user_tenant_b):
    """An OPEN order owned by tenant B."""
    return OrderService.create_order(tenant_b, cashier=cashier_user_tenant_b)
