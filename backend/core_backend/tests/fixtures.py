"""
Shared test fixtures for all backend tests.

This module provides reusable pytest fixtures for common test objects
like tenants, tables, menu items, staff users and fake collaborators.
"""
import pytest

from menu.models import MenuCategory, MenuItem, Modifier
from orders.calculators import CartLine
from orders.services import OrderLifecycleService
from payments.strategies import PaymentSession, PaymentSessionProvider
from tenant.models import Table, Tenant
from users.models import User


# ============================================================================
# FAKE COLLABORATORS
# ============================================================================

class RecordingNotifier:
    """Notifier that remembers every published snapshot."""

    def __init__(self):
        self.published = []

    def publish(self, snapshot):
        self.published.append(snapshot)

    @property
    def statuses(self):
        return [snapshot['status'] for snapshot in self.published]


class FailingNotifier:
    """Notifier whose transport is down."""

    def __init__(self):
        self.calls = 0

    def publish(self, snapshot):
        self.calls += 1
        raise ConnectionError("channel layer unreachable")


class FakePaymentGateway(PaymentSessionProvider):
    """Records session requests and returns predictable sessions."""

    def __init__(self, error=None):
        self.error = error
        self.requests = []

    def create_session(self, account_id, line_items, success_url, cancel_url,
                       metadata, currency, application_fee_cents=0):
        self.requests.append({
            'account_id': account_id,
            'line_items': list(line_items),
            'success_url': success_url,
            'cancel_url': cancel_url,
            'metadata': dict(metadata),
            'currency': currency,
            'application_fee_cents': application_fee_cents,
        })
        if self.error is not None:
            raise self.error
        session_id = f"cs_test_{len(self.requests)}"
        return PaymentSession(
            session_id=session_id,
            redirect_url=f"https://checkout.stripe.test/pay/{session_id}",
        )


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def lifecycle(notifier):
    """OrderLifecycleService wired to a RecordingNotifier."""
    return OrderLifecycleService(notifier=notifier)


@pytest.fixture
def fake_gateway():
    return FakePaymentGateway()


# ============================================================================
# TENANT FIXTURES
# ============================================================================

@pytest.fixture
def tenant_a(db):
    """Table-service restaurant with payments enabled (8.75% tax, 18% tip)"""
    return Tenant.objects.create(
        name='Pizza Place',
        slug='pizza-place',
        currency='usd',
        tax_rate_bps=875,
        default_tip_bps=1800,
        service_type=Tenant.ServiceType.TABLE,
        stripe_account_id='acct_pizza',
        charges_enabled=True,
        is_active=True,
    )


@pytest.fixture
def tenant_b(db):
    """Pickup restaurant with payments enabled and no tax"""
    return Tenant.objects.create(
        name='Burger Joint',
        slug='burger-joint',
        currency='usd',
        tax_rate_bps=0,
        default_tip_bps=0,
        service_type=Tenant.ServiceType.PICKUP,
        stripe_account_id='acct_burger',
        charges_enabled=True,
        is_active=True,
    )


@pytest.fixture
def unpaid_tenant(db):
    """Restaurant that has not finished payment onboarding"""
    return Tenant.objects.create(
        name='New Cafe',
        slug='new-cafe',
        service_type=Tenant.ServiceType.PICKUP,
        stripe_account_id=None,
        charges_enabled=False,
        is_active=True,
    )


@pytest.fixture
def inactive_tenant(db):
    return Tenant.objects.create(
        name='Closed Restaurant',
        slug='closed-restaurant',
        stripe_account_id='acct_closed',
        charges_enabled=True,
        is_active=False,
    )


@pytest.fixture
def table_a(tenant_a):
    return Table.objects.create(tenant=tenant_a, label='Patio 4', code='patio-4')


# ============================================================================
# MENU FIXTURES
# ============================================================================

@pytest.fixture
def category_a(tenant_a):
    return MenuCategory.objects.create(tenant=tenant_a, name='Pizzas', sort_order=1)


@pytest.fixture
def pizza_a(tenant_a, category_a):
    """Margherita at $12.99"""
    return MenuItem.objects.create(
        tenant=tenant_a, category=category_a, name='Margherita', price_cents=1299
    )


@pytest.fixture
def pizza_modifiers(pizza_a):
    """Required SINGLE 'Crust' group with two options plus an optional MULTI topping"""
    return {
        'thin': Modifier.objects.create(
            menu_item=pizza_a, name='Crust', type=Modifier.Type.SINGLE,
            price_delta_cents=0, is_required=True,
        ),
        'deep': Modifier.objects.create(
            menu_item=pizza_a, name='Crust', type=Modifier.Type.SINGLE,
            price_delta_cents=200, is_required=True,
        ),
        'olives': Modifier.objects.create(
            menu_item=pizza_a, name='Olives', type=Modifier.Type.MULTI,
            price_delta_cents=150,
        ),
    }


@pytest.fixture
def soda_a(tenant_a, category_a):
    return MenuItem.objects.create(
        tenant=tenant_a, category=category_a, name='Soda', price_cents=250
    )


@pytest.fixture
def sold_out_a(tenant_a, category_a):
    return MenuItem.objects.create(
        tenant=tenant_a, category=category_a, name='Calzone',
        price_cents=1499, is_available=False,
    )


@pytest.fixture
def burger_b(tenant_b):
    category = MenuCategory.objects.create(tenant=tenant_b, name='Burgers')
    return MenuItem.objects.create(
        tenant=tenant_b, category=category, name='Cheeseburger', price_cents=999
    )


# ============================================================================
# USER FIXTURES
# ============================================================================

@pytest.fixture
def owner_user_tenant_a(tenant_a):
    return User.objects.create_user(
        email='owner@pizza.com',
        password='password123',
        tenant=tenant_a,
        role=User.Role.OWNER,
    )


@pytest.fixture
def staff_user_tenant_a(tenant_a):
    return User.objects.create_user(
        email='staff@pizza.com',
        password='password123',
        tenant=tenant_a,
        role=User.Role.STAFF,
    )


@pytest.fixture
def owner_user_tenant_b(tenant_b):
    return User.objects.create_user(
        email='owner@burger.com',
        password='password123',
        tenant=tenant_b,
        role=User.Role.OWNER,
    )


# ============================================================================
# ORDER FIXTURES
# ============================================================================

@pytest.fixture
def scenario_a_lines():
    """Two Margheritas at $12.99, no modifiers"""
    return [CartLine(unit_price_cents=1299, quantity=2, name='Margherita')]


@pytest.fixture
def new_order_a(lifecycle, tenant_a, table_a, scenario_a_lines):
    """NEW order for tenant A: subtotal 2598, tax 227, tip 509, total 3334"""
    return lifecycle.create(scenario_a_lines, tenant_a, table=table_a)


@pytest.fixture
def session_order_a(lifecycle, new_order_a):
    """NEW order for tenant A with payment session cs_test_a attached"""
    return lifecycle.attach_payment_session(new_order_a, 'cs_test_a')


@pytest.fixture
def new_order_b(lifecycle, tenant_b, burger_b):
    return lifecycle.create(
        [CartLine(unit_price_cents=999, quantity=1, name='Cheeseburger', menu_item_id=burger_b.id)],
        tenant_b,
    )
