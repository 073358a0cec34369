import pytest

from menu.models import MenuItem

pytestmark = [pytest.mark.django_db, pytest.mark.api]


class TestMenuItemsEndpoint:
    def test_staff_see_unavailable_items(self, staff_client_tenant_a, pizza_a, sold_out_a, burger_b):
        response = staff_client_tenant_a.get('/api/menu/items/')

        assert response.status_code == 200
        assert {item['name'] for item in response.data} == {'Margherita', 'Calzone'}

    def test_filter_by_availability(self, staff_client_tenant_a, pizza_a, sold_out_a):
        response = staff_client_tenant_a.get('/api/menu/items/', {'is_available': 'false'})
        assert [item['name'] for item in response.data] == ['Calzone']


class TestAvailabilityToggle:
    def url(self, item):
        return f'/api/menu/items/{item.id}/availability/'

    def test_owner_can_switch_item_off(self, owner_client_tenant_a, pizza_a):
        response = owner_client_tenant_a.patch(self.url(pizza_a), {'is_available': False}, format='json')

        assert response.status_code == 200
        assert response.data['is_available'] is False
        assert MenuItem.all_objects.get(pk=pizza_a.pk).is_available is False

    def test_staff_role_cannot(self, staff_client_tenant_a, pizza_a):
        response = staff_client_tenant_a.patch(self.url(pizza_a), {'is_available': False}, format='json')

        assert response.status_code == 403
        assert MenuItem.all_objects.get(pk=pizza_a.pk).is_available is True

    def test_other_tenant_cannot(self, owner_client_tenant_b, pizza_a):
        response = owner_client_tenant_b.patch(self.url(pizza_a), {'is_available': False}, format='json')
        assert response.status_code == 404

    def test_value_required(self, owner_client_tenant_a, pizza_a):
        response = owner_client_tenant_a.patch(self.url(pizza_a), {}, format='json')
        assert response.status_code == 400
