"""
MenuService: authoritative pricing and modifier rules.
"""
import pytest

from core_backend.exceptions import InvalidCartError, ItemUnavailableError
from menu.models import MenuCategory, MenuItem, Modifier
from menu.services import MenuService


@pytest.mark.django_db
class TestModifierSelection:
    def test_valid_selection_keeps_request_order(self, pizza_a, pizza_modifiers):
        selected = MenuService.validate_modifier_selection(
            pizza_a, [pizza_modifiers['olives'].id, pizza_modifiers['thin'].id]
        )
        assert selected == [pizza_modifiers['olives'], pizza_modifiers['thin']]

    def test_duplicate_modifier(self, pizza_a, pizza_modifiers):
        thin = pizza_modifiers['thin'].id
        with pytest.raises(InvalidCartError, match='more than once'):
            MenuService.validate_modifier_selection(pizza_a, [thin, thin])

    def test_modifier_of_another_item(self, pizza_a, pizza_modifiers, soda_a):
        ice = Modifier.objects.create(menu_item=soda_a, name='Ice', price_delta_cents=0)
        with pytest.raises(InvalidCartError, match='does not belong'):
            MenuService.validate_modifier_selection(pizza_a, [pizza_modifiers['thin'].id, ice.id])

    def test_two_single_options_of_one_group(self, pizza_a, pizza_modifiers):
        with pytest.raises(InvalidCartError, match="Only one 'Crust'"):
            MenuService.validate_modifier_selection(
                pizza_a, [pizza_modifiers['thin'].id, pizza_modifiers['deep'].id]
            )

    def test_required_group_missing(self, pizza_a, pizza_modifiers):
        with pytest.raises(InvalidCartError, match="'Crust' is required"):
            MenuService.validate_modifier_selection(pizza_a, [pizza_modifiers['olives'].id])

    def test_multi_options_combine(self, soda_a):
        lemon = Modifier.objects.create(menu_item=soda_a, name='Lemon', price_delta_cents=25)
        lime = Modifier.objects.create(menu_item=soda_a, name='Lime', price_delta_cents=25)

        assert MenuService.validate_modifier_selection(soda_a, [lemon.id, lime.id]) == [lemon, lime]

    def test_no_modifiers_needed(self, soda_a):
        assert MenuService.validate_modifier_selection(soda_a, []) == []


@pytest.mark.django_db
class TestResolveCart:
    def test_prices_come_from_menu(self, tenant_a, pizza_a, pizza_modifiers, soda_a):
        lines = MenuService.resolve_cart(tenant_a, [
            {'menu_item_id': pizza_a.id, 'quantity': 2, 'modifier_ids': [pizza_modifiers['deep'].id], 'notes': 'cut in 8'},
            {'menu_item_id': soda_a.id, 'quantity': 1},
        ])

        assert [(line.name, line.unit_price_cents, line.quantity) for line in lines] == [
            ('Margherita', 1299, 2),
            ('Soda', 250, 1),
        ]
        assert lines[0].unit_total_cents == 1499
        assert lines[0].notes == 'cut in 8'
        assert lines[0].menu_item_id == pizza_a.id
        assert lines[1].modifiers == ()

    def test_empty_cart(self, tenant_a):
        with pytest.raises(InvalidCartError):
            MenuService.resolve_cart(tenant_a, [])

    def test_missing_item(self, tenant_a, soda_a):
        with pytest.raises(ItemUnavailableError):
            MenuService.resolve_cart(tenant_a, [{'menu_item_id': soda_a.id + 1000, 'quantity': 1}])

    def test_other_tenants_item(self, tenant_a, burger_b):
        with pytest.raises(ItemUnavailableError):
            MenuService.resolve_cart(tenant_a, [{'menu_item_id': burger_b.id, 'quantity': 1}])

    def test_unavailable_item(self, tenant_a, sold_out_a):
        with pytest.raises(ItemUnavailableError, match='Calzone'):
            MenuService.resolve_cart(tenant_a, [{'menu_item_id': sold_out_a.id, 'quantity': 1}])


@pytest.mark.django_db
class TestPublicMenu:
    def test_groups_available_items_by_category(self, tenant_a, pizza_a, pizza_modifiers, soda_a, sold_out_a):
        drinks = MenuCategory.objects.create(tenant=tenant_a, name='Drinks', sort_order=2)
        MenuItem.objects.create(tenant=tenant_a, category=drinks, name='Lemonade', price_cents=300)

        menu = MenuService.public_menu(tenant_a)

        assert [category['name'] for category in menu] == ['Pizzas', 'Drinks']
        assert [item['name'] for item in menu[0]['items']] == ['Margherita', 'Soda']
        assert [m['name'] for m in menu[0]['items'][0]['modifiers']] == ['Crust', 'Crust', 'Olives']
        assert menu[1]['items'][0]['price_cents'] == 300

    def test_other_tenants_menu_is_excluded(self, tenant_a, pizza_a, burger_b):
        menu = MenuService.public_menu(tenant_a)
        names = [item['name'] for category in menu for item in category['items']]
        assert 'Cheeseburger' not in names
