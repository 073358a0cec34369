import logging
from collections import Counter

from django.db.models import Prefetch

from core_backend.exceptions import InvalidCartError, ItemUnavailableError
from orders.calculators import CartLine, ModifierSelection

from .models import MenuCategory, MenuItem, Modifier

logger = logging.getLogger(__name__)


class MenuService:
    """
    Authoritative menu reference data.

    Checkout never trusts prices sent by the client: every cart line is
    re-read from here and priced from the current MenuItem/Modifier rows.
    Lookups go through ``all_objects`` with an explicit tenant filter because
    the public checkout runs without tenant context.
    """

    @staticmethod
    def public_menu(tenant):
        """Available items grouped by category, in display order."""
        available_items = MenuItem.all_objects.filter(
            tenant=tenant, is_available=True
        ).prefetch_related('modifiers')
        categories = MenuCategory.all_objects.filter(tenant=tenant).prefetch_related(
            Prefetch('items', queryset=available_items, to_attr='available_items')
        )

        return [
            {
                'id': category.id,
                'name': category.name,
                'items': [
                    {
                        'id': item.id,
                        'name': item.name,
                        'description': item.description,
                        'price_cents': item.price_cents,
                        'modifiers': [
                            {
                                'id': modifier.id,
                                'name': modifier.name,
                                'type': modifier.type,
                                'price_delta_cents': modifier.price_delta_cents,
                                'is_required': modifier.is_required,
                            }
                            for modifier in item.modifiers.all()
                        ],
                    }
                    for item in category.available_items
                ],
            }
            for category in categories
        ]

    @staticmethod
    def set_availability(item, is_available):
        item.is_available = is_available
        item.save(update_fields=['is_available'])
        logger.info(
            f"Menu item {item.id} ({item.name}) availability set to {is_available} "
            f"for tenant {item.tenant_id}"
        )
        return item

    @staticmethod
    def validate_modifier_selection(item, modifier_ids):
        """
        Check a selection against the item's modifier rules and return the
        selected Modifier rows in request order.

        Raises:
            InvalidCartError: foreign or duplicate modifier, two SINGLE options
                sharing a name, or a required modifier name left unselected
        """
        counts = Counter(modifier_ids)
        duplicates = [modifier_id for modifier_id, count in counts.items() if count > 1]
        if duplicates:
            raise InvalidCartError(f"Modifier {duplicates[0]} selected more than once for {item.name}")

        by_id = {modifier.id: modifier for modifier in item.modifiers.all()}
        selected = []
        for modifier_id in modifier_ids:
            modifier = by_id.get(modifier_id)
            if modifier is None:
                raise InvalidCartError(f"Modifier {modifier_id} does not belong to {item.name}")
            selected.append(modifier)

        single_names = Counter(m.name for m in selected if m.type == Modifier.Type.SINGLE)
        for name, count in single_names.items():
            if count > 1:
                raise InvalidCartError(f"Only one '{name}' option may be chosen for {item.name}")

        selected_names = {m.name for m in selected}
        for modifier in by_id.values():
            if modifier.is_required and modifier.name not in selected_names:
                raise InvalidCartError(f"'{modifier.name}' is required for {item.name}")

        return selected

    @staticmethod
    def resolve_cart(tenant, requested_lines):
        """
        Turn requested cart lines into priced ``CartLine`` objects.

        Args:
            tenant: the restaurant being ordered from
            requested_lines: iterable of dicts with ``menu_item_id``,
                ``quantity``, ``modifier_ids`` and optional ``notes``

        Raises:
            ItemUnavailableError: an item is missing, belongs to another
                tenant, or is marked unavailable
            InvalidCartError: empty cart or invalid modifier selection
        """
        requested_lines = list(requested_lines)
        if not requested_lines:
            raise InvalidCartError("Cart is empty")

        item_ids = {line['menu_item_id'] for line in requested_lines}
        items = {
            item.id: item
            for item in MenuItem.all_objects.filter(tenant=tenant, pk__in=item_ids)
            .prefetch_related('modifiers')
        }

        missing = sorted(item_id for item_id in item_ids if item_id not in items)
        if missing:
            logger.info(f"Checkout for {tenant.slug} references unknown items {missing}")
            raise ItemUnavailableError("Some items are no longer available")

        unavailable = sorted(item.name for item in items.values() if not item.is_available)
        if unavailable:
            logger.info(f"Checkout for {tenant.slug} references unavailable items {unavailable}")
            raise ItemUnavailableError(f"No longer available: {', '.join(unavailable)}")

        cart_lines = []
        for line in requested_lines:
            item = items[line['menu_item_id']]
            modifiers = MenuService.validate_modifier_selection(item, list(line.get('modifier_ids') or []))
            cart_lines.append(
                CartLine(
                    menu_item_id=item.id,
                    name=item.name,
                    unit_price_cents=item.price_cents,
                    quantity=line['quantity'],
                    modifiers=tuple(
                        ModifierSelection(name=m.name, price_delta_cents=m.price_delta_cents)
                        for m in modifiers
                    ),
                    notes=line.get('notes') or None,
                    is_available=item.is_available,
                )
            )
        return cart_lines
