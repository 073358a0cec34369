from django.conf import settings
from django.core.management.base import BaseCommand

from orders.factories import get_lifecycle_service


class Command(BaseCommand):
    help = "Cancel NEW orders without a payment session (processes all tenants)"

    def add_arguments(self, parser):
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Show what would be canceled without making changes",
        )
        parser.add_argument(
            "--minutes",
            type=int,
            default=None,
            help="Age in minutes after which an unpaid order is abandoned",
        )

    def handle(self, *args, **options):
        dry_run = options["dry_run"]
        minutes = options["minutes"] or settings.ABANDONED_ORDER_MINUTES

        if dry_run:
            self.stdout.write(
                self.style.WARNING("DRY RUN MODE - No changes will be made")
            )

        order_ids = get_lifecycle_service().cancel_abandoned(minutes, dry_run=dry_run)

        for order_id in order_ids:
            self.stdout.write(f"  {order_id}")

        verb = "Would cancel" if dry_run else "Canceled"
        self.stdout.write(
            self.style.SUCCESS(f"{verb} {len(order_ids)} abandoned orders older than {minutes} minutes")
        )
