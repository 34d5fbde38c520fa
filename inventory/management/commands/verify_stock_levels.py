from django.core.management.base import BaseCommand, CommandError
from inventory.projection import find_drift


class Command(BaseCommand):
    help = "Replay the movement ledger and compare it with stored stock levels."

    def handle(self, *args, **options):
        drift = find_drift()
        for row in drift:
            self.stderr.write(
                f"product={row.product_id} location={row.location_id} stored={row.stored} expected={row.expected}"
            )
        if drift:
            raise CommandError(f"Stock levels drifted from the ledger for {len(drift)} pair(s).")
        self.stdout.write(self.style.SUCCESS("Stock levels match the ledger."))
