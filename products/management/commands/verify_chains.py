from django.core.management.base import BaseCommand, CommandError

from blockchain.exceptions import NotFound
from blockchain.services import ledger_service
from products.store import product_store


class Command(BaseCommand):
    help = "Re-verifica a hash chain (journey) de todos os produtos guardados."

    def add_arguments(self, parser):
        parser.add_argument('--product', type=int, help="Verify only this consumer product ID")

    def handle(self, *args, **options):
        if options['product'] is not None:
            try:
                products = [product_store.get(options['product'])]
            except NotFound as exc:
                raise CommandError(str(exc))
        else:
            products = product_store.all()

        failures = 0
        for product in products:
            result = ledger_service.verify_journey(product.journey)
            if result.valid:
                self.stdout.write(f"Product {product.id} ({product.name}): OK")
            else:
                failures += 1
                self.stdout.write(self.style.ERROR(
                    f"Product {product.id} ({product.name}): {result.message} [{result.reason}]"
                ))

        self.stdout.write(f"Total Products checked: {len(products)}")
        if failures:
            raise CommandError(f"{failures} journey(s) failed verification")
