import logging
import re
import string

from django.utils import timezone
from django.utils.crypto import get_random_string

from blockchain.exceptions import InvalidInput
from blockchain.services import ledger_service
from blockchain.stages import status_to_state
from blockchain.utils import journey_digest_view

from .analysis import classify
from .forms import ProductSyncForm
from .store import product_store

logger = logging.getLogger(__name__)

BATCH_SUFFIX_CHARS = string.ascii_uppercase + string.digits


def make_batch_id(name, origin, now=None):
    """Ex: 'Kerala', 'Black Pepper' -> 'KE-BLACKPEPPER-2026-X7Q'."""
    now = now or timezone.now()
    suffix = get_random_string(3, allowed_chars=BATCH_SUFFIX_CHARS)
    compact_name = re.sub(r'\s+', '', name.upper())
    return f"{origin[:2].upper()}-{compact_name}-{now.year}-{suffix}"


def format_harvest_date(now=None):
    return (now or timezone.now()).strftime('%d %b %Y')


class ProductService:
    """
    Registo e leitura de produtos com verificação da hash chain.
    A cadeia é construída pelo LedgerService e persistida pelo ProductStore.
    """

    def __init__(self, store=None, ledger=None):
        self.store = store or product_store
        self.ledger = ledger or ledger_service

    # ------------------------------------------------------------------
    # Registo (sync do distribuidor)
    # ------------------------------------------------------------------

    def register_from_payload(self, payload):
        form = ProductSyncForm.from_payload(payload, stages=self.ledger.stages)
        if not form.is_valid():
            raise InvalidInput("Invalid registration data",
                               {field: list(messages) for field, messages in form.errors.items()})
        return self.register(**form.cleaned_data)

    def register(self, origin_key, name, origin, status, timestamp=None):
        """
        Cria o produto e a sua jornada (Farmer -> Distributor -> Retailer).
        Devolve (product, verification).
        """
        missing = [field for field, value in
                   (('origin_key', origin_key), ('name', name), ('origin', origin), ('status', status))
                   if not isinstance(value, str) or not value.strip()]
        if missing:
            raise InvalidInput("Missing required registration fields",
                               {field: ["This field is required."] for field in missing})

        state = status_to_state(status, self.ledger.stages)
        if state is None:
            raise InvalidInput("Unknown product status", {'status': [f"Unknown status: {status}"]})

        now = timezone.now()
        journey = self.ledger.build_journey(origin, timestamp)

        product = self.store.create(
            origin_key,
            name=name,
            origin=origin,
            batch=make_batch_id(name, origin, now),
            harvest_date=format_harvest_date(now),
            description=f"{name} sourced from {origin} via verified supply chain",
            state=state,
            synced_at=now,
            journey=journey,
        )

        verification = self.ledger.verify_journey(product.journey)
        logger.info("Product synced: consumer ID %s (distributor %s), %d blocks, chain valid=%s",
                    product.id, origin_key, len(journey), verification.valid)
        return product, verification

    # ------------------------------------------------------------------
    # Leitura / Verificação
    # ------------------------------------------------------------------

    def scan(self, product_id):
        """Leitura por QR: incrementa o contador e verifica a cadeia."""
        product = self.store.record_scan(product_id)
        verification = self.ledger.verify_journey(product.journey)
        logger.info("Product %s scanned (total scans: %s), tamper check: %s",
                    product_id, product.scan_count, verification.message)
        return {
            'product': product.to_dict(),
            'journey': product.journey,
            'analysis': classify(product, self.ledger.stages),
            'tamperDetection': verification.as_dict(),
        }

    def inspect(self, product_id):
        """Igual ao scan mas sem contar a leitura (página pública)."""
        product = self.store.get(product_id)
        return product, classify(product, self.ledger.stages), self.ledger.verify_journey(product.journey)

    def verify(self, product_id):
        product = self.store.get(product_id)
        verification = self.ledger.verify_journey(product.journey)
        return {
            'productId': product.id,
            'productName': product.name,
            'verification': verification.as_dict(),
            'journey': journey_digest_view(product.journey),
        }

    def delete(self, product_id):
        product = self.store.delete(product_id)
        logger.info("Deleted product ID %s (%s)", product_id, product.name)
        return {
            'deletedProductId': product_id,
            'deletedProductName': product.name,
        }

    def list_products(self):
        return [product.to_dict() for product in self.store.all()]

    def count(self):
        return self.store.count()


product_service = ProductService()
