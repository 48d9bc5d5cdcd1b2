import logging
from functools import wraps

from django.conf import settings
from django.db import DatabaseError, IntegrityError, transaction
from django.db.models import F
from django.utils import timezone

from blockchain.exceptions import DuplicateRegistration, NotFound, StorageUnavailable

from .models import IdentifierSequence, Product

logger = logging.getLogger(__name__)

PRODUCT_SEQUENCE = 'product'


def storage_guard(func):
    """Converte falhas da base de dados em StorageUnavailable (nunca são ignoradas)."""
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except DatabaseError as exc:
            logger.error("Product store failure in %s: %s", func.__name__, exc)
            raise StorageUnavailable(f"Product store unavailable: {exc}") from exc
    return wrapper


class ProductStore:
    """
    Acesso aos produtos via Django ORM. A base de dados é a única fonte de verdade:
    não existe cache em memória nem mapa distribuidor->consumidor duplicado.
    """

    @storage_guard
    def allocate_id(self, name=PRODUCT_SEQUENCE):
        """Atribui o próximo identificador do contador (incremento atómico na BD)."""
        start = settings.PROVENANCE.get('FIRST_PRODUCT_ID', 1)
        with transaction.atomic():
            IdentifierSequence.objects.get_or_create(name=name, defaults={'last_value': start - 1})
            # The UPDATE holds the row lock until commit, so concurrent allocations serialize here
            IdentifierSequence.objects.filter(name=name).update(last_value=F('last_value') + 1)
            return IdentifierSequence.objects.values_list('last_value', flat=True).get(name=name)

    @storage_guard
    def find_id_by_origin_key(self, origin_key):
        return Product.objects.filter(origin_key=origin_key).values_list('id', flat=True).first()

    @storage_guard
    def create(self, origin_key, **fields):
        """
        Verifica duplicados, atribui o ID e insere o produto numa única transação.
        A constraint UNIQUE em origin_key decide entre registos concorrentes.
        """
        try:
            with transaction.atomic():
                existing_id = self.find_id_by_origin_key(origin_key)
                if existing_id is not None:
                    raise DuplicateRegistration(origin_key, existing_id)

                product_id = self.allocate_id()
                return Product.objects.create(id=product_id, origin_key=origin_key, **fields)
        except IntegrityError:
            existing_id = self.find_id_by_origin_key(origin_key)
            if existing_id is None:
                raise
            raise DuplicateRegistration(origin_key, existing_id)

    @storage_guard
    def get(self, product_id):
        try:
            return Product.objects.get(pk=product_id)
        except Product.DoesNotExist:
            raise NotFound(product_id)

    @storage_guard
    def record_scan(self, product_id):
        """Incrementa scan_count na própria BD (UPDATE ... SET scan_count = scan_count + 1)."""
        with transaction.atomic():
            updated = Product.objects.filter(pk=product_id).update(
                scan_count=F('scan_count') + 1,
                last_scanned=timezone.now(),
            )
            if not updated:
                raise NotFound(product_id)
            return Product.objects.get(pk=product_id)

    @storage_guard
    def delete(self, product_id):
        """Remove o produto e, com ele, o mapeamento origin_key -> id."""
        product = self.get(product_id)
        product.delete()
        return product

    @storage_guard
    def all(self):
        return list(Product.objects.all())

    @storage_guard
    def count(self):
        return Product.objects.count()


product_store = ProductStore()
