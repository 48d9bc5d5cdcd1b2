from django.db import models
from django.utils import timezone

from blockchain.utils import format_timestamp


class IdentifierSequence(models.Model):
    """Contador atómico por nome (ex: 'product'). Guarda o último valor atribuído."""
    name = models.CharField(max_length=50, primary_key=True)
    last_value = models.BigIntegerField(default=0, verbose_name="Last Allocated Value")

    class Meta: db_table = 'identifier_sequences'
    def __str__(self): return f"{self.name}: {self.last_value}"


class Product(models.Model):
    id = models.BigIntegerField(primary_key=True, verbose_name="Consumer Product ID")

    # O mapeamento distribuidor -> consumidor vive nesta coluna (apagar o produto apaga o mapeamento)
    origin_key = models.CharField(max_length=100, unique=True, verbose_name="Distributor Product ID")

    name = models.CharField(max_length=200)
    origin = models.CharField(max_length=200, verbose_name="Origin")
    batch = models.CharField(max_length=100, verbose_name="Batch ID")
    harvest_date = models.CharField(max_length=20, verbose_name="Harvest Date")
    description = models.TextField(blank=True)
    state = models.PositiveSmallIntegerField(default=0, verbose_name="Lifecycle Stage")

    scan_count = models.PositiveIntegerField(default=0, verbose_name="Scan Count")
    last_scanned = models.DateTimeField(null=True, blank=True, verbose_name="Last Scanned")
    synced_at = models.DateTimeField(default=timezone.now, verbose_name="Synced At")

    # Cadeia de blocos (Farmer -> Distributor -> Retailer), criada de uma vez no registo
    journey = models.JSONField(default=list, verbose_name="Journey (Hash Chain)")

    class Meta:
        db_table = 'consumer_products'
        ordering = ['id']

    def __str__(self):
        return f"{self.id} - {self.name} [{self.batch}]"

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'origin': self.origin,
            'batch': self.batch,
            'harvestDate': self.harvest_date,
            'description': self.description,
            'state': self.state,
            'distributorId': self.origin_key,
            'syncedAt': format_timestamp(self.synced_at),
            'scanCount': self.scan_count,
            'lastScanned': format_timestamp(self.last_scanned) if self.last_scanned else None,
            'journey': self.journey,
        }
