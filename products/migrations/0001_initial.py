from django.db import migrations, models
import django.utils.timezone


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='IdentifierSequence',
            fields=[
                ('name', models.CharField(max_length=50, primary_key=True, serialize=False)),
                ('last_value', models.BigIntegerField(default=0, verbose_name='Last Allocated Value')),
            ],
            options={
                'db_table': 'identifier_sequences',
            },
        ),
        migrations.CreateModel(
            name='Product',
            fields=[
                ('id', models.BigIntegerField(primary_key=True, serialize=False, verbose_name='Consumer Product ID')),
                ('origin_key', models.CharField(max_length=100, unique=True, verbose_name='Distributor Product ID')),
                ('name', models.CharField(max_length=200)),
                ('origin', models.CharField(max_length=200, verbose_name='Origin')),
                ('batch', models.CharField(max_length=100, verbose_name='Batch ID')),
                ('harvest_date', models.CharField(max_length=20, verbose_name='Harvest Date')),
                ('description', models.TextField(blank=True)),
                ('state', models.PositiveSmallIntegerField(default=0, verbose_name='Lifecycle Stage')),
                ('scan_count', models.PositiveIntegerField(default=0, verbose_name='Scan Count')),
                ('last_scanned', models.DateTimeField(blank=True, null=True, verbose_name='Last Scanned')),
                ('synced_at', models.DateTimeField(default=django.utils.timezone.now, verbose_name='Synced At')),
                ('journey', models.JSONField(default=list, verbose_name='Journey (Hash Chain)')),
            ],
            options={
                'db_table': 'consumer_products',
                'ordering': ['id'],
            },
        ),
    ]
