import re
from datetime import datetime, timezone

import pytest

from blockchain.exceptions import DuplicateRegistration, InvalidInput, NotFound
from products.models import Product
from products.services import make_batch_id

from .conftest import T0

pytestmark = pytest.mark.django_db


def test_register_builds_and_stores_the_journey(service, payload):
    product, verification = service.register_from_payload(payload)

    assert verification.valid
    assert product.id == 11
    assert product.state == 2
    assert product.origin_key == 'DIST-1001'
    assert product.description == "Black Pepper sourced from Kerala via verified supply chain"
    stored = Product.objects.get(pk=product.id)
    assert [block['role'] for block in stored.journey] == ['Farmer', 'Distributor', 'Retailer']
    assert stored.journey[0]['timestamp'] == '2024-03-01T08:00:00.000Z'
    assert stored.journey[2]['timestamp'] == '2024-03-01T18:00:00.000Z'


def test_register_accepts_epoch_millis(service, payload):
    payload['timestamp'] = int(T0.timestamp() * 1000)

    product, _ = service.register_from_payload(payload)

    assert product.journey[0]['timestamp'] == '2024-03-01T08:00:00.000Z'


def test_register_without_timestamp_uses_now(service, payload):
    del payload['timestamp']

    product, verification = service.register_from_payload(payload)

    assert verification.valid
    assert product.journey[0]['timestamp'].startswith(str(datetime.now(timezone.utc).year))


@pytest.mark.parametrize("field", ['distributorProductId', 'name', 'origin', 'status'])
def test_register_rejects_missing_fields(service, payload, field):
    del payload[field]

    with pytest.raises(InvalidInput):
        service.register_from_payload(payload)
    assert Product.objects.count() == 0


def test_register_rejects_blank_origin(service, payload):
    payload['origin'] = '   '

    with pytest.raises(InvalidInput) as excinfo:
        service.register_from_payload(payload)
    assert 'origin' in excinfo.value.errors


def test_register_rejects_unknown_status(service, payload):
    payload['status'] = 'Shipped'

    with pytest.raises(InvalidInput) as excinfo:
        service.register_from_payload(payload)
    assert 'status' in excinfo.value.errors


def test_register_rejects_bad_timestamp(service, payload):
    payload['timestamp'] = 'yesterday'

    with pytest.raises(InvalidInput) as excinfo:
        service.register_from_payload(payload)
    assert 'timestamp' in excinfo.value.errors


def test_direct_register_validates_too(service):
    with pytest.raises(InvalidInput):
        service.register('DIST-1', 'Rice', '', 'Farmer')


def test_duplicate_registration(service, payload):
    product, _ = service.register_from_payload(payload)

    with pytest.raises(DuplicateRegistration) as excinfo:
        service.register_from_payload(dict(payload, name='Something else'))
    assert excinfo.value.product_id == product.id


def test_batch_id_format():
    batch = make_batch_id('Black  Pepper', 'kerala', T0)
    assert re.fullmatch(r'KE-BLACKPEPPER-2024-[A-Z0-9]{3}', batch)


def test_batch_id_strips_every_kind_of_whitespace():
    batch = make_batch_id('Wild\tForest \nHoney', 'Wayanad', T0)
    assert re.fullmatch(r'WA-WILDFORESTHONEY-2024-[A-Z0-9]{3}', batch)


def test_scan_reports_both_signals(service, payload):
    product, _ = service.register_from_payload(payload)

    first = service.scan(product.id)
    second = service.scan(product.id)

    assert first['product']['scanCount'] == 1
    assert second['product']['scanCount'] == 2
    assert second['product']['lastScanned'] is not None
    assert second['journey'] == product.journey
    assert second['analysis']['status'] == 'Authentic'
    assert second['tamperDetection']['valid'] is True


def test_scan_of_tampered_terminal_product_keeps_signals_apart(service, payload):
    product, _ = service.register_from_payload(payload)
    journey = product.journey
    journey[1]['location'] = 'Tampered Warehouse'
    Product.objects.filter(pk=product.id).update(journey=journey)

    result = service.scan(product.id)

    assert result['analysis']['status'] == 'Authentic'
    assert result['tamperDetection'] == {
        'valid': False,
        'tamperedStage': 'Distributor',
        'reason': 'ContentMismatch',
        'message': "Block data tampered at Distributor stage",
    }


def test_farmer_stage_product_is_suspicious(service, payload):
    payload['status'] = 'Farmer'
    product, _ = service.register_from_payload(payload)

    assert service.scan(product.id)['analysis']['status'] == 'Suspicious'


def test_verify_returns_truncated_view(service, payload):
    product, _ = service.register_from_payload(payload)

    result = service.verify(product.id)

    assert result['productId'] == product.id
    assert result['productName'] == 'Black Pepper'
    assert result['verification']['valid'] is True
    farmer, distributor, _ = result['journey']
    assert farmer['previousHash'] == '0...'
    assert distributor['hash'] == product.journey[1]['hash'][:16] + '...'
    assert distributor['previousHash'] == product.journey[0]['hash'][:16] + '...'


def test_verify_does_not_count_as_scan(service, payload):
    product, _ = service.register_from_payload(payload)

    service.verify(product.id)
    service.inspect(product.id)

    assert Product.objects.get(pk=product.id).scan_count == 0


def test_delete(service, payload):
    product, _ = service.register_from_payload(payload)

    assert service.delete(product.id) == {
        'deletedProductId': product.id,
        'deletedProductName': 'Black Pepper',
    }
    with pytest.raises(NotFound):
        service.scan(product.id)
    # The distributor key can be synced again
    again, _ = service.register_from_payload(payload)
    assert again.id == product.id + 1


def test_list_products(service, payload):
    service.register_from_payload(payload)
    service.register_from_payload(dict(payload, distributorProductId='DIST-1002', name='Rice'))

    names = [item['name'] for item in service.list_products()]

    assert names == ['Black Pepper', 'Rice']
    assert service.count() == 2
