"""Shared fixtures for the provenance tests."""
import copy
from datetime import datetime, timezone

import pytest

from blockchain.services import LedgerService
from blockchain.stages import DEFAULT_STAGES
from products.services import ProductService
from products.store import ProductStore

T0 = datetime(2024, 3, 1, 8, 0, tzinfo=timezone.utc)


@pytest.fixture
def ledger():
    return LedgerService(stages=DEFAULT_STAGES)


@pytest.fixture
def journey(ledger):
    """Kerala journey registered at T0."""
    return ledger.build_journey("Kerala", T0)


@pytest.fixture
def tampered(journey):
    """Deep copy of the journey that tests may mutate freely."""
    return copy.deepcopy(journey)


@pytest.fixture
def store():
    return ProductStore()


@pytest.fixture
def service(store, ledger):
    return ProductService(store=store, ledger=ledger)


@pytest.fixture
def payload():
    return {
        'distributorProductId': 'DIST-1001',
        'name': 'Black Pepper',
        'origin': 'Kerala',
        'status': 'Retail',
        'timestamp': '2024-03-01T08:00:00.000Z',
    }
