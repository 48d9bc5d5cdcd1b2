from collections import namedtuple
from datetime import timedelta

from django.conf import settings

# location=None -> the block takes the product's origin as its location
Stage = namedtuple('Stage', ['role', 'status', 'location', 'description', 'offset'])

DEFAULT_STAGES = (
    Stage('Farmer', 'Farmer', None, 'Product harvested and registered', timedelta(0)),
    Stage('Distributor', 'Distributor', 'Distribution Center', 'Product received and verified', timedelta(hours=2)),
    Stage('Retailer', 'Retail', 'Retail Store', 'Product ready for consumer purchase', timedelta(hours=8)),
)


def stage_from_dict(data):
    """Converte uma entrada de settings.PROVENANCE['STAGES'] num Stage."""
    return Stage(
        role=data['role'],
        status=data.get('status', data['role']),
        location=data.get('location'),
        description=data.get('description', ''),
        offset=timedelta(hours=data.get('offset_hours', 0)),
    )


def get_stages():
    """Stages configured in settings, or the default Farmer/Distributor/Retail sequence."""
    configured = getattr(settings, 'PROVENANCE', {}).get('STAGES')
    if not configured:
        return DEFAULT_STAGES
    return tuple(stage_from_dict(item) for item in configured)


def status_to_state(status, stages=None):
    """
    Índice do estágio correspondente a um status ('Farmer', 'Distributor', 'Retail').
    Aceita também o nome do role ('Retailer'). Devolve None se desconhecido.
    """
    stages = stages or get_stages()
    for index, stage in enumerate(stages):
        if status in (stage.status, stage.role):
            return index
    return None


def terminal_state(stages=None):
    stages = stages or get_stages()
    return len(stages) - 1
