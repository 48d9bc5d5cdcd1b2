from datetime import datetime, timezone as dt_timezone

from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime

from .exceptions import InvalidInput

DISPLAY_HASH_LENGTH = 16


def format_timestamp(moment):
    """ISO-8601 UTC com milissegundos e sufixo 'Z' (ex: 2024-03-01T08:00:00.000Z)."""
    if timezone.is_naive(moment):
        moment = moment.replace(tzinfo=dt_timezone.utc)
    moment = moment.astimezone(dt_timezone.utc)
    return moment.strftime('%Y-%m-%dT%H:%M:%S.') + f"{moment.microsecond // 1000:03d}Z"


def parse_timestamp(value):
    """
    Converte o timestamp enviado pelo distribuidor num datetime aware (UTC).
    Aceita string ISO-8601, data simples ou epoch em milissegundos.
    """
    if value is None or value == '':
        return None

    if isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            return datetime.fromtimestamp(value / 1000, tz=dt_timezone.utc)
        except (OverflowError, OSError, ValueError):
            raise InvalidInput("Invalid timestamp", {'timestamp': [f"Out of range: {value}"]})

    if isinstance(value, str):
        try:
            moment = parse_datetime(value.strip())
            if moment is None:
                day = parse_date(value.strip())
                if day is not None:
                    moment = datetime(day.year, day.month, day.day)
        except ValueError:
            moment = None
        if moment is not None:
            if timezone.is_naive(moment):
                moment = moment.replace(tzinfo=dt_timezone.utc)
            return moment

    raise InvalidInput("Invalid timestamp", {'timestamp': [f"Not an ISO-8601 date or epoch millis: {value!r}"]})


def truncate_hash(value):
    return f"{value[:DISPLAY_HASH_LENGTH]}..."


def journey_digest_view(journey):
    """
    Vista resumida da cadeia para o utilizador final (hashes truncados).
    Apenas para apresentação: a verificação usa sempre os hashes completos.
    """
    return [
        {
            'role': block.get('role'),
            'hash': truncate_hash(block.get('hash') or ''),
            'previousHash': truncate_hash(block.get('previousHash') or ''),
        }
        for block in journey
    ]
