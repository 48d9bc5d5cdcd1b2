import logging
from dataclasses import dataclass
from typing import Optional

from django.utils import timezone

from .exceptions import InvalidInput
from .hashing import hash_block
from .stages import get_stages
from .utils import format_timestamp

logger = logging.getLogger(__name__)

GENESIS_HASH = "0"

LINKAGE_MISMATCH = 'LinkageMismatch'
CONTENT_MISMATCH = 'ContentMismatch'

VERIFIED_MESSAGE = "Hash chain verified - No tampering detected"


@dataclass(frozen=True)
class VerificationResult:
    valid: bool
    message: str
    tampered_stage: Optional[str] = None
    reason: Optional[str] = None

    def as_dict(self):
        data = {'valid': self.valid, 'message': self.message}
        if not self.valid:
            data['tamperedStage'] = self.tampered_stage
            data['reason'] = self.reason
        return data


class LedgerService:
    """
    Service para a cadeia de custódia (hash chain) de cada produto.
    Constrói a jornada no registo e verifica-a em cada leitura. Não persiste nada.
    """

    def __init__(self, stages=None):
        self._stages = stages

    @property
    def stages(self):
        # Settings are read lazily so the singleton can be imported before Django is configured
        if self._stages is not None:
            return self._stages
        return get_stages()

    def build_journey(self, origin, registered_at=None):
        """
        Cria a jornada completa (um bloco por estágio), encadeando os hashes.
        O hash de cada bloco é calculado antes de construir o seguinte.
        """
        if not isinstance(origin, str) or not origin.strip():
            raise InvalidInput("Origin is required to build a journey",
                               {'origin': ["This field is required."]})

        stages = self.stages
        if not stages:
            raise InvalidInput("No custody stages configured")

        moment = registered_at or timezone.now()
        previous_hash = GENESIS_HASH
        journey = []

        for stage in stages:
            try:
                moment = moment + stage.offset
            except OverflowError:
                raise InvalidInput("Registration timestamp out of range",
                                   {'timestamp': [f"{stage.role} stage falls beyond the supported date range"]})
            block = {
                'role': stage.role,
                'location': stage.location or origin,
                'timestamp': format_timestamp(moment),
                'description': stage.description,
                'previousHash': previous_hash,
            }
            block['hash'] = hash_block(block)
            journey.append(block)
            previous_hash = block['hash']

        return journey

    def verify_journey(self, journey):
        """
        Percorre a cadeia desde o bloco genesis e devolve a primeira inconsistência.
        Tamper é um resultado normal (valid=False), nunca uma exceção.
        """
        if not journey:
            return VerificationResult(False, "Journey is empty", reason=LINKAGE_MISMATCH)

        expected_previous = GENESIS_HASH
        for block in journey:
            role = block.get('role')

            # 1. Ligação ao bloco anterior (ou ao sentinel genesis)
            if block.get('previousHash') != expected_previous:
                return self._tampered(role, LINKAGE_MISMATCH, f"Hash mismatch detected at {role} stage")

            # 2. Conteúdo do próprio bloco
            try:
                recalculated = hash_block(block)
            except KeyError:
                # A block stripped of one of its fields cannot match its stored hash
                recalculated = None
            stored_hash = block.get('hash')
            if recalculated is None or recalculated != stored_hash:
                return self._tampered(role, CONTENT_MISMATCH, f"Block data tampered at {role} stage")

            expected_previous = stored_hash

        return VerificationResult(True, VERIFIED_MESSAGE)

    def _tampered(self, role, reason, message):
        logger.warning("Tamper detected: %s (%s)", message, reason)
        return VerificationResult(False, message, tampered_stage=role, reason=reason)


# Instância Singleton
ledger_service = LedgerService()
