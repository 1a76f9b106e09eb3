# fondo_accessorio/domain/pnrr.py

from __future__ import annotations

import logging
from typing import Optional

from fondo_accessorio.domain.models import AnnualData, NormativeData

logger = logging.getLogger(__name__)


def condizioni_pnrr3_soddisfatte(annual: AnnualData, normativa: NormativeData) -> bool:
    """
    Умови Art. 8 c.3 DL 13/2023:
    equilibrio di bilancio, debito commerciale, rendiconto approvato
    та incidenza salario accessorio <= limite.
    """
    incidenza = annual.incidenza_salario_accessorio_ultimo_rendiconto
    return bool(
        annual.rispetto_equilibrio_bilancio_precedente
        and annual.rispetto_debito_commerciale_precedente
        and annual.approvazione_rendiconto_precedente
        and incidenza is not None
        and incidenza <= normativa.limiti.incidenza_salario_accessorio
    )


def calcola_incremento_pnrr3(annual: AnnualData, normativa: NormativeData) -> Optional[float]:
    """Incremento potenziale PNRR (max 5% fondo stabile 2016) або None, якщо умови не виконані."""
    fondo_2016 = annual.fondo_stabile_2016_pnrr or 0
    if not condizioni_pnrr3_soddisfatte(annual, normativa) or fondo_2016 <= 0:
        logger.debug("[PNRR] condizioni non soddisfatte (fondo_stabile_2016=%r)", annual.fondo_stabile_2016_pnrr)
        return None

    potenziale = fondo_2016 * normativa.limiti.incremento_pnrr_dl13_2023
    logger.info("[PNRR] incremento potenziale = %.2f", potenziale)
    return potenziale
