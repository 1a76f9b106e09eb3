# fondo_accessorio/domain/personale.py

from __future__ import annotations

import calendar
import logging
from dataclasses import dataclass, replace
from datetime import date
from typing import Iterable

from fondo_accessorio.domain.limiti import part_time_fraction
from fondo_accessorio.domain.models import (
    DipendenteInServizio,
    DistribuzioneRisorseData,
    NormativeData,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AssorbimentoPersonale:
    progressioni_storiche: float     # → u_diff_progressioni_storiche
    indennita_comparto: float        # → u_indennita_comparto
    numero_dipendenti: int


def service_ratio(dip: DipendenteInServizio, anno: int) -> float:
    """
    Частка року, відпрацьована в anno di riferimento, в [0, 1].

    full_year → 1; без жодної дати → 0; дні рахуються включно,
    дати обрізаються межами року.
    """
    if dip.full_year:
        return 1.0
    if dip.data_assunzione is None and dip.data_cessazione is None:
        return 0.0

    inizio_anno = date(anno, 1, 1)
    fine_anno = date(anno, 12, 31)
    start = dip.data_assunzione or inizio_anno
    end = dip.data_cessazione or fine_anno
    if start > end:
        logger.warning("[PERSONALE] %s: assunzione %s dopo cessazione %s", dip.matricola, start, end)
        return 0.0

    start = max(start, inizio_anno)
    end = min(end, fine_anno)
    if end < start:
        return 0.0

    giorni = (end - start).days + 1
    giorni_anno = 366 if calendar.isleap(anno) else 365
    return max(0.0, min(1.0, giorni / giorni_anno))


def calcola_assorbimento(
    personale: Iterable[DipendenteInServizio],
    anno: int,
    normativa: NormativeData,
) -> AssorbimentoPersonale:
    """
    Quanto del fondo stabile è già assorbito da progressioni storiche
    e indennità di comparto del personale in servizio.
    """
    progressioni = 0.0
    indennita = 0.0
    n = 0
    for dip in personale:
        n += 1
        if dip.area is None:
            continue
        quota = part_time_fraction(dip.part_time_percentage) * service_ratio(dip, anno)

        if dip.livello_peo:
            valore = normativa.progression_economic_values.get(dip.area.value, {}).get(dip.livello_peo)
            if valore is not None:
                progressioni += valore * quota
            else:
                logger.warning("[PERSONALE] livello %s non previsto per area %s", dip.livello_peo, dip.area.value)

        valore_ind = normativa.indennita_comparto_values.get(dip.area.value)
        if valore_ind is not None:
            indennita += valore_ind * quota

    logger.info("[PERSONALE] %d dipendenti: progressioni=%.2f indennità=%.2f", n, progressioni, indennita)
    return AssorbimentoPersonale(
        progressioni_storiche=progressioni,
        indennita_comparto=indennita,
        numero_dipendenti=n,
    )


def apply_personale_to_distribuzione(
    distribuzione: DistribuzioneRisorseData,
    assorbimento: AssorbimentoPersonale,
) -> DistribuzioneRisorseData:
    """Новий знімок distribuzione з утилізаціями, розрахованими за персоналом."""
    return replace(
        distribuzione,
        u_diff_progressioni_storiche=assorbimento.progressioni_storiche,
        u_indennita_comparto=assorbimento.indennita_comparto,
    )
