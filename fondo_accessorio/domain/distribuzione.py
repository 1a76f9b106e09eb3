# fondo_accessorio/domain/distribuzione.py
"""Utilizzi del fondo dipendenti (Art. 80 CCNL 16.11.2022) і розподіл performance."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, fields
from typing import Tuple

from fondo_accessorio.domain.models import DistribuzioneRisorseData, RisorsaVariabileDetail
from fondo_accessorio.utils.parse_utils import round_cents

logger = logging.getLogger(__name__)

UTILIZZI_STABILI_SCALARI: Tuple[str, ...] = (
    "u_diff_progressioni_storiche",
    "u_indennita_comparto",
)

UTILIZZI_STABILI_DETTAGLIO: Tuple[str, ...] = (
    "u_incr_indennita_educatori",
    "u_incr_indennita_scolastico",
    "u_indennita_ex_8qf",
)

# усі p_* поля, у порядку оголошення в DistribuzioneRisorseData
UTILIZZI_VARIABILI: Tuple[str, ...] = tuple(
    f.name for f in fields(DistribuzioneRisorseData) if f.name.startswith("p_")
)

VOCI_PERFORMANCE: Tuple[str, ...] = (
    "p_performance_organizzativa",
    "p_performance_individuale",
    "p_maggiorazione_performance_individuale",
)


def _stanziate(detail: RisorsaVariabileDetail | None) -> float:
    if detail is None or detail.stanziate is None:
        return 0.0
    return float(detail.stanziate)


def somma_utilizzi_stabili(data: DistribuzioneRisorseData) -> float:
    scalari = sum(float(getattr(data, k) or 0) for k in UTILIZZI_STABILI_SCALARI)
    dettaglio = sum(_stanziate(getattr(data, k)) for k in UTILIZZI_STABILI_DETTAGLIO)
    return scalari + dettaglio


def somma_utilizzi_variabili(data: DistribuzioneRisorseData, *, escludi_performance: bool = False) -> float:
    keys = UTILIZZI_VARIABILI
    if escludi_performance:
        keys = tuple(k for k in keys if k not in VOCI_PERFORMANCE)
    return sum(_stanziate(getattr(data, k)) for k in keys)


@dataclass(frozen=True)
class Maggiorazione:
    pro_capite: float
    numero_beneficiari: int
    totale: float


@dataclass(frozen=True)
class BudgetPerformance:
    disponibile_contrattazione: float     # totale - utilizzi stabili
    altri_utilizzi_variabili: float       # p_* senza le 3 voci di performance
    maggiorazione: float                  # stanziata o calcolata (Art. 81)
    budget_performance: float             # al netto della maggiorazione
    performance_individuale: float
    performance_organizzativa: float


def calcola_maggiorazione(
    disponibile_contrattazione: float,
    numero_dipendenti: int,
    data: DistribuzioneRisorseData,
) -> Maggiorazione:
    """
    Maggiorazione del premio individuale (Art. 81 CCNL 2022).

    pro capite = (disponibile × %individuale / n) × %maggiorazione;
    beneficiari = ceil(n × %dipendenti_bonus).
    """
    if numero_dipendenti <= 0:
        return Maggiorazione(pro_capite=0.0, numero_beneficiari=0, totale=0.0)

    perc_ind = data.criteri_perc_perf_individuale or 0
    perc_magg = data.criteri_perc_maggiorazione_premio or 0
    perc_bonus = data.criteri_perc_dipendenti_bonus or 0

    premio_medio = disponibile_contrattazione * (perc_ind / 100.0) / numero_dipendenti
    pro_capite = premio_medio * (perc_magg / 100.0)
    beneficiari = math.ceil(numero_dipendenti * (perc_bonus / 100.0))

    return Maggiorazione(
        pro_capite=pro_capite,
        numero_beneficiari=beneficiari,
        totale=round_cents(pro_capite * beneficiari),
    )


def calcola_budget_performance(
    data: DistribuzioneRisorseData,
    totale_da_distribuire: float,
    numero_dipendenti: int = 0,
) -> BudgetPerformance:
    """
    Budget performance = disponibile - altri utilizzi variabili - maggiorazione.

    Якщо p_maggiorazione_performance_individuale не заповнена, maggiorazione
    рахується з disponibile_contrattazione та numero_dipendenti.
    """
    disponibile = totale_da_distribuire - somma_utilizzi_stabili(data)
    altri = somma_utilizzi_variabili(data, escludi_performance=True)

    voce = data.p_maggiorazione_performance_individuale
    if voce is None or voce.stanziate is None:
        maggiorazione = calcola_maggiorazione(disponibile, numero_dipendenti, data).totale
    else:
        maggiorazione = float(voce.stanziate)

    budget = max(0.0, disponibile - altri) - maggiorazione

    perc_ind = data.criteri_perc_perf_individuale or 0
    individuale = round_cents(budget * perc_ind / 100.0)
    organizzativa = round_cents(budget * (100 - perc_ind) / 100.0)

    logger.debug(
        "[DISTRIBUZIONE] disponibile=%.2f altri=%.2f magg=%.2f budget=%.2f ind=%.2f org=%.2f",
        disponibile, altri, maggiorazione, budget, individuale, organizzativa,
    )

    return BudgetPerformance(
        disponibile_contrattazione=disponibile,
        altri_utilizzi_variabili=altri,
        maggiorazione=maggiorazione,
        budget_performance=budget,
        performance_individuale=individuale,
        performance_organizzativa=organizzativa,
    )
