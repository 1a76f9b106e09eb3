# fondo_accessorio/domain/limiti.py

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional

from fondo_accessorio.domain.models import (
    AnnualData,
    Art23EmployeeDetail,
    EmployeeCategory,
    HistoricalData,
    NormativeData,
)
from fondo_accessorio.domain.results import FundComponent, TipoComponente
from fondo_accessorio.utils.parse_utils import round_cents

logger = logging.getLogger(__name__)

MESI_ANNO = 12


# ---------------------------------------------------------------------------
# Dipendenti equivalenti
# ---------------------------------------------------------------------------

def part_time_fraction(percentage: Optional[float]) -> float:
    """
    Частка part-time для одного працівника, завжди в [0, 1].

    None або значення поза [0, 100] → 1 (full time).
    """
    if percentage is None:
        return 1.0
    if 0 <= percentage <= 100:
        return percentage / 100.0
    logger.warning("[LIMITI] part_time_percentage=%r поза [0,100] → 1", percentage)
    return 1.0


def months_paid_fraction(cedolini: Optional[float]) -> float:
    """cedolini/12, якщо cedolini в 1..12; інакше (None, 0, >12, <0) → 1."""
    if cedolini is None:
        return 1.0
    if 0 < cedolini <= MESI_ANNO:
        return cedolini / MESI_ANNO
    if cedolini != 0:
        logger.warning("[LIMITI] cedolini_emessi=%r поза 1..12 → 1", cedolini)
    return 1.0


def equivalent_headcount_2018(entries: Iterable[Art23EmployeeDetail]) -> float:
    return sum(part_time_fraction(e.part_time_percentage) for e in entries)


def equivalent_headcount_anno_rif(entries: Iterable[Art23EmployeeDetail]) -> float:
    return sum(
        part_time_fraction(e.part_time_percentage) * months_paid_fraction(e.cedolini_emessi)
        for e in entries
    )


# ---------------------------------------------------------------------------
# Tetto 2016 + adeguamento Art. 23 c.2 D.Lgs. 75/2017
# ---------------------------------------------------------------------------

def compute_fondo_base_2016(historical: HistoricalData) -> float:
    return (
        (historical.fondo_salario_accessorio_personale_non_dir_eq_2016 or 0)
        + (historical.fondo_elevate_qualificazioni_2016 or 0)
        + (historical.fondo_dirigenza_2016 or 0)
        + (historical.risorse_segretario_comunale_2016 or 0)
    )


@dataclass(frozen=True)
class Art23Adjustment:
    dipendenti_equivalenti_2018: float
    dipendenti_equivalenti_anno_rif: float
    valore_medio_pro_capite_2018: float
    incremento_lordo: float                 # може бути < 0
    incremento_effettivo: float             # max(0, incremento_lordo)
    limite_modificato: float                # fondo_base_2016 + incremento_effettivo
    componente: Optional[FundComponent] = None


def compute_art23_adjustment(
    base_2018: float,
    personale_2018: Iterable[Art23EmployeeDetail],
    personale_anno_rif: Iterable[Art23EmployeeDetail],
    fondo_base_2016: float,
    riferimento: str = "",
) -> Art23Adjustment:
    """
    Перерахунок tetto 2016 за зміною dipendenti equivalenti (база 2018).

    Зменшення персоналу ніколи не знижує tetto: incremento_effettivo >= 0.
    """
    eq_2018 = equivalent_headcount_2018(personale_2018)
    eq_rif = equivalent_headcount_anno_rif(personale_anno_rif)

    pro_capite = 0.0
    lordo = 0.0
    if base_2018 > 0 and eq_2018 > 0:
        pro_capite = base_2018 / eq_2018
        lordo = pro_capite * (eq_rif - eq_2018)

    effettivo = max(0.0, lordo)

    componente = None
    if effettivo > 0:
        componente = FundComponent(
            descrizione="Adeguamento fondo per variazione personale (Art. 23 c.2 D.Lgs. 75/2017, base 2018)",
            importo=effettivo,
            riferimento=riferimento,
            tipo=TipoComponente.STABILE,
            escluso_dal_limite_2016=False,
        )

    logger.debug(
        "[LIMITI] eq2018=%.4f eq_rif=%.4f pro_capite=%.2f lordo=%.2f effettivo=%.2f",
        eq_2018, eq_rif, pro_capite, lordo, effettivo,
    )

    return Art23Adjustment(
        dipendenti_equivalenti_2018=eq_2018,
        dipendenti_equivalenti_anno_rif=eq_rif,
        valore_medio_pro_capite_2018=pro_capite,
        incremento_lordo=lordo,
        incremento_effettivo=effettivo,
        limite_modificato=fondo_base_2016 + effettivo,
        componente=componente,
    )


def compute_incremento_art79c1c(historical: HistoricalData, annual: AnnualData) -> float:
    """
    Incremento stabile per consistenza del personale (Art. 79 c.1c CCNL 2022).

    Та сама формула Art. 23 c.2, але лише на базі фонду non dirigenti/non EQ 2018.
    Округлення до центів.
    """
    adj = compute_art23_adjustment(
        historical.fondo_personale_non_dir_eq_2018_art23 or 0,
        annual.personale_2018_per_art23,
        annual.personale_anno_rif_per_art23,
        fondo_base_2016=0.0,
    )
    return round_cents(adj.incremento_effettivo)


# ---------------------------------------------------------------------------
# Componenti fuori dal perimetro del tetto (Art. 33 DL 34/2019, CCNL)
# ---------------------------------------------------------------------------

def compute_incrementi_stabili_ccnl(
    historical: HistoricalData,
    annual: AnnualData,
    normativa: NormativeData,
) -> List[FundComponent]:
    vpc = normativa.valori_pro_capite
    out: List[FundComponent] = []

    personale_2018 = historical.personale_servizio_2018 or 0
    if personale_2018 > 0:
        out.append(FundComponent(
            descrizione=(
                f"Incremento stabile CCNL ({vpc.art67_ccnl_2018}€ pro-capite su personale 2018 per Art.33)"
            ),
            importo=personale_2018 * vpc.art67_ccnl_2018,
            riferimento=normativa.rif("art67_ccnl2018"),
            tipo=TipoComponente.STABILE,
        ))

    non_dir_eq = annual.count_for(EmployeeCategory.DIPENDENTE, EmployeeCategory.EQ)
    if non_dir_eq > 0:
        out.append(FundComponent(
            descrizione=(
                f"Incremento stabile CCNL ({vpc.art79_ccnl_2022_b}€ pro-capite personale non Dir/EQ per Art.33)"
            ),
            importo=non_dir_eq * vpc.art79_ccnl_2022_b,
            riferimento=f"{normativa.rif('art79_ccnl2022')} lett. b)",
            tipo=TipoComponente.STABILE,
        ))

    return out


def compute_adeguamento_pro_capite_art33(
    historical: HistoricalData,
    annual: AnnualData,
    fondo_base_2016: float,
    normativa: NormativeData,
) -> FundComponent:
    """
    Invarianza del valore medio pro capite 2018 (Art. 33 DL 34/2019).

    Компонент повертається завжди; importo = 0, якщо pro capite не визначений.
    """
    personale_2018 = historical.personale_servizio_2018 or 0
    pro_capite = fondo_base_2016 / personale_2018 if personale_2018 > 0 and fondo_base_2016 > 0 else 0.0

    importo = 0.0
    if pro_capite > 0:
        importo = (annual.count_for() - personale_2018) * pro_capite

    return FundComponent(
        descrizione="Adeguamento invarianza valore medio pro-capite 2018 (Art. 33 DL 34/2019)",
        importo=importo,
        riferimento=normativa.rif("art33_dl34_2019"),
        tipo=TipoComponente.STABILE,
    )
