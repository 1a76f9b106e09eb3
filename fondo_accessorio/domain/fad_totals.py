# fondo_accessorio/domain/fad_totals.py

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from fondo_accessorio.domain.fad_fields import FAD_FIELDS, FadContext
from fondo_accessorio.domain.ledger_fields import FieldDescriptor, Sezione, sum_fields
from fondo_accessorio.domain.models import FondoDipendenteData, NormativeData, SimulatoreResult
from fondo_accessorio.domain.results import FundComponent, TipoComponente

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FadTotals:
    somma_stabili: float
    somma_variabili_soggette: float
    somma_variabili_non_soggette: float
    altre_risorse_decurtazioni_finali: float
    decurtazioni_limite_salario_accessorio: float
    totale_risorse_disponibili_contrattazione: float
    somma_stabili_soggette_limite: float          # solo campi stabili rilevanti per il tetto
    totale_parziale_confronto_tetto_2016: float   # stabili rilevanti + variabili soggette

    @property
    def parte_variabile(self) -> float:
        return (
            self.somma_variabili_soggette
            + self.somma_variabili_non_soggette
            - self.altre_risorse_decurtazioni_finali
            - self.decurtazioni_limite_salario_accessorio
        )


def get_fad_effective_value(
    descriptor: FieldDescriptor,
    ledger: FondoDipendenteData,
    ctx: FadContext,
) -> float:
    """
    Effective value одного поля FAD.

    Порядок правил фіксований:
      1) поле вимкнене для ente in condizioni speciali → 0;
      2) поле має resolver (дзеркало симулятора / трансфер EQ) → resolver;
      3) інакше → сире значення (None → 0).
    """
    if descriptor.is_disabled_by_condizioni_speciali and ctx.is_ente_in_condizioni_speciali:
        return 0.0

    raw = descriptor.raw_value(ledger)
    if descriptor.resolver is not None:
        return descriptor.resolver(raw, ctx)
    return raw


def build_fad_context(
    simulatore: Optional[SimulatoreResult],
    is_ente_in_condizioni_speciali: bool,
    incremento_eq_con_riduzione: Optional[float],
) -> FadContext:
    netto = simulatore.fase5_incremento_netto_effettivo_fondo if simulatore else 0.0
    return FadContext(
        incremento_netto_simulatore=netto or 0.0,
        is_ente_in_condizioni_speciali=is_ente_in_condizioni_speciali,
        incremento_eq_con_riduzione=incremento_eq_con_riduzione,
    )


def calculate_fad_totals(
    ledger: FondoDipendenteData,
    simulatore: Optional[SimulatoreResult],
    is_ente_in_condizioni_speciali: bool,
    incremento_eq_con_riduzione: Optional[float],
) -> FadTotals:
    """Зводить ledger FAD у підсумки по секціях (з урахуванням override-правил)."""
    ctx = build_fad_context(simulatore, is_ente_in_condizioni_speciali, incremento_eq_con_riduzione)

    def value_of(d: FieldDescriptor) -> float:
        return get_fad_effective_value(d, ledger, ctx)

    stabili = sum_fields(FAD_FIELDS, value_of, sezione=Sezione.STABILI)
    vs = sum_fields(FAD_FIELDS, value_of, sezione=Sezione.VS_SOGGETTE, signed=False)
    vn = sum_fields(FAD_FIELDS, value_of, sezione=Sezione.VN_NON_SOGGETTE, signed=False)
    fin = sum_fields(FAD_FIELDS, value_of, sezione=Sezione.FIN_DECURTAZIONI, signed=False)
    cl = sum_fields(FAD_FIELDS, value_of, sezione=Sezione.CL_LIMITI, signed=False)

    stabili_soggette = sum_fields(FAD_FIELDS, value_of, sezione=Sezione.STABILI, only_relevant=True)
    vs_soggette = sum_fields(
        FAD_FIELDS, value_of, sezione=Sezione.VS_SOGGETTE, only_relevant=True, signed=False
    )

    totale = stabili + vs + vn - fin - cl

    logger.debug(
        "[FAD] stabili=%.2f vs=%.2f vn=%.2f fin=%.2f cl=%.2f totale=%.2f (dissesto=%s)",
        stabili, vs, vn, fin, cl, totale, is_ente_in_condizioni_speciali,
    )

    return FadTotals(
        somma_stabili=stabili,
        somma_variabili_soggette=vs,
        somma_variabili_non_soggette=vn,
        altre_risorse_decurtazioni_finali=fin,
        decurtazioni_limite_salario_accessorio=cl,
        totale_risorse_disponibili_contrattazione=totale,
        somma_stabili_soggette_limite=stabili_soggette,
        totale_parziale_confronto_tetto_2016=stabili_soggette + vs_soggette,
    )


def fad_voci_dettaglio(
    ledger: FondoDipendenteData,
    simulatore: Optional[SimulatoreResult],
    is_ente_in_condizioni_speciali: bool,
    incremento_eq_con_riduzione: Optional[float],
    normativa: NormativeData,
) -> List[FundComponent]:
    """Ненульові поля FAD з effective value (зі знаком) та riferimento normativo."""
    ctx = build_fad_context(simulatore, is_ente_in_condizioni_speciali, incremento_eq_con_riduzione)
    voci: List[FundComponent] = []
    for d in FAD_FIELDS:
        value = get_fad_effective_value(d, ledger, ctx)
        if value == 0:
            continue
        voci.append(FundComponent(
            descrizione=d.descrizione,
            importo=d.signed(value),
            riferimento=d.riferimento_for(normativa),
            tipo=TipoComponente.STABILE if d.sezione is Sezione.STABILI else TipoComponente.VARIABILE,
            escluso_dal_limite_2016=not d.is_relevant_to_art23_limit,
        ))
    return voci
