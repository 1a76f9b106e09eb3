# fondo_accessorio/domain/fund_calc.py

from __future__ import annotations

import logging
from typing import List, Optional

from fondo_accessorio.domain.fad_totals import FadTotals, calculate_fad_totals
from fondo_accessorio.domain.ledger_fields import (
    DIRIGENZA_FIELDS,
    EQ_FIELDS,
    SEGRETARIO_FIELDS,
    Sezione,
    raw_getter,
    sum_fields,
)
from fondo_accessorio.domain.limiti import (
    compute_adeguamento_pro_capite_art33,
    compute_art23_adjustment,
    compute_fondo_base_2016,
    compute_incrementi_stabili_ccnl,
)
from fondo_accessorio.domain.models import (
    AnnualData,
    FondoDirigenzaData,
    FondoEQData,
    FondoSegretarioData,
    FundInput,
    NormativeData,
    SimulatoreResult,
)
from fondo_accessorio.domain.results import (
    CalculatedFund,
    DettaglioFondi,
    FundComponent,
    FundDetailTotals,
    TipoComponente,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Totali per categoria
# ---------------------------------------------------------------------------

def calculate_totali_eq(eq: FondoEQData) -> FundDetailTotals:
    get = raw_getter(eq)
    return FundDetailTotals(
        stabile=sum_fields(EQ_FIELDS, get, sezione=Sezione.STABILI),
        variabile=sum_fields(EQ_FIELDS, get, sezione=Sezione.VARIABILI),
    )


def percentuale_copertura_segretario(seg: FondoSegretarioData) -> float:
    """Частка покриття posto di segretario (None → 100%)."""
    perc = seg.fin_percentuale_copertura_posto_segretario
    return (100.0 if perc is None else perc) / 100.0


def calculate_totali_segretario(seg: FondoSegretarioData) -> FundDetailTotals:
    get = raw_getter(seg)
    copertura = percentuale_copertura_segretario(seg)
    return FundDetailTotals(
        stabile=sum_fields(SEGRETARIO_FIELDS, get, sezione=Sezione.STABILI) * copertura,
        variabile=sum_fields(SEGRETARIO_FIELDS, get, sezione=Sezione.VARIABILI) * copertura,
    )


def calculate_totali_dirigenza(dir_data: FondoDirigenzaData, has_dirigenza: bool) -> FundDetailTotals:
    if not has_dirigenza:
        return FundDetailTotals()
    get = raw_getter(dir_data)
    return FundDetailTotals(
        stabile=sum_fields(DIRIGENZA_FIELDS, get, sezione=Sezione.STABILI),
        variabile=sum_fields(DIRIGENZA_FIELDS, get, sezione=Sezione.VARIABILI),
    )


def totali_dipendente(fad: FadTotals) -> FundDetailTotals:
    return FundDetailTotals(stabile=fad.somma_stabili, variabile=fad.parte_variabile)


# ---------------------------------------------------------------------------
# Risorse soggette al limite 2016
# ---------------------------------------------------------------------------

def risorse_soggette_eq(eq: FondoEQData) -> float:
    return sum_fields(EQ_FIELDS, raw_getter(eq), sezione=Sezione.STABILI, only_relevant=True)


def risorse_soggette_segretario(seg: FondoSegretarioData) -> float:
    rilevanti = sum_fields(SEGRETARIO_FIELDS, raw_getter(seg), only_relevant=True)
    return rilevanti * percentuale_copertura_segretario(seg)


def risorse_soggette_dirigenza(dir_data: FondoDirigenzaData) -> float:
    return sum_fields(DIRIGENZA_FIELDS, raw_getter(dir_data), only_relevant=True)


# ---------------------------------------------------------------------------
# Componenti aggiuntive (enti virtuosi, proventi specifici, PNRR)
# ---------------------------------------------------------------------------

def compute_incremento_opzionale_virtuosi(
    annual: AnnualData,
    spesa_stipendi_tabellari_2023: float,
    normativa: NormativeData,
) -> Optional[FundComponent]:
    if not annual.condizioni_virtuosita_finanziaria_soddisfatte or spesa_stipendi_tabellari_2023 <= 0:
        return None
    return FundComponent(
        descrizione="Incremento facoltativo enti virtuosi (max 48% stip. tab. non dir. 2023)",
        importo=spesa_stipendi_tabellari_2023 * normativa.limiti.incremento_virtuosi_dl25_2025,
        riferimento=normativa.rif("art14_dl25_2025"),
        tipo=TipoComponente.STABILE,
    )


def compute_risorse_variabili(
    annual: AnnualData,
    fondo_base_2016: float,
    normativa: NormativeData,
) -> List[FundComponent]:
    rif_art45 = normativa.rif("art45_dlgs36_2023")
    rif_art208 = normativa.rif("art208_cds")
    out: List[FundComponent] = []

    art45 = next((p for p in annual.proventi_specifici if p.riferimento_normativo == rif_art45), None)
    if art45 and (art45.importo or 0) > 0:
        out.append(FundComponent(
            descrizione="Incentivi funzioni tecniche",
            importo=art45.importo,
            riferimento=rif_art45,
            tipo=TipoComponente.VARIABILE,
            escluso_dal_limite_2016=True,
        ))

    art208 = next((p for p in annual.proventi_specifici if p.riferimento_normativo == rif_art208), None)
    if art208 and (art208.importo or 0) > 0:
        out.append(FundComponent(
            descrizione="Proventi Codice della Strada (quota destinata)",
            importo=art208.importo,
            riferimento=rif_art208,
            tipo=TipoComponente.VARIABILE,
        ))

    for p in annual.proventi_specifici:
        if p.riferimento_normativo in (rif_art45, rif_art208):
            continue
        if (p.importo or 0) > 0:
            out.append(FundComponent(
                descrizione=p.descrizione,
                importo=p.importo,
                riferimento=p.riferimento_normativo,
                tipo=TipoComponente.VARIABILE,
            ))

    pnrr = annual.incentivi_pnrr_op_misure_straordinarie or 0
    if annual.condizioni_virtuosita_finanziaria_soddisfatte and pnrr > 0:
        limite = fondo_base_2016 * normativa.limiti.incremento_pnrr_dl13_2023
        out.append(FundComponent(
            descrizione=(
                "Incremento variabile PNRR/Misure Straordinarie "
                "(fino a 5% del fondo stabile 2016 originale)"
            ),
            importo=min(pnrr, limite),
            riferimento=normativa.rif("art8_dl13_2023"),
            tipo=TipoComponente.VARIABILE,
            escluso_dal_limite_2016=True,
        ))

    return out


# ---------------------------------------------------------------------------
# Motore principale
# ---------------------------------------------------------------------------

def calculate_fund_completely(
    fund_input: FundInput,
    normativa: NormativeData,
    simulatore: Optional[SimulatoreResult] = None,
) -> CalculatedFund:
    """
    Повний агрегат фонду по чотирьох категоріях.

    simulatore: результат симулятора; якщо None, береться
    annual.simulatore_risultati (може бути None → дзеркальне поле = 0).
    """
    historical = fund_input.historical
    annual = fund_input.annual
    if simulatore is None:
        simulatore = annual.simulatore_risultati

    fondo_base_2016 = compute_fondo_base_2016(historical)

    base_2018 = (historical.fondo_personale_non_dir_eq_2018_art23 or 0) + (historical.fondo_eq_2018_art23 or 0)
    art23 = compute_art23_adjustment(
        base_2018,
        annual.personale_2018_per_art23,
        annual.personale_anno_rif_per_art23,
        fondo_base_2016,
        riferimento=normativa.rif("art23_dlgs75_2017"),
    )

    fad = calculate_fad_totals(
        fund_input.fondo_dipendente,
        simulatore,
        annual.is_ente_in_condizioni_speciali,
        fund_input.fondo_eq.ris_incremento_con_riduzione_fondo_dipendenti,
    )

    dipendente = totali_dipendente(fad)
    eq = calculate_totali_eq(fund_input.fondo_eq)
    segretario = calculate_totali_segretario(fund_input.fondo_segretario)
    dirigenza = calculate_totali_dirigenza(fund_input.fondo_dirigenza, annual.has_dirigenza)

    soggette = (
        fad.totale_parziale_confronto_tetto_2016
        + risorse_soggette_eq(fund_input.fondo_eq)
        + risorse_soggette_segretario(fund_input.fondo_segretario)
        + (risorse_soggette_dirigenza(fund_input.fondo_dirigenza) if annual.has_dirigenza else 0.0)
    )
    superamento = max(0.0, soggette - art23.limite_modificato)

    totale_stabile = dipendente.stabile + eq.stabile + segretario.stabile + dirigenza.stabile
    totale_variabile = dipendente.variabile + eq.variabile + segretario.variabile + dirigenza.variabile

    if superamento > 0:
        logger.warning(
            "[FONDO] Superamento limite 2016: soggette=%.2f limite=%.2f (+%.2f)",
            soggette, art23.limite_modificato, superamento,
        )

    logger.info(
        "[FONDO] %s %s: stabile=%.2f variabile=%.2f totale=%.2f (limite 2016 modificato=%.2f)",
        annual.denominazione_ente or "ente", annual.anno_riferimento,
        totale_stabile, totale_variabile, totale_stabile + totale_variabile, art23.limite_modificato,
    )

    return CalculatedFund(
        fondo_base_2016=fondo_base_2016,
        limite_art23c2_modificato=art23.limite_modificato,
        incremento_determinato_art23c2=art23.componente,
        totale_risorse_soggette_al_limite=soggette,
        superamento_limite_2016=superamento if superamento > 0 else None,
        dettaglio_fondi=DettaglioFondi(
            dipendente=dipendente,
            eq=eq,
            segretario=segretario,
            dirigenza=dirigenza,
        ),
        totale_componente_stabile=totale_stabile,
        totale_componente_variabile=totale_variabile,
        incrementi_stabili_ccnl=compute_incrementi_stabili_ccnl(historical, annual, normativa),
        adeguamento_pro_capite=compute_adeguamento_pro_capite_art33(
            historical, annual, fondo_base_2016, normativa
        ),
        incremento_opzionale_virtuosi=compute_incremento_opzionale_virtuosi(
            annual, historical.spesa_stipendi_tabellari_2023 or 0, normativa
        ),
        risorse_variabili=compute_risorse_variabili(annual, fondo_base_2016, normativa),
    )
