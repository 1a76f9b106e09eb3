# fondo_accessorio/domain/compliance.py

from __future__ import annotations

import logging
from typing import Callable, List, Optional, Tuple

from fondo_accessorio.domain.distribuzione import somma_utilizzi_stabili, somma_utilizzi_variabili
from fondo_accessorio.domain.ledger_fields import EQ_UTILIZZI_KEYS
from fondo_accessorio.domain.limiti import compute_incremento_art79c1c
from fondo_accessorio.domain.models import FundInput, NormativeData, SimulatoreResult
from fondo_accessorio.domain.results import CalculatedFund, ComplianceCheck, Gravita
from fondo_accessorio.utils.parse_utils import format_euro

logger = logging.getLogger(__name__)

# Толерантність на похибки округлення (пів центу)
HALF_CENT = 0.005

QUOTA_MINIMA_RISULTATO_EQ = 0.15

RIF_ART79C1C = "Art. 79 c.1c CCNL 16.11.2022"
RIF_ART80 = "Art. 80 CCNL 16.11.2022"
RIF_GESTIONE_FINANZIARIA = "Principi di corretta gestione finanziaria"


# ---------------------------------------------------------------------------
# Singole verifiche
# ---------------------------------------------------------------------------

def check_limite_art23(
    fund: CalculatedFund, fund_input: FundInput, normativa: NormativeData,
    simulatore: Optional[SimulatoreResult],
) -> List[ComplianceCheck]:
    limite = fund.limite_art23c2_modificato
    soggette = fund.totale_risorse_soggette_al_limite
    superamento = fund.superamento_limite_2016

    if superamento is not None and superamento > 0:
        return [ComplianceCheck(
            id="limite_art23_c2",
            descrizione="Superamento limite Art. 23 c.2 D.Lgs. 75/2017 (Fondo 2016)",
            is_compliant=False,
            valore_attuale=format_euro(soggette),
            limite=format_euro(limite),
            messaggio=(
                f"Rilevato superamento del limite di {format_euro(superamento)}. "
                "È necessario applicare una riduzione di pari importo su uno o più fondi "
                "per rispettare il vincolo."
            ),
            riferimento_normativo=normativa.rif("art23_dlgs75_2017"),
            gravita=Gravita.ERROR,
        )]

    return [ComplianceCheck(
        id="limite_art23_c2",
        descrizione="Rispetto limite Art. 23 c.2 D.Lgs. 75/2017 (Fondo 2016)",
        is_compliant=True,
        valore_attuale=format_euro(soggette),
        limite=format_euro(limite),
        messaggio=(
            "Il totale delle risorse soggette al limite dei fondi specifici rispetta "
            "il tetto storico del 2016 (come modificato)."
        ),
        riferimento_normativo=normativa.rif("art23_dlgs75_2017"),
        gravita=Gravita.INFO,
    )]


def check_incremento_consistenza(
    fund: CalculatedFund, fund_input: FundInput, normativa: NormativeData,
    simulatore: Optional[SimulatoreResult],
) -> List[ComplianceCheck]:
    calcolato = compute_incremento_art79c1c(fund_input.historical, fund_input.annual)
    if calcolato <= 0:
        return []

    inserito = fund_input.fondo_dipendente.st_art79c1c_incremento_stabile_consistenza_pers
    descrizione = "Verifica dell'incremento per aumento della consistenza organica del personale"
    limite = f"Calcolato: {format_euro(calcolato)}"

    if inserito is None:
        return [ComplianceCheck(
            id="verifica_incremento_consistenza",
            descrizione=descrizione,
            is_compliant=False,
            valore_attuale=format_euro(None),
            limite=limite,
            messaggio=(
                f"Importo non inserito: l'incremento calcolato è pari a {format_euro(calcolato)}. "
                "Si potrebbe non utilizzare a pieno le risorse disponibili per l'incremento."
            ),
            riferimento_normativo=RIF_ART79C1C,
            gravita=Gravita.WARNING,
        )]

    differenza = calcolato - inserito
    if differenza > HALF_CENT:
        return [ComplianceCheck(
            id="verifica_incremento_consistenza",
            descrizione=descrizione,
            is_compliant=False,
            valore_attuale=format_euro(inserito),
            limite=limite,
            messaggio=(
                f"L'importo inserito è inferiore di {format_euro(differenza)} rispetto a quanto calcolato. "
                "Si potrebbe non utilizzare a pieno le risorse disponibili per l'incremento."
            ),
            riferimento_normativo=RIF_ART79C1C,
            gravita=Gravita.WARNING,
        )]

    return [ComplianceCheck(
        id="verifica_incremento_consistenza",
        descrizione=descrizione,
        is_compliant=True,
        valore_attuale=format_euro(inserito),
        limite=limite,
        messaggio="L'importo inserito è conforme a quanto calcolato per l'incremento.",
        riferimento_normativo=RIF_ART79C1C,
        gravita=Gravita.INFO,
    )]


def check_distribuzione_dipendenti(
    fund: CalculatedFund, fund_input: FundInput, normativa: NormativeData,
    simulatore: Optional[SimulatoreResult],
) -> List[ComplianceCheck]:
    totale = fund.dettaglio_fondi.dipendente.totale
    if totale <= 0:
        return []

    data = fund_input.distribuzione
    stabili = somma_utilizzi_stabili(data)
    variabili = somma_utilizzi_variabili(data)
    allocato = stabili + variabili
    rimanente = totale - allocato

    out: List[ComplianceCheck] = []

    if stabili > totale:
        out.append(ComplianceCheck(
            id="distribuzione_stabile_supera_totale",
            descrizione="Costi Parte Stabile superano le Risorse Disponibili",
            is_compliant=False,
            valore_attuale=format_euro(stabili),
            limite=format_euro(totale),
            messaggio=(
                "I costi fissi della Parte Stabile superano il totale da distribuire. "
                "Impossibile procedere con l'allocazione della parte variabile."
            ),
            riferimento_normativo=RIF_GESTIONE_FINANZIARIA,
            gravita=Gravita.ERROR,
        ))

    if rimanente < -HALF_CENT:
        out.append(ComplianceCheck(
            id="distribuzione_superamento_budget",
            descrizione="Superamento del budget nella Distribuzione Risorse Dipendenti",
            is_compliant=False,
            valore_attuale=format_euro(allocato),
            limite=format_euro(totale),
            messaggio=(
                "L'importo totale allocato per il personale dipendente supera le risorse "
                f"disponibili di {format_euro(abs(rimanente))}."
            ),
            riferimento_normativo=RIF_ART80,
            gravita=Gravita.ERROR,
        ))
    else:
        out.append(ComplianceCheck(
            id="distribuzione_rispetto_budget",
            descrizione="Rispetto del budget nella Distribuzione Risorse Dipendenti",
            is_compliant=True,
            valore_attuale=format_euro(allocato),
            limite=format_euro(totale),
            messaggio=(
                "L'allocazione delle risorse per il personale dipendente rispetta il budget. "
                f"Rimanenza: {format_euro(rimanente)}."
            ),
            riferimento_normativo=RIF_ART80,
            gravita=Gravita.INFO,
        ))

    return out


def check_distribuzione_eq(
    fund: CalculatedFund, fund_input: FundInput, normativa: NormativeData,
    simulatore: Optional[SimulatoreResult],
) -> List[ComplianceCheck]:
    totale = fund.dettaglio_fondi.eq.totale
    if totale <= 0:
        return []

    eq = fund_input.fondo_eq
    spesa = sum(float(getattr(eq, k) or 0) for k in EQ_UTILIZZI_KEYS)

    out: List[ComplianceCheck] = []
    if spesa > totale:
        out.append(ComplianceCheck(
            id="distribuzione_eq_superamento_budget",
            descrizione="Superamento budget nella Distribuzione Risorse EQ",
            is_compliant=False,
            valore_attuale=format_euro(spesa),
            limite=format_euro(totale),
            messaggio=(
                "La somma delle retribuzioni di posizione e risultato per le EQ supera "
                f"il fondo disponibile di {format_euro(spesa - totale)}."
            ),
            riferimento_normativo=RIF_GESTIONE_FINANZIARIA,
            gravita=Gravita.ERROR,
        ))
    else:
        out.append(ComplianceCheck(
            id="distribuzione_eq_rispetto_budget",
            descrizione="Rispetto del budget nella Distribuzione Risorse EQ",
            is_compliant=True,
            valore_attuale=format_euro(spesa),
            limite=format_euro(totale),
            messaggio="L'allocazione delle risorse per le EQ rispetta il budget.",
            riferimento_normativo=RIF_GESTIONE_FINANZIARIA,
            gravita=Gravita.INFO,
        ))

    minimo = totale * QUOTA_MINIMA_RISULTATO_EQ
    risultato = float(eq.va_art17c4_retribuzione_risultato or 0)
    if risultato < minimo:
        out.append(ComplianceCheck(
            id="verifica_quota_minima_risultato_eq",
            descrizione="Verifica quota minima Retribuzione di Risultato EQ",
            is_compliant=False,
            valore_attuale=format_euro(risultato),
            limite=f"≥ {format_euro(minimo)}",
            messaggio=(
                "La quota destinata alla retribuzione di risultato è inferiore "
                "al 15% minimo previsto dal CCNL."
            ),
            riferimento_normativo=f"{normativa.rif('art17_ccnl2022')} c.4",
            gravita=Gravita.WARNING,
        ))

    return out


def check_coerenza_simulatore(
    fund: CalculatedFund, fund_input: FundInput, normativa: NormativeData,
    simulatore: Optional[SimulatoreResult],
) -> List[ComplianceCheck]:
    if simulatore is None:
        return []
    massimo = simulatore.fase5_incremento_netto_effettivo_fondo
    if massimo <= 0:
        return []

    inserito = float(fund_input.fondo_dipendente.st_incremento_decreto_pa or 0)
    if inserito <= massimo:
        return []

    return [ComplianceCheck(
        id="coerenza_simulatore_decreto_pa",
        descrizione="Incoerenza tra Simulatore e Incremento Decreto PA",
        is_compliant=False,
        valore_attuale=format_euro(inserito),
        limite=format_euro(massimo),
        messaggio=(
            "L'incremento Decreto PA inserito nel fondo dipendenti supera il valore "
            "massimo calcolato dal simulatore."
        ),
        riferimento_normativo=normativa.rif("art14_dl25_2025"),
        gravita=Gravita.WARNING,
    )]


ComplianceRule = Callable[
    [CalculatedFund, FundInput, NormativeData, Optional[SimulatoreResult]],
    List[ComplianceCheck],
]

COMPLIANCE_RULES: Tuple[ComplianceRule, ...] = (
    check_limite_art23,
    check_incremento_consistenza,
    check_distribuzione_dipendenti,
    check_distribuzione_eq,
    check_coerenza_simulatore,
)


def run_all_compliance_checks(
    fund: CalculatedFund,
    fund_input: FundInput,
    normativa: NormativeData,
    simulatore: Optional[SimulatoreResult] = None,
) -> List[ComplianceCheck]:
    """
    Запускає всю батарею перевірок у фіксованому порядку.

    Перевірки незалежні й нічого не змінюють; порушення повертаються
    як ComplianceCheck, а не як винятки.
    """
    if simulatore is None:
        simulatore = fund_input.annual.simulatore_risultati

    checks: List[ComplianceCheck] = []
    for rule in COMPLIANCE_RULES:
        checks.extend(rule(fund, fund_input, normativa, simulatore))

    errors = sum(1 for c in checks if c.gravita is Gravita.ERROR)
    warnings = sum(1 for c in checks if c.gravita is Gravita.WARNING)
    logger.info("[COMPLIANCE] %d verifiche: %d errori, %d avvisi", len(checks), errors, warnings)
    return checks
