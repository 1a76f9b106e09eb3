# fondo_accessorio/services/fund_service.py
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import List, Optional

from fondo_accessorio.domain.compliance import run_all_compliance_checks
from fondo_accessorio.domain.distribuzione import BudgetPerformance, calcola_budget_performance
from fondo_accessorio.domain.errors import FondoError, FundCalculationError, NormativaNonDisponibileError
from fondo_accessorio.domain.fund_calc import calculate_fund_completely
from fondo_accessorio.domain.models import EmployeeCategory, FundInput, NormativeData, SimulatoreResult
from fondo_accessorio.domain.personale import apply_personale_to_distribuzione, calcola_assorbimento
from fondo_accessorio.domain.results import CalculatedFund, ComplianceCheck, Gravita
from fondo_accessorio.domain.simulatore import calculate_simulazione
from fondo_accessorio.services.derived_fields import apply_derived_fields

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CalcoloOutcome:
    """Результат одного перерахунку (фонд, перевірки, симулятор, новий знімок вводу)."""
    fund: CalculatedFund
    checks: List[ComplianceCheck]
    simulatore: SimulatoreResult
    budget_performance: BudgetPerformance
    fund_input: FundInput                   # знімок, на якому рахували
    fund_input_aggiornato: FundInput

    @property
    def has_errors(self) -> bool:
        return any(c.gravita is Gravita.ERROR for c in self.checks)


def applica_personale(fund_input: FundInput, normativa: NormativeData) -> FundInput:
    """
    Якщо в сценарії є список personale, u_diff_progressioni_storiche та
    u_indennita_comparto рахуються з нього (ручні значення перекриваються).
    """
    if not fund_input.personale:
        return fund_input
    assorbimento = calcola_assorbimento(fund_input.personale, fund_input.annual.anno_riferimento, normativa)
    return replace(
        fund_input,
        distribuzione=apply_personale_to_distribuzione(fund_input.distribuzione, assorbimento),
    )


def numero_dipendenti(fund_input: FundInput) -> int:
    """Dipendenti per la maggiorazione: elenco personale, altrimenti il conteggio DIPENDENTE."""
    if fund_input.personale:
        return len(fund_input.personale)
    return int(fund_input.annual.count_for(EmployeeCategory.DIPENDENTE))


def esegui_calcolo(fund_input: FundInput, normativa: Optional[NormativeData]) -> CalcoloOutcome:
    """
    Повний перерахунок: simulatore → aggregazione fondi → verifiche → post-step derivati.

    Без normativa розрахунок не запускається. Будь-яка неочікувана помилка
    загортається у FundCalculationError.
    """
    if normativa is None:
        logger.error("[FONDO] Dati normativi non disponibili")
        raise NormativaNonDisponibileError("Dati normativi non disponibili. Impossibile calcolare.")

    annual = fund_input.annual
    try:
        fund_input = applica_personale(fund_input, normativa)
        simulatore = calculate_simulazione(
            annual.simulatore_input, annual.numero_abitanti, annual.tipologia_ente
        )
        fund = calculate_fund_completely(fund_input, normativa, simulatore)
        checks = run_all_compliance_checks(fund, fund_input, normativa, simulatore)
        budget = calcola_budget_performance(
            fund_input.distribuzione,
            fund.dettaglio_fondi.dipendente.totale,
            numero_dipendenti(fund_input),
        )
        aggiornato = apply_derived_fields(fund_input, simulatore, normativa)
    except FondoError:
        raise
    except (ArithmeticError, AttributeError, KeyError, TypeError, ValueError) as e:
        logger.exception("[FONDO] Errore nel calcolo: %s", e)
        raise FundCalculationError(f"Errore nel calcolo: {e}") from e

    return CalcoloOutcome(
        fund=fund,
        checks=checks,
        simulatore=simulatore,
        budget_performance=budget,
        fund_input=fund_input,
        fund_input_aggiornato=aggiornato,
    )
