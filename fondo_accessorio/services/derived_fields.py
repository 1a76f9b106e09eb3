from __future__ import annotations

import logging
from dataclasses import replace
from typing import Optional

from fondo_accessorio.domain.models import FundInput, NormativeData, SimulatoreResult
from fondo_accessorio.domain.pnrr import calcola_incremento_pnrr3

logger = logging.getLogger(__name__)


def clamp_incremento_decreto_pa(valore: Optional[float], simulatore: Optional[SimulatoreResult]) -> float:
    """st_incremento_decreto_pa обмежується [0, fase5]; без позитивного fase5 → 0."""
    massimo = simulatore.fase5_incremento_netto_effettivo_fondo if simulatore else 0.0
    if massimo <= 0:
        return 0.0
    return max(0.0, min(float(valore or 0), massimo))


def apply_derived_fields(
    fund_input: FundInput,
    simulatore: Optional[SimulatoreResult],
    normativa: Optional[NormativeData] = None,
) -> FundInput:
    """
    Post-step після розрахунку: повертає НОВИЙ знімок FundInput.

    - fondo_dipendente.st_incremento_decreto_pa ← clamp на результат симулятора;
    - fondo_dipendente.st_riduzione_per_incremento_eq ← трансфер з fondo_eq;
    - annual.simulatore_risultati ← simulatore;
    - якщо передано normativa: annual.calcolato_incremento_pnrr3 і, при
      applica_incremento_pnrr3, vn_dl13_art8c3_incremento_pnrr_max5_stabile_2016
      (0 для ente in condizioni speciali).

    Вхідний знімок не змінюється.
    """
    dip = fund_input.fondo_dipendente
    annual = fund_input.annual

    decreto_pa = clamp_incremento_decreto_pa(dip.st_incremento_decreto_pa, simulatore)
    if dip.st_incremento_decreto_pa is not None and abs(decreto_pa - dip.st_incremento_decreto_pa) > 0:
        logger.warning(
            "[DERIVATI] st_incremento_decreto_pa %.2f → %.2f (limite simulatore)",
            dip.st_incremento_decreto_pa, decreto_pa,
        )

    dip_changes = {
        "st_incremento_decreto_pa": decreto_pa,
        "st_riduzione_per_incremento_eq": fund_input.fondo_eq.ris_incremento_con_riduzione_fondo_dipendenti or 0.0,
    }
    annual_changes = {"simulatore_risultati": simulatore}

    if normativa is not None:
        pnrr3 = calcola_incremento_pnrr3(annual, normativa)
        annual_changes["calcolato_incremento_pnrr3"] = pnrr3
        if annual.applica_incremento_pnrr3:
            valore = 0.0 if annual.is_ente_in_condizioni_speciali else (pnrr3 or 0.0)
            dip_changes["vn_dl13_art8c3_incremento_pnrr_max5_stabile_2016"] = valore

    logger.debug("[DERIVATI] %s", dip_changes)
    return replace(
        fund_input,
        fondo_dipendente=replace(dip, **dip_changes),
        annual=replace(annual, **annual_changes),
    )
