# fondo_accessorio/domain/simulatore.py

from __future__ import annotations

import logging
from typing import Optional, Tuple

from fondo_accessorio.domain.models import SimulatoreInput, SimulatoreResult, TipologiaEnte

logger = logging.getLogger(__name__)

PERCENTUALE_OBIETTIVO = 0.48

# DM 17/03/2020: (popolazione massima inclusa, soglia %)
SOGLIE_COMUNE: Tuple[Tuple[Optional[int], float], ...] = (
    (999, 29.50),
    (1999, 28.60),
    (2999, 27.60),
    (4999, 27.20),
    (9999, 26.90),
    (59999, 27.00),
    (249999, 27.60),
    (1499999, 28.80),
    (None, 25.30),
)

SOGLIE_PROVINCIA: Tuple[Tuple[Optional[int], float], ...] = (
    (250000, 20.80),
    (349999, 19.10),
    (449999, 19.10),
    (699999, 19.70),
    (None, 13.90),
)


def get_soglia_spesa_personale(
    numero_abitanti: Optional[int],
    tipologia_ente: Optional[TipologiaEnte],
) -> float:
    """
    Soglia % spesa di personale / entrate correnti (DM 17/03/2020).

    Для типів, яких немає в таблиці, або без даних → 0.
    """
    if numero_abitanti is None or tipologia_ente is None:
        return 0.0

    if tipologia_ente is TipologiaEnte.COMUNE:
        table = SOGLIE_COMUNE
    elif tipologia_ente is TipologiaEnte.PROVINCIA:
        table = SOGLIE_PROVINCIA
    else:
        return 0.0

    for max_abitanti, soglia in table:
        if max_abitanti is None or numero_abitanti <= max_abitanti:
            return soglia
    return 0.0


def _v(value: Optional[float]) -> float:
    return float(value) if value is not None else 0.0


def calculate_simulazione(
    sim: SimulatoreInput,
    numero_abitanti: Optional[int],
    tipologia_ente: Optional[TipologiaEnte],
) -> SimulatoreResult:
    """
    Simulatore incremento fondo (Art. 14 DL 25/2025), 5 фаз по черзі.

    fase 4 = min(fase1, fase2, fase3) >= 0;
    fase 5 = fase4 / (1 + oneri%), для oneri в [0, 100); інакше 0.
    """
    # Fase 1: obiettivo 48% stipendi tabellari
    obiettivo_48 = _v(sim.sim_stipendi_tabellari_2023) * PERCENTUALE_OBIETTIVO
    fondo_attuale = _v(sim.sim_fondo_stabile_anno_applicazione) + _v(sim.sim_risorse_poeq_anno_applicazione)
    fase1 = max(0.0, obiettivo_48 - fondo_attuale)

    # Fase 2: sostenibilità finanziaria (DL 34/2019)
    spesa_prevista = _v(sim.sim_spesa_personale_consuntivo_2023) + _v(sim.sim_costo_annuo_nuove_assunzioni_piao)
    soglia = get_soglia_spesa_personale(numero_abitanti, tipologia_ente)
    limite_sostenibile = _v(sim.sim_media_entrate_correnti_2021_2023) * (soglia / 100.0)
    fase2 = max(0.0, limite_sostenibile - spesa_prevista)

    # Fase 3: tetto storico spesa di personale (L. 296/2006)
    fase3 = max(0.0, _v(sim.sim_tetto_spesa_personale_l296_06) - spesa_prevista)

    # Fase 4
    fase4 = min(fase1, fase2, fase3)

    # Fase 5: netto oneri riflessi
    oneri = _v(sim.sim_percentuale_oneri_incremento)
    if 0 <= oneri < 100:
        fase5 = fase4 / (1 + oneri / 100.0)
    else:
        logger.warning("[SIMULATORE] percentuale oneri=%r fuori [0,100) → incremento netto 0", oneri)
        fase5 = 0.0

    logger.info(
        "[SIMULATORE] fase1=%.2f fase2=%.2f fase3=%.2f → fase4=%.2f, netto=%.2f",
        fase1, fase2, fase3, fase4, fase5,
    )

    return SimulatoreResult(
        fase1_obiettivo_48=obiettivo_48,
        fase1_fondo_attuale_complessivo=fondo_attuale,
        fase1_incremento_potenziale_lordo=fase1,
        fase2_spesa_personale_attuale_prevista=spesa_prevista,
        fase2_soglia_percentuale_dm17_03_2020=soglia,
        fase2_limite_sostenibile_dl34=limite_sostenibile,
        fase2_spazio_disponibile_dl34=fase2,
        fase3_margine_disponibile_l296_06=fase3,
        fase4_spazio_utilizzabile_lordo=fase4,
        fase5_incremento_netto_effettivo_fondo=fase5,
    )
