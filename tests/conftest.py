from pathlib import Path

import pytest

from fondo_accessorio.config.normativa import clear_normativa_cache, load_normativa
from fondo_accessorio.domain.models import SimulatoreResult

REPO_ROOT = Path(__file__).resolve().parents[1]
NORMATIVA_YML = REPO_ROOT / "data" / "normativa.yml"
ESEMPIO_SCENARIO = REPO_ROOT / "scenari" / "esempio_comune.yml"


@pytest.fixture
def normativa():
    clear_normativa_cache()
    return load_normativa(NORMATIVA_YML)


def make_simulatore(fase5: float = 0.0, fase4: float = None) -> SimulatoreResult:
    fase4 = fase5 if fase4 is None else fase4
    return SimulatoreResult(
        fase1_obiettivo_48=0.0,
        fase1_fondo_attuale_complessivo=0.0,
        fase1_incremento_potenziale_lordo=fase4,
        fase2_spesa_personale_attuale_prevista=0.0,
        fase2_soglia_percentuale_dm17_03_2020=0.0,
        fase2_limite_sostenibile_dl34=0.0,
        fase2_spazio_disponibile_dl34=fase4,
        fase3_margine_disponibile_l296_06=fase4,
        fase4_spazio_utilizzabile_lordo=fase4,
        fase5_incremento_netto_effettivo_fondo=fase5,
    )
