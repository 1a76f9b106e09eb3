from dataclasses import replace

import pytest

from fondo_accessorio.domain.models import AnnualData
from fondo_accessorio.domain.pnrr import calcola_incremento_pnrr3, condizioni_pnrr3_soddisfatte

VIRTUOSO = AnnualData(
    rispetto_equilibrio_bilancio_precedente=True,
    rispetto_debito_commerciale_precedente=True,
    approvazione_rendiconto_precedente=True,
    incidenza_salario_accessorio_ultimo_rendiconto=7.5,
    fondo_stabile_2016_pnrr=100_000,
)


def test_incremento_cinque_per_cento(normativa):
    assert condizioni_pnrr3_soddisfatte(VIRTUOSO, normativa) is True
    assert calcola_incremento_pnrr3(VIRTUOSO, normativa) == pytest.approx(5_000)


def test_incidenza_al_limite_ammessa(normativa):
    annual = replace(VIRTUOSO, incidenza_salario_accessorio_ultimo_rendiconto=8)
    assert calcola_incremento_pnrr3(annual, normativa) == pytest.approx(5_000)


@pytest.mark.parametrize(
    "override",
    [
        {"incidenza_salario_accessorio_ultimo_rendiconto": 9},
        {"incidenza_salario_accessorio_ultimo_rendiconto": None},
        {"approvazione_rendiconto_precedente": None},
        {"rispetto_equilibrio_bilancio_precedente": False},
        {"rispetto_debito_commerciale_precedente": False},
        {"fondo_stabile_2016_pnrr": 0},
        {"fondo_stabile_2016_pnrr": None},
    ],
)
def test_condizioni_non_soddisfatte(normativa, override):
    assert calcola_incremento_pnrr3(replace(VIRTUOSO, **override), normativa) is None
