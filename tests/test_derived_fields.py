from dataclasses import replace

import pytest

from conftest import make_simulatore
from fondo_accessorio.domain.models import AnnualData, FondoDipendenteData, FondoEQData, FundInput
from fondo_accessorio.services.derived_fields import apply_derived_fields, clamp_incremento_decreto_pa


@pytest.mark.parametrize(
    "valore, fase5, atteso",
    [
        (20_000, 10_000, 10_000),
        (5_000, 10_000, 5_000),
        (None, 10_000, 0),
        (-300, 10_000, 0),
        (20_000, 0.0, 0),
    ],
)
def test_clamp_incremento_decreto_pa(valore, fase5, atteso):
    assert clamp_incremento_decreto_pa(valore, make_simulatore(fase5)) == atteso


def test_clamp_senza_simulatore():
    assert clamp_incremento_decreto_pa(20_000, None) == 0


def test_apply_derived_fields_nuovo_snapshot():
    sim = make_simulatore(10_000)
    fi = FundInput(
        fondo_dipendente=FondoDipendenteData(st_incremento_decreto_pa=20_000, st_riduzione_per_incremento_eq=1),
        fondo_eq=FondoEQData(ris_incremento_con_riduzione_fondo_dipendenti=3_000),
    )
    nuovo = apply_derived_fields(fi, sim)

    assert nuovo.fondo_dipendente.st_incremento_decreto_pa == 10_000
    assert nuovo.fondo_dipendente.st_riduzione_per_incremento_eq == 3_000
    assert nuovo.annual.simulatore_risultati is sim
    # l'originale resta invariato
    assert fi.fondo_dipendente.st_incremento_decreto_pa == 20_000
    assert fi.annual.simulatore_risultati is None


def test_trasferimento_eq_assente_azzera_riduzione():
    fi = FundInput(fondo_dipendente=FondoDipendenteData(st_riduzione_per_incremento_eq=500))
    assert apply_derived_fields(fi, None).fondo_dipendente.st_riduzione_per_incremento_eq == 0


ANNUAL_PNRR = AnnualData(
    rispetto_equilibrio_bilancio_precedente=True,
    rispetto_debito_commerciale_precedente=True,
    approvazione_rendiconto_precedente=True,
    incidenza_salario_accessorio_ultimo_rendiconto=5,
    fondo_stabile_2016_pnrr=100_000,
    applica_incremento_pnrr3=True,
)


def test_pnrr3_scritto_nel_fondo(normativa):
    nuovo = apply_derived_fields(FundInput(annual=ANNUAL_PNRR), None, normativa)
    assert nuovo.annual.calcolato_incremento_pnrr3 == pytest.approx(5_000)
    assert nuovo.fondo_dipendente.vn_dl13_art8c3_incremento_pnrr_max5_stabile_2016 == pytest.approx(5_000)


def test_pnrr3_azzerato_per_ente_dissestato(normativa):
    fi = FundInput(annual=replace(ANNUAL_PNRR, is_ente_dissestato=True))
    nuovo = apply_derived_fields(fi, None, normativa)
    assert nuovo.annual.calcolato_incremento_pnrr3 == pytest.approx(5_000)
    assert nuovo.fondo_dipendente.vn_dl13_art8c3_incremento_pnrr_max5_stabile_2016 == 0


def test_pnrr3_non_applicato_lascia_il_valore_inserito(normativa):
    fi = FundInput(
        annual=replace(ANNUAL_PNRR, applica_incremento_pnrr3=False),
        fondo_dipendente=FondoDipendenteData(vn_dl13_art8c3_incremento_pnrr_max5_stabile_2016=1_234),
    )
    nuovo = apply_derived_fields(fi, None, normativa)
    assert nuovo.fondo_dipendente.vn_dl13_art8c3_incremento_pnrr_max5_stabile_2016 == 1_234
