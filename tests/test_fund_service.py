from dataclasses import replace

import pytest

from conftest import ESEMPIO_SCENARIO
from fondo_accessorio.config.scenario import load_scenario
from fondo_accessorio.domain.errors import FundCalculationError, NormativaNonDisponibileError
from fondo_accessorio.domain.distribuzione import calcola_maggiorazione
from fondo_accessorio.domain.models import FondoDipendenteData, FundInput, RisorsaVariabileDetail
from fondo_accessorio.domain.results import Gravita
from fondo_accessorio.services import fund_service
from fondo_accessorio.services.fund_service import applica_personale, esegui_calcolo, numero_dipendenti


@pytest.fixture
def esempio():
    return load_scenario(ESEMPIO_SCENARIO)


def test_senza_normativa_nessun_calcolo(esempio):
    with pytest.raises(NormativaNonDisponibileError, match="Impossibile calcolare"):
        esegui_calcolo(esempio, None)


def test_scenario_di_esempio(esempio, normativa):
    outcome = esegui_calcolo(esempio, normativa)

    assert outcome.has_errors is False
    assert outcome.simulatore.fase4_spazio_utilizzabile_lordo == pytest.approx(110_000)
    assert outcome.simulatore.fase5_incremento_netto_effettivo_fondo == pytest.approx(110_000 / 1.274)

    fund = outcome.fund
    assert fund.fondo_base_2016 == pytest.approx(250_000)
    assert fund.limite_art23c2_modificato == pytest.approx(342_400)
    assert fund.totale_risorse_soggette_al_limite == pytest.approx(247_250)
    assert fund.dettaglio_fondi.dipendente.stabile == pytest.approx(193_911.60)
    assert fund.dettaglio_fondi.dipendente.variabile == pytest.approx(9_300)
    assert fund.dettaglio_fondi.eq.totale == pytest.approx(48_900)
    assert fund.dettaglio_fondi.segretario.totale == pytest.approx(11_250)

    warnings = [c.id for c in outcome.checks if c.gravita is Gravita.WARNING]
    assert warnings == ["verifica_incremento_consistenza"]

    aggiornato = outcome.fund_input_aggiornato
    assert aggiornato.annual.simulatore_risultati is outcome.simulatore
    assert aggiornato.annual.calcolato_incremento_pnrr3 == pytest.approx(9_000)
    assert aggiornato.fondo_dipendente.st_incremento_decreto_pa == 20_000
    assert aggiornato.fondo_dipendente.st_riduzione_per_incremento_eq == 3_000


def test_personale_sostituisce_utilizzi_stabili(esempio, normativa):
    fi = applica_personale(esempio, normativa)
    assert fi.distribuzione.u_diff_progressioni_storiche == pytest.approx(1_300 + 1_240 + 950 * 184 / 365)
    assert fi.distribuzione.u_indennita_comparto == pytest.approx(500 + 480 + 400 * 184 / 365)
    assert esempio.distribuzione.u_diff_progressioni_storiche == 60_000

    outcome = esegui_calcolo(esempio, normativa)
    assert outcome.fund_input.distribuzione == fi.distribuzione


def test_senza_personale_utilizzi_invariati(esempio, normativa):
    fi = replace(esempio, personale=())
    assert applica_personale(fi, normativa) is fi


def test_incremento_decreto_pa_oltre_simulatore(esempio, normativa):
    fi = replace(
        esempio,
        fondo_dipendente=replace(esempio.fondo_dipendente, st_incremento_decreto_pa=200_000),
    )
    outcome = esegui_calcolo(fi, normativa)
    fase5 = outcome.simulatore.fase5_incremento_netto_effettivo_fondo

    ids = {c.id for c in outcome.checks}
    assert "coerenza_simulatore_decreto_pa" in ids
    assert outcome.fund_input_aggiornato.fondo_dipendente.st_incremento_decreto_pa == pytest.approx(fase5)


def test_errore_inatteso_incapsulato(monkeypatch, normativa):
    def _esplode(*args, **kwargs):
        raise ZeroDivisionError("division by zero")

    monkeypatch.setattr(fund_service, "calculate_fund_completely", _esplode)
    with pytest.raises(FundCalculationError, match="Errore nel calcolo"):
        esegui_calcolo(FundInput(fondo_dipendente=FondoDipendenteData()), normativa)


def test_numero_dipendenti(esempio):
    assert numero_dipendenti(esempio) == 3
    assert numero_dipendenti(replace(esempio, personale=())) == 44


def test_budget_performance_al_netto_della_maggiorazione(esempio, normativa):
    assert esempio.distribuzione.p_maggiorazione_performance_individuale is None
    b = esegui_calcolo(esempio, normativa).budget_performance
    m = calcola_maggiorazione(b.disponibile_contrattazione, 3, esempio.distribuzione)
    assert m.totale > 0
    assert b.maggiorazione == pytest.approx(m.totale)

    manuale = replace(
        esempio,
        distribuzione=replace(
            esempio.distribuzione,
            p_maggiorazione_performance_individuale=RisorsaVariabileDetail(stanziate=0),
        ),
    )
    b0 = esegui_calcolo(manuale, normativa).budget_performance
    assert b0.budget_performance - b.budget_performance == pytest.approx(m.totale)
