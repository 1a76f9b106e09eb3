from datetime import date

import pytest

from fondo_accessorio.domain.models import AreaQualifica, DipendenteInServizio, DistribuzioneRisorseData
from fondo_accessorio.domain.personale import (
    AssorbimentoPersonale,
    apply_personale_to_distribuzione,
    calcola_assorbimento,
    service_ratio,
)


@pytest.mark.parametrize(
    "dip, anno, atteso",
    [
        (DipendenteInServizio(), 2025, 1.0),
        (DipendenteInServizio(full_year=False), 2025, 0.0),
        (DipendenteInServizio(full_year=False, data_assunzione=date(2025, 7, 1)), 2025, 184 / 365),
        (DipendenteInServizio(full_year=False, data_cessazione=date(2025, 1, 31)), 2025, 31 / 365),
        (DipendenteInServizio(full_year=False, data_assunzione=date(2010, 3, 1)), 2024, 1.0),
        (DipendenteInServizio(full_year=False, data_assunzione=date(2024, 12, 31)), 2024, 1 / 366),
        (DipendenteInServizio(full_year=False, data_assunzione=date(2026, 1, 10)), 2025, 0.0),
        (
            DipendenteInServizio(
                full_year=False,
                data_assunzione=date(2025, 6, 1),
                data_cessazione=date(2025, 3, 1),
            ),
            2025,
            0.0,
        ),
    ],
)
def test_service_ratio(dip, anno, atteso):
    assert service_ratio(dip, anno) == pytest.approx(atteso)


def test_assorbimento(normativa):
    personale = [
        DipendenteInServizio(matricola="1", area=AreaQualifica.ISTRUTTORE, livello_peo="C3"),
        DipendenteInServizio(
            matricola="2", area=AreaQualifica.FUNZIONARIO_EQ, livello_peo="D2", part_time_percentage=80
        ),
    ]
    a = calcola_assorbimento(personale, 2025, normativa)
    assert a.progressioni_storiche == pytest.approx(1_300 + 1_240)
    assert a.indennita_comparto == pytest.approx(500 + 480)
    assert a.numero_dipendenti == 2


def test_assorbimento_livello_sconosciuto_solo_indennita(normativa, caplog):
    dip = DipendenteInServizio(matricola="9", area=AreaQualifica.ISTRUTTORE, livello_peo="Z9")
    a = calcola_assorbimento([dip], 2025, normativa)
    assert a.progressioni_storiche == 0
    assert a.indennita_comparto == pytest.approx(500)
    assert "Z9" in caplog.text


def test_assorbimento_senza_area_conta_ma_non_assorbe(normativa):
    a = calcola_assorbimento([DipendenteInServizio(matricola="x")], 2025, normativa)
    assert a == AssorbimentoPersonale(progressioni_storiche=0.0, indennita_comparto=0.0, numero_dipendenti=1)


def test_assorbimento_proporzionale_al_servizio(normativa):
    dip = DipendenteInServizio(
        area=AreaQualifica.OPERATORE_ESPERTO,
        livello_peo="B4",
        full_year=False,
        data_assunzione=date(2025, 7, 1),
    )
    a = calcola_assorbimento([dip], 2025, normativa)
    assert a.progressioni_storiche == pytest.approx(950 * 184 / 365)
    assert a.indennita_comparto == pytest.approx(400 * 184 / 365)


def test_apply_personale_non_modifica_originale():
    originale = DistribuzioneRisorseData(u_diff_progressioni_storiche=1, u_indennita_comparto=2)
    nuovo = apply_personale_to_distribuzione(
        originale, AssorbimentoPersonale(progressioni_storiche=100, indennita_comparto=50, numero_dipendenti=1)
    )
    assert (nuovo.u_diff_progressioni_storiche, nuovo.u_indennita_comparto) == (100, 50)
    assert (originale.u_diff_progressioni_storiche, originale.u_indennita_comparto) == (1, 2)


@pytest.mark.parametrize("pt", [150, -10])
def test_assorbimento_part_time_fuori_range_come_full_time(normativa, caplog, pt):
    dip = DipendenteInServizio(
        matricola="7", area=AreaQualifica.ISTRUTTORE, livello_peo="C3", part_time_percentage=pt
    )
    a = calcola_assorbimento([dip], 2025, normativa)
    assert a.progressioni_storiche == pytest.approx(1_300)
    assert a.indennita_comparto == pytest.approx(500)
    assert "part_time_percentage" in caplog.text
